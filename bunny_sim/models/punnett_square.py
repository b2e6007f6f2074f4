"""PunnettSquare model: the genetic cross of two gene pairs for one gene."""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from .allele import Allele
from .gene_pair import GenePair


@dataclass(frozen=True)
class Cell:
    """One outcome of a cross: the allele contributed by each parent."""
    father_allele: Allele
    mother_allele: Allele
    
    def is_homozygous_for(self, allele: Allele) -> bool:
        return self.father_allele is allele and self.mother_allele is allele
    
    def has_allele(self, allele: Allele) -> bool:
        return self.father_allele is allele or self.mother_allele is allele


class PunnettSquare:
    """
    The 4 equally likely combinations of a father's and a mother's alleles for one gene.
    
    The order of the alleles within each parent's pair is randomized once, when the
    square is built, so that cell i is a uniformly random outcome and the 4 cells
    of a litter cover every outcome exactly once.
    """
    
    SIZE = 4
    
    def __init__(self, father_pair: GenePair, mother_pair: GenePair, rng: np.random.Generator):
        """
        Build the square.
        
        Args:
            father_pair: Father's gene pair
            mother_pair: Mother's gene pair, for the same gene
            rng: NumPy random number generator
            
        Raises:
            ValueError: If the gene pairs are for different genes
        """
        if father_pair.gene is not mother_pair.gene:
            raise ValueError(f"Cannot cross {father_pair.gene!r} with {mother_pair.gene!r}")
        
        self.gene = father_pair.gene
        self._rng = rng
        
        f1, f2 = self._random_order(father_pair, rng)
        m1, m2 = self._random_order(mother_pair, rng)
        self._cells: List[Cell] = [
            Cell(f1, m1),
            Cell(f1, m2),
            Cell(f2, m1),
            Cell(f2, m2),
        ]
    
    @staticmethod
    def _random_order(pair: GenePair, rng: np.random.Generator) -> Tuple[Allele, Allele]:
        if rng.random() < 0.5:
            return pair.father_allele, pair.mother_allele
        return pair.mother_allele, pair.father_allele
    
    def __len__(self) -> int:
        return len(self._cells)
    
    @property
    def cells(self) -> List[Cell]:
        return list(self._cells)
    
    def get_cell(self, index: int) -> Cell:
        if not (0 <= index < len(self._cells)):
            raise IndexError(f"Punnett square cell index out of range: {index}")
        return self._cells[index]
    
    def get_random_cell(self) -> Cell:
        return self._cells[int(self._rng.integers(0, len(self._cells)))]
    
    def get_additional_cell(self, mutant_allele: Allele, dominant_allele: Optional[Allele]) -> Cell:
        """
        Choose the cell for the bonus offspring of an eager mating.
        
        Prefers a cell that is homozygous for the mutant allele, then any cell that
        contains the dominant allele, then a random cell. Always returns a cell.
        
        Args:
            mutant_allele: The recessive mutant's mutant allele
            dominant_allele: This gene's dominant allele, or None if it has no mutation
        """
        for cell in self._cells:
            if cell.is_homozygous_for(mutant_allele):
                return cell
        
        if dominant_allele is not None:
            for cell in self._cells:
                if cell.has_allele(dominant_allele):
                    return cell
        
        return self.get_random_cell()
