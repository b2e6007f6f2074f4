"""GenePair model for bunny_sim."""

from dataclasses import dataclass
from typing import Optional

from .allele import Allele, Gene


@dataclass(frozen=True)
class GenePair:
    """The two alleles, inherited from father and mother, that a bunny carries for one gene."""
    gene: Gene
    father_allele: Allele
    mother_allele: Allele
    
    def __post_init__(self):
        """Validate that both alleles belong to the gene."""
        if not self.gene.has_allele(self.father_allele):
            raise ValueError(f"{self.father_allele!r} does not belong to {self.gene!r}")
        if not self.gene.has_allele(self.mother_allele):
            raise ValueError(f"{self.mother_allele!r} does not belong to {self.gene!r}")
    
    @classmethod
    def homozygous(cls, gene: Gene, allele: Allele) -> 'GenePair':
        return cls(gene, allele, allele)
    
    def is_homozygous(self) -> bool:
        return self.father_allele is self.mother_allele
    
    def has_allele(self, allele: Allele) -> bool:
        return self.father_allele is allele or self.mother_allele is allele
    
    def get_expressed_allele(self, dominant_allele: Optional[Allele]) -> Allele:
        """
        Get the allele that this pair expresses in the phenotype.
        
        Args:
            dominant_allele: The gene's current dominant allele, None if no mutation exists yet
            
        Returns:
            The shared allele if homozygous, otherwise the dominant allele,
            otherwise the gene's normal allele
        """
        if self.is_homozygous():
            return self.father_allele
        if dominant_allele is not None and self.has_allele(dominant_allele):
            return dominant_allele
        return self.gene.normal_allele
    
    def abbreviation(self, dominant_allele: Optional[Allele]) -> str:
        """Abbreviation of the pair, e.g. 'Ff'. Both alleles are upper-case until dominance is known."""
        return self._abbreviate(self.father_allele, dominant_allele) + \
            self._abbreviate(self.mother_allele, dominant_allele)
    
    def _abbreviate(self, allele: Allele, dominant_allele: Optional[Allele]) -> str:
        if dominant_allele is None or allele is dominant_allele:
            return self.gene.dominant_abbreviation
        return self.gene.recessive_abbreviation
