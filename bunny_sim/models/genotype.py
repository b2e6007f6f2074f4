"""Genotype and Phenotype models for bunny_sim."""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, TYPE_CHECKING

from .allele import Allele, Gene, FUR, EARS, TEETH, GENES
from .gene_pair import GenePair

if TYPE_CHECKING:
    from .gene_pool import GenePool
    from .punnett_square import Cell


@dataclass(frozen=True)
class Phenotype:
    """The expressed allele for each gene."""
    fur: Allele
    ears: Allele
    teeth: Allele
    
    @property
    def key(self) -> Tuple[Allele, Allele, Allele]:
        return (self.fur, self.ears, self.teeth)
    
    def get_allele(self, gene: Gene) -> Allele:
        if gene is FUR:
            return self.fur
        if gene is EARS:
            return self.ears
        if gene is TEETH:
            return self.teeth
        raise ValueError(f"Unknown gene: {gene!r}")
    
    def has_allele(self, allele: Allele) -> bool:
        return allele is self.fur or allele is self.ears or allele is self.teeth


@dataclass(frozen=True)
class BunnyVariety:
    """A number of generation-zero bunnies that share a genotype, from the initial population descriptor."""
    count: int
    genotype_string: str  # e.g. 'FfeeTT', '' for all-normal
    fur_pair: GenePair
    ears_pair: GenePair
    teeth_pair: GenePair
    
    def __post_init__(self):
        if self.count < 1:
            raise ValueError(f"count must be a positive integer, got {self.count}")


class Genotype:
    """The gene pairs that determine a bunny's traits."""
    
    def __init__(
        self,
        fur_pair: GenePair,
        ears_pair: GenePair,
        teeth_pair: GenePair,
        mutation: Optional[Allele] = None
    ):
        """
        Initialize a genotype.
        
        Args:
            fur_pair: Gene pair for fur
            ears_pair: Gene pair for ears
            teeth_pair: Gene pair for teeth
            mutation: Mutant allele this bunny received by mutation (not by inheritance), if any
        """
        for pair, gene in ((fur_pair, FUR), (ears_pair, EARS), (teeth_pair, TEETH)):
            if pair.gene is not gene:
                raise ValueError(f"Expected a gene pair for {gene!r}, got one for {pair.gene!r}")
        if mutation is not None and mutation not in (FUR.mutant_allele, EARS.mutant_allele, TEETH.mutant_allele):
            raise ValueError(f"mutation must be a mutant allele, got {mutation!r}")
        
        self.fur_pair = fur_pair
        self.ears_pair = ears_pair
        self.teeth_pair = teeth_pair
        self.mutation = mutation
    
    @classmethod
    def create_default(cls) -> 'Genotype':
        """Generation-zero genotype: homozygous for every normal allele."""
        return cls(*(GenePair.homozygous(gene, gene.normal_allele) for gene in GENES))
    
    @classmethod
    def from_variety(cls, variety: BunnyVariety) -> 'Genotype':
        """Generation-zero genotype described by the initial population configuration."""
        return cls(variety.fur_pair, variety.ears_pair, variety.teeth_pair)
    
    @classmethod
    def from_cells(
        cls,
        fur_cell: 'Cell',
        ears_cell: 'Cell',
        teeth_cell: 'Cell',
        mutate_genes: Iterable[Gene] = ()
    ) -> 'Genotype':
        """
        Inherited genotype, one Punnett cell per gene.
        
        For a gene that is mutated, the allele inherited from the father is
        replaced by the gene's mutant allele.
        
        Args:
            fur_cell: Cell from the fur Punnett square
            ears_cell: Cell from the ears Punnett square
            teeth_cell: Cell from the teeth Punnett square
            mutate_genes: Genes to mutate, at most one
            
        Raises:
            ValueError: If more than one gene is to be mutated
        """
        mutate_genes = list(mutate_genes)
        if len(mutate_genes) > 1:
            raise ValueError(f"A bunny can receive at most one mutation, got {mutate_genes}")
        
        pairs = []
        mutation = None
        for gene, cell in zip(GENES, (fur_cell, ears_cell, teeth_cell)):
            father_allele = cell.father_allele
            if gene in mutate_genes:
                father_allele = gene.mutant_allele
                mutation = gene.mutant_allele
            pairs.append(GenePair(gene, father_allele, cell.mother_allele))
        
        return cls(*pairs, mutation=mutation)
    
    @property
    def gene_pairs(self) -> Tuple[GenePair, GenePair, GenePair]:
        return (self.fur_pair, self.ears_pair, self.teeth_pair)
    
    def get_gene_pair(self, gene: Gene) -> GenePair:
        for pair in self.gene_pairs:
            if pair.gene is gene:
                return pair
        raise ValueError(f"Unknown gene: {gene!r}")
    
    def has_allele(self, allele: Allele) -> bool:
        return any(pair.has_allele(allele) for pair in self.gene_pairs)
    
    def get_phenotype(self, gene_pool: 'GenePool') -> Phenotype:
        """Expressed traits, given the gene pool's current dominance."""
        fur, ears, teeth = (
            pair.get_expressed_allele(gene_pool.get_dominant_allele(pair.gene))
            for pair in self.gene_pairs
        )
        return Phenotype(fur=fur, ears=ears, teeth=teeth)
    
    def abbreviation(self, gene_pool: 'GenePool') -> str:
        """
        Abbreviation for genes that have a mutation, e.g. 'FfTT'.
        Genes without a mutation are omitted.
        """
        return ''.join(
            pair.abbreviation(gene_pool.get_dominant_allele(pair.gene))
            for pair in self.gene_pairs
            if gene_pool.has_mutation(pair.gene)
        )
    
    def __repr__(self) -> str:
        pairs = ', '.join(f"{p.father_allele.name}/{p.mother_allele.name}" for p in self.gene_pairs)
        return f"Genotype({pairs})"
