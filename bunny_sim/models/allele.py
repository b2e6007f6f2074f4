"""Allele and Gene catalog for bunny_sim.

There is exactly one instance of each Allele and each Gene for the lifetime of
the process. They are compared by identity, never by name. Which allele of a
gene is dominant is simulation state and lives in GenePool, not here.
"""

from typing import Tuple


class Allele:
    """A variant form of a gene, e.g. 'White Fur'. Also names the phenotype it expresses."""
    
    __slots__ = ('name', 'key')
    
    def __init__(self, name: str, key: str):
        self.name = name
        self.key = key  # e.g. 'whiteFur', used in config and stats
    
    def __repr__(self) -> str:
        return f"Allele({self.name!r})"


class Gene:
    """A trait slot with one normal and one mutant allele."""
    
    __slots__ = ('name', 'normal_allele', 'mutant_allele',
                 'dominant_abbreviation', 'recessive_abbreviation', 'color')
    
    def __init__(
        self,
        name: str,
        normal_allele: Allele,
        mutant_allele: Allele,
        dominant_abbreviation: str,
        recessive_abbreviation: str,
        color: str
    ):
        """
        Initialize a gene.
        
        Args:
            name: Gene name, e.g. 'Fur'
            normal_allele: Allele carried by generation-zero bunnies
            mutant_allele: Allele introduced by mutation
            dominant_abbreviation: Abbreviation for the dominant allele, e.g. 'F'
            recessive_abbreviation: Abbreviation for the recessive allele, e.g. 'f'
            color: Color used to draw this gene's data
        """
        if normal_allele is mutant_allele:
            raise ValueError(f"{name}: normal and mutant alleles must differ")
        self.name = name
        self.normal_allele = normal_allele
        self.mutant_allele = mutant_allele
        self.dominant_abbreviation = dominant_abbreviation
        self.recessive_abbreviation = recessive_abbreviation
        self.color = color
    
    @property
    def alleles(self) -> Tuple[Allele, Allele]:
        return (self.normal_allele, self.mutant_allele)
    
    def has_allele(self, allele: Allele) -> bool:
        return allele is self.normal_allele or allele is self.mutant_allele
    
    def __repr__(self) -> str:
        return f"Gene({self.name!r})"


WHITE_FUR = Allele('White Fur', 'whiteFur')
BROWN_FUR = Allele('Brown Fur', 'brownFur')
STRAIGHT_EARS = Allele('Straight Ears', 'straightEars')
FLOPPY_EARS = Allele('Floppy Ears', 'floppyEars')
SHORT_TEETH = Allele('Short Teeth', 'shortTeeth')
LONG_TEETH = Allele('Long Teeth', 'longTeeth')

ALLELES: Tuple[Allele, ...] = (WHITE_FUR, BROWN_FUR, STRAIGHT_EARS, FLOPPY_EARS, SHORT_TEETH, LONG_TEETH)

FUR = Gene('Fur', WHITE_FUR, BROWN_FUR, 'F', 'f', 'rgb(150,110,80)')
EARS = Gene('Ears', STRAIGHT_EARS, FLOPPY_EARS, 'E', 'e', 'rgb(140,50,160)')
TEETH = Gene('Teeth', SHORT_TEETH, LONG_TEETH, 'T', 't', 'rgb(60,150,60)')

# Fixed order used wherever the genes are iterated, including mutation assignment
GENES: Tuple[Gene, ...] = (FUR, EARS, TEETH)

def gene_for_allele(allele: Allele) -> Gene:
    """
    Get the gene that owns an allele.
    
    Raises:
        ValueError: If the allele is not in the catalog
    """
    for gene in GENES:
        if gene.has_allele(allele):
            return gene
    raise ValueError(f"Unknown allele: {allele!r}")
