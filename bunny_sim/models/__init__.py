"""Domain models for bunny_sim."""

from .allele import Allele, Gene, FUR, EARS, TEETH, GENES
from .gene_pool import GenePool
from .gene_pair import GenePair
from .punnett_square import PunnettSquare, Cell
from .genotype import Genotype, Phenotype, BunnyVariety
from .bunny import Bunny, CauseOfDeath
from .bunny_counts import BunnyCounts
from .bunny_collection import BunnyCollection
from .selection import Environment, SelectionAgent, Wolves, ToughFood, LimitedFood
from .generation import Generation, GenerationStats

__all__ = [
    'Allele', 'Gene', 'FUR', 'EARS', 'TEETH', 'GENES',
    'GenePool',
    'GenePair',
    'PunnettSquare', 'Cell',
    'Genotype', 'Phenotype', 'BunnyVariety',
    'Bunny', 'CauseOfDeath',
    'BunnyCounts',
    'BunnyCollection',
    'Environment', 'SelectionAgent', 'Wolves', 'ToughFood', 'LimitedFood',
    'Generation', 'GenerationStats',
]
