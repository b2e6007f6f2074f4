"""Bunny model for bunny_sim."""

from enum import Enum
from typing import Optional, Tuple, TYPE_CHECKING

import numpy as np

from ..utils import next_in_range

if TYPE_CHECKING:
    from .genotype import Genotype, Phenotype
    from .gene_pool import GenePool


class CauseOfDeath(Enum):
    """Why a bunny died."""
    OLD_AGE = "OLD_AGE"
    WOLF = "WOLF"
    TOUGH_FOOD = "TOUGH_FOOD"
    STARVATION = "STARVATION"


class Bunny:
    """An individual bunny with genotype, lineage, and lifecycle attributes."""
    
    def __init__(
        self,
        bunny_id: int,
        genotype: 'Genotype',
        gene_pool: 'GenePool',
        father: Optional['Bunny'] = None,
        mother: Optional['Bunny'] = None,
        generation: int = 0,
        rest_time: float = 0.0
    ):
        """
        Initialize a bunny.
        
        Args:
            bunny_id: Unique ID, assigned by BunnyCollection
            genotype: Genetic information that determines the bunny's traits
            gene_pool: Gene pool used to express the genotype
            father: Father (None for generation zero)
            mother: Mother (None for generation zero)
            generation: Generation in which the bunny was born
            rest_time: Seconds to rest between hops
        """
        if (father is None) != (mother is None):
            raise ValueError("A bunny must have both parents or neither")
        if father is not None and father is mother:
            raise ValueError("A bunny cannot have the same father and mother")
        if generation < 0:
            raise ValueError(f"generation must be non-negative, got {generation}")
        if (father is None) != (generation == 0):
            raise ValueError("Only generation-zero bunnies have no parents")
        
        self.id = bunny_id
        self.genotype = genotype
        self.gene_pool = gene_pool
        self.father = father
        self.mother = mother
        self.generation = generation
        self.age = 0
        self.is_alive = True
        self.cause_of_death: Optional[CauseOfDeath] = None
        self.rest_time = rest_time
        self.rest_remaining = rest_time
    
    @property
    def phenotype(self) -> 'Phenotype':
        return self.genotype.get_phenotype(self.gene_pool)
    
    def is_original_mutant(self) -> bool:
        """Whether this bunny received a mutation at birth, rather than inheriting it."""
        return self.genotype.mutation is not None
    
    def die(self, cause: CauseOfDeath) -> None:
        """
        Transition from alive to dead. A bunny dies exactly once.
        
        Raises:
            ValueError: If the bunny is already dead
        """
        if not self.is_alive:
            raise ValueError(f"{self} is already dead")
        self.is_alive = False
        self.cause_of_death = cause
        self.rest_remaining = 0.0
    
    def is_resting(self) -> bool:
        return self.is_alive and self.rest_remaining > 0
    
    def step(self, dt: float, rest_range: Tuple[float, float], rng: np.random.Generator) -> bool:
        """
        Count down the rest timer.
        
        Args:
            dt: Time step, in seconds
            rest_range: Range for the next rest time, when the bunny hops
            rng: NumPy random number generator
            
        Returns:
            True if the bunny finished resting and hops during this step
        """
        if dt < 0:
            raise ValueError(f"dt must be non-negative, got {dt}")
        if not self.is_alive:
            return False
        
        self.rest_remaining -= dt
        if self.rest_remaining > 0:
            return False
        
        self.rest_time = next_in_range(rest_range, rng)
        self.rest_remaining = self.rest_time
        return True
    
    def __repr__(self) -> str:
        state = 'alive' if self.is_alive else f'dead ({self.cause_of_death.value})'
        return f"Bunny(id={self.id}, generation={self.generation}, age={self.age}, {state})"
