"""Generation model for coordinating generation cycles."""

from dataclasses import dataclass, field
from typing import Dict, List, TYPE_CHECKING

from .bunny import CauseOfDeath

if TYPE_CHECKING:
    import numpy as np
    from .bunny_collection import BunnyCollection
    from .selection import SelectionAgent, Environment


@dataclass
class GenerationStats:
    """Statistics for a single generation."""
    generation: int
    live_count: int
    dead_count: int
    births: int
    deaths: Dict[CauseOfDeath, int] = field(default_factory=dict)
    pruned: int = 0
    allele_counts: Dict[str, int] = field(default_factory=dict)  # allele key -> live bunnies expressing it

    @property
    def total_deaths(self) -> int:
        return sum(self.deaths.values())


class Generation:
    """Represents the current generation of the simulation."""

    def __init__(self, generation_number: int = 0):
        """
        Initialize generation.

        Args:
            generation_number: Generation number (0 = initial population)
        """
        self.generation_number = generation_number

    def apply_selection(
        self,
        collection: 'BunnyCollection',
        agents: List['SelectionAgent'],
        environment: 'Environment',
        rng: 'np.random.Generator'
    ) -> Dict[CauseOfDeath, int]:
        """
        Let each enabled selection agent kill bunnies.

        Each agent sees the candidates that survived the agents before it.

        Returns:
            Number of bunnies killed, by cause
        """
        deaths: Dict[CauseOfDeath, int] = {}
        for agent in agents:
            if not agent.enabled:
                continue
            verdicts = agent.select(collection.get_selection_candidates(), environment, rng)
            for bunny, cause in verdicts:
                collection.kill_bunny(bunny, cause)
                deaths[cause] = deaths.get(cause, 0) + 1
        collection.assert_valid_counts()
        return deaths

    def execute_cycle(
        self,
        collection: 'BunnyCollection',
        agents: List['SelectionAgent'],
        environment: 'Environment',
        rng: 'np.random.Generator'
    ) -> GenerationStats:
        """
        Execute one complete generation cycle.

        1. environmental selection during the current generation
        2. aging, then mating of the survivors
        3. advance to the next generation and prune dead bunnies

        Args:
            collection: The bunnies
            agents: Selection agents, applied in order
            environment: Current environment
            rng: Random number generator

        Returns:
            GenerationStats for the new generation
        """
        deaths = self.apply_selection(collection, agents, environment, rng)

        died_of_old_age = collection.age_bunnies()
        if died_of_old_age:
            deaths[CauseOfDeath.OLD_AGE] = deaths.get(CauseOfDeath.OLD_AGE, 0) + died_of_old_age

        births = collection.mate_bunnies(self.generation_number)

        self.advance()
        pruned = collection.prune_dead_bunnies(self.generation_number)

        return GenerationStats(
            generation=self.generation_number,
            live_count=collection.get_number_of_live_bunnies(),
            dead_count=collection.get_number_of_dead_bunnies(),
            births=births,
            deaths=deaths,
            pruned=pruned,
            allele_counts=collection.get_live_bunny_counts().as_dict()
        )

    def advance(self) -> int:
        """
        Advance to next generation.

        Returns:
            New generation number
        """
        self.generation_number += 1
        return self.generation_number
