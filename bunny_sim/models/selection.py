"""Selection agents: environmental factors that kill bunnies each generation."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Tuple, TYPE_CHECKING

import numpy as np

from ..constants import (
    WOLVES_PERCENT_TO_EAT_RANGE,
    TOUGH_FOOD_PERCENT_TO_STARVE_RANGE,
    LIMITED_FOOD_PERCENT_TO_STARVE_RANGE,
    WOLVES_MATCHING_FUR_FACTOR,
    TOUGH_FOOD_LONG_TEETH_FACTOR,
    LIMITED_FOOD_LONG_TEETH_FACTOR,
)
from ..utils import next_in_range, round_symmetric
from .allele import WHITE_FUR, BROWN_FUR, LONG_TEETH
from .bunny import CauseOfDeath

if TYPE_CHECKING:
    from .bunny import Bunny

Verdict = Tuple['Bunny', CauseOfDeath]


class Environment(Enum):
    """Where the bunnies live. Determines which fur color blends in."""
    EQUATOR = "equator"
    ARCTIC = "arctic"


def _take_fraction(bunnies: List['Bunny'], fraction: float) -> List['Bunny']:
    """The first round(fraction * n) bunnies. Callers pass bunnies in random order."""
    count = min(len(bunnies), round_symmetric(fraction * len(bunnies)))
    return bunnies[:count]


class SelectionAgent(ABC):
    """Abstract base class for environmental factors."""

    cause_of_death: CauseOfDeath

    def __init__(self, enabled: bool = False):
        self.enabled = enabled
        self._initial_enabled = enabled

    def reset(self) -> None:
        self.enabled = self._initial_enabled

    @abstractmethod
    def select(
        self,
        bunnies: List['Bunny'],
        environment: Environment,
        rng: np.random.Generator
    ) -> List[Verdict]:
        """
        Choose the bunnies that die from this factor.

        Args:
            bunnies: Candidate bunnies, in random order
            environment: Current environment
            rng: Seeded random number generator

        Returns:
            List of (bunny, cause of death) verdicts, empty if the agent is disabled
        """
        pass


class Wolves(SelectionAgent):
    """Wolves eat bunnies, mostly those whose fur stands out against the environment."""

    cause_of_death = CauseOfDeath.WOLF

    def select(self, bunnies, environment, rng):
        """Eat more of the bunnies whose fur does not match the environment."""
        if not self.enabled or not bunnies:
            return []

        # White fur blends in with the arctic, brown fur with the equator
        matching_fur = WHITE_FUR if environment == Environment.ARCTIC else BROWN_FUR
        matching = [b for b in bunnies if b.phenotype.fur is matching_fur]
        mismatched = [b for b in bunnies if b.phenotype.fur is not matching_fur]

        percent_to_eat = next_in_range(WOLVES_PERCENT_TO_EAT_RANGE, rng)
        eaten = _take_fraction(mismatched, percent_to_eat) + \
            _take_fraction(matching, percent_to_eat * WOLVES_MATCHING_FUR_FACTOR)
        return [(bunny, self.cause_of_death) for bunny in eaten]


class ToughFood(SelectionAgent):
    """Tough food starves bunnies, mostly those with short teeth."""

    cause_of_death = CauseOfDeath.TOUGH_FOOD

    def select(self, bunnies, environment, rng):
        if not self.enabled or not bunnies:
            return []

        long_teeth = [b for b in bunnies if b.phenotype.teeth is LONG_TEETH]
        short_teeth = [b for b in bunnies if b.phenotype.teeth is not LONG_TEETH]

        percent_to_starve = next_in_range(TOUGH_FOOD_PERCENT_TO_STARVE_RANGE, rng)
        starved = _take_fraction(short_teeth, percent_to_starve) + \
            _take_fraction(long_teeth, percent_to_starve * TOUGH_FOOD_LONG_TEETH_FACTOR)
        return [(bunny, self.cause_of_death) for bunny in starved]


class LimitedFood(SelectionAgent):
    """Limited food starves some of every kind of bunny. Long teeth help a little."""

    cause_of_death = CauseOfDeath.STARVATION

    def select(self, bunnies, environment, rng):
        if not self.enabled or not bunnies:
            return []

        long_teeth = [b for b in bunnies if b.phenotype.teeth is LONG_TEETH]
        short_teeth = [b for b in bunnies if b.phenotype.teeth is not LONG_TEETH]

        percent_to_starve = next_in_range(LIMITED_FOOD_PERCENT_TO_STARVE_RANGE, rng)
        starved = _take_fraction(short_teeth, percent_to_starve) + \
            _take_fraction(long_teeth, percent_to_starve * LIMITED_FOOD_LONG_TEETH_FACTOR)
        return [(bunny, self.cause_of_death) for bunny in starved]
