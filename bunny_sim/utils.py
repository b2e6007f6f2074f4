"""Utility functions for bunny_sim."""

import math
from typing import List, Sequence, Tuple, TypeVar

import numpy as np

T = TypeVar('T')


def round_symmetric(value: float) -> int:
    """
    Round to the nearest integer, with halves rounded away from zero.
    
    Python's round() uses banker's rounding, so round(2.5) == 2. Mutation
    counts need 2.5 -> 3.
    
    Args:
        value: Number to round
        
    Returns:
        Rounded integer
    """
    rounded = math.floor(abs(value) + 0.5)
    return int(rounded if value >= 0 else -rounded)


def shuffled(items: Sequence[T], rng: np.random.Generator) -> List[T]:
    """
    Return a uniformly shuffled copy of a sequence.
    
    Args:
        items: Sequence to shuffle (not modified)
        rng: NumPy random number generator
        
    Returns:
        New list with the items in random order
    """
    return [items[i] for i in rng.permutation(len(items))]


def is_non_negative_integer(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def next_in_range(value_range: Tuple[float, float], rng: np.random.Generator) -> float:
    """Draw a uniform value from a (min, max) range. A degenerate range returns max."""
    low, high = value_range
    if low == high:
        return high
    return float(rng.uniform(low, high))
