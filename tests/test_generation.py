"""Tests for Generation model."""

import pytest
import numpy as np
from bunny_sim.models.bunny import CauseOfDeath
from bunny_sim.models.bunny_collection import BunnyCollection
from bunny_sim.models.gene_pool import GenePool
from bunny_sim.models.generation import Generation
from bunny_sim.models.selection import Environment, Wolves, ToughFood, LimitedFood


@pytest.fixture
def rng():
    """Create a seeded random number generator."""
    return np.random.Generator(np.random.PCG64(42))


@pytest.fixture
def collection(rng):
    collection = BunnyCollection(GenePool(), rng)
    for _ in range(2):
        collection.create_bunny_zero()
    return collection


def test_generation_advance():
    """Test advancing the generation number."""
    generation = Generation()
    assert generation.generation_number == 0
    assert generation.advance() == 1
    assert generation.generation_number == 1


def test_execute_cycle(collection, rng):
    """Test one cycle with no selection."""
    generation = Generation(0)
    stats = generation.execute_cycle(collection, [Wolves(), ToughFood(), LimitedFood()], Environment.EQUATOR, rng)

    assert generation.generation_number == 1
    assert stats.generation == 1
    assert stats.births == 4
    assert stats.live_count == 6
    assert stats.dead_count == 0
    assert stats.total_deaths == 0
    assert stats.allele_counts['whiteFur'] == 6
    assert all(b.age == 1 for b in collection.live_bunnies if b.generation == 0)
    assert all(b.generation == 1 for b in collection.live_bunnies if b.age == 0)


def test_execute_cycle_with_selection(collection, rng):
    """Test that enabled agents kill before mating."""
    generation = Generation(0)
    for _ in range(2):
        generation.execute_cycle(collection, [], Environment.EQUATOR, rng)
    live_before = collection.get_number_of_live_bunnies()
    assert live_before == 18

    stats = generation.execute_cycle(collection, [Wolves(enabled=True)], Environment.EQUATOR, rng)

    # All bunnies are white, so 45-50% of them are eaten at the equator
    eaten = stats.deaths[CauseOfDeath.WOLF]
    assert 8 <= eaten <= 9
    assert stats.dead_count == eaten
    assert all(b.cause_of_death == CauseOfDeath.WOLF for b in collection.dead_bunnies)
    collection.assert_valid_counts()


def test_old_age_deaths_are_counted(rng):
    """Test that deaths from aging appear in the stats."""
    collection = BunnyCollection(GenePool(), rng, max_age=1)
    for _ in range(3):
        collection.create_bunny_zero()

    stats = Generation(0).execute_cycle(collection, [], Environment.ARCTIC, rng)
    assert stats.deaths == {CauseOfDeath.OLD_AGE: 3}
    assert stats.births == 0
    assert stats.live_count == 0
