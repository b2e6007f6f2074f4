"""Integration tests for Simulation."""

import pytest
import tempfile
import yaml
from pathlib import Path
from bunny_sim import Simulation
from bunny_sim.config import config_from_dict, SimulationConfig, ConfigurationError
from bunny_sim.events import EventRecorder, AllBunniesDied, MutationApplied, PopulationMaxed
from bunny_sim.exceptions import SimulationError
from bunny_sim.models.allele import FUR, EARS, BROWN_FUR, STRAIGHT_EARS
from bunny_sim.models.selection import Environment


@pytest.fixture
def simple_config_file():
    """Create a simple config file for testing."""
    config = {
        'seed': 42,
        'generations': 3,
        'environment': 'arctic',
        'selection': {'wolves': True},
        'initial_population': {
            'mutations': 'F',
            'population': ['4FF', '6ff']
        }
    }

    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        yaml.dump(config, f)
        config_path = f.name

    yield config_path

    # Cleanup
    Path(config_path).unlink()


def test_simulation_from_config(simple_config_file):
    """Test creating simulation from config."""
    sim = Simulation.from_config(simple_config_file)
    assert sim.config.seed == 42
    assert sim.environment == Environment.ARCTIC
    assert sim.wolves.enabled
    assert not sim.tough_food.enabled
    assert not sim.is_initialized


def test_simulation_initialize(simple_config_file):
    """Test that the initial population follows the configuration."""
    sim = Simulation.from_config(simple_config_file)
    sim.initialize()

    assert sim.collection.get_number_of_live_bunnies() == 10
    assert sim.gene_pool.get_dominant_allele(FUR) is BROWN_FUR
    assert sim.get_allele_counts()['brownFur'] == 4
    assert sim.get_allele_counts()['whiteFur'] == 6
    assert sim.config_warnings == []
    assert all(b.generation == 0 for b in sim.collection.live_bunnies)


def test_simulation_run(simple_config_file):
    """Test running a simulation to completion."""
    sim = Simulation.from_config(simple_config_file)
    results = sim.run()

    assert results.status == 'completed'
    assert results.generations_completed == 3
    assert len(results.history) == 3
    assert [stats.generation for stats in results.history] == [1, 2, 3]
    assert results.final_population_size == sim.collection.get_number_of_live_bunnies()
    assert results.total_created == sim.collection.total_created
    assert results.seed == 42
    assert results.duration_seconds >= 0
    sim.collection.assert_valid_counts()


def test_simulation_reproducibility(simple_config_file):
    """Test that the same seed produces the same history."""
    first = Simulation.from_config(simple_config_file).run()
    second = Simulation.from_config(simple_config_file).run()

    assert [s.live_count for s in first.history] == [s.live_count for s in second.history]
    assert [s.allele_counts for s in first.history] == [s.allele_counts for s in second.history]


def test_population_growth_without_selection():
    """Test exact growth: each pair produces 4 bunnies per generation."""
    sim = Simulation(SimulationConfig.default(seed=1, generations=3))
    results = sim.run()

    assert [s.live_count for s in results.history] == [6, 18, 54]
    assert [s.births for s in results.history] == [4, 12, 36]


def test_run_stops_when_population_maxed():
    """Test that the run ends early when bunnies take over the world."""
    sim = Simulation(config_from_dict({'seed': 1, 'generations': 10, 'max_population': 10}))
    sim.initialize()
    recorder = EventRecorder(sim.event_bus, PopulationMaxed)
    results = sim.run()

    assert results.status == 'maxed'
    assert results.generations_completed == 2
    assert results.final_population_size == 18
    assert len(recorder.events) == 1


def test_run_stops_when_all_bunnies_died():
    """Test that the run ends early when every bunny has died."""
    sim = Simulation(config_from_dict({'seed': 1, 'generations': 10, 'max_age': 1}))
    recorder = EventRecorder(sim.event_bus, AllBunniesDied)
    results = sim.run()

    assert results.status == 'extinct'
    assert results.generations_completed == 1
    assert results.final_population_size == 0
    assert results.final_dead_count == 2
    assert len(recorder.events) == 1


def test_invalid_initial_population_uses_default():
    """Test that a rejected descriptor is reported and replaced."""
    sim = Simulation(config_from_dict({
        'seed': 1,
        'generations': 1,
        'initial_population': {'mutations': 'Ff', 'population': ['3FF']}
    }))
    results = sim.run()

    assert len(results.warnings) == 1
    assert results.history[0].live_count == 6
    assert sim.gene_pool.get_dominant_allele(FUR) is None


def test_schedule_mutation():
    """Test scheduling a mutation for the next litter."""
    sim = Simulation(SimulationConfig.default(seed=3))
    with pytest.raises(SimulationError):
        sim.schedule_mutation(EARS, mutant_is_dominant=False)

    sim.initialize()
    recorder = EventRecorder(sim.event_bus, MutationApplied)
    assert sim.schedule_mutation(EARS, mutant_is_dominant=False) is STRAIGHT_EARS

    # Announced when a litter receives it, not when it is scheduled
    assert recorder.events == []

    with pytest.raises(ValueError):
        sim.schedule_mutation(EARS, mutant_is_dominant=True)

    stats = sim.step_generation()
    assert stats.births == 4
    assert len(sim.collection.recessive_mutants) == 1
    assert not sim.gene_pool.is_mutation_coming(EARS)
    assert recorder.events == [MutationApplied(gene=EARS, dominant_allele=STRAIGHT_EARS, count=1)]


def test_play_again(simple_config_file):
    """Test starting over with the initial population, keeping settings."""
    sim = Simulation.from_config(simple_config_file)
    sim.run()
    sim.environment = Environment.EQUATOR
    sim.tough_food.enabled = True
    sim.schedule_mutation(EARS, mutant_is_dominant=True)

    sim.play_again()

    assert sim.collection.get_number_of_live_bunnies() == 10
    assert sim.collection.total_created == 10
    assert sim.generation.generation_number == 0
    assert sim.history == []
    assert sim.environment == Environment.EQUATOR
    assert sim.tough_food.enabled
    assert sim.gene_pool.get_dominant_allele(EARS) is None
    assert not sim.gene_pool.is_mutation_coming(EARS)
    assert sim.gene_pool.get_dominant_allele(FUR) is BROWN_FUR


def test_reset(simple_config_file):
    """Test that reset also restores environment and selection settings."""
    sim = Simulation.from_config(simple_config_file)
    sim.run()
    sim.environment = Environment.EQUATOR
    sim.wolves.enabled = False
    sim.limited_food.enabled = True

    sim.reset()

    assert sim.environment == Environment.ARCTIC
    assert sim.wolves.enabled
    assert not sim.limited_food.enabled
    assert sim.collection.get_number_of_live_bunnies() == 10


def test_step_requires_initialize():
    """Test that stepping before initialize raises an error."""
    sim = Simulation(SimulationConfig.default())
    with pytest.raises(SimulationError):
        sim.step_generation()


def test_max_population_must_fit_default_population():
    """Test that a rejected descriptor can always fall back to the default population."""
    with pytest.raises(ConfigurationError):
        config_from_dict({'seed': 1, 'generations': 1, 'max_population': 2})

    sim = Simulation(config_from_dict({
        'seed': 1,
        'generations': 1,
        'max_population': 3,
        'initial_population': {'population': ['5']}
    }))
    sim.initialize()

    assert len(sim.config_warnings) == 1
    assert sim.collection.get_number_of_live_bunnies() == 2


def test_initialize_wraps_configuration_errors():
    """Test that a configuration built without validation fails as a SimulationError."""
    config = SimulationConfig.default()
    config.max_population = 2
    sim = Simulation(config)

    with pytest.raises(SimulationError):
        sim.initialize()
