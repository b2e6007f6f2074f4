"""Configuration loading and validation for bunny_sim."""

import copy
import json
import yaml
from pathlib import Path
from typing import Dict, List, Any
from dataclasses import dataclass, field

from .constants import (
    DEFAULT_MAX_AGE,
    DEFAULT_MAX_POPULATION,
    DEFAULT_MUTATION_PERCENTAGE,
    DEFAULT_PEDIGREE_DEPTH,
    DEFAULT_MUTATIONS,
    DEFAULT_POPULATION,
)
from .exceptions import ConfigurationError


@dataclass
class SelectionConfig:
    """Which environmental factors are enabled at the start."""
    wolves: bool = False
    tough_food: bool = False
    limited_food: bool = False


@dataclass
class InitialPopulationConfig:
    """Descriptors for the initial population. Content is validated when parsed, see population_parser."""
    mutations: str = DEFAULT_MUTATIONS
    population: List[str] = field(default_factory=lambda: list(DEFAULT_POPULATION))


@dataclass
class SimulationConfig:
    """Complete simulation configuration."""
    seed: int
    generations: int
    max_age: int = DEFAULT_MAX_AGE
    max_population: int = DEFAULT_MAX_POPULATION
    mutation_percentage: float = DEFAULT_MUTATION_PERCENTAGE
    pedigree_depth: int = DEFAULT_PEDIGREE_DEPTH
    environment: str = 'equator'
    selection: SelectionConfig = field(default_factory=SelectionConfig)
    initial_population: InitialPopulationConfig = field(default_factory=InitialPopulationConfig)
    raw_config: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def default(cls, seed: int = 0, generations: int = 10) -> 'SimulationConfig':
        """All-defaults configuration, without a file."""
        return build_config(_normalized({'seed': seed, 'generations': generations}))


VALID_ENVIRONMENTS = ['equator', 'arctic']
SELECTION_AGENTS = ['wolves', 'tough_food', 'limited_food']


def load_config(config_path: str) -> SimulationConfig:
    """
    Load and validate configuration from YAML or JSON file.

    Args:
        config_path: Path to configuration file

    Returns:
        Validated SimulationConfig object

    Raises:
        ConfigurationError: If file doesn't exist or configuration is invalid
    """
    path = Path(config_path)

    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    # Load config file
    try:
        with open(path, 'r') as f:
            if path.suffix.lower() == '.json':
                raw_config = json.load(f)
            else:
                raw_config = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to parse configuration file: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read configuration file: {e}") from e

    return config_from_dict(raw_config)


def config_from_dict(raw_config: Dict[str, Any]) -> SimulationConfig:
    """
    Validate, normalize and build a configuration from a dictionary.

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    if not isinstance(raw_config, dict):
        raise ConfigurationError("Configuration must be a mapping")
    raw_config = copy.deepcopy(raw_config)
    return build_config(_normalized(raw_config))


def _normalized(config: Dict[str, Any]) -> Dict[str, Any]:
    validate_config(config)
    normalize_config(config)
    return config


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate configuration structure and values.

    The content of the initial population descriptors is not validated here. An
    invalid descriptor is replaced by the default population when it is parsed.

    Args:
        config: Raw configuration dictionary

    Raises:
        ConfigurationError: If validation fails
    """
    # Required top-level fields
    required_fields = ['seed', 'generations']

    for field_name in required_fields:
        if field_name not in config:
            raise ConfigurationError(f"Missing required field: {field_name}")

    # Validate seed
    if not _is_int(config['seed']):
        raise ConfigurationError("seed must be an integer")

    # Validate generations
    if not _is_int(config['generations']) or config['generations'] < 1:
        raise ConfigurationError("generations must be a positive integer")

    for field_name in ['max_age', 'max_population', 'pedigree_depth']:
        if field_name in config:
            if not _is_int(config[field_name]) or config[field_name] < 1:
                raise ConfigurationError(f"{field_name} must be a positive integer")

    # The default population is the fallback for a rejected descriptor, so it must fit
    default_count = int(DEFAULT_POPULATION[0])
    if 'max_population' in config and config['max_population'] <= default_count:
        raise ConfigurationError(f"max_population must be greater than {default_count}")

    if 'mutation_percentage' in config:
        percentage = config['mutation_percentage']
        if not isinstance(percentage, (int, float)) or isinstance(percentage, bool) or not (0.0 <= percentage <= 1.0):
            raise ConfigurationError("mutation_percentage must be a number between 0.0 and 1.0")

    if 'environment' in config and config['environment'] not in VALID_ENVIRONMENTS:
        raise ConfigurationError(f"environment must be one of {VALID_ENVIRONMENTS}, got {config['environment']!r}")

    # Validate selection (optional)
    if 'selection' in config:
        selection = config['selection']
        if not isinstance(selection, dict):
            raise ConfigurationError("selection must be a dictionary")
        for agent in selection:
            if agent not in SELECTION_AGENTS:
                raise ConfigurationError(f"selection has unknown agent: {agent}")
            if not isinstance(selection[agent], bool):
                raise ConfigurationError(f"selection.{agent} must be a boolean")

    # Validate initial_population (optional)
    if 'initial_population' in config:
        initial = config['initial_population']
        if not isinstance(initial, dict):
            raise ConfigurationError("initial_population must be a dictionary")
        if 'mutations' in initial and not isinstance(initial['mutations'], str):
            raise ConfigurationError("initial_population.mutations must be a string")
        if 'population' in initial:
            population = initial['population']
            if not isinstance(population, list) or not all(isinstance(p, (str, int)) for p in population):
                raise ConfigurationError("initial_population.population must be a list of strings")


def normalize_config(config: Dict[str, Any]) -> None:
    """
    Normalize configuration values and fill in defaults.

    Args:
        config: Configuration dictionary (modified in place)
    """
    config.setdefault('max_age', DEFAULT_MAX_AGE)
    config.setdefault('max_population', DEFAULT_MAX_POPULATION)
    config.setdefault('mutation_percentage', DEFAULT_MUTATION_PERCENTAGE)
    config.setdefault('pedigree_depth', DEFAULT_PEDIGREE_DEPTH)
    config.setdefault('environment', 'equator')
    config['mutation_percentage'] = float(config['mutation_percentage'])

    selection = config.setdefault('selection', {})
    for agent in SELECTION_AGENTS:
        selection.setdefault(agent, False)

    initial = config.setdefault('initial_population', {})
    initial.setdefault('mutations', DEFAULT_MUTATIONS)
    initial.setdefault('population', list(DEFAULT_POPULATION))

    # YAML reads a bare count as an int, e.g. population: [2]
    initial['population'] = [str(p) for p in initial['population']]


def build_config(raw_config: Dict[str, Any]) -> SimulationConfig:
    """
    Build SimulationConfig object from validated raw config.

    Args:
        raw_config: Validated and normalized configuration dictionary

    Returns:
        SimulationConfig object
    """
    selection = raw_config['selection']
    initial = raw_config['initial_population']

    return SimulationConfig(
        seed=raw_config['seed'],
        generations=raw_config['generations'],
        max_age=raw_config['max_age'],
        max_population=raw_config['max_population'],
        mutation_percentage=raw_config['mutation_percentage'],
        pedigree_depth=raw_config['pedigree_depth'],
        environment=raw_config['environment'],
        selection=SelectionConfig(
            wolves=selection['wolves'],
            tough_food=selection['tough_food'],
            limited_food=selection['limited_food']
        ),
        initial_population=InitialPopulationConfig(
            mutations=initial['mutations'],
            population=list(initial['population'])
        ),
        raw_config=raw_config
    )
