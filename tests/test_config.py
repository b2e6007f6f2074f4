"""Tests for configuration system."""

import json
import pytest
import tempfile
import yaml
from pathlib import Path
from bunny_sim.config import load_config, config_from_dict, SimulationConfig, ConfigurationError


@pytest.fixture
def sample_config():
    """Create a sample configuration."""
    return {
        'seed': 42,
        'generations': 10,
        'max_age': 6,
        'max_population': 500,
        'mutation_percentage': 0.5,
        'pedigree_depth': 3,
        'environment': 'arctic',
        'selection': {
            'wolves': True,
            'tough_food': False,
            'limited_food': True
        },
        'initial_population': {
            'mutations': 'Fe',
            'population': ['5FfEe', '3ffee']
        }
    }


def _write(config, suffix='.yaml'):
    with tempfile.NamedTemporaryFile(mode='w', suffix=suffix, delete=False) as f:
        if suffix == '.json':
            json.dump(config, f)
        else:
            yaml.dump(config, f)
        return f.name


def test_load_config_yaml(sample_config):
    """Test loading YAML configuration."""
    config_path = _write(sample_config)

    try:
        config = load_config(config_path)
        assert config.seed == 42
        assert config.generations == 10
        assert config.max_age == 6
        assert config.max_population == 500
        assert config.mutation_percentage == 0.5
        assert config.pedigree_depth == 3
        assert config.environment == 'arctic'
        assert config.selection.wolves
        assert not config.selection.tough_food
        assert config.selection.limited_food
        assert config.initial_population.mutations == 'Fe'
        assert config.initial_population.population == ['5FfEe', '3ffee']
        assert config.raw_config['seed'] == 42
    finally:
        Path(config_path).unlink()


def test_load_config_json(sample_config):
    """Test loading JSON configuration."""
    config_path = _write(sample_config, suffix='.json')

    try:
        config = load_config(config_path)
        assert config.seed == 42
        assert config.environment == 'arctic'
    finally:
        Path(config_path).unlink()


def test_load_config_defaults():
    """Test that optional fields get their defaults."""
    config = config_from_dict({'seed': 1, 'generations': 3})

    assert config.max_age == 5
    assert config.max_population == 1000
    assert config.mutation_percentage == 0.25
    assert config.pedigree_depth == 4
    assert config.environment == 'equator'
    assert not config.selection.wolves
    assert config.initial_population.mutations == ''
    assert config.initial_population.population == ['2']


def test_default_config():
    """Test the all-defaults configuration."""
    config = SimulationConfig.default(seed=7)
    assert config.seed == 7
    assert config.generations == 10
    assert config.initial_population.population == ['2']


def test_population_counts_become_strings():
    """Test that a bare count read as an int is accepted."""
    config = config_from_dict({'seed': 1, 'generations': 1, 'initial_population': {'population': [5]}})
    assert config.initial_population.population == ['5']


def test_load_config_missing_field(sample_config):
    """Test that missing required fields raise errors."""
    del sample_config['seed']
    config_path = _write(sample_config)

    try:
        with pytest.raises(ConfigurationError):
            load_config(config_path)
    finally:
        Path(config_path).unlink()


def test_load_config_missing_file():
    """Test that a nonexistent file raises an error."""
    with pytest.raises(ConfigurationError):
        load_config('/nonexistent/bunnies.yaml')


def test_load_config_malformed_yaml():
    """Test that a file that does not parse raises an error."""
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        f.write('seed: [1, 2\n')
        config_path = f.name

    try:
        with pytest.raises(ConfigurationError):
            load_config(config_path)
    finally:
        Path(config_path).unlink()


@pytest.mark.parametrize('field,value', [
    ('seed', 'abc'),
    ('generations', 0),
    ('max_age', 0),
    ('max_population', -5),
    ('max_population', 2),
    ('pedigree_depth', 1.5),
    ('mutation_percentage', 1.5),
    ('mutation_percentage', True),
    ('environment', 'desert'),
    ('selection', {'hawks': True}),
    ('selection', {'wolves': 'yes'}),
    ('selection', ['wolves']),
    ('initial_population', {'mutations': 5}),
    ('initial_population', {'population': '2'}),
])
def test_invalid_values(sample_config, field, value):
    """Test that invalid values raise ConfigurationError."""
    sample_config[field] = value
    with pytest.raises(ConfigurationError):
        config_from_dict(sample_config)


def test_config_from_dict_rejects_non_mapping():
    """Test that the top level must be a mapping."""
    with pytest.raises(ConfigurationError):
        config_from_dict(['seed', 42])


def test_config_from_dict_does_not_modify_input(sample_config):
    """Test that normalization works on a copy."""
    del sample_config['selection']
    config_from_dict(sample_config)
    assert 'selection' not in sample_config
