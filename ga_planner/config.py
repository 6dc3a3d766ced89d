"""
Planner configuration.

Default GA parameters, YAML loading and validation. Every planner function
takes a plain dict and reads keys with .get(), so partial dicts work; use
resolve_planner_config() to get a complete, validated one.
"""

from typing import Dict, Any, Optional
from pathlib import Path
import yaml


class ConfigValidationError(Exception):
    """Raised when planner or run configuration is invalid."""
    pass


DEFAULT_PLANNER_CONFIG: Dict[str, Any] = {
    # Horizon
    'planning_horizon': 40,     # ticks played back before re-planning
    'safety_frames': 20,        # extra ticks simulated for lookahead only
    'num_actions': 5,

    # Genetic algorithm
    'num_action_sequences': 100,
    'top_selection_size': 10,
    'mutation_rate': 0.2,
    'num_generations': 30,

    # Fitness shaping
    'win_bonus': 10000.0,
    'loss_penalty': 1000000.0,
    'completion_weight': 100.0,
    'min_y_position': 0.0,
    'y_position_scale': 100.0,
    'y_reward_fraction': 0.001,

    # Plan executor
    'completion_override': 0.99,
    'random_seed': None,
    'verbose': False,
}


def total_horizon(config: Dict[str, Any]) -> int:
    """Number of ticks simulated per sequence (planning horizon plus safety frames)."""
    return int(config.get('planning_horizon', 40)) + int(config.get('safety_frames', 20))


def validate_planner_config(config: Dict[str, Any]) -> None:
    """
    Validate planner parameters.

    Args:
        config: Planner configuration dictionary

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    positive_ints = [
        'planning_horizon',
        'num_actions',
        'num_action_sequences',
        'top_selection_size',
    ]
    for key in positive_ints:
        value = config.get(key)
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            raise ConfigValidationError(f"'{key}' must be a positive integer, got: {value}")

    for key in ['safety_frames', 'num_generations']:
        value = config.get(key)
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise ConfigValidationError(f"'{key}' must be a non-negative integer, got: {value}")

    if config['top_selection_size'] > config['num_action_sequences']:
        raise ConfigValidationError(
            f"'top_selection_size' ({config['top_selection_size']}) cannot exceed "
            f"'num_action_sequences' ({config['num_action_sequences']})"
        )

    mutation_rate = config.get('mutation_rate')
    if not isinstance(mutation_rate, (int, float)) or not 0.0 <= mutation_rate <= 1.0:
        raise ConfigValidationError(f"'mutation_rate' must be in [0, 1], got: {mutation_rate}")

    if config.get('y_position_scale') == 0:
        raise ConfigValidationError("'y_position_scale' must be non-zero")

    seed = config.get('random_seed')
    if seed is not None and (not isinstance(seed, int) or seed < 0):
        raise ConfigValidationError(f"'random_seed' must be a non-negative integer or null, got: {seed}")


def resolve_planner_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Merge overrides onto the defaults and validate the result.

    Unknown keys are kept but ignored by the planner.

    Args:
        overrides: Partial planner configuration

    Returns:
        Complete planner configuration

    Raises:
        ConfigValidationError: If the merged configuration is invalid
    """
    config = dict(DEFAULT_PLANNER_CONFIG)
    if overrides:
        config.update(overrides)
    validate_planner_config(config)
    return config


def load_planner_config(config_path: str) -> Dict[str, Any]:
    """
    Load planner configuration from YAML file.

    The file may hold the parameters at top level or under a 'planner' key.

    Args:
        config_path: Path to planner configuration YAML file

    Returns:
        Complete, validated planner configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Planner configuration file not found: {config_path}")

    try:
        with open(config_file, 'r') as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in planner configuration file: {e}")

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigValidationError("Planner configuration must be a mapping")

    return resolve_planner_config(raw.get('planner', raw))
