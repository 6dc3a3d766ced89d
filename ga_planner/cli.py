"""
CLI module for the evolutionary planner.

Handles run configuration loading, validation, and mode dispatching.
"""

from typing import Dict, Any
from pathlib import Path
import yaml

from .config import ConfigValidationError


VALID_MODES = ['plan', 'play']


def load_run_config(config_path: str) -> Dict[str, Any]:
    """
    Load run configuration from YAML file.

    Args:
        config_path: Path to run configuration YAML file

    Returns:
        Dictionary containing run configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_file, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in configuration file: {e}")

    if config is None:
        raise ConfigValidationError("Configuration file is empty")

    return config


def validate_run_config(config: Dict[str, Any]) -> None:
    """
    Validate run configuration structure.

    Args:
        config: Run configuration dictionary

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    if 'mode' not in config:
        raise ConfigValidationError("Missing required field: 'mode'")

    mode = config['mode']
    if mode not in VALID_MODES:
        raise ConfigValidationError(
            f"Invalid mode: '{mode}'. Must be one of {VALID_MODES}"
        )

    if 'output' not in config:
        raise ConfigValidationError("Missing required field: 'output'")

    if not isinstance(config['output'], dict):
        raise ConfigValidationError("'output' must be a dictionary")

    if 'root' not in config['output']:
        raise ConfigValidationError("Missing required field: 'output.root'")

    for key in ['level_config', 'planner_config']:
        if key in config:
            path = Path(config[key])
            if not path.exists():
                raise ConfigValidationError(f"'{key}' file not found: {path}")

    if 'planner' in config and not isinstance(config['planner'], dict):
        raise ConfigValidationError("'planner' overrides must be a dictionary")

    seed = config.get('random_seed')
    if seed is not None and (not isinstance(seed, int) or seed < 0):
        raise ConfigValidationError(
            f"'random_seed' must be a non-negative integer, got: {seed}"
        )

    if mode == 'play':
        _validate_play_config(config)


def _validate_play_config(config: Dict[str, Any]) -> None:
    """
    Validate play mode configuration.

    Args:
        config: Run configuration dictionary

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    game_config = config.get('game', {})
    if not isinstance(game_config, dict):
        raise ConfigValidationError("'game' must be a dictionary")

    max_ticks = game_config.get('max_ticks')
    if max_ticks is not None and (not isinstance(max_ticks, int) or max_ticks <= 0):
        raise ConfigValidationError(
            f"'game.max_ticks' must be a positive integer, got: {max_ticks}"
        )


def run_from_config(config_path: str) -> None:
    """
    Load run configuration and execute appropriate mode.

    This is the main entry point called by planner_cli.py.

    Args:
        config_path: Path to run configuration YAML file

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
        Various exceptions from mode implementations
    """
    print(f"Loading configuration from: {config_path}")
    config = load_run_config(config_path)

    print("Validating configuration...")
    validate_run_config(config)

    mode = config['mode']
    print(f"Mode: {mode}\n")

    if mode == 'plan':
        from .orchestration import run_plan_mode
        run_plan_mode(config)
    elif mode == 'play':
        from .orchestration import run_play_mode
        run_play_mode(config)
    else:
        # Should never reach here due to validation
        raise ConfigValidationError(f"Invalid mode: {mode}")

    print("\n✓ Run completed successfully!")
