"""
Configuration Loading System

Loads YAML configuration files and converts them to the level and game-loop
settings used by the simulation engine.
"""

import yaml
from typing import Dict, List, Any, Tuple

from .level import LevelLayout, LevelForwardModel


class ConfigurationError(Exception):
    """Raised when configuration is invalid"""
    pass


def load_config(config_path: str = "config.yaml") -> Dict[str, Any]:
    """Load configuration from YAML file"""
    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Configuration file not found: {config_path}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

    if config is None:
        raise ConfigurationError(f"Configuration file is empty: {config_path}")
    return config


def parse_gaps(gap_config: List[Any]) -> Tuple[Tuple[float, float], ...]:
    """
    Parse pit definitions into (start, end) tuples

    Accepts either [start, end] pairs or {start: .., end: ..} mappings.
    """
    gaps = []
    for gap in gap_config:
        if isinstance(gap, dict):
            gaps.append((float(gap["start"]), float(gap["end"])))
        elif isinstance(gap, (list, tuple)) and len(gap) == 2:
            gaps.append((float(gap[0]), float(gap[1])))
        else:
            raise ConfigurationError(f"Invalid gap definition: {gap}")
    return tuple(sorted(gaps))


def create_layout_from_config(config: Dict[str, Any]) -> LevelLayout:
    """Build an immutable LevelLayout from the 'level' section"""
    level_config = config.get("level", {})
    defaults = LevelLayout()

    try:
        return LevelLayout(
            length=float(level_config.get("length", defaults.length)),
            gaps=parse_gaps(level_config.get("gaps", list(defaults.gaps))),
            ground_y=float(level_config.get("ground_y", defaults.ground_y)),
            kill_y=float(level_config.get("kill_y", defaults.kill_y)),
            start_x=float(level_config.get("start_x", defaults.start_x)),
            time_limit=int(level_config.get("time_limit", defaults.time_limit)),
            goal_x=level_config.get("goal_x", defaults.goal_x)
        )
    except ValueError as e:
        raise ConfigurationError(f"Invalid level configuration: {e}")


def create_level_from_config(config: Dict[str, Any]) -> LevelForwardModel:
    """
    Create a fresh forward model positioned at the level start

    Args:
        config: Parsed configuration dictionary

    Returns:
        LevelForwardModel in its initial state
    """
    return LevelForwardModel(create_layout_from_config(config))


def get_game_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Get game loop configuration with defaults filled in"""
    game_config = config.get("game", {})
    return {
        "max_ticks": int(game_config.get("max_ticks", 600)),
        "tick_budget_ms": float(game_config.get("tick_budget_ms", 30.0)),
        "verbose": bool(game_config.get("verbose", False)),
    }


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration and return list of issues

    Returns:
        List of validation error messages (empty if valid)
    """
    issues = []

    if "level" not in config:
        issues.append("Missing required section: level")
        return issues

    level_config = config["level"]
    length = level_config.get("length", 400.0)
    if length <= 0:
        issues.append("Level length must be positive")

    ground_y = level_config.get("ground_y", 200.0)
    kill_y = level_config.get("kill_y", 260.0)
    if kill_y <= ground_y:
        issues.append("Level kill_y must be greater than ground_y")

    start_x = level_config.get("start_x", 16.0)
    if not 0 <= start_x < length:
        issues.append("Level start_x must lie inside the level")

    try:
        gaps = parse_gaps(level_config.get("gaps", []))
    except (ConfigurationError, KeyError, TypeError, ValueError) as e:
        issues.append(f"Invalid gaps: {e}")
        gaps = ()

    for start, end in gaps:
        if end <= start:
            issues.append(f"Gap ({start}, {end}) must have end > start")
        if start < start_x < end:
            issues.append(f"Start position {start_x} lies over gap ({start}, {end})")

    game_config = config.get("game", {})
    if game_config.get("max_ticks", 1) <= 0:
        issues.append("Game max_ticks must be positive")
    if game_config.get("tick_budget_ms", 1.0) <= 0:
        issues.append("Game tick_budget_ms must be positive")

    return issues


def print_config_summary(config_path: str = "config.yaml"):
    """Print a summary of the configuration"""
    try:
        config = load_config(config_path)

        print("=" * 50)
        print("CONFIGURATION SUMMARY")
        print("=" * 50)

        level_config = config.get("level", {})
        print(f"Level length: {level_config.get('length', 'N/A')}")
        print(f"Time limit: {level_config.get('time_limit', 'N/A')} ticks")

        gaps = level_config.get("gaps", [])
        print(f"\nGaps ({len(gaps)}):")
        for gap in gaps:
            print(f"  {gap}")

        game_config = get_game_config(config)
        print(f"\nMax ticks: {game_config['max_ticks']}")
        print(f"Tick budget: {game_config['tick_budget_ms']} ms")

        issues = validate_config(config)
        if issues:
            print(f"\nValidation Issues ({len(issues)}):")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print("\nConfiguration is valid ✓")

        print("=" * 50)

    except ConfigurationError as e:
        print(f"Configuration Error: {e}")
