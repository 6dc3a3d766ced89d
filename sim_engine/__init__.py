"""
Evolutionary Mario Planner - Simulation Engine

Collaborator side of the planner: the agent interface, the forward-model
contract, a deterministic reference side-scroller level and the host game loop.
"""

__version__ = "1.0.0"
__author__ = "Evolutionary Planning Team"

# Export main classes for easy importing
from .forward_model import (
    ForwardModel,
    GameStatus,
    MarioTimer,
    MarioActions,
    NUM_ACTIONS
)

from .agent_interface import MarioAgent
from .level import LevelLayout, LevelForwardModel
from .config_loader import create_level_from_config, load_config, ConfigurationError
from .game_loop import GameResult, run_game

__all__ = [
    'ForwardModel',
    'GameStatus',
    'MarioTimer',
    'MarioActions',
    'NUM_ACTIONS',
    'MarioAgent',
    'LevelLayout',
    'LevelForwardModel',
    'create_level_from_config',
    'load_config',
    'ConfigurationError',
    'GameResult',
    'run_game'
]
