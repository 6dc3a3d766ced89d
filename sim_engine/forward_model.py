"""
Forward Model Contract

Defines the narrow interface the planner consumes from a game simulator:
cloning, single-step advance and the handful of state queries used for
scoring.
"""

import time
from abc import ABC, abstractmethod
from enum import Enum, IntEnum
from typing import List, Sequence, Tuple


class GameStatus(Enum):
    """Game status reported by a forward model"""
    RUNNING = "running"
    WIN = "win"
    LOSE = "lose"
    TIME_OUT = "time_out"


class MarioActions(IntEnum):
    """Index of each controller button inside an action vector"""
    LEFT = 0
    RIGHT = 1
    DOWN = 2
    SPEED = 3
    JUMP = 4


NUM_ACTIONS = len(MarioActions)


def empty_action() -> List[bool]:
    """Action vector with no button pressed"""
    return [False] * NUM_ACTIONS


def move_right_action() -> List[bool]:
    """Action vector with only the right button pressed"""
    action = empty_action()
    action[MarioActions.RIGHT] = True
    return action


class MarioTimer:
    """Wall-clock budget handed to an agent for one decision"""

    def __init__(self, remaining_ms: float):
        self.remaining_ms = remaining_ms
        self.start_time = time.perf_counter()

    def get_remaining_time(self) -> float:
        """Milliseconds left before the agent should return"""
        elapsed_ms = (time.perf_counter() - self.start_time) * 1000.0
        return self.remaining_ms - elapsed_ms


class ForwardModel(ABC):
    """
    Simulator state the agent can copy and roll forward.

    Implementations must make clone() fully independent: advancing a clone
    never changes the original or any other clone.
    """

    @abstractmethod
    def clone(self) -> "ForwardModel":
        """Return an independent copy of this model"""

    @abstractmethod
    def advance(self, action: Sequence[bool]) -> None:
        """Step the simulation forward one tick under the given buttons"""

    @abstractmethod
    def get_mario_float_pos(self) -> Tuple[float, float]:
        """Current (x, y) position of the player"""

    @abstractmethod
    def get_completion_percentage(self) -> float:
        """Fraction of the level covered, nominally in [0, 1]"""

    @abstractmethod
    def get_game_status(self) -> GameStatus:
        """Current game status"""
