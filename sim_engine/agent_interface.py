"""
Interface for agents that want to play in the framework.
"""

from abc import ABC, abstractmethod
from typing import List

from .forward_model import ForwardModel, MarioTimer


class MarioAgent(ABC):
    """Capability contract the game loop drives each tick"""

    @abstractmethod
    def initialize(self, model: ForwardModel, timer: MarioTimer) -> None:
        """
        Prepare the agent before the game starts.

        Args:
            model: Forward model the agent can simulate or inspect
            timer: Time budget for initialization
        """

    def train(self, model: ForwardModel) -> None:
        """Optional training hook, called once after initialize()"""

    @abstractmethod
    def get_actions(self, model: ForwardModel, timer: MarioTimer) -> List[bool]:
        """
        Choose the buttons to press on this tick.

        Args:
            model: Forward model copy of the current game state
            timer: Time budget before the agent has to return

        Returns:
            Button states, one bool per MarioActions entry
        """

    @abstractmethod
    def get_agent_name(self) -> str:
        """Name shown in reports"""
