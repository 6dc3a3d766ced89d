"""
Host game loop: drives an agent one tick at a time against a live model.
"""

import time
from dataclasses import dataclass, field
from typing import List, Optional

from .agent_interface import MarioAgent
from .forward_model import ForwardModel, GameStatus, MarioTimer


@dataclass
class GameResult:
    """Outcome of one played game"""
    status: GameStatus
    completion: float
    ticks: int
    actions: List[List[bool]] = field(default_factory=list)
    agent_name: str = ""
    elapsed_seconds: float = 0.0

    @property
    def won(self) -> bool:
        return self.status == GameStatus.WIN


def run_game(agent: MarioAgent,
             model: ForwardModel,
             max_ticks: int = 600,
             tick_budget_ms: float = 30.0,
             verbose: bool = False,
             progress_every: int = 50) -> GameResult:
    """
    Play one game with the given agent.

    The agent always receives a clone of the live model, so nothing it does
    while planning can change the game being played.

    Args:
        agent: Agent to query each tick
        model: Live forward model, advanced in place
        max_ticks: Hard stop on the number of ticks played
        tick_budget_ms: Time budget handed to the agent per tick
        verbose: Print a progress line every progress_every ticks
        progress_every: Progress reporting interval

    Returns:
        GameResult with final status, completion and the executed actions
    """
    start_time = time.perf_counter()

    agent.initialize(model.clone(), MarioTimer(tick_budget_ms))
    agent.train(model.clone())

    actions: List[List[bool]] = []
    ticks = 0
    while ticks < max_ticks and model.get_game_status() == GameStatus.RUNNING:
        action = list(agent.get_actions(model.clone(), MarioTimer(tick_budget_ms)))
        model.advance(action)
        actions.append(action)
        ticks += 1

        if verbose and ticks % progress_every == 0:
            x, y = model.get_mario_float_pos()
            print(f"  Tick {ticks}: x={x:.1f} y={y:.1f} "
                  f"completion={model.get_completion_percentage():.1%}")

    status = model.get_game_status()
    if status == GameStatus.RUNNING:
        status = GameStatus.TIME_OUT

    return GameResult(
        status=status,
        completion=model.get_completion_percentage(),
        ticks=ticks,
        actions=actions,
        agent_name=agent.get_agent_name(),
        elapsed_seconds=time.perf_counter() - start_time
    )


def print_game_report(result: GameResult, title: Optional[str] = None):
    """Print a short summary of a played game"""
    print("=" * 60)
    print(title or "GAME RESULT")
    print("=" * 60)
    print(f"Agent: {result.agent_name}")
    print(f"Status: {result.status.value}")
    print(f"Completion: {result.completion:.1%}")
    print(f"Ticks played: {result.ticks}")
    print(f"Elapsed: {result.elapsed_seconds:.2f} seconds")
    if result.won:
        print("✓ Level cleared")
    else:
        print("✗ Level not cleared")
