"""
Plan executor: the evolutionary agent the game loop talks to.

Holds the committed plan and a cursor into its played-back prefix, and
re-runs the search whenever there is no plan or the prefix is used up.
"""

import time
from typing import Any, Dict, List, Optional
import numpy as np

from sim_engine.agent_interface import MarioAgent
from sim_engine.forward_model import ForwardModel, GameStatus, MarioTimer, move_right_action

from .config import resolve_planner_config
from .data_models import ActionSequence, GenerationRecord
from .search import calculate_best_action_sequence


class EvolutionaryAgent(MarioAgent):
    """
    Agent that replans with a genetic algorithm every planning_horizon ticks.

    Attributes:
        config: Resolved planner configuration
        best_action_sequence: Committed plan, None until the first search
        current_tick_in_plan: Cursor into the played-back prefix of the plan
        plans_computed: Number of searches run since initialize()
        last_planning_ms: Wall-clock duration of the most recent search
        history: Per-generation records of the most recent search
    """

    AGENT_NAME = "EvolutionaryMarioAgent"

    def __init__(self, config: Optional[Dict[str, Any]] = None, seed: Optional[int] = None):
        self.config = resolve_planner_config(config)
        self.seed = seed if seed is not None else self.config.get('random_seed')
        self.rng = np.random.default_rng(self.seed)
        self.best_action_sequence: Optional[ActionSequence] = None
        self.current_tick_in_plan = 0
        self.plans_computed = 0
        self.last_planning_ms = 0.0
        self.history: List[GenerationRecord] = []

    def initialize(self, model: ForwardModel, timer: MarioTimer) -> None:
        self.rng = np.random.default_rng(self.seed)
        self.best_action_sequence = None
        self.current_tick_in_plan = 0
        self.plans_computed = 0
        self.history = []

    def train(self, model: ForwardModel) -> None:
        pass

    def needs_replanning(self) -> bool:
        """True when there is no plan or its played-back prefix is used up."""
        return (self.best_action_sequence is None
                or self.current_tick_in_plan >= self.config['planning_horizon'])

    def get_actions(self, model: ForwardModel, timer: MarioTimer) -> List[bool]:
        # Keep running right once the level is effectively done
        if (model.get_completion_percentage() >= self.config['completion_override']
                or model.get_game_status() == GameStatus.WIN):
            return move_right_action()

        if self.needs_replanning():
            self.best_action_sequence = self._plan(model, timer)
            self.current_tick_in_plan = 0

        action = self.best_action_sequence.action_at(self.current_tick_in_plan)
        self.current_tick_in_plan += 1
        return action

    def get_agent_name(self) -> str:
        return self.AGENT_NAME

    def _plan(self, model: ForwardModel, timer: MarioTimer) -> ActionSequence:
        budget_ms = timer.get_remaining_time() if timer is not None else None
        start_time = time.perf_counter()

        history: List[GenerationRecord] = []
        plan = calculate_best_action_sequence(model, self.config, self.rng, history=history)

        self.last_planning_ms = (time.perf_counter() - start_time) * 1000.0
        self.plans_computed += 1
        self.history = history

        if self.config.get('verbose') and budget_ms is not None and self.last_planning_ms > budget_ms:
            print(f"  Warning: plan {self.plans_computed} took {self.last_planning_ms:.1f} ms "
                  f"(budget {budget_ms:.1f} ms)")

        return plan
