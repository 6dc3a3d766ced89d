"""
Evolutionary Planner for Side-Scrolling Platformers

This package provides a real-time genetic-algorithm planner that picks a
short sequence of button presses by rolling candidates forward on clones of
the game's forward model.

Key Features:
- Fixed-effort search (population x generations x horizon)
- Elitism: the best sequences survive each generation unmodified
- Uniform per-button crossover and single-button flip mutation
- Explicit random number generator for reproducible searches

Modules:
- data_models: Core data structures (ActionSequence, EvaluationResult, GenerationRecord)
- config: Planner defaults, YAML loading and validation
- evaluator: Rollout on a model clone and fitness shaping
- population: Random population and elite selection
- crossover: Uniform crossover operator
- mutation: Single-button flip mutation operator
- search: Generational search driver
- agent: Plan executor implementing the MarioAgent interface
- io_utils: CSV export/import of plans and search history
- visualization_utils: Search progress and plan plots
- cli: Run configuration loading and mode dispatch
- orchestration: Plan and play run modes
"""

__version__ = "0.1.0"
__author__ = "Evolutionary Planning Team"

from .data_models import ActionSequence, EvaluationResult, GenerationRecord
from .agent import EvolutionaryAgent
from .search import calculate_best_action_sequence

__all__ = [
    "ActionSequence",
    "EvaluationResult",
    "GenerationRecord",
    "EvolutionaryAgent",
    "calculate_best_action_sequence",
]
