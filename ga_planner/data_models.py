"""
Data models for the evolutionary planner.

Core data structures representing action sequences, rollout evaluations and
per-generation search records.
"""

from dataclasses import dataclass, field
from typing import Optional, Any

import numpy as np

from sim_engine.forward_model import GameStatus, NUM_ACTIONS


@dataclass
class ActionSequence:
    """
    Represents a candidate plan (individual in the GA population).

    Attributes:
        actions: Boolean array of shape (horizon, NUM_ACTIONS); row t holds
            the buttons pressed on tick t
        metadata: Additional information (origin, parents, generation, etc.)
    """
    actions: np.ndarray
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Ensure actions is a 2D boolean array."""
        self.actions = np.asarray(self.actions, dtype=bool)
        if self.actions.ndim != 2:
            raise ValueError(f"Action sequence must be 2D, got shape {self.actions.shape}")

    @classmethod
    def empty(cls, horizon: int, num_actions: int = NUM_ACTIONS) -> "ActionSequence":
        """
        Create a sequence where no button is ever pressed.

        Args:
            horizon: Number of ticks in the sequence
            num_actions: Buttons per action vector

        Returns:
            All-false ActionSequence
        """
        return cls(actions=np.zeros((horizon, num_actions), dtype=bool),
                   metadata={"origin": "empty"})

    @classmethod
    def random(cls, horizon: int, rng: np.random.Generator,
               num_actions: int = NUM_ACTIONS) -> "ActionSequence":
        """
        Create a sequence of independent fair coin flips per button per tick.

        Args:
            horizon: Number of ticks in the sequence
            rng: Random number generator
            num_actions: Buttons per action vector

        Returns:
            Random ActionSequence
        """
        actions = rng.random((horizon, num_actions)) < 0.5
        return cls(actions=actions, metadata={"origin": "random"})

    def copy(self) -> "ActionSequence":
        """
        Create a deep copy of this sequence.

        Returns:
            New ActionSequence with copied actions and metadata
        """
        return ActionSequence(actions=self.actions.copy(), metadata=self.metadata.copy())

    def action_at(self, tick: int) -> list[bool]:
        """Button states for one tick as plain bools."""
        return self.actions[tick].tolist()

    def planned_actions(self, planning_horizon: int) -> np.ndarray:
        """Prefix of the sequence that is actually played back."""
        return self.actions[:planning_horizon]

    @property
    def horizon(self) -> int:
        return self.actions.shape[0]

    @property
    def num_actions(self) -> int:
        return self.actions.shape[1]

    def __len__(self) -> int:
        return self.horizon

    def same_actions(self, other: "ActionSequence") -> bool:
        """Check whether two sequences press exactly the same buttons."""
        return self.actions.shape == other.actions.shape and bool(np.array_equal(self.actions, other.actions))


@dataclass
class EvaluationResult:
    """
    Outcome of rolling one action sequence forward on a model clone.

    Attributes:
        fitness: Scalar score used for selection
        status: Game status when the rollout stopped
        ticks_simulated: Number of advance() calls made
        completion: Completion percentage of the final simulated state
        mean_y: Mean vertical position over the simulated ticks
        x_positions: Horizontal position after each simulated tick
        loss_penalties: How many times the loss penalty was applied
    """
    fitness: float
    status: GameStatus
    ticks_simulated: int
    completion: float
    mean_y: float
    x_positions: list[float] = field(default_factory=list)
    loss_penalties: int = 0

    @property
    def won(self) -> bool:
        return self.status == GameStatus.WIN

    @property
    def lost(self) -> bool:
        return self.status == GameStatus.LOSE


@dataclass
class GenerationRecord:
    """
    Fitness statistics for one scored generation.

    Attributes:
        generation: Generation index (the final re-evaluation pass uses
            num_generations)
        best_fitness: Highest fitness in the population
        mean_fitness: Mean fitness of the population
        worst_fitness: Lowest fitness in the population
        elite_indices: Population slots selected as elites (empty for the
            final pass)
        timestamp: Optional wall-clock time of the record
    """
    generation: int
    best_fitness: float
    mean_fitness: float
    worst_fitness: float
    elite_indices: list[int] = field(default_factory=list)
    timestamp: Optional[str] = None

    @classmethod
    def from_scores(cls, generation: int, fitness_scores: list[float],
                    elite_indices: Optional[list[int]] = None) -> "GenerationRecord":
        """Summarize one generation's fitness list."""
        scores = np.asarray(fitness_scores, dtype=float)
        return cls(
            generation=generation,
            best_fitness=float(scores.max()),
            mean_fitness=float(scores.mean()),
            worst_fitness=float(scores.min()),
            elite_indices=list(elite_indices or []),
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert record to dictionary for CSV export.

        Returns:
            Dictionary with string-serializable values
        """
        return {
            "generation": self.generation,
            "best_fitness": self.best_fitness,
            "mean_fitness": self.mean_fitness,
            "worst_fitness": self.worst_fitness,
            "elite_indices": ",".join(str(i) for i in self.elite_indices),
            "timestamp": self.timestamp or "",
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GenerationRecord":
        """
        Create a record from dictionary (e.g., from CSV).

        Args:
            data: Dictionary with record fields

        Returns:
            GenerationRecord instance
        """
        elite_field = data.get("elite_indices") or ""
        return cls(
            generation=int(data["generation"]),
            best_fitness=float(data["best_fitness"]),
            mean_fitness=float(data["mean_fitness"]),
            worst_fitness=float(data["worst_fitness"]),
            elite_indices=[int(i) for i in elite_field.split(",") if i != ""],
            timestamp=data.get("timestamp") or None,
        )
