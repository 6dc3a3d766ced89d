"""
Visualization utilities for the evolutionary planner.

Provides plots of search progress and of an action sequence, including the
simulated trajectory it produces on a model clone.
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np

from sim_engine.forward_model import ForwardModel

from .data_models import ActionSequence, GenerationRecord
from .io_utils import ACTION_COLUMNS


def plot_fitness_history(records: List[GenerationRecord], ax: plt.Axes) -> None:
    """Plot best, mean and worst fitness per generation."""
    generations = [r.generation for r in records]
    ax.plot(generations, [r.best_fitness for r in records], label="best", color="green")
    ax.plot(generations, [r.mean_fitness for r in records], label="mean", color="blue")
    ax.plot(generations, [r.worst_fitness for r in records], label="worst", color="red", alpha=0.5)
    ax.set_xlabel("Generation")
    ax.set_ylabel("Fitness")
    ax.set_yscale("symlog")
    ax.set_title("Search Progress")
    ax.legend(loc="lower right")
    ax.grid(True, alpha=0.3)


def plot_action_heatmap(sequence: ActionSequence, planning_horizon: int, ax: plt.Axes) -> None:
    """
    Plot buttons pressed per tick, with the played-back prefix marked.

    Args:
        sequence: Sequence to draw
        planning_horizon: Ticks played back before re-planning
        ax: Axes to draw on
    """
    ax.imshow(sequence.actions.T.astype(float), aspect="auto", cmap="Greys",
              interpolation="nearest", vmin=0.0, vmax=1.0)
    ax.axvline(planning_horizon - 0.5, color="orange", linestyle="--", label="planning horizon")
    ax.set_yticks(range(sequence.num_actions))
    ax.set_yticklabels(ACTION_COLUMNS[:sequence.num_actions])
    ax.set_xlabel("Tick")
    ax.set_title("Action Sequence")
    ax.legend(loc="upper right")


def plot_trajectory(sequence: ActionSequence, model: ForwardModel, ax: plt.Axes) -> None:
    """
    Plot the simulated path of a sequence on a clone of the model.

    y is inverted so that screen coordinates read naturally.
    """
    clone = model.clone()
    xs, ys = [], []
    for tick in range(sequence.horizon):
        clone.advance(sequence.action_at(tick))
        x, y = clone.get_mario_float_pos()
        xs.append(x)
        ys.append(y)

    ax.plot(xs, ys, marker=".", color="purple")
    ax.invert_yaxis()
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.set_title(f"Simulated Trajectory ({clone.get_game_status().value})")
    ax.grid(True, alpha=0.3)


def plot_search_summary(
    sequence: ActionSequence,
    records: List[GenerationRecord],
    config: Dict,
    output_path: Path,
    model: Optional[ForwardModel] = None,
    figsize: Tuple[int, int] = (14, 10)
) -> None:
    """
    Save a multi-panel plot of one search.

    Panels:
    - Fitness per generation
    - Action heatmap of the chosen sequence
    - Simulated trajectory (when a model snapshot is given)

    Args:
        sequence: Chosen action sequence
        records: Search history
        config: Planner configuration
        output_path: Path to save PNG file
        model: Optional planning-time snapshot for the trajectory panel
        figsize: Figure size (width, height) in inches
    """
    rows = 3 if model is not None else 2
    fig, axes = plt.subplots(rows, 1, figsize=figsize)
    axes = np.atleast_1d(axes)

    plot_fitness_history(records, axes[0])
    plot_action_heatmap(sequence, config.get('planning_horizon', 40), axes[1])
    if model is not None:
        plot_trajectory(sequence, model, axes[2])

    plt.tight_layout()
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(str(output_path), dpi=150, bbox_inches='tight')
    plt.close(fig)

    print(f"  Saved visualization: {output_path}")
