"""
Crossover operators for the evolutionary planner.

Implements uniform crossover at the finest granularity: every button on
every tick is inherited independently from one parent or the other.
"""

from typing import Tuple
import numpy as np

from .data_models import ActionSequence


def uniform_crossover(
    parent_a: ActionSequence,
    parent_b: ActionSequence,
    rng: np.random.Generator
) -> Tuple[ActionSequence, np.ndarray]:
    """
    Combine two parents with a per-tick, per-button coin flip.

    Args:
        parent_a: First parent
        parent_b: Second parent (same shape as parent_a)
        rng: Random number generator

    Returns:
        Tuple of (child_sequence, crossover_mask)
        where crossover_mask[t, j] is True when the child took parent_a's value

    Raises:
        ValueError: If the parents have different shapes
    """
    if parent_a.actions.shape != parent_b.actions.shape:
        raise ValueError(
            f"Parent shapes differ: {parent_a.actions.shape} vs {parent_b.actions.shape}"
        )

    crossover_mask = rng.random(parent_a.actions.shape) < 0.5
    child_actions = np.where(crossover_mask, parent_a.actions, parent_b.actions)

    child = ActionSequence(
        actions=child_actions,
        metadata={'origin': 'crossover'}
    )
    return child, crossover_mask


def breed(
    parent_a: ActionSequence,
    parent_b: ActionSequence,
    rng: np.random.Generator
) -> ActionSequence:
    """Produce one child from two parents by uniform crossover."""
    child, _ = uniform_crossover(parent_a, parent_b, rng)
    return child
