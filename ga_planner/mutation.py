"""
Mutation operators for the evolutionary planner.

Implements single-button flip mutation: each tick independently has a
mutation_rate chance of having exactly one of its buttons toggled.
"""

from typing import Dict, List, Tuple
import numpy as np

from .data_models import ActionSequence


def flip_mutation(
    sequence: ActionSequence,
    mutation_rate: float,
    rng: np.random.Generator
) -> List[Tuple[int, int]]:
    """
    Flip at most one button per tick, in place.

    Args:
        sequence: Sequence to mutate (modified in place)
        mutation_rate: Per-tick probability of a flip
        rng: Random number generator

    Returns:
        List of (tick, button) positions that were flipped
    """
    horizon, num_actions = sequence.actions.shape

    ticks = np.flatnonzero(rng.random(horizon) < mutation_rate)
    buttons = rng.integers(0, num_actions, size=len(ticks))
    sequence.actions[ticks, buttons] = ~sequence.actions[ticks, buttons]

    return list(zip(ticks.tolist(), buttons.tolist()))


def mutate(
    sequence: ActionSequence,
    config: Dict,
    rng: np.random.Generator
) -> List[Tuple[int, int]]:
    """
    Apply flip mutation with the configured mutation_rate.

    Args:
        sequence: Sequence to mutate (modified in place)
        config: Planner configuration
        rng: Random number generator

    Returns:
        List of (tick, button) positions that were flipped
    """
    mutation_rate = config.get('mutation_rate', 0.2)
    return flip_mutation(sequence, mutation_rate, rng)
