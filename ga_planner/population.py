"""
Population operators: random initialization and elite selection.
"""

from typing import Dict, List
import numpy as np

from .config import total_horizon
from .data_models import ActionSequence


def random_population(config: Dict, rng: np.random.Generator) -> List[ActionSequence]:
    """
    Create num_action_sequences independent random sequences.

    Args:
        config: Planner configuration
        rng: Random number generator

    Returns:
        List of random ActionSequences of length total_horizon(config)
    """
    horizon = total_horizon(config)
    num_actions = config.get('num_actions', 5)
    size = config.get('num_action_sequences', 100)
    return [ActionSequence.random(horizon, rng, num_actions) for _ in range(size)]


def select_best(fitness_scores: List[float], excluded: set) -> int:
    """
    Index of the highest score not in excluded.

    Scans in order and only replaces the current best on a strictly higher
    score, so ties go to the first index.
    """
    best_index = -1
    best_fitness = -np.inf
    for index, fitness in enumerate(fitness_scores):
        if index in excluded:
            continue
        if best_index == -1 or fitness > best_fitness:
            best_index = index
            best_fitness = fitness
    return best_index


def select_top(fitness_scores: List[float], k: int) -> List[int]:
    """
    Select the indices of the top k scores.

    Repeatedly takes the current maximum and marks it ineligible, so the
    result is in descending fitness order with first-index tie-breaks and
    never repeats an index.

    Args:
        fitness_scores: Scores indexed like the population
        k: Number of elites to select

    Returns:
        List of k distinct population indices

    Raises:
        ValueError: If k exceeds the number of scores
    """
    if k > len(fitness_scores):
        raise ValueError(f"Cannot select {k} elites from {len(fitness_scores)} scores")

    selected: List[int] = []
    excluded: set = set()
    for _ in range(k):
        best_index = select_best(fitness_scores, excluded)
        selected.append(best_index)
        excluded.add(best_index)
    return selected
