"""
Generational search driver for the evolutionary planner.

Runs a fixed-effort genetic algorithm from the planning-time snapshot:
random population, then num_generations rounds of evaluate, select elites,
breed and mutate, followed by one final evaluation to pick the plan.
"""

from typing import Dict, List, Optional, Tuple
from datetime import datetime
import numpy as np

from sim_engine.forward_model import ForwardModel

from .data_models import ActionSequence, GenerationRecord
from .evaluator import evaluate_population
from .population import random_population, select_top
from .crossover import breed
from .mutation import mutate


def next_population(
    population: List[ActionSequence],
    elite_indices: List[int],
    config: Dict,
    rng: np.random.Generator
) -> List[ActionSequence]:
    """
    Build the next generation from the elites.

    Elites are carried over unmodified; the rest of the population is filled
    with mutated children of two elites drawn uniformly with replacement.

    Args:
        population: Current population
        elite_indices: Slots selected as elites, best first
        config: Planner configuration
        rng: Random number generator

    Returns:
        New population of num_action_sequences sequences
    """
    size = config.get('num_action_sequences', 100)
    elites = [population[i] for i in elite_indices]

    new_population = list(elites)
    while len(new_population) < size:
        parent_a = elites[rng.integers(0, len(elites))]
        parent_b = elites[rng.integers(0, len(elites))]
        child = breed(parent_a, parent_b, rng)
        mutate(child, config, rng)
        new_population.append(child)

    return new_population


def evolve_generation(
    population: List[ActionSequence],
    model: ForwardModel,
    config: Dict,
    rng: np.random.Generator
) -> Tuple[List[ActionSequence], List[float], List[int]]:
    """
    Run one evaluate, select, breed and mutate cycle.

    Args:
        population: Current population
        model: Planning-time snapshot (cloned per evaluation, never advanced)
        config: Planner configuration
        rng: Random number generator

    Returns:
        Tuple of (new_population, fitness_scores, elite_indices) where the
        scores and elite indices refer to the input population
    """
    fitness_scores = evaluate_population(population, model, config)
    elite_indices = select_top(fitness_scores, config.get('top_selection_size', 10))
    new_population = next_population(population, elite_indices, config, rng)
    return new_population, fitness_scores, elite_indices


def select_final(
    population: List[ActionSequence],
    fitness_scores: List[float]
) -> Tuple[ActionSequence, float]:
    """
    Pick the sequence with the strictly highest fitness (first on ties).

    Returns:
        Tuple of (best_sequence, best_fitness)
    """
    best_sequence = population[0]
    best_fitness = fitness_scores[0]
    for sequence, fitness in zip(population[1:], fitness_scores[1:]):
        if fitness > best_fitness:
            best_sequence = sequence
            best_fitness = fitness
    return best_sequence, best_fitness


def calculate_best_action_sequence(
    model: ForwardModel,
    config: Dict,
    rng: np.random.Generator,
    history: Optional[List[GenerationRecord]] = None,
    initial_population: Optional[List[ActionSequence]] = None
) -> ActionSequence:
    """
    Search for the best action sequence from the given snapshot.

    Every evaluation in this call clones the same snapshot, so lookahead is
    always relative to the state at planning time.

    Args:
        model: Planning-time snapshot of the game
        config: Planner configuration
        rng: Random number generator
        history: Optional list that receives one GenerationRecord per scored
            generation, including the final pass
        initial_population: Optional starting population (defaults to a
            random one)

    Returns:
        Best ActionSequence found, of length planning_horizon + safety_frames
    """
    num_generations = config.get('num_generations', 30)
    verbose = config.get('verbose', False)

    if initial_population is None:
        population = random_population(config, rng)
    else:
        population = list(initial_population)

    for generation in range(num_generations):
        population, fitness_scores, elite_indices = evolve_generation(
            population, model, config, rng
        )

        if history is not None or verbose:
            record = GenerationRecord.from_scores(generation, fitness_scores, elite_indices)
            record.timestamp = datetime.now().isoformat()
            if history is not None:
                history.append(record)
            if verbose:
                print(f"  Generation {generation + 1}/{num_generations}: "
                      f"best={record.best_fitness:.2f} mean={record.mean_fitness:.2f}")

    fitness_scores = evaluate_population(population, model, config)
    best_sequence, best_fitness = select_final(population, fitness_scores)

    if history is not None:
        record = GenerationRecord.from_scores(num_generations, fitness_scores)
        record.timestamp = datetime.now().isoformat()
        history.append(record)

    if verbose:
        print(f"  Selected plan: fitness={best_fitness:.2f}")

    return best_sequence
