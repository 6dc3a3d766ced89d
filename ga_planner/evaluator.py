"""
Simulation evaluator for the evolutionary planner.

Rolls an action sequence forward on a model clone and shapes the outcome into
a scalar fitness: terminal bonus or penalty, forward progress, and a small
bonus tied to the mean vertical position.
"""

from typing import Dict

from sim_engine.forward_model import ForwardModel, GameStatus

from .data_models import ActionSequence, EvaluationResult


def simulate_sequence(
    sequence: ActionSequence,
    model: ForwardModel,
    config: Dict
) -> EvaluationResult:
    """
    Roll a sequence forward on a model and score it.

    The model is advanced in place; callers pass a clone they own, never the
    live game state.

    Scoring:
        1. Advance one tick per action vector, recording x and y.
        2. On tick == planning_horizon, a LOSE status costs loss_penalty.
        3. WIN adds win_bonus and stops the rollout.
        4. LOSE costs loss_penalty and stops the rollout. A loss first seen on
           the planning-horizon tick is therefore penalized twice.
        5. Add completion * completion_weight from the final state.
        6. Add ((mean_y - min_y_position) / y_position_scale) * (score * y_reward_fraction).

    Args:
        sequence: Actions to replay
        model: Model clone to advance (mutated)
        config: Planner configuration

    Returns:
        EvaluationResult with fitness and terminal observations
    """
    planning_horizon = config.get('planning_horizon', 40)
    win_bonus = config.get('win_bonus', 10000.0)
    loss_penalty = config.get('loss_penalty', 1000000.0)
    completion_weight = config.get('completion_weight', 100.0)
    min_y_position = config.get('min_y_position', 0.0)
    y_position_scale = config.get('y_position_scale', 100.0)
    y_reward_fraction = config.get('y_reward_fraction', 0.001)

    score = 0.0
    loss_penalties = 0
    x_positions = []
    total_y = 0.0
    ticks_simulated = 0

    for tick in range(sequence.horizon):
        model.advance(sequence.action_at(tick))
        ticks_simulated += 1

        x, y = model.get_mario_float_pos()
        x_positions.append(float(x))
        total_y += y

        status = model.get_game_status()

        if tick == planning_horizon and status == GameStatus.LOSE:
            score -= loss_penalty
            loss_penalties += 1

        if status == GameStatus.WIN:
            score += win_bonus
            break
        elif status == GameStatus.LOSE:
            score -= loss_penalty
            loss_penalties += 1
            break

    completion = model.get_completion_percentage()
    score += completion * completion_weight

    mean_y = total_y / ticks_simulated if ticks_simulated else 0.0
    max_reward = score * y_reward_fraction
    y_factor = (mean_y - min_y_position) / y_position_scale
    score += y_factor * max_reward

    return EvaluationResult(
        fitness=float(score),
        status=model.get_game_status(),
        ticks_simulated=ticks_simulated,
        completion=float(completion),
        mean_y=float(mean_y),
        x_positions=x_positions,
        loss_penalties=loss_penalties
    )


def evaluate_fitness(
    sequence: ActionSequence,
    model: ForwardModel,
    config: Dict
) -> float:
    """
    Fitness of a sequence rolled forward on the given model clone.

    Args:
        sequence: Actions to replay
        model: Model clone to advance (mutated)
        config: Planner configuration

    Returns:
        Scalar fitness
    """
    return simulate_sequence(sequence, model, config).fitness


def evaluate_population(
    population: list[ActionSequence],
    model: ForwardModel,
    config: Dict
) -> list[float]:
    """
    Score every sequence against its own clone of the same snapshot.

    Args:
        population: Sequences to score
        model: Planning-time snapshot; cloned once per sequence, never advanced
        config: Planner configuration

    Returns:
        Fitness scores indexed like the population
    """
    return [evaluate_fitness(sequence, model.clone(), config) for sequence in population]
