"""
Orchestration module for the evolutionary planner.

Implements the plan and play run modes.
"""

from typing import Dict, Any, Tuple
from pathlib import Path
import numpy as np

from sim_engine.config_loader import load_config, create_level_from_config, get_game_config
from sim_engine.game_loop import run_game, print_game_report

from .agent import EvolutionaryAgent
from .config import load_planner_config, resolve_planner_config
from .data_models import GenerationRecord
from .evaluator import simulate_sequence
from .io_utils import (
    create_output_directory,
    save_action_sequence_to_csv,
    save_actions_to_csv,
    save_search_history
)
from .search import calculate_best_action_sequence


def _load_configs(run_config: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Load level config and planner config referenced by a run config."""
    level_config_path = run_config.get('level_config', 'config.yaml')
    print(f"Loading level config from: {level_config_path}")
    level_config = load_config(level_config_path)

    planner_config_path = run_config.get('planner_config')
    if planner_config_path:
        print(f"Loading planner config from: {planner_config_path}")
        planner_config = load_planner_config(planner_config_path)
    else:
        planner_config = resolve_planner_config()

    # Inline overrides win over the planner config file
    overrides = dict(run_config.get('planner', {}))
    if run_config.get('random_seed') is not None:
        overrides['random_seed'] = run_config['random_seed']
    planner_config = resolve_planner_config({**planner_config, **overrides})

    return level_config, planner_config


def _resolve_seed(planner_config: Dict[str, Any]) -> int:
    seed = planner_config.get('random_seed')
    if seed is None:
        seed = int(np.random.randint(0, 2**31))
    print(f"Random seed: {seed}")
    return seed


def run_plan_mode(run_config: Dict) -> None:
    """
    Run one search from the level's initial state.

    Args:
        run_config: Run configuration dict from YAML

    Algorithm:
        1. Load level config and planner config
        2. Setup RNG
        3. Build the level model at its starting state
        4. Create output directory: run_config['output']['root']
        5. Run calculate_best_action_sequence with history recording
        6. Re-evaluate the chosen plan and print its rollout summary
        7. Save best_plan.csv and search_history.csv (and a plot if requested)

    Returns:
        None (writes to disk)
    """
    print("=" * 70)
    print("PLAN MODE")
    print("=" * 70)

    level_config, planner_config = _load_configs(run_config)
    seed = _resolve_seed(planner_config)
    rng = np.random.default_rng(seed)

    model = create_level_from_config(level_config)

    overwrite = run_config['output'].get('overwrite', False)
    output_root = create_output_directory(run_config['output']['root'], overwrite=overwrite)
    print(f"Output directory: {output_root}\n")

    print(f"Searching: {planner_config['num_generations']} generations x "
          f"{planner_config['num_action_sequences']} sequences...")
    history: list[GenerationRecord] = []
    best = calculate_best_action_sequence(model, planner_config, rng, history=history)

    evaluation = simulate_sequence(best, model.clone(), planner_config)

    plan_path = save_action_sequence_to_csv(best, output_root / 'best_plan.csv', overwrite=overwrite)
    history_path = save_search_history(history, output_root / 'search_history.csv')

    if run_config['output'].get('plot', False):
        from .visualization_utils import plot_search_summary
        plot_search_summary(best, history, planner_config, output_root / 'search_summary.png', model=model)

    print()
    print("=" * 70)
    print("SUMMARY")
    print("=" * 70)
    print(f"Best fitness: {evaluation.fitness:.2f}")
    print(f"Rollout status: {evaluation.status.value}")
    print(f"Ticks simulated: {evaluation.ticks_simulated}")
    print(f"Completion: {evaluation.completion:.1%}")
    print(f"Best plan: {plan_path}")
    print(f"Search history: {history_path}")


def run_play_mode(run_config: Dict) -> None:
    """
    Play the whole level with the evolutionary agent.

    Args:
        run_config: Run configuration dict from YAML

    Algorithm:
        1. Load level config and planner config
        2. Build the live level model and the agent
        3. Run the game loop until a terminal status or max_ticks
        4. Print the game report and save the executed actions

    Returns:
        None (writes to disk)
    """
    print("=" * 70)
    print("PLAY MODE")
    print("=" * 70)

    level_config, planner_config = _load_configs(run_config)
    seed = _resolve_seed(planner_config)

    game_config = get_game_config(level_config)
    game_config.update(run_config.get('game', {}))

    output_root = create_output_directory(
        run_config['output']['root'],
        overwrite=run_config['output'].get('overwrite', False)
    )
    print(f"Output directory: {output_root}\n")

    model = create_level_from_config(level_config)
    agent = EvolutionaryAgent(planner_config, seed=seed)

    print(f"Playing up to {game_config['max_ticks']} ticks...")
    result = run_game(
        agent,
        model,
        max_ticks=game_config['max_ticks'],
        tick_budget_ms=game_config['tick_budget_ms'],
        verbose=game_config['verbose']
    )

    actions_path = save_actions_to_csv(
        result.actions,
        Path(output_root) / 'played_actions.csv',
        overwrite=run_config['output'].get('overwrite', False)
    )

    print()
    print_game_report(result)
    print(f"Plans computed: {agent.plans_computed}")
    print(f"Played actions: {actions_path}")
