#!/usr/bin/env python3
"""
Evolutionary Mario Planner

Main entry point: plays the reference level with the evolutionary agent.
Supports a single game or several seeded trials for comparison.
"""

import sys
import argparse
import time
from pathlib import Path

# Add current directory to path for imports
sys.path.append(str(Path(__file__).parent))

from sim_engine.config_loader import (
    load_config,
    create_level_from_config,
    get_game_config,
    print_config_summary,
    validate_config,
    ConfigurationError
)
from sim_engine.game_loop import run_game, print_game_report
from ga_planner.agent import EvolutionaryAgent
from ga_planner.config import load_planner_config, resolve_planner_config
from ga_planner.io_utils import save_actions_to_csv


def build_planner_config(planner_config_path=None, generations=None):
    """Load planner parameters, applying command-line overrides"""
    if planner_config_path and Path(planner_config_path).exists():
        planner_config = load_planner_config(planner_config_path)
    else:
        planner_config = resolve_planner_config()

    if generations is not None:
        planner_config = resolve_planner_config({**planner_config, 'num_generations': generations})
    return planner_config


def run_single_game(config_path="config.yaml", planner_config_path="planner_config.yaml",
                    seed=None, generations=None, output_name=None, show_summary=True):
    """Play one game and print the report"""
    if show_summary:
        print("=" * 60)
        print("EVOLUTIONARY MARIO PLANNER")
        print("=" * 60)
        print_config_summary(config_path)

    config = load_config(config_path)
    issues = validate_config(config)
    if issues:
        raise ConfigurationError("; ".join(issues))

    game_config = get_game_config(config)
    planner_config = build_planner_config(planner_config_path, generations)

    model = create_level_from_config(config)
    agent = EvolutionaryAgent(planner_config, seed=seed)

    print("\nPlaying level...")
    result = run_game(
        agent,
        model,
        max_ticks=game_config['max_ticks'],
        tick_budget_ms=game_config['tick_budget_ms'],
        verbose=game_config['verbose']
    )

    print()
    print_game_report(result)
    print(f"Plans computed: {agent.plans_computed}")
    print(f"Last search: {agent.last_planning_ms:.1f} ms")

    if output_name is None:
        output_name = f"game_{int(time.time())}"

    print(f"\nExporting played actions as '{output_name}.csv'...")
    try:
        file_path = save_actions_to_csv(result.actions, Path("output") / f"{output_name}.csv", overwrite=True)
        print(f"  ✓ CSV: {file_path}")
    except OSError as e:
        print(f"  ✗ CSV: Failed - {e}")

    return agent, result


def run_multiple_trials(num_trials=5, config_path="config.yaml",
                        planner_config_path="planner_config.yaml", generations=None):
    """Play several games with different seeds for comparison"""
    print("=" * 60)
    print(f"RUNNING {num_trials} TRIALS")
    print("=" * 60)

    results = []

    for trial in range(num_trials):
        print(f"\n--- Trial {trial + 1}/{num_trials} ---")
        seed = trial + 1
        print(f"Using random seed: {seed}")

        agent, result = run_single_game(
            config_path,
            planner_config_path,
            seed=seed,
            generations=generations,
            output_name=f"game_trial_{trial + 1}_seed_{seed}",
            show_summary=False
        )
        results.append({
            'trial': trial + 1,
            'seed': seed,
            'status': result.status.value,
            'completion': result.completion,
            'ticks': result.ticks,
            'plans': agent.plans_computed
        })

    print("\n" + "=" * 60)
    print("TRIAL SUMMARY")
    print("=" * 60)
    print("Trial | Seed | Status   | Completion | Ticks | Plans")
    print("------|------|----------|------------|-------|------")

    for r in results:
        print(f"{r['trial']:5} | {r['seed']:4} | {r['status']:8} | {r['completion']:10.1%} | "
              f"{r['ticks']:5} | {r['plans']:5}")

    if results:
        wins = sum(1 for r in results if r['status'] == 'win')
        completions = [r['completion'] for r in results]
        print(f"\nWins: {wins}/{len(results)}")
        print(f"Average completion: {sum(completions) / len(completions):.1%}")


def main():
    """Main entry point with command-line argument parsing"""
    parser = argparse.ArgumentParser(
        description="Evolutionary Mario Planner - play the reference level",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 main.py                               # One game with default configs
  python3 main.py --seed 7                      # Reproducible game
  python3 main.py --generations 10              # Lighter search per plan
  python3 main.py --trials 5                    # Several seeded games
  python3 main.py --config custom_level.yaml    # Custom level file
        """
    )

    parser.add_argument(
        '--config', '-c',
        default='config.yaml',
        help='Level configuration file path (default: config.yaml)'
    )

    parser.add_argument(
        '--planner-config', '-p',
        default='planner_config.yaml',
        help='Planner configuration file path (default: planner_config.yaml)'
    )

    parser.add_argument(
        '--seed', '-s',
        type=int,
        help='Random seed for the planner'
    )

    parser.add_argument(
        '--generations', '-g',
        type=int,
        metavar='N',
        help='Override the number of generations per search'
    )

    parser.add_argument(
        '--trials', '-t',
        type=int,
        metavar='N',
        help='Play N seeded games for comparison'
    )

    parser.add_argument(
        '--output-name', '-n',
        type=str,
        metavar='NAME',
        help='Base name for the played actions CSV (default: game_TIMESTAMP)'
    )

    args = parser.parse_args()

    try:
        if args.trials:
            run_multiple_trials(args.trials, args.config, args.planner_config, args.generations)
        else:
            run_single_game(args.config, args.planner_config, seed=args.seed,
                            generations=args.generations, output_name=args.output_name)

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
