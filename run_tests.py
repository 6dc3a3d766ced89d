#!/usr/bin/env python3
"""
Test runner for the evolutionary Mario planner
"""

import unittest
import sys
from pathlib import Path

# Add project root and test directories to path for imports
project_root = Path(__file__).parent
sys.path.append(str(project_root))
sys.path.append(str(project_root / "tests"))
sys.path.append(str(project_root / "tests" / "test_ga_planner"))

def run_all_tests():
    """Run all test modules"""
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    # Import test modules
    try:
        import test_level
        import test_operations
        import test_search
        import test_io_config

        # Add test modules to suite
        for module in (test_level, test_operations, test_search, test_io_config):
            suite.addTests(loader.loadTestsFromModule(module))

        # Run tests
        runner = unittest.TextTestRunner(verbosity=2)
        result = runner.run(suite)

        return result.wasSuccessful()

    except ImportError as e:
        print(f"Failed to import test modules: {e}")
        return False


def run_integration_test():
    """Play a short game on the reference level"""
    print("\n" + "=" * 50)
    print("INTEGRATION TEST")
    print("=" * 50)

    try:
        from sim_engine.config_loader import load_config, create_level_from_config
        from sim_engine.forward_model import GameStatus
        from sim_engine.game_loop import run_game, print_game_report
        from ga_planner.agent import EvolutionaryAgent

        print("Creating level from config...")
        model = create_level_from_config(load_config(str(project_root / "config.yaml")))
        start_completion = model.get_completion_percentage()

        print("Playing 80 ticks with a reduced search...")
        agent = EvolutionaryAgent({'num_generations': 5, 'num_action_sequences': 30}, seed=1)
        result = run_game(agent, model, max_ticks=80)
        print_game_report(result)

        # Basic validation
        success = (
            result.ticks > 0 and
            len(result.actions) == result.ticks and
            result.completion > start_completion and
            result.status != GameStatus.RUNNING
        )

        if success:
            print("✓ Integration test PASSED")
        else:
            print("✗ Integration test FAILED")

        return success

    except Exception as e:
        print(f"✗ Integration test FAILED: {e}")
        import traceback
        traceback.print_exc()
        return False


if __name__ == "__main__":
    print("Running Evolutionary Planner Tests")
    print("=" * 60)

    # Run unit tests
    print("Running unit tests...")
    unit_success = run_all_tests()

    # Run integration test
    integration_success = run_integration_test()

    # Summary
    print("\n" + "=" * 60)
    print("TEST SUMMARY")
    print("=" * 60)
    print(f"Unit tests: {'PASSED' if unit_success else 'FAILED'}")
    print(f"Integration test: {'PASSED' if integration_success else 'FAILED'}")

    overall_success = unit_success and integration_success
    print(f"Overall: {'PASSED' if overall_success else 'FAILED'}")

    sys.exit(0 if overall_success else 1)
