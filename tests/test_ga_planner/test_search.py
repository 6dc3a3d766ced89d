"""
Tests for the simulation evaluator, the search driver and the plan executor.

Covers fitness shaping against scripted models, elitism, determinism under a
fixed seed, and the per-tick behaviour of the evolutionary agent.
"""

import unittest
import numpy as np

from sim_engine.forward_model import GameStatus, MarioTimer
from sim_engine.level import LevelLayout, LevelForwardModel
from ga_planner.agent import EvolutionaryAgent
from ga_planner.config import resolve_planner_config
from ga_planner.data_models import ActionSequence
from ga_planner.evaluator import evaluate_fitness, evaluate_population, simulate_sequence
from ga_planner.population import random_population
from ga_planner.search import (
    calculate_best_action_sequence,
    evolve_generation,
    select_final,
)

from scripted_models import ScriptedModel


SMALL_CONFIG = {
    'planning_horizon': 10,
    'safety_frames': 5,
    'num_action_sequences': 12,
    'top_selection_size': 3,
    'mutation_rate': 0.2,
    'num_generations': 4,
}


class TestEvaluator(unittest.TestCase):
    """Test fitness shaping on scripted models."""

    def setUp(self):
        self.config = resolve_planner_config()
        self.sequence = ActionSequence.random(60, np.random.default_rng(1))

    def test_win_bonus_and_early_stop(self):
        """A win on tick 5 adds the bonus and stops the rollout."""
        model = ScriptedModel(win_at=5, y=50.0)

        result = simulate_sequence(self.sequence, model, self.config)

        self.assertEqual(model.advance_calls, 5)
        self.assertEqual(result.ticks_simulated, 5)
        self.assertEqual(result.status, GameStatus.WIN)
        self.assertGreaterEqual(result.fitness, 10000 + result.completion * 100)
        self.assertEqual(result.loss_penalties, 0)

    def test_loss_on_planning_horizon_tick_is_penalized_twice(self):
        """Losing on the tick indexed planning_horizon costs the penalty twice."""
        model = ScriptedModel(lose_at=41, y=0.0)

        result = simulate_sequence(self.sequence, model, self.config)

        self.assertEqual(result.loss_penalties, 2)
        self.assertEqual(result.ticks_simulated, 41)
        self.assertAlmostEqual(result.fitness, -2000000.0 + result.completion * 100)

    def test_loss_before_planning_horizon(self):
        """Losing inside the committed horizon costs the penalty once."""
        model = ScriptedModel(lose_at=40, y=0.0)

        result = simulate_sequence(self.sequence, model, self.config)

        self.assertEqual(result.loss_penalties, 1)
        self.assertLessEqual(result.fitness, -1000000.0 + 100.0)

    def test_loss_in_safety_frames(self):
        """A loss only in the lookahead tail is penalized once."""
        model = ScriptedModel(lose_at=55, y=0.0)

        result = simulate_sequence(self.sequence, model, self.config)

        self.assertEqual(result.loss_penalties, 1)
        self.assertEqual(result.ticks_simulated, 55)

    def test_height_shaping(self):
        """Without a terminal state the score is completion plus height shaping."""
        model = ScriptedModel(y=50.0, completion_per_tick=0.0, start_completion=0.5)

        result = simulate_sequence(self.sequence, model, self.config)

        # 0.5 * 100 = 50; shaping = (50 / 100) * (50 * 0.001)
        self.assertEqual(result.ticks_simulated, 60)
        self.assertAlmostEqual(result.mean_y, 50.0)
        self.assertAlmostEqual(result.fitness, 50.025)

    def test_evaluation_is_idempotent(self):
        """Two clones of the same snapshot give the same fitness."""
        model = LevelForwardModel()

        first = evaluate_fitness(self.sequence, model.clone(), self.config)
        second = evaluate_fitness(self.sequence, model.clone(), self.config)

        self.assertEqual(first, second)

    def test_population_evaluation_leaves_snapshot_untouched(self):
        """Scoring a population never advances the snapshot."""
        model = LevelForwardModel()
        population = random_population(resolve_planner_config(SMALL_CONFIG), np.random.default_rng(3))

        scores = evaluate_population(population, model, SMALL_CONFIG)

        self.assertEqual(len(scores), len(population))
        self.assertEqual(model.tick, 0)
        self.assertEqual(model.get_mario_float_pos(), (16.0, 200.0))


class TestSearchDriver(unittest.TestCase):
    """Test the generational search."""

    def setUp(self):
        self.config = resolve_planner_config(SMALL_CONFIG)
        self.model = LevelForwardModel()

    def test_elites_survive_unmodified(self):
        """Every elite appears unmodified in the next population."""
        rng = np.random.default_rng(5)
        population = random_population(self.config, rng)
        snapshots = [s.actions.copy() for s in population]

        new_population, scores, elite_indices = evolve_generation(
            population, self.model, self.config, rng
        )

        self.assertEqual(len(new_population), self.config['num_action_sequences'])
        self.assertEqual(len(scores), len(population))
        self.assertEqual(len(elite_indices), self.config['top_selection_size'])
        for slot, index in enumerate(elite_indices):
            np.testing.assert_array_equal(new_population[slot].actions, snapshots[index])

    def test_result_length(self):
        """The returned plan covers planning horizon plus safety frames."""
        best = calculate_best_action_sequence(self.model, self.config, np.random.default_rng(0))
        self.assertEqual(best.actions.shape, (15, 5))

    def test_no_regression_over_initial_population(self):
        """The chosen plan scores at least as well as every initial sequence."""
        rng = np.random.default_rng(11)
        initial = random_population(self.config, rng)
        initial_scores = evaluate_population(initial, self.model, self.config)

        best = calculate_best_action_sequence(
            self.model, self.config, rng, initial_population=[s.copy() for s in initial]
        )
        best_score = evaluate_fitness(best, self.model.clone(), self.config)

        self.assertGreaterEqual(best_score, max(initial_scores))

    def test_history_records(self):
        """History gets one record per generation plus the final pass."""
        history = []
        calculate_best_action_sequence(self.model, self.config, np.random.default_rng(2), history=history)

        self.assertEqual(len(history), self.config['num_generations'] + 1)
        self.assertEqual([r.generation for r in history], list(range(self.config['num_generations'] + 1)))
        for record in history[:-1]:
            self.assertEqual(len(record.elite_indices), self.config['top_selection_size'])
        self.assertEqual(history[-1].elite_indices, [])

    def test_best_fitness_never_drops(self):
        """With elitism the best fitness per generation is non-decreasing."""
        history = []
        calculate_best_action_sequence(self.model, self.config, np.random.default_rng(9), history=history)

        best = [r.best_fitness for r in history]
        for earlier, later in zip(best, best[1:]):
            self.assertGreaterEqual(later, earlier)

    def test_fixed_seed_is_reproducible(self):
        """The same seed gives the same plan."""
        first = calculate_best_action_sequence(self.model, self.config, np.random.default_rng(123))
        second = calculate_best_action_sequence(self.model, self.config, np.random.default_rng(123))

        self.assertTrue(first.same_actions(second))

    def test_zero_generations_returns_initial_member(self):
        """Without generations the best initial sequence is returned."""
        config = resolve_planner_config({**SMALL_CONFIG, 'num_generations': 0})
        rng = np.random.default_rng(4)
        initial = random_population(config, rng)

        best = calculate_best_action_sequence(self.model, config, rng, initial_population=initial)

        self.assertTrue(any(best is s for s in initial))

    def test_select_final_first_on_ties(self):
        """Ties in the final pass go to the first sequence."""
        population = [ActionSequence.empty(3) for _ in range(3)]
        best, fitness = select_final(population, [1.0, 2.0, 2.0])

        self.assertIs(best, population[1])
        self.assertEqual(fitness, 2.0)


class TestEvolutionaryAgent(unittest.TestCase):
    """Test the plan executor."""

    def setUp(self):
        self.timer = MarioTimer(30.0)

    def test_agent_name(self):
        self.assertEqual(EvolutionaryAgent(SMALL_CONFIG).get_agent_name(), "EvolutionaryMarioAgent")

    def test_initialize_clears_plan(self):
        """initialize() returns the agent to the no-plan state."""
        agent = EvolutionaryAgent(SMALL_CONFIG, seed=1)
        model = LevelForwardModel()
        agent.get_actions(model, self.timer)

        agent.initialize(model, self.timer)

        self.assertIsNone(agent.best_action_sequence)
        self.assertEqual(agent.current_tick_in_plan, 0)
        self.assertEqual(agent.plans_computed, 0)

    def test_move_right_near_completion(self):
        """Completion above 0.99 always means move right."""
        agent = EvolutionaryAgent(SMALL_CONFIG, seed=1)
        agent.initialize(None, self.timer)
        model = ScriptedModel(start_completion=0.995)

        self.assertEqual(agent.get_actions(model, self.timer), [False, True, False, False, False])
        self.assertEqual(agent.plans_computed, 0)

    def test_move_right_overrides_committed_plan(self):
        """The override applies even while a plan is being played back."""
        agent = EvolutionaryAgent(SMALL_CONFIG, seed=1)
        agent.initialize(None, self.timer)
        agent.get_actions(LevelForwardModel(), self.timer)
        cursor = agent.current_tick_in_plan

        action = agent.get_actions(ScriptedModel(start_completion=0.995), self.timer)

        self.assertEqual(action, [False, True, False, False, False])
        self.assertEqual(agent.current_tick_in_plan, cursor)

    def test_move_right_on_win(self):
        """A won game also means move right."""
        agent = EvolutionaryAgent(SMALL_CONFIG, seed=1)
        model = ScriptedModel(status=GameStatus.WIN)

        self.assertEqual(agent.get_actions(model, self.timer), [False, True, False, False, False])

    def test_plan_playback_and_replanning(self):
        """A three-tick plan is played in order, then the fourth call replans."""
        config = {**SMALL_CONFIG, 'planning_horizon': 3, 'safety_frames': 2}
        agent = EvolutionaryAgent(config, seed=8)
        agent.initialize(None, self.timer)
        model = LevelForwardModel()

        actions = [agent.get_actions(model, self.timer) for _ in range(3)]
        plan = agent.best_action_sequence

        self.assertEqual(agent.plans_computed, 1)
        for tick, action in enumerate(actions):
            self.assertEqual(action, plan.action_at(tick))
        self.assertEqual(agent.current_tick_in_plan, 3)

        agent.get_actions(model, self.timer)

        self.assertEqual(agent.plans_computed, 2)
        self.assertEqual(agent.current_tick_in_plan, 1)

    def test_plan_cursor_bounds(self):
        """The cursor stays within [0, planning_horizon]."""
        agent = EvolutionaryAgent(SMALL_CONFIG, seed=2)
        agent.initialize(None, self.timer)
        model = LevelForwardModel()

        for _ in range(25):
            agent.get_actions(model, self.timer)
            self.assertGreaterEqual(agent.current_tick_in_plan, 0)
            self.assertLessEqual(agent.current_tick_in_plan, SMALL_CONFIG['planning_horizon'])

        self.assertEqual(agent.plans_computed, 3)

    def test_agent_never_mutates_model(self):
        """Planning works on clones only."""
        agent = EvolutionaryAgent(SMALL_CONFIG, seed=3)
        model = LevelForwardModel()

        agent.get_actions(model, self.timer)

        self.assertEqual(model.tick, 0)
        self.assertEqual(model.get_game_status(), GameStatus.RUNNING)

    def test_seeded_agents_agree(self):
        """Two agents with the same seed choose the same actions."""
        model = LevelForwardModel(LevelLayout(gaps=()))
        first = EvolutionaryAgent(SMALL_CONFIG, seed=21)
        second = EvolutionaryAgent(SMALL_CONFIG, seed=21)
        first.initialize(model, self.timer)
        second.initialize(model, self.timer)

        for _ in range(12):
            self.assertEqual(first.get_actions(model, self.timer),
                             second.get_actions(model, self.timer))


if __name__ == '__main__':
    unittest.main()
