"""
SARSA agent tests: table ownership, greedy lookahead, epsilon-greedy choice,
the TD update, exploration decay and parameter validation.
"""

import math

import numpy as np
import pytest

from gridworld_sarsa import EPSILON_DECAY_RATE, Action, GridWorld, SARSAAgent


class TestValueTable:
    def test_initialized_to_zero(self, make_agent):
        agent = make_agent()
        table = agent.report()
        assert table.shape == (5, 5)
        assert np.all(table == 0.0)

    def test_report_is_a_copy(self, make_agent):
        agent = make_agent()
        table = agent.report()
        table[0, 0] = 42.0
        assert agent.value(0) == 0.0

    def test_table_follows_grid_size(self):
        agent = SARSAAgent(GridWorld(size=3), seed=0)
        assert agent.report().shape == (3, 3)


class TestUpdate:
    def test_reward_increases_value(self, make_agent):
        agent = make_agent(learning_rate=0.5, gamma=0.9)
        before = agent.value(23)

        agent.update(23, Action.RIGHT, 1.0, 24, Action.UP)

        assert agent.value(23) > before

    def test_update_rule(self, make_agent):
        agent = make_agent(learning_rate=0.5, gamma=0.9)
        agent.update(23, Action.RIGHT, 1.0, 24, Action.UP)
        assert agent.value(23) == pytest.approx(0.5)

        # V(22) <- 0 + 0.5 * (0 + 0.9 * 0.5 - 0)
        agent.update(22, Action.RIGHT, 0.0, 23, Action.RIGHT)
        assert agent.value(22) == pytest.approx(0.225)

        # V(23) <- 0.5 + 0.5 * (1 + 0 - 0.5)
        agent.update(23, Action.RIGHT, 1.0, 24, Action.DOWN)
        assert agent.value(23) == pytest.approx(0.75)

    def test_actions_do_not_index_the_table(self, make_agent):
        agent_a = make_agent()
        agent_b = make_agent()

        agent_a.update(23, Action.RIGHT, 1.0, 24, Action.UP)
        agent_b.update(23, Action.LEFT, 1.0, 24, Action.DOWN)

        np.testing.assert_array_equal(agent_a.report(), agent_b.report())

    def test_only_current_state_changes(self, make_agent):
        agent = make_agent()
        agent.update(18, Action.DOWN, 1.0, 23, Action.RIGHT)

        table = agent.report()
        assert table[3, 3] == pytest.approx(0.5)
        assert np.count_nonzero(table) == 1

    def test_values_stay_bounded(self, make_agent):
        agent = make_agent(learning_rate=0.9, gamma=1.0)
        for _ in range(1000):
            agent.update(23, Action.RIGHT, 1.0, 24, Action.RIGHT)
            agent.update(22, Action.RIGHT, 0.0, 23, Action.RIGHT)
        table = agent.report()
        assert np.all(np.isfinite(table))
        assert table.max() <= 1.0 + 1e-12


class TestBestAction:
    def test_tie_breaks_to_up(self, make_agent):
        agent = make_agent()
        assert agent.best_action(12) == Action.UP

    def test_picks_highest_next_state(self, make_agent):
        agent = make_agent()
        agent.update(23, Action.RIGHT, 1.0, 24, Action.UP)
        # from 22, RIGHT leads to 23
        assert agent.best_action(22) == Action.RIGHT
        # from 18, DOWN leads to 23
        assert agent.best_action(18) == Action.DOWN

    def test_later_equal_values_do_not_override(self, make_agent):
        agent = make_agent()
        # 13 (RIGHT of 12) and 17 (DOWN of 12) get the same value
        agent.update(13, Action.UP, 1.0, 24, Action.UP)
        agent.update(17, Action.UP, 1.0, 24, Action.UP)
        assert agent.best_action(12) == Action.DOWN

    def test_returns_action_enum(self, make_agent):
        assert isinstance(make_agent().best_action(0), Action)


class TestChooseAction:
    def test_zero_epsilon_is_greedy(self, make_agent):
        agent = make_agent(epsilon=0.0)
        agent.update(23, Action.RIGHT, 1.0, 24, Action.UP)
        for _ in range(50):
            assert agent.choose_action(22) == Action.RIGHT

    def test_full_epsilon_explores_every_action(self, make_agent):
        agent = make_agent(epsilon=1.0)
        actions = {agent.choose_action(12) for _ in range(500)}
        assert actions == set(Action)

    def test_same_seed_same_choices(self, make_agent):
        agent_a = make_agent(epsilon=0.5, seed=123)
        agent_b = make_agent(epsilon=0.5, seed=123)
        choices_a = [agent_a.choose_action(s % 25) for s in range(200)]
        choices_b = [agent_b.choose_action(s % 25) for s in range(200)]
        assert choices_a == choices_b

    def test_injected_generator_is_used(self, grid):
        rng_a = np.random.default_rng(5)
        rng_b = np.random.default_rng(5)
        agent_a = SARSAAgent(grid, epsilon=1.0, rng=rng_a)
        agent_b = SARSAAgent(grid, epsilon=1.0, rng=rng_b)

        assert agent_a.rng is rng_a
        assert [agent_a.choose_action(0) for _ in range(50)] == [
            agent_b.choose_action(0) for _ in range(50)
        ]


class TestExplorationDecay:
    def test_decay_matches_closed_form(self, make_agent):
        agent = make_agent(epsilon=0.8)
        for k in range(1, 51):
            agent.decay_exploration_rate()
            assert agent.epsilon == pytest.approx(0.8 * EPSILON_DECAY_RATE**k)

    def test_decay_is_monotone_and_bounded(self, make_agent):
        agent = make_agent(epsilon=0.3)
        previous = agent.epsilon
        for _ in range(500):
            agent.decay_exploration_rate()
            assert 0.0 <= agent.epsilon <= previous <= 0.3
            previous = agent.epsilon

    def test_zero_epsilon_stays_zero(self, make_agent):
        agent = make_agent(epsilon=0.0)
        agent.decay_exploration_rate()
        assert agent.epsilon == 0.0


class TestValidation:
    @pytest.mark.parametrize("learning_rate", [0.0, -0.1, 1.5, math.nan, math.inf])
    def test_rejects_bad_learning_rate(self, make_agent, learning_rate):
        with pytest.raises(ValueError, match="learning_rate"):
            make_agent(learning_rate=learning_rate)

    @pytest.mark.parametrize("gamma", [-0.01, 1.01, math.nan])
    def test_rejects_bad_gamma(self, make_agent, gamma):
        with pytest.raises(ValueError, match="gamma"):
            make_agent(gamma=gamma)

    @pytest.mark.parametrize("epsilon", [-0.5, 2.0, "0.1", None])
    def test_rejects_bad_epsilon(self, make_agent, epsilon):
        with pytest.raises(ValueError, match="epsilon"):
            make_agent(epsilon=epsilon)

    def test_accepts_bounds(self, make_agent):
        agent = make_agent(learning_rate=1.0, gamma=0.0, epsilon=1.0)
        assert agent.learning_rate == 1.0
        assert agent.gamma == 0.0
        assert agent.epsilon == 1.0


class TestPolicy:
    def test_fresh_policy_is_all_up(self, make_agent):
        policy = make_agent().get_policy()
        assert policy.shape == (5, 5)
        assert np.all(policy == int(Action.UP))

    def test_policy_points_at_learned_value(self, make_agent):
        agent = make_agent()
        agent.update(23, Action.RIGHT, 1.0, 24, Action.UP)
        policy = agent.get_policy()
        assert policy[4, 2] == int(Action.RIGHT)
        assert policy[3, 3] == int(Action.DOWN)

    def test_print_statistics(self, make_agent, capsys):
        make_agent().print_statistics()
        out = capsys.readouterr().out
        assert "SARSAAgent VALUE TABLE STATISTICS" in out
        assert "Non-zero entries: 0 / 25" in out
