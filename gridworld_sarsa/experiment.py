import time
from typing import Optional, Tuple

import numpy as np
from tqdm import tqdm

from .agents_rl import EPSILON_DECAY_RATE, BaseRLAgent, SARSAAgent
from .config_exp import RLConfig
from .grid import Action, GridWorld

ACTION_SYMBOLS = {
    Action.UP: "^",
    Action.DOWN: "v",
    Action.LEFT: "<",
    Action.RIGHT: ">",
}


def run_episode(
    agent: BaseRLAgent, env: GridWorld, max_steps: Optional[int] = None
) -> Tuple[float, int]:
    """
    Train the agent for one episode using SARSA.

    Starts from a random cell and follows the agent's ε-greedy policy until the
    terminal cell is reached (or `max_steps` transitions have been taken), then
    decays the agent's exploration rate once.

    :param agent: Agent to train
    :param env: Grid environment
    :param max_steps: Optional step limit. None runs until the terminal cell
    :return: Tuple of (total reward, number of steps)
    """
    state, info = env.reset()
    action = agent.choose_action(state)

    episode_reward = 0.0
    steps = 0

    while not env.is_terminal(state):
        if max_steps is not None and steps >= max_steps:
            break

        next_state, reward, terminated, truncated, info = env.step(action)
        next_action = agent.choose_action(next_state)

        agent.update(state, action, reward, next_state, next_action)
        episode_reward += reward
        steps += 1

        state = next_state
        action = next_action

    agent.decay_exploration_rate()
    return episode_reward, steps


def train(
    agent: BaseRLAgent,
    env: GridWorld,
    n_episodes: int,
    max_steps: Optional[int] = None,
    seed: Optional[int] = None,
    verbose: bool = True,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Train the agent.

    :param agent: Agent to train
    :param env: Grid environment
    :param n_episodes: Number of training episodes
    :param max_steps: Optional step limit per episode
    :param seed: Seed for the environment's start-state generator
    :param verbose: Whether to show progress bar
    :return: Tuple of (episode rewards, episode lengths)
    """
    if seed is not None:
        env.reset(seed=seed)

    episode_rewards = []
    episode_lengths = []

    iterator = (
        tqdm(range(n_episodes), desc=f"Training {agent.__class__.__name__}")
        if verbose
        else range(n_episodes)
    )

    for episode in iterator:
        episode_reward, steps = run_episode(agent, env, max_steps)
        episode_rewards.append(episode_reward)
        episode_lengths.append(steps)

        if verbose and episode > 0 and episode % 10 == 0:
            recent_avg = np.mean(episode_lengths[-10:])
            iterator.set_postfix(
                {"avg_steps_10": f"{recent_avg:.1f}", "epsilon": f"{agent.epsilon:.3f}"}
            )

    return np.array(episode_rewards), np.array(episode_lengths)


def evaluate(
    agent: BaseRLAgent,
    env: GridWorld,
    n_episodes: int = 100,
    max_steps: Optional[int] = None,
    verbose: bool = True,
) -> Tuple[float, float, np.ndarray]:
    """
    Evaluate the greedy policy without updating the table.

    A greedy walk over state values can cycle where the table is still flat,
    so every episode is capped at `max_steps` (4 * n_states by default).

    :param agent: Trained agent
    :param env: Grid environment
    :param n_episodes: Number of evaluation episodes
    :param max_steps: Maximum steps per episode
    :param verbose: Whether to show progress bar
    :return: Tuple of (success rate, mean steps of successful episodes, steps per episode).
        The mean is NaN when no episode reached the goal
    """
    if max_steps is None:
        max_steps = 4 * env.n_states

    episode_steps = []
    success_steps = []

    iterator = tqdm(range(n_episodes), desc="Evaluating") if verbose else range(n_episodes)

    for episode in iterator:
        state, info = env.reset()
        steps = 0

        while not env.is_terminal(state) and steps < max_steps:
            action = agent.best_action(state)
            state, reward, terminated, truncated, info = env.step(action)
            steps += 1

        if env.is_terminal(state):
            success_steps.append(steps)
        episode_steps.append(steps)

    episode_steps = np.array(episode_steps)
    if n_episodes == 0:
        return 0.0, float("nan"), episode_steps

    success_rate = len(success_steps) / n_episodes
    mean_steps = float(np.mean(success_steps)) if success_steps else float("nan")
    return success_rate, mean_steps, episode_steps


def format_value_table(table: np.ndarray) -> str:
    """
    Render a value table row-major, one row per line, values separated by spaces.

    :param table: 2D array of state values
    :return: Multi-line string
    """
    return "\n".join(" ".join(f"{value:g}" for value in row) for row in table)


def format_policy(policy: np.ndarray, terminal: Optional[Tuple[int, int]] = None) -> str:
    """
    Render a greedy policy as arrows, marking the terminal cell with `G`.

    :param policy: 2D array of action indices
    :param terminal: (row, col) of the terminal cell
    :return: Multi-line string
    """
    lines = []
    for r, row in enumerate(policy):
        cells = []
        for c, action in enumerate(row):
            if terminal is not None and (r, c) == terminal:
                cells.append("G")
            else:
                cells.append(ACTION_SYMBOLS[Action(int(action))])
        lines.append(" ".join(cells))
    return "\n".join(lines)


class ReinforcementLearningExperiment:
    """Builds the grid, the agent and the episode loop from an `RLConfig` and runs them."""

    def __init__(self, config: RLConfig):
        """
        Initializes the reinforcement learning experiment.

        :param config: Experiment configuration object containing all settings for the experiment
        """
        self.config = config
        self.env = GridWorld(size=config.grid_size)
        self.agent = SARSAAgent(
            env=self.env,
            learning_rate=config.learning_rate,
            gamma=config.gamma,
            epsilon=config.epsilon,
            seed=config.random_seed,
        )

    def run(self) -> dict:
        """
        Runs the reinforcement learning experiment.

        :return: Dictionary containing results and metrics from the experiment
        """
        config = self.config
        verbose = config.verbose

        if verbose:
            print("=" * 70)
            print(f"STARTING TRAINING - GridWorld {config.grid_size}x{config.grid_size}")
            print("-" * 70)
            print(f"Algorithm: {self.agent.__class__.__name__}")
            print(f"Training episodes: {config.n_training_episodes}")
            print(f"Learning rate: {config.learning_rate}")
            print(f"Gamma: {config.gamma}")
            print(f"Epsilon: {config.epsilon} (decay: x{EPSILON_DECAY_RATE} per episode)")
            if config.random_seed is not None:
                print(f"Seed: {config.random_seed}")
            print("=" * 70 + "\n")

        start = time.time()
        episode_rewards, episode_lengths = train(
            self.agent,
            self.env,
            n_episodes=config.n_training_episodes,
            max_steps=config.max_steps,
            seed=config.random_seed,
            verbose=verbose,
        )
        elapsed = time.time() - start

        results = {
            "episode_rewards": episode_rewards,
            "episode_lengths": episode_lengths,
            "training_time": elapsed,
            "final_epsilon": self.agent.epsilon,
            "value_table": self.agent.report(),
        }

        if verbose:
            print(f"\nTraining completed in {elapsed:.2f} seconds")
            self.agent.print_statistics()

        if config.n_eval_episodes > 0:
            success_rate, mean_steps, eval_steps = evaluate(
                self.agent,
                self.env,
                n_episodes=config.n_eval_episodes,
                max_steps=config.eval_max_steps,
                verbose=verbose,
            )
            results["success_rate"] = success_rate
            results["mean_eval_steps"] = mean_steps

            if verbose:
                print("\n" + "=" * 70)
                print("EVALUATION RESULTS")
                print("=" * 70)
                print(f"Success rate: {success_rate * 100:.1f}%")
                if np.isnan(mean_steps):
                    print("Mean steps to goal: n/a (goal never reached)")
                else:
                    print(f"Mean steps to goal: {mean_steps:.2f}")
                print("=" * 70 + "\n")

        if verbose:
            print("Greedy policy:")
            print(
                format_policy(
                    self.agent.get_policy(), self.env.to_coords(self.env.terminal_state)
                )
            )
            print()

        return results
