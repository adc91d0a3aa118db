from gridworld_sarsa import ReinforcementLearningExperiment, RLConfig, format_value_table


def main(config: RLConfig) -> None:
    """
    Train a SARSA agent on the grid world and print the learned value table.

    :param config: Experiment configuration
    """
    experiment = ReinforcementLearningExperiment(config)
    experiment.run()

    print("Value table:")
    print(format_value_table(experiment.agent.report()))


if __name__ == "__main__":
    config = RLConfig(
        grid_size=5,  # Side length of the grid, the goal is the bottom-right cell
        learning_rate=0.5,  # Learning rate (alpha)
        gamma=0.9,  # Discount factor
        epsilon=0.1,  # Probability of choosing a random action, decays x0.99 per episode
        n_training_episodes=100,  # Number of training episodes
        max_steps=None,  # No step limit: every episode runs until the goal is reached
        n_eval_episodes=100,  # Number of greedy evaluation episodes
        random_seed=None,  # Set an int for reproducible runs
        verbose=True,
    )

    main(config)
