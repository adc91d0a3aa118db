import math
from abc import ABC, abstractmethod
from numbers import Real
from typing import Optional

import numpy as np

from ..grid import Action, GridWorld

EPSILON_DECAY_RATE = 0.99


def _check_parameter(
    name: str, value: float, low: float, high: float, low_inclusive: bool = True
) -> float:
    """
    Validate a scalar hyperparameter and return it as a float.

    :param name: Parameter name used in the error message
    :param value: Value to check
    :param low: Lower bound
    :param high: Upper bound (always inclusive)
    :param low_inclusive: Whether the lower bound itself is accepted
    :return: The value converted to float
    """
    if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number, got {value!r}")

    above_low = value >= low if low_inclusive else value > low
    if not above_low or value > high:
        bracket = "[" if low_inclusive else "("
        raise ValueError(f"{name} must be in {bracket}{low}, {high}], got {value}")
    return float(value)


class BaseRLAgent(ABC):
    """
    Base class for tabular agents on a `GridWorld`.

    Owns the state-value table (one entry per grid cell, stored as a
    size×size array) and the exploration rate. Subclasses provide action
    selection and the learning rule.
    """

    def __init__(
        self,
        env: GridWorld,
        learning_rate: float = 0.5,
        gamma: float = 0.9,
        epsilon: float = 0.1,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ):
        """
        Initialize the base agent.

        :param env: Grid environment whose transition function the agent plans with
        :param learning_rate: Learning rate (alpha) for value updates, in (0, 1]
        :param gamma: Discount factor for future rewards, in [0, 1]
        :param epsilon: Initial exploration probability, in [0, 1]
        :param rng: Random generator used for exploration. Built from `seed` if not given
        :param seed: Seed for the default generator (None draws fresh entropy)
        """
        self.env = env
        self.learning_rate = _check_parameter(
            "learning_rate", learning_rate, 0.0, 1.0, low_inclusive=False
        )
        self.gamma = _check_parameter("gamma", gamma, 0.0, 1.0)
        self.epsilon = _check_parameter("epsilon", epsilon, 0.0, 1.0)

        self.rng = rng if rng is not None else np.random.default_rng(seed)

        self.grid_size = env.size
        self.action_space_size = env.n_actions

        self._value_table = self._initialize_value_table()

    def _initialize_value_table(self) -> np.ndarray:
        """
        Initialize the value table with zeros.

        :return: Initialized table of shape (grid_size, grid_size)
        """
        return np.zeros((self.grid_size, self.grid_size), dtype=float)

    def value(self, state: int) -> float:
        """Current tabled value of a state."""
        row, col = self.env.to_coords(state)
        return float(self._value_table[row, col])

    @abstractmethod
    def best_action(self, state: int) -> Action:
        """Greedy action for a state."""

    @abstractmethod
    def choose_action(self, state: int) -> Action:
        """Action under the exploration policy."""

    @abstractmethod
    def update(
        self,
        state: int,
        action: int,
        reward: float,
        next_state: int,
        next_action: int,
    ) -> None:
        """Apply one learning step."""

    def decay_exploration_rate(self) -> None:
        """Shrink epsilon by a constant factor. Called once per finished episode."""
        self.epsilon *= EPSILON_DECAY_RATE

    def report(self) -> np.ndarray:
        """
        Snapshot of the value table.

        :return: Copy of the table, shape (grid_size, grid_size)
        """
        return self._value_table.copy()

    def get_policy(self) -> np.ndarray:
        """
        Extract the greedy policy from the value table.

        :return: Array of shape (grid_size, grid_size) with the best action for each cell
        """
        policy = np.zeros((self.grid_size, self.grid_size), dtype=int)
        for state in range(self.env.n_states):
            row, col = self.env.to_coords(state)
            policy[row, col] = int(self.best_action(state))
        return policy

    def print_statistics(self) -> None:
        """Print statistics about the value table."""
        table = self._value_table
        print("\n" + "=" * 50)
        print(f"{self.__class__.__name__} VALUE TABLE STATISTICS")
        print("=" * 50)
        print(f"Grid size: {self.grid_size}x{self.grid_size}")
        print(f"Action space size: {self.action_space_size}")
        print(f"Exploration rate: {self.epsilon:.4f}")
        print(f"Value table mean: {np.mean(table):.4f}")
        print(f"Value table std: {np.std(table):.4f}")
        print(f"Value table min: {np.min(table):.4f}")
        print(f"Value table max: {np.max(table):.4f}")
        print(f"Non-zero entries: {np.count_nonzero(table)} / {table.size}")
        print("=" * 50 + "\n")
