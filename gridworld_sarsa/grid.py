from enum import IntEnum
from numbers import Integral
from typing import Any, Dict, Optional, Tuple

import gymnasium as gym
from gymnasium import spaces


class Action(IntEnum):
    """Directional moves available to the agent."""

    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3


# (row, col) delta for each action
ACTION_DELTAS = {
    Action.UP: (-1, 0),
    Action.DOWN: (1, 0),
    Action.LEFT: (0, -1),
    Action.RIGHT: (0, 1),
}


class GridWorld(gym.Env):
    """
    Deterministic N×N grid with a single absorbing cell in the bottom-right corner.

    State  s = row*size + col  ∈ {0,…,size²-1}
    Action a ∈ {0:UP, 1:DOWN, 2:LEFT, 3:RIGHT}

    Moves against a boundary leave that coordinate unchanged. The only reward is
    1.0 for arriving at the terminal cell; every other transition pays 0.0.
    """

    metadata = {"render_modes": []}

    def __init__(self, size: int = 5):
        """
        :param size: Side length of the grid (at least 2 so that a distinct terminal cell exists)
        """
        super().__init__()
        if isinstance(size, bool) or not isinstance(size, Integral) or size < 2:
            raise ValueError(f"Grid size must be an integer >= 2, got {size!r}")

        self.size = int(size)
        self.n_states = self.size * self.size
        self.n_actions = len(Action)
        self.terminal_state = self.n_states - 1

        self.observation_space = spaces.Discrete(self.n_states)
        self.action_space = spaces.Discrete(self.n_actions)

        self.state: Optional[int] = None

    def _check_state(self, state: int) -> None:
        if isinstance(state, bool) or not isinstance(state, Integral):
            raise ValueError(f"State must be an integer, got {state!r}")
        if not 0 <= state < self.n_states:
            raise ValueError(
                f"State {state} out of range for a {self.size}x{self.size} grid"
            )

    def to_coords(self, state: int) -> Tuple[int, int]:
        """Decompose a state id into (row, col)."""
        self._check_state(state)
        return divmod(int(state), self.size)

    def to_state(self, row: int, col: int) -> int:
        """Encode (row, col) as a state id."""
        if not (0 <= row < self.size and 0 <= col < self.size):
            raise ValueError(
                f"Cell ({row}, {col}) out of range for a {self.size}x{self.size} grid"
            )
        return row * self.size + col

    def transition(self, state: int, action: int) -> int:
        """
        Compute the next state for a move, clipping each coordinate to the grid.

        :param state: Current state id
        :param action: Action to apply (0-3)
        :return: Next state id
        """
        try:
            d_row, d_col = ACTION_DELTAS[Action(action)]
        except ValueError:
            raise ValueError(f"Invalid action: {action}") from None

        row, col = self.to_coords(state)
        row = min(max(row + d_row, 0), self.size - 1)
        col = min(max(col + d_col, 0), self.size - 1)
        return row * self.size + col

    def is_terminal(self, state: int) -> bool:
        self._check_state(state)
        return state == self.terminal_state

    def reward(self, next_state: int) -> float:
        return 1.0 if self.is_terminal(next_state) else 0.0

    #  gymnasium API
    def reset(
        self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None
    ) -> Tuple[int, Dict[str, Any]]:
        """
        Start an episode in a cell drawn uniformly over the whole grid.

        The terminal cell is a valid start; such an episode has no steps.
        """
        super().reset(seed=seed)
        self.state = int(self.np_random.integers(0, self.n_states))
        return self.state, {}

    def step(self, action: int) -> Tuple[int, float, bool, bool, Dict[str, Any]]:
        if self.state is None:
            raise RuntimeError("Cannot call step() before reset()")

        next_state = self.transition(self.state, action)
        reward = self.reward(next_state)
        terminated = self.is_terminal(next_state)
        self.state = next_state
        return next_state, reward, terminated, False, {}
