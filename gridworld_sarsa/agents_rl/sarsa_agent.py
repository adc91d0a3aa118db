from ..grid import Action
from .base import BaseRLAgent


class SARSAAgent(BaseRLAgent):
    """
    SARSA agent over a state-value table.

    SARSA is a TD(0) on-policy algorithm that learns the value of the policy
    it is actually following (including exploration).

    Key characteristics:
    - Updates after each step (not at episode end)
    - On-policy: the bootstrap target comes from the state the ε-greedy policy actually reaches
    - The table is indexed by state only, so greedy selection looks one step
      ahead through the grid's transition function and compares next-state values
    """

    def best_action(self, state: int) -> Action:
        """
        Select the action whose resulting state has the highest tabled value.

        Only a strictly greater value replaces the current best, so ties resolve
        to the lowest-indexed action.

        :param state: Current state
        :return: Greedy action
        """
        best_action = None
        best_value = None
        for action in Action:
            next_value = self.value(self.env.transition(state, action))
            if best_value is None or next_value > best_value:
                best_action = action
                best_value = next_value
        return best_action

    def choose_action(self, state: int) -> Action:
        """
        Select action using epsilon-greedy policy.

        :param state: Current state
        :return: Selected action
        """
        if self.rng.random() < self.epsilon:
            return Action(int(self.rng.integers(0, self.action_space_size)))  # Exploration
        return self.best_action(state)  # Exploitation

    def update(
        self,
        state: int,
        action: int,
        reward: float,
        next_state: int,
        next_action: int,
    ) -> None:
        """
        Update the value of `state` using the SARSA update rule.

        V(s) := V(s) + α[r + γ·V(s') - V(s)]

        `action` and `next_action` complete the usual (s, a, r, s', a') signature
        but do not index the table: values are stored per state.

        :param state: Current state
        :param action: Action taken
        :param reward: Reward received
        :param next_state: Next state
        :param next_action: Next action (actually selected by policy)
        """
        current_v = self.value(state)
        next_v = self.value(next_state)

        td_target = reward + self.gamma * next_v
        td_error = td_target - current_v

        row, col = self.env.to_coords(state)
        self._value_table[row, col] = current_v + self.learning_rate * td_error
