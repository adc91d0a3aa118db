"""
RL Agents Package

Tabular agents for the grid world:
- SARSA (TD on-policy, state-value variant):
    Learns the value of the policy it is actually following (including exploration).
    Updates the value of the visited state using: V(s) := V(s) + α[r + γ·V(s') - V(s)]
    Greedy moves pick the action whose resulting cell has the highest value.

All agents inherit from BaseRLAgent and share common functionality.
"""

from .base import EPSILON_DECAY_RATE, BaseRLAgent
from .sarsa_agent import SARSAAgent

__all__ = [
    "BaseRLAgent",
    "EPSILON_DECAY_RATE",
    "SARSAAgent",
]
