"""
Tabular SARSA on a deterministic grid world.

The agent learns a state-value table for an N×N grid whose only reward sits in
the bottom-right cell. Episodes are driven from `experiment.py`; the agent only
exposes action selection, the TD update and exploration decay.
"""

from .agents_rl import EPSILON_DECAY_RATE, BaseRLAgent, SARSAAgent
from .config_exp import RLConfig
from .experiment import (
    ReinforcementLearningExperiment,
    evaluate,
    format_policy,
    format_value_table,
    run_episode,
    train,
)
from .grid import Action, GridWorld

__all__ = [
    "Action",
    "BaseRLAgent",
    "EPSILON_DECAY_RATE",
    "GridWorld",
    "RLConfig",
    "ReinforcementLearningExperiment",
    "SARSAAgent",
    "evaluate",
    "format_policy",
    "format_value_table",
    "run_episode",
    "train",
]
