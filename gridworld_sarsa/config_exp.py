import json
from copy import deepcopy
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml


@dataclass
class RLConfig:
    """Configuration for a SARSA grid world experiment."""

    grid_size: int = 5
    learning_rate: float = 0.5
    gamma: float = 0.9
    epsilon: float = 0.1
    n_training_episodes: int = 100
    max_steps: Optional[int] = None  # None lets every episode run to the terminal cell
    n_eval_episodes: int = 100
    eval_max_steps: Optional[int] = None  # Defaults to 4 * grid_size**2 at evaluation
    random_seed: Optional[int] = None
    verbose: bool = True

    def __post_init__(self):
        """Checks the run-length settings. Learning parameters are checked by the agent."""
        if self.n_training_episodes < 1:
            raise ValueError(
                f"n_training_episodes must be >= 1, got {self.n_training_episodes}"
            )
        if self.n_eval_episodes < 0:
            raise ValueError(f"n_eval_episodes must be >= 0, got {self.n_eval_episodes}")
        for name in ("max_steps", "eval_max_steps"):
            value = getattr(self, name)
            if value is not None and value < 1:
                raise ValueError(f"{name} must be >= 1 or None, got {value}")

    def to_dict(self) -> Dict[str, Any]:
        """Converts the configuration to a dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "RLConfig":
        """Creates an instance of the configuration from a dictionary."""
        if not isinstance(config_dict, dict):
            raise ValueError(
                f"Configuration must be a dictionary, got {type(config_dict).__name__}"
            )
        return cls(**deepcopy(config_dict))

    def save_json(self, filepath: Union[str, Path]) -> None:
        """Saves the configuration to a JSON file."""
        filepath = Path(filepath)
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    def save_yaml(self, filepath: Union[str, Path]) -> None:
        """Saves the configuration to a YAML file."""
        filepath = Path(filepath)
        with open(filepath, "w", encoding="utf-8") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)

    @classmethod
    def load_json(cls, filepath: Union[str, Path]) -> "RLConfig":
        """Loads the configuration from a JSON file."""
        filepath = Path(filepath)
        with open(filepath, "r", encoding="utf-8") as f:
            config_dict = json.load(f)
        return cls.from_dict(config_dict)

    @classmethod
    def load_yaml(cls, filepath: Union[str, Path]) -> "RLConfig":
        """Loads the configuration from a YAML file."""
        filepath = Path(filepath)
        with open(filepath, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f)
        return cls.from_dict(config_dict)

    @classmethod
    def load(cls, filepath: Union[str, Path]) -> "RLConfig":
        """
        Loads a configuration, picking the format from the file suffix.

        :param filepath: Path to a `.yaml`, `.yml` or `.json` file
        :return: Loaded `RLConfig` instance
        """
        filepath = Path(filepath)

        if filepath.suffix in (".yaml", ".yml"):
            return cls.load_yaml(filepath)
        elif filepath.suffix == ".json":
            return cls.load_json(filepath)
        else:
            raise ValueError(f"File format '{filepath.suffix}' not supported")
