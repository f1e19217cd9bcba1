"""
Configuration utilities for loading model weights and prediction settings.
"""

import json
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, fields


DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_MODEL_PATH = DATA_DIR / "bite_lann.json"
DEFAULT_MEAN_MODEL_PATH = DATA_DIR / "bite_mean_lann.json"
DEFAULT_DATASET_PATH = DATA_DIR / "bite_rawdata.json"


def load_config(config_path: Path) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Configuration dictionary (empty for an empty file)
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        config = yaml.safe_load(f)

    return config or {}


def save_config(config: Dict[str, Any], save_path: Path) -> None:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration dictionary
        save_path: Path to save to
    """
    save_path = Path(save_path)
    save_path.parent.mkdir(parents=True, exist_ok=True)

    with open(save_path, 'w', encoding='utf-8') as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def merge_configs(base: Dict, override: Dict) -> Dict:
    """
    Recursively merge two configuration dictionaries.

    Args:
        base: Base configuration
        override: Override configuration (takes precedence)

    Returns:
        Merged configuration
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def flatten_config(config: Dict, prefix: str = '') -> Dict:
    """
    Flatten nested configuration dictionary.

    Args:
        config: Nested configuration
        prefix: Prefix for nested keys

    Returns:
        Flattened dictionary
    """
    result = {}

    for key, value in config.items():
        new_key = f"{prefix}_{key}" if prefix else key

        if isinstance(value, dict):
            result.update(flatten_config(value, new_key))
        else:
            result[new_key] = value

    return result


def load_model_config(model_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load trained network weights from a JSON file.

    Args:
        model_path: Path to the weight file (packaged mean+std model if omitted)

    Returns:
        Dictionary of sub-network configurations
    """
    model_path = Path(model_path) if model_path is not None else DEFAULT_MODEL_PATH

    if not model_path.exists():
        raise FileNotFoundError(f"Model file not found: {model_path}")

    with open(model_path, 'r', encoding='utf-8') as f:
        return json.load(f)


@dataclass
class PredictionConfig:
    """
    Settings for temperature sweeps and interval display.
    """
    # Paths (None selects the packaged files)
    model_path: Optional[Path] = None
    dataset_path: Optional[Path] = None

    # Temperature grid (°C)
    min_temp: float = 0.0
    max_temp: float = 300.0
    n_temp_nodes: int = 100

    # Confidence intervals
    show_tep_ci: bool = True
    show_zt_ci: bool = True

    # Misc
    batched: bool = False
    log_level: str = "INFO"

    def __post_init__(self):
        if self.model_path is not None:
            self.model_path = Path(self.model_path)
        if self.dataset_path is not None:
            self.dataset_path = Path(self.dataset_path)
        if self.n_temp_nodes < 2:
            raise ValueError(f"n_temp_nodes must be at least 2, got {self.n_temp_nodes}")
        if self.max_temp < self.min_temp:
            raise ValueError(
                f"max_temp ({self.max_temp}) must not be below min_temp ({self.min_temp})"
            )

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'PredictionConfig':
        """
        Create config from a (possibly nested) dictionary.

        Nested sections are flattened, and a section prefix is dropped when the
        remaining key is a field name (``sweep: {min_temp: 0}`` -> ``min_temp``).
        """
        names = {f.name for f in fields(cls)}
        values = {}

        for key, value in flatten_config(config).items():
            if key not in names:
                _, _, rest = key.partition('_')
                while rest and rest not in names:
                    _, _, rest = rest.partition('_')
                if not rest:
                    raise ValueError(f"Unknown prediction config field: {key}")
                key = rest
            values[key] = value

        return cls(**values)

    def with_overrides(self, **overrides: Any) -> 'PredictionConfig':
        """
        Return a copy with the given fields replaced.

        ``None`` values are skipped so unset command-line options keep the
        configured value.
        """
        return PredictionConfig(**merge_configs(
            self.__dict__,
            {key: value for key, value in overrides.items() if value is not None},
        ))

    @classmethod
    def from_yaml(cls, path: Path) -> 'PredictionConfig':
        """Create config from YAML file."""
        return cls.from_dict(load_config(path))

    def to_yaml(self, path: Path) -> None:
        """Save config to YAML file."""
        config = {
            key: (str(value) if isinstance(value, Path) else value)
            for key, value in self.__dict__.items()
        }
        save_config(config, path)
