"""Configuration loading utilities."""

from pathlib import Path
from typing import Any

import yaml

CONFIG_DIR = Path(__file__).parent


def load_config(name: str) -> dict[str, Any]:
    """Load a YAML configuration file from the config directory.

    Args:
        name: Config file name without extension (e.g., 'marketpulse')

    Returns:
        Parsed configuration dictionary

    Raises:
        FileNotFoundError: If the config file doesn't exist
        yaml.YAMLError: If the config file is invalid YAML
    """
    config_path = CONFIG_DIR / f"{name}.yaml"
    if not config_path.exists():
        sample_path = CONFIG_DIR / f"{name}.sample.yaml"
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\n"
            f"Please copy {sample_path} to {config_path} and fill in your values."
        )

    return load_config_file(config_path)


def load_config_file(path: Path | str) -> dict[str, Any]:
    """Load an explicit YAML file (used by ``--config``)."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_config_path(name: str) -> Path:
    """Get the path to a configuration file."""
    return CONFIG_DIR / f"{name}.yaml"
