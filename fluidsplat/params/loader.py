"""YAML configuration files for fluidsplat.

A config file holds up to two groups, ``solver`` and ``quality``; any group
or key left out keeps its default. See ``configs/default.yaml``.
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from fluidsplat.params.schema import SimulationConfig, ValidationError

logger = logging.getLogger(__name__)


def load_config(path: str | Path) -> SimulationConfig:
    """Read and validate a YAML config file.

    An empty file yields the default configuration.

    Raises:
        FileNotFoundError: If path does not exist
        ValidationError: If the top level is not a mapping or a value is invalid
        yaml.YAMLError: If the file is not valid YAML
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    data = yaml.safe_load(path.read_text()) or {}
    if not isinstance(data, dict):
        raise ValidationError(
            f"Configuration must be a dictionary of parameter groups, got {type(data).__name__}"
        )

    config = SimulationConfig.from_dict(data)
    logger.debug("Loaded configuration from %s", path)
    return config


def save_config(config: SimulationConfig, path: str | Path) -> None:
    """Write config as YAML, creating parent directories as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump(config.to_dict(), default_flow_style=False, sort_keys=False))


def load_config_with_overrides(
    path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> SimulationConfig:
    """Defaults (or the file at path) with per-group overrides applied.

    Args:
        path: YAML file to start from; None starts from the defaults
        overrides: Partial groups, e.g. {"solver": {"pressure_iterations": 40}}
    """
    config = load_config(path) if path is not None else SimulationConfig()
    if overrides:
        config = config.with_updates(**overrides)
    return config


def merge_configs(base: SimulationConfig, override: SimulationConfig) -> SimulationConfig:
    """Combine two configs; values in override that differ from the defaults win."""
    defaults = SimulationConfig().to_dict()
    merged = base.to_dict()
    for group, values in override.to_dict().items():
        merged[group].update(
            {key: value for key, value in values.items() if value != defaults[group][key]}
        )
    return SimulationConfig.from_dict(merged)
