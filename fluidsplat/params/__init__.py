"""
Parameter management for fluidsplat.

This module provides:
- Validated, immutable parameter containers (schema.py)
- YAML loading utilities (loader.py)
"""

from fluidsplat.params.schema import (
    MAX_QUALITY_SCALE,
    MIN_QUALITY_SCALE,
    QualityParams,
    SimulationConfig,
    SolverParams,
    ValidationError,
)
from fluidsplat.params.loader import (
    load_config,
    load_config_with_overrides,
    merge_configs,
    save_config,
)

__all__ = [
    # Schema classes
    "SolverParams",
    "QualityParams",
    "SimulationConfig",
    "ValidationError",
    "MIN_QUALITY_SCALE",
    "MAX_QUALITY_SCALE",
    # Loader functions
    "load_config",
    "save_config",
    "load_config_with_overrides",
    "merge_configs",
]
