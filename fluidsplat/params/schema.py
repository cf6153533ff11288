"""Parameter schema with validation. Units: seconds, milliseconds, normalized uv."""

import math
from dataclasses import dataclass, field, asdict, replace
from typing import Any


class ValidationError(ValueError):
    """Parameter validation failed."""
    pass


def _finite(value: float, name: str) -> None:
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be finite, got {value}")


def _positive(value: float, name: str) -> None:
    _finite(value, name)
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")


def _non_negative(value: float, name: str) -> None:
    _finite(value, name)
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")


def _unit_interval(value: float, name: str) -> None:
    _finite(value, name)
    if not 0 < value <= 1:
        raise ValidationError(f"{name} must be in (0, 1], got {value}")


# Bounds applied to quality_scale wherever it is used
MIN_QUALITY_SCALE = 0.25
MAX_QUALITY_SCALE = 1.0


@dataclass(frozen=True)
class SolverParams:
    """Solver: per-step dissipation factors, Jacobi iterations, vorticity strength,
    splat radius [uv], quality scale, pixel-ratio cap, dt cap [s].

    quality_scale accepts any finite value; it is clamped to [0.25, 1.0] when
    simulation dimensions are computed.
    """
    dye_dissipation: float = 0.992
    velocity_dissipation: float = 0.998
    pressure_iterations: int = 22
    vorticity: float = 1.2
    splat_radius: float = 0.015
    quality_scale: float = 0.75
    max_pixel_ratio: float = 1.8
    max_dt: float = 0.033

    def __post_init__(self) -> None:
        _unit_interval(self.dye_dissipation, "dye_dissipation")
        _unit_interval(self.velocity_dissipation, "velocity_dissipation")
        if isinstance(self.pressure_iterations, bool) or not isinstance(
            self.pressure_iterations, int
        ):
            raise ValidationError(
                f"pressure_iterations must be an integer, got {self.pressure_iterations!r}"
            )
        if self.pressure_iterations < 1:
            raise ValidationError(
                f"pressure_iterations must be >= 1, got {self.pressure_iterations}"
            )
        _non_negative(self.vorticity, "vorticity")
        _positive(self.splat_radius, "splat_radius")
        _finite(self.quality_scale, "quality_scale")
        _positive(self.max_pixel_ratio, "max_pixel_ratio")
        _positive(self.max_dt, "max_dt")

    @property
    def effective_quality(self) -> float:
        """quality_scale clamped to [0.25, 1.0]."""
        return min(MAX_QUALITY_SCALE, max(MIN_QUALITY_SCALE, self.quality_scale))

    def with_updates(self, **kwargs: Any) -> "SolverParams":
        """Create new params with updates."""
        return replace(self, **kwargs)


@dataclass(frozen=True)
class QualityParams:
    """Adaptive quality: EMA weight, frame-time thresholds [ms], scale step and bounds."""
    ema_weight: float = 0.1
    initial_frame_ms: float = 16.6
    high_threshold_ms: float = 19.0
    low_threshold_ms: float = 14.0
    step: float = 0.02
    floor: float = 0.45
    ceiling: float = 1.0
    presets: tuple[float, ...] = (0.5, 0.75, 1.0)

    def __post_init__(self) -> None:
        _unit_interval(self.ema_weight, "ema_weight")
        _positive(self.initial_frame_ms, "initial_frame_ms")
        _positive(self.high_threshold_ms, "high_threshold_ms")
        _positive(self.low_threshold_ms, "low_threshold_ms")
        if self.low_threshold_ms >= self.high_threshold_ms:
            raise ValidationError(
                f"low_threshold_ms ({self.low_threshold_ms}) must be below "
                f"high_threshold_ms ({self.high_threshold_ms})"
            )
        _positive(self.step, "step")
        _positive(self.floor, "floor")
        _positive(self.ceiling, "ceiling")
        if self.floor > self.ceiling:
            raise ValidationError(
                f"floor ({self.floor}) must not exceed ceiling ({self.ceiling})"
            )
        # YAML gives lists
        object.__setattr__(self, "presets", tuple(self.presets))
        if not self.presets:
            raise ValidationError("presets must not be empty")
        for value in self.presets:
            _positive(value, "presets")


@dataclass(frozen=True)
class SimulationConfig:
    """Complete simulation configuration."""

    solver: SolverParams = field(default_factory=SolverParams)
    quality: QualityParams = field(default_factory=QualityParams)

    def to_dict(self) -> dict[str, Any]:
        """Convert to nested dictionary."""
        quality = asdict(self.quality)
        quality["presets"] = list(self.quality.presets)
        return {
            "solver": asdict(self.solver),
            "quality": quality,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SimulationConfig":
        """Create from nested dictionary."""
        param_classes = {
            "solver": SolverParams,
            "quality": QualityParams,
        }
        unknown = [k for k in data if k not in param_classes]
        if unknown:
            raise ValidationError(f"Unknown parameter groups: {unknown}")
        kwargs = {}
        for key, values in data.items():
            if values is None:
                continue
            if not isinstance(values, dict):
                raise ValidationError(f"Parameter group '{key}' must be a mapping")
            try:
                kwargs[key] = param_classes[key](**values)
            except TypeError as e:
                raise ValidationError(f"Invalid parameters for '{key}': {e}") from e
        return cls(**kwargs)

    def with_updates(self, **kwargs: Any) -> "SimulationConfig":
        """Create new config with updates."""
        current = self.to_dict()
        for key, value in kwargs.items():
            if key not in current:
                raise ValidationError(f"Unknown parameter group: {key}")
            if isinstance(value, dict):
                current[key].update(value)
            else:
                current[key] = asdict(value)
        return self.from_dict(current)
