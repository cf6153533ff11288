"""Solver field specifications and accessor.

Fields of one simulation step, all sharing the simulation resolution:
- velocity: 2-channel (x, y) vector field, double-buffered
- pressure: 1-channel scalar field, double-buffered (Jacobi iterations)
- divergence: 1-channel scalar, single-buffered, recomputed from velocity
- curl: 1-channel scalar, single-buffered, recomputed from velocity
- dye: 3-channel color field, double-buffered

Single-buffered derived fields are safe because each step recomputes them
from velocity before use and no pass reads and writes the same storage.
"""

from typing import Any

from fluidsplat.core.dtypes import DTYPE
from fluidsplat.core.geometry import GridGeometry
from fluidsplat.fields.base import FieldContainer, FieldRole, FieldSpec

VELOCITY = "velocity"
PRESSURE = "pressure"
DIVERGENCE = "divergence"
CURL = "curl"
DYE = "dye"


def create_solver_specs(dtype: Any = DTYPE) -> list[FieldSpec]:
    """Create specifications for every solver field.

    Args:
        dtype: Floating-point type (default: DTYPE from dtypes.py)

    Returns:
        List of FieldSpec for velocity, pressure, divergence, curl and dye
    """
    return [
        FieldSpec(
            name=VELOCITY,
            dtype=dtype,
            role=FieldRole.STATE,
            channels=2,
            double_buffer=True,
            description="Velocity (x, y) [domain heights / s]",
        ),
        FieldSpec(
            name=PRESSURE,
            dtype=dtype,
            role=FieldRole.STATE,
            double_buffer=True,
            description="Pressure from the Jacobi Poisson solve",
        ),
        FieldSpec(
            name=DIVERGENCE,
            dtype=dtype,
            role=FieldRole.DERIVED,
            description="Velocity divergence (central differences)",
        ),
        FieldSpec(
            name=CURL,
            dtype=dtype,
            role=FieldRole.DERIVED,
            description="Velocity curl (central differences)",
        ),
        FieldSpec(
            name=DYE,
            dtype=dtype,
            role=FieldRole.STATE,
            channels=3,
            double_buffer=True,
            description="Dye color (r, g, b), visual payload only",
        ),
    ]


class SolverFields:
    """Convenience wrapper for accessing solver fields.

    Properties resolve through the container on every access, so a handle
    taken before a swap or a reallocation must not be reused afterwards.

    Example:
        fields = SolverFields(container)
        advect(fields.velocity, fields.velocity, fields.velocity_new, ...)
        fields.swap_velocity()
    """

    def __init__(self, container: FieldContainer):
        """Initialize with field container.

        Args:
            container: Allocated FieldContainer with solver fields
        """
        self._container = container

    @property
    def container(self) -> FieldContainer:
        return self._container

    @property
    def velocity(self) -> Any:
        """Velocity field (read side)."""
        return self._container[VELOCITY]

    @property
    def velocity_new(self) -> Any:
        """Velocity buffer (write side)."""
        return self._container.get_buffer(VELOCITY)

    @property
    def pressure(self) -> Any:
        """Pressure field (read side)."""
        return self._container[PRESSURE]

    @property
    def pressure_new(self) -> Any:
        """Pressure buffer (write side)."""
        return self._container.get_buffer(PRESSURE)

    @property
    def divergence(self) -> Any:
        """Divergence field."""
        return self._container[DIVERGENCE]

    @property
    def curl(self) -> Any:
        """Curl field."""
        return self._container[CURL]

    @property
    def dye(self) -> Any:
        """Dye field (read side)."""
        return self._container[DYE]

    @property
    def dye_new(self) -> Any:
        """Dye buffer (write side)."""
        return self._container.get_buffer(DYE)

    def swap_velocity(self) -> None:
        self._container.swap(VELOCITY)

    def swap_pressure(self) -> None:
        self._container.swap(PRESSURE)

    def swap_dye(self) -> None:
        self._container.swap(DYE)


def create_solver_container(geometry: GridGeometry) -> FieldContainer:
    """Create an allocated container holding every solver field.

    Args:
        geometry: Simulation resolution

    Returns:
        Allocated, zero-filled FieldContainer
    """
    container = FieldContainer(geometry)
    container.register_many(create_solver_specs())
    container.allocate()
    return container
