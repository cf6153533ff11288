"""Grid Buffer Store: declarative field specs and a reallocatable container.

- FieldSpec: Describes a field's name, dtype, channel count and role
- FieldRole: STATE, DERIVED or SCRATCH
- FieldContainer: Manages field lifecycle, allocation, release and double-buffering

Usage:
    container = FieldContainer(GridGeometry(64, 64))
    container.register(FieldSpec("dye", DTYPE, FieldRole.STATE, channels=3, double_buffer=True))
    container.allocate()
    dye = container.get("dye")             # read side
    dye_new = container.get_buffer("dye")  # write side
    container.swap("dye")                  # flip the active-index bit

Storage is Taichi ndarrays. Kernels take them as ti.types.ndarray()
arguments, which are specialized on element type and dimensionality only,
so a reallocation at a new resolution reuses every compiled kernel. Arrays
are never resized in place.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

import taichi as ti

from fluidsplat.core.geometry import GridGeometry

logger = logging.getLogger(__name__)


class FieldRole(Enum):
    """Categorizes field usage patterns for documentation and validation.

    STATE: Primary simulation state (velocity, pressure, dye) - double-buffered
    DERIVED: Recomputed from state each step before use (divergence, curl)
    SCRATCH: Per-pass workspace with no meaning between passes
    """

    STATE = auto()
    DERIVED = auto()
    SCRATCH = auto()


@dataclass(frozen=True)
class FieldSpec:
    """Name, element type and layout of one grid field.

    Attributes:
        name: Field identifier (snake_case)
        dtype: Taichi data type (ti.f32, ti.f64)
        role: Field usage category
        channels: Components per cell; 1 gives a scalar field, >1 a vector field
        double_buffer: If True, allocate a second arena and support swap()
        description: Human-readable description

    The field shape is (width, height) from the GridGeometry passed to the
    FieldContainer.
    """

    name: str
    dtype: Any  # Taichi dtype
    role: FieldRole
    channels: int = 1
    double_buffer: bool = False
    description: str = ""

    def __post_init__(self):
        """Validate field specification."""
        if not self.name:
            raise ValueError("Field name cannot be empty")
        if not self.name.islower() or not self.name.replace("_", "").isalnum():
            raise ValueError(f"Field name must be snake_case, got: {self.name}")
        if self.channels < 1:
            raise ValueError(
                f"Field '{self.name}' needs at least one channel, got {self.channels}"
            )
        if self.double_buffer and self.role == FieldRole.DERIVED:
            raise ValueError(
                f"Derived field '{self.name}' is recomputed each step and "
                "cannot be double-buffered"
            )

    @property
    def n_arenas(self) -> int:
        """Number of storage arenas (2 for double-buffered fields)."""
        return 2 if self.double_buffer else 1

    def create(self, shape: tuple[int, int]) -> Any:
        """Create a Taichi ndarray of the given shape for this spec."""
        if self.channels == 1:
            return ti.ndarray(dtype=self.dtype, shape=shape)
        return ti.Vector.ndarray(self.channels, dtype=self.dtype, shape=shape)


class FieldContainer:
    """Owns every solver field for one grid size.

    Fields are registered as FieldSpecs and then allocated together as
    ndarrays of the geometry's shape. Double-buffered fields keep two
    arenas and an active-index bit; swap() flips the bit.

    Attributes:
        geometry: Current grid dimensions
        allocated: Whether fields are currently allocated
        generation: Number of allocations performed so far

    Example:
        container = FieldContainer(GridGeometry(128, 72))
        container.register_many(create_solver_specs())
        container.allocate()

        vel = container["velocity"]
        container.swap("velocity")
        container.reallocate(GridGeometry(256, 144))
    """

    def __init__(self, geometry: GridGeometry):
        """Initialize container with grid geometry.

        Args:
            geometry: Grid dimensions
        """
        self._geometry = geometry
        self._specs: dict[str, FieldSpec] = {}
        self._arenas: dict[str, list[Any]] = {}
        self._active: dict[str, int] = {}
        self._allocated = False
        self._generation = 0

    @property
    def geometry(self) -> GridGeometry:
        """Get the grid geometry."""
        return self._geometry

    @property
    def allocated(self) -> bool:
        """Check if fields are allocated."""
        return self._allocated

    @property
    def generation(self) -> int:
        """Number of allocations performed (changes on every reallocation)."""
        return self._generation

    @property
    def field_names(self) -> list[str]:
        """Get list of registered field names."""
        return list(self._specs.keys())

    def register(self, spec: FieldSpec) -> None:
        """Register a field specification.

        Args:
            spec: Field specification to register

        Raises:
            ValueError: If name already registered
            RuntimeError: If fields are currently allocated
        """
        if self._allocated:
            raise RuntimeError("Cannot register fields after allocation")
        if spec.name in self._specs:
            raise ValueError(f"Field '{spec.name}' already registered")
        self._specs[spec.name] = spec

    def register_many(self, specs: list[FieldSpec]) -> None:
        """Register multiple field specifications."""
        for spec in specs:
            self.register(spec)

    def allocate(self) -> None:
        """Allocate all registered fields, zero-filled.

        Raises:
            RuntimeError: If already allocated or no fields registered
        """
        if self._allocated:
            raise RuntimeError("Fields already allocated")
        if not self._specs:
            raise RuntimeError("No fields registered")

        # Taichi creates ndarrays zero-filled
        shape = self._geometry.shape
        for name, spec in self._specs.items():
            self._arenas[name] = [spec.create(shape) for _ in range(spec.n_arenas)]
            self._active[name] = 0

        self._allocated = True
        self._generation += 1
        logger.debug(
            "Allocated %d fields at %dx%d (%.2f MB, generation %d)",
            len(self._specs),
            shape[0],
            shape[1],
            self.memory_mb,
            self._generation,
        )

    def release(self) -> None:
        """Drop all field storage.

        The container stops handing out arrays; the device memory is freed
        once no other handle refers to it. Releasing an unallocated
        container is a no-op.
        """
        if not self._allocated:
            return
        self._arenas.clear()
        self._active.clear()
        self._allocated = False

    def reallocate(self, geometry: GridGeometry | None = None) -> None:
        """Release and allocate fresh zero-filled storage.

        Args:
            geometry: New grid dimensions (default: keep current)
        """
        self.release()
        if geometry is not None:
            self._geometry = geometry
        self.allocate()

    def _require(self, name: str) -> FieldSpec:
        if not self._allocated:
            raise RuntimeError("Fields not yet allocated")
        if name not in self._specs:
            raise KeyError(f"Field '{name}' not found")
        return self._specs[name]

    def get(self, name: str) -> Any:
        """Get the read side of a field by name.

        Raises:
            KeyError: If field not found
            RuntimeError: If fields not allocated
        """
        self._require(name)
        return self._arenas[name][self._active[name]]

    def __getitem__(self, name: str) -> Any:
        """Get a field by name using bracket notation."""
        return self.get(name)

    def get_buffer(self, name: str) -> Any:
        """Get the write side of a double-buffered field.

        Raises:
            ValueError: If field is not double-buffered
        """
        spec = self._require(name)
        if not spec.double_buffer:
            raise ValueError(f"Field '{name}' is not double-buffered")
        return self._arenas[name][1 - self._active[name]]

    def swap(self, name: str) -> None:
        """Exchange read and write roles of a double-buffered field.

        O(1): flips the active-index bit, never copies data.

        Raises:
            ValueError: If field is not double-buffered
        """
        spec = self._require(name)
        if not spec.double_buffer:
            raise ValueError(f"Field '{name}' is not double-buffered")
        self._active[name] ^= 1

    def is_double_buffered(self, name: str) -> bool:
        """Check whether a registered field has two arenas."""
        return self.get_spec(name).double_buffer

    def get_spec(self, name: str) -> FieldSpec:
        """Get the specification for a field."""
        if name not in self._specs:
            raise KeyError(f"Field '{name}' not registered")
        return self._specs[name]

    def fields_by_role(self, role: FieldRole) -> list[str]:
        """Get field names filtered by role."""
        return [name for name, spec in self._specs.items() if spec.role == role]

    @property
    def memory_bytes(self) -> int:
        """Estimate total memory usage in bytes for allocated fields."""
        if not self._allocated:
            return 0

        total = 0
        for spec in self._specs.values():
            dtype_size = 8 if spec.dtype == ti.f64 else 4
            total += self._geometry.n_cells * spec.channels * dtype_size * spec.n_arenas
        return total

    @property
    def memory_mb(self) -> float:
        """Estimate total memory usage in megabytes."""
        return self.memory_bytes / (1024 * 1024)

    def __contains__(self, name: str) -> bool:
        """Check if a field is registered."""
        return name in self._specs

    def __len__(self) -> int:
        """Number of registered fields (not counting second arenas)."""
        return len(self._specs)
