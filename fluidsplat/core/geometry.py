"""Grid geometry for fluidsplat.

The simulation grid uses Taichi's (i, j) indexing with i along x (width) and
j along y (height):

    j (y, up)
    ^
    |  (0,h-1) ... (w-1,h-1)
    |    ...          ...
    |  (0,0)   ...  (w-1,0)
    +-----------------------> i (x)

Cell (i, j) is centred at the normalized coordinate ((i + 0.5) / w,
(j + 0.5) / h), so uv in [0, 1]^2 covers the whole field.
"""

from dataclasses import dataclass

# Smallest simulation resolution along either axis
MIN_GRID_SIZE: int = 16


@dataclass(frozen=True)
class GridGeometry:
    """Immutable simulation resolution.

    Attributes:
        width: Number of cells along x (i dimension)
        height: Number of cells along y (j dimension)

    All fields of one solver share a single GridGeometry; a change of
    resolution produces a new instance and a full reallocation.
    """

    width: int
    height: int

    def __post_init__(self):
        """Validate grid dimensions."""
        if self.width < 2:
            raise ValueError(f"width must be >= 2, got {self.width}")
        if self.height < 2:
            raise ValueError(f"height must be >= 2, got {self.height}")

    @property
    def shape(self) -> tuple[int, int]:
        """Field shape as (width, height) tuple."""
        return (self.width, self.height)

    @property
    def n_cells(self) -> int:
        """Total number of cells."""
        return self.width * self.height

    def cell_at(self, u: float, v: float) -> tuple[int, int]:
        """Index of the cell containing normalized point (u, v), clamped to the grid."""
        i = min(self.width - 1, max(0, int(u * self.width)))
        j = min(self.height - 1, max(0, int(v * self.height)))
        return (i, j)
