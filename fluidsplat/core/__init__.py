"""Core infrastructure: types and grid geometry."""

from fluidsplat.core.dtypes import DTYPE
from fluidsplat.core.geometry import MIN_GRID_SIZE, GridGeometry

__all__ = [
    "DTYPE",
    "GridGeometry",
    "MIN_GRID_SIZE",
]
