"""Resolution management: from display surface size to simulation dimensions.

The simulation runs below display resolution for performance:

    dpr     = min(pixel_ratio, max_pixel_ratio)     (pixel_ratio <= 0 -> 1)
    q       = clamp(quality_scale, 0.25, 1.0)
    sim     = max(16, floor(client * dpr * q))      per axis
    backing = max(2, floor(client * dpr))           per axis

Transient layout states (zero-size, hidden or non-finite surfaces) are
clamped rather than rejected.
"""

import math
from dataclasses import dataclass

from fluidsplat.core.geometry import MIN_GRID_SIZE, GridGeometry
from fluidsplat.params.schema import SolverParams

# Smallest backing (presentation) surface along either axis
MIN_BACKING_SIZE: int = 2


def _client_extent(value: float) -> float:
    """Client size along one axis; negative, NaN or infinite sizes count as 0."""
    value = float(value)
    if not math.isfinite(value):
        return 0.0
    return max(0.0, value)


@dataclass
class DisplaySurface:
    """The external presentation surface the solver is sized against.

    Attributes:
        client_width: Layout width in logical pixels
        client_height: Layout height in logical pixels
        pixel_ratio: Device pixels per logical pixel
        backing_width: Current backing-store width in device pixels
        backing_height: Current backing-store height in device pixels

    The solver writes backing_width/backing_height when it resizes; a host
    that resizes the backing store itself should update them too.
    """

    client_width: float
    client_height: float
    pixel_ratio: float = 1.0
    backing_width: int = 0
    backing_height: int = 0

    @property
    def backing_size(self) -> tuple[int, int]:
        return (self.backing_width, self.backing_height)


class ResolutionManager:
    """Derives simulation and backing dimensions from a DisplaySurface."""

    def effective_pixel_ratio(self, surface: DisplaySurface, params: SolverParams) -> float:
        """Pixel ratio after the non-positive fallback and the max_pixel_ratio cap."""
        dpr = surface.pixel_ratio
        if not math.isfinite(dpr) or dpr <= 0:
            dpr = 1.0
        return min(dpr, params.max_pixel_ratio)

    def target_dimensions(
        self, surface: DisplaySurface, params: SolverParams
    ) -> tuple[int, int, int, int]:
        """Compute (sim_width, sim_height, backing_width, backing_height).

        Args:
            surface: Display surface (client size and pixel ratio)
            params: Solver parameters (quality_scale, max_pixel_ratio)

        Returns:
            Simulation dimensions (each >= 16) and backing dimensions (each >= 2)
        """
        dpr = self.effective_pixel_ratio(surface, params)
        q = params.effective_quality

        client_w = _client_extent(surface.client_width)
        client_h = _client_extent(surface.client_height)

        sim_w = max(MIN_GRID_SIZE, math.floor(client_w * dpr * q))
        sim_h = max(MIN_GRID_SIZE, math.floor(client_h * dpr * q))
        backing_w = max(MIN_BACKING_SIZE, math.floor(client_w * dpr))
        backing_h = max(MIN_BACKING_SIZE, math.floor(client_h * dpr))
        return sim_w, sim_h, backing_w, backing_h

    def needs_resize(
        self,
        surface: DisplaySurface,
        params: SolverParams,
        current: GridGeometry,
    ) -> bool:
        """True unless both the simulation grid and the backing store already match.

        Args:
            surface: Display surface
            params: Solver parameters
            current: Currently allocated simulation resolution
        """
        sim_w, sim_h, backing_w, backing_h = self.target_dimensions(surface, params)
        if current.shape != (sim_w, sim_h):
            return True
        return surface.backing_size != (backing_w, backing_h)
