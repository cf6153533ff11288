"""
Semi-Lagrangian advection.

Each cell traces backwards along the velocity at its own position and
bilinearly samples the source field there. Unconditionally stable; the
dissipation factor models numerical and artistic decay.
"""

import taichi as ti

from fluidsplat.core.dtypes import DTYPE, GRID
from fluidsplat.kernels.sampling import bilerp


@ti.kernel
def advect(
    source: GRID,
    velocity: GRID,
    dst: GRID,
    dt: DTYPE,
    dissipation: DTYPE,
):
    """
    Backtrace and sample: dst = source(uv - dt * vel * (h/w, 1)) * dissipation

    Velocity is measured in domain heights per second; the (h/w, 1) aspect
    correction makes a unit velocity cover the same physical distance along
    both axes. In cell units the displacement is dt * vel * h on both axes.
    """
    h = dst.shape[1]
    for i, j in dst:
        vel = velocity[i, j]
        x = i - dt * vel[0] * h
        y = j - dt * vel[1] * h
        dst[i, j] = bilerp(source, x, y) * dissipation
