"""
Pressure projection: divergence, Jacobi Poisson solve, gradient subtraction.

Together these make velocity (approximately) divergence-free:

    div = 0.5 * ((R.x - L.x) + (T.y - B.y))
    p_new = (pL + pR + pB + pT - div) / 4        (repeated N times)
    v_new = v - 0.5 * (pR - pL, pT - pB)

All neighbor reads are clamp-to-edge, which acts as a zero-gradient
condition at the walls.
"""

import taichi as ti

from fluidsplat.core.dtypes import GRID
from fluidsplat.kernels.sampling import sample


@ti.kernel
def divergence(velocity: GRID, dst: GRID):
    """Central-difference divergence of velocity."""
    for i, j in dst:
        left = sample(velocity, i - 1, j)
        right = sample(velocity, i + 1, j)
        bottom = sample(velocity, i, j - 1)
        top = sample(velocity, i, j + 1)
        dst[i, j] = 0.5 * ((right[0] - left[0]) + (top[1] - bottom[1]))


@ti.kernel
def pressure_jacobi(pressure: GRID, div: GRID, dst: GRID):
    """One Jacobi iteration of laplacian(p) = div."""
    for i, j in dst:
        left = sample(pressure, i - 1, j)
        right = sample(pressure, i + 1, j)
        bottom = sample(pressure, i, j - 1)
        top = sample(pressure, i, j + 1)
        dst[i, j] = (left + right + bottom + top - div[i, j]) * 0.25


@ti.kernel
def subtract_gradient(velocity: GRID, pressure: GRID, dst: GRID):
    """Remove the pressure gradient from velocity (discrete Helmholtz projection)."""
    for i, j in dst:
        left = sample(pressure, i - 1, j)
        right = sample(pressure, i + 1, j)
        bottom = sample(pressure, i, j - 1)
        top = sample(pressure, i, j + 1)
        grad = 0.5 * ti.Vector([right - left, top - bottom])
        dst[i, j] = velocity[i, j] - grad
