"""Field sampling helpers for use inside kernels.

Every neighbor lookup in the solver goes through these functions, which
implement the clamp-to-edge boundary policy: indices outside the grid are
clamped to the nearest edge cell, so sampling never reads out of bounds and
there is no wraparound.

Bilinear interpolation is done explicitly from four clamped taps rather than
relying on hardware filtering, so advection results do not depend on the
backend.
"""

import taichi as ti

from fluidsplat.core.dtypes import DTYPE, GRID


@ti.func
def sample(f: ti.template(), i: int, j: int):
    """Read f at cell (i, j) with clamp-to-edge indexing.

    Works for scalar and vector grids.
    """
    ci = ti.max(0, ti.min(i, f.shape[0] - 1))
    cj = ti.max(0, ti.min(j, f.shape[1] - 1))
    return f[ci, cj]


@ti.func
def bilerp(f: ti.template(), x, y):
    """Bilinearly interpolate f at cell-space position (x, y).

    Cell centers sit at integer coordinates, so (i, j) returns f[i, j]
    exactly. The four nearest cell centers are blended with standard
    bilinear weights; each tap is clamp-to-edge.

    Args:
        f: Scalar or vector grid
        x: Position along i in cell units
        y: Position along j in cell units
    """
    # Keep the integer cast in range; anything beyond one cell outside the
    # grid samples the edge anyway.
    cx = ti.max(-1.0, ti.min(x, ti.cast(f.shape[0], DTYPE)))
    cy = ti.max(-1.0, ti.min(y, ti.cast(f.shape[1], DTYPE)))

    x0 = ti.floor(cx)
    y0 = ti.floor(cy)
    fx = cx - x0
    fy = cy - y0
    i = ti.cast(x0, ti.i32)
    j = ti.cast(y0, ti.i32)

    c00 = sample(f, i, j)
    c10 = sample(f, i + 1, j)
    c01 = sample(f, i, j + 1)
    c11 = sample(f, i + 1, j + 1)

    bottom = c00 * (1.0 - fx) + c10 * fx
    top = c01 * (1.0 - fx) + c11 * fx
    return bottom * (1.0 - fy) + top * fy


@ti.func
def bilerp_uv(f: ti.template(), u, v):
    """Bilinearly interpolate f at normalized coordinate (u, v) in [0, 1]^2."""
    return bilerp(f, u * f.shape[0] - 0.5, v * f.shape[1] - 0.5)


@ti.kernel
def sample_uv(f: GRID, dst: ti.types.ndarray(ndim=1), u: DTYPE, v: DTYPE):
    """Write bilerp_uv(f, u, v) into dst[0].

    Host-side lookup behind diagnostics.sample_at; dst is a one-element
    array of the same element type as f.
    """
    dst[0] = bilerp_uv(f, u, v)
