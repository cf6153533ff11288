"""
Gaussian splat: localized additive injection of velocity or dye.

    dst = target + value * exp(-|uv - point|^2 / (radius^2 + 1e-6))

Never a hard overwrite, so overlapping splats accumulate. Points or radii
outside [0, 1] only change how much of the Gaussian tail lands on the grid.
"""

import taichi as ti

from fluidsplat.core.dtypes import DTYPE, GRID

# Added to radius^2 so a zero radius stays finite
RADIUS_EPSILON = 1e-6


@ti.func
def gaussian_weight(i, j, w, h, px, py, r2):
    du = (i + 0.5) / w - px
    dv = (j + 0.5) / h - py
    return ti.exp(-(du * du + dv * dv) / r2)


@ti.kernel
def splat_vector2(
    target: GRID,
    dst: GRID,
    px: DTYPE,
    py: DTYPE,
    v0: DTYPE,
    v1: DTYPE,
    radius: DTYPE,
):
    """Splat (v0, v1) into a 2-channel grid."""
    w = dst.shape[0]
    h = dst.shape[1]
    r2 = radius * radius + RADIUS_EPSILON
    for i, j in dst:
        weight = gaussian_weight(i, j, w, h, px, py, r2)
        dst[i, j] = target[i, j] + ti.Vector([v0, v1]) * weight


@ti.kernel
def splat_vector3(
    target: GRID,
    dst: GRID,
    px: DTYPE,
    py: DTYPE,
    v0: DTYPE,
    v1: DTYPE,
    v2: DTYPE,
    radius: DTYPE,
):
    """Splat (v0, v1, v2) into a 3-channel grid."""
    w = dst.shape[0]
    h = dst.shape[1]
    r2 = radius * radius + RADIUS_EPSILON
    for i, j in dst:
        weight = gaussian_weight(i, j, w, h, px, py, r2)
        dst[i, j] = target[i, j] + ti.Vector([v0, v1, v2]) * weight


def splat(target, dst, px, py, v0, v1, v2, radius):
    """Add a Gaussian-weighted value centered on normalized point (px, py).

    2-channel targets (velocity) take (v0, v1); 3-channel targets (dye)
    take (v0, v1, v2).

    Raises:
        ValueError: If dst has a channel count other than 2 or 3
    """
    channels = dst.n
    if channels == 2:
        splat_vector2(target, dst, px, py, v0, v1, radius)
    elif channels == 3:
        splat_vector3(target, dst, px, py, v0, v1, v2, radius)
    else:
        raise ValueError(f"Splat supports 2 or 3 channels, got {channels}")
