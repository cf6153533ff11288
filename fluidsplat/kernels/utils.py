"""Utility reduction and display kernels for fluidsplat."""

import taichi as ti

from fluidsplat.core.dtypes import DTYPE, GRID
from fluidsplat.kernels.sampling import bilerp_uv


@ti.kernel
def compute_vector_total(field: GRID) -> DTYPE:
    """Sum of every component of a vector grid."""
    total = ti.cast(0.0, DTYPE)
    for i, j in field:
        total += field[i, j].sum()
    return total


@ti.kernel
def compute_energy(velocity: GRID) -> DTYPE:
    """0.5 * sum |v|^2 over all cells."""
    total = ti.cast(0.0, DTYPE)
    for i, j in velocity:
        total += 0.5 * velocity[i, j].norm_sqr()
    return total


@ti.kernel
def clamp_to_image(dye: GRID, image: ti.template()):
    """Resample dye onto an RGB display image, clamped to [0, 1].

    image is a vector field sized to the display backing store; it may be
    larger or smaller than the dye grid. Each pixel takes the bilinear dye
    value at its own normalized center.
    """
    w = image.shape[0]
    h = image.shape[1]
    for i, j in image:
        c = bilerp_uv(dye, (i + 0.5) / w, (j + 0.5) / h)
        image[i, j] = ti.min(ti.max(c, 0.0), 1.0)
