"""Solver diagnostics: point lookups, divergence residuals, totals and checksums.

Host-side checks for tests, benchmarks and the CLI. divergence_field uses
the same central-difference stencil and clamp-to-edge policy as the
divergence pass.
"""

import hashlib

import numpy as np
import taichi as ti

from fluidsplat.core.dtypes import DTYPE
from fluidsplat.kernels.sampling import sample_uv
from fluidsplat.kernels.utils import compute_energy, compute_vector_total


def sample_at(grid, u: float, v: float):
    """Bilinear value of a scalar or vector grid at normalized point (u, v).

    Points outside [0, 1]^2 read the clamped edge. Returns a float for
    scalar grids and a numpy vector otherwise.
    """
    if hasattr(grid, "n"):
        out = ti.Vector.ndarray(grid.n, DTYPE, shape=(1,))
    else:
        out = ti.ndarray(DTYPE, shape=(1,))
    sample_uv(grid, out, u, v)
    value = out.to_numpy()[0]
    return float(value) if np.ndim(value) == 0 else value


def cell_value(solver, name: str, u: float, v: float):
    """Value of the solver field `name` in the cell containing (u, v)."""
    i, j = solver.geometry.cell_at(u, v)
    return solver.fields.container[name].to_numpy()[i, j]


def divergence_field(velocity: np.ndarray) -> np.ndarray:
    """Central-difference divergence of a (w, h, 2) velocity array.

    Args:
        velocity: Velocity array indexed [i, j, component]

    Returns:
        (w, h) divergence array
    """
    padded = np.pad(velocity.astype(np.float64), ((1, 1), (1, 1), (0, 0)), mode="edge")
    right = padded[2:, 1:-1, 0]
    left = padded[:-2, 1:-1, 0]
    top = padded[1:-1, 2:, 1]
    bottom = padded[1:-1, :-2, 1]
    return 0.5 * ((right - left) + (top - bottom))


def curl_field(velocity: np.ndarray) -> np.ndarray:
    """Central-difference curl of a (w, h, 2) velocity array."""
    padded = np.pad(velocity.astype(np.float64), ((1, 1), (1, 1), (0, 0)), mode="edge")
    right = padded[2:, 1:-1, 1]
    left = padded[:-2, 1:-1, 1]
    top = padded[1:-1, 2:, 0]
    bottom = padded[1:-1, :-2, 0]
    return (right - left) - (top - bottom)


def divergence_residual(solver) -> float:
    """L2 norm of the divergence of the solver's current velocity."""
    div = divergence_field(solver.fields.velocity.to_numpy())
    return float(np.sqrt(np.sum(div * div)))


def max_divergence(solver) -> float:
    """Largest absolute divergence of the solver's current velocity."""
    return float(np.max(np.abs(divergence_field(solver.fields.velocity.to_numpy()))))


def total_dye(solver) -> float:
    """Sum of every dye channel over the grid."""
    return float(compute_vector_total(solver.fields.dye))


def kinetic_energy(solver) -> float:
    """0.5 * sum |v|^2 over the grid."""
    return float(compute_energy(solver.fields.velocity))


def field_checksum(field) -> str:
    """SHA-256 of a field's contents; equal checksums mean bit-identical fields."""
    data = np.ascontiguousarray(field.to_numpy())
    return hashlib.sha256(data.tobytes()).hexdigest()
