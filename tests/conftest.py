"""Pytest fixtures and test utilities for fluidsplat."""


import numpy as np
import pytest

from fluidsplat.config import init_taichi
from fluidsplat.params import SolverParams
from fluidsplat.resolution import DisplaySurface
from fluidsplat.solver import FluidSolver


@pytest.fixture(scope="session", autouse=True)
def taichi_init():
    """Initialize Taichi once per test session with CPU backend."""
    init_taichi(backend="cpu", debug=True)
    yield


def make_solver(width: int = 64, height: int = 64, **overrides) -> FluidSolver:
    """Solver whose grid is exactly width x height (quality 1, pixel ratio 1)."""
    overrides.setdefault("quality_scale", 1.0)
    surface = DisplaySurface(width, height, 1.0)
    return FluidSolver(surface, SolverParams(**overrides))


@pytest.fixture
def solver_factory():
    """Factory for solvers; storage is released after the test."""
    created = []

    def factory(width: int = 64, height: int = 64, **overrides) -> FluidSolver:
        solver = make_solver(width, height, **overrides)
        created.append(solver)
        return solver

    yield factory

    for solver in created:
        solver.release()


@pytest.fixture
def solver(solver_factory):
    """64x64 solver with default parameters."""
    return solver_factory()


def _gaussian_bumps(
    width: int,
    height: int,
    rng: np.random.Generator,
    count: int = 6,
    sigma: float = 3.0,
    margin: int = 20,
) -> np.ndarray:
    """Smooth (width, height, 2) velocity made of Gaussian bumps away from the walls."""
    i = np.arange(width, dtype=np.float64).reshape(-1, 1)
    j = np.arange(height, dtype=np.float64).reshape(1, -1)
    v = np.zeros((width, height, 2), dtype=np.float64)
    for _ in range(count):
        ci = rng.uniform(margin, width - margin)
        cj = rng.uniform(margin, height - margin)
        amp = rng.uniform(-1.0, 1.0, 2)
        g = np.exp(-((i - ci) ** 2 + (j - cj) ** 2) / (2.0 * sigma * sigma))
        v[:, :, 0] += amp[0] * g
        v[:, :, 1] += amp[1] * g
    return v.astype(np.float32)


@pytest.fixture
def gaussian_bumps():
    """Builder for smooth, wall-free test velocity fields."""
    return _gaussian_bumps
