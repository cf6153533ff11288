"""
fluidsplat: real-time incompressible fluid solver on a 2D grid using Taichi.

Interactive point-source injections (velocity + dye) drive a stable-fluids
pipeline of advection, pressure projection and vorticity confinement.

Usage:
    from fluidsplat import DisplaySurface, FluidSolver, init_taichi

    init_taichi()
    solver = FluidSolver(DisplaySurface(800, 600))
    solver.splat((0.5, 0.5), (1.0, 0.0), target="velocity")
    solver.step(1 / 60)
"""

from fluidsplat.config import init_taichi
from fluidsplat.errors import ContextLost, FluidSplatError, UnsupportedPlatform
from fluidsplat.params import QualityParams, SimulationConfig, SolverParams
from fluidsplat.resolution import DisplaySurface
from fluidsplat.solver import DyeFieldView, FluidSolver, SplatTarget

__version__ = "0.1.0"

__all__ = [
    "init_taichi",
    "FluidSolver",
    "DyeFieldView",
    "SplatTarget",
    "DisplaySurface",
    "SolverParams",
    "QualityParams",
    "SimulationConfig",
    "FluidSplatError",
    "UnsupportedPlatform",
    "ContextLost",
]
