"""
Step cost benchmarks: milliseconds per solver step.
"""
import time

import numpy as np
import taichi as ti

from benchmarks.harness import Benchmark
from fluidsplat.initialization import seed_dye
from fluidsplat.params import SolverParams
from fluidsplat.resolution import DisplaySurface
from fluidsplat.solver import FluidSolver

FRAME_DT = 1.0 / 60.0


def time_steps(solver: FluidSolver, steps: int, warmup: int = 5) -> float:
    """Average wall time per step [ms] after warmup."""
    for _ in range(warmup):
        solver.step(FRAME_DT)
    ti.sync()

    start = time.perf_counter()
    for _ in range(steps):
        solver.step(FRAME_DT)
    ti.sync()
    return 1000.0 * (time.perf_counter() - start) / steps


def stirred_solver(width: int, height: int, params: SolverParams) -> FluidSolver:
    """Solver at exactly width x height cells with dye and a velocity kick."""
    # quality 1 and pixel ratio 1 make the grid match the surface
    surface = DisplaySurface(width, height, 1.0)
    solver = FluidSolver(surface, params.with_updates(quality_scale=1.0))
    seed_dye(solver, np.random.default_rng(0))
    solver.splat((0.5, 0.5), (2.0, 1.0), target="velocity")
    return solver


class StepCostBenchmark(Benchmark):
    """Step cost across resolutions at default parameters."""

    RESOLUTIONS = [(128, 128), (256, 256), (640, 360), (1280, 720), (1920, 1080)]

    def run(self, steps: int = 100):
        self.print_header("STEP COST BY RESOLUTION")
        print(f"{'Grid':>12} {'Cells':>10} {'ms/step':>10} {'Mcells/s':>10}")

        results = {}
        params = SolverParams()
        for width, height in self.RESOLUTIONS:
            solver = stirred_solver(width, height, params)
            ms = time_steps(solver, steps)
            cells = width * height
            results[(width, height)] = ms
            print(f"{width:>6}x{height:<5} {cells:>10} {ms:>10.3f} {cells / ms / 1e3:>10.1f}")
            solver.release()

        self.print_footer()
        self.teardown()
        return results


class PressureIterationBenchmark(Benchmark):
    """Step cost as a function of Jacobi iteration count."""

    ITERATIONS = [1, 10, 22, 40, 80]

    def run(self, steps: int = 100, width: int = 640, height: int = 360):
        self.print_header("STEP COST BY PRESSURE ITERATIONS")
        print(f"Grid: {width}x{height}")
        print(f"{'Iterations':>10} {'ms/step':>10}")

        results = {}
        for n in self.ITERATIONS:
            solver = stirred_solver(width, height, SolverParams(pressure_iterations=n))
            ms = time_steps(solver, steps)
            results[n] = ms
            print(f"{n:>10} {ms:>10.3f}")
            solver.release()

        self.print_footer()
        self.teardown()
        return results
