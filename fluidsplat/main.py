"""CLI entry point for fluidsplat.

Headless mode drives the solver with scripted pointer strokes and prints
timings; --gui opens an interactive window. A simulated context loss
halfway through a headless run exercises the rebuild-and-reseed path.
"""

import argparse
import logging
import time

import numpy as np

from fluidsplat.config import init_taichi
from fluidsplat.diagnostics import divergence_residual, kinetic_energy, total_dye
from fluidsplat.errors import ContextLost
from fluidsplat.gui import Viewer, pointer_splat
from fluidsplat.initialization import palette_color, seed_dye
from fluidsplat.params import load_config_with_overrides
from fluidsplat.quality import QualityController
from fluidsplat.resolution import DisplaySurface
from fluidsplat.solver import FluidSolver

FRAME_DT = 1.0 / 60.0


def build_solver(surface: DisplaySurface, config, rng: np.random.Generator) -> FluidSolver:
    """Construct a solver and seed its dye."""
    solver = FluidSolver(surface, config.solver)
    seed_dye(solver, rng)
    return solver


def run_headless(args, config) -> None:
    rng = np.random.default_rng(args.seed)
    surface = DisplaySurface(args.width, args.height, args.pixel_ratio)
    solver = build_solver(surface, config, rng)
    controller = QualityController(config.quality)
    print(f"Simulation grid: {solver.width}x{solver.height} "
          f"(backing {surface.backing_width}x{surface.backing_height})")

    lose_context_at = args.frames // 2 if args.simulate_context_loss else -1
    start_time = time.time()
    step_time = 0.0

    for frame in range(args.frames):
        if frame == lose_context_at:
            solver.invalidate()
        try:
            x, y = rng.random(2) * 0.8 + 0.1
            vx, vy = rng.normal(0.0, 2.0, 2)
            pointer_splat(solver, x, y, vx, vy, palette_color(frame), surface.pixel_ratio)

            t0 = time.perf_counter()
            solver.step(FRAME_DT)
            elapsed = time.perf_counter() - t0
            step_time += elapsed
        except ContextLost:
            print(f"Frame {frame}: context lost, rebuilding solver")
            solver = build_solver(surface, config, rng)
            continue

        if args.auto_quality and controller.update(solver, elapsed):
            print(f"Frame {frame}: quality {solver.params.quality_scale:.2f} "
                  f"-> grid {solver.width}x{solver.height}")

        if (frame + 1) % max(1, args.frames // 10) == 0:
            print(f"Frame {frame + 1}: dye={total_dye(solver):.3f} "
                  f"energy={kinetic_energy(solver):.3e} "
                  f"div={divergence_residual(solver):.3e}")

    duration = time.time() - start_time
    print(f"Ran {args.frames} frames in {duration:.2f}s "
          f"({1000.0 * step_time / max(1, args.frames):.2f} ms/step)")


def run_gui(args, config) -> None:
    rng = np.random.default_rng(args.seed)
    surface = DisplaySurface(args.width, args.height, args.pixel_ratio)
    solver = build_solver(surface, config, rng)
    viewer = Viewer(solver)
    viewer.quality = QualityController(config.quality)
    print(f"Simulation grid: {solver.width}x{solver.height}")

    while viewer.is_running:
        dt = viewer.frame_dt()
        viewer.process_input(dt)
        if not viewer.paused:
            solver.step(dt)
            if args.auto_quality:
                viewer.quality.update(solver, dt)
        viewer.update()
        viewer.render()


def main():
    parser = argparse.ArgumentParser(description="fluidsplat fluid simulation")
    parser.add_argument("--config", type=str, help="Path to YAML configuration file")
    parser.add_argument("--width", type=int, default=800, help="Surface width (logical pixels)")
    parser.add_argument("--height", type=int, default=600, help="Surface height (logical pixels)")
    parser.add_argument("--pixel-ratio", type=float, default=1.0, help="Device pixel ratio")
    parser.add_argument("--frames", type=int, default=600, help="Frames to run headless")
    parser.add_argument("--quality", type=float, help="Quality scale. Overrides config.")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for strokes and dye")
    parser.add_argument("--gui", action="store_true", help="Open an interactive window")
    parser.add_argument("--auto-quality", action="store_true", help="Adapt quality to frame time")
    parser.add_argument("--simulate-context-loss", action="store_true",
                        help="Invalidate the solver halfway through a headless run")
    parser.add_argument("--backend", type=str, help="Taichi backend (cuda, vulkan, metal, cpu)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    overrides = {}
    if args.quality is not None:
        overrides["solver"] = {"quality_scale": args.quality}
    if args.config:
        print(f"Loading config from {args.config}")
    config = load_config_with_overrides(args.config, overrides)

    backend = init_taichi(args.backend)
    print(f"Backend: {backend}")

    try:
        if args.gui:
            run_gui(args, config)
        else:
            run_headless(args, config)
    except KeyboardInterrupt:
        print("\nSimulation stopped by user.")


if __name__ == "__main__":
    main()
