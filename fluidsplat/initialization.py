"""Initial dye seeding and palette colors."""

import numpy as np

# Golden-ratio conjugate; successive hues land far apart on the color wheel
GOLDEN_RATIO_CONJUGATE = 0.61803398875


def hsv_to_rgb(h: float, s: float, v: float) -> tuple[float, float, float]:
    """Convert hue, saturation, value in [0, 1] to an RGB triple."""
    i = int(np.floor(h * 6))
    f = h * 6 - i
    p = v * (1 - s)
    q = v * (1 - f * s)
    t = v * (1 - (1 - f) * s)
    return [
        (v, t, p),
        (q, v, p),
        (p, v, t),
        (p, q, v),
        (t, p, v),
        (v, p, q),
    ][i % 6]


def palette_color(index: int) -> tuple[float, float, float]:
    """Saturated color for a seed or pointer index."""
    hue = (index * GOLDEN_RATIO_CONJUGATE) % 1.0
    return hsv_to_rgb(hue, 0.6, 0.95)


def seed_dye(solver, rng: np.random.Generator | None = None, count: int = 3) -> None:
    """Splat a few dye blobs at random points in [0.2, 0.8]^2.

    Used on startup, after reset() and after rebuilding a solver that lost
    its context.

    Args:
        solver: FluidSolver to seed
        rng: Random generator (default: a fresh unseeded generator)
        count: Number of blobs
    """
    if rng is None:
        rng = np.random.default_rng()
    radius = solver.params.splat_radius * 1.5
    for i in range(count):
        x, y = rng.random(2) * 0.6 + 0.2
        solver.splat((x, y), palette_color(i + 1), radius, target="dye")
