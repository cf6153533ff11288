"""Interactive viewer using Taichi UI.

Shows the dye field (clamped to [0, 1]) and turns mouse drags into
velocity and dye splats. Keys: p pause, q cycle quality presets,
v toggle vorticity, r reset and reseed, Esc quit.
"""

import time

import taichi as ti

from fluidsplat.initialization import palette_color, seed_dye
from fluidsplat.kernels.utils import clamp_to_image
from fluidsplat.params.schema import SolverParams
from fluidsplat.quality import QualityController

# Pointer speed [uv/s] to velocity splat scale
POINTER_VELOCITY_SCALE = 0.25

# Smallest pointer interval used to estimate pointer speed [s]
MIN_POINTER_INTERVAL = 1e-3


def pointer_splat(solver, x: float, y: float, vx: float, vy: float, color, pixel_ratio: float = 1.0):
    """Inject one pointer sample: a velocity splat and a dye splat at (x, y).

    Args:
        solver: FluidSolver
        x, y: Pointer position in normalized coordinates
        vx, vy: Pointer speed [uv/s]
        color: RGB dye color
        pixel_ratio: Device pixel ratio; widens the splat on dense displays
    """
    ratio = pixel_ratio if pixel_ratio > 0 else 1.0
    radius = solver.params.splat_radius * ratio
    solver.splat(
        (x, y),
        (vx * POINTER_VELOCITY_SCALE, vy * POINTER_VELOCITY_SCALE),
        radius,
        target="velocity",
    )
    solver.splat((x, y), color, radius, target="dye")


class Viewer:
    """Window around a FluidSolver.

    Example:
        viewer = Viewer(solver)
        while viewer.is_running:
            viewer.process_input()
            solver.step(viewer.frame_dt())
            viewer.update()
            viewer.render()
    """

    def __init__(self, solver, window_title: str = "fluidsplat", headless: bool = False):
        """Initialize viewer.

        Args:
            solver: FluidSolver to display
            window_title: Title of the window.
            headless: If True, do not create window (for testing).
        """
        self.solver = solver
        self.headless = headless
        self.paused = False
        self.quality = QualityController()
        self.image = None
        self._last_cursor = None
        self._last_time = time.perf_counter()
        self._strokes = 0
        # Strength the v key restores after switching vorticity off
        self._vorticity = solver.params.vorticity or SolverParams().vorticity

        self._ensure_image()

        if not self.headless:
            surface = solver.surface
            res = (surface.backing_width, surface.backing_height)
            self.window = ti.ui.Window(window_title, res, vsync=True)
            self.canvas = self.window.get_canvas()
        else:
            self.window = None
            self.canvas = None

    def _ensure_image(self) -> None:
        # Sized to the backing store, so a quality change that only resizes
        # the grid keeps the same image.
        surface = self.solver.surface
        shape = (surface.backing_width, surface.backing_height)
        if self.image is None or self.image.shape != shape:
            self.image = ti.Vector.field(3, dtype=float, shape=shape)

    @property
    def is_running(self) -> bool:
        if self.headless:
            return True
        return self.window.running

    def frame_dt(self) -> float:
        """Seconds since the previous call."""
        now = time.perf_counter()
        dt = now - self._last_time
        self._last_time = now
        return dt

    def update(self) -> None:
        """Resample the current dye field into the display image."""
        self._ensure_image()
        clamp_to_image(self.solver.fields.dye, self.image)

    def handle_key(self, key: str) -> None:
        """Apply a keyboard shortcut."""
        solver = self.solver
        if key == "p":
            self.paused = not self.paused
        elif key == "q":
            scale = self.quality.cycle(solver.params.quality_scale)
            solver.set_params(solver.params.with_updates(quality_scale=scale))
            solver.resize()
        elif key == "v":
            if solver.params.vorticity > 0:
                self._vorticity = solver.params.vorticity
                strength = 0.0
            else:
                strength = self._vorticity
            solver.set_params(solver.params.with_updates(vorticity=strength))
        elif key == "r":
            solver.reset()
            seed_dye(solver)

    def drag(self, x: float, y: float, dt: float) -> None:
        """Feed one cursor sample while the left button is held."""
        if self._last_cursor is None:
            self._last_cursor = (x, y)
            self._strokes += 1
            return
        lx, ly = self._last_cursor
        dt = max(MIN_POINTER_INTERVAL, dt)
        vx = (x - lx) / dt
        vy = (y - ly) / dt
        self._last_cursor = (x, y)
        pointer_splat(
            self.solver,
            x,
            y,
            vx,
            vy,
            palette_color(self._strokes),
            self.solver.surface.pixel_ratio,
        )

    def release_pointer(self) -> None:
        self._last_cursor = None

    def process_input(self, dt: float = 1.0 / 60.0) -> None:
        """Poll keyboard and mouse events from the window."""
        if self.headless:
            return
        for e in self.window.get_events(ti.ui.PRESS):
            if e.key == ti.ui.ESCAPE:
                self.window.running = False
            elif e.key in ("p", "q", "v", "r"):
                self.handle_key(e.key)
        if self.window.is_pressed(ti.ui.LMB):
            x, y = self.window.get_cursor_pos()
            self.drag(x, y, dt)
        else:
            self.release_pointer()

    def render(self) -> None:
        """Render the current frame."""
        if self.headless:
            return
        self.canvas.set_image(self.image)
        self.window.show()
