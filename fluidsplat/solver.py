"""Stable-fluids solver: pipeline, injection and output access.

One step advances the state through seven passes, in order:

1. curl of velocity
2. vorticity confinement (skipped when vorticity <= 0)
3. velocity self-advection with velocity_dissipation
4. divergence of velocity
5. N Jacobi pressure iterations (warm-started from the previous step)
6. pressure gradient subtraction
7. dye advection by the projected velocity with dye_dissipation

Every pass reads one buffer and writes another; double-buffered fields swap
after each write. Two solvers with identical parameters, dimensions and
input sequence produce identical fields.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

import taichi as ti

from fluidsplat.config import check_platform
from fluidsplat.core.dtypes import DTYPE
from fluidsplat.core.geometry import GridGeometry
from fluidsplat.errors import ContextLost, UnsupportedPlatform
from fluidsplat.fields.solver import SolverFields, create_solver_container
from fluidsplat.kernels.protocol import PassId
from fluidsplat.kernels.registry import KernelRegistry
from fluidsplat.kernels.runner import PassRunner
from fluidsplat.params.schema import SimulationConfig, SolverParams
from fluidsplat.resolution import DisplaySurface, ResolutionManager

logger = logging.getLogger(__name__)

# Radius substituted for zero, negative or NaN splat radii [uv]
MIN_SPLAT_RADIUS = 1e-3


class SplatTarget(str, Enum):
    """Field receiving a splat."""

    VELOCITY = "velocity"
    DYE = "dye"


@dataclass(frozen=True)
class DyeFieldView:
    """Read-only handle on the current dye buffer.

    Attributes:
        field: Taichi vector ndarray, shape (width, height), 3 channels
        width: Simulation width in cells
        height: Simulation height in cells
        channels: Components per cell
        dtype: Taichi element type

    Valid until the next step, splat, resize or reset.
    """

    field: Any
    width: int
    height: int
    channels: int
    dtype: Any

    def to_numpy(self):
        """Copy the dye to a (width, height, channels) numpy array."""
        return self.field.to_numpy()


@dataclass
class SolverStats:
    """Counters for one solver instance."""

    steps: int = 0
    splats: int = 0
    reallocations: int = 0


class FluidSolver:
    """Real-time incompressible 2D fluid solver.

    Example:
        surface = DisplaySurface(800, 600, pixel_ratio=2.0)
        solver = FluidSolver(surface, SolverParams(quality_scale=0.5))
        solver.splat((0.5, 0.5), (1.0, 0.0), target="velocity")
        solver.splat((0.5, 0.5), (1.0, 0.2, 0.1), target="dye")
        solver.step(1 / 60)
        rgb = solver.get_dye_field().to_numpy()
    """

    def __init__(
        self,
        surface: DisplaySurface,
        params: SolverParams | SimulationConfig | None = None,
        registry: KernelRegistry | None = None,
    ):
        """Allocate all fields for the surface and compile every pass.

        Args:
            surface: Display surface the simulation is sized against
            params: Solver parameters (default: SolverParams())
            registry: Kernel registry (default: the global registry)

        Raises:
            UnsupportedPlatform: If float field storage cannot be allocated
                or a solver kernel fails to compile
        """
        if isinstance(params, SimulationConfig):
            params = params.solver
        self._params = params if params is not None else SolverParams()
        self._surface = surface
        self._resolution = ResolutionManager()
        self._lost = False
        self._released = False
        self.stats = SolverStats()

        sim_w, sim_h, backing_w, backing_h = self._resolution.target_dimensions(
            surface, self._params
        )
        geometry = GridGeometry(sim_w, sim_h)

        check_platform()
        self._container = None
        try:
            self._container = create_solver_container(geometry)
            self._fields = SolverFields(self._container)
            self._runner = PassRunner(geometry, registry)
            self._compile_passes()
        except (RuntimeError, ti.TaichiCompilationError) as e:
            if self._container is not None:
                self._container.release()
            raise UnsupportedPlatform(
                f"Float grid processing unavailable at {sim_w}x{sim_h}: {e}"
            ) from e

        surface.backing_width = backing_w
        surface.backing_height = backing_h
        self.stats = SolverStats()
        logger.info(
            "Solver created at %dx%d (backing %dx%d, quality %.2f)",
            sim_w,
            sim_h,
            backing_w,
            backing_h,
            self._params.effective_quality,
        )

    def _compile_passes(self) -> None:
        # Zero-valued splats and a zero-dt step on zeroed fields leave the
        # state at zero but force every kernel to compile now.
        self.splat((0.5, 0.5), (0.0, 0.0), target=SplatTarget.VELOCITY)
        self.splat((0.5, 0.5), (0.0, 0.0, 0.0), target=SplatTarget.DYE)
        self.compute_curl()
        self.apply_vorticity(0.0)
        self.step(0.0)

    # Properties

    @property
    def params(self) -> SolverParams:
        return self._params

    @property
    def surface(self) -> DisplaySurface:
        return self._surface

    @property
    def geometry(self) -> GridGeometry:
        return self._container.geometry

    @property
    def width(self) -> int:
        return self._container.geometry.width

    @property
    def height(self) -> int:
        return self._container.geometry.height

    @property
    def fields(self) -> SolverFields:
        return self._fields

    @property
    def runner(self) -> PassRunner:
        return self._runner

    @property
    def generation(self) -> int:
        """Allocation generation of the field storage."""
        return self._container.generation

    @property
    def is_valid(self) -> bool:
        """False after invalidate() or release()."""
        return not (self._lost or self._released)

    def set_params(self, params: SolverParams) -> None:
        """Replace the solver parameters.

        Takes effect from the next pass. A changed quality_scale or
        max_pixel_ratio only changes the grid on the next resize().
        """
        if not isinstance(params, SolverParams):
            raise TypeError(f"Expected SolverParams, got {type(params).__name__}")
        self._params = params

    # Lifecycle

    def _check_valid(self) -> None:
        if self._lost:
            raise ContextLost("Execution context was lost; construct a new solver")
        if self._released:
            raise RuntimeError("Solver has been released")

    def invalidate(self) -> None:
        """Mark the execution context as lost.

        Called by the host when it observes a context-loss signal. Storage
        is released and every later operation raises ContextLost.
        """
        if self._lost:
            return
        self._lost = True
        self._container.release()
        logger.warning("Execution context lost; solver invalidated")

    def release(self) -> None:
        """Destroy field storage. The solver cannot be used afterwards."""
        if self._released or self._lost:
            return
        self._released = True
        self._container.release()

    def resize(self) -> bool:
        """Match the grid to the surface's current size and pixel ratio.

        No-op when the simulation dimensions and the surface's backing size
        already match their targets. Otherwise every field is reallocated
        zero-filled and the new backing size is recorded on the surface.

        Returns:
            True if fields were reallocated

        Raises:
            ContextLost: If the solver was invalidated
        """
        self._check_valid()
        if not self._resolution.needs_resize(self._surface, self._params, self.geometry):
            return False

        sim_w, sim_h, backing_w, backing_h = self._resolution.target_dimensions(
            self._surface, self._params
        )
        old = self.geometry
        geometry = GridGeometry(sim_w, sim_h)
        self._container.reallocate(geometry)
        self._runner.geometry = geometry
        self._surface.backing_width = backing_w
        self._surface.backing_height = backing_h
        self.stats.reallocations += 1
        logger.info(
            "Resized %dx%d -> %dx%d (backing %dx%d)",
            old.width,
            old.height,
            sim_w,
            sim_h,
            backing_w,
            backing_h,
        )
        return True

    def reset(self) -> None:
        """Clear every field by reallocating at the current dimensions.

        Raises:
            ContextLost: If the solver was invalidated
        """
        self._check_valid()
        self._container.reallocate()
        self.stats.reallocations += 1
        logger.debug("Fields reset at %dx%d", self.width, self.height)

    # Pipeline stages

    def compute_curl(self) -> None:
        """Pass 1: curl <- curl(velocity)."""
        self._check_valid()
        f = self._fields
        self._runner.run_pass(PassId.CURL, {"velocity": f.velocity}, f.curl)

    def apply_vorticity(self, dt: float) -> None:
        """Pass 2: add the confinement force, then swap velocity."""
        self._check_valid()
        f = self._fields
        self._runner.run_pass(
            PassId.VORTICITY,
            {"velocity": f.velocity, "curl": f.curl},
            f.velocity_new,
            dt=dt,
            strength=self._params.vorticity,
        )
        f.swap_velocity()

    def advect_velocity(self, dt: float) -> None:
        """Pass 3: velocity self-advection with velocity_dissipation."""
        self._check_valid()
        f = self._fields
        self._runner.run_pass(
            PassId.ADVECT,
            {"source": f.velocity, "velocity": f.velocity},
            f.velocity_new,
            dt=dt,
            dissipation=self._params.velocity_dissipation,
        )
        f.swap_velocity()

    def compute_divergence(self) -> None:
        """Pass 4: divergence <- div(velocity)."""
        self._check_valid()
        f = self._fields
        self._runner.run_pass(PassId.DIVERGENCE, {"velocity": f.velocity}, f.divergence)

    def solve_pressure(self, iterations: int | None = None) -> None:
        """Pass 5: Jacobi iterations of laplacian(p) = divergence.

        Starts from the pressure left by the previous step.

        Args:
            iterations: Iteration count (default: params.pressure_iterations)
        """
        self._check_valid()
        if iterations is None:
            iterations = self._params.pressure_iterations
        f = self._fields
        for _ in range(iterations):
            self._runner.run_pass(
                PassId.PRESSURE,
                {"pressure": f.pressure, "divergence": f.divergence},
                f.pressure_new,
            )
            f.swap_pressure()

    def subtract_gradient(self) -> None:
        """Pass 6: velocity <- velocity - grad(pressure)."""
        self._check_valid()
        f = self._fields
        self._runner.run_pass(
            PassId.GRADIENT,
            {"velocity": f.velocity, "pressure": f.pressure},
            f.velocity_new,
        )
        f.swap_velocity()

    def project(self, iterations: int | None = None) -> None:
        """Passes 4-6: make velocity approximately divergence-free."""
        self.compute_divergence()
        self.solve_pressure(iterations)
        self.subtract_gradient()

    def advect_dye(self, dt: float) -> None:
        """Pass 7: dye advection by velocity with dye_dissipation."""
        self._check_valid()
        f = self._fields
        self._runner.run_pass(
            PassId.ADVECT,
            {"source": f.dye, "velocity": f.velocity},
            f.dye_new,
            dt=dt,
            dissipation=self._params.dye_dissipation,
        )
        f.swap_dye()

    def step(self, dt: float) -> None:
        """Advance the simulation by dt seconds.

        dt is clamped to [0, max_dt]; a NaN dt counts as 0.

        Raises:
            ContextLost: If the solver was invalidated
        """
        self._check_valid()
        dt = float(dt)
        if math.isnan(dt):
            dt = 0.0
        dt = min(max(dt, 0.0), self._params.max_dt)

        self.compute_curl()
        if self._params.vorticity > 0:
            self.apply_vorticity(dt)
        self.advect_velocity(dt)
        self.project()
        self.advect_dye(dt)
        self.stats.steps += 1

    # Injection

    def splat(
        self,
        point: Sequence[float],
        value: Sequence[float],
        radius: float | None = None,
        target: SplatTarget | str = SplatTarget.DYE,
    ) -> None:
        """Add a Gaussian-weighted value to velocity or dye.

        Args:
            point: Center (x, y) in normalized coordinates
            value: 2 or 3 components; velocity uses the first two, a
                2-component dye color gets a zero third channel
            radius: Normalized falloff radius (default: params.splat_radius);
                zero, negative or NaN radii become MIN_SPLAT_RADIUS
            target: SplatTarget or "velocity"/"dye"

        A splat with a NaN or infinite point or value component is dropped.

        Raises:
            ValueError: If target is unknown or value has the wrong length
            ContextLost: If the solver was invalidated
        """
        self._check_valid()
        target = SplatTarget(target)
        px, py = (float(c) for c in point)
        components = [float(c) for c in value]
        if len(components) not in (2, 3):
            raise ValueError(f"Splat value needs 2 or 3 components, got {len(components)}")
        if len(components) == 2:
            components.append(0.0)
        if not all(math.isfinite(c) for c in (px, py, *components)):
            logger.debug("Dropped non-finite splat at (%s, %s)", px, py)
            return

        if radius is None:
            radius = self._params.splat_radius
        radius = float(radius)
        if not radius > 0:
            radius = MIN_SPLAT_RADIUS

        f = self._fields
        if target == SplatTarget.VELOCITY:
            read, write, swap = f.velocity, f.velocity_new, f.swap_velocity
        else:
            read, write, swap = f.dye, f.dye_new, f.swap_dye

        self._runner.run_pass(
            PassId.SPLAT,
            {"target": read},
            write,
            px=px,
            py=py,
            v0=components[0],
            v1=components[1],
            v2=components[2],
            radius=radius,
        )
        swap()
        self.stats.splats += 1

    # Output

    def get_dye_field(self) -> DyeFieldView:
        """Current dye buffer with its dimensions and element format.

        Raises:
            ContextLost: If the solver was invalidated
        """
        self._check_valid()
        return DyeFieldView(
            field=self._fields.dye,
            width=self.width,
            height=self.height,
            channels=self._fields.dye.n,
            dtype=DTYPE,
        )
