"""
Registry of named kernel passes.

The default registry holds every pass the solver pipeline and the injection
interface use. Alternative kernels (for example a fused or differently
stenciled variant) can be registered under the same PassId without changing
the orchestration code in FluidSolver.
"""

from fluidsplat.kernels.advection import advect
from fluidsplat.kernels.projection import divergence, pressure_jacobi, subtract_gradient
from fluidsplat.kernels.protocol import PassId, PassSpec
from fluidsplat.kernels.splat import splat
from fluidsplat.kernels.vorticity import compute_curl, vorticity_confinement


def default_passes() -> list[PassSpec]:
    """Pass specifications for the reference kernels."""
    return [
        PassSpec(
            PassId.CURL,
            compute_curl,
            sources=("velocity",),
            description="Central-difference curl of velocity",
        ),
        PassSpec(
            PassId.VORTICITY,
            vorticity_confinement,
            sources=("velocity", "curl"),
            params=("dt", "strength"),
            description="Vorticity confinement force",
        ),
        PassSpec(
            PassId.ADVECT,
            advect,
            sources=("source", "velocity"),
            params=("dt", "dissipation"),
            description="Semi-Lagrangian advection with dissipation",
        ),
        PassSpec(
            PassId.DIVERGENCE,
            divergence,
            sources=("velocity",),
            description="Central-difference divergence of velocity",
        ),
        PassSpec(
            PassId.PRESSURE,
            pressure_jacobi,
            sources=("pressure", "divergence"),
            description="One Jacobi iteration of the pressure Poisson equation",
        ),
        PassSpec(
            PassId.GRADIENT,
            subtract_gradient,
            sources=("velocity", "pressure"),
            description="Subtract the pressure gradient from velocity",
        ),
        PassSpec(
            PassId.SPLAT,
            splat,
            sources=("target",),
            params=("px", "py", "v0", "v1", "v2", "radius"),
            description="Additive Gaussian splat",
        ),
    ]


class KernelRegistry:
    """Registry mapping PassId to PassSpec.

    Example:
        registry = KernelRegistry()
        spec = registry.get(PassId.ADVECT)

        # Swap in a custom implementation
        registry.register(PassSpec(PassId.ADVECT, my_advect, ("source", "velocity"),
                                   ("dt", "dissipation")))
    """

    def __init__(self, passes: list[PassSpec] | None = None):
        """Initialize registry, by default with the reference kernels."""
        self._passes: dict[PassId, PassSpec] = {}
        for spec in default_passes() if passes is None else passes:
            self.register(spec)

    def register(self, spec: PassSpec) -> None:
        """Register (or replace) the implementation of a pass."""
        self._passes[spec.pass_id] = spec

    def get(self, pass_id: PassId | str) -> PassSpec:
        """Look up a pass.

        Args:
            pass_id: PassId or its string value

        Raises:
            KeyError: If the pass is not registered
        """
        try:
            key = PassId(pass_id)
        except ValueError:
            key = None
        if key not in self._passes:
            raise KeyError(
                f"No kernel registered for pass '{pass_id}'. "
                f"Available: {[p.value for p in self._passes]}"
            )
        return self._passes[key]

    def available(self) -> list[PassId]:
        """List registered pass ids."""
        return list(self._passes.keys())

    def __contains__(self, pass_id: object) -> bool:
        try:
            return PassId(pass_id) in self._passes
        except ValueError:
            return False


# Default registry instance for convenience
_default_registry = KernelRegistry()


def get_registry() -> KernelRegistry:
    """Get the default kernel registry.

    Returns:
        The global KernelRegistry instance
    """
    return _default_registry
