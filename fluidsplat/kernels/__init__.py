"""
Taichi kernels for the fluid solver.

Every solver stage is one data-parallel pass over a destination field,
launched through the PassRunner, which checks each call against the
registered PassSpec.

Usage:
    from fluidsplat.kernels import PassId, PassRunner

    runner = PassRunner(GridGeometry(128, 128))
    runner.run_pass(PassId.DIVERGENCE, {"velocity": vel}, div)

Submodules:
- sampling: clamp-to-edge sampling and bilinear interpolation
- vorticity, advection, projection, splat: pass kernels
- utils: reductions for diagnostics and the viewer's resampling pass
- protocol, registry, runner: pass definitions and dispatch
"""

from fluidsplat.kernels.protocol import PassId, PassSpec
from fluidsplat.kernels.registry import KernelRegistry, default_passes, get_registry
from fluidsplat.kernels.runner import PassRunner

__all__ = [
    "PassId",
    "PassSpec",
    "KernelRegistry",
    "default_passes",
    "get_registry",
    "PassRunner",
]
