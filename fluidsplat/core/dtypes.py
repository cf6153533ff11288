"""Type definitions for fluidsplat.

This module defines the floating-point precision used by every solver field.
Every pass reads and writes float storage; integer or fixed-point fields
cannot hold the pressure solve. ti.f32 is the minimum accepted.
"""

import taichi as ti

# Default floating-point type for all fields and computations
# ti.f32: Single precision (32-bit float) - fast on GPU, ~7 significant digits
# ti.f64: Double precision (64-bit float) - not available on every backend
DTYPE = ti.f32

# Kernel argument type for grid buffers. Ndarray arguments are specialized
# on element type and dimensionality, never on shape, so one compiled kernel
# serves every resolution.
GRID = ti.types.ndarray(ndim=2)
