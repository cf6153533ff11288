"""
Taichi configuration and initialization.

Environment variables:
    FLUIDSPLAT_BACKEND: 'cuda', 'vulkan', 'metal', 'cpu', or 'auto' (default)
    FLUIDSPLAT_DEBUG: '1' to enable debug mode

Falls back to CPU when no GPU is detected. An explicitly requested GPU
backend that Taichi cannot provide is reported as UnsupportedPlatform.
"""

import logging
import os
import subprocess

import taichi as ti

from fluidsplat.core.dtypes import DTYPE
from fluidsplat.errors import UnsupportedPlatform

logger = logging.getLogger(__name__)

_ARCHES = {
    "cuda": ti.cuda,
    "vulkan": ti.vulkan,
    "metal": ti.metal,
    "cpu": ti.cpu,
}


def get_backend() -> str:
    """Determine Taichi backend: check env var, then auto-detect."""
    env = os.environ.get("FLUIDSPLAT_BACKEND", "auto").lower()

    if env in _ARCHES:
        return env
    if env != "auto":
        raise ValueError(f"Invalid FLUIDSPLAT_BACKEND: {env}")

    # Auto-detect CUDA
    try:
        result = subprocess.run(
            ["nvidia-smi", "-L"], capture_output=True, text=True, timeout=5
        )
        if result.returncode == 0 and "GPU" in result.stdout:
            return "cuda"
    except (FileNotFoundError, subprocess.TimeoutExpired):
        pass

    return "cpu"


# Written to and read back from a one-cell array by check_platform; has a
# fractional part so integer or truncating storage cannot reproduce it.
FLOAT_CHECK_VALUE = 0.15625


def _check_dtype() -> None:
    if DTYPE not in (ti.f32, ti.f64):
        raise UnsupportedPlatform(
            f"Solver fields need 32- or 64-bit float storage, got {DTYPE}"
        )


def check_platform() -> None:
    """Verify the initialized backend can store and read back float grids.

    Allocates a 1x1 DTYPE array, writes FLOAT_CHECK_VALUE and reads it back.

    Raises:
        UnsupportedPlatform: If DTYPE is not ti.f32 or ti.f64, the array
            cannot be allocated or written, or the value does not survive
    """
    _check_dtype()
    try:
        cell = ti.ndarray(DTYPE, shape=(1, 1))
        cell[0, 0] = FLOAT_CHECK_VALUE
        value = cell[0, 0]
    except RuntimeError as e:
        raise UnsupportedPlatform(f"Float storage unavailable: {e}") from e
    if value != FLOAT_CHECK_VALUE:
        raise UnsupportedPlatform(
            f"Float storage round trip returned {value}, expected {FLOAT_CHECK_VALUE}"
        )


def init_taichi(
    backend: str | None = None,
    debug: bool | None = None,
    kernel_profiler: bool = False,
) -> str:
    """Initialize Taichi with specified or auto-detected backend.

    Args:
        backend: One of 'cuda', 'vulkan', 'metal', 'cpu' (default: get_backend())
        debug: Enable bounds checking (default: FLUIDSPLAT_DEBUG env var)
        kernel_profiler: Enable Taichi's kernel profiler

    Returns:
        Name of the initialized backend

    Raises:
        ValueError: If backend is unknown
        UnsupportedPlatform: If a GPU backend was requested but Taichi fell
            back to another architecture, or float storage fails check_platform
    """
    if backend is None:
        backend = get_backend()
    if debug is None:
        debug = os.environ.get("FLUIDSPLAT_DEBUG", "0") == "1"

    arch = _ARCHES.get(backend)
    if arch is None:
        raise ValueError(f"Unknown backend: {backend}")

    _check_dtype()
    ti.init(
        arch=arch,
        default_fp=DTYPE,
        debug=debug,
        offline_cache=True,
        random_seed=42,
        kernel_profiler=kernel_profiler,
    )

    if backend != "cpu":
        actual = ti.lang.impl.current_cfg().arch
        if actual != arch:
            raise UnsupportedPlatform(
                f"Requested backend '{backend}' is not available "
                f"(Taichi initialized {actual} instead)"
            )

    check_platform()
    logger.info("Taichi initialized on %s (debug=%s)", backend, debug)
    return backend
