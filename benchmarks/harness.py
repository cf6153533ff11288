"""Benchmark base class: Taichi setup, profiler output, table headers."""
import abc
import taichi as ti
from typing import Any

from fluidsplat.config import init_taichi
from fluidsplat.errors import UnsupportedPlatform


class Benchmark(abc.ABC):
    """Abstract base class for all benchmarks."""

    def __init__(self, profile: bool = False, backend: str | None = None):
        self.profile = profile
        self.backend = backend
        self.init_taichi()

    def init_taichi(self):
        """Initialize Taichi backend."""
        print(f"Initializing Taichi (Profile: {self.profile})...")
        try:
            init_taichi(backend=self.backend, debug=False, kernel_profiler=self.profile)
        except UnsupportedPlatform as e:
            print(f"Warning: {e}; falling back to CPU")
            init_taichi(backend="cpu", debug=False, kernel_profiler=self.profile)

    @abc.abstractmethod
    def run(self, steps: int = 100) -> Any:
        """Time `steps` solver steps per case and print a table."""

    def teardown(self):
        """Print and clear profiler output."""
        if self.profile:
            print("\nProfiler Output:")
            ti.profiler.print_kernel_profiler_info()
            ti.profiler.clear_kernel_profiler_info()

    def print_header(self, title: str):
        print("\n" + "=" * 80)
        print(f"{title:^80}")
        print("=" * 80)

    def print_footer(self):
        print("=" * 80)
