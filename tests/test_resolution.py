"""Tests for display-surface to simulation-grid sizing."""

import pytest

from fluidsplat.core.geometry import GridGeometry
from fluidsplat.params import SolverParams
from fluidsplat.resolution import DisplaySurface, ResolutionManager


@pytest.fixture
def manager():
    return ResolutionManager()


class TestTargetDimensions:
    """Tests for ResolutionManager.target_dimensions."""

    def test_full_quality(self, manager):
        """Quality 1 at pixel ratio 1 gives the client size."""
        surface = DisplaySurface(800, 600, 1.0)
        dims = manager.target_dimensions(surface, SolverParams(quality_scale=1.0))
        assert dims == (800, 600, 800, 600)

    def test_pixel_ratio_capped(self, manager):
        """Pixel ratio 3 is capped at max_pixel_ratio 1.8."""
        surface = DisplaySurface(100, 100, 3.0)
        dims = manager.target_dimensions(surface, SolverParams(quality_scale=0.75))
        assert dims == (135, 135, 180, 180)

    @pytest.mark.parametrize("ratio", [0.0, -2.0, float("nan"), float("inf")])
    def test_invalid_pixel_ratio_is_one(self, manager, ratio):
        """Non-positive or non-finite pixel ratios count as 1."""
        surface = DisplaySurface(200, 100, ratio)
        dims = manager.target_dimensions(surface, SolverParams(quality_scale=1.0))
        assert dims == (200, 100, 200, 100)

    @pytest.mark.parametrize(
        "quality, expected",
        [(0.1, 100), (0.25, 100), (0.5, 200), (1.0, 400), (5.0, 400)],
    )
    def test_quality_clamped(self, manager, quality, expected):
        """quality_scale is clamped to [0.25, 1]."""
        surface = DisplaySurface(400, 400, 1.0)
        sim_w, sim_h, _, _ = manager.target_dimensions(
            surface, SolverParams(quality_scale=quality)
        )
        assert (sim_w, sim_h) == (expected, expected)

    def test_floors_fractional_sizes(self, manager):
        """Fractional products are floored."""
        surface = DisplaySurface(100.7, 50.2, 1.0)
        dims = manager.target_dimensions(surface, SolverParams(quality_scale=1.0))
        assert dims == (100, 50, 100, 50)

    def test_minimum_sizes(self, manager):
        """Tiny surfaces clamp to 16 cells and a 2-pixel backing."""
        surface = DisplaySurface(10, 1, 1.0)
        dims = manager.target_dimensions(surface, SolverParams(quality_scale=1.0))
        assert dims == (16, 16, 10, 2)

    @pytest.mark.parametrize("w, h", [(0, 0), (-50, 0), (0, 300)])
    def test_collapsed_surface(self, manager, w, h):
        """Zero or negative client sizes never raise."""
        sim_w, sim_h, backing_w, backing_h = manager.target_dimensions(
            DisplaySurface(w, h), SolverParams()
        )
        assert sim_w >= 16 and sim_h >= 16
        assert backing_w >= 2 and backing_h >= 2

    @pytest.mark.parametrize(
        "w, h",
        [(float("inf"), 300), (300, float("-inf")), (float("nan"), float("nan"))],
    )
    def test_non_finite_surface(self, manager, w, h):
        """Infinite or NaN client sizes count as a collapsed axis instead of overflowing."""
        surface = DisplaySurface(w, h, 1.0)
        dims = manager.target_dimensions(surface, SolverParams(quality_scale=1.0))
        expected_w = 300 if w == 300 else 16
        expected_h = 300 if h == 300 else 16
        assert dims[:2] == (expected_w, expected_h)
        assert min(dims[2:]) >= 2


class TestNeedsResize:
    """Tests for ResolutionManager.needs_resize."""

    def test_matching_surface(self, manager):
        """Nothing to do when grid and backing match."""
        surface = DisplaySurface(64, 32, 1.0, backing_width=64, backing_height=32)
        params = SolverParams(quality_scale=1.0)
        assert not manager.needs_resize(surface, params, GridGeometry(64, 32))

    def test_grid_mismatch(self, manager):
        """A different simulation size needs a resize."""
        surface = DisplaySurface(64, 32, 1.0, backing_width=64, backing_height=32)
        params = SolverParams(quality_scale=1.0)
        assert manager.needs_resize(surface, params, GridGeometry(32, 32))

    def test_backing_mismatch(self, manager):
        """A stale backing store needs a resize even at the same grid size."""
        surface = DisplaySurface(64, 32, 1.0, backing_width=63, backing_height=32)
        params = SolverParams(quality_scale=1.0)
        assert manager.needs_resize(surface, params, GridGeometry(64, 32))

    def test_effective_pixel_ratio(self, manager):
        """The cap comes from max_pixel_ratio."""
        params = SolverParams(max_pixel_ratio=2.5)
        assert manager.effective_pixel_ratio(DisplaySurface(1, 1, 3.0), params) == 2.5
        assert manager.effective_pixel_ratio(DisplaySurface(1, 1, 2.0), params) == 2.0
