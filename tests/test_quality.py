"""Tests for the adaptive quality controller."""

import pytest

from fluidsplat.params import QualityParams
from fluidsplat.quality import QualityController


class TestObserve:
    """Tests for the frame-time moving average."""

    def test_initial_state(self):
        """The average starts at initial_frame_ms."""
        controller = QualityController()
        assert controller.frame_ms == pytest.approx(16.6)
        assert controller.fps == pytest.approx(1000.0 / 16.6)

    def test_ema_update(self):
        """ema = 0.9 * ema + 0.1 * frame_ms."""
        controller = QualityController()
        assert controller.observe(0.030) == pytest.approx(17.94)
        assert controller.frame_ms == pytest.approx(17.94)

    def test_converges(self):
        """Repeated identical frames pull the average to that frame time."""
        controller = QualityController()
        for _ in range(200):
            controller.observe(0.040)
        assert controller.frame_ms == pytest.approx(40.0, rel=1e-3)

    def test_reset(self):
        """reset restores initial_frame_ms."""
        controller = QualityController()
        controller.observe(0.1)
        controller.reset()
        assert controller.frame_ms == pytest.approx(16.6)


class TestRecommend:
    """Tests for QualityController.recommend."""

    def test_slow_frames_step_down(self):
        """Above the high threshold the scale drops by one step."""
        controller = QualityController(QualityParams(initial_frame_ms=25.0))
        assert controller.recommend(0.75) == pytest.approx(0.73)

    def test_fast_frames_step_up(self):
        """Below the low threshold the scale rises by one step."""
        controller = QualityController(QualityParams(initial_frame_ms=10.0))
        assert controller.recommend(0.75) == pytest.approx(0.77)

    def test_hysteresis_band(self):
        """Between the thresholds nothing changes."""
        controller = QualityController()
        assert controller.recommend(0.75) is None

    def test_floor(self):
        """The scale never drops below the floor."""
        controller = QualityController(QualityParams(initial_frame_ms=25.0))
        assert controller.recommend(0.45) is None
        assert controller.recommend(0.46) == pytest.approx(0.45)

    def test_ceiling(self):
        """The scale never rises above the ceiling."""
        controller = QualityController(QualityParams(initial_frame_ms=10.0))
        assert controller.recommend(1.0) is None
        assert controller.recommend(0.99) == pytest.approx(1.0)

    def test_configurable_thresholds(self):
        """Thresholds come from QualityParams."""
        params = QualityParams(high_threshold_ms=12.0, low_threshold_ms=8.0)
        controller = QualityController(params)
        assert controller.recommend(0.75) == pytest.approx(0.73)


class TestCycle:
    """Tests for preset cycling."""

    @pytest.mark.parametrize(
        "current, expected",
        [(0.5, 0.75), (0.75, 1.0), (1.0, 0.5), (0.6, 0.5), (0.7501, 1.0)],
    )
    def test_cycle(self, current, expected):
        """Presets advance in order and wrap; unknown scales restart."""
        assert QualityController().cycle(current) == expected


class TestUpdate:
    """Tests for QualityController.update against a live solver."""

    def test_slow_frames_shrink_grid(self, solver_factory):
        """Slow frames lower quality_scale and reallocate smaller."""
        solver = solver_factory(200, 200, quality_scale=0.75)
        assert solver.width == 150
        controller = QualityController(QualityParams(initial_frame_ms=25.0))

        assert controller.update(solver, 0.05) is True

        assert solver.params.quality_scale == pytest.approx(0.73)
        assert solver.width < 150

    def test_steady_frames_keep_grid(self, solver_factory):
        """Frames inside the band leave the solver alone."""
        solver = solver_factory(64, 64, quality_scale=0.75)
        generation = solver.generation
        controller = QualityController()

        assert controller.update(solver, 0.0166) is False
        assert solver.generation == generation

    def test_fast_frames_grow_grid_while_stepping(self, solver_factory):
        """Repeated fast frames keep raising quality across resizes and steps."""
        solver = solver_factory(200, 200, quality_scale=0.5)
        controller = QualityController(QualityParams(initial_frame_ms=5.0))
        scales = [solver.params.quality_scale]

        for _ in range(10):
            solver.step(1.0 / 60.0)
            controller.update(solver, 0.005)
            scales.append(solver.params.quality_scale)

        assert all(b > a for a, b in zip(scales, scales[1:]))
        assert solver.params.quality_scale == pytest.approx(0.7)
        assert solver.width > 130
