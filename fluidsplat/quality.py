"""Adaptive quality control.

Tracks an exponential moving average of frame time and nudges
quality_scale with hysteresis: down by one step while frames are slow,
up by one step while they are fast, unchanged in between.
"""

import logging

from fluidsplat.params.schema import QualityParams

logger = logging.getLogger(__name__)

# Tolerance when matching the current scale against a preset
_PRESET_TOLERANCE = 1e-3


class QualityController:
    """Frame-time driven quality_scale controller.

    Example:
        controller = QualityController()
        for frame_seconds in frame_times:
            solver.step(frame_seconds)
            controller.update(solver, frame_seconds)
    """

    def __init__(self, params: QualityParams | None = None):
        self.params = params if params is not None else QualityParams()
        self._ema_ms = self.params.initial_frame_ms

    @property
    def frame_ms(self) -> float:
        """Smoothed frame time [ms]."""
        return self._ema_ms

    @property
    def fps(self) -> float:
        """Frames per second implied by the smoothed frame time."""
        return 1000.0 / self._ema_ms

    def observe(self, frame_seconds: float) -> float:
        """Fold one frame time into the moving average.

        Args:
            frame_seconds: Duration of the last frame [s]

        Returns:
            Updated smoothed frame time [ms]
        """
        w = self.params.ema_weight
        self._ema_ms = (1.0 - w) * self._ema_ms + w * frame_seconds * 1000.0
        return self._ema_ms

    def recommend(self, current_scale: float) -> float | None:
        """Scale to switch to, or None to keep current_scale."""
        p = self.params
        if self._ema_ms > p.high_threshold_ms and current_scale > p.floor:
            return max(p.floor, current_scale - p.step)
        if self._ema_ms < p.low_threshold_ms and current_scale < p.ceiling:
            return min(p.ceiling, current_scale + p.step)
        return None

    def update(self, solver, frame_seconds: float) -> bool:
        """Observe a frame and apply any recommended scale to the solver.

        Args:
            solver: FluidSolver to adjust
            frame_seconds: Duration of the last frame [s]

        Returns:
            True if the solver was resized
        """
        self.observe(frame_seconds)
        current = solver.params.quality_scale
        scale = self.recommend(current)
        if scale is None:
            return False
        logger.debug(
            "Quality %.2f -> %.2f (frame %.1f ms)", current, scale, self._ema_ms
        )
        solver.set_params(solver.params.with_updates(quality_scale=scale))
        return solver.resize()

    def cycle(self, current_scale: float) -> float:
        """Next preset after current_scale; the first preset if none matches."""
        presets = self.params.presets
        index = -1
        for i, value in enumerate(presets):
            if abs(value - current_scale) < _PRESET_TOLERANCE:
                index = i
                break
        return presets[(index + 1) % len(presets)]

    def reset(self) -> None:
        """Restart the moving average from initial_frame_ms."""
        self._ema_ms = self.params.initial_frame_ms
