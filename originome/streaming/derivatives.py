"""
Derivative Engine — Finite-difference rate-of-change analysis.

For window values v[0..n]:
    velocity[n]     = v[n] - v[n-1]
    acceleration[n] = velocity[n] - velocity[n-1]
    jerk[n]         = acceleration[n] - acceleration[n-1]

Orders without enough history (<2 / <3 / <4 samples) are 0.0.

By default every sample is one uniform tick. With ``normalize_by_time``
each difference is divided by the real spacing between samples (seconds),
which keeps magnitudes comparable when the sampling cadence jitters.
"""

from typing import Sequence

import structlog

from originome.streaming.schemas import DerivativeSet, ParameterSample

logger = structlog.get_logger(__name__)

UNIT_STEP: float = 1.0


class DerivativeEngine:
    """Stateless: every call recomputes from the samples it is given."""

    def __init__(self, normalize_by_time: bool = False):
        self.normalize_by_time = normalize_by_time

    def compute(self, samples: Sequence[ParameterSample]) -> DerivativeSet:
        """Derivatives for the newest sample of a window."""
        if len(samples) < 2:
            return DerivativeSet()
        # Jerk needs at most the last 4 samples
        return self.compute_series(samples[-4:])[-1]

    def compute_series(self, samples: Sequence[ParameterSample]) -> list[DerivativeSet]:
        """Derivatives for every sample position of a window, oldest first."""
        n = len(samples)
        if n == 0:
            return []

        values = [s.value for s in samples]
        # steps[i] = spacing between sample i-1 and sample i
        steps = [UNIT_STEP] + [
            self._step(samples[i - 1], samples[i]) for i in range(1, n)
        ]

        velocity = [0.0] * n
        acceleration = [0.0] * n
        jerk = [0.0] * n

        for i in range(1, n):
            velocity[i] = (values[i] - values[i - 1]) / steps[i]
        for i in range(2, n):
            acceleration[i] = (velocity[i] - velocity[i - 1]) / self._span(steps, i)
        for i in range(3, n):
            jerk[i] = (acceleration[i] - acceleration[i - 1]) / self._jerk_span(steps, i)

        return [
            DerivativeSet(velocity=velocity[i], acceleration=acceleration[i], jerk=jerk[i])
            for i in range(n)
        ]

    def _step(self, previous: ParameterSample, current: ParameterSample) -> float:
        if not self.normalize_by_time:
            return UNIT_STEP
        dt = (current.timestamp - previous.timestamp).total_seconds()
        if dt <= 0:
            # Duplicate or out-of-order timestamp: fall back to one tick
            logger.warning(
                "non_positive_sample_spacing",
                parameter=current.parameter_id,
                dt_seconds=dt,
            )
            return UNIT_STEP
        return dt

    def _span(self, steps: list[float], i: int) -> float:
        """Spacing between the midpoints of the two differences at i-1 and i."""
        if not self.normalize_by_time:
            return UNIT_STEP
        return (steps[i] + steps[i - 1]) / 2.0

    def _jerk_span(self, steps: list[float], i: int) -> float:
        """Spacing between the acceleration points at i-1 and i."""
        if not self.normalize_by_time:
            return UNIT_STEP
        return (steps[i] + 2.0 * steps[i - 1] + steps[i - 2]) / 4.0
