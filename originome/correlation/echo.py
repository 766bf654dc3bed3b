"""
Echo Propagator — Predict how a risk event in one sector ripples into others.

Pipeline:
1. Select library patterns that involve the source sector
2. Boost their confidence by current environmental stress
3. Rescale network-effect metadata against the current network size
4. For each secondary sector of each pattern, synthesize a delayed,
   amplified echo
5. Aggregate into a cascade risk clamped to [0, 100]
"""

import math
import random
from collections import deque
from typing import Mapping, Optional

import structlog

from originome.correlation.library import (
    MAX_LEARNING_ACCELERATION,
    CorrelationLibrary,
)
from originome.correlation.schemas import (
    CorrelationPattern,
    EchoDetection,
    PredictedEcho,
    SourceEvent,
)

logger = structlog.get_logger(__name__)

# ── Configuration ─────────────────────────────────────────────────────────

MAX_CONFIDENCE_BOOST: float = 1.2
CONFIDENCE_CEILING: float = 0.95
STRESS_BOOST_WEIGHT: float = 0.2
ECHO_CONFIDENCE_DECAY: float = 0.9
MITIGATION_FRACTION: float = 0.7
MAX_DELAY_JITTER_HOURS: float = 6.0
NETWORK_SCALE_REFERENCE: float = 30.0
ECHO_HISTORY_SIZE: int = 10
MAX_CASCADE_RISK: float = 100.0

THERMAL_SETPOINT: float = 21.0
HUMIDITY_COMFORT_RANGE: tuple[float, float] = (30.0, 60.0)


def environmental_stress(factors: Mapping[str, float]) -> float:
    """
    Weighted sum of comfort-threshold breaches, capped at 1.0.

    pm25 > 25: +0.3 | co2 > 800: +0.2 | |temp - 21| > 3: +0.2
    humidity outside [30, 60]: +0.1. Missing factors contribute nothing.
    """
    stress = 0.0
    pm25 = factors.get("pm25")
    co2 = factors.get("co2")
    temperature = factors.get("temperature")
    humidity = factors.get("humidity")

    if pm25 is not None and pm25 > 25:
        stress += 0.3
    if co2 is not None and co2 > 800:
        stress += 0.2
    if temperature is not None and abs(temperature - THERMAL_SETPOINT) > 3:
        stress += 0.2
    low, high = HUMIDITY_COMFORT_RANGE
    if humidity is not None and (humidity > high or humidity < low):
        stress += 0.1

    return min(1.0, stress)


class EchoPropagator:
    """
    Reads the correlation library, never mutates it.

    Keeps a bounded history of its own echo detections.
    """

    def __init__(
        self,
        library: CorrelationLibrary,
        rng: Optional[random.Random] = None,
        network_scale_reference: float = NETWORK_SCALE_REFERENCE,
        history_size: int = ECHO_HISTORY_SIZE,
    ):
        self.library = library
        self._rng = rng or random.Random()
        self.network_scale_reference = network_scale_reference
        self._history: deque[EchoDetection] = deque(maxlen=history_size)

    def detect_cross_sector_patterns(
        self,
        sector: str,
        factors: Optional[Mapping[str, float]] = None,
    ) -> list[CorrelationPattern]:
        """
        Patterns involving ``sector``, adjusted for current conditions.

        Returns:
            Adjusted pattern copies sorted by correlation strength (desc)
        """
        patterns = self.library.patterns_for_sector(sector)
        customers = self.library.network_customers

        stress = environmental_stress(factors or {})
        boost = min(MAX_CONFIDENCE_BOOST, 1 + stress * STRESS_BOOST_WEIGHT)

        for pattern in patterns:
            pattern.confidence = min(CONFIDENCE_CEILING, pattern.confidence * boost)
            effect = pattern.network_effect
            effect.customer_count = customers
            effect.learning_acceleration = min(
                MAX_LEARNING_ACCELERATION,
                effect.learning_acceleration * (customers / self.network_scale_reference),
            )

        patterns.sort(key=lambda p: p.correlation_strength, reverse=True)

        logger.debug(
            "cross_sector_patterns_detected",
            sector=sector,
            patterns=len(patterns),
            stress=round(stress, 2),
        )
        return patterns

    def predict_echo_effects(
        self,
        source_event: SourceEvent,
        sector: Optional[str] = None,
        factors: Optional[Mapping[str, float]] = None,
    ) -> EchoDetection:
        """
        Predict delayed, amplified impacts of ``source_event`` in other sectors.

        cascade_risk = clamp(mean(expected_impact * confidence), 0, 100);
        0.0 when no pattern touches the sector.
        """
        sector = sector or source_event.sector
        patterns = self.detect_cross_sector_patterns(sector, factors)

        echoes: list[PredictedEcho] = []
        for pattern in patterns:
            ripple = pattern.ripple_effect
            for target in ripple.secondary_sectors:
                echoes.append(PredictedEcho(
                    pattern_id=pattern.pattern_id,
                    target_sector=target,
                    predicted_delay=ripple.impact_delay
                    + self._rng.uniform(0, MAX_DELAY_JITTER_HOURS),
                    expected_impact=source_event.magnitude * ripple.amplification_factor,
                    confidence=pattern.confidence * ECHO_CONFIDENCE_DECAY,
                    mitigation_window=ripple.impact_delay * MITIGATION_FRACTION,
                ))

        cascade_risk = self._cascade_risk(echoes)
        detection = EchoDetection(
            source_event=source_event.model_copy(update={"sector": sector}),
            predicted_echoes=echoes,
            cascade_risk=cascade_risk,
        )
        self._history.append(detection)

        logger.info(
            "echo_effects_predicted",
            sector=sector,
            magnitude=source_event.magnitude,
            echoes=len(echoes),
            cascade_risk=round(cascade_risk, 2),
        )
        return detection

    def echo_history(self) -> list[EchoDetection]:
        """Most recent detections, oldest first."""
        return list(self._history)

    def _cascade_risk(self, echoes: list[PredictedEcho]) -> float:
        if not echoes:
            return 0.0
        mean = sum(e.expected_impact * e.confidence for e in echoes) / len(echoes)
        if math.isnan(mean):
            return 0.0
        return max(0.0, min(MAX_CASCADE_RISK, mean))
