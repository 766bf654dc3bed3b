"""
Pattern Classifier — Derivative sets to risk tiers and ranked alerts.

Per parameter, with its configured thresholds:
1. |velocity| > sudden_change_threshold → CRITICAL / sudden_shift (overrides all)
2. |acceleration| > accel_high → HIGH; > accel_moderate → MODERATE; else LOW
3. Alert type otherwise: jerk > acceleration > velocity

LOW patterns are dropped. HIGH and CRITICAL patterns become
FirstDerivativeAlerts with an ordinal criticality score.
"""

from typing import Mapping, Optional

import structlog

from originome.alerting.schemas import (
    RISK_LEVEL_RANK,
    AccelerationPattern,
    AlertType,
    FirstDerivativeAlert,
    RiskLevel,
)
from originome.config import DEFAULT_PARAMETER_THRESHOLDS, ParameterThresholds
from originome.streaming.schemas import DerivativeSet

logger = structlog.get_logger(__name__)

CRITICALITY_SCORES: dict[RiskLevel, int] = {
    RiskLevel.CRITICAL: 95,
    RiskLevel.HIGH: 75,
}

SUDDEN_RISK_WINDOW: str = "5-15 minutes"
DEFAULT_RISK_WINDOW: str = "15-30 minutes"


class PatternClassifier:
    """Stateless classifier over per-parameter derivative sets."""

    def __init__(self, thresholds: Optional[Mapping[str, ParameterThresholds]] = None):
        self.thresholds = dict(thresholds if thresholds is not None else DEFAULT_PARAMETER_THRESHOLDS)

    def classify(
        self, parameter: str, derivatives: DerivativeSet
    ) -> Optional[AccelerationPattern]:
        """
        Classify one parameter. Returns None when the parameter has no
        configured thresholds.
        """
        limits = self.thresholds.get(parameter)
        if limits is None:
            return None

        velocity = derivatives.velocity
        acceleration = derivatives.acceleration
        jerk = derivatives.jerk

        sudden = abs(velocity) > limits.sudden_change_threshold

        if sudden:
            risk_level = RiskLevel.CRITICAL
        elif abs(acceleration) > limits.accel_high:
            risk_level = RiskLevel.HIGH
        elif abs(acceleration) > limits.accel_moderate:
            risk_level = RiskLevel.MODERATE
        else:
            risk_level = RiskLevel.LOW

        if sudden:
            alert_type = AlertType.SUDDEN_SHIFT
        elif limits.jerk_threshold is not None and abs(jerk) > limits.jerk_threshold:
            alert_type = AlertType.JERK
        elif abs(acceleration) > limits.accel_moderate:
            alert_type = AlertType.ACCELERATION
        else:
            alert_type = AlertType.VELOCITY

        return AccelerationPattern(
            parameter=parameter,
            label=limits.label,
            velocity=velocity,
            acceleration=acceleration,
            jerk=jerk,
            sudden_change=sudden,
            risk_level=risk_level,
            alert_type=alert_type,
        )

    def analyze(
        self, derivatives: Mapping[str, DerivativeSet]
    ) -> list[AccelerationPattern]:
        """
        Classify every parameter, drop LOW, rank by risk level (stable).
        """
        patterns: list[AccelerationPattern] = []
        for parameter, derivative_set in derivatives.items():
            pattern = self.classify(parameter, derivative_set)
            if pattern is None:
                logger.debug("parameter_not_classified", parameter=parameter)
                continue
            if pattern.risk_level == RiskLevel.LOW:
                continue
            patterns.append(pattern)

        patterns.sort(key=lambda p: RISK_LEVEL_RANK[p.risk_level], reverse=True)
        return patterns

    def generate_alerts(
        self, patterns: list[AccelerationPattern]
    ) -> list[FirstDerivativeAlert]:
        """Convert HIGH / CRITICAL patterns into alerts sorted by criticality."""
        alerts: list[FirstDerivativeAlert] = []
        for pattern in patterns:
            score = CRITICALITY_SCORES.get(pattern.risk_level)
            if score is None:
                continue

            if pattern.alert_type == AlertType.ACCELERATION:
                derivative_value = pattern.acceleration
            else:
                derivative_value = pattern.velocity

            if pattern.sudden_change:
                direction = "spike" if pattern.velocity > 0 else "drop"
                reason = f"Sudden {direction} detected"
            else:
                reason = f"{pattern.alert_type.value} threshold exceeded"

            alerts.append(FirstDerivativeAlert(
                id=f"derivative_{pattern.parameter}",
                parameter=pattern.parameter,
                derivative_value=derivative_value,
                alert_reason=reason,
                risk_window=SUDDEN_RISK_WINDOW if pattern.sudden_change else DEFAULT_RISK_WINDOW,
                criticality_score=score,
            ))

        # sort() is stable: ties keep pattern order
        alerts.sort(key=lambda a: a.criticality_score, reverse=True)

        if alerts:
            logger.info(
                "derivative_alerts_generated",
                total=len(alerts),
                critical=sum(1 for a in alerts if a.criticality_score == CRITICALITY_SCORES[RiskLevel.CRITICAL]),
            )
        return alerts
