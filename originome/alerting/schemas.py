"""
Alert Schemas.

Defines acceleration patterns, first-derivative alerts, compound rules
and compound alerts.
"""

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ── Enums ──────────────────────────────────────────────────────────────


class RiskLevel(StrEnum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


class AlertType(StrEnum):
    VELOCITY = "velocity"
    ACCELERATION = "acceleration"
    JERK = "jerk"
    SUDDEN_SHIFT = "sudden_shift"


class AlertSeverity(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class CompoundType(StrEnum):
    COMPOUND_PATTERN = "compound_pattern"
    CONVERGENCE = "convergence"
    CASCADE = "cascade"
    ANOMALY = "anomaly"
    PREDICTION = "prediction"


class RuleOperator(StrEnum):
    GT = "gt"           # greater than
    GTE = "gte"         # greater than or equal
    LT = "lt"           # less than
    LTE = "lte"         # less than or equal
    EQ = "eq"           # equal
    NEQ = "neq"         # not equal


RISK_LEVEL_RANK: dict[RiskLevel, int] = {
    RiskLevel.CRITICAL: 4,
    RiskLevel.HIGH: 3,
    RiskLevel.MODERATE: 2,
    RiskLevel.LOW: 1,
}

SEVERITY_RANK: dict[AlertSeverity, int] = {
    AlertSeverity.CRITICAL: 4,
    AlertSeverity.HIGH: 3,
    AlertSeverity.MEDIUM: 2,
    AlertSeverity.LOW: 1,
}


# ── Derivative Patterns ────────────────────────────────────────────────


class AccelerationPattern(BaseModel):
    """Risk classification of one parameter's current derivative set."""
    model_config = ConfigDict(frozen=True)

    parameter: str
    label: str
    velocity: float
    acceleration: float
    jerk: float                     # third derivative
    sudden_change: bool
    risk_level: RiskLevel
    alert_type: AlertType


class FirstDerivativeAlert(BaseModel):
    """Ranked alert derived from a high or critical acceleration pattern."""
    model_config = ConfigDict(frozen=True)

    id: str
    parameter: str
    derivative_value: float
    alert_reason: str
    risk_window: str                # qualitative, e.g. "5-15 minutes"
    criticality_score: int          # ordinal: critical=95, high=75


# ── Compound Rules ─────────────────────────────────────────────────────


class RuleClause(BaseModel):
    """
    One threshold predicate over a risk factor.

    With ``deviation_from`` set, the clause tests |value - deviation_from|
    instead of the raw value (e.g. temperature stress around 21°C).
    """
    model_config = ConfigDict(frozen=True)

    factor: str
    operator: RuleOperator
    threshold: float
    deviation_from: Optional[float] = None


class CompoundRule(BaseModel):
    """
    A conjunction rule plus its static consequence.

    Fires iff ALL clauses hold. Consequence fields are constants: a rule
    that barely fires and one that fires strongly yield the same alert.
    """
    model_config = ConfigDict(frozen=True)

    rule_id: str
    type: CompoundType
    title: str
    severity: AlertSeverity
    clauses: tuple[RuleClause, ...]
    multiplier: float
    probability: float              # 0-1
    time_to_impact: str
    prevention_actions: tuple[str, ...] = ()
    description: str = ""


class CompoundAlert(BaseModel):
    """A fired compound rule, recomputed every tick."""
    model_config = ConfigDict(frozen=True)

    id: str
    rule_id: str
    type: CompoundType
    title: str
    severity: AlertSeverity
    factors: list[str] = Field(default_factory=list)
    factor_values: dict[str, float] = Field(default_factory=dict)
    multiplier: float
    probability: float
    time_to_impact: str
    prevention_actions: list[str] = Field(default_factory=list)
    description: str = ""
