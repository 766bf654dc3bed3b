"""
Streaming Schemas.

Atomic readings, derivative sets and domain-tagged risk factors.
"""

from datetime import datetime, timezone
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator


def ensure_utc(value: datetime) -> datetime:
    """Naive timestamps are taken as UTC so every window compares consistently."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class FactorDomain(StrEnum):
    ENVIRONMENTAL = "environmental"
    COSMIC = "cosmic"
    OPERATIONAL = "operational"


class ParameterSample(BaseModel):
    """A single timestamped reading of one parameter."""
    model_config = ConfigDict(frozen=True)

    parameter_id: str
    value: float
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def _timestamp_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class DerivativeSet(BaseModel):
    """
    Finite-difference derivatives attached to the newest sample of a window.

    Undefined orders (not enough history) are 0.0, never None.
    """
    model_config = ConfigDict(frozen=True)

    velocity: float = 0.0
    acceleration: float = 0.0
    jerk: float = 0.0


class RiskFactor(BaseModel):
    """Latest value of a domain-tagged measurement feeding rule evaluation."""
    model_config = ConfigDict(frozen=True)

    id: str
    domain: FactorDomain
    value: float
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def _timestamp_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)
