"""
Aggregated Risk Snapshot Schemas.
"""

from datetime import datetime
from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from originome.alerting.schemas import (
    AccelerationPattern,
    CompoundAlert,
    FirstDerivativeAlert,
)
from originome.correlation.schemas import EchoDetection


class SnapshotStatus(StrEnum):
    STABLE = "stable"
    ANOMALIES_DETECTED = "anomalies_detected"


class RiskSnapshot(BaseModel):
    """
    Consolidated, read-only result of one aggregator tick.

    Every field answers a question:
    - patterns: Which parameters are changing dangerously fast?
    - derivative_alerts: Which of those need action, ranked?
    - compound_alerts: Which multi-factor conjunctions are active?
    - echo_detection: Where will this ripple next?
    - status / summary: Is everything stable?
    """
    model_config = ConfigDict(frozen=True)

    tick: int
    generated_at: datetime
    parameters_tracked: int
    factors_tracked: int
    patterns: list[AccelerationPattern] = Field(default_factory=list)
    derivative_alerts: list[FirstDerivativeAlert] = Field(default_factory=list)
    compound_alerts: list[CompoundAlert] = Field(default_factory=list)
    echo_detection: Optional[EchoDetection] = None
    status: SnapshotStatus = SnapshotStatus.STABLE
    summary: str = ""

    @property
    def is_stable(self) -> bool:
        return self.status == SnapshotStatus.STABLE
