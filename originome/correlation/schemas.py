"""
Cross-Sector Correlation Schemas.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RippleEffect(BaseModel):
    primary_sector: str
    secondary_sectors: list[str]
    impact_delay: float             # hours
    amplification_factor: float


class NetworkEffect(BaseModel):
    customer_count: int
    data_contribution: float
    learning_acceleration: float


class CorrelationPattern(BaseModel):
    """
    A known sector-to-sector correlation.

    Seeded at initialization, mutated as observations accrue, and possibly
    synthesized by explicit pattern discovery.
    """
    pattern_id: str
    sectors: list[str]
    correlation_strength: float     # 0-1
    ripple_effect: RippleEffect
    historical_occurrences: int
    confidence: float               # 0-1
    network_effect: NetworkEffect


class Location(BaseModel):
    lat: float
    lon: float


class SourceEvent(BaseModel):
    """A primary-sector risk event whose echoes we want to predict."""
    sector: str
    event_type: str = "environmental_stress"
    magnitude: float = 50.0
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    location: Optional[Location] = None


class PredictedEcho(BaseModel):
    model_config = ConfigDict(frozen=True)

    pattern_id: str
    target_sector: str
    predicted_delay: float          # hours
    expected_impact: float
    confidence: float
    mitigation_window: float        # hours


class EchoDetection(BaseModel):
    """One-shot echo prediction result, not persisted."""
    model_config = ConfigDict(frozen=True)

    source_event: SourceEvent
    predicted_echoes: list[PredictedEcho] = Field(default_factory=list)
    cascade_risk: float             # 0-100


class DiscoveryRecord(BaseModel):
    """Audit entry for a pattern synthesized by discovery."""
    model_config = ConfigDict(frozen=True)

    pattern_id: str
    sector: str
    secondary_sector: str
    network_customers: int
    discovered_at: datetime


class LibraryStatus(BaseModel):
    total_patterns: int
    active_correlations: int
    network_customers: int
    learning_velocity: float
    accuracy_improvement: float
    cross_sector_insights: list[str] = Field(default_factory=list)
