"""
Originome Configuration.

Pydantic Settings v2 — loads from .env, environment variables.
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ParameterThresholds(BaseModel):
    """
    Rate-of-change thresholds for a single parameter stream.

    All thresholds compare against absolute derivative values.
    A jerk_threshold of None disables jerk-type alerts for the parameter.
    """
    label: str
    sudden_change_threshold: float
    accel_high: float
    accel_moderate: float
    jerk_threshold: Optional[float] = None


DEFAULT_PARAMETER_THRESHOLDS: dict[str, ParameterThresholds] = {
    "co2": ParameterThresholds(
        label="CO₂ Concentration",
        sudden_change_threshold=50.0,
        accel_high=10.0,
        accel_moderate=5.0,
        jerk_threshold=8.0,
    ),
    "pm25": ParameterThresholds(
        label="PM2.5 Levels",
        sudden_change_threshold=8.0,
        accel_high=2.0,
        accel_moderate=1.0,
    ),
    "temperature": ParameterThresholds(
        label="Temperature",
        sudden_change_threshold=3.0,
        accel_high=1.5,
        accel_moderate=0.8,
        jerk_threshold=1.5,
    ),
    "humidity": ParameterThresholds(
        label="Relative Humidity",
        sudden_change_threshold=10.0,
        accel_high=4.0,
        accel_moderate=2.0,
    ),
    "light": ParameterThresholds(
        label="Light Level",
        sudden_change_threshold=300.0,
        accel_high=150.0,
        accel_moderate=75.0,
    ),
    "noise": ParameterThresholds(
        label="Noise Level",
        sudden_change_threshold=15.0,
        accel_high=8.0,
        accel_moderate=4.0,
    ),
    "geomagnetic.kpIndex": ParameterThresholds(
        label="Geomagnetic Kp Index",
        sudden_change_threshold=3.0,
        accel_high=2.0,
        accel_moderate=1.0,
    ),
    "solar.sunspotNumber": ParameterThresholds(
        label="Sunspot Number",
        sudden_change_threshold=40.0,
        accel_high=20.0,
        accel_moderate=10.0,
    ),
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ── Application ──────────────────────────────────────────────────────
    app_name: str = "Originome"
    app_version: str = "1.0.0"
    environment: str = Field(default="development", alias="ENVIRONMENT")

    # ── Logging ──────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="console", alias="LOG_FORMAT")

    # ── Streaming ────────────────────────────────────────────────────────
    window_capacity: int = Field(default=25, alias="WINDOW_CAPACITY")
    normalize_derivatives_by_time: bool = Field(
        default=False, alias="NORMALIZE_DERIVATIVES_BY_TIME",
        description="Divide finite differences by the actual sample spacing in seconds",
    )
    track_cosmic_derivatives: bool = Field(default=True, alias="TRACK_COSMIC_DERIVATIVES")
    parameter_thresholds: dict[str, ParameterThresholds] = Field(
        default_factory=lambda: dict(DEFAULT_PARAMETER_THRESHOLDS),
        alias="PARAMETER_THRESHOLDS",
    )

    # ── Aggregator ───────────────────────────────────────────────────────
    tick_interval_seconds: float = Field(default=2.0, alias="TICK_INTERVAL_SECONDS")
    sector: str = Field(default="office", alias="MONITORED_SECTOR")

    # ── Correlation Library ──────────────────────────────────────────────
    random_seed: Optional[int] = Field(default=None, alias="RANDOM_SEED")
    network_scale_reference: float = Field(default=30.0, alias="NETWORK_SCALE_REFERENCE")
    discovery_network_threshold: int = Field(default=50, alias="DISCOVERY_NETWORK_THRESHOLD")
    discovery_probability: float = Field(default=0.3, alias="DISCOVERY_PROBABILITY")
    echo_history_size: int = Field(default=10, alias="ECHO_HISTORY_SIZE")
    # Feed anomalous ticks back as network observations / pattern discovery
    library_learning_enabled: bool = Field(default=False, alias="LIBRARY_LEARNING_ENABLED")

    # ── Sources ──────────────────────────────────────────────────────────
    environmental_source_url: str = Field(default="", alias="ENVIRONMENTAL_SOURCE_URL")
    cosmic_source_url: str = Field(default="", alias="COSMIC_SOURCE_URL")
    operational_source_url: str = Field(default="", alias="OPERATIONAL_SOURCE_URL")
    source_timeout_seconds: float = Field(default=5.0, alias="SOURCE_TIMEOUT_SECONDS")


settings = Settings()
