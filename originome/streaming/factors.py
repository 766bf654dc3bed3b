"""
Risk Factor Store — Latest value per factor, read as a consistent snapshot.

Writers replace a factor's latest value. Readers get a copy-on-read,
read-only mapping, so a tick that correlates factors never sees a mix of
values written before and after it started.
"""

import threading
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Mapping, Optional

import structlog

from originome.streaming.schemas import FactorDomain, RiskFactor

logger = structlog.get_logger(__name__)

# Ordinal mapping for categorical pollen levels
POLLEN_LEVELS: dict[str, float] = {
    "low": 1.0,
    "moderate": 2.0,
    "high": 3.0,
    "very high": 4.0,
}


def flatten_reading(reading: Mapping[str, Any], prefix: str = "") -> dict[str, float]:
    """
    Flatten a nested source payload into dotted factor ids.

    {"geomagnetic": {"kpIndex": 4}} → {"geomagnetic.kpIndex": 4.0}

    Pollen level strings map to ordinals; other non-numeric leaves are dropped.
    """
    flat: dict[str, float] = {}
    for key, value in reading.items():
        factor_id = f"{prefix}{key}"
        if isinstance(value, Mapping):
            flat.update(flatten_reading(value, prefix=f"{factor_id}."))
        elif isinstance(value, bool):
            continue
        elif isinstance(value, (int, float)):
            flat[factor_id] = float(value)
        elif isinstance(value, str) and value.strip().lower() in POLLEN_LEVELS:
            flat[factor_id] = POLLEN_LEVELS[value.strip().lower()]
        else:
            logger.debug("reading_field_skipped", field=factor_id, value_type=type(value).__name__)
    return flat


class RiskFactorStore:
    """Thread-safe latest-value view of all risk factors."""

    def __init__(self):
        self._factors: dict[str, RiskFactor] = {}
        self._lock = threading.Lock()

    def update(
        self,
        factor_id: str,
        value: float,
        domain: FactorDomain,
        timestamp: Optional[datetime] = None,
    ) -> RiskFactor:
        factor = RiskFactor(
            id=factor_id,
            domain=domain,
            value=float(value),
            timestamp=timestamp or datetime.now(timezone.utc),
        )
        with self._lock:
            self._factors[factor_id] = factor
        return factor

    def update_many(
        self,
        readings: Mapping[str, float],
        domain: FactorDomain,
        timestamp: Optional[datetime] = None,
    ) -> list[RiskFactor]:
        ts = timestamp or datetime.now(timezone.utc)
        factors = [
            RiskFactor(id=factor_id, domain=domain, value=float(value), timestamp=ts)
            for factor_id, value in readings.items()
        ]
        with self._lock:
            for factor in factors:
                self._factors[factor.id] = factor
        return factors

    def snapshot(self) -> Mapping[str, RiskFactor]:
        """Immutable copy of every factor."""
        with self._lock:
            return MappingProxyType(dict(self._factors))

    def values(self) -> Mapping[str, float]:
        """Immutable factor_id → value copy, the shape rules evaluate against."""
        with self._lock:
            return MappingProxyType({k: f.value for k, f in self._factors.items()})

    def get(self, factor_id: str) -> Optional[RiskFactor]:
        with self._lock:
            return self._factors.get(factor_id)

    def clear(self) -> None:
        with self._lock:
            self._factors.clear()
