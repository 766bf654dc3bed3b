"""
Reading Source Contract.

A source supplies one reading per fetch: a (possibly nested) mapping of
field → value, or None when it has nothing for this tick.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from originome.streaming.schemas import FactorDomain

ENVIRONMENTAL_FIELDS: tuple[str, ...] = (
    "co2", "pm25", "temperature", "light", "noise", "humidity",
)
COSMIC_FIELDS: tuple[str, ...] = (
    "geomagnetic.kpIndex",
    "solar.sunspotNumber",
    "seasonal.pollenLevel",
    "seismic.riskLevel",
    "seasonal.lunarIllumination",
)
OPERATIONAL_FIELDS: tuple[str, ...] = ("hvacLoad", "occupancy", "equipmentAge")


class ReadingSource(ABC):
    """Base class for environmental, cosmic and operational collaborators."""

    def __init__(self, name: str, domain: FactorDomain):
        self.name = name
        self.domain = domain

    @abstractmethod
    def fetch(self) -> Optional[Mapping[str, Any]]:
        """Return the current reading, or None for "no sample this tick"."""


class StaticReadingSource(ReadingSource):
    """In-process source returning whatever reading was last set."""

    def __init__(
        self,
        name: str,
        domain: FactorDomain,
        reading: Optional[Mapping[str, Any]] = None,
    ):
        super().__init__(name, domain)
        self._reading = dict(reading) if reading is not None else None

    def set_reading(self, reading: Optional[Mapping[str, Any]]) -> None:
        self._reading = dict(reading) if reading is not None else None

    def fetch(self) -> Optional[Mapping[str, Any]]:
        return dict(self._reading) if self._reading is not None else None
