"""
Source Feeder — Push collaborator readings into the core.

Per source, per poll:
- environmental readings → one parameter stream per field + risk factors
- cosmic readings → risk factors (+ parameter streams when derivative
  tracking is enabled)
- operational readings → risk factors only

Error isolation: if one source fails, the others are still polled.
"""

from datetime import datetime, timezone
from typing import Iterable, Optional

import structlog

from originome.sources.base import ReadingSource
from originome.streaming.factors import RiskFactorStore, flatten_reading
from originome.streaming.schemas import FactorDomain
from originome.streaming.window import SampleIngestor

logger = structlog.get_logger(__name__)


class SourceFeeder:

    def __init__(
        self,
        ingestor: SampleIngestor,
        factor_store: RiskFactorStore,
        sources: Iterable[ReadingSource] = (),
        track_cosmic_derivatives: bool = True,
    ):
        self.ingestor = ingestor
        self.factor_store = factor_store
        self.sources: list[ReadingSource] = list(sources)
        self.track_cosmic_derivatives = track_cosmic_derivatives

    def add_source(self, source: ReadingSource) -> None:
        self.sources.append(source)

    def poll(self, timestamp: Optional[datetime] = None) -> dict[str, int]:
        """
        Fetch every source once.

        Returns:
            source name → number of fields pushed (0 when no sample)
        """
        ts = timestamp or datetime.now(timezone.utc)
        pushed: dict[str, int] = {}

        for source in self.sources:
            try:
                reading = source.fetch()
            except Exception as e:
                logger.error("source_fetch_failed", source=source.name, error=str(e))
                pushed[source.name] = 0
                # DO NOT stop: continue with next source
                continue

            if reading is None:
                logger.debug("source_no_sample", source=source.name)
                pushed[source.name] = 0
                continue

            flat = flatten_reading(reading)
            self.factor_store.update_many(flat, source.domain, ts)
            if self._tracks_derivatives(source.domain):
                self.ingestor.ingest_many(flat, ts)
            pushed[source.name] = len(flat)

        return pushed

    def _tracks_derivatives(self, domain: FactorDomain) -> bool:
        if domain == FactorDomain.ENVIRONMENTAL:
            return True
        if domain == FactorDomain.COSMIC:
            return self.track_cosmic_derivatives
        return False
