"""
HTTP Reading Source — Pull readings from an external JSON endpoint.

The endpoint is external. The core does NOT depend on its availability:
a timeout means "no sample this tick", and any other failure is logged and
treated the same way (graceful degradation).

Accepted payloads:
    {"co2": 712, "pm25": 14.2, ...}              (flat)
    {"data": {"co2": 712, ...}, "meta": {...}}   (enveloped)
"""

from typing import Any, Mapping, Optional

import httpx
import structlog

from originome.sources.base import ReadingSource
from originome.streaming.schemas import FactorDomain

logger = structlog.get_logger(__name__)


def _extract_reading(body: Any) -> Optional[dict]:
    """Unwrap the optional {"data": {...}} envelope."""
    if not isinstance(body, dict):
        return None
    data = body.get("data")
    if isinstance(data, dict):
        return data
    return body


class HttpReadingSource(ReadingSource):
    """HTTP client for a reading endpoint. Never raises on fetch."""

    def __init__(
        self,
        name: str,
        url: str,
        domain: FactorDomain,
        timeout: float = 5.0,
        api_key: str = "",
        transport: Optional[httpx.BaseTransport] = None,
    ):
        super().__init__(name, domain)
        self.url = url
        self.timeout = timeout
        self.api_key = api_key
        self._transport = transport

    def _client(self) -> httpx.Client:
        headers = {}
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        return httpx.Client(
            timeout=self.timeout,
            follow_redirects=True,
            headers=headers,
            transport=self._transport,
        )

    def fetch(self) -> Optional[Mapping[str, Any]]:
        try:
            with self._client() as client:
                resp = client.get(self.url)
                resp.raise_for_status()
                reading = _extract_reading(resp.json())
        except httpx.TimeoutException:
            logger.info("source_fetch_timeout", source=self.name, timeout=self.timeout)
            return None
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("source_unavailable", source=self.name, error=str(e))
            return None

        if reading is None:
            logger.warning("source_payload_unrecognized", source=self.name)
            return None
        logger.debug("source_reading_fetched", source=self.name, fields=len(reading))
        return reading
