"""
Sample Ingestor — Bounded per-parameter windows.

Each parameter owns a fixed-capacity FIFO window. Appending past capacity
evicts the oldest sample. Samples are appended in arrival order: an
out-of-order timestamp lands at the tail and is NOT re-sorted.

Locking is per parameter, so unrelated streams never serialize on each
other. The registry lock is only held while a new window is created.
"""

import threading
from collections import deque
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Mapping, Optional

import structlog

from originome.streaming.derivatives import DerivativeEngine
from originome.streaming.schemas import DerivativeSet, ParameterSample

logger = structlog.get_logger(__name__)

DEFAULT_WINDOW_CAPACITY: int = 25


class ParameterWindow:
    """Fixed-capacity ordered sample sequence for one parameter."""

    def __init__(self, parameter_id: str, capacity: int = DEFAULT_WINDOW_CAPACITY):
        if capacity < 1:
            raise ValueError(f"Window capacity must be >= 1, got {capacity}")
        self.parameter_id = parameter_id
        self.capacity = capacity
        self._samples: deque[ParameterSample] = deque(maxlen=capacity)
        self._latest: DerivativeSet = DerivativeSet()
        self.lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._samples)

    def append(self, sample: ParameterSample) -> Optional[ParameterSample]:
        """Append a sample; returns the evicted sample, if any. Caller holds the lock."""
        evicted = self._samples[0] if len(self._samples) == self.capacity else None
        if self._samples and sample.timestamp < self._samples[-1].timestamp:
            logger.debug(
                "out_of_order_sample",
                parameter=self.parameter_id,
                timestamp=sample.timestamp.isoformat(),
                previous=self._samples[-1].timestamp.isoformat(),
            )
        self._samples.append(sample)
        return evicted

    def samples(self) -> tuple[ParameterSample, ...]:
        """Immutable copy of the window, oldest first."""
        return tuple(self._samples)

    @property
    def latest_derivatives(self) -> DerivativeSet:
        return self._latest

    def attach(self, derivatives: DerivativeSet) -> None:
        self._latest = derivatives


class SampleIngestor:
    """
    Accepts timestamped readings and keeps one window per parameter.

    Every ingestion recomputes the derivatives of the affected parameter
    only and attaches them to that window's newest sample.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_WINDOW_CAPACITY,
        engine: Optional[DerivativeEngine] = None,
    ):
        if capacity < 1:
            raise ValueError(f"Window capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self.engine = engine or DerivativeEngine()
        self._windows: dict[str, ParameterWindow] = {}
        self._registry_lock = threading.Lock()

    def ingest(
        self,
        parameter_id: str,
        value: float,
        timestamp: Optional[datetime] = None,
    ) -> DerivativeSet:
        """Append one reading and return the recomputed derivatives."""
        sample = ParameterSample(
            parameter_id=parameter_id,
            value=float(value),
            timestamp=timestamp or datetime.now(timezone.utc),
        )
        window = self._window(parameter_id)
        with window.lock:
            evicted = window.append(sample)
            derivatives = self.engine.compute(window.samples())
            window.attach(derivatives)

        if evicted is not None:
            logger.debug("sample_evicted", parameter=parameter_id, size=len(window))
        return derivatives

    def ingest_many(
        self,
        readings: Mapping[str, float],
        timestamp: Optional[datetime] = None,
    ) -> dict[str, DerivativeSet]:
        """Ingest every field of a reading as its own parameter stream."""
        ts = timestamp or datetime.now(timezone.utc)
        return {
            parameter_id: self.ingest(parameter_id, value, ts)
            for parameter_id, value in readings.items()
        }

    def window(self, parameter_id: str) -> tuple[ParameterSample, ...]:
        """Copy of one parameter's window (empty if the parameter is unknown)."""
        window = self._windows.get(parameter_id)
        if window is None:
            return ()
        with window.lock:
            return window.samples()

    def latest_derivatives(self, parameter_id: str) -> DerivativeSet:
        window = self._windows.get(parameter_id)
        if window is None:
            return DerivativeSet()
        with window.lock:
            return window.latest_derivatives

    def snapshot(self) -> Mapping[str, tuple[ParameterSample, ...]]:
        """Read-only copy of every window, each taken under its own lock."""
        with self._registry_lock:
            windows = list(self._windows.values())
        copies: dict[str, tuple[ParameterSample, ...]] = {}
        for window in windows:
            with window.lock:
                copies[window.parameter_id] = window.samples()
        return MappingProxyType(copies)

    def parameters(self) -> list[str]:
        with self._registry_lock:
            return list(self._windows)

    def clear(self) -> None:
        with self._registry_lock:
            self._windows.clear()

    def _window(self, parameter_id: str) -> ParameterWindow:
        window = self._windows.get(parameter_id)
        if window is not None:
            return window
        with self._registry_lock:
            window = self._windows.get(parameter_id)
            if window is None:
                window = ParameterWindow(parameter_id, self.capacity)
                self._windows[parameter_id] = window
                logger.info("parameter_window_created", parameter=parameter_id, capacity=self.capacity)
            return window
