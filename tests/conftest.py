"""
Pytest Configuration and Fixtures.

Provides reusable fixtures for testing Originome components.
"""

import os
import random
from datetime import datetime, timedelta, timezone

import pytest

# Keep tests independent of any local .env
os.environ["ENVIRONMENT"] = "testing"

from originome.correlation.library import CorrelationLibrary
from originome.streaming.factors import RiskFactorStore
from originome.streaming.schemas import ParameterSample
from originome.streaming.window import SampleIngestor


BASE_TIME = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def base_time() -> datetime:
    return BASE_TIME


@pytest.fixture
def make_samples():
    """Factory: values → ParameterSamples spaced ``spacing`` seconds apart."""

    def _make(values, parameter_id="co2", spacing=2.0):
        return [
            ParameterSample(
                parameter_id=parameter_id,
                value=v,
                timestamp=BASE_TIME + timedelta(seconds=i * spacing),
            )
            for i, v in enumerate(values)
        ]

    return _make


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def library(rng) -> CorrelationLibrary:
    lib = CorrelationLibrary(rng=rng)
    lib.initialize()
    return lib


@pytest.fixture
def ingestor() -> SampleIngestor:
    return SampleIngestor()


@pytest.fixture
def factor_store() -> RiskFactorStore:
    return RiskFactorStore()
