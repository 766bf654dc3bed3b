"""
Property-Based Tests for Algorithms.

Uses Hypothesis to test invariants that must hold for ALL inputs:
- Windows: bounded FIFO eviction
- Derivatives: linear ramps have zero higher orders
- Classifier: sudden change always wins
- Compound rules: monotone in their thresholds, ranked by severity
- Echoes: cascade risk bounded
"""

import random
from datetime import datetime, timedelta, timezone

from hypothesis import given, settings
from hypothesis import strategies as st

from originome.alerting.classifier import PatternClassifier
from originome.alerting.compound import CompoundRiskCorrelator
from originome.alerting.schemas import SEVERITY_RANK, AlertType, RiskLevel
from originome.correlation.echo import EchoPropagator
from originome.correlation.library import CorrelationLibrary
from originome.correlation.schemas import SourceEvent
from originome.streaming.derivatives import DerivativeEngine
from originome.streaming.schemas import DerivativeSet, ParameterSample
from originome.streaming.window import SampleIngestor

T0 = datetime(2024, 6, 1, tzinfo=timezone.utc)

finite = st.floats(min_value=-1e6, max_value=1e6, allow_nan=False, allow_infinity=False)


# ── Window Properties ─────────────────────────────────────────────────


class TestWindowProperties:
    @given(
        capacity=st.integers(min_value=1, max_value=40),
        values=st.lists(finite, max_size=80),
    )
    @settings(max_examples=50)
    def test_window_keeps_last_k(self, capacity, values):
        """len(window) == min(n, K) and it holds exactly the newest K values."""
        ingestor = SampleIngestor(capacity=capacity)
        for i, v in enumerate(values):
            ingestor.ingest("co2", v, T0 + timedelta(seconds=i))
        window = ingestor.window("co2")
        assert len(window) == min(len(values), capacity)
        assert [s.value for s in window] == values[-capacity:]


# ── Derivative Properties ─────────────────────────────────────────────


class TestDerivativeProperties:
    @given(
        start=st.integers(min_value=-10_000, max_value=10_000),
        step=st.integers(min_value=-500, max_value=500),
        n=st.integers(min_value=4, max_value=25),
    )
    @settings(max_examples=50)
    def test_linear_ramp(self, start, step, n):
        samples = [
            ParameterSample(parameter_id="x", value=float(start + i * step), timestamp=T0)
            for i in range(n)
        ]
        result = DerivativeEngine().compute(samples)
        assert result.velocity == step
        assert result.acceleration == 0.0
        assert result.jerk == 0.0

    @given(values=st.lists(finite, min_size=2, max_size=25))
    @settings(max_examples=50)
    def test_velocity_is_last_difference(self, values):
        samples = [
            ParameterSample(parameter_id="x", value=v, timestamp=T0 + timedelta(seconds=i))
            for i, v in enumerate(values)
        ]
        assert DerivativeEngine().compute(samples).velocity == values[-1] - values[-2]


# ── Classifier Properties ─────────────────────────────────────────────


class TestClassifierProperties:
    @given(
        velocity=st.floats(min_value=50.001, max_value=1e6),
        sign=st.sampled_from([1, -1]),
        acceleration=finite,
        jerk=finite,
    )
    @settings(max_examples=50)
    def test_sudden_change_always_critical(self, velocity, sign, acceleration, jerk):
        pattern = PatternClassifier().classify(
            "co2",
            DerivativeSet(velocity=sign * velocity, acceleration=acceleration, jerk=jerk),
        )
        assert pattern.risk_level == RiskLevel.CRITICAL
        assert pattern.alert_type == AlertType.SUDDEN_SHIFT

    @given(
        derivatives=st.dictionaries(
            st.sampled_from(["co2", "pm25", "temperature", "humidity", "light", "noise"]),
            st.builds(DerivativeSet, velocity=finite, acceleration=finite, jerk=finite),
        )
    )
    @settings(max_examples=50)
    def test_analyze_never_returns_low_and_is_ranked(self, derivatives):
        classifier = PatternClassifier()
        patterns = classifier.analyze(derivatives)
        assert all(p.risk_level != RiskLevel.LOW for p in patterns)
        alerts = classifier.generate_alerts(patterns)
        scores = [a.criticality_score for a in alerts]
        assert scores == sorted(scores, reverse=True)


# ── Compound Rule Properties ──────────────────────────────────────────


FACTOR_IDS = [
    "co2", "pm25", "temperature", "humidity",
    "geomagnetic.kpIndex", "solar.sunspotNumber", "seasonal.pollenLevel",
    "seismic.riskLevel", "seasonal.lunarIllumination",
    "hvacLoad", "occupancy", "equipmentAge",
]


class TestCompoundProperties:
    @given(
        kp=st.floats(min_value=4, max_value=9),
        pm25=st.floats(min_value=20.01, max_value=500),
        kp_bump=st.floats(min_value=0, max_value=100),
        pm25_bump=st.floats(min_value=0, max_value=1000),
    )
    @settings(max_examples=50)
    def test_raising_factors_never_unfires(self, kp, pm25, kp_bump, pm25_bump):
        correlator = CompoundRiskCorrelator()
        before = correlator.evaluate({"geomagnetic.kpIndex": kp, "pm25": pm25})
        after = correlator.evaluate({
            "geomagnetic.kpIndex": kp + kp_bump, "pm25": pm25 + pm25_bump,
        })
        assert "pile_up_pattern" in [a.rule_id for a in before]
        assert "pile_up_pattern" in [a.rule_id for a in after]

    @given(factors=st.dictionaries(st.sampled_from(FACTOR_IDS), st.floats(0, 2000)))
    @settings(max_examples=100)
    def test_alerts_ranked_by_severity(self, factors):
        alerts = CompoundRiskCorrelator().evaluate(factors)
        ranks = [SEVERITY_RANK[a.severity] for a in alerts]
        assert ranks == sorted(ranks, reverse=True)
        assert all(set(a.factors) <= set(factors) for a in alerts)


# ── Echo Properties ───────────────────────────────────────────────────


class TestEchoProperties:
    @given(
        magnitude=st.floats(min_value=0, max_value=1e12),
        sector=st.sampled_from(["office", "retail", "healthcare", "manufacturing", "agriculture"]),
        seed=st.integers(min_value=0, max_value=10_000),
    )
    @settings(max_examples=50)
    def test_cascade_risk_bounded(self, magnitude, sector, seed):
        library = CorrelationLibrary(rng=random.Random(seed))
        library.initialize()
        propagator = EchoPropagator(library, rng=random.Random(seed))
        detection = propagator.predict_echo_effects(SourceEvent(sector=sector, magnitude=magnitude))
        assert 0.0 <= detection.cascade_risk <= 100.0
        for echo in detection.predicted_echoes:
            assert echo.confidence <= 0.95
            assert echo.mitigation_window < echo.predicted_delay
