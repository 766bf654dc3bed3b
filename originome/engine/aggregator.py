"""
Alert Aggregator — Periodic tick over the latest ingested state.

Each tick:
1. Poll collaborator sources (when a feeder is attached)
2. Snapshot every parameter window and the risk factor store
3. Recompute derivatives and classify acceleration patterns
4. Evaluate compound rules over the factor snapshot
5. Predict echoes of the tick's strongest signal in the monitored sector
6. Publish an immutable RiskSnapshot
7. Optionally feed anomalous ticks back into the correlation library

The tick is synchronous and bounded. Pausing skips ticks without touching
window history; resuming picks up where it left off.
"""

import threading
from datetime import datetime, timezone
from typing import Optional

import structlog
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from originome.alerting.classifier import PatternClassifier
from originome.alerting.compound import CompoundRiskCorrelator
from originome.alerting.schemas import CompoundAlert, FirstDerivativeAlert
from originome.correlation.echo import EchoPropagator
from originome.correlation.library import CorrelationLibrary
from originome.correlation.schemas import EchoDetection, SourceEvent
from originome.engine.schemas import RiskSnapshot, SnapshotStatus
from originome.sources.feeder import SourceFeeder
from originome.streaming.factors import RiskFactorStore
from originome.streaming.window import SampleIngestor

logger = structlog.get_logger(__name__)

DEFAULT_TICK_INTERVAL_SECONDS: float = 2.0
TICK_JOB_ID: str = "risk_tick"

STABLE_SUMMARY: str = (
    "No anomalies detected. Stability maintained across all monitored parameters."
)


class AlertAggregator:
    """
    Production aggregation loop.

    Orchestrates: Ingestor → Derivatives → Classifier → Correlator → Echo Propagator
    """

    def __init__(
        self,
        ingestor: SampleIngestor,
        factor_store: RiskFactorStore,
        library: CorrelationLibrary,
        classifier: Optional[PatternClassifier] = None,
        correlator: Optional[CompoundRiskCorrelator] = None,
        propagator: Optional[EchoPropagator] = None,
        feeder: Optional[SourceFeeder] = None,
        sector: str = "office",
        interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS,
        learn_from_anomalies: bool = False,
    ):
        self.ingestor = ingestor
        self.factor_store = factor_store
        self.library = library
        self.classifier = classifier or PatternClassifier()
        self.correlator = correlator or CompoundRiskCorrelator()
        self.propagator = propagator or EchoPropagator(library)
        self.feeder = feeder
        self.sector = sector
        self.interval_seconds = interval_seconds
        self.learn_from_anomalies = learn_from_anomalies

        self._paused = threading.Event()
        self._latest: Optional[RiskSnapshot] = None
        self._tick_count = 0
        self._state_lock = threading.Lock()
        self.scheduler: Optional[BackgroundScheduler] = None

    # ── Control ─────────────────────────────────────────────────────────

    def start(self) -> None:
        """Start ticking every ``interval_seconds``. Fails fast without a library."""
        self.library.require_initialized()
        if self.scheduler is not None:
            return
        self.scheduler = BackgroundScheduler()
        self.scheduler.add_job(
            self._run_tick,
            IntervalTrigger(seconds=self.interval_seconds),
            id=TICK_JOB_ID,
            max_instances=1,
            replace_existing=True,
        )
        self.scheduler.start()
        logger.info("aggregator_started", interval_seconds=self.interval_seconds)

    def stop(self) -> None:
        """Gracefully stop the scheduler."""
        if self.scheduler is None:
            return
        self.scheduler.shutdown(wait=True)
        self.scheduler = None
        logger.info("aggregator_stopped")

    def pause(self) -> None:
        self._paused.set()
        logger.info("aggregator_paused")

    def resume(self) -> None:
        self._paused.clear()
        logger.info("aggregator_resumed")

    @property
    def is_paused(self) -> bool:
        return self._paused.is_set()

    @property
    def is_running(self) -> bool:
        return self.scheduler is not None

    # ── Tick ────────────────────────────────────────────────────────────

    def tick(self) -> Optional[RiskSnapshot]:
        """
        Run one evaluation pass.

        Returns:
            The new snapshot, or None when paused
        """
        if self._paused.is_set():
            logger.debug("tick_skipped_paused")
            return None
        self.library.require_initialized()

        if self.feeder is not None:
            self.feeder.poll()

        now = datetime.now(timezone.utc)

        # ── 1. Consistent snapshots ──────────────────────────────────
        windows = self.ingestor.snapshot()
        factors = self.factor_store.values()

        # ── 2. Derivatives + classification ──────────────────────────
        engine = self.ingestor.engine
        derivatives = {
            parameter: engine.compute(samples) for parameter, samples in windows.items()
        }
        patterns = self.classifier.analyze(derivatives)
        derivative_alerts = self.classifier.generate_alerts(patterns)

        # ── 3. Compound rules ────────────────────────────────────────
        compound_alerts = self.correlator.evaluate(factors)

        # ── 4. Echo propagation ──────────────────────────────────────
        magnitude = self._source_magnitude(derivative_alerts, compound_alerts)
        echo = self.propagator.predict_echo_effects(
            SourceEvent(sector=self.sector, magnitude=magnitude, timestamp=now),
            self.sector,
            factors,
        )

        # ── 5. Publish ───────────────────────────────────────────────
        anomalies = bool(patterns or compound_alerts)
        with self._state_lock:
            self._tick_count += 1
            snapshot = RiskSnapshot(
                tick=self._tick_count,
                generated_at=now,
                parameters_tracked=len(windows),
                factors_tracked=len(factors),
                patterns=patterns,
                derivative_alerts=derivative_alerts,
                compound_alerts=compound_alerts,
                echo_detection=echo,
                status=SnapshotStatus.ANOMALIES_DETECTED if anomalies else SnapshotStatus.STABLE,
                summary=self._summary(patterns, derivative_alerts, compound_alerts, echo),
            )
            self._latest = snapshot

        logger.info(
            "tick_completed",
            tick=snapshot.tick,
            patterns=len(patterns),
            derivative_alerts=len(derivative_alerts),
            compound_alerts=len(compound_alerts),
            cascade_risk=round(echo.cascade_risk, 2),
        )

        # ── 6. Network learning ──────────────────────────────────────
        if anomalies and self.learn_from_anomalies:
            self._learn()
        return snapshot

    # ── Query surface ───────────────────────────────────────────────────

    def latest(self) -> Optional[RiskSnapshot]:
        """Most recent snapshot (None before the first tick)."""
        with self._state_lock:
            return self._latest

    @property
    def tick_count(self) -> int:
        with self._state_lock:
            return self._tick_count

    def echo_history(self) -> list[EchoDetection]:
        return self.propagator.echo_history()

    # ── Internals ───────────────────────────────────────────────────────

    def _run_tick(self) -> None:
        """Scheduler entry point: a failing tick is logged, the loop keeps going."""
        try:
            self.tick()
        except Exception as e:
            logger.error("tick_failed", error=str(e), exc_info=True)

    def _learn(self) -> None:
        """Record the anomalous tick as an observation and try a discovery."""
        updated = self.library.record_observation(self.sector)
        discovered = self.library.discover_patterns(self.sector)
        logger.info(
            "library_learning_step",
            sector=self.sector,
            patterns_updated=updated,
            discovered=discovered.pattern_id if discovered else None,
        )

    def _source_magnitude(
        self,
        derivative_alerts: list[FirstDerivativeAlert],
        compound_alerts: list[CompoundAlert],
    ) -> float:
        """Strongest signal of the tick on a 0-100 scale (0 when nothing fired)."""
        candidates = [float(a.criticality_score) for a in derivative_alerts]
        candidates.extend(a.probability * 100 for a in compound_alerts)
        return max(candidates, default=0.0)

    def _summary(
        self,
        patterns,
        derivative_alerts: list[FirstDerivativeAlert],
        compound_alerts: list[CompoundAlert],
        echo: EchoDetection,
    ) -> str:
        if not patterns and not compound_alerts:
            return STABLE_SUMMARY
        parts = [
            f"{len(patterns)} accelerating parameter(s)",
            f"{len(derivative_alerts)} derivative alert(s)",
            f"{len(compound_alerts)} compound pattern(s)",
        ]
        summary = ", ".join(parts) + " detected."
        if echo.predicted_echoes and echo.cascade_risk > 0:
            summary += (
                f" {len(echo.predicted_echoes)} cross-sector echo(es) predicted,"
                f" cascade risk {echo.cascade_risk:.0f}/100."
            )
        return summary
