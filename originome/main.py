"""
Originome Runner Entry Point.

Usage:
    python -m originome.main

This does NOT run a web server. It wires the streaming core to the
configured reading sources and runs the APScheduler aggregation loop
until SIGINT/SIGTERM.
"""

import random
import signal
import sys
import threading

import structlog

from originome.alerting.classifier import PatternClassifier
from originome.alerting.compound import CompoundRiskCorrelator
from originome.config import Settings, settings
from originome.correlation.echo import EchoPropagator
from originome.correlation.library import CorrelationLibrary
from originome.engine.aggregator import AlertAggregator
from originome.logging_config import configure_logging
from originome.sources.feeder import SourceFeeder
from originome.sources.http import HttpReadingSource
from originome.streaming.derivatives import DerivativeEngine
from originome.streaming.factors import RiskFactorStore
from originome.streaming.schemas import FactorDomain
from originome.streaming.window import SampleIngestor

logger = structlog.get_logger(__name__)


def build_feeder(
    config: Settings,
    ingestor: SampleIngestor,
    factor_store: RiskFactorStore,
) -> SourceFeeder:
    """One HTTP source per configured collaborator URL."""
    feeder = SourceFeeder(
        ingestor,
        factor_store,
        track_cosmic_derivatives=config.track_cosmic_derivatives,
    )
    endpoints = (
        ("environmental", config.environmental_source_url, FactorDomain.ENVIRONMENTAL),
        ("cosmic", config.cosmic_source_url, FactorDomain.COSMIC),
        ("operational", config.operational_source_url, FactorDomain.OPERATIONAL),
    )
    for name, url, domain in endpoints:
        if not url:
            logger.info("source_not_configured", source=name)
            continue
        feeder.add_source(HttpReadingSource(
            name=name,
            url=url,
            domain=domain,
            timeout=config.source_timeout_seconds,
        ))
    return feeder


def build_aggregator(config: Settings = settings) -> AlertAggregator:
    """Construct and initialize every component from settings."""
    rng = random.Random(config.random_seed)

    library = CorrelationLibrary(
        rng=rng,
        discovery_threshold=config.discovery_network_threshold,
        discovery_probability=config.discovery_probability,
    )
    library.initialize()

    ingestor = SampleIngestor(
        capacity=config.window_capacity,
        engine=DerivativeEngine(normalize_by_time=config.normalize_derivatives_by_time),
    )
    factor_store = RiskFactorStore()

    return AlertAggregator(
        ingestor=ingestor,
        factor_store=factor_store,
        library=library,
        classifier=PatternClassifier(config.parameter_thresholds),
        correlator=CompoundRiskCorrelator(),
        propagator=EchoPropagator(
            library,
            rng=rng,
            network_scale_reference=config.network_scale_reference,
            history_size=config.echo_history_size,
        ),
        feeder=build_feeder(config, ingestor, factor_store),
        sector=config.sector,
        interval_seconds=config.tick_interval_seconds,
        learn_from_anomalies=config.library_learning_enabled,
    )


def main() -> None:
    """Initialize and run the aggregation loop."""
    configure_logging()
    logger.info("originome_starting", version=settings.app_version, env=settings.environment)

    aggregator = build_aggregator(settings)

    # Run initial tick on startup
    logger.info("running_initial_tick")
    aggregator.tick()

    aggregator.start()

    stop_event = threading.Event()

    def _handle_signal(signum, frame):
        logger.info("shutdown_signal_received", signal=signum)
        stop_event.set()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    logger.info("originome_running", msg="Waiting for ticks... Ctrl+C to stop.")

    stop_event.wait()

    aggregator.stop()
    logger.info("originome_shutdown_complete")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        sys.exit(0)
