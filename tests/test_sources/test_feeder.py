"""
Source Feeder Tests.
"""

from originome.sources.base import ReadingSource, StaticReadingSource
from originome.sources.feeder import SourceFeeder
from originome.streaming.schemas import FactorDomain


class _BrokenSource(ReadingSource):
    def fetch(self):
        raise RuntimeError("sensor bus offline")


COSMIC_READING = {
    "geomagnetic": {"kpIndex": 5},
    "solar": {"sunspotNumber": 130},
    "seasonal": {"pollenLevel": "high", "lunarIllumination": 90},
}


class TestPoll:

    def test_environmental_feeds_windows_and_factors(self, ingestor, factor_store, base_time):
        feeder = SourceFeeder(ingestor, factor_store, [
            StaticReadingSource("env", FactorDomain.ENVIRONMENTAL, {"co2": 700, "pm25": 12}),
        ])
        pushed = feeder.poll(base_time)
        assert pushed == {"env": 2}
        assert sorted(ingestor.parameters()) == ["co2", "pm25"]
        assert factor_store.get("co2").domain == FactorDomain.ENVIRONMENTAL
        assert factor_store.get("co2").timestamp == base_time

    def test_cosmic_derivatives_tracked(self, ingestor, factor_store):
        feeder = SourceFeeder(ingestor, factor_store, [
            StaticReadingSource("cosmic", FactorDomain.COSMIC, COSMIC_READING),
        ])
        feeder.poll()
        assert "geomagnetic.kpIndex" in ingestor.parameters()
        assert factor_store.get("seasonal.pollenLevel").value == 3.0

    def test_cosmic_derivatives_disabled(self, ingestor, factor_store):
        feeder = SourceFeeder(
            ingestor, factor_store,
            [StaticReadingSource("cosmic", FactorDomain.COSMIC, COSMIC_READING)],
            track_cosmic_derivatives=False,
        )
        feeder.poll()
        assert ingestor.parameters() == []
        assert factor_store.get("geomagnetic.kpIndex").value == 5.0

    def test_operational_factors_only(self, ingestor, factor_store):
        feeder = SourceFeeder(ingestor, factor_store)
        feeder.add_source(StaticReadingSource(
            "ops", FactorDomain.OPERATIONAL, {"hvacLoad": 0.9, "occupancy": 0.5},
        ))
        feeder.poll()
        assert ingestor.parameters() == []
        assert factor_store.get("hvacLoad").domain == FactorDomain.OPERATIONAL

    def test_no_sample(self, ingestor, factor_store):
        feeder = SourceFeeder(ingestor, factor_store, [
            StaticReadingSource("env", FactorDomain.ENVIRONMENTAL),
        ])
        assert feeder.poll() == {"env": 0}
        assert dict(factor_store.values()) == {}

    def test_failing_source_does_not_stop_others(self, ingestor, factor_store):
        feeder = SourceFeeder(ingestor, factor_store, [
            _BrokenSource("broken", FactorDomain.ENVIRONMENTAL),
            StaticReadingSource("env", FactorDomain.ENVIRONMENTAL, {"co2": 700}),
        ])
        pushed = feeder.poll()
        assert pushed == {"broken": 0, "env": 1}
        assert factor_store.get("co2").value == 700.0
