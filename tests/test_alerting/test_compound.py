"""
Compound Risk Correlator Tests.
"""

import math

import pytest

from originome.alerting.compound import CompoundRiskCorrelator
from originome.alerting.rules import DEFAULT_RULES
from originome.alerting.schemas import (
    SEVERITY_RANK,
    AlertSeverity,
    CompoundRule,
    CompoundType,
    RuleClause,
    RuleOperator,
)


CALM_FACTORS = {
    "co2": 500.0,
    "pm25": 5.0,
    "temperature": 21.0,
    "humidity": 45.0,
    "light": 500.0,
    "noise": 40.0,
    "geomagnetic.kpIndex": 1.0,
    "solar.sunspotNumber": 50.0,
    "seasonal.pollenLevel": 1.0,
    "seismic.riskLevel": 1.0,
    "seasonal.lunarIllumination": 40.0,
    "hvacLoad": 0.3,
    "occupancy": 0.3,
    "equipmentAge": 2.0,
}


class TestRuleCatalogue:

    def test_rule_ids_unique(self):
        ids = [r.rule_id for r in DEFAULT_RULES]
        assert len(ids) == len(set(ids))

    def test_every_rule_is_a_conjunction(self):
        for rule in DEFAULT_RULES:
            assert len(rule.clauses) >= 2
            assert 0 < rule.probability <= 1


class TestCompoundEvaluation:

    def setup_method(self):
        self.correlator = CompoundRiskCorrelator()

    def test_pile_up_pattern(self):
        """pm25=22 with Kp4 fires the critical 8.2x pile-up rule."""
        alerts = self.correlator.evaluate({"pm25": 22.0, "geomagnetic.kpIndex": 4.0})
        assert [a.rule_id for a in alerts] == ["pile_up_pattern"]
        alert = alerts[0]
        assert alert.id == "compound_pile_up_pattern"
        assert alert.severity == AlertSeverity.CRITICAL
        assert alert.multiplier == 8.2
        assert alert.type == CompoundType.COMPOUND_PATTERN
        assert alert.factors == ["geomagnetic.kpIndex", "pm25"]
        assert alert.factor_values == {"geomagnetic.kpIndex": 4.0, "pm25": 22.0}

    def test_calm_factors_fire_nothing(self):
        assert self.correlator.evaluate(CALM_FACTORS) == []

    def test_empty_factors(self):
        assert self.correlator.evaluate({}) == []

    def test_missing_factor_clause_is_false(self):
        assert self.correlator.evaluate({"pm25": 22.0}) == []

    def test_nan_factor_clause_is_false(self):
        alerts = self.correlator.evaluate({"pm25": 22.0, "geomagnetic.kpIndex": math.nan})
        assert alerts == []

    def test_no_partial_credit(self):
        """Two of three clauses is not enough."""
        alerts = self.correlator.evaluate({
            "co2": 900.0, "pm25": 22.0, "geomagnetic.kpIndex": 4.0,
        })
        assert "triple_threat_convergence" not in [a.rule_id for a in alerts]

    def test_deviation_clause(self):
        """Temperature deviation from 21°C is tested as |t - 21|."""
        for temperature in (16.0, 26.0):
            alerts = self.correlator.evaluate({
                "temperature": temperature, "seismic.riskLevel": 5.0,
            })
            assert "seismic_thermal_stress" in [a.rule_id for a in alerts]
        alerts = self.correlator.evaluate({"temperature": 23.0, "seismic.riskLevel": 5.0})
        assert alerts == []

    def test_sorted_by_severity_then_declaration(self):
        alerts = self.correlator.evaluate({
            "geomagnetic.kpIndex": 5.0,
            "pm25": 22.0,
            "co2": 900.0,
            "humidity": 70.0,
            "temperature": 16.0,
            "seismic.riskLevel": 5.0,
        })
        assert [a.rule_id for a in alerts] == [
            "pile_up_pattern",
            "triple_threat_convergence",
            "air_quality_humidity_cascade",
            "seismic_thermal_stress",
        ]
        ranks = [SEVERITY_RANK[a.severity] for a in alerts]
        assert ranks == sorted(ranks, reverse=True)

    def test_consequence_is_static(self):
        """A barely-firing rule and a strongly-firing rule yield the same consequence."""
        weak = self.correlator.evaluate({"pm25": 20.1, "geomagnetic.kpIndex": 4.0})[0]
        strong = self.correlator.evaluate({"pm25": 400.0, "geomagnetic.kpIndex": 9.0})[0]
        assert weak.multiplier == strong.multiplier
        assert weak.probability == strong.probability
        assert weak.time_to_impact == strong.time_to_impact

    def test_alerts_disappear_when_trigger_clears(self):
        assert self.correlator.evaluate({"pm25": 22.0, "geomagnetic.kpIndex": 4.0})
        assert self.correlator.evaluate({"pm25": 18.0, "geomagnetic.kpIndex": 4.0}) == []


class TestCustomRules:

    def test_operators(self):
        correlator = CompoundRiskCorrelator()
        cases = [
            (RuleOperator.GT, 5.0, 5.0, False),
            (RuleOperator.GTE, 5.0, 5.0, True),
            (RuleOperator.LT, 4.0, 5.0, True),
            (RuleOperator.LTE, 5.0, 5.0, True),
            (RuleOperator.EQ, 5.0, 5.0, True),
            (RuleOperator.NEQ, 5.0, 5.0, False),
        ]
        for operator, value, threshold, expected in cases:
            clause = RuleClause(factor="x", operator=operator, threshold=threshold)
            assert correlator.check_clause(clause, {"x": value}) is expected

    def test_rule_without_clauses_never_fires(self):
        rule = CompoundRule(
            rule_id="empty",
            type=CompoundType.ANOMALY,
            title="Empty",
            severity=AlertSeverity.LOW,
            clauses=(),
            multiplier=1.0,
            probability=0.5,
            time_to_impact="n/a",
        )
        correlator = CompoundRiskCorrelator(rules=[rule])
        assert correlator.evaluate({"x": 1.0}) == []

    def test_custom_catalogue(self):
        rule = CompoundRule(
            rule_id="noisy_and_dark",
            type=CompoundType.ANOMALY,
            title="Noisy and dark",
            severity=AlertSeverity.MEDIUM,
            clauses=(
                RuleClause(factor="noise", operator=RuleOperator.GT, threshold=70),
                RuleClause(factor="light", operator=RuleOperator.LT, threshold=100),
            ),
            multiplier=1.3,
            probability=0.5,
            time_to_impact="1-2 hours",
        )
        correlator = CompoundRiskCorrelator(rules=[rule])
        alerts = correlator.evaluate({"noise": 80.0, "light": 50.0})
        assert len(alerts) == 1
        assert alerts[0].probability == pytest.approx(0.5)


class TestCatalogueEntries:

    def setup_method(self):
        self.correlator = CompoundRiskCorrelator()
        self.rules = {r.rule_id: r for r in DEFAULT_RULES}

    def _fired(self, factors):
        return [a.rule_id for a in self.correlator.evaluate(factors)]

    def test_seismic_thermal_stress_is_medium(self):
        assert self.rules["seismic_thermal_stress"].severity == AlertSeverity.MEDIUM

    def test_thermal_solar_window(self):
        assert self.rules["thermal_solar_cascade"].time_to_impact == "6-8 hours"

    def test_solar_allergen_season(self):
        rule = self.rules["solar_allergen_season"]
        assert rule.severity == AlertSeverity.MEDIUM
        assert rule.title == "Solar Maximum + Peak Allergen Season"
        assert "solar_allergen_season" in self._fired({
            "solar.sunspotNumber": 130.0, "seasonal.pollenLevel": 3.0,
        })

    def test_solar_allergen_season_needs_high_pollen_exactly(self):
        for pollen in (2.0, 4.0):
            assert "solar_allergen_season" not in self._fired({
                "solar.sunspotNumber": 130.0, "seasonal.pollenLevel": pollen,
            })
        assert "solar_allergen_season" not in self._fired({
            "solar.sunspotNumber": 120.0, "seasonal.pollenLevel": 3.0,
        })

    def test_geomagnetic_air_quality_convergence(self):
        rule = self.rules["geomagnetic_air_quality_convergence"]
        assert rule.severity == AlertSeverity.HIGH
        assert rule.title == "Geomagnetic Storm + Poor Air Quality Convergence"
        assert "geomagnetic_air_quality_convergence" in self._fired({
            "geomagnetic.kpIndex": 6.0, "pm25": 22.0,
        })

    def test_geomagnetic_air_quality_thresholds_are_strict(self):
        assert "geomagnetic_air_quality_convergence" not in self._fired({
            "geomagnetic.kpIndex": 5.0, "pm25": 22.0,
        })
        assert "geomagnetic_air_quality_convergence" not in self._fired({
            "geomagnetic.kpIndex": 6.0, "pm25": 20.0,
        })


def _clause_value(clause: RuleClause, holds: bool) -> float:
    """A factor value that makes the clause hold (or fail) right at its threshold."""
    t = clause.threshold
    if holds:
        offsets = {
            RuleOperator.GT: 1.0, RuleOperator.GTE: 0.0,
            RuleOperator.LT: -1.0, RuleOperator.LTE: 0.0,
            RuleOperator.EQ: 0.0, RuleOperator.NEQ: 1.0,
        }
    else:
        offsets = {
            RuleOperator.GT: 0.0, RuleOperator.GTE: -1.0,
            RuleOperator.LT: 0.0, RuleOperator.LTE: 1.0,
            RuleOperator.EQ: 1.0, RuleOperator.NEQ: 0.0,
        }
    deviation = t + offsets[clause.operator]
    if clause.deviation_from is None:
        return deviation
    return clause.deviation_from + deviation


def _satisfying_factors(rule: CompoundRule) -> dict[str, float]:
    return {c.factor: _clause_value(c, holds=True) for c in rule.clauses}


class TestEveryDefaultRule:
    """Each catalogue rule fires on its clauses and on nothing less."""

    def setup_method(self):
        self.correlator = CompoundRiskCorrelator()

    @pytest.mark.parametrize("rule", DEFAULT_RULES, ids=lambda r: r.rule_id)
    def test_fires_when_every_clause_holds(self, rule):
        alert = self.correlator.evaluate_rule(rule, _satisfying_factors(rule))
        assert alert is not None
        assert alert.rule_id == rule.rule_id
        assert alert.severity == rule.severity

    @pytest.mark.parametrize("rule", DEFAULT_RULES, ids=lambda r: r.rule_id)
    def test_any_failing_clause_suppresses(self, rule):
        for clause in rule.clauses:
            factors = _satisfying_factors(rule)
            factors[clause.factor] = _clause_value(clause, holds=False)
            assert self.correlator.evaluate_rule(rule, factors) is None, clause.factor

    @pytest.mark.parametrize("rule", DEFAULT_RULES, ids=lambda r: r.rule_id)
    def test_any_missing_factor_suppresses(self, rule):
        for clause in rule.clauses:
            factors = _satisfying_factors(rule)
            del factors[clause.factor]
            assert self.correlator.evaluate_rule(rule, factors) is None, clause.factor

    @pytest.mark.parametrize("rule", DEFAULT_RULES, ids=lambda r: r.rule_id)
    def test_stronger_trigger_still_fires(self, rule):
        push = {
            RuleOperator.GT: 100.0, RuleOperator.GTE: 100.0,
            RuleOperator.LT: -100.0, RuleOperator.LTE: -100.0,
        }
        factors = _satisfying_factors(rule)
        for clause in rule.clauses:
            if clause.operator in push:
                factors[clause.factor] += push[clause.operator]
        assert self.correlator.evaluate_rule(rule, factors) is not None
