"""
Compound Risk Correlator — Conjunction rules over current risk factors.

Pipeline:
1. Take a consistent snapshot of factor values
2. Evaluate every rule: fires iff ALL clauses hold (no partial credit)
3. Emit one CompoundAlert per fired rule with the rule's static consequence
4. Rank by severity (critical > high > medium > low), declaration order on ties

A clause over a missing factor is simply false; an empty result is a valid
"nothing is converging" answer.
"""

import math
from typing import Mapping, Optional, Sequence

import structlog

from originome.alerting.rules import DEFAULT_RULES
from originome.alerting.schemas import (
    SEVERITY_RANK,
    CompoundAlert,
    CompoundRule,
    RuleClause,
    RuleOperator,
)

logger = structlog.get_logger(__name__)


class CompoundRiskCorrelator:
    """
    Evaluates a fixed rule catalogue. Stateless between calls: alerts are
    recomputed from scratch, so a rule whose trigger went false disappears.
    """

    def __init__(self, rules: Optional[Sequence[CompoundRule]] = None):
        self.rules: tuple[CompoundRule, ...] = tuple(rules if rules is not None else DEFAULT_RULES)

    def evaluate(self, factors: Mapping[str, float]) -> list[CompoundAlert]:
        """
        Evaluate all rules against a factor snapshot.

        Args:
            factors: factor_id → current value

        Returns:
            Fired alerts sorted by severity rank, stable on ties
        """
        fired: list[CompoundAlert] = []
        for rule in self.rules:
            alert = self.evaluate_rule(rule, factors)
            if alert:
                fired.append(alert)

        fired.sort(key=lambda a: SEVERITY_RANK[a.severity], reverse=True)
        return fired

    def evaluate_rule(
        self, rule: CompoundRule, factors: Mapping[str, float]
    ) -> Optional[CompoundAlert]:
        """Return a CompoundAlert if every clause of the rule holds."""
        if not rule.clauses:
            return None
        if not all(self.check_clause(clause, factors) for clause in rule.clauses):
            return None

        factor_ids = list(dict.fromkeys(c.factor for c in rule.clauses))
        alert = CompoundAlert(
            id=f"compound_{rule.rule_id}",
            rule_id=rule.rule_id,
            type=rule.type,
            title=rule.title,
            severity=rule.severity,
            factors=factor_ids,
            factor_values={f: float(factors[f]) for f in factor_ids},
            multiplier=rule.multiplier,
            probability=rule.probability,
            time_to_impact=rule.time_to_impact,
            prevention_actions=list(rule.prevention_actions),
            description=rule.description,
        )

        logger.info(
            "compound_rule_fired",
            rule_id=rule.rule_id,
            severity=rule.severity.value,
            multiplier=rule.multiplier,
            factors=alert.factor_values,
        )
        return alert

    def check_clause(self, clause: RuleClause, factors: Mapping[str, float]) -> bool:
        """Evaluate one clause; a missing or non-finite factor is false."""
        value = factors.get(clause.factor)
        if value is None:
            return False
        value = float(value)
        if math.isnan(value):
            return False
        if clause.deviation_from is not None:
            value = abs(value - clause.deviation_from)
        return self._check_condition(clause.operator, value, clause.threshold)

    def _check_condition(
        self, operator: RuleOperator, value: float, threshold: float
    ) -> bool:
        """Evaluate a rule condition."""
        if operator == RuleOperator.GT:
            return value > threshold
        elif operator == RuleOperator.GTE:
            return value >= threshold
        elif operator == RuleOperator.LT:
            return value < threshold
        elif operator == RuleOperator.LTE:
            return value <= threshold
        elif operator == RuleOperator.EQ:
            return abs(value - threshold) < 1e-9
        elif operator == RuleOperator.NEQ:
            return abs(value - threshold) >= 1e-9
        return False
