"""
Compound Rule Catalogue.

Declarative {predicate-set, consequence} records. Declaration order is the
tie-break order for alerts of equal severity.

Factor ids:
- environmental: co2, pm25, temperature, humidity, light, noise
- cosmic: geomagnetic.kpIndex, solar.sunspotNumber, seasonal.pollenLevel,
  seismic.riskLevel, seasonal.lunarIllumination
- operational: hvacLoad, occupancy, equipmentAge
"""

from originome.alerting.schemas import (
    AlertSeverity,
    CompoundRule,
    CompoundType,
    RuleClause,
    RuleOperator,
)

KP_INDEX = "geomagnetic.kpIndex"
SUNSPOTS = "solar.sunspotNumber"
POLLEN = "seasonal.pollenLevel"
SEISMIC = "seismic.riskLevel"
LUNAR = "seasonal.lunarIllumination"

# Comfort setpoint for temperature-deviation clauses (°C)
THERMAL_SETPOINT: float = 21.0

# seasonal.pollenLevel ordinal (see streaming.factors.POLLEN_LEVELS)
POLLEN_HIGH: float = 3.0
POLLEN_VERY_HIGH: float = 4.0


DEFAULT_RULES: tuple[CompoundRule, ...] = (
    CompoundRule(
        rule_id="pile_up_pattern",
        type=CompoundType.COMPOUND_PATTERN,
        title="Compound Pattern PP-847 Detected",
        severity=AlertSeverity.CRITICAL,
        clauses=(
            RuleClause(factor=KP_INDEX, operator=RuleOperator.GTE, threshold=4),
            RuleClause(factor="pm25", operator=RuleOperator.GT, threshold=20),
        ),
        multiplier=8.2,
        probability=0.92,
        time_to_impact="0-2 hours",
        prevention_actions=(
            "Increase HVAC filtration and inspect filter seals",
            "Defer non-critical equipment operations",
            "Schedule an electrical stress inspection of HVAC controls",
        ),
        description=(
            "8.2x failure probability for HVAC systems due to Kp4+ geomagnetic "
            "activity combined with elevated particulates"
        ),
    ),
    CompoundRule(
        rule_id="triple_threat_convergence",
        type=CompoundType.CONVERGENCE,
        title="Triple Threat Convergence Detected",
        severity=AlertSeverity.CRITICAL,
        clauses=(
            RuleClause(factor="co2", operator=RuleOperator.GT, threshold=850),
            RuleClause(factor="pm25", operator=RuleOperator.GT, threshold=20),
            RuleClause(factor=KP_INDEX, operator=RuleOperator.GT, threshold=4),
        ),
        multiplier=3.0,
        probability=0.92,
        time_to_impact="2-4 hours",
        prevention_actions=(
            "Implement immediate ventilation protocols",
            "Consider flexible work arrangements",
            "Monitor occupant wellness closely",
        ),
        description=(
            "Three independent risk factors are converging into a compound stress "
            "environment with potential for rapid performance degradation"
        ),
    ),
    CompoundRule(
        rule_id="solar_grid_cascade",
        type=CompoundType.CASCADE,
        title="Solar-Geomagnetic Convergence Event",
        severity=AlertSeverity.CRITICAL,
        clauses=(
            RuleClause(factor=SUNSPOTS, operator=RuleOperator.GT, threshold=120),
            RuleClause(factor=KP_INDEX, operator=RuleOperator.GT, threshold=4),
        ),
        multiplier=2.5,
        probability=0.68,
        time_to_impact="45-90 minutes",
        prevention_actions=(
            "Activate electromagnetic shielding protocols",
            "Prepare backup communications",
            "Put mission-critical systems under manual monitoring",
        ),
        description="Electronic systems instability with potential data connectivity issues",
    ),
    CompoundRule(
        rule_id="triple_environmental_stress",
        type=CompoundType.CONVERGENCE,
        title="Triple Environmental Stress",
        severity=AlertSeverity.HIGH,
        clauses=(
            RuleClause(factor="co2", operator=RuleOperator.GT, threshold=900),
            RuleClause(
                factor="temperature", operator=RuleOperator.GT, threshold=4,
                deviation_from=THERMAL_SETPOINT,
            ),
            RuleClause(factor=KP_INDEX, operator=RuleOperator.GT, threshold=4),
        ),
        multiplier=2.7,
        probability=0.82,
        time_to_impact="4-6 hours",
        prevention_actions=(
            "Increase fresh air intake",
            "Restore the thermal setpoint",
            "Postpone high-stakes decisions",
        ),
        description="31% decision-making errors, 19% stress-related incidents",
    ),
    CompoundRule(
        rule_id="allergen_geomagnetic_convergence",
        type=CompoundType.ANOMALY,
        title="Allergen-Geomagnetic Convergence",
        severity=AlertSeverity.HIGH,
        clauses=(
            RuleClause(factor=POLLEN, operator=RuleOperator.GTE, threshold=POLLEN_VERY_HIGH),
            RuleClause(factor=KP_INDEX, operator=RuleOperator.GT, threshold=5),
        ),
        multiplier=2.3,
        probability=0.78,
        time_to_impact="12-24 hours",
        prevention_actions=(
            "Enhance air filtration",
            "Make antihistamines available",
            "Reduce meeting schedules for sensitive individuals",
        ),
        description="23% increase in absenteeism, 15% drop in afternoon productivity",
    ),
    CompoundRule(
        rule_id="geomagnetic_air_quality_convergence",
        type=CompoundType.CONVERGENCE,
        title="Geomagnetic Storm + Poor Air Quality Convergence",
        severity=AlertSeverity.HIGH,
        clauses=(
            RuleClause(factor=KP_INDEX, operator=RuleOperator.GT, threshold=5),
            RuleClause(factor="pm25", operator=RuleOperator.GT, threshold=20),
        ),
        multiplier=1.5,
        probability=0.87,
        time_to_impact="2-4 hours",
        prevention_actions=(
            "Implement flexible work arrangements",
            "Defer non-critical equipment operations until conditions normalize",
        ),
        description="Geomagnetic disturbance compounds fine-particulate exposure",
    ),
    CompoundRule(
        rule_id="air_quality_solar_stress",
        type=CompoundType.COMPOUND_PATTERN,
        title="Air Quality-Solar Stress",
        severity=AlertSeverity.HIGH,
        clauses=(
            RuleClause(factor="pm25", operator=RuleOperator.GT, threshold=25),
            RuleClause(factor=SUNSPOTS, operator=RuleOperator.GT, threshold=120),
        ),
        multiplier=1.8,
        probability=0.65,
        time_to_impact="4-6 hours",
        prevention_actions=(
            "Increase filtration intensity",
            "Offer flexible schedules for sensitive occupants",
        ),
        description="18% increase in respiratory complaints, 12% productivity loss",
    ),
    CompoundRule(
        rule_id="thermal_solar_cascade",
        type=CompoundType.CASCADE,
        title="Thermal-Solar Cascade Risk",
        severity=AlertSeverity.HIGH,
        clauses=(
            RuleClause(factor="temperature", operator=RuleOperator.GT, threshold=26),
            RuleClause(factor=SUNSPOTS, operator=RuleOperator.GT, threshold=120),
        ),
        multiplier=1.6,
        probability=0.7,
        time_to_impact="6-8 hours",
        prevention_actions=(
            "Pre-emptively adjust HVAC settings",
            "Implement thermal comfort protocols",
            "Prepare backup ventilation systems",
        ),
        description=(
            "Elevated solar activity is amplifying thermal stress, straining HVAC "
            "and degrading indoor air quality"
        ),
    ),
    CompoundRule(
        rule_id="hvac_co2_feedback_loop",
        type=CompoundType.CASCADE,
        title="HVAC Stress-CO₂ Feedback Loop",
        severity=AlertSeverity.HIGH,
        clauses=(
            RuleClause(factor="hvacLoad", operator=RuleOperator.GT, threshold=0.8),
            RuleClause(factor="co2", operator=RuleOperator.GT, threshold=900),
        ),
        multiplier=1.9,
        probability=0.74,
        time_to_impact="30-60 minutes",
        prevention_actions=(
            "Stage supplementary ventilation",
            "Shed non-essential HVAC zones",
        ),
        description="An overloaded HVAC plant can no longer clear accumulating CO₂",
    ),
    CompoundRule(
        rule_id="occupancy_ventilation_strain",
        type=CompoundType.CONVERGENCE,
        title="Occupancy-Ventilation Strain",
        severity=AlertSeverity.MEDIUM,
        clauses=(
            RuleClause(factor="co2", operator=RuleOperator.GT, threshold=800),
            RuleClause(factor="occupancy", operator=RuleOperator.GT, threshold=0.8),
        ),
        multiplier=1.2,
        probability=0.6,
        time_to_impact="1-2 hours",
        prevention_actions=(
            "Implement gradual ventilation increase",
            "Redistribute occupancy",
        ),
        description="Ventilation may be inadequate for current occupancy",
    ),
    CompoundRule(
        rule_id="equipment_thermal_solar",
        type=CompoundType.CONVERGENCE,
        title="Age-Temperature-Solar Convergence",
        severity=AlertSeverity.MEDIUM,
        clauses=(
            RuleClause(factor="temperature", operator=RuleOperator.GT, threshold=24),
            RuleClause(factor=SUNSPOTS, operator=RuleOperator.GT, threshold=150),
            RuleClause(factor="equipmentAge", operator=RuleOperator.GT, threshold=5),
        ),
        multiplier=1.5,
        probability=0.55,
        time_to_impact="6-12 hours",
        prevention_actions=(
            "Prioritize inspection of aging equipment",
            "Reduce thermal load on older units",
        ),
        description="Aging equipment under thermal and solar stress",
    ),
    CompoundRule(
        rule_id="air_quality_humidity_cascade",
        type=CompoundType.CASCADE,
        title="PM2.5 + High Humidity Convergence",
        severity=AlertSeverity.MEDIUM,
        clauses=(
            RuleClause(factor="pm25", operator=RuleOperator.GT, threshold=20),
            RuleClause(factor="humidity", operator=RuleOperator.GT, threshold=65),
        ),
        multiplier=1.4,
        probability=0.6,
        time_to_impact="2-4 hours",
        prevention_actions=(
            "Increase filtration intensity",
            "Redistribute occupancy away from high-risk zones",
        ),
        description="Humid air holds particulates longer, compounding respiratory stress",
    ),
    CompoundRule(
        rule_id="comfort_degradation",
        type=CompoundType.PREDICTION,
        title="Comfort Degradation Predicted",
        severity=AlertSeverity.MEDIUM,
        clauses=(
            RuleClause(factor="humidity", operator=RuleOperator.GT, threshold=60),
            RuleClause(factor="temperature", operator=RuleOperator.GT, threshold=25),
        ),
        multiplier=1.3,
        probability=0.7,
        time_to_impact="next 3 hours",
        prevention_actions=(
            "Proactively adjust HVAC settings",
            "Apply comfort mitigation before complaints arise",
        ),
        description="Conditions are trending toward the thermal discomfort threshold",
    ),
    CompoundRule(
        rule_id="lunar_cognitive_load",
        type=CompoundType.PREDICTION,
        title="Cognitive Load Peak During Full Moon Phase",
        severity=AlertSeverity.MEDIUM,
        clauses=(
            RuleClause(factor="co2", operator=RuleOperator.GT, threshold=800),
            RuleClause(factor=LUNAR, operator=RuleOperator.GT, threshold=85),
        ),
        multiplier=1.2,
        probability=0.64,
        time_to_impact="4-8 hours",
        prevention_actions=(
            "Prioritize ventilation improvements",
            "Avoid scheduling critical decisions",
        ),
        description="Elevated CO₂ during lunar maximum correlates with decision-making errors",
    ),
    CompoundRule(
        rule_id="solar_allergen_season",
        type=CompoundType.ANOMALY,
        title="Solar Maximum + Peak Allergen Season",
        severity=AlertSeverity.MEDIUM,
        clauses=(
            RuleClause(factor=SUNSPOTS, operator=RuleOperator.GT, threshold=120),
            RuleClause(factor=POLLEN, operator=RuleOperator.EQ, threshold=POLLEN_HIGH),
        ),
        multiplier=1.3,
        probability=0.73,
        time_to_impact="12-24 hours",
        prevention_actions=(
            "Optimize lighting schedules and air filtration",
            "Consider antihistamine availability",
        ),
        description="High solar activity during peak pollen season raises respiratory complaints",
    ),
    CompoundRule(
        rule_id="seismic_thermal_stress",
        type=CompoundType.ANOMALY,
        title="Thermal Stress + Geological Instability",
        severity=AlertSeverity.MEDIUM,
        clauses=(
            RuleClause(
                factor="temperature", operator=RuleOperator.GT, threshold=3,
                deviation_from=THERMAL_SETPOINT,
            ),
            RuleClause(factor=SEISMIC, operator=RuleOperator.GT, threshold=4),
        ),
        multiplier=1.1,
        probability=0.58,
        time_to_impact="6-12 hours",
        prevention_actions=(
            "Adjust HVAC settings",
            "Consider stress-reduction protocols",
        ),
        description="Suboptimal temperatures with seismic activity impact concentration",
    ),
)
