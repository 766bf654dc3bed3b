"""
Originome Alerting.

Components:
- schemas: Pattern, alert and compound rule models
- classifier: Derivative sets → risk tiers and first-derivative alerts
- rules: Declarative compound rule catalogue
- compound: Conjunction rule evaluation over risk factors
"""
