"""
Originome Aggregation Engine.

Components:
- schemas: RiskSnapshot, the consolidated read-only query surface
- aggregator: Periodic tick re-running derivatives, rules and echoes
"""
