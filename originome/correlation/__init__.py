"""
Originome Cross-Sector Correlation.

Components:
- schemas: Correlation patterns, echo predictions, audit records
- library: Explicitly initialized pattern registry with discovery audit trail
- echo: Cross-sector pattern detection and echo propagation
"""
