"""
Originome Streaming Layer.

Components:
- schemas: Sample, derivative and risk factor models
- window: Bounded per-parameter windows and the sample ingestor
- derivatives: Finite-difference velocity / acceleration / jerk
- factors: Latest-value risk factor store with consistent snapshots
"""
