"""
Originome — Environmental Risk Intelligence Core.

Architecture:
    originome/
    ├── streaming/       # Sample windows, derivative engine, risk factor store
    ├── alerting/        # Pattern classifier, compound rule correlator
    ├── correlation/     # Cross-sector correlation library, echo propagation
    ├── engine/          # Alert aggregator (periodic tick)
    └── sources/         # Reading source contracts and feeders

Module Boundaries:
    - Sources are COLLABORATORS: they supply readings, never decisions
    - The core is a pure in-process library: no storage, no wire protocol
    - Every alert traces back to a window snapshot or a rule definition
    - Every random choice flows through an injectable, seedable generator

Data Flow:
    Sources → Feeder → Ingestor (windows) + Factor Store
    → Aggregator tick → Derivatives → Classifier / Correlator / Echo Propagator
    → RiskSnapshot (read-only query surface)

Version: 1.0.0
"""

__version__ = "1.0.0"
