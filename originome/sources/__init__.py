"""
Originome Reading Sources.

Components:
- base: ReadingSource contract, static in-process source, field catalogues
- http: httpx-backed source with timeout-as-no-sample semantics
- feeder: Pushes readings into the ingestor and risk factor store
"""
