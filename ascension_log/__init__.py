"""
Ascension Log Reconstruction

Rebuilds a chronological, day-by-day narrative of one game ascension from
its turns and dated side events, and derives the aggregate summary.

LAYER STRUCTURE:
================

1. CONTRACTS (contracts/)
   - Immutable value types, enums and the error taxonomy
   - MUST NOT: import from any other layer

2. TIMELINE (timeline/)
   - Event Timeline Store, Interval Builder, Day-Boundary Reconciler,
     Event Interleaver
   - Outputs: turn intervals and day-tagged emissions

3. SUMMARY (summary/)
   - Summary Aggregator and the immutable LogSummary
   - MUST NOT: write to the store it reads

4. RENDERING (rendering/)
   - One Renderer, format strategies as data (text, HTML, BBCode)
   - MUST NOT: change content or order between formats

5. INGESTION (ingestion/)
   - JSON records to store calls; data-quality errors are collected

6. OUTER SURFACES (engine.py, cli.py, api/)
   - Configuration, the AscensionLog facade, CLI and HTTP

CONSTRAINTS ENFORCED:
=====================
- Deterministic: identical inputs always produce identical output
- Explicit errors: invalid arguments and states raise at the offending call
- The summary is created exactly once per log
"""

__version__ = "1.0.0"
