"""
Ascension Log Test Suite

TEST AXIOMS:
=============
1. Determinism: same records = identical intervals, summary and text
2. Completeness: no turn is dropped or duplicated between layers
3. Explicit failure: bad arguments raise, bad records are reported
"""
