"""
Integration Tests Package

End-to-end checks from records to summary, text, CLI and HTTP.

TEST AXIOMS:
=============
1. Determinism: same document = identical output
2. Explicit failure: bad records are reported, never fatal
3. Formats decorate, they never reorder
"""
