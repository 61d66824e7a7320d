"""
objectenvy — integration test package

File: tests/integration/__init__.py

Purpose
- Test package marker for end-to-end flows across the public API and the CLI.

Functional requirements
- Must not import heavy modules at import time; keep test collection fast.
"""
