"""Contract tests.

Purpose
- Define inventory and search behavior once and run it against every backend
  (in-memory and httpx over a fake server) to keep them interchangeable.

Guidelines
- Backends are parametrized through the `backend` fixture of each suite.
- Assert only the public contract, not internals.
"""
