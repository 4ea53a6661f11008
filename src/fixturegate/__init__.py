"""FIXTUREGATE

A test-fixture orchestrator for integration tests that run against a live,
eventually-consistent telemetry API. It makes sure a single shared reference
application exists and is searchable before any dependent test runs, and
purges stale applications left behind by earlier runs.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
