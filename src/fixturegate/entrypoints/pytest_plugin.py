"""pytest plugin exposing the fixture gate to test suites.

Registered under the ``pytest11`` entry point, so installing the package makes
these fixtures available everywhere:

- ``fixture_gate`` (session): the process-wide `FixtureGate`.
- ``reference_application``: ensures the reference application is ready and
  returns its name. Skips the test when the environment is not configured and
  fails it when setup fails.

Example:
    ```py
    def test_alert_condition(reference_application):
        config = render_condition(entity_name=reference_application)
        ...
    ```
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from fixturegate.bootstrap import default_gate
from fixturegate.service_layer import FixtureGate, GateOutcome, GateStatus

# pylint: disable=redefined-outer-name


def require_ready(outcome: GateOutcome) -> None:
    """Turn a gate outcome into the matching pytest result.

    Returns normally when ready; otherwise calls `pytest.skip` or `pytest.fail`.
    """
    match outcome.status:
        case GateStatus.READY:
            return
        case GateStatus.SKIPPED:
            pytest.skip(outcome.reason or "fixture gate skipped")
        case GateStatus.FAILED:
            pytest.fail(outcome.reason or "fixture gate failed", pytrace=False)


def prepare_reference_application(gate: FixtureGate) -> str:
    """Run the gate and return the reference application's name.

    Skips or fails the calling test when the gate is not ready.
    """
    require_ready(gate.ensure_ready())
    return gate.names.application


@pytest.fixture(scope="session")
def fixture_gate() -> Iterator[FixtureGate]:
    """The process-wide fixture gate; its HTTP clients are closed after the session."""
    gate = default_gate()
    yield gate
    gate.close()


@pytest.fixture
def reference_application(fixture_gate: FixtureGate) -> str:
    """Ensure the reference application exists and is searchable.

    Returns:
        str: The reference application's name.
    """
    return prepare_reference_application(fixture_gate)
