"""FIXTUREGATE Service Layer

Orchestration of the reference-application fixture: bounded retry, stale
application cleanup, application lifecycle, search visibility and the gate
that sequences them.
"""

from .cleanup import CleanupReport, StaleEntityCleaner
from .errors import (
    AmbiguousEntityError,
    EntityNotFoundError,
    FixtureError,
    RetryFatalError,
    RetryTimeoutError,
    SetupError,
)
from .gate import (
    FixtureGate,
    FixtureServices,
    GateOutcome,
    GateStage,
    GateStatus,
)
from .lifecycle import ApplicationLifecycleManager
from .retry import Done, Fatal, Retryable, RetryPoller, RetryPolicy, retry
from .state import FixtureState
from .visibility import EntityVisibilityWaiter

__all__ = [
    "AmbiguousEntityError",
    "ApplicationLifecycleManager",
    "CleanupReport",
    "Done",
    "EntityNotFoundError",
    "EntityVisibilityWaiter",
    "Fatal",
    "FixtureError",
    "FixtureGate",
    "FixtureServices",
    "FixtureState",
    "GateOutcome",
    "GateStage",
    "GateStatus",
    "RetryFatalError",
    "RetryPoller",
    "RetryPolicy",
    "RetryTimeoutError",
    "Retryable",
    "SetupError",
    "StaleEntityCleaner",
    "retry",
]
