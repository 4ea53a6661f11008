"""The fixture gate: the single entry point dependent tests call.

`FixtureGate.ensure_ready` makes sure the reference application exists and is
searchable before a dependent test runs. It sequences cleanup, creation and the
visibility wait the first time it is called, and is a no-op once that sequence
has succeeded. The outcome is reported as one of three values so callers never
confuse an unconfigured environment (skip) with a broken system (fail).

Stages only move forward::

    UNINITIALIZED -> CLEANING_UP -> CREATING -> WAITING_FOR_VISIBILITY -> READY

The readiness flag is advanced only on full success, so a failed attempt is
retried from the start by the next caller.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum

from fixturegate.config import (
    Credentials,
    InvalidConfigurationError,
    MissingCredentialError,
    TestNames,
    load_credentials,
)
from fixturegate.interfaces.errors import RemoteServiceError
from fixturegate.interfaces.search import SearchQuery

from .cleanup import StaleEntityCleaner
from .errors import FixtureError
from .lifecycle import ApplicationLifecycleManager
from .state import FixtureState
from .visibility import EntityVisibilityWaiter

logger = logging.getLogger(__name__)


class GateStage(Enum):
    """Furthest stage reached by the gate."""

    UNINITIALIZED = 0
    CLEANING_UP = 1
    CREATING = 2
    WAITING_FOR_VISIBILITY = 3
    READY = 4


class GateStatus(Enum):
    """Terminal outcome of `FixtureGate.ensure_ready`."""

    READY = "ready"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class GateOutcome:
    """Result of an `ensure_ready` call.

    Attributes:
        status: READY, SKIPPED or FAILED.
        reason: Human-readable explanation for SKIPPED and FAILED.
    """

    status: GateStatus
    reason: str | None = None

    @property
    def ready(self) -> bool:
        """True when dependent tests may proceed."""
        return self.status is GateStatus.READY

    @classmethod
    def make_ready(cls) -> GateOutcome:
        """Build a READY outcome."""
        return cls(GateStatus.READY)

    @classmethod
    def skipped(cls, reason: str) -> GateOutcome:
        """Build a SKIPPED outcome."""
        return cls(GateStatus.SKIPPED, reason)

    @classmethod
    def failed(cls, reason: str) -> GateOutcome:
        """Build a FAILED outcome."""
        return cls(GateStatus.FAILED, reason)


@dataclass(frozen=True)
class FixtureServices:
    """The collaborators the gate sequences.

    ``on_close`` releases whatever the collaborators hold open (HTTP clients).
    """

    cleaner: StaleEntityCleaner
    lifecycle: ApplicationLifecycleManager
    waiter: EntityVisibilityWaiter
    on_close: Callable[[], None] | None = None

    def close(self) -> None:
        """Release the collaborators' resources."""
        if self.on_close is not None:
            self.on_close()


ServicesFactory = Callable[[Credentials, TestNames, FixtureState], FixtureServices]


class FixtureGate:
    """Idempotently prepare the reference application for dependent tests.

    Args:
        services_factory: Builds the cleaner, lifecycle manager and waiter from
            the resolved credentials. Called at most once, and only after the
            environment check passed.
        state: Readiness flags; a fresh `FixtureState` when omitted.
        names: Test names for this process; generated when omitted.
        environ: Environment snapshot; a copy of ``os.environ`` when omitted.
    """

    def __init__(
        self,
        services_factory: ServicesFactory,
        *,
        state: FixtureState | None = None,
        names: TestNames | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._services_factory = services_factory
        self._services: FixtureServices | None = None
        self.state = state or FixtureState()
        self.names = names or TestNames.generate()
        self._environ = dict(os.environ if environ is None else environ)
        self.stage = GateStage.UNINITIALIZED

    @property
    def query(self) -> SearchQuery:
        """Search query identifying the reference application."""
        return SearchQuery(name=self.names.application)

    def ensure_ready(self) -> GateOutcome:
        """Make sure the reference application exists and is searchable.

        Returns:
            GateOutcome: SKIPPED if required configuration is missing (no remote
            call is made), FAILED if any setup step failed, READY otherwise.
        """
        try:
            credentials = load_credentials(self._environ)
        except MissingCredentialError as e:
            logger.info("Skipping: %s", e)
            return GateOutcome.skipped(str(e))
        except InvalidConfigurationError as e:
            logger.error("Invalid configuration: %s", e)
            return GateOutcome.failed(str(e))

        with self.state.lock:
            if self.state.application_created:
                return GateOutcome.make_ready()

            try:
                self._set_up(credentials)
            except (FixtureError, RemoteServiceError) as e:
                logger.error(
                    "Unable to prepare application %r: %s", self.names.application, e
                )
                return GateOutcome.failed(
                    f"Unable to prepare application {self.names.application!r}: {e}"
                )

            self.state.application_created = True
            self._advance(GateStage.READY)

        logger.info("Application %r is ready", self.names.application)
        return GateOutcome.make_ready()

    def close(self) -> None:
        """Release the remote services, if they were built.

        The readiness flags are kept; a later `ensure_ready` that still has work
        to do builds fresh services.
        """
        with self.state.lock:
            if self._services is not None:
                self._services.close()
                self._services = None

    def _set_up(self, credentials: Credentials) -> None:
        services = self._get_services(credentials)

        self._advance(GateStage.CLEANING_UP)
        services.cleaner.cleanup()

        self._advance(GateStage.CREATING)
        services.lifecycle.create_reference_application()

        # The search index lags creation; wait until it holds exactly one match.
        self._advance(GateStage.WAITING_FOR_VISIBILITY)
        services.waiter.wait_until_visible(self.query)

    def _get_services(self, credentials: Credentials) -> FixtureServices:
        if self._services is None:
            self._services = self._services_factory(credentials, self.names, self.state)
        return self._services

    def _advance(self, stage: GateStage) -> None:
        if stage.value > self.stage.value:
            logger.debug("Gate stage %s -> %s", self.stage.name, stage.name)
            self.stage = stage
