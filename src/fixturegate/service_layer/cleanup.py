"""Purge stale test applications left behind by earlier runs.

The cleaner lists every application whose name carries the test prefix and
deletes the ones that are no longer reporting. Applications that reported data
within the reporting window are refused by the remote API, so they are skipped
rather than retried. Cleanup is best effort and runs at most once per
`FixtureState`: listing and delete failures are logged and counted, never
raised, and the state is marked done once the scan has been attempted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fixturegate.config import TEST_NAME_PREFIX
from fixturegate.interfaces.errors import RemoteServiceError
from fixturegate.interfaces.inventory import ApplicationInventory

from .state import FixtureState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CleanupReport:
    """What a cleanup pass did.

    Attributes:
        performed: False when cleanup had already run and this call was a no-op.
        total: Number of applications listed.
        deleted: Number of applications deleted.
        skipped_reporting: Number of applications left alone because they are
            still reporting.
        failed: Number of deletes that failed.
        listing_error: Message of the listing failure, if listing failed.
    """

    performed: bool
    total: int = 0
    deleted: int = 0
    skipped_reporting: int = 0
    failed: int = 0
    listing_error: str | None = None

    @property
    def attempted(self) -> int:
        """Number of deletes issued."""
        return self.deleted + self.failed

    @classmethod
    def not_performed(cls) -> CleanupReport:
        """Report for a call that found cleanup already done."""
        return cls(performed=False)


class StaleEntityCleaner:
    """Delete non-reporting applications whose name matches the test prefix.

    Args:
        inventory: Remote application inventory.
        state: Shared readiness state holding the ``cleanup_done`` flag.
        prefix: Name prefix identifying test applications.
    """

    def __init__(
        self,
        inventory: ApplicationInventory,
        state: FixtureState,
        prefix: str = TEST_NAME_PREFIX,
    ) -> None:
        self._inventory = inventory
        self._state = state
        self.prefix = prefix

    def cleanup(self) -> CleanupReport:
        """Run the cleanup pass, once.

        Returns:
            CleanupReport: Counts for this pass, or a not-performed report when
            cleanup already ran for this state.
        """
        with self._state.lock:
            if self._state.cleanup_done:
                logger.debug("Cleanup already done; skipping")
                return CleanupReport.not_performed()
            try:
                return self._cleanup()
            finally:
                self._state.cleanup_done = True

    def _cleanup(self) -> CleanupReport:
        try:
            applications = list(self._inventory.list_applications(self.prefix))
        except RemoteServiceError as e:
            logger.warning("error fetching applications: %s", e)
            return CleanupReport(performed=True, listing_error=str(e))

        total = len(applications)
        deleted = skipped = failed = 0

        for app in applications:
            if app.reporting:
                # The remote API refuses to delete applications that reported
                # within the reporting window.
                logger.debug("skipping reporting application %s (%s)", app.id, app.name)
                skipped += 1
                continue
            try:
                self._inventory.delete_application(app.id)
            except RemoteServiceError as e:
                failed += 1
                logger.warning("error deleting application %s: %s", app.id, e)
                continue
            deleted += 1
            logger.info("deleted application %s (%d/%d)", app.id, deleted, total)

        logger.info("cleanup of %d applications complete", deleted)
        return CleanupReport(
            performed=True,
            total=total,
            deleted=deleted,
            skipped_reporting=skipped,
            failed=failed,
        )
