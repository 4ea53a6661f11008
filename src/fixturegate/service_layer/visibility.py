"""Wait for a newly created entity to appear in the search index."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from fixturegate.config import POLL_INTERVAL, VISIBILITY_TIMEOUT
from fixturegate.interfaces.errors import RemoteServiceError
from fixturegate.interfaces.search import EntitySearch, EntitySummary, SearchQuery

from .errors import (
    AmbiguousEntityError,
    EntityNotFoundError,
    EntityNotVisibleYet,
    RetryTimeoutError,
)
from .retry import Done, Outcome, Retryable, RetryPoller, RetryPolicy

logger = logging.getLogger(__name__)


class EntityVisibilityWaiter:
    """Poll the search service until a query matches exactly one entity.

    Args:
        search: Remote entity search service.
        timeout: Total seconds to wait for the index to catch up.
        poll_interval: Seconds between searches.
        request_timeout: Per-search request timeout, in seconds. Each search
            gets at most what is left of ``timeout``.
        clock: Monotonic time source (injectable for tests).
        sleep: Blocking sleep (injectable for tests).
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        search: EntitySearch,
        *,
        timeout: float = VISIBILITY_TIMEOUT,
        poll_interval: float = POLL_INTERVAL,
        request_timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._search = search
        self._clock = clock
        self._poller = RetryPoller(
            RetryPolicy(timeout, poll_interval), clock=clock, sleep=sleep
        )
        self.request_timeout = timeout if request_timeout is None else request_timeout

    @property
    def timeout(self) -> float:
        """Total seconds to wait for visibility."""
        return self._poller.policy.timeout

    def wait_until_visible(self, query: SearchQuery) -> EntitySummary | None:
        """Block until ``query`` matches exactly one entity.

        Args:
            query: The entity to wait for.

        Returns:
            EntitySummary | None: The match, when the search returned it.

        Raises:
            EntityNotFoundError: The last search before the timeout found nothing.
            AmbiguousEntityError: The last search before the timeout found more
                than one entity.
            RetryTimeoutError: The last search before the timeout failed.
        """
        found: list[EntitySummary] = []
        deadline = self._clock() + self.timeout

        def _search_once() -> Outcome:
            # No single search may outlive the overall wait.
            remaining = max(deadline - self._clock(), 0.0)
            request_timeout = min(self.request_timeout, remaining)
            try:
                result = self._search.search(query, request_timeout)
            except RemoteServiceError as e:
                return Retryable(e)
            if result.count != 1:
                return Retryable(EntityNotVisibleYet(query, result.count))
            found.extend(result.matches[:1])
            return Done()

        try:
            attempts = self._poller.run(_search_once)
        except RetryTimeoutError as e:
            if (final := self._final_error(query, e)) is None:
                raise
            raise final from e

        logger.info("Entity %s visible after %d search(es)", query, attempts)
        return found[0] if found else None

    @staticmethod
    def _final_error(
        query: SearchQuery, error: RetryTimeoutError
    ) -> RetryTimeoutError | None:
        """Map the last retryable reason to NotFound or Ambiguous, if it applies."""
        reason = error.last_reason
        if not isinstance(reason, EntityNotVisibleYet):
            return None
        if reason.count == 0:
            return EntityNotFoundError(query, error.timeout, error.attempts, reason)
        return AmbiguousEntityError(
            query, reason.count, error.timeout, error.attempts, reason
        )
