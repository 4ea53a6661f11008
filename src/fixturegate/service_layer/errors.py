"""Service-layer error definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fixturegate.interfaces.search import SearchQuery

# ============================================================================
#                           General fixture errors
# ============================================================================


class FixtureError(Exception):
    """Base class for service-layer errors."""


class SetupError(FixtureError):
    """Raised when the reference application cannot be created or connected."""


# ============================================================================
#                           Retry related errors
# ============================================================================


class RetryFatalError(FixtureError):
    """Raised when a retried operation reports a non-retryable failure.

    Attributes:
        reason (Exception): The failure reported by the operation.
    """

    def __init__(self, reason: Exception) -> None:
        super().__init__(f"Operation failed permanently: {reason}")
        self.reason = reason


class RetryTimeoutError(FixtureError):
    """Raised when the retry budget is spent without the operation succeeding.

    Attributes:
        timeout (float): The retry budget, in seconds.
        last_reason (Exception | None): The last retryable failure observed.
        attempts (int): Number of times the operation was invoked.
    """

    def __init__(
        self,
        timeout: float,
        last_reason: Exception | None,
        attempts: int,
        message: str | None = None,
    ) -> None:
        super().__init__(
            message
            or f"Timed out after {timeout:g}s ({attempts} attempts): {last_reason}"
        )
        self.timeout = timeout
        self.last_reason = last_reason
        self.attempts = attempts


# ============================================================================
#                           Visibility related errors
# ============================================================================


class EntityNotVisibleYet(FixtureError):
    """Retryable reason: the search did not return exactly one entity.

    Attributes:
        query (SearchQuery): The query that was run.
        count (int): The number of matches the search reported.
    """

    def __init__(self, query: SearchQuery, count: int) -> None:
        super().__init__(f"Entity {query} not found, or found more than one ({count})")
        self.query = query
        self.count = count


class EntityNotFoundError(RetryTimeoutError):
    """Raised when the entity never showed up in search before the timeout."""

    def __init__(
        self,
        query: SearchQuery,
        timeout: float,
        attempts: int,
        last_reason: Exception | None = None,
    ) -> None:
        super().__init__(
            timeout,
            last_reason,
            attempts,
            message=f"Entity {query} not found in search after {timeout:g}s",
        )
        self.query = query


class AmbiguousEntityError(RetryTimeoutError):
    """Raised when the search still matched more than one entity at the timeout.

    Attributes:
        count (int): The number of matches the last search reported.
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        query: SearchQuery,
        count: int,
        timeout: float,
        attempts: int,
        last_reason: Exception | None = None,
    ) -> None:
        super().__init__(
            timeout,
            last_reason,
            attempts,
            message=(
                f"Entity {query} is ambiguous: search matched {count} entities "
                f"after {timeout:g}s"
            ),
        )
        self.query = query
        self.count = count
