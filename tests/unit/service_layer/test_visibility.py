"""Unit tests for the entity visibility waiter."""

from __future__ import annotations

import pytest

from fixturegate.adapters.memory import InMemoryEntitySearch
from fixturegate.interfaces.errors import RemoteRequestError
from fixturegate.interfaces.search import (
    EntitySearch,
    EntitySummary,
    SearchQuery,
    SearchResult,
)
from fixturegate.service_layer.errors import (
    AmbiguousEntityError,
    EntityNotFoundError,
    RetryTimeoutError,
)
from fixturegate.service_layer.visibility import EntityVisibilityWaiter

QUERY = SearchQuery(name="tf_test_referenceapp")


class StallingSearch(EntitySearch):
    """Finds nothing until ``stall_after`` seconds, then hangs for its timeout."""

    def __init__(self, clock, stall_after: float) -> None:
        self.clock = clock
        self.stall_after = stall_after
        self.timeouts: list[float] = []

    def search(self, query: SearchQuery, timeout: float) -> SearchResult:
        self.timeouts.append(timeout)
        if self.clock.elapsed >= self.stall_after:
            self.clock.sleep(timeout)
            raise RemoteRequestError(f"search timed out after {timeout:g}s")
        return SearchResult(count=0)


def make_waiter(search, clock, timeout=30.0, poll_interval=1.0):
    """Build a waiter on the fake clock."""
    return EntityVisibilityWaiter(
        search,
        timeout=timeout,
        poll_interval=poll_interval,
        clock=clock,
        sleep=clock.sleep,
    )


def test_visible_on_first_poll(clock):
    """A count of exactly one on the first search returns at once."""
    search = InMemoryEntitySearch([EntitySummary("guid-1", QUERY.name)])

    match = make_waiter(search, clock).wait_until_visible(QUERY)

    assert match == EntitySummary("guid-1", QUERY.name)
    assert search.calls == [QUERY]
    assert clock.elapsed == 0


def test_converges_after_index_lag(clock):
    """Zero matches for a few polls, then one, succeeds within the timeout."""
    search = InMemoryEntitySearch(script=[0, 0, 0, 1])

    make_waiter(search, clock, timeout=30, poll_interval=2).wait_until_visible(QUERY)

    assert len(search.calls) == 4
    assert clock.elapsed == 6


def test_search_errors_are_retried(clock):
    """A failing search is retried like a not-yet-visible result."""
    search = InMemoryEntitySearch(
        script=[RemoteRequestError("502 Bad Gateway"), 1]
    )

    make_waiter(search, clock).wait_until_visible(QUERY)

    assert len(search.calls) == 2


def test_never_visible_fails_with_not_found_after_timeout(clock):
    """Zero matches forever fails with NotFound once the timeout elapsed."""
    search = InMemoryEntitySearch()

    with pytest.raises(EntityNotFoundError) as exc_info:
        make_waiter(search, clock, timeout=30).wait_until_visible(QUERY)

    assert clock.elapsed == pytest.approx(30)
    assert exc_info.value.query == QUERY
    assert isinstance(exc_info.value, RetryTimeoutError)
    assert "not found" in str(exc_info.value)


def test_duplicates_fail_with_ambiguous_after_timeout_not_before(clock):
    """Two matches on every poll keep retrying until the timeout, then Ambiguous."""
    search = InMemoryEntitySearch(
        [EntitySummary("guid-1", QUERY.name), EntitySummary("guid-2", QUERY.name)]
    )

    with pytest.raises(AmbiguousEntityError) as exc_info:
        make_waiter(search, clock, timeout=10, poll_interval=1).wait_until_visible(
            QUERY
        )

    assert clock.elapsed == pytest.approx(10)
    assert len(search.calls) == 10
    assert exc_info.value.count == 2


def test_persistent_search_error_fails_with_timeout(clock):
    """When every search fails, the final error is a plain timeout."""
    failure = RemoteRequestError("unreachable")
    search = InMemoryEntitySearch(script=[failure] * 100)

    with pytest.raises(RetryTimeoutError) as exc_info:
        make_waiter(search, clock, timeout=5).wait_until_visible(QUERY)

    assert type(exc_info.value) is RetryTimeoutError  # pylint: disable=unidiomatic-typecheck
    assert exc_info.value.last_reason is failure


def test_last_observation_decides_final_error(clock):
    """Duplicates that resolve to zero by the deadline report NotFound."""
    search = InMemoryEntitySearch(script=[2, 2, 0, 0, 0, 0])

    with pytest.raises(EntityNotFoundError):
        make_waiter(search, clock, timeout=5).wait_until_visible(QUERY)


def test_default_timeout_is_tens_of_seconds():
    """The default timeout reflects index catch-up latency."""
    waiter = EntityVisibilityWaiter(InMemoryEntitySearch())
    assert 10 <= waiter.timeout <= 60


def test_stalled_search_does_not_outlive_the_wait(clock):
    """A search that hangs near the deadline only gets what is left of the wait."""
    search = StallingSearch(clock, stall_after=29)

    with pytest.raises(RetryTimeoutError):
        make_waiter(search, clock, timeout=30, poll_interval=1).wait_until_visible(
            QUERY
        )

    assert clock.elapsed == 30
    assert search.timeouts == [30 - n for n in range(30)]


def test_request_timeout_is_capped_by_remaining_wait(clock):
    """A shorter request timeout is used until less than that is left."""
    search = StallingSearch(clock, stall_after=float("inf"))
    waiter = EntityVisibilityWaiter(
        search,
        timeout=10,
        poll_interval=4,
        request_timeout=5,
        clock=clock,
        sleep=clock.sleep,
    )

    with pytest.raises(EntityNotFoundError):
        waiter.wait_until_visible(QUERY)

    assert search.timeouts == [5, 5, 2]
    assert clock.elapsed == 10
