"""Bounded retry of operations that may report "not yet ready".

An operation is a zero-argument callable returning one of three outcomes:

- `Done`: the condition holds; stop.
- `Retryable(reason)`: not yet; try again after the poll interval.
- `Fatal(reason)`: give up immediately.

`RetryPoller` invokes the operation until it is done, a fatal outcome is
reported, or a fixed wall-clock budget is spent. Once the deadline has passed
no further attempt is issued. The poller blocks the calling thread between
attempts; clock and sleep are injectable so tests can run on a fake clock.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from fixturegate.config import POLL_INTERVAL

from .errors import RetryFatalError, RetryTimeoutError

logger = logging.getLogger(__name__)

# pylint: disable=too-few-public-methods


@dataclass(frozen=True)
class Done:
    """The operation succeeded."""


@dataclass(frozen=True)
class Retryable:
    """The operation is not done yet and may be retried."""

    reason: Exception


@dataclass(frozen=True)
class Fatal:
    """The operation failed and must not be retried."""

    reason: Exception


Outcome = Done | Retryable | Fatal
Operation = Callable[[], Outcome]


@dataclass(frozen=True)
class RetryPolicy:
    """How long to keep retrying, and how long to wait between attempts."""

    timeout: float
    poll_interval: float = POLL_INTERVAL

    def __post_init__(self) -> None:
        if self.timeout < 0:
            raise ValueError(f"timeout must be >= 0, got {self.timeout}")
        if self.poll_interval <= 0:
            raise ValueError(f"poll_interval must be > 0, got {self.poll_interval}")


class RetryPoller:
    """Run an operation until it is done, fails fatally, or the budget runs out.

    Args:
        policy: Timeout and poll interval.
        clock: Monotonic time source, in seconds.
        sleep: Blocking sleep function, in seconds.
    """

    def __init__(
        self,
        policy: RetryPolicy,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.policy = policy
        self._clock = clock
        self._sleep = sleep

    def run(self, operation: Operation) -> int:
        """Invoke ``operation`` until it reports `Done`.

        Args:
            operation: Callable returning a `Done`, `Retryable` or `Fatal` outcome.

        Returns:
            int: Number of attempts made, including the successful one.

        Raises:
            RetryFatalError: If the operation returned `Fatal`.
            RetryTimeoutError: If the timeout elapsed before `Done`; carries the
                last retryable reason.
        """
        deadline = self._clock() + self.policy.timeout
        last_reason: Exception | None = None
        attempts = 0

        while True:
            attempts += 1
            match operation():
                case Done():
                    logger.debug("Operation done after %d attempt(s)", attempts)
                    return attempts
                case Fatal(reason=reason):
                    raise RetryFatalError(reason) from reason
                case Retryable(reason=reason):
                    last_reason = reason
                case other:
                    raise TypeError(f"Unexpected retry outcome: {other!r}")

            remaining = deadline - self._clock()
            if remaining <= 0:
                break
            logger.debug(
                "Attempt %d not done (%s); retrying in %.2fs",
                attempts,
                last_reason,
                min(self.policy.poll_interval, remaining),
            )
            self._sleep(min(self.policy.poll_interval, remaining))
            if self._clock() >= deadline:
                break

        raise RetryTimeoutError(self.policy.timeout, last_reason, attempts) from (
            last_reason
        )


def retry(
    timeout: float,
    operation: Operation,
    *,
    poll_interval: float = POLL_INTERVAL,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Retry ``operation`` for up to ``timeout`` seconds.

    Convenience wrapper around `RetryPoller`; see `RetryPoller.run`.
    """
    poller = RetryPoller(RetryPolicy(timeout, poll_interval), clock=clock, sleep=sleep)
    return poller.run(operation)
