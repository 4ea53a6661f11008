"""Process-wide readiness state for the fixture gate."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field


@dataclass
class FixtureState:
    """Readiness flags shared by every test of one process.

    Both flags only ever move from False to True. The lock is re-entrant so the
    gate can hold it across a whole setup sequence while the cleaner takes it
    again for its own flag.
    """

    application_created: bool = False
    cleanup_done: bool = False
    lock: threading.RLock = field(
        default_factory=threading.RLock, repr=False, compare=False
    )
