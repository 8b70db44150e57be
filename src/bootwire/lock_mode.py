from __future__ import annotations

import threading
from contextlib import AbstractContextManager, nullcontext
from enum import Enum


class LockMode(Enum):
    """Select locking behavior for container mutation and lazy dispatch.

    Use ``THREAD`` when the application resolves from several threads. Use
    ``NONE`` for single-threaded applications and tests where lock overhead is
    not wanted.
    """

    THREAD = "thread"
    """Guard state with a re-entrant ``threading.RLock``."""

    NONE = "none"
    """Disable locking."""

    def create_lock(self) -> AbstractContextManager[object]:
        """Return a fresh lock (or a no-op context manager) for this mode."""
        if self is LockMode.THREAD:
            return threading.RLock()
        return nullcontext()
