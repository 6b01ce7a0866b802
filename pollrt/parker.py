"""A thread parker built from a lock-protected flag and a condition."""

from __future__ import annotations

import threading


class Parker:
    """Blocks a thread in :meth:`park` until another calls :meth:`unpark`.

    An ``unpark`` that happens before ``park`` is remembered, so the next
    ``park`` returns at once. Each ``park`` consumes the permission.
    """

    def __init__(self) -> None:
        self._condition = threading.Condition(threading.Lock())
        self._resumable = False

    def park(self) -> None:
        """Sleep until unparked, then reset the flag."""
        with self._condition:
            while not self._resumable:
                self._condition.wait()
            self._resumable = False

    def unpark(self) -> None:
        """Allow a parked (or the next parking) thread to continue."""
        with self._condition:
            self._resumable = True
            self._condition.notify()