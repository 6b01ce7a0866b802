"""Poll-based futures and a combinator that waits for several of them."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, Iterable, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Ready(Generic[T]):
    """The result of a poll that has completed, carrying its value."""

    value: T


class Future(ABC):
    """A value that becomes available after being polled to completion.

    ``poll`` returns a :class:`Ready` holding the output once the work is
    done, or ``None`` while it is still pending. A pending future must arrange
    for ``waker.wake()`` to be called when polling again can make progress.
    """

    @abstractmethod
    def poll(self, waker: Any) -> Ready | None:
        """Advance the future; return ``Ready(value)`` or ``None`` if pending."""


class JoinAll(Future):
    """Completes with an empty string once every wrapped future has completed."""

    def __init__(self, futures: Iterable[Future]) -> None:
        self._futures: list[list[Any]] = [[False, fut] for fut in futures]
        self._finished_count = 0

    def poll(self, waker: Any) -> Ready | None:
        for entry in self._futures:
            finished, fut = entry
            if finished:
                continue
            if fut.poll(waker) is not None:
                entry[0] = True
                self._finished_count += 1

        if self._finished_count == len(self._futures):
            return Ready("")
        return None


def join_all(futures: Iterable[Future]) -> JoinAll:
    """Wrap ``futures`` in a single future that waits for all of them."""
    return JoinAll(futures)