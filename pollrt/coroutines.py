"""Hand-written state machines standing in for coroutines that await requests.

Each coroutine keeps the variables that must survive a suspension point in
its own attributes, and moves through its states one awaited future at a
time. They can be polled by hand or run on :class:`~pollrt.executor.Executor`.
"""

from __future__ import annotations

import argparse
import sys
from enum import Enum, auto
from typing import Any, Callable

from .future import Future, Ready
from .http import DEFAULT_ADDRESS, get
from .reactor import shutdown
from .runtime import init

__all__ = [
    "BufferCoroutine",
    "CounterCoroutine",
    "async_main_buffer",
    "async_main_counter",
    "main",
]

FIRST_PATH = "/600/HelloAsyncAwait"
SECOND_PATH = "/400/HelloAsyncAwait"
BUFFER_HEADER = "\nBUFFER:\n----\n"

Fetch = Callable[[str], Future]


class _State(Enum):
    START = auto()
    WAIT1 = auto()
    WAIT2 = auto()
    RESOLVED = auto()


class _Coroutine(Future):
    """Shared plumbing: where requests go and which future is awaited."""

    def __init__(
        self,
        address: tuple[str, int] = DEFAULT_ADDRESS,
        fetch: Fetch | None = None,
    ) -> None:
        self.address = tuple(address)
        self._fetch: Fetch = fetch if fetch is not None else self._http_get
        self._state = _State.START
        self._awaiting: Future | None = None

    def _http_get(self, path: str) -> Future:
        return get(path, self.address)

    @property
    def resolved(self) -> bool:
        """Whether the coroutine has run to its end."""
        return self._state is _State.RESOLVED

    def _await(self, path: str, state: _State) -> None:
        self._awaiting = self._fetch(path)
        self._state = state


class CounterCoroutine(_Coroutine):
    """Awaits two requests, printing each response and counting them."""

    def __init__(
        self,
        address: tuple[str, int] = DEFAULT_ADDRESS,
        fetch: Fetch | None = None,
    ) -> None:
        super().__init__(address, fetch)
        self.counter: int | None = None

    def poll(self, waker: Any) -> Ready | None:
        while True:
            if self._state is _State.START:
                self.counter = 0
                print("Program starting")
                self._await(FIRST_PATH, _State.WAIT1)

            elif self._state is _State.WAIT1:
                result = self._awaiting.poll(waker)
                if result is None:
                    return None
                print(result.value)
                self.counter += 1
                self._await(SECOND_PATH, _State.WAIT2)

            elif self._state is _State.WAIT2:
                result = self._awaiting.poll(waker)
                if result is None:
                    return None
                print(result.value)
                self.counter += 1
                print(f"Received {self.counter} responses.")
                self._awaiting = None
                self._state = _State.RESOLVED
                return Ready("")

            else:
                raise RuntimeError("Polled a resolved future")


class BufferCoroutine(_Coroutine):
    """Awaits two requests, writing each response into a buffer it prints."""

    def __init__(
        self,
        address: tuple[str, int] = DEFAULT_ADDRESS,
        fetch: Fetch | None = None,
    ) -> None:
        super().__init__(address, fetch)
        self._parts: list[str] | None = None
        self._writer: Callable[[str], Any] | None = None
        self.buffer: str | None = None

    def poll(self, waker: Any) -> Ready | None:
        while True:
            if self._state is _State.START:
                self._parts = [BUFFER_HEADER]
                # the writer refers into the buffer held across suspensions
                self._writer = self._parts.append
                print("Program starting")
                self._await(FIRST_PATH, _State.WAIT1)

            elif self._state is _State.WAIT1:
                result = self._awaiting.poll(waker)
                if result is None:
                    return None
                self._writer(f"{result.value}\n")
                self._await(SECOND_PATH, _State.WAIT2)

            elif self._state is _State.WAIT2:
                result = self._awaiting.poll(waker)
                if result is None:
                    return None
                self._writer(f"{result.value}\n")
                self.buffer = "".join(self._parts)
                print(self.buffer)
                self._parts = None
                self._writer = None
                self._awaiting = None
                self._state = _State.RESOLVED
                return Ready("")

            else:
                raise RuntimeError("Polled a resolved future")


def async_main_counter(address: tuple[str, int] = DEFAULT_ADDRESS) -> CounterCoroutine:
    """Return the counting coroutine aimed at the server at ``address``."""
    return CounterCoroutine(address)


def async_main_buffer(address: tuple[str, int] = DEFAULT_ADDRESS) -> BufferCoroutine:
    """Return the buffering coroutine aimed at the server at ``address``."""
    return BufferCoroutine(address)


def main(argv: list[str] | None = None) -> int:
    """Run one of the coroutines against a delay server."""
    parser = argparse.ArgumentParser(prog="pollrt-coroutines")
    parser.add_argument("--host", default=DEFAULT_ADDRESS[0])
    parser.add_argument("--port", type=int, default=DEFAULT_ADDRESS[1])
    parser.add_argument("--buffer", action="store_true")
    parser.add_argument("--assume-ready", action="store_true")
    args = parser.parse_args(argv)

    address = (args.host, args.port)
    program = async_main_buffer(address) if args.buffer else async_main_counter(address)

    executor = init()
    try:
        executor.block_on(program, assume_ready=args.assume_ready)
    finally:
        shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())