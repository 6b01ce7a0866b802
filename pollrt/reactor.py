"""An I/O reactor that runs on its own thread and wakes tasks on readiness."""

from __future__ import annotations

import itertools
import selectors
import socket
import threading
from dataclasses import dataclass
from typing import Any

__all__ = ["READABLE", "WRITABLE", "Reactor", "reactor", "start", "shutdown"]

READABLE = selectors.EVENT_READ
WRITABLE = selectors.EVENT_WRITE

_WAKEUP = object()


@dataclass
class _Registration:
    stream: Any
    interest: int
    armed: bool


class Reactor:
    """Watches registered streams and calls the waker stored for each one.

    Each registration fires at most once per arming: after an event the
    stream is disarmed until a waker is set for it again, so a task that is
    not yet ready to read does not receive a flood of wake-ups.
    """

    def __init__(self) -> None:
        self._selector = selectors.DefaultSelector()
        self._lock = threading.Lock()
        self._wakers: dict[int, Any] = {}
        self._registrations: dict[int, _Registration] = {}
        self._ids = itertools.count(1)
        self._wake_r, self._wake_w = socket.socketpair()
        self._wake_r.setblocking(False)
        self._wake_w.setblocking(False)
        self._selector.register(self._wake_r, selectors.EVENT_READ, _WAKEUP)
        self._stopping = False
        self._thread = threading.Thread(
            target=self._event_loop, name="reactor", daemon=True
        )

    def register(self, stream: Any, interest: int, id: int) -> None:
        """Start watching ``stream`` for ``interest`` events under ``id``."""
        with self._lock:
            fileno = stream.fileno()
            if id in self._registrations or any(
                reg.stream.fileno() == fileno for reg in self._registrations.values()
            ):
                raise ValueError(f"stream or id {id} already registered")
            self._selector.register(stream, interest, id)
            self._registrations[id] = _Registration(stream, interest, True)
        self._interrupt()

    def set_waker(self, waker: Any, id: int) -> None:
        """Store ``waker`` as the most recent waker for ``id`` and re-arm it."""
        rearmed = False
        with self._lock:
            self._wakers[id] = waker
            reg = self._registrations.get(id)
            if reg is not None and not reg.armed:
                self._selector.register(reg.stream, reg.interest, id)
                reg.armed = True
                rearmed = True
        if rearmed:
            self._interrupt()

    def deregister(self, stream: Any, id: int) -> None:
        """Stop watching ``stream`` and forget the waker stored for ``id``."""
        with self._lock:
            self._wakers.pop(id, None)
            reg = self._registrations.get(id)
            if reg is None or reg.stream is not stream:
                raise KeyError(id)
            if reg.armed:
                self._selector.unregister(reg.stream)
            del self._registrations[id]

    def next_id(self) -> int:
        """Return a fresh identifier for a registration."""
        with self._lock:
            return next(self._ids)

    def _interrupt(self) -> None:
        try:
            self._wake_w.send(b"\0")
        except OSError:
            pass

    def _drain(self) -> None:
        try:
            while self._wake_r.recv(512):
                pass
        except OSError:
            pass

    def _event_loop(self) -> None:
        while not self._stopping:
            events = self._selector.select()
            with self._lock:
                for key, _mask in events:
                    if key.data is _WAKEUP:
                        self._drain()
                        continue
                    reg_id = key.data
                    reg = self._registrations.get(reg_id)
                    if reg is not None and reg.armed:
                        self._selector.unregister(reg.stream)
                        reg.armed = False
                    waker = self._wakers.get(reg_id)
                    if waker is not None:
                        waker.wake()

    def _run(self) -> None:
        self._thread.start()

    def _stop(self) -> None:
        self._stopping = True
        self._interrupt()
        if self._thread.is_alive():
            self._thread.join()
        self._selector.close()
        self._wake_r.close()
        self._wake_w.close()


_reactor: Reactor | None = None
_global_lock = threading.Lock()


def reactor() -> Reactor:
    """Return the running reactor."""
    current = _reactor
    if current is None:
        raise RuntimeError("Called outside an runtime context")
    return current


def start() -> None:
    """Create the global reactor and start its event loop thread."""
    global _reactor
    with _global_lock:
        if _reactor is not None:
            raise RuntimeError("Reactor already running")
        new = Reactor()
        new._run()
        _reactor = new


def shutdown() -> None:
    """Stop the global reactor, if one is running, and release it."""
    global _reactor
    with _global_lock:
        current, _reactor = _reactor, None
    if current is not None:
        current._stop()