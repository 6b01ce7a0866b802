"""An awaitable HTTP GET for coroutines run by the coroutine executor."""

from __future__ import annotations

import socket
from typing import Any, Generator

from .aio_executor import Context, Pending, current_context
from .future import Ready
from .http import DEFAULT_ADDRESS, get_req
from .reactor import READABLE, reactor

__all__ = ["AioHttpGet", "get"]

_CHUNK_SIZE = 147


class AioHttpGet:
    """Sends a GET on first poll and completes with the whole raw response.

    It can be polled by hand with a :class:`Context`, or awaited inside a
    task run by :class:`~pollrt.aio_executor.AioExecutor`.
    """

    def __init__(self, path: str, address: tuple[str, int] = DEFAULT_ADDRESS) -> None:
        self.path = path
        self.address = tuple(address)
        self.id = reactor().next_id()
        self._stream: socket.socket | None = None
        self._buffer = bytearray()

    def _write_request(self) -> None:
        stream = socket.create_connection(self.address)
        stream.sendall(get_req(self.path).encode())
        stream.setblocking(False)
        self._stream = stream

    def poll(self, cx: Context) -> Ready | None:
        """Advance the request; return ``Ready(text)`` or ``None`` if pending."""
        if self._stream is None:
            print("FIRST POLL - START OPERATION")
            self._write_request()
            reactor().register(self._stream, READABLE, self.id)
            reactor().set_waker(cx.waker, self.id)

        stream = self._stream
        while True:
            try:
                data = stream.recv(_CHUNK_SIZE)
            except BlockingIOError:
                # always store the most recent waker
                reactor().set_waker(cx.waker, self.id)
                return None
            if not data:
                text = self._buffer.decode("utf-8", errors="replace")
                reactor().deregister(stream, self.id)
                stream.close()
                return Ready(text)
            self._buffer.extend(data)

    def __await__(self) -> Generator[Pending, Any, str]:
        while (result := self.poll(current_context())) is None:
            yield Pending()
        return result.value


def get(path: str, address: tuple[str, int] = DEFAULT_ADDRESS) -> AioHttpGet:
    """Return an awaitable that fetches ``path`` from the server at ``address``."""
    return AioHttpGet(path, address)