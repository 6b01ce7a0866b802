"""A minimal HTTP GET future that reads its response through the reactor."""

from __future__ import annotations

import socket
from typing import Any

from .future import Future, Ready
from .reactor import READABLE, reactor

__all__ = ["DEFAULT_ADDRESS", "HttpGetFuture", "get", "get_req"]

DEFAULT_ADDRESS = ("127.0.0.1", 8080)
_CHUNK_SIZE = 147


def get_req(path: str) -> str:
    """Return the request text for a GET of ``path``."""
    return (
        f"GET {path} HTTP/1.1\r\n"
        "Host: localhost\r\n"
        "Connection: close\r\n"
        "\r\n"
    )


class HttpGetFuture(Future):
    """Sends a GET on first poll and completes with the whole raw response."""

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

    def poll(self, waker: Any) -> Ready | None:
        if self._stream is None:
            print("FIRST POLL - START OPERATION")
            self._write_request()
            reactor().register(self._stream, READABLE, self.id)
            reactor().set_waker(waker, self.id)

        stream = self._stream
        while True:
            try:
                data = stream.recv(_CHUNK_SIZE)
            except BlockingIOError:
                # always store the most recent waker
                reactor().set_waker(waker, self.id)
                return None
            if not data:
                text = self._buffer.decode("utf-8", errors="replace")
                reactor().deregister(stream, self.id)
                stream.close()
                return Ready(text)
            self._buffer.extend(data)


def get(path: str, address: tuple[str, int] = DEFAULT_ADDRESS) -> HttpGetFuture:
    """Return a future that fetches ``path`` from the server at ``address``."""
    return HttpGetFuture(path, address)