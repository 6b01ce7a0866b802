"""An HTTP server that echoes a message back after a requested delay."""

from __future__ import annotations

import itertools
import re
import sys
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import unquote

__all__ = ["EXPLANATION", "DelayServer", "make_server", "main"]

EXPLANATION = """USAGE:
Delay server works by issuing an HTTP GET request in the format:
http://localhost:8080/[delay in ms]/[URL-encoded message]

If an argument is passed in when delayserver is started, that
argument will be used as the URL instead of 'localhost'.

Upon receiving a request, it immediately reports the following to the console:

{Message #} - {delay in ms}: {message}

The server then delays the response for the requested time and echoes the message back to the caller.

REQUESTS:
--------
"""

_DELAY = re.compile(r"\+?\d+")
_MAX_DELAY = 2**64 - 1


def _parse_path(raw: str) -> tuple[int, str] | None:
    path = raw.split("?", 1)[0].split("#", 1)[0]
    if not path.startswith("/"):
        return None
    segments = path[1:].split("/")
    if len(segments) != 2 or not all(segments):
        return None
    delay_text, message = (unquote(segment) for segment in segments)
    if not _DELAY.fullmatch(delay_text):
        return None
    delay_ms = int(delay_text)
    if delay_ms > _MAX_DELAY:
        return None
    return delay_ms, message


class _DelayHandler(BaseHTTPRequestHandler):
    server: "DelayServer"

    def do_GET(self) -> None:
        parsed = _parse_path(self.path)
        if parsed is None:
            self._reply(404, b"")
            return
        delay_ms, message = parsed
        count = self.server.next_count()
        print(f"#{count} - {delay_ms}ms: {message}", flush=True)
        time.sleep(delay_ms / 1000)
        self._reply(200, message.encode())

    def _reply(self, status: int, body: bytes) -> None:
        self.send_response(status)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: object) -> None:
        pass


class DelayServer(ThreadingHTTPServer):
    """Serves ``GET /{delay}/{message}``, numbering requests from 1."""

    daemon_threads = True

    def __init__(self, address: tuple[str, int]) -> None:
        super().__init__(address, _DelayHandler)
        self._counter = itertools.count(1)
        self._counter_lock = threading.Lock()

    def next_count(self) -> int:
        with self._counter_lock:
            return next(self._counter)


def make_server(host: str = "localhost", port: int = 8080) -> DelayServer:
    """Create a delay server bound to ``host`` and ``port``."""
    return DelayServer((host, port))


def main(argv: list[str] | None = None) -> int:
    """Run the delay server on port 8080 of the host given, or localhost."""
    args = sys.argv[1:] if argv is None else argv
    host = args[0] if args else "localhost"
    print(EXPLANATION)
    with make_server(host, 8080) as server:
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    sys.exit(main())