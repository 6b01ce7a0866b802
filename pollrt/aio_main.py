"""Example programs that await HTTP requests on the coroutine executor."""

from __future__ import annotations

import argparse
import sys

from .aio_executor import init, spawn
from .aio_http import get
from .http import DEFAULT_ADDRESS
from .reactor import shutdown


def _body(response: str) -> str:
    _, _, body = response.partition("\r\n\r\n")
    return body


async def async_main(address: tuple[str, int] = DEFAULT_ADDRESS) -> None:
    """Make two requests one after the other and print each response."""
    print("Program starting")
    txt = await get("/600/HelloAsyncAwait", address)
    print(txt)
    txt = await get("/400/HelloAsyncAwait", address)
    print(txt)


async def async_main_buffer(address: tuple[str, int] = DEFAULT_ADDRESS) -> str:
    """Collect two responses in a buffer, print it and return it."""
    buffer = ["\nBUFFER:\n----\n"]
    print("Program starting")
    txt = await get("/600/HelloAsyncAwait", address)
    buffer.append(f"{txt}\n")
    txt = await get("/400/HelloAsyncAwait", address)
    buffer.append(f"{txt}\n")
    text = "".join(buffer)
    print(text)
    return text


async def spawn_many(address: tuple[str, int] = DEFAULT_ADDRESS, count: int = 100) -> None:
    """Spawn ``count`` concurrent requests with growing delays."""
    for i in range(count):
        path = f"/{i * 10}/HelloAsyncAwait{i}"

        async def request(path: str = path) -> None:
            txt = await get(path, address)
            print(_body(txt))

        spawn(request())


def main(argv: list[str] | None = None) -> int:
    """Run one of the example programs against a delay server."""
    parser = argparse.ArgumentParser(prog="pollrt-aio")
    parser.add_argument("--host", default=DEFAULT_ADDRESS[0])
    parser.add_argument("--port", type=int, default=DEFAULT_ADDRESS[1])
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--buffer", action="store_true")
    mode.add_argument("--spawn-many", type=int, metavar="N")
    args = parser.parse_args(argv)

    address = (args.host, args.port)
    if args.buffer:
        program = async_main_buffer(address)
    elif args.spawn_many is not None:
        program = spawn_many(address, args.spawn_many)
    else:
        program = async_main(address)

    executor = init()
    try:
        executor.block_on(program)
    finally:
        shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())