# pollrt

A small runtime built around poll-based futures. It shows how futures, wakers,
an executor and a reactor work together. It uses only the standard library.

## What is inside

- `pollrt.future`: the `Future` base class and `Ready`. `poll(waker)` returns
  `Ready(value)` when the future is done, or `None` while it is still pending.
  `join_all(futures)` returns a `JoinAll`. A `JoinAll` polls each future that
  has not yet finished, and resolves to `""` when all of them are done.
- `pollrt.executor`: `Executor.block_on(future, assume_ready=False)`, a
  module-level `spawn(future)`, and `Waker`. A `Waker` puts its task id back on
  the ready queue and unparks the executor. While it runs, the executor prints
  how many tasks are pending, and it prints a final line once all tasks have
  finished. With `assume_ready=True` the future is polled once before it is
  spawned. If that first poll completes it, no task is created.
- `pollrt.reactor`: a `Reactor` that runs a `selectors` loop on a background
  thread. `register(stream, interest, id)`, `set_waker(waker, id)`,
  `deregister(stream, id)` and `next_id()` manage what it watches. When a
  stream becomes ready, the reactor calls the waker stored for it. It then
  ignores that stream until a waker is set for it again. The module-level
  functions are `start()`, `reactor()` and `shutdown()`. `start()` raises
  `RuntimeError` if a reactor is already running. `reactor()` raises
  `RuntimeError` if none is running.
- `pollrt.runtime.init()`: starts the reactor and returns an `Executor`.
- `pollrt.http`: `get_req(path)` builds the request text. `get(path, address)`
  returns an `HttpGetFuture`, which sends the request on its first poll. It
  resolves to the whole raw response, headers included, decoded as UTF-8. The
  default address is `("127.0.0.1", 8080)`. A reactor must already be running
  when the future is created.
- `pollrt.aio_executor`: the same runtime for `async def` coroutines.
  - `AioExecutor.block_on(coro)` runs a coroutine. `spawn(coro)` adds another
    task, and `init()` starts the reactor and returns an `AioExecutor`.
  - An awaitable takes part by calling `current_context()`, keeping
    `context.waker` (a `TaskWaker`), and yielding `Pending()`.
  - `current_context()` raises `RuntimeError` if no task is being polled.
  - A task that yields anything other than `Pending` raises `TypeError`.
- `pollrt.aio_http`: `get(path, address)` returns an `AioHttpGet`. You can
  `await` it inside an `AioExecutor` task, or call `poll(cx)` on it by hand
  with a `Context`.
- `pollrt.coroutines`: `CounterCoroutine` and `BufferCoroutine` are
  hand-written state machines that work as futures. Each one awaits
  `/600/HelloAsyncAwait` and then `/400/HelloAsyncAwait`.
  - `CounterCoroutine` prints each response and counts them.
  - `BufferCoroutine` collects the responses in a buffer, prints the buffer and
    keeps it in `.buffer`.
  - Polling either one after it has resolved raises `RuntimeError`.
  - `async_main_counter(address)` and `async_main_buffer(address)` build them.
- `pollrt.aio_main`: the same programs written as coroutines: `async_main`,
  `async_main_buffer`, and `spawn_many(address, count)`. `spawn_many` spawns
  `count` requests whose delays grow by 10 ms each.
- `pollrt.parker`: `Parker` with `park()` and `unpark()`. If `unpark()` is
  called before `park()`, the next `park()` returns at once.
- `pollrt.pinning`: `MaybeSelfRef` and `Foo` show what happens when a value that
  refers to its own field is moved.
  - `heap_pinning()` writes `a` through the value's own reference, and prints
    `0` and then `2`.
  - `swap_problem()` swaps the contents of two values and prints them. The
    reference that moved still points at the old value.
- `pollrt.delayserver`: `make_server(host, port)` creates a threaded HTTP
  server.
  - It answers `GET /<delay ms>/<message>` by printing
    `#<n> - <delay>ms: <message>` and waiting that long. It then echoes the
    URL-decoded message.
  - Any other path gets a 404.

## Installing

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Commands

Start the delay server. It prints its usage text and listens on port 8080 of
`localhost`, or of the host given as the first argument:

```
pollrt-delayserver
```

In another terminal, run a client against it:

```
pollrt-coroutines [--host HOST] [--port PORT] [--buffer] [--assume-ready]
pollrt-aio [--host HOST] [--port PORT] [--buffer | --spawn-many N]
```

`pollrt-coroutines` runs `CounterCoroutine`, or `BufferCoroutine` with
`--buffer`, on the `Executor`. `pollrt-aio` runs `async_main`, or
`async_main_buffer` with `--buffer`, or `spawn_many` with `--spawn-many N`, on
the `AioExecutor`.

To run the self-reference demonstration:

```
pollrt-pinning
```

## Using the library

Only one reactor can run at a time, so call `shutdown()` before you start
another one.

```python
from pollrt import http, reactor, runtime

executor = runtime.init()
try:
    executor.block_on(http.get("/200/hello", ("127.0.0.1", 8080)))
finally:
    reactor.shutdown()
```

With coroutines:

```python
from pollrt import aio_executor, aio_http, reactor

async def fetch():
    text = await aio_http.get("/200/hello", ("127.0.0.1", 8080))
    print(text)

try:
    aio_executor.init().block_on(fetch())
finally:
    reactor.shutdown()
```

Waiting for another thread with a `Parker`:

```python
import threading
from pollrt.parker import Parker

parker = Parker()
threading.Thread(target=parker.unpark).start()
parker.park()  # returns once unpark() has been called
```

## What it does not do

The HTTP futures are deliberately minimal:

- They send a fixed `GET` request with `Connection: close`, and read until the
  server closes the connection.
- They return the raw response text. They do not parse the status or headers,
  handle chunked bodies, follow redirects or use TLS.

The coroutine executor does not work with `asyncio` or other event loops. Its
tasks may await only awaitables that yield `Pending`, such as `AioHttpGet`.