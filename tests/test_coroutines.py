import pytest

from pollrt.coroutines import (
    BufferCoroutine,
    CounterCoroutine,
    async_main_buffer,
    async_main_counter,
)
from pollrt.executor import Executor
from pollrt.future import Future, Ready


class FakeFuture(Future):
    """Pending a set number of times, waking its waker each time, then ready."""

    def __init__(self, value, pending=0):
        self.value = value
        self.pending = pending
        self.wakers = []

    def poll(self, waker):
        self.wakers.append(waker)
        if self.pending > 0:
            self.pending -= 1
            waker.wake()
            return None
        return Ready(self.value)


class Recorder:
    def __init__(self, responses, pending=0):
        self.responses = list(responses)
        self.pending = pending
        self.paths = []
        self.futures = []

    def __call__(self, path):
        self.paths.append(path)
        fut = FakeFuture(self.responses[len(self.paths) - 1], self.pending)
        self.futures.append(fut)
        return fut


class NullWaker:
    def __init__(self):
        self.woken = 0

    def wake(self):
        self.woken += 1


def test_counter_requests_paths_in_order():
    fetch = Recorder(["first", "second"])
    coro = CounterCoroutine(fetch=fetch)
    assert coro.poll(NullWaker()) == Ready("")
    assert fetch.paths == ["/600/HelloAsyncAwait", "/400/HelloAsyncAwait"]
    assert coro.counter == 2


def test_counter_prints_responses(capsys):
    coro = CounterCoroutine(fetch=Recorder(["first", "second"]))
    coro.poll(NullWaker())
    lines = capsys.readouterr().out.splitlines()
    assert lines == ["Program starting", "first", "second", "Received 2 responses."]


def test_counter_suspends_while_pending():
    fetch = Recorder(["first", "second"], pending=1)
    coro = CounterCoroutine(fetch=fetch)
    waker = NullWaker()
    assert coro.poll(waker) is None
    assert coro.counter == 0
    assert coro.poll(waker) is None
    assert coro.counter == 1
    assert coro.poll(waker) == Ready("")
    assert coro.counter == 2
    assert coro.resolved


def test_waker_is_passed_to_awaited_future():
    fetch = Recorder(["first", "second"])
    waker = NullWaker()
    CounterCoroutine(fetch=fetch).poll(waker)
    assert all(w is waker for fut in fetch.futures for w in fut.wakers)


@pytest.mark.parametrize("cls", [CounterCoroutine, BufferCoroutine])
def test_polling_resolved_raises(cls):
    coro = cls(fetch=Recorder(["first", "second"]))
    coro.poll(NullWaker())
    with pytest.raises(RuntimeError, match="Polled a resolved future"):
        coro.poll(NullWaker())


def test_buffer_collects_responses(capsys):
    coro = BufferCoroutine(fetch=Recorder(["first", "second"]))
    assert coro.poll(NullWaker()) == Ready("")
    assert coro.buffer == "\nBUFFER:\n----\nfirst\nsecond\n"
    out = capsys.readouterr().out
    assert out.startswith("Program starting\n")
    assert coro.buffer in out


def test_buffer_survives_suspensions():
    fetch = Recorder(["one", "two"], pending=2)
    coro = BufferCoroutine(fetch=fetch)
    waker = NullWaker()
    results = [coro.poll(waker) for _ in range(5)]
    assert results[:4] == [None, None, None, None]
    assert results[4] == Ready("")
    assert coro.buffer == "\nBUFFER:\n----\none\ntwo\n"
    assert waker.woken == 4


@pytest.mark.parametrize("assume_ready", [False, True])
@pytest.mark.parametrize("pending", [0, 2])
def test_counter_runs_on_executor(assume_ready, pending):
    coro = CounterCoroutine(fetch=Recorder(["first", "second"], pending=pending))
    Executor().block_on(coro, assume_ready=assume_ready)
    assert coro.resolved
    assert coro.counter == 2


def test_buffer_runs_on_executor(capsys):
    coro = BufferCoroutine(fetch=Recorder(["first", "second"], pending=1))
    Executor().block_on(coro)
    assert coro.buffer == "\nBUFFER:\n----\nfirst\nsecond\n"
    assert "All tasks are finished" in capsys.readouterr().out


def test_factories_keep_address_and_start_unresolved():
    address = ("localhost", 9000)
    counter = async_main_counter(address)
    buffer = async_main_buffer(address)
    assert isinstance(counter, CounterCoroutine)
    assert isinstance(buffer, BufferCoroutine)
    assert counter.address == address
    assert buffer.address == address
    assert not counter.resolved and not buffer.resolved