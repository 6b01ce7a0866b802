import threading

from pollrt.executor import Executor, Waker, spawn
from pollrt.future import Future, Ready, join_all


class Immediate(Future):
    def __init__(self, log=None, name=""):
        self.log = log
        self.name = name
        self.polls = 0

    def poll(self, waker):
        self.polls += 1
        if self.log is not None:
            self.log.append(self.name)
        return Ready(self.name)


class WakeLater(Future):
    def __init__(self, times=1):
        self.remaining = times
        self.polls = 0
        self.wakers = []

    def poll(self, waker):
        self.polls += 1
        self.wakers.append(waker)
        if self.remaining == 0:
            return Ready("done")
        self.remaining -= 1
        threading.Timer(0.05, waker.wake).start()
        return None


def test_block_on_ready_future(capsys):
    fut = Immediate()
    Executor().block_on(fut)
    name = threading.current_thread().name
    assert fut.polls == 1
    assert capsys.readouterr().out == f"{name}: All tasks are finished\n"


def test_block_on_waits_for_wake(capsys):
    fut = WakeLater()
    Executor().block_on(fut)
    name = threading.current_thread().name
    out = capsys.readouterr().out.splitlines()
    assert fut.polls == 2
    assert out == [
        f"{name}: 1 pending tasks. Sleep until notified.",
        f"{name}: All tasks are finished",
    ]


def test_waker_id_is_stable_for_a_task():
    fut = WakeLater(times=2)
    Executor().block_on(fut)
    assert fut.polls == 3
    assert len({w.id for w in fut.wakers}) == 1
    assert all(isinstance(w, Waker) for w in fut.wakers)


def test_spawned_tasks_run_in_lifo_order():
    log = []
    spawn(Immediate(log, "a"))
    Executor().block_on(Immediate(log, "b"))
    assert log == ["b", "a"]


def test_spurious_wake_for_finished_task_is_ignored():
    class WakeAfterDone(Future):
        def __init__(self):
            self.polls = 0

        def poll(self, waker):
            self.polls += 1
            waker.wake()
            waker.wake()
            return Ready("")

    fut = WakeAfterDone()
    Executor().block_on(fut)
    assert fut.polls == 1


def test_join_all_under_executor():
    first, second = WakeLater(), WakeLater(times=2)
    Executor().block_on(join_all([first, second]))
    assert first.remaining == 0
    assert second.remaining == 0
    assert second.polls == 3


def test_assume_ready_skips_scheduling(capsys):
    fut = Immediate()
    Executor().block_on(fut, assume_ready=True)
    assert fut.polls == 1
    assert capsys.readouterr().out == ""


def test_tasks_are_per_thread():
    log = []
    spawn(Immediate(log, "main"))
    results = []

    def other():
        inner = []
        Executor().block_on(Immediate(inner, "other"))
        results.append(inner)

    thread = threading.Thread(target=other)
    thread.start()
    thread.join(5.0)
    assert results == [["other"]]
    assert log == []
    Executor().block_on(Immediate(log, "last"))
    assert log == ["last", "main"]