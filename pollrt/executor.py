"""A single-threaded executor that drives futures with explicit wakers."""

from __future__ import annotations

import sys
import threading
from dataclasses import dataclass, field
from typing import Any

from .future import Future
from .parker import Parker


class _ReadyQueue:
    """Ids of tasks ready to be polled, shared with other threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids: list[int] = []

    def push(self, task_id: int) -> None:
        with self._lock:
            self._ids.append(task_id)

    def pop(self) -> int | None:
        with self._lock:
            return self._ids.pop() if self._ids else None


@dataclass
class _ExecutorCore:
    tasks: dict[int, Any] = field(default_factory=dict)
    ready_queue: _ReadyQueue = field(default_factory=_ReadyQueue)
    next_id: int = 0
    parker: Parker = field(default_factory=Parker)


_local = threading.local()


def _core() -> _ExecutorCore:
    core = getattr(_local, "core", None)
    if core is None:
        core = _local.core = _ExecutorCore()
    return core


@dataclass(frozen=True, eq=False)
class Waker:
    """Marks one task as ready and wakes the executor thread that owns it."""

    id: int
    ready_queue: _ReadyQueue
    parker: Parker

    def wake(self) -> None:
        self.ready_queue.push(self.id)
        self.parker.unpark()


def spawn(future: Future) -> None:
    """Queue ``future`` as a new task on the current thread's executor."""
    core = _core()
    task_id = core.next_id
    core.tasks[task_id] = future
    core.ready_queue.push(task_id)
    core.next_id = task_id + 1


class Executor:
    """Runs the current thread's tasks until none are left."""

    def _waker(self, task_id: int) -> Waker:
        core = _core()
        return Waker(task_id, core.ready_queue, core.parker)

    def block_on(self, future: Future, assume_ready: bool = False) -> None:
        """Run ``future`` and every spawned task to completion.

        With ``assume_ready`` the future is polled once up front, with a waker
        whose id belongs to no task; if that first poll completes it, no task
        is spawned at all.
        """
        if assume_ready:
            if future.poll(self._waker(sys.maxsize)) is not None:
                return

        spawn(future)
        core = _core()

        while True:
            while (task_id := core.ready_queue.pop()) is not None:
                task = core.tasks.pop(task_id, None)
                if task is None:
                    # a wake-up for a task that has already finished
                    continue
                if task.poll(self._waker(task_id)) is None:
                    core.tasks[task_id] = task

            task_count = len(core.tasks)
            name = threading.current_thread().name
            if task_count > 0:
                print(f"{name}: {task_count} pending tasks. Sleep until notified.")
                core.parker.park()
            else:
                print(f"{name}: All tasks are finished")
                break