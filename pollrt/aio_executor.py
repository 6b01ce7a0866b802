"""An executor for ``async def`` coroutines driven by explicit wakers.

Leaf awaitables cooperate with this executor by looking up the
:class:`Context` of the task being polled with :func:`current_context`,
storing its waker somewhere that will call ``wake()`` later, and yielding a
:class:`Pending` instance to suspend the task.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Awaitable

from .parker import Parker
from .reactor import start

__all__ = [
    "AioExecutor",
    "Context",
    "Pending",
    "TaskWaker",
    "current_context",
    "init",
    "spawn",
]


class Pending:
    """Yielded by an awaitable to tell the executor the task cannot progress."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "Pending()"


class _ReadyQueue:
    """Ids of tasks ready to be polled; popped most recent first."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids: list[int] = []

    def push(self, task_id: int) -> None:
        with self._lock:
            self._ids.append(task_id)

    def pop(self) -> int | None:
        with self._lock:
            return self._ids.pop() if self._ids else None


@dataclass(frozen=True, eq=False)
class TaskWaker:
    """Marks one task as ready and wakes the executor thread that owns it."""

    id: int
    ready_queue: _ReadyQueue
    parker: Parker

    def wake(self) -> None:
        self.ready_queue.push(self.id)
        self.parker.unpark()


@dataclass(frozen=True)
class Context:
    """What a task is polled with: the waker that reschedules it."""

    waker: TaskWaker


@dataclass
class _ExecutorCore:
    tasks: dict[int, Any] = field(default_factory=dict)
    ready_queue: _ReadyQueue = field(default_factory=_ReadyQueue)
    next_id: int = 0
    parker: Parker = field(default_factory=Parker)
    context: Context | None = None


_local = threading.local()


def _core() -> _ExecutorCore:
    core = getattr(_local, "core", None)
    if core is None:
        core = _local.core = _ExecutorCore()
    return core


def current_context() -> Context:
    """Return the context of the task being polled on this thread."""
    context = _core().context
    if context is None:
        raise RuntimeError("No task is being polled on this thread")
    return context


def spawn(coro: Awaitable[Any]) -> None:
    """Queue an awaitable as a new task on the current thread's executor."""
    await_method = getattr(coro, "__await__", None)
    if await_method is None:
        raise TypeError(f"{coro!r} is not awaitable")
    task = await_method()
    core = _core()
    task_id = core.next_id
    core.tasks[task_id] = task
    core.ready_queue.push(task_id)
    core.next_id = task_id + 1


def _discard(core: _ExecutorCore) -> None:
    for task in core.tasks.values():
        close = getattr(task, "close", None)
        if close is not None:
            close()
    core.tasks.clear()
    _local.core = None


class AioExecutor:
    """Runs the current thread's coroutine tasks until none are left."""

    def _poll(self, core: _ExecutorCore, task_id: int, task: Any) -> bool:
        """Advance ``task`` once; return True when it has finished."""
        core.context = Context(TaskWaker(task_id, core.ready_queue, core.parker))
        try:
            yielded = task.send(None)
        except StopIteration:
            return True
        finally:
            core.context = None
        if not isinstance(yielded, Pending):
            raise TypeError(f"task yielded {yielded!r} instead of Pending")
        return False

    def block_on(self, coro: Awaitable[Any]) -> None:
        """Run ``coro`` and every task it spawns to completion."""
        spawn(coro)
        core = _core()
        try:
            while True:
                while (task_id := core.ready_queue.pop()) is not None:
                    task = core.tasks.pop(task_id, None)
                    if task is None:
                        # a wake-up for a task that has already finished
                        continue
                    if not self._poll(core, task_id, task):
                        core.tasks[task_id] = task

                task_count = len(core.tasks)
                name = threading.current_thread().name
                if task_count > 0:
                    print(f"{name}: {task_count} pending tasks. Sleep until notified.")
                    core.parker.park()
                else:
                    print(f"{name}: All tasks are finished")
                    break
        except BaseException:
            _discard(core)
            raise


def init() -> AioExecutor:
    """Start the reactor and return an executor for coroutines."""
    start()
    return AioExecutor()