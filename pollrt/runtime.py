"""Entry point that brings up the reactor and hands back an executor."""

from __future__ import annotations

from .executor import Executor, Waker, spawn
from .reactor import reactor, start

__all__ = ["Executor", "Waker", "init", "reactor", "spawn"]


def init() -> Executor:
    """Start the reactor and return an executor to run futures on."""
    start()
    return Executor()