"""A small poll-based runtime: futures, wakers, executors, a reactor and HTTP GET."""

__version__ = "0.1.0"