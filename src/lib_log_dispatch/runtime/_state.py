"""Process-wide default logger slot and access helpers."""

from __future__ import annotations

from dataclasses import dataclass
from threading import RLock
from typing import Awaitable, Callable

from lib_log_dispatch.logger import Logger

from ._settings import RuntimeSettings


@dataclass(slots=True)
class LoggingRuntime:
    """Default logger plus the settings and shutdown hook it was built from."""

    logger: Logger
    settings: RuntimeSettings
    shutdown_async: Callable[[], Awaitable[None]]


class _DefaultSlot:
    """Holds at most one :class:`LoggingRuntime` behind a re-entrant lock."""

    __slots__ = ("_runtime", "_lock")

    def __init__(self) -> None:
        self._runtime: LoggingRuntime | None = None
        self._lock = RLock()

    def swap(self, runtime: LoggingRuntime | None) -> LoggingRuntime | None:
        with self._lock:
            previous, self._runtime = self._runtime, runtime
            return previous

    def peek(self) -> LoggingRuntime | None:
        with self._lock:
            return self._runtime


_SLOT = _DefaultSlot()


def set_runtime(runtime: LoggingRuntime) -> None:
    _SLOT.swap(runtime)


def clear_runtime() -> None:
    _SLOT.swap(None)


def current_runtime() -> LoggingRuntime:
    """Return the installed runtime; raise :class:`RuntimeError` before ``init``."""

    runtime = _SLOT.peek()
    if runtime is None:
        raise RuntimeError("lib_log_dispatch.init() must be called before using the default logger")
    return runtime


def is_initialised() -> bool:
    return _SLOT.peek() is not None


__all__ = [
    "LoggingRuntime",
    "clear_runtime",
    "current_runtime",
    "is_initialised",
    "set_runtime",
]
