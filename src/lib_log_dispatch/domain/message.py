"""Recyclable message objects carried through the asynchronous queue.

Purpose
-------
Asynchronous dispatch allocates one carrier per emitted line. Pooling the
carriers keeps the hot path from creating garbage under sustained load.

Contents
--------
* :class:`WriterMessage` - mutable ``(level, text)`` carrier.
* :class:`MessagePool` - thread-safe free list of carriers.

System Role
-----------
A message is owned by exactly one party at a time: the producer until it is
queued, the dispatcher after it is dequeued, and the pool otherwise.
"""

from __future__ import annotations

import threading

from .levels import Severity


class WriterMessage:
    """Mutable carrier for one formatted line."""

    __slots__ = ("level", "text")

    def __init__(self, level: Severity = Severity.DEBUG, text: str = "") -> None:
        self.level = level
        self.text = text

    def reset(self) -> None:
        self.level = Severity.DEBUG
        self.text = ""

    def __repr__(self) -> str:
        return f"WriterMessage(level={self.level!r}, text={self.text!r})"


class MessagePool:
    """Free list of :class:`WriterMessage` objects safe for concurrent use.

    Examples
    --------
    >>> pool = MessagePool(max_idle=2)
    >>> message = pool.acquire(Severity.INFO, "hello")
    >>> message.text
    'hello'
    >>> pool.release(message)
    >>> pool.idle
    1
    >>> pool.acquire(Severity.WARN, "again") is message
    True
    """

    def __init__(self, *, max_idle: int = 1024) -> None:
        if max_idle < 0:
            raise ValueError("max_idle must not be negative")
        self._max_idle = max_idle
        self._free: list[WriterMessage] = []
        self._lock = threading.Lock()
        self._allocated = 0

    @property
    def idle(self) -> int:
        """Return the number of carriers waiting for reuse."""

        with self._lock:
            return len(self._free)

    @property
    def allocated(self) -> int:
        """Return how many carriers the pool has ever created."""

        with self._lock:
            return self._allocated

    def acquire(self, level: Severity, text: str) -> WriterMessage:
        """Return a populated carrier, allocating when the free list is empty."""

        with self._lock:
            if self._free:
                message = self._free.pop()
            else:
                message = None
                self._allocated += 1
        if message is None:
            return WriterMessage(level, text)
        message.level = level
        message.text = text
        return message

    def release(self, message: WriterMessage) -> None:
        """Clear ``message`` and keep it for reuse unless the pool is full."""

        message.reset()
        with self._lock:
            if len(self._free) < self._max_idle:
                self._free.append(message)


__all__ = ["MessagePool", "WriterMessage"]
