"""In-memory writer retaining the most recent log lines.

Purpose
-------
Give operators and tests a way to inspect recent output without a terminal
or file, in the spirit of a ring buffer.

Contents
--------
* :class:`MemoryRecord` - ``(level, message)`` pair.
* :class:`MemoryWriter` - bounded buffer registered as ``"memory"``.
"""

from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Iterator, NamedTuple

from lib_log_dispatch.application.ports.writer import WriterPort
from lib_log_dispatch.domain.configuration import ConfigurationError
from lib_log_dispatch.domain.levels import Severity

from ._formatting import parse_writer_config


class MemoryRecord(NamedTuple):
    level: Severity
    message: str


class MemoryWriter(WriterPort):
    """Keep the last ``capacity`` records; ``init`` accepts ``{"capacity": n}``.

    Examples
    --------
    >>> writer = MemoryWriter(capacity=2)
    >>> for text in ("a", "b", "c"):
    ...     writer.write(Severity.INFO, text)
    >>> writer.messages()
    ['b', 'c']
    """

    def __init__(self, *, capacity: int = 1000) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._records: Deque[MemoryRecord] = deque(maxlen=capacity)
        self._lock = threading.Lock()
        self.destroyed = 0

    @property
    def capacity(self) -> int:
        return self._records.maxlen or 0

    def init(self, config: str) -> None:
        options = parse_writer_config(config, writer="memory")
        if "capacity" not in options:
            return
        try:
            capacity = int(options["capacity"])
        except (TypeError, ValueError) as exc:
            raise ConfigurationError("memory writer: 'capacity' must be an integer") from exc
        if capacity <= 0:
            raise ConfigurationError("memory writer: 'capacity' must be positive")
        with self._lock:
            self._records = deque(self._records, maxlen=capacity)

    def write(self, level: Severity, message: str) -> None:
        with self._lock:
            self._records.append(MemoryRecord(level, message))

    def destroy(self) -> None:
        with self._lock:
            self._records.clear()
            self.destroyed += 1

    def snapshot(self) -> list[MemoryRecord]:
        """Return a copy of the retained records, oldest first."""

        with self._lock:
            return list(self._records)

    def messages(self) -> list[str]:
        return [record.message for record in self.snapshot()]

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __iter__(self) -> Iterator[MemoryRecord]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


__all__ = ["MemoryRecord", "MemoryWriter"]
