"""Concrete writers, the dispatch queue, and the default registry."""

from __future__ import annotations

from lib_log_dispatch.application.registry import WriterRegistry

from .console import RichConsoleWriter
from .file import FileWriter
from .memory import MemoryRecord, MemoryWriter
from .queue import DEFAULT_QUEUE_SIZE, DispatchQueue


def create_default_registry() -> WriterRegistry:
    """Return a new registry pre-populated with the bundled writer kinds.

    >>> create_default_registry().names()
    ['console', 'file', 'memory']
    """

    registry = WriterRegistry()
    registry.register("console", RichConsoleWriter)
    registry.register("file", FileWriter)
    registry.register("memory", MemoryWriter)
    return registry


__all__ = [
    "DEFAULT_QUEUE_SIZE",
    "DispatchQueue",
    "FileWriter",
    "MemoryRecord",
    "MemoryWriter",
    "RichConsoleWriter",
    "create_default_registry",
]
