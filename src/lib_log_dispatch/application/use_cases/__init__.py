"""Application use cases: the writer manager and its shutdown sequence."""

from __future__ import annotations

from .shutdown import create_shutdown
from .writer_manager import DiagnosticHook, WriterManager

__all__ = ["DiagnosticHook", "WriterManager", "create_shutdown"]
