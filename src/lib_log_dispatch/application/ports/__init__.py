"""Protocols the application layer depends on."""

from __future__ import annotations

from .queue import QueuePort
from .writer import WriterFactory, WriterPort

__all__ = ["QueuePort", "WriterFactory", "WriterPort"]
