"""Shutdown orchestration for the dispatcher.

Purpose
-------
Provide a unified shutdown routine that drains the queue, stops the
dispatcher thread, and destroys every installed writer.
"""

from __future__ import annotations

from typing import Awaitable, Callable

from .writer_manager import WriterManager


def create_shutdown(
    *,
    manager: WriterManager,
    timeout: float | None = None,
) -> Callable[[], Awaitable[None]]:
    """Return an async callable performing the shutdown sequence."""

    async def shutdown() -> None:
        """Drain queued messages, then release writer resources."""
        manager.close(timeout=timeout)

    return shutdown


__all__ = ["create_shutdown"]
