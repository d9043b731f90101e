"""Port describing the bounded queue feeding the dispatcher thread."""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

from lib_log_dispatch.domain.message import WriterMessage


@runtime_checkable
class QueuePort(Protocol):
    """Bridge between producer threads and the single dispatcher."""

    @property
    def is_running(self) -> bool:
        """Return ``True`` while a dispatcher owns the consume side."""

    def start(self) -> bool:
        """Start the dispatcher unless one is already running."""

    def stop(self, *, drain: bool = True, timeout: float | None = None) -> None:
        """Stop the dispatcher, optionally draining queued messages."""

    def put(self, message: WriterMessage) -> bool:
        """Enqueue ``message``; ``False`` when the full-queue policy dropped it."""

    def wake(self) -> None:
        """Nudge an idle dispatcher to re-check whether it should keep running."""

    def wait_until_idle(self, timeout: float | None = None) -> bool:
        """Block until every queued message has been processed."""

    def drain_pending(self, handler: Callable[[WriterMessage], None]) -> int:
        """Hand every queued message to ``handler`` on the calling thread."""


__all__ = ["QueuePort"]
