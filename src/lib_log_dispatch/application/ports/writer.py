"""Writer port describing the contract every output backend satisfies.

Purpose
-------
Define the narrow capability the writer manager depends on so concrete
backends (Rich console, files, in-memory buffers, third-party sinks) plug in
without leaking their implementation details into the core.

Contents
--------
* :class:`WriterPort` - runtime-checkable protocol with ``init``/``write``/``destroy``.
* :data:`WriterFactory` - zero-argument callable producing a fresh writer.

System Role
-----------
Consumed by :class:`lib_log_dispatch.application.use_cases.writer_manager.WriterManager`
and by :class:`lib_log_dispatch.application.registry.WriterRegistry`.
"""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

from lib_log_dispatch.domain.levels import Severity


@runtime_checkable
class WriterPort(Protocol):
    """Output destination for formatted log lines."""

    def init(self, config: str) -> None:
        """Configure the writer from backend-specific (JSON-shaped) text.

        Raise any exception to signal that the writer cannot be installed.
        """

    def write(self, level: Severity, message: str) -> None:
        """Deliver one formatted line; raise on failure.

        Must tolerate concurrent calls from the caller thread and the
        dispatcher thread.
        """

    def destroy(self) -> None:
        """Release resources held by the writer."""


WriterFactory = Callable[[], WriterPort]


__all__ = ["WriterFactory", "WriterPort"]
