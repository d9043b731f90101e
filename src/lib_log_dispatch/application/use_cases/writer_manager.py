"""Writer manager: filtering, formatting, and dispatch of log lines.

Purpose
-------
Own the set of installed writers and decide, for every emitted line, whether
it passes the threshold, how it is decorated, and which writers receive it.

Contents
--------
* :class:`WriterManager` - the orchestrator used by :class:`lib_log_dispatch.Logger`.
* :data:`DiagnosticHook` - optional ``(name, payload)`` callback type.

System Role
-----------
Application-layer core. Two dispatch modes:

* synchronous - every installed writer is called on the emitting thread;
* asynchronous - a pooled :class:`WriterMessage` is pushed onto the bounded
  queue and the dispatcher thread routes it, consulting the per-severity
  override table before falling back to the full fan-out.

Writer and override tables are immutable snapshots. Mutators build a new
mapping under the manager lock and swap the reference; dispatch paths read the
current reference without locking, so slow writer I/O never contends with
registration changes.
"""

from __future__ import annotations

import logging
import os
import sys
import threading
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from lib_log_dispatch.application.errors import UnknownWriterError, WriterInitError, WriterNotFoundError
from lib_log_dispatch.application.ports.queue import QueuePort
from lib_log_dispatch.application.ports.writer import WriterPort
from lib_log_dispatch.application.registry import WriterRegistry
from lib_log_dispatch.domain import LoggerConfiguration, MessagePool, Severity, WriterMessage

LOGGER = logging.getLogger(__name__)

DiagnosticHook = Callable[[str, dict[str, Any]], None] | None
QueueFactory = Callable[..., QueuePort]


class WriterManager:
    """Route admitted log lines to the installed writers.

    Parameters
    ----------
    registry:
        Registry consulted when :meth:`set_writer` names a kind that has no
        installed instance yet.
    queue_factory:
        Called once with ``worker``, ``keep_running``, ``on_drop`` and
        ``diagnostic`` keyword arguments to build the asynchronous queue.
    configuration:
        Initial threshold and prefix.
    annotate_call_site, call_depth:
        When annotation is on, the frame ``call_depth`` levels above the
        public emit call is rendered as ``[file.py:line]``. Helpers that wrap
        the public API add frames and must raise ``call_depth`` accordingly.
    diagnostic:
        Optional hook receiving delivery and lifecycle milestones.
    """

    def __init__(
        self,
        *,
        registry: WriterRegistry,
        queue_factory: QueueFactory,
        configuration: LoggerConfiguration | None = None,
        pool: MessagePool | None = None,
        annotate_call_site: bool = False,
        call_depth: int = 1,
        diagnostic: DiagnosticHook = None,
    ) -> None:
        self._registry = registry
        self._configuration = configuration or LoggerConfiguration()
        self._writers: Mapping[str, WriterPort] = MappingProxyType({})
        self._overrides: Mapping[Severity, WriterPort] = MappingProxyType({})
        self._current_writer: str | None = None
        self._lock = threading.Lock()
        self._asynchronous = False
        self._annotate = annotate_call_site
        self._call_depth = _validate_depth(call_depth)
        self._diagnostic = diagnostic
        self._pool = pool or MessagePool()
        self._queue = queue_factory(
            worker=self._dispatch,
            keep_running=self._keep_dispatching,
            on_drop=self._pool.release,
            diagnostic=diagnostic,
        )

    # ------------------------------------------------------------------
    # Read-only views

    @property
    def configuration(self) -> LoggerConfiguration:
        return self._configuration

    @property
    def threshold(self) -> Severity:
        return self._configuration.threshold

    @property
    def prefix(self) -> str:
        return self._configuration.prefix

    @property
    def asynchronous(self) -> bool:
        return self._asynchronous

    @property
    def annotate_call_site(self) -> bool:
        return self._annotate

    @property
    def call_depth(self) -> int:
        return self._call_depth

    @property
    def current_writer(self) -> str | None:
        """Name of the most recently installed writer (informational)."""

        return self._current_writer

    @property
    def registry(self) -> WriterRegistry:
        return self._registry

    @property
    def pool(self) -> MessagePool:
        return self._pool

    @property
    def queue(self) -> QueuePort:
        return self._queue

    @property
    def writers(self) -> Mapping[str, WriterPort]:
        """Return the current writer snapshot."""

        return self._writers

    @property
    def overrides(self) -> Mapping[Severity, WriterPort]:
        """Return the current per-severity override snapshot."""

        return self._overrides

    def writer_names(self) -> list[str]:
        return sorted(self._writers)

    def get_writer(self, name: str) -> WriterPort | None:
        return self._writers.get(name.lower())

    # ------------------------------------------------------------------
    # Configuration

    def set_level(self, level: Severity | int | str) -> None:
        threshold = Severity.coerce(level)
        with self._lock:
            self._configuration = self._configuration.with_threshold(threshold)

    def set_prefix(self, prefix: str) -> None:
        with self._lock:
            self._configuration = self._configuration.with_prefix(prefix)

    def enable_call_site(self, enabled: bool = True) -> None:
        with self._lock:
            self._annotate = enabled

    def set_call_depth(self, depth: int) -> None:
        """Set how many frames above the public emit call hold the user's call site."""

        validated = _validate_depth(depth)
        with self._lock:
            self._call_depth = validated

    def set_async(self, enabled: bool = True) -> None:
        """Switch between synchronous and asynchronous dispatch.

        Enabling starts the dispatcher unless one is already running.
        Disabling leaves a running dispatcher in place until it has drained
        the queue; it then exits on its own.
        """

        with self._lock:
            self._asynchronous = enabled
        if enabled:
            if self._queue.start():
                LOGGER.debug("Dispatcher thread started")
        else:
            self._queue.wake()

    # ------------------------------------------------------------------
    # Writer management

    def set_writer(self, name: str, config: str = "", *, writer: WriterPort | None = None) -> WriterPort:
        """Initialise and install a writer under ``name``.

        The instance is, in order of preference, ``writer``, the instance
        already installed under ``name``, or a new one from the registry.

        Raises
        ------
        UnknownWriterError
            No instance exists and the registry has no such kind.
        WriterInitError
            The writer's ``init`` hook raised; nothing was installed.
        """

        key = name.lower()
        with self._lock:
            instance = writer if writer is not None else self._writers.get(key)
            if instance is None:
                factory = self._registry.lookup(key)
                if factory is None:
                    raise UnknownWriterError(key)
                instance = factory()
            try:
                instance.init(config)
            except Exception as exc:
                LOGGER.error("Writer %s failed to initialise", key, exc_info=exc)
                self._emit_diagnostic("writer_init_failed", {"writer": key, "exception": repr(exc)})
                raise WriterInitError(key, exc) from exc
            updated = dict(self._writers)
            updated[key] = instance
            self._writers = MappingProxyType(updated)
            self._current_writer = key
        return instance

    def remove_writer(self, name: str) -> None:
        """Destroy and uninstall the writer registered under ``name``.

        Raises
        ------
        WriterNotFoundError
            When nothing is installed under ``name``; the writer set is left
            untouched.
        """

        key = name.lower()
        with self._lock:
            instance = self._writers.get(key)
            if instance is None:
                raise WriterNotFoundError(key)
            updated = dict(self._writers)
            del updated[key]
            self._writers = MappingProxyType(updated)
            if self._current_writer == key:
                self._current_writer = None
            instance.destroy()

    def set_level_override(self, level: Severity | int | str, writer: WriterPort | None) -> None:
        """Route asynchronous messages of exactly ``level`` to ``writer`` only.

        Invalid levels and a missing writer are ignored.
        """

        if writer is None:
            return
        try:
            severity = Severity.coerce(level)
        except ValueError:
            return
        with self._lock:
            updated = dict(self._overrides)
            updated[severity] = writer
            self._overrides = MappingProxyType(updated)

    def clear_level_override(self, level: Severity | int | str) -> None:
        try:
            severity = Severity.coerce(level)
        except ValueError:
            return
        with self._lock:
            if severity not in self._overrides:
                return
            updated = dict(self._overrides)
            del updated[severity]
            self._overrides = MappingProxyType(updated)

    # ------------------------------------------------------------------
    # Emission

    def emit(self, level: Severity, text: str, *, stack_offset: int = 0) -> bool:
        """Filter, decorate, and dispatch one line.

        ``stack_offset`` counts wrapper frames between the public emit call
        and this method. Returns ``True`` when the line was written or queued,
        ``False`` when it was filtered out or dropped by the queue policy.
        Never raises on delivery problems.
        """

        configuration = self._configuration
        if level.value > configuration.threshold.value:
            return False
        if self._annotate:
            text = self._annotate_call_site(text, stack_offset)
        if configuration.prefix:
            text = f"[{configuration.prefix}]{text}"
        if self._asynchronous:
            return self._queue.put(self._pool.acquire(level, text))
        self._write_all(self._writers, level, text)
        return True

    def flush(self, timeout: float | None = None) -> bool:
        """Wait until every queued message has been written.

        Messages left behind without a running dispatcher are written on the
        calling thread. Returns ``False`` when ``timeout`` elapsed first.
        """

        if not self._queue.is_running:
            self._queue.drain_pending(self._dispatch)
            return True
        return self._queue.wait_until_idle(timeout)

    def close(self, timeout: float | None = None) -> None:
        """Drain the queue, stop the dispatcher, and destroy every writer.

        When the dispatcher misses its stop deadline the messages still queued
        are discarded, every writer is destroyed anyway, and the
        :class:`RuntimeError` from the queue is re-raised afterwards.
        """

        with self._lock:
            self._asynchronous = False
        stop_error: RuntimeError | None = None
        try:
            self._queue.stop(drain=True, timeout=timeout)
        except RuntimeError as exc:
            stop_error = exc
            discarded = self._queue.drain_pending(self._pool.release)
            LOGGER.error("Dispatcher did not stop in time; discarded %d queued messages", discarded, exc_info=exc)
            self._emit_diagnostic("dispatcher_stop_timeout", {"discarded": discarded, "exception": repr(exc)})
        else:
            self._queue.drain_pending(self._dispatch)
        self._destroy_all()
        if stop_error is not None:
            raise stop_error

    # ------------------------------------------------------------------
    # Internals

    def _destroy_all(self) -> None:
        with self._lock:
            writers = list(self._writers.values())
            overrides = list(self._overrides.values())
            self._writers = MappingProxyType({})
            self._overrides = MappingProxyType({})
            self._current_writer = None
        destroyed: set[int] = set()
        for writer in [*writers, *overrides]:
            if id(writer) in destroyed:
                continue
            destroyed.add(id(writer))
            try:
                writer.destroy()
            except Exception as exc:  # noqa: BLE001
                LOGGER.error("Writer %r raised while being destroyed", writer, exc_info=exc)

    def _keep_dispatching(self) -> bool:
        return self._asynchronous

    def _annotate_call_site(self, text: str, stack_offset: int) -> str:
        # frame 0 is this helper, frame 1 is emit
        try:
            frame = sys._getframe(1 + self._call_depth + stack_offset)
        except ValueError:
            return text
        filename = os.path.basename(frame.f_code.co_filename)
        return f"[{filename}:{frame.f_lineno}] {text}"

    def _dispatch(self, message: WriterMessage) -> None:
        """Route one dequeued message, then return it to the pool."""

        try:
            override = self._overrides.get(message.level)
            if override is not None:
                self._write_one(f"override:{message.level.tag}", override, message.level, message.text)
            else:
                self._write_all(self._writers, message.level, message.text)
        finally:
            self._pool.release(message)

    def _write_all(self, writers: Mapping[str, WriterPort], level: Severity, text: str) -> None:
        for name, writer in writers.items():
            self._write_one(name, writer, level, text)

    def _write_one(self, name: str, writer: WriterPort, level: Severity, text: str) -> None:
        try:
            writer.write(level, text)
        except Exception as exc:  # noqa: BLE001
            LOGGER.error("Unable to write message to writer %s", name, exc_info=exc)
            self._emit_diagnostic("writer_error", {"writer": name, "level": level.tag, "exception": repr(exc)})

    def _emit_diagnostic(self, name: str, payload: dict[str, Any]) -> None:
        if self._diagnostic is None:
            return
        try:
            self._diagnostic(name, payload)
        except Exception as exc:  # noqa: BLE001
            LOGGER.error("Diagnostic hook raised while reporting %s", name, exc_info=exc)


def _validate_depth(depth: int) -> int:
    if isinstance(depth, bool) or not isinstance(depth, int) or depth < 0:
        raise ValueError(f"call depth must be a non-negative integer, got {depth!r}")
    return depth


__all__ = ["DiagnosticHook", "QueueFactory", "WriterManager"]
