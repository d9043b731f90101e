"""Runtime façade managing the process-wide default logger.

Purpose
-------
Applications that want one shared logger construct it explicitly at start-up
with :func:`init` and tear it down with :func:`shutdown`. Nothing is created
implicitly at import time.

Contents
--------
* ``init`` – composition root installing the default :class:`Logger`.
* ``get`` / ``is_initialised`` / ``inspect_runtime`` – accessors.
* ``shutdown`` / ``shutdown_async`` – deterministic teardown paths.
* Forwarding helpers (``info``, ``warn``, ``error`` ...) that emit through the
  default logger with call-site annotation still pointing at the caller.

System Role
-----------
Outer shell: downstream code either keeps its own :class:`Logger` instances or
uses this single, explicitly initialised default.
"""

from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from lib_log_dispatch.application.registry import WriterRegistry
from lib_log_dispatch.application.use_cases.writer_manager import DiagnosticHook
from lib_log_dispatch.domain import QueueFullPolicy, Severity
from lib_log_dispatch.logger import Logger

from ._composition import build_runtime
from ._settings import WriterSpec, build_runtime_settings
from ._state import LoggingRuntime, clear_runtime, current_runtime, is_initialised, set_runtime


@dataclass(frozen=True)
class RuntimeSnapshot:
    """Immutable view over the active default logger."""

    threshold: Severity
    prefix: str
    asynchronous: bool
    annotate_call_site: bool
    call_depth: int
    writers: tuple[str, ...]
    overrides: tuple[str, ...]
    queue_maxsize: int
    queue_full_policy: QueueFullPolicy


def init(
    *,
    level: Severity | int | str = Severity.DEBUG,
    prefix: str = "",
    config: str | None = None,
    asynchronous: bool = False,
    queue_maxsize: int = 10_000,
    queue_full_policy: QueueFullPolicy | str = QueueFullPolicy.BLOCK,
    queue_put_timeout: float | None = None,
    queue_stop_timeout: float | None = 5.0,
    annotate_call_site: bool = False,
    call_depth: int = 1,
    attach_console: bool = True,
    writers: Sequence[WriterSpec | str] | Mapping[str, str] | None = None,
    registry: WriterRegistry | None = None,
    diagnostic_hook: DiagnosticHook = None,
) -> Logger:
    """Build and install the default logger.

    Why
    ---
    Hosts call ``init`` once during start-up so every module can reach the
    same logger without threading it through call signatures.

    Inputs
    ------
    level, prefix, config:
        Threshold and prefix; ``config`` accepts the JSON form
        ``{"Level": ..., "Prefix": ...}``. ``LOG_LEVEL``/``LOG_PREFIX`` in the
        environment override both.
    asynchronous, queue_*:
        Dispatch mode and queue limits (``LOG_ASYNC``, ``LOG_QUEUE_MAXSIZE``,
        ``LOG_QUEUE_FULL_POLICY`` override).
    annotate_call_site, call_depth:
        ``[file:line]`` annotation (``LOG_CALL_SITE``, ``LOG_CALL_DEPTH``).
    attach_console, writers, registry:
        Writers to attach; ``writers`` maps kind names to ``init`` strings.

    Side Effects
    ------------
    Raises :class:`RuntimeError` if called twice without :func:`shutdown`.
    Starts the dispatcher thread in asynchronous mode.
    """

    if is_initialised():
        raise RuntimeError(
            "lib_log_dispatch.init() cannot be called twice without shutdown(); call lib_log_dispatch.shutdown() first",
        )
    settings = build_runtime_settings(
        level=level,
        prefix=prefix,
        config=config,
        asynchronous=asynchronous,
        queue_maxsize=queue_maxsize,
        queue_full_policy=queue_full_policy,
        queue_put_timeout=queue_put_timeout,
        queue_stop_timeout=queue_stop_timeout,
        annotate_call_site=annotate_call_site,
        call_depth=call_depth,
        attach_console=attach_console,
        writers=writers,
        diagnostic_hook=diagnostic_hook,
    )
    runtime = build_runtime(settings, registry)
    set_runtime(runtime)
    return runtime.logger


def get() -> Logger:
    """Return the default logger; raise :class:`RuntimeError` before :func:`init`."""

    return current_runtime().logger


def inspect_runtime() -> RuntimeSnapshot:
    """Return a read-only snapshot of the default logger's state."""

    runtime = current_runtime()
    manager = runtime.logger.manager
    return RuntimeSnapshot(
        threshold=manager.threshold,
        prefix=manager.prefix,
        asynchronous=manager.asynchronous,
        annotate_call_site=manager.annotate_call_site,
        call_depth=manager.call_depth,
        writers=tuple(manager.writer_names()),
        overrides=tuple(level.tag for level in sorted(manager.overrides, key=lambda item: item.value)),
        queue_maxsize=runtime.settings.queue_maxsize,
        queue_full_policy=runtime.settings.queue_full_policy,
    )


def shutdown() -> None:
    """Drain the queue, destroy writers, and clear the default logger.

    Raises :class:`RuntimeError` when invoked inside a running event loop to
    steer callers to :func:`shutdown_async`.
    """

    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None
    else:
        if loop.is_running():
            raise RuntimeError(
                "lib_log_dispatch.shutdown() cannot run inside an active event loop; await lib_log_dispatch.shutdown_async() instead",
            )
    asyncio.run(shutdown_async())


async def shutdown_async() -> None:
    """Asynchronous variant of :func:`shutdown`.

    The default logger is cleared even when the dispatcher misses its stop
    deadline; the :class:`RuntimeError` still propagates.
    """

    runtime = current_runtime()
    try:
        await _perform_shutdown(runtime)
    finally:
        clear_runtime()


async def _perform_shutdown(runtime: LoggingRuntime) -> None:
    result = runtime.shutdown_async()
    if inspect.isawaitable(result):
        await result


def _forward(level: Severity, message: object, args: tuple[Any, ...]) -> bool:
    # one extra frame (this helper) sits between the caller and Logger._log
    return current_runtime().logger._log(level, message, args, stack_offset=1)


def attack(message: object, *args: Any) -> bool:
    return _forward(Severity.ATTACK, message, args)


def critical(message: object, *args: Any) -> bool:
    return _forward(Severity.CRITICAL, message, args)


def alert(message: object, *args: Any) -> bool:
    return _forward(Severity.ALERT, message, args)


def emergency(message: object, *args: Any) -> bool:
    return _forward(Severity.EMERGENCY, message, args)


def info(message: object, *args: Any) -> bool:
    return _forward(Severity.INFO, message, args)


def warn(message: object, *args: Any) -> bool:
    return _forward(Severity.WARN, message, args)


def error(message: object, *args: Any) -> bool:
    return _forward(Severity.ERROR, message, args)


def debug(message: object, *args: Any) -> bool:
    return _forward(Severity.DEBUG, message, args)


def log_exception(exc: BaseException | None, title: str | None = None) -> bool:
    return current_runtime().logger._log_exception(exc, title, 0)


def log_and_raise(exc: BaseException | None, title: str | None = None) -> bool:
    if not current_runtime().logger._log_exception(exc, title, 0):
        return False
    assert exc is not None
    raise exc


__all__ = [
    "RuntimeSnapshot",
    "WriterSpec",
    "alert",
    "attack",
    "critical",
    "debug",
    "emergency",
    "error",
    "get",
    "info",
    "init",
    "inspect_runtime",
    "is_initialised",
    "log_and_raise",
    "log_exception",
    "shutdown",
    "shutdown_async",
    "warn",
]
