"""Public logger handle wrapping one :class:`WriterManager`.

Purpose
-------
Give host code level-tagged emit methods and the lifecycle controls of the
manager (attach/detach writers, threshold, asynchronous mode, call-site
annotation) behind one object.

Contents
--------
* :class:`Logger` - the facade.
* :func:`default_queue_factory` - builds the :class:`DispatchQueue` used for
  asynchronous mode.

System Role
-----------
Outer shell of the package. Emit methods never raise; only management calls
(:meth:`Logger.set_writer`, :meth:`Logger.remove_writer`) surface errors.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from .adapters import DEFAULT_QUEUE_SIZE, DispatchQueue, create_default_registry
from .application.ports.queue import QueuePort
from .application.ports.writer import WriterPort
from .application.registry import WriterRegistry
from .application.use_cases.writer_manager import DiagnosticHook, QueueFactory, WriterManager
from .domain import LoggerConfiguration, MessagePool, QueueFullPolicy, Severity

LOGGER = logging.getLogger(__name__)


def default_queue_factory(
    *,
    maxsize: int = DEFAULT_QUEUE_SIZE,
    policy: QueueFullPolicy | str = QueueFullPolicy.BLOCK,
    timeout: float | None = None,
    stop_timeout: float | None = 5.0,
) -> QueueFactory:
    """Return a factory building :class:`DispatchQueue` with the given limits."""

    def factory(
        *,
        worker: Callable[..., None],
        keep_running: Callable[[], bool],
        on_drop: Callable[..., None] | None = None,
        diagnostic: DiagnosticHook = None,
    ) -> QueuePort:
        return DispatchQueue(
            worker=worker,
            keep_running=keep_running,
            maxsize=maxsize,
            policy=policy,
            timeout=timeout,
            on_drop=on_drop,
            diagnostic=diagnostic,
            stop_timeout=stop_timeout,
        )

    return factory


class Logger:
    """Level-tagged logging facade.

    Examples
    --------
    >>> from lib_log_dispatch.adapters import MemoryWriter
    >>> logger = Logger(LoggerConfiguration(threshold=Severity.WARN, prefix="api"), attach_console=False)
    >>> memory = MemoryWriter()
    >>> _ = logger.set_writer("memory", writer=memory)
    >>> logger.info("ignored")
    False
    >>> logger.warn("disk at %d%%", 91)
    True
    >>> memory.messages()
    ['[api]disk at 91%']
    """

    def __init__(
        self,
        configuration: LoggerConfiguration | None = None,
        *,
        registry: WriterRegistry | None = None,
        queue_factory: QueueFactory | None = None,
        pool: MessagePool | None = None,
        asynchronous: bool = False,
        annotate_call_site: bool = False,
        call_depth: int = 1,
        diagnostic: DiagnosticHook = None,
        attach_console: bool = True,
        manager: WriterManager | None = None,
    ) -> None:
        if manager is None:
            manager = WriterManager(
                registry=registry if registry is not None else create_default_registry(),
                queue_factory=queue_factory or default_queue_factory(),
                configuration=configuration,
                pool=pool,
                annotate_call_site=annotate_call_site,
                call_depth=call_depth,
                diagnostic=diagnostic,
            )
        self._manager = manager
        if attach_console and "console" in manager.registry and manager.get_writer("console") is None:
            manager.set_writer("console")
        if asynchronous:
            manager.set_async(True)

    @classmethod
    def from_json(cls, config: str, **kwargs: Any) -> "Logger":
        """Build a logger from ``{"Level": ..., "Prefix": ...}`` JSON text."""

        return cls(LoggerConfiguration.from_json(config), **kwargs)

    @property
    def manager(self) -> WriterManager:
        return self._manager

    # ------------------------------------------------------------------
    # Emission

    def attack(self, message: object, *args: Any) -> bool:
        return self._log(Severity.ATTACK, message, args)

    def critical(self, message: object, *args: Any) -> bool:
        return self._log(Severity.CRITICAL, message, args)

    def alert(self, message: object, *args: Any) -> bool:
        return self._log(Severity.ALERT, message, args)

    def emergency(self, message: object, *args: Any) -> bool:
        return self._log(Severity.EMERGENCY, message, args)

    def info(self, message: object, *args: Any) -> bool:
        return self._log(Severity.INFO, message, args)

    def warn(self, message: object, *args: Any) -> bool:
        return self._log(Severity.WARN, message, args)

    def warning(self, message: object, *args: Any) -> bool:
        return self._log(Severity.WARN, message, args)

    def error(self, message: object, *args: Any) -> bool:
        return self._log(Severity.ERROR, message, args)

    def debug(self, message: object, *args: Any) -> bool:
        return self._log(Severity.DEBUG, message, args)

    def log(self, level: Severity | int | str, message: object, *args: Any) -> bool:
        """Emit at an explicit ``level``; an unknown level emits nothing."""

        try:
            severity = Severity.coerce(level)
        except ValueError:
            return False
        return self._log(severity, message, args)

    def log_exception(self, exc: BaseException | None, title: str | None = None) -> bool:
        """Log ``exc`` at ERROR, optionally tagged with ``[title]``.

        Returns ``True`` when there was an exception to log, so callers can
        write ``if logger.log_exception(err): return``.
        """

        return self._log_exception(exc, title, 0)

    def log_and_raise(self, exc: BaseException | None, title: str | None = None) -> bool:
        """Log ``exc`` like :meth:`log_exception`, then raise it.

        Returns ``False`` when ``exc`` is ``None``; never returns otherwise.
        """

        if not self._log_exception(exc, title, 0):
            return False
        assert exc is not None
        raise exc

    def _log_exception(self, exc: BaseException | None, title: str | None, stack_offset: int) -> bool:
        if exc is None:
            return False
        text = f"[{title}] {exc}" if title else str(exc)
        self._log(Severity.ERROR, text, (), stack_offset=stack_offset + 1)
        return True

    def _log(self, level: Severity, message: object, args: tuple[Any, ...], *, stack_offset: int = 0) -> bool:
        # _log and the public level method sit between the user and emit
        manager = self._manager
        if level.value > manager.threshold.value:
            return False
        return manager.emit(level, _render(message, args), stack_offset=2 + stack_offset)

    # ------------------------------------------------------------------
    # Lifecycle

    def set_writer(self, name: str, config: str = "", *, writer: WriterPort | None = None) -> WriterPort:
        return self._manager.set_writer(name, config, writer=writer)

    def remove_writer(self, name: str) -> None:
        self._manager.remove_writer(name)

    def set_level_override(self, level: Severity | int | str, writer: WriterPort | None) -> None:
        self._manager.set_level_override(level, writer)

    def clear_level_override(self, level: Severity | int | str) -> None:
        self._manager.clear_level_override(level)

    @property
    def level(self) -> Severity:
        return self._manager.threshold

    def set_level(self, level: Severity | int | str) -> None:
        self._manager.set_level(level)

    @property
    def prefix(self) -> str:
        return self._manager.prefix

    def set_prefix(self, prefix: str) -> None:
        self._manager.set_prefix(prefix)

    @property
    def asynchronous(self) -> bool:
        return self._manager.asynchronous

    def enable_async(self, enabled: bool = True) -> "Logger":
        """Toggle asynchronous dispatch and return ``self`` for chaining."""

        self._manager.set_async(enabled)
        return self

    def enable_call_site(self, enabled: bool = True) -> None:
        self._manager.enable_call_site(enabled)

    def set_call_depth(self, depth: int) -> None:
        """Set how many frames above the level method hold the user's call site.

        The default of 1 points at the direct caller. Add one for each helper
        function that wraps the logger.
        """

        self._manager.set_call_depth(depth)

    def writer_names(self) -> list[str]:
        return self._manager.writer_names()

    def flush(self, timeout: float | None = None) -> bool:
        return self._manager.flush(timeout)

    def close(self, timeout: float | None = None) -> None:
        self._manager.close(timeout)


def _render(message: object, args: tuple[Any, ...]) -> str:
    try:
        text = str(message)
        if not args:
            return text
        try:
            return text % args
        except (TypeError, ValueError):
            return " ".join([text, *(str(arg) for arg in args)])
    except Exception as exc:  # noqa: BLE001
        LOGGER.error("Unable to render log message; falling back to object repr", exc_info=exc)
        return " ".join(_safe_str(item) for item in (message, *args))


def _safe_str(value: object) -> str:
    try:
        return str(value)
    except Exception:  # noqa: BLE001
        return object.__repr__(value)


__all__ = ["Logger", "default_queue_factory"]
