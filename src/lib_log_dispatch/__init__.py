"""Leveled log dispatcher fanning messages out to pluggable writers.

Build a :class:`Logger` directly, or install a process-wide default with
:func:`init` and use the module-level helpers::

    import lib_log_dispatch as log

    log.init(level="info", prefix="api", asynchronous=True)
    log.info("listening on %s", 8080)
    log.shutdown()
"""

from __future__ import annotations

from .adapters import FileWriter, MemoryWriter, RichConsoleWriter, create_default_registry
from .application import (
    ConfigurationError,
    DispatchError,
    RegistrationError,
    UnknownWriterError,
    WriterInitError,
    WriterManager,
    WriterNotFoundError,
    WriterPort,
    WriterRegistry,
)
from .domain import LoggerConfiguration, QueueFullPolicy, Severity
from .logger import Logger
from .runtime import (
    alert,
    attack,
    critical,
    debug,
    emergency,
    error,
    get,
    info,
    init,
    inspect_runtime,
    is_initialised,
    log_and_raise,
    log_exception,
    shutdown,
    shutdown_async,
    warn,
)
from .lib_log_dispatch import summary_info

__all__ = [
    "ConfigurationError",
    "DispatchError",
    "FileWriter",
    "Logger",
    "LoggerConfiguration",
    "MemoryWriter",
    "QueueFullPolicy",
    "RegistrationError",
    "RichConsoleWriter",
    "Severity",
    "UnknownWriterError",
    "WriterInitError",
    "WriterManager",
    "WriterNotFoundError",
    "WriterPort",
    "WriterRegistry",
    "alert",
    "attack",
    "create_default_registry",
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
    "summary_info",
    "warn",
]
