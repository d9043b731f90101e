"""Application layer: ports, registry, errors, and the writer manager."""

from __future__ import annotations

from .errors import (
    ConfigurationError,
    DispatchError,
    RegistrationError,
    UnknownWriterError,
    WriterInitError,
    WriterNotFoundError,
)
from .ports import QueuePort, WriterFactory, WriterPort
from .registry import WriterRegistry
from .use_cases import DiagnosticHook, WriterManager, create_shutdown

__all__ = [
    "ConfigurationError",
    "DiagnosticHook",
    "DispatchError",
    "QueuePort",
    "RegistrationError",
    "UnknownWriterError",
    "WriterFactory",
    "WriterInitError",
    "WriterManager",
    "WriterNotFoundError",
    "WriterPort",
    "WriterRegistry",
    "create_shutdown",
]
