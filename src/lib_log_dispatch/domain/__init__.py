"""Domain value objects shared by the writer manager and its adapters."""

from __future__ import annotations

from .configuration import ConfigurationError, LoggerConfiguration
from .levels import Severity
from .message import MessagePool, WriterMessage
from .policy import QueueFullPolicy

__all__ = [
    "ConfigurationError",
    "LoggerConfiguration",
    "MessagePool",
    "QueueFullPolicy",
    "Severity",
    "WriterMessage",
]
