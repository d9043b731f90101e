"""Exception taxonomy of the dispatcher.

* :class:`RegistrationError` marks programming mistakes made while populating
  a registry. It is not meant to be caught.
* :class:`DispatchError` subclasses are recoverable failures of explicit
  management calls (``set_writer``/``remove_writer``).
* :class:`ConfigurationError` reports unparsable configuration text.

Emitting a log line never raises any of these.
"""

from __future__ import annotations

from lib_log_dispatch.domain.configuration import ConfigurationError


class RegistrationError(RuntimeError):
    """A writer kind was registered twice or without a factory."""


class DispatchError(Exception):
    """Base class for recoverable writer-management failures."""


class UnknownWriterError(DispatchError, LookupError):
    """No writer instance or registered kind exists under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"unknown writer kind {name!r} (forgotten register?)")
        self.name = name


class WriterNotFoundError(DispatchError, LookupError):
    """``remove_writer`` was asked for a name that is not installed."""

    def __init__(self, name: str) -> None:
        super().__init__(f"no writer installed under {name!r}")
        self.name = name


class WriterInitError(DispatchError):
    """A writer's ``init`` hook failed; the writer was not installed."""

    def __init__(self, name: str, cause: BaseException) -> None:
        super().__init__(f"writer {name!r} failed to initialise: {cause}")
        self.name = name


__all__ = [
    "ConfigurationError",
    "DispatchError",
    "RegistrationError",
    "UnknownWriterError",
    "WriterInitError",
    "WriterNotFoundError",
]
