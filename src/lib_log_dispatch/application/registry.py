"""Registry mapping writer kind names to factories.

Purpose
-------
Let collaborators make a writer kind available by name so managers can attach
it from configuration (``logger.set_writer("file", '{"path": "app.log"}')``).

Contents
--------
* :class:`WriterRegistry` - case-insensitive ``name -> factory`` table.

System Role
-----------
A registry is an explicit object: the application builds one at start-up
(usually through :func:`lib_log_dispatch.adapters.create_default_registry`),
registers its own kinds, then hands it to every :class:`Logger` that needs it.
Registration is expected to finish before concurrent use begins.
"""

from __future__ import annotations

import threading
from typing import Iterator

from .errors import RegistrationError
from .ports.writer import WriterFactory


class WriterRegistry:
    """Case-insensitive table of writer factories.

    Examples
    --------
    >>> registry = WriterRegistry()
    >>> class Null:
    ...     def init(self, config): pass
    ...     def write(self, level, message): pass
    ...     def destroy(self): pass
    >>> registry.register("Null", Null)
    >>> registry.lookup("NULL") is Null
    True
    >>> registry.lookup("missing") is None
    True
    """

    def __init__(self) -> None:
        self._factories: dict[str, WriterFactory] = {}
        self._lock = threading.Lock()

    def register(self, name: str, factory: WriterFactory | None) -> None:
        """Make ``factory`` available under ``name``.

        Raises
        ------
        RegistrationError
            When ``factory`` is missing or ``name`` is already taken. Both are
            programming errors and should abort start-up.
        """

        key = name.lower()
        if factory is None or not callable(factory):
            raise RegistrationError(f"register: factory for writer {key!r} is missing")
        with self._lock:
            if key in self._factories:
                raise RegistrationError(f"register: called twice for writer {key!r}")
            self._factories[key] = factory

    def lookup(self, name: str) -> WriterFactory | None:
        """Return the factory registered under ``name`` or ``None``."""

        return self._factories.get(name.lower())

    def names(self) -> list[str]:
        """Return the registered kind names in sorted order."""

        with self._lock:
            return sorted(self._factories)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._factories

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._factories)


__all__ = ["WriterRegistry"]
