"""Severity scale used to filter and route log messages.

Purpose
-------
Provide the fixed, totally ordered set of severities the writer manager
compares against its threshold. Lower numeric values are *more* severe.

Contents
--------
* :class:`Severity` enum with conversion helpers and presentation metadata.
* ``_CODE_TABLE`` constant mapping levels to four-letter console codes.

System Role
-----------
Leaf type of the package: the manager filters with :meth:`Severity.is_at_least`,
override routing keys on exact members, and writers render :attr:`Severity.code`.
"""

from __future__ import annotations

from enum import Enum


class Severity(Enum):
    """Enumerated severities, most severe first.

    ``NONE`` is a sentinel: used as a threshold it disables ordinary traffic
    (``INFO`` and below) while still admitting the alarm levels above it.

    Examples
    --------
    >>> str(Severity.WARN)
    'warn'
    >>> Severity.ERROR.is_at_least(Severity.WARN)
    False
    >>> Severity.CRITICAL.is_at_least(Severity.WARN)
    True
    """

    ATTACK = 0
    CRITICAL = 1
    ALERT = 2
    EMERGENCY = 3
    NONE = 4
    INFO = 5
    WARN = 6
    ERROR = 7
    DEBUG = 8

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def tag(self) -> str:
        """Return the lowercase tag used in configuration and output."""

        return self.name.lower()

    @property
    def code(self) -> str:
        """Return the fixed-width code rendered by console writers."""

        return _CODE_TABLE[self]

    def is_at_least(self, other: "Severity") -> bool:
        """Return ``True`` when ``self`` is at least as severe as ``other``."""

        return self.value <= other.value

    @classmethod
    def tag_for(cls, value: int) -> str:
        """Return the tag for a raw numeric level, ``""`` when unknown.

        >>> Severity.tag_for(6)
        'warn'
        >>> Severity.tag_for(42)
        ''
        """

        try:
            return cls(value).tag
        except ValueError:
            return ""

    @classmethod
    def from_name(cls, name: str) -> "Severity":
        normalized = name.strip().upper()
        normalized = _ALIASES.get(normalized, normalized)
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown severity: {name!r}") from exc

    @classmethod
    def from_numeric(cls, level: int) -> "Severity":
        """Return the :class:`Severity` whose value is ``level``."""
        try:
            return cls(level)
        except ValueError as exc:
            raise ValueError(f"Unsupported severity numeric: {level}") from exc

    @classmethod
    def coerce(cls, value: "Severity | int | str") -> "Severity":
        """Normalise a member, raw integer, or name into a :class:`Severity`."""

        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Unsupported severity value: {value!r}")
        if isinstance(value, int):
            return cls.from_numeric(value)
        if isinstance(value, str):
            stripped = value.strip()
            if stripped.lstrip("-").isdigit():
                return cls.from_numeric(int(stripped))
            return cls.from_name(stripped)
        raise ValueError(f"Unsupported severity value: {value!r}")


# Codes are four characters wide.
_CODE_TABLE = {
    Severity.ATTACK: "ATCK",
    Severity.CRITICAL: "CRIT",
    Severity.ALERT: "ALRT",
    Severity.EMERGENCY: "EMRG",
    Severity.NONE: "NONE",
    Severity.INFO: "INFO",
    Severity.WARN: "WARN",
    Severity.ERROR: "ERRO",
    Severity.DEBUG: "DEBG",
}

_ALIASES = {
    "WARNING": "WARN",
    "ERR": "ERROR",
    "DBG": "DEBUG",
    "ATK": "ATTACK",
}


__all__ = ["Severity"]
