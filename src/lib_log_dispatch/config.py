"""Optional ``.env`` loading for hosts and the CLI.

Purpose
-------
Let operators keep ``LOG_LEVEL``/``LOG_PREFIX``/``LOG_ASYNC`` style overrides
in a ``.env`` file next to the application instead of exporting them.

Contents
--------
* :data:`DOTENV_ENV_VAR` - environment toggle that enables loading.
* :func:`should_use_dotenv` - resolve CLI flag versus environment toggle.
* :func:`enable_dotenv` - load the nearest ``.env`` without overriding
  variables that are already set.
"""

from __future__ import annotations

import threading
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

DOTENV_ENV_VAR = "LIB_LOG_DISPATCH_USE_DOTENV"

_TRUTHY = {"1", "true", "yes", "on"}

_DOTENV_LOCK = threading.Lock()
_DOTENV_LOADED: Path | None = None


def should_use_dotenv(*, explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Return whether ``.env`` should be loaded.

    An explicit CLI choice wins; otherwise the :data:`DOTENV_ENV_VAR` value is
    interpreted as a boolean.

    >>> should_use_dotenv(explicit=False, env_value="1")
    False
    >>> should_use_dotenv(env_value="yes")
    True
    >>> should_use_dotenv()
    False
    """

    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    return env_value.strip().lower() in _TRUTHY


def enable_dotenv(search_from: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` walking upwards from ``search_from`` (default: cwd).

    Existing environment variables keep precedence. Returns the resolved path
    of the loaded file, or ``None`` when no file was found. Subsequent calls
    return the first loaded path without reading the file again.
    """

    global _DOTENV_LOADED
    with _DOTENV_LOCK:
        if _DOTENV_LOADED is not None:
            return _DOTENV_LOADED
        candidate = _locate_dotenv(search_from)
        if candidate is None:
            return None
        load_dotenv(candidate, override=False)
        _DOTENV_LOADED = candidate
        return candidate


def _locate_dotenv(search_from: Path | None) -> Path | None:
    if search_from is None:
        found = find_dotenv(usecwd=True)
        return Path(found).resolve() if found else None
    start = search_from.resolve()
    for directory in (start, *start.parents):
        candidate = directory / ".env"
        if candidate.is_file():
            return candidate
    return None


def _reset_dotenv_state_for_testing() -> None:
    global _DOTENV_LOADED
    with _DOTENV_LOCK:
        _DOTENV_LOADED = None


__all__ = ["DOTENV_ENV_VAR", "enable_dotenv", "should_use_dotenv"]
