"""Helpers shared by the bundled writers.

Why
---
Every writer receives its configuration as JSON-shaped text and renders the
same ``YYYY/MM/DD hh:mm:ss message`` line layout. Keeping both in one place
means the console and file writers stay in sync.

Contents
--------
* :func:`parse_writer_config` - decode the ``init`` string into a dict.
* :func:`format_line` - prepend the local timestamp to a message.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from lib_log_dispatch.domain.configuration import ConfigurationError


def parse_writer_config(text: str | None, *, writer: str) -> dict[str, Any]:
    """Decode ``text`` into a dictionary; blank text yields ``{}``.

    >>> parse_writer_config('{"path": "app.log"}', writer="file")
    {'path': 'app.log'}
    >>> parse_writer_config("", writer="console")
    {}
    """

    if not text or not text.strip():
        return {}
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"{writer} writer: invalid JSON configuration ({exc.msg})") from exc
    if not isinstance(payload, dict):
        raise ConfigurationError(f"{writer} writer: configuration must be a JSON object")
    return payload


def format_line(message: str, *, timestamp: datetime | None = None, with_timestamp: bool = True) -> str:
    """Return ``message`` prefixed by a ``YYYY/MM/DD hh:mm:ss`` timestamp.

    >>> format_line("hello", timestamp=datetime(2025, 9, 30, 12, 5, 7))
    '2025/09/30 12:05:07 hello'
    >>> format_line("hello", with_timestamp=False)
    'hello'
    """

    if not with_timestamp:
        return message
    moment = timestamp or datetime.now()
    return f"{moment:%Y/%m/%d %H:%M:%S} {message}"


__all__ = ["format_line", "parse_writer_config"]
