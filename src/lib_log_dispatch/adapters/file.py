"""File writer appending one timestamped line per message.

Purpose
-------
Persist admitted log lines to a plain text file. There is no rotation; pair it
with an external rotation tool when files grow.

Contents
--------
* :class:`FileWriter` - writer registered as ``"file"``.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import TextIO

from lib_log_dispatch.application.ports.writer import WriterPort
from lib_log_dispatch.domain.configuration import ConfigurationError
from lib_log_dispatch.domain.levels import Severity

from ._formatting import format_line, parse_writer_config


class FileWriter(WriterPort):
    """Append log lines to ``path``.

    ``init`` expects a JSON object with ``path`` and optionally ``encoding``
    (default ``utf-8``), ``append`` (default ``true``), ``timestamps``
    (default ``true``) and ``level_tags`` (default ``true``; prefix each
    line with the severity code).
    """

    def __init__(self, path: str | Path | None = None, *, encoding: str = "utf-8", append: bool = True) -> None:
        self._path = Path(path) if path is not None else None
        self._encoding = encoding
        self._append = append
        self._timestamps = True
        self._level_tags = True
        self._handle: TextIO | None = None
        self._lock = threading.Lock()

    @property
    def path(self) -> Path | None:
        return self._path

    def init(self, config: str) -> None:
        options = parse_writer_config(config, writer="file")
        path = options.get("path", self._path)
        if not path:
            raise ConfigurationError("file writer: 'path' is required")
        self._encoding = str(options.get("encoding", self._encoding))
        self._append = bool(options.get("append", self._append))
        self._timestamps = bool(options.get("timestamps", self._timestamps))
        self._level_tags = bool(options.get("level_tags", self._level_tags))
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        handle = target.open("a" if self._append else "w", encoding=self._encoding)
        with self._lock:
            previous, self._handle = self._handle, handle
            self._path = target
        if previous is not None:
            previous.close()

    def write(self, level: Severity, message: str) -> None:
        text = f"{level.code} {message}" if self._level_tags else message
        line = format_line(text, with_timestamp=self._timestamps)
        with self._lock:
            if self._handle is None:
                raise RuntimeError("file writer used before init() or after destroy()")
            self._handle.write(line + "\n")
            self._handle.flush()

    def destroy(self) -> None:
        with self._lock:
            handle, self._handle = self._handle, None
        if handle is not None:
            handle.close()


__all__ = ["FileWriter"]
