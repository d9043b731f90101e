"""Rich-powered console writer.

Purpose
-------
Render admitted log lines on the terminal, coloured per severity.

Contents
--------
* :data:`_STYLE_MAP` - default severity-to-style mapping.
* :class:`RichConsoleWriter` - writer registered as ``"console"``.

System Role
-----------
Default writer attached to every new :class:`lib_log_dispatch.Logger`.
Colour is disabled on Windows consoles and when ``no_color`` is set.
"""

from __future__ import annotations

import sys
from typing import Mapping, MutableMapping

from rich.console import Console

from lib_log_dispatch.application.ports.writer import WriterPort
from lib_log_dispatch.domain.levels import Severity

from .._formatting import format_line, parse_writer_config


#: Default Rich styles keyed by :class:`Severity`.
_STYLE_MAP: Mapping[Severity, str] = {
    Severity.ATTACK: "bold red",
    Severity.CRITICAL: "bold red",
    Severity.ALERT: "bold red",
    Severity.EMERGENCY: "bold magenta",
    Severity.NONE: "bold white",
    Severity.INFO: "bold white",
    Severity.WARN: "bold yellow",
    Severity.ERROR: "bold red",
    Severity.DEBUG: "bold blue",
}


class RichConsoleWriter(WriterPort):
    """Print log lines through Rich with per-severity styles.

    ``init`` accepts a JSON object with the optional keys ``no_color``,
    ``force_color``, ``stderr``, ``timestamps`` and ``styles`` (a mapping of
    severity name to Rich style).
    """

    def __init__(
        self,
        *,
        console: Console | None = None,
        force_color: bool = False,
        no_color: bool = False,
        stderr: bool = False,
        timestamps: bool = True,
        styles: MutableMapping[Severity | str, str] | None = None,
    ) -> None:
        """Configure the writer with colour and style overrides."""
        self._injected_console = console
        self._force_color = force_color
        self._no_color = no_color or _color_unsupported()
        self._stderr = stderr
        self._timestamps = timestamps
        self._style_map = _merge_styles(styles)
        self._console = console if console is not None else self._build_console()

    def init(self, config: str) -> None:
        """Apply JSON configuration; unknown severity names raise ``ValueError``."""
        options = parse_writer_config(config, writer="console")
        if not options:
            return
        self._force_color = bool(options.get("force_color", self._force_color))
        self._no_color = bool(options.get("no_color", self._no_color)) or _color_unsupported()
        self._stderr = bool(options.get("stderr", self._stderr))
        self._timestamps = bool(options.get("timestamps", self._timestamps))
        if options.get("styles"):
            self._style_map = _merge_styles(options["styles"])
        if self._injected_console is None:
            self._console = self._build_console()

    def write(self, level: Severity, message: str) -> None:
        """Print ``message`` styled for ``level``.

        Examples
        --------
        >>> from io import StringIO
        >>> console = Console(file=StringIO(), record=True)
        >>> writer = RichConsoleWriter(console=console, timestamps=False)
        >>> writer.write(Severity.INFO, '[api] hello')
        >>> console.export_text()
        '[api] hello\\n'
        """
        style = "" if self._no_color else self._style_map.get(level, "")
        line = format_line(message, with_timestamp=self._timestamps)
        self._console.print(line, style=style, markup=False, highlight=False, emoji=False, soft_wrap=True)

    def destroy(self) -> None:
        """Flush nothing: the console stream is shared with the host process."""

    def _build_console(self) -> Console:
        return Console(stderr=self._stderr, force_terminal=self._force_color or None, no_color=self._no_color)


def _color_unsupported() -> bool:
    return sys.platform.startswith("win")


def _merge_styles(styles: Mapping[Severity | str, str] | None) -> dict[Severity, str]:
    merged = dict(_STYLE_MAP)
    if not styles:
        return merged
    for key, value in styles.items():
        level = Severity.from_name(key) if isinstance(key, str) else key
        if isinstance(level, Severity):
            merged[level] = value
    return merged


__all__ = ["RichConsoleWriter"]
