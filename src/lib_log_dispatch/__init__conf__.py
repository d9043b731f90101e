"""Static package metadata surfaced by the CLI ``info`` command."""

from __future__ import annotations

from typing import Callable

name = "lib_log_dispatch"
title = "Leveled multi-writer log dispatcher with optional asynchronous fan-out"
version = "0.1.0"
shell_command = "lib_log_dispatch"


def print_info(writer: Callable[[str], None] | None = None) -> None:
    """Emit the metadata banner, one line per call to ``writer`` (default: stdout)."""

    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:\n", "\n"]
    lines.extend(f"    {label.ljust(pad)} = {value}\n" for label, value in fields)
    emit = writer or (lambda text: print(text, end=""))
    for line in lines:
        emit(line)
