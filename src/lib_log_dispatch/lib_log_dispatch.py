"""Package-level helpers shared by the CLI and the public surface."""

from __future__ import annotations

from . import __init__conf__


def summary_info() -> str:
    """Return the metadata banner used by the CLI entry point and docs.

    Outputs
    -------
    str
        Multi-line banner ending with a newline.
    """

    lines: list[str] = []
    __init__conf__.print_info(writer=lines.append)
    return "".join(lines)


__all__ = ["summary_info"]
