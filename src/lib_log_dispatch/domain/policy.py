"""Behaviour of the asynchronous queue when it reaches capacity."""

from __future__ import annotations

from enum import Enum


class QueueFullPolicy(Enum):
    """What a producer experiences when the dispatch queue is full.

    ``BLOCK`` is the default: producers wait, without deadline, until the
    dispatcher frees a slot. Nothing is lost, but logging latency is unbounded
    while writers are slow.
    """

    BLOCK = "block"
    DROP_NEWEST = "drop_newest"
    DROP_OLDEST = "drop_oldest"

    @classmethod
    def from_name(cls, name: "str | QueueFullPolicy") -> "QueueFullPolicy":
        if isinstance(name, cls):
            return name
        normalized = str(name).strip().lower().replace("-", "_")
        if normalized in {"drop", "reject"}:
            normalized = "drop_newest"
        try:
            return cls(normalized)
        except ValueError as exc:
            raise ValueError(f"Unknown queue full policy: {name!r}") from exc


__all__ = ["QueueFullPolicy"]
