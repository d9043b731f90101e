"""Threshold and prefix configuration owned by one writer manager."""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from typing import Any, Mapping

from .levels import Severity


class ConfigurationError(ValueError):
    """Raised when configuration text or environment values cannot be parsed."""


@dataclass(slots=True, frozen=True)
class LoggerConfiguration:
    """Immutable threshold/prefix pair.

    Attributes
    ----------
    threshold:
        Least severe level still admitted; anything with a larger numeric
        value is discarded before formatting.
    prefix:
        Text wrapped in brackets and prepended to every admitted message.
        An empty prefix adds nothing.
    """

    threshold: Severity = Severity.DEBUG
    prefix: str = ""

    def admits(self, level: Severity) -> bool:
        """Return ``True`` when ``level`` passes the threshold."""

        return level.value <= self.threshold.value

    def with_threshold(self, threshold: Severity | int | str) -> "LoggerConfiguration":
        return replace(self, threshold=Severity.coerce(threshold))

    def with_prefix(self, prefix: str) -> "LoggerConfiguration":
        return replace(self, prefix=prefix)

    @classmethod
    def from_mapping(
        cls, payload: Mapping[str, Any], *, base: "LoggerConfiguration | None" = None
    ) -> "LoggerConfiguration":
        """Build a configuration from a mapping with ``Level``/``Prefix`` keys.

        Keys are matched case-insensitively; missing keys keep the values of
        ``base`` (the defaults when omitted).

        >>> LoggerConfiguration.from_mapping({"level": "warn", "PREFIX": "api"})
        LoggerConfiguration(threshold=<Severity.WARN: 6>, prefix='api')
        """

        normalized = {str(key).lower(): value for key, value in payload.items()}
        config = base if base is not None else cls()
        if normalized.get("level") is not None:
            try:
                config = config.with_threshold(normalized["level"])
            except ValueError as exc:
                raise ConfigurationError(str(exc)) from exc
        if normalized.get("prefix") is not None:
            config = config.with_prefix(str(normalized["prefix"]))
        return config

    @classmethod
    def from_json(cls, text: str | None, *, base: "LoggerConfiguration | None" = None) -> "LoggerConfiguration":
        """Parse the JSON configuration string, e.g. ``{"Level": 6, "Prefix": "api"}``.

        An empty string returns ``base`` or the defaults. Keys absent from
        the object keep the values of ``base``.
        """

        if not text or not text.strip():
            return base if base is not None else cls()
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Invalid logger configuration JSON: {exc.msg}") from exc
        if not isinstance(payload, dict):
            raise ConfigurationError("Logger configuration JSON must be an object")
        return cls.from_mapping(payload, base=base)


__all__ = ["ConfigurationError", "LoggerConfiguration"]
