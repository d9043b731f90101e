"""Resolve runtime settings from call arguments and environment overrides.

Environment variables win over arguments so operators can retune a deployed
service without code changes:

* ``LOG_LEVEL`` - threshold (name or number)
* ``LOG_PREFIX`` - bracketed prefix
* ``LOG_ASYNC`` - ``1/0``, ``true/false``, ``yes/no``, ``on/off``
* ``LOG_QUEUE_MAXSIZE`` - queue capacity
* ``LOG_QUEUE_FULL_POLICY`` - ``block``, ``drop_newest`` or ``drop_oldest``
* ``LOG_CALL_SITE`` - enable ``[file:line]`` annotation
* ``LOG_CALL_DEPTH`` - frames above the emit call
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from lib_log_dispatch.adapters import DEFAULT_QUEUE_SIZE
from lib_log_dispatch.application.use_cases.writer_manager import DiagnosticHook
from lib_log_dispatch.domain import ConfigurationError, LoggerConfiguration, QueueFullPolicy, Severity

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class WriterSpec:
    """A writer kind to attach at start-up plus its ``init`` configuration."""

    name: str
    config: str = ""


@dataclass(frozen=True)
class RuntimeSettings:
    configuration: LoggerConfiguration
    asynchronous: bool
    queue_maxsize: int
    queue_full_policy: QueueFullPolicy
    queue_put_timeout: float | None
    queue_stop_timeout: float | None
    annotate_call_site: bool
    call_depth: int
    attach_console: bool
    writers: tuple[WriterSpec, ...] = field(default_factory=tuple)
    diagnostic_hook: DiagnosticHook = None


def build_runtime_settings(
    *,
    level: Severity | int | str = Severity.DEBUG,
    prefix: str = "",
    config: str | None = None,
    asynchronous: bool = False,
    queue_maxsize: int = DEFAULT_QUEUE_SIZE,
    queue_full_policy: QueueFullPolicy | str = QueueFullPolicy.BLOCK,
    queue_put_timeout: float | None = None,
    queue_stop_timeout: float | None = 5.0,
    annotate_call_site: bool = False,
    call_depth: int = 1,
    attach_console: bool = True,
    writers: Sequence[WriterSpec | str] | Mapping[str, str] | None = None,
    diagnostic_hook: DiagnosticHook = None,
    environ: Mapping[str, str] | None = None,
) -> RuntimeSettings:
    """Merge arguments, the optional JSON ``config`` and environment overrides.

    Precedence (lowest first): keyword arguments, ``config`` JSON, environment.
    Each layer only replaces the fields it names.
    """

    env = os.environ if environ is None else environ

    configuration = _configuration_from_arguments(level, prefix)
    if config:
        configuration = LoggerConfiguration.from_json(config, base=configuration)
    if "LOG_LEVEL" in env:
        configuration = _with_env_level(configuration, env["LOG_LEVEL"])
    if "LOG_PREFIX" in env:
        configuration = configuration.with_prefix(env["LOG_PREFIX"])

    try:
        policy = QueueFullPolicy.from_name(env.get("LOG_QUEUE_FULL_POLICY", queue_full_policy))
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc

    maxsize = _env_int(env, "LOG_QUEUE_MAXSIZE", queue_maxsize)
    if maxsize <= 0:
        raise ConfigurationError("queue_maxsize must be positive")
    depth = _env_int(env, "LOG_CALL_DEPTH", call_depth)
    if depth < 0:
        raise ConfigurationError("call_depth must not be negative")

    return RuntimeSettings(
        configuration=configuration,
        asynchronous=_env_bool(env, "LOG_ASYNC", asynchronous),
        queue_maxsize=maxsize,
        queue_full_policy=policy,
        queue_put_timeout=queue_put_timeout,
        queue_stop_timeout=queue_stop_timeout,
        annotate_call_site=_env_bool(env, "LOG_CALL_SITE", annotate_call_site),
        call_depth=depth,
        attach_console=attach_console,
        writers=_normalise_writers(writers),
        diagnostic_hook=diagnostic_hook,
    )


def _configuration_from_arguments(level: Severity | int | str, prefix: str) -> LoggerConfiguration:
    try:
        return LoggerConfiguration(threshold=Severity.coerce(level), prefix=prefix)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc


def _with_env_level(configuration: LoggerConfiguration, raw: str) -> LoggerConfiguration:
    try:
        return configuration.with_threshold(raw)
    except ValueError as exc:
        raise ConfigurationError(f"LOG_LEVEL: {exc}") from exc


def _env_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigurationError(f"{key}: expected a boolean, got {raw!r}")


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{key}: expected an integer, got {raw!r}") from exc


def _normalise_writers(writers: Sequence[WriterSpec | str] | Mapping[str, str] | None) -> tuple[WriterSpec, ...]:
    if not writers:
        return ()
    if isinstance(writers, Mapping):
        return tuple(WriterSpec(name, config) for name, config in writers.items())
    return tuple(item if isinstance(item, WriterSpec) else WriterSpec(item) for item in writers)


__all__ = ["RuntimeSettings", "WriterSpec", "build_runtime_settings"]
