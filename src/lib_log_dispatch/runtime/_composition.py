"""Runtime composition: turn ``RuntimeSettings`` into the default logger.

Purpose
-------
Keep the wiring between settings, registry, queue factory and writers small,
declarative and testable, away from the public façade in
:mod:`lib_log_dispatch.runtime`.
"""

from __future__ import annotations

from lib_log_dispatch.adapters import create_default_registry
from lib_log_dispatch.application.registry import WriterRegistry
from lib_log_dispatch.application.use_cases.shutdown import create_shutdown
from lib_log_dispatch.logger import Logger, default_queue_factory

from ._settings import RuntimeSettings
from ._state import LoggingRuntime


def build_runtime(settings: RuntimeSettings, registry: WriterRegistry | None = None) -> LoggingRuntime:
    """Assemble the default logger from resolved settings.

    Writers listed in ``settings.writers`` are attached in order; a failing
    writer closes the partially built logger and re-raises.
    """

    logger = Logger(
        settings.configuration,
        registry=registry if registry is not None else create_default_registry(),
        queue_factory=default_queue_factory(
            maxsize=settings.queue_maxsize,
            policy=settings.queue_full_policy,
            timeout=settings.queue_put_timeout,
            stop_timeout=settings.queue_stop_timeout,
        ),
        annotate_call_site=settings.annotate_call_site,
        call_depth=settings.call_depth,
        diagnostic=settings.diagnostic_hook,
        attach_console=settings.attach_console,
    )
    try:
        for spec in settings.writers:
            logger.set_writer(spec.name, spec.config)
    except Exception:
        logger.close()
        raise
    if settings.asynchronous:
        logger.enable_async(True)

    shutdown_async = create_shutdown(manager=logger.manager, timeout=settings.queue_stop_timeout)
    return LoggingRuntime(logger=logger, settings=settings, shutdown_async=shutdown_async)


__all__ = ["build_runtime"]
