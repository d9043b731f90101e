from __future__ import annotations

import asyncio
import inspect

import pytest

import lib_log_dispatch as log
from lib_log_dispatch import runtime
from lib_log_dispatch.adapters import MemoryWriter
from lib_log_dispatch.domain import QueueFullPolicy, Severity


def _memory() -> MemoryWriter:
    writer = runtime.get().manager.get_writer("memory")
    assert isinstance(writer, MemoryWriter)
    return writer


def test_get_before_init_raises() -> None:
    assert not runtime.is_initialised()
    with pytest.raises(RuntimeError, match="init"):
        runtime.get()
    with pytest.raises(RuntimeError):
        log.info("nobody listening")


def test_init_installs_default_logger() -> None:
    logger = log.init(level="info", prefix="svc", attach_console=False, writers={"memory": ""})
    assert runtime.get() is logger
    assert log.debug("filtered") is False
    assert log.warn("disk %d%%", 90) is True
    assert _memory().messages() == ["[svc]disk 90%"]


def test_init_twice_requires_shutdown() -> None:
    log.init(attach_console=False)
    with pytest.raises(RuntimeError, match="twice"):
        log.init(attach_console=False)
    log.shutdown()
    assert not log.is_initialised()
    log.init(attach_console=False)


def test_module_helpers_cover_every_level() -> None:
    log.init(attach_console=False, writers=["memory"])
    helpers = [log.attack, log.critical, log.alert, log.emergency, log.info, log.warn, log.error, log.debug]
    for helper in helpers:
        helper(helper.__name__)
    assert [record.level for record in _memory()] == [
        Severity.ATTACK,
        Severity.CRITICAL,
        Severity.ALERT,
        Severity.EMERGENCY,
        Severity.INFO,
        Severity.WARN,
        Severity.ERROR,
        Severity.DEBUG,
    ]


def test_module_helpers_annotate_the_caller() -> None:
    log.init(attach_console=False, writers=["memory"], annotate_call_site=True)
    line = inspect.currentframe().f_lineno + 1  # type: ignore[union-attr]
    log.error("from module helper")
    line_exc = inspect.currentframe().f_lineno + 1  # type: ignore[union-attr]
    log.log_exception(ValueError("bad"), "load")
    assert _memory().messages() == [
        f"[test_runtime_default.py:{line}] from module helper",
        f"[test_runtime_default.py:{line_exc}] [load] bad",
    ]


def test_inspect_runtime_reports_state() -> None:
    log.init(
        level="warn",
        prefix="ops",
        attach_console=False,
        writers={"memory": '{"capacity": 10}'},
        queue_maxsize=64,
        queue_full_policy="drop_oldest",
    )
    runtime.get().set_level_override("error", MemoryWriter())
    snapshot = log.inspect_runtime()
    assert snapshot.threshold is Severity.WARN
    assert snapshot.prefix == "ops"
    assert snapshot.asynchronous is False
    assert snapshot.writers == ("memory",)
    assert snapshot.overrides == ("error",)
    assert snapshot.queue_maxsize == 64
    assert snapshot.queue_full_policy is QueueFullPolicy.DROP_OLDEST


def test_environment_overrides_arguments(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "error")
    monkeypatch.setenv("LOG_PREFIX", "env")
    monkeypatch.setenv("LOG_ASYNC", "yes")
    log.init(level="debug", prefix="arg", attach_console=False, writers=["memory"])
    snapshot = log.inspect_runtime()
    assert snapshot.threshold is Severity.ERROR
    assert snapshot.prefix == "env"
    assert snapshot.asynchronous is True
    log.error("queued")
    assert runtime.get().flush(timeout=5.0)
    assert _memory().messages() == ["[env]queued"]


def test_shutdown_drains_async_queue_and_destroys_writers() -> None:
    log.init(attach_console=False, writers=["memory"], asynchronous=True)
    memory = _memory()
    for index in range(25):
        log.info("line %d", index)
    log.shutdown()
    assert memory.destroyed == 1
    assert not log.is_initialised()


def test_failing_startup_writer_leaves_runtime_uninitialised() -> None:
    from lib_log_dispatch.application.errors import WriterInitError

    with pytest.raises(WriterInitError):
        log.init(attach_console=False, writers={"file": ""})
    assert not log.is_initialised()


def test_shutdown_refuses_running_event_loop() -> None:
    log.init(attach_console=False)

    async def scenario() -> None:
        with pytest.raises(RuntimeError, match="shutdown_async"):
            log.shutdown()
        await log.shutdown_async()

    asyncio.run(scenario())
    assert not log.is_initialised()


def test_shutdown_clears_runtime_when_dispatcher_misses_deadline() -> None:
    from tests.fakes import GatedWriter

    log.init(attach_console=False, asynchronous=True, queue_stop_timeout=0.2)
    gated = GatedWriter()
    runtime.get().set_writer("gated", writer=gated)
    try:
        log.info("held")
        assert gated.entered.wait(timeout=5.0)
        with pytest.raises(RuntimeError, match="failed to stop"):
            log.shutdown()
        assert not log.is_initialised()
        assert gated.destroy_calls == 1
    finally:
        gated.gate.set()


def test_module_log_and_raise() -> None:
    log.init(attach_console=False, writers=["memory"], annotate_call_site=True)
    assert log.log_and_raise(None) is False
    line = inspect.currentframe().f_lineno + 2  # type: ignore[union-attr]
    with pytest.raises(OSError):
        log.log_and_raise(OSError("disk gone"), "io")
    assert _memory().messages() == [f"[test_runtime_default.py:{line}] [io] disk gone"]
