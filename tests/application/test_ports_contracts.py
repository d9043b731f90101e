from __future__ import annotations

import asyncio

from lib_log_dispatch.adapters import DispatchQueue, FileWriter, MemoryWriter, RichConsoleWriter
from lib_log_dispatch.application.ports.queue import QueuePort
from lib_log_dispatch.application.ports.writer import WriterPort
from lib_log_dispatch.application.registry import WriterRegistry
from lib_log_dispatch.application.use_cases.shutdown import create_shutdown
from lib_log_dispatch.application.use_cases.writer_manager import WriterManager
from lib_log_dispatch.domain.levels import Severity
from lib_log_dispatch.logger import default_queue_factory
from tests.fakes import RecordingWriter


def test_bundled_writers_satisfy_writer_port() -> None:
    for writer in (RichConsoleWriter(), FileWriter(), MemoryWriter(), RecordingWriter()):
        assert isinstance(writer, WriterPort)


def test_dispatch_queue_satisfies_queue_port() -> None:
    assert isinstance(DispatchQueue(), QueuePort)


def test_object_without_destroy_is_not_a_writer() -> None:
    class Incomplete:
        def init(self, config: str) -> None: ...

        def write(self, level: Severity, message: str) -> None: ...

    assert not isinstance(Incomplete(), WriterPort)


def test_queue_factory_receives_manager_callbacks() -> None:
    received: dict[str, object] = {}

    def factory(**kwargs: object) -> QueuePort:
        received.update(kwargs)
        return DispatchQueue(worker=kwargs["worker"], keep_running=kwargs["keep_running"])  # type: ignore[arg-type]

    manager = WriterManager(registry=WriterRegistry(), queue_factory=factory)
    try:
        assert set(received) == {"worker", "keep_running", "on_drop", "diagnostic"}
        assert received["keep_running"]() is False  # type: ignore[operator]
        manager.set_async(True)
        assert received["keep_running"]() is True  # type: ignore[operator]
    finally:
        manager.close()


def test_shutdown_use_case_closes_manager() -> None:
    manager = WriterManager(registry=WriterRegistry(), queue_factory=default_queue_factory())
    writer = RecordingWriter()
    manager.set_writer("recording", writer=writer)
    manager.set_async(True)
    manager.emit(Severity.INFO, "before shutdown")

    asyncio.run(create_shutdown(manager=manager, timeout=5.0)())

    assert writer.messages == ["before shutdown"]
    assert writer.destroy_calls == 1
    assert not manager.asynchronous
