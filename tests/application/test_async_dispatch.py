from __future__ import annotations

import threading
import time

import pytest

from lib_log_dispatch.application.registry import WriterRegistry
from lib_log_dispatch.application.use_cases.writer_manager import WriterManager
from lib_log_dispatch.domain import Severity
from lib_log_dispatch.logger import default_queue_factory
from tests.fakes import GatedWriter, RecordingWriter

DISPATCHER_NAME = "lib_log_dispatch-dispatcher"


def _dispatcher_threads() -> list[threading.Thread]:
    return [thread for thread in threading.enumerate() if thread.name == DISPATCHER_NAME]


def _wait_for(predicate, timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_async_preserves_fifo_order(manager: WriterManager) -> None:
    writer = RecordingWriter()
    manager.set_writer("recording", writer=writer)
    manager.set_async(True)
    for index in range(200):
        assert manager.emit(Severity.INFO, f"line {index}") is True
    assert manager.flush(timeout=5.0) is True
    assert writer.messages == [f"line {index}" for index in range(200)]


def test_async_messages_return_to_the_pool(manager: WriterManager) -> None:
    manager.set_writer("recording", writer=RecordingWriter())
    manager.set_async(True)
    for index in range(50):
        manager.emit(Severity.DEBUG, str(index))
    manager.flush(timeout=5.0)
    assert manager.pool.idle == manager.pool.allocated


def test_override_routes_only_in_async_mode(manager: WriterManager) -> None:
    general = RecordingWriter()
    special = RecordingWriter()
    manager.set_writer("general", writer=general)
    manager.set_level_override(Severity.ERROR, special)

    manager.emit(Severity.ERROR, "sync error")
    assert general.messages == ["sync error"]
    assert special.messages == []

    manager.set_async(True)
    manager.emit(Severity.ERROR, "async error")
    manager.emit(Severity.WARN, "async warn")
    manager.flush(timeout=5.0)
    assert special.messages == ["async error"]
    assert general.messages == ["sync error", "async warn"]


def test_enabling_twice_starts_one_dispatcher(manager: WriterManager) -> None:
    manager.set_async(True)
    manager.set_async(True)
    assert manager.queue.is_running
    assert len(_dispatcher_threads()) == 1


def test_switching_to_sync_drains_then_stops_dispatcher(manager: WriterManager) -> None:
    writer = RecordingWriter()
    manager.set_writer("recording", writer=writer)
    manager.set_async(True)
    for index in range(100):
        manager.emit(Severity.WARN, f"queued {index}")
    manager.set_async(False)

    assert _wait_for(lambda: not manager.queue.is_running)
    manager.flush()
    assert writer.messages == [f"queued {index}" for index in range(100)]

    manager.emit(Severity.WARN, "direct")
    assert writer.messages[-1] == "direct"


def test_close_drains_pending_messages(registry: WriterRegistry) -> None:
    manager = WriterManager(registry=registry, queue_factory=default_queue_factory())
    writer = RecordingWriter()
    manager.set_writer("recording", writer=writer)
    manager.set_async(True)
    for index in range(20):
        manager.emit(Severity.INFO, str(index))
    manager.close()
    assert writer.messages == [str(index) for index in range(20)]
    assert writer.destroy_calls == 1
    assert not manager.queue.is_running


def test_full_queue_blocks_producers_until_space_frees(registry: WriterRegistry) -> None:
    manager = WriterManager(registry=registry, queue_factory=default_queue_factory(maxsize=2))
    gated = GatedWriter()
    manager.set_writer("gated", writer=gated)
    manager.set_async(True)
    try:
        assert manager.emit(Severity.INFO, "first") is True
        assert gated.entered.wait(timeout=5.0)

        def produce(worker: int) -> None:
            for index in range(5):
                manager.emit(Severity.INFO, f"{worker}-{index}")

        producers = [threading.Thread(target=produce, args=(worker,)) for worker in range(3)]
        for thread in producers:
            thread.start()
        time.sleep(0.2)
        assert any(thread.is_alive() for thread in producers)
        assert manager.queue.pending <= 2

        gated.gate.set()
        for thread in producers:
            thread.join(timeout=5.0)
        assert not any(thread.is_alive() for thread in producers)
        assert manager.flush(timeout=5.0) is True

        assert gated.messages[0] == "first"
        assert len(gated.messages) == 16
        for worker in range(3):
            own = [message for message in gated.messages if message.startswith(f"{worker}-")]
            assert own == [f"{worker}-{index}" for index in range(5)]
    finally:
        gated.gate.set()
        manager.close()


@pytest.mark.parametrize("policy", ["drop_newest", "drop_oldest"])
def test_drop_policies_never_block(registry: WriterRegistry, policy: str) -> None:
    manager = WriterManager(registry=registry, queue_factory=default_queue_factory(maxsize=1, policy=policy))
    gated = GatedWriter()
    manager.set_writer("gated", writer=gated)
    manager.set_async(True)
    try:
        manager.emit(Severity.INFO, "held")
        assert gated.entered.wait(timeout=5.0)
        results = [manager.emit(Severity.INFO, f"extra {index}") for index in range(5)]
        if policy == "drop_newest":
            assert results == [True, False, False, False, False]
        else:
            assert all(results)
        gated.gate.set()
        assert manager.flush(timeout=5.0) is True
        expected_tail = "extra 0" if policy == "drop_newest" else "extra 4"
        assert gated.messages == ["held", expected_tail]
        assert manager.pool.idle == manager.pool.allocated
    finally:
        gated.gate.set()
        manager.close()


def test_concurrent_emitters_and_reconfiguration(manager: WriterManager) -> None:
    writer = RecordingWriter()
    manager.set_writer("recording", writer=writer)
    manager.set_async(True)
    stop = threading.Event()

    def reconfigure() -> None:
        count = 0
        while not stop.is_set():
            extra = RecordingWriter()
            manager.set_writer(f"extra{count % 3}", writer=extra)
            manager.set_level_override(Severity.DEBUG, extra)
            manager.clear_level_override(Severity.DEBUG)
            count += 1

    def emit(worker: int) -> None:
        for index in range(200):
            manager.emit(Severity.INFO, f"{worker}:{index}")

    reconfigurer = threading.Thread(target=reconfigure)
    reconfigurer.start()
    emitters = [threading.Thread(target=emit, args=(worker,)) for worker in range(4)]
    for thread in emitters:
        thread.start()
    for thread in emitters:
        thread.join(timeout=10.0)
    stop.set()
    reconfigurer.join(timeout=5.0)
    assert manager.flush(timeout=5.0) is True
    assert len(writer.messages) == 800


def test_close_destroys_writers_when_dispatcher_misses_deadline(registry: WriterRegistry) -> None:
    events: list[str] = []
    manager = WriterManager(
        registry=registry,
        queue_factory=default_queue_factory(stop_timeout=0.2),
        diagnostic=lambda name, payload: events.append(name),
    )
    gated = GatedWriter()
    other = RecordingWriter()
    manager.set_writer("gated", writer=gated)
    manager.set_writer("other", writer=other)
    manager.set_async(True)
    try:
        manager.emit(Severity.INFO, "held")
        assert gated.entered.wait(timeout=5.0)
        manager.emit(Severity.INFO, "still queued")

        with pytest.raises(RuntimeError, match="failed to stop"):
            manager.close()

        assert manager.writer_names() == []
        assert other.destroy_calls == 1
        assert gated.destroy_calls == 1
        assert "dispatcher_stop_timeout" in events
        assert manager.queue.pending == 0
    finally:
        gated.gate.set()
    assert _wait_for(lambda: not manager.queue.is_running)
    assert "still queued" not in gated.messages
