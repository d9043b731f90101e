from __future__ import annotations

import threading

import pytest

from lib_log_dispatch.domain.levels import Severity
from lib_log_dispatch.domain.message import MessagePool, WriterMessage
from lib_log_dispatch.domain.policy import QueueFullPolicy


def test_acquire_allocates_when_empty() -> None:
    pool = MessagePool()
    message = pool.acquire(Severity.WARN, "hello")
    assert isinstance(message, WriterMessage)
    assert (message.level, message.text) == (Severity.WARN, "hello")
    assert pool.allocated == 1


def test_release_resets_and_recycles() -> None:
    pool = MessagePool()
    first = pool.acquire(Severity.ERROR, "first")
    pool.release(first)
    assert first.text == ""
    second = pool.acquire(Severity.INFO, "second")
    assert second is first
    assert second.text == "second"
    assert pool.allocated == 1


def test_release_respects_max_idle() -> None:
    pool = MessagePool(max_idle=1)
    pool.release(WriterMessage(Severity.INFO, "a"))
    pool.release(WriterMessage(Severity.INFO, "b"))
    assert pool.idle == 1


def test_negative_max_idle_is_rejected() -> None:
    with pytest.raises(ValueError):
        MessagePool(max_idle=-1)


def test_pool_is_safe_under_concurrent_use() -> None:
    pool = MessagePool(max_idle=64)
    seen: list[str] = []
    lock = threading.Lock()

    def worker(index: int) -> None:
        for count in range(200):
            message = pool.acquire(Severity.DEBUG, f"{index}-{count}")
            text = message.text
            pool.release(message)
            with lock:
                seen.append(text)

    threads = [threading.Thread(target=worker, args=(index,)) for index in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(seen) == 8 * 200
    assert len(set(seen)) == 8 * 200
    assert pool.idle <= 64


@pytest.mark.parametrize(
    "name, expected",
    [
        ("block", QueueFullPolicy.BLOCK),
        ("drop-newest", QueueFullPolicy.DROP_NEWEST),
        ("reject", QueueFullPolicy.DROP_NEWEST),
        ("DROP_OLDEST", QueueFullPolicy.DROP_OLDEST),
    ],
)
def test_queue_full_policy_from_name(name: str, expected: QueueFullPolicy) -> None:
    assert QueueFullPolicy.from_name(name) is expected


def test_queue_full_policy_rejects_unknown() -> None:
    with pytest.raises(ValueError, match="Unknown queue full policy"):
        QueueFullPolicy.from_name("explode")
