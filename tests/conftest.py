from __future__ import annotations

from io import StringIO
from typing import Iterator

import pytest
from rich.console import Console

from lib_log_dispatch.application.registry import WriterRegistry
from lib_log_dispatch.application.use_cases.writer_manager import WriterManager
from lib_log_dispatch.logger import default_queue_factory
from lib_log_dispatch import runtime
from tests.fakes import RecordingWriter


@pytest.fixture
def record_console() -> Console:
    return Console(file=StringIO(), record=True, width=200, force_terminal=False)


@pytest.fixture
def registry() -> WriterRegistry:
    registry = WriterRegistry()
    registry.register("recording", RecordingWriter)
    return registry


@pytest.fixture
def manager(registry: WriterRegistry) -> Iterator[WriterManager]:
    manager = WriterManager(registry=registry, queue_factory=default_queue_factory(stop_timeout=5.0))
    yield manager
    manager.close()


@pytest.fixture(autouse=True)
def _reset_default_runtime() -> Iterator[None]:
    yield
    if runtime.is_initialised():
        runtime.shutdown()


@pytest.fixture(autouse=True)
def _clear_log_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (
        "LOG_LEVEL",
        "LOG_PREFIX",
        "LOG_ASYNC",
        "LOG_QUEUE_MAXSIZE",
        "LOG_QUEUE_FULL_POLICY",
        "LOG_CALL_SITE",
        "LOG_CALL_DEPTH",
    ):
        monkeypatch.delenv(key, raising=False)
