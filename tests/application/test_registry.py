from __future__ import annotations

import pytest

from lib_log_dispatch.application.errors import RegistrationError
from lib_log_dispatch.application.registry import WriterRegistry
from tests.fakes import RecordingWriter


def test_register_and_lookup_are_case_insensitive() -> None:
    registry = WriterRegistry()
    registry.register("Recording", RecordingWriter)
    assert registry.lookup("RECORDING") is RecordingWriter
    assert "recording" in registry
    assert registry.names() == ["recording"]


def test_lookup_of_unknown_name_returns_none() -> None:
    assert WriterRegistry().lookup("nope") is None


def test_register_twice_raises_registration_error() -> None:
    registry = WriterRegistry()
    registry.register("recording", RecordingWriter)
    with pytest.raises(RegistrationError, match="called twice"):
        registry.register("RECORDING", RecordingWriter)


def test_register_without_factory_raises_registration_error() -> None:
    registry = WriterRegistry()
    with pytest.raises(RegistrationError, match="missing"):
        registry.register("ghost", None)
    assert "ghost" not in registry


def test_names_are_sorted_and_iterable() -> None:
    registry = WriterRegistry()
    for name in ("zeta", "alpha", "mid"):
        registry.register(name, RecordingWriter)
    assert list(registry) == ["alpha", "mid", "zeta"]
    assert len(registry) == 3


def test_registration_error_is_not_a_dispatch_error() -> None:
    from lib_log_dispatch.application.errors import DispatchError

    assert not issubclass(RegistrationError, DispatchError)
