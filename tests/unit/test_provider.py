"""Unit tests for the process-wide cockpit lifecycle."""

from __future__ import annotations

import sys
import threading
import time
import types
from unittest.mock import Mock

import pytest

import workflow_cockpit.provider as provider_module
from workflow_cockpit.config import CockpitSettings
from workflow_cockpit.exceptions import BackendNotConfigured
from workflow_cockpit.ports import Backend
from workflow_cockpit.provider import CockpitProvider, get_cockpit


def test_first_call_creates_and_later_calls_reuse(backend: Backend) -> None:
    factory = Mock(return_value=backend)
    provider = CockpitProvider(factory)

    assert provider.instance is None
    first = provider.get("knex", {"host": "db-1"}, "debug")
    second = provider.get("memory", {"host": "db-2"}, "error")
    third = provider.get()

    assert first is second is third
    assert provider.instance is first
    assert first.engine is backend.engine
    factory.assert_called_once_with("knex", {"host": "db-1"}, "debug")


def test_omitted_arguments_fall_back_to_settings(backend: Backend) -> None:
    factory = Mock(return_value=backend)
    settings = CockpitSettings(persist_mode="knex", persist_args={"pool": 4}, log_level="warning")

    CockpitProvider(factory, settings=settings).get()

    factory.assert_called_once_with("knex", {"pool": 4}, "WARNING")


def test_concurrent_first_calls_create_one_backend(backend: Backend) -> None:
    calls = 0

    def slow_factory(persist_mode, persist_args, logger_level):
        nonlocal calls
        calls += 1
        time.sleep(0.05)
        return backend

    provider = CockpitProvider(slow_factory)
    start = threading.Barrier(8)
    results = []

    def worker() -> None:
        start.wait()
        results.append(provider.get("memory", {}, "info"))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert calls == 1
    assert len(results) == 8
    assert all(r is results[0] for r in results)


def test_failed_creation_can_be_retried(backend: Backend) -> None:
    factory = Mock(side_effect=[ConnectionError("db unreachable"), backend])
    provider = CockpitProvider(factory)

    with pytest.raises(ConnectionError):
        provider.get()
    assert provider.instance is None

    assert provider.get().engine is backend.engine
    assert factory.call_count == 2


def test_missing_factory_is_reported() -> None:
    provider = CockpitProvider(settings=CockpitSettings())

    with pytest.raises(BackendNotConfigured, match="COCKPIT_BACKEND_FACTORY"):
        provider.get()


def test_factory_loaded_from_settings(monkeypatch: pytest.MonkeyPatch, backend: Backend) -> None:
    module = types.ModuleType("fake_engine_backend")
    module.build = Mock(return_value=backend)  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "fake_engine_backend", module)
    monkeypatch.setenv("COCKPIT_BACKEND_FACTORY", "fake_engine_backend:build")
    monkeypatch.setenv("COCKPIT_PERSIST_MODE", "knex")

    cockpit = CockpitProvider().get()

    assert cockpit.engine is backend.engine
    module.build.assert_called_once_with("knex", {}, "INFO")  # type: ignore[attr-defined]


def test_get_cockpit_uses_the_default_provider(
    monkeypatch: pytest.MonkeyPatch, backend: Backend
) -> None:
    factory = Mock(return_value=backend)
    monkeypatch.setattr(provider_module, "_default_provider", CockpitProvider(factory))

    assert get_cockpit("memory") is get_cockpit("knex", {"host": "other"})
    factory.assert_called_once()
