"""Test configuration and fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from workflow_cockpit.cockpit import Cockpit
from workflow_cockpit.ports import (
    Backend,
    BlueprintEvaluator,
    Engine,
    PackageResolver,
    ProcessRepository,
    ProcessStateStore,
    ProcessStore,
    WorkflowStore,
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep a developer's `.env` and COCKPIT_* variables out of the tests."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "COCKPIT_PERSIST_MODE",
        "COCKPIT_PERSIST_ARGS",
        "COCKPIT_LOG_LEVEL",
        "COCKPIT_BACKEND_FACTORY",
        "COCKPIT_ACCESS_FAILURE_POLICY",
        "COCKPIT_ACCESS_CONCURRENCY",
    ):
        monkeypatch.delenv(name, raising=False)


def make_backend() -> Backend:
    return Backend(
        engine=AsyncMock(spec=Engine),
        process_store=AsyncMock(spec=ProcessStore),
        workflow_store=AsyncMock(spec=WorkflowStore),
        process_state_store=AsyncMock(spec=ProcessStateStore),
        processes=AsyncMock(spec=ProcessRepository),
        package_resolver=AsyncMock(spec=PackageResolver),
        blueprint_evaluator=AsyncMock(spec=BlueprintEvaluator),
    )


@pytest.fixture
def backend() -> Backend:
    """Provide a backend whose collaborators are all async mocks."""
    return make_backend()


@pytest.fixture
def cockpit(backend: Backend) -> Cockpit:
    """Provide a cockpit wired to the mocked backend."""
    return Cockpit(backend)
