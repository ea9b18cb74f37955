"""Unit tests for the CLI entrypoint."""

from __future__ import annotations

import json

import pytest

import workflow_cockpit.cli as cli
from workflow_cockpit.ports import Backend
from workflow_cockpit.provider import CockpitProvider


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)


def _provider(backend: Backend) -> CockpitProvider:
    return CockpitProvider(lambda mode, args, level: backend)


def test_workflows_for_actor(capsys: pytest.CaptureFixture[str], backend: Backend) -> None:
    workflow = {"id": "W1", "name": "one", "blueprint_spec": {"requirements": [], "prepare": []}}
    backend.workflow_store.get_all.return_value = [workflow]
    backend.package_resolver.resolve.return_value = None
    backend.blueprint_evaluator.allowed_start_nodes.return_value = ["START"]

    code = cli.main(
        ["workflows-for-actor", "--actor", '{"actor_id": "u-1"}'], provider=_provider(backend)
    )

    assert code == 0
    assert json.loads(capsys.readouterr().out) == [workflow]
    backend.blueprint_evaluator.allowed_start_nodes.assert_awaited_once_with(
        workflow["blueprint_spec"], {"actor_id": "u-1"}, {}, None
    )


def test_status_counts(capsys: pytest.CaptureFixture[str], backend: Backend) -> None:
    backend.process_store.get_workflow_with_processes.return_value = [
        {"id": "W1", "name": "one", "state": {"status": "finished"}},
    ]

    code = cli.main(["status-counts", "--filters", '{"name": "one"}'], provider=_provider(backend))

    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out["W1"]["finished"] == 1
    backend.process_store.get_workflow_with_processes.assert_awaited_once_with({"name": "one"})


def test_state_history(capsys: pytest.CaptureFixture[str], backend: Backend) -> None:
    backend.process_store.get_state_history_by_process.return_value = [{"step_number": 1}]

    code = cli.main(["state-history", "--process-id", "p-1"], provider=_provider(backend))

    assert code == 0
    assert json.loads(capsys.readouterr().out) == [{"step_number": 1}]


def test_missing_backend_factory(capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["state-history", "--process-id", "p-1"])

    assert code == 2
    assert "COCKPIT_BACKEND_FACTORY" in capsys.readouterr().err


def test_invalid_settings(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("COCKPIT_ACCESS_CONCURRENCY", "0")

    code = cli.main(["state-history", "--process-id", "p-1"])

    assert code == 2
    assert "Configuration error" in capsys.readouterr().err


def test_actor_must_be_a_json_object() -> None:
    with pytest.raises(SystemExit):
        cli.main(["workflows-for-actor", "--actor", "[1, 2]"])
