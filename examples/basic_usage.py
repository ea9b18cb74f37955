#!/usr/bin/env python3
"""Programmatic cockpit example.

This demonstrates wiring the cockpit to a backend:

* build a toy in-memory backend (a real deployment points
  `COCKPIT_BACKEND_FACTORY` at its engine package instead)
* obtain the process-wide cockpit
* list the workflows an actor may start and the per-status process counts
"""

from __future__ import annotations

import argparse
import asyncio
import json
from collections.abc import Mapping, Sequence
from typing import Any

from workflow_cockpit.logging import configure_logging
from workflow_cockpit.ports import Backend
from workflow_cockpit.provider import CockpitProvider

WORKFLOWS: list[dict[str, Any]] = [
    {
        "id": "w-onboarding",
        "name": "onboarding",
        "version": 1,
        "blueprint_spec": {"requirements": ["core"], "prepare": [], "lanes": ["admin"]},
    },
    {
        "id": "w-payroll",
        "name": "payroll",
        "version": 3,
        "blueprint_spec": {"requirements": ["core"], "prepare": [], "lanes": ["finance"]},
    },
]

ROWS: list[dict[str, Any]] = [
    {"id": "w-onboarding", "name": "onboarding", "version": 1, "state": {"status": "finished"}},
    {"id": "w-onboarding", "name": "onboarding", "version": 1, "state": {"status": "running"}},
    {"id": "w-payroll", "name": "payroll", "version": 3, "state": None},
]


class _Unsupported:
    """Stands in for the engine and state stores, which this example never calls."""

    def __getattr__(self, name: str) -> Any:
        raise NotImplementedError(name)


class _Workflows:
    async def get_all(self) -> Sequence[Any]:
        return WORKFLOWS


class _Processes:
    async def get_workflow_with_processes(self, filters: Mapping[str, Any] | None) -> Sequence[Any]:
        return ROWS

    async def get_state_history_by_process(self, process_id: str) -> Sequence[Any]:
        return []


class _Packages:
    async def resolve(self, requirements: Sequence[str], prepare: Sequence[Any]) -> Any:
        return {"packages": list(requirements)}


class _LaneEvaluator:
    """Allows the single start node when one of the actor's claims names a lane."""

    async def allowed_start_nodes(
        self,
        blueprint_spec: Any,
        actor_data: Mapping[str, Any],
        context: dict[str, Any],
        custom_extension: Any,
    ) -> Sequence[str]:
        claims = set(actor_data.get("claims", []))
        return ["START"] if claims & set(blueprint_spec["lanes"]) else []


def build_backend(persist_mode: str, persist_args: Mapping[str, Any], logger_level: str) -> Backend:
    unsupported: Any = _Unsupported()
    return Backend(
        engine=unsupported,
        process_store=_Processes(),
        workflow_store=_Workflows(),
        process_state_store=unsupported,
        processes=unsupported,
        package_resolver=_Packages(),
        blueprint_evaluator=_LaneEvaluator(),
    )


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Query the cockpit (programmatic example).")
    parser.add_argument(
        "--claims",
        default="admin",
        help='Comma-separated actor claims, e.g. "admin,finance"',
    )
    return parser.parse_args(argv)


async def _query(claims: list[str]) -> dict[str, Any]:
    cockpit = CockpitProvider(build_backend).get("memory", {}, "INFO")
    actor = {"actor_id": "example", "claims": claims}
    visible = await cockpit.get_workflows_for_actor(actor)
    return {
        "visible": [w["name"] for w in visible],
        "status_counts": await cockpit.fetch_workflows_with_process_status_count(),
    }


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging("INFO")

    claims = [claim.strip() for claim in args.claims.split(",") if claim.strip()]
    print(json.dumps(asyncio.run(_query(claims)), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
