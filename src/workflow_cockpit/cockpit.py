"""The cockpit facade.

The cockpit is the only object callers talk to. Engine operations are
forwarded one-to-one; status aggregation, process state lookups and workflow
visibility are implemented here on top of the backend's stores.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from workflow_cockpit.access import AccessFilter
from workflow_cockpit.config import CockpitSettings
from workflow_cockpit.exceptions import InvalidArgument, NotFound
from workflow_cockpit.models import WorkflowStatusCount, as_status_row
from workflow_cockpit.ports import Backend, Engine, ProcessHandle

logger = logging.getLogger(__name__)

FORWARDED_OPERATIONS: tuple[str, ...] = (
    "fetch_available_activities_for_actor",
    "fetch_done_activities_for_actor",
    "fetch_available_activity_for_process",
    "begin_activity",
    "commit_activity",
    "push_activity",
    "create_process",
    "create_process_by_workflow_name",
    "run_process",
    "fetch_process",
    "fetch_process_list",
    "fetch_process_state_history",
    "abort_process",
    "save_workflow",
    "fetch_workflow",
    "delete_workflow",
    "save_package",
    "fetch_package",
    "delete_package",
    "add_custom_system_category",
)


def _missing(value: object) -> bool:
    # 0 and False are real values; only None and empty strings count as absent.
    return value is None or value == ""


class Cockpit:
    """Public entry point of the workflow engine.

    Use :func:`workflow_cockpit.provider.get_cockpit` to obtain the
    process-wide instance; constructing a Cockpit directly is meant for
    wiring and tests.
    """

    def __init__(self, backend: Backend, *, settings: CockpitSettings | None = None) -> None:
        self._backend = backend
        self._engine: Engine = backend.engine
        policy = settings.access_failure_policy if settings else "abort"
        concurrency = settings.access_concurrency if settings else 1
        self._access = AccessFilter(
            backend.package_resolver,
            backend.blueprint_evaluator,
            failure_policy=policy,
            concurrency=concurrency,
        )

    @property
    def engine(self) -> Engine:
        return self._engine

    # Activities

    async def fetch_available_activities_for_actor(self, *args: Any, **kwargs: Any) -> Any:
        return await self._engine.fetch_available_activities_for_actor(*args, **kwargs)

    async def fetch_done_activities_for_actor(self, *args: Any, **kwargs: Any) -> Any:
        return await self._engine.fetch_done_activities_for_actor(*args, **kwargs)

    async def fetch_available_activity_for_process(self, *args: Any, **kwargs: Any) -> Any:
        return await self._engine.fetch_available_activity_for_process(*args, **kwargs)

    async def begin_activity(self, *args: Any, **kwargs: Any) -> Any:
        return await self._engine.begin_activity(*args, **kwargs)

    async def commit_activity(self, *args: Any, **kwargs: Any) -> Any:
        return await self._engine.commit_activity(*args, **kwargs)

    async def push_activity(self, *args: Any, **kwargs: Any) -> Any:
        return await self._engine.push_activity(*args, **kwargs)

    # Processes

    async def create_process(self, *args: Any, **kwargs: Any) -> Any:
        return await self._engine.create_process(*args, **kwargs)

    async def create_process_by_workflow_name(self, *args: Any, **kwargs: Any) -> Any:
        return await self._engine.create_process_by_workflow_name(*args, **kwargs)

    async def run_process(self, *args: Any, **kwargs: Any) -> Any:
        return await self._engine.run_process(*args, **kwargs)

    async def fetch_process(self, *args: Any, **kwargs: Any) -> Any:
        return await self._engine.fetch_process(*args, **kwargs)

    async def fetch_process_list(self, *args: Any, **kwargs: Any) -> Any:
        return await self._engine.fetch_process_list(*args, **kwargs)

    async def fetch_process_state_history(self, *args: Any, **kwargs: Any) -> Any:
        return await self._engine.fetch_process_state_history(*args, **kwargs)

    async def abort_process(self, *args: Any, **kwargs: Any) -> Any:
        return await self._engine.abort_process(*args, **kwargs)

    # Workflows and packages

    async def save_workflow(self, *args: Any, **kwargs: Any) -> Any:
        return await self._engine.save_workflow(*args, **kwargs)

    async def fetch_workflow(self, *args: Any, **kwargs: Any) -> Any:
        return await self._engine.fetch_workflow(*args, **kwargs)

    async def delete_workflow(self, *args: Any, **kwargs: Any) -> Any:
        return await self._engine.delete_workflow(*args, **kwargs)

    async def save_package(self, *args: Any, **kwargs: Any) -> Any:
        return await self._engine.save_package(*args, **kwargs)

    async def fetch_package(self, *args: Any, **kwargs: Any) -> Any:
        return await self._engine.fetch_package(*args, **kwargs)

    async def delete_package(self, *args: Any, **kwargs: Any) -> Any:
        return await self._engine.delete_package(*args, **kwargs)

    async def add_custom_system_category(self, *args: Any, **kwargs: Any) -> Any:
        return await self._engine.add_custom_system_category(*args, **kwargs)

    # Aggregations and lookups

    async def fetch_workflows_with_process_status_count(
        self, filters: Mapping[str, Any] | None = None
    ) -> dict[Any, dict[Any, Any]]:
        """Count processes per status for every workflow matching ``filters``.

        Returns:
            Mapping of workflow id to ``workflow_name``, ``workflow_description``,
            ``workflow_version`` and one integer per process status seen.
            Workflows without processes carry the identity fields only.
        """
        rows = await self._backend.process_store.get_workflow_with_processes(filters)

        counts: dict[Any, WorkflowStatusCount] = {}
        for raw in rows:
            row = as_status_row(raw)
            entry = counts.get(row.id)
            if entry is None:
                entry = counts[row.id] = WorkflowStatusCount.from_row(row)
            if row.status is not None:
                entry.count(row.status)

        return {workflow_id: entry.to_dict() for workflow_id, entry in counts.items()}

    async def get_process_state_history(self, process_id: str) -> Sequence[Any]:
        return await self._backend.process_store.get_state_history_by_process(process_id)

    async def get_workflows(self) -> Sequence[Any]:
        return await self._backend.workflow_store.get_all()

    async def get_workflows_for_actor(self, actor_data: Mapping[str, Any]) -> list[Any]:
        """Return the workflows ``actor_data`` may start a new process of."""

        workflows = await self._backend.workflow_store.get_all()
        return await self._access.filter_allowed(workflows, actor_data)

    async def run_pending_process(self, process_id: str, actor_data: Mapping[str, Any]) -> Any:
        process = await self._fetch_process_or_raise("run_pending_process", process_id)
        return await process.run_pending_process(actor_data)

    async def set_process_state(self, process_id: str, state_data: Mapping[str, Any]) -> Any:
        """Move a process to ``state_data`` and return its latest state."""

        process = await self._fetch_process_or_raise("set_process_state", process_id)
        process = await process.set_state(state_data)
        return process.state

    async def get_process_state(self, state_id: str | None) -> Any | None:
        if _missing(state_id):
            raise InvalidArgument(operation="get_process_state", argument="state_id")
        return await self._backend.process_state_store.fetch(state_id)

    async def find_process_states_by_step_number(
        self, process_id: str | None, step_number: int | None
    ) -> Sequence[Any]:
        if _missing(process_id):
            raise InvalidArgument(
                operation="find_process_states_by_step_number", argument="process_id"
            )
        if _missing(step_number):
            raise InvalidArgument(
                operation="find_process_states_by_step_number", argument="step_number"
            )
        return await self._backend.process_state_store.fetch_by_step_number(
            process_id, step_number
        )

    async def find_process_states_by_node_id(
        self, process_id: str | None, node_id: str | None
    ) -> Sequence[Any]:
        if _missing(process_id):
            raise InvalidArgument(operation="find_process_states_by_node_id", argument="process_id")
        if _missing(node_id):
            raise InvalidArgument(operation="find_process_states_by_node_id", argument="node_id")
        return await self._backend.process_state_store.fetch_by_node_id(process_id, node_id)

    async def _fetch_process_or_raise(self, operation: str, process_id: str) -> ProcessHandle:
        process = await self._backend.processes.fetch(process_id)
        if process is None:
            logger.info(
                "Process not found", extra={"operation": operation, "process_id": process_id}
            )
            raise NotFound(operation=operation, process_id=process_id)
        return process
