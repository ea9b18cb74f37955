"""Interfaces of the collaborators behind the cockpit.

The engine, its stores, the package resolver and the blueprint evaluator live
outside this package. They are described here as protocols so any backend that
provides the same coroutine methods can be plugged in.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

NodeId = str


class Engine(Protocol):
    """Engine operations exposed verbatim by the cockpit.

    Parameter and return shapes are defined by the engine.
    """

    async def fetch_available_activities_for_actor(self, *args: Any, **kwargs: Any) -> Any: ...

    async def fetch_done_activities_for_actor(self, *args: Any, **kwargs: Any) -> Any: ...

    async def fetch_available_activity_for_process(self, *args: Any, **kwargs: Any) -> Any: ...

    async def begin_activity(self, *args: Any, **kwargs: Any) -> Any: ...

    async def commit_activity(self, *args: Any, **kwargs: Any) -> Any: ...

    async def push_activity(self, *args: Any, **kwargs: Any) -> Any: ...

    async def create_process(self, *args: Any, **kwargs: Any) -> Any: ...

    async def create_process_by_workflow_name(self, *args: Any, **kwargs: Any) -> Any: ...

    async def run_process(self, *args: Any, **kwargs: Any) -> Any: ...

    async def fetch_process(self, *args: Any, **kwargs: Any) -> Any: ...

    async def fetch_process_list(self, *args: Any, **kwargs: Any) -> Any: ...

    async def fetch_process_state_history(self, *args: Any, **kwargs: Any) -> Any: ...

    async def abort_process(self, *args: Any, **kwargs: Any) -> Any: ...

    async def save_workflow(self, *args: Any, **kwargs: Any) -> Any: ...

    async def fetch_workflow(self, *args: Any, **kwargs: Any) -> Any: ...

    async def delete_workflow(self, *args: Any, **kwargs: Any) -> Any: ...

    async def save_package(self, *args: Any, **kwargs: Any) -> Any: ...

    async def fetch_package(self, *args: Any, **kwargs: Any) -> Any: ...

    async def delete_package(self, *args: Any, **kwargs: Any) -> Any: ...

    async def add_custom_system_category(self, *args: Any, **kwargs: Any) -> Any: ...


class ProcessStore(Protocol):
    async def get_workflow_with_processes(
        self, filters: Mapping[str, Any] | None
    ) -> Sequence[Any]: ...

    async def get_state_history_by_process(self, process_id: str) -> Sequence[Any]: ...


class WorkflowStore(Protocol):
    async def get_all(self) -> Sequence[Any]: ...


class ProcessStateStore(Protocol):
    async def fetch(self, state_id: str) -> Any | None: ...

    async def fetch_by_step_number(self, process_id: str, step_number: int) -> Sequence[Any]: ...

    async def fetch_by_node_id(self, process_id: str, node_id: str) -> Sequence[Any]: ...


class ProcessHandle(Protocol):
    """A fetched process able to run and transition itself."""

    state: Any

    async def run_pending_process(self, actor_data: Mapping[str, Any]) -> Any: ...

    async def set_state(self, state_data: Mapping[str, Any]) -> ProcessHandle: ...


class ProcessRepository(Protocol):
    async def fetch(self, process_id: str) -> ProcessHandle | None: ...


class PackageResolver(Protocol):
    async def resolve(self, requirements: Sequence[str], prepare: Sequence[Any]) -> Any:
        """Return the custom extension code for a workflow's requirements."""
        ...


class BlueprintEvaluator(Protocol):
    async def allowed_start_nodes(
        self,
        blueprint_spec: Any,
        actor_data: Mapping[str, Any],
        context: dict[str, Any],
        custom_extension: Any,
    ) -> Sequence[NodeId]:
        """Return the start nodes ``actor_data`` may enter."""
        ...


@dataclass(frozen=True, slots=True)
class Backend:
    """One engine together with the stores and evaluators bound to it."""

    engine: Engine
    process_store: ProcessStore
    workflow_store: WorkflowStore
    process_state_store: ProcessStateStore
    processes: ProcessRepository
    package_resolver: PackageResolver
    blueprint_evaluator: BlueprintEvaluator


BackendFactory = Callable[[str, Mapping[str, Any], str], Backend]
"""Builds a :class:`Backend` from ``(persist_mode, persist_args, logger_level)``."""
