"""Actor-based workflow visibility.

A workflow is visible to an actor when the actor may start a new process of
it. For every workflow the custom extension code declared by its blueprint is
resolved, then the blueprint evaluator is asked which start nodes the actor
may enter. A workflow is startable only when exactly one start node is
allowed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Literal

from workflow_cockpit.models import read_field
from workflow_cockpit.ports import BlueprintEvaluator, PackageResolver

logger = logging.getLogger(__name__)

FailurePolicy = Literal["abort", "skip"]


class AccessFilter:
    """Select the workflows an actor is allowed to start."""

    def __init__(
        self,
        package_resolver: PackageResolver,
        blueprint_evaluator: BlueprintEvaluator,
        *,
        failure_policy: FailurePolicy = "abort",
        concurrency: int = 1,
    ) -> None:
        if failure_policy not in ("abort", "skip"):
            raise ValueError(f"Unsupported failure policy: {failure_policy!r}")
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self._resolver = package_resolver
        self._evaluator = blueprint_evaluator
        self.failure_policy = failure_policy
        self.concurrency = concurrency

    async def filter_allowed(
        self, workflows: Sequence[Any], actor_data: Mapping[str, Any]
    ) -> list[Any]:
        """Return the workflows ``actor_data`` may start, in input order.

        Args:
            workflows: Workflow definitions as returned by the workflow store.
            actor_data: Attributes of the calling actor, passed through untouched.

        Returns:
            The subset of ``workflows`` (same objects) that are startable.

        Raises:
            Exception: Under the ``"abort"`` policy, the first failure from the
                package resolver or the blueprint evaluator.
        """
        if self.concurrency == 1:
            decisions = [await self._decide(workflow, actor_data) for workflow in workflows]
        else:
            decisions = await self._decide_concurrently(workflows, actor_data)

        allowed = [workflow for workflow, ok in zip(workflows, decisions, strict=True) if ok]
        logger.debug(
            "Workflow visibility evaluated",
            extra={"workflows": len(workflows), "allowed": len(allowed)},
        )
        return allowed

    async def is_startable(self, workflow: Any, actor_data: Mapping[str, Any]) -> bool:
        """Whether ``actor_data`` has exactly one start node in ``workflow``."""

        blueprint_spec = read_field(workflow, "blueprint_spec")
        custom_extension = await self._resolver.resolve(
            read_field(blueprint_spec, "requirements"), read_field(blueprint_spec, "prepare")
        )
        start_nodes = await self._evaluator.allowed_start_nodes(
            blueprint_spec, actor_data, {}, custom_extension
        )
        return len(start_nodes) == 1

    async def _decide(self, workflow: Any, actor_data: Mapping[str, Any]) -> bool:
        if self.failure_policy == "abort":
            return await self.is_startable(workflow, actor_data)

        try:
            return await self.is_startable(workflow, actor_data)
        except Exception:
            logger.warning(
                "Skipping workflow after visibility evaluation failed",
                extra={"workflow_id": str(read_field(workflow, "id"))},
                exc_info=True,
            )
            return False

    async def _decide_concurrently(
        self, workflows: Sequence[Any], actor_data: Mapping[str, Any]
    ) -> list[bool]:
        semaphore = asyncio.Semaphore(self.concurrency)

        async def bounded(workflow: Any) -> bool:
            async with semaphore:
                return await self._decide(workflow, actor_data)

        try:
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(bounded(workflow)) for workflow in workflows]
        except ExceptionGroup as eg:
            # Surface the collaborator's own error, as the sequential path does.
            raise eg.exceptions[0] from None
        return [task.result() for task in tasks]
