"""Data shapes read by the cockpit.

Stores may hand back pydantic models, plain mappings or attribute objects.
The cockpit only reads the few fields it needs and never validates or
mutates what it was given.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field


def read_field(obj: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from a mapping or an attribute object."""

    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


class ProcessStatusRow(BaseModel):
    """A workflow joined with the latest state of one of its processes.

    Every field is opaque; ``state`` may be a mapping or an object.
    """

    id: Any
    name: Any = None
    description: Any = None
    version: Any = None
    state: Any = None

    @property
    def status(self) -> Any:
        if not self.state:
            return None
        return read_field(self.state, "status")


class WorkflowStatusCount(BaseModel):
    """Per-workflow identity plus one counter per observed process status."""

    workflow_name: Any = None
    workflow_description: Any = None
    workflow_version: Any = None
    status_counts: dict[Any, int] = Field(default_factory=dict)

    @classmethod
    def from_row(cls, row: ProcessStatusRow) -> WorkflowStatusCount:
        return cls(
            workflow_name=row.name,
            workflow_description=row.description,
            workflow_version=row.version,
        )

    def count(self, status: Any) -> None:
        self.status_counts[status] = self.status_counts.get(status, 0) + 1

    def to_dict(self) -> dict[Any, Any]:
        out: dict[Any, Any] = {
            "workflow_name": self.workflow_name,
            "workflow_description": self.workflow_description,
            "workflow_version": self.workflow_version,
        }
        out.update(self.status_counts)
        return out


def as_status_row(row: Any) -> ProcessStatusRow:
    if isinstance(row, ProcessStatusRow):
        return row
    return ProcessStatusRow(
        id=read_field(row, "id"),
        name=read_field(row, "name"),
        description=read_field(row, "description"),
        version=read_field(row, "version"),
        state=read_field(row, "state"),
    )
