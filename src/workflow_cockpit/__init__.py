"""Workflow Cockpit.

Single public entry point of the workflow engine:
- process, activity, workflow and package operations forwarded to one engine
- status aggregation and process state lookups
- actor-based workflow visibility
"""

__version__ = "0.1.0"

from workflow_cockpit.cockpit import FORWARDED_OPERATIONS, Cockpit
from workflow_cockpit.config import CockpitSettings
from workflow_cockpit.exceptions import (
    BackendNotConfigured,
    CockpitError,
    InvalidArgument,
    NotFound,
)
from workflow_cockpit.provider import CockpitProvider, get_cockpit

__all__ = [
    "__version__",
    "BackendNotConfigured",
    "Cockpit",
    "CockpitError",
    "CockpitProvider",
    "CockpitSettings",
    "FORWARDED_OPERATIONS",
    "InvalidArgument",
    "NotFound",
    "get_cockpit",
]
