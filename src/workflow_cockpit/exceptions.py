"""Errors raised by the cockpit itself.

Anything raised by the engine, the stores, the package resolver or the
blueprint evaluator is propagated unchanged and is not part of this module.
"""

from __future__ import annotations

__all__ = [
    "CockpitError",
    "InvalidArgument",
    "NotFound",
    "BackendNotConfigured",
]


class CockpitError(Exception):
    """Base error for conditions detected by the cockpit."""


class InvalidArgument(CockpitError, ValueError):
    """Raised when a required identifier is missing."""

    def __init__(self, *, operation: str, argument: str) -> None:
        super().__init__(f"[{operation}] {argument} not provided")
        self.operation = operation
        self.argument = argument


class NotFound(CockpitError, LookupError):
    """Raised when a referenced process does not exist."""

    def __init__(self, *, operation: str, process_id: object) -> None:
        super().__init__(f"[{operation}] Process not found: {process_id!r}")
        self.operation = operation
        self.process_id = process_id


class BackendNotConfigured(CockpitError):
    """Raised when no engine backend factory is available or it cannot be loaded."""
