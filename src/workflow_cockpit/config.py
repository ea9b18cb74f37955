"""Configuration for the cockpit.

Configuration is loaded from:
- environment variables prefixed with ``COCKPIT_``
- and a local `.env` file (if present)

Complex values such as ``COCKPIT_PERSIST_ARGS`` are read as JSON.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from workflow_cockpit.exceptions import BackendNotConfigured
from workflow_cockpit.ports import BackendFactory


class CockpitSettings(BaseSettings):
    """Settings for the cockpit and the engine it creates.

    Notes:
        Tests can point at a different env file via
        `CockpitSettings(_env_file=path_to_env)`.
    """

    persist_mode: str = Field(
        default="memory",
        description="Persistence mode handed to the engine backend",
    )
    persist_args: dict[str, Any] = Field(
        default_factory=dict,
        description="Persistence arguments handed to the engine backend",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level for the cockpit and the engine backend",
    )
    backend_factory: str | None = Field(
        default=None,
        description="Import path of the backend factory, as 'package.module:attribute'",
    )
    access_failure_policy: Literal["abort", "skip"] = Field(
        default="abort",
        description=(
            "What the workflow visibility filter does when resolving or evaluating one "
            "workflow fails: 'abort' the whole query or 'skip' that workflow"
        ),
    )
    access_concurrency: int = Field(
        default=1,
        ge=1,
        description="How many workflows the visibility filter evaluates at once",
    )

    model_config = SettingsConfigDict(
        env_prefix="COCKPIT_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level


def load_backend_factory(path: str) -> BackendFactory:
    """Import a backend factory from ``'package.module:attribute'``."""

    module_name, sep, attr = path.partition(":")
    if not sep or not module_name.strip() or not attr.strip():
        raise BackendNotConfigured(
            f"Backend factory must look like 'package.module:attribute', got {path!r}"
        )

    try:
        module = importlib.import_module(module_name.strip())
    except ImportError as e:
        raise BackendNotConfigured(f"Cannot import backend module {module_name!r}: {e}") from e

    target: Any = module
    for part in attr.strip().split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise BackendNotConfigured(f"{path!r} does not name an attribute") from e

    if not callable(target):
        raise BackendNotConfigured(f"Backend factory {path!r} is not callable")
    return target
