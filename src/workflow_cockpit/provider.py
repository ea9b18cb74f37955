"""Process-wide cockpit instance.

Exactly one engine backend may exist per process, so the cockpit is obtained
through a provider that creates it on first use and hands back the same
object afterwards. Arguments passed on later calls are ignored.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any

from workflow_cockpit.cockpit import Cockpit
from workflow_cockpit.config import CockpitSettings, load_backend_factory
from workflow_cockpit.exceptions import BackendNotConfigured
from workflow_cockpit.ports import BackendFactory

logger = logging.getLogger(__name__)


class CockpitProvider:
    """Create the cockpit once and share it.

    The first-construction check and assignment happen under a lock, so
    concurrent first calls never build a second backend.
    """

    def __init__(
        self,
        backend_factory: BackendFactory | None = None,
        *,
        settings: CockpitSettings | None = None,
    ) -> None:
        self._backend_factory = backend_factory
        self._settings = settings
        self._instance: Cockpit | None = None
        self._lock = threading.Lock()

    @property
    def instance(self) -> Cockpit | None:
        return self._instance

    def get(
        self,
        persist_mode: str | None = None,
        persist_args: Mapping[str, Any] | None = None,
        logger_level: str | None = None,
    ) -> Cockpit:
        """Return the shared cockpit, creating it on the first call.

        Args:
            persist_mode: Persistence mode for the engine backend.
            persist_args: Persistence arguments for the engine backend.
            logger_level: Logging level for the engine backend.

        Returns:
            The process-wide cockpit.

        Raises:
            BackendNotConfigured: If no backend factory was given or configured.
        """
        instance = self._instance
        if instance is not None:
            return instance

        with self._lock:
            if self._instance is None:
                self._instance = self._create(persist_mode, persist_args, logger_level)
            return self._instance

    def _create(
        self,
        persist_mode: str | None,
        persist_args: Mapping[str, Any] | None,
        logger_level: str | None,
    ) -> Cockpit:
        settings = self._settings or CockpitSettings()
        factory = self._backend_factory
        if factory is None:
            if not settings.backend_factory:
                raise BackendNotConfigured(
                    "No backend factory configured (set COCKPIT_BACKEND_FACTORY)"
                )
            factory = load_backend_factory(settings.backend_factory)

        mode = persist_mode if persist_mode is not None else settings.persist_mode
        args = dict(persist_args) if persist_args is not None else dict(settings.persist_args)
        level = logger_level if logger_level is not None else settings.log_level

        logger.info("Creating engine backend", extra={"persist_mode": mode})
        backend = factory(mode, args, level)
        return Cockpit(backend, settings=settings)


_default_provider = CockpitProvider()


def get_cockpit(
    persist_mode: str | None = None,
    persist_args: Mapping[str, Any] | None = None,
    logger_level: str | None = None,
) -> Cockpit:
    """Return the process-wide cockpit from the default provider."""

    return _default_provider.get(persist_mode, persist_args, logger_level)
