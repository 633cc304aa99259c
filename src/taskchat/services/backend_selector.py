"""Backend detection, preference handling and readiness polling."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from taskchat.models.config_models import BackendPreference
from taskchat.repositories.repository import TaskBackend

logger = logging.getLogger(__name__)

DATACORE = "datacore"
DATAVIEW = "dataview"
# Preferred first when the user asks for "auto".
BACKEND_ORDER = (DATACORE, DATAVIEW)


class BackendSelector:
    """Pick the active task backend.

    Args:
        backends: Configured backends keyed by name; a missing or None entry
            means the backend is not installed
    """

    def __init__(self, backends: dict[str, TaskBackend | None]):
        self.backends = {name: backends.get(name) for name in BACKEND_ORDER}

    async def detect_available(self) -> dict[str, bool]:
        """Probe every configured backend."""
        available: dict[str, bool] = {}
        for name, backend in self.backends.items():
            if backend is None:
                available[name] = False
                continue
            try:
                available[name] = await backend.is_available()
            except Exception as e:
                logger.warning("availability check for %s failed: %s", name, e)
                available[name] = False
        return available

    async def determine_active(
        self, preference: BackendPreference = "auto"
    ) -> TaskBackend | None:
        """Apply the user preference, falling back to the other backend.

        Returns:
            The backend to query, or None when neither is available
        """
        available = await self.detect_available()

        if preference in self.backends:
            if available[preference]:
                return self.backends[preference]
            other = next(name for name in BACKEND_ORDER if name != preference)
            if available[other]:
                logger.warning(
                    "preferred backend %s unavailable, falling back to %s",
                    preference,
                    other,
                )
                return self.backends[other]
            logger.warning("no task backend available (preferred %s)", preference)
            return None

        for name in BACKEND_ORDER:
            if available[name]:
                logger.info("auto-selected task backend: %s", name)
                return self.backends[name]
        logger.warning("no task backend available")
        return None

    async def wait_for_ready(
        self,
        max_attempts: int = 20,
        interval_ms: int = 500,
        preference: BackendPreference = "auto",
    ) -> bool:
        """Poll until a backend is available, at most *max_attempts* times."""
        for attempt in range(1, max_attempts + 1):
            backend = await self.determine_active(preference)
            if backend is not None:
                logger.info(
                    "Task indexing API ready: %s (attempt %d/%d)",
                    backend.name,
                    attempt,
                    max_attempts,
                )
                return True
            if attempt < max_attempts:
                await asyncio.sleep(interval_ms / 1000)
        logger.warning("Task indexing API not ready after %d attempts", max_attempts)
        return False

    async def describe(self, preference: BackendPreference = "auto") -> dict[str, Any]:
        """Status summary for display."""
        available = await self.detect_available()
        active = await self.determine_active(preference)
        return {
            "preference": preference,
            "available": available,
            "active": active.name if active else None,
        }
