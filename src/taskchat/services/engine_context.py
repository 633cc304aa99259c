"""Bootstrap of the query engine from the loaded configuration.

Usage Pattern:
    from taskchat.services.engine_context import get_task_query_service

    service = get_task_query_service()
    tasks = await service.query_tasks(filter_spec, sort_spec)
"""

from __future__ import annotations

from functools import lru_cache

from taskchat.adapters.datacore import DatacoreBackend
from taskchat.adapters.dataview import DataviewBackend
from taskchat.adapters.http_client import HttpIndexClient
from taskchat.models import AppConfig
from taskchat.services.backend_selector import DATACORE, DATAVIEW, BackendSelector
from taskchat.services.config_service import get_config_service
from taskchat.services.task_query_service import TaskQueryService
from taskchat.utils.logger import get_logger


def build_selector(config: AppConfig) -> BackendSelector:
    """Create backends for every configured bridge URL."""
    settings = config.backend
    datacore = None
    dataview = None
    if settings.datacore_url:
        datacore = DatacoreBackend(
            HttpIndexClient(settings.datacore_url, DATACORE, timeout=settings.timeout)
        )
    if settings.dataview_url:
        dataview = DataviewBackend(
            HttpIndexClient(settings.dataview_url, DATAVIEW, timeout=settings.timeout)
        )
    return BackendSelector({DATACORE: datacore, DATAVIEW: dataview})


@lru_cache(maxsize=1)
def get_task_query_service() -> TaskQueryService:
    """Get a cached TaskQueryService built from the current configuration."""
    get_logger()
    config = get_config_service().config
    return TaskQueryService(build_selector(config), config)


async def close_clients(service: TaskQueryService) -> None:
    """Close the HTTP clients held by the service's backends."""
    for backend in service.selector.backends.values():
        if backend is not None and isinstance(backend.client, HttpIndexClient):
            await backend.client.close()
