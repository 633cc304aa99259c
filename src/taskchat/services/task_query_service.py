"""Task query orchestration.

This module provides the TaskQueryService class, the single entry point
downstream consumers use to retrieve tasks. One query goes through:

- Backend selection (user preference with fallback)
- Query compilation in the selected backend's grammar
- The backend query call
- The post-query filter pipeline
- Result normalization into Task entities
- Multi-criteria sorting

Nothing here raises to the caller: an unavailable backend or a failed
backend call is logged and degrades to an empty result.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from taskchat.models import (
    AppConfig,
    FilterSpec,
    LocationFilters,
    RawRecord,
    SortSpec,
    Task,
)
from taskchat.models.config_models import BackendPreference
from taskchat.repositories.repository import TaskBackend
from taskchat.services.backend_selector import BackendSelector
from taskchat.services.filter_pipeline import PostQueryFilterPipeline
from taskchat.services.normalizer import ResultNormalizer
from taskchat.services.sort_service import TaskSortService

logger = logging.getLogger(__name__)


class TaskQueryService:
    """Service for querying, filtering and ordering tasks.

    Args:
        selector: Backend selector holding the configured backends
        config: Engine configuration, read once at the start of each query
        today_provider: Returns the reference day for due-date buckets
    """

    def __init__(
        self,
        selector: BackendSelector,
        config: AppConfig,
        today_provider: Callable[[], date] = date.today,
    ):
        self.selector = selector
        self.config = config
        self.today_provider = today_provider

    async def query_tasks(
        self,
        filter_spec: FilterSpec | None = None,
        sort_spec: SortSpec | None = None,
        preference: BackendPreference | None = None,
    ) -> list[Task]:
        """Retrieve, filter, normalize and sort tasks.

        Args:
            filter_spec: Inclusion, exclusion and property filters
            sort_spec: Sort criteria; None keeps backend order
            preference: Overrides the configured backend preference

        Returns:
            Ordered list of tasks, empty when no backend is usable
        """
        config = self.config
        filter_spec = filter_spec or FilterSpec()

        backend = await self._select_backend(preference or config.backend.preference)
        if backend is None:
            return []

        try:
            records = await self._fetch(backend, filter_spec, config)
            page_tags = None
            if backend.needs_page_tags and records:
                page_tags = await backend.execute_page_query()
        except Exception:
            logger.exception("%s query failed, returning no tasks", backend.name)
            return []

        tasks = ResultNormalizer(backend, config).normalize_all(records, page_tags)
        logger.info("%s returned %d tasks", backend.name, len(tasks))
        return TaskSortService(config).sort(tasks, sort_spec)

    async def count_tasks(
        self,
        filter_spec: FilterSpec | None = None,
        preference: BackendPreference | None = None,
    ) -> int:
        """Count matching tasks without building Task entities."""
        config = self.config
        filter_spec = filter_spec or FilterSpec()

        backend = await self._select_backend(preference or config.backend.preference)
        if backend is None:
            return 0

        try:
            records = await self._fetch(backend, filter_spec, config)
        except Exception:
            logger.exception("%s count query failed, returning 0", backend.name)
            return 0
        return len(records)

    async def _select_backend(self, preference: BackendPreference) -> TaskBackend | None:
        backend = await self.selector.determine_active(preference)
        if backend is None:
            logger.warning("no task indexing backend available, returning no tasks")
        return backend

    async def _fetch(
        self, backend: TaskBackend, filter_spec: FilterSpec, config: AppConfig
    ) -> list[RawRecord]:
        exclusions = effective_exclusions(filter_spec, config)
        query = backend.compile_query(filter_spec, exclusions)
        records = await backend.execute_query(query)

        membership_pass = backend.requires_membership_pass or not backend.fully_expresses(
            filter_spec, exclusions
        )
        pipeline = PostQueryFilterPipeline.for_query(
            backend,
            config,
            filter_spec.properties,
            filter_spec.inclusions,
            exclusions,
            today=self.today_provider(),
            membership_pass=membership_pass,
        )
        survivors = pipeline.apply(records)
        logger.debug(
            "%s: %d raw records, %d after filters", backend.name, len(records), len(survivors)
        )
        return survivors


def effective_exclusions(filter_spec: FilterSpec, config: AppConfig) -> LocationFilters:
    """Configured exclusions plus the ones requested for this query."""
    configured = LocationFilters.model_validate(config.exclusions.model_dump())
    return configured.merged(filter_spec.exclusions)
