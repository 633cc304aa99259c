"""Dataview adapter - page sources with tasks nested under each page.

Dataview selects pages, not tasks. Its source language can express folders
and page tags but neither note names nor task-level tags, so the compiled
source is only a pre-filter and every record is re-checked against the full
membership rules after the query. Tasks are flattened out of each page's
``file.tasks`` and carry the page's tags with them.

Example compiled source::

    -"Archive" and ("Work" or #project)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from taskchat.models import (
    AppConfig,
    FilterSpec,
    LocationFilters,
    RawRecord,
    TaskField,
)
from taskchat.repositories.repository import TaskBackend
from taskchat.services.field_resolver import FieldResolver
from taskchat.services.query_compiler import QueryCompiler, QueryGrammar
from taskchat.utils.task_helpers import unique_tags

logger = logging.getLogger(__name__)

NATIVE_FIELDS: dict[TaskField, tuple[str, ...]] = {
    TaskField.STATUS: ("status", "symbol"),
    TaskField.DUE: ("due",),
    TaskField.CREATED: ("created",),
    TaskField.COMPLETED: ("completion",),
}
INLINE_BAGS = ("fields",)


class DataviewGrammar(QueryGrammar):
    """Dataview page-source predicates."""

    def all_tasks(self) -> str:
        return ""

    def folder(self, folder: str) -> str:
        return self.quote(folder)

    def note(self, note: str) -> None:
        return None

    def note_tag(self, tag: str) -> str:
        return f"#{tag}"

    def task_tag(self, tag: str) -> None:
        return None

    def negate(self, predicate: str) -> str:
        return f"-{predicate}"

    def group(self, predicates: Sequence[str]) -> str:
        if len(predicates) == 1:
            return predicates[0]
        return super().group(predicates)


def _file_info(page: dict[str, Any]) -> dict[str, Any]:
    file_info = page.get("file")
    return file_info if isinstance(file_info, dict) else {}


class DataviewBackend(TaskBackend):
    """Task backend for Dataview."""

    name = "dataview"
    requires_membership_pass = True

    def __init__(self, client):
        super().__init__(client)
        self.compiler = QueryCompiler(DataviewGrammar())

    def compile_query(
        self, filter_spec: FilterSpec, exclusions: LocationFilters | None = None
    ) -> str:
        return self.compiler.compile(filter_spec, exclusions)

    def fully_expresses(
        self, filter_spec: FilterSpec, exclusions: LocationFilters | None = None
    ) -> bool:
        return self.compiler.fully_expresses(filter_spec, exclusions)

    async def execute_query(self, query: str) -> list[RawRecord]:
        logger.debug("dataview source: %r", query)
        pages = await self.client.query_pages(query)
        records: list[RawRecord] = []
        for page in pages:
            if not isinstance(page, dict):
                continue
            file_info = _file_info(page)
            page_path = file_info.get("path") or page.get("path")
            page_tags = unique_tags(file_info.get("tags") or page.get("tags"))
            # file.tasks already lists subtasks; children are not walked again
            for task in file_info.get("tasks") or []:
                if not isinstance(task, dict):
                    continue
                if not task.get("path") and page_path:
                    task = {**task, "path": page_path}
                records.append(RawRecord(task, page_tags=page_tags))
        logger.debug("dataview returned %d records from %d pages", len(records), len(pages))
        return records

    async def execute_page_query(self) -> dict[str, tuple[str, ...]]:
        pages = await self.client.query_pages("")
        page_tags: dict[str, tuple[str, ...]] = {}
        for page in pages:
            if not isinstance(page, dict):
                continue
            file_info = _file_info(page)
            path = file_info.get("path") or page.get("path")
            if path:
                page_tags[path] = unique_tags(file_info.get("tags") or page.get("tags"))
        return page_tags

    def is_valid_record(self, record: RawRecord) -> bool:
        is_task = record.get("task")
        if isinstance(is_task, bool):
            return is_task
        return record.get("status") is not None or record.get("symbol") is not None

    def extract_field(
        self, record: RawRecord, field: TaskField, config: AppConfig
    ) -> Any | None:
        resolver = FieldResolver(config, NATIVE_FIELDS, INLINE_BAGS)
        return resolver.resolve(record.data, field, self.record_text(record))

    def record_text(self, record: RawRecord) -> str:
        text = record.get("text")
        if text is None:
            text = record.get("visual", "")
        return text if isinstance(text, str) else str(text)

    def record_path(self, record: RawRecord) -> str:
        path = record.get("path")
        if isinstance(path, dict):
            path = path.get("path")
        return path if isinstance(path, str) else ""

    def record_line(self, record: RawRecord) -> int:
        line = record.get("line", 0)
        try:
            return int(line)
        except (TypeError, ValueError):
            return 0

    def record_tags(self, record: RawRecord) -> tuple[str, ...]:
        return unique_tags(record.get("tags"))
