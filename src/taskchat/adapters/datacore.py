"""Datacore adapter - the faster backend with a task-level query language.

Datacore queries select task objects directly (``@task``) and can express
every well-formed location clause, so membership is usually enforced by the
query itself.
Records are flat objects whose built-in properties carry a ``$`` prefix.
Document tags are not on task records and come from a separate ``@page``
query.

Example compiled query::

    @task and !path("Archive") and (path("Work") or childof(@page and #project))
"""

from __future__ import annotations

import logging
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
from taskchat.utils.task_helpers import (
    NOTE_EXTENSION,
    strip_note_extension,
    unique_tags,
)

logger = logging.getLogger(__name__)

NATIVE_FIELDS: dict[TaskField, tuple[str, ...]] = {
    TaskField.STATUS: ("$status",),
    TaskField.DUE: ("$due",),
    TaskField.CREATED: ("$created",),
    TaskField.COMPLETED: ("$completion",),
    TaskField.PRIORITY: ("$priority",),
}
INLINE_BAGS = ("$infields", "fields")


class DatacoreGrammar(QueryGrammar):
    """Datacore query language predicates."""

    def all_tasks(self) -> str:
        return "@task"

    def folder(self, folder: str) -> str:
        return f"path({self.quote(folder)})"

    def note(self, note: str) -> str:
        if "/" in note:
            path = strip_note_extension(note) + NOTE_EXTENSION
            return f"childof(@page and $path = {self.quote(path)})"
        return f"childof(@page and $name = {self.quote(strip_note_extension(note))})"

    def note_tag(self, tag: str) -> str:
        return f"childof(@page and #{tag})"

    def task_tag(self, tag: str) -> str:
        return f"#{tag}"


class DatacoreBackend(TaskBackend):
    """Task backend for Datacore."""

    name = "datacore"
    needs_page_tags = True

    def __init__(self, client):
        super().__init__(client)
        self.compiler = QueryCompiler(DatacoreGrammar())

    def compile_query(
        self, filter_spec: FilterSpec, exclusions: LocationFilters | None = None
    ) -> str:
        return self.compiler.compile(filter_spec, exclusions)

    def fully_expresses(
        self, filter_spec: FilterSpec, exclusions: LocationFilters | None = None
    ) -> bool:
        return self.compiler.fully_expresses(filter_spec, exclusions)

    async def execute_query(self, query: str) -> list[RawRecord]:
        logger.debug("datacore query: %s", query)
        results = await self.client.query(query)
        records = [RawRecord(r) for r in results if isinstance(r, dict)]
        logger.debug("datacore returned %d records", len(records))
        return records

    async def execute_page_query(self) -> dict[str, tuple[str, ...]]:
        pages = await self.client.query("@page")
        page_tags: dict[str, tuple[str, ...]] = {}
        for page in pages:
            if not isinstance(page, dict):
                continue
            path = page.get("$path") or page.get("$file")
            if path:
                page_tags[path] = unique_tags(page.get("$tags"))
        return page_tags

    def is_valid_record(self, record: RawRecord) -> bool:
        record_type = record.get("$type")
        if record_type is not None:
            return record_type == "task"
        if isinstance(record.get("task"), bool):
            return record.get("task")
        return record.get("$status") is not None or record.get("status") is not None

    def extract_field(
        self, record: RawRecord, field: TaskField, config: AppConfig
    ) -> Any | None:
        resolver = FieldResolver(config, NATIVE_FIELDS, INLINE_BAGS)
        return resolver.resolve(record.data, field, self.record_text(record))

    def record_text(self, record: RawRecord) -> str:
        text = record.get("$text")
        if text is None:
            text = record.get("text", "")
        return text if isinstance(text, str) else str(text)

    def record_path(self, record: RawRecord) -> str:
        path = record.get("$file") or record.get("$path") or record.get("path")
        return path if isinstance(path, str) else ""

    def record_line(self, record: RawRecord) -> int:
        line = record.get("$line", record.get("line", 0))
        try:
            return int(line)
        except (TypeError, ValueError):
            return 0

    def record_tags(self, record: RawRecord) -> tuple[str, ...]:
        tags = record.get("$tags")
        if tags is None:
            tags = record.get("tags")
        return unique_tags(tags)
