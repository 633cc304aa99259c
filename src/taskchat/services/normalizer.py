"""Conversion of raw backend records into Task entities."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from taskchat.models import AppConfig, RawRecord, Task, TaskField
from taskchat.repositories.repository import TaskBackend
from taskchat.services.status_service import StatusService
from taskchat.utils.task_helpers import folder_of

logger = logging.getLogger(__name__)

ID_TEXT_PREFIX = 20


def make_task_id(prefix: str, path: str, line: int, text: str, index: int) -> str:
    """Build a task id unique within one result, even for empty text."""
    return f"{prefix}-{path}-{line}-{text[:ID_TEXT_PREFIX]}-{index}"


class ResultNormalizer:
    """Build Task entities from one backend's raw records."""

    def __init__(self, backend: TaskBackend, config: AppConfig):
        self.backend = backend
        self.config = config
        self.status_service = StatusService(config)

    def normalize(
        self,
        record: RawRecord,
        index: int,
        page_tags: Mapping[str, Sequence[str]] | None = None,
    ) -> Task | None:
        """Convert one raw record; returns None for records that are not tasks."""
        backend = self.backend
        if not backend.is_valid_record(record):
            return None

        path = backend.record_path(record)
        if not path:
            logger.debug("skipping %s record without a path", backend.name)
            return None

        text = backend.record_text(record)
        line = backend.record_line(record)
        status = backend.extract_field(record, TaskField.STATUS, self.config) or ""

        if record.page_tags is not None:
            note_tags = record.page_tags
        else:
            note_tags = tuple((page_tags or {}).get(path, ()))

        return Task(
            id=make_task_id(backend.name, path, line, text, index),
            text=text,
            original_text=text,
            status=status,
            status_category=self.status_service.category_for(status),
            created_date=backend.extract_field(record, TaskField.CREATED, self.config),
            due_date=backend.extract_field(record, TaskField.DUE, self.config),
            completed_date=backend.extract_field(
                record, TaskField.COMPLETED, self.config
            ),
            priority=backend.extract_field(record, TaskField.PRIORITY, self.config),
            tags=backend.record_tags(record),
            note_tags=note_tags,
            source_path=path,
            folder=folder_of(path),
            line_number=line,
        )

    def normalize_all(
        self,
        records: Sequence[RawRecord],
        page_tags: Mapping[str, Sequence[str]] | None = None,
    ) -> list[Task]:
        """Normalize records in order, skipping the ones that are not tasks.

        The ordinal part of each id counts produced tasks, so ids stay dense.
        """
        tasks: list[Task] = []
        skipped = 0
        for record in records:
            task = self.normalize(record, len(tasks), page_tags)
            if task is None:
                skipped += 1
                continue
            tasks.append(task)
        if skipped:
            logger.debug("skipped %d invalid %s records", skipped, self.backend.name)
        return tasks
