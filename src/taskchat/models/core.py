"""Task retrieval data models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

PrioritySentinel = Literal["all", "any", "none"]
SortCriterion = Literal[
    "relevance", "dueDate", "priority", "created", "alphabetical", "status"
]
SortDirection = Literal["asc", "desc"]


class TaskField(str, Enum):
    """Logical task fields resolvable from a raw backend record."""

    STATUS = "status"
    PRIORITY = "priority"
    DUE = "due"
    CREATED = "created"
    COMPLETED = "completed"

    @property
    def is_date(self) -> bool:
        return self in (TaskField.DUE, TaskField.CREATED, TaskField.COMPLETED)


class Task(BaseModel):
    """Canonical task entity, immutable once produced.

    Attributes:
        id: Identifier unique within one query result
        text: Raw task content
        original_text: Same as text, kept separately for future transforms
        status: Raw status symbol (may be empty)
        status_category: Configured category derived from status
        created_date: ISO date or None
        due_date: ISO date or None
        completed_date: ISO date or None
        priority: Ordinal priority (lower is more important) or None
        tags: Task-level tags as written on the task line
        note_tags: Tags of the containing document
        source_path: Path of the containing document
        folder: source_path truncated at the last separator
        line_number: Line of the task within the document
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    text: str
    original_text: str
    status: str = ""
    status_category: str
    created_date: str | None = None
    due_date: str | None = None
    completed_date: str | None = None
    priority: int | None = None
    tags: tuple[str, ...] = ()
    note_tags: tuple[str, ...] = ()
    source_path: str = Field(..., min_length=1)
    folder: str = ""
    line_number: int = 0

    @field_validator("created_date", "due_date", "completed_date")
    @classmethod
    def empty_date_is_none(cls, v: str | None) -> str | None:
        return v or None


class LocationFilters(BaseModel):
    """Location and tag clauses of a FilterSpec."""

    folders: list[str] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)
    note_tags: list[str] = Field(default_factory=list)
    task_tags: list[str] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.folders or self.notes or self.note_tags or self.task_tags)

    def merged(self, other: LocationFilters) -> LocationFilters:
        """Return the union of both clause sets, preserving first-seen order."""

        def _union(a: list[str], b: list[str]) -> list[str]:
            return list(dict.fromkeys([*a, *b]))

        return LocationFilters(
            folders=_union(self.folders, other.folders),
            notes=_union(self.notes, other.notes),
            note_tags=_union(self.note_tags, other.note_tags),
            task_tags=_union(self.task_tags, other.task_tags),
        )


class DateRange(BaseModel):
    """Inclusive due-date range; each bound is a keyword or a date."""

    start: str | None = None
    end: str | None = None


class PropertyFilters(BaseModel):
    """Task property filters evaluated after the backend query."""

    priority: int | list[int] | PrioritySentinel | None = None
    due_date: str | list[str] | None = None
    due_date_range: DateRange | None = None
    status_values: list[str] | None = None

    @field_validator("priority", mode="before")
    @classmethod
    def coerce_priority(cls, v):
        if isinstance(v, str) and v.strip().isdigit():
            return int(v)
        if isinstance(v, str):
            return v.strip().lower()
        return v


class FilterSpec(BaseModel):
    """Structured inclusion/exclusion/property filter for one query.

    Inclusions across all four categories form a single OR. Any matching
    exclusion removes a record, even if it also matches an inclusion.
    """

    inclusions: LocationFilters = Field(default_factory=LocationFilters)
    exclusions: LocationFilters = Field(default_factory=LocationFilters)
    properties: PropertyFilters = Field(default_factory=PropertyFilters)


class SortSpec(BaseModel):
    """Ordered tie-break criteria for the final task list."""

    criteria: list[SortCriterion] = Field(default_factory=list)
    direction: SortDirection = "asc"
    relevance_scores: dict[str, float] | None = None


@dataclass(frozen=True)
class RawRecord:
    """One raw record returned by a backend.

    ``page_tags`` holds the containing document's tags when the backend
    delivers them with the record, and is None when they still need to be
    resolved through a page query.
    """

    data: Mapping[str, Any]
    page_tags: tuple[str, ...] | None = field(default=None)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)
