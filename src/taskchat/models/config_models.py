"""Configuration models for the task retrieval engine.

The configuration is read once per query and threaded explicitly into the
field resolver, the post-query filter pipeline and the sorter. Nothing in the
engine mutates it.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

BackendPreference = Literal["auto", "datacore", "dataview"]


class BackendConfig(BaseModel):
    """Task indexing backend configuration."""

    preference: BackendPreference = Field(default="auto")
    datacore_url: str | None = Field(
        default=None, description="Base URL of the Datacore query bridge"
    )
    dataview_url: str | None = Field(
        default=None, description="Base URL of the Dataview query bridge"
    )
    timeout: int = Field(default=30)
    ready_max_attempts: int = Field(default=20, ge=1)
    ready_interval_ms: int = Field(default=500, ge=0)


class ExclusionConfig(BaseModel):
    """Locations and tags that are always excluded from results."""

    folders: list[str] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)
    note_tags: list[str] = Field(default_factory=list)
    task_tags: list[str] = Field(default_factory=list)


class FieldKeys(BaseModel):
    """User-configured property names for task fields."""

    due: str = Field(default="due")
    created: str = Field(default="created")
    completed: str = Field(default="completion")
    priority: str = Field(default="priority")


class StatusCategory(BaseModel):
    """A user-configurable bucket of raw status symbols."""

    symbols: list[str] = Field(default_factory=list)
    aliases: list[str] = Field(default_factory=list)
    display_name: str = Field(default="")
    order: int | None = None

    @field_validator("aliases", mode="before")
    @classmethod
    def split_aliases(cls, v):
        """Accept aliases as a comma-separated string."""
        if isinstance(v, str):
            return [a.strip() for a in v.split(",") if a.strip()]
        return v


def _default_status_mapping() -> dict[str, StatusCategory]:
    return {
        "open": StatusCategory(
            symbols=[" ", ""],
            aliases=["todo", "incomplete", "new", "pending"],
            display_name="Open",
            order=1,
        ),
        "inProgress": StatusCategory(
            symbols=["/"],
            aliases=["in-progress", "wip", "doing", "started"],
            display_name="In progress",
            order=2,
        ),
        "completed": StatusCategory(
            symbols=["x", "X"],
            aliases=["done", "finished", "complete"],
            display_name="Completed",
            order=3,
        ),
        "cancelled": StatusCategory(
            symbols=["-"],
            aliases=["canceled", "abandoned", "dropped"],
            display_name="Cancelled",
            order=4,
        ),
        "other": StatusCategory(
            symbols=[],
            aliases=["misc"],
            display_name="Other",
            order=5,
        ),
    }


def _default_priority_mapping() -> dict[int, list[str]]:
    return {
        1: ["1", "high", "highest", "urgent"],
        2: ["2", "medium", "med"],
        3: ["3", "low"],
        4: ["4", "lowest", "none"],
    }


class SortConfig(BaseModel):
    """Default ordering used when the caller gives none."""

    criteria: list[str] = Field(default_factory=lambda: ["dueDate", "priority"])
    direction: Literal["asc", "desc"] = Field(default="asc")


class AppConfig(BaseModel):
    """Main taskchat configuration."""

    backend: BackendConfig = Field(default_factory=BackendConfig)
    exclusions: ExclusionConfig = Field(default_factory=ExclusionConfig)
    field_keys: FieldKeys = Field(default_factory=FieldKeys)
    status_mapping: dict[str, StatusCategory] = Field(
        default_factory=_default_status_mapping
    )
    default_status_category: str = Field(default="other")
    priority_mapping: dict[int, list[str]] = Field(
        default_factory=_default_priority_mapping
    )
    date_formats: list[str] = Field(
        default_factory=list, description="Extra strptime formats for dates"
    )
    hide_completed_tasks: bool = Field(default=False)
    sort: SortConfig = Field(default_factory=SortConfig)

    @field_validator("status_mapping")
    @classmethod
    def validate_status_mapping(cls, v: dict[str, StatusCategory]):
        if not v:
            raise ValueError("status_mapping must define at least one category")
        return v

    @property
    def lowest_priority(self) -> int:
        """Rank assigned to tasks without a priority when sorting."""
        if not self.priority_mapping:
            return 1
        return max(self.priority_mapping) + 1

    def fallback_category(self) -> str:
        """Category used for symbols that match no configured category."""
        if self.default_status_category in self.status_mapping:
            return self.default_status_category
        return next(iter(self.status_mapping))
