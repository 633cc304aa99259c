"""Data models for taskchat."""

from .config_models import (
    AppConfig,
    BackendConfig,
    ExclusionConfig,
    FieldKeys,
    SortConfig,
    StatusCategory,
)
from .core import (
    DateRange,
    FilterSpec,
    LocationFilters,
    PropertyFilters,
    RawRecord,
    SortSpec,
    Task,
    TaskField,
)

__all__ = [
    "AppConfig",
    "BackendConfig",
    "DateRange",
    "ExclusionConfig",
    "FieldKeys",
    "FilterSpec",
    "LocationFilters",
    "PropertyFilters",
    "RawRecord",
    "SortConfig",
    "SortSpec",
    "StatusCategory",
    "Task",
    "TaskField",
]
