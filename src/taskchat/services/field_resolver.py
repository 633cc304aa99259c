"""Multi-strategy lookup of logical task fields in raw backend records.

Each logical field is resolved by walking an ordered list of strategies and
taking the first value that survives type coercion:

1. backend-native typed property
2. direct property named by the configured key or a standard alias
3. the same names inside an inline-field bag
4. emoji shorthand in the text (date fields only)
5. ``[key::value]`` inline fields in the text

A value that cannot be coerced (bad date, unknown priority word) counts as
absent and the walk continues. Priority falls back to the priority emoji
table when nothing structured is found.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from functools import lru_cache
from typing import Any

from taskchat.models import AppConfig, TaskField
from taskchat.utils.dates import to_iso_date

DATE_FIELD_ALIASES: dict[TaskField, tuple[str, ...]] = {
    TaskField.DUE: ("due", "dueDate", "deadline"),
    TaskField.CREATED: ("created", "createdDate"),
    TaskField.COMPLETED: ("completion", "completed", "completedDate"),
}
PRIORITY_ALIASES: tuple[str, ...] = ("priority", "p", "pri", "prio")
STATUS_ALIASES: tuple[str, ...] = ("status", "symbol")

EMOJI_DATE_PATTERNS: dict[TaskField, re.Pattern[str]] = {
    TaskField.DUE: re.compile(r"(?:📅|🗓️?)\s*(\d{4}-\d{2}-\d{2})"),
    TaskField.COMPLETED: re.compile(r"✅\s*(\d{4}-\d{2}-\d{2})"),
    TaskField.CREATED: re.compile(r"➕\s*(\d{4}-\d{2}-\d{2})"),
}

# Checked in this order; the first marker present in the text wins.
PRIORITY_EMOJI: tuple[tuple[str, int], ...] = (
    ("⏫", 1),
    ("🔼", 2),
    ("🔽", 3),
    ("⏬", 3),
)

_MISSING = object()


@lru_cache(maxsize=256)
def _inline_field_pattern(key: str) -> re.Pattern[str]:
    return re.compile(rf"\[{re.escape(key)}::([^\]]+)\]", re.IGNORECASE)


def _unwrap(value: Any) -> Any:
    # Some backends wrap inline field values as {"key", "raw", "value"}.
    if isinstance(value, Mapping) and "value" in value:
        return value["value"]
    return value


def map_priority(value: Any, config: AppConfig) -> int | None:
    """Map a raw priority value onto the configured priority levels."""
    if value is None or isinstance(value, (bool, Mapping, list, tuple, set)):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip().lower()
    if not text:
        return None
    for level, names in sorted(config.priority_mapping.items()):
        if text in (name.strip().lower() for name in names):
            return level
    return None


def priority_from_emoji(text: str) -> int | None:
    for marker, level in PRIORITY_EMOJI:
        if marker in text:
            return level
    return None


Strategy = Callable[[Mapping[str, Any], TaskField, str], Any]


class FieldResolver:
    """Resolve logical fields for one backend's record shape.

    Args:
        config: Engine configuration (custom keys, priority mapping, formats)
        native_keys: Backend-native property names per logical field
        inline_bags: Record keys holding inline-field dictionaries
    """

    def __init__(
        self,
        config: AppConfig,
        native_keys: Mapping[TaskField, Sequence[str]],
        inline_bags: Sequence[str] = ("fields",),
    ):
        self.config = config
        self.native_keys = native_keys
        self.inline_bags = tuple(inline_bags)
        self._strategies: tuple[Strategy, ...] = (
            self._from_native,
            self._from_property,
            self._from_inline_bag,
            self._from_emoji,
            self._from_text_inline_field,
        )

    def field_names(self, field: TaskField) -> tuple[str, ...]:
        """Configured key first, then the standard aliases, without repeats."""
        keys = self.config.field_keys
        if field == TaskField.PRIORITY:
            names: tuple[str, ...] = (keys.priority, *PRIORITY_ALIASES)
        elif field == TaskField.STATUS:
            names = STATUS_ALIASES
        else:
            custom = {
                TaskField.DUE: keys.due,
                TaskField.CREATED: keys.created,
                TaskField.COMPLETED: keys.completed,
            }[field]
            names = (custom, *DATE_FIELD_ALIASES[field])
        return tuple(dict.fromkeys(n for n in names if n))

    def resolve(self, record: Mapping[str, Any], field: TaskField, text: str = "") -> Any:
        """Return the typed value of *field*, or None when absent."""
        for strategy in self._strategies:
            value = strategy(record, field, text)
            if value is not _MISSING:
                return value
        if field == TaskField.PRIORITY:
            return priority_from_emoji(text)
        return None

    # ------------------------------------------------------------------
    # Strategies: each returns a coerced value or _MISSING
    # ------------------------------------------------------------------

    def _first(self, candidates, field: TaskField) -> Any:
        for raw in candidates:
            value = self._coerce(_unwrap(raw), field)
            if value is not None:
                return value
        return _MISSING

    def _from_native(self, record, field, text):
        keys = self.native_keys.get(field, ())
        return self._first((record.get(k) for k in keys), field)

    def _from_property(self, record, field, text):
        return self._first((record.get(n) for n in self.field_names(field)), field)

    def _from_inline_bag(self, record, field, text):
        names = self.field_names(field)
        candidates = []
        for bag_key in self.inline_bags:
            bag = record.get(bag_key)
            if isinstance(bag, Mapping):
                candidates.extend(bag.get(n) for n in names)
        return self._first(candidates, field)

    def _from_emoji(self, record, field, text):
        pattern = EMOJI_DATE_PATTERNS.get(field)
        if pattern is None or not text:
            return _MISSING
        match = pattern.search(text)
        return self._first([match.group(1)] if match else [], field)

    def _from_text_inline_field(self, record, field, text):
        if not text or "::" not in text:
            return _MISSING
        candidates = []
        for name in self.field_names(field):
            match = _inline_field_pattern(name).search(text)
            if match:
                candidates.append(match.group(1).strip())
        return self._first(candidates, field)

    def _coerce(self, value: Any, field: TaskField) -> Any:
        if value is None:
            return None
        if field.is_date:
            return to_iso_date(value, self.config.date_formats)
        if field == TaskField.PRIORITY:
            return map_priority(value, self.config)
        if isinstance(value, str):
            return value
        return None
