"""Multi-criteria task ordering."""

from __future__ import annotations

import locale
import unicodedata
from collections.abc import Callable, Sequence
from functools import cmp_to_key

from taskchat.models import AppConfig, SortSpec, Task
from taskchat.services.status_service import StatusService

Comparator = Callable[[Task, Task], int]


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def compare_dates(a: str | None, b: str | None) -> int:
    """Ascending ISO date order; a missing date sorts after any present one."""
    if a is None and b is None:
        return 0
    if a is None:
        return 1
    if b is None:
        return -1
    return _cmp(a, b)


def fold_text(text: str) -> str:
    """Collation key with accents and case removed ('Éclair' -> 'eclair')."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def compare_text(a: str, b: str) -> int:
    """Locale-aware comparison, ignoring accents and case first."""
    result = locale.strcoll(fold_text(a), fold_text(b))
    if result == 0:
        result = locale.strcoll(a, b)
    return _cmp(result, 0)


class TaskSortService:
    """Orders tasks by an ordered list of tie-breaking criteria."""

    def __init__(self, config: AppConfig):
        self.config = config
        self.status_service = StatusService(config)

    def sort(self, tasks: Sequence[Task], sort_spec: SortSpec | None) -> list[Task]:
        """Return a new, stably sorted list.

        An empty or relevance-only criteria list keeps the input order.
        """
        if sort_spec is None or not sort_spec.criteria:
            return list(tasks)
        if all(c == "relevance" for c in sort_spec.criteria):
            return list(tasks)

        comparators = [self._comparator(c, sort_spec) for c in sort_spec.criteria]

        def compare(a: Task, b: Task) -> int:
            for comparator in comparators:
                result = comparator(a, b)
                if result:
                    return result
            return 0

        return sorted(tasks, key=cmp_to_key(compare))

    def _comparator(self, criterion: str, sort_spec: SortSpec) -> Comparator:
        sign = -1 if sort_spec.direction == "desc" else 1

        if criterion == "relevance":
            scores = sort_spec.relevance_scores or {}
            return lambda a, b: _cmp(scores.get(b.id, 0.0), scores.get(a.id, 0.0))

        if criterion == "dueDate":
            return lambda a, b: sign * compare_dates(a.due_date, b.due_date)

        if criterion == "created":
            return lambda a, b: sign * compare_dates(a.created_date, b.created_date)

        if criterion == "priority":
            missing = self.config.lowest_priority

            def rank(task: Task) -> int:
                return task.priority if task.priority is not None else missing

            return lambda a, b: sign * _cmp(rank(a), rank(b))

        if criterion == "alphabetical":
            return lambda a, b: sign * compare_text(a.text, b.text)

        if criterion == "status":
            order = self.status_service.order_of
            return lambda a, b: sign * _cmp(
                order(a.status_category), order(b.status_category)
            )

        raise ValueError(f"Unknown sort criterion: {criterion}")
