"""Location and tag membership checks shared by every backend.

Backends that cannot express a clause in their own query grammar run the
records through MembershipFilter after the query, so membership is the same
whichever backend answered.
"""

from __future__ import annotations

from collections.abc import Iterable

from taskchat.models import LocationFilters
from taskchat.utils.task_helpers import (
    has_tag,
    normalize_folder,
    normalize_tag,
    path_in_folder,
    path_is_note,
)


def matches_any(
    clauses: LocationFilters,
    path: str,
    task_tags: Iterable[str],
    note_tags: Iterable[str],
) -> bool:
    """True if any single clause, of any category, matches the record."""
    task_tags = tuple(task_tags)
    note_tags = tuple(note_tags)
    return (
        any(path_in_folder(path, f) for f in clauses.folders)
        or any(path_is_note(path, n) for n in clauses.notes)
        or any(has_tag(note_tags, t) for t in clauses.note_tags)
        or any(has_tag(task_tags, t) for t in clauses.task_tags)
    )


def drop_blank(clauses: LocationFilters) -> LocationFilters:
    """Remove entries that are empty once normalized."""
    return LocationFilters(
        folders=[f for f in clauses.folders if normalize_folder(f)],
        notes=[n for n in clauses.notes if n.strip().strip("/")],
        note_tags=[t for t in clauses.note_tags if normalize_tag(t)],
        task_tags=[t for t in clauses.task_tags if normalize_tag(t)],
    )


class MembershipFilter:
    """Inclusion OR across all categories; any exclusion removes the record."""

    def __init__(self, inclusions: LocationFilters, exclusions: LocationFilters):
        self.inclusions = drop_blank(inclusions)
        self.exclusions = drop_blank(exclusions)

    def is_included(
        self, path: str, task_tags: Iterable[str], note_tags: Iterable[str]
    ) -> bool:
        if self.inclusions.is_empty():
            return True
        return matches_any(self.inclusions, path, task_tags, note_tags)

    def is_excluded(
        self, path: str, task_tags: Iterable[str], note_tags: Iterable[str]
    ) -> bool:
        return matches_any(self.exclusions, path, task_tags, note_tags)

    def accepts(
        self, path: str, task_tags: Iterable[str], note_tags: Iterable[str]
    ) -> bool:
        task_tags = tuple(task_tags)
        note_tags = tuple(note_tags)
        if self.is_excluded(path, task_tags, note_tags):
            return False
        return self.is_included(path, task_tags, note_tags)
