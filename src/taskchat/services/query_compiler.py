"""Grammar-agnostic compilation of FilterSpec location clauses.

A compiled query is the grammar's "all tasks" predicate, followed by one
negated predicate per exclusion (joined with ``and``), followed by one
parenthesized ``or`` group holding every inclusion predicate. The group is
left out when there are no inclusions.

Grammars return None for predicates they cannot express. An inexpressible
exclusion is skipped and an inexpressible inclusion drops the whole group;
either way the backend must re-check membership after the query.
Tags that are not valid tag text are never spliced into a query; they are
treated as inexpressible.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from taskchat.models import FilterSpec, LocationFilters
from taskchat.utils.task_helpers import is_valid_tag, normalize_folder, normalize_tag


class QueryGrammar(ABC):
    """Predicate builders of one backend query language."""

    and_op = " and "
    or_op = " or "

    @staticmethod
    def quote(value: str) -> str:
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'

    @abstractmethod
    def all_tasks(self) -> str:
        """Predicate selecting every task; may be empty."""

    @abstractmethod
    def folder(self, folder: str) -> str | None: ...

    @abstractmethod
    def note(self, note: str) -> str | None: ...

    @abstractmethod
    def note_tag(self, tag: str) -> str | None: ...

    @abstractmethod
    def task_tag(self, tag: str) -> str | None: ...

    def negate(self, predicate: str) -> str:
        return f"!{predicate}"

    def group(self, predicates: Sequence[str]) -> str:
        return "(" + self.or_op.join(predicates) + ")"


class QueryCompiler:
    """Compile FilterSpec location clauses with a given grammar."""

    def __init__(self, grammar: QueryGrammar):
        self.grammar = grammar

    def compile(
        self, filter_spec: FilterSpec, exclusions: LocationFilters | None = None
    ) -> str:
        if exclusions is None:
            exclusions = filter_spec.exclusions

        parts = [self.grammar.all_tasks()]
        parts.extend(
            self.grammar.negate(p)
            for p in self._predicates(exclusions)
            if p is not None
        )

        inclusions = self._predicates(filter_spec.inclusions)
        if inclusions and None not in inclusions:
            parts.append(self.grammar.group(inclusions))

        return self.grammar.and_op.join(p for p in parts if p)

    def fully_expresses(
        self, filter_spec: FilterSpec, exclusions: LocationFilters | None = None
    ) -> bool:
        """Whether the compiled query enforces every clause by itself."""
        if exclusions is None:
            exclusions = filter_spec.exclusions
        predicates = [
            *self._predicates(exclusions),
            *self._predicates(filter_spec.inclusions),
        ]
        return None not in predicates

    def _predicates(self, clauses: LocationFilters) -> list[str | None]:
        g = self.grammar
        predicates: list[str | None] = []
        for folder in clauses.folders:
            folder = normalize_folder(folder)
            if folder:
                predicates.append(g.folder(folder))
        for note in clauses.notes:
            note = note.strip().strip("/")
            if note:
                predicates.append(g.note(note))
        for tag in clauses.note_tags:
            tag = normalize_tag(tag)
            if tag:
                predicates.append(g.note_tag(tag) if is_valid_tag(tag) else None)
        for tag in clauses.task_tags:
            tag = normalize_tag(tag)
            if tag:
                predicates.append(g.task_tag(tag) if is_valid_tag(tag) else None)
        return predicates
