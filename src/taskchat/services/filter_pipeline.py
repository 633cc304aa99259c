"""Post-query property filters evaluated against raw records.

Priority, status and due-date predicates cannot be expressed reliably in
every backend grammar, so they run after the query. All predicates are
combined with AND.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import date

from taskchat.models import (
    AppConfig,
    LocationFilters,
    PropertyFilters,
    RawRecord,
    TaskField,
)
from taskchat.repositories.repository import TaskBackend
from taskchat.services.membership import MembershipFilter
from taskchat.services.status_service import StatusService
from taskchat.utils.dates import DuePredicate, due_bucket, parse_date, resolve_range_bound

logger = logging.getLogger(__name__)

RecordPredicate = Callable[[RawRecord], bool]


class PostQueryFilterPipeline:
    """Ordered list of record predicates built once per query.

    Args:
        backend: Backend that produced the records (for field access)
        config: Engine configuration
        properties: Property filters of the FilterSpec
        today: Reference day for due-date buckets
        membership: Location filter to re-check after the query, if any
    """

    def __init__(
        self,
        backend: TaskBackend,
        config: AppConfig,
        properties: PropertyFilters | None = None,
        *,
        today: date,
        membership: MembershipFilter | None = None,
    ):
        self.backend = backend
        self.config = config
        self.properties = properties or PropertyFilters()
        self.today = today
        self.membership = membership
        self.status_service = StatusService(config)
        self.predicates: list[RecordPredicate] = self._build()

    @classmethod
    def for_query(
        cls,
        backend: TaskBackend,
        config: AppConfig,
        properties: PropertyFilters,
        inclusions: LocationFilters,
        exclusions: LocationFilters,
        *,
        today: date,
        membership_pass: bool,
    ) -> PostQueryFilterPipeline:
        membership = MembershipFilter(inclusions, exclusions) if membership_pass else None
        return cls(backend, config, properties, today=today, membership=membership)

    def accepts(self, record: RawRecord) -> bool:
        return all(predicate(record) for predicate in self.predicates)

    def apply(self, records: Iterable[RawRecord]) -> list[RawRecord]:
        return [record for record in records if self.accepts(record)]

    # ------------------------------------------------------------------
    # Predicate construction
    # ------------------------------------------------------------------

    def _build(self) -> list[RecordPredicate]:
        predicates: list[RecordPredicate] = [self.backend.is_valid_record, self._has_path]
        if self.config.hide_completed_tasks:
            predicates.append(self._not_completed)

        props = self.properties
        if props.priority is not None:
            predicates.append(self._priority_predicate(props.priority))
        if props.status_values:
            predicates.append(self._status_predicate(props.status_values))
        if props.due_date is not None:
            predicate = self._due_predicate(props.due_date)
            if predicate is not None:
                predicates.append(predicate)
        if props.due_date_range is not None:
            predicates.append(
                self._due_range_predicate(
                    props.due_date_range.start, props.due_date_range.end
                )
            )
        if self.membership is not None:
            predicates.append(self._membership_predicate)
        return predicates

    def _field(self, record: RawRecord, field: TaskField):
        return self.backend.extract_field(record, field, self.config)

    def _has_path(self, record: RawRecord) -> bool:
        return bool(self.backend.record_path(record))

    def _not_completed(self, record: RawRecord) -> bool:
        status = self._field(record, TaskField.STATUS)
        return self.status_service.category_for(status) != "completed"

    def _priority_predicate(self, target) -> RecordPredicate:
        if target in ("all", "any"):
            return lambda r: self._field(r, TaskField.PRIORITY) is not None
        if target == "none":
            return lambda r: self._field(r, TaskField.PRIORITY) is None
        wanted = set(target) if isinstance(target, list) else {target}
        return lambda r: self._field(r, TaskField.PRIORITY) in wanted

    def _status_predicate(self, tokens: list[str]) -> RecordPredicate:
        def check(record: RawRecord) -> bool:
            symbol = self._field(record, TaskField.STATUS) or ""
            return any(self.status_service.matches(symbol, t) for t in tokens)

        return check

    def _due_predicate(self, value: str | list[str]) -> RecordPredicate | None:
        tokens = [value] if isinstance(value, str) else list(value)
        buckets: list[DuePredicate] = []
        for token in tokens:
            bucket = due_bucket(token, self.today, self.config.date_formats)
            if bucket is None:
                logger.warning("ignoring unrecognized due date filter %r", token)
                continue
            buckets.append(bucket)
        if not tokens:
            return None

        def check(record: RawRecord) -> bool:
            due = parse_date(self._field(record, TaskField.DUE))
            return any(bucket(due) for bucket in buckets)

        return check

    def _due_range_predicate(self, start: str | None, end: str | None) -> RecordPredicate:
        formats = self.config.date_formats
        low = resolve_range_bound(start, self.today, formats)
        high = resolve_range_bound(end, self.today, formats)
        if start and low is None:
            logger.warning("ignoring unrecognized range start %r", start)
        if end and high is None:
            logger.warning("ignoring unrecognized range end %r", end)

        def check(record: RawRecord) -> bool:
            due = parse_date(self._field(record, TaskField.DUE))
            if due is None:
                return False
            if low is not None and due < low:
                return False
            return high is None or due <= high

        return check

    def _membership_predicate(self, record: RawRecord) -> bool:
        backend = self.backend
        return self.membership.accepts(
            backend.record_path(record),
            backend.record_tags(record),
            record.page_tags or (),
        )
