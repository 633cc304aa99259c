"""Calendar-day helpers for due-date buckets and range keywords.

All comparisons are made on calendar days, never on timestamps. "Today" is
always passed in by the caller so results are deterministic.
"""

from __future__ import annotations

import calendar
import re
from collections.abc import Callable, Iterable
from datetime import date, datetime, timedelta
from typing import Any

_ISO_PREFIX = re.compile(r"^(\d{4}-\d{2}-\d{2})(?:$|[T ])")
_RELATIVE = re.compile(r"^([+-]?)(\d+)([dwmy])$")

DuePredicate = Callable[[date | None], bool]


def parse_date(value: Any, formats: Iterable[str] = ()) -> date | None:
    """Parse *value* into a calendar date, or None when it is not one.

    Accepts date/datetime objects, ISO strings (optionally with a time part)
    and strings in any of the extra strptime *formats*.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    match = _ISO_PREFIX.match(text)
    if match:
        try:
            return date.fromisoformat(match.group(1))
        except ValueError:
            return None

    for fmt in formats:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def to_iso_date(value: Any, formats: Iterable[str] = ()) -> str | None:
    """Normalize *value* to ``YYYY-MM-DD``; invalid input yields None."""
    parsed = parse_date(value, formats)
    return parsed.isoformat() if parsed else None


def add_months(day: date, months: int) -> date:
    """Shift *day* by whole months, clamping to the end of shorter months."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def parse_relative(token: str, today: date) -> date | None:
    """Resolve offsets such as ``3d``, ``+2w``, ``-1m`` or ``1y``."""
    match = _RELATIVE.match(token.strip().lower())
    if not match:
        return None
    sign, amount, unit = match.groups()
    n = int(amount) * (-1 if sign == "-" else 1)
    if unit == "d":
        return today + timedelta(days=n)
    if unit == "w":
        return today + timedelta(weeks=n)
    if unit == "m":
        return add_months(today, n)
    return add_months(today, 12 * n)


def week_start(day: date) -> date:
    """Monday of the ISO week containing *day*."""
    return day - timedelta(days=day.weekday())


def month_end(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def _range_keywords(today: date) -> dict[str, date]:
    monday = week_start(today)
    first = today.replace(day=1)
    return {
        "today": today,
        "tomorrow": today + timedelta(days=1),
        "yesterday": today - timedelta(days=1),
        "week-start": monday,
        "week-end": monday + timedelta(days=6),
        "next-week-start": monday + timedelta(days=7),
        "next-week-end": monday + timedelta(days=13),
        "last-week-start": monday - timedelta(days=7),
        "last-week-end": monday - timedelta(days=1),
        "month-start": first,
        "month-end": month_end(today),
        "next-month-start": add_months(first, 1),
        "next-month-end": month_end(add_months(first, 1)),
        "last-month-start": add_months(first, -1),
        "last-month-end": first - timedelta(days=1),
        "year-start": date(today.year, 1, 1),
        "year-end": date(today.year, 12, 31),
    }


def resolve_range_bound(
    token: str | None, today: date, formats: Iterable[str] = ()
) -> date | None:
    """Resolve a due-date range bound (keyword, relative offset or date)."""
    if token is None:
        return None
    key = token.strip().lower()
    if not key:
        return None
    keywords = _range_keywords(today)
    if key in keywords:
        return keywords[key]
    return parse_relative(key, today) or parse_date(token.strip(), formats)


def due_bucket(
    token: str, today: date, formats: Iterable[str] = ()
) -> DuePredicate | None:
    """Build the predicate for one due-date keyword or explicit date.

    Returns None for tokens that are neither a known bucket nor a date.
    """
    key = token.strip().lower()

    if key in ("all", "any"):
        return lambda due: due is not None
    if key == "none":
        return lambda due: due is None

    buckets: dict[str, DuePredicate] = {
        "today": lambda d: d == today,
        "tomorrow": lambda d: d == today + timedelta(days=1),
        "yesterday": lambda d: d == today - timedelta(days=1),
        "overdue": lambda d: d < today,
        "future": lambda d: d > today,
        "week": lambda d: today <= d <= today + timedelta(days=7),
        "next-week": lambda d: (
            today + timedelta(days=8) <= d <= today + timedelta(days=14)
        ),
    }
    check = buckets.get(key)
    if check is None:
        target = parse_relative(key, today) or parse_date(token.strip(), formats)
        if target is None:
            return None
        check = target.__eq__

    return lambda due: due is not None and check(due)
