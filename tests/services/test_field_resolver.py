"""Tests for FieldResolver and the priority helpers."""

from __future__ import annotations

import pytest

from taskchat.adapters import datacore, dataview
from taskchat.models import AppConfig, FieldKeys, TaskField
from taskchat.services.field_resolver import (
    FieldResolver,
    map_priority,
    priority_from_emoji,
)


@pytest.fixture()
def dc_resolver(config):
    return FieldResolver(config, datacore.NATIVE_FIELDS, datacore.INLINE_BAGS)


@pytest.fixture()
def dv_resolver(config):
    return FieldResolver(config, dataview.NATIVE_FIELDS, dataview.INLINE_BAGS)


# ---------------------------------------------------------------------------
# Strategy order
# ---------------------------------------------------------------------------


class TestDates:
    def test_native_wins_over_property(self, dc_resolver):
        record = {"$due": "2025-01-05", "due": "2025-02-01"}
        assert dc_resolver.resolve(record, TaskField.DUE) == "2025-01-05"

    def test_invalid_native_falls_through(self, dc_resolver):
        record = {"$due": "not a date", "due": "2025-02-01"}
        assert dc_resolver.resolve(record, TaskField.DUE) == "2025-02-01"

    def test_native_datetime_string_truncated(self, dv_resolver):
        record = {"due": "2025-01-05T00:00:00.000+01:00"}
        assert dv_resolver.resolve(record, TaskField.DUE) == "2025-01-05"

    def test_custom_key(self):
        config = AppConfig(field_keys=FieldKeys(due="deadlineOn"))
        resolver = FieldResolver(config, dataview.NATIVE_FIELDS)
        assert resolver.resolve({"deadlineOn": "2025-03-01"}, TaskField.DUE) == "2025-03-01"

    def test_standard_alias(self, dv_resolver):
        assert dv_resolver.resolve({"dueDate": "2025-03-02"}, TaskField.DUE) == "2025-03-02"

    def test_inline_bag_with_wrapped_value(self, dc_resolver):
        record = {"$infields": {"due": {"key": "due", "raw": "x", "value": "2025-04-01"}}}
        assert dc_resolver.resolve(record, TaskField.DUE) == "2025-04-01"

    def test_emoji_due(self, dv_resolver):
        text = "Pay rent 📅 2025-01-31"
        assert dv_resolver.resolve({}, TaskField.DUE, text) == "2025-01-31"

    def test_emoji_completed_and_created(self, dv_resolver):
        text = "Done ➕ 2025-01-01 ✅ 2025-01-03"
        assert dv_resolver.resolve({}, TaskField.CREATED, text) == "2025-01-01"
        assert dv_resolver.resolve({}, TaskField.COMPLETED, text) == "2025-01-03"

    def test_text_inline_field(self, dv_resolver):
        text = "Ship it [due:: 2025-05-05]"
        assert dv_resolver.resolve({}, TaskField.DUE, text) == "2025-05-05"

    def test_missing_everywhere(self, dv_resolver):
        assert dv_resolver.resolve({}, TaskField.DUE, "plain text") is None


class TestPriority:
    def test_numeric(self, dc_resolver):
        assert dc_resolver.resolve({"$priority": 2}, TaskField.PRIORITY) == 2

    def test_word_maps_through_config(self, dv_resolver):
        assert dv_resolver.resolve({"priority": "High"}, TaskField.PRIORITY) == 1

    def test_unknown_word_continues_to_next_strategy(self, dv_resolver):
        record = {"priority": "someday", "p": "low"}
        assert dv_resolver.resolve(record, TaskField.PRIORITY) == 3

    def test_emoji_fallback(self, dv_resolver):
        assert dv_resolver.resolve({}, TaskField.PRIORITY, "Fix ⏫") == 1
        assert dv_resolver.resolve({}, TaskField.PRIORITY, "Fix 🔼") == 2
        assert dv_resolver.resolve({}, TaskField.PRIORITY, "Fix ⏬") == 3

    def test_structured_value_beats_emoji(self, dv_resolver):
        assert dv_resolver.resolve({"priority": 3}, TaskField.PRIORITY, "x ⏫") == 3

    def test_inline_text_priority(self, dv_resolver):
        assert dv_resolver.resolve({}, TaskField.PRIORITY, "x [p:: medium]") == 2


def test_status_must_be_string(dv_resolver):
    assert dv_resolver.resolve({"status": "/"}, TaskField.STATUS) == "/"
    assert dv_resolver.resolve({"status": 5}, TaskField.STATUS) is None


def test_field_names_configured_first_without_repeats(config):
    resolver = FieldResolver(config, {})
    assert resolver.field_names(TaskField.DUE) == ("due", "dueDate", "deadline")
    assert resolver.field_names(TaskField.PRIORITY)[0] == "priority"


def test_map_priority(config):
    assert map_priority(1, config) == 1
    assert map_priority(2.0, config) == 2
    assert map_priority(" urgent ", config) == 1
    assert map_priority("none", config) == 4
    assert map_priority(True, config) is None
    assert map_priority(9, config) is None
    assert map_priority("", config) is None


def test_priority_from_emoji_none():
    assert priority_from_emoji("nothing here") is None


def test_priority_from_emoji_table_order_wins():
    assert priority_from_emoji("x 🔽 y ⏫") == 1
    assert priority_from_emoji("⏬ then 🔼") == 2
