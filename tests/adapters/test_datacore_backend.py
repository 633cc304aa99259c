"""Tests for the Datacore backend adapter."""

from __future__ import annotations

import pytest

from conftest import datacore_task

from taskchat.models import FilterSpec, LocationFilters, RawRecord, TaskField


# ---------------------------------------------------------------------------
# Query execution
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_execute_query_wraps_records(datacore, datacore_client):
    datacore_client.records = [datacore_task("a.md", "x"), "garbage"]

    records = await datacore.execute_query("@task")

    assert datacore_client.queries == ["@task"]
    assert len(records) == 1
    assert records[0].page_tags is None
    assert records[0].get("$text") == "x"


@pytest.mark.asyncio
async def test_execute_page_query(datacore, datacore_client):
    datacore_client.pages = [
        {"$path": "a.md", "$tags": ["#x", "#x", "#y"]},
        {"$file": "b.md"},
        {"$tags": ["#orphan"]},
    ]

    page_tags = await datacore.execute_page_query()

    assert datacore_client.queries == ["@page"]
    assert page_tags == {"a.md": ("#x", "#y"), "b.md": ()}


def test_compile_and_fully_expresses(datacore):
    spec = FilterSpec(inclusions=LocationFilters(notes=["Plan"], task_tags=["t"]))
    assert datacore.compile_query(spec) == (
        '@task and (childof(@page and $name = "Plan") or #t)'
    )
    assert datacore.fully_expresses(spec)
    assert datacore.needs_page_tags
    assert not datacore.requires_membership_pass


# ---------------------------------------------------------------------------
# Record access
# ---------------------------------------------------------------------------


class TestValidity:
    def test_type_marker(self, datacore):
        assert datacore.is_valid_record(RawRecord({"$type": "task"}))
        assert not datacore.is_valid_record(RawRecord({"$type": "list-item", "$status": " "}))

    def test_task_flag(self, datacore):
        assert datacore.is_valid_record(RawRecord({"task": True}))
        assert not datacore.is_valid_record(RawRecord({"task": False, "status": " "}))

    def test_status_presence(self, datacore):
        assert datacore.is_valid_record(RawRecord({"$status": "x"}))
        assert not datacore.is_valid_record(RawRecord({"$text": "plain"}))


def test_accessors(datacore):
    record = RawRecord({"$text": "Do", "$path": "W/a.md", "$line": "7", "$tags": ["#a", ""]})
    assert datacore.record_text(record) == "Do"
    assert datacore.record_path(record) == "W/a.md"
    assert datacore.record_line(record) == 7
    assert datacore.record_tags(record) == ("#a",)


def test_accessor_fallbacks(datacore):
    record = RawRecord({"text": "Do", "path": "a.md", "line": "n/a", "tags": ["#b"]})
    assert datacore.record_text(record) == "Do"
    assert datacore.record_path(record) == "a.md"
    assert datacore.record_line(record) == 0
    assert datacore.record_tags(record) == ("#b",)


def test_extract_field_uses_native_then_inline(datacore, config):
    record = RawRecord(
        {
            "$text": "Pay ⏫",
            "$status": "/",
            "$infields": {"due": {"value": "2025-02-01"}},
        }
    )
    assert datacore.extract_field(record, TaskField.STATUS, config) == "/"
    assert datacore.extract_field(record, TaskField.DUE, config) == "2025-02-01"
    assert datacore.extract_field(record, TaskField.PRIORITY, config) == 1
    assert datacore.extract_field(record, TaskField.CREATED, config) is None
