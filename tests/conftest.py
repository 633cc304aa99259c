"""Shared test fixtures and configuration.

Provides fake index clients so backends can be exercised without a host
document store, and isolates config/log files in tmp directories.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any
from unittest.mock import patch

import pytest

from taskchat.adapters.datacore import DatacoreBackend
from taskchat.adapters.dataview import DataviewBackend
from taskchat.models import AppConfig
from taskchat.repositories.repository import IndexClient

TODAY = date(2025, 1, 10)


# ---------------------------------------------------------------------------
# Fake host clients
# ---------------------------------------------------------------------------


class FakeIndexClient(IndexClient):
    """In-memory IndexClient recording every call it receives."""

    def __init__(
        self,
        records: list[dict[str, Any]] | None = None,
        pages: list[dict[str, Any]] | None = None,
        available: bool = True,
    ):
        self.records = records or []
        self.pages = pages or []
        self.available = available
        self.queries: list[str] = []
        self.page_sources: list[str] = []

    async def is_available(self) -> bool:
        return self.available

    async def query(self, query: str) -> list[dict[str, Any]]:
        self.queries.append(query)
        if query == "@page":
            return self.pages
        return self.records

    async def query_pages(self, source: str = "") -> list[dict[str, Any]]:
        self.page_sources.append(source)
        return self.pages


_DATACORE_PREDICATE = re.compile(
    r"(!?)(?:"
    r'path\("(?P<folder>[^"]*)"\)'
    r'|childof\(@page and \$name = "(?P<name>[^"]*)"\)'
    r'|childof\(@page and \$path = "(?P<path>[^"]*)"\)'
    r"|childof\(@page and #(?P<note_tag>[^)]+)\)"
    r"|#(?P<task_tag>[^\s)]+)"
    r")"
)


class DatacoreHost(FakeIndexClient):
    """FakeIndexClient that evaluates compiled Datacore task queries.

    Understands exactly the predicates the Datacore grammar emits, so tests
    can check that what the query expresses is what the host returns.
    """

    async def query(self, query: str) -> list[dict[str, Any]]:
        self.queries.append(query)
        if query == "@page":
            return self.pages

        included, excluded = [], []
        for match in _DATACORE_PREDICATE.finditer(query):
            (excluded if match.group(1) else included).append(match)

        def matches(record: dict, match: re.Match) -> bool:
            path = record.get("$file", "")
            if match["folder"] is not None:
                return path == match["folder"] or path.startswith(match["folder"] + "/")
            if match["name"] is not None:
                return path.rsplit("/", 1)[-1].removesuffix(".md") == match["name"]
            if match["path"] is not None:
                return path == match["path"]
            if match["note_tag"] is not None:
                return f"#{match['note_tag']}" in self._page_tags(path)
            return f"#{match['task_tag']}" in record.get("$tags", [])

        return [
            record
            for record in self.records
            if not any(matches(record, m) for m in excluded)
            and (not included or any(matches(record, m) for m in included))
        ]

    def _page_tags(self, path: str) -> list[str]:
        for page in self.pages:
            if page.get("$path") == path:
                return page.get("$tags", [])
        return []


def datacore_task(
    path: str,
    text: str,
    line: int = 0,
    status: str = " ",
    tags: list[str] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Build a raw Datacore task record."""
    record = {
        "$type": "task",
        "$file": path,
        "$text": text,
        "$line": line,
        "$status": status,
        "$tags": tags or [],
    }
    record.update(extra)
    return record


def dataview_task(
    text: str,
    line: int = 0,
    status: str = " ",
    tags: list[str] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Build a raw Dataview task record (path is filled from the page)."""
    record = {
        "task": True,
        "text": text,
        "line": line,
        "status": status,
        "tags": tags or [],
    }
    record.update(extra)
    return record


def dataview_page(path: str, tasks: list[dict], tags: list[str] | None = None) -> dict:
    return {"file": {"path": path, "tags": tags or [], "tasks": tasks}}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def config() -> AppConfig:
    return AppConfig()


@pytest.fixture()
def datacore_client() -> FakeIndexClient:
    return FakeIndexClient()


@pytest.fixture()
def dataview_client() -> FakeIndexClient:
    return FakeIndexClient()


@pytest.fixture()
def datacore(datacore_client) -> DatacoreBackend:
    return DatacoreBackend(datacore_client)


@pytest.fixture()
def dataview(dataview_client) -> DataviewBackend:
    return DataviewBackend(dataview_client)


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide a real ConfigService backed by a temporary directory.

    Also clears the lru_cache so each test gets a fresh service instance.
    """
    from taskchat.services.config_service import ConfigService, get_config_service

    get_config_service.cache_clear()
    with patch(
        "taskchat.services.config_service.user_config_dir", return_value=str(tmp_path)
    ):
        yield ConfigService()
    get_config_service.cache_clear()


@pytest.fixture(autouse=True)
def isolated_log_dir(tmp_path):
    """Keep log files written during tests out of the user's log directory."""
    with patch("taskchat.utils.logger.user_log_dir", return_value=str(tmp_path / "logs")):
        yield
