"""Tests for HttpIndexClient against a mocked transport."""

from __future__ import annotations

import json

import httpx
import pytest

from taskchat.adapters.http_client import HttpIndexClient
from taskchat.repositories.repository import BackendQueryError


def _client(handler) -> HttpIndexClient:
    client = HttpIndexClient("http://bridge.local/", "datacore")
    client._client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url=client.base_url
    )
    return client


def test_base_url_trailing_slash_stripped():
    assert HttpIndexClient("http://bridge.local/", "dataview").base_url == "http://bridge.local"


# ---------------------------------------------------------------------------
# is_available
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status,body,expected",
    [
        (200, {"ready": True}, True),
        (200, {"ready": False}, False),
        (200, [], False),
        (503, {"ready": True}, False),
    ],
)
async def test_is_available(status, body, expected):
    def handler(request):
        assert request.url.path == "/status"
        return httpx.Response(status, json=body)

    async with _client(handler) as client:
        assert await client.is_available() is expected


@pytest.mark.asyncio
async def test_is_available_on_connection_error():
    def handler(request):
        raise httpx.ConnectError("refused")

    async with _client(handler) as client:
        assert await client.is_available() is False


# ---------------------------------------------------------------------------
# query / query_pages
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_query_posts_query_string():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=[{"$text": "x"}])

    async with _client(handler) as client:
        result = await client.query("@task")

    assert result == [{"$text": "x"}]
    assert seen == {"path": "/query", "body": {"query": "@task"}}


@pytest.mark.asyncio
async def test_query_pages_posts_source():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=[])

    async with _client(handler) as client:
        assert await client.query_pages('"Work"') == []

    assert seen == {"path": "/pages", "body": {"source": '"Work"'}}


@pytest.mark.asyncio
async def test_rejected_query_raises():
    def handler(request):
        return httpx.Response(400, text="parse error at 1:5")

    async with _client(handler) as client:
        with pytest.raises(BackendQueryError, match="parse error") as exc_info:
            await client.query("@task and (")

    assert exc_info.value.backend == "datacore"


@pytest.mark.asyncio
async def test_unreachable_bridge_raises():
    def handler(request):
        raise httpx.ConnectError("refused")

    async with _client(handler) as client:
        with pytest.raises(BackendQueryError, match="unreachable"):
            await client.query("@task")


@pytest.mark.asyncio
async def test_non_list_response_raises():
    def handler(request):
        return httpx.Response(200, json={"error": "nope"})

    async with _client(handler) as client:
        with pytest.raises(BackendQueryError, match="expected a list"):
            await client.query_pages()


@pytest.mark.asyncio
async def test_invalid_json_raises():
    def handler(request):
        return httpx.Response(200, text="<html>")

    async with _client(handler) as client:
        with pytest.raises(BackendQueryError, match="invalid JSON"):
            await client.query("@task")


@pytest.mark.asyncio
async def test_close_resets_client():
    client = _client(lambda request: httpx.Response(200, json=[]))
    await client.close()
    assert client._client is None
    await client.close()
