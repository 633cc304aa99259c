"""HTTP client for a host query bridge.

The bridge exposes one backend's read-only query API:

- ``GET /status`` returns ``{"ready": bool}``
- ``POST /query`` with ``{"query": str}`` returns a JSON list of records
- ``POST /pages`` with ``{"source": str}`` returns a JSON list of pages
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from taskchat.repositories.repository import BackendQueryError, IndexClient

logger = logging.getLogger(__name__)


class HttpIndexClient(IndexClient):
    """IndexClient talking to a query bridge over HTTP."""

    def __init__(self, base_url: str, backend: str, timeout: float = 30):
        self.base_url = base_url.rstrip("/")
        self.backend = backend
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> HttpIndexClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                follow_redirects=True,
                headers={
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def is_available(self) -> bool:
        client = await self._get_client()
        try:
            response = await client.get("/status")
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.debug("%s bridge not available: %s", self.backend, e)
            return False
        return isinstance(data, dict) and bool(data.get("ready"))

    async def query(self, query: str) -> list[dict[str, Any]]:
        return await self._post_list("/query", {"query": query})

    async def query_pages(self, source: str = "") -> list[dict[str, Any]]:
        return await self._post_list("/pages", {"source": source})

    async def _post_list(self, path: str, payload: dict[str, Any]) -> list[dict[str, Any]]:
        client = await self._get_client()
        try:
            response = await client.post(path, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise BackendQueryError(
                f"{self.backend} rejected {path} ({e.response.status_code}): "
                f"{e.response.text}",
                backend=self.backend,
            ) from e
        except httpx.RequestError as e:
            raise BackendQueryError(
                f"{self.backend} bridge unreachable: {e}", backend=self.backend
            ) from e
        except ValueError as e:
            raise BackendQueryError(
                f"{self.backend} returned invalid JSON for {path}", backend=self.backend
            ) from e

        if not isinstance(data, list):
            raise BackendQueryError(
                f"{self.backend} returned {type(data).__name__} for {path}, expected a list",
                backend=self.backend,
            )
        return data
