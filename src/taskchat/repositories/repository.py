"""Backend abstraction layer for taskchat.

This module defines the abstract base classes (interfaces) for the task
indexing backends, following the hexagonal architecture (Ports & Adapters)
pattern.

Two ports live here:

- IndexClient: the read-only query API exposed by the host document store
  for one backend.
- TaskBackend: the capability set the engine needs from a backend (compile a
  query, execute it, check and read raw records). The orchestrator, filter
  pipeline and sorter are written once against this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from taskchat.models import (
    AppConfig,
    FilterSpec,
    LocationFilters,
    RawRecord,
    TaskField,
)


class BackendQueryError(Exception):
    """A backend query call failed (transport error or rejected query)."""

    def __init__(self, message: str, backend: str | None = None):
        super().__init__(message)
        self.backend = backend


class IndexClient(ABC):
    """Read-only query API of one task indexing backend."""

    @abstractmethod
    async def is_available(self) -> bool:
        """Report whether the backend is present and ready to answer queries.

        Returns:
            True if queries can be issued now
        """
        raise NotImplementedError(
            "IndexClient.is_available() must be implemented by adapter"
        )

    @abstractmethod
    async def query(self, query: str) -> list[dict[str, Any]]:
        """Run a backend-native query string.

        Args:
            query: Query in the backend's own grammar

        Returns:
            List of raw result records

        Raises:
            BackendQueryError: If the query is malformed or the backend is gone
        """
        raise NotImplementedError("IndexClient.query() must be implemented by adapter")

    @abstractmethod
    async def query_pages(self, source: str = "") -> list[dict[str, Any]]:
        """List documents (pages) matching a source expression.

        Args:
            source: Backend-native page source; empty means every page

        Returns:
            List of raw page records

        Raises:
            BackendQueryError: If the source is malformed or the backend is gone
        """
        raise NotImplementedError(
            "IndexClient.query_pages() must be implemented by adapter"
        )


class TaskBackend(ABC):
    """Capability set of one task indexing backend.

    Concrete variants translate FilterSpecs into their own grammar and know
    the shape of their raw records. Everything downstream of the raw records
    goes through the accessor methods below.
    """

    name: ClassVar[str]
    # The backend's records carry no document tags; a page query fills them.
    needs_page_tags: ClassVar[bool] = False
    # Membership clauses are re-checked after the query.
    requires_membership_pass: ClassVar[bool] = False

    def __init__(self, client: IndexClient):
        self.client = client

    async def is_available(self) -> bool:
        return await self.client.is_available()

    @abstractmethod
    def compile_query(
        self, filter_spec: FilterSpec, exclusions: LocationFilters | None = None
    ) -> str:
        """Translate inclusion/exclusion clauses into a native query string.

        Args:
            filter_spec: Filter to compile
            exclusions: Effective exclusions (configured plus requested);
                defaults to the FilterSpec's own

        Returns:
            Query string in the backend grammar
        """
        raise NotImplementedError

    @abstractmethod
    def fully_expresses(
        self, filter_spec: FilterSpec, exclusions: LocationFilters | None = None
    ) -> bool:
        """Whether the compiled query enforces every membership clause."""
        raise NotImplementedError

    @abstractmethod
    async def execute_query(self, query: str) -> list[RawRecord]:
        """Execute a compiled query and return raw task records.

        Raises:
            BackendQueryError: Propagated from the client
        """
        raise NotImplementedError

    @abstractmethod
    async def execute_page_query(self) -> dict[str, tuple[str, ...]]:
        """Return a mapping of document path to document tags."""
        raise NotImplementedError

    @abstractmethod
    def is_valid_record(self, record: RawRecord) -> bool:
        """Whether a raw record is a task (not a plain list item or page)."""
        raise NotImplementedError

    @abstractmethod
    def extract_field(
        self, record: RawRecord, field: TaskField, config: AppConfig
    ) -> Any | None:
        """Resolve a logical field from a raw record.

        Returns:
            Typed value (ISO date string, priority int, status str) or None
        """
        raise NotImplementedError

    @abstractmethod
    def record_text(self, record: RawRecord) -> str:
        raise NotImplementedError

    @abstractmethod
    def record_path(self, record: RawRecord) -> str:
        raise NotImplementedError

    @abstractmethod
    def record_line(self, record: RawRecord) -> int:
        raise NotImplementedError

    @abstractmethod
    def record_tags(self, record: RawRecord) -> tuple[str, ...]:
        raise NotImplementedError
