"""Backend interfaces for taskchat.

This package contains abstract base classes (ABCs) that define the contracts
for the task indexing backends. These are the "Ports" in the Hexagonal
Architecture.

Implementations (Adapters) are in:
- taskchat.adapters.datacore (Datacore query grammar and records)
- taskchat.adapters.dataview (Dataview page sources and records)
- taskchat.adapters.http_client (host query API over HTTP)
"""

from .repository import BackendQueryError, IndexClient, TaskBackend

__all__ = [
    "BackendQueryError",
    "IndexClient",
    "TaskBackend",
]
