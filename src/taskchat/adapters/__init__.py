"""Backend adapters - TaskBackend and IndexClient implementations."""

from .datacore import DatacoreBackend, DatacoreGrammar
from .dataview import DataviewBackend, DataviewGrammar
from .http_client import HttpIndexClient

__all__ = [
    "DatacoreBackend",
    "DatacoreGrammar",
    "DataviewBackend",
    "DataviewGrammar",
    "HttpIndexClient",
]
