"""Infrastructure adapters for msp-authz."""

from .database import PostgresReader, create_pool
from .memory_store import InMemoryAuthorizationStore

__all__ = [
    "PostgresReader",
    "create_pool",
    "InMemoryAuthorizationStore",
]
