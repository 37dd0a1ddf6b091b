"""Access repositories package.

PostgreSQL adapters for the access read ports.
"""

from .access_store import AsyncPGAccessStore

__all__ = [
    "AsyncPGAccessStore",
]
