"""Permission repositories package.

PostgreSQL adapters for the permission read ports.
"""

from .permission_store import AsyncPGPermissionStore

__all__ = [
    "AsyncPGPermissionStore",
]
