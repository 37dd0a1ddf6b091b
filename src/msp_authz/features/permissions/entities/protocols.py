"""Protocol interfaces for permission feature dependency injection.

Read-only ports the surrounding application implements over its storage.
The resolver never writes through them.
"""

from abc import abstractmethod
from typing import Dict, List, Optional, Protocol, Sequence, Set, runtime_checkable

from ....config.constants import BaseRole
from .permission import PermissionRole


@runtime_checkable
class PermissionStore(Protocol):
    """Protocol for permission override and permission-role reads."""

    @abstractmethod
    async def find_override(self, principal_id: str, key: str) -> Optional[bool]:
        """Get the override value for (principal, key), or None if there is none."""
        ...

    @abstractmethod
    async def find_all_overrides(
        self,
        principal_id: str,
        keys: Optional[Sequence[str]] = None
    ) -> Dict[str, bool]:
        """Get overrides for the given keys in one read (all overrides when keys is None)."""
        ...

    @abstractmethod
    async def find_role_grants(self, principal_id: str) -> Set[str]:
        """Get the union of keys granted by every permission role assigned to the principal."""
        ...

    @abstractmethod
    async def find_permission_roles(self, principal_id: str) -> List[PermissionRole]:
        """Get the permission roles assigned to the principal, with their bundles."""
        ...


@runtime_checkable
class IdentityStore(Protocol):
    """Protocol for base-role lookups against the identity store."""

    @abstractmethod
    async def get_base_role(self, principal_id: str) -> Optional[BaseRole]:
        """Get the principal's base role, or None if the principal does not exist."""
        ...
