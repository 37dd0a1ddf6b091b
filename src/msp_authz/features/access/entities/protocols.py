"""Protocol interfaces for access feature dependency injection.

Read-only ports for group membership, access rules and the organization
catalog. Every method is one bounded read.
"""

from abc import abstractmethod
from typing import Collection, List, Protocol, Set, runtime_checkable

from .access_rule import AccessRule, GroupAssignment


@runtime_checkable
class GroupStore(Protocol):
    """Protocol for access group membership reads."""

    @abstractmethod
    async def find_direct_group_ids(self, principal_id: str) -> Set[str]:
        """Get ids of groups the principal is assigned to directly."""
        ...

    @abstractmethod
    async def find_group_ids_via_roles(self, principal_id: str) -> Set[str]:
        """Get ids of groups reached through the principal's permission roles."""
        ...

    @abstractmethod
    async def find_group_assignments(self, principal_id: str) -> List[GroupAssignment]:
        """Get every (group, assignment) pair for the principal, duplicates included."""
        ...


@runtime_checkable
class RuleStore(Protocol):
    """Protocol for access rule reads."""

    @abstractmethod
    async def find_rules(
        self,
        group_ids: Collection[str],
        org_ids: Collection[str]
    ) -> List[AccessRule]:
        """Get all rules of the given groups whose org_id is in org_ids."""
        ...

    @abstractmethod
    async def find_org_level_rules(self, group_ids: Collection[str]) -> List[AccessRule]:
        """Get rules of the given groups that carry no section, category or asset."""
        ...


@runtime_checkable
class OrgCatalog(Protocol):
    """Protocol for the catalog of known organizations."""

    @abstractmethod
    async def list_all_org_ids(self) -> Set[str]:
        """Get the id of every organization in the catalog."""
        ...
