"""In-memory authorization store.

Implements every read port over plain dictionaries. Built once with the
``add_*`` methods and then read concurrently; reads never mutate state.
Suitable for tests, development and callers that load a point-in-time
snapshot of authorization data before running several checks.
"""

import itertools
from collections import defaultdict
from enum import Enum
from typing import Collection, Dict, Iterable, List, Optional, Sequence, Set, Union

from ..config.constants import AccessMode, AssignmentType, BaseRole
from ..features.access.entities import AccessGroup, AccessRule, GroupAssignment
from ..features.permissions.entities import PermissionRole, permission_key_value


class InMemoryAuthorizationStore:
    """Snapshot store implementing the permission, identity, group, rule and org ports."""

    def __init__(self):
        self._base_roles: Dict[str, BaseRole] = {}
        self._overrides: Dict[str, Dict[str, bool]] = defaultdict(dict)
        self._permission_roles: Dict[str, PermissionRole] = {}
        self._principal_roles: Dict[str, List[str]] = defaultdict(list)
        self._groups: Dict[str, AccessGroup] = {}
        self._group_users: Dict[str, List[str]] = defaultdict(list)
        self._group_roles: Dict[str, List[str]] = defaultdict(list)
        self._rules: List[AccessRule] = []
        self._org_ids: Set[str] = set()
        self._rule_ids = itertools.count(1)

    # Builders

    def add_user(self, principal_id: str, role: Union[BaseRole, str]) -> "InMemoryAuthorizationStore":
        self._base_roles[principal_id] = BaseRole(role)
        return self

    def add_override(
        self,
        principal_id: str,
        key: Union[str, Enum],
        granted: bool
    ) -> "InMemoryAuthorizationStore":
        """Set the single override for (principal, key), replacing any previous one."""
        self._overrides[principal_id][permission_key_value(key)] = granted
        return self

    def add_permission_role(
        self,
        role_id: str,
        name: str,
        permissions: Iterable[Union[str, Enum]] = (),
        members: Iterable[str] = ()
    ) -> "InMemoryAuthorizationStore":
        self._permission_roles[role_id] = PermissionRole(
            id=role_id, name=name, permissions=frozenset(permissions)
        )
        for principal_id in members:
            self.assign_permission_role(principal_id, role_id)
        return self

    def assign_permission_role(self, principal_id: str, role_id: str) -> "InMemoryAuthorizationStore":
        if role_id not in self._permission_roles:
            raise KeyError(f"Unknown permission role: {role_id}")
        if role_id not in self._principal_roles[principal_id]:
            self._principal_roles[principal_id].append(role_id)
        return self

    def add_group(
        self,
        group_id: str,
        name: str,
        users: Iterable[str] = (),
        roles: Iterable[str] = ()
    ) -> "InMemoryAuthorizationStore":
        """Create an access group assigned to principals directly and/or through permission roles."""
        self._groups[group_id] = AccessGroup(id=group_id, name=name)
        for principal_id in users:
            if principal_id not in self._group_users[group_id]:
                self._group_users[group_id].append(principal_id)
        for role_id in roles:
            if role_id not in self._permission_roles:
                raise KeyError(f"Unknown permission role: {role_id}")
            if role_id not in self._group_roles[group_id]:
                self._group_roles[group_id].append(role_id)
        return self

    def add_rule(
        self,
        group_id: str,
        org_id: str,
        mode: Union[AccessMode, str],
        section: Optional[str] = None,
        category_id: Optional[str] = None,
        asset_id: Optional[str] = None,
        rule_id: Optional[str] = None
    ) -> "InMemoryAuthorizationStore":
        group = self._groups.get(group_id)
        if group is None:
            raise KeyError(f"Unknown access group: {group_id}")
        self._rules.append(
            AccessRule(
                id=rule_id or f"rule-{next(self._rule_ids):06d}",
                group_id=group_id,
                org_id=org_id,
                mode=AccessMode(mode),
                section=section,
                category_id=category_id,
                asset_id=asset_id,
                group_name=group.name,
            )
        )
        return self

    def add_org(self, *org_ids: str) -> "InMemoryAuthorizationStore":
        self._org_ids.update(org_ids)
        return self

    # IdentityStore

    async def get_base_role(self, principal_id: str) -> Optional[BaseRole]:
        return self._base_roles.get(principal_id)

    # PermissionStore

    async def find_override(self, principal_id: str, key: str) -> Optional[bool]:
        return self._overrides.get(principal_id, {}).get(key)

    async def find_all_overrides(
        self,
        principal_id: str,
        keys: Optional[Sequence[str]] = None
    ) -> Dict[str, bool]:
        overrides = self._overrides.get(principal_id, {})
        if keys is None:
            return dict(overrides)
        return {key: overrides[key] for key in keys if key in overrides}

    async def find_role_grants(self, principal_id: str) -> Set[str]:
        grants: Set[str] = set()
        for role in await self.find_permission_roles(principal_id):
            grants |= role.permissions
        return grants

    async def find_permission_roles(self, principal_id: str) -> List[PermissionRole]:
        return [self._permission_roles[role_id] for role_id in self._principal_roles.get(principal_id, [])]

    # GroupStore

    async def find_direct_group_ids(self, principal_id: str) -> Set[str]:
        return {group_id for group_id, users in self._group_users.items() if principal_id in users}

    async def find_group_ids_via_roles(self, principal_id: str) -> Set[str]:
        role_ids = set(self._principal_roles.get(principal_id, []))
        return {group_id for group_id, roles in self._group_roles.items() if role_ids.intersection(roles)}

    async def find_group_assignments(self, principal_id: str) -> List[GroupAssignment]:
        assignments = [
            GroupAssignment(
                group_id=group_id,
                group_name=self._groups[group_id].name,
                assignment_type=AssignmentType.DIRECT,
            )
            for group_id, users in self._group_users.items()
            if principal_id in users
        ]
        for role_id in self._principal_roles.get(principal_id, []):
            role_name = self._permission_roles[role_id].name
            for group_id, roles in self._group_roles.items():
                if role_id in roles:
                    assignments.append(
                        GroupAssignment(
                            group_id=group_id,
                            group_name=self._groups[group_id].name,
                            assignment_type=AssignmentType.ROLE,
                            role_name=role_name,
                        )
                    )
        return assignments

    # RuleStore

    async def find_rules(
        self,
        group_ids: Collection[str],
        org_ids: Collection[str]
    ) -> List[AccessRule]:
        group_ids, org_ids = set(group_ids), set(org_ids)
        return [r for r in self._rules if r.group_id in group_ids and r.org_id in org_ids]

    async def find_org_level_rules(self, group_ids: Collection[str]) -> List[AccessRule]:
        group_ids = set(group_ids)
        return [r for r in self._rules if r.group_id in group_ids and r.is_org_level]

    # OrgCatalog

    async def list_all_org_ids(self) -> Set[str]:
        return set(self._org_ids)
