"""Three-tier permission resolver.

Resolution order (first match wins):
    1. Per-principal override: explicit grant/revoke, returned verbatim
    2. Permission roles: granted if any assigned role's bundle contains the key
    3. Base role default: granted if the principal's base role is in the key's
       default role set (unknown keys are never granted at this tier)

A principal unknown to the identity store is granted nothing.
"""

import asyncio
import logging
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple, Union

from ....config.constants import BaseRole, PermissionSource
from ..entities import (
    EffectivePermission,
    IdentityStore,
    PermissionRegistry,
    PermissionRole,
    PermissionStore,
    default_registry,
    permission_key_value,
)


logger = logging.getLogger(__name__)

KeyLike = Union[str, Enum]


class PermissionResolver:
    """Resolves flat feature/action permission keys for a principal."""

    def __init__(
        self,
        permission_store: PermissionStore,
        identity_store: IdentityStore,
        registry: Optional[PermissionRegistry] = None,
        strict_keys: bool = False
    ):
        self.permission_store = permission_store
        self.identity_store = identity_store
        self.registry = registry or default_registry()
        self.strict_keys = strict_keys

    def _normalize_key(self, key: KeyLike) -> str:
        """Normalize a key; in strict mode keys outside the registry are rejected."""
        if self.strict_keys:
            return self.registry.require(key).key
        return permission_key_value(key)

    def _resolve_key(
        self,
        key: str,
        base_role: BaseRole,
        overrides: Mapping[str, bool],
        role_grants: Set[str]
    ) -> Tuple[bool, PermissionSource]:
        """Apply the three tiers to already-loaded data."""
        if key in overrides:
            return overrides[key], PermissionSource.OVERRIDE
        if key in role_grants:
            return True, PermissionSource.PERMISSION_ROLE
        return self.registry.is_default_granted(key, base_role), PermissionSource.ROLE

    async def has_permission(self, principal_id: str, key: KeyLike) -> bool:
        """Check if a principal holds a single permission key."""
        permission = self._normalize_key(key)

        base_role, override = await asyncio.gather(
            self.identity_store.get_base_role(principal_id),
            self.permission_store.find_override(principal_id, permission),
        )

        if base_role is None:
            logger.debug(f"Unknown principal {principal_id}: denied {permission}")
            return False

        if override is not None:
            logger.debug(f"Principal {principal_id} {permission}={override} via override")
            return bool(override)

        role_grants = await self.permission_store.find_role_grants(principal_id)
        granted, source = self._resolve_key(permission, base_role, {}, set(role_grants))
        logger.debug(f"Principal {principal_id} {permission}={granted} via {source.value}")
        return granted

    async def has_permissions(
        self,
        principal_id: str,
        keys: Iterable[KeyLike]
    ) -> Dict[str, bool]:
        """Check many keys with a fixed number of store reads.

        Results are identical to calling has_permission once per key.
        """
        permissions = list(dict.fromkeys(self._normalize_key(k) for k in keys))
        if not permissions:
            return {}

        overrides, role_grants, base_role = await asyncio.gather(
            self.permission_store.find_all_overrides(principal_id, permissions),
            self.permission_store.find_role_grants(principal_id),
            self.identity_store.get_base_role(principal_id),
        )

        if base_role is None:
            logger.debug(f"Unknown principal {principal_id}: denied {len(permissions)} permissions")
            return {permission: False for permission in permissions}

        grants = set(role_grants)
        return {
            permission: self._resolve_key(permission, base_role, overrides, grants)[0]
            for permission in permissions
        }

    async def get_user_effective_permissions(self, principal_id: str) -> List[EffectivePermission]:
        """Report every registry key with its resolved value and source tier.

        When several permission roles grant a key, the role that sorts first
        by name is attributed.
        """
        overrides, roles, base_role = await asyncio.gather(
            self.permission_store.find_all_overrides(principal_id, None),
            self.permission_store.find_permission_roles(principal_id),
            self.identity_store.get_base_role(principal_id),
        )

        if base_role is None:
            return []

        role_grant_map = self._first_granting_roles(roles)
        grants = set(role_grant_map)

        effective = []
        for definition in self.registry:
            granted, source = self._resolve_key(definition.key, base_role, overrides, grants)
            effective.append(
                EffectivePermission(
                    permission=definition.key,
                    granted=granted,
                    source=source,
                    role_name=role_grant_map[definition.key] if source == PermissionSource.PERMISSION_ROLE else None,
                )
            )
        return effective

    @staticmethod
    def _first_granting_roles(roles: Iterable[PermissionRole]) -> Dict[str, str]:
        """Map each granted key to the name of the first role (by name, then id) granting it."""
        role_grant_map: Dict[str, str] = {}
        for role in sorted(roles, key=lambda r: (r.name, r.id)):
            for permission in sorted(role.permissions):
                role_grant_map.setdefault(permission, role.name)
        return role_grant_map
