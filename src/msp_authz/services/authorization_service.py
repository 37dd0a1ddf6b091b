"""Authorization service for decision orchestration.

Composes the permission and access resolvers behind one object and applies
the configured store failure policy: a store that cannot answer either
yields the deny value for the operation (fail closed) or propagates.
"""

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, FrozenSet, Iterable, List, Optional, TypeVar, Union

from ..config.settings import AuthzSettings, get_settings
from ..core.exceptions import DatabaseError
from ..features.access.entities import (
    AccessExplanation,
    AccessRequestContext,
    AccessResult,
    GroupAssignment,
    GroupStore,
    OrgCatalog,
    RuleStore,
)
from ..features.access.repositories import AsyncPGAccessStore
from ..features.access.services import (
    AllowedScopeResolver,
    BatchAccessResolver,
    GroupMembershipResolver,
    HierarchicalAccessResolver,
    RuleMatcher,
)
from ..features.permissions.entities import (
    EffectivePermission,
    IdentityStore,
    PermissionRegistry,
    PermissionStore,
    default_registry,
    permission_key_value,
)
from ..features.permissions.repositories import AsyncPGPermissionStore
from ..features.permissions.services import PermissionResolver
from ..infrastructure.database import create_pool


logger = logging.getLogger(__name__)

T = TypeVar("T")
KeyLike = Union[str, Enum]


class AuthorizationService:
    """Single entry point for permission checks and hierarchical access decisions."""

    def __init__(
        self,
        permission_store: PermissionStore,
        identity_store: IdentityStore,
        group_store: GroupStore,
        rule_store: RuleStore,
        org_catalog: OrgCatalog,
        registry: Optional[PermissionRegistry] = None,
        settings: Optional[AuthzSettings] = None
    ):
        self.settings = settings or get_settings()
        self.registry = registry or default_registry()

        self.permissions = PermissionResolver(
            permission_store,
            identity_store,
            self.registry,
            strict_keys=self.settings.strict_permission_keys,
        )
        self.membership = GroupMembershipResolver(group_store)
        matcher = RuleMatcher()
        self.access = HierarchicalAccessResolver(self.membership, rule_store, matcher)
        self.batch_access = BatchAccessResolver(self.membership, rule_store, matcher)
        self.scope = AllowedScopeResolver(self.membership, rule_store, org_catalog)

    async def _guarded(
        self,
        operation: str,
        principal_id: str,
        call: Callable[[], Awaitable[T]],
        deny_value: Callable[[], T]
    ) -> T:
        """Run a resolver call under the store failure policy."""
        try:
            return await call()
        except DatabaseError as e:
            if not self.settings.fail_closed:
                raise
            logger.error(f"Store failure during {operation} for principal {principal_id}, denying: {e}")
            return deny_value()

    # Permission checks

    async def has_permission(self, principal_id: str, key: KeyLike) -> bool:
        return await self._guarded(
            "has_permission",
            principal_id,
            lambda: self.permissions.has_permission(principal_id, key),
            lambda: False,
        )

    async def has_permissions(self, principal_id: str, keys: Iterable[KeyLike]) -> Dict[str, bool]:
        keys = list(keys)
        return await self._guarded(
            "has_permissions",
            principal_id,
            lambda: self.permissions.has_permissions(principal_id, keys),
            lambda: {permission_key_value(k): False for k in keys},
        )

    async def get_user_effective_permissions(self, principal_id: str) -> List[EffectivePermission]:
        return await self._guarded(
            "get_user_effective_permissions",
            principal_id,
            lambda: self.permissions.get_user_effective_permissions(principal_id),
            list,
        )

    # Hierarchical access

    async def resolve(self, principal_id: str, context: AccessRequestContext) -> AccessResult:
        return await self._guarded(
            "resolve",
            principal_id,
            lambda: self.access.resolve(principal_id, context),
            AccessResult.denied,
        )

    async def resolve_batch(
        self,
        principal_id: str,
        contexts: Iterable[AccessRequestContext]
    ) -> Dict[str, AccessResult]:
        contexts = list(contexts)
        return await self._guarded(
            "resolve_batch",
            principal_id,
            lambda: self.batch_access.resolve_batch(principal_id, contexts),
            lambda: {c.asset_id: AccessResult.denied() for c in contexts},
        )

    async def get_allowed_org_ids(self, principal_id: str) -> FrozenSet[str]:
        return await self._guarded(
            "get_allowed_org_ids",
            principal_id,
            lambda: self.scope.get_allowed_org_ids(principal_id),
            frozenset,
        )

    async def get_group_assignments(self, principal_id: str) -> List[GroupAssignment]:
        return await self._guarded(
            "get_group_assignments",
            principal_id,
            lambda: self.membership.get_group_assignments(principal_id),
            list,
        )

    async def explain_access(self, principal_id: str, context: AccessRequestContext) -> AccessExplanation:
        """Resolve access and report the group memberships it was drawn from.

        Backs the admin "test access" tool.
        """
        result = await self.resolve(principal_id, context)
        groups = await self.get_group_assignments(principal_id)
        return AccessExplanation(result=result, groups=tuple(groups))


def create_authorization_service(
    store: Any,
    registry: Optional[PermissionRegistry] = None,
    settings: Optional[AuthzSettings] = None
) -> AuthorizationService:
    """Build a service from one object implementing every read port."""
    return AuthorizationService(
        permission_store=store,
        identity_store=store,
        group_store=store,
        rule_store=store,
        org_catalog=store,
        registry=registry,
        settings=settings,
    )


async def create_postgres_authorization_service(
    settings: Optional[AuthzSettings] = None,
    registry: Optional[PermissionRegistry] = None
) -> AuthorizationService:
    """Create a pool from settings and build a service over the asyncpg stores."""
    settings = settings or get_settings()
    pool = await create_pool(settings)

    permission_store = AsyncPGPermissionStore(pool, settings.db_schema, settings.db_command_timeout)
    access_store = AsyncPGAccessStore(pool, settings.db_schema, settings.db_command_timeout)

    return AuthorizationService(
        permission_store=permission_store,
        identity_store=permission_store,
        group_store=access_store,
        rule_store=access_store,
        org_catalog=access_store,
        registry=registry,
        settings=settings,
    )
