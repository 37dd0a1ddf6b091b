"""AsyncPG-based permission store implementation.

Concrete implementation of the PermissionStore and IdentityStore protocols
over the platform tables:

    users(id, role)
    user_permissions(user_id, permission, granted)
    permission_roles(id, name, permissions text[])
    user_permission_roles(user_id, permission_role_id)
"""

import logging
from typing import Dict, List, Optional, Sequence, Set

from asyncpg import Record

from ....config.constants import BaseRole
from ....infrastructure.database import PostgresReader
from ..entities import PermissionRole


logger = logging.getLogger(__name__)


class AsyncPGPermissionStore(PostgresReader):
    """AsyncPG implementation of the PermissionStore and IdentityStore protocols."""

    def _build_permission_role_from_row(self, row: Record) -> PermissionRole:
        return PermissionRole(
            id=str(row['id']),
            name=row['name'],
            permissions=frozenset(row['permissions'] or ()),
        )

    async def get_base_role(self, principal_id: str) -> Optional[BaseRole]:
        query = f"""
            SELECT role
            FROM {self._table('users')}
            WHERE id = $1
        """
        row = await self._fetchrow("load base role", query, principal_id)
        if row is None or row['role'] is None:
            return None
        return BaseRole(row['role'])

    async def find_override(self, principal_id: str, key: str) -> Optional[bool]:
        query = f"""
            SELECT granted
            FROM {self._table('user_permissions')}
            WHERE user_id = $1 AND permission = $2
        """
        row = await self._fetchrow("load permission override", query, principal_id, key)
        return None if row is None else bool(row['granted'])

    async def find_all_overrides(
        self,
        principal_id: str,
        keys: Optional[Sequence[str]] = None
    ) -> Dict[str, bool]:
        if keys is None:
            query = f"""
                SELECT permission, granted
                FROM {self._table('user_permissions')}
                WHERE user_id = $1
            """
            rows = await self._fetch("load permission overrides", query, principal_id)
        else:
            if not keys:
                return {}
            query = f"""
                SELECT permission, granted
                FROM {self._table('user_permissions')}
                WHERE user_id = $1 AND permission = ANY($2::text[])
            """
            rows = await self._fetch("load permission overrides", query, principal_id, list(keys))

        return {row['permission']: bool(row['granted']) for row in rows}

    async def find_role_grants(self, principal_id: str) -> Set[str]:
        query = f"""
            SELECT DISTINCT unnest(pr.permissions) AS permission
            FROM {self._table('user_permission_roles')} upr
            JOIN {self._table('permission_roles')} pr ON pr.id = upr.permission_role_id
            WHERE upr.user_id = $1
        """
        rows = await self._fetch("load permission role grants", query, principal_id)
        return {row['permission'] for row in rows}

    async def find_permission_roles(self, principal_id: str) -> List[PermissionRole]:
        query = f"""
            SELECT pr.id, pr.name, pr.permissions
            FROM {self._table('user_permission_roles')} upr
            JOIN {self._table('permission_roles')} pr ON pr.id = upr.permission_role_id
            WHERE upr.user_id = $1
            ORDER BY pr.name
        """
        rows = await self._fetch("load permission roles", query, principal_id)
        return [self._build_permission_role_from_row(row) for row in rows]
