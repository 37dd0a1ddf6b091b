"""AsyncPG-based access store implementation.

Concrete implementation of the GroupStore, RuleStore and OrgCatalog
protocols over the platform tables:

    access_groups(id, name)
    access_group_users(group_id, user_id)
    access_group_roles(group_id, permission_role_id)
    access_rules(id, group_id, org_id, section, category_id, asset_id, access_mode)
    cached_orgs(org_id)

Role-based membership joins through user_permission_roles and
permission_roles, shared with the permissions feature.
"""

import logging
from typing import Collection, List, Set

from asyncpg import Record

from ....config.constants import AssignmentType
from ....infrastructure.database import PostgresReader
from ..entities import AccessRule, GroupAssignment


logger = logging.getLogger(__name__)

_RULE_COLUMNS = """
    r.id, r.group_id, r.org_id, r.section, r.category_id, r.asset_id,
    r.access_mode, g.name AS group_name
"""


class AsyncPGAccessStore(PostgresReader):
    """AsyncPG implementation of the GroupStore, RuleStore and OrgCatalog protocols."""

    def _build_rule_from_row(self, row: Record) -> AccessRule:
        return AccessRule(
            id=str(row['id']),
            group_id=str(row['group_id']),
            org_id=row['org_id'],
            mode=row['access_mode'],
            section=row['section'],
            category_id=row['category_id'],
            asset_id=row['asset_id'],
            group_name=row['group_name'],
        )

    async def find_direct_group_ids(self, principal_id: str) -> Set[str]:
        query = f"""
            SELECT group_id
            FROM {self._table('access_group_users')}
            WHERE user_id = $1
        """
        rows = await self._fetch("load direct access groups", query, principal_id)
        return {str(row['group_id']) for row in rows}

    async def find_group_ids_via_roles(self, principal_id: str) -> Set[str]:
        query = f"""
            SELECT DISTINCT agr.group_id
            FROM {self._table('access_group_roles')} agr
            JOIN {self._table('user_permission_roles')} upr
                ON upr.permission_role_id = agr.permission_role_id
            WHERE upr.user_id = $1
        """
        rows = await self._fetch("load role access groups", query, principal_id)
        return {str(row['group_id']) for row in rows}

    async def find_group_assignments(self, principal_id: str) -> List[GroupAssignment]:
        query = f"""
            SELECT g.id AS group_id, g.name AS group_name,
                   'direct' AS assignment_type, NULL AS role_name
            FROM {self._table('access_group_users')} agu
            JOIN {self._table('access_groups')} g ON g.id = agu.group_id
            WHERE agu.user_id = $1
            UNION ALL
            SELECT g.id, g.name, 'role', pr.name
            FROM {self._table('access_group_roles')} agr
            JOIN {self._table('access_groups')} g ON g.id = agr.group_id
            JOIN {self._table('permission_roles')} pr ON pr.id = agr.permission_role_id
            JOIN {self._table('user_permission_roles')} upr
                ON upr.permission_role_id = agr.permission_role_id
            WHERE upr.user_id = $1
        """
        rows = await self._fetch("load access group assignments", query, principal_id)
        return [
            GroupAssignment(
                group_id=str(row['group_id']),
                group_name=row['group_name'],
                assignment_type=AssignmentType(row['assignment_type']),
                role_name=row['role_name'],
            )
            for row in rows
        ]

    async def find_rules(
        self,
        group_ids: Collection[str],
        org_ids: Collection[str]
    ) -> List[AccessRule]:
        if not group_ids or not org_ids:
            return []
        query = f"""
            SELECT {_RULE_COLUMNS}
            FROM {self._table('access_rules')} r
            JOIN {self._table('access_groups')} g ON g.id = r.group_id
            WHERE r.group_id::text = ANY($1::text[])
              AND r.org_id = ANY($2::text[])
        """
        rows = await self._fetch("load access rules", query, list(group_ids), list(org_ids))
        return [self._build_rule_from_row(row) for row in rows]

    async def find_org_level_rules(self, group_ids: Collection[str]) -> List[AccessRule]:
        if not group_ids:
            return []
        query = f"""
            SELECT {_RULE_COLUMNS}
            FROM {self._table('access_rules')} r
            JOIN {self._table('access_groups')} g ON g.id = r.group_id
            WHERE r.group_id::text = ANY($1::text[])
              AND r.section IS NULL
              AND r.category_id IS NULL
              AND r.asset_id IS NULL
        """
        rows = await self._fetch("load org-level access rules", query, list(group_ids))
        return [self._build_rule_from_row(row) for row in rows]

    async def list_all_org_ids(self) -> Set[str]:
        query = f"""
            SELECT org_id
            FROM {self._table('cached_orgs')}
        """
        rows = await self._fetch("load organization catalog", query)
        return {str(row['org_id']) for row in rows}
