"""Access group membership resolution."""

import asyncio
import logging
from typing import FrozenSet, List

from ....config.constants import AssignmentType
from ..entities import GroupAssignment, GroupStore


logger = logging.getLogger(__name__)


class GroupMembershipResolver:
    """Resolves the access groups a principal belongs to.

    Membership is the union of direct assignments and assignments reached
    through the principal's permission roles.
    """

    def __init__(self, group_store: GroupStore):
        self.group_store = group_store

    async def get_group_ids(self, principal_id: str) -> FrozenSet[str]:
        direct, via_roles = await asyncio.gather(
            self.group_store.find_direct_group_ids(principal_id),
            self.group_store.find_group_ids_via_roles(principal_id),
        )
        group_ids = frozenset(direct) | frozenset(via_roles)
        logger.debug(f"Principal {principal_id} belongs to {len(group_ids)} access groups")
        return group_ids

    async def get_group_assignments(self, principal_id: str) -> List[GroupAssignment]:
        """List each group once; a direct assignment hides role assignments of the same group."""
        assignments = await self.group_store.find_group_assignments(principal_id)

        ordered = sorted(assignments, key=lambda a: a.assignment_type != AssignmentType.DIRECT)
        seen = set()
        result = []
        for assignment in ordered:
            if assignment.group_id in seen:
                continue
            seen.add(assignment.group_id)
            result.append(assignment)
        return result
