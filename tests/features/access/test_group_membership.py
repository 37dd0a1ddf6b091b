"""Tests for access group membership resolution."""

import pytest

from msp_authz.config.constants import AssignmentType
from msp_authz.features.access.entities import GroupAssignment
from msp_authz.features.access.services import GroupMembershipResolver


class TestGroupMembershipResolver:
    """Test union of direct and role-based membership."""

    @pytest.fixture
    def resolver(self, mock_group_store):
        return GroupMembershipResolver(mock_group_store)

    @pytest.mark.asyncio
    async def test_union_of_direct_and_role_groups(self, resolver, mock_group_store):
        mock_group_store.find_direct_group_ids.return_value = {"g-1", "g-2"}
        mock_group_store.find_group_ids_via_roles.return_value = {"g-2", "g-3"}

        assert await resolver.get_group_ids("u-1") == frozenset({"g-1", "g-2", "g-3"})
        mock_group_store.find_direct_group_ids.assert_called_once_with("u-1")
        mock_group_store.find_group_ids_via_roles.assert_called_once_with("u-1")

    @pytest.mark.asyncio
    async def test_no_groups(self, resolver):
        assert await resolver.get_group_ids("u-1") == frozenset()

    @pytest.mark.asyncio
    async def test_assignments_listed_once_direct_first(self, resolver, mock_group_store):
        mock_group_store.find_group_assignments.return_value = [
            GroupAssignment("g-2", "Tier 2", AssignmentType.ROLE, "Escalations"),
            GroupAssignment("g-1", "Tier 1", AssignmentType.DIRECT),
            GroupAssignment("g-2", "Tier 2", AssignmentType.DIRECT),
            GroupAssignment("g-3", "Night Shift", AssignmentType.ROLE, "On Call"),
            GroupAssignment("g-3", "Night Shift", AssignmentType.ROLE, "Escalations"),
        ]

        assignments = await resolver.get_group_assignments("u-1")

        assert [(a.group_id, a.assignment_type, a.role_name) for a in assignments] == [
            ("g-1", AssignmentType.DIRECT, None),
            ("g-2", AssignmentType.DIRECT, None),
            ("g-3", AssignmentType.ROLE, "On Call"),
        ]
