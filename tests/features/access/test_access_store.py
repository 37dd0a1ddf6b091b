"""Tests for the asyncpg access store."""

import asyncio

import asyncpg
import pytest

from msp_authz.config.constants import AccessMode, AssignmentType
from msp_authz.core.exceptions import StoreUnavailableError
from msp_authz.features.access.entities import GroupStore, OrgCatalog, RuleStore
from msp_authz.features.access.repositories import AsyncPGAccessStore


def rule_row(**overrides):
    row = {
        'id': 11,
        'group_id': 3,
        'org_id': 'org-1',
        'section': None,
        'category_id': None,
        'asset_id': None,
        'access_mode': 'READ_ONLY',
        'group_name': 'Tier 1',
    }
    row.update(overrides)
    return row


class TestAsyncPGAccessStore:
    """Test access store queries and row mapping."""

    @pytest.fixture
    def store(self, mock_pool):
        return AsyncPGAccessStore(mock_pool)

    def test_implements_ports(self, store):
        assert isinstance(store, GroupStore)
        assert isinstance(store, RuleStore)
        assert isinstance(store, OrgCatalog)

    @pytest.mark.asyncio
    async def test_direct_group_ids(self, store, mock_pool):
        mock_pool.fetch.return_value = [{'group_id': 3}, {'group_id': 4}]

        assert await store.find_direct_group_ids("u-1") == {"3", "4"}
        assert "public.access_group_users" in mock_pool.fetch.call_args[0][0]

    @pytest.mark.asyncio
    async def test_group_ids_via_roles(self, store, mock_pool):
        mock_pool.fetch.return_value = [{'group_id': 'g-2'}]

        assert await store.find_group_ids_via_roles("u-1") == {"g-2"}
        query = mock_pool.fetch.call_args[0][0]
        assert "public.access_group_roles" in query
        assert "public.user_permission_roles" in query

    @pytest.mark.asyncio
    async def test_group_assignments(self, store, mock_pool):
        mock_pool.fetch.return_value = [
            {'group_id': 1, 'group_name': 'Tier 1', 'assignment_type': 'direct', 'role_name': None},
            {'group_id': 2, 'group_name': 'Tier 2', 'assignment_type': 'role', 'role_name': 'Escalations'},
        ]

        assignments = await store.find_group_assignments("u-1")

        assert [(a.group_id, a.assignment_type, a.role_name) for a in assignments] == [
            ("1", AssignmentType.DIRECT, None),
            ("2", AssignmentType.ROLE, "Escalations"),
        ]

    @pytest.mark.asyncio
    async def test_find_rules(self, store, mock_pool):
        mock_pool.fetch.return_value = [
            rule_row(),
            rule_row(id=12, org_id='*', access_mode='READ_WRITE'),
            rule_row(id=13, section='passwords', asset_id='pw-1', access_mode='DENIED'),
        ]

        rules = await store.find_rules({"3"}, ["org-1", "*"])

        assert [(r.id, r.group_id, r.org_id, r.mode) for r in rules] == [
            ("11", "3", "org-1", AccessMode.READ_ONLY),
            ("12", "3", "*", AccessMode.READ_WRITE),
            ("13", "3", "org-1", AccessMode.DENIED),
        ]
        assert rules[0].group_name == "Tier 1"
        assert rules[2].section == "passwords"
        _, group_ids, org_ids = mock_pool.fetch.call_args[0]
        assert group_ids == ["3"]
        assert org_ids == ["org-1", "*"]

    @pytest.mark.asyncio
    async def test_find_rules_without_groups_skips_query(self, store, mock_pool):
        assert await store.find_rules([], ["org-1"]) == []
        mock_pool.fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_find_org_level_rules(self, store, mock_pool):
        mock_pool.fetch.return_value = [rule_row(org_id='*')]

        rules = await store.find_org_level_rules(["3"])

        assert rules[0].is_wildcard
        assert rules[0].is_org_level
        query = mock_pool.fetch.call_args[0][0]
        assert "r.section IS NULL" in query
        assert "r.asset_id IS NULL" in query

    @pytest.mark.asyncio
    async def test_list_all_org_ids(self, store, mock_pool):
        mock_pool.fetch.return_value = [{'org_id': 'org-1'}, {'org_id': 'org-2'}]

        assert await store.list_all_org_ids() == {"org-1", "org-2"}
        assert "public.cached_orgs" in mock_pool.fetch.call_args[0][0]

    @pytest.mark.asyncio
    async def test_driver_error_becomes_store_unavailable(self, store, mock_pool):
        mock_pool.fetch.side_effect = asyncpg.exceptions.ConnectionDoesNotExistError("gone")

        with pytest.raises(StoreUnavailableError):
            await store.find_rules(["3"], ["org-1"])

    @pytest.mark.asyncio
    async def test_query_timeout_becomes_store_unavailable(self, store, mock_pool):
        mock_pool.fetch.side_effect = asyncio.TimeoutError()

        with pytest.raises(StoreUnavailableError) as exc_info:
            await store.find_rules(["3"], ["org-1"])

        assert isinstance(exc_info.value.__cause__, asyncio.TimeoutError)
