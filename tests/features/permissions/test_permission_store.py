"""Tests for the asyncpg permission store."""

import asyncpg
import pytest

from msp_authz.config.constants import BaseRole
from msp_authz.core.exceptions import InvalidSchemaError, StoreUnavailableError
from msp_authz.features.permissions.entities import IdentityStore, PermissionStore
from msp_authz.features.permissions.repositories import AsyncPGPermissionStore


class TestAsyncPGPermissionStore:
    """Test permission store queries and row mapping."""

    @pytest.fixture
    def store(self, mock_pool):
        return AsyncPGPermissionStore(mock_pool, schema="platform", timeout=2.0)

    def test_implements_ports(self, store):
        assert isinstance(store, PermissionStore)
        assert isinstance(store, IdentityStore)

    def test_invalid_schema_rejected(self, mock_pool):
        with pytest.raises(InvalidSchemaError):
            AsyncPGPermissionStore(mock_pool, schema="public; DROP TABLE users")

    @pytest.mark.asyncio
    async def test_get_base_role(self, store, mock_pool):
        mock_pool.fetchrow.return_value = {'role': 'MANAGER'}

        assert await store.get_base_role("u-1") == BaseRole.MANAGER

        query, principal_id = mock_pool.fetchrow.call_args[0]
        assert "platform.users" in query
        assert principal_id == "u-1"
        assert mock_pool.fetchrow.call_args[1] == {"timeout": 2.0}

    @pytest.mark.asyncio
    async def test_get_base_role_missing_principal(self, store, mock_pool):
        mock_pool.fetchrow.return_value = None

        assert await store.get_base_role("ghost") is None

    @pytest.mark.asyncio
    async def test_find_override(self, store, mock_pool):
        mock_pool.fetchrow.return_value = {'granted': False}

        assert await store.find_override("u-1", "users.manage") is False
        assert mock_pool.fetchrow.call_args[0][1:] == ("u-1", "users.manage")

    @pytest.mark.asyncio
    async def test_find_override_absent(self, store, mock_pool):
        assert await store.find_override("u-1", "users.manage") is None

    @pytest.mark.asyncio
    async def test_find_all_overrides_for_keys(self, store, mock_pool):
        mock_pool.fetch.return_value = [
            {'permission': 'users.manage', 'granted': True},
            {'permission': 'dashboard.view', 'granted': False},
        ]

        result = await store.find_all_overrides("u-1", ("users.manage", "dashboard.view"))

        assert result == {"users.manage": True, "dashboard.view": False}
        query, principal_id, keys = mock_pool.fetch.call_args[0]
        assert "ANY($2::text[])" in query
        assert keys == ["users.manage", "dashboard.view"]

    @pytest.mark.asyncio
    async def test_find_all_overrides_without_keys_loads_everything(self, store, mock_pool):
        await store.find_all_overrides("u-1")

        query = mock_pool.fetch.call_args[0][0]
        assert "ANY" not in query
        assert mock_pool.fetch.call_args[0][1:] == ("u-1",)

    @pytest.mark.asyncio
    async def test_find_all_overrides_empty_keys_skips_query(self, store, mock_pool):
        assert await store.find_all_overrides("u-1", []) == {}
        mock_pool.fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_find_role_grants(self, store, mock_pool):
        mock_pool.fetch.return_value = [{'permission': 'users.manage'}, {'permission': 'reports.view'}]

        assert await store.find_role_grants("u-1") == {"users.manage", "reports.view"}
        assert "platform.permission_roles" in mock_pool.fetch.call_args[0][0]

    @pytest.mark.asyncio
    async def test_find_permission_roles(self, store, mock_pool):
        mock_pool.fetch.return_value = [
            {'id': 7, 'name': 'Escalations', 'permissions': ['users.manage']},
            {'id': 8, 'name': 'Empty', 'permissions': None},
        ]

        roles = await store.find_permission_roles("u-1")

        assert [(r.id, r.name, r.permissions) for r in roles] == [
            ("7", "Escalations", frozenset({"users.manage"})),
            ("8", "Empty", frozenset()),
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        asyncpg.exceptions.UndefinedTableError("missing"),
        asyncpg.exceptions.InterfaceError("pool closed"),
        ConnectionRefusedError("refused"),
    ])
    async def test_driver_errors_become_store_unavailable(self, store, mock_pool, error):
        mock_pool.fetch.side_effect = error

        with pytest.raises(StoreUnavailableError) as exc_info:
            await store.find_role_grants("u-1")
        assert exc_info.value.__cause__ is error
        assert exc_info.value.details == {"operation": "load permission role grants"}
