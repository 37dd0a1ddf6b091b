"""Tests for the three-tier permission resolver."""

import pytest

from msp_authz.config.constants import BaseRole, PermissionSource
from msp_authz.core.exceptions import PermissionNotFoundError, StoreUnavailableError
from msp_authz.features.permissions.entities import PermissionKey, PermissionRole
from msp_authz.features.permissions.services import PermissionResolver


class TestHasPermission:
    """Test single-key resolution order."""

    @pytest.fixture
    def resolver(self, mock_permission_store, mock_identity_store, registry):
        return PermissionResolver(mock_permission_store, mock_identity_store, registry)

    @pytest.mark.asyncio
    async def test_base_role_default_denies_user(self, resolver):
        """USER without override or role grant cannot manage users."""
        assert await resolver.has_permission("u-1", "users.manage") is False

    @pytest.mark.asyncio
    async def test_base_role_default_grants_admin(self, resolver, mock_identity_store):
        mock_identity_store.get_base_role.return_value = BaseRole.ADMIN

        assert await resolver.has_permission("u-1", PermissionKey.USERS_MANAGE) is True

    @pytest.mark.asyncio
    async def test_override_revoke_beats_role_grant(self, resolver, mock_permission_store):
        mock_permission_store.find_override.return_value = False
        mock_permission_store.find_role_grants.return_value = {"users.manage"}

        assert await resolver.has_permission("u-1", "users.manage") is False
        mock_permission_store.find_role_grants.assert_not_called()

    @pytest.mark.asyncio
    async def test_override_revoke_beats_base_default(self, resolver, mock_permission_store, mock_identity_store):
        mock_identity_store.get_base_role.return_value = BaseRole.ADMIN
        mock_permission_store.find_override.return_value = False

        assert await resolver.has_permission("u-1", "dashboard.view") is False

    @pytest.mark.asyncio
    async def test_override_grant_beats_base_default(self, resolver, mock_permission_store):
        mock_permission_store.find_override.return_value = True

        assert await resolver.has_permission("u-1", "audit.view") is True

    @pytest.mark.asyncio
    async def test_role_grant(self, resolver, mock_permission_store):
        mock_permission_store.find_role_grants.return_value = {"users.manage"}

        assert await resolver.has_permission("u-1", "users.manage") is True

    @pytest.mark.asyncio
    async def test_unknown_key_denied_at_default_tier(self, resolver):
        assert await resolver.has_permission("u-1", "tickets.delete") is False

    @pytest.mark.asyncio
    async def test_unknown_key_can_be_granted_by_role(self, resolver, mock_permission_store):
        mock_permission_store.find_role_grants.return_value = {"tickets.delete"}

        assert await resolver.has_permission("u-1", "tickets.delete") is True

    @pytest.mark.asyncio
    async def test_missing_principal_denied_even_with_override(
        self, resolver, mock_permission_store, mock_identity_store
    ):
        mock_identity_store.get_base_role.return_value = None
        mock_permission_store.find_override.return_value = True

        assert await resolver.has_permission("ghost", "dashboard.view") is False

    @pytest.mark.asyncio
    async def test_key_normalized_before_store_call(self, resolver, mock_permission_store):
        await resolver.has_permission("u-1", PermissionKey.TICKETS_VIEW)

        mock_permission_store.find_override.assert_called_once_with("u-1", "tickets.view")

    @pytest.mark.asyncio
    async def test_strict_keys_reject_unknown_key(self, mock_permission_store, mock_identity_store, registry):
        resolver = PermissionResolver(mock_permission_store, mock_identity_store, registry, strict_keys=True)

        with pytest.raises(PermissionNotFoundError):
            await resolver.has_permission("u-1", "tickets.delete")
        mock_permission_store.find_override.assert_not_called()

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self, resolver, mock_permission_store):
        mock_permission_store.find_override.side_effect = StoreUnavailableError("down")

        with pytest.raises(StoreUnavailableError):
            await resolver.has_permission("u-1", "dashboard.view")


class TestHasPermissions:
    """Test batch resolution and bounded reads."""

    @pytest.fixture
    def resolver(self, mock_permission_store, mock_identity_store, registry):
        return PermissionResolver(mock_permission_store, mock_identity_store, registry)

    @pytest.mark.asyncio
    async def test_matches_single_key_results(self, resolver, mock_permission_store):
        mock_permission_store.find_all_overrides.return_value = {"dashboard.view": False, "audit.view": True}
        mock_permission_store.find_role_grants.return_value = {"users.manage", "reports.view"}
        keys = ["dashboard.view", "audit.view", "users.manage", "reports.view", "tickets.view", "settings.ai"]

        overrides = {"dashboard.view": False, "audit.view": True}
        mock_permission_store.find_override.side_effect = lambda pid, key: overrides.get(key)

        batch = await resolver.has_permissions("u-1", keys)
        singles = {key: await resolver.has_permission("u-1", key) for key in keys}

        assert batch == singles
        assert batch == {
            "dashboard.view": False,
            "audit.view": True,
            "users.manage": True,
            "reports.view": True,
            "tickets.view": True,
            "settings.ai": False,
        }

    @pytest.mark.asyncio
    async def test_three_reads_regardless_of_key_count(
        self, resolver, mock_permission_store, mock_identity_store, registry
    ):
        await resolver.has_permissions("u-1", registry.keys())

        mock_permission_store.find_all_overrides.assert_called_once_with("u-1", registry.keys())
        mock_permission_store.find_role_grants.assert_called_once_with("u-1")
        mock_identity_store.get_base_role.assert_called_once_with("u-1")
        mock_permission_store.find_override.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_keys_performs_no_reads(self, resolver, mock_permission_store, mock_identity_store):
        assert await resolver.has_permissions("u-1", []) == {}

        mock_permission_store.find_all_overrides.assert_not_called()
        mock_permission_store.find_role_grants.assert_not_called()
        mock_identity_store.get_base_role.assert_not_called()

    @pytest.mark.asyncio
    async def test_enum_keys_returned_as_strings(self, resolver):
        result = await resolver.has_permissions("u-1", [PermissionKey.DASHBOARD_VIEW, "dashboard.view"])

        assert result == {"dashboard.view": True}

    @pytest.mark.asyncio
    async def test_missing_principal_denies_all(self, resolver, mock_permission_store, mock_identity_store):
        mock_identity_store.get_base_role.return_value = None
        mock_permission_store.find_all_overrides.return_value = {"users.manage": True}

        result = await resolver.has_permissions("ghost", ["users.manage", "dashboard.view"])

        assert result == {"users.manage": False, "dashboard.view": False}


class TestEffectivePermissions:
    """Test the effective-permission report."""

    @pytest.fixture
    def resolver(self, mock_permission_store, mock_identity_store, small_registry):
        return PermissionResolver(mock_permission_store, mock_identity_store, small_registry)

    @pytest.mark.asyncio
    async def test_reports_every_key_with_source(self, resolver, mock_permission_store):
        mock_permission_store.find_all_overrides.return_value = {"dashboard.view": False}
        mock_permission_store.find_permission_roles.return_value = [
            PermissionRole(id="r-2", name="Reporting", permissions=frozenset({"reports.view"})),
        ]

        effective = await resolver.get_user_effective_permissions("u-1")

        assert [e.to_dict() for e in effective] == [
            {"permission": "dashboard.view", "granted": False, "source": "override"},
            {"permission": "users.manage", "granted": False, "source": "role"},
            {"permission": "reports.view", "granted": True, "source": "permission-role", "role_name": "Reporting"},
        ]
        mock_permission_store.find_all_overrides.assert_called_once_with("u-1", None)

    @pytest.mark.asyncio
    async def test_attributes_first_role_by_name(self, resolver, mock_permission_store):
        mock_permission_store.find_permission_roles.return_value = [
            PermissionRole(id="r-1", name="Zeta", permissions=frozenset({"users.manage"})),
            PermissionRole(id="r-2", name="Alpha", permissions=frozenset({"users.manage"})),
        ]

        effective = {e.permission: e for e in await resolver.get_user_effective_permissions("u-1")}

        assert effective["users.manage"].source == PermissionSource.PERMISSION_ROLE
        assert effective["users.manage"].role_name == "Alpha"

    @pytest.mark.asyncio
    async def test_consistent_with_has_permission(self, resolver, mock_permission_store, small_registry):
        mock_permission_store.find_all_overrides.return_value = {"users.manage": True}
        mock_permission_store.find_override.side_effect = lambda pid, key: {"users.manage": True}.get(key)

        effective = await resolver.get_user_effective_permissions("u-1")

        for entry in effective:
            assert entry.granted == await resolver.has_permission("u-1", entry.permission)

    @pytest.mark.asyncio
    async def test_missing_principal_reports_nothing(self, resolver, mock_identity_store):
        mock_identity_store.get_base_role.return_value = None

        assert await resolver.get_user_effective_permissions("ghost") == []
