"""Pytest configuration and fixtures for msp-authz tests."""

import pytest
from unittest.mock import AsyncMock

from msp_authz.config.constants import AccessMode, BaseRole, StoreFailurePolicy
from msp_authz.config.settings import AuthzSettings
from msp_authz.features.permissions.entities import PermissionRegistry, default_registry
from msp_authz.infrastructure.memory_store import InMemoryAuthorizationStore


@pytest.fixture
def settings():
    """Fail-closed settings that ignore any local .env file."""
    return AuthzSettings(_env_file=None, store_failure_policy=StoreFailurePolicy.DENY)


@pytest.fixture
def raising_settings():
    """Settings that propagate store failures."""
    return AuthzSettings(_env_file=None, store_failure_policy=StoreFailurePolicy.RAISE)


@pytest.fixture
def registry():
    """The shipped platform permission catalog."""
    return default_registry()


@pytest.fixture
def small_registry():
    """Small registry for exact effective-permission assertions."""
    return PermissionRegistry.from_dicts([
        {'key': 'dashboard.view', 'label': 'View Dashboard', 'module': 'Dashboard', 'default_roles': ('ADMIN', 'MANAGER', 'USER')},
        {'key': 'users.manage', 'label': 'Manage Users', 'module': 'Users', 'default_roles': ('ADMIN',)},
        {'key': 'reports.view', 'label': 'View Reports', 'module': 'Reports', 'default_roles': ('ADMIN', 'MANAGER')},
    ])


@pytest.fixture
def mock_permission_store():
    """Mock permission store with empty answers."""
    store = AsyncMock()
    store.find_override = AsyncMock(return_value=None)
    store.find_all_overrides = AsyncMock(return_value={})
    store.find_role_grants = AsyncMock(return_value=set())
    store.find_permission_roles = AsyncMock(return_value=[])
    return store


@pytest.fixture
def mock_identity_store():
    """Mock identity store; principals are USER unless a test says otherwise."""
    store = AsyncMock()
    store.get_base_role = AsyncMock(return_value=BaseRole.USER)
    return store


@pytest.fixture
def mock_group_store():
    """Mock group store with no memberships."""
    store = AsyncMock()
    store.find_direct_group_ids = AsyncMock(return_value=set())
    store.find_group_ids_via_roles = AsyncMock(return_value=set())
    store.find_group_assignments = AsyncMock(return_value=[])
    return store


@pytest.fixture
def mock_rule_store():
    """Mock rule store with no rules."""
    store = AsyncMock()
    store.find_rules = AsyncMock(return_value=[])
    store.find_org_level_rules = AsyncMock(return_value=[])
    return store


@pytest.fixture
def mock_org_catalog():
    catalog = AsyncMock()
    catalog.list_all_org_ids = AsyncMock(return_value=set())
    return catalog


@pytest.fixture
def mock_pool():
    """Mock asyncpg pool."""
    pool = AsyncMock()
    pool.fetch = AsyncMock(return_value=[])
    pool.fetchrow = AsyncMock(return_value=None)
    return pool


@pytest.fixture
def memory_store():
    """Snapshot with a small MSP team.

    - alice: ADMIN, no groups
    - bob: USER in "Tier 1" (org-level READ_ONLY on org-1) and, through the
      "Escalations" permission role, in "Tier 2" (DENIED on pw-1)
    - carol: MANAGER in "Auditors" (wildcard READ_ONLY)
    - dave: USER with no groups
    """
    store = InMemoryAuthorizationStore()
    store.add_user("alice", BaseRole.ADMIN)
    store.add_user("bob", BaseRole.USER)
    store.add_user("carol", BaseRole.MANAGER)
    store.add_user("dave", BaseRole.USER)

    store.add_permission_role("role-esc", "Escalations", ["users.manage", "reports.view"], members=["bob"])

    store.add_group("g-tier1", "Tier 1", users=["bob"])
    store.add_group("g-tier2", "Tier 2", roles=["role-esc"])
    store.add_group("g-audit", "Auditors", users=["carol"])

    store.add_rule("g-tier1", "org-1", AccessMode.READ_ONLY, rule_id="r-1")
    store.add_rule("g-tier2", "org-1", AccessMode.DENIED, section="passwords", asset_id="pw-1", rule_id="r-2")
    store.add_rule("g-audit", "*", AccessMode.READ_ONLY, rule_id="r-3")

    store.add_org("org-1", "org-2", "org-3")
    return store
