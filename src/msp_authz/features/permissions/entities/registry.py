"""
Permission registry with the platform's predefined permission catalog.

The registry is an immutable object built once at process start and handed to
the resolver; nothing in msp-authz reads it as ambient global state.
"""

from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from ....config.constants import BaseRole
from ....core.exceptions import DuplicatePermissionError, PermissionNotFoundError
from .permission import PermissionDefinition, permission_key_value


_ALL = ("ADMIN", "MANAGER", "USER")
_STAFF = ("ADMIN", "MANAGER")
_ADMIN = ("ADMIN",)


# Platform permission catalog. Format: "module.action"
PLATFORM_PERMISSIONS = [
    # Dashboard
    {'key': 'dashboard.view', 'label': 'View Dashboard', 'description': 'Access the main dashboard', 'module': 'Dashboard', 'default_roles': _ALL},

    # Tickets
    {'key': 'tickets.view', 'label': 'View Tickets', 'description': 'View ticket lists and details', 'module': 'Tickets', 'default_roles': _ALL},
    {'key': 'tickets.create', 'label': 'Create Tickets', 'description': 'Create new tickets via UI or AI', 'module': 'Tickets', 'default_roles': _ALL},
    {'key': 'tickets.edit', 'label': 'Edit Tickets', 'description': 'Update ticket status, notes, assignments', 'module': 'Tickets', 'default_roles': _ALL},

    # Alerts
    {'key': 'alerts.view', 'label': 'View Alerts', 'description': 'View alert feed and details', 'module': 'Alerts', 'default_roles': _ALL},
    {'key': 'alerts.manage', 'label': 'Manage Alerts', 'description': 'Acknowledge, escalate, dismiss alerts', 'module': 'Alerts', 'default_roles': _ALL},

    # Clients
    {'key': 'clients.view', 'label': 'View Clients', 'description': 'View client list and details', 'module': 'Clients', 'default_roles': _ALL},

    # Backups
    {'key': 'backups.view', 'label': 'View Backups', 'description': 'View backup status, devices, and alerts', 'module': 'Backups', 'default_roles': _ALL},

    # Documentation
    {'key': 'documentation.view', 'label': 'View Documentation', 'description': 'Browse synced organizations, passwords, and assets', 'module': 'Documentation', 'default_roles': ()},

    # AI Agents
    {'key': 'ai.chat', 'label': 'Use AI Chat', 'description': 'Access the AI operations assistant', 'module': 'AI', 'default_roles': _ALL},
    {'key': 'ai.kb.read', 'label': 'Read Knowledge Base', 'description': 'Query the knowledge base via AI', 'module': 'AI', 'default_roles': _ALL},
    {'key': 'ai.kb.write', 'label': 'Write to Knowledge Base', 'description': 'Add/update knowledge base articles via AI', 'module': 'AI', 'default_roles': ()},
    {'key': 'ai.passwords', 'label': 'Access Passwords', 'description': 'Retrieve passwords and TOTP codes via AI', 'module': 'AI', 'default_roles': _ALL},
    {'key': 'ai.tickets', 'label': 'AI Ticket Operations', 'description': 'Create/update tickets via AI agent', 'module': 'AI', 'default_roles': _ALL},

    # Audit
    {'key': 'audit.view', 'label': 'View Audit Logs', 'description': 'Access the full audit log', 'module': 'Audit', 'default_roles': _ADMIN},
    {'key': 'audit.export', 'label': 'Export Audit Logs', 'description': 'Export audit data to CSV/PDF', 'module': 'Audit', 'default_roles': _ADMIN},

    # User Management
    {'key': 'users.view', 'label': 'View Users', 'description': 'View user list and profiles', 'module': 'Users', 'default_roles': _STAFF},
    {'key': 'users.manage', 'label': 'Manage Users', 'description': 'Edit roles, permissions, feature flags', 'module': 'Users', 'default_roles': _ADMIN},
    {'key': 'users.create', 'label': 'Create Users', 'description': 'Create local user accounts and send invites', 'module': 'Users', 'default_roles': _ADMIN},

    # Settings
    {'key': 'settings.view', 'label': 'View Settings', 'description': 'Access the settings pages', 'module': 'Settings', 'default_roles': _ADMIN},
    {'key': 'settings.integrations', 'label': 'Manage Integrations', 'description': 'Configure API credentials and connections', 'module': 'Settings', 'default_roles': _ADMIN},
    {'key': 'settings.branding', 'label': 'Manage Branding', 'description': 'Change logo and company name', 'module': 'Settings', 'default_roles': _ADMIN},
    {'key': 'settings.ai', 'label': 'Manage AI Settings', 'description': 'Configure models, budgets, rate limits', 'module': 'Settings', 'default_roles': _ADMIN},
    {'key': 'settings.notifications', 'label': 'Notification Settings', 'description': 'Access notification preferences and admin config', 'module': 'Settings', 'default_roles': _ALL},
    {'key': 'quicklinks.manage', 'label': 'Manage Quick Links', 'description': 'Create, edit, and assign quick link groups and shortcuts', 'module': 'Settings', 'default_roles': _ADMIN},

    # Notification Sources
    {'key': 'notifications.sentinelone', 'label': 'SentinelOne Alerts', 'description': 'Receive alert notifications from SentinelOne', 'module': 'Notifications', 'default_roles': _ADMIN},
    {'key': 'notifications.blackpoint', 'label': 'Blackpoint Alerts', 'description': 'Receive alert notifications from Blackpoint Cyber', 'module': 'Notifications', 'default_roles': _ADMIN},
    {'key': 'notifications.ninjaone', 'label': 'NinjaRMM Alerts', 'description': 'Receive alert notifications from NinjaRMM', 'module': 'Notifications', 'default_roles': _ADMIN},
    {'key': 'notifications.uptime', 'label': 'Uptime Alerts', 'description': 'Receive alert notifications from Uptime Monitor', 'module': 'Notifications', 'default_roles': _ADMIN},
    {'key': 'notifications.cove', 'label': 'Cove Backup Alerts', 'description': 'Receive alert notifications from Cove Backup', 'module': 'Notifications', 'default_roles': _ADMIN},

    # Phone
    {'key': 'phone.view', 'label': 'View Phone Dashboard', 'description': 'View 3CX call logs and PBX status', 'module': 'Phone', 'default_roles': _ALL},
    {'key': 'phone.manage', 'label': 'Manage Phone Settings', 'description': 'Configure 3CX instances and webhooks', 'module': 'Phone', 'default_roles': _ADMIN},

    # Network
    {'key': 'network.view', 'label': 'View Network', 'description': 'View UniFi sites, devices, and network health', 'module': 'Network', 'default_roles': _ALL},
    {'key': 'network.manage', 'label': 'Manage Network', 'description': 'Configure network integration settings', 'module': 'Network', 'default_roles': _ADMIN},

    # Reports
    {'key': 'reports.view', 'label': 'View Reports', 'description': 'Access dashboards and QBR reports', 'module': 'Reports', 'default_roles': _STAFF},
    {'key': 'reports.export', 'label': 'Export Reports', 'description': 'Export reports to PDF/CSV', 'module': 'Reports', 'default_roles': _STAFF},

    # Tools
    {'key': 'tools.grafana', 'label': 'Access Grafana', 'description': 'View embedded Grafana analytics dashboards', 'module': 'Tools', 'default_roles': _ADMIN},
    {'key': 'tools.grafana.edit', 'label': 'Edit Grafana Dashboards', 'description': 'Create and edit dashboards in Grafana', 'module': 'Tools', 'default_roles': _ADMIN},
    {'key': 'tools.grafana.admin', 'label': 'Grafana Admin', 'description': 'Full Grafana admin (users, data sources, etc)', 'module': 'Tools', 'default_roles': _ADMIN},
    {'key': 'tools.uptime', 'label': 'Access Uptime Monitor', 'description': 'View and manage uptime monitors', 'module': 'Tools', 'default_roles': _ADMIN},
    {'key': 'tools.n8n', 'label': 'Access n8n', 'description': 'Access n8n workflow automation platform', 'module': 'Tools', 'default_roles': ()},
    {'key': 'tools.azure', 'label': 'Azure Management', 'description': 'Access Azure resource health, databases, firewall, and monitoring', 'module': 'Tools', 'default_roles': _ADMIN},

    # CIPP (M365 Management)
    {'key': 'cipp.view', 'label': 'View CIPP', 'description': 'View M365 tenants, users, licenses, and security', 'module': 'CIPP', 'default_roles': _ALL},
    {'key': 'cipp.manage', 'label': 'Manage via CIPP', 'description': 'Create/disable users, reset passwords, manage groups, offboard', 'module': 'CIPP', 'default_roles': _STAFF},
    {'key': 'cipp.security', 'label': 'CIPP Security Actions', 'description': 'Manage security alerts/incidents, device actions, LAPS, password resets', 'module': 'CIPP', 'default_roles': _ADMIN},
]


def _enum_member_name(key: str) -> str:
    return key.upper().replace(".", "_")


# Symbolic names for the shipped catalog, e.g. PermissionKey.USERS_MANAGE == "users.manage"
PermissionKey = Enum(
    "PermissionKey",
    [(_enum_member_name(p['key']), p['key']) for p in PLATFORM_PERMISSIONS],
    type=str,
    module=__name__,
)


class PermissionRegistry:
    """
    Immutable catalog of permission definitions.

    Lookups accept plain strings or PermissionKey members. Iteration preserves
    catalog order, which is also the order of effective-permission reports.
    """

    def __init__(self, definitions: Iterable[PermissionDefinition]):
        by_key: Dict[str, PermissionDefinition] = {}
        for definition in definitions:
            if definition.key in by_key:
                raise DuplicatePermissionError(
                    f"Permission defined twice: {definition.key}",
                    details={"key": definition.key},
                )
            by_key[definition.key] = definition
        self._definitions: Mapping[str, PermissionDefinition] = MappingProxyType(by_key)
        self._ordered: Tuple[PermissionDefinition, ...] = tuple(by_key.values())

    @classmethod
    def from_dicts(cls, entries: Iterable[Mapping]) -> "PermissionRegistry":
        """Build a registry from catalog dictionaries (see PLATFORM_PERMISSIONS)."""
        return cls(
            PermissionDefinition(
                key=entry['key'],
                label=entry.get('label', entry['key']),
                description=entry.get('description', ''),
                module=entry.get('module', entry['key'].split('.')[0].title()),
                default_roles=frozenset(entry.get('default_roles', ())),
            )
            for entry in entries
        )

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, (str, Enum)):
            return False
        return permission_key_value(key) in self._definitions

    def __iter__(self) -> Iterator[PermissionDefinition]:
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)

    def get(self, key: Union[str, Enum]) -> Optional[PermissionDefinition]:
        """Get a definition, or None for keys outside the catalog."""
        return self._definitions.get(permission_key_value(key))

    def require(self, key: Union[str, Enum]) -> PermissionDefinition:
        """Get a definition or raise PermissionNotFoundError."""
        definition = self.get(key)
        if definition is None:
            raise PermissionNotFoundError(
                f"Unknown permission key: {permission_key_value(key)}",
                details={"key": permission_key_value(key)},
            )
        return definition

    def keys(self) -> List[str]:
        return [d.key for d in self._ordered]

    def is_default_granted(self, key: Union[str, Enum], role: Optional[BaseRole]) -> bool:
        """Base-role default tier: False for unknown keys and for principals without a role."""
        definition = self.get(key)
        return definition is not None and definition.is_default_for(role)

    def modules(self) -> List[str]:
        """Unique module names in catalog order."""
        return list(dict.fromkeys(d.module for d in self._ordered))

    def by_module(self) -> Dict[str, List[PermissionDefinition]]:
        """Definitions grouped by module, for admin UI display."""
        grouped: Dict[str, List[PermissionDefinition]] = {}
        for definition in self._ordered:
            grouped.setdefault(definition.module, []).append(definition)
        return grouped

    def defaults_for_role(self, role: BaseRole) -> List[str]:
        """Keys a base role receives with no overrides or permission roles."""
        return [d.key for d in self._ordered if d.is_default_for(role)]


@lru_cache()
def default_registry() -> PermissionRegistry:
    """Registry built from the shipped platform catalog."""
    return PermissionRegistry.from_dicts(PLATFORM_PERMISSIONS)
