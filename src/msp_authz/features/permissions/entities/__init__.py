"""Permission entities package.

Domain entities, the permission registry and read-port protocols.
"""

from .permission import (
    PermissionDefinition,
    PermissionRole,
    EffectivePermission,
    permission_key_value,
)
from .registry import (
    PLATFORM_PERMISSIONS,
    PermissionKey,
    PermissionRegistry,
    default_registry,
)
from .protocols import PermissionStore, IdentityStore

__all__ = [
    # Domain entities
    "PermissionDefinition",
    "PermissionRole",
    "EffectivePermission",
    "permission_key_value",

    # Registry
    "PLATFORM_PERMISSIONS",
    "PermissionKey",
    "PermissionRegistry",
    "default_registry",

    # Protocols
    "PermissionStore",
    "IdentityStore",
]
