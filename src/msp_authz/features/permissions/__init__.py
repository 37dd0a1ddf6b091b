"""Permissions feature for msp-authz.

Flat "module.action" permission keys resolved through three tiers:
per-principal overrides, permission roles and base-role defaults.
"""

from .entities import (
    EffectivePermission,
    IdentityStore,
    PermissionDefinition,
    PermissionKey,
    PermissionRegistry,
    PermissionRole,
    PermissionStore,
    default_registry,
    permission_key_value,
)
from .services import PermissionResolver

__all__ = [
    "EffectivePermission",
    "IdentityStore",
    "PermissionDefinition",
    "PermissionKey",
    "PermissionRegistry",
    "PermissionRole",
    "PermissionStore",
    "default_registry",
    "permission_key_value",
    "PermissionResolver",
]
