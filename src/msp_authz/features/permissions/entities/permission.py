"""Permission domain entities for the msp-authz permissions feature.

Represents registry definitions, permission roles and the
effective-permission report rows produced by the resolver.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Union

from ....config.constants import BaseRole, PermissionSource


def permission_key_value(key: Union[str, Enum]) -> str:
    """Normalize a permission key (plain string or key enum member) to its string form."""
    if isinstance(key, Enum):
        return str(key.value)
    return str(key)


@dataclass(frozen=True)
class PermissionDefinition:
    """Immutable registry entry: a permission key and the base roles granted it by default."""

    key: str
    label: str
    description: str
    module: str
    default_roles: FrozenSet[BaseRole] = frozenset()

    def __post_init__(self):
        """Validate permission key format: module.action"""
        key = permission_key_value(self.key)
        if "." not in key or key.startswith(".") or key.endswith("."):
            raise ValueError(f"Permission key must be in format 'module.action', got: {key}")
        object.__setattr__(self, "key", key)
        object.__setattr__(self, "default_roles", frozenset(BaseRole(r) for r in self.default_roles))

    def is_default_for(self, role: Optional[BaseRole]) -> bool:
        """Check if a base role receives this permission by default."""
        return role is not None and role in self.default_roles

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class PermissionRole:
    """Named bundle of permission keys assignable to principals."""

    id: str
    name: str
    permissions: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        object.__setattr__(
            self, "permissions", frozenset(permission_key_value(p) for p in self.permissions)
        )


@dataclass(frozen=True)
class EffectivePermission:
    """Resolved value of one registry key for a principal, with the tier that produced it."""

    permission: str
    granted: bool
    source: PermissionSource
    role_name: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "permission": self.permission,
            "granted": self.granted,
            "source": self.source.value,
        }
        if self.role_name is not None:
            data["role_name"] = self.role_name
        return data
