"""Constants and enums for msp-authz.

This module defines the closed value sets shared by both authorization
layers. These correspond to the enums stored by the platform database.
"""

import re
from enum import Enum, IntEnum
from typing import Final, Pattern


# Wildcard organization identifier carried by access rules
WILDCARD_ORG_ID: Final[str] = "*"

# Database schema names are interpolated into SQL; only plain identifiers pass
SCHEMA_NAME_PATTERN: Final[Pattern[str]] = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]{0,62}$")


class BaseRole(str, Enum):
    """Base roles - the role stored on every platform user."""

    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    USER = "USER"


class PermissionSource(str, Enum):
    """Which resolution tier produced an effective permission."""

    OVERRIDE = "override"
    PERMISSION_ROLE = "permission-role"
    ROLE = "role"


class AccessMode(str, Enum):
    """Access granted by a hierarchical access rule."""

    READ_WRITE = "READ_WRITE"
    READ_ONLY = "READ_ONLY"
    DENIED = "DENIED"

    @property
    def priority(self) -> int:
        """Permissiveness rank (higher = more permissive)."""
        return _ACCESS_PRIORITY[self]

    def is_more_permissive_than(self, other: "AccessMode") -> bool:
        return self.priority > other.priority


_ACCESS_PRIORITY = {
    AccessMode.READ_WRITE: 2,
    AccessMode.READ_ONLY: 1,
    AccessMode.DENIED: 0,
}


class Section(str, Enum):
    """Documentation sections synced from the asset-management integration."""

    PASSWORDS = "passwords"
    FLEXIBLE_ASSETS = "flexible_assets"
    CONFIGURATIONS = "configurations"
    CONTACTS = "contacts"
    DOCUMENTS = "documents"


class Specificity(IntEnum):
    """How narrowly a rule targets a request (higher = narrower)."""

    WILDCARD = -1
    ORGANIZATION = 0
    SECTION = 1
    CATEGORY = 2
    ASSET = 3


class AssignmentType(str, Enum):
    """How a principal came to be a member of an access group."""

    DIRECT = "direct"
    ROLE = "role"


class StoreFailurePolicy(str, Enum):
    """What the authorization service does when a read port fails."""

    DENY = "deny"
    RAISE = "raise"
