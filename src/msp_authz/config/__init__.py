"""Configuration for msp-authz: enums, settings and logging."""

from .constants import (
    WILDCARD_ORG_ID,
    AccessMode,
    AssignmentType,
    BaseRole,
    PermissionSource,
    Section,
    Specificity,
    StoreFailurePolicy,
)
from .settings import AuthzSettings, get_settings
from .logging_config import LoggingConfig, setup_logging

__all__ = [
    "WILDCARD_ORG_ID",
    "AccessMode",
    "AssignmentType",
    "BaseRole",
    "PermissionSource",
    "Section",
    "Specificity",
    "StoreFailurePolicy",
    "AuthzSettings",
    "get_settings",
    "LoggingConfig",
    "setup_logging",
]
