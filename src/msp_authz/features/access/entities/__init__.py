"""Access entities package.

Contains rule, request and result types plus the access read ports.
"""

from .access_rule import (
    AccessExplanation,
    AccessGroup,
    AccessRequestContext,
    AccessResult,
    AccessRule,
    GroupAssignment,
    RuleMatch,
)
from .protocols import GroupStore, OrgCatalog, RuleStore

__all__ = [
    "AccessExplanation",
    "AccessGroup",
    "AccessRequestContext",
    "AccessResult",
    "AccessRule",
    "GroupAssignment",
    "RuleMatch",
    "GroupStore",
    "OrgCatalog",
    "RuleStore",
]
