"""Hierarchical access feature for msp-authz.

Access groups carry rules over organization, section, category and asset
scopes. The most specific rule decides within a group, the most permissive
group decides overall, and anything unmatched is denied.
"""

from .entities import (
    AccessExplanation,
    AccessGroup,
    AccessRequestContext,
    AccessResult,
    AccessRule,
    GroupAssignment,
    GroupStore,
    OrgCatalog,
    RuleMatch,
    RuleStore,
)
from .services import (
    AllowedScopeResolver,
    BatchAccessResolver,
    GroupMembershipResolver,
    HierarchicalAccessResolver,
    RuleMatcher,
    resolve_from_rules,
)

__all__ = [
    "AccessExplanation",
    "AccessGroup",
    "AccessRequestContext",
    "AccessResult",
    "AccessRule",
    "GroupAssignment",
    "GroupStore",
    "OrgCatalog",
    "RuleMatch",
    "RuleStore",
    "AllowedScopeResolver",
    "BatchAccessResolver",
    "GroupMembershipResolver",
    "HierarchicalAccessResolver",
    "RuleMatcher",
    "resolve_from_rules",
]
