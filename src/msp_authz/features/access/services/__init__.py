"""Access services package.

Rule matching and hierarchical, batch and scope resolution.
"""

from .access_resolver import HierarchicalAccessResolver, resolve_from_rules
from .batch_resolver import BatchAccessResolver
from .group_membership import GroupMembershipResolver
from .rule_matcher import DEFAULT_PREDICATES, RuleMatcher
from .scope_resolver import AllowedScopeResolver

__all__ = [
    "HierarchicalAccessResolver",
    "resolve_from_rules",
    "BatchAccessResolver",
    "GroupMembershipResolver",
    "DEFAULT_PREDICATES",
    "RuleMatcher",
    "AllowedScopeResolver",
]
