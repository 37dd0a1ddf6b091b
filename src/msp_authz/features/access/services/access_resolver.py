"""Hierarchical access resolution.

Within one group the most specific matching rule decides; across groups the
most permissive decision wins. No group, no rule or no match is DENIED.
"""

import logging
from typing import Dict, Iterable, Optional, Tuple

from ....config.constants import WILDCARD_ORG_ID, AccessMode
from ..entities import AccessRequestContext, AccessResult, AccessRule, RuleMatch, RuleStore
from .group_membership import GroupMembershipResolver
from .rule_matcher import RuleMatcher


logger = logging.getLogger(__name__)

_Candidate = Tuple[RuleMatch, AccessRule]


def _beats_within_group(candidate: _Candidate, incumbent: _Candidate) -> bool:
    """Higher specificity, then more permissive mode, then lower rule id."""
    match, rule = candidate
    best_match, best_rule = incumbent
    if match.specificity != best_match.specificity:
        return match.specificity > best_match.specificity
    if match.mode != best_match.mode:
        return match.mode.is_more_permissive_than(best_match.mode)
    return rule.id < best_rule.id


def resolve_from_rules(
    rules: Iterable[AccessRule],
    context: AccessRequestContext,
    matcher: Optional[RuleMatcher] = None
) -> AccessResult:
    """Decide access from already-loaded rules.

    Shared by the single and batch resolvers so both produce identical results.
    """
    matcher = matcher or RuleMatcher()

    best_by_group: Dict[str, _Candidate] = {}
    for rule in rules:
        match = matcher.match(rule, context)
        if match is None:
            continue
        incumbent = best_by_group.get(rule.group_id)
        if incumbent is None or _beats_within_group((match, rule), incumbent):
            best_by_group[rule.group_id] = (match, rule)

    if not best_by_group:
        return AccessResult.denied()

    # Across groups: most permissive mode, then smallest group id
    group_id, (match, rule) = min(
        best_by_group.items(),
        key=lambda item: (-item[1][0].mode.priority, item[0]),
    )

    return AccessResult(
        allowed=match.mode != AccessMode.DENIED,
        mode=match.mode,
        group_id=group_id,
        group_name=rule.group_name,
        specificity=match.specificity,
    )


class HierarchicalAccessResolver:
    """Resolves access for a single request context."""

    def __init__(
        self,
        membership: GroupMembershipResolver,
        rule_store: RuleStore,
        matcher: Optional[RuleMatcher] = None
    ):
        self.membership = membership
        self.rule_store = rule_store
        self.matcher = matcher or RuleMatcher()

    async def resolve(self, principal_id: str, context: AccessRequestContext) -> AccessResult:
        group_ids = await self.membership.get_group_ids(principal_id)
        if not group_ids:
            logger.debug(f"Principal {principal_id} has no access groups: denied {context}")
            return AccessResult.denied()

        rules = await self.rule_store.find_rules(
            sorted(group_ids),
            list(dict.fromkeys([context.org_id, WILDCARD_ORG_ID])),
        )
        result = resolve_from_rules(rules, context, self.matcher)
        logger.debug(f"Principal {principal_id} {context}: {result.mode.value} via group {result.group_id}")
        return result
