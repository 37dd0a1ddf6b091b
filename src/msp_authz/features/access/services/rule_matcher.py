"""Rule matching for hierarchical access rules.

Each predicate recognises one rule shape and returns the specificity at which
that rule applies to a request, or None. Shapes are disjoint, so at most one
predicate answers; the matcher still takes the highest answer it gets. A '*'
rule is only ever a wildcard rule, including against a '*' request org, and a
'*' rule with a narrower scope matches nothing.
"""

from typing import Callable, Optional, Sequence

from ....config.constants import WILDCARD_ORG_ID, Specificity
from ..entities import AccessRequestContext, AccessRule, RuleMatch


RulePredicate = Callable[[AccessRule, AccessRequestContext], Optional[Specificity]]


def _targets_request_org(rule: AccessRule, context: AccessRequestContext) -> bool:
    return rule.org_id != WILDCARD_ORG_ID and rule.org_id == context.org_id


def match_wildcard(rule: AccessRule, context: AccessRequestContext) -> Optional[Specificity]:
    """'*' org rule with no narrower scope: applies everywhere, below any org rule."""
    if rule.org_id == WILDCARD_ORG_ID and rule.is_org_level:
        return Specificity.WILDCARD
    return None


def match_organization(rule: AccessRule, context: AccessRequestContext) -> Optional[Specificity]:
    if _targets_request_org(rule, context) and rule.is_org_level:
        return Specificity.ORGANIZATION
    return None


def match_section(rule: AccessRule, context: AccessRequestContext) -> Optional[Specificity]:
    if not _targets_request_org(rule, context):
        return None
    if not rule.section or rule.category_id or rule.asset_id:
        return None
    if not context.section or rule.section != context.section:
        return None
    return Specificity.SECTION


def match_category(rule: AccessRule, context: AccessRequestContext) -> Optional[Specificity]:
    if not _targets_request_org(rule, context):
        return None
    if not rule.section or not rule.category_id or rule.asset_id:
        return None
    if not context.section or rule.section != context.section:
        return None
    if not context.category_id or rule.category_id != context.category_id:
        return None
    return Specificity.CATEGORY


def match_asset(rule: AccessRule, context: AccessRequestContext) -> Optional[Specificity]:
    """Asset rules match on asset id; a section on both sides must agree."""
    if not _targets_request_org(rule, context) or not rule.asset_id:
        return None
    if rule.section and context.section and rule.section != context.section:
        return None
    if not context.asset_id or rule.asset_id != context.asset_id:
        return None
    return Specificity.ASSET


DEFAULT_PREDICATES = (
    match_wildcard,
    match_organization,
    match_section,
    match_category,
    match_asset,
)


class RuleMatcher:
    """Pure function object scoring an access rule against a request."""

    def __init__(self, predicates: Sequence[RulePredicate] = DEFAULT_PREDICATES):
        self.predicates = tuple(predicates)

    def match(self, rule: AccessRule, context: AccessRequestContext) -> Optional[RuleMatch]:
        """Return the specificity and mode at which the rule applies, or None."""
        specificities = [
            specificity
            for specificity in (predicate(rule, context) for predicate in self.predicates)
            if specificity is not None
        ]
        if not specificities:
            return None
        return RuleMatch(specificity=max(specificities), mode=rule.mode)
