"""Batch hierarchical access resolution.

Resolves many asset contexts with one membership load and one rule load,
then decides every context in memory with the single-request logic.
"""

import logging
from typing import Dict, Iterable, List, Optional

from ....config.constants import WILDCARD_ORG_ID
from ....core.exceptions import InvalidAccessRequestError
from ..entities import AccessRequestContext, AccessResult, AccessRule, RuleStore
from .access_resolver import resolve_from_rules
from .group_membership import GroupMembershipResolver
from .rule_matcher import RuleMatcher


logger = logging.getLogger(__name__)


class BatchAccessResolver:
    """Resolves access for a list of asset contexts, keyed by asset id."""

    def __init__(
        self,
        membership: GroupMembershipResolver,
        rule_store: RuleStore,
        matcher: Optional[RuleMatcher] = None
    ):
        self.membership = membership
        self.rule_store = rule_store
        self.matcher = matcher or RuleMatcher()

    @staticmethod
    def _validate_contexts(contexts: List[AccessRequestContext]) -> None:
        for index, context in enumerate(contexts):
            if not context.asset_id:
                raise InvalidAccessRequestError(
                    "Batch access requests require an asset_id on every context",
                    details={"index": index, "org_id": context.org_id},
                )

    async def resolve_batch(
        self,
        principal_id: str,
        contexts: Iterable[AccessRequestContext]
    ) -> Dict[str, AccessResult]:
        """Resolve every context; a repeated asset id keeps the last context's result."""
        contexts = list(contexts)
        if not contexts:
            return {}
        self._validate_contexts(contexts)

        group_ids = await self.membership.get_group_ids(principal_id)
        if not group_ids:
            logger.debug(f"Principal {principal_id} has no access groups: denied {len(contexts)} assets")
            return {context.asset_id: AccessResult.denied() for context in contexts}

        org_ids = list(dict.fromkeys([c.org_id for c in contexts] + [WILDCARD_ORG_ID]))
        rules = await self.rule_store.find_rules(sorted(group_ids), org_ids)

        rules_by_org: Dict[str, List[AccessRule]] = {}
        for rule in rules:
            rules_by_org.setdefault(rule.org_id, []).append(rule)

        wildcard_rules = rules_by_org.get(WILDCARD_ORG_ID, [])

        results: Dict[str, AccessResult] = {}
        for context in contexts:
            if context.org_id == WILDCARD_ORG_ID:
                candidate_rules = wildcard_rules
            else:
                candidate_rules = rules_by_org.get(context.org_id, []) + wildcard_rules
            results[context.asset_id] = resolve_from_rules(candidate_rules, context, self.matcher)

        logger.debug(f"Resolved {len(results)} assets for principal {principal_id} from {len(rules)} rules")
        return results
