"""Allowed organization scope resolution."""

import logging
from typing import FrozenSet

from ....config.constants import WILDCARD_ORG_ID, AccessMode
from ..entities import OrgCatalog, RuleStore
from .group_membership import GroupMembershipResolver


logger = logging.getLogger(__name__)


class AllowedScopeResolver:
    """Lists the organizations a principal has any org-level access to.

    Used to filter organization lists. A non-denied wildcard rule expands to
    every organization in the catalog.
    """

    def __init__(
        self,
        membership: GroupMembershipResolver,
        rule_store: RuleStore,
        org_catalog: OrgCatalog
    ):
        self.membership = membership
        self.rule_store = rule_store
        self.org_catalog = org_catalog

    async def get_allowed_org_ids(self, principal_id: str) -> FrozenSet[str]:
        group_ids = await self.membership.get_group_ids(principal_id)
        if not group_ids:
            return frozenset()

        rules = await self.rule_store.find_org_level_rules(sorted(group_ids))
        org_ids = frozenset(
            rule.org_id
            for rule in rules
            if rule.is_org_level and rule.mode != AccessMode.DENIED
        )

        if WILDCARD_ORG_ID in org_ids:
            all_org_ids = frozenset(await self.org_catalog.list_all_org_ids())
            logger.debug(f"Principal {principal_id} holds a wildcard rule: {len(all_org_ids)} orgs allowed")
            return all_org_ids

        return org_ids
