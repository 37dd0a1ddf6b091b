"""Access domain entities for the msp-authz hierarchical access feature.

Rules grant an AccessMode over a documentation scope that narrows from
organization to section to category to a single asset.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ....config.constants import WILDCARD_ORG_ID, AccessMode, AssignmentType, Specificity
from ....core.exceptions import InvalidAccessRequestError


@dataclass(frozen=True)
class AccessGroup:
    """Named bundle of access rules."""

    id: str
    name: str


@dataclass(frozen=True)
class AccessRule:
    """One scoped grant belonging to exactly one access group.

    Scope fields nest: a category rule names its section, an asset rule names
    its organization. ``org_id == "*"`` applies to every organization.
    """

    id: str
    group_id: str
    org_id: str
    mode: AccessMode
    section: Optional[str] = None
    category_id: Optional[str] = None
    asset_id: Optional[str] = None
    group_name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "mode", AccessMode(self.mode))
        if self.section is not None:
            object.__setattr__(self, "section", str(getattr(self.section, "value", self.section)))

    @property
    def is_wildcard(self) -> bool:
        return self.org_id == WILDCARD_ORG_ID

    @property
    def is_org_level(self) -> bool:
        """True when the rule covers a whole organization (no narrower scope)."""
        return not self.section and not self.category_id and not self.asset_id


@dataclass(frozen=True)
class AccessRequestContext:
    """What a principal is trying to reach."""

    org_id: str
    section: Optional[str] = None
    category_id: Optional[str] = None
    asset_id: Optional[str] = None

    def __post_init__(self):
        if not self.org_id:
            raise InvalidAccessRequestError("Access request requires a non-empty org_id")
        if self.section is not None:
            object.__setattr__(self, "section", str(getattr(self.section, "value", self.section)))


@dataclass(frozen=True)
class RuleMatch:
    """A rule applies to a context at this specificity."""

    specificity: Specificity
    mode: AccessMode


@dataclass(frozen=True)
class AccessResult:
    """Resolved access decision; the winning group is reported when one exists."""

    allowed: bool
    mode: AccessMode
    group_id: Optional[str] = None
    group_name: Optional[str] = None
    specificity: Optional[Specificity] = None

    @classmethod
    def denied(cls) -> "AccessResult":
        """Decision when no group or rule grants anything."""
        return cls(allowed=False, mode=AccessMode.DENIED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "allowed": self.allowed,
            "mode": self.mode.value,
            "group_id": self.group_id,
            "group_name": self.group_name,
            "specificity": None if self.specificity is None else self.specificity.name.lower(),
        }


@dataclass(frozen=True)
class GroupAssignment:
    """Membership of a principal in one access group and how it was granted."""

    group_id: str
    group_name: str
    assignment_type: AssignmentType
    role_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "group_id": self.group_id,
            "group_name": self.group_name,
            "assignment_type": self.assignment_type.value,
        }
        if self.role_name is not None:
            data["role_name"] = self.role_name
        return data


@dataclass(frozen=True)
class AccessExplanation:
    """An access decision together with the memberships it was drawn from."""

    result: AccessResult
    groups: Tuple[GroupAssignment, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.result.to_dict(),
            "groups": [group.to_dict() for group in self.groups],
        }
