# ==========================================================================================================
# -------------- Partner role taxonomy ---------------------------------------------------------------------
# ==========================================================================================================
#
#   universe fund  ->  franchise  ->  sub-franchise  ->  channel-partner
#      rank 0           rank 1           rank 2             rank 3 (terminal)
#
import enum
import re
from typing import Optional

from hierarchy.errors import UnknownRole


UNIVERSE_FUND_KEY = "universeFundId"
UNIQUE_KEY = "uniqueId"


class PartnerRole(enum.Enum):
    """The four partner tiers. Values are the labels stored in `partners.user_type`."""

    UNIVERSE_FUND = "universe fund"
    FRANCHISE = "franchise"
    SUB_FRANCHISE = "sub-franchise"
    CHANNEL_PARTNER = "channel-partner"

    @property
    def label(self) -> str:
        return self.value

    @property
    def rank(self) -> int:
        return ROLE_ORDER.index(self)

    @property
    def is_terminal(self) -> bool:
        return child_role(self) is None

    @classmethod
    def parse(cls, value) -> "PartnerRole":
        """
        Resolve a role from a stored label, an enum name or a loose spelling.
        "universe fund", "universe-fund", "UniverseFund" and "UNIVERSE_FUND"
        all resolve to the same member.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise UnknownRole(value)

        role = _ROLE_LOOKUP.get(_normalise(value))
        if role is None:
            raise UnknownRole(value)
        return role


def _normalise(value: str) -> str:
    return re.sub(r"[^a-z]", "", value.lower())


ROLE_ORDER = (
    PartnerRole.UNIVERSE_FUND,
    PartnerRole.FRANCHISE,
    PartnerRole.SUB_FRANCHISE,
    PartnerRole.CHANNEL_PARTNER,
)

_CHILD_ROLE = {
    PartnerRole.UNIVERSE_FUND: PartnerRole.FRANCHISE,
    PartnerRole.FRANCHISE: PartnerRole.SUB_FRANCHISE,
    PartnerRole.SUB_FRANCHISE: PartnerRole.CHANNEL_PARTNER,
    PartnerRole.CHANNEL_PARTNER: None,
}

_PARENT_ROLE = {child: parent for parent, child in _CHILD_ROLE.items() if child is not None}

_ROLE_LOOKUP = {}
for _role in PartnerRole:
    _ROLE_LOOKUP[_normalise(_role.value)] = _role
    _ROLE_LOOKUP[_normalise(_role.name)] = _role


def child_role(role: PartnerRole) -> Optional[PartnerRole]:
    """Immediate child tier, or None for channel partners."""
    return _CHILD_ROLE[role]


def parent_role(role: PartnerRole) -> Optional[PartnerRole]:
    """Immediate parent tier, or None for universe funds."""
    return _PARENT_ROLE.get(role)


def linkage_field(role: PartnerRole) -> str:
    """Name of the self-identifying attribute children use to reference a partner of `role`."""
    if role is PartnerRole.UNIVERSE_FUND:
        return UNIVERSE_FUND_KEY
    return UNIQUE_KEY
