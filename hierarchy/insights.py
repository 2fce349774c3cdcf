# ==========================================================================================================
# -------------- Insights over a built hierarchy -----------------------------------------------------------
# ==========================================================================================================
from collections import Counter
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional, Tuple

from hierarchy.errors import EmptyTree
from hierarchy.nodes import HierarchyNode
from hierarchy.taxonomy import PartnerRole


@dataclass(frozen=True)
class RoleShare:
    role: PartnerRole
    count: int
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.role.label, "count": self.count, "percentage": self.percentage}


@dataclass(frozen=True)
class InsightsReport:
    """Structural statistics of one tree. The root counts as a member."""
    total_members: int
    distribution: Tuple[RoleShare, ...]
    hierarchy_depth: int

    def share_of(self, role: PartnerRole) -> Optional[RoleShare]:
        for share in self.distribution:
            if share.role is role:
                return share
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalMembers": self.total_members,
            "distribution": [share.to_dict() for share in self.distribution],
            "hierarchyDepth": self.hierarchy_depth,
        }


def count_by_role(node: HierarchyNode) -> Counter:
    """Per-role node count of the subtree rooted at `node`, `node` included."""
    counts = Counter({node.role: 1})
    for child in node.children:
        counts += count_by_role(child)
    return counts


def hierarchy_depth(node: HierarchyNode) -> int:
    if not node.children:
        return 0
    return 1 + max(hierarchy_depth(child) for child in node.children)


def percentage(count: int, total: int) -> float:
    """Share of `total` in percent, rounded half-up to one decimal."""
    if total <= 0:
        raise EmptyTree("Cannot compute a percentage over an empty tree")
    value = (Decimal(count) * 100 / Decimal(total)).quantize(Decimal("0.1"), ROUND_HALF_UP)
    return float(value)


def apportion_percentages(counts: Dict[PartnerRole, int]) -> Dict[PartnerRole, float]:
    """
    One-decimal percentages per role that always add up to exactly 100.0.

    Each role starts from its share truncated to tenths of a percent; the
    leftover tenths go to the largest remainders (ties: larger count, then
    lower rank). Every value stays within 0.1 of the exact share.
    """
    total = sum(counts.values())
    if total <= 0:
        raise EmptyTree("Cannot compute a percentage over an empty tree")

    tenths = {}
    remainders = {}
    for role, count in counts.items():
        tenths[role], remainders[role] = divmod(count * 1000, total)

    leftover = 1000 - sum(tenths.values())
    ranked = sorted(counts, key=lambda role: (-remainders[role], -counts[role], role.rank))
    for role in ranked[:leftover]:
        tenths[role] += 1

    return {role: float(Decimal(value) / 10) for role, value in tenths.items()}


def compute_insights(root: Optional[HierarchyNode]) -> InsightsReport:
    if root is None:
        raise EmptyTree("No hierarchy to aggregate")

    counts = count_by_role(root)
    total = sum(counts.values())
    if total == 0:
        raise EmptyTree("Hierarchy has no members")

    shares = apportion_percentages(counts)
    distribution = tuple(
        RoleShare(role=role, count=count, percentage=shares[role])
        for role, count in sorted(counts.items(), key=lambda item: item[0].rank)
    )
    return InsightsReport(
        total_members=total,
        distribution=distribution,
        hierarchy_depth=hierarchy_depth(root),
    )
