# ==========================================================================================================
# -------------- Partner records and hierarchy nodes -------------------------------------------------------
# ==========================================================================================================
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from hierarchy.taxonomy import PartnerRole, linkage_field


@dataclass(frozen=True)
class PartnerRecord:
    """
    Flat, read-only view of one stored partner.

    `linkage_key` is the partner's own identifier (universeFundId for universe
    funds, uniqueId for everybody else). `parent_id` / `parent_role` point at
    the owning partner one tier up and are None for universe funds.
    """
    id: Any
    name: str
    phone: str
    role: PartnerRole
    linkage_key: Optional[str]
    parent_id: Optional[str] = None
    parent_role: Optional[PartnerRole] = None

    @property
    def linkage_field(self) -> str:
        return linkage_field(self.role)


@dataclass
class HierarchyNode:
    id: Any
    name: str
    phone: str
    role: PartnerRole
    linkage_key: Optional[str]
    children: List["HierarchyNode"] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: PartnerRecord) -> "HierarchyNode":
        return cls(
            id=record.id,
            name=record.name,
            phone=record.phone,
            role=record.role,
            linkage_key=record.linkage_key,
        )

    def walk(self) -> Iterator["HierarchyNode"]:
        """Pre-order traversal, self first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "userType": self.role.label,
            linkage_field(self.role): self.linkage_key,
            "children": [child.to_dict() for child in self.children],
        }
