"""
Genealogy value objects.

Frozen dataclasses exchanged between the lot store, the genealogy service and
its callers.  All of them are transient: they are rebuilt on every call from
the lots the store returns.

    LotRecord       -- full lot row as the store sees it
    LotSummary      -- projection used by traversal results
    GenealogyNode   -- one lot inside a materialised tree
    DirectRelations -- a lot, its parent and its direct children
    GenealogyStats  -- aggregate counters over ancestors and descendants
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Iterator

from seedtrace_kernel.domain.lot_status import LotStatus
from seedtrace_kernel.domain.seed_level import SeedLevel


@dataclass(frozen=True)
class VarietyRef:
    id: int
    name: str
    code: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "code": self.code}


@dataclass(frozen=True)
class MultiplierRef:
    id: int
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class LotRecord:
    """
    A seed lot as returned by the lot store.

    `parent_lot_id` is the only structural field; children are implicit.
    """

    id: str
    level: SeedLevel
    quantity: Decimal
    production_date: date
    status: LotStatus
    variety: VarietyRef | None = None
    multiplier: MultiplierRef | None = None
    parent_lot_id: str | None = None
    notes: str | None = None
    expiry_date: date | None = None
    batch_number: str | None = None
    is_active: bool = True


@dataclass(frozen=True)
class LotSummary:
    id: str
    level: SeedLevel
    quantity: Decimal
    production_date: date
    status: LotStatus
    variety: VarietyRef | None = None
    multiplier: MultiplierRef | None = None
    parent_lot_id: str | None = None

    @classmethod
    def from_record(cls, record: LotRecord) -> LotSummary:
        return cls(
            id=record.id,
            level=record.level,
            quantity=record.quantity,
            production_date=record.production_date,
            status=record.status,
            variety=record.variety,
            multiplier=record.multiplier,
            parent_lot_id=record.parent_lot_id,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "level": self.level.value,
            "variety": self.variety.to_dict() if self.variety else None,
            "quantity": self.quantity,
            "production_date": self.production_date,
            "status": self.status.ui_value,
            "multiplier": self.multiplier.to_dict() if self.multiplier else None,
            "parent_lot_id": self.parent_lot_id,
        }


@dataclass(frozen=True)
class GenealogyNode:
    """
    One lot inside a genealogy tree.

    `depth` is the distance from the tree root (root = 0).  `children` keeps
    the order in which the store returned them.
    """

    id: str
    level: SeedLevel
    quantity: Decimal
    production_date: date
    status: LotStatus
    variety: VarietyRef | None = None
    multiplier: MultiplierRef | None = None
    parent_lot_id: str | None = None
    depth: int = 0
    children: tuple[GenealogyNode, ...] = ()

    @classmethod
    def from_record(
        cls,
        record: LotRecord,
        depth: int = 0,
        children: tuple[GenealogyNode, ...] = (),
    ) -> GenealogyNode:
        return cls(
            id=record.id,
            level=record.level,
            quantity=record.quantity,
            production_date=record.production_date,
            status=record.status,
            variety=record.variety,
            multiplier=record.multiplier,
            parent_lot_id=record.parent_lot_id,
            depth=depth,
            children=children,
        )

    def iter_nodes(self) -> Iterator[GenealogyNode]:
        """Pre-order walk over this node and every node below it."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def iter_edges(self) -> Iterator[tuple[GenealogyNode, GenealogyNode]]:
        """(parent, child) pairs in pre-order."""
        for node in self.iter_nodes():
            for child in node.children:
                yield node, child

    @property
    def size(self) -> int:
        return sum(1 for _ in self.iter_nodes())

    @property
    def height(self) -> int:
        """Number of levels below this node (0 for a leaf)."""
        return max((node.depth for node in self.iter_nodes()), default=self.depth) - self.depth

    def find(self, lot_id: str) -> GenealogyNode | None:
        for node in self.iter_nodes():
            if node.id == lot_id:
                return node
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "level": self.level.value,
            "variety": self.variety.to_dict() if self.variety else None,
            "quantity": self.quantity,
            "production_date": self.production_date,
            "status": self.status.ui_value,
            "multiplier": self.multiplier.to_dict() if self.multiplier else None,
            "parent_lot_id": self.parent_lot_id,
            "depth": self.depth,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass(frozen=True)
class DirectRelations:
    current: LotSummary
    parent: LotSummary | None
    children: tuple[LotSummary, ...] = ()


@dataclass(frozen=True)
class GenealogyStats:
    """
    Aggregates over a lot's ancestor chain and descendant set.

    `depth` is the length of the ancestor chain including the lot itself;
    `total_ancestors` excludes the lot.  `breadth` counts direct children.
    """

    lot_id: str
    total_ancestors: int
    total_descendants: int
    total_direct_children: int
    has_parent: bool
    depth: int
    breadth: int
    descendants_by_level: dict[str, int] = field(default_factory=dict)
    total_quantity_in_descendants: Decimal = Decimal("0")
    multipliers: tuple[str, ...] = ()
