"""
Module: seedtrace_kernel.models.seed_lot
Responsibility: ORM persistence for seed lots and their single-parent
    genealogy link.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/ value types only.  MUST NOT import from services/ or selectors/.

Invariants enforced:
    - At most one parent: parent_lot_id is a single nullable self-reference.
    - Soft delete only: lots are deactivated (is_active=False), never deleted.
    - Quantity is Numeric(18, 3) kilograms, never float.

Non-goals:
    - Level ordering, acyclicity and quantity conservation are NOT enforced
      here; GenealogyService and SeedLotService check them at write time and
      the consistency checks report them at read time.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from seedtrace_kernel.db.base import TrackedBase
from seedtrace_kernel.domain.genealogy import LotRecord, MultiplierRef, VarietyRef
from seedtrace_kernel.domain.lot_status import LotStatus
from seedtrace_kernel.domain.seed_level import SeedLevel
from seedtrace_kernel.models.multiplier import MultiplierModel
from seedtrace_kernel.models.variety import VarietyModel


class SeedLotModel(TrackedBase):
    """
    Persistent storage for seed lots.

    Guarantees:
        - id follows SL-<LEVEL>-<YEAR>-<SEQ> (assigned by SeedLotService).
        - level and status are stored as their upper-case enum values.
        - variety and multiplier are eagerly joined so to_domain() never
          triggers extra round trips.
    """

    __tablename__ = "seed_lots"

    __table_args__ = (
        # Query: children of a lot (genealogy traversal)
        Index("idx_seed_lot_parent", "parent_lot_id"),
        Index("idx_seed_lot_level_status", "level", "status"),
        Index("idx_seed_lot_variety", "variety_id"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True)

    level: Mapped[str] = mapped_column(String(4), nullable=False)

    quantity: Mapped[Decimal] = mapped_column(nullable=False)

    production_date: Mapped[date] = mapped_column(nullable=False)

    expiry_date: Mapped[date | None] = mapped_column(nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=LotStatus.PENDING.value,
    )

    batch_number: Mapped[str | None] = mapped_column(String(50), nullable=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    variety_id: Mapped[int] = mapped_column(
        ForeignKey("varieties.id"),
        nullable=False,
    )

    multiplier_id: Mapped[int | None] = mapped_column(
        ForeignKey("multipliers.id"),
        nullable=True,
    )

    parent_lot_id: Mapped[str | None] = mapped_column(
        ForeignKey("seed_lots.id"),
        nullable=True,
    )

    variety: Mapped[VarietyModel] = relationship(lazy="joined")

    multiplier: Mapped[MultiplierModel | None] = relationship(lazy="joined")

    def to_domain(self) -> LotRecord:
        return LotRecord(
            id=self.id,
            level=SeedLevel(self.level),
            quantity=Decimal(self.quantity),
            production_date=self.production_date,
            status=LotStatus(self.status),
            variety=(
                VarietyRef(id=self.variety.id, name=self.variety.name, code=self.variety.code)
                if self.variety is not None
                else None
            ),
            multiplier=(
                MultiplierRef(id=self.multiplier.id, name=self.multiplier.name)
                if self.multiplier is not None
                else None
            ),
            parent_lot_id=self.parent_lot_id,
            notes=self.notes,
            expiry_date=self.expiry_date,
            batch_number=self.batch_number,
            is_active=self.is_active,
        )

    def __repr__(self) -> str:
        return (
            f"<SeedLot {self.id}: level={self.level} qty={self.quantity} "
            f"parent={self.parent_lot_id}>"
        )
