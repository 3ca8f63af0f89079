"""
SeedLotService -- creation, transfer and soft deletion of seed lots.

Responsibility:
    Writes new SeedLotModel rows with generated SL-<LEVEL>-<YEAR>-<SEQ> ids,
    splits quantity off a lot for another multiplier, and deactivates lots
    that no longer hold active children.

Architecture position:
    Kernel > Services.  Extends BaseService (flush only, never commit).
    Relation changes on existing lots belong to GenealogyService.

Invariants enforced:
    - A new lot's parent must exist, be active and sit at a strictly
      earlier level.
    - Quantities are strictly positive; draws never take a lot below zero.
    - Lots are never hard-deleted.

Failure modes:
    - InvalidQuantityError, VarietyNotFoundError, MultiplierNotFoundError,
      LotNotFoundError, InvalidHierarchyError, InsufficientQuantityError,
      HasActiveChildLotsError.
    - IntegrityError if two writers allocate the same id concurrently; the
      caller retries.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from seedtrace_kernel.domain.genealogy import LotRecord
from seedtrace_kernel.domain.lot_id import format_lot_id
from seedtrace_kernel.domain.lot_status import LotStatus
from seedtrace_kernel.domain.quantity import to_quantity
from seedtrace_kernel.domain.seed_level import SeedLevel, is_valid_parent_level
from seedtrace_kernel.exceptions import (
    HasActiveChildLotsError,
    InsufficientQuantityError,
    InvalidHierarchyError,
    InvalidQuantityError,
    LotNotFoundError,
    MultiplierNotFoundError,
    VarietyNotFoundError,
)
from seedtrace_kernel.logging_config import get_logger
from seedtrace_kernel.models.seed_lot import SeedLotModel
from seedtrace_kernel.selectors.lot_selector import LotSelector
from seedtrace_kernel.services.base import BaseService

logger = get_logger("services.seed_lot")


@dataclass(frozen=True)
class LotTransfer:
    """Outcome of transfer_lot: the drawn-down source and the new lot."""

    source: LotRecord
    new_lot: LotRecord


class SeedLotService(BaseService[SeedLotModel]):
    def __init__(self, session: Session):
        super().__init__(session)
        self._selector = LotSelector(session)

    def create_lot(
        self,
        variety_id: int,
        level: str | SeedLevel,
        quantity: Decimal | int | str,
        production_date: date,
        *,
        parent_lot_id: str | None = None,
        multiplier_id: int | None = None,
        status: str | LotStatus = LotStatus.PENDING,
        notes: str | None = None,
        expiry_date: date | None = None,
        batch_number: str | None = None,
        year: int | None = None,
        draw_from_parent: bool = False,
    ) -> LotRecord:
        """
        Create a lot with the next free id for its level and year.

        ``year`` defaults to the current year.  With ``draw_from_parent``
        the new lot's quantity is taken out of the parent lot.
        """
        lot_level = SeedLevel.parse(level)
        lot_status = LotStatus.from_ui(status)
        amount = _positive_quantity(quantity)

        if self._selector.find_variety(variety_id) is None:
            raise VarietyNotFoundError(variety_id)
        if multiplier_id is not None and self._selector.find_multiplier(multiplier_id) is None:
            raise MultiplierNotFoundError(multiplier_id)

        parent: SeedLotModel | None = None
        if parent_lot_id is not None:
            parent = self._selector.find_model(parent_lot_id, for_update=draw_from_parent)
            if parent is None or not parent.is_active:
                raise LotNotFoundError(parent_lot_id)
            if not is_valid_parent_level(parent.level, lot_level):
                raise InvalidHierarchyError(
                    parent_id=parent.id,
                    parent_level=parent.level,
                    child_id="(new)",
                    child_level=lot_level.value,
                )
            if draw_from_parent and parent.quantity < amount:
                raise InsufficientQuantityError(parent.id, parent.quantity, amount)

        lot_year = year if year is not None else date.today().year
        lot_id = format_lot_id(
            lot_level, lot_year, self._selector.max_sequence(lot_level, lot_year) + 1
        )

        model = SeedLotModel(
            id=lot_id,
            level=lot_level.value,
            quantity=amount,
            production_date=production_date,
            expiry_date=expiry_date,
            status=lot_status.value,
            batch_number=batch_number,
            notes=notes,
            is_active=True,
            variety_id=variety_id,
            multiplier_id=multiplier_id,
            parent_lot_id=parent_lot_id,
        )
        self.session.add(model)
        if parent is not None and draw_from_parent:
            parent.quantity = parent.quantity - amount
        self.session.flush()
        self.session.refresh(model)

        logger.info(
            "seed_lot_created",
            extra={
                "lot_id": lot_id,
                "lot_level": lot_level.value,
                "quantity": amount,
                "parent_lot_id": parent_lot_id,
                "drawn_from_parent": draw_from_parent,
            },
        )
        return model.to_domain()

    def transfer_lot(
        self,
        lot_id: str,
        new_multiplier_id: int,
        quantity: Decimal | int | str,
        *,
        notes: str | None = None,
        year: int | None = None,
    ) -> LotTransfer:
        """
        Move ``quantity`` out of ``lot_id`` into a new sibling lot held by
        another multiplier.  Both writes commit or roll back together.
        """
        amount = _positive_quantity(quantity)

        with self.session.begin_nested():
            source = self._selector.find_model(lot_id, for_update=True)
            if source is None or not source.is_active:
                raise LotNotFoundError(lot_id)
            if self._selector.find_multiplier(new_multiplier_id) is None:
                raise MultiplierNotFoundError(new_multiplier_id)
            if source.quantity < amount:
                raise InsufficientQuantityError(lot_id, source.quantity, amount)

            source.quantity = source.quantity - amount

            level = SeedLevel(source.level)
            lot_year = year if year is not None else date.today().year
            new_id = format_lot_id(
                level, lot_year, self._selector.max_sequence(level, lot_year) + 1
            )
            new_lot = SeedLotModel(
                id=new_id,
                level=source.level,
                quantity=amount,
                production_date=source.production_date,
                expiry_date=source.expiry_date,
                status=source.status,
                notes=notes or f"Transferred from lot {lot_id}",
                is_active=True,
                variety_id=source.variety_id,
                multiplier_id=new_multiplier_id,
                parent_lot_id=source.parent_lot_id,
            )
            self.session.add(new_lot)
            self.session.flush()

        self.session.refresh(new_lot)
        logger.info(
            "seed_lot_transferred",
            extra={
                "lot_id": lot_id,
                "new_lot_id": new_id,
                "quantity": amount,
                "new_multiplier_id": new_multiplier_id,
            },
        )
        return LotTransfer(source=source.to_domain(), new_lot=new_lot.to_domain())

    def deactivate_lot(self, lot_id: str) -> LotRecord:
        """
        Soft-delete a lot.

        Raises:
            LotNotFoundError: Unknown lot.
            HasActiveChildLotsError: The lot still has active children.
        """
        model = self._selector.find_model(lot_id, for_update=True)
        if model is None:
            raise LotNotFoundError(lot_id)

        child_count = self._selector.count_active_children(lot_id)
        if child_count:
            raise HasActiveChildLotsError(lot_id, child_count)

        model.is_active = False
        self.session.flush()

        logger.info("seed_lot_deactivated", extra={"lot_id": lot_id})
        return model.to_domain()


def _positive_quantity(quantity: Decimal | int | str) -> Decimal:
    amount = to_quantity(quantity)
    if amount <= 0:
        raise InvalidQuantityError(amount)
    return amount
