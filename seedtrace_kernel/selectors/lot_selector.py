"""
Module: seedtrace_kernel.selectors.lot_selector
Responsibility: Read-only queries over seed lots, varieties and multipliers.
Architecture position: Kernel > Selectors.  Used by SqlAlchemyLotStore and
    SeedLotService; returns LotRecord DTOs.

Failure modes:
    - None raised here; missing rows come back as None / empty lists and the
      caller decides whether that is an error.
"""

from __future__ import annotations

from typing import Iterable

from sqlalchemy import func, select

from seedtrace_kernel.domain.genealogy import LotRecord, MultiplierRef, VarietyRef
from seedtrace_kernel.domain.lot_id import lot_id_prefix, parse_lot_id
from seedtrace_kernel.domain.seed_level import SeedLevel
from seedtrace_kernel.models.multiplier import MultiplierModel
from seedtrace_kernel.models.seed_lot import SeedLotModel
from seedtrace_kernel.models.variety import VarietyModel
from seedtrace_kernel.selectors.base import BaseSelector


class LotSelector(BaseSelector[SeedLotModel]):
    """
    Queries for seed lots.

    Children are returned ordered by production date then id, which is the
    "store order" the genealogy tree and descendant walk preserve.
    """

    def find_lot(self, lot_id: str, *, for_update: bool = False) -> LotRecord | None:
        model = self.find_model(lot_id, for_update=for_update)
        return model.to_domain() if model is not None else None

    def find_model(self, lot_id: str, *, for_update: bool = False) -> SeedLotModel | None:
        query = select(SeedLotModel).where(SeedLotModel.id == lot_id)
        if for_update:
            # Row lock held until the enclosing transaction ends.
            query = query.with_for_update(of=SeedLotModel)
        return self.session.execute(query).unique().scalar_one_or_none()

    def find_children(self, parent_id: str, *, active_only: bool = False) -> list[LotRecord]:
        query = (
            select(SeedLotModel)
            .where(SeedLotModel.parent_lot_id == parent_id)
            .order_by(SeedLotModel.production_date, SeedLotModel.id)
        )
        if active_only:
            query = query.where(SeedLotModel.is_active.is_(True))
        rows = self.session.execute(query).unique().scalars().all()
        return [row.to_domain() for row in rows]

    def find_children_of_many(self, parent_ids: Iterable[str]) -> dict[str, list[LotRecord]]:
        """
        Direct children of several lots in one query.

        Every requested id is present in the result, mapped to an empty list
        when it has no children.
        """
        ids = list(dict.fromkeys(parent_ids))
        grouped: dict[str, list[LotRecord]] = {parent_id: [] for parent_id in ids}
        if not ids:
            return grouped

        query = (
            select(SeedLotModel)
            .where(SeedLotModel.parent_lot_id.in_(ids))
            .order_by(SeedLotModel.production_date, SeedLotModel.id)
        )
        for row in self.session.execute(query).unique().scalars().all():
            grouped[row.parent_lot_id].append(row.to_domain())
        return grouped

    def count_active_children(self, parent_id: str) -> int:
        query = select(func.count()).select_from(SeedLotModel).where(
            SeedLotModel.parent_lot_id == parent_id,
            SeedLotModel.is_active.is_(True),
        )
        return self.session.execute(query).scalar_one()

    def max_sequence(self, level: SeedLevel, year: int) -> int:
        """Highest sequence already used for SL-<level>-<year>-*, 0 if none."""
        prefix = lot_id_prefix(level, year)
        query = select(SeedLotModel.id).where(SeedLotModel.id.like(f"{prefix}%"))
        highest = 0
        for lot_id in self.session.execute(query).scalars():
            parts = parse_lot_id(lot_id)
            if parts is not None and parts.sequence > highest:
                highest = parts.sequence
        return highest

    def find_variety(self, variety_id: int) -> VarietyRef | None:
        model = self.session.get(VarietyModel, variety_id)
        if model is None:
            return None
        return VarietyRef(id=model.id, name=model.name, code=model.code)

    def find_multiplier(self, multiplier_id: int) -> MultiplierRef | None:
        model = self.session.get(MultiplierModel, multiplier_id)
        if model is None:
            return None
        return MultiplierRef(id=model.id, name=model.name)
