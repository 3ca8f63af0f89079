"""
SqlAlchemyLotStore - LotStore implementation over a SQLAlchemy Session.

Reads go through LotSelector; writes patch SeedLotModel rows and flush.
``transaction()`` opens a SAVEPOINT (``Session.begin_nested``) so a failed
multi-write operation leaves the caller's outer transaction untouched.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterable, Iterator

from sqlalchemy.orm import Session

from seedtrace_kernel.domain.genealogy import LotRecord
from seedtrace_kernel.domain.lot_status import LotStatus
from seedtrace_kernel.domain.quantity import to_quantity
from seedtrace_kernel.exceptions import InvalidLotPatchError, LotNotFoundError
from seedtrace_kernel.logging_config import get_logger
from seedtrace_kernel.models.seed_lot import SeedLotModel
from seedtrace_kernel.selectors.lot_selector import LotSelector
from seedtrace_kernel.services.base import BaseService

logger = get_logger("services.lot_store")


class SqlAlchemyLotStore(BaseService[SeedLotModel]):
    """
    Persistence adapter used by GenealogyService.

    Only the fields below may be patched.  Identity, level and variety are
    fixed once a lot exists.
    """

    PATCHABLE_FIELDS: frozenset[str] = frozenset({
        "parent_lot_id",
        "quantity",
        "notes",
        "status",
        "is_active",
        "multiplier_id",
        "expiry_date",
        "batch_number",
    })

    def __init__(self, session: Session):
        super().__init__(session)
        self._selector = LotSelector(session)

    def find_lot(self, lot_id: str, *, for_update: bool = False) -> LotRecord | None:
        return self._selector.find_lot(lot_id, for_update=for_update)

    def find_children(self, parent_id: str) -> list[LotRecord]:
        return self._selector.find_children(parent_id)

    def find_children_of_many(self, parent_ids: Iterable[str]) -> dict[str, list[LotRecord]]:
        return self._selector.find_children_of_many(parent_ids)

    def update_lot(self, lot_id: str, **patch: Any) -> LotRecord:
        """
        Apply ``patch`` to one lot and flush.

        Raises:
            InvalidLotPatchError: A key outside PATCHABLE_FIELDS was given.
            LotNotFoundError: No lot with this id.
        """
        unknown = sorted(set(patch) - self.PATCHABLE_FIELDS)
        if unknown:
            raise InvalidLotPatchError(lot_id, unknown)

        model = self._selector.find_model(lot_id)
        if model is None:
            raise LotNotFoundError(lot_id)

        for field_name, value in patch.items():
            if field_name == "status" and value is not None:
                value = LotStatus.from_ui(value).value
            elif field_name == "quantity" and value is not None:
                value = to_quantity(value)
            setattr(model, field_name, value)

        self.session.flush()
        if "multiplier_id" in patch:
            self.session.refresh(model)

        logger.debug(
            "lot_updated",
            extra={"lot_id": lot_id, "fields": sorted(patch)},
        )
        return model.to_domain()

    @contextmanager
    def transaction(self) -> Iterator[SqlAlchemyLotStore]:
        with self.session.begin_nested():
            yield self
