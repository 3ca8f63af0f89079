"""
LotStore - the persistence contract the genealogy engine depends on.

The engine never talks to the database directly; it reads and patches lots
through this protocol.  ``SqlAlchemyLotStore`` is the production
implementation.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, Iterable, Protocol, runtime_checkable

from seedtrace_kernel.domain.genealogy import LotRecord


@runtime_checkable
class LotStore(Protocol):
    """
    Contract:
        find_lot              -- lot by id, or None
        find_children         -- direct children of one lot, store order
        find_children_of_many -- direct children of several lots in one read
        update_lot            -- patch fields of one lot, returns the new record
        transaction           -- atomic unit around several writes

    Passing ``for_update=True`` to find_lot locks the row until the
    enclosing transaction ends, so two relation mutations on the same lot
    cannot both pass their precondition checks.
    """

    def find_lot(self, lot_id: str, *, for_update: bool = False) -> LotRecord | None:
        ...

    def find_children(self, parent_id: str) -> list[LotRecord]:
        ...

    def find_children_of_many(
        self, parent_ids: Iterable[str]
    ) -> dict[str, list[LotRecord]]:
        ...

    def update_lot(self, lot_id: str, **patch: Any) -> LotRecord:
        ...

    def transaction(self) -> AbstractContextManager[Any]:
        ...
