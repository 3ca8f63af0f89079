"""Kernel services: genealogy engine, lot store adapter and lot lifecycle."""

from seedtrace_kernel.services.base import BaseService
from seedtrace_kernel.services.genealogy_service import DEFAULT_MAX_DEPTH, GenealogyService
from seedtrace_kernel.services.lot_store import SqlAlchemyLotStore
from seedtrace_kernel.services.seed_lot_service import LotTransfer, SeedLotService

__all__ = [
    "BaseService",
    "DEFAULT_MAX_DEPTH",
    "GenealogyService",
    "LotTransfer",
    "SeedLotService",
    "SqlAlchemyLotStore",
]
