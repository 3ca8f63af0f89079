"""Pure domain layer: levels, statuses, lot ids, genealogy values and checks."""

from seedtrace_kernel.domain.consistency import (
    ConsistencyIssue,
    ConsistencyReport,
    IssueKind,
    check_tree,
)
from seedtrace_kernel.domain.genealogy import (
    DirectRelations,
    GenealogyNode,
    GenealogyStats,
    LotRecord,
    LotSummary,
    MultiplierRef,
    VarietyRef,
)
from seedtrace_kernel.domain.genealogy_export import ExportFormat, export_tree
from seedtrace_kernel.domain.lot_id import LotIdParts, format_lot_id, parse_lot_id
from seedtrace_kernel.domain.lot_status import LotStatus
from seedtrace_kernel.domain.lot_store import LotStore
from seedtrace_kernel.domain.quantity import format_quantity, to_quantity
from seedtrace_kernel.domain.seed_level import LEVEL_ORDER, SeedLevel

__all__ = [
    "ConsistencyIssue",
    "ConsistencyReport",
    "IssueKind",
    "check_tree",
    "DirectRelations",
    "GenealogyNode",
    "GenealogyStats",
    "LotRecord",
    "LotSummary",
    "MultiplierRef",
    "VarietyRef",
    "ExportFormat",
    "export_tree",
    "LotIdParts",
    "format_lot_id",
    "parse_lot_id",
    "LotStatus",
    "LotStore",
    "format_quantity",
    "to_quantity",
    "LEVEL_ORDER",
    "SeedLevel",
]
