"""
Genealogy tree serialisers: JSON, CSV (one row per edge) and Graphviz DOT.

JSON writes quantities as numbers; CSV and DOT write them as trimmed
decimal text (110.000 -> 110).
"""

from __future__ import annotations

import csv
import io
import json
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from seedtrace_kernel.domain.genealogy import GenealogyNode
from seedtrace_kernel.domain.quantity import format_quantity, quantity_number
from seedtrace_kernel.exceptions import UnsupportedExportFormatError

CSV_HEADER = (
    "Parent ID",
    "Parent Level",
    "Child ID",
    "Child Level",
    "Quantity",
    "Production Date",
    "Status",
)

STATUS_COLORS = {
    "certified": "green",
    "rejected": "red",
}
DEFAULT_COLOR = "black"


class ExportFormat(str, Enum):
    JSON = "json"
    CSV = "csv"
    DOT = "dot"

    @classmethod
    def parse(cls, value: str | ExportFormat) -> ExportFormat:
        if isinstance(value, ExportFormat):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnsupportedExportFormatError(
                str(value), supported=[fmt.value for fmt in cls]
            ) from None


class _ExportEncoder(json.JSONEncoder):
    def default(self, obj: Any) -> Any:
        if isinstance(obj, Decimal):
            return quantity_number(obj)
        if isinstance(obj, date):
            return obj.isoformat()
        return super().default(obj)


def to_json(tree: GenealogyNode) -> str:
    return json.dumps(tree.to_dict(), cls=_ExportEncoder, indent=2, ensure_ascii=False)


def to_csv(tree: GenealogyNode) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for parent, child in tree.iter_edges():
        writer.writerow(
            (
                parent.id,
                parent.level.value,
                child.id,
                child.level.value,
                format_quantity(child.quantity),
                child.production_date.isoformat(),
                child.status.ui_value,
            )
        )
    return buffer.getvalue().rstrip("\n")


def to_dot(tree: GenealogyNode) -> str:
    lines = [
        "digraph Genealogy {",
        "  rankdir=TB;",
        "  node [shape=box];",
    ]
    for node in tree.iter_nodes():
        label = f"{node.id}\\n{node.level.value}\\n{format_quantity(node.quantity)}kg"
        color = STATUS_COLORS.get(node.status.ui_value, DEFAULT_COLOR)
        lines.append(f'  "{node.id}" [label="{label}", color="{color}"];')
        for child in node.children:
            lines.append(f'  "{node.id}" -> "{child.id}";')
    lines.append("}")
    return "\n".join(lines)


_SERIALIZERS = {
    ExportFormat.JSON: to_json,
    ExportFormat.CSV: to_csv,
    ExportFormat.DOT: to_dot,
}


def export_tree(tree: GenealogyNode, export_format: str | ExportFormat) -> str:
    return _SERIALIZERS[ExportFormat.parse(export_format)](tree)
