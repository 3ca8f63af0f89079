"""
Genealogy consistency checks.

Pure functions over a materialised GenealogyNode tree.  Each check returns
typed issue records instead of raising: a genealogy that breaks the level
order or over-allocates a parent is still shown on the dashboard, with the
problems listed next to it.

Checks:
    cycles      -- a lot id repeated within its own branch
    hierarchy   -- parent level not strictly before child level
    quantities  -- children's total quantity above the parent's quantity
    level jumps -- child more than one generation after its parent
                   (warning only, never affects is_consistent)
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from seedtrace_kernel.domain.genealogy import GenealogyNode
from seedtrace_kernel.domain.quantity import format_quantity
from seedtrace_kernel.domain.seed_level import is_valid_parent_level, level_gap


class IssueKind(str, Enum):
    CYCLE = "cycle"
    HIERARCHY = "hierarchy"
    QUANTITY = "quantity"
    LEVEL_JUMP = "level_jump"
    LOT_NOT_FOUND = "lot_not_found"


@dataclass(frozen=True)
class ConsistencyIssue:
    kind: IssueKind
    lot_ids: tuple[str, ...]
    message: str
    excess: Decimal | None = None


@dataclass(frozen=True)
class ConsistencyReport:
    lot_id: str
    issues: tuple[ConsistencyIssue, ...] = ()
    warnings: tuple[ConsistencyIssue, ...] = ()

    @property
    def is_consistent(self) -> bool:
        return not self.issues

    @property
    def messages(self) -> list[str]:
        return [issue.message for issue in self.issues]

    def issues_of(self, kind: IssueKind) -> list[ConsistencyIssue]:
        return [issue for issue in self.issues if issue.kind is kind]

    def to_dict(self) -> dict:
        return {
            "lot_id": self.lot_id,
            "is_consistent": self.is_consistent,
            "issues": self.messages,
            "warnings": [warning.message for warning in self.warnings],
        }


def check_cycles(tree: GenealogyNode) -> list[ConsistencyIssue]:
    """
    Report lot ids that reappear inside their own branch.

    Each recursive call gets its own copy of the visited set, so siblings
    never flag each other.  The first cycle found stops the walk.
    """
    issues: list[ConsistencyIssue] = []

    def visit(node: GenealogyNode, visited: frozenset[str]) -> bool:
        if node.id in visited:
            issues.append(
                ConsistencyIssue(
                    kind=IssueKind.CYCLE,
                    lot_ids=(node.id,),
                    message=f"Cycle detected at lot {node.id}",
                )
            )
            return True
        branch = visited | {node.id}
        return any(visit(child, branch) for child in node.children)

    visit(tree, frozenset())
    return issues


def check_hierarchy(tree: GenealogyNode) -> list[ConsistencyIssue]:
    issues: list[ConsistencyIssue] = []
    for parent, child in tree.iter_edges():
        if not is_valid_parent_level(parent.level, child.level):
            issues.append(
                ConsistencyIssue(
                    kind=IssueKind.HIERARCHY,
                    lot_ids=(parent.id, child.id),
                    message=(
                        f"Invalid hierarchy: {parent.id} ({parent.level.value}) "
                        f"-> {child.id} ({child.level.value})"
                    ),
                )
            )
    return issues


def check_quantities(tree: GenealogyNode) -> list[ConsistencyIssue]:
    issues: list[ConsistencyIssue] = []
    for node in tree.iter_nodes():
        if not node.children:
            continue
        children_total = sum((child.quantity for child in node.children), Decimal("0"))
        if children_total > node.quantity:
            excess = children_total - node.quantity
            issues.append(
                ConsistencyIssue(
                    kind=IssueKind.QUANTITY,
                    lot_ids=(node.id, *(child.id for child in node.children)),
                    message=(
                        f"Quantity inconsistency at lot {node.id}: children total "
                        f"({format_quantity(children_total)}) > "
                        f"parent ({format_quantity(node.quantity)}), "
                        f"excess {format_quantity(excess)}"
                    ),
                    excess=excess,
                )
            )
    return issues


def check_level_jumps(tree: GenealogyNode) -> list[ConsistencyIssue]:
    warnings: list[ConsistencyIssue] = []
    for parent, child in tree.iter_edges():
        gap = level_gap(parent.level, child.level)
        if gap > 1:
            warnings.append(
                ConsistencyIssue(
                    kind=IssueKind.LEVEL_JUMP,
                    lot_ids=(parent.id, child.id),
                    message=(
                        f"Level jump of {gap} generations: {parent.id} "
                        f"({parent.level.value}) -> {child.id} ({child.level.value})"
                    ),
                )
            )
    return warnings


def check_tree(tree: GenealogyNode) -> ConsistencyReport:
    issues = [*check_cycles(tree), *check_hierarchy(tree), *check_quantities(tree)]
    return ConsistencyReport(
        lot_id=tree.id,
        issues=tuple(issues),
        warnings=tuple(check_level_jumps(tree)),
    )


def missing_lot_report(lot_id: str) -> ConsistencyReport:
    return ConsistencyReport(
        lot_id=lot_id,
        issues=(
            ConsistencyIssue(
                kind=IssueKind.LOT_NOT_FOUND,
                lot_ids=(lot_id,),
                message=f"Lot {lot_id} not found",
            ),
        ),
    )
