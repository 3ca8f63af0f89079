"""
Genealogy Service - lineage traversal, relation mutation and validation
for seed lots.

This service is responsible for:
- Materialising a lot's descendant tree (depth-limited, cycle-guarded)
- Ancestor chains and flat descendant sets
- Creating, removing and re-parenting parent/child relations
- Aggregate statistics, consistency reports and tree exports

The service works against the LotStore protocol, never against a Session:
- Reads go through find_lot / find_children / find_children_of_many
- Relation writes run inside store.transaction() with the involved rows
  read ``for_update``
- It never commits; the caller controls transaction boundaries

Read paths absorb malformed data: a cycle met while walking is logged and
the branch dropped, a tree deeper than max_depth is cut and logged.  Write
paths reject: every precondition failure raises a typed GenealogyError.
"""

from __future__ import annotations

from collections import deque
from decimal import Decimal

from seedtrace_kernel.domain.consistency import (
    ConsistencyReport,
    check_tree,
    missing_lot_report,
)
from seedtrace_kernel.domain.genealogy import (
    DirectRelations,
    GenealogyNode,
    GenealogyStats,
    LotRecord,
    LotSummary,
)
from seedtrace_kernel.domain.genealogy_export import ExportFormat, export_tree
from seedtrace_kernel.domain.lot_store import LotStore
from seedtrace_kernel.domain.quantity import to_quantity
from seedtrace_kernel.domain.seed_level import is_valid_parent_level, level_gap
from seedtrace_kernel.exceptions import (
    GenealogyCycleError,
    InvalidHierarchyError,
    LotAlreadyHasParentError,
    LotNotFoundError,
    NoParentRelationError,
)
from seedtrace_kernel.logging_config import get_logger

logger = get_logger("services.genealogy")

DEFAULT_MAX_DEPTH = 10


class GenealogyService:
    """
    Parent/child lineage engine over a LotStore.

    A lot has at most one parent.  The parent's generation level must come
    strictly before the child's, and no lot may be its own ancestor.
    """

    def __init__(self, store: LotStore, max_depth: int = DEFAULT_MAX_DEPTH):
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")
        self.store = store
        self.max_depth = max_depth

    # =========================================================================
    # Traversal
    # =========================================================================

    def get_genealogy_tree(
        self,
        lot_id: str,
        max_depth: int | None = None,
    ) -> GenealogyNode | None:
        """
        Build the descendant tree rooted at ``lot_id``.

        Nodes are kept while their depth is below ``max_depth`` (root is
        depth 0), so ``max_depth=10`` yields at most ten generations.  Lots
        are loaded one generation per store call, then assembled depth-first
        in store order.

        Returns:
            The root GenealogyNode, or None if the lot does not exist.
        """
        limit = self.max_depth if max_depth is None else max_depth
        if limit < 1:
            raise ValueError(f"max_depth must be at least 1, got {limit}")

        root = self.store.find_lot(lot_id)
        if root is None:
            return None

        arena: dict[str, LotRecord] = {root.id: root}
        child_index: dict[str, list[str]] = {}
        frontier = [root.id]
        depth = 0

        while frontier and depth + 1 < limit:
            children_by_parent = self.store.find_children_of_many(frontier)
            next_frontier: list[str] = []
            for parent_id in frontier:
                child_ids: list[str] = []
                for child in children_by_parent.get(parent_id, []):
                    child_ids.append(child.id)
                    if child.id not in arena:
                        arena[child.id] = child
                        next_frontier.append(child.id)
                child_index[parent_id] = child_ids
            frontier = next_frontier
            depth += 1

        if frontier:
            cut = self.store.find_children_of_many(frontier)
            truncated = sum(len(children) for children in cut.values())
            if truncated:
                logger.warning(
                    "genealogy_depth_limit_reached",
                    extra={
                        "lot_id": lot_id,
                        "max_depth": limit,
                        "truncated_children": truncated,
                    },
                )

        return self._assemble(root.id, arena, child_index, depth=0, path=())

    def _assemble(
        self,
        node_id: str,
        arena: dict[str, LotRecord],
        child_index: dict[str, list[str]],
        depth: int,
        path: tuple[str, ...],
    ) -> GenealogyNode:
        branch = (*path, node_id)
        children: list[GenealogyNode] = []
        for child_id in child_index.get(node_id, []):
            if child_id in branch:
                logger.error(
                    "genealogy_cycle_detected",
                    extra={"lot_id": child_id, "path": list(branch)},
                )
                continue
            children.append(
                self._assemble(child_id, arena, child_index, depth + 1, branch)
            )
        return GenealogyNode.from_record(arena[node_id], depth, tuple(children))

    def get_ancestors(self, lot_id: str) -> list[LotSummary]:
        """
        Ancestor chain ordered root first, ending with the lot itself.

        Returns [] for an unknown lot.  A cycle stops the walk and the chain
        collected so far is returned.
        """
        chain: list[LotSummary] = []
        visited: set[str] = set()
        current = self.store.find_lot(lot_id)

        while current is not None:
            if current.id in visited:
                logger.error(
                    "genealogy_cycle_detected",
                    extra={"lot_id": lot_id, "path": [s.id for s in reversed(chain)]},
                )
                break
            visited.add(current.id)
            chain.append(LotSummary.from_record(current))
            if current.parent_lot_id is None:
                break
            current = self.store.find_lot(current.parent_lot_id)

        chain.reverse()
        return chain

    def get_descendants(self, lot_id: str) -> list[LotSummary]:
        """Every lot below ``lot_id``, breadth-first, root excluded."""
        descendants: list[LotSummary] = []
        visited = {lot_id}
        queue = deque([lot_id])

        while queue:
            current_id = queue.popleft()
            for child in self.store.find_children(current_id):
                if child.id in visited:
                    logger.error(
                        "genealogy_cycle_detected",
                        extra={"lot_id": lot_id, "revisited": child.id},
                    )
                    continue
                visited.add(child.id)
                descendants.append(LotSummary.from_record(child))
                queue.append(child.id)

        return descendants

    def get_direct_relations(self, lot_id: str) -> DirectRelations:
        """
        Raises:
            LotNotFoundError: Unknown lot.
        """
        lot = self.store.find_lot(lot_id)
        if lot is None:
            raise LotNotFoundError(lot_id)

        parent = None
        if lot.parent_lot_id is not None:
            parent_record = self.store.find_lot(lot.parent_lot_id)
            if parent_record is not None:
                parent = LotSummary.from_record(parent_record)

        children = tuple(
            LotSummary.from_record(child) for child in self.store.find_children(lot_id)
        )
        return DirectRelations(
            current=LotSummary.from_record(lot),
            parent=parent,
            children=children,
        )

    # =========================================================================
    # Relation mutation
    # =========================================================================

    def create_relation(
        self,
        parent_id: str,
        child_id: str,
        *,
        quantity: Decimal | int | str | None = None,
        notes: str | None = None,
    ) -> LotRecord:
        """
        Attach ``child_id`` under ``parent_id``.

        Checks, in order: both lots exist, the child has no parent, the
        parent level is strictly earlier, the child is not already an
        ancestor of the parent.  A positive ``quantity`` is drawn from the
        parent lot; it is not checked against the parent's stock.

        Returns:
            The updated child record.

        Raises:
            LotNotFoundError: Parent or child does not exist.
            LotAlreadyHasParentError: Child is already attached.
            InvalidHierarchyError: Parent level is not before child level.
            GenealogyCycleError: The relation would close a loop.
            InvalidQuantityError: ``quantity`` is not a number.
        """
        drawn = to_quantity(quantity) if quantity is not None else Decimal("0")

        with self.store.transaction():
            parent = self.store.find_lot(parent_id, for_update=True)
            if parent is None:
                raise LotNotFoundError(parent_id)
            child = self.store.find_lot(child_id, for_update=True)
            if child is None:
                raise LotNotFoundError(child_id)

            if child.parent_lot_id is not None:
                raise LotAlreadyHasParentError(child_id, child.parent_lot_id)

            self._require_hierarchy(parent, child)

            ancestor_ids = [ancestor.id for ancestor in self.get_ancestors(parent_id)]
            if child_id in ancestor_ids:
                logger.error(
                    "genealogy_cycle_rejected",
                    extra={"parent_id": parent_id, "child_id": child_id, "path": ancestor_ids},
                )
                raise GenealogyCycleError(parent_id, child_id, ancestor_ids)

            patch: dict = {"parent_lot_id": parent_id}
            if notes:
                patch["notes"] = f"{child.notes or ''}\n{notes}".strip()
            updated = self.store.update_lot(child_id, **patch)

            if drawn > 0:
                self.store.update_lot(parent_id, quantity=parent.quantity - drawn)

        self._warn_on_level_jump(parent, child)
        logger.info(
            "genealogy_relation_created",
            extra={
                "parent_id": parent_id,
                "child_id": child_id,
                "quantity_drawn": drawn,
            },
        )
        return updated

    def remove_relation(self, child_id: str) -> LotRecord:
        """
        Detach ``child_id`` from its parent.  Any quantity drawn when the
        relation was created stays drawn.

        Raises:
            LotNotFoundError: Unknown lot.
            NoParentRelationError: The lot has no parent.
        """
        with self.store.transaction():
            child = self.store.find_lot(child_id, for_update=True)
            if child is None:
                raise LotNotFoundError(child_id)
            if child.parent_lot_id is None:
                raise NoParentRelationError(child_id)
            updated = self.store.update_lot(child_id, parent_lot_id=None)

        logger.info(
            "genealogy_relation_removed",
            extra={"child_id": child_id, "former_parent_id": child.parent_lot_id},
        )
        return updated

    def update_relation(
        self,
        child_id: str,
        *,
        new_parent_id: str | None = None,
        notes: str | None = None,
    ) -> LotRecord:
        """
        Re-parent ``child_id`` and/or replace its notes.

        Unlike create_relation, notes are overwritten and a child that
        already has a parent may be moved.  The hierarchy and cycle checks
        still apply to the new parent.

        Raises:
            LotNotFoundError: Child or new parent does not exist.
            InvalidHierarchyError: New parent level is not before child level.
            GenealogyCycleError: The child is an ancestor of the new parent.
        """
        with self.store.transaction():
            child = self.store.find_lot(child_id, for_update=True)
            if child is None:
                raise LotNotFoundError(child_id)

            patch: dict = {}
            if new_parent_id:
                new_parent = self.store.find_lot(new_parent_id, for_update=True)
                if new_parent is None:
                    raise LotNotFoundError(new_parent_id)
                self._require_hierarchy(new_parent, child)

                ancestor_ids = [a.id for a in self.get_ancestors(new_parent_id)]
                if child_id in ancestor_ids:
                    logger.error(
                        "genealogy_cycle_rejected",
                        extra={
                            "parent_id": new_parent_id,
                            "child_id": child_id,
                            "path": ancestor_ids,
                        },
                    )
                    raise GenealogyCycleError(new_parent_id, child_id, ancestor_ids)
                patch["parent_lot_id"] = new_parent_id

            if notes:
                patch["notes"] = notes

            updated = self.store.update_lot(child_id, **patch) if patch else child

        logger.info(
            "genealogy_relation_updated",
            extra={
                "child_id": child_id,
                "former_parent_id": child.parent_lot_id,
                "new_parent_id": updated.parent_lot_id,
            },
        )
        return updated

    def _require_hierarchy(self, parent: LotRecord, child: LotRecord) -> None:
        if not is_valid_parent_level(parent.level, child.level):
            raise InvalidHierarchyError(
                parent_id=parent.id,
                parent_level=parent.level.value,
                child_id=child.id,
                child_level=child.level.value,
            )

    def _warn_on_level_jump(self, parent: LotRecord, child: LotRecord) -> None:
        gap = level_gap(parent.level, child.level)
        if gap > 1:
            logger.warning(
                "genealogy_level_jump",
                extra={
                    "parent_id": parent.id,
                    "parent_level": parent.level.value,
                    "child_id": child.id,
                    "child_level": child.level.value,
                    "generations": gap,
                },
            )

    # =========================================================================
    # Reporting
    # =========================================================================

    def get_genealogy_stats(self, lot_id: str) -> GenealogyStats:
        """
        Raises:
            LotNotFoundError: Unknown lot.
        """
        relations = self.get_direct_relations(lot_id)
        ancestors = self.get_ancestors(lot_id)
        descendants = self.get_descendants(lot_id)

        by_level: dict[str, int] = {}
        for descendant in descendants:
            by_level[descendant.level.value] = by_level.get(descendant.level.value, 0) + 1

        # dict keeps first-seen order
        multipliers = dict.fromkeys(
            lot.multiplier.name
            for lot in (*ancestors, *descendants)
            if lot.multiplier is not None
        )

        return GenealogyStats(
            lot_id=lot_id,
            total_ancestors=len(ancestors) - 1,
            total_descendants=len(descendants),
            total_direct_children=len(relations.children),
            has_parent=relations.parent is not None,
            depth=len(ancestors),
            breadth=len(relations.children),
            descendants_by_level=by_level,
            total_quantity_in_descendants=sum(
                (descendant.quantity for descendant in descendants), Decimal("0")
            ),
            multipliers=tuple(multipliers),
        )

    def check_genealogy_consistency(self, lot_id: str) -> ConsistencyReport:
        """
        Validate the tree below ``lot_id``.

        Problems are returned as data, never raised; an unknown lot yields a
        report with a single LOT_NOT_FOUND issue.
        """
        tree = self.get_genealogy_tree(lot_id)
        if tree is None:
            return missing_lot_report(lot_id)

        report = check_tree(tree)
        if not report.is_consistent:
            logger.warning(
                "genealogy_inconsistent",
                extra={
                    "lot_id": lot_id,
                    "issue_count": len(report.issues),
                    "issues": report.messages,
                },
            )
        return report

    def export_genealogy(
        self,
        lot_id: str,
        export_format: str | ExportFormat = ExportFormat.JSON,
    ) -> str:
        """
        Serialise the tree below ``lot_id`` as json, csv or dot.

        Raises:
            UnsupportedExportFormatError: Unknown format.
            LotNotFoundError: Unknown lot.
        """
        fmt = ExportFormat.parse(export_format)
        tree = self.get_genealogy_tree(lot_id)
        if tree is None:
            raise LotNotFoundError(lot_id)

        output = export_tree(tree, fmt)
        logger.info(
            "genealogy_exported",
            extra={"lot_id": lot_id, "format": fmt.value, "node_count": tree.size},
        )
        return output
