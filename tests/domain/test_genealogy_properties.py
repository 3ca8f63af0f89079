"""
Property-based tests (Hypothesis) for level ordering and tree checks.

Generated trees follow every rule by construction: each child sits exactly
one level below its parent and no parent hands out more than it holds.
The checks must therefore report nothing, and breaking a single rule must
produce exactly the matching issue kind.
"""

from datetime import date
from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st

from seedtrace_kernel.domain.consistency import IssueKind, check_tree
from seedtrace_kernel.domain.genealogy import GenealogyNode
from seedtrace_kernel.domain.lot_status import LotStatus
from seedtrace_kernel.domain.seed_level import (
    LEVEL_ORDER,
    is_valid_parent_level,
    level_index,
)

levels = st.sampled_from(LEVEL_ORDER)


@given(levels, levels)
def test_parent_validity_matches_index_order(parent, child):
    assert is_valid_parent_level(parent, child) == (level_index(parent) < level_index(child))


@given(levels, levels)
def test_parent_validity_is_antisymmetric(a, b):
    assert not (is_valid_parent_level(a, b) and is_valid_parent_level(b, a))


@st.composite
def well_formed_trees(draw):
    """
    Random tree of up to len(LEVEL_ORDER) lots.

    Node i > 0 picks a parent among nodes 0..i-1, so depth never exceeds
    the number of levels.  Quantities are assigned bottom-up.
    """
    size = draw(st.integers(min_value=1, max_value=len(LEVEL_ORDER)))
    parents = [None] + [draw(st.integers(min_value=0, max_value=i - 1)) for i in range(1, size)]
    depth = [0] * size
    for i in range(1, size):
        depth[i] = depth[parents[i]] + 1

    children: dict[int, list[int]] = {i: [] for i in range(size)}
    for i in range(1, size):
        children[parents[i]].append(i)

    slack = [Decimal(draw(st.integers(min_value=0, max_value=500))) for _ in range(size)]

    def build(i: int) -> GenealogyNode:
        kids = tuple(build(k) for k in children[i])
        quantity = sum((kid.quantity for kid in kids), Decimal("0")) + slack[i] + 1
        return GenealogyNode(
            id=f"N{i}",
            level=LEVEL_ORDER[depth[i]],
            quantity=quantity,
            production_date=date(2024, 1, 1),
            status=LotStatus.CERTIFIED,
            parent_lot_id=f"N{parents[i]}" if parents[i] is not None else None,
            depth=depth[i],
            children=kids,
        )

    return build(0)


@settings(max_examples=75)
@given(well_formed_trees())
def test_well_formed_trees_are_consistent(tree):
    report = check_tree(tree)

    assert report.is_consistent
    assert report.warnings == ()
    assert sum(1 for _ in tree.iter_edges()) == tree.size - 1


@settings(max_examples=75)
@given(well_formed_trees(), st.integers(min_value=1, max_value=1000))
def test_overdrawn_root_reports_one_quantity_issue(tree, extra):
    if not tree.children:
        return
    first = tree.children[0]
    bumped = GenealogyNode(
        id=first.id,
        level=first.level,
        quantity=first.quantity + tree.quantity + extra,
        production_date=first.production_date,
        status=first.status,
        parent_lot_id=first.parent_lot_id,
        depth=first.depth,
        children=first.children,
    )
    broken = GenealogyNode(
        id=tree.id,
        level=tree.level,
        quantity=tree.quantity,
        production_date=tree.production_date,
        status=tree.status,
        depth=0,
        children=(bumped, *tree.children[1:]),
    )

    report = check_tree(broken)

    root_issues = [
        issue for issue in report.issues_of(IssueKind.QUANTITY) if issue.lot_ids[0] == tree.id
    ]
    assert len(root_issues) == 1
    assert root_issues[0].excess > 0
