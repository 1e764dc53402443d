"""Structural checks for trees that did not come through the builder."""

from __future__ import annotations

from collections import defaultdict, deque
from typing import TYPE_CHECKING

from ._errors import MalformedTreeError
from ._tree import Binary

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ._tree import ExprRef, ExprTree


def _operands(tree: ExprTree, ref: ExprRef) -> frozenset[ExprRef]:
    match tree.nodes[ref.index]:
        case Binary(_, lhs, rhs):
            return frozenset((lhs, rhs))
        case _:
            return frozenset()


def _reachable(tree: ExprTree, roots: Iterable[ExprRef]) -> dict[ExprRef, frozenset[ExprRef]]:
    """Map every node reachable from `roots` to its distinct operands."""
    operands: dict[ExprRef, frozenset[ExprRef]] = {}
    stack: list[tuple[ExprRef | None, ExprRef]] = [(None, root) for root in roots]

    while stack:
        user, ref = stack.pop()
        if not tree.contains(ref):
            owner = f"node {user}" if user is not None else "the formula root"
            msg = f"Reference {ref} from {owner} is out of bounds for a tree of {len(tree)} nodes"
            raise MalformedTreeError(msg)
        if ref in operands:
            continue
        operands[ref] = _operands(tree, ref)
        stack.extend((ref, operand) for operand in operands[ref])

    return operands


def validate_tree(tree: ExprTree, roots: Iterable[ExprRef]) -> list[ExprRef]:
    """Check every node reachable from `roots` and order them for evaluation.

    A tree is well formed when every reference reachable from the roots lies
    inside the arena and the reachable nodes form no cycle.

    Args:
        tree: The arena to check.
        roots: Root references of the formula.

    Returns:
        The reachable references, operands before the nodes that use them.

    Raises:
        MalformedTreeError: On an out-of-bounds reference or a cycle.

    Example:
        >>> tree = ExprTree()
        >>> root = tree.binary(BinOp.ADD, tree.num(2.0), tree.num(3.0))
        >>> validate_tree(tree, [root])
        [ExprRef(index=0), ExprRef(index=1), ExprRef(index=2)]

    """
    operands = _reachable(tree, roots)

    users: defaultdict[ExprRef, set[ExprRef]] = defaultdict(set)
    indegree: dict[ExprRef, int] = {}
    for ref, deps in operands.items():
        indegree[ref] = len(deps)
        for dep in deps:
            users[dep].add(ref)

    # Kahn's algorithm, ties broken by arena position
    queue = deque(sorted((ref for ref, deg in indegree.items() if deg == 0), key=lambda r: r.index))
    order: list[ExprRef] = []
    while queue:
        ref = queue.popleft()
        order.append(ref)
        for user in sorted(users[ref], key=lambda r: r.index):
            indegree[user] -= 1
            if indegree[user] == 0:
                queue.append(user)

    if len(order) != len(indegree):
        msg = "Cycle detected in expression tree"
        raise MalformedTreeError(msg)

    return order
