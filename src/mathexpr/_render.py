"""Infix rendering of expression trees."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from ._errors import MalformedTreeError
from ._formula import Equality, Expr
from ._tree import Binary, Num, Var

if TYPE_CHECKING:
    from ._formula import Formula
    from ._tree import BinOp, ExprRef, ExprTree

_ATOM_PRECEDENCE = 10
_PLAIN_INTEGER_LIMIT = 1e16


def _is_negative(value: float) -> bool:
    return math.copysign(1.0, value) < 0 and not math.isnan(value)


def _format_number(value: float) -> str:
    # -0.0 keeps its sign; huge integral values stay in exponent form
    if value.is_integer() and value != 0 and abs(value) < _PLAIN_INTEGER_LIMIT:
        return str(int(value))
    if value == 0 and not _is_negative(value):
        return "0"
    return repr(value)


def _precedence(tree: ExprTree, ref: ExprRef) -> int:
    match tree.get(ref):
        case Binary(op, _, _):
            return op.precedence
        case Num(value) if _is_negative(value):
            # A negative literal reads like a unary minus
            return 1
        case _:
            return _ATOM_PRECEDENCE


def _needs_parens(parent: BinOp, child_precedence: int, *, right: bool) -> bool:
    if child_precedence != parent.precedence:
        return child_precedence < parent.precedence
    # Equal precedence: only the side the operator associates towards is free
    return right != parent.right_associative


def render(tree: ExprTree, ref: ExprRef) -> str:
    """Render the node at `ref` as an infix string with minimal parentheses.

    Example:
        >>> tree = ExprTree()
        >>> total = tree.binary(BinOp.ADD, tree.num(1), tree.num(2))
        >>> render(tree, tree.binary(BinOp.POW, total, tree.var("x")))
        '(1 + 2) ^ x'

    """
    texts: dict[ExprRef, str] = {}
    pending: set[ExprRef] = set()
    stack: list[tuple[ExprRef, bool]] = [(ref, False)]

    while stack:
        current, operands_done = stack.pop()
        if current in texts:
            continue
        match tree.get(current):
            case Binary(_, lhs, rhs) if not operands_done:
                if current in pending:
                    msg = f"Cycle detected in expression tree at node {current}"
                    raise MalformedTreeError(msg)
                pending.add(current)
                stack.extend(((current, True), (rhs, False), (lhs, False)))
            case Binary(op, lhs, rhs):
                pending.discard(current)
                lhs_text, rhs_text = texts[lhs], texts[rhs]
                if _needs_parens(op, _precedence(tree, lhs), right=False):
                    lhs_text = f"({lhs_text})"
                if _needs_parens(op, _precedence(tree, rhs), right=True):
                    rhs_text = f"({rhs_text})"
                texts[current] = f"{lhs_text} {op.symbol} {rhs_text}"
            case Num(value):
                texts[current] = _format_number(value)
            case Var(name):
                texts[current] = name

    return texts[ref]


def render_formula(formula: Formula) -> str:
    match formula.kind:
        case Expr(root):
            return render(formula.tree, root)
        case Equality(lhs, rhs):
            return f"{render(formula.tree, lhs)} = {render(formula.tree, rhs)}"
