"""Evaluation of expression trees."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from ._errors import MalformedTreeError, MathError, NotSupportedError, VariableNotFoundError
from ._formula import Equality, Expr
from ._ops import binop_to_fn
from ._tree import Binary, Num, Var

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ._formula import Formula
    from ._tree import ExprRef, ExprTree

logger = logging.getLogger(__name__)


def evaluate(
    ref: ExprRef,
    tree: ExprTree,
    bindings: Mapping[str, float],
    *,
    strict: bool = False,
) -> float:
    """Reduce the node at `ref` to a single float.

    The left operand of a binary node is evaluated completely before the right
    one, and the first error raised stops the evaluation. Neither the tree nor
    the bindings are modified.

    Args:
        ref: The node to evaluate.
        tree: The arena `ref` belongs to.
        bindings: Values for the variables of the tree.
        strict: Raise `MathError` when an operation on finite operands produces
            an infinite or NaN result, instead of returning it.

    Returns:
        The value of the node.

    Raises:
        VariableNotFoundError: If a variable node has no binding.
        MathError: In strict mode, on a non-finite result.
        MalformedTreeError: If a reference is out of bounds or a node reaches
            itself.

    """
    values: dict[ExprRef, float] = {}
    pending: set[ExprRef] = set()
    # Post-order walk; the left operand is pushed last so it is finished first
    stack: list[tuple[ExprRef, bool]] = [(ref, False)]

    while stack:
        current, operands_done = stack.pop()
        if current in values:
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
                lhs_value, rhs_value = values[lhs], values[rhs]
                result = binop_to_fn(op)(lhs_value, rhs_value)
                if strict and not math.isfinite(result) and math.isfinite(lhs_value) and math.isfinite(rhs_value):
                    msg = f"{lhs_value!r} {op.symbol} {rhs_value!r} has no finite value"
                    raise MathError(msg)
                values[current] = result
            case Num(value):
                values[current] = value
            case Var(name):
                try:
                    values[current] = float(bindings[name])
                except KeyError:
                    raise VariableNotFoundError(name) from None

    return values[ref]


def evaluate_formula(
    formula: Formula,
    bindings: Mapping[str, float],
    *,
    strict: bool = False,
) -> float:
    """Evaluate a top-level formula.

    Only standalone expressions have a value. Reducing an equality would need a
    solving strategy, so it is rejected with `NotSupportedError`.
    """
    match formula.kind:
        case Expr(root):
            value = evaluate(root, formula.tree, bindings, strict=strict)
            logger.debug("Evaluated expression rooted at %s: %r", root, value)
            return value
        case Equality():
            msg = "Equalities cannot be evaluated to a single value"
            raise NotSupportedError(msg)
