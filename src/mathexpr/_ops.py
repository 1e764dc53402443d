"""Numeric semantics of the binary operators."""

from collections.abc import Callable

import numpy as np

from ._tree import BinOp

BinaryFn = Callable[[float, float], float]


def _ieee(ufunc: np.ufunc) -> BinaryFn:
    """Wrap a numpy ufunc as a float function with IEEE-754 double semantics.

    Python's float operators raise on division by zero and overflow, and `**`
    returns a complex number for a negative base with a fractional exponent.
    The float64 ufuncs return inf/NaN instead; their warnings are silenced.
    """

    def apply(lhs: float, rhs: float) -> float:
        with np.errstate(all="ignore"):
            return float(ufunc(np.float64(lhs), np.float64(rhs)))

    apply.__name__ = ufunc.__name__
    apply.__qualname__ = ufunc.__name__
    return apply


_BINOP_FNS: dict[BinOp, BinaryFn] = {
    BinOp.ADD: _ieee(np.add),
    BinOp.SUB: _ieee(np.subtract),
    BinOp.MUL: _ieee(np.multiply),
    BinOp.DIV: _ieee(np.divide),
    BinOp.POW: _ieee(np.power),
}


def binop_to_fn(op: BinOp) -> BinaryFn:
    """Resolve an operator tag to its numeric function.

    Total over `BinOp`; none of the returned functions raise.

    Example:
        >>> binop_to_fn(BinOp.DIV)(1.0, 0.0)
        inf

    """
    return _BINOP_FNS[BinOp(op)]
