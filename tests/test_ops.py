"""Tests for the binary operator resolver."""

import math

import pytest

from mathexpr._ops import binop_to_fn
from mathexpr._tree import BinOp


class TestBinopToFn:
    @pytest.mark.parametrize(
        ("op", "lhs", "rhs", "expected"),
        [
            (BinOp.ADD, 2.0, 3.0, 5.0),
            (BinOp.SUB, 2.0, 3.0, -1.0),
            (BinOp.MUL, 2.5, 4.0, 10.0),
            (BinOp.DIV, 7.0, 2.0, 3.5),
            (BinOp.POW, 2.0, 10.0, 1024.0),
            (BinOp.POW, -2.0, 3.0, -8.0),
            (BinOp.POW, 9.0, 0.5, 3.0),
        ],
    )
    def test_arithmetic(self, op: BinOp, lhs: float, rhs: float, expected: float) -> None:
        assert binop_to_fn(op)(lhs, rhs) == expected

    def test_returns_python_float(self) -> None:
        for op in BinOp:
            assert type(binop_to_fn(op)(3.0, 2.0)) is float

    def test_matches_python_float_arithmetic(self) -> None:
        assert binop_to_fn(BinOp.ADD)(0.1, 0.2) == 0.1 + 0.2
        assert binop_to_fn(BinOp.DIV)(1.0, 3.0) == 1.0 / 3.0

    def test_division_by_zero_is_infinite(self) -> None:
        div = binop_to_fn(BinOp.DIV)
        assert div(1.0, 0.0) == math.inf
        assert div(-1.0, 0.0) == -math.inf
        assert div(1.0, -0.0) == -math.inf

    def test_zero_over_zero_is_nan(self) -> None:
        assert math.isnan(binop_to_fn(BinOp.DIV)(0.0, 0.0))

    def test_fractional_power_of_negative_base_is_nan(self) -> None:
        assert math.isnan(binop_to_fn(BinOp.POW)(-8.0, 1.0 / 3.0))

    def test_zero_to_negative_power_is_infinite(self) -> None:
        assert binop_to_fn(BinOp.POW)(0.0, -1.0) == math.inf

    def test_overflow_is_infinite(self) -> None:
        assert binop_to_fn(BinOp.POW)(10.0, 400.0) == math.inf
        assert binop_to_fn(BinOp.MUL)(1e308, 10.0) == math.inf

    def test_accepts_operator_value(self) -> None:
        assert binop_to_fn("sub")(5.0, 3.0) == 2.0  # type: ignore[arg-type]
