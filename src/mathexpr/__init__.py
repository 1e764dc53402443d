"""Numeric evaluation of formula-editor expression trees."""

__all__ = [
    "BinOp",
    "Binary",
    "Document",
    "DocumentError",
    "Equality",
    "EvalError",
    "Expr",
    "ExprNode",
    "ExprRef",
    "ExprTree",
    "Formula",
    "InvalidResolutionError",
    "MalformedTreeError",
    "MathError",
    "NotSupportedError",
    "Num",
    "SweepResult",
    "Var",
    "VariableNotFoundError",
    "VariableRange",
    "binop_to_fn",
    "evaluate",
    "evaluate_formula",
    "evaluate_over_range",
    "export_sweep_to_toml",
    "load_document",
    "render",
    "render_formula",
    "sample_points",
    "sweep",
    "validate_tree",
]

from ._errors import (
    DocumentError,
    EvalError,
    InvalidResolutionError,
    MalformedTreeError,
    MathError,
    NotSupportedError,
    VariableNotFoundError,
)
from ._eval import evaluate, evaluate_formula
from ._formula import Equality, Expr, Formula
from ._io import Document, export_sweep_to_toml, load_document
from ._ops import binop_to_fn
from ._render import render, render_formula
from ._sweep import SweepResult, VariableRange, evaluate_over_range, sample_points, sweep
from ._tree import Binary, BinOp, ExprNode, ExprRef, ExprTree, Num, Var
from ._validate import validate_tree
