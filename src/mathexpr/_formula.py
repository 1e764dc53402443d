"""Top-level formulas: a standalone expression or an equality."""

from __future__ import annotations

from dataclasses import dataclass

from ._tree import ExprRef, ExprTree


@dataclass(frozen=True, slots=True)
class Expr:
    """A standalone expression with a single root."""

    root: ExprRef


@dataclass(frozen=True, slots=True)
class Equality:
    """Two independent sides sharing the same arena."""

    lhs: ExprRef
    rhs: ExprRef


FormulaKind = Expr | Equality


@dataclass(frozen=True, slots=True)
class Formula:
    """A parsed formula handed over by the editor.

    Attributes:
        tree: The arena holding every node of the formula.
        kind: Either `Expr` (one root) or `Equality` (left and right roots).

    """

    tree: ExprTree
    kind: FormulaKind

    @classmethod
    def expression(cls, tree: ExprTree, root: ExprRef) -> Formula:
        return cls(tree=tree, kind=Expr(root))

    @classmethod
    def equality(cls, tree: ExprTree, lhs: ExprRef, rhs: ExprRef) -> Formula:
        return cls(tree=tree, kind=Equality(lhs, rhs))

    @property
    def is_equality(self) -> bool:
        return isinstance(self.kind, Equality)

    def roots(self) -> tuple[ExprRef, ...]:
        """Root references in left-to-right order."""
        match self.kind:
            case Expr(root):
                return (root,)
            case Equality(lhs, rhs):
                return (lhs, rhs)
