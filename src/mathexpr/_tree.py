"""Arena-backed expression trees."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Self

from ._errors import MalformedTreeError


class BinOp(StrEnum):
    """Binary operators understood by the evaluator."""

    symbol: str
    precedence: int

    ADD = "add", "+", 1
    SUB = "sub", "-", 1
    MUL = "mul", "*", 2
    DIV = "div", "/", 2
    POW = "pow", "^", 3

    def __new__(cls, value: str, symbol: str = "", precedence: int = 0) -> Self:
        """Create a new operator member with its infix symbol and precedence."""
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.symbol = symbol
        obj.precedence = precedence
        return obj

    @property
    def right_associative(self) -> bool:
        return self is BinOp.POW


@dataclass(frozen=True, slots=True)
class ExprRef:
    """Opaque reference to a node inside an `ExprTree`.

    A reference is only meaningful for the tree that produced it.
    """

    index: int

    def __str__(self) -> str:
        return f"#{self.index}"


@dataclass(frozen=True, slots=True)
class Binary:
    op: BinOp
    lhs: ExprRef
    rhs: ExprRef


@dataclass(frozen=True, slots=True)
class Num:
    value: float


@dataclass(frozen=True, slots=True)
class Var:
    name: str


ExprNode = Binary | Num | Var


@dataclass(slots=True)
class ExprTree:
    """Append-only arena of expression nodes.

    Nodes are addressed by `ExprRef`. The builder methods only accept operand
    references that already exist in the arena, so a tree built through them
    cannot contain cycles or dangling references.

    Example:
        >>> tree = ExprTree()
        >>> two = tree.num(2.0)
        >>> a = tree.var("a")
        >>> root = tree.binary(BinOp.MUL, two, a)
        >>> tree.get(root)
        Binary(op=<BinOp.MUL: 'mul'>, lhs=ExprRef(index=0), rhs=ExprRef(index=1))

    """

    nodes: list[ExprNode] = field(default_factory=list)

    def push(self, node: ExprNode) -> ExprRef:
        """Append a node and return its reference."""
        if isinstance(node, Binary):
            self._check_operand(node.lhs)
            self._check_operand(node.rhs)
        self.nodes.append(node)
        return ExprRef(len(self.nodes) - 1)

    def num(self, value: float) -> ExprRef:
        return self.push(Num(float(value)))

    def var(self, name: str) -> ExprRef:
        if not name:
            msg = "Variable name must not be empty"
            raise ValueError(msg)
        return self.push(Var(name))

    def binary(self, op: BinOp, lhs: ExprRef, rhs: ExprRef) -> ExprRef:
        return self.push(Binary(BinOp(op), lhs, rhs))

    def get(self, ref: ExprRef) -> ExprNode:
        """Get the node behind a reference.

        Raises:
            MalformedTreeError: If the reference is outside the arena.

        """
        if not self.contains(ref):
            msg = f"Reference {ref} is out of bounds for a tree of {len(self.nodes)} nodes"
            raise MalformedTreeError(msg)
        return self.nodes[ref.index]

    def contains(self, ref: ExprRef) -> bool:
        return 0 <= ref.index < len(self.nodes)

    def refs(self) -> list[ExprRef]:
        """All references in arena order."""
        return [ExprRef(i) for i in range(len(self.nodes))]

    def _check_operand(self, ref: ExprRef) -> None:
        if not self.contains(ref):
            msg = f"Operand {ref} does not refer to an existing node (tree has {len(self.nodes)} nodes)"
            raise MalformedTreeError(msg)

    def __len__(self) -> int:
        """Return the number of nodes in the arena."""
        return len(self.nodes)
