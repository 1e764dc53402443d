"""Reading formula documents and writing sweep results as TOML."""

from __future__ import annotations

import logging
import math
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any, Literal, Self

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ._errors import DocumentError
from ._formula import Formula
from ._sweep import VariableRange
from ._tree import Binary, BinOp, ExprRef, ExprTree, Num, Var
from ._validate import validate_tree

if TYPE_CHECKING:
    from ._sweep import SweepResult
    from ._tree import ExprNode

logger = logging.getLogger(__name__)


# =============================================================================
# Document schema
# =============================================================================


class _StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class NumNodeData(_StrictModel):
    type: Literal["num"]
    value: float


class VarNodeData(_StrictModel):
    type: Literal["var"]
    name: str = Field(min_length=1)


class BinaryNodeData(_StrictModel):
    type: Literal["binary"]
    op: BinOp
    lhs: int = Field(ge=0)
    rhs: int = Field(ge=0)


NodeData = Annotated[NumNodeData | VarNodeData | BinaryNodeData, Field(discriminator="type")]


class FormulaData(_StrictModel):
    """The `[formula]` table: the node arena and its root(s)."""

    nodes: list[NodeData] = Field(min_length=1)
    root: int | None = Field(default=None, ge=0)
    lhs: int | None = Field(default=None, ge=0)
    rhs: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _check_roots(self) -> Self:
        has_sides = self.lhs is not None or self.rhs is not None
        if self.root is not None and has_sides:
            msg = "give either 'root' or 'lhs' and 'rhs', not both"
            raise ValueError(msg)
        if self.root is None and (self.lhs is None or self.rhs is None):
            msg = "an expression needs 'root'; an equality needs both 'lhs' and 'rhs'"
            raise ValueError(msg)
        return self


class RangeData(_StrictModel):
    """The optional `[range]` table."""

    variable: str = Field(min_length=1)
    start: float
    end: float
    resolution: int


class DocumentData(_StrictModel):
    formula: FormulaData
    bindings: dict[str, float] = Field(default_factory=dict)
    range: RangeData | None = None


# =============================================================================
# Conversion
# =============================================================================


@dataclass(frozen=True, slots=True)
class Document:
    """A loaded formula document.

    Attributes:
        formula: The formula, with its tree already validated.
        bindings: Variable values given in the document.
        var_range: The sweep described by the document, if any.

    """

    formula: Formula
    bindings: dict[str, float] = field(default_factory=dict)
    var_range: VariableRange | None = None


def _to_node(data: NumNodeData | VarNodeData | BinaryNodeData) -> ExprNode:
    match data:
        case NumNodeData(value=value):
            return Num(value)
        case VarNodeData(name=name):
            return Var(name)
        case BinaryNodeData(op=op, lhs=lhs, rhs=rhs):
            return Binary(op, ExprRef(lhs), ExprRef(rhs))


def formula_from_data(data: FormulaData) -> Formula:
    """Build a `Formula` from its document form and validate its tree.

    Raises:
        MalformedTreeError: If a reference is out of bounds or the nodes form a cycle.

    """
    # Nodes may refer forward in a document, so the arena is filled directly
    tree = ExprTree(nodes=[_to_node(node) for node in data.nodes])
    if data.root is not None:
        formula = Formula.expression(tree, ExprRef(data.root))
    else:
        formula = Formula.equality(tree, ExprRef(data.lhs), ExprRef(data.rhs))  # type: ignore[arg-type]
    validate_tree(tree, formula.roots())
    return formula


def document_from_dict(raw: dict[str, Any]) -> Document:
    """Validate a parsed TOML mapping and turn it into a `Document`.

    Raises:
        DocumentError: If the mapping does not match the document schema.
        MalformedTreeError: If the formula's tree is not well formed.

    """
    try:
        data = DocumentData.model_validate(raw)
    except ValidationError as e:
        msg = f"Invalid formula document:\n{e}"
        raise DocumentError(msg) from e

    var_range = None
    if data.range is not None:
        var_range = VariableRange(
            variable=data.range.variable,
            start=data.range.start,
            end=data.range.end,
            resolution=data.range.resolution,
        )

    return Document(
        formula=formula_from_data(data.formula),
        bindings=dict(data.bindings),
        var_range=var_range,
    )


def load_document(path: Path) -> Document:
    """Load a formula document from a TOML file.

    Raises:
        DocumentError: If the file cannot be read or is invalid.
        MalformedTreeError: If the formula's tree is not well formed.

    """
    try:
        with path.open("rb") as f:
            raw = tomllib.load(f)
    except OSError as e:
        msg = f"Cannot read {path}: {e}"
        raise DocumentError(msg) from e
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path}: {e}"
        raise DocumentError(msg) from e

    document = document_from_dict(raw)
    logger.debug(f"Loaded formula with {len(document.formula.tree)} nodes from {path}")
    return document


# =============================================================================
# Export
# =============================================================================


def sweep_to_dict(result: SweepResult) -> dict[str, Any]:
    """Convert a sweep result to a TOML-ready mapping."""
    return {
        "sweep": {
            "variable": result.variable,
            "points": list(result.points),
            "values": list(result.values),
            "finite": all(math.isfinite(v) for v in result.values),
        },
    }


def export_sweep_to_toml(result: SweepResult, output_path: Path) -> None:
    """Write a sweep result to a TOML file, creating parent directories."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("wb") as f:
        tomli_w.dump(sweep_to_dict(result), f)
    logger.debug(f"Exported {len(result)} samples to {output_path}")
