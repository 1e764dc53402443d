"""Sweeping one variable over an evenly spaced range."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from ._errors import InvalidResolutionError
from ._eval import evaluate_formula

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ._formula import Formula

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class VariableRange:
    """The variable to sweep and the samples to take.

    Attributes:
        variable: Name of the variable rebound for every sample.
        start: First sample.
        end: Last sample. Despite the nominal half-open span the end point is
            always sampled.
        resolution: Number of samples, at least 2.

    """

    variable: str
    start: float
    end: float
    resolution: int

    @property
    def step(self) -> float:
        """Distance between consecutive samples."""
        if self.resolution < 2:  # noqa: PLR2004
            raise InvalidResolutionError(self.resolution)
        return (self.end - self.start) / (self.resolution - 1)


@dataclass(frozen=True, slots=True)
class SweepResult:
    """Sample points of a sweep together with the formula's value at each.

    Points and values are stored as tuples, so a result can be handed to a
    plotting layer without copying.
    """

    variable: str
    points: tuple[float, ...] = ()
    values: tuple[float, ...] = ()

    def pairs(self) -> list[tuple[float, float]]:
        """(point, value) pairs in sweep order."""
        return list(zip(self.points, self.values, strict=True))

    def __len__(self) -> int:
        """Return the number of samples."""
        return len(self.points)


def sample_points(var_range: VariableRange) -> list[float]:
    """Generate the sample points of a range.

    Returns `resolution` points linearly spaced from `start` to `end`; the first
    is exactly `start` and the last exactly `end`.

    Raises:
        InvalidResolutionError: If fewer than two samples are requested.

    Example:
        >>> sample_points(VariableRange("a", 0.0, 10.0, 6))
        [0.0, 2.0, 4.0, 6.0, 8.0, 10.0]

    """
    if var_range.resolution < 2:  # noqa: PLR2004
        raise InvalidResolutionError(var_range.resolution)
    samples = np.linspace(var_range.start, var_range.end, num=var_range.resolution, dtype=np.float64)
    return [float(x) for x in samples]


def sweep(
    formula: Formula,
    bindings: Mapping[str, float],
    var_range: VariableRange,
    *,
    strict: bool = False,
) -> SweepResult:
    """Evaluate `formula` once per sample of `var_range`.

    The swept variable is rebound in a private copy of `bindings`; the caller's
    mapping is never touched. Samples are evaluated in ascending order and the
    first error aborts the sweep without returning partial results.

    Raises:
        InvalidResolutionError: If fewer than two samples are requested.
        EvalError: Whatever the evaluation of a sample raises.

    """
    points = sample_points(var_range)
    scope = dict(bindings)
    values: list[float] = []

    logger.debug(
        "Sweeping '%s' over [%r, %r] with %d samples",
        var_range.variable,
        var_range.start,
        var_range.end,
        var_range.resolution,
    )

    for point in points:
        scope[var_range.variable] = point
        value = evaluate_formula(formula, scope, strict=strict)
        logger.debug("  %s = %r -> %r", var_range.variable, point, value)
        values.append(value)

    return SweepResult(variable=var_range.variable, points=tuple(points), values=tuple(values))


def evaluate_over_range(
    formula: Formula,
    bindings: Mapping[str, float],
    var_range: VariableRange,
    *,
    strict: bool = False,
) -> list[float]:
    """Evaluate `formula` over `var_range` and return only the values."""
    return list(sweep(formula, bindings, var_range, strict=strict).values)
