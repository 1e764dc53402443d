"""Errors raised while building, loading and evaluating formulas."""


class EvalError(Exception):
    """Base class for every failure reported by mathexpr."""


class VariableNotFoundError(EvalError):
    """A variable node referenced a name that has no binding."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Variable '{name}' is not bound")


class MathError(EvalError):
    """A numeric-domain failure under strict arithmetic."""


class NotSupportedError(EvalError):
    """The formula cannot be reduced to a single value (e.g. an equality)."""


class InvalidResolutionError(EvalError):
    """A sweep was requested with fewer than two samples."""

    def __init__(self, resolution: int) -> None:
        self.resolution = resolution
        super().__init__(f"Sweep resolution must be at least 2, got {resolution}")


class MalformedTreeError(EvalError):
    """An expression tree has dangling references or cycles."""


class DocumentError(EvalError):
    """A formula document could not be read or is invalid."""
