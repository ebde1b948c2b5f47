"""
Exceptions and warning categories.

Every error derives from ``CurveFittingError`` and from the builtin it
refines, so ``except ValueError`` style handlers keep working.
"""


class CurveFittingError(Exception):
    """Base class for all curve fitting errors."""


class InvalidArgumentOrderError(CurveFittingError, ValueError):
    """Grid point arguments are not strictly ascending."""


class InsufficientDataError(CurveFittingError, ValueError):
    """Fewer grid points than coefficients to estimate."""


class InvalidOrderError(CurveFittingError, ValueError):
    """Requested order is negative or exceeds the basis family's maximal order."""


class NotOperableError(CurveFittingError, RuntimeError):
    """Curve query on a fitter without a valid fit."""


class DecompositionFailure(CurveFittingError, RuntimeError):
    """The linear algebra backend could not factor the design matrix."""


class SharedInstanceImmutableError(CurveFittingError, RuntimeError):
    """``update`` called on a read-only shared view."""


class IndexOutOfRangeError(CurveFittingError, IndexError):
    """Coefficient index outside ``0..order``."""


class RankTruncationWarning(UserWarning):
    """Singular values were dropped by the absolute or relative threshold."""


__all__ = [
    "CurveFittingError",
    "InvalidArgumentOrderError",
    "InsufficientDataError",
    "InvalidOrderError",
    "NotOperableError",
    "DecompositionFailure",
    "SharedInstanceImmutableError",
    "IndexOutOfRangeError",
    "RankTruncationWarning",
]
