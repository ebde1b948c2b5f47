"""
Utility functions.
"""

import operator
import numpy as np

from .exceptions import InvalidArgumentOrderError


def check_integer(n, name='n'):
    """Validate integer input (no silent truncation of floats)."""
    try:
        return operator.index(n)
    except TypeError:
        raise TypeError(
            f"{name} must be an integer, got {n!r} ({type(n).__name__})"
        ) from None


def check_vector(y, name='y', dtype=np.float64):
    """Validate vector input."""
    y = np.asarray(y, dtype=dtype)
    if y.ndim != 1:
        raise ValueError(f"{name} must be 1-dimensional")
    if not np.all(np.isfinite(y)):
        raise ValueError(f"{name} contains NaN or Inf")
    return y


def check_ascending(x, name='arguments'):
    """Validate that a vector is strictly ascending."""
    if x.size > 1 and not np.all(np.diff(x) > 0):
        bad = int(np.argmin(np.diff(x) > 0))
        raise InvalidArgumentOrderError(
            f"{name} must be strictly ascending: "
            f"{name}[{bad}] = {x[bad]!r} >= {name}[{bad + 1}] = {x[bad + 1]!r}"
        )
    return x


def read_only(a):
    """Return a read-only view of an array."""
    view = a.view()
    view.flags.writeable = False
    return view
