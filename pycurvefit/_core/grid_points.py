"""
Grid point storage and change classification.
"""

import numpy as np
from enum import IntFlag

from .._utils import check_integer, check_vector, check_ascending, read_only
from ..exceptions import InvalidArgumentOrderError


class GridPointState(IntFlag):
    """
    What changed in the grid points since the previous update.

    The caller supplies this hint; it is trusted, not verified.
    """
    NO_CHANGE = 0
    VALUES_CHANGED = 1     # values moved, arguments (x-axis labels) did not
    ARGUMENTS_CHANGED = 2  # arguments moved, values did not
    CHANGED = VALUES_CHANGED | ARGUMENTS_CHANGED


class GridPointDataset:
    """
    Private copy of the grid points a fitter works on.

    Every update replaces the stored arrays wholesale, so the caller may
    reuse or mutate its buffers afterwards.
    """

    def __init__(self):
        self._arguments = None
        self._values = None
        self._count = 0
        self.state = GridPointState.NO_CHANGE

    @property
    def count(self) -> int:
        """Number of grid points; 0 if not operable."""
        return self._count

    @property
    def is_operable(self) -> bool:
        return self._count > 0

    @property
    def arguments(self):
        """Grid point arguments (read-only), or None."""
        return None if self._arguments is None else read_only(self._arguments)

    @property
    def values(self):
        """Grid point values (read-only), or None."""
        return None if self._values is None else read_only(self._values)

    def update(self, arguments, values, count: int, state=GridPointState.CHANGED):
        """
        Store a copy of the first `count` grid points.

        Parameters
        ----------
        arguments : array-like
            Strictly ascending grid point arguments
        values : array-like
            Grid point values
        count : int
            Number of grid points to take into account; <= 0 discards
            all grid points (not operable)
        state : GridPointState
            Change classification with respect to the previous update

        Raises
        ------
        TypeError
            If count is not an integer
        InvalidArgumentOrderError
            If the arguments are not strictly ascending or fewer than
            `count` arguments/values are given
        ValueError
            If arguments or values contain NaN or Inf
        """
        state = GridPointState(state)
        count = check_integer(count, name='count')
        if count <= 0:
            self._arguments = None
            self._values = None
            self._count = 0
            self.state = state
            return

        x = check_vector(arguments, name='arguments')
        y = check_vector(values, name='values')
        if x.shape[0] < count or y.shape[0] < count:
            raise InvalidArgumentOrderError(
                f"count = {count} but {x.shape[0]} arguments and "
                f"{y.shape[0]} values given"
            )
        x = check_ascending(x[:count].copy())
        y = y[:count].copy()

        self._arguments = x
        self._values = y
        self._count = count
        self.state = state

    def __repr__(self):
        return f"GridPointDataset(count={self._count}, state={self.state!r})"
