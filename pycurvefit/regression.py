"""
Least squares regression curves with incremental updates.

This is the user-facing API: configure a regression once, create fitters
from it, feed them grid points and query the fitted curve.
"""

import warnings
import numpy as np
import pandas as pd
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union, Dict, Any

from ._backends import get_backend, LinearAlgebraBackend
from ._core.basis import BasisFunctions, get_basis_functions
from ._core.grid_points import GridPointState, GridPointDataset
from ._core.svd_solver import (
    DesignDecomposition,
    decompose_design_matrix,
    solve_coefficients,
)
from ._utils import check_integer, read_only
from .exceptions import (
    InsufficientDataError,
    InvalidOrderError,
    NotOperableError,
    SharedInstanceImmutableError,
    IndexOutOfRangeError,
    RankTruncationWarning,
)


EPS = np.finfo(np.float64).eps


class FitterState(Enum):
    """Lifecycle of a curve fitter."""
    UNINITIALIZED = "uninitialized"  # no update yet
    NOT_OPERABLE = "not_operable"    # last update had no grid points
    OPERABLE = "operable"            # coefficients match the stored grid points


@dataclass(frozen=True, eq=False)
class CurveFit:
    """
    Immutable result of a successful update.

    Fitters swap in a new instance on every successful update, so a
    reference to a CurveFit never changes underneath a reader.
    """
    basis_functions: BasisFunctions
    order: int
    arguments: np.ndarray
    values: np.ndarray
    coefficients: np.ndarray
    decomposition: DesignDecomposition

    @property
    def rank(self) -> int:
        return self.decomposition.rank

    @property
    def fitted_values(self) -> np.ndarray:
        return self.decomposition.design_matrix @ self.coefficients

    def value(self, x: float) -> float:
        return self.basis_functions.value(x, self.coefficients, self.order)

    def derivative(self, x: float) -> float:
        return self.basis_functions.derivative(x, self.coefficients, self.order)

    def integral(self, a: float, b: float) -> float:
        return self.basis_functions.integral(a, b, self.coefficients, self.order)

    def coefficient(self, index: int) -> float:
        if index < 0 or index > self.order:
            raise IndexOutOfRangeError(
                f"Coefficient index {index} out of range 0..{self.order}"
            )
        return float(self.coefficients[index])


class LeastSquaresRegression:
    """
    Least squares regression parametrization (immutable configuration).

    Serves as factory for LeastSquaresCurveFitter objects; all fitters
    created by one factory share its basis functions, thresholds and
    backend, but nothing else.

    Examples
    --------
    >>> from pycurvefit import LeastSquaresRegression, GridPointState
    >>>
    >>> regression = LeastSquaresRegression(
    ...     order=2, basis_functions='chebyshev', basis_kwargs={'domain': (0.0, 2.0)}
    ... )
    >>> fitter = regression.create()
    >>> fitter.update(4, [0.0, 0.5, 1.0, 2.0], [1.0, 1.2, 1.5, 2.5])
    >>>
    >>> # Same arguments, new values: only the cheap path runs
    >>> fitter.update(4, [0.0, 0.5, 1.0, 2.0], [1.1, 1.3, 1.6, 2.4],
    ...               GridPointState.VALUES_CHANGED)
    >>> fitter.value(0.75), fitter.derivative(0.75), fitter.integral(0, 2)
    """

    def __init__(
        self,
        order: int,
        basis_functions: Union[str, BasisFunctions] = 'monomial',
        absolute_singular_value_threshold: float = EPS,
        relative_singular_value_threshold: float = EPS,
        backend: Union[str, LinearAlgebraBackend] = 'cpu',
        basis_kwargs: Optional[Dict[str, Any]] = None
    ):
        """
        Configure a least squares regression.

        Parameters
        ----------
        order : int
            Order of the regression (>= 1); the curve has order + 1 coefficients
        basis_functions : str or BasisFunctions
            Basis function family: 'monomial', 'chebyshev', 'legendre' or
            a BasisFunctions instance (e.g. CustomBasisFunctions)
        absolute_singular_value_threshold : float
            Singular values below this are treated as zero
        relative_singular_value_threshold : float
            Singular values below this times the largest singular value are
            treated as zero
        backend : str or LinearAlgebraBackend
            Linear algebra backend: 'cpu', 'gpu', 'pytorch', 'auto'
        basis_kwargs : dict, optional
            Passed to the family constructor when basis_functions is a
            name, e.g. {'domain': (0, 30)} for Chebyshev or Legendre

        Raises
        ------
        InvalidOrderError
            If order < 1 or order exceeds the family's maximal order
        TypeError
            If order is not an integer
        """
        self._basis_functions = get_basis_functions(basis_functions, **(basis_kwargs or {}))

        order = check_integer(order, name='order')
        if order < 1:
            raise InvalidOrderError(f"order must be at least 1, got {order}")
        self._order = self._basis_functions.check_order(order)

        for label, threshold in (
            ('absolute_singular_value_threshold', absolute_singular_value_threshold),
            ('relative_singular_value_threshold', relative_singular_value_threshold),
        ):
            if not np.isfinite(threshold) or threshold < 0:
                raise ValueError(f"{label} must be finite and non-negative, got {threshold}")
        self._absolute_threshold = float(absolute_singular_value_threshold)
        self._relative_threshold = float(relative_singular_value_threshold)

        self._backend = get_backend(backend)

    @property
    def name(self) -> str:
        return "LeastSquaresRegression"

    @property
    def order(self) -> int:
        return self._order

    @property
    def basis_functions(self) -> BasisFunctions:
        return self._basis_functions

    @property
    def absolute_singular_value_threshold(self) -> float:
        return self._absolute_threshold

    @property
    def relative_singular_value_threshold(self) -> float:
        return self._relative_threshold

    @property
    def backend(self) -> LinearAlgebraBackend:
        return self._backend

    def create(self) -> "LeastSquaresCurveFitter":
        """Create a new, independent curve fitter."""
        return LeastSquaresCurveFitter(self)

    def __repr__(self):
        return (
            f"LeastSquaresRegression(order={self._order}, "
            f"basis={self._basis_functions.name!r}, backend={self._backend.name!r})"
        )


class _CurveQueries(ABC):
    """Curve query surface shared by fitters and their read-only views."""

    @abstractmethod
    def _committed_fit(self) -> Optional[CurveFit]:
        """Last committed fit, or None if not operable."""
        pass

    def _operable_fit(self) -> CurveFit:
        # single read of the committed fit
        fit = self._committed_fit()
        if fit is None:
            raise NotOperableError(
                "Curve fitter is not operable - call update() with at least "
                "order + 1 grid points first"
            )
        return fit

    @property
    def is_operable(self) -> bool:
        return self._committed_fit() is not None

    @property
    def lower_bound(self) -> float:
        """Lower bound of the domain of definition."""
        return -np.inf

    @property
    def upper_bound(self) -> float:
        """Upper bound of the domain of definition."""
        return np.inf

    def value(self, x: float) -> float:
        """Value of the fitted curve at x."""
        return self._operable_fit().value(x)

    def derivative(self, x: float) -> float:
        """First derivative of the fitted curve at x."""
        return self._operable_fit().derivative(x)

    def integral(self, a: float, b: float) -> float:
        """Definite integral of the fitted curve from a to b."""
        return self._operable_fit().integral(a, b)

    def coefficient(self, index: int) -> float:
        """
        Coefficient beta_index of the fitted curve.

        Raises
        ------
        IndexOutOfRangeError
            If index is not in 0..order
        """
        return self._operable_fit().coefficient(index)

    @property
    def coefficients(self) -> np.ndarray:
        """All coefficients beta_0..beta_order (read-only)."""
        return self._operable_fit().coefficients

    @property
    def rank(self) -> int:
        """Number of singular values retained by the thresholds."""
        return self._operable_fit().rank

    @property
    def singular_values(self) -> np.ndarray:
        """Singular values of the design matrix (descending)."""
        return read_only(self._operable_fit().decomposition.svd.singular_values)

    @property
    def fitted_values(self) -> np.ndarray:
        """Curve values at the grid point arguments."""
        return self._operable_fit().fitted_values

    @property
    def residuals(self) -> np.ndarray:
        """Grid point values minus fitted values."""
        fit = self._operable_fit()
        return fit.values - fit.fitted_values

    @property
    def coef(self) -> pd.Series:
        """Named coefficients (pandas Series)."""
        fit = self._operable_fit()
        return pd.Series(
            fit.coefficients,
            index=[f'beta{j}' for j in range(fit.order + 1)],
            name=fit.basis_functions.name,
        )

    def coefficient_table(self) -> pd.DataFrame:
        """Coefficients as a table with columns 'order' and 'value'."""
        fit = self._operable_fit()
        return pd.DataFrame({
            'order': np.arange(fit.order + 1),
            'value': fit.coefficients,
        })

    def summary(self):
        """Print summary of the fitted curve."""
        fit = self._operable_fit()
        residuals = fit.values - fit.fitted_values
        n = fit.order + 1

        print()
        print("=" * 60)
        print("LEAST SQUARES REGRESSION CURVE")
        print("=" * 60)
        print()
        print(f"Basis functions:   {fit.basis_functions.name}")
        print(f"Order:             {fit.order}")
        print(f"Grid points:       {fit.arguments.shape[0]}")
        print(f"Arguments:         [{fit.arguments[0]:.6g}, {fit.arguments[-1]:.6g}]")
        print(f"Numerical rank:    {fit.rank} of {n}"
              + ("" if fit.rank == n else "  (truncated)"))
        print()
        print("Coefficients:")
        print("-" * 60)
        print(f"{'Order':<8} {'Value':>20} {'Singular value':>20}")
        print("-" * 60)
        s = fit.decomposition.svd.singular_values
        for j in range(n):
            sv = f"{s[j]:>20.6e}" if j < s.shape[0] else f"{'-':>20}"
            print(f"{j:<8} {fit.coefficients[j]:>20.10g} {sv}")
        print("-" * 60)
        print()
        print(f"Residual sum of squares: {float(np.sum(residuals**2)):.6e}")
        print(f"Max |residual|:          {float(np.max(np.abs(residuals))):.6e}")
        print("=" * 60)
        print()


class LeastSquaresCurveFitter(_CurveQueries):
    """
    Incremental least squares curve fit.

    The design matrix and its SVD are recomputed only when the grid point
    arguments change; when only the values change, the coefficients are
    obtained from the stored factorization. The caller states what changed
    via GridPointState and is trusted.

    Not thread-safe for update; use shared_view() to hand out a read-only
    curve to concurrent readers.

    Examples
    --------
    >>> fitter = LeastSquaresRegression(order=1).create()
    >>> fitter.update(4, [0, 1, 2, 3], [3, 5, 7, 9])
    >>> fitter.coefficients      # y = 3 + 2x
    array([3., 2.])
    """

    def __init__(self, factory: LeastSquaresRegression):
        self._factory = factory
        self._state = FitterState.UNINITIALIZED
        self._dataset = GridPointDataset()
        self._fit = None

    def _committed_fit(self) -> Optional[CurveFit]:
        return self._fit

    @property
    def factory(self) -> LeastSquaresRegression:
        return self._factory

    @property
    def order(self) -> int:
        return self._factory.order

    @property
    def basis_functions(self) -> BasisFunctions:
        return self._factory.basis_functions

    @property
    def state(self) -> FitterState:
        return self._state

    @property
    def grid_point_count(self) -> int:
        return self._dataset.count

    @property
    def grid_point_arguments(self) -> Optional[np.ndarray]:
        return self._dataset.arguments

    @property
    def grid_point_values(self) -> Optional[np.ndarray]:
        return self._dataset.values

    def update(
        self,
        grid_point_count: int,
        arguments,
        values,
        state: GridPointState = GridPointState.CHANGED
    ):
        """
        Update the fitter with new grid points.

        Parameters
        ----------
        grid_point_count : int
            Number of grid points to take into account; <= 0 makes the
            fitter not operable
        arguments : array-like
            Strictly ascending grid point arguments (at least
            grid_point_count elements)
        values : array-like
            Grid point values
        state : GridPointState
            What changed since the previous update. ARGUMENTS_CHANGED
            triggers a new SVD, VALUES_CHANGED only new coefficients,
            NO_CHANGE nothing. Ignored (full recompute) for the first
            update after the fitter was not operable.

        Raises
        ------
        InsufficientDataError
            If grid_point_count < order + 1
        InvalidArgumentOrderError
            If the arguments are not strictly ascending
        DecompositionFailure
            If the SVD cannot be computed
        TypeError
            If grid_point_count is not an integer

        Notes
        -----
        On error the fitter keeps its previous grid points and coefficients.
        """
        self._update(grid_point_count, arguments, values, state)

    def _update(self, grid_point_count, arguments, values, state):
        # Warnings use stacklevel=3: _update <- update or fit_curve <- caller
        state = GridPointState(state)
        grid_point_count = check_integer(grid_point_count, name='grid_point_count')

        if grid_point_count <= 0:
            self._fit = None
            self._dataset = GridPointDataset()
            self._dataset.update(None, None, 0, state)
            self._state = FitterState.NOT_OPERABLE
            return

        factory = self._factory
        order = factory.order
        if grid_point_count < order + 1:
            raise InsufficientDataError(
                f"{grid_point_count} grid points given, but order {order} "
                f"requires at least {order + 1}"
            )

        dataset = GridPointDataset()
        dataset.update(arguments, values, grid_point_count, state)

        previous = self._fit
        full_update = (
            previous is None
            or GridPointState.ARGUMENTS_CHANGED in dataset.state
            or previous.decomposition.shape[0] != grid_point_count
        )

        if full_update:
            design_matrix = factory.basis_functions.design_matrix(
                dataset.arguments, grid_point_count, order
            )
            decomposition = decompose_design_matrix(
                design_matrix,
                factory.backend,
                factory.absolute_singular_value_threshold,
                factory.relative_singular_value_threshold,
            )
            if decomposition.rank < order + 1:
                warnings.warn(
                    f"Design matrix is numerically rank deficient: "
                    f"{order + 1 - decomposition.rank} of {order + 1} singular "
                    f"values dropped by the thresholds. Returning the "
                    f"minimum-norm least squares solution.",
                    RankTruncationWarning,
                    stacklevel=3
                )
        else:
            decomposition = previous.decomposition

        if full_update or GridPointState.VALUES_CHANGED in dataset.state:
            coefficients = solve_coefficients(decomposition, dataset.values, factory.backend)
        else:
            coefficients = previous.coefficients

        fit = CurveFit(
            basis_functions=factory.basis_functions,
            order=order,
            arguments=dataset.arguments,
            values=dataset.values,
            coefficients=read_only(np.asarray(coefficients, dtype=np.float64)),
            decomposition=decomposition,
        )

        # commit
        self._dataset = dataset
        self._fit = fit
        self._state = FitterState.OPERABLE

    def shared_view(self) -> "SharedCurveView":
        """
        Read-only view of this fitter.

        The view answers curve queries with whatever this fitter last
        committed and may be queried from several threads; it cannot be
        updated.
        """
        return SharedCurveView(self)

    def __repr__(self):
        if self._fit is None:
            return f"LeastSquaresCurveFitter(order={self.order}, state={self._state.value})"
        return (
            f"LeastSquaresCurveFitter(order={self.order}, "
            f"n={self._dataset.count}, rank={self._fit.rank})"
        )


class SharedCurveView(_CurveQueries):
    """Read-only view sharing a fitter's configuration and current fit."""

    def __init__(self, owner: LeastSquaresCurveFitter):
        self._owner = owner

    def _committed_fit(self) -> Optional[CurveFit]:
        return self._owner._fit

    @property
    def factory(self) -> LeastSquaresRegression:
        return self._owner.factory

    @property
    def order(self) -> int:
        return self._owner.order

    @property
    def state(self) -> FitterState:
        return self._owner.state

    def update(self, *args, **kwargs):
        raise SharedInstanceImmutableError(
            "Shared curve views are read-only; update the owning fitter instead"
        )

    def __repr__(self):
        return f"SharedCurveView({self._owner!r})"


def fit_curve(arguments, values, order: int, basis='monomial', **kwargs) -> LeastSquaresCurveFitter:
    """
    Fit a least squares regression curve (convenience function).

    Parameters
    ----------
    arguments : array-like
        Strictly ascending grid point arguments
    values : array-like
        Grid point values
    order : int
        Order of the regression
    basis : str or BasisFunctions
        Basis function family
    **kwargs
        Additional arguments passed to LeastSquaresRegression
        (thresholds, backend, basis_kwargs)

    Returns
    -------
    LeastSquaresCurveFitter
        Operable fitter

    Examples
    --------
    >>> curve = fit_curve([0, 1, 2, 3, 4], [1.0, 2.1, 2.9, 4.2, 4.8], order=1)
    >>> curve.value(2.5)
    >>> curve.summary()
    """
    fitter = LeastSquaresRegression(order, basis_functions=basis, **kwargs).create()
    arguments = np.asarray(arguments, dtype=np.float64)
    fitter._update(arguments.shape[0], arguments, values, GridPointState.CHANGED)
    return fitter


__all__ = [
    "FitterState",
    "CurveFit",
    "LeastSquaresRegression",
    "LeastSquaresCurveFitter",
    "SharedCurveView",
    "fit_curve",
]
