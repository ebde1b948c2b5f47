"""
Test least squares regression curves.

Covers exact recovery, the two-tier incremental update, singular value
thresholding, operability and the read-only shared view.
"""

import pytest
import numpy as np
import pandas as pd
from concurrent.futures import ThreadPoolExecutor
from numpy.polynomial import Chebyshev

from pycurvefit import (
    LeastSquaresRegression,
    LeastSquaresCurveFitter,
    FitterState,
    GridPointState,
    CustomBasisFunctions,
    ChebyshevBasisFunctions,
    fit_curve,
)
from pycurvefit._backends import CPUBackendFP64
from pycurvefit.regression import _CurveQueries
from pycurvefit.exceptions import (
    CurveFittingError,
    InvalidArgumentOrderError,
    InsufficientDataError,
    InvalidOrderError,
    NotOperableError,
    DecompositionFailure,
    SharedInstanceImmutableError,
    IndexOutOfRangeError,
    RankTruncationWarning,
)


# Tolerance levels (based on double precision)
COEF_TOL = 1e-9


class CountingBackend(CPUBackendFP64):
    """CPU backend that counts SVD calls."""

    def __init__(self):
        super().__init__()
        self.svd_calls = 0

    def svd(self, matrix):
        self.svd_calls += 1
        return super().svd(matrix)


def make_fitter(order=2, basis='monomial', **kwargs) -> LeastSquaresCurveFitter:
    return LeastSquaresRegression(order, basis_functions=basis, **kwargs).create()


class TestExactRecovery:
    """Fitting exact basis combinations recovers the coefficients."""

    def test_straight_line(self):
        """Test y = 2x + 3 on four points."""
        fitter = make_fitter(order=1)
        fitter.update(4, [0.0, 1.0, 2.0, 3.0], [3.0, 5.0, 7.0, 9.0])

        np.testing.assert_allclose(fitter.coefficients, [3.0, 2.0], rtol=COEF_TOL)
        assert fitter.coefficient(0) == pytest.approx(3.0)
        assert fitter.coefficient(1) == pytest.approx(2.0)
        assert fitter.rank == 2
        assert fitter.state is FitterState.OPERABLE

    def test_cubic_monomial(self):
        """Test a cubic on 25 points."""
        beta = np.array([1.5, -0.5, 0.25, -0.01])
        x = np.linspace(-3.0, 5.0, 25)
        y = np.polynomial.polynomial.polyval(x, beta)

        fitter = make_fitter(order=3)
        fitter.update(25, x, y)

        np.testing.assert_allclose(fitter.coefficients, beta, rtol=COEF_TOL, atol=1e-12)
        np.testing.assert_allclose(fitter.residuals, 0.0, atol=1e-10)

    def test_chebyshev_on_domain(self):
        """Test Chebyshev coefficients on a maturity-like domain."""
        domain = (0.0, 30.0)
        beta = np.array([0.03, 0.01, -0.004, 0.001])
        x = np.array([0.25, 0.5, 1.0, 2.0, 3.0, 5.0, 7.0, 10.0, 15.0, 20.0, 30.0])
        y = Chebyshev(beta, domain=list(domain))(x)

        fitter = make_fitter(order=3, basis=ChebyshevBasisFunctions(domain=domain))
        fitter.update(len(x), x, y)

        np.testing.assert_allclose(fitter.coefficients, beta, rtol=COEF_TOL, atol=1e-14)

    def test_queries_on_quadratic(self):
        """Test value, derivative and integral of y = 1 - 2x + 0.5x^2."""
        x = np.arange(6.0)
        y = 1.0 - 2.0 * x + 0.5 * x**2
        fitter = make_fitter(order=2)
        fitter.update(6, x, y)

        assert fitter.value(2.5) == pytest.approx(1.0 - 5.0 + 3.125)
        assert fitter.derivative(2.5) == pytest.approx(-2.0 + 2.5)
        # antiderivative x - x^2 + x^3 / 6
        expected = (4.0 - 16.0 + 64.0 / 6.0) - (1.0 - 1.0 + 1.0 / 6.0)
        assert fitter.integral(1.0, 4.0) == pytest.approx(expected)

    def test_noisy_fit_matches_lstsq(self):
        """Test an overdetermined noisy fit against numpy.linalg.lstsq."""
        np.random.seed(42)
        x = np.sort(np.random.uniform(-1.0, 1.0, 50))
        y = np.cos(3.0 * x) + 0.05 * np.random.randn(50)

        fitter = make_fitter(order=4)
        fitter.update(50, x, y)

        A = np.vander(x, 5, increasing=True)
        expected, *_ = np.linalg.lstsq(A, y, rcond=None)
        np.testing.assert_allclose(fitter.coefficients, expected, rtol=1e-9, atol=1e-12)

        # normal equations: residual orthogonal to the columns
        np.testing.assert_allclose(A.T @ fitter.residuals, 0.0, atol=1e-10)
        np.testing.assert_allclose(fitter.fitted_values + fitter.residuals, y, atol=1e-12)

    def test_custom_basis(self):
        """Test a Nelson-Siegel style custom basis with fixed decay."""
        tau = 2.0
        basis = CustomBasisFunctions([
            lambda t: np.ones_like(t),
            lambda t: np.exp(-t / tau),
            lambda t: t / tau * np.exp(-t / tau),
        ])
        beta = np.array([0.04, -0.02, 0.01])
        t = np.array([0.5, 1.0, 2.0, 3.0, 5.0, 7.0, 10.0])
        y = beta[0] + beta[1] * np.exp(-t / tau) + beta[2] * t / tau * np.exp(-t / tau)

        fitter = make_fitter(order=2, basis=basis)
        fitter.update(len(t), t, y)
        np.testing.assert_allclose(fitter.coefficients, beta, rtol=COEF_TOL)


class TestIncrementalUpdate:
    """Test the two-tier recomputation protocol."""

    def setup_method(self):
        self.x = np.array([0.0, 0.5, 1.0, 2.0, 3.5, 5.0])
        self.y1 = np.array([1.0, 1.4, 1.7, 2.6, 2.9, 3.3])
        self.y2 = np.array([0.9, 1.5, 1.6, 2.4, 3.1, 3.0])

    def test_no_change_is_idempotent(self):
        """Test NO_CHANGE leaves coefficients bit-for-bit unchanged."""
        backend = CountingBackend()
        fitter = make_fitter(order=2, backend=backend)
        fitter.update(6, self.x, self.y1, GridPointState.CHANGED)
        before = fitter.coefficients.copy()

        fitter.update(6, self.x, self.y1, GridPointState.NO_CHANGE)
        np.testing.assert_array_equal(fitter.coefficients, before)
        assert backend.svd_calls == 1

    def test_forced_recompute_is_identical(self):
        """Test a forced full recompute reproduces the coefficients."""
        fitter = make_fitter(order=2)
        fitter.update(6, self.x, self.y1, GridPointState.CHANGED)
        before = fitter.coefficients.copy()

        fitter.update(6, self.x, self.y1, GridPointState.CHANGED)
        np.testing.assert_allclose(fitter.coefficients, before, rtol=1e-14, atol=0)

    def test_values_only_path_equals_full_update(self):
        """Test VALUES_CHANGED agrees with a full update on the same points."""
        backend = CountingBackend()
        cheap = make_fitter(order=2, backend=backend)
        cheap.update(6, self.x, self.y1, GridPointState.CHANGED)
        cheap.update(6, self.x, self.y2, GridPointState.VALUES_CHANGED)
        assert backend.svd_calls == 1

        full = make_fitter(order=2)
        full.update(6, self.x, self.y2, GridPointState.CHANGED)

        np.testing.assert_allclose(cheap.coefficients, full.coefficients, rtol=1e-12, atol=1e-15)
        np.testing.assert_array_equal(cheap.grid_point_values, self.y2)

    def test_arguments_changed_recomputes_svd(self):
        """Test ARGUMENTS_CHANGED triggers a new factorization."""
        backend = CountingBackend()
        fitter = make_fitter(order=1, backend=backend)
        fitter.update(3, [0.0, 1.0, 2.0], [1.0, 3.0, 5.0])
        fitter.update(3, [0.0, 2.0, 4.0], [1.0, 3.0, 5.0], GridPointState.ARGUMENTS_CHANGED)

        assert backend.svd_calls == 2
        np.testing.assert_allclose(fitter.coefficients, [1.0, 1.0], rtol=COEF_TOL)

    def test_first_update_is_always_full(self):
        """Test the first update factors even if only values are flagged."""
        backend = CountingBackend()
        fitter = make_fitter(order=1, backend=backend)
        fitter.update(4, [0.0, 1.0, 2.0, 3.0], [3.0, 5.0, 7.0, 9.0], GridPointState.VALUES_CHANGED)

        assert backend.svd_calls == 1
        np.testing.assert_allclose(fitter.coefficients, [3.0, 2.0], rtol=COEF_TOL)

    def test_full_update_after_not_operable(self):
        """Test a not-operable phase discards the factorization."""
        backend = CountingBackend()
        fitter = make_fitter(order=1, backend=backend)
        fitter.update(4, [0.0, 1.0, 2.0, 3.0], [3.0, 5.0, 7.0, 9.0])
        fitter.update(0, [], [])
        fitter.update(4, [0.0, 1.0, 2.0, 3.0], [1.0, 1.0, 1.0, 1.0], GridPointState.NO_CHANGE)

        assert backend.svd_calls == 2
        np.testing.assert_allclose(fitter.coefficients, [1.0, 0.0], atol=1e-12)

    def test_count_change_forces_factorization(self):
        """Test a different grid point count refactors regardless of flags."""
        backend = CountingBackend()
        fitter = make_fitter(order=1, backend=backend)
        fitter.update(3, [0.0, 1.0, 2.0], [0.0, 1.0, 2.0])
        fitter.update(4, [0.0, 1.0, 2.0, 3.0], [0.0, 2.0, 4.0, 6.0], GridPointState.VALUES_CHANGED)

        assert backend.svd_calls == 2
        np.testing.assert_allclose(fitter.coefficients, [0.0, 2.0], atol=1e-12)

    def test_defensive_copy(self):
        """Test caller buffers may be mutated after update."""
        x = self.x.copy()
        y = self.y1.copy()
        fitter = make_fitter(order=2)
        fitter.update(6, x, y)
        before = fitter.coefficients.copy()

        x[:] = 0.0
        y[:] = 0.0
        np.testing.assert_array_equal(fitter.coefficients, before)
        np.testing.assert_array_equal(fitter.grid_point_arguments, self.x)

    def test_coefficients_are_read_only(self):
        fitter = make_fitter(order=1)
        fitter.update(2, [0.0, 1.0], [0.0, 1.0])
        with pytest.raises(ValueError):
            fitter.coefficients[0] = 1.0

    def test_integer_state_accepted(self):
        """Test plain integer change flags."""
        fitter = make_fitter(order=1)
        fitter.update(2, [0.0, 1.0], [0.0, 1.0], 3)
        fitter.update(2, [0.0, 1.0], [1.0, 2.0], 1)
        np.testing.assert_allclose(fitter.coefficients, [1.0, 1.0], atol=1e-12)


class TestSingularValueThresholding:
    """Test rank truncation and the minimum-norm solution."""

    def test_near_duplicate_arguments(self):
        """Test near-duplicate arguments drop a singular value."""
        x = np.array([0.0, 1.0, 1.0 + 1e-12])
        y = np.array([1.0, 2.0, 2.5])
        fitter = make_fitter(order=2, relative_singular_value_threshold=1e-10)

        with pytest.warns(RankTruncationWarning, match="rank deficient"):
            fitter.update(3, x, y)

        assert fitter.rank == 2
        s = fitter.singular_values
        assert s[-1] < 1e-10 * s[0]

        A = np.vander(x, 3, increasing=True)
        expected = np.linalg.pinv(A, rcond=1e-10) @ y
        np.testing.assert_allclose(fitter.coefficients, expected, rtol=1e-8, atol=1e-10)

        # residual orthogonal to the retained left singular vectors
        U, sv, Vt = np.linalg.svd(A)
        r = fitter.rank
        np.testing.assert_allclose(U[:, :r].T @ (A @ fitter.coefficients - y), 0.0, atol=1e-9)
        # minimum norm: no component along the dropped right singular vector
        np.testing.assert_allclose(Vt[r:] @ fitter.coefficients, 0.0, atol=1e-9)

    def test_default_threshold_keeps_full_rank(self):
        """Test well-conditioned problems are not truncated."""
        fitter = make_fitter(order=2)
        fitter.update(4, [0.0, 1.0, 2.0, 3.0], [1.0, 0.0, 1.0, 4.0])
        assert fitter.rank == 3

    def test_absolute_threshold(self):
        """Test an absolute threshold above every singular value."""
        fitter = make_fitter(order=1, absolute_singular_value_threshold=1e6)
        with pytest.warns(RankTruncationWarning):
            fitter.update(3, [0.0, 1.0, 2.0], [1.0, 2.0, 3.0])

        assert fitter.rank == 0
        np.testing.assert_array_equal(fitter.coefficients, [0.0, 0.0])

    def test_thresholding_is_not_an_error(self):
        """Test truncated fits stay operable."""
        fitter = make_fitter(order=1, relative_singular_value_threshold=0.99)
        with pytest.warns(RankTruncationWarning):
            fitter.update(3, [0.0, 1.0, 2.0], [1.0, 2.0, 3.0])
        assert fitter.is_operable
        assert np.isfinite(fitter.value(1.0))

    def test_warning_points_at_caller(self):
        """Test the truncation warning names the calling file."""
        fitter = make_fitter(order=1, relative_singular_value_threshold=0.99)
        with pytest.warns(RankTruncationWarning) as record:
            fitter.update(3, [0.0, 1.0, 2.0], [1.0, 2.0, 3.0])
        assert record[0].filename == __file__

        with pytest.warns(RankTruncationWarning) as record:
            fit_curve([0.0, 1.0, 2.0], [1.0, 2.0, 3.0], order=1,
                      relative_singular_value_threshold=0.99)
        assert record[0].filename == __file__


class TestDataRequirements:
    """Test grid point count boundaries and failed updates."""

    def test_one_point_too_few(self):
        """Test order grid points are rejected."""
        fitter = make_fitter(order=2)
        with pytest.raises(InsufficientDataError, match="at least 3"):
            fitter.update(2, [0.0, 1.0], [1.0, 2.0])
        assert fitter.state is FitterState.UNINITIALIZED

    def test_square_system_interpolates(self):
        """Test order + 1 grid points give an exact interpolation."""
        fitter = make_fitter(order=2)
        fitter.update(3, [0.0, 1.0, 3.0], [2.0, -1.0, 4.0])

        np.testing.assert_allclose(fitter.residuals, 0.0, atol=1e-12)
        for xi, yi in zip([0.0, 1.0, 3.0], [2.0, -1.0, 4.0]):
            assert fitter.value(xi) == pytest.approx(yi)

    def test_insufficient_data_keeps_previous_fit(self):
        fitter = make_fitter(order=2)
        fitter.update(4, [0.0, 1.0, 2.0, 3.0], [0.0, 1.0, 4.0, 9.0])
        before = fitter.coefficients.copy()

        with pytest.raises(InsufficientDataError):
            fitter.update(2, [0.0, 1.0], [5.0, 5.0])
        np.testing.assert_array_equal(fitter.coefficients, before)
        assert fitter.grid_point_count == 4

    def test_unsorted_arguments_keep_previous_fit(self):
        fitter = make_fitter(order=1)
        fitter.update(3, [0.0, 1.0, 2.0], [0.0, 1.0, 2.0])
        before = fitter.coefficients.copy()

        with pytest.raises(InvalidArgumentOrderError):
            fitter.update(3, [0.0, 2.0, 1.0], [0.0, 1.0, 2.0])
        np.testing.assert_array_equal(fitter.coefficients, before)
        np.testing.assert_array_equal(fitter.grid_point_arguments, [0.0, 1.0, 2.0])

    def test_decomposition_failure_keeps_previous_fit(self):
        """Test a non-finite design matrix leaves the fit intact."""
        basis = CustomBasisFunctions([
            lambda x: np.ones_like(x),
            lambda x: np.where(x > 5.0, np.nan, x),
        ])
        fitter = make_fitter(order=1, basis=basis)
        fitter.update(3, [0.0, 1.0, 2.0], [1.0, 2.0, 3.0])
        before = fitter.coefficients.copy()

        with pytest.raises(DecompositionFailure):
            fitter.update(3, [4.0, 6.0, 8.0], [1.0, 2.0, 3.0])

        assert fitter.state is FitterState.OPERABLE
        np.testing.assert_array_equal(fitter.coefficients, before)
        np.testing.assert_array_equal(fitter.grid_point_arguments, [0.0, 1.0, 2.0])

    def test_non_integer_count(self):
        """Test a float grid point count is rejected, not truncated."""
        fitter = make_fitter(order=1)
        fitter.update(3, [0.0, 1.0, 2.0], [0.0, 1.0, 2.0])

        with pytest.raises(TypeError, match="grid_point_count must be an integer"):
            fitter.update(3.0, [0.0, 1.0, 2.0], [1.0, 1.0, 1.0])
        np.testing.assert_allclose(fitter.coefficients, [0.0, 1.0], atol=1e-12)

        fitter.update(np.int64(3), [0.0, 1.0, 2.0], [1.0, 1.0, 1.0])
        np.testing.assert_allclose(fitter.coefficients, [1.0, 0.0], atol=1e-12)

    def test_error_hierarchy(self):
        """Test errors also derive from the matching builtins."""
        assert issubclass(InsufficientDataError, ValueError)
        assert issubclass(NotOperableError, RuntimeError)
        assert issubclass(IndexOutOfRangeError, IndexError)
        assert issubclass(DecompositionFailure, CurveFittingError)


class TestOperability:
    """Test queries are guarded by the fitter state."""

    QUERIES = [
        lambda f: f.value(1.0),
        lambda f: f.derivative(1.0),
        lambda f: f.integral(0.0, 1.0),
        lambda f: f.coefficient(0),
        lambda f: f.coefficients,
    ]

    @pytest.mark.parametrize("query", QUERIES)
    def test_before_first_update(self, query):
        fitter = make_fitter(order=1)
        assert fitter.state is FitterState.UNINITIALIZED
        assert not fitter.is_operable
        with pytest.raises(NotOperableError):
            query(fitter)

    @pytest.mark.parametrize("query", QUERIES)
    def test_after_empty_update(self, query):
        fitter = make_fitter(order=1)
        fitter.update(2, [0.0, 1.0], [0.0, 1.0])
        fitter.update(0, [0.0, 1.0], [0.0, 1.0])
        assert fitter.state is FitterState.NOT_OPERABLE
        assert fitter.grid_point_count == 0
        with pytest.raises(NotOperableError):
            query(fitter)

    def test_coefficient_index_range(self):
        fitter = make_fitter(order=2)
        fitter.update(3, [0.0, 1.0, 2.0], [0.0, 1.0, 4.0])
        with pytest.raises(IndexOutOfRangeError):
            fitter.coefficient(3)
        with pytest.raises(IndexOutOfRangeError):
            fitter.coefficient(-1)

    def test_domain_of_definition(self):
        fitter = make_fitter(order=1)
        assert fitter.lower_bound == -np.inf
        assert fitter.upper_bound == np.inf


class TestConfiguration:
    """Test the immutable regression configuration."""

    def test_defaults(self):
        regression = LeastSquaresRegression(3)
        eps = np.finfo(np.float64).eps
        assert regression.order == 3
        assert regression.basis_functions.name == 'monomial'
        assert regression.absolute_singular_value_threshold == eps
        assert regression.relative_singular_value_threshold == eps
        assert regression.backend.name == 'cpu_fp64'

    def test_order_below_one(self):
        with pytest.raises(InvalidOrderError):
            LeastSquaresRegression(0)

    def test_order_above_maximal_order(self):
        basis = CustomBasisFunctions([lambda x: 1.0, lambda x: x])
        with pytest.raises(InvalidOrderError, match="maximal order 1"):
            LeastSquaresRegression(2, basis_functions=basis)

    def test_non_integer_order(self):
        with pytest.raises(TypeError, match="order must be an integer"):
            LeastSquaresRegression(2.7)
        assert LeastSquaresRegression(np.int32(2)).order == 2

    def test_basis_kwargs(self):
        """Test a named orthogonal family can be given a domain."""
        x = np.linspace(0.0, 30.0, 40)
        curve = fit_curve(x, np.sin(x / 5.0), order=10, basis='chebyshev',
                          basis_kwargs={'domain': (0.0, 30.0)})

        assert curve.basis_functions.domain == (0.0, 30.0)
        assert curve.rank == 11
        assert np.max(np.abs(curve.residuals)) < 1e-4

    def test_basis_kwargs_with_instance(self):
        with pytest.raises(ValueError, match="existing"):
            LeastSquaresRegression(2, basis_functions=ChebyshevBasisFunctions(),
                                   basis_kwargs={'domain': (0.0, 1.0)})

    def test_negative_threshold(self):
        with pytest.raises(ValueError, match="non-negative"):
            LeastSquaresRegression(1, relative_singular_value_threshold=-1.0)

    def test_read_only_properties(self):
        regression = LeastSquaresRegression(1)
        with pytest.raises(AttributeError):
            regression.order = 2

    def test_create_returns_independent_fitters(self):
        regression = LeastSquaresRegression(1)
        a = regression.create()
        b = regression.create()
        a.update(2, [0.0, 1.0], [0.0, 1.0])

        assert a is not b
        assert a.factory is regression and b.factory is regression
        assert a.is_operable and not b.is_operable

    def test_repr(self):
        regression = LeastSquaresRegression(2, 'legendre')
        assert "legendre" in repr(regression)
        assert "uninitialized" in repr(regression.create())


class TestSharedView:
    """Test the read-only shared view."""

    def test_view_follows_owner(self):
        fitter = make_fitter(order=1)
        view = fitter.shared_view()
        with pytest.raises(NotOperableError):
            view.value(0.0)

        fitter.update(2, [0.0, 1.0], [1.0, 3.0])
        assert view.value(0.5) == pytest.approx(2.0)
        assert view.factory is fitter.factory

        fitter.update(2, [0.0, 1.0], [1.0, 1.0], GridPointState.VALUES_CHANGED)
        assert view.derivative(0.5) == pytest.approx(0.0, abs=1e-12)

    def test_view_update_raises(self):
        fitter = make_fitter(order=1)
        fitter.update(2, [0.0, 1.0], [1.0, 3.0])
        view = fitter.shared_view()

        with pytest.raises(SharedInstanceImmutableError):
            view.update(2, [0.0, 1.0], [0.0, 0.0])
        assert view.coefficient(1) == pytest.approx(2.0)

    def test_concurrent_queries(self):
        x = np.linspace(0.0, 10.0, 30)
        fitter = make_fitter(order=3, basis='chebyshev')
        fitter.update(30, x, np.sin(x))
        view = fitter.shared_view()
        expected = [fitter.value(xi) for xi in x]

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(view.value, x))
        assert results == expected

    def test_concurrent_updates_of_distinct_fitters(self):
        """Test fitters from one factory can be updated in parallel."""
        regression = LeastSquaresRegression(
            3, basis_functions=ChebyshevBasisFunctions(domain=(0.0, 10.0))
        )
        x = np.linspace(0.0, 10.0, 50)
        datasets = [np.cos(x + k) + 0.1 * k * x for k in range(8)]

        def refit(y):
            fitter = regression.create()
            fitter.update(50, x, y)
            for shift in range(5):
                fitter.update(50, x, y + shift, GridPointState.VALUES_CHANGED)
            return fitter.coefficients.copy()

        expected = [refit(y) for y in datasets]
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(refit, datasets))

        for got, want in zip(results, expected):
            np.testing.assert_allclose(got, want, rtol=1e-12, atol=1e-14)

    def test_query_surface_is_abstract(self):
        with pytest.raises(TypeError):
            _CurveQueries()


class TestConvenience:
    """Test fit_curve and reporting helpers."""

    def test_fit_curve(self):
        curve = fit_curve([0, 1, 2, 3], [3, 5, 7, 9], order=1)
        assert isinstance(curve, LeastSquaresCurveFitter)
        np.testing.assert_allclose(curve.coefficients, [3.0, 2.0], rtol=COEF_TOL)

    def test_fit_curve_kwargs(self):
        curve = fit_curve([0.0, 1.0, 2.0], [1.0, 0.0, 1.0], order=2, basis='legendre',
                          relative_singular_value_threshold=1e-12)
        assert curve.factory.relative_singular_value_threshold == 1e-12
        assert curve.value(1.0) == pytest.approx(0.0, abs=1e-12)

    def test_coef_series(self):
        curve = fit_curve([0, 1, 2, 3], [3, 5, 7, 9], order=1)
        coef = curve.coef
        assert isinstance(coef, pd.Series)
        assert list(coef.index) == ['beta0', 'beta1']
        assert coef['beta1'] == pytest.approx(2.0)

    def test_coefficient_table(self):
        curve = fit_curve([0, 1, 2, 3], [3, 5, 7, 9], order=1)
        table = curve.coefficient_table()
        assert isinstance(table, pd.DataFrame)
        assert list(table.columns) == ['order', 'value']
        assert table['value'].iloc[0] == pytest.approx(3.0)

    def test_summary(self, capsys):
        curve = fit_curve([0, 1, 2, 3], [3, 5, 7, 9], order=1)
        curve.summary()
        captured = capsys.readouterr()
        assert 'LEAST SQUARES REGRESSION CURVE' in captured.out
        assert 'Numerical rank:    2 of 2' in captured.out
