"""
Basis function families for least squares regression.

A family maps arguments to a design matrix and evaluates the curve
sum_j beta_j * phi_j(x), its derivative and its definite integral for
given coefficients beta_0..beta_order.
"""

import sys
import numpy as np
from abc import ABC, abstractmethod
from typing import Callable, Optional, Sequence, Tuple

from ..exceptions import InvalidOrderError


class BasisFunctions(ABC):
    """Base class for basis function families."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Family name."""
        pass

    @property
    @abstractmethod
    def maximal_order(self) -> int:
        """Largest order a caller may request."""
        pass

    @abstractmethod
    def base_function_value(self, j: int, x: float) -> float:
        """Single basis function phi_j(x)."""
        pass

    @abstractmethod
    def _design_matrix(self, x: np.ndarray, order: int) -> np.ndarray:
        """Design matrix for validated arguments and order."""
        pass

    @abstractmethod
    def value(self, x: float, coefficients: np.ndarray, order: int) -> float:
        """Curve value sum_j beta_j * phi_j(x)."""
        pass

    @abstractmethod
    def derivative(self, x: float, coefficients: np.ndarray, order: int) -> float:
        """First derivative of the curve at x."""
        pass

    @abstractmethod
    def integral(self, a: float, b: float, coefficients: np.ndarray, order: int) -> float:
        """Definite integral of the curve from a to b."""
        pass

    def check_order(self, order: int) -> int:
        """Validate an order against this family."""
        if order < 0:
            raise InvalidOrderError(f"order must be non-negative, got {order}")
        if order > self.maximal_order:
            raise InvalidOrderError(
                f"order {order} exceeds maximal order {self.maximal_order} "
                f"of '{self.name}'"
            )
        return order

    def design_matrix(self, arguments, count: int, order: int) -> np.ndarray:
        """
        Build the design matrix.

        Parameters
        ----------
        arguments : array-like
            Grid point arguments; only the first `count` are used
        count : int
            Number of grid points m
        order : int
            Order of the regression; the matrix has order + 1 columns

        Returns
        -------
        ndarray, shape (m, order + 1)
            Entry (i, j) is phi_j(arguments[i])
        """
        self.check_order(order)
        x = np.asarray(arguments, dtype=np.float64)[:count]
        return self._design_matrix(x, order)

    def __repr__(self):
        return f"{type(self).__name__}()"


class MonomialBasisFunctions(BasisFunctions):
    """Monomials phi_j(x) = x^j, evaluated with the Horner scheme."""

    @property
    def name(self) -> str:
        return "monomial"

    @property
    def maximal_order(self) -> int:
        return sys.maxsize

    def base_function_value(self, j: int, x: float) -> float:
        self.check_order(j)
        return float(x) ** j

    def _design_matrix(self, x: np.ndarray, order: int) -> np.ndarray:
        return np.vander(x, order + 1, increasing=True)

    def value(self, x: float, coefficients: np.ndarray, order: int) -> float:
        value = coefficients[order]
        for j in range(order - 1, -1, -1):
            value = coefficients[j] + x * value
        return float(value)

    def derivative(self, x: float, coefficients: np.ndarray, order: int) -> float:
        value = coefficients[order] * order
        for j in range(order - 1, 0, -1):
            value = coefficients[j] * j + value * x
        return float(value)

    def integral(self, a: float, b: float, coefficients: np.ndarray, order: int) -> float:
        # Horner on the antiderivative sum_j beta_j / (j + 1) * x^(j + 1)
        upper = coefficients[order] / (order + 1.0)
        lower = upper
        for j in range(order - 1, -1, -1):
            c = coefficients[j] / (j + 1.0)
            upper = c + b * upper
            lower = c + a * lower
        return float(b * upper - a * lower)


class OrthogonalPolynomialBasisFunctions(BasisFunctions):
    """
    Classical orthogonal polynomials backed by ``numpy.polynomial``.

    Arguments in `domain` are mapped affinely onto the canonical window
    [-1, 1] of the family, so the polynomials stay well conditioned for
    arguments far away from the origin (e.g. year fractions up to 30).
    """

    _series_class = None
    _vander = None

    def __init__(self, domain: Tuple[float, float] = (-1.0, 1.0)):
        a, b = float(domain[0]), float(domain[1])
        if not (np.isfinite(a) and np.isfinite(b)) or b <= a:
            raise ValueError(f"domain must be a finite interval (a, b) with a < b, got {domain}")
        self.domain = (a, b)

    @property
    def maximal_order(self) -> int:
        return sys.maxsize

    def _series(self, coefficients, order: int):
        beta = np.asarray(coefficients, dtype=np.float64)[:order + 1]
        return self._series_class(beta, domain=list(self.domain))

    def base_function_value(self, j: int, x: float) -> float:
        self.check_order(j)
        return float(self._series_class.basis(j, domain=list(self.domain))(x))

    def _design_matrix(self, x: np.ndarray, order: int) -> np.ndarray:
        t = np.polynomial.polyutils.mapdomain(x, self.domain, self._series_class.window)
        return self._vander(t, order)

    def value(self, x: float, coefficients: np.ndarray, order: int) -> float:
        return float(self._series(coefficients, order)(x))

    def derivative(self, x: float, coefficients: np.ndarray, order: int) -> float:
        return float(self._series(coefficients, order).deriv()(x))

    def integral(self, a: float, b: float, coefficients: np.ndarray, order: int) -> float:
        antiderivative = self._series(coefficients, order).integ()
        return float(antiderivative(b) - antiderivative(a))

    def __repr__(self):
        return f"{type(self).__name__}(domain={self.domain})"


class ChebyshevBasisFunctions(OrthogonalPolynomialBasisFunctions):
    """Chebyshev polynomials of the first kind T_j."""

    _series_class = np.polynomial.Chebyshev
    _vander = staticmethod(np.polynomial.chebyshev.chebvander)

    @property
    def name(self) -> str:
        return "chebyshev"


class LegendreBasisFunctions(OrthogonalPolynomialBasisFunctions):
    """Legendre polynomials P_j."""

    _series_class = np.polynomial.Legendre
    _vander = staticmethod(np.polynomial.legendre.legvander)

    @property
    def name(self) -> str:
        return "legendre"


class CustomBasisFunctions(BasisFunctions):
    """
    User supplied basis functions.

    Parameters
    ----------
    functions : sequence of callables
        phi_0, ..., phi_N; each takes a float (or ndarray) and returns a float
        (or ndarray of the same shape)
    derivatives : sequence of callables, optional
        phi_0', ..., phi_N'; required for `derivative`
    antiderivatives : sequence of callables, optional
        Any antiderivatives Phi_j of phi_j; required for `integral`
    name : str
        Family name

    Examples
    --------
    >>> # Nelson-Siegel style factors with fixed decay
    >>> tau = 2.0
    >>> basis = CustomBasisFunctions([
    ...     lambda t: np.ones_like(t),
    ...     lambda t: np.exp(-t / tau),
    ...     lambda t: t / tau * np.exp(-t / tau),
    ... ])
    """

    def __init__(
        self,
        functions: Sequence[Callable],
        derivatives: Optional[Sequence[Callable]] = None,
        antiderivatives: Optional[Sequence[Callable]] = None,
        name: str = "custom"
    ):
        self.functions = tuple(functions)
        if len(self.functions) == 0:
            raise ValueError("At least one basis function is required")
        self.derivatives = self._check_companions(derivatives, 'derivatives')
        self.antiderivatives = self._check_companions(antiderivatives, 'antiderivatives')
        self._name = name

    def _check_companions(self, companions, what):
        if companions is None:
            return None
        companions = tuple(companions)
        if len(companions) != len(self.functions):
            raise ValueError(
                f"Expected {len(self.functions)} {what}, got {len(companions)}"
            )
        return companions

    @property
    def name(self) -> str:
        return self._name

    @property
    def maximal_order(self) -> int:
        return len(self.functions) - 1

    def base_function_value(self, j: int, x: float) -> float:
        self.check_order(j)
        return float(self.functions[j](x))

    def _design_matrix(self, x: np.ndarray, order: int) -> np.ndarray:
        A = np.empty((x.shape[0], order + 1), dtype=np.float64)
        for j in range(order + 1):
            A[:, j] = np.broadcast_to(np.asarray(self.functions[j](x), dtype=np.float64), x.shape)
        return A

    def _combine(self, funcs, x, coefficients, order):
        return float(sum(coefficients[j] * funcs[j](x) for j in range(order + 1)))

    def value(self, x: float, coefficients: np.ndarray, order: int) -> float:
        return self._combine(self.functions, x, coefficients, order)

    def derivative(self, x: float, coefficients: np.ndarray, order: int) -> float:
        if self.derivatives is None:
            raise NotImplementedError(
                f"Basis '{self.name}' was created without derivatives"
            )
        return self._combine(self.derivatives, x, coefficients, order)

    def integral(self, a: float, b: float, coefficients: np.ndarray, order: int) -> float:
        if self.antiderivatives is None:
            raise NotImplementedError(
                f"Basis '{self.name}' was created without antiderivatives"
            )
        return (self._combine(self.antiderivatives, b, coefficients, order)
                - self._combine(self.antiderivatives, a, coefficients, order))

    def __repr__(self):
        return f"CustomBasisFunctions(name={self._name!r}, size={len(self.functions)})"


_BASIS_FAMILIES = {
    'monomial': MonomialBasisFunctions,
    'polynomial': MonomialBasisFunctions,
    'chebyshev': ChebyshevBasisFunctions,
    'legendre': LegendreBasisFunctions,
}


def get_basis_functions(basis='monomial', **kwargs) -> BasisFunctions:
    """
    Get a basis function family.

    Parameters
    ----------
    basis : str or BasisFunctions
        'monomial' (alias 'polynomial'), 'chebyshev' or 'legendre'.
        An existing instance is returned unchanged.
    **kwargs
        Passed to the family constructor (e.g. ``domain=(0, 30)``)
    """
    if isinstance(basis, BasisFunctions):
        if kwargs:
            raise ValueError(
                f"Constructor arguments {sorted(kwargs)} cannot be applied to "
                f"an existing {type(basis).__name__} instance"
            )
        return basis
    try:
        family = _BASIS_FAMILIES[basis]
    except (KeyError, TypeError):
        raise ValueError(
            f"Unknown basis functions: '{basis}'\n"
            f"Valid options: {', '.join(repr(k) for k in _BASIS_FAMILIES)}"
        ) from None
    return family(**kwargs)


__all__ = [
    "BasisFunctions",
    "MonomialBasisFunctions",
    "OrthogonalPolynomialBasisFunctions",
    "ChebyshevBasisFunctions",
    "LegendreBasisFunctions",
    "CustomBasisFunctions",
    "get_basis_functions",
]
