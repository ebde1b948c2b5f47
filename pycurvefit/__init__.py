"""
PyCurveFit: incremental least squares regression curves via SVD.

Copyright (C) 2024 SGCX
Licensed under GPL-3.0
"""

__version__ = "1.0.0"

# Import main user-facing API
from .regression import (
    LeastSquaresRegression,
    LeastSquaresCurveFitter,
    SharedCurveView,
    FitterState,
    fit_curve,
)
from ._core import (
    BasisFunctions,
    MonomialBasisFunctions,
    ChebyshevBasisFunctions,
    LegendreBasisFunctions,
    CustomBasisFunctions,
    get_basis_functions,
    GridPointState,
)
from .exceptions import (
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

# Import backend utilities (for advanced users)
from ._backends import get_backend, list_available_backends

__all__ = [
    'LeastSquaresRegression',
    'LeastSquaresCurveFitter',
    'SharedCurveView',
    'FitterState',
    'fit_curve',
    'BasisFunctions',
    'MonomialBasisFunctions',
    'ChebyshevBasisFunctions',
    'LegendreBasisFunctions',
    'CustomBasisFunctions',
    'get_basis_functions',
    'GridPointState',
    'CurveFittingError',
    'InvalidArgumentOrderError',
    'InsufficientDataError',
    'InvalidOrderError',
    'NotOperableError',
    'DecompositionFailure',
    'SharedInstanceImmutableError',
    'IndexOutOfRangeError',
    'RankTruncationWarning',
    'get_backend',
    'list_available_backends',
]
