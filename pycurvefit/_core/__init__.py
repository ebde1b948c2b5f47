"""
Core algorithms (backend-agnostic).
"""

from .basis import (
    BasisFunctions,
    MonomialBasisFunctions,
    ChebyshevBasisFunctions,
    LegendreBasisFunctions,
    CustomBasisFunctions,
    get_basis_functions,
)
from .grid_points import GridPointState, GridPointDataset
from .svd_solver import (
    DesignDecomposition,
    threshold_singular_values,
    decompose_design_matrix,
    solve_coefficients,
)

__all__ = [
    "BasisFunctions",
    "MonomialBasisFunctions",
    "ChebyshevBasisFunctions",
    "LegendreBasisFunctions",
    "CustomBasisFunctions",
    "get_basis_functions",
    "GridPointState",
    "GridPointDataset",
    "DesignDecomposition",
    "threshold_singular_values",
    "decompose_design_matrix",
    "solve_coefficients",
]
