"""
Least squares solution via singular value decomposition.

The optimal coefficients are beta = (A^t A)^{-1} A^t y for the design
matrix A and observations y. With A = U * Sigma * V^t this becomes
beta = V * Sigma^+ * U^t * y, where Sigma^+ holds the thresholded
reciprocal singular values (Moore-Penrose pseudo-inverse with rank
truncation).

Factoring A is the expensive part and depends on the arguments only;
applying the factorization to new values is an (order + 1) x m operation.
"""

import numpy as np
from dataclasses import dataclass

from .._backends.base import LinearAlgebraBackend, SingularValueDecomposition


@dataclass(frozen=True)
class DesignDecomposition:
    """Factored design matrix, ready to be applied to grid point values."""
    design_matrix: np.ndarray               # (m, n)
    svd: SingularValueDecomposition
    reciprocal_singular_values: np.ndarray  # (n,), zero where truncated
    rank: int                               # retained singular values

    @property
    def shape(self):
        return self.design_matrix.shape


def threshold_singular_values(
    singular_values: np.ndarray,
    n: int,
    absolute_threshold: float,
    relative_threshold: float
) -> np.ndarray:
    """
    Thresholded reciprocal singular values.

    Parameters
    ----------
    singular_values : ndarray
        Singular values in descending order
    n : int
        Number of coefficients (order + 1)
    absolute_threshold : float
        Singular values below this are dropped
    relative_threshold : float
        Singular values below relative_threshold * s_0 are dropped

    Returns
    -------
    ndarray, shape (n,)
        1 / s_j for retained singular values, 0 otherwise
    """
    s = np.zeros(n, dtype=np.float64)
    k = min(n, singular_values.shape[0])
    s[:k] = singular_values[:k]

    # s_0 is the largest; the relative test never looks at neighbours
    rel_threshold = relative_threshold * s[0] if n > 0 else 0.0
    keep = (s >= absolute_threshold) & (s >= rel_threshold) & (s > 0.0)

    reciprocals = np.zeros(n, dtype=np.float64)
    reciprocals[keep] = 1.0 / s[keep]
    return reciprocals


def decompose_design_matrix(
    design_matrix: np.ndarray,
    backend: LinearAlgebraBackend,
    absolute_threshold: float,
    relative_threshold: float
) -> DesignDecomposition:
    """
    Factor a design matrix and threshold its singular values.

    Raises
    ------
    DecompositionFailure
        If the backend cannot compute the SVD
    """
    n = design_matrix.shape[1]
    svd = backend.svd(design_matrix)
    reciprocals = threshold_singular_values(
        svd.singular_values, n, absolute_threshold, relative_threshold
    )
    return DesignDecomposition(
        design_matrix=design_matrix,
        svd=svd,
        reciprocal_singular_values=reciprocals,
        rank=int(np.count_nonzero(reciprocals)),
    )


def solve_coefficients(
    decomposition: DesignDecomposition,
    values: np.ndarray,
    backend: LinearAlgebraBackend
) -> np.ndarray:
    """
    Coefficients beta = V * Sigma^+ * U^t * y.

    Only the first n columns of U contribute, so U^t * y is computed
    for those columns alone.
    """
    n = decomposition.reciprocal_singular_values.shape[0]
    U_n = decomposition.svd.U[:, :n]

    work = backend.mat_vec(U_n, values, transpose=True)
    work = work * decomposition.reciprocal_singular_values

    # V * work = (V^t)^t * work
    return backend.mat_vec(decomposition.svd.Vt, work, transpose=True)


__all__ = [
    "DesignDecomposition",
    "threshold_singular_values",
    "decompose_design_matrix",
    "solve_coefficients",
]
