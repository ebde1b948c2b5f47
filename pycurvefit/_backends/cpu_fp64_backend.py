"""
CPU backend using NumPy + SciPy.

This is the reference implementation; LAPACK does the heavy lifting.
"""

import numpy as np
from scipy.linalg import svd, LinAlgError

from .base import CPUBackend, SingularValueDecomposition
from ..exceptions import DecompositionFailure


class CPUBackendFP64(CPUBackend):
    """
    CPU backend using NumPy + SciPy.

    Uses the divide-and-conquer SVD driver (``gesdd``) and retries with the
    QR-iteration driver (``gesvd``) when it fails to converge.
    Always uses FP64 precision.
    """

    def __init__(self):
        self.name = "cpu_fp64"
        self.precision = "fp64"

    def svd(self, matrix: np.ndarray) -> SingularValueDecomposition:
        """Full SVD via LAPACK."""
        A = np.asarray(matrix, dtype=np.float64)
        if A.ndim != 2:
            raise ValueError("matrix must be 2-dimensional")
        if not np.all(np.isfinite(A)):
            raise DecompositionFailure(
                "Design matrix contains NaN or Inf - cannot compute SVD"
            )

        try:
            U, s, Vt = svd(A, full_matrices=True, lapack_driver='gesdd')
        except LinAlgError:
            try:
                U, s, Vt = svd(A, full_matrices=True, lapack_driver='gesvd')
            except LinAlgError as e:
                raise DecompositionFailure(f"SVD did not converge: {e}") from e

        return SingularValueDecomposition(U=U, singular_values=s, Vt=Vt)

    def mat_vec(
        self,
        matrix: np.ndarray,
        vector: np.ndarray,
        transpose: bool = False
    ) -> np.ndarray:
        """Matrix-vector product in NumPy (BLAS dgemv)."""
        A = np.asarray(matrix, dtype=np.float64)
        x = np.asarray(vector, dtype=np.float64)
        return A.T @ x if transpose else A @ x

    def get_device_info(self) -> dict:
        """Get backend information."""
        import scipy
        return {
            'backend': 'cpu',
            'precision': 'fp64',
            'library': f'NumPy {np.__version__}, SciPy {scipy.__version__}',
        }
