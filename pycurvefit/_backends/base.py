"""
Abstract base classes for backends.

Defines the interface all linear algebra backends must implement.
"""

from abc import ABC, abstractmethod
import numpy as np
from dataclasses import dataclass


@dataclass(frozen=True)
class SingularValueDecomposition:
    """Full singular value decomposition A = U * diag(s) * Vt."""
    U: np.ndarray                # (m, m) orthogonal
    singular_values: np.ndarray  # (min(m, n),) descending
    Vt: np.ndarray               # (n, n) orthogonal


class LinearAlgebraBackend(ABC):
    """Abstract base class for all backends."""

    name: str
    precision: str

    @abstractmethod
    def svd(self, matrix: np.ndarray) -> SingularValueDecomposition:
        """
        Full singular value decomposition of a dense matrix.

        Backends compute internally using their native types, only
        converting at entry/exit.

        Parameters
        ----------
        matrix : ndarray, shape (m, n)
            Matrix to factor (usually a design matrix)

        Returns
        -------
        SingularValueDecomposition
            U (m, m), singular values in descending order, Vt (n, n);
            all numpy float64 arrays

        Raises
        ------
        DecompositionFailure
            If the matrix has non-finite entries or the SVD does not converge
        """
        pass

    @abstractmethod
    def mat_vec(
        self,
        matrix: np.ndarray,
        vector: np.ndarray,
        transpose: bool = False
    ) -> np.ndarray:
        """
        Matrix-vector product ``matrix @ vector`` or ``matrix.T @ vector``.
        """
        pass

    @abstractmethod
    def get_device_info(self) -> dict:
        """Get backend information."""
        pass

    def __repr__(self):
        return f"{type(self).__name__}(name={self.name!r})"


class CPUBackend(LinearAlgebraBackend):
    """CPU backend base class (always FP64)."""
    pass


class GPUBackendFP64(LinearAlgebraBackend):
    """GPU backend base class for FP64."""
    pass
