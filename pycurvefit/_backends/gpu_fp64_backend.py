"""
GPU backend using PyTorch with FP64 precision.

For data center GPUs: A100, H100, V100.
"""

import numpy as np
import warnings
from typing import Optional

from .base import GPUBackendFP64, SingularValueDecomposition
from ..exceptions import DecompositionFailure


class PyTorchBackendFP64(GPUBackendFP64):
    """
    PyTorch GPU backend with FP64 precision.

    Curve fitting needs double precision: singular value thresholds
    default to machine epsilon of float64, so no FP32 variant exists.
    """

    def __init__(self, device: Optional[str] = None):
        """Initialize PyTorch FP64 backend."""
        self.name = "pytorch_fp64"
        self.precision = "fp64"

        try:
            import torch
            self.torch = torch
        except ImportError:
            raise ImportError(
                "PyTorch required for GPU backend. "
                "Install: pip install torch"
            )

        # Device selection (no Metal for FP64)
        if device == 'mps':
            raise RuntimeError(
                "FP64 not supported on Apple Metal. "
                "Use the CPU backend."
            )

        if device is None:
            if torch.cuda.is_available():
                device = 'cuda'
            else:
                warnings.warn("No CUDA GPU available, using CPU")
                device = 'cpu'

        self.device = torch.device(device)

        # Warn if using FP64 on gimped hardware
        if self.device.type == 'cuda':
            from .device_detector import detect_gpu_capabilities, PrecisionSupport
            caps = detect_gpu_capabilities()
            if caps.fp64_support == PrecisionSupport.GIMPED_FP64:
                warnings.warn(
                    f"Using FP64 on {caps.gpu_name} with gimped FP64 support. "
                    f"This will be ~{int(1/caps.fp64_throughput_ratio)}x slower than FP32.",
                    UserWarning
                )

    def _to_device(self, a: np.ndarray):
        return self.torch.from_numpy(np.array(a, dtype=np.float64, copy=True)).to(self.device)

    def svd(self, matrix: np.ndarray) -> SingularValueDecomposition:
        """Full SVD on GPU with FP64 precision."""
        torch = self.torch
        A = np.asarray(matrix, dtype=np.float64)
        if A.ndim != 2:
            raise ValueError("matrix must be 2-dimensional")
        if not np.all(np.isfinite(A)):
            raise DecompositionFailure(
                "Design matrix contains NaN or Inf - cannot compute SVD"
            )

        A_gpu = self._to_device(A)
        try:
            U, s, Vt = torch.linalg.svd(A_gpu, full_matrices=True)
        except RuntimeError as e:
            # torch.linalg.LinAlgError is a RuntimeError
            raise DecompositionFailure(f"SVD did not converge: {e}") from e

        # Convert to numpy
        return SingularValueDecomposition(
            U=U.cpu().numpy(),
            singular_values=s.cpu().numpy(),
            Vt=Vt.cpu().numpy()
        )

    def mat_vec(
        self,
        matrix: np.ndarray,
        vector: np.ndarray,
        transpose: bool = False
    ) -> np.ndarray:
        """Matrix-vector product on GPU."""
        A_gpu = self._to_device(matrix)
        x_gpu = self._to_device(vector)
        if transpose:
            A_gpu = A_gpu.T
        return (A_gpu @ x_gpu).cpu().numpy()

    def get_device_info(self) -> dict:
        """Get backend information."""
        return {
            'backend': 'gpu',
            'precision': 'fp64',
            'device': str(self.device),
            'library': f'PyTorch {self.torch.__version__}',
        }
