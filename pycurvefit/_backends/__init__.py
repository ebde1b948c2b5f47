"""
Backend selection and management.

Provides a unified linear algebra interface for CPU (NumPy/SciPy) and
NVIDIA GPU (PyTorch, FP64).
"""

from .base import LinearAlgebraBackend, SingularValueDecomposition
from .device_detector import (
    detect_gpu_capabilities,
    GPUCapabilities,
    PrecisionSupport,
)
from .cpu_fp64_backend import CPUBackendFP64

# Try importing PyTorch backend (NVIDIA GPU)
try:
    import torch  # noqa: F401
    from .gpu_fp64_backend import PyTorchBackendFP64
    PYTORCH_AVAILABLE = True
except ImportError:
    PYTORCH_AVAILABLE = False


def get_backend(backend='auto') -> LinearAlgebraBackend:
    """
    Get linear algebra backend.

    Parameters
    ----------
    backend : str or LinearAlgebraBackend
        Backend selection:
        - 'auto': PyTorch on full-rate FP64 GPUs, CPU otherwise
        - 'cpu': CPU with NumPy/SciPy (FP64, LAPACK)
        - 'gpu': NVIDIA GPU via PyTorch (FP64)
        - 'pytorch': PyTorch FP64 on whatever device torch offers
        An existing backend instance is returned unchanged.

    Returns
    -------
    LinearAlgebraBackend
        Backend instance

    Examples
    --------
    >>> # Auto-select best backend
    >>> backend = get_backend('auto')

    >>> # Force CPU for reproducible LAPACK numerics
    >>> backend = get_backend('cpu')
    """

    if isinstance(backend, LinearAlgebraBackend):
        return backend

    if backend == 'auto':
        caps = detect_gpu_capabilities()
        if caps.has_gpu and caps.recommended_gpu and PYTORCH_AVAILABLE:
            return PyTorchBackendFP64(device='cuda')
        return CPUBackendFP64()

    elif backend == 'cpu':
        return CPUBackendFP64()

    elif backend == 'gpu':
        caps = detect_gpu_capabilities()

        if not caps.has_gpu:
            raise ValueError(
                "No GPU detected.\n"
                "Options:\n"
                "  - Use backend='cpu'\n"
                "  - Install PyTorch with CUDA for NVIDIA"
            )
        if not PYTORCH_AVAILABLE:
            raise RuntimeError(
                "NVIDIA GPU detected but PyTorch unavailable.\n"
                "Install: pip install torch"
            )
        return PyTorchBackendFP64(device='cuda')

    elif backend == 'pytorch':
        if not PYTORCH_AVAILABLE:
            raise RuntimeError(
                "PyTorch backend unavailable.\n"
                "Install: pip install torch"
            )
        return PyTorchBackendFP64()

    else:
        raise ValueError(
            f"Unknown backend: '{backend}'\n"
            f"Valid options: 'auto', 'cpu', 'gpu', 'pytorch'"
        )


def list_available_backends() -> list:
    """List names of available backends."""
    backends = ['cpu']
    if PYTORCH_AVAILABLE:
        backends.append('pytorch')
    return backends


def print_backend_info():
    """Print detailed backend information (diagnostic)."""
    caps = detect_gpu_capabilities()

    print("PyCurveFit Backend Status")
    print("=" * 50)
    print(f"\nAvailable Backends:")
    print(f"  CPU (FP64):          ✓ - LAPACK SVD (gesdd/gesvd)")
    print(f"  PyTorch (FP64):      {'✓' if PYTORCH_AVAILABLE else '✗'} - torch.linalg.svd")

    print(f"\nHardware Detection:")
    if caps.has_gpu:
        print(f"  GPU Type: {caps.gpu_type}")
        print(f"  GPU Name: {caps.gpu_name}")
        print(f"  FP64 Support: {caps.fp64_support.value}")
    else:
        print(f"  No GPU detected")

    print(f"\nRecommended Backend:")
    try:
        backend = get_backend('auto')
        print(f"  {backend.name}")
    except Exception as e:
        print(f"  Error: {e}")


# Export main interface
__all__ = [
    'get_backend',
    'list_available_backends',
    'print_backend_info',
    'LinearAlgebraBackend',
    'SingularValueDecomposition',
    'CPUBackendFP64',
    'detect_gpu_capabilities',
    'GPUCapabilities',
    'PrecisionSupport',
    'PYTORCH_AVAILABLE',
]


if __name__ == "__main__":
    print_backend_info()
