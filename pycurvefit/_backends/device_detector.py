"""
Hardware capability detection for backend selection.

Detects a CUDA GPU and classifies its FP64 throughput. Apple Metal is not
considered: it has no FP64 support.
"""

import warnings
from dataclasses import dataclass
from enum import Enum


class PrecisionSupport(Enum):
    """FP64 support level for hardware."""
    NO_GPU = "no_gpu"            # No CUDA GPU available
    GIMPED_FP64 = "gimped_fp64"  # FP64 exists but slow (consumer NVIDIA)
    FULL_FP64 = "full_fp64"      # Full-speed FP64 (A100, H100)


@dataclass
class GPUCapabilities:
    """
    GPU capability information.

    Attributes
    ----------
    has_gpu : bool
        Whether a CUDA GPU is available
    gpu_name : str
        Human-readable GPU name
    gpu_type : str
        'nvidia' or 'none'
    fp64_support : PrecisionSupport
        Level of FP64 support
    fp64_throughput_ratio : float
        Ratio of FP64 to FP32 throughput
    """
    has_gpu: bool
    gpu_name: str
    gpu_type: str
    fp64_support: PrecisionSupport
    fp64_throughput_ratio: float

    @property
    def recommended_gpu(self) -> bool:
        """Only full-rate FP64 GPUs beat LAPACK on small SVDs."""
        return self.fp64_support == PrecisionSupport.FULL_FP64


# Data center GPUs with full FP64
FULL_FP64_MODELS = ('A100', 'A800', 'H100', 'H800', 'H200', 'B200', 'V100', 'P100')

# Consumer series with their FP64/FP32 ratio
GIMPED_FP64_SERIES = (
    ('RTX 50', 1/64),
    ('RTX 40', 1/64),
    ('RTX 30', 1/64),
    ('RTX 20', 1/32),
    ('GTX', 1/32),
)


def detect_gpu_capabilities() -> GPUCapabilities:
    """
    Detect CUDA hardware and FP64 capabilities.

    Returns
    -------
    GPUCapabilities
        Detected hardware capabilities
    """
    try:
        import torch
    except ImportError:
        torch = None

    if torch is not None and torch.cuda.is_available():
        gpu_name = torch.cuda.get_device_name(0)
        support, ratio = classify_nvidia_gpu(gpu_name)
        return GPUCapabilities(
            has_gpu=True,
            gpu_name=gpu_name,
            gpu_type="nvidia",
            fp64_support=support,
            fp64_throughput_ratio=ratio,
        )

    return GPUCapabilities(
        has_gpu=False,
        gpu_name="CPU only",
        gpu_type="none",
        fp64_support=PrecisionSupport.NO_GPU,
        fp64_throughput_ratio=1.0,
    )


def classify_nvidia_gpu(gpu_name: str) -> tuple[PrecisionSupport, float]:
    """
    Classify NVIDIA GPU FP64 capabilities.

    Parameters
    ----------
    gpu_name : str
        GPU name from torch.cuda.get_device_name()

    Returns
    -------
    (support_level, throughput_ratio)
    """
    gpu_upper = gpu_name.upper()

    for model in FULL_FP64_MODELS:
        if model in gpu_upper:
            return PrecisionSupport.FULL_FP64, 0.5

    for series, ratio in GIMPED_FP64_SERIES:
        if series in gpu_upper:
            return PrecisionSupport.GIMPED_FP64, ratio

    # Unknown - assume gimped
    warnings.warn(
        f"Unknown NVIDIA GPU '{gpu_name}'. Assuming gimped FP64."
    )
    return PrecisionSupport.GIMPED_FP64, 1/32
