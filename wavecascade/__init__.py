"""wavecascade: cascade wavelet transforms for 2-D float grids.

Public API exports for the transform engine, kernels, coefficient
processing, configuration and progress helpers.
"""

# Kernels
from wavecascade.kernels import (
    WaveletKernel,
    get_kernel,
    KERNELS,
    ORDERING,
    BIORTHOGONAL53,
    HAAR,
)

# Engine
from wavecascade.engine import (
    Wavelet2D,
    order_wavelet_2d,
    biorthogonal53_wavelet_2d,
    haar_wavelet_2d,
    ProgressTracker,
    ProgressCallback,
    InvalidArgumentError,
    TransformDimensions,
    cascade_levels,
)

# Configuration
from wavecascade.config import (
    TransformConfig,
    config_hash,
    save_config,
    load_config,
)

# Progress callbacks
from wavecascade.callbacks import (
    TqdmProgress,
    deadline_progress,
    chain_progress,
    collect_progress,
)

# Pipelines
from wavecascade.pipelines import (
    transform_1d,
    inverse_transform_1d,
    adaptive_deadzone,
    adaptive_sharpening,
    sharpening_profile,
    upscale,
)

__version__ = "0.1.0"

__all__ = [
    # Kernels
    "WaveletKernel",
    "get_kernel",
    "KERNELS",
    "ORDERING",
    "BIORTHOGONAL53",
    "HAAR",

    # Engine
    "Wavelet2D",
    "order_wavelet_2d",
    "biorthogonal53_wavelet_2d",
    "haar_wavelet_2d",
    "ProgressTracker",
    "ProgressCallback",
    "InvalidArgumentError",
    "TransformDimensions",
    "cascade_levels",

    # Configuration
    "TransformConfig",
    "config_hash",
    "save_config",
    "load_config",

    # Progress callbacks
    "TqdmProgress",
    "deadline_progress",
    "chain_progress",
    "collect_progress",

    # Pipelines
    "transform_1d",
    "inverse_transform_1d",
    "adaptive_deadzone",
    "adaptive_sharpening",
    "sharpening_profile",
    "upscale",
]
