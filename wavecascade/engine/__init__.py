"""Cascade transform engine, coefficient post-processing and progress protocol."""

from wavecascade.engine.cascade import (
    Wavelet2D,
    biorthogonal53_wavelet_2d,
    haar_wavelet_2d,
    order_wavelet_2d,
)
from wavecascade.engine.progress import ProgressTracker
from wavecascade.engine.types import (
    InvalidArgumentError,
    ProgressCallback,
    TransformDimensions,
    cascade_levels,
    cascade_unit_count,
)

__all__ = [
    'Wavelet2D',
    'order_wavelet_2d',
    'biorthogonal53_wavelet_2d',
    'haar_wavelet_2d',
    'ProgressTracker',
    'ProgressCallback',
    'InvalidArgumentError',
    'TransformDimensions',
    'cascade_levels',
    'cascade_unit_count',
]
