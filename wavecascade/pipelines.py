"""Composite transforms built from the cascade engines.

The coefficient pipelines follow one pattern: a numeric 5/3 cascade, then the
inverse ordering cascade, which moves every coefficient next to the
coefficients describing the same image region. Block operations then act
locally on the image. The ordering and 5/3 cascades are undone afterwards.
"""

from __future__ import annotations

import logging
from typing import Callable

import numpy as np

from wavecascade.engine.cascade import Wavelet2D
from wavecascade.engine.types import InvalidArgumentError, ProgressCallback
from wavecascade.kernels import BIORTHOGONAL53, ORDERING, WaveletKernel, get_kernel


logger = logging.getLogger(__name__)


Stage = Callable[[ProgressCallback | None], None]


class _StagedProgress:
    """Maps per-stage percentages onto one overall percentage."""

    def __init__(self, callback: ProgressCallback, num_stages: int):
        self._callback = callback
        self._num_stages = num_stages
        self.stage = 0
        self.aborted = False

    def __call__(self, percent: float) -> bool:
        overall = (self.stage + percent / 100.0) / self._num_stages * 100.0
        if self._callback(overall):
            self.aborted = True
        return self.aborted


def _run_stages(stages: list[Stage], progress: ProgressCallback | None) -> bool:
    """Run stages in order; return False if the callback cancelled."""
    staged = _StagedProgress(progress, len(stages)) if progress is not None else None
    for index, stage in enumerate(stages):
        if staged is not None:
            staged.stage = index
        stage(staged)
        if staged is not None and staged.aborted:
            logger.info("Pipeline cancelled during stage %d of %d", index + 1, len(stages))
            return False
    return True


def _as_float_array(values: np.ndarray, ndim: int, name: str) -> np.ndarray:
    array = np.asarray(values)
    if array.ndim != ndim:
        raise InvalidArgumentError(f"{name} must be {ndim}-D, got {array.ndim} dimensions")
    if not np.issubdtype(array.dtype, np.floating):
        array = array.astype(np.float32)
    return array


def transform_1d(signal: np.ndarray, kernel: str | WaveletKernel = "bior53") -> np.ndarray:
    """Single-level 1-D transform of a signal.

    Uses the same line kernels as the 2-D engine, so every 5/3 low-pass
    value carries the factor two, including the trailing low-pass sample
    that has no high-pass partner. The result equals one row pass of the
    2-D cascade rather than a 1-D routine that leaves that sample unscaled.

    Args:
        signal: 1-D array
        kernel: Kernel name or WaveletKernel

    Returns:
        New array with the low-pass block followed by the high-pass block
    """
    signal = _as_float_array(signal, 1, "signal")
    kernel = get_kernel(kernel)
    coeffs = np.empty_like(signal)
    kernel.forward(signal, coeffs, signal.shape[0])
    return coeffs


def inverse_transform_1d(coeffs: np.ndarray, kernel: str | WaveletKernel = "bior53") -> np.ndarray:
    """Invert ``transform_1d``."""
    coeffs = _as_float_array(coeffs, 1, "coeffs")
    kernel = get_kernel(kernel)
    signal = np.empty_like(coeffs)
    kernel.inverse(coeffs, signal, coeffs.shape[0])
    return signal


def _local_engines(grid: np.ndarray) -> tuple[Wavelet2D, Wavelet2D]:
    height, width = grid.shape
    wavelet = Wavelet2D(BIORTHOGONAL53, width, height, enable_caching=True)
    order = Wavelet2D(ORDERING, width, height, enable_caching=True)
    return wavelet, order


def _local_coefficient_pipeline(
    grid: np.ndarray,
    block_stage: Callable[[Wavelet2D, ProgressCallback | None], None],
    progress: ProgressCallback | None,
) -> bool:
    if not isinstance(grid, np.ndarray) or grid.ndim != 2:
        raise InvalidArgumentError("grid must be a 2-D numpy array")
    wavelet, order = _local_engines(grid)
    stages = [
        lambda cb: wavelet.transform_isotropic(grid, cb),
        lambda cb: order.backtransform_isotropic(grid, cb),
        lambda cb: block_stage(order, cb),
        lambda cb: order.transform_isotropic(grid, cb),
        lambda cb: wavelet.backtransform_isotropic(grid, cb),
    ]
    return _run_stages(stages, progress)


def adaptive_deadzone(
    grid: np.ndarray,
    n: int = 7,
    grid_size: int = 8,
    progress: ProgressCallback | None = None,
) -> bool:
    """Keep only the ``n`` strongest local coefficients of every block.

    Low-contrast regions lose their fine detail while edges survive. Works
    in place.

    Args:
        grid: 2-D float array, both sides at least 3
        n: Coefficients kept per block
        grid_size: Block side length
        progress: Optional progress callback over all stages

    Returns:
        False if the progress callback cancelled the pipeline
    """
    return _local_coefficient_pipeline(
        grid,
        lambda order, cb: order.crop_coefficients(grid, n, grid_size, cb),
        progress,
    )


def sharpening_profile(position: float, count: int = 64) -> np.ndarray:
    """Scale factor per selection rank: ``1 + 2 / ((position - k)**2 + 1)``.

    Ranks near ``position`` are boosted up to a factor of three; ranks far
    from it stay close to one.
    """
    ranks = np.arange(count, dtype=np.float32)
    return 1.0 + 2.0 / ((position - ranks) ** 2 + 1.0)


def adaptive_sharpening(
    grid: np.ndarray,
    position: float = 5.0,
    grid_size: int = 8,
    progress: ProgressCallback | None = None,
) -> bool:
    """Boost the mid-strength local coefficients of every block in place.

    Args:
        grid: 2-D float array, both sides at least 3
        position: Selection rank that receives the strongest boost
        grid_size: Block side length
        progress: Optional progress callback over all stages

    Returns:
        False if the progress callback cancelled the pipeline
    """
    scale = sharpening_profile(position, grid_size * grid_size)
    return _local_coefficient_pipeline(
        grid,
        lambda order, cb: order.scale_coefficients(grid, scale, grid_size, cb),
        progress,
    )


def upscale(grid: np.ndarray, progress: ProgressCallback | None = None) -> np.ndarray:
    """Double the resolution of a grid through the wavelet domain.

    The grid's cascade coefficients are treated as the low-pass part of a
    cascade twice the size with empty high-pass bands.

    Args:
        grid: 2-D float array, both sides at least 3
        progress: Optional progress callback over both stages

    Returns:
        New array of shape ``(2 * height, 2 * width)``
    """
    grid = _as_float_array(grid, 2, "grid")
    height, width = grid.shape
    upscaled = np.zeros((2 * height, 2 * width), dtype=grid.dtype)
    upscaled[:height, :width] = grid

    small = Wavelet2D(BIORTHOGONAL53, width, height)
    large = Wavelet2D(BIORTHOGONAL53, 2 * width, 2 * height)
    stages = [
        lambda cb: small.transform_isotropic(upscaled, cb),
        lambda cb: large.backtransform_isotropic(upscaled, cb),
    ]
    if _run_stages(stages, progress):
        # The extra top level halves the low-pass gain along both axes.
        upscaled *= 4.0
    return upscaled
