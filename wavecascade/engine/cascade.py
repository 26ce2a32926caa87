"""Two-dimensional cascade wavelet transform engine.

The engine repeatedly applies a 1-D kernel to the rows and then the columns
of a shrinking low-pass rectangle. Each pass writes low-pass results into the
first ``ceil(n / 2)`` positions of a line, so the next level works on the
top-left ``ceil(w / 2) x ceil(h / 2)`` corner of the previous one.

Example:
    >>> import numpy as np
    >>> from wavecascade import biorthogonal53_wavelet_2d
    >>>
    >>> grid = np.random.rand(39, 57).astype(np.float32)
    >>> original = grid.copy()
    >>> wavelet = biorthogonal53_wavelet_2d(width=57, height=39)
    >>> wavelet.transform_isotropic(grid)
    >>> wavelet.backtransform_isotropic(grid)
    >>> bool(np.allclose(grid, original, atol=1e-3))
    True
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from contextlib import nullcontext
from numbers import Integral
from typing import TYPE_CHECKING, Any, Sequence

import numpy as np

from wavecascade.engine import coefficients
from wavecascade.engine.parallel import fan_out
from wavecascade.engine.progress import ProgressTracker, create_tracker, report
from wavecascade.engine.types import (
    InvalidArgumentError,
    ProgressCallback,
    TransformDimensions,
    cascade_levels,
    cascade_unit_count,
    check_grid,
    num_blocks,
)
from wavecascade.kernels import BIORTHOGONAL53, HAAR, ORDERING, WaveletKernel, get_kernel
from wavecascade.kernels.registry import LineFn

if TYPE_CHECKING:
    from wavecascade.config import TransformConfig


logger = logging.getLogger(__name__)


class Wavelet2D:
    """Cascade wavelet transform over a fixed ``height x width`` region.

    All public operations work in place on a caller-owned numpy array whose
    shape is at least ``(height, width)``. Operations on one instance are
    serialised by an instance lock; internally rows, columns and blocks are
    fanned out to a thread pool when ``enable_parallel`` is set.

    Args:
        kernel: WaveletKernel or registered kernel name
        width: Width of the transform (grid axis 1)
        height: Height of the transform (grid axis 0)
        min_size: Smallest side length that is still transformed
            (defaults to the kernel's ``allowed_min_size``)
        enable_parallel: Fan work out to a thread pool
        enable_caching: Keep the scratch buffer between calls
        max_workers: Thread pool size (None = executor default)

    Raises:
        InvalidArgumentError: If the dimensions violate
            ``allowed_min_size <= min_size <= min(width, height)``
        ValueError: If the kernel name is unknown
    """

    def __init__(
        self,
        kernel: str | WaveletKernel,
        width: int,
        height: int,
        min_size: int | None = None,
        *,
        enable_parallel: bool = True,
        enable_caching: bool = False,
        max_workers: int | None = None,
    ):
        self._kernel = get_kernel(kernel)
        if min_size is None:
            min_size = self._kernel.allowed_min_size
        self._dims = TransformDimensions(
            width=width,
            height=height,
            min_size=min_size,
            allowed_min_size=self._kernel.allowed_min_size,
        )
        self._enable_parallel = enable_parallel
        self._enable_caching = enable_caching
        self._max_workers = max_workers
        self._cached: np.ndarray | None = None
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: TransformConfig) -> Wavelet2D:
        """Build an engine from a serialisable configuration."""
        return cls(
            config.kernel,
            config.width,
            config.height,
            config.min_size,
            enable_parallel=config.enable_parallel,
            enable_caching=config.enable_caching,
            max_workers=config.max_workers,
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(kernel={self._kernel.name!r}, "
            f"width={self.width}, height={self.height}, min_size={self.min_size})"
        )

    # Properties

    @property
    def kernel(self) -> WaveletKernel:
        return self._kernel

    @property
    def dimensions(self) -> TransformDimensions:
        return self._dims

    @property
    def width(self) -> int:
        return self._dims.width

    @property
    def height(self) -> int:
        return self._dims.height

    @property
    def min_size(self) -> int:
        return self._dims.min_size

    @property
    def allowed_min_size(self) -> int:
        return self._dims.allowed_min_size

    @property
    def enable_parallel(self) -> bool:
        """Whether rows, columns and blocks run on a thread pool (default True)."""
        return self._enable_parallel

    @enable_parallel.setter
    def enable_parallel(self, value: bool) -> None:
        self._enable_parallel = bool(value)

    @property
    def enable_caching(self) -> bool:
        """Whether the scratch buffer is kept between calls (default False)."""
        return self._enable_caching

    @enable_caching.setter
    def enable_caching(self, value: bool) -> None:
        self._enable_caching = bool(value)
        if not value:
            self.flush_cache()

    @property
    def is_cached(self) -> bool:
        """True while a scratch buffer is held."""
        return self._cached is not None

    def flush_cache(self) -> None:
        """Release the cached scratch buffer."""
        with self._lock:
            self._cached = None

    # Internal helpers (called with the lock held)

    def _scratch(self, grid: np.ndarray) -> np.ndarray:
        tmp = self._cached
        if tmp is None or tmp.dtype != grid.dtype:
            tmp = np.zeros(self._dims.shape, dtype=grid.dtype)
            if self._enable_caching:
                self._cached = tmp
        return tmp

    def _pool(self) -> Any:
        if self._enable_parallel:
            return ThreadPoolExecutor(
                max_workers=self._max_workers,
                thread_name_prefix="wavecascade",
            )
        return nullcontext()

    @staticmethod
    def _rows(
        line_fn: LineFn,
        src: np.ndarray,
        dst: np.ndarray,
        w: int,
        h: int,
        tracker: ProgressTracker | None,
        pool: Executor | None,
    ) -> None:
        def process(y: int) -> None:
            line_fn(src[y, :w], dst[y, :w], w)

        fan_out(process, h, tracker, w, pool)

    @staticmethod
    def _cols(
        line_fn: LineFn,
        src: np.ndarray,
        dst: np.ndarray,
        w: int,
        h: int,
        tracker: ProgressTracker | None,
        pool: Executor | None,
    ) -> None:
        def process(x: int) -> None:
            line_fn(src[:h, x], dst[:h, x], h)

        fan_out(process, w, tracker, h, pool)

    def _check_selection(
        self,
        n: int,
        major_scale_factors: Sequence[float] | None,
        grid_size: int,
    ) -> None:
        if not isinstance(grid_size, Integral) or grid_size < 1:
            raise InvalidArgumentError(f"grid_size ({grid_size}) cannot be smaller than 1")
        if not isinstance(n, Integral):
            raise InvalidArgumentError(f"n must be an integer, got {type(n).__name__}")
        if n < 0:
            raise InvalidArgumentError(f"n ({n}) cannot be negative")
        if n > grid_size * grid_size:
            raise InvalidArgumentError(
                f"n ({n}) cannot be greater than {grid_size}*{grid_size}"
            )
        if major_scale_factors is not None and len(major_scale_factors) != n:
            raise InvalidArgumentError(
                "major_scale_factors must be None or the length must be "
                f"of dimension n ({n})"
            )

    # Cascade transform

    def transform_isotropic(
        self,
        grid: np.ndarray,
        progress: ProgressCallback | None = None,
    ) -> None:
        """Forward cascade transform of ``grid`` in place.

        Args:
            grid: Float array of shape at least ``(height, width)``
            progress: Optional callback receiving a percentage and
                returning True to abort

        Raises:
            InvalidArgumentError: If the grid is missing or too small
        """
        check_grid(grid, self._dims)
        levels = cascade_levels(self.width, self.height, self.min_size)
        with self._lock:
            tmp = self._scratch(grid)
            tracker = create_tracker(progress, cascade_unit_count(levels))
            with self._pool() as pool:
                for w, h in levels:
                    if report(tracker, 0):
                        break
                    logger.debug("Forward %s level %dx%d", self._kernel.name, w, h)
                    self._rows(self._kernel.forward, grid, tmp, w, h, tracker, pool)
                    self._cols(self._kernel.forward, tmp, grid, w, h, tracker, pool)

    def backtransform_isotropic(
        self,
        grid: np.ndarray,
        progress: ProgressCallback | None = None,
    ) -> None:
        """Inverse cascade transform of ``grid`` in place.

        Replays the forward level list from the smallest level to the
        largest, undoing the column pass before the row pass.

        Args:
            grid: Float array of shape at least ``(height, width)``
            progress: Optional callback receiving a percentage and
                returning True to abort

        Raises:
            InvalidArgumentError: If the grid is missing or too small
        """
        check_grid(grid, self._dims)
        levels = cascade_levels(self.width, self.height, self.min_size)
        with self._lock:
            tmp = self._scratch(grid)
            tracker = create_tracker(progress, cascade_unit_count(levels))
            with self._pool() as pool:
                for w, h in reversed(levels):
                    if report(tracker, 0):
                        break
                    logger.debug("Inverse %s level %dx%d", self._kernel.name, w, h)
                    self._cols(self._kernel.inverse, grid, tmp, w, h, tracker, pool)
                    self._rows(self._kernel.inverse, tmp, grid, w, h, tracker, pool)

    # Coefficient post-processing

    def modify_coefficients(
        self,
        grid: np.ndarray,
        n: int,
        major_scale_factors: Sequence[float] | None,
        minor_scale_factor: float,
        grid_size: int,
        progress: ProgressCallback | None = None,
    ) -> None:
        """Scale the ``n`` largest coefficients of every block and all others.

        Args:
            grid: Float array of shape at least ``(height, width)``
            n: Number of major coefficients per block (0 <= n <= grid_size**2)
            major_scale_factors: ``n`` factors by selection rank, or None to
                leave the major coefficients unchanged
            minor_scale_factor: Factor for every other coefficient
            grid_size: Side length of the blocks
            progress: Optional progress callback (one unit per block)

        Raises:
            InvalidArgumentError: On a bad grid, ``n``, ``grid_size`` or
                factor count
        """
        check_grid(grid, self._dims)
        self._check_selection(n, major_scale_factors, grid_size)
        blocks_x, blocks_y = num_blocks(self.width, self.height, grid_size)
        with self._lock:
            tracker = create_tracker(progress, blocks_x * blocks_y)
            with self._pool() as pool:
                coefficients.modify_coefficients(
                    grid,
                    self._dims,
                    n,
                    major_scale_factors,
                    minor_scale_factor,
                    grid_size,
                    tracker,
                    pool,
                )

    def crop_coefficients(
        self,
        grid: np.ndarray,
        n: int,
        grid_size: int,
        progress: ProgressCallback | None = None,
    ) -> None:
        """Keep the ``n`` largest coefficients of every block, zero the rest."""
        self.modify_coefficients(grid, n, None, 0.0, grid_size, progress)

    def scale_coefficients(
        self,
        grid: np.ndarray,
        scale_factors: Sequence[float],
        grid_size: int,
        progress: ProgressCallback | None = None,
    ) -> None:
        """Scale the ``len(scale_factors)`` largest coefficients of every block.

        Coefficients outside the selection are left unchanged.
        """
        if scale_factors is None:
            raise InvalidArgumentError("scale_factors cannot be None")
        self.modify_coefficients(
            grid, len(scale_factors), scale_factors, 1.0, grid_size, progress
        )

    def apply_deadzone(
        self,
        grid: np.ndarray,
        min_absolute_value: float,
        progress: ProgressCallback | None = None,
    ) -> None:
        """Set every coefficient with ``|v| < min_absolute_value`` to zero.

        Args:
            grid: Float array of shape at least ``(height, width)``
            min_absolute_value: Deadzone threshold
            progress: Optional progress callback (one unit per row)
        """
        check_grid(grid, self._dims)
        with self._lock:
            tracker = create_tracker(progress, self.height)
            with self._pool() as pool:
                coefficients.apply_deadzone(
                    grid, self._dims, min_absolute_value, tracker, pool
                )

    def get_coefficients_range(
        self,
        grid: np.ndarray,
        progress: ProgressCallback | None = None,
    ) -> tuple[float, float]:
        """Return ``(min, max)`` of the coefficient magnitudes.

        Args:
            grid: Float array of shape at least ``(height, width)``
            progress: Optional progress callback (one unit per row)

        Returns:
            ``(min, max)`` over the region. A cancelled call returns the range
            of the rows finished before the abort, or ``(inf, -inf)`` if no
            row finished.
        """
        check_grid(grid, self._dims)
        with self._lock:
            tracker = create_tracker(progress, self.height)
            with self._pool() as pool:
                return coefficients.coefficients_range(grid, self._dims, tracker, pool)


def order_wavelet_2d(width: int, height: int, min_size: int | None = None) -> Wavelet2D:
    """Cascade ordering (coefficient layout permutation) engine."""
    return Wavelet2D(ORDERING, width, height, min_size)


def biorthogonal53_wavelet_2d(width: int, height: int, min_size: int | None = None) -> Wavelet2D:
    """Biorthogonal 5/3 cascade wavelet engine."""
    return Wavelet2D(BIORTHOGONAL53, width, height, min_size)


def haar_wavelet_2d(width: int, height: int, min_size: int | None = None) -> Wavelet2D:
    """Haar cascade wavelet engine."""
    return Wavelet2D(HAAR, width, height, min_size)
