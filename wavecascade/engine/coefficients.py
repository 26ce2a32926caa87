"""Coefficient post-processing on a transformed grid.

These functions are transform-agnostic: they see a float grid and operate on
its ``dims.height x dims.width`` region. They do not validate arguments or
lock anything; ``Wavelet2D`` does both before calling them.
"""

from __future__ import annotations

import threading
from concurrent.futures import Executor
from typing import Sequence

import numpy as np

from wavecascade.engine.parallel import fan_out
from wavecascade.engine.progress import ProgressTracker
from wavecascade.engine.types import TransformDimensions, num_blocks


def modify_block(
    block: np.ndarray,
    n: int,
    major_scale_factors: Sequence[float] | None,
    minor_scale_factor: float,
) -> None:
    """Scale the ``n`` largest-magnitude cells of one block in place.

    Selection is a repeated linear max-scan in raster order. A cell wins a
    round if its magnitude is greater than or equal to the current best, so
    among equal magnitudes the later cell is selected first. Selected cells
    drop out of the following rounds. The cell selected in round ``k`` is
    multiplied by ``major_scale_factors[k]`` (if given); all other cells are
    multiplied by ``minor_scale_factor``.
    """
    magnitudes = np.abs(block).ravel().astype(np.float64)
    keep = np.zeros(magnitudes.size, dtype=bool)
    block_width = block.shape[1]

    for k in range(min(n, magnitudes.size)):
        # argmax returns the first maximum; scanning reversed picks the last.
        index = magnitudes.size - 1 - int(np.argmax(magnitudes[::-1]))
        keep[index] = True
        magnitudes[index] = -1.0
        if major_scale_factors is not None:
            block[index // block_width, index % block_width] *= major_scale_factors[k]

    minors = ~keep.reshape(block.shape)
    block[minors] *= minor_scale_factor


def modify_coefficients(
    grid: np.ndarray,
    dims: TransformDimensions,
    n: int,
    major_scale_factors: Sequence[float] | None,
    minor_scale_factor: float,
    grid_size: int,
    tracker: ProgressTracker | None = None,
    pool: Executor | None = None,
) -> None:
    """Apply ``modify_block`` to every ``grid_size`` tile of the region.

    Tiles in the last block row and column are truncated at the region
    boundary. One progress unit per tile.
    """
    blocks_x, blocks_y = num_blocks(dims.width, dims.height, grid_size)

    def process(index: int) -> None:
        start_x = (index % blocks_x) * grid_size
        start_y = (index // blocks_x) * grid_size
        end_x = min(start_x + grid_size, dims.width)
        end_y = min(start_y + grid_size, dims.height)
        modify_block(
            grid[start_y:end_y, start_x:end_x],
            n,
            major_scale_factors,
            minor_scale_factor,
        )

    fan_out(process, blocks_x * blocks_y, tracker, 1, pool)


def apply_deadzone(
    grid: np.ndarray,
    dims: TransformDimensions,
    min_absolute_value: float,
    tracker: ProgressTracker | None = None,
    pool: Executor | None = None,
) -> None:
    """Zero every sample whose magnitude is strictly below the threshold."""

    def process(y: int) -> None:
        row = grid[y, :dims.width]
        row[np.abs(row) < min_absolute_value] = 0.0

    fan_out(process, dims.height, tracker, 1, pool)


def coefficients_range(
    grid: np.ndarray,
    dims: TransformDimensions,
    tracker: ProgressTracker | None = None,
    pool: Executor | None = None,
) -> tuple[float, float]:
    """Minimum and maximum magnitude over the region.

    Each row computes a local range; the results are merged under one lock.
    If the tracker aborts, only the rows finished before the abort count;
    with no finished row the result is ``(inf, -inf)``.
    """
    bounds = [float('inf'), float('-inf')]
    sync = threading.Lock()

    def process(y: int) -> None:
        magnitudes = np.abs(grid[y, :dims.width])
        row_min = float(magnitudes.min())
        row_max = float(magnitudes.max())
        with sync:
            if row_min < bounds[0]:
                bounds[0] = row_min
            if row_max > bounds[1]:
                bounds[1] = row_max

    fan_out(process, dims.height, tracker, 1, pool)
    return bounds[0], bounds[1]
