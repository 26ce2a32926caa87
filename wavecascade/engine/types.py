"""Engine types and argument validation (pure data structures)."""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Integral
from typing import Any, Callable

import numpy as np


ProgressCallback = Callable[[float], bool]


class InvalidArgumentError(ValueError):
    """Raised for malformed arguments before any work is done."""


@dataclass(frozen=True)
class TransformDimensions:
    """Immutable extent of a 2-D cascade transform.

    Args:
        width: Width of the transformed region (grid axis 1)
        height: Height of the transformed region (grid axis 0)
        min_size: Recursion stops once a dimension drops below this size
        allowed_min_size: Kernel limit; lines shorter than this are copied
    """
    width: int
    height: int
    min_size: int
    allowed_min_size: int

    def __post_init__(self) -> None:
        for name in ("width", "height", "min_size", "allowed_min_size"):
            value = getattr(self, name)
            if not isinstance(value, Integral) or isinstance(value, bool):
                raise InvalidArgumentError(
                    f"{name} must be an integer, got {type(value).__name__}"
                )
        if self.allowed_min_size < 1:
            raise InvalidArgumentError("allowed_min_size cannot be less than one")
        if self.min_size < self.allowed_min_size:
            raise InvalidArgumentError(
                f"min_size cannot be smaller than {self.allowed_min_size}"
            )
        if self.width < self.min_size or self.height < self.min_size:
            raise InvalidArgumentError(
                f"width and height must be greater or equal to {self.min_size}"
            )

    @property
    def shape(self) -> tuple[int, int]:
        """Numpy shape ``(height, width)`` of the transformed region."""
        return self.height, self.width


def cascade_levels(width: int, height: int, min_size: int) -> list[tuple[int, int]]:
    """List the ``(w, h)`` extents of every cascade level, largest first.

    Level ``k`` covers ``ceil(width / 2**k) x ceil(height / 2**k)``; the
    ceiling keeps the extra low-pass sample of odd lengths. Levels stop at
    the first one where either side drops below ``min_size``.
    """
    # Smallest L with 2**L >= max(width, height); level L is 1 x 1.
    num_levels = (max(width, height) - 1).bit_length()
    levels = []
    for k in range(num_levels + 1):
        w = -(-width >> k)
        h = -(-height >> k)
        if w < min_size or h < min_size:
            break
        levels.append((w, h))
    return levels


def cascade_unit_count(levels: list[tuple[int, int]]) -> int:
    """Progress units of a full cascade: one per sample per row and column pass."""
    return sum(2 * w * h for w, h in levels)


def num_blocks(width: int, height: int, grid_size: int) -> tuple[int, int]:
    """Number of block columns and block rows covering the region."""
    return -(-width // grid_size), -(-height // grid_size)


def check_grid(grid: Any, dims: TransformDimensions, name: str = "grid") -> None:
    """Validate that ``grid`` is a floating 2-D array covering ``dims``.

    Raises:
        InvalidArgumentError: If the grid is missing, not a 2-D floating
            numpy array, or smaller than the configured extent
    """
    if grid is None:
        raise InvalidArgumentError(f"{name} cannot be None")
    if not isinstance(grid, np.ndarray):
        raise InvalidArgumentError(
            f"{name} must be a numpy array, got {type(grid).__name__}"
        )
    if grid.ndim != 2:
        raise InvalidArgumentError(f"{name} must be 2-D, got {grid.ndim} dimensions")
    if not np.issubdtype(grid.dtype, np.floating):
        raise InvalidArgumentError(f"{name} must have a floating dtype, got {grid.dtype}")
    if grid.shape[0] < dims.height:
        raise InvalidArgumentError(
            f"first dimension of {name} cannot be smaller than {dims.height}"
        )
    if grid.shape[1] < dims.width:
        raise InvalidArgumentError(
            f"second dimension of {name} cannot be smaller than {dims.width}"
        )
