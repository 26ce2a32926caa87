"""Wavelet kernel definitions and lookup."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np

from wavecascade.kernels.lines import (
    bior53_forward,
    bior53_inverse,
    haar_forward,
    haar_inverse,
    order_forward,
    order_inverse,
)


LineFn = Callable[[np.ndarray, np.ndarray, int], None]


@dataclass(frozen=True)
class WaveletKernel:
    """Immutable description of one 1-D kernel family.

    Args:
        name: Registry name of the kernel
        allowed_min_size: Shortest line length the kernel can transform.
            Shorter lines are copied unchanged.
        forward: Forward line function ``fn(src, dst, length)``
        inverse: Inverse line function ``fn(src, dst, length)``
    """
    name: str
    allowed_min_size: int
    forward: LineFn
    inverse: LineFn

    def __post_init__(self) -> None:
        if self.allowed_min_size < 1:
            raise ValueError(
                f"allowed_min_size ({self.allowed_min_size}) cannot be less than one"
            )


ORDERING = WaveletKernel("ordering", 2, order_forward, order_inverse)
BIORTHOGONAL53 = WaveletKernel("bior53", 3, bior53_forward, bior53_inverse)
HAAR = WaveletKernel("haar", 2, haar_forward, haar_inverse)


KERNELS = {
    'ordering': ORDERING,
    'bior53': BIORTHOGONAL53,
    'haar': HAAR,
}


def get_kernel(kernel: str | WaveletKernel) -> WaveletKernel:
    """Resolve a kernel name (or pass a kernel through).

    Args:
        kernel: Kernel name ('ordering', 'bior53', 'haar') or a WaveletKernel

    Returns:
        The matching WaveletKernel

    Raises:
        ValueError: If the kernel name is not registered
    """
    if isinstance(kernel, WaveletKernel):
        return kernel
    if kernel not in KERNELS:
        raise ValueError(
            f"Kernel '{kernel}' not supported. "
            f"Available: {list(KERNELS.keys())}"
        )
    return KERNELS[kernel]
