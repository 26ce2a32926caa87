"""One-dimensional transform kernels (pure numpy line operations).

Every function has the signature ``fn(src, dst, length)`` and works on 1-D
array views: a row ``grid[y, :]`` or a column ``grid[:, x]``. Results are
written into ``dst[:length]``; ``src`` is never modified. ``src`` and ``dst``
must not overlap.

Each forward pass separates the line into a low-pass block in the first
``ceil(length / 2)`` slots followed by the high-pass block. For odd lengths
the extra sample always belongs to the low-pass block.
"""

from __future__ import annotations

import numpy as np


SCALE = 2.0
SCALE_INV = 0.5
MEAN = 0.5
SMOOTH = 0.25


def copy_line(src: np.ndarray, dst: np.ndarray, length: int) -> None:
    """Identity pass used for lines shorter than a kernel's minimum."""
    dst[:length] = src[:length]


def _shifted(values: np.ndarray) -> np.ndarray:
    """Return ``values`` shifted right by one with a leading zero."""
    shifted = np.empty_like(values)
    shifted[0] = 0.0
    shifted[1:] = values[:-1]
    return shifted


# Ordering (permutation only)

def order_forward(src: np.ndarray, dst: np.ndarray, length: int) -> None:
    """Move even samples to the LF half and odd samples to the HF half."""
    if length < 2:
        copy_line(src, dst, length)
        return
    num_lf = (length + 1) >> 1
    dst[:num_lf] = src[0:length:2]
    dst[num_lf:length] = src[1:length:2]


def order_inverse(src: np.ndarray, dst: np.ndarray, length: int) -> None:
    """Interleave the LF and HF halves back into sample order."""
    if length < 2:
        copy_line(src, dst, length)
        return
    num_lf = (length + 1) >> 1
    dst[0:length:2] = src[:num_lf]
    dst[1:length:2] = src[num_lf:length]


# Biorthogonal 5/3 (lifting scheme)

def bior53_forward(src: np.ndarray, dst: np.ndarray, length: int) -> None:
    """Forward 5/3 lifting step: predict, then update.

    Low-pass values carry a factor of two. For even lengths the last
    high-pass value is a plain first difference since its right neighbour
    is missing.
    """
    if length < 3:
        copy_line(src, dst, length)
        return
    half = length >> 1
    if (length & 1) == 0:
        half -= 1
    num_lf = half + 1

    even = src[0:2 * half + 1:2]
    odd = src[1:2 * half:2]

    # Predict
    hf = odd - (even[:-1] + even[1:]) * MEAN
    # Update
    dst[:half] = SCALE * (even[:-1] + (_shifted(hf) + hf) * SMOOTH)
    dst[num_lf:num_lf + half] = hf

    dst[num_lf - 1] = SCALE * src[2 * half]
    if (length & 1) == 0:
        dst[length - 1] = src[length - 1] - src[length - 2]


def bior53_inverse(src: np.ndarray, dst: np.ndarray, length: int) -> None:
    """Inverse 5/3 lifting step: undo update, then undo predict."""
    if length < 3:
        copy_line(src, dst, length)
        return
    half = length >> 1
    if (length & 1) == 0:
        half -= 1
    num_lf = half + 1

    hf = src[num_lf:num_lf + half]
    even = np.empty(half + 1, dtype=np.result_type(src.dtype, dst.dtype))
    # Undo update
    even[:half] = src[:half] * SCALE_INV - (hf + _shifted(hf)) * SMOOTH
    even[half] = src[num_lf - 1] * SCALE_INV

    # Undo predict
    dst[0:2 * half + 1:2] = even
    dst[1:2 * half:2] = hf + (even[:-1] + even[1:]) * MEAN
    if (length & 1) == 0:
        dst[length - 1] = src[length - 1] + even[half]


# Haar

def haar_forward(src: np.ndarray, dst: np.ndarray, length: int) -> None:
    """Unnormalised Haar step: pair sums (LF) and half differences (HF)."""
    if length < 2:
        copy_line(src, dst, length)
        return
    half = length >> 1
    num_lf = half + (length & 1)
    a = src[0:2 * half:2]
    b = src[1:2 * half:2]
    dst[:half] = a + b
    dst[num_lf:num_lf + half] = (b - a) * MEAN
    if length & 1:
        dst[num_lf - 1] = src[length - 1] * SCALE


def haar_inverse(src: np.ndarray, dst: np.ndarray, length: int) -> None:
    """Rebuild each pair from its sum and half difference."""
    if length < 2:
        copy_line(src, dst, length)
        return
    half = length >> 1
    num_lf = half + (length & 1)
    mean = src[:half] * SCALE_INV
    diff = src[num_lf:num_lf + half]
    dst[0:2 * half:2] = mean - diff
    dst[1:2 * half:2] = mean + diff
    if length & 1:
        dst[length - 1] = src[num_lf - 1] * SCALE_INV
