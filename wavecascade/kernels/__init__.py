"""One-dimensional wavelet kernels.

Three kernel families share one line interface ``fn(src, dst, length)``:

- 'ordering': permutation that exposes the cascade coefficient layout
- 'bior53': biorthogonal 5/3 wavelet (lifting scheme)
- 'haar': unnormalised Haar wavelet

Example:
    >>> import numpy as np
    >>> from wavecascade.kernels import get_kernel
    >>>
    >>> kernel = get_kernel('haar')
    >>> src = np.array([1.0, 3.0, 5.0, 7.0], dtype=np.float32)
    >>> dst = np.empty_like(src)
    >>> kernel.forward(src, dst, 4)
    >>> dst
    array([ 4., 12.,  1.,  1.], dtype=float32)
"""

from wavecascade.kernels.registry import (
    BIORTHOGONAL53,
    HAAR,
    KERNELS,
    ORDERING,
    WaveletKernel,
    get_kernel,
)

__all__ = [
    'WaveletKernel',
    'get_kernel',
    'KERNELS',
    'ORDERING',
    'BIORTHOGONAL53',
    'HAAR',
]
