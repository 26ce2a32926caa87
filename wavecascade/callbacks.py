"""Ready-made progress callbacks for engine operations.

Every callback follows the engine protocol: it is called with a percentage in
[0, 100] and returns True to request cancellation.
"""

from __future__ import annotations

import time
from typing import Any, Callable

from tqdm import tqdm

from wavecascade.engine.types import ProgressCallback


class TqdmProgress:
    """Progress callback that drives a tqdm bar.

    Usable as a context manager so the bar is closed even if the
    operation raises:

        >>> with TqdmProgress(desc="Forward") as progress:
        ...     wavelet.transform_isotropic(grid, progress)

    Args:
        desc: Bar description
        **tqdm_kwargs: Forwarded to tqdm
    """

    def __init__(self, desc: str | None = None, **tqdm_kwargs: Any):
        tqdm_kwargs.setdefault("unit", "%")
        tqdm_kwargs.setdefault("bar_format", "{l_bar}{bar}| {n:.1f}/{total:.0f}%")
        self._bar = tqdm(total=100.0, desc=desc, **tqdm_kwargs)

    def __call__(self, percent: float) -> bool:
        self._bar.update(percent - self._bar.n)
        return False

    @property
    def percent(self) -> float:
        return float(self._bar.n)

    def close(self) -> None:
        self._bar.close()

    def __enter__(self) -> TqdmProgress:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def deadline_progress(
    seconds: float,
    clock: Callable[[], float] = time.monotonic,
) -> ProgressCallback:
    """Create a callback that requests cancellation after ``seconds``.

    The clock starts when the callback is created.

    Args:
        seconds: Time budget
        clock: Monotonic clock (injectable for tests)

    Returns:
        Progress callback
    """
    deadline = clock() + seconds

    def callback(percent: float) -> bool:
        return clock() >= deadline

    return callback


def chain_progress(*callbacks: ProgressCallback) -> ProgressCallback:
    """Combine callbacks; cancellation is requested if any of them asks.

    Every callback is called on each update, even after one has asked to
    abort within the same update.
    """
    def callback(percent: float) -> bool:
        results = [cb(percent) for cb in callbacks]
        return any(results)

    return callback


def collect_progress(values: list[float]) -> ProgressCallback:
    """Create a callback that appends each reported percentage to ``values``."""
    def callback(percent: float) -> bool:
        values.append(percent)
        return False

    return callback
