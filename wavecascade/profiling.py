"""Timing utilities for engine operations.

Functional profiling tools to compare execution modes of a cascade engine.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

import numpy as np


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ProfileSummary:
    """Statistical summary of repeated timings."""

    name: str
    count: int
    mean_time: float
    min_time: float
    max_time: float
    total_time: float

    def __str__(self) -> str:
        return (
            f"{self.name}:\n"
            f"  Count:     {self.count}\n"
            f"  Mean:      {self.mean_time*1000:.2f} ms\n"
            f"  Min:       {self.min_time*1000:.2f} ms\n"
            f"  Max:       {self.max_time*1000:.2f} ms\n"
            f"  Total:     {self.total_time:.2f} s"
        )


def time_function(fn: Callable[..., T], *args: Any, **kwargs: Any) -> tuple[T, float]:
    """Call ``fn`` and measure its wall-clock time.

    Returns:
        Tuple of (result, elapsed_time_seconds)
    """
    start = time.perf_counter()
    result = fn(*args, **kwargs)
    return result, time.perf_counter() - start


def summarize(name: str, times: list[float]) -> ProfileSummary:
    """Create summary statistics from a list of timings."""
    if not times:
        return ProfileSummary(name, 0, 0.0, 0.0, 0.0, 0.0)
    return ProfileSummary(
        name=name,
        count=len(times),
        mean_time=sum(times) / len(times),
        min_time=min(times),
        max_time=max(times),
        total_time=sum(times),
    )


def profile_operation(
    fn: Callable[[np.ndarray], Any],
    grid: np.ndarray,
    repeats: int = 5,
    name: str = "operation",
) -> ProfileSummary:
    """Time ``fn`` on fresh copies of ``grid``.

    Copies are made outside the timed region so in-place operations always
    see the same input.

    Args:
        fn: Operation taking the grid, e.g. ``wavelet.transform_isotropic``
        grid: Input grid (left unchanged)
        repeats: Number of timed calls
        name: Label for the summary

    Returns:
        Summary of the timings
    """
    times = []
    for _ in range(repeats):
        work = grid.copy()
        _, elapsed = time_function(fn, work)
        times.append(elapsed)
    summary = summarize(name, times)
    logger.debug("%s: mean %.2f ms over %d runs", name, summary.mean_time * 1000, summary.count)
    return summary


def profile_execution_modes(
    wavelet: Any,
    grid: np.ndarray,
    repeats: int = 5,
) -> dict[str, ProfileSummary]:
    """Time a forward plus inverse cascade under every engine mode.

    Runs all four combinations of ``enable_parallel`` and
    ``enable_caching`` and restores the engine settings afterwards.

    Args:
        wavelet: A ``Wavelet2D`` engine
        grid: Input grid of the engine's extent
        repeats: Timed calls per mode

    Returns:
        Dict mapping mode label (e.g. 'parallel+cached') to its summary
    """
    def round_trip(work: np.ndarray) -> None:
        wavelet.transform_isotropic(work)
        wavelet.backtransform_isotropic(work)

    saved = (wavelet.enable_parallel, wavelet.enable_caching)
    results = {}
    try:
        for parallel in (True, False):
            for caching in (True, False):
                wavelet.enable_parallel = parallel
                wavelet.enable_caching = caching
                label = (
                    f"{'parallel' if parallel else 'sequential'}+"
                    f"{'cached' if caching else 'uncached'}"
                )
                results[label] = profile_operation(round_trip, grid, repeats, label)
    finally:
        wavelet.enable_parallel, wavelet.enable_caching = saved
    return results
