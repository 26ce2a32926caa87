"""Data-parallel fan-out over independent units of work."""

from __future__ import annotations

from concurrent.futures import Executor
from typing import Callable

from wavecascade.engine.progress import ProgressTracker, is_aborted, report


def fan_out(
    unit: Callable[[int], None],
    count: int,
    tracker: ProgressTracker | None,
    increment: int,
    pool: Executor | None = None,
) -> None:
    """Run ``unit(i)`` for every ``i`` in ``range(count)``.

    Units must be independent of each other. Each unit checks the abort flag
    before starting and reports ``increment`` progress units once finished;
    a started unit always runs to completion.

    Args:
        unit: Work for one index (a row, a column or a block)
        count: Number of units
        tracker: Progress tracker, or None when progress is not tracked
        increment: Progress units reported per finished unit
        pool: Executor for parallel execution, None runs on the calling thread

    Raises:
        Any exception raised by a unit is re-raised in the caller.
    """
    if pool is None:
        for index in range(count):
            if is_aborted(tracker):
                break
            unit(index)
            report(tracker, increment)
        return

    def run(index: int) -> None:
        if is_aborted(tracker):
            return
        unit(index)
        report(tracker, increment)

    for _ in pool.map(run, range(count)):
        pass
