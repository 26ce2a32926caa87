"""Progress reporting and cooperative cancellation for one operation."""

from __future__ import annotations

import logging
import threading

from wavecascade.engine.types import ProgressCallback


logger = logging.getLogger(__name__)


class ProgressTracker:
    """Thread-safe progress counter for one in-flight operation.

    Workers report finished units through ``update``. The callback receives
    the clamped percentage and returns True to request an abort; after that
    it is never called again and ``aborted`` stays True.

    Args:
        callback: Function of a percentage in [0, 100] returning an abort flag
        maximum: Total number of units the operation will report
    """

    def __init__(self, callback: ProgressCallback, maximum: int):
        self._callback = callback
        self._maximum = maximum
        self._current = 0
        self._aborted = False
        self._lock = threading.Lock()

    @property
    def aborted(self) -> bool:
        return self._aborted

    @property
    def current(self) -> int:
        return self._current

    @property
    def maximum(self) -> int:
        return self._maximum

    def update(self, increment: int) -> bool:
        """Add ``increment`` units, notify the callback, return the abort flag."""
        with self._lock:
            if not self._aborted:
                self._current = min(self._current + increment, self._maximum)
                if self._maximum > 0:
                    percent = self._current / self._maximum * 100.0
                else:
                    percent = 100.0
                if self._callback(percent):
                    self._aborted = True
                    logger.info("Operation aborted by progress callback at %.1f%%", percent)
            return self._aborted


def is_aborted(tracker: ProgressTracker | None) -> bool:
    """True if a tracker exists and its operation was cancelled."""
    return tracker is not None and tracker.aborted


def report(tracker: ProgressTracker | None, increment: int) -> bool:
    """Report ``increment`` units if tracking is active; return the abort flag."""
    if tracker is None:
        return False
    return tracker.update(increment)


def create_tracker(callback: ProgressCallback | None, maximum: int) -> ProgressTracker | None:
    """Build a tracker only when the caller asked for progress."""
    if callback is None:
        return None
    return ProgressTracker(callback, maximum)
