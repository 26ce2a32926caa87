"""Tests for profiling utilities."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import numpy as np
import pytest

from wavecascade import haar_wavelet_2d
from wavecascade.profiling import (
    ProfileSummary,
    profile_execution_modes,
    profile_operation,
    summarize,
    time_function,
)


class TestProfileSummary:
    """Test ProfileSummary dataclass."""

    def test_immutability(self):
        summary = ProfileSummary("op", 1, 0.1, 0.1, 0.1, 0.1)
        with pytest.raises(FrozenInstanceError):
            summary.count = 2

    def test_str_format(self):
        text = str(ProfileSummary("forward", 2, 0.0015, 0.001, 0.002, 0.003))
        assert "forward:" in text
        assert "Count:     2" in text
        assert "Mean:      1.50 ms" in text


class TestSummarize:
    """Test summary statistics."""

    def test_statistics(self):
        summary = summarize("op", [0.1, 0.3, 0.2])
        assert summary.count == 3
        assert summary.mean_time == pytest.approx(0.2)
        assert summary.min_time == 0.1
        assert summary.max_time == 0.3
        assert summary.total_time == pytest.approx(0.6)

    def test_empty(self):
        summary = summarize("op", [])
        assert summary.count == 0
        assert summary.mean_time == 0.0


class TestTiming:
    """Test timing helpers."""

    def test_time_function_returns_result(self):
        result, elapsed = time_function(sum, [1, 2, 3])
        assert result == 6
        assert elapsed >= 0.0

    def test_profile_operation_leaves_grid_unchanged(self):
        grid = np.random.default_rng(0).random((16, 16)).astype(np.float32)
        original = grid.copy()
        wavelet = haar_wavelet_2d(16, 16)

        summary = profile_operation(wavelet.transform_isotropic, grid, repeats=3, name="fwd")

        assert summary.name == "fwd"
        assert summary.count == 3
        assert np.array_equal(grid, original)

    def test_execution_modes(self):
        grid = np.random.default_rng(1).random((16, 16)).astype(np.float32)
        wavelet = haar_wavelet_2d(16, 16)
        wavelet.enable_caching = True

        results = profile_execution_modes(wavelet, grid, repeats=2)

        assert set(results) == {
            'parallel+cached',
            'parallel+uncached',
            'sequential+cached',
            'sequential+uncached',
        }
        assert all(summary.count == 2 for summary in results.values())
        assert wavelet.enable_parallel is True
        assert wavelet.enable_caching is True
