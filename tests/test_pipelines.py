"""Tests for composite transforms built on the cascade engines."""

from __future__ import annotations

import numpy as np
import pytest

from wavecascade import (
    InvalidArgumentError,
    adaptive_deadzone,
    adaptive_sharpening,
    collect_progress,
    inverse_transform_1d,
    sharpening_profile,
    transform_1d,
    upscale,
)


def smooth_image(width: int, height: int) -> np.ndarray:
    y, x = np.mgrid[0:height, 0:width]
    return (np.sin(x / 5.0) * np.cos(y / 7.0) * 50.0 + 100.0).astype(np.float32)


class TestTransform1D:
    """Test single-level 1-D transforms."""

    @pytest.mark.parametrize("kernel", ['ordering', 'bior53', 'haar'])
    @pytest.mark.parametrize("length", [3, 8, 11])
    def test_round_trip(self, kernel, length):
        signal = np.random.default_rng(length).uniform(-5, 5, length)
        restored = inverse_transform_1d(transform_1d(signal, kernel), kernel)
        assert np.allclose(restored, signal, atol=1e-9)

    def test_does_not_modify_input(self):
        signal = np.arange(6, dtype=np.float64)
        transform_1d(signal, 'haar')
        assert signal.tolist() == [0, 1, 2, 3, 4, 5]

    def test_integer_input_becomes_float(self):
        coeffs = transform_1d([1, 3, 5, 7], 'haar')
        assert coeffs.dtype == np.float32
        assert coeffs.tolist() == [4, 12, 1, 1]

    def test_rejects_2d_input(self):
        with pytest.raises(InvalidArgumentError, match="1-D"):
            transform_1d(np.zeros((2, 2)))


class TestUpscale:
    """Test wavelet-domain upscaling."""

    def test_constant_stays_constant(self):
        grid = np.full((9, 12), 7.0, dtype=np.float32)

        result = upscale(grid)

        assert result.shape == (18, 24)
        assert np.allclose(result, 7.0, atol=1e-4)

    def test_input_is_unchanged(self):
        grid = smooth_image(10, 10)
        original = grid.copy()
        upscale(grid)
        assert np.array_equal(grid, original)

    def test_smooth_image_keeps_mean(self):
        grid = smooth_image(16, 12)
        result = upscale(grid)
        assert result.mean() == pytest.approx(grid.mean(), rel=0.05)

    def test_progress_reaches_100(self):
        values: list[float] = []
        upscale(smooth_image(8, 8), collect_progress(values))
        assert values[-1] == pytest.approx(100.0)
        assert values == sorted(values)


class TestAdaptiveFilters:
    """Test the local coefficient pipelines."""

    @pytest.mark.parametrize("width,height", [(16, 16), (21, 13), (3, 3)])
    def test_deadzone_keeps_shape(self, width, height):
        grid = smooth_image(width, height)
        assert adaptive_deadzone(grid) is True
        assert grid.shape == (height, width)
        assert np.all(np.isfinite(grid))

    def test_deadzone_keeping_all_coefficients_is_lossless(self):
        grid = smooth_image(24, 17)
        original = grid.copy()

        adaptive_deadzone(grid, n=64, grid_size=8)

        assert np.allclose(grid, original, atol=1e-2)

    def test_deadzone_removes_detail(self):
        grid = np.random.default_rng(5).random((32, 32)).astype(np.float32) * 100.0
        original = grid.copy()

        adaptive_deadzone(grid, n=1, grid_size=8)

        assert not np.allclose(grid, original, atol=1.0)
        assert grid.std() < original.std()

    @pytest.mark.parametrize("width,height", [(16, 16), (19, 11)])
    def test_sharpening_keeps_shape(self, width, height):
        grid = smooth_image(width, height)
        assert adaptive_sharpening(grid) is True
        assert grid.shape == (height, width)
        assert np.all(np.isfinite(grid))

    def test_sharpening_of_constant_is_scaled_constant(self):
        """A constant image has one non-zero coefficient, scaled by rank 0."""
        grid = np.full((16, 16), 10.0, dtype=np.float32)

        adaptive_sharpening(grid, position=0.0)

        assert np.allclose(grid, 30.0, atol=1e-3)

    def test_progress_reaches_100(self):
        values: list[float] = []
        adaptive_deadzone(smooth_image(16, 16), progress=collect_progress(values))
        assert values[-1] == pytest.approx(100.0)
        assert values == sorted(values)

    def test_cancel_returns_false(self):
        grid = smooth_image(16, 16)
        assert adaptive_deadzone(grid, progress=lambda p: p > 30.0) is False

    def test_rejects_non_grid(self):
        with pytest.raises(InvalidArgumentError):
            adaptive_deadzone(np.zeros(16, dtype=np.float32))


class TestSharpeningProfile:
    """Test the rank-dependent boost curve."""

    def test_peak_at_position(self):
        profile = sharpening_profile(5.0)
        assert profile.shape == (64,)
        assert profile[5] == pytest.approx(3.0)
        assert int(np.argmax(profile)) == 5

    def test_far_ranks_close_to_one(self):
        assert sharpening_profile(0.0)[63] == pytest.approx(1.0, abs=1e-3)


class TestTransform1DScaling:
    """The 1-D transform matches one row pass of the 2-D engine."""

    def test_trailing_low_pass_is_doubled(self):
        assert transform_1d([1.0, 2.0, 3.0], 'bior53').tolist() == [2.0, 6.0, 0.0]

    def test_even_length_tail(self):
        coeffs = transform_1d(np.array([1.0, 2.0, 3.0, 5.0]), 'bior53')
        assert coeffs[1] == 6.0
        assert coeffs[3] == 2.0
