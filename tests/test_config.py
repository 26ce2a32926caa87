"""Tests for transform configuration serialization."""

from __future__ import annotations

import json
from dataclasses import FrozenInstanceError

import pytest

from wavecascade import (
    InvalidArgumentError,
    TransformConfig,
    Wavelet2D,
    config_hash,
    load_config,
    save_config,
)


class TestTransformConfig:
    """Test TransformConfig dataclass."""

    def test_defaults(self):
        config = TransformConfig(kernel='bior53', width=64, height=32)
        assert config.min_size is None
        assert config.enable_parallel is True
        assert config.enable_caching is False
        assert config.max_workers is None

    def test_immutability(self):
        config = TransformConfig(kernel='haar', width=8, height=8)
        with pytest.raises(FrozenInstanceError):
            config.width = 16

    def test_to_dict(self):
        config = TransformConfig(kernel='haar', width=8, height=4, min_size=2)
        assert config.to_dict() == {
            'kernel': 'haar',
            'width': 8,
            'height': 4,
            'min_size': 2,
            'enable_parallel': True,
            'enable_caching': False,
            'max_workers': None,
        }


class TestConfigHash:
    """Test deterministic configuration hashing."""

    def test_hash_is_deterministic(self):
        a = TransformConfig(kernel='bior53', width=64, height=32)
        b = TransformConfig(kernel='bior53', width=64, height=32)
        assert a.hash() == b.hash() == config_hash(a)
        assert len(a.hash()) == 8

    def test_hash_changes_with_fields(self):
        a = TransformConfig(kernel='bior53', width=64, height=32)
        b = TransformConfig(kernel='bior53', width=64, height=33)
        assert a.hash() != b.hash()


class TestSaveLoad:
    """Test JSON round trips."""

    def test_round_trip(self, tmp_path):
        config = TransformConfig(
            kernel='ordering', width=17, height=9, min_size=3,
            enable_parallel=False, max_workers=2,
        )
        path = tmp_path / 'nested' / 'config.json'

        save_config(config, path)
        loaded = load_config(path)

        assert loaded == config
        assert json.loads(path.read_text())['kernel'] == 'ordering'

    def test_method_save(self, tmp_path):
        config = TransformConfig(kernel='haar', width=8, height=8)
        path = tmp_path / 'config.json'
        config.save(path)
        assert load_config(path) == config

    def test_engine_from_loaded_config(self, tmp_path):
        path = tmp_path / 'config.json'
        save_config(TransformConfig(kernel='bior53', width=12, height=10), path)

        wavelet = Wavelet2D.from_config(load_config(path))

        assert (wavelet.width, wavelet.height, wavelet.min_size) == (12, 10, 3)

    def test_load_rejects_unknown_keys(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text(json.dumps({'kernel': 'haar', 'width': 8, 'height': 8, 'levels': 3}))
        with pytest.raises(InvalidArgumentError, match=r"unknown config keys \['levels'\]"):
            load_config(path)

    def test_load_rejects_missing_keys(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text(json.dumps({'kernel': 'haar', 'width': 8}))
        with pytest.raises(InvalidArgumentError, match=r"missing config keys \['height'\]"):
            load_config(path)

    def test_load_rejects_unknown_kernel(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text(json.dumps({'kernel': 'db4', 'width': 8, 'height': 8}))
        with pytest.raises(InvalidArgumentError, match="not supported"):
            load_config(path)

    def test_load_rejects_non_object(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text(json.dumps([1, 2, 3]))
        with pytest.raises(InvalidArgumentError, match="JSON object"):
            load_config(path)


class TestValidation:
    """Test checks made when a config is created."""

    def test_unknown_kernel(self):
        with pytest.raises(InvalidArgumentError, match="not supported"):
            TransformConfig(kernel='db4', width=8, height=8)

    def test_bad_dimensions_rejected_by_engine(self):
        config = TransformConfig(kernel='bior53', width=8.0, height=8)
        with pytest.raises(InvalidArgumentError, match="width must be an integer"):
            Wavelet2D.from_config(config)
