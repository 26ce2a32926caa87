"""Type-safe transform configuration with hashing and serialization."""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

from wavecascade.engine.types import InvalidArgumentError
from wavecascade.kernels import KERNELS


@dataclass(frozen=True)
class TransformConfig:
    """Immutable, JSON-serialisable description of a cascade engine.

    Only the kernel name is checked here; dimensions are validated when an
    engine is built with ``Wavelet2D.from_config``.

    Args:
        kernel: Kernel name ('ordering', 'bior53', 'haar')
        width: Width of the transform (grid axis 1)
        height: Height of the transform (grid axis 0)
        min_size: Smallest transformed side length (None = kernel minimum)
        enable_parallel: Fan work out to a thread pool
        enable_caching: Keep the scratch buffer between calls
        max_workers: Thread pool size (None = executor default)

    Raises:
        InvalidArgumentError: If the kernel name is not registered
    """
    kernel: str
    width: int
    height: int
    min_size: int | None = None
    enable_parallel: bool = True
    enable_caching: bool = False
    max_workers: int | None = None

    def __post_init__(self) -> None:
        if self.kernel not in KERNELS:
            raise InvalidArgumentError(
                f"Kernel '{self.kernel}' not supported. Available: {list(KERNELS)}"
            )

    def hash(self) -> str:
        """Get deterministic hash of this configuration."""
        return config_hash(self)

    def save(self, path: str | Path) -> None:
        """Save configuration to JSON file."""
        save_config(self, path)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def config_hash(config: TransformConfig) -> str:
    """8-character SHA256 prefix of the config's sorted JSON form."""
    encoded = json.dumps(config.to_dict(), sort_keys=True).encode()
    return hashlib.sha256(encoded).hexdigest()[:8]


def save_config(config: TransformConfig, path: str | Path) -> None:
    """Write ``config`` as indented JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)


def load_config(path: str | Path) -> TransformConfig:
    """
    Load a TransformConfig from a JSON file written by ``save_config``.

    Args:
        path: JSON file path

    Returns:
        The configuration

    Raises:
        InvalidArgumentError: If the file is not a JSON object, has unknown
            or missing keys, or names an unknown kernel
    """
    with open(path, 'r') as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise InvalidArgumentError(f"{path}: expected a JSON object, got {type(data).__name__}")

    names = {field.name for field in fields(TransformConfig)}
    unknown = sorted(set(data) - names)
    if unknown:
        raise InvalidArgumentError(f"{path}: unknown config keys {unknown}")
    missing = sorted(name for name in ('kernel', 'width', 'height') if name not in data)
    if missing:
        raise InvalidArgumentError(f"{path}: missing config keys {missing}")

    return TransformConfig(**data)
