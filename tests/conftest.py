"""Shared fixtures for idtech3tga tests."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from idtech3tga.models.raster import Raster

Pixel = Sequence[int]


def raster_from_rows(rows: Sequence[Sequence[Pixel]]) -> Raster:
    """Build an RGBA raster from nested rows of (r, g, b, a) tuples."""
    return Raster.from_array(np.array(rows, dtype=np.uint8))


@pytest.fixture
def make_raster() -> Callable[[Sequence[Sequence[Pixel]]], Raster]:
    return raster_from_rows


@pytest.fixture
def random_raster() -> Callable[..., Raster]:
    """Seeded random raster; `levels` limits distinct channel values to force runs."""

    def _make(width: int, height: int, seed: int = 0, levels: int = 256) -> Raster:
        rng = np.random.default_rng(seed)
        values = rng.integers(0, levels, size=(height, width, 4), dtype=np.uint8)
        return Raster.from_array(values)

    return _make


@pytest.fixture
def write_png(tmp_path: Path) -> Callable[..., Path]:
    """Save a Pillow image as PNG under tmp_path and return its path."""

    def _write(image: Image.Image, name: str = "input.png", **params) -> Path:
        path = tmp_path / name
        image.save(path, format="PNG", **params)
        return path

    return _write
