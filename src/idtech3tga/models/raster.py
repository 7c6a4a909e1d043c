"""Decoded source raster model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

import numpy as np

from ..exceptions import DecodeError, DimensionOverflowError, InvalidDimensionsError
from .enums import ChannelOrder

BYTES_PER_PIXEL: Final = 4

# Width and height are stored in 16-bit header fields
MAX_DIMENSION: Final = 0xFFFF


def check_dimensions(width: int, height: int) -> None:
    """Reject rasters that cannot exist (zero or negative size).

    Raises:
        InvalidDimensionsError: If width or height is not positive
    """
    if width <= 0 or height <= 0:
        raise InvalidDimensionsError(f"input image has invalid dimensions: {width}x{height}")


def check_tga_dimensions(width: int, height: int) -> None:
    """Reject rasters that cannot be described by a TGA header.

    Raises:
        InvalidDimensionsError: If width or height is not positive
        DimensionOverflowError: If width or height exceeds 65535
    """
    check_dimensions(width, height)
    if width > MAX_DIMENSION or height > MAX_DIMENSION:
        raise DimensionOverflowError(
            f"TGA supports up to {MAX_DIMENSION}x{MAX_DIMENSION} pixels, got {width}x{height}"
        )


@dataclass(frozen=True, slots=True)
class Raster:
    """Straight-alpha RGBA raster, row-major, top row first."""

    width: int
    height: int
    pixels: bytes
    channel_order: ChannelOrder = ChannelOrder.RGBA

    def __post_init__(self) -> None:
        check_dimensions(self.width, self.height)
        expected = self.width * self.height * BYTES_PER_PIXEL
        if len(self.pixels) != expected:
            raise DecodeError(
                f"pixel buffer is {len(self.pixels)} bytes, expected {expected} "
                f"for {self.width}x{self.height}"
            )

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @classmethod
    def from_array(cls, array: np.ndarray) -> Raster:
        """Build a raster from a (height, width, 4) uint8 array."""
        if array.ndim != 3 or array.shape[2] != BYTES_PER_PIXEL:
            raise DecodeError(f"expected (height, width, 4) array, got shape {array.shape}")
        if array.dtype != np.uint8:
            raise DecodeError(f"expected uint8 pixels, got {array.dtype}")
        height, width = array.shape[:2]
        return cls(width=width, height=height, pixels=np.ascontiguousarray(array).tobytes())

    def as_array(self) -> np.ndarray:
        """Read-only (height, width, 4) view of the pixels."""
        return np.frombuffer(self.pixels, dtype=np.uint8).reshape(
            self.height, self.width, BYTES_PER_PIXEL
        )
