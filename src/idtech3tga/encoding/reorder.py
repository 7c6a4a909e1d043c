"""Conversion of decoded rasters into TGA native pixel layout."""

from __future__ import annotations

import logging

import numpy as np

from ..models.enums import ChannelOrder
from ..models.raster import BYTES_PER_PIXEL, Raster, check_dimensions

_LOGGER = logging.getLogger(__name__)


class ReorderedBuffer:
    """Flat BGRA pixel buffer, bottom row first, with bounds-checked access.

    Pixels are addressed by index in scan order (left to right, bottom to
    top), not by byte offset.
    """

    __slots__ = ("_data", "_count")

    def __init__(self, data: bytes):
        if len(data) % BYTES_PER_PIXEL:
            raise ValueError(
                f"buffer length {len(data)} is not a multiple of {BYTES_PER_PIXEL}"
            )
        self._data = bytes(data)
        self._count = len(data) // BYTES_PER_PIXEL

    def __len__(self) -> int:
        return self._count

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ReorderedBuffer):
            return NotImplemented
        return self._data == other._data

    def __repr__(self) -> str:
        return f"ReorderedBuffer(pixels={self._count})"

    @property
    def pixel_count(self) -> int:
        return self._count

    @property
    def data(self) -> bytes:
        return self._data

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self._count:
            raise IndexError(f"pixel index {index} out of range (0-{self._count - 1})")

    def pixel(self, index: int) -> bytes:
        """Return the 4 bytes of pixel `index`."""
        self._check_index(index)
        offset = index * BYTES_PER_PIXEL
        return self._data[offset:offset + BYTES_PER_PIXEL]

    def pixels(self, start: int, count: int) -> bytes:
        """Return `count` consecutive pixels starting at `start`."""
        if count < 1:
            raise ValueError(f"pixel count must be positive, got {count}")
        self._check_index(start)
        self._check_index(start + count - 1)
        return self._data[start * BYTES_PER_PIXEL:(start + count) * BYTES_PER_PIXEL]

    def same_pixel(self, a: int, b: int) -> bool:
        """Compare two pixels byte-wise across all channels."""
        return self.pixel(a) == self.pixel(b)

    def starts_pair(self, index: int) -> bool:
        """True if pixels `index` and `index + 1` exist and are identical."""
        return index + 1 < self._count and self.same_pixel(index, index + 1)

    def run_length(self, start: int, limit: int) -> int:
        """Length of the run of identical pixels at `start`, capped at `limit`."""
        self._check_index(start)
        run = 1
        while start + run < self._count and run < limit and self.same_pixel(start, start + run):
            run += 1
        return run


def reorder(raster: Raster, target: ChannelOrder = ChannelOrder.BGRA) -> ReorderedBuffer:
    """Flip rows bottom-to-top and permute channels into TGA order.

    Args:
        raster: Decoded source raster
        target: Channel order of the output buffer (default: BGRA)

    Returns:
        Buffer of width*height pixels in TGA scan order

    Raises:
        InvalidDimensionsError: If width or height is not positive
    """
    check_dimensions(raster.width, raster.height)

    array = raster.as_array()
    permutation = raster.channel_order.permutation_to(target)
    native = array[::-1, :, permutation]

    _LOGGER.debug(
        "Reordered %dx%d raster %s -> %s, bottom row first",
        raster.width, raster.height, raster.channel_order.value, target.value,
    )
    return ReorderedBuffer(np.ascontiguousarray(native).tobytes())
