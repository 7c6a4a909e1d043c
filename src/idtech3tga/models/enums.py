from __future__ import annotations

from enum import Enum, IntEnum


class ImageType(IntEnum):
    """TGA image type codes (header byte 2).

    Only RLE_TRUECOLOR is produced; the rest are listed so headers from
    other writers can be identified when parsed.
    """
    NO_IMAGE = 0
    COLOR_MAPPED = 1
    TRUECOLOR = 2
    GRAYSCALE = 3
    RLE_COLOR_MAPPED = 9
    RLE_TRUECOLOR = 10
    RLE_GRAYSCALE = 11


class ChannelOrder(Enum):
    """Byte order of the four channels inside one pixel."""
    RGBA = "RGBA"   # Decoded source rasters
    BGRA = "BGRA"   # TGA native order

    def index_of(self, channel: str) -> int:
        return self.value.index(channel)

    def permutation_to(self, other: ChannelOrder) -> list[int]:
        """Source channel indices that produce `other` order when gathered."""
        return [self.index_of(channel) for channel in other.value]
