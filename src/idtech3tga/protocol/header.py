"""18-byte TGA file header."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Final

from ..exceptions import DecodeError
from ..models.enums import ImageType
from ..models.raster import check_tga_dimensions

HEADER_SIZE: Final = 18

# [id_len:1][cmap_type:1][image_type:1][cmap_first:2][cmap_len:2][cmap_depth:1]
# [x_origin:2][y_origin:2][width:2][height:2][bpp:1][descriptor:1], little-endian
HEADER_FORMAT: Final = "<BBBHHBHHHHBB"

BITS_PER_PIXEL: Final = 32

# Low nibble: 8 alpha bits. Origin bits clear: bottom-left origin.
IMAGE_DESCRIPTOR: Final = 0x08


@dataclass(frozen=True, slots=True)
class TgaHeader:
    """Parsed TGA header fields."""

    width: int
    height: int
    image_type: int = ImageType.RLE_TRUECOLOR
    bits_per_pixel: int = BITS_PER_PIXEL
    image_descriptor: int = IMAGE_DESCRIPTOR
    id_length: int = 0
    color_map_type: int = 0
    color_map_first: int = 0
    color_map_length: int = 0
    color_map_depth: int = 0
    x_origin: int = 0
    y_origin: int = 0

    @property
    def alpha_bits(self) -> int:
        return self.image_descriptor & 0x0F

    @property
    def top_origin(self) -> bool:
        return bool(self.image_descriptor & 0x20)

    def to_bytes(self) -> bytes:
        """Serialize to the 18-byte wire form."""
        return struct.pack(
            HEADER_FORMAT,
            self.id_length,
            self.color_map_type,
            self.image_type,
            self.color_map_first,
            self.color_map_length,
            self.color_map_depth,
            self.x_origin,
            self.y_origin,
            self.width,
            self.height,
            self.bits_per_pixel,
            self.image_descriptor,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> TgaHeader:
        """Parse the first 18 bytes of a TGA file.

        Raises:
            DecodeError: If fewer than 18 bytes are given
        """
        if len(data) < HEADER_SIZE:
            raise DecodeError(f"TGA header too short: {len(data)} bytes (need {HEADER_SIZE})")

        (id_length, color_map_type, image_type, color_map_first, color_map_length,
         color_map_depth, x_origin, y_origin, width, height, bits_per_pixel,
         image_descriptor) = struct.unpack(HEADER_FORMAT, data[:HEADER_SIZE])

        return cls(
            width=width,
            height=height,
            image_type=image_type,
            bits_per_pixel=bits_per_pixel,
            image_descriptor=image_descriptor,
            id_length=id_length,
            color_map_type=color_map_type,
            color_map_first=color_map_first,
            color_map_length=color_map_length,
            color_map_depth=color_map_depth,
            x_origin=x_origin,
            y_origin=y_origin,
        )


def build_header(width: int, height: int) -> bytes:
    """Build the header for a 32-bit RLE truecolor image.

    Raises:
        InvalidDimensionsError: If width or height is not positive
        DimensionOverflowError: If width or height exceeds 65535
    """
    check_tga_dimensions(width, height)
    return TgaHeader(width=width, height=height).to_bytes()


def parse_header(data: bytes) -> TgaHeader:
    """Parse a header, see TgaHeader.from_bytes."""
    return TgaHeader.from_bytes(data)
