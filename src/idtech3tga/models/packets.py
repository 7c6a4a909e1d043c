"""Run-length and raw packets of an RLE TGA pixel stream."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .raster import BYTES_PER_PIXEL

MAX_PACKET_PIXELS: Final = 128
RLE_FLAG: Final = 0x80
COUNT_MASK: Final = 0x7F


@dataclass(frozen=True, slots=True)
class RlePacket:
    """One pixel value repeated `count` times."""

    count: int
    pixel: bytes

    def __post_init__(self) -> None:
        if not 2 <= self.count <= MAX_PACKET_PIXELS:
            raise ValueError(
                f"RLE packet count out of range: {self.count} (must be 2-{MAX_PACKET_PIXELS})"
            )
        if len(self.pixel) != BYTES_PER_PIXEL:
            raise ValueError(f"RLE packet pixel must be {BYTES_PER_PIXEL} bytes, got {len(self.pixel)}")

    @property
    def header_byte(self) -> int:
        return RLE_FLAG | (self.count - 1)

    @property
    def pixel_data(self) -> bytes:
        """Expanded pixel bytes this packet stands for."""
        return self.pixel * self.count

    def to_bytes(self) -> bytes:
        """Serialize as [flag|count-1:1][pixel:4]."""
        return bytes([self.header_byte]) + self.pixel


@dataclass(frozen=True, slots=True)
class RawPacket:
    """`count` literal pixels."""

    count: int
    pixels: bytes

    def __post_init__(self) -> None:
        if not 1 <= self.count <= MAX_PACKET_PIXELS:
            raise ValueError(
                f"raw packet count out of range: {self.count} (must be 1-{MAX_PACKET_PIXELS})"
            )
        if len(self.pixels) != self.count * BYTES_PER_PIXEL:
            raise ValueError(
                f"raw packet holds {len(self.pixels)} bytes, expected {self.count * BYTES_PER_PIXEL}"
            )

    @property
    def header_byte(self) -> int:
        return self.count - 1

    @property
    def pixel_data(self) -> bytes:
        return self.pixels

    def to_bytes(self) -> bytes:
        """Serialize as [count-1:1][pixels:4*count]."""
        return bytes([self.header_byte]) + self.pixels


Packet = RlePacket | RawPacket
