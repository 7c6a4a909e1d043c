"""Data models for rasters and TGA packets."""

from .enums import ChannelOrder, ImageType
from .packets import MAX_PACKET_PIXELS, RLE_FLAG, Packet, RawPacket, RlePacket
from .raster import (
    BYTES_PER_PIXEL,
    MAX_DIMENSION,
    Raster,
    check_dimensions,
    check_tga_dimensions,
)

__all__ = [
    "Raster",
    "RlePacket",
    "RawPacket",
    "Packet",
    "ChannelOrder",
    "ImageType",
    "check_dimensions",
    "check_tga_dimensions",
    "BYTES_PER_PIXEL",
    "MAX_DIMENSION",
    "MAX_PACKET_PIXELS",
    "RLE_FLAG",
]
