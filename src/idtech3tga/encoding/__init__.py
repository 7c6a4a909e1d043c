"""Raster decoding, reordering and RLE packet encoding."""

from .images import SOURCE_FORMATS, load_raster, raster_from_image
from .reorder import ReorderedBuffer, reorder
from .rle import PacketEncoder, ScanState, decode_packets, encode_packets

__all__ = [
    "load_raster",
    "raster_from_image",
    "reorder",
    "encode_packets",
    "decode_packets",
    "PacketEncoder",
    "ReorderedBuffer",
    "ScanState",
    "SOURCE_FORMATS",
]
