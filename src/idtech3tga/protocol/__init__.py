"""TGA file format framing."""

from .header import (
    BITS_PER_PIXEL,
    HEADER_FORMAT,
    HEADER_SIZE,
    IMAGE_DESCRIPTOR,
    TgaHeader,
    build_header,
    parse_header,
)

__all__ = [
    "TgaHeader",
    "build_header",
    "parse_header",
    "HEADER_SIZE",
    "HEADER_FORMAT",
    "BITS_PER_PIXEL",
    "IMAGE_DESCRIPTOR",
]
