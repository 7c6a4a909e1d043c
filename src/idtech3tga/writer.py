"""Header + packet stream output and the end-to-end conversion pipeline."""

from __future__ import annotations

import io
import logging
import os
from collections.abc import Iterable
from pathlib import Path
from typing import BinaryIO, Final

from .encoding import decode_packets, encode_packets, load_raster, reorder
from .exceptions import DecodeError, OutputWriteError
from .models.enums import ImageType
from .models.packets import Packet
from .models.raster import Raster
from .protocol.header import BITS_PER_PIXEL, HEADER_SIZE, TgaHeader, build_header

_LOGGER = logging.getLogger(__name__)

SOURCE_EXTENSION: Final = ".png"
TARGET_EXTENSION: Final = ".tga"


def derive_output_path(input_path: str | os.PathLike[str]) -> Path:
    """Replace a trailing .png with .tga.

    Raises:
        ValueError: If the input path does not end with .png
    """
    name = os.fspath(input_path)
    if not name.endswith(SOURCE_EXTENSION):
        raise ValueError(
            f"input must end with {SOURCE_EXTENSION} when output is not provided"
        )
    return Path(name[:-len(SOURCE_EXTENSION)] + TARGET_EXTENSION)


def _prepare(raster: Raster) -> tuple[bytes, Iterable[Packet]]:
    """Validate and set up header and packet iterator before any output."""
    buffer = reorder(raster)
    packets = encode_packets(buffer, raster.width, raster.height)
    return build_header(raster.width, raster.height), packets


def _write_stream(stream: BinaryIO, header: bytes, packets: Iterable[Packet]) -> int:
    written = 0
    count = 0
    try:
        stream.write(header)
        written += len(header)
        for packet in packets:
            data = packet.to_bytes()
            stream.write(data)
            written += len(data)
            count += 1
        stream.flush()
    except OSError as err:
        raise OutputWriteError(f"failed to write TGA: {err}") from err

    _LOGGER.debug("Wrote %d packets, %d bytes", count, written)
    return written


def write_tga(raster: Raster, stream: BinaryIO) -> int:
    """Write a raster as an RLE TGA to a binary stream.

    The stream is flushed before returning.

    Args:
        raster: Decoded RGBA raster
        stream: Writable binary stream

    Returns:
        Number of bytes written

    Raises:
        InvalidDimensionsError: If width or height is not positive
        DimensionOverflowError: If width or height exceeds 65535
        OutputWriteError: If writing or flushing fails
    """
    header, packets = _prepare(raster)
    return _write_stream(stream, header, packets)


def save_tga(raster: Raster, path: str | os.PathLike[str]) -> int:
    """Write a raster as an RLE TGA file.

    Dimensions are checked before the file is created, so a rejected
    raster leaves nothing on disk. A failed write may leave a truncated
    file behind.

    Returns:
        Number of bytes written

    Raises:
        InvalidDimensionsError: If width or height is not positive
        DimensionOverflowError: If width or height exceeds 65535
        OutputWriteError: If the file cannot be created, written or closed
    """
    header, packets = _prepare(raster)
    try:
        fp = open(path, "wb")
    except OSError as err:
        raise OutputWriteError(f"failed to open output TGA: {os.fspath(path)}") from err

    try:
        with fp:
            return _write_stream(fp, header, packets)
    except OSError as err:
        raise OutputWriteError(f"failed to close output TGA: {os.fspath(path)}") from err


def encode_tga(raster: Raster) -> bytes:
    """Encode a raster to RLE TGA file bytes in memory."""
    output = io.BytesIO()
    write_tga(raster, output)
    return output.getvalue()


def read_tga(data: bytes) -> tuple[TgaHeader, bytes]:
    """Decode a 32-bit RLE truecolor TGA back to its native pixel buffer.

    Returns:
        (header, pixels) where pixels are BGRA, bottom row first

    Raises:
        DecodeError: If the data is not a 32-bit type 10 TGA or is truncated
    """
    header = TgaHeader.from_bytes(data)
    if header.image_type != ImageType.RLE_TRUECOLOR:
        raise DecodeError(f"unsupported TGA image type: {header.image_type}")
    if header.bits_per_pixel != BITS_PER_PIXEL:
        raise DecodeError(f"unsupported TGA pixel depth: {header.bits_per_pixel}")
    if header.color_map_type != 0:
        raise DecodeError("color-mapped TGA images are not supported")

    start = HEADER_SIZE + header.id_length
    return header, decode_packets(data[start:], header.width * header.height)


def convert(
        input_path: str | os.PathLike[str],
        output_path: str | os.PathLike[str] | None = None,
) -> Path:
    """Convert a PNG file to an idTech 3 compatible RLE TGA file.

    Args:
        input_path: Source PNG path
        output_path: Destination path (default: input with .png -> .tga)

    Returns:
        Path of the written file

    Raises:
        ValueError: If output_path is omitted and input lacks .png
        TgaError: On any read, decode, dimension or write failure
    """
    if output_path is None:
        output = derive_output_path(input_path)
    else:
        output = Path(output_path)

    raster = load_raster(input_path)
    written = save_tga(raster, output)
    _LOGGER.info(
        "Converted %s (%dx%d) -> %s (%d bytes)",
        os.fspath(input_path), raster.width, raster.height, output, written,
    )
    return output
