"""Source image decoding into straight-alpha RGBA rasters."""

from __future__ import annotations

import logging
import os
import struct
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Final

import numpy as np
from PIL import Image

from ..exceptions import DecodeError, InputUnreadableError
from ..models.raster import Raster, check_dimensions, check_tga_dimensions

_LOGGER = logging.getLogger(__name__)

# Pillow format names accepted by load_raster
SOURCE_FORMATS: Final = ("PNG",)

# Single-channel modes that may carry more than 8 bits per sample
_WIDE_GRAY_MODES: Final = frozenset({"I", "I;16", "I;16B", "I;16L", "I;16N"})


def _wide_gray_to_rgba(image: Image.Image) -> np.ndarray:
    """Drop the low byte of 16-bit grayscale, expand to RGB, add alpha."""
    values = np.clip(np.asarray(image, dtype=np.int64), 0, 0xFFFF)
    gray = (values >> 8).astype(np.uint8)
    alpha = np.full(gray.shape, 0xFF, dtype=np.uint8)

    transparency = image.info.get("transparency")
    if isinstance(transparency, int):
        alpha[values == transparency] = 0

    return np.stack([gray, gray, gray, alpha], axis=-1)


def _has_wide_rgb_transparency(image: Image.Image) -> bool:
    transparency = image.info.get("transparency")
    return (
        image.mode == "RGB"
        and isinstance(transparency, tuple)
        and any(component > 0xFF for component in transparency)
    )


def _wide_rgb_to_rgba(image: Image.Image) -> np.ndarray:
    """Add alpha to 16-bit RGB (already reduced to 8 bits) with a 16-bit tRNS color.

    Pixels are matched on the high byte of each transparency component, so
    colors differing only in the low byte also become transparent.
    """
    rgb = np.asarray(image, dtype=np.uint8)
    key = np.array([component >> 8 for component in image.info["transparency"]], dtype=np.uint8)
    alpha = np.where(np.all(rgb == key, axis=-1), 0, 0xFF).astype(np.uint8)
    return np.dstack([rgb, alpha])


@contextmanager
def _unlimited_image_pixels() -> Iterator[None]:
    """Lift Pillow's decompression bomb limit; TGA dimensions are checked instead."""
    saved = Image.MAX_IMAGE_PIXELS
    Image.MAX_IMAGE_PIXELS = None
    try:
        yield
    finally:
        Image.MAX_IMAGE_PIXELS = saved


def raster_from_image(image: Image.Image) -> Raster:
    """Normalize a decoded Pillow image into an RGBA raster.

    Palette images expand to RGB, grayscale expands to RGB, tRNS
    transparency becomes alpha and images without alpha get an opaque
    alpha channel. 16-bit grayscale keeps the high byte of each sample.

    Args:
        image: Decoded (loaded) Pillow image

    Returns:
        Raster in RGBA order, top row first

    Raises:
        InvalidDimensionsError: If the image has no pixels
    """
    check_dimensions(image.width, image.height)
    if image.mode in _WIDE_GRAY_MODES:
        array = _wide_gray_to_rgba(image)
    elif _has_wide_rgb_transparency(image):
        array = _wide_rgb_to_rgba(image)
    else:
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        array = np.asarray(rgba, dtype=np.uint8)

    _LOGGER.debug("Normalized %s image %dx%d to RGBA", image.mode, image.width, image.height)
    return Raster.from_array(array)


def load_raster(
        path: str | os.PathLike[str],
        formats: tuple[str, ...] = SOURCE_FORMATS,
) -> Raster:
    """Decode an image file into an RGBA raster.

    Args:
        path: Input image path
        formats: Pillow format names to accept (default: PNG only)

    Returns:
        Decoded raster

    Raises:
        InputUnreadableError: If the file is missing or cannot be opened
        DecodeError: If the file is not a valid image of an accepted format
        DimensionOverflowError: If width or height exceeds 65535 (checked before decoding pixels)
    """
    path = Path(path)
    try:
        fp = path.open("rb")
    except OSError as err:
        raise InputUnreadableError(f"failed to open input PNG: {path}") from err

    with fp:
        try:
            with _unlimited_image_pixels(), Image.open(fp, formats=formats) as image:
                check_tga_dimensions(image.width, image.height)
                image.load()
                raster = raster_from_image(image)
        except (OSError, SyntaxError, ValueError, struct.error) as err:
            raise DecodeError(f"failed to decode PNG: {path}") from err

    _LOGGER.debug("Loaded %s (%dx%d)", path, raster.width, raster.height)
    return raster
