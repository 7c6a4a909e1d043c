"""Exceptions raised by the TGA conversion pipeline."""

from __future__ import annotations


class TgaError(Exception):
    """Base exception for all conversion errors."""


class InputUnreadableError(TgaError):
    """Input image path is missing or cannot be opened."""


class DecodeError(TgaError):
    """Source image (or packet stream) is malformed."""


class InvalidDimensionsError(DecodeError):
    """Raster width or height is not positive."""


class DimensionOverflowError(TgaError):
    """Raster width or height does not fit the 16-bit TGA header fields."""


class OutputWriteError(TgaError):
    """Writing the output file or stream failed."""
