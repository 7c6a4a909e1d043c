"""Test PNG decoding and RGBA normalization."""

from __future__ import annotations

import io
import struct
import warnings
import zlib
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from idtech3tga.encoding.images import load_raster, raster_from_image
from idtech3tga.exceptions import (
    DecodeError,
    DimensionOverflowError,
    InputUnreadableError,
    InvalidDimensionsError,
)


def _png_chunk(kind: bytes, payload: bytes) -> bytes:
    return (
        struct.pack(">I", len(payload))
        + kind
        + payload
        + struct.pack(">I", zlib.crc32(kind + payload) & 0xFFFFFFFF)
    )


def _rgb16_png(width: int, height: int, rows: list[list[tuple[int, int, int]]], trns=None) -> bytes:
    """Hand-built 16-bit RGB PNG; Pillow cannot write this color type."""
    ihdr = struct.pack(">IIBBBBB", width, height, 16, 2, 0, 0, 0)
    raw = b"".join(
        b"\x00" + b"".join(struct.pack(">HHH", *pixel) for pixel in row) for row in rows
    )
    data = b"\x89PNG\r\n\x1a\n" + _png_chunk(b"IHDR", ihdr)
    if trns is not None:
        data += _png_chunk(b"tRNS", struct.pack(">HHH", *trns))
    return data + _png_chunk(b"IDAT", zlib.compress(raw)) + _png_chunk(b"IEND", b"")


def _pixels(raster) -> list[tuple[int, ...]]:
    return [tuple(int(v) for v in px) for px in raster.as_array().reshape(-1, 4)]


class TestLoadRaster:
    """Test loading PNG files of various color types."""

    def test_rgba(self, write_png):
        image = Image.new("RGBA", (2, 1))
        image.putpixel((0, 0), (1, 2, 3, 4))
        image.putpixel((1, 0), (5, 6, 7, 0))
        raster = load_raster(write_png(image))
        assert (raster.width, raster.height) == (2, 1)
        assert _pixels(raster) == [(1, 2, 3, 4), (5, 6, 7, 0)]

    def test_rgb_gets_opaque_alpha(self, write_png):
        raster = load_raster(write_png(Image.new("RGB", (2, 2), (9, 8, 7))))
        assert _pixels(raster) == [(9, 8, 7, 255)] * 4

    def test_top_row_first(self, write_png):
        image = Image.new("RGB", (1, 2))
        image.putpixel((0, 0), (1, 1, 1))
        image.putpixel((0, 1), (2, 2, 2))
        raster = load_raster(write_png(image))
        assert _pixels(raster) == [(1, 1, 1, 255), (2, 2, 2, 255)]

    def test_grayscale_expands_to_rgb(self, write_png):
        raster = load_raster(write_png(Image.new("L", (1, 1), 77)))
        assert _pixels(raster) == [(77, 77, 77, 255)]

    def test_grayscale_alpha(self, write_png):
        raster = load_raster(write_png(Image.new("LA", (1, 1), (50, 60))))
        assert _pixels(raster) == [(50, 50, 50, 60)]

    def test_palette_with_transparency(self, write_png):
        image = Image.new("P", (2, 1))
        image.putpalette([255, 0, 0, 0, 255, 0])
        image.putpixel((0, 0), 0)
        image.putpixel((1, 0), 1)
        raster = load_raster(write_png(image, transparency=0))
        assert _pixels(raster) == [(255, 0, 0, 0), (0, 255, 0, 255)]

    def test_16_bit_grayscale_keeps_high_byte(self, write_png):
        image = Image.fromarray(np.array([[0x1234, 0xFFFF, 0x00FF]], dtype=np.uint16))
        raster = load_raster(write_png(image))
        assert _pixels(raster) == [
            (0x12, 0x12, 0x12, 255),
            (0xFF, 0xFF, 0xFF, 255),
            (0x00, 0x00, 0x00, 255),
        ]

    def test_16_bit_rgb_with_transparency(self, tmp_path: Path):
        path = tmp_path / "rgb16.png"
        path.write_bytes(_rgb16_png(
            2, 1,
            [[(0x1234, 0x5678, 0x9ABC), (0x0100, 0x0200, 0x0300)]],
            trns=(0x1234, 0x5678, 0x9ABC),
        ))
        raster = load_raster(path)
        assert _pixels(raster) == [(0x12, 0x56, 0x9A, 0), (0x01, 0x02, 0x03, 255)]

    def test_16_bit_rgb_without_transparency(self, tmp_path: Path):
        path = tmp_path / "rgb16.png"
        path.write_bytes(_rgb16_png(1, 1, [[(0xFF00, 0x8000, 0x0000)]]))
        assert _pixels(load_raster(path)) == [(0xFF, 0x80, 0x00, 255)]

    def test_large_image_not_treated_as_bomb(self, write_png, monkeypatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
        path = write_png(Image.new("RGB", (8, 8), (1, 2, 3)))
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            raster = load_raster(path)
        assert raster.pixel_count == 64
        assert Image.MAX_IMAGE_PIXELS == 10

    def test_oversized_header_rejected_before_decoding(self, tmp_path: Path):
        path = tmp_path / "wide.png"
        path.write_bytes(_rgb16_png(70000, 1, []))
        with pytest.raises(DimensionOverflowError):
            load_raster(path)

    def test_accepts_str_path(self, write_png):
        raster = load_raster(str(write_png(Image.new("RGB", (1, 1)))))
        assert raster.pixel_count == 1

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(InputUnreadableError, match="failed to open input PNG"):
            load_raster(tmp_path / "missing.png")

    def test_directory_is_unreadable(self, tmp_path: Path):
        with pytest.raises(InputUnreadableError):
            load_raster(tmp_path)

    def test_garbage_data(self, tmp_path: Path):
        path = tmp_path / "garbage.png"
        path.write_bytes(b"this is not an image")
        with pytest.raises(DecodeError, match="failed to decode PNG"):
            load_raster(path)

    def test_other_format_rejected(self, tmp_path: Path):
        path = tmp_path / "actually.png"
        Image.new("RGB", (2, 2)).save(path, format="BMP")
        with pytest.raises(DecodeError):
            load_raster(path)

    def test_truncated_png(self, tmp_path: Path):
        rng = np.random.default_rng(7)
        image = Image.fromarray(rng.integers(0, 256, size=(64, 64, 3), dtype=np.uint8))
        encoded = io.BytesIO()
        image.save(encoded, format="PNG")

        path = tmp_path / "truncated.png"
        path.write_bytes(encoded.getvalue()[: len(encoded.getvalue()) // 2])

        with pytest.raises(DecodeError):
            load_raster(path)


class TestRasterFromImage:
    """Test normalization of in-memory images."""

    def test_rgba_passthrough(self):
        image = Image.new("RGBA", (3, 1), (4, 5, 6, 7))
        assert raster_from_image(image).pixels == bytes([4, 5, 6, 7]) * 3

    def test_one_bit(self):
        image = Image.new("1", (2, 1))
        image.putpixel((1, 0), 1)
        assert _pixels(raster_from_image(image)) == [(0, 0, 0, 255), (255, 255, 255, 255)]

    def test_empty_image_rejected(self):
        with pytest.raises(InvalidDimensionsError):
            raster_from_image(Image.new("RGBA", (0, 3)))
