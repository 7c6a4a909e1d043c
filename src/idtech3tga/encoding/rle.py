"""Run-length packet encoding for type 10 (RLE truecolor) TGA images.

Each packet starts with one header byte. The high bit is set for a
run-length packet and clear for a raw packet; the low 7 bits hold
count - 1, so a packet covers at most 128 pixels.

- RLE packet: [0x80 | count-1][pixel:4]
- Raw packet: [count-1][pixels:4*count]
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from enum import Enum

from ..exceptions import DecodeError
from ..models.packets import COUNT_MASK, MAX_PACKET_PIXELS, RLE_FLAG, Packet, RawPacket, RlePacket
from ..models.raster import BYTES_PER_PIXEL, check_tga_dimensions
from .reorder import ReorderedBuffer

_LOGGER = logging.getLogger(__name__)


class ScanState(Enum):
    """States of the packet encoder."""
    SCANNING_FOR_RUN = "scanning_for_run"
    ACCUMULATING_RAW = "accumulating_raw"


class PacketEncoder:
    """Greedy single-pass packet encoder over a reordered buffer.

    While scanning, a run of two or more identical pixels becomes an RLE
    packet. A lone pixel starts a raw packet, which grows one pixel at a
    time and stops just before the next duplicate pair, so that pair opens
    a fresh RLE packet. Packet boundaries follow from this rule alone, so
    output is byte-identical to other encoders that apply it.

    Usage:
        encoder = PacketEncoder(buffer)
        for packet in encoder:
            stream.write(packet.to_bytes())
    """

    def __init__(self, buffer: ReorderedBuffer, max_packet_pixels: int = MAX_PACKET_PIXELS):
        if not 2 <= max_packet_pixels <= MAX_PACKET_PIXELS:
            raise ValueError(
                f"max_packet_pixels out of range: {max_packet_pixels} (must be 2-{MAX_PACKET_PIXELS})"
            )
        self.buffer = buffer
        self.max_packet_pixels = max_packet_pixels
        self.state = ScanState.SCANNING_FOR_RUN
        self.position = 0
        self._raw_count = 0
        self._started = False

    def __iter__(self) -> Iterator[Packet]:
        if self._started:
            raise RuntimeError("PacketEncoder is single-pass; create a new encoder to re-encode")
        self._started = True
        while not self.done:
            packet = self.step()
            if packet is not None:
                yield packet

    @property
    def done(self) -> bool:
        return (
            self.state is ScanState.SCANNING_FOR_RUN
            and self.position >= self.buffer.pixel_count
        )

    def step(self) -> Packet | None:
        """Advance the state machine by one transition.

        Returns:
            The packet completed by this transition, or None if the
            transition only changed state or grew a raw packet
        """
        if self.done:
            return None
        if self.state is ScanState.SCANNING_FOR_RUN:
            return self._scan()
        return self._accumulate()

    def _scan(self) -> Packet | None:
        run = self.buffer.run_length(self.position, self.max_packet_pixels)
        if run >= 2:
            packet = RlePacket(run, self.buffer.pixel(self.position))
            self.position += run
            return packet

        self.state = ScanState.ACCUMULATING_RAW
        self._raw_count = 1
        return None

    def _raw_can_extend(self) -> bool:
        nxt = self.position + self._raw_count
        return (
            self._raw_count < self.max_packet_pixels
            and nxt < self.buffer.pixel_count
            and not self.buffer.starts_pair(nxt)
        )

    def _accumulate(self) -> Packet | None:
        if self._raw_can_extend():
            self._raw_count += 1
            return None

        packet = RawPacket(self._raw_count, self.buffer.pixels(self.position, self._raw_count))
        self.position += self._raw_count
        self._raw_count = 0
        self.state = ScanState.SCANNING_FOR_RUN
        return packet


def encode_packets(buffer: ReorderedBuffer, width: int, height: int) -> Iterator[Packet]:
    """Encode a reordered buffer as a lazy sequence of packets.

    Dimensions are validated before the iterator is returned, so errors
    surface before any packet work begins.

    Args:
        buffer: Pixels in TGA scan order
        width: Image width in pixels
        height: Image height in pixels

    Returns:
        Iterator over RLE and raw packets covering all width*height pixels

    Raises:
        InvalidDimensionsError: If width or height is not positive
        DimensionOverflowError: If width or height exceeds 65535
        ValueError: If the buffer does not hold width*height pixels
    """
    check_tga_dimensions(width, height)
    if buffer.pixel_count != width * height:
        raise ValueError(
            f"buffer holds {buffer.pixel_count} pixels, expected {width * height} for {width}x{height}"
        )
    return iter(PacketEncoder(buffer))


def decode_packets(data: bytes, pixel_count: int) -> bytes:
    """Expand an RLE packet stream back into raw pixel bytes.

    Args:
        data: Packet stream (no header)
        pixel_count: Number of pixels the stream must produce

    Returns:
        pixel_count * 4 bytes of pixel data

    Raises:
        DecodeError: If the stream is truncated or overruns pixel_count
    """
    output = bytearray()
    expected = pixel_count * BYTES_PER_PIXEL
    offset = 0
    packets = 0

    while len(output) < expected:
        if offset >= len(data):
            raise DecodeError(
                f"packet stream truncated: decoded {len(output) // BYTES_PER_PIXEL}/{pixel_count} pixels"
            )
        header = data[offset]
        offset += 1
        count = (header & COUNT_MASK) + 1

        if header & RLE_FLAG:
            size = BYTES_PER_PIXEL
            chunk = data[offset:offset + size]
            if len(chunk) != size:
                raise DecodeError(f"RLE packet at offset {offset - 1} truncated")
            output += chunk * count
        else:
            size = count * BYTES_PER_PIXEL
            chunk = data[offset:offset + size]
            if len(chunk) != size:
                raise DecodeError(f"raw packet at offset {offset - 1} truncated")
            output += chunk
        offset += size
        packets += 1

    if len(output) != expected:
        raise DecodeError(
            f"packet stream overruns image: {len(output) // BYTES_PER_PIXEL} pixels "
            f"for {pixel_count}-pixel image"
        )

    _LOGGER.debug("Decoded %d packets (%d bytes) into %d pixels", packets, offset, pixel_count)
    return bytes(output)
