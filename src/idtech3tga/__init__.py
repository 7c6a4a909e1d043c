"""idTech 3 TGA codec.

  Converts decoded raster images into run-length-encoded 32-bit truecolor
  TGA files readable by idTech 3 family engines.
  """

from .encoding import (
    PacketEncoder,
    ReorderedBuffer,
    ScanState,
    decode_packets,
    encode_packets,
    load_raster,
    raster_from_image,
    reorder,
)
from .exceptions import (
    DecodeError,
    DimensionOverflowError,
    InputUnreadableError,
    InvalidDimensionsError,
    OutputWriteError,
    TgaError,
)
from .models import (
    MAX_DIMENSION,
    MAX_PACKET_PIXELS,
    ChannelOrder,
    ImageType,
    Packet,
    Raster,
    RawPacket,
    RlePacket,
)
from .protocol import HEADER_SIZE, TgaHeader, build_header, parse_header
from .writer import convert, derive_output_path, encode_tga, read_tga, save_tga, write_tga

__version__ = "0.1.0"

__all__ = [
    # Main API
    "convert",
    "load_raster",
    "save_tga",
    "write_tga",
    "encode_tga",
    "read_tga",
    "derive_output_path",
    # Pipeline stages
    "raster_from_image",
    "reorder",
    "encode_packets",
    "decode_packets",
    "build_header",
    "parse_header",
    "PacketEncoder",
    "ScanState",
    # Exceptions
    "TgaError",
    "InputUnreadableError",
    "DecodeError",
    "InvalidDimensionsError",
    "DimensionOverflowError",
    "OutputWriteError",
    # Models
    "Raster",
    "ReorderedBuffer",
    "RlePacket",
    "RawPacket",
    "Packet",
    "TgaHeader",
    # Enums
    "ChannelOrder",
    "ImageType",
    # Constants
    "HEADER_SIZE",
    "MAX_DIMENSION",
    "MAX_PACKET_PIXELS",
]
