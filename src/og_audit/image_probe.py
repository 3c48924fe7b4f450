"""Read image dimensions from PNG/JPEG headers without decoding pixels."""

import struct
from typing import NamedTuple, Optional


PNG_SIGNATURE = b"\x89PNG"
JPEG_SOI = b"\xff\xd8"

# SOF0-SOF3 carry the frame header with height/width
SOF_MARKERS = range(0xC0, 0xC4)
# Markers without a length field
STANDALONE_MARKERS = {0x01, *range(0xD0, 0xD8)}
# No frame header can follow these
TERMINAL_MARKERS = {0xD9, 0xDA}


class Dimensions(NamedTuple):
    width: int
    height: int

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


def probe_dimensions(data: bytes) -> Optional[Dimensions]:
    """Get (width, height) of a PNG or JPEG image.

    Returns None when the format is not recognized or the header is
    truncated.
    """
    if data[:4] == PNG_SIGNATURE:
        return _png_dimensions(data)
    if data[:2] == JPEG_SOI:
        return _jpeg_dimensions(data)
    return None


def _png_dimensions(data: bytes) -> Optional[Dimensions]:
    # IHDR data starts at byte 16: width, height as big-endian uint32
    if len(data) < 24:
        return None
    width, height = struct.unpack_from(">II", data, 16)
    return Dimensions(width, height)


def _jpeg_dimensions(data: bytes) -> Optional[Dimensions]:
    offset = 2  # past SOI

    while offset + 1 < len(data):
        if data[offset] != 0xFF:
            return None

        marker = data[offset + 1]

        if marker == 0xFF:
            # fill byte
            offset += 1
            continue
        if marker in STANDALONE_MARKERS:
            offset += 2
            continue
        if marker in TERMINAL_MARKERS:
            return None

        if marker in SOF_MARKERS:
            # FF Cn, length(2), precision(1), height(2), width(2)
            if offset + 9 > len(data):
                return None
            height, width = struct.unpack_from(">HH", data, offset + 5)
            return Dimensions(width, height)

        if offset + 4 > len(data):
            return None
        (length,) = struct.unpack_from(">H", data, offset + 2)
        if length < 2:
            return None
        offset += 2 + length

    return None
