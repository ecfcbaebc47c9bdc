"""EXIF splicing helpers for encoded JPEG streams."""

from __future__ import annotations

import struct

from heif_converter.errors import ExifTooLargeError

SOI_MARKER = b"\xff\xd8"
APP1_MARKER = b"\xff\xe1"
MAX_SEGMENT_LENGTH = 0xFFFF
MAX_EXIF_PAYLOAD = MAX_SEGMENT_LENGTH - 2

_SOS = 0xDA
_EOI = 0xD9
_STANDALONE_MARKERS = frozenset({0x01, *range(0xD0, 0xD8)})


def splice_exif(jpeg_bytes: bytes, exif_bytes: bytes) -> bytes:
    """Insert an APP1 segment carrying ``exif_bytes`` right after the SOI marker.

    Parameters
    ----------
    jpeg_bytes : bytes
        Encoded JPEG stream.
    exif_bytes : bytes
        Raw EXIF payload. Its content is not interpreted.

    Returns
    -------
    bytes
        New JPEG stream with the APP1 segment, or ``jpeg_bytes`` unchanged when
        it does not start with the SOI marker.

    Raises
    ------
    ExifTooLargeError
        If the payload does not fit the 16-bit segment length field.
    """
    if len(jpeg_bytes) < 2 or jpeg_bytes[:2] != SOI_MARKER:
        return jpeg_bytes

    segment_length = len(exif_bytes) + 2
    if segment_length > MAX_SEGMENT_LENGTH:
        raise ExifTooLargeError(
            f"EXIF payload of {len(exif_bytes)} bytes exceeds the "
            f"{MAX_EXIF_PAYLOAD}-byte APP1 limit."
        )

    return b"".join(
        (
            SOI_MARKER,
            APP1_MARKER,
            struct.pack(">H", segment_length),
            exif_bytes,
            jpeg_bytes[2:],
        )
    )


def read_app1_segment(jpeg_bytes: bytes) -> bytes | None:
    """Return the payload of the first APP1 segment before the scan data.

    Returns ``None`` when the stream is not a JPEG, is truncated, or carries no
    APP1 segment ahead of start-of-scan.
    """
    if jpeg_bytes[:2] != SOI_MARKER:
        return None

    offset = 2
    size = len(jpeg_bytes)
    while offset < size:
        if jpeg_bytes[offset] != 0xFF:
            return None
        # Skip fill bytes between segments.
        while offset < size and jpeg_bytes[offset] == 0xFF:
            offset += 1
        if offset >= size:
            return None
        marker = jpeg_bytes[offset]
        offset += 1
        if marker in (_SOS, _EOI):
            return None
        if marker in _STANDALONE_MARKERS:
            continue
        if offset + 2 > size:
            return None
        (length,) = struct.unpack(">H", jpeg_bytes[offset : offset + 2])
        if length < 2 or offset + length > size:
            return None
        if marker == APP1_MARKER[1]:
            return jpeg_bytes[offset + 2 : offset + length]
        offset += length
    return None
