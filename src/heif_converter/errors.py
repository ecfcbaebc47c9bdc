"""Error taxonomy for HEIF to JPEG conversion."""

from __future__ import annotations


class ConversionError(Exception):
    """Base error for a failed file conversion."""

    exit_code = 1


class DecodeError(ConversionError):
    """HEIF container is malformed or unsupported."""

    exit_code = 3


class MetadataError(ConversionError):
    """EXIF metadata was required but is missing or unreadable."""

    exit_code = 4


class EncodeError(ConversionError):
    """JPEG encoder rejected the decoded image."""

    exit_code = 5


class ExifTooLargeError(EncodeError):
    """EXIF payload does not fit the 16-bit APP1 length field."""


class OutputCollisionError(ConversionError):
    """Output path is already claimed by another input in the same batch."""

    exit_code = 6
