"""HEIF decoders implementing application ports."""

from __future__ import annotations

import io

import pillow_heif
from PIL import Image

from heif_converter.errors import DecodeError

EXIF_IDENTIFIER = b"Exif\x00\x00"


class PillowHeifImage:
    """Parsed pillow-heif container; pixel data is decoded lazily."""

    def __init__(self, heif_file: pillow_heif.HeifFile) -> None:
        self._heif_file = heif_file

    def read_exif(self) -> bytes | None:
        """Return the primary image's EXIF block.

        pillow-heif may hand back a bare TIFF structure; APP1 EXIF payloads
        must start with the ``Exif\\0\\0`` identifier, so it is added when
        missing.
        """
        exif = self._heif_file.info.get("exif")
        if not exif:
            return None
        exif = bytes(exif)
        if not exif.startswith(EXIF_IDENTIFIER):
            exif = EXIF_IDENTIFIER + exif
        return exif

    def decode(self) -> Image.Image:
        """Decode the primary image into a Pillow image."""
        try:
            return self._heif_file.to_pillow()
        except Exception as exc:
            raise DecodeError(f"Unable to decode HEIF image data: {exc}") from exc


class PillowHeifDecoder:
    """Decode HEIF/HEIC containers with pillow-heif."""

    def open(self, data: bytes) -> PillowHeifImage:
        """Parse container bytes without decoding pixels."""
        try:
            heif_file = pillow_heif.open_heif(io.BytesIO(data), convert_hdr_to_8bit=True)
        except Exception as exc:
            raise DecodeError(f"Unable to open HEIF container: {exc}") from exc
        return PillowHeifImage(heif_file)

    def read_exif(self, data: bytes) -> bytes | None:
        """Return the EXIF block of container bytes (used for output validation)."""
        return self.open(data).read_exif()
