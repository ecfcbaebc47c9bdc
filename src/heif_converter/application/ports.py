"""Application ports for clean architecture boundaries."""

from __future__ import annotations

from typing import Protocol

from PIL import Image

from heif_converter.application.events import ConversionEvent
from heif_converter.types import ThumbnailSize


class HeifImage(Protocol):
    """A parsed HEIF container whose pixels are decoded on demand."""

    def read_exif(self) -> bytes | None:
        """Return the primary image's EXIF block, or ``None`` when absent."""

    def decode(self) -> Image.Image:
        """Decode the primary image into memory."""


class HeifDecoder(Protocol):
    """Parse HEIF container bytes."""

    def open(self, data: bytes) -> HeifImage:
        """Parse the container once; EXIF and pixels are read from the result."""


class JpegEncoder(Protocol):
    """Encode an in-memory image as JPEG bytes."""

    def encode(self, image: Image.Image, quality: int | None = None) -> bytes:
        """Encode image; ``None`` quality keeps the encoder default."""


class ThumbnailRenderer(Protocol):
    """Render a fixed-size thumbnail from an encoded JPEG."""

    def render(self, jpeg_bytes: bytes, size: ThumbnailSize) -> bytes:
        """Return thumbnail JPEG bytes of exactly ``size`` pixels."""


class EventSink(Protocol):
    """Receive conversion events; must accept concurrent callers."""

    def emit(self, event: ConversionEvent) -> None:
        """Deliver one event."""
