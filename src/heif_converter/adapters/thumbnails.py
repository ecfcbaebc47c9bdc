"""Thumbnail renderers implementing application ports."""

from __future__ import annotations

import io

from PIL import Image, ImageOps

from heif_converter.errors import EncodeError
from heif_converter.types import ThumbnailSize


class PillowThumbnailRenderer:
    """Center-crop and resize an encoded JPEG to an exact thumbnail size."""

    def render(self, jpeg_bytes: bytes, size: ThumbnailSize) -> bytes:
        """Render a JPEG thumbnail of exactly ``size`` pixels."""
        try:
            with Image.open(io.BytesIO(jpeg_bytes)) as source:
                thumb = ImageOps.fit(
                    source.convert("RGB"),
                    size,
                    method=Image.Resampling.LANCZOS,
                )
            buffer = io.BytesIO()
            thumb.save(buffer, format="JPEG")
        except (OSError, ValueError) as exc:
            raise EncodeError(f"Thumbnail rendering failed: {exc}") from exc
        return buffer.getvalue()
