"""JPEG encoders implementing application ports."""

from __future__ import annotations

import io

from PIL import Image

from heif_converter.errors import EncodeError

_JPEG_MODES = ("RGB", "L", "CMYK")


class PillowJpegEncoder:
    """Encode Pillow images as baseline JPEG."""

    def encode(self, image: Image.Image, quality: int | None = None) -> bytes:
        """Encode ``image`` into JPEG bytes.

        Parameters
        ----------
        image : PIL.Image.Image
            Decoded image. Modes JPEG cannot carry (alpha, 16-bit) are
            converted to RGB first.
        quality : int | None, default=None
            JPEG quality 1-100. ``None`` keeps Pillow's default.

        Returns
        -------
        bytes
            Encoded JPEG stream, starting with the SOI marker.
        """
        if image.mode not in _JPEG_MODES:
            image = image.convert("RGB")

        save_kwargs: dict[str, int] = {}
        if quality is not None:
            save_kwargs["quality"] = quality

        buffer = io.BytesIO()
        try:
            image.save(buffer, format="JPEG", **save_kwargs)
        except (OSError, ValueError) as exc:
            raise EncodeError(f"JPEG encoding failed: {exc}") from exc
        return buffer.getvalue()
