"""JPEG output validation helpers."""

from __future__ import annotations

from pathlib import Path

from PIL import Image

from heif_converter.errors import ConversionError
from heif_converter.exif import read_app1_segment


def validate_jpeg_if_requested(
    output_path: Path,
    validate: bool,
    expect_exif: bytes | None = None,
) -> None:
    """Validate a written JPEG when validation is enabled.

    Parameters
    ----------
    output_path : Path
        Path to the JPEG file.
    validate : bool
        Whether validation should be executed.
    expect_exif : bytes | None, default=None
        When given, the first APP1 payload must match it byte for byte.

    Raises
    ------
    ConversionError
        If the file does not decode as JPEG or its EXIF segment differs.
    """
    if not validate:
        return

    try:
        with Image.open(output_path) as image:
            if image.format != "JPEG":
                raise ConversionError(
                    f"JPEG validation failed: {output_path} is {image.format}"
                )
            image.load()
    except ConversionError:
        raise
    except Exception as exc:
        raise ConversionError(f"JPEG validation failed: {exc}") from exc

    if expect_exif is not None:
        actual = read_app1_segment(output_path.read_bytes())
        if actual != expect_exif:
            raise ConversionError(
                f"JPEG validation failed: EXIF segment of {output_path} "
                "does not match the source metadata."
            )
