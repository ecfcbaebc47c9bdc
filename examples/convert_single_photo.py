#!/usr/bin/env python3
"""Example: convert one generated HEIF photo and check its EXIF survived."""

from __future__ import annotations

import tempfile
from pathlib import Path

import pillow_heif
from PIL import Image

from heif_converter import convert_heif_file
from heif_converter.validate import validate_jpeg_if_requested

MAKE_TAG = 0x010F


def _make_source(directory: Path) -> Path:
    pillow_heif.register_heif_opener()
    exif = Image.Exif()
    exif[MAKE_TAG] = "ExampleCam"
    source = directory / "IMG_0001.heic"
    Image.new("RGB", (640, 480), (40, 120, 200)).save(
        source, format="HEIF", quality=90, exif=exif.tobytes()
    )
    return source


def main() -> None:
    """Convert, validate, and print the resulting record."""
    with tempfile.TemporaryDirectory() as tmp:
        source = _make_source(Path(tmp))
        record = convert_heif_file(source, quality=90, thumbnail=True)

        validate_jpeg_if_requested(record.output_path, validate=True)
        with Image.open(record.output_path) as jpeg:
            make = jpeg.getexif().get(MAKE_TAG)
        if make != "ExampleCam":
            raise SystemExit(f"FAIL: EXIF make tag lost (got {make!r}).")

        print(f"{record.original_path.name}: {record.original_size} bytes")
        print(f"{record.output_path.name}: {record.output_size} bytes")
        print(f"elapsed: {record.elapsed_ms} ms")
        print(f"thumbnail: {len(record.thumbnail or b'')} bytes")
        print("PASS: single photo converted.")


if __name__ == "__main__":
    main()
