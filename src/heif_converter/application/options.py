"""Typed option objects shared across conversion use-cases."""

from __future__ import annotations

from dataclasses import dataclass

from heif_converter.types import ThumbnailSize

DEFAULT_OUTPUT_DIR_NAME = "convert"
DEFAULT_THUMBNAIL_SIZE: ThumbnailSize = (200, 200)


@dataclass(frozen=True)
class ConversionOptions:
    """Per-file conversion options.

    ``quality`` of ``None`` keeps the JPEG encoder's default quality.
    """

    quality: int | None = None
    thumbnail: bool = False
    thumbnail_size: ThumbnailSize = DEFAULT_THUMBNAIL_SIZE
    require_exif: bool = False
    output_dir_name: str = DEFAULT_OUTPUT_DIR_NAME


@dataclass(frozen=True)
class BatchOptions:
    """Batch scheduling options."""

    max_workers: int | None = None
    conversion: ConversionOptions = ConversionOptions()
