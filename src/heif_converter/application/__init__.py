"""Application-layer use-cases and option objects."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from heif_converter.application.events import (
    ConversionComplete,
    ConversionEvent,
    ConversionFailed,
    ConversionProgress,
)
from heif_converter.application.options import BatchOptions, ConversionOptions
from heif_converter.application.ports import (
    EventSink,
    HeifDecoder,
    JpegEncoder,
    ThumbnailRenderer,
)
from heif_converter.application.results import BatchResult, ConversionRecord
from heif_converter.types import PathInput, ThumbnailSize


def build_conversion_options(
    *,
    quality: int | None = None,
    thumbnail: bool = False,
    thumbnail_size: ThumbnailSize = (200, 200),
    require_exif: bool = False,
    output_dir_name: str = "convert",
) -> ConversionOptions:
    """Build typed conversion options via lazy use-case import."""
    from heif_converter.application.use_cases import build_conversion_options as _impl

    return _impl(
        quality=quality,
        thumbnail=thumbnail,
        thumbnail_size=thumbnail_size,
        require_exif=require_exif,
        output_dir_name=output_dir_name,
    )


def output_path_for(path: PathInput, output_dir_name: str = "convert") -> Path:
    """Compute the JPEG destination for an input path via lazy use-case import."""
    from heif_converter.application.use_cases import output_path_for as _impl

    return _impl(path, output_dir_name)


def convert_file(
    path: PathInput,
    *,
    options: ConversionOptions | None = None,
    decoder: HeifDecoder | None = None,
    encoder: JpegEncoder | None = None,
    thumbnailer: ThumbnailRenderer | None = None,
) -> ConversionRecord:
    """Convert one HEIF file via lazy use-case import."""
    from heif_converter.application.use_cases import convert_file as _impl

    return _impl(
        path,
        options=options,
        decoder=decoder,
        encoder=encoder,
        thumbnailer=thumbnailer,
    )


def convert_batch(
    paths: Iterable[PathInput],
    *,
    sink: EventSink,
    options: BatchOptions | None = None,
    decoder: HeifDecoder | None = None,
    encoder: JpegEncoder | None = None,
    thumbnailer: ThumbnailRenderer | None = None,
) -> BatchResult:
    """Convert many HEIF files via lazy use-case import."""
    from heif_converter.application.use_cases import convert_batch as _impl

    return _impl(
        paths,
        sink=sink,
        options=options,
        decoder=decoder,
        encoder=encoder,
        thumbnailer=thumbnailer,
    )


__all__ = [
    "BatchOptions",
    "BatchResult",
    "ConversionComplete",
    "ConversionEvent",
    "ConversionFailed",
    "ConversionOptions",
    "ConversionProgress",
    "ConversionRecord",
    "EventSink",
    "build_conversion_options",
    "convert_batch",
    "convert_file",
    "output_path_for",
]
