"""Public file-based conversion API (delegates to application use-cases)."""

from __future__ import annotations

from typing import Iterable
from typing import Optional

from heif_converter.application.options import BatchOptions
from heif_converter.application.ports import EventSink
from heif_converter.application.results import BatchResult, ConversionRecord
from heif_converter.application.use_cases import build_conversion_options
from heif_converter.application.use_cases import convert_batch
from heif_converter.application.use_cases import convert_file
from heif_converter.infrastructure.event_sinks import LoggingEventSink
from heif_converter.types import PathInput


def convert_heif_file_to_jpeg(
    path: PathInput,
    quality: Optional[int] = None,
    thumbnail: bool = False,
    require_exif: bool = False,
) -> ConversionRecord:
    """Convert one HEIF/HEIC file into ``convert/<name>.jpg`` beside it."""
    options = build_conversion_options(
        quality=quality,
        thumbnail=thumbnail,
        require_exif=require_exif,
    )
    return convert_file(path, options=options)


def convert_heif_files_to_jpeg(
    paths: Iterable[PathInput],
    sink: Optional[EventSink] = None,
    max_workers: Optional[int] = None,
    quality: Optional[int] = None,
    thumbnail: bool = False,
    require_exif: bool = False,
) -> BatchResult:
    """Convert many HEIF/HEIC files concurrently, reporting through ``sink``.

    Without a sink, events are written to the ``logging`` module.
    """
    options = BatchOptions(
        max_workers=max_workers,
        conversion=build_conversion_options(
            quality=quality,
            thumbnail=thumbnail,
            require_exif=require_exif,
        ),
    )
    return convert_batch(paths, sink=sink or LoggingEventSink(), options=options)


__all__ = [
    "convert_heif_file_to_jpeg",
    "convert_heif_files_to_jpeg",
]
