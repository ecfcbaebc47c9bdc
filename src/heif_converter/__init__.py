"""Top-level API for HEIF/HEIC to JPEG conversion."""

from __future__ import annotations

from collections.abc import Iterable

from heif_converter.application.ports import EventSink
from heif_converter.application.results import BatchResult, ConversionRecord
from heif_converter.types import PathInput

__version__ = "0.1.0"


def convert_heif_file(
    path: PathInput,
    *,
    quality: int | None = None,
    thumbnail: bool = False,
    require_exif: bool = False,
) -> ConversionRecord:
    """Convert one HEIF/HEIC file to JPEG.

    Parameters
    ----------
    path : str | os.PathLike
        Source HEIF/HEIC file.
    quality : int | None, default=None
        JPEG quality 1-100. ``None`` keeps the encoder default.
    thumbnail : bool, default=False
        Whether to render a 200x200 JPEG thumbnail of the output.
    require_exif : bool, default=False
        Fail when the source carries no EXIF block instead of writing the
        JPEG without one.

    Returns
    -------
    ConversionRecord
        Sizes, paths and timing of the written ``convert/<name>.jpg`` file.
    """
    from .api import convert_heif_file_to_jpeg as _impl

    return _impl(
        path,
        quality=quality,
        thumbnail=thumbnail,
        require_exif=require_exif,
    )


def convert_heif_files(
    paths: Iterable[PathInput],
    *,
    sink: EventSink | None = None,
    max_workers: int | None = None,
    quality: int | None = None,
    thumbnail: bool = False,
    require_exif: bool = False,
) -> BatchResult:
    """Convert several HEIF/HEIC files concurrently.

    Parameters
    ----------
    paths : Iterable[str | os.PathLike]
        Source files.
    sink : EventSink | None, default=None
        Receives ``conversion_progress``, ``conversion_error`` and
        ``conversion_complete`` events. Defaults to logging them.
    max_workers : int | None, default=None
        Worker pool size. Defaults to the CPU count.

    Returns
    -------
    BatchResult
        Total elapsed time and the successful records in completion order.
    """
    from .api import convert_heif_files_to_jpeg as _impl

    return _impl(
        paths,
        sink=sink,
        max_workers=max_workers,
        quality=quality,
        thumbnail=thumbnail,
        require_exif=require_exif,
    )


def splice_exif(jpeg_bytes: bytes, exif_bytes: bytes) -> bytes:
    """Insert an EXIF APP1 segment after the JPEG SOI marker."""
    from .exif import splice_exif as _impl

    return _impl(jpeg_bytes, exif_bytes)


__all__ = [
    "convert_heif_file",
    "convert_heif_files",
    "splice_exif",
]
