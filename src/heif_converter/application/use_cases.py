"""Application use-cases orchestrating conversion workflows."""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Iterable
from dataclasses import asdict
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from pydantic import ValidationError

from heif_converter.adapters.decoders import PillowHeifDecoder
from heif_converter.adapters.encoders import PillowJpegEncoder
from heif_converter.adapters.thumbnails import PillowThumbnailRenderer
from heif_converter.application.events import (
    ConversionComplete,
    ConversionEvent,
    ConversionFailed,
    ConversionProgress,
)
from heif_converter.application.options import (
    DEFAULT_OUTPUT_DIR_NAME,
    DEFAULT_THUMBNAIL_SIZE,
    BatchOptions,
    ConversionOptions,
)
from heif_converter.application.ports import (
    EventSink,
    HeifDecoder,
    JpegEncoder,
    ThumbnailRenderer,
)
from heif_converter.application.results import BatchResult, ConversionRecord
from heif_converter.errors import ConversionError, MetadataError, OutputCollisionError
from heif_converter.exif import splice_exif
from heif_converter.schemas import BatchConversionConfig, FileConversionConfig
from heif_converter.types import PathInput, ThumbnailSize

logger = logging.getLogger(__name__)

OUTPUT_FILE_MODE = 0o644
OUTPUT_SUFFIX = ".jpg"


def build_conversion_options(
    *,
    quality: int | None = None,
    thumbnail: bool = False,
    thumbnail_size: ThumbnailSize = DEFAULT_THUMBNAIL_SIZE,
    require_exif: bool = False,
    output_dir_name: str = DEFAULT_OUTPUT_DIR_NAME,
) -> ConversionOptions:
    """Build typed conversion options."""
    return ConversionOptions(
        quality=quality,
        thumbnail=thumbnail,
        thumbnail_size=thumbnail_size,
        require_exif=require_exif,
        output_dir_name=output_dir_name,
    )


def output_path_for(path: PathInput, output_dir_name: str = DEFAULT_OUTPUT_DIR_NAME) -> Path:
    """Return ``<dir>/<output_dir_name>/<name>.jpg`` for an input path."""
    source = Path(path)
    return source.parent / output_dir_name / f"{source.name}{OUTPUT_SUFFIX}"


def _write_output(path: Path, data: bytes) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, OUTPUT_FILE_MODE)
    with os.fdopen(fd, "wb") as handle:
        handle.write(data)


def _validate_file_config(path: Path, options: ConversionOptions) -> FileConversionConfig:
    try:
        return FileConversionConfig(
            input_path=path,
            quality=options.quality,
            thumbnail=options.thumbnail,
            thumbnail_size=options.thumbnail_size,
            require_exif=options.require_exif,
            output_dir_name=options.output_dir_name,
        )
    except ValidationError as exc:
        raise ConversionError(f"Invalid conversion parameters: {exc}") from exc


def convert_file(
    path: PathInput,
    *,
    options: ConversionOptions | None = None,
    decoder: HeifDecoder | None = None,
    encoder: JpegEncoder | None = None,
    thumbnailer: ThumbnailRenderer | None = None,
) -> ConversionRecord:
    """Use-case: convert one HEIF file into ``convert/<name>.jpg`` beside it.

    Every step is fatal for the file. ``OSError`` from the filesystem is
    propagated unchanged; codec failures surface as ``ConversionError``
    subclasses. No record is returned on failure.
    """
    options = options or ConversionOptions()
    config = _validate_file_config(Path(path), options)
    source = config.input_path

    decoder = decoder or PillowHeifDecoder()
    encoder = encoder or PillowJpegEncoder()
    if config.thumbnail:
        thumbnailer = thumbnailer or PillowThumbnailRenderer()

    started = time.perf_counter()
    data = source.read_bytes()
    logger.debug("read %s (%d bytes)", source, len(data))

    heif = decoder.open(data)
    exif = heif.read_exif()
    if not exif and config.require_exif:
        raise MetadataError(f"No EXIF metadata found in {source}")

    image = heif.decode()
    logger.debug("decoded %s: %sx%s %s", source, image.width, image.height, image.mode)

    jpeg_bytes = encoder.encode(image, quality=config.quality)
    if exif:
        jpeg_bytes = splice_exif(jpeg_bytes, exif)

    output_path = output_path_for(source, config.output_dir_name)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    _write_output(output_path, jpeg_bytes)
    logger.debug("wrote %s", output_path)

    original_size = source.stat().st_size
    output_size = output_path.stat().st_size

    thumbnail: bytes | None = None
    if config.thumbnail and thumbnailer is not None:
        thumbnail = thumbnailer.render(jpeg_bytes, config.thumbnail_size)

    elapsed = time.perf_counter() - started
    logger.info("converted %s -> %s in %.3fs", source, output_path, elapsed)
    return ConversionRecord(
        original_path=source,
        original_size=original_size,
        output_path=output_path,
        output_size=output_size,
        elapsed_seconds=elapsed,
        thumbnail=thumbnail,
    )


def _default_max_workers() -> int:
    return os.cpu_count() or 4


def _describe_error(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def _emit(sink: EventSink, event: ConversionEvent) -> None:
    try:
        sink.emit(event)
    except Exception:
        logger.exception("event sink failed to accept %s", event.kind)


def _claim_output_paths(
    paths: list[Path],
    output_dir_name: str,
) -> tuple[list[Path], list[tuple[Path, Exception]]]:
    """Split inputs into schedulable paths and output-path collisions.

    The first input to claim an output path keeps it; later inputs mapping to
    the same resolved path are rejected, as are inputs whose path cannot be
    resolved (for example a symlink loop).
    """
    claimed: dict[Path, Path] = {}
    accepted: list[Path] = []
    rejected: list[tuple[Path, Exception]] = []
    for path in paths:
        try:
            target = output_path_for(path.resolve(), output_dir_name)
        except (OSError, RuntimeError) as exc:
            rejected.append((path, exc))
            continue
        owner = claimed.get(target)
        if owner is not None:
            rejected.append(
                (
                    path,
                    OutputCollisionError(
                        f"Output path {target} is already claimed by {owner}"
                    ),
                )
            )
            continue
        claimed[target] = path
        accepted.append(path)
    return accepted, rejected


def convert_batch(
    paths: Iterable[PathInput],
    *,
    sink: EventSink,
    options: BatchOptions | None = None,
    decoder: HeifDecoder | None = None,
    encoder: JpegEncoder | None = None,
    thumbnailer: ThumbnailRenderer | None = None,
) -> BatchResult:
    """Use-case: convert many files on a bounded worker pool.

    Emits one progress event per converted file, one error event per failed
    file, and a single complete event once every task has finished. A failed
    file never aborts its siblings.
    """
    options = options or BatchOptions()
    try:
        config = BatchConversionConfig(
            input_paths=[Path(path) for path in paths],
            max_workers=options.max_workers,
            conversion=asdict(options.conversion),
        )
    except ValidationError as exc:
        raise ConversionError(f"Invalid batch parameters: {exc}") from exc

    conversion = options.conversion
    decoder = decoder or PillowHeifDecoder()
    encoder = encoder or PillowJpegEncoder()
    if conversion.thumbnail:
        thumbnailer = thumbnailer or PillowThumbnailRenderer()

    started = time.perf_counter()
    accepted, rejected = _claim_output_paths(
        config.input_paths, config.conversion.output_dir_name
    )
    for path, error in rejected:
        logger.warning("skipping %s: %s", path, error)
        _emit(sink, ConversionFailed(path=path, error=_describe_error(error)))

    def run_task(path: Path) -> ConversionRecord | None:
        try:
            record = convert_file(
                path,
                options=conversion,
                decoder=decoder,
                encoder=encoder,
                thumbnailer=thumbnailer,
            )
        except (ConversionError, OSError) as exc:
            logger.warning("conversion of %s failed: %s", path, exc)
            _emit(sink, ConversionFailed(path=path, error=_describe_error(exc)))
            return None
        except Exception as exc:
            logger.exception("unexpected error converting %s", path)
            _emit(sink, ConversionFailed(path=path, error=_describe_error(exc)))
            return None
        _emit(sink, ConversionProgress(record=record))
        return record

    records: list[ConversionRecord] = []
    if accepted:
        max_workers = min(config.max_workers or _default_max_workers(), len(accepted))
        logger.info("converting %d file(s) with %d worker(s)", len(accepted), max_workers)
        with ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="heif-convert",
        ) as executor:
            futures = [executor.submit(run_task, path) for path in accepted]
            for future in as_completed(futures):
                record = future.result()
                if record is not None:
                    records.append(record)

    result = BatchResult(
        total_seconds=time.perf_counter() - started,
        records=tuple(records),
    )
    logger.info(
        "batch finished: %d of %d converted in %d ms",
        len(records),
        len(config.input_paths),
        result.total_ms,
    )
    _emit(sink, ConversionComplete(result=result))
    return result
