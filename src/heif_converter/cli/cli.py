#!/usr/bin/env python3
"""
heif_converter.cli.app

Typer-based CLI for converting HEIF/HEIC photos to JPEG.

Every converted file is written to a ``convert`` directory next to its source,
named ``<source name>.jpg``, with the source EXIF block spliced back in.

Examples
--------
Convert one file (developer/debug entry point):

    heif2jpeg convert ~/Pictures/IMG_0001.HEIC --validate

Convert a folder with four workers and JSON-lines events:

    heif2jpeg batch ~/Pictures --max-workers 4 --json
"""

from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path

import typer

from heif_converter.application.events import (
    ConversionComplete,
    ConversionEvent,
    ConversionFailed,
    ConversionProgress,
)
from heif_converter.application.results import ConversionRecord
from heif_converter.errors import ConversionError

app = typer.Typer(
    name="heif2jpeg",
    help="Convert HEIF/HEIC photos to JPEG, keeping their EXIF metadata.",
    no_args_is_help=True,
)

QUALITY_HELP = "JPEG quality 1-100 (default: encoder default)."
THUMBNAIL_HELP = "Render a 200x200 JPEG thumbnail of each output."
REQUIRE_EXIF_HELP = "Fail files that carry no EXIF block instead of converting them."
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


# -----------------------------
# Utilities
# -----------------------------
def _print_conversion_error(exc: Exception, debug: bool) -> int:
    """Print a user-friendly conversion error.

    Parameters
    ----------
    exc : Exception
        Exception raised during conversion.
    debug : bool
        Whether to include traceback details.

    Returns
    -------
    int
        Process exit code.
    """
    typer.echo(f"✗ {type(exc).__name__}: {exc}", err=True)
    if debug:
        typer.echo("\nTraceback:", err=True)
        typer.echo("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)), err=True)
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


def _format_size(size: int) -> str:
    units = ["B", "KB", "MB", "GB", "TB"]
    value = float(size)
    idx = 0
    while value >= 1024 and idx < len(units) - 1:
        value /= 1024
        idx += 1
    if idx == 0:
        return f"{int(value)} {units[idx]}"
    return f"{value:.1f} {units[idx]}"


def _describe_record(record: ConversionRecord) -> str:
    return (
        f"{record.original_path} -> {record.output_path} "
        f"({_format_size(record.original_size)} -> {_format_size(record.output_size)}, "
        f"{record.elapsed_ms} ms)"
    )


def _echo_event(event: ConversionEvent) -> None:
    """Print one batch event as a human-readable line."""
    if isinstance(event, ConversionProgress):
        typer.echo(f"✓ {_describe_record(event.record)}")
    elif isinstance(event, ConversionFailed):
        typer.echo(f"✗ {event.path}: {event.error}", err=True)
    elif isinstance(event, ConversionComplete):
        typer.echo(
            f"Done: {len(event.result.records)} converted in {event.result.total_ms} ms"
        )


def _validate_if_requested(source: Path, record: ConversionRecord, validate: bool) -> None:
    """Validate the JPEG output against the source EXIF if requested."""
    if not validate:
        return

    from heif_converter.adapters.decoders import PillowHeifDecoder
    from heif_converter.validate import validate_jpeg_if_requested

    expected_exif = PillowHeifDecoder().read_exif(source.read_bytes())
    validate_jpeg_if_requested(record.output_path, validate=True, expect_exif=expected_exif)


# -----------------------------
# Global options
# -----------------------------
@app.callback()
def _main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Show full tracebacks on error."),
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        envvar="HEIF2JPEG_LOG_LEVEL",
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    ),
) -> None:
    """Initialize shared CLI state.

    Parameters
    ----------
    ctx : typer.Context
        Typer context object used to store shared state.
    debug : bool, default=False
        Whether to enable debug error output.
    log_level : str, default="WARNING"
        Standard logging level name for library log records.
    """
    level = log_level.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise typer.BadParameter(f"Unknown log level '{log_level}'.", param_hint="--log-level")
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)
    ctx.obj = {"debug": debug}


# -----------------------------
# Commands
# -----------------------------
@app.command("convert")
def convert_cmd(
    ctx: typer.Context,
    input_path: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Path to a .heic/.heif image.",
    ),
    quality: int | None = typer.Option(None, "--quality", min=1, max=100, help=QUALITY_HELP),
    thumbnail: bool = typer.Option(False, "--thumbnail", help=THUMBNAIL_HELP),
    require_exif: bool = typer.Option(False, "--require-exif", help=REQUIRE_EXIF_HELP),
    validate: bool = typer.Option(
        False, "--validate", help="Re-open the JPEG and compare its EXIF with the source."
    ),
) -> None:
    """Convert a single HEIF/HEIC file.

    Parameters
    ----------
    ctx : typer.Context
        Typer context containing global options.
    input_path : Path
        Source HEIF/HEIC file.
    quality : int | None, default=None
        JPEG quality override.
    validate : bool, default=False
        Whether to validate the written JPEG.
    """
    debug: bool = bool(ctx.obj.get("debug", False))

    try:
        from heif_converter.api import convert_heif_file_to_jpeg

        record = convert_heif_file_to_jpeg(
            input_path,
            quality=quality,
            thumbnail=thumbnail,
            require_exif=require_exif,
        )
        _validate_if_requested(input_path, record, validate)
        typer.echo(f"✓ Saved: {_describe_record(record)}")
        if record.thumbnail is not None:
            typer.echo(f"  thumbnail: {_format_size(len(record.thumbnail))}")
    except ConversionError as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))
    except Exception as exc:
        # Unexpected crash: still show a clean message; debug prints traceback.
        raise typer.Exit(code=_print_conversion_error(exc, debug))


@app.command("batch")
def batch_cmd(
    ctx: typer.Context,
    inputs: list[Path] = typer.Argument(
        ...,
        exists=True,
        help="HEIF/HEIC files or directories holding them (not recursive).",
    ),
    max_workers: int | None = typer.Option(
        None,
        "--max-workers",
        min=1,
        envvar="HEIF2JPEG_MAX_WORKERS",
        help="Parallel conversions (default: CPU count).",
    ),
    quality: int | None = typer.Option(None, "--quality", min=1, max=100, help=QUALITY_HELP),
    thumbnail: bool = typer.Option(False, "--thumbnail", help=THUMBNAIL_HELP),
    require_exif: bool = typer.Option(False, "--require-exif", help=REQUIRE_EXIF_HELP),
    json_lines: bool = typer.Option(
        False, "--json", help="Print events as JSON lines instead of text."
    ),
) -> None:
    """Convert many HEIF/HEIC files concurrently.

    Exits with 1 when any file failed and 2 when no HEIF input was found.
    """
    debug: bool = bool(ctx.obj.get("debug", False))

    from heif_converter.discovery import collect_heif_paths
    from heif_converter.infrastructure.event_sinks import (
        CallbackEventSink,
        FanoutEventSink,
        JsonLinesEventSink,
    )

    paths = collect_heif_paths(inputs)
    if not paths:
        typer.echo("✗ No HEIF/HEIC files found.", err=True)
        raise typer.Exit(code=2)

    failures: list[ConversionFailed] = []

    def _track_failures(event: ConversionEvent) -> None:
        if isinstance(event, ConversionFailed):
            failures.append(event)

    display = JsonLinesEventSink(sys.stdout) if json_lines else CallbackEventSink(_echo_event)
    sink = FanoutEventSink([display, CallbackEventSink(_track_failures)])

    try:
        from heif_converter.api import convert_heif_files_to_jpeg

        convert_heif_files_to_jpeg(
            paths,
            sink=sink,
            max_workers=max_workers,
            quality=quality,
            thumbnail=thumbnail,
            require_exif=require_exif,
        )
    except ConversionError as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))
    except Exception as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))

    if failures:
        raise typer.Exit(code=1)


@app.command("doctor")
def doctor_cmd() -> None:
    """Print installed imaging toolchain versions."""
    import importlib.metadata as metadata

    modules = [
        "pillow",
        "pillow-heif",
        "pydantic",
        "typer",
    ]

    typer.echo(f"Python: {sys.version.split()[0]}")
    for module in modules:
        try:
            version = metadata.version(module)
            typer.echo(f"{module}: {version}")
        except metadata.PackageNotFoundError:
            typer.echo(f"{module}: <not installed>")

    try:
        import pillow_heif

        typer.echo(f"libheif: {pillow_heif.libheif_version()}")
    except Exception:
        typer.echo("libheif: <unavailable>")


if __name__ == "__main__":
    app()
