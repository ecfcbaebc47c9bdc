"""Unit tests for thin public wrapper modules."""

from __future__ import annotations

from pathlib import Path

import pytest

import heif_converter
from heif_converter import api as api_module
from heif_converter import application
from heif_converter.application.options import BatchOptions, ConversionOptions
from heif_converter.application.results import BatchResult, ConversionRecord
from heif_converter.infrastructure.event_sinks import LoggingEventSink, QueueEventSink

RECORD = ConversionRecord(
    original_path=Path("a.heic"),
    original_size=1,
    output_path=Path("convert/a.heic.jpg"),
    output_size=2,
    elapsed_seconds=0.0,
)


def test_top_level_file_wrapper_forwards(monkeypatch: pytest.MonkeyPatch) -> None:
    """Forward single-file arguments to the API implementation."""
    called: dict[str, object] = {}

    def fake_impl(path: object, **kwargs: object) -> ConversionRecord:
        called["path"] = path
        called.update(kwargs)
        return RECORD

    monkeypatch.setattr(api_module, "convert_heif_file_to_jpeg", fake_impl)

    out = heif_converter.convert_heif_file("a.heic", quality=90, thumbnail=True)

    assert out is RECORD
    assert called == {
        "path": "a.heic",
        "quality": 90,
        "thumbnail": True,
        "require_exif": False,
    }


def test_top_level_batch_wrapper_forwards(monkeypatch: pytest.MonkeyPatch) -> None:
    """Forward batch arguments to the API implementation."""
    called: dict[str, object] = {}
    sink = QueueEventSink()
    expected = BatchResult(total_seconds=0.0)

    def fake_impl(paths: object, **kwargs: object) -> BatchResult:
        called["paths"] = paths
        called.update(kwargs)
        return expected

    monkeypatch.setattr(api_module, "convert_heif_files_to_jpeg", fake_impl)

    out = heif_converter.convert_heif_files(["a.heic"], sink=sink, max_workers=2)

    assert out is expected
    assert called["paths"] == ["a.heic"]
    assert called["sink"] is sink
    assert called["max_workers"] == 2


def test_top_level_splice_wrapper() -> None:
    """Delegate splicing to the exif module."""
    assert heif_converter.splice_exif(b"\xff\xd8", b"E") == b"\xff\xd8\xff\xe1\x00\x03E"


def test_api_builds_batch_options(monkeypatch: pytest.MonkeyPatch) -> None:
    """Translate keyword flags into typed batch options and a default sink."""
    called: dict[str, object] = {}

    def fake_batch(paths: object, *, sink: object, options: BatchOptions) -> BatchResult:
        called["sink"] = sink
        called["options"] = options
        return BatchResult(total_seconds=0.0)

    monkeypatch.setattr(api_module, "convert_batch", fake_batch)

    api_module.convert_heif_files_to_jpeg(["a.heic"], max_workers=4, quality=60)

    assert isinstance(called["sink"], LoggingEventSink)
    assert called["options"] == BatchOptions(
        max_workers=4,
        conversion=ConversionOptions(quality=60),
    )


def test_application_lazy_wrappers(tmp_path: Path) -> None:
    """Expose use-case helpers through the application package."""
    options = application.build_conversion_options(quality=50)
    assert options == ConversionOptions(quality=50)
    assert application.output_path_for(tmp_path / "x.heif") == (
        tmp_path / "convert" / "x.heif.jpg"
    )
