"""Unit tests for the batch conversion use-case."""

from __future__ import annotations

import os
import threading
import time
from pathlib import Path

import pytest
from PIL import Image

from heif_converter.application.events import (
    ConversionComplete,
    ConversionEvent,
    ConversionFailed,
    ConversionProgress,
)
from heif_converter.application.options import BatchOptions, ConversionOptions
from heif_converter.application.use_cases import convert_batch
from heif_converter.errors import ConversionError, DecodeError
from heif_converter.exif import MAX_EXIF_PAYLOAD

FAKE_JPEG = b"\xff\xd8\xff\xdbjpeg-body\xff\xd9"


class _Decoder:
    """Decoder failing on payloads marked ``bad`` and tracking concurrency."""

    def __init__(self, delay: float = 0.0) -> None:
        self.delay = delay
        self.active = 0
        self.peak = 0
        self._lock = threading.Lock()

    def open(self, data: bytes) -> _Opened:
        return _Opened(self, data)

    def decode(self, data: bytes) -> Image.Image:
        with self._lock:
            self.active += 1
            self.peak = max(self.peak, self.active)
        try:
            if self.delay:
                time.sleep(self.delay)
            if data == b"bad":
                raise DecodeError("not a HEIF container")
            if data == b"boom":
                raise RuntimeError("decoder crashed")
            return Image.new("RGB", (4, 3))
        finally:
            with self._lock:
                self.active -= 1


class _Opened:
    def __init__(self, decoder: _Decoder, data: bytes) -> None:
        self._decoder = decoder
        self._data = data

    def read_exif(self) -> bytes | None:
        if self._data == b"huge":
            return b"E" * (MAX_EXIF_PAYLOAD + 1)
        return b"Exif\x00\x00batch"

    def decode(self) -> Image.Image:
        return self._decoder.decode(self._data)


class _Encoder:
    def encode(self, image: Image.Image, quality: int | None = None) -> bytes:
        del image, quality
        return FAKE_JPEG


class _Sink:
    def __init__(self) -> None:
        self.events: list[ConversionEvent] = []
        self._lock = threading.Lock()

    def emit(self, event: ConversionEvent) -> None:
        with self._lock:
            self.events.append(event)

    def of(self, kind: type) -> list[ConversionEvent]:
        return [event for event in self.events if isinstance(event, kind)]


class _BrokenSink:
    def __init__(self) -> None:
        self.calls = 0

    def emit(self, event: ConversionEvent) -> None:
        del event
        self.calls += 1
        raise RuntimeError("ui went away")


def _make_inputs(tmp_path: Path, payloads: dict[str, bytes]) -> list[Path]:
    paths = []
    for name, payload in payloads.items():
        path = tmp_path / name
        path.write_bytes(payload)
        paths.append(path)
    return paths


def test_batch_reports_every_file(tmp_path: Path) -> None:
    """Emit M progress, N-M error and exactly one trailing complete event."""
    paths = _make_inputs(
        tmp_path,
        {
            "a.heic": b"ok-a",
            "b.heic": b"bad",
            "c.heic": b"ok-c",
            "d.heic": b"boom",
        },
    )
    paths.append(tmp_path / "missing.heic")
    sink = _Sink()

    result = convert_batch(
        paths,
        sink=sink,
        options=BatchOptions(max_workers=3),
        decoder=_Decoder(),
        encoder=_Encoder(),
    )

    progress = sink.of(ConversionProgress)
    failed = sink.of(ConversionFailed)
    complete = sink.of(ConversionComplete)
    assert len(progress) == 2
    assert len(failed) == 3
    assert len(complete) == 1
    assert sink.events[-1] is complete[0]

    assert {event.record.original_path.name for event in progress} == {"a.heic", "c.heic"}
    errors = {event.path.name: event.error for event in failed}
    assert errors["b.heic"] == "not a HEIF container"
    assert errors["d.heic"] == "decoder crashed"
    assert "missing.heic" in errors

    assert result.error is None
    assert complete[0].result is result
    assert {record.original_path.name for record in result.records} == {"a.heic", "c.heic"}
    assert result.total_seconds >= max(record.elapsed_seconds for record in result.records)


def test_batch_records_follow_progress_events(tmp_path: Path) -> None:
    """Collect exactly the records carried by progress events."""
    paths = _make_inputs(tmp_path, {f"{idx}.heic": b"ok" for idx in range(6)})
    sink = _Sink()

    result = convert_batch(paths, sink=sink, decoder=_Decoder(), encoder=_Encoder())

    emitted = {event.record for event in sink.of(ConversionProgress)}
    assert set(result.records) == emitted
    assert len(result.records) == 6
    for record in result.records:
        assert record.output_path == record.original_path.parent / "convert" / (
            record.original_path.name + ".jpg"
        )
        assert record.output_size == len(FAKE_JPEG) + len(b"Exif\x00\x00batch") + 4


def test_batch_bounds_parallelism(tmp_path: Path) -> None:
    """Never run more conversions at once than the configured worker count."""
    paths = _make_inputs(tmp_path, {f"{idx}.heic": b"ok" for idx in range(8)})
    decoder = _Decoder(delay=0.05)

    convert_batch(
        paths,
        sink=_Sink(),
        options=BatchOptions(max_workers=2),
        decoder=decoder,
        encoder=_Encoder(),
    )

    assert 1 <= decoder.peak <= 2


def test_batch_rejects_duplicate_output_paths(tmp_path: Path) -> None:
    """Fail later inputs that would overwrite an output claimed earlier."""
    (path,) = _make_inputs(tmp_path, {"IMG001.heic": b"ok"})
    alias = tmp_path / "nested" / ".." / "IMG001.heic"
    (tmp_path / "nested").mkdir()
    sink = _Sink()

    result = convert_batch(
        [path, alias],
        sink=sink,
        decoder=_Decoder(),
        encoder=_Encoder(),
    )

    assert len(result.records) == 1
    (failure,) = sink.of(ConversionFailed)
    assert failure.path == alias
    assert "already claimed" in failure.error


def test_batch_reports_unresolvable_input(tmp_path: Path) -> None:
    """Fail an input caught in a symlink loop without aborting the batch."""
    (good,) = _make_inputs(tmp_path, {"a.heic": b"ok"})
    loop = tmp_path / "loop.heic"
    os.symlink(loop, loop)
    sink = _Sink()

    result = convert_batch([good, loop], sink=sink, decoder=_Decoder(), encoder=_Encoder())

    assert [record.original_path for record in result.records] == [good]
    (failure,) = sink.of(ConversionFailed)
    assert failure.path == loop
    assert failure.error
    assert len(sink.of(ConversionComplete)) == 1
    assert isinstance(sink.events[-1], ConversionComplete)


def test_batch_empty_input_completes(tmp_path: Path) -> None:
    """Emit a single complete event for an empty batch."""
    del tmp_path
    sink = _Sink()
    result = convert_batch([], sink=sink, decoder=_Decoder(), encoder=_Encoder())
    assert result.records == ()
    assert [type(event) for event in sink.events] == [ConversionComplete]


def test_batch_rejects_invalid_worker_count(tmp_path: Path) -> None:
    """Validate max_workers before starting any work."""
    sink = _Sink()
    with pytest.raises(ConversionError, match="Invalid batch parameters"):
        convert_batch(
            [tmp_path / "a.heic"],
            sink=sink,
            options=BatchOptions(max_workers=0),
        )
    assert sink.events == []


def test_batch_survives_failing_sink(tmp_path: Path) -> None:
    """Keep converting when the sink raises."""
    paths = _make_inputs(tmp_path, {"a.heic": b"ok", "b.heic": b"bad"})
    sink = _BrokenSink()

    result = convert_batch(paths, sink=sink, decoder=_Decoder(), encoder=_Encoder())

    assert len(result.records) == 1
    assert sink.calls == 3


def test_batch_rejects_invalid_conversion_options(tmp_path: Path) -> None:
    """Validate per-file options once, before any file is scheduled."""
    paths = _make_inputs(tmp_path, {"a.heic": b"ok", "b.heic": b"ok"})
    sink = _Sink()

    with pytest.raises(ConversionError, match="Invalid batch parameters"):
        convert_batch(
            paths,
            sink=sink,
            options=BatchOptions(conversion=ConversionOptions(quality=500)),
            decoder=_Decoder(),
            encoder=_Encoder(),
        )

    assert sink.events == []
    assert not (tmp_path / "convert").exists()


def test_batch_reports_oversized_exif(tmp_path: Path) -> None:
    """Turn an EXIF block too large for APP1 into an error event."""
    good, huge = _make_inputs(tmp_path, {"a.heic": b"ok", "b.heic": b"huge"})
    sink = _Sink()

    result = convert_batch([good, huge], sink=sink, decoder=_Decoder(), encoder=_Encoder())

    assert [record.original_path for record in result.records] == [good]
    (failure,) = sink.of(ConversionFailed)
    assert failure.path == huge
    assert "APP1" in failure.error
    assert not (tmp_path / "convert" / "b.heic.jpg").exists()
    assert isinstance(sink.events[-1], ConversionComplete)
