#!/usr/bin/env python3
"""Example: run a batch in the background and poll events like a UI loop."""

from __future__ import annotations

import sys
import tempfile
import threading
import time
from pathlib import Path

import pillow_heif
from PIL import Image

from heif_converter import convert_heif_files
from heif_converter.application.events import (
    ConversionComplete,
    ConversionFailed,
    ConversionProgress,
)
from heif_converter.infrastructure.event_sinks import QueueEventSink

POLL_INTERVAL = 0.1


def _make_sources(directory: Path, count: int) -> list[Path]:
    pillow_heif.register_heif_opener()
    sources = []
    for idx in range(count):
        path = directory / f"IMG_{idx:04d}.heic"
        Image.new("RGB", (800, 600), (idx * 30 % 255, 90, 160)).save(
            path, format="HEIF", quality=80
        )
        sources.append(path)
    broken = directory / "broken.heic"
    broken.write_bytes(b"not really a photo")
    sources.append(broken)
    return sources


def main() -> None:
    """Convert a handful of files while draining events from the main thread."""
    with tempfile.TemporaryDirectory() as tmp:
        sources = _make_sources(Path(tmp), count=5)
        sink = QueueEventSink()
        worker = threading.Thread(
            target=convert_heif_files,
            args=(sources,),
            kwargs={"sink": sink, "max_workers": 2, "thumbnail": True},
            daemon=True,
        )
        worker.start()

        done = False
        failures = 0
        while not done:
            time.sleep(POLL_INTERVAL)
            for event in sink.drain():
                if isinstance(event, ConversionProgress):
                    print(f"converted {event.record.output_path.name} ({event.record.elapsed_ms} ms)")
                elif isinstance(event, ConversionFailed):
                    failures += 1
                    print(f"failed {event.path.name}: {event.error}", file=sys.stderr)
                elif isinstance(event, ConversionComplete):
                    print(f"complete: {len(event.result.records)} in {event.result.total_ms} ms")
                    done = True
        worker.join()

        if failures != 1:
            raise SystemExit(f"FAIL: expected exactly one failure, saw {failures}.")
        print("PASS: batch example complete.")


if __name__ == "__main__":
    main()
