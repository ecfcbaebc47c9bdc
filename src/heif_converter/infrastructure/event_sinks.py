"""Event sink implementations for the conversion core."""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable, Iterable
from typing import TextIO

from heif_converter.application.events import (
    ConversionComplete,
    ConversionEvent,
    ConversionFailed,
    ConversionProgress,
)
from heif_converter.application.ports import EventSink
from heif_converter.schemas import event_to_payload

logger = logging.getLogger(__name__)


class QueueEventSink:
    """Push events onto a thread-safe queue for a UI poll loop."""

    def __init__(self, events: queue.Queue[ConversionEvent] | None = None) -> None:
        self.events: queue.Queue[ConversionEvent] = events or queue.Queue()

    def emit(self, event: ConversionEvent) -> None:
        """Queue one event."""
        self.events.put(event)

    def drain(self) -> list[ConversionEvent]:
        """Return every event queued so far without blocking."""
        drained: list[ConversionEvent] = []
        while True:
            try:
                drained.append(self.events.get_nowait())
            except queue.Empty:
                return drained


class CallbackEventSink:
    """Forward events to a callable, one call at a time."""

    def __init__(self, callback: Callable[[ConversionEvent], None]) -> None:
        self._callback = callback
        self._lock = threading.Lock()

    def emit(self, event: ConversionEvent) -> None:
        """Invoke the callback under the sink lock."""
        with self._lock:
            self._callback(event)


class LoggingEventSink:
    """Log events through the standard logging module."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def emit(self, event: ConversionEvent) -> None:
        """Log one event at a level matching its kind."""
        if isinstance(event, ConversionProgress):
            record = event.record
            self._log.info(
                "converted %s -> %s (%d -> %d bytes, %d ms)",
                record.original_path,
                record.output_path,
                record.original_size,
                record.output_size,
                record.elapsed_ms,
            )
        elif isinstance(event, ConversionFailed):
            self._log.warning("failed to convert %s: %s", event.path, event.error)
        elif isinstance(event, ConversionComplete):
            self._log.info(
                "batch complete: %d converted in %d ms",
                len(event.result.records),
                event.result.total_ms,
            )


class JsonLinesEventSink:
    """Write each event as one JSON line to a text stream."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._lock = threading.Lock()

    def emit(self, event: ConversionEvent) -> None:
        """Serialize and write one event."""
        line = event_to_payload(event).model_dump_json()
        with self._lock:
            self._stream.write(line + "\n")
            self._stream.flush()


class FanoutEventSink:
    """Forward each event to several sinks in order."""

    def __init__(self, sinks: Iterable[EventSink]) -> None:
        self._sinks = tuple(sinks)

    def emit(self, event: ConversionEvent) -> None:
        """Deliver the event to every wrapped sink."""
        for sink in self._sinks:
            sink.emit(event)
