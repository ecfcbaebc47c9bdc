"""Events pushed from the conversion core into an event sink."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

from heif_converter.application.results import BatchResult, ConversionRecord
from heif_converter.types import EventKind


@dataclass(frozen=True)
class ConversionProgress:
    """A single file converted successfully."""

    kind: ClassVar[EventKind] = "conversion_progress"

    record: ConversionRecord


@dataclass(frozen=True)
class ConversionFailed:
    """A single file failed to convert."""

    kind: ClassVar[EventKind] = "conversion_error"

    path: Path
    error: str


@dataclass(frozen=True)
class ConversionComplete:
    """Every task of a batch has finished."""

    kind: ClassVar[EventKind] = "conversion_complete"

    result: BatchResult


type ConversionEvent = ConversionProgress | ConversionFailed | ConversionComplete
