"""Pydantic schemas for option validation and event transport payloads."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from heif_converter.application.events import (
    ConversionComplete,
    ConversionEvent,
    ConversionFailed,
    ConversionProgress,
)
from heif_converter.application.results import ConversionRecord


class ConversionSettings(BaseModel):
    """Validated per-file conversion settings."""

    model_config = ConfigDict(extra="forbid")

    quality: int | None = Field(default=None, ge=1, le=100)
    thumbnail: bool = False
    thumbnail_size: tuple[int, int] = (200, 200)
    require_exif: bool = False
    output_dir_name: str = "convert"

    @field_validator("thumbnail_size")
    @classmethod
    def _validate_thumbnail_size(cls, value: tuple[int, int]) -> tuple[int, int]:
        if any(dim <= 0 for dim in value):
            raise ValueError("thumbnail_size dimensions must be positive integers.")
        return value

    @field_validator("output_dir_name")
    @classmethod
    def _validate_output_dir_name(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned or cleaned in {".", ".."} or "/" in cleaned or "\\" in cleaned:
            raise ValueError("output_dir_name must be a single directory name.")
        return cleaned


class FileConversionConfig(ConversionSettings):
    """Validated input for single-file conversion."""

    input_path: Path


class BatchConversionConfig(BaseModel):
    """Validated input for batch conversion."""

    model_config = ConfigDict(extra="forbid")

    input_paths: list[Path]
    max_workers: int | None = Field(default=None, ge=1)
    conversion: ConversionSettings = Field(default_factory=ConversionSettings)


class ConversionRecordPayload(BaseModel):
    """Transport shape of a ConversionRecord."""

    model_config = ConfigDict(extra="forbid", ser_json_bytes="base64")

    original_file_name: str
    original_file_size: int
    new_file_name: str
    new_file_size: int
    conversion_time_ms: int
    thumbnail: bytes | None = None

    @classmethod
    def from_record(cls, record: ConversionRecord) -> ConversionRecordPayload:
        """Build payload from an in-memory record."""
        return cls(
            original_file_name=str(record.original_path),
            original_file_size=record.original_size,
            new_file_name=str(record.output_path),
            new_file_size=record.output_size,
            conversion_time_ms=record.elapsed_ms,
            thumbnail=record.thumbnail,
        )


class ProgressEventPayload(BaseModel):
    """``conversion_progress`` payload."""

    model_config = ConfigDict(extra="forbid")

    event: Literal["conversion_progress"] = "conversion_progress"
    record: ConversionRecordPayload


class ErrorEventPayload(BaseModel):
    """``conversion_error`` payload."""

    model_config = ConfigDict(extra="forbid")

    event: Literal["conversion_error"] = "conversion_error"
    path: str
    error: str


class CompleteEventPayload(BaseModel):
    """``conversion_complete`` payload."""

    model_config = ConfigDict(extra="forbid")

    event: Literal["conversion_complete"] = "conversion_complete"
    total_time_ms: int
    converted: int
    error: str | None = None


type EventPayload = ProgressEventPayload | ErrorEventPayload | CompleteEventPayload


def event_to_payload(event: ConversionEvent) -> EventPayload:
    """Map a core event onto its transport payload."""
    if isinstance(event, ConversionProgress):
        return ProgressEventPayload(record=ConversionRecordPayload.from_record(event.record))
    if isinstance(event, ConversionFailed):
        return ErrorEventPayload(path=str(event.path), error=event.error)
    if isinstance(event, ConversionComplete):
        return CompleteEventPayload(
            total_time_ms=event.result.total_ms,
            converted=len(event.result.records),
            error=event.result.error,
        )
    raise TypeError(f"unsupported event type: {type(event).__name__}")
