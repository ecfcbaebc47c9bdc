"""Application-layer result objects."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ConversionRecord:
    """Outcome of one successful file conversion."""

    original_path: Path
    original_size: int
    output_path: Path
    output_size: int
    elapsed_seconds: float
    thumbnail: bytes | None = None

    @property
    def elapsed_ms(self) -> int:
        """Elapsed conversion time in whole milliseconds."""
        return int(self.elapsed_seconds * 1000)


@dataclass(frozen=True)
class BatchResult:
    """Aggregate outcome of a batch run.

    ``error`` stays ``None``: per-file failures are reported through events and
    are not collected here. ``records`` lists successful conversions in
    completion order.
    """

    total_seconds: float
    records: tuple[ConversionRecord, ...] = ()
    error: str | None = None

    @property
    def total_ms(self) -> int:
        """Total batch time in whole milliseconds."""
        return int(self.total_seconds * 1000)
