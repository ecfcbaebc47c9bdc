"""Filter and expand input paths down to HEIF/HEIC files."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from heif_converter.types import PathInput

HEIF_SUFFIXES = (".heic", ".heif")


def is_heif_path(path: PathInput) -> bool:
    """Return whether ``path`` carries a HEIF/HEIC extension (any case)."""
    return Path(path).suffix.lower() in HEIF_SUFFIXES


def collect_heif_paths(items: Iterable[PathInput]) -> list[Path]:
    """Expand inputs into absolute HEIF file paths.

    Directories contribute their direct HEIF children in name order. Explicit
    file arguments are kept as given, whatever their extension, so that the
    decoder reports non-HEIF files as failures. Duplicates are dropped, first
    occurrence wins.
    """
    collected: list[Path] = []
    seen: set[Path] = set()

    def _add(candidate: Path) -> None:
        absolute = candidate.absolute()
        if absolute not in seen:
            seen.add(absolute)
            collected.append(absolute)

    for item in items:
        path = Path(item).expanduser()
        if path.is_dir():
            for child in sorted(path.iterdir()):
                if child.is_file() and is_heif_path(child):
                    _add(child)
        else:
            _add(path)
    return collected
