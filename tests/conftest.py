"""Shared pytest configuration, marker assignment and HEIF fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

HEIF_SAVE_ERRORS = (OSError, KeyError, ValueError, RuntimeError)


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Attach suite markers based on test file path."""
    del config
    for item in items:
        parts = set(Path(str(item.fspath)).parts)
        if "e2e_tests" in parts:
            item.add_marker(pytest.mark.e2e)
        elif "integration_tests" in parts:
            item.add_marker(pytest.mark.integration)
        elif "unit_tests" in parts:
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def write_heif() -> Callable[..., Path]:
    """Return a writer producing real HEIF files via pillow-heif.

    The calling test is skipped when the installed libheif has no HEVC
    encoder.
    """
    pillow_heif = pytest.importorskip("pillow_heif")
    pillow_heif.register_heif_opener()

    def _write(
        path: Path,
        size: tuple[int, int] = (64, 48),
        exif: bytes | None = None,
    ) -> Path:
        image = Image.linear_gradient("L").resize(size).convert("RGB")
        params: dict[str, object] = {"format": "HEIF", "quality": 90}
        if exif is not None:
            params["exif"] = exif
        try:
            image.save(path, **params)
        except HEIF_SAVE_ERRORS as exc:
            pytest.skip(f"HEIF encoding unavailable: {exc}")
        return path

    return _write
