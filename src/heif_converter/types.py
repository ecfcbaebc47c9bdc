"""Shared type aliases for converter modules."""

from __future__ import annotations

import os
from typing import Literal

type EventKind = Literal["conversion_progress", "conversion_error", "conversion_complete"]
type PathInput = str | os.PathLike[str]
type ThumbnailSize = tuple[int, int]
