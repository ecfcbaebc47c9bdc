#!/usr/bin/env python3
"""Generate requirements.txt from pyproject.toml extras."""

from __future__ import annotations

import tomllib
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SYNC_EXTRAS = ("cli",)


def _collect_requirements() -> list[str]:
    pyproject = tomllib.loads((ROOT / "pyproject.toml").read_text(encoding="utf-8"))
    deps = set(pyproject["project"].get("dependencies", []))
    optional = pyproject["project"].get("optional-dependencies", {})
    for extra in SYNC_EXTRAS:
        deps.update(optional.get(extra, []))
    return sorted(dep.strip() for dep in deps if dep.strip())


def render_requirements() -> str:
    """Return the requirements.txt text for the current pyproject.toml."""
    header = [
        "# Generated from pyproject.toml (base + extras: cli)",
        "# Do not edit manually; run: python scripts/generate_requirements.py",
        "",
    ]
    return "\n".join(header) + "\n".join(_collect_requirements()) + "\n"


def main() -> None:
    """Regenerate requirements.txt from project dependency declarations."""
    text = render_requirements()
    (ROOT / "requirements.txt").write_text(text, encoding="utf-8")
    print(f"Wrote {len(_collect_requirements())} requirements to requirements.txt")


if __name__ == "__main__":
    main()
