"""Filesystem utilities for cached source files."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict


def ensure_directory(path: Path) -> Path:
    """Create a directory if it does not exist and return the path."""

    path.mkdir(parents=True, exist_ok=True)
    return path


def write_text(text: str, path: Path) -> Path:
    """Write text to disk, ensuring parent directories exist."""

    ensure_directory(path.parent)
    path.write_text(text, encoding="utf-8")
    return path


def read_json(path: Path) -> Dict[str, object]:
    """Read a JSON document from disk."""

    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)
