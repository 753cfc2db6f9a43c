"""Shared utility functions."""
from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


def now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def atomic_write_json(path: Path | str, data: Any) -> None:
    """Write JSON data atomically by writing to a temp file then renaming.

    Args:
        path: Target file path.
        data: JSON-serialisable data to write.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(".tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(str(tmp_path), str(path))
    except BaseException:
        # Clean up temp file on any failure
        if tmp_path.exists():
            tmp_path.unlink()
        raise


def load_json(path: Path | str) -> dict | None:
    """Load JSON data from a file.

    Args:
        path: Path to the JSON file.

    Returns:
        Parsed JSON data, or None if the file is missing or invalid.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return None


def relative_posix(path: Path | str, root: Path | str) -> str:
    """Return *path* relative to *root* in POSIX form, or as-is if outside."""
    path = Path(path)
    try:
        return path.resolve().relative_to(Path(root).resolve()).as_posix()
    except ValueError:
        return path.as_posix()


def lower_camel(name: str) -> str:
    """Lower-case the first character: ``RecentlyPlayed`` -> ``recentlyPlayed``."""
    return name[:1].lower() + name[1:]
