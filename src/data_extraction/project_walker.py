"""Enumerate UI entry-point files of a project."""
from __future__ import annotations

import logging
import os
from pathlib import Path

from src.shared.config import ExtractionConfig

logger = logging.getLogger(__name__)


class ProjectWalker:
    """Finds entry-point files (``page.tsx``) under ``<root>/src/app``.

    Directory entries are visited in name order so that discovery order, and
    with it the merge order of duplicate records, is stable across runs.
    The API-route subtree is never entered.
    """

    def __init__(
        self, project_root: Path | str, config: ExtractionConfig | None = None
    ) -> None:
        self.project_root = Path(project_root)
        self.config = config or ExtractionConfig()

    @property
    def app_root(self) -> Path:
        return self.project_root / self.config.source_dir / self.config.app_dir

    def find_entry_points(self) -> list[Path]:
        """Return every entry-point file reachable under the app directory."""
        found: list[Path] = []
        if not self.app_root.is_dir():
            logger.warning("App directory not found: %s", self.app_root)
            return found
        self._scan(self.app_root, found)
        logger.info("Found %d entry point(s) under %s", len(found), self.app_root)
        return found

    def _scan(self, directory: Path, found: list[Path]) -> None:
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as exc:
            logger.warning("Could not scan directory %s: %s", directory, exc)
            return

        for entry in entries:
            try:
                is_dir = entry.is_dir()
            except OSError:
                continue
            if is_dir:
                if entry.name == self.config.excluded_dir:
                    continue
                self._scan(Path(entry.path), found)
            elif entry.name == self.config.entry_filename:
                found.append(Path(entry.path))
