"""Resolve local component imports of a UI source file to file paths.

Only relative (``./Hero``) and aliased (``@/components/Hero``) imports are
followed; package imports such as ``react`` are dropped.  Each specifier
maps to a component file, with ``<dir>/index.tsx`` as the fallback when
the specifier names a folder.
"""
from __future__ import annotations

import asyncio
import logging
import os
import re
from pathlib import Path

from src.shared import constants
from src.shared.config import ExtractionConfig
from src.shared.models.dataset import SourceImport

logger = logging.getLogger(__name__)

# Named-import lists may span several lines
_IMPORT_RE = re.compile(
    r"""^[ \t]*import\s+[^'";]*?\bfrom\s+['"]([^'"]+)['"];?""",
    re.MULTILINE,
)


def extract_local_imports(
    text: str, alias_prefix: str = constants.ALIAS_PREFIX
) -> list[SourceImport]:
    """Return the relative and aliased imports of *text*, in source order."""
    local: list[SourceImport] = []
    for match in _IMPORT_RE.finditer(text):
        imp = SourceImport(raw=match.group(0).strip(), specifier=match.group(1))
        if imp.is_relative or imp.is_alias(alias_prefix):
            logger.debug("Found local import %s", imp.specifier)
            local.append(imp)
    if not local:
        logger.debug("No local/component imports found")
    return local


class ImportResolver:
    """Maps local import specifiers to component files under a project."""

    def __init__(
        self, project_root: Path | str, config: ExtractionConfig | None = None
    ) -> None:
        self.project_root = Path(project_root)
        self.config = config or ExtractionConfig()

    @property
    def alias_root(self) -> Path:
        """Directory the alias prefix stands for."""
        return self.project_root / self.config.source_dir

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def candidates(self, imp: SourceImport, importing_file: Path | str) -> list[Path]:
        """Return the paths to try for *imp*, most specific first.

        The first candidate is the component file itself; the second treats
        the specifier as a folder and points at its index file.  Returns an
        empty list for specifiers that are neither relative nor aliased.
        """
        base = self._base_path(imp, Path(importing_file))
        if base is None:
            return []
        if base.suffix in constants.SCRIPT_EXTENSIONS:
            component = base
        else:
            component = base.with_name(base.name + self.config.component_extension)
        return [component, base / self.config.index_filename]

    async def resolve(
        self, imp: SourceImport, importing_file: Path | str
    ) -> tuple[Path, str] | None:
        """Read the first existing candidate for *imp*.

        Returns:
            ``(path, text)`` for the file that was read, or ``None`` when no
            candidate could be read.
        """
        for candidate in self.candidates(imp, importing_file):
            try:
                text = await asyncio.to_thread(candidate.read_text, encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                continue
            return candidate, text
        logger.warning("Could not read component file for import: %s", imp.specifier)
        return None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _base_path(self, imp: SourceImport, importing_file: Path) -> Path | None:
        if imp.is_relative:
            return Path(os.path.normpath(importing_file.parent / imp.specifier))
        prefix = self.config.alias_prefix
        if imp.is_alias(prefix):
            rest = imp.specifier[len(prefix):].lstrip("/")
            return Path(os.path.normpath(self.alias_root / rest))
        return None
