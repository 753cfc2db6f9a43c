"""Extraction orchestrator: UI source tree -> persisted dataset.

One pass walks every entry point, scans it and the local components it
imports for data-shaped array constants, merges same-named arrays into
tables and writes ``data.json`` once at the end.  When ``data.json``
already exists the pass is skipped without reading any UI source.

Failure policy:

* unreadable directories, unresolved imports and unparseable spans are
  logged and skipped;
* an unreadable entry point or a failed dataset write ends the pass with
  an ``error`` result instead of raising.
"""
from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from pathlib import Path

from src.data_extraction.array_locator import ArrayLiteralLocator
from src.data_extraction.import_resolver import ImportResolver, extract_local_imports
from src.data_extraction.literal_parser import evaluate_array
from src.data_extraction.project_walker import ProjectWalker
from src.data_extraction.record_merger import IdFactory, TaggedRecord, merge_tables
from src.dataset.store import DatasetStore
from src.shared.config import ExtractionConfig
from src.shared.errors import DatasetWriteError, EntryPointReadError
from src.shared.logging import run_context
from src.shared.models.dataset import ExtractionResult, ExtractionStatus, Table
from src.shared.utils import relative_posix

logger = logging.getLogger(__name__)


class DataExtractor:
    """Runs a full extraction pass for one project root."""

    def __init__(
        self,
        config: ExtractionConfig | None = None,
        *,
        id_factory: IdFactory | None = None,
    ) -> None:
        self.config = config or ExtractionConfig()
        self.locator = ArrayLiteralLocator(
            min_length=self.config.min_span_length,
            min_objects=self.config.min_object_count,
        )
        self._id_factory = id_factory

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def extract(self, project_root: Path | str) -> ExtractionResult:
        """Extract the dataset of *project_root*.

        Returns:
            An :class:`ExtractionResult`; its status is ``error`` only for
            fatal conditions.
        """
        with run_context():
            return await self._extract(Path(project_root))

    def extract_sync(self, project_root: Path | str) -> ExtractionResult:
        """Blocking wrapper around :meth:`extract`."""
        return asyncio.run(self.extract(project_root))

    # ------------------------------------------------------------------
    # Pass
    # ------------------------------------------------------------------

    async def _extract(self, root: Path) -> ExtractionResult:
        store = DatasetStore(root, self.config.dataset_filename)
        if store.exists():
            logger.info("Data already extracted to %s", store.path)
            return ExtractionResult(
                status=ExtractionStatus.ALREADY_EXTRACTED,
                message="Data already extracted - skipping extraction",
                dataset_path=str(store.path),
            )

        logger.info("No existing dataset found, extracting data from components")
        walker = ProjectWalker(root, self.config)
        entry_points = await asyncio.to_thread(walker.find_entry_points)
        entry_labels = [relative_posix(p, root) for p in entry_points]
        if not entry_points:
            return ExtractionResult(
                status=ExtractionStatus.NO_ENTRY_POINTS,
                message=f"No {self.config.entry_filename} files found - no data to extract",
            )

        try:
            grouped = await self._collect(root, entry_points)
        except EntryPointReadError as exc:
            logger.error("%s", exc.detail)
            return ExtractionResult(
                status=ExtractionStatus.ERROR,
                message=f"Error extracting data: {exc.detail}",
                entry_points=entry_labels,
            )

        tables = merge_tables(grouped, id_factory=self._id_factory)
        if not tables:
            return ExtractionResult(
                status=ExtractionStatus.NO_DATA,
                message="No array constants found in components",
                entry_points=entry_labels,
            )

        try:
            self._write(store, tables)
        except DatasetWriteError as exc:
            logger.error("%s", exc.detail)
            return ExtractionResult(
                status=ExtractionStatus.ERROR,
                message=f"Error extracting data: {exc.detail}",
                tables=tables,
                entry_points=entry_labels,
            )

        for name, table in tables.items():
            logger.info(
                "%s: %d record(s) from %s",
                name,
                len(table.data),
                ", ".join(table.source_files),
            )
        return ExtractionResult(
            status=ExtractionStatus.EXTRACTED,
            message=(
                f"Data extracted successfully - found {len(tables)} tables "
                f"with data from {len(entry_points)} pages"
            ),
            tables=tables,
            entry_points=entry_labels,
            dataset_path=str(store.path),
        )

    async def _collect(
        self, root: Path, entry_points: list[Path]
    ) -> dict[str, list[TaggedRecord]]:
        """Scan entry points and their local imports, grouping records by name."""
        grouped: dict[str, list[TaggedRecord]] = defaultdict(list)
        resolver = ImportResolver(root, self.config)
        scanned: set[Path] = set()

        for entry_point in entry_points:
            logger.info("Processing %s", relative_posix(entry_point, root))
            try:
                text = await asyncio.to_thread(entry_point.read_text, encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise EntryPointReadError(str(entry_point), str(exc)) from exc

            scanned.add(entry_point.resolve())
            self._scan_text(text, relative_posix(entry_point, root), grouped)

            for imp in extract_local_imports(text, self.config.alias_prefix):
                resolved = await resolver.resolve(imp, entry_point)
                if resolved is None:
                    continue
                path, component_text = resolved
                if path.resolve() in scanned:
                    continue
                scanned.add(path.resolve())
                self._scan_text(component_text, relative_posix(path, root), grouped)

        return grouped

    def _scan_text(
        self,
        text: str,
        source_file: str,
        grouped: dict[str, list[TaggedRecord]],
    ) -> None:
        for match in self.locator.locate(text, source_file):
            records = evaluate_array(match.text)
            if not records:
                logger.warning("Failed to extract data for %s from %s", match.name, source_file)
                continue
            logger.debug(
                "Parsed %d item(s) for %s from %s", len(records), match.name, source_file
            )
            grouped[match.name].extend((record, source_file) for record in records)

    def _write(self, store: DatasetStore, tables: dict[str, Table]) -> None:
        try:
            store.save(tables)
        except (OSError, TypeError, ValueError) as exc:
            raise DatasetWriteError(str(store.path), str(exc)) from exc
