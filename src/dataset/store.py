"""Persistence for the extracted dataset (``data.json``).

The dataset is the single hand-off artifact between extraction and every
generation step.  Besides the tables it may hold an ``apiRoutes`` entry
written by route generation; that entry is never treated as a table and
is carried through saves unchanged.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from src.shared import constants
from src.shared.errors import DatasetNotFoundError, TableNotFoundError
from src.shared.models.dataset import Table, TableStatus, TableSummary
from src.shared.utils import atomic_write_json, load_json

logger = logging.getLogger(__name__)


class DatasetStore:
    """Reads and writes the dataset document of one project."""

    def __init__(
        self,
        project_root: Path | str,
        filename: str = constants.DATASET_FILENAME,
    ) -> None:
        self.project_root = Path(project_root)
        self.path = self.project_root / filename

    def exists(self) -> bool:
        return self.path.exists()

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def load(self) -> dict[str, Any]:
        """Return the raw dataset document.

        Raises:
            DatasetNotFoundError: If the file is missing or not a JSON object.
        """
        document = load_json(self.path)
        if not isinstance(document, dict):
            raise DatasetNotFoundError(
                f"No dataset found at {self.path} - run extract first"
            )
        return document

    def load_tables(self) -> dict[str, Table]:
        """Return every table in the dataset, skipping reserved keys."""
        tables: dict[str, Table] = {}
        for name, entry in self.load().items():
            if name in constants.RESERVED_DATASET_KEYS:
                continue
            try:
                tables[name] = Table.model_validate(entry)
            except ValidationError as exc:
                logger.warning("Skipping malformed table %s: %s", name, exc)
        logger.info("Loaded %d table(s) from %s", len(tables), self.path)
        return tables

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def save(self, tables: dict[str, Table]) -> Path:
        """Write *tables* atomically, keeping any reserved entries on disk."""
        document: dict[str, Any] = {
            name: table.to_document() for name, table in tables.items()
        }
        existing = load_json(self.path) or {}
        for key in constants.RESERVED_DATASET_KEYS:
            if key in existing:
                document[key] = existing[key]
        atomic_write_json(self.path, document)
        logger.info("Dataset saved to %s", self.path)
        return self.path

    # ------------------------------------------------------------------
    # Status bookkeeping
    # ------------------------------------------------------------------

    def get_table_status(self, name: str) -> TableStatus:
        tables = self.load_tables()
        if name not in tables:
            raise TableNotFoundError(name)
        return tables[name].effective_status()

    def update_table_status(
        self,
        name: str,
        *,
        schema_generated: bool | None = None,
        seeded: bool | None = None,
    ) -> TableStatus:
        """Set the given status flags of table *name* and persist them.

        Only the ``status`` entry of *name* is rewritten; every other key of
        the document, malformed tables included, is written back as read.

        Raises:
            TableNotFoundError: If *name* is not a valid table in the dataset.
        """
        document = self.load()
        if name in constants.RESERVED_DATASET_KEYS or name not in document:
            raise TableNotFoundError(name)
        try:
            table = Table.model_validate(document[name])
        except ValidationError as exc:
            raise TableNotFoundError(name) from exc
        status = table.effective_status().model_copy()
        if schema_generated is not None:
            status.schema_generated = schema_generated
        if seeded is not None:
            status.seeded = seeded
        document[name]["status"] = status.model_dump(by_alias=True)
        atomic_write_json(self.path, document)
        logger.info(
            "Updated status for %s: schemaGenerated=%s seeded=%s",
            name,
            status.schema_generated,
            status.seeded,
        )
        return status

    def tables_needing_schema(self) -> list[str]:
        return [
            name
            for name, table in self.load_tables().items()
            if not table.effective_status().schema_generated
        ]

    def tables_needing_seeding(self) -> list[str]:
        """Tables with a generated schema that have not been seeded yet."""
        result: list[str] = []
        for name, table in self.load_tables().items():
            status = table.effective_status()
            if status.schema_generated and not status.seeded:
                result.append(name)
        return result

    # ------------------------------------------------------------------
    # Summaries
    # ------------------------------------------------------------------

    def summarize(self) -> list[TableSummary]:
        """One summary per table: record count, fields and a sample record."""
        summaries: list[TableSummary] = []
        for name, table in self.load_tables().items():
            sample = table.data[0] if table.data else {}
            summaries.append(
                TableSummary(
                    table_name=name,
                    record_count=len(table.data),
                    sample_fields=list(sample.keys()),
                    sample_data=sample,
                )
            )
        return summaries
