"""Dataset Pydantic v2 data models."""
from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, JsonValue

# A record is an ordered mapping of field name to a JSON-compatible value
Record = dict[str, JsonValue]


class SourceImport(BaseModel):
    """A local import statement found in a UI source file."""
    raw: str
    specifier: str

    @property
    def is_relative(self) -> bool:
        return self.specifier.startswith(".")

    def is_alias(self, prefix: str = "@") -> bool:
        return self.specifier.startswith(prefix)


class LiteralArrayMatch(BaseModel):
    """A ``const name = [ ... ]`` declaration that looks like tabular data."""
    name: str
    text: str
    source_file: str

    @property
    def declaration(self) -> str:
        """The declaration rebuilt from the name and the raw array span."""
        return f"const {self.name} = {self.text};"


class TableStatus(BaseModel):
    """Downstream bookkeeping flags for one table."""
    schema_generated: bool = Field(default=False, alias="schemaGenerated")
    seeded: bool = False

    model_config = {"populate_by_name": True}


class Table(BaseModel):
    """Normalised, deduplicated records for one identifier."""
    data: list[Record] = Field(default_factory=list)
    source_files: list[str] = Field(default_factory=list, alias="sourceFiles")
    status: TableStatus | None = None

    model_config = {"populate_by_name": True}

    @property
    def fields(self) -> list[str]:
        """Field names of the first record (every record shares them)."""
        return list(self.data[0].keys()) if self.data else []

    def effective_status(self) -> TableStatus:
        return self.status or TableStatus()

    def to_document(self) -> dict[str, Any]:
        """Serialise to the persisted ``data.json`` shape."""
        doc: dict[str, Any] = {
            "data": self.data,
            "sourceFiles": list(self.source_files),
        }
        if self.status is not None:
            doc["status"] = self.status.model_dump(by_alias=True)
        return doc


class ExtractionStatus(str, Enum):
    """Outcome of an extraction pass."""
    EXTRACTED = "extracted"
    ALREADY_EXTRACTED = "already_extracted"
    NO_ENTRY_POINTS = "no_entry_points"
    NO_DATA = "no_data"
    ERROR = "error"


class ExtractionResult(BaseModel):
    """Result returned by the extraction orchestrator."""
    status: ExtractionStatus
    message: str
    tables: dict[str, Table] = Field(default_factory=dict)
    entry_points: list[str] = Field(default_factory=list)
    dataset_path: str | None = None

    @property
    def ok(self) -> bool:
        return self.status != ExtractionStatus.ERROR


class TableSummary(BaseModel):
    """Compact description of a table for request validation."""
    table_name: str = Field(alias="tableName")
    record_count: int = Field(ge=0, alias="recordCount")
    sample_fields: list[str] = Field(default_factory=list, alias="sampleFields")
    sample_data: Record = Field(default_factory=dict, alias="sampleData")

    model_config = {"populate_by_name": True}
