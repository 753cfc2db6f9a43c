"""Turn an LLM schema completion into ``src/drizzle/schema.ts``.

The completion is free text.  Only the ``drizzle-orm/pg-core`` import line
and the ``export const x = pgTable(...)`` blocks are kept, a few column
helpers the model tends to invent are mapped to real ones, and the result
is merged with any schema already on disk.
"""
from __future__ import annotations

import logging
import re

from src.dataset.store import DatasetStore
from src.generation.llm_client import LLMClient
from src.generation.prompts import SCHEMA_SYSTEM_PROMPT, build_schema_prompt
from src.shared import constants
from src.shared.errors import DatasetNotFoundError
from src.shared.models.generation import GenerationResult
from src.shared.utils import relative_posix

logger = logging.getLogger(__name__)

_IMPORT_LINE_RE = re.compile(
    r"""^(?:\s*//\s*)?\s*import\s+\{[^}]+\}\s+from\s+['"]drizzle-orm/pg-core['"];?""",
    re.MULTILINE,
)
_IMPORT_NAMES_RE = re.compile(r"\{([^}]+)\}")
_TABLE_BLOCK_RE = re.compile(r"export const (\w+)\s*=\s*pgTable\([\s\S]+?\}\);")
_FLOAT_IMPORT_RE = re.compile(
    r"""import\s+\{[^}]*float[^}]*\}\s+from\s+['"]drizzle-orm/pg-core['"];?"""
)

FULL_PG_CORE_IMPORT = (
    "import { pgTable, uuid, varchar, integer, boolean, text, real, timestamp, "
    "date, json, jsonb, decimal, numeric, smallint, bigint, doublePrecision, "
    "serial, bigserial, smallserial } from 'drizzle-orm/pg-core';"
)

# Helpers the model sometimes emits that pg-core does not export
_COLUMN_FIXUPS: tuple[tuple[str, str], ...] = (
    ("float(", "real("),
    ("double(", "doublePrecision("),
    ("number(", "integer("),
)

DB_TEMPLATE = """\
import { drizzle } from "drizzle-orm/postgres-js";
import * as schema from "./schema";
import postgres from "postgres";

const client = postgres(process.env.DATABASE_URL as string);

export const db = drizzle(client, { schema, logger: true });
"""


def extract_schema_code(response: str) -> str:
    """Keep the pg-core import and the ``pgTable`` blocks of *response*."""
    import_match = _IMPORT_LINE_RE.search(response)
    import_line = ""
    if import_match:
        import_line = re.sub(r"^\s*//\s*", "", import_match.group(0)).strip()
    blocks = [m.group(0) for m in _TABLE_BLOCK_RE.finditer(response)]
    code = f"{import_line}\n\n" + "\n\n".join(blocks)

    code = _FLOAT_IMPORT_RE.sub(FULL_PG_CORE_IMPORT, code)
    for wrong, right in _COLUMN_FIXUPS:
        code = code.replace(wrong, right)
    return code


def _import_names(schema: str) -> list[str]:
    match = _IMPORT_LINE_RE.search(schema)
    if not match:
        return []
    names = _IMPORT_NAMES_RE.search(match.group(0))
    if not names:
        return []
    return [n.strip() for n in names.group(1).split(",") if n.strip()]


def merge_schemas(existing: str, new: str) -> str:
    """Merge two schema files.

    Imported names are unioned; a table defined in both keeps the *new*
    definition, in the position of the existing one.
    """
    if not existing.strip():
        return new

    names: dict[str, None] = {}
    for name in _import_names(existing) + _import_names(new):
        names.setdefault(name, None)
    import_line = (
        f"import {{ {', '.join(names)} }} from 'drizzle-orm/pg-core';" if names else ""
    )

    tables: dict[str, str] = {}
    for match in _TABLE_BLOCK_RE.finditer(existing):
        tables[match.group(1)] = match.group(0)
    for match in _TABLE_BLOCK_RE.finditer(new):
        tables[match.group(1)] = match.group(0)

    return f"{import_line}\n\n" + "\n\n".join(tables.values())


class SchemaGenerator:
    """Generates the Drizzle schema for tables of the dataset."""

    def __init__(self, llm: LLMClient, model: str | None = None) -> None:
        self.llm = llm
        self.model = model

    async def generate(
        self, store: DatasetStore, table_names: list[str] | None = None
    ) -> GenerationResult:
        """Generate and write the schema for *table_names*.

        With no names, every table whose schema has not been generated yet
        is processed.  Unknown names are skipped with a warning.

        Raises:
            DatasetNotFoundError: If no dataset has been extracted.
            LLMError: If the completion request fails.
        """
        tables = store.load_tables()
        if not tables:
            raise DatasetNotFoundError("Dataset has no tables - run extract first")

        requested = table_names or store.tables_needing_schema()
        if not requested:
            return GenerationResult(message="All tables already have schemas generated")

        selected = {name: tables[name] for name in requested if name in tables}
        skipped = [name for name in requested if name not in tables]
        for name in skipped:
            logger.warning("Table %s not found in extracted data", name)
        if not selected:
            return GenerationResult(
                message="No valid tables found to generate schema for", skipped=skipped
            )

        logger.info("Generating schema for tables: %s", ", ".join(selected))
        response = await self.llm.complete(
            SCHEMA_SYSTEM_PROMPT,
            build_schema_prompt(selected),
            model=self.model or self.llm.config.schema_model,
        )
        schema_code = extract_schema_code(response)

        drizzle_dir = store.project_root / constants.DRIZZLE_DIR
        drizzle_dir.mkdir(parents=True, exist_ok=True)
        schema_path = drizzle_dir / constants.SCHEMA_FILENAME
        existing = schema_path.read_text(encoding="utf-8") if schema_path.exists() else ""
        schema_path.write_text(merge_schemas(existing, schema_code), encoding="utf-8")
        db_path = drizzle_dir / constants.DB_FILENAME
        db_path.write_text(DB_TEMPLATE, encoding="utf-8")

        for name in selected:
            store.update_table_status(name, schema_generated=True)

        return GenerationResult(
            message=f"Schema generated successfully for tables: {', '.join(selected)}",
            tables=list(selected),
            skipped=skipped,
            files=[
                relative_posix(schema_path, store.project_root),
                relative_posix(db_path, store.project_root),
            ],
        )
