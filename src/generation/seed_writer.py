"""Render the Drizzle seed script (``src/drizzle/seed.ts``) from the dataset.

Only the script is written; running it is left to the user's toolchain.
Once it has run, ``mark-seeded`` records that in the dataset.
"""
from __future__ import annotations

import json
import logging

from src.dataset.store import DatasetStore
from src.shared import constants
from src.shared.errors import DatasetNotFoundError
from src.shared.models.dataset import Table
from src.shared.models.generation import GenerationResult
from src.shared.utils import lower_camel, relative_posix

logger = logging.getLogger(__name__)

_SEED_HEADER = """\
import dotenv from "dotenv";
dotenv.config({path: ".env"});
import { drizzle } from "drizzle-orm/postgres-js";
import postgres from "postgres";
import * as schema from "./schema";

const client = postgres(process.env.DATABASE_URL as string);
const db = drizzle(client, { schema, logger: true });

async function seedDatabase() {
  try {
    console.log("Starting database seeding...");
"""

_SEED_FOOTER = """
    console.log("Database seeding completed successfully");
  } catch (error) {
    console.error("Error during seeding:", error);
    throw error;
  } finally {
    await client.end();
  }
}

seedDatabase().catch(console.error);
"""


def _table_block(name: str, table: Table) -> str:
    # The schema generates UUID primary keys, so source ids are not inserted
    rows = [{k: v for k, v in record.items() if k != "id"} for record in table.data]
    rows_json = json.dumps(rows, indent=4, ensure_ascii=False)
    return (
        f"\n    // Seeding {name} table\n"
        f"    console.log(`Seeding {len(rows)} records into {name} table...`);\n"
        f"    const {name}Data = {rows_json};\n"
        f"\n"
        f"    for (const record of {name}Data) {{\n"
        f"      try {{\n"
        f"        await db.insert(schema.{lower_camel(name)}).values(record);\n"
        f"      }} catch (error) {{\n"
        f"        console.log(`Error inserting record into {name}:`, error);\n"
        f"      }}\n"
        f"    }}\n"
        f"    console.log(`{name} table seeded successfully`);\n"
    )


def render_seed_script(tables: dict[str, Table]) -> str:
    """Return the TypeScript seed script for *tables*; empty tables are skipped."""
    body = "".join(
        _table_block(name, table) for name, table in tables.items() if table.data
    )
    return _SEED_HEADER + body + _SEED_FOOTER


def write_seed_script(
    store: DatasetStore, table_names: list[str] | None = None
) -> GenerationResult:
    """Write the seed script for tables that still need seeding.

    Requested tables that are already seeded are skipped with a warning so
    that the script never inserts the same rows twice.

    Raises:
        DatasetNotFoundError: If no dataset has been extracted.
    """
    tables = store.load_tables()
    if not tables:
        raise DatasetNotFoundError("Dataset has no tables - run extract first")

    pending = store.tables_needing_seeding()
    if not table_names:
        if not pending:
            return GenerationResult(
                message="All tables already seeded or don't have schemas generated"
            )
        table_names = pending

    skipped: list[str] = []
    selected: dict[str, Table] = {}
    for name in table_names:
        if name not in tables:
            logger.warning("Table %s not found in extracted data", name)
            skipped.append(name)
        elif name not in pending:
            logger.warning("Table %s is already seeded or has no schema, skipping", name)
            skipped.append(name)
        else:
            selected[name] = tables[name]

    if not selected:
        return GenerationResult(message="No tables to seed", skipped=skipped)

    drizzle_dir = store.project_root / constants.DRIZZLE_DIR
    drizzle_dir.mkdir(parents=True, exist_ok=True)
    seed_path = drizzle_dir / constants.SEED_FILENAME
    seed_path.write_text(render_seed_script(selected), encoding="utf-8")
    logger.info("Seed script written to %s", seed_path)

    return GenerationResult(
        message=f"Seed script generated for tables: {', '.join(selected)}",
        tables=list(selected),
        skipped=skipped,
        files=[relative_posix(seed_path, store.project_root)],
    )
