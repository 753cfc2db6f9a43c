"""Prompt builders for the LLM-backed generation steps."""
from __future__ import annotations

import json
import textwrap

from src.shared.models.dataset import Table, TableSummary

SCHEMA_SYSTEM_PROMPT = "You are a Drizzle ORM + TypeScript expert"

VALIDATION_SYSTEM_PROMPT = (
    "You are a data validation expert. Analyze user requests against "
    "available data and provide clear validation results."
)

_SCHEMA_RULES = textwrap.dedent(
    """\
    You are a TypeScript and Drizzle ORM expert.
    Given the following JavaScript constants (arrays of objects), generate Drizzle ORM schema definitions in TypeScript using PostgreSQL.

    IMPORTANT RULES:
    - Use `uuid('id').primaryKey().defaultRandom()` for IDs (if they are string-based).
    - Use `varchar()` instead of `text()` for short string fields like `title`, `artist`, etc.
    - If values are floating point numbers, use `real()` instead of `integer()`.
    - For optional fields, use the column type without any additional methods (e.g. `varchar('subtitle')`).
    - For required fields, use the `.notNull()` method.
    - Create one table per constant name, using the constant name as the export name.
    - Return only valid TypeScript code with a named `export const` for each table using `pgTable`.
    - Include the import statement: `import { pgTable, uuid, varchar, integer, boolean, text, real } from 'drizzle-orm/pg-core';`
    - DO NOT use the `.optional()` method - it doesn't exist in Drizzle ORM.
    """
)

_VALIDATION_RULES = textwrap.dedent(
    """\
    GUIDELINES:
    1. For API creation or storage requests ("create API for X", "store X", "save X"), the request is VALID if a matching table exists.
    2. Use semantic matching and synonyms (e.g. "recently played music" matches a "recentlyPlayed" table, "users" matches "user").
    3. Do not reject requests because of minor naming differences or ambiguous phrasing.
    4. The request is INVALID when no table holds data related to it.

    RESPONSE FORMAT:
    - If VALID: "VALID: [brief explanation of how the data supports the request]"
    - If INVALID: "INVALID: [specific reason why the data does not support the request]"
    """
)


def render_constant(name: str, table: Table) -> str:
    """Render a table back into a ``const`` declaration for the prompt."""
    return f"const {name} = {json.dumps(table.data, indent=2, ensure_ascii=False)};"


def build_schema_prompt(tables: dict[str, Table]) -> str:
    constants = "\n".join(render_constant(name, table) for name, table in tables.items())
    return f"{_SCHEMA_RULES}\nDataset:\n{constants}\n"


def build_validation_prompt(query: str, summaries: list[TableSummary]) -> str:
    """Describe the available tables and ask for a VALID/INVALID verdict."""
    blocks: list[str] = []
    for summary in summaries:
        sample = json.dumps(summary.sample_data, indent=2, ensure_ascii=False)
        blocks.append(
            f"- Table Name: {summary.table_name} ({summary.record_count} records)\n"
            f"  Fields: {', '.join(summary.sample_fields)}\n"
            f"  Sample Data:\n{sample}"
        )
    tables_text = "\n".join(blocks) if blocks else "(none)"
    return (
        "You are a data validation expert. Your task is to evaluate if the "
        "user's request can be fulfilled using the available data tables.\n\n"
        f'USER REQUEST:\n"{query}"\n\n'
        f"AVAILABLE DATA TABLES:\n{tables_text}\n\n"
        f"{_VALIDATION_RULES}"
    )
