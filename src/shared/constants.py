"""Shared constants used across the seeder packages."""
from __future__ import annotations

# Application version
VERSION: str = "1.0.0"

# Service name used in structured log entries
SEEDER_SERVICE_NAME: str = "ui-data-seeder"

# Persisted dataset
DATASET_FILENAME: str = "data.json"
API_ROUTES_KEY: str = "apiRoutes"
RESERVED_DATASET_KEYS: frozenset[str] = frozenset({API_ROUTES_KEY})

# UI source layout
SOURCE_DIR: str = "src"
APP_DIR: str = "app"
ENTRY_FILENAME: str = "page.tsx"
EXCLUDED_DIR: str = "api"
ALIAS_PREFIX: str = "@"
COMPONENT_EXTENSION: str = ".tsx"
INDEX_FILENAME: str = "index.tsx"

# Specifiers already carrying one of these suffixes are not given another
SCRIPT_EXTENSIONS: tuple[str, ...] = (".tsx", ".ts", ".jsx", ".js")

# Data-shape heuristics for array literals
MIN_SPAN_LENGTH: int = 20
MIN_OBJECT_COUNT: int = 2

# Generated ORM files, relative to the project root
DRIZZLE_DIR: str = "src/drizzle"
SCHEMA_FILENAME: str = "schema.ts"
DB_FILENAME: str = "db.ts"
SEED_FILENAME: str = "seed.ts"

# Optional YAML config at the project root
CONFIG_FILENAME: str = ".seeder.yml"
