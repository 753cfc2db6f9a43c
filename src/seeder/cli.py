"""Command-line interface for the UI data seeder.

Commands::

    extract          Scan the UI source tree and write data.json
    tables           List extracted tables and their status
    validate         Ask the LLM whether a request fits the extracted data
    generate-schema  Generate src/drizzle/schema.ts with the LLM
    seed-script      Write src/drizzle/seed.ts for tables awaiting seeding
    mark-seeded      Record that tables have been seeded
    init-config      Write a default .seeder.yml
"""
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer

from src.data_extraction.extractor import DataExtractor
from src.dataset.store import DatasetStore
from src.generation.llm_client import LLMClient
from src.generation.schema_writer import SchemaGenerator
from src.generation.seed_writer import write_seed_script
from src.generation.validator import RequestValidator
from src.seeder import display
from src.shared.config import DEFAULT_CONFIG_TEMPLATE, SeederConfig, load_seeder_config
from src.shared.constants import CONFIG_FILENAME, SEEDER_SERVICE_NAME, VERSION
from src.shared.errors import AppError
from src.shared.logging import setup_logging

app = typer.Typer(
    name="seeder",
    help="Extract hardcoded UI sample data into a dataset and generate database bindings.",
    no_args_is_help=True,
)

ProjectArg = typer.Argument(
    Path("."), exists=True, file_okay=False, dir_okay=True, resolve_path=True,
    help="Project root directory.",
)
ConfigOpt = typer.Option(
    None, "--config", "-c", help=f"Config file (default: <project>/{CONFIG_FILENAME})."
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"ui-data-seeder {VERSION}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """UI data seeder."""


def _load_config(project: Path, config_path: Optional[Path]) -> SeederConfig:
    try:
        cfg = load_seeder_config(config_path or project / CONFIG_FILENAME)
    except AppError as exc:
        display.print_error_panel(exc.detail)
        raise typer.Exit(code=exc.exit_code) from exc
    setup_logging(SEEDER_SERVICE_NAME, cfg.extraction.log_level)
    return cfg


def _store(project: Path, cfg: SeederConfig) -> DatasetStore:
    return DatasetStore(project, cfg.extraction.dataset_filename)


def _fail(exc: AppError) -> None:
    display.print_error_panel(exc.detail)
    raise typer.Exit(code=exc.exit_code)


@app.command()
def extract(project: Path = ProjectArg, config: Optional[Path] = ConfigOpt) -> None:
    """Scan the UI source tree and write the dataset."""
    cfg = _load_config(project, config)
    display.print_header(str(project))
    result = DataExtractor(cfg.extraction).extract_sync(project)
    display.print_extraction_result(result)
    if not result.ok:
        raise typer.Exit(code=1)


@app.command()
def tables(project: Path = ProjectArg, config: Optional[Path] = ConfigOpt) -> None:
    """List extracted tables with their status flags."""
    cfg = _load_config(project, config)
    try:
        display.print_tables(_store(project, cfg).load_tables())
    except AppError as exc:
        _fail(exc)


@app.command()
def validate(
    query: str = typer.Argument(..., help="The request to check, e.g. 'create API for songs'."),
    project: Path = ProjectArg,
    config: Optional[Path] = ConfigOpt,
) -> None:
    """Check whether the extracted data can serve QUERY."""
    cfg = _load_config(project, config)
    validator = RequestValidator(LLMClient(cfg.llm))
    try:
        outcome = asyncio.run(validator.validate(_store(project, cfg), query))
    except AppError as exc:
        _fail(exc)
        return
    display.print_validation(outcome)
    if not outcome.valid:
        raise typer.Exit(code=1)


@app.command("generate-schema")
def generate_schema(
    project: Path = ProjectArg,
    table: Optional[list[str]] = typer.Option(
        None, "--table", "-t", help="Table to process (repeatable). Default: all pending."
    ),
    config: Optional[Path] = ConfigOpt,
) -> None:
    """Generate the Drizzle schema for extracted tables."""
    cfg = _load_config(project, config)
    generator = SchemaGenerator(LLMClient(cfg.llm))
    try:
        result = asyncio.run(generator.generate(_store(project, cfg), table or None))
    except AppError as exc:
        _fail(exc)
        return
    display.print_generation_result(result)


@app.command("seed-script")
def seed_script(
    project: Path = ProjectArg,
    table: Optional[list[str]] = typer.Option(
        None, "--table", "-t", help="Table to seed (repeatable). Default: all pending."
    ),
    config: Optional[Path] = ConfigOpt,
) -> None:
    """Write the seed script for tables that have a schema but no data yet."""
    cfg = _load_config(project, config)
    try:
        result = write_seed_script(_store(project, cfg), table or None)
    except AppError as exc:
        _fail(exc)
        return
    display.print_generation_result(result)


@app.command("mark-seeded")
def mark_seeded(
    names: list[str] = typer.Argument(..., help="Tables that have been seeded."),
    project: Path = typer.Option(
        Path("."), "--project", "-p", exists=True, file_okay=False, resolve_path=True,
        help="Project root directory.",
    ),
    config: Optional[Path] = ConfigOpt,
) -> None:
    """Record that the seed script has been run for NAMES."""
    cfg = _load_config(project, config)
    store = _store(project, cfg)
    try:
        for name in names:
            store.update_table_status(name, seeded=True)
        display.print_tables(store.load_tables())
    except AppError as exc:
        _fail(exc)


@app.command("init-config")
def init_config(
    project: Path = ProjectArg,
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file."),
) -> None:
    """Write a default config file to the project root."""
    target = project / CONFIG_FILENAME
    if target.exists() and not force:
        display.print_error_panel(f"{target} already exists (use --force to overwrite)")
        raise typer.Exit(code=1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")
    typer.echo(f"Wrote {target}")


if __name__ == "__main__":
    app()
