"""Rich-based terminal display layer for the seeder CLI.

All functions share the module-level ``_console`` so that formatting is
consistent and tests can swap it for a capturing console.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table as RichTable
from rich.text import Text

from src.shared.constants import VERSION
from src.shared.models.dataset import ExtractionResult, ExtractionStatus, Table
from src.shared.models.generation import GenerationResult, ValidationOutcome

# ---------------------------------------------------------------------------
# Module-level Console singleton
# ---------------------------------------------------------------------------

_console = Console()

_STATUS_STYLES: dict[ExtractionStatus, str] = {
    ExtractionStatus.EXTRACTED: "green",
    ExtractionStatus.ALREADY_EXTRACTED: "cyan",
    ExtractionStatus.NO_ENTRY_POINTS: "yellow",
    ExtractionStatus.NO_DATA: "yellow",
    ExtractionStatus.ERROR: "red",
}


# ---------------------------------------------------------------------------
# Display functions
# ---------------------------------------------------------------------------


def print_header(project_root: str) -> None:
    """Print a panel identifying the tool and the project being processed."""
    header = Text()
    header.append("UI Data Seeder", style="bold white")
    header.append(f" v{VERSION}\n", style="dim")
    header.append("Project: ", style="bold")
    header.append(project_root, style="green")
    _console.print(Panel(header, border_style="blue", expand=False))


def print_extraction_result(result: ExtractionResult) -> None:
    """Print the outcome of an extraction pass and, if any, its tables."""
    style = _STATUS_STYLES.get(result.status, "white")
    _console.print(f"[{style}]{escape(result.message)}[/{style}]")
    if result.entry_points:
        _console.print(f"[dim]Entry points: {escape(', '.join(result.entry_points))}[/dim]")
    if result.tables:
        print_tables(result.tables)
    if result.dataset_path and result.status == ExtractionStatus.EXTRACTED:
        _console.print(f"Data saved to [bold]{escape(result.dataset_path)}[/bold]")


def print_tables(tables: dict[str, Table]) -> None:
    """Print one row per table: records, fields, sources and status flags."""
    if not tables:
        _console.print("[dim]No tables in dataset.[/dim]")
        return

    table = RichTable(title="Extracted Tables", show_header=True, header_style="bold magenta")
    table.add_column("Table", style="cyan", min_width=16)
    table.add_column("Records", justify="right")
    table.add_column("Fields")
    table.add_column("Source Files")
    table.add_column("Schema", justify="center")
    table.add_column("Seeded", justify="center")

    for name, info in tables.items():
        status = info.effective_status()
        table.add_row(
            escape(name),
            str(len(info.data)),
            escape(", ".join(info.fields)) or "—",
            escape("\n".join(info.source_files)) or "—",
            _flag(status.schema_generated),
            _flag(status.seeded),
        )
    _console.print(table)


def print_generation_result(result: GenerationResult) -> None:
    _console.print(f"[green]{escape(result.message)}[/green]")
    if result.skipped:
        _console.print(f"[yellow]Skipped: {escape(', '.join(result.skipped))}[/yellow]")
    for path in result.files:
        _console.print(f"  wrote [bold]{escape(path)}[/bold]")


def print_validation(outcome: ValidationOutcome) -> None:
    style = "green" if outcome.valid else "red"
    _console.print(f"[{style}]{escape(outcome.message)}[/{style}]")


def print_error_panel(error: str | Exception) -> None:
    """Print an error message in a red Rich panel."""
    _console.print(
        Panel(
            Text(str(error), style="bold white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            expand=False,
        )
    )


def _flag(value: bool) -> str:
    return "[green]yes[/green]" if value else "[dim]no[/dim]"
