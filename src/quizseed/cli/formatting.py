"""
CLI Output Formatting

Rich formatting utilities for CLI output: generic tables, seeding run
reports, batch plans and message panels.
"""

from typing import Dict, List, Any, Optional, Sequence
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

from quizseed.seeding.upsert import Outcome

console = Console()

STATE_STYLES = {
    "pending": "dim",
    "running": "yellow",
    "committed": "green",
    "rolled_back": "cyan",
    "failed": "red",
}


def format_table(data: List[Dict[str, Any]], title: str = "Results", headers: Optional[List[str]] = None) -> Table:
    """
    Format data as a Rich table.

    Args:
        data: List of dictionaries with row data
        title: Table title
        headers: Optional list of column headers (uses keys from first row if not provided)

    Returns:
        Rich Table object
    """
    if not data:
        table = Table(title=title)
        table.add_column("Message", style="dim")
        table.add_row("No data available")
        return table

    if headers is None:
        headers = list(data[0].keys())

    table = Table(title=title, show_header=True, header_style="bold blue")
    for header in headers:
        table.add_column(header, style="white", justify="left")

    for row in data:
        table.add_row(*[str(row.get(header, "N/A")) for header in headers])

    return table


def format_plan(batches: Sequence, title: str = "Seeding Plan") -> Table:
    """Table of batches in execution order."""
    table = Table(title=title, show_header=True, header_style="bold blue")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Batch", style="cyan")
    table.add_column("Depends on", style="white")
    table.add_column("Groups", style="magenta")
    table.add_column("Questions", justify="right", style="green")

    for index, batch in enumerate(batches, 1):
        table.add_row(
            str(index),
            batch.name,
            ", ".join(batch.depends_on) or "-",
            ", ".join(batch.groups) or "-",
            str(len(batch.records)),
        )
    return table


def format_run_report(report) -> Table:
    """Per-batch outcome table for a finished (or aborted) run."""
    title = "Seeding Report (dry run)" if report.dry_run else "Seeding Report"
    table = Table(title=title, show_header=True, header_style="bold blue")
    table.add_column("Batch", style="cyan")
    table.add_column("State")
    table.add_column("Created", justify="right", style="green")
    table.add_column("Updated", justify="right", style="yellow")
    table.add_column("Unchanged", justify="right", style="dim")
    table.add_column("Skipped", justify="right", style="red")
    table.add_column("Time", justify="right")

    for result in report.results:
        state = result.state.value
        table.add_row(
            result.name,
            f"[{STATE_STYLES.get(state, 'white')}]{state}[/]",
            str(result.stats.total(Outcome.CREATED)),
            str(result.stats.total(Outcome.UPDATED)),
            str(result.stats.total(Outcome.UNCHANGED)),
            str(result.stats.total(Outcome.SKIPPED)),
            f"{result.duration:.2f}s",
        )
    return table


def display_error(message: str, error_type: str = "Error") -> None:
    """Display a formatted error message."""
    console.print(Panel(f"[red]{escape(message)}[/red]", title=error_type, border_style="red"))
