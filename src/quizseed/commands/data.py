"""
Data Commands

This module contains the data reporting and maintenance command
implementations: ``stats``, ``duplicates`` and ``fingerprint``.
"""

import sys

import click
from rich.console import Console
from rich.table import Table

from quizseed.core.database import get_db_session
from quizseed.core.exceptions import QuizSeedException
from quizseed.storage.repositories import QuestionRepository
from quizseed.utils.logging import get_logger

console = Console()
logger = get_logger(__name__)


def _distribution_table(title: str, label: str, distribution: dict, total: int) -> Table:
    table = Table(title=title)
    table.add_column(label, style="cyan")
    table.add_column("Count", justify="right", style="green")
    table.add_column("Percentage", justify="right", style="yellow")

    for key, count in distribution.items():
        percentage = (count / total) * 100 if total else 0
        table.add_row(str(key), str(count), f"{percentage:.1f}%")
    return table


@click.command()
@click.option('--detailed', '-d', is_flag=True, help='Show distributions per category, type and difficulty')
def stats(detailed):
    """Show statistics about the seeded data.

    \b
    EXAMPLES:

    quizseed data stats
    quizseed data stats --detailed
    """
    try:
        with get_db_session() as session:
            stats = QuestionRepository(session).get_statistics()

        if stats['total_questions'] == 0:
            console.print("[yellow]No questions found in database. Run 'quizseed seed run' first.[/yellow]")
            return

        table = Table(title="Seed Statistics")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("Categories", f"{stats['total_categories']:,}")
        table.add_row("Subcategories", f"{stats['total_subcategories']:,}")
        table.add_row("Questions", f"{stats['total_questions']:,}")
        table.add_row("Certification Questions", f"{stats['certification_questions']:,}")
        table.add_row("Answers", f"{stats['total_answers']:,}")
        table.add_row("Users", f"{stats['total_users']:,}")
        console.print(table)

        if detailed:
            total = stats['total_questions']
            console.print(_distribution_table("Questions per Category", "Category", stats['category_distribution'], total))
            console.print(_distribution_table("Questions per Type", "Type", stats['type_distribution'], total))
            console.print(_distribution_table("Questions per Difficulty", "Difficulty", stats['difficulty_distribution'], total))

    except QuizSeedException as e:
        console.print(f"[red]Error retrieving statistics: {str(e)}[/red]")
        logger.error(f"Statistics retrieval failed: {str(e)}")
        sys.exit(1)


@click.command()
@click.option('--delete', is_flag=True, help='Delete duplicates, keeping the lowest id of each group')
def duplicates(delete):
    """Find questions whose text differs only in case or surrounding whitespace."""
    try:
        with get_db_session() as session:
            repo = QuestionRepository(session)
            groups = repo.find_duplicate_groups()

            if not groups:
                console.print("[green]No duplicate questions found.[/green]")
                return

            console.print(f"[yellow]{len(groups)} group(s) of duplicate questions found.[/yellow]")
            table = Table(title="Duplicate Questions")
            table.add_column("Question text", style="cyan")
            table.add_column("Count", justify="right", style="yellow")
            table.add_column("IDs", style="dim")
            for group in groups:
                text = group['text'] if len(group['text']) <= 60 else group['text'][:57] + "..."
                table.add_row(text, str(group['count']), ", ".join(str(i) for i in group['ids']))
            console.print(table)

            if delete:
                deleted = repo.delete_duplicates()
                console.print(f"[green]{deleted} duplicate question(s) deleted.[/green]")
            else:
                console.print("[dim]Use --delete to remove duplicates (keeps the lowest id).[/dim]")

    except QuizSeedException as e:
        console.print(f"[red]Error checking duplicates: {str(e)}[/red]")
        logger.error(f"Duplicate check failed: {str(e)}")
        sys.exit(1)


@click.command()
def fingerprint():
    """Assign content fingerprints to questions that have none."""
    try:
        with get_db_session() as session:
            updated = QuestionRepository(session).backfill_identifiers()

        if updated:
            console.print(f"[green]Assigned identifiers to {updated} question(s).[/green]")
        else:
            console.print("[green]Every question already has an identifier.[/green]")

    except QuizSeedException as e:
        console.print(f"[red]Error assigning identifiers: {str(e)}[/red]")
        logger.error(f"Identifier backfill failed: {str(e)}")
        sys.exit(1)
