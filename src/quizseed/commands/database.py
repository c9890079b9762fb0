"""
Database Commands

This module contains the ``db init`` and ``db reset`` command implementations.
"""

import sys

import click
from rich.console import Console

from quizseed.core.database import init_database, reset_database, check_database_connection
from quizseed.core.exceptions import QuizSeedException
from quizseed.utils.logging import get_logger

console = Console()
logger = get_logger(__name__)


@click.command()
@click.pass_context
def init(ctx):
    """Create the quiz tables if they do not exist."""
    try:
        init_database()
        check_database_connection()
        console.print(f"[green]Database ready: {ctx.obj['config'].database.url}[/green]")

    except QuizSeedException as e:
        console.print(f"[red]Error initializing database: {str(e)}[/red]")
        logger.error(f"Database initialization failed: {str(e)}")
        sys.exit(1)


@click.command()
@click.option('--yes', is_flag=True, help='Confirm dropping every table')
@click.pass_context
def reset(ctx, yes):
    """Drop and recreate all tables.

    \b
    WARNING: every seeded row is lost. Re-run 'quizseed seed run' afterwards.
    """
    if not yes:
        console.print("[yellow]Refusing to reset without --yes[/yellow]")
        sys.exit(1)

    try:
        reset_database()
        console.print("[green]Database reset complete[/green]")

    except QuizSeedException as e:
        console.print(f"[red]Error resetting database: {str(e)}[/red]")
        logger.error(f"Database reset failed: {str(e)}")
        sys.exit(1)
