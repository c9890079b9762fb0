"""
Seeding Commands

This module contains the ``seed run`` and ``seed plan`` command implementations.
"""

import sys
from typing import List, Sequence

import click
from rich.console import Console
from rich.markup import escape

from quizseed.cli.formatting import format_plan, format_run_report, format_table
from quizseed.core.database import get_db_session, create_tables
from quizseed.core.exceptions import QuizSeedException
from quizseed.seeding import BatchRunner, discover_batches, resolve_order
from quizseed.seeding.batch import Batch
from quizseed.storage.store import SessionStore
from quizseed.utils.logging import get_logger

console = Console()
logger = get_logger(__name__)


def _collect_batches(settings, fixture_paths: Sequence[str], no_builtin: bool) -> List[Batch]:
    paths = list(settings.fixture_paths) + list(fixture_paths)
    include_builtin = settings.include_builtin and not no_builtin
    return discover_batches(paths, include_builtin=include_builtin)


def _groups(settings, groups: Sequence[str]) -> List[str]:
    return list(groups) or list(settings.default_groups)


@click.command()
@click.option('--group', '-g', 'groups', multiple=True, help='Only seed batches in this group (repeatable)')
@click.option('--fixtures', '-f', 'fixture_paths', multiple=True, type=click.Path(exists=True),
              help='Extra fixture file or directory (repeatable)')
@click.option('--no-builtin', is_flag=True, help='Skip the packaged fixtures')
@click.option('--dry-run', is_flag=True, help='Run every batch, then roll everything back')
@click.option('--permissive', is_flag=True, help='Log and skip invalid questions instead of aborting')
@click.pass_context
def run(ctx, groups, fixture_paths, no_builtin, dry_run, permissive):
    """Seed the database from fixtures.

    \b
    EXAMPLES:

    quizseed seed run
    quizseed seed run --group exam
    quizseed seed run --fixtures ./my-fixtures --dry-run

    \b
    Batches run in dependency order and commit one by one. Running the same
    fixtures again updates rows in place instead of duplicating them.
    """
    settings = ctx.obj['config'].seeding
    runner = None

    try:
        batches = _collect_batches(settings, fixture_paths, no_builtin)
        create_tables()

        with get_db_session() as session:
            runner = BatchRunner(
                SessionStore(session),
                settings,
                permissive=True if permissive else None,
            )
            report = runner.run(batches, _groups(settings, groups), dry_run=dry_run)

        console.print(format_run_report(report))
        rows = report.stats.as_rows()
        if rows:
            console.print(format_table(rows, title="Entities"))

        if dry_run:
            console.print("[yellow]Dry run: all changes were rolled back[/yellow]")
        else:
            console.print(f"[green]Seeded {len(report.committed)} batch(es) in {report.duration:.2f}s[/green]")

    except QuizSeedException as e:
        if runner is not None and runner.report is not None:
            console.print(format_run_report(runner.report))
        console.print(f"[red]Seeding failed: {escape(str(e))}[/red]")
        logger.error(f"Seeding failed: {str(e)}")
        sys.exit(1)


@click.command()
@click.option('--group', '-g', 'groups', multiple=True, help='Only plan batches in this group (repeatable)')
@click.option('--fixtures', '-f', 'fixture_paths', multiple=True, type=click.Path(exists=True),
              help='Extra fixture file or directory (repeatable)')
@click.option('--no-builtin', is_flag=True, help='Skip the packaged fixtures')
@click.pass_context
def plan(ctx, groups, fixture_paths, no_builtin):
    """Show the order in which batches would run."""
    settings = ctx.obj['config'].seeding

    try:
        batches = _collect_batches(settings, fixture_paths, no_builtin)
        ordered = resolve_order(batches, _groups(settings, groups))
        console.print(format_plan(ordered))

    except QuizSeedException as e:
        console.print(f"[red]Cannot plan seeding: {escape(str(e))}[/red]")
        logger.error(f"Planning failed: {str(e)}")
        sys.exit(1)
