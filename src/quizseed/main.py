"""
CLI Entry Point

Main command-line interface for quiz-seed using the Click framework with
rich output formatting.
"""

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel

from quizseed import __version__
from quizseed.cli.formatting import display_error
from quizseed.core.config import get_config, reload_config
from quizseed.core.exceptions import QuizSeedException
from quizseed.utils.logging import setup_logging, get_logger

from quizseed.commands.seed import run, plan
from quizseed.commands.database import init as database_init, reset as database_reset
from quizseed.commands.data import stats, duplicates, fingerprint

console = Console()
logger = get_logger(__name__)


@click.group(invoke_without_command=True)
@click.option('--config', '-c', type=click.Path(exists=True), help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--debug', is_flag=True, help='Enable debug mode')
@click.option('--json-logs', is_flag=True, help='Write log records as JSON lines')
@click.version_option(__version__, prog_name='quizseed')
@click.pass_context
def cli(ctx, config, verbose, debug, json_logs):
    """quiz-seed - Idempotent seeding for the quiz database"""

    ctx.ensure_object(dict)

    try:
        if config:
            app_config = reload_config(Path(config))
        else:
            app_config = get_config()

        if debug:
            app_config.debug = debug

        if verbose or debug:
            app_config.logging.level = 'DEBUG'
            app_config.logging.console_level = 'DEBUG' if debug else 'INFO'
        setup_logging(app_config, enable_json=json_logs)

        ctx.obj['config'] = app_config

        if not ctx.invoked_subcommand:
            _display_banner()

    except QuizSeedException as e:
        console.print(f"[red]Error initializing application: {str(e)}[/red]")
        sys.exit(1)


def _display_banner():
    """Display application banner."""
    banner = Panel.fit(
        "[bold blue]quiz-seed[/bold blue]\n"
        "[dim]Natural-key upsert seeding for categories, questions and users[/dim]\n\n"
        "Use --help for available commands",
        title="Quiz Seeder",
        border_style="blue"
    )
    console.print(banner)


# ===== SEED COMMANDS =====

@cli.group()
def seed():
    """Seeding commands."""
    pass


seed.add_command(run)
seed.add_command(plan)


# ===== DATABASE COMMANDS =====

@cli.group()
def db():
    """Database management commands."""
    pass


db.add_command(database_init)
db.add_command(database_reset)


# ===== DATA COMMANDS =====

@cli.group()
def data():
    """Reporting and maintenance of seeded data."""
    pass


data.add_command(stats)
data.add_command(duplicates)
data.add_command(fingerprint)


def main():
    """Main entry point with comprehensive error handling."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(1)
    except QuizSeedException as e:
        logger.error(f"Application error: {str(e)}")
        display_error(str(e), type(e).__name__)
        sys.exit(1)
    except Exception as e:
        logger.exception("Unexpected error")
        console.print(f"[red]Unexpected error: {str(e)}[/red]")
        if '--debug' in sys.argv:
            import traceback
            console.print(f"[dim]{traceback.format_exc()}[/dim]")
        sys.exit(1)


if __name__ == '__main__':
    main()
