"""
Command-line interface for gh-notion-sync.

This module provides the Typer-based CLI for syncing open GitHub issues
into a Notion database. Settings come from options or the environment;
a .env file in the working directory is loaded first.
"""

import asyncio
import logging
from enum import Enum
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .batch import DEFAULT_BATCH_SIZE
from .exceptions import GitHubNotionSyncError
from .github_client import GitHubClient
from .models import SyncConfig, SyncResult
from .notion_client import NotionClient
from .sync import run_sync

# Create Typer app
app = typer.Typer(
    name="gh-notion-sync",
    help="Sync open GitHub issues into a Notion database",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()
error_console = Console(stderr=True)


class LogLevel(str, Enum):
    """Log level options."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


GitHubTokenOption = Annotated[
    str | None,
    typer.Option(
        "--github-token",
        help="GitHub API token (or set GITHUB_KEY)",
        envvar=["GITHUB_KEY", "GITHUB_TOKEN"],
        show_default=False,
    ),
]

NotionTokenOption = Annotated[
    str | None,
    typer.Option(
        "--notion-token",
        help="Notion integration token (or set NOTION_KEY)",
        envvar=["NOTION_KEY", "NOTION_TOKEN"],
        show_default=False,
    ),
]

DatabaseOption = Annotated[
    str | None,
    typer.Option(
        "--database-id",
        "-d",
        help="Target Notion database id",
        envvar="NOTION_DATABASE_ID",
        show_default=False,
    ),
]

TimeoutOption = Annotated[
    int,
    typer.Option(
        "--timeout",
        help="HTTP timeout in seconds",
        min=5,
        max=300,
    ),
]

VerboseOption = Annotated[
    bool,
    typer.Option(
        "-v",
        "--verbose",
        help="Enable verbose output",
    ),
]


def _require(value: str | None, option: str, envvar: str) -> str:
    """Return a required setting or fail with a usage error."""
    if not value:
        raise typer.BadParameter(f"{option} is required (or set {envvar} environment variable)")
    return value


def setup_logging(level: LogLevel, verbose: bool = False) -> None:
    """Configure logging with Rich handler."""
    log_level = getattr(logging, level.value.upper())

    if verbose:
        log_level = logging.DEBUG

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"gh-notion-sync version {__version__}")
        raise typer.Exit


def _report_error(e: GitHubNotionSyncError, prefix: str = "[red]Error:[/red]") -> None:
    error_console.print(f"{prefix} {e.message}")
    if e.hint:
        error_console.print(f"[dim]Hint: {e.hint}[/dim]")


@app.command()
def sync(
    repo: Annotated[
        str | None,
        typer.Option(
            "-r",
            "--repo",
            help="Repository in owner/repo format",
            envvar="GITHUB_REPO",
            show_default=False,
        ),
    ] = None,
    database_id: DatabaseOption = None,
    github_token: GitHubTokenOption = None,
    notion_token: NotionTokenOption = None,
    batch_size: Annotated[
        int,
        typer.Option(
            "-b",
            "--batch-size",
            help="Number of Notion writes sent concurrently",
            envvar="SYNC_BATCH_SIZE",
            min=1,
        ),
    ] = DEFAULT_BATCH_SIZE,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would happen without making changes",
        ),
    ] = False,
    timeout: TimeoutOption = 30,
    verbose: VerboseOption = False,
    log_level: Annotated[
        LogLevel,
        typer.Option(
            "--log-level",
            help="Set log level",
        ),
    ] = LogLevel.INFO,
    _version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
) -> None:
    """
    Sync open issues into a Notion database.

    Rows are matched to issues by their "Issue Number" property. New
    issues get a new row; existing rows have their fields overwritten.

    Examples:

        gh-notion-sync sync --repo owner/repo --database-id abc123

        GITHUB_REPO=owner/repo gh-notion-sync sync --dry-run
    """
    setup_logging(log_level, verbose)

    repo = _require(repo, "--repo", "GITHUB_REPO")
    database_id = _require(database_id, "--database-id", "NOTION_DATABASE_ID")
    github_token = _require(github_token, "--github-token", "GITHUB_KEY")
    notion_token = _require(notion_token, "--notion-token", "NOTION_KEY")

    if dry_run:
        console.print("[yellow]Dry run mode - no changes will be written[/yellow]")

    console.print(f"Syncing [bold]{repo}[/bold] -> Notion database [bold]{database_id}[/bold]")

    try:
        config = SyncConfig(
            repo=repo,
            database_id=database_id,
            batch_size=batch_size,
            dry_run=dry_run,
        )
        result = run_sync(config, github_token, notion_token, timeout=timeout)
    except GitHubNotionSyncError as e:
        _report_error(e)
        raise typer.Exit(1) from None
    except KeyboardInterrupt:
        error_console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(130) from None

    _display_result(result)

    if not dry_run:
        console.print("\n[green]✅ Notion database is synced with GitHub.[/green]")


@app.command()
def check(
    database_id: DatabaseOption = None,
    github_token: GitHubTokenOption = None,
    notion_token: NotionTokenOption = None,
    timeout: TimeoutOption = 30,
    verbose: VerboseOption = False,
) -> None:
    """
    Check credentials and database access.

    Verifies that the GitHub token is accepted and that the Notion
    integration can read the target database.
    """
    setup_logging(LogLevel.INFO, verbose)

    database_id = _require(database_id, "--database-id", "NOTION_DATABASE_ID")
    github_token = _require(github_token, "--github-token", "GITHUB_KEY")
    notion_token = _require(notion_token, "--notion-token", "NOTION_KEY")

    with console.status("Checking connections..."):
        try:
            asyncio.run(_check_github(github_token, timeout))
            console.print("[green]✓[/green] GitHub token is valid")

            asyncio.run(_check_notion(notion_token, database_id, timeout))
            console.print(f"[green]✓[/green] Notion database {database_id} is readable")

            console.print("\n[green]All checks passed![/green]")

        except GitHubNotionSyncError as e:
            _report_error(e, prefix="[red]✗[/red]")
            raise typer.Exit(1) from None


async def _check_github(token: str, timeout: int) -> None:
    client = GitHubClient(token, timeout=timeout)
    try:
        await client.check_connection()
    finally:
        await client.close()


async def _check_notion(token: str, database_id: str, timeout: int) -> None:
    client = NotionClient(token, timeout=timeout)
    try:
        await client.check_connection(database_id)
    finally:
        await client.close()


def _display_result(result: SyncResult) -> None:
    """Display sync result as a formatted table."""
    action_word = "Would sync" if result.dry_run else "Synced"

    # Summary panel
    summary = Table.grid(padding=(0, 2))
    summary.add_column(style="bold")
    summary.add_column()

    summary.add_row("Open issues:", str(result.total_issues))
    summary.add_row("Notion rows:", str(result.total_rows))
    summary.add_row("Created:", f"[green]{result.created}[/green]")
    summary.add_row("Updated:", f"[yellow]{result.updated}[/yellow]")
    summary.add_row("Batches:", str(result.batches))

    panel = Panel(
        summary,
        title=f"{action_word} Results",
        border_style="green",
    )
    console.print(panel)


def main() -> None:
    """Entry point for the CLI."""
    load_dotenv()
    app()


if __name__ == "__main__":
    main()
