#!/usr/bin/env python3
"""Command line entry point for ff-search."""

import json
import sys
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import DatabaseSettings
from .db import DataAccessGuard, MySQL
from .exceptions import FFSearchError
from .log import configure_logging
from .search import Search

console = Console()

app = typer.Typer(
    name="ff-search",
    help="Full-text search over MySQL tables.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool):
    """Show version and exit."""
    if value:
        console.print(f"[bold cyan]ff-search[/bold cyan] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
):
    """
    Search MySQL FULLTEXT-indexed columns.

    Connection settings are read from DB_HOST, DB_PORT, DB_NAME, DB_USER,
    DB_PASS and DB_CHARSET.
    """
    pass


def _render_result(result: Dict[str, Any]) -> Table:
    pagination = result.get("pagination")
    if pagination:
        title = (
            f"{result['column']}: {pagination['totalEntries']} matches, "
            f"page {pagination['currentPage']}/{pagination['totalPages']}"
        )
    else:
        title = f"{result['column']}: {result['resultTotal']} matches"

    table = Table(title=title, show_lines=False)
    items = result["items"]
    if not items:
        table.add_column("(no rows)")
        return table

    # Relevance scores are ranking internals
    keys = [key for key in items[0] if not key.startswith("relevance")]
    for key in keys:
        table.add_column(key)
    for item in items:
        table.add_row(*(str(item.get(key, "")) for key in keys))
    return table


@app.command(name="run")
def run_search(
    table: str = typer.Argument(..., help="Table to search"),
    terms: List[str] = typer.Argument(..., help="Search terms, rows matching any term match"),
    column: List[str] = typer.Option(
        ..., "--column", "-c", help="FULLTEXT-indexed column to search (repeatable)"
    ),
    select: Optional[List[str]] = typer.Option(
        None, "--select", "-s", help="Column to return (repeatable, default: searched columns)"
    ),
    offset: int = typer.Option(0, "--offset", min=0, help="Rows to skip per column"),
    limit: int = typer.Option(10, "--limit", "-l", min=0, help="Rows per column (0 = all)"),
    order: Optional[List[str]] = typer.Option(None, "--order", help="ORDER BY expression"),
    join: Optional[List[str]] = typer.Option(None, "--join", help="Raw JOIN fragment"),
    allow_table: Optional[List[str]] = typer.Option(
        None, "--allow-table", help="Restrict queries to these tables"
    ),
    allow_column: Optional[List[str]] = typer.Option(
        None, "--allow-column", help="Restrict queries to these columns"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result envelope as JSON"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level"),
):
    """Run a multi-column full-text search and print the ranked results."""
    configure_logging(level=log_level)

    try:
        db = MySQL.from_settings(DatabaseSettings.from_env())
        with db:
            guard = DataAccessGuard(db, tables=allow_table, columns=allow_column)
            envelope = (
                Search(guard)
                .search(table, terms)
                .columns(column)
                .select(select or column)
                .limit(offset, limit)
                .order(order or [])
                .join(join or [])
                .execute()
            )
    except FFSearchError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    if as_json:
        console.print_json(json.dumps(envelope, default=str))
        return

    for result in envelope["results"]:
        console.print(_render_result(result))
    console.print(
        f"[dim]Searched {', '.join(envelope['columns'])} in {envelope['performance']:.3f}s[/dim]"
    )


def run():
    """Main entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)
