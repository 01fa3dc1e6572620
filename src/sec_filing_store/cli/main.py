"""Typer application root for the sec-store CLI."""

from importlib.metadata import version
from typing import Optional

import typer
from rich.console import Console

from sec_filing_store.cli.manage import manage_app
from sec_filing_store.cli.search import search_app
from sec_filing_store.core.logging import (
    configure_logging,
    set_log_level,
    suppress_third_party_loggers,
)

console = Console()

app = typer.Typer(
    name="sec-store",
    help="Track, search and monitor crawled SEC filings.",
    no_args_is_help=True,
)

app.add_typer(search_app, name="search", help="Search by company, form type or content.")
app.add_typer(manage_app, name="manage", help="Crawl metrics and document bookkeeping.")


def _show_version(value: bool) -> None:
    if value:
        console.print(f"sec-store {version('sec-filing-store')}")
        raise typer.Exit()


@app.callback()
def main(
    _version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=_show_version,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Shortcut for --log-level DEBUG.",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="DEBUG, INFO, WARNING or ERROR (default: LOG_LEVEL or INFO).",
    ),
) -> None:
    """Track, search and monitor crawled SEC filings."""
    level = "DEBUG" if verbose else log_level
    configure_logging(level)
    if level is not None:
        set_log_level(level)
    # Azure SDK request logs drown out ours at INFO.
    suppress_third_party_loggers()
