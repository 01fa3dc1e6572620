"""Helpers shared by the CLI command modules."""

from datetime import date, datetime
from typing import NoReturn, Optional

import typer
from rich.console import Console

from sec_filing_store.core import FilingStoreError, StorageUnavailableError
from sec_filing_store.search import PaginatedResult
from sec_filing_store.storage import DocumentStore, create_store

console = Console()

DATE_FORMATS = ["%Y-%m-%d"]


def open_store() -> DocumentStore:
    """Build and initialise the configured store, exiting with code 1 on failure."""
    try:
        store = create_store()
        store.initialize()
    except FilingStoreError as e:
        fail("Storage error", e, hint="Check the STORAGE_* settings in your .env file.")
    return store


def fail(label: str, error: FilingStoreError, hint: Optional[str] = None) -> NoReturn:
    """Print a library error the standard way and exit with code 1."""
    console.print(f"[red]{label}:[/red] {error.message}")
    if error.details:
        console.print(f"  [dim]{error.details}[/dim]")
    if hint is None and isinstance(error, StorageUnavailableError):
        hint = "The storage backend is unreachable. Retry later."
    if hint:
        console.print(f"  [dim italic]Hint: {hint}[/dim italic]")
    raise typer.Exit(code=1) from None


def to_date(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value else None


def print_page_footer(result: PaginatedResult) -> None:
    """One-line pagination summary under a results table."""
    if result.total_pages == 0:
        return
    nav = []
    if result.has_previous_page:
        nav.append(f"--page {result.page - 1} for previous")
    if result.has_next_page:
        nav.append(f"--page {result.page + 1} for next")
    suffix = f"  [dim]({', '.join(nav)})[/dim]" if nav else ""
    console.print(
        f"Page {result.page}/{result.total_pages} "
        f"({result.total_count} total){suffix}"
    )
