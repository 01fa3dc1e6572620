"""Store management subcommands (status, errors, yearly, companies, track, mark-processed)."""

from datetime import datetime
from typing import Annotated, Optional

import typer
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from sec_filing_store.cli.common import (
    DATE_FORMATS,
    console,
    fail,
    open_store,
    print_page_footer,
)
from sec_filing_store.config import normalise_form_types
from sec_filing_store.core import CrawlMetrics, FilingStoreError, generate_document_id
from sec_filing_store.metrics import MetricsAggregator

manage_app = typer.Typer(no_args_is_help=True)

CompanyOption = Annotated[
    Optional[str],
    typer.Option("--company", "-c", help="Restrict to one company (exact name)."),
]


def _rate_text(rate: float, processed: int) -> Text:
    if processed == 0:
        return Text("—", style="dim")
    style = "green" if rate >= 0.9 else "yellow" if rate >= 0.5 else "red"
    return Text(f"{rate:.1%}", style=style)


@manage_app.command("status")
def status(company: CompanyOption = None) -> None:
    """Show storage backend, health and crawl progress."""
    store = open_store()
    aggregator = MetricsAggregator(store)

    try:
        healthy = store.is_healthy()
        metrics = aggregator.crawl_metrics(company)
    except FilingStoreError as e:
        fail("Status failed", e)

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="bold")
    table.add_column("Value")

    table.add_row("Storage", Text(store.storage_type, style="cyan"))
    table.add_row(
        "Health",
        Text("healthy", style="green") if healthy else Text("unreachable", style="red"),
    )
    table.add_row("Scope", Text(metrics.company_name))

    total_style = "green" if metrics.total_documents > 0 else "dim"
    table.add_row("Documents", Text(str(metrics.total_documents), style=total_style))
    table.add_row(
        "Processed",
        Text(
            f"{metrics.processed_documents} "
            f"({metrics.successful_documents} ok, {metrics.failed_documents} failed)"
        ),
    )
    table.add_row("Pending", Text(str(metrics.pending_documents)))
    table.add_row(
        "Success rate",
        _rate_text(metrics.success_rate, metrics.processed_documents),
    )

    if metrics.form_type_counts:
        breakdown = "  |  ".join(
            f"{form}: {count}" for form, count in metrics.form_type_counts.items()
        )
        table.add_row("Forms", Text(breakdown))
    else:
        table.add_row("Forms", Text("—", style="dim"))

    last = metrics.last_processed_date
    table.add_row(
        "Last processed",
        Text(last.strftime("%Y-%m-%d %H:%M UTC"), style="dim") if last else Text("—", style="dim"),
    )

    console.print(Panel(table, title="[bold]Crawl Status[/bold]", expand=False))


@manage_app.command("errors")
def errors(company: CompanyOption = None) -> None:
    """List documents that failed processing, newest first."""
    store = open_store()
    try:
        failures = MetricsAggregator(store).processing_errors(company)
    except FilingStoreError as e:
        fail("Listing errors failed", e)

    if not failures:
        console.print("[green]No processing errors.[/green]")
        return

    table = Table(
        title=f"[bold]Processing Errors ({len(failures)})[/bold]",
        border_style="dim",
        header_style="bold",
    )
    table.add_column("Company", style="cyan")
    table.add_column("Form", style="green")
    table.add_column("Error", style="red")
    table.add_column("When", style="dim", no_wrap=True)
    table.add_column("URL", style="dim", overflow="fold")

    for err in failures:
        table.add_row(
            err.company_name,
            err.form,
            err.error_message,
            err.error_date.strftime("%Y-%m-%d %H:%M"),
            err.url,
        )

    console.print(table)


@manage_app.command("yearly")
def yearly(company: CompanyOption = None) -> None:
    """Show processing metrics per filing year."""
    store = open_store()
    aggregator = MetricsAggregator(store)
    try:
        if company:
            by_year = aggregator.company_yearly_metrics(company)
        else:
            by_year = aggregator.yearly_metrics()
    except FilingStoreError as e:
        fail("Yearly metrics failed", e)

    if not by_year:
        console.print("[yellow]No documents tracked.[/yellow]")
        return

    title = "Yearly Metrics" + (f" — {company}" if company else "")
    table = Table(title=f"[bold]{title}[/bold]", border_style="dim", header_style="bold")
    table.add_column("Year", style="bold")
    table.add_column("Total", justify="right")
    table.add_column("Processed", justify="right")
    table.add_column("Failed", justify="right", style="red")
    table.add_column("Success", justify="right")
    table.add_column("Companies", justify="right", style="cyan")

    for year, m in by_year.items():
        table.add_row(
            str(year),
            str(m.total_documents),
            str(m.processed_documents),
            str(m.failed_documents),
            _rate_text(m.success_rate, m.processed_documents),
            str(len(m.companies)),
        )

    console.print(table)


@manage_app.command("companies")
def companies(
    page: Annotated[int, typer.Option("--page", "-p", help="Page number (1-based).")] = 1,
    page_size: Annotated[
        int, typer.Option("--page-size", "-n", help="Companies per page.")
    ] = 50,
) -> None:
    """Show per-company crawl metrics, one page at a time."""
    store = open_store()
    try:
        result = MetricsAggregator(store).company_breakdown(page=page, page_size=page_size)
    except FilingStoreError as e:
        fail("Company breakdown failed", e)

    if not result.items:
        console.print("[yellow]No companies on this page.[/yellow]")
        return

    table = Table(title="[bold]Companies[/bold]", border_style="dim", header_style="bold")
    table.add_column("Company", style="cyan")
    table.add_column("Total", justify="right")
    table.add_column("Pending", justify="right")
    table.add_column("Failed", justify="right", style="red")
    table.add_column("Success", justify="right")

    for m in result.items:
        table.add_row(*_company_row(m))

    console.print(table)
    print_page_footer(result)


def _company_row(m: CrawlMetrics) -> list:
    return [
        m.company_name,
        str(m.total_documents),
        str(m.pending_documents),
        str(m.failed_documents),
        _rate_text(m.success_rate, m.processed_documents),
    ]


@manage_app.command("track")
def track(
    company: Annotated[str, typer.Argument(help="Company display name.")],
    form: Annotated[str, typer.Argument(help="Form type, e.g. 10-K.")],
    filing_date: Annotated[
        datetime, typer.Argument(help="Filing date (YYYY-MM-DD).", formats=DATE_FORMATS)
    ],
    url: Annotated[str, typer.Argument(help="Source URL of the filing.")],
) -> None:
    """Record a discovered filing (no-op if the URL is already tracked)."""
    try:
        (form_type,) = normalise_form_types([form])
    except ValueError as e:
        console.print(f"[red]Invalid form type:[/red] {e}")
        raise typer.Exit(code=1) from None

    store = open_store()
    document_id = generate_document_id(url)
    try:
        existing = store.get_document(document_id)
        store.track_document(company, form_type, filing_date.date(), url)
    except FilingStoreError as e:
        fail("Tracking failed", e)

    if existing is not None:
        console.print(f"[yellow]Already tracked:[/yellow] {existing.title}")
        return
    console.print(f"[green]Tracked:[/green] {company} {form_type} ({filing_date.date()})")
    console.print(f"  [dim]ID: {document_id}[/dim]")


@manage_app.command("mark-processed")
def mark_processed(
    url: Annotated[str, typer.Argument(help="Source URL of a tracked filing.")],
    failed: Annotated[
        bool, typer.Option("--failed", help="Record a processing failure.")
    ] = False,
    error: Annotated[
        Optional[str], typer.Option("--error", "-e", help="Failure reason.")
    ] = None,
) -> None:
    """Record the processing outcome for a tracked filing."""
    store = open_store()
    document_id = generate_document_id(url)
    try:
        before = store.get_document(document_id)
        if before is None:
            console.print(f"[red]Document not tracked:[/red] {url}")
            console.print(
                "  [dim italic]Hint: Track it first with 'sec-store manage track'."
                "[/dim italic]"
            )
            raise typer.Exit(code=1)
        if before.processed:
            console.print(f"[yellow]Already processed:[/yellow] {before.title}")
            return
        store.mark_processed(url, success=not failed, error_message=error)
    except FilingStoreError as e:
        fail("Update failed", e)

    outcome = "[red]failed[/red]" if failed else "[green]succeeded[/green]"
    console.print(f"Marked {before.title} as {outcome}")
