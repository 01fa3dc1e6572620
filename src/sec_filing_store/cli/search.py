"""Search subcommands (company, forms, content) over tracked filings."""

from datetime import datetime
from typing import Annotated, Optional

import typer
from rich.table import Table
from rich.text import Text

from sec_filing_store.cli.common import (
    DATE_FORMATS,
    console,
    fail,
    open_store,
    print_page_footer,
    to_date,
)
from sec_filing_store.config import get_settings
from sec_filing_store.core import DocumentSearchResult, FilingStoreError
from sec_filing_store.search import DocumentSearchService, PaginatedResult

search_app = typer.Typer(no_args_is_help=True)

# Maximum characters to display per highlight or preview in the table.
_SNIPPET_LIMIT = 300

FormOption = Annotated[
    Optional[list[str]],
    typer.Option("--form", "-f", help="Form type filter (repeatable), e.g. -f 10-K -f 10-Q."),
]
FromOption = Annotated[
    Optional[datetime],
    typer.Option("--from", help="Earliest filing date (YYYY-MM-DD).", formats=DATE_FORMATS),
]
ToOption = Annotated[
    Optional[datetime],
    typer.Option("--to", help="Latest filing date (YYYY-MM-DD).", formats=DATE_FORMATS),
]
PageOption = Annotated[int, typer.Option("--page", "-p", help="Page number (1-based).")]
PageSizeOption = Annotated[
    Optional[int],
    typer.Option("--page-size", "-n", help="Results per page."),
]


def _relevance_text(score: float) -> Text:
    """Green for >= 0.6, yellow for >= 0.3, dim otherwise."""
    label = f"{score:.2f}"
    if score >= 0.6:
        return Text(label, style="bold green")
    if score >= 0.3:
        return Text(label, style="yellow")
    return Text(label, style="dim")


def _service() -> DocumentSearchService:
    return DocumentSearchService(open_store(), get_settings().search)


def _truncate(text: str) -> str:
    return text if len(text) <= _SNIPPET_LIMIT else text[:_SNIPPET_LIMIT] + "..."


def _print_results(
    result: PaginatedResult[DocumentSearchResult],
    heading: str,
    show_relevance: bool = False,
) -> None:
    if not result.items:
        console.print("[yellow]No results found.[/yellow]")
        if result.total_count:
            console.print(
                f"[dim italic]Hint: Only {result.total_pages} page(s) available."
                "[/dim italic]"
            )
        else:
            console.print(
                "[dim italic]Hint: Try broader filters, or check tracked documents "
                "with 'sec-store manage status'.[/dim italic]"
            )
        return

    console.print(f"\n[bold]{heading}[/bold]\n")

    table = Table(show_lines=show_relevance, expand=True, border_style="dim")
    table.add_column("#", style="bold", width=4, justify="right")
    if show_relevance:
        table.add_column("Score", width=6, justify="right")
    table.add_column("Company", style="cyan")
    table.add_column("Form", style="green", no_wrap=True)
    table.add_column("Filed", no_wrap=True)
    if show_relevance:
        table.add_column("Highlights")
    else:
        table.add_column("URL", style="dim", overflow="fold")

    offset = (result.page - 1) * result.page_size
    for i, item in enumerate(result.items, offset + 1):
        row = [str(i)]
        if show_relevance:
            row.append(_relevance_text(item.relevance_score))
        row += [item.company_name, item.form_type, item.filing_date.isoformat()]
        if show_relevance:
            row.append("\n".join(_truncate(h) for h in item.highlights) or "—")
        else:
            row.append(item.url)
        table.add_row(*row)

    console.print(table)
    print_page_footer(result)


@search_app.command("company")
def company(
    name: Annotated[str, typer.Argument(help="Company name or fragment (case-insensitive).")],
    form: FormOption = None,
    start: FromOption = None,
    end: ToOption = None,
    page: PageOption = 1,
    page_size: PageSizeOption = None,
) -> None:
    """
    Find filings for a company.

    Examples:

        sec-store search company apple

        sec-store search company "Microsoft" -f 10-K --from 2023-01-01
    """
    service = _service()
    with console.status("Searching..."):
        try:
            result = service.search_by_company(
                name,
                form_types=form,
                start_date=to_date(start),
                end_date=to_date(end),
                page=page,
                page_size=page_size,
            )
        except FilingStoreError as e:
            fail("Search failed", e)

    _print_results(result, f"Found {result.total_count} filing(s) for: {name}")


@search_app.command("forms")
def forms(
    form: FormOption = None,
    company_name: Annotated[
        Optional[list[str]],
        typer.Option("--company", "-c", help="Company name fragment (repeatable)."),
    ] = None,
    start: FromOption = None,
    end: ToOption = None,
    page: PageOption = 1,
    page_size: PageSizeOption = None,
) -> None:
    """
    Filter filings by form type and date range.

    With no --form every supported form type is included.

    Examples:

        sec-store search forms -f 8-K --from 2024-01-01 --to 2024-03-31
    """
    service = _service()
    with console.status("Searching..."):
        try:
            result = service.search_by_form_type(
                form,
                company_names=company_name,
                start_date=to_date(start),
                end_date=to_date(end),
                page=page,
                page_size=page_size,
            )
        except FilingStoreError as e:
            fail("Search failed", e)

    _print_results(result, f"Found {result.total_count} filing(s)")


@search_app.command("content")
def content(
    text: Annotated[str, typer.Argument(help="Phrase or space-separated terms.")],
    company_name: Annotated[
        Optional[list[str]],
        typer.Option("--company", "-c", help="Company name fragment (repeatable)."),
    ] = None,
    form: FormOption = None,
    start: FromOption = None,
    end: ToOption = None,
    exact: Annotated[
        bool, typer.Option("--exact", "-e", help="Match the literal phrase only.")
    ] = False,
    case_sensitive: Annotated[
        bool, typer.Option("--case-sensitive", "-s", help="Do not ignore case.")
    ] = False,
    page: PageOption = 1,
    page_size: PageSizeOption = None,
) -> None:
    """
    Full-text search over stored filing content, ranked by relevance.

    Examples:

        sec-store search content "revenue growth"

        sec-store search content "material weakness" --exact -c apple
    """
    service = _service()
    with console.status("Searching..."):
        try:
            result = service.search_by_content(
                text,
                company_names=company_name,
                form_types=form,
                start_date=to_date(start),
                end_date=to_date(end),
                exact_match=exact,
                case_sensitive=case_sensitive,
                page=page,
                page_size=page_size,
            )
        except FilingStoreError as e:
            fail("Search failed", e)

    _print_results(
        result,
        f"Found {result.total_count} matching filing(s) for: {text}",
        show_relevance=True,
    )
