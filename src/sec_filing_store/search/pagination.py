"""
Pagination math shared by every search and listing operation.

All page arithmetic lives here so that search results, metrics
breakdowns, the CLI and the API agree on exactly the same numbers:

    skip              = (page - 1) * page_size
    total_pages       = ceil(total_count / page_size)   (0 when empty)
    has_previous_page = page > 1
    has_next_page     = page < total_pages
"""

import math
from dataclasses import dataclass, field
from typing import Generic, Optional, Sequence, TypeVar

from sec_filing_store.core.exceptions import InvalidParameterError

T = TypeVar("T")


@dataclass(frozen=True)
class PageInfo:
    """Derived pagination values for one page request."""

    page: int
    page_size: int
    total_count: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def total_pages(self) -> int:
        if self.total_count <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_previous_page(self) -> bool:
        return self.page > 1

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages


def validate_page_request(
    page: int,
    page_size: int,
    max_page_size: Optional[int] = None,
) -> None:
    """
    Reject page numbers and sizes outside the allowed range.

    Raises:
        InvalidParameterError: If ``page < 1``, ``page_size < 1`` or
            ``page_size > max_page_size``.
    """
    if page < 1:
        raise InvalidParameterError(
            f"page must be >= 1 (got {page})", parameter="page"
        )
    if page_size < 1:
        raise InvalidParameterError(
            f"page_size must be >= 1 (got {page_size})", parameter="page_size"
        )
    if max_page_size is not None and page_size > max_page_size:
        raise InvalidParameterError(
            f"page_size must be <= {max_page_size} (got {page_size})",
            parameter="page_size",
        )


def compute_page(page: int, page_size: int, total_count: int = 0) -> PageInfo:
    """
    Compute skip/total_pages/has_next/has_previous for a page request.

    Raises:
        InvalidParameterError: If ``page < 1`` or ``page_size < 1``.
    """
    validate_page_request(page, page_size)
    if total_count < 0:
        raise InvalidParameterError(
            f"total_count must be >= 0 (got {total_count})",
            parameter="total_count",
        )
    return PageInfo(page=page, page_size=page_size, total_count=total_count)


@dataclass
class PaginatedResult(Generic[T]):
    """
    One page of results plus the numbers needed to navigate.

    Derived properties delegate to ``PageInfo`` so the formulas are
    never re-implemented by callers.
    """

    items: list[T] = field(default_factory=list)
    total_count: int = 0
    page: int = 1
    page_size: int = 50

    @property
    def _info(self) -> PageInfo:
        return PageInfo(self.page, self.page_size, self.total_count)

    @property
    def total_pages(self) -> int:
        return self._info.total_pages

    @property
    def has_next_page(self) -> bool:
        return self._info.has_next_page

    @property
    def has_previous_page(self) -> bool:
        return self._info.has_previous_page


def paginate(
    items: Sequence[T],
    total_count: int,
    page: int,
    page_size: int,
) -> PaginatedResult[T]:
    """Wrap an already-sliced page of items in a PaginatedResult."""
    info = compute_page(page, page_size, total_count)
    return PaginatedResult(
        items=list(items),
        total_count=info.total_count,
        page=info.page,
        page_size=info.page_size,
    )


def slice_page(
    items: Sequence[T],
    page: int,
    page_size: int,
) -> PaginatedResult[T]:
    """Slice a fully materialised, ordered sequence into one page."""
    info = compute_page(page, page_size, len(items))
    return PaginatedResult(
        items=list(items[info.skip : info.skip + page_size]),
        total_count=info.total_count,
        page=info.page,
        page_size=info.page_size,
    )
