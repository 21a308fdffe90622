"""
Filter / sort / paginate engine for list views (visit history and file list).

A list view is derived from a full collection fetched once: filters narrow it,
records are ordered by identifier and one page is sliced out. derive_view is a
pure function of its inputs; ListState holds the mutable filter/page state the
way a view does and re-derives on every read.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timezone
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

from app.core.constants import MAX_RATING
from app.core.enums import SortOrder

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ITEMS_PER_PAGE = 10


# -----------------------------------------------------------------------------
# Filter state and pager metadata
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class ListFilters:
    """
    Filter state. None / empty values mean "no constraint".

    date_from and date_to are inclusive. min_rating of 0 or None disables the
    rating filter.
    """

    search_term: str = ""
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    min_rating: Optional[int] = None

    @classmethod
    def from_dates(
        cls,
        search_term: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        min_rating: Optional[int] = None,
    ) -> "ListFilters":
        """Build filters from calendar days: date_from starts at 00:00, date_to ends at 23:59:59.999999."""
        return cls(
            search_term=search_term or "",
            date_from=datetime.combine(date_from, time.min) if date_from else None,
            date_to=datetime.combine(date_to, time.max) if date_to else None,
            min_rating=min_rating,
        )


@dataclass(frozen=True)
class PaginationInfo:
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int


@dataclass(frozen=True)
class ListView(Generic[T]):
    """One derived page plus pager metadata."""

    page_items: List[T]
    pagination: PaginationInfo


@dataclass(frozen=True)
class RecordAccessor(Generic[T]):
    """
    How the engine reads a record: its identifier (sort key), the text searched
    by search_term, its date, and its rating (None for records without one).
    """

    identifier: Callable[[T], int]
    search_text: Callable[[T], str]
    record_date: Callable[[T], Optional[datetime]]
    rating: Callable[[T], Optional[int]] = field(default=lambda _record: None)


# -----------------------------------------------------------------------------
# Pure derivation
# -----------------------------------------------------------------------------


def normalize_rating(rating: int) -> int:
    """Ratings are 0-5; a legacy 10-point rating is mapped onto 0-5 with ceil(rating / 2)."""
    if rating <= MAX_RATING:
        return rating
    return math.ceil(rating / 2)


def _comparable(dt: datetime) -> datetime:
    """Naive UTC, so timezone-aware inputs compare with naive database values."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def matches_filters(record: T, filters: ListFilters, accessor: RecordAccessor[T]) -> bool:
    """Return True when the record passes the search, date range and rating filters."""
    if filters.search_term:
        if filters.search_term.lower() not in accessor.search_text(record).lower():
            return False

    if filters.date_from is not None or filters.date_to is not None:
        record_date = accessor.record_date(record)
        if record_date is None:
            return False
        value = _comparable(record_date)
        if filters.date_from is not None and value < _comparable(filters.date_from):
            return False
        if filters.date_to is not None and value > _comparable(filters.date_to):
            return False

    if filters.min_rating:
        rating = accessor.rating(record)
        # Unrated records (None or 0) never satisfy a rating filter
        if not rating:
            return False
        if normalize_rating(rating) < filters.min_rating:
            return False

    return True


def total_pages_for(total_items: int, items_per_page: int) -> int:
    if total_items == 0:
        return 0
    return math.ceil(total_items / items_per_page)


def derive_view(
    records: Sequence[T],
    filters: ListFilters,
    page: int,
    items_per_page: int,
    sort_order: SortOrder,
    accessor: RecordAccessor[T],
) -> ListView[T]:
    """
    Derive the page to display from the full collection.

    **Input (request):**
        - records: Full collection (not modified).
        - filters: Search term, inclusive date range, minimum rating.
        - page: 1-indexed page. Not clamped: an out-of-range page yields no items.
        - items_per_page: Positive page size.
        - sort_order: Order by record identifier.
        - accessor: How to read identifier, search text, date and rating from a record.

    **Output (response):**
        - ListView with the page slice and PaginationInfo (total_pages = ceil(total/size), 0 when empty).
    """
    if items_per_page <= 0:
        raise ValueError("items_per_page must be positive")

    filtered = [r for r in records if matches_filters(r, filters, accessor)]
    filtered.sort(key=accessor.identifier, reverse=sort_order == SortOrder.DESC)

    total_items = len(filtered)
    start = (page - 1) * items_per_page
    page_items = filtered[start:start + items_per_page] if page >= 1 else []

    return ListView(
        page_items=page_items,
        pagination=PaginationInfo(
            current_page=page,
            total_pages=total_pages_for(total_items, items_per_page),
            total_items=total_items,
            items_per_page=items_per_page,
        ),
    )


# -----------------------------------------------------------------------------
# Stateful list (filters + page over a fetched collection)
# -----------------------------------------------------------------------------


class ListState(Generic[T]):
    """
    Filter and page state over one fetched collection.

    Changing any filter returns to page 1. Replacing the collection (refetch
    after a mutation) keeps filters and clamps the page to the new last page.
    """

    def __init__(
        self,
        accessor: RecordAccessor[T],
        items_per_page: int = DEFAULT_ITEMS_PER_PAGE,
        sort_order: SortOrder = SortOrder.DESC,
    ):
        self._accessor = accessor
        self._records: List[T] = []
        self.items_per_page = items_per_page
        self.sort_order = sort_order
        self.filters = ListFilters()
        self.current_page = 1

    @property
    def records(self) -> List[T]:
        return list(self._records)

    def set_records(self, records: Sequence[T]) -> None:
        self._records = list(records)
        last_page = self.view.pagination.total_pages
        if last_page and self.current_page > last_page:
            logger.debug("Page %s out of range after refetch; clamping to %s", self.current_page, last_page)
            self.current_page = last_page

    def update_filters(self, **changes) -> None:
        """Merge filter changes (search_term, date_from, date_to, min_rating) and go back to page 1."""
        self.filters = replace(self.filters, **changes)
        self.current_page = 1

    def reset_filters(self) -> None:
        self.filters = ListFilters()
        self.current_page = 1

    def change_page(self, page: int) -> None:
        self.current_page = page

    def set_sort_order(self, sort_order: SortOrder) -> None:
        self.sort_order = sort_order

    @property
    def view(self) -> ListView[T]:
        return derive_view(
            self._records,
            self.filters,
            self.current_page,
            self.items_per_page,
            self.sort_order,
            self._accessor,
        )
