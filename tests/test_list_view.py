"""Filter / sort / paginate engine shared by the visit history and file list views."""

import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional

import pytest

from app.core.enums import SortOrder
from app.services.list_view import (
    ListFilters,
    ListState,
    RecordAccessor,
    derive_view,
    normalize_rating,
)


@dataclass
class Rec:
    id: int
    name: str
    when: datetime
    rating: Optional[int] = None


ACCESSOR = RecordAccessor(
    identifier=lambda r: r.id,
    search_text=lambda r: r.name,
    record_date=lambda r: r.when,
    rating=lambda r: r.rating,
)


def make_records(n):
    return [Rec(i, f"Place {i}", datetime(2024, 1, i), rating=i % 6) for i in range(1, n + 1)]


def view(records, filters=ListFilters(), page=1, size=10, order=SortOrder.DESC):
    return derive_view(records, filters, page, size, order, ACCESSOR)


def test_twelve_records_split_into_two_pages():
    records = make_records(12)

    first = view(records, page=1)
    second = view(records, page=2)

    assert len(first.page_items) == 10
    assert len(second.page_items) == 2
    assert first.pagination.total_pages == 2
    assert first.pagination.total_items == 12
    assert first.pagination.items_per_page == 10


def test_empty_collection_has_zero_pages():
    result = view([])
    assert result.page_items == []
    assert result.pagination.total_pages == 0
    assert result.pagination.total_items == 0


def test_out_of_range_page_is_empty_not_clamped():
    result = view(make_records(5), page=3)
    assert result.page_items == []
    assert result.pagination.current_page == 3
    assert result.pagination.total_pages == 1


def test_page_size_must_be_positive():
    with pytest.raises(ValueError):
        view(make_records(3), size=0)


def test_sorted_by_identifier_not_date():
    records = [
        Rec(1, "a", datetime(2024, 3, 1)),
        Rec(2, "b", datetime(2024, 1, 1)),
        Rec(3, "c", datetime(2024, 2, 1)),
    ]
    assert [r.id for r in view(records, order=SortOrder.DESC).page_items] == [3, 2, 1]
    assert [r.id for r in view(records, order=SortOrder.ASC).page_items] == [1, 2, 3]


def test_input_collection_is_not_modified():
    records = make_records(4)
    before = list(records)
    view(records, order=SortOrder.DESC)
    assert records == before


def test_search_is_case_insensitive_substring():
    records = [Rec(1, "ABC Cafe", datetime(2024, 1, 1)), Rec(2, "xyz", datetime(2024, 1, 2))]
    result = view(records, ListFilters(search_term="abc"))
    assert [r.id for r in result.page_items] == [1]


def test_date_range_is_inclusive_on_both_ends():
    records = make_records(10)
    filters = ListFilters(date_from=datetime(2024, 1, 3), date_to=datetime(2024, 1, 5))
    assert sorted(r.id for r in view(records, filters).page_items) == [3, 4, 5]


def test_calendar_day_end_includes_the_whole_day():
    records = [Rec(1, "late", datetime(2024, 1, 5, 23, 30)), Rec(2, "next", datetime(2024, 1, 6, 0, 0))]
    filters = ListFilters.from_dates(date_to=date(2024, 1, 5))
    assert [r.id for r in view(records, filters).page_items] == [1]


def test_aware_and_naive_dates_compare():
    records = [Rec(1, "a", datetime(2024, 1, 5, 12, 0))]
    filters = ListFilters(date_from=datetime(2024, 1, 5, 11, 0, tzinfo=timezone.utc))
    assert view(records, filters).pagination.total_items == 1


def test_min_rating_filter_and_zero_disables_it():
    records = [Rec(i, "r", datetime(2024, 1, 1), rating=i) for i in range(0, 6)]
    assert sorted(r.id for r in view(records, ListFilters(min_rating=4)).page_items) == [4, 5]
    assert view(records, ListFilters(min_rating=0)).pagination.total_items == 6
    assert view(records, ListFilters(min_rating=None)).pagination.total_items == 6


def test_unrated_records_never_pass_rating_filter():
    records = [Rec(1, "a", datetime(2024, 1, 1), rating=None), Rec(2, "b", datetime(2024, 1, 1), rating=0)]
    assert view(records, ListFilters(min_rating=1)).pagination.total_items == 0


def test_legacy_ten_point_ratings_are_halved_rounding_up():
    assert normalize_rating(3) == 3
    assert normalize_rating(5) == 5
    assert normalize_rating(7) == 4
    assert normalize_rating(10) == 5
    records = [Rec(1, "a", datetime(2024, 1, 1), rating=7)]
    assert view(records, ListFilters(min_rating=4)).pagination.total_items == 1
    assert view(records, ListFilters(min_rating=5)).pagination.total_items == 0


@pytest.mark.parametrize(
    "loose,tight",
    [
        (ListFilters(search_term="Place"), ListFilters(search_term="Place 1")),
        (ListFilters(min_rating=1), ListFilters(min_rating=3)),
        (
            ListFilters(date_from=datetime(2024, 1, 2), date_to=datetime(2024, 1, 20)),
            ListFilters(date_from=datetime(2024, 1, 5), date_to=datetime(2024, 1, 9)),
        ),
    ],
)
def test_tightening_a_filter_never_adds_items(loose, tight):
    records = make_records(25)
    assert view(records, tight).pagination.total_items <= view(records, loose).pagination.total_items


@pytest.mark.parametrize("n,size", [(0, 10), (1, 10), (10, 10), (23, 10), (7, 3)])
def test_pages_reconstruct_the_filtered_collection(n, size):
    records = make_records(n)
    full = view(records, page=1, size=max(n, 1))

    collected = []
    pages = view(records, size=size).pagination.total_pages
    for page in range(1, pages + 1):
        collected.extend(view(records, page=page, size=size).page_items)

    assert collected == full.page_items
    assert len({r.id for r in collected}) == n
    assert pages == math.ceil(n / size)


def test_filtering_keeps_relative_order():
    records = make_records(20)
    unfiltered = [r.id for r in view(records, size=100).page_items]
    filtered = [r.id for r in view(records, ListFilters(min_rating=2), size=100).page_items]
    assert filtered == [i for i in unfiltered if i in set(filtered)]


def test_filter_change_resets_page_to_one():
    names = ["ABC Shrine", "Park", "abc Museum", "River", "Tower"]
    state = ListState(ACCESSOR, items_per_page=1)
    state.set_records([Rec(i, n, datetime(2024, 1, i)) for i, n in enumerate(names, start=1)])
    state.change_page(3)
    assert state.current_page == 3

    state.update_filters(search_term="ABC")

    assert state.current_page == 1
    assert state.view.pagination.total_items == 2


@pytest.mark.parametrize(
    "change",
    [
        {"search_term": "x"},
        {"date_from": datetime(2024, 1, 1)},
        {"date_to": datetime(2024, 1, 1)},
        {"min_rating": 2},
    ],
)
def test_every_filter_field_resets_page(change):
    state = ListState(ACCESSOR)
    state.set_records(make_records(30))
    state.change_page(2)
    state.update_filters(**change)
    assert state.current_page == 1


def test_page_change_keeps_filters():
    state = ListState(ACCESSOR, items_per_page=2)
    state.set_records(make_records(10))
    state.update_filters(search_term="Place")
    state.change_page(2)
    assert state.filters.search_term == "Place"
    assert state.current_page == 2


def test_reset_filters():
    state = ListState(ACCESSOR)
    state.update_filters(search_term="a", min_rating=3)
    state.change_page(4)
    state.reset_filters()
    assert state.filters == ListFilters()
    assert state.current_page == 1


def test_refetch_clamps_out_of_range_page():
    state = ListState(ACCESSOR, items_per_page=10)
    state.set_records(make_records(11))
    state.change_page(2)

    # The only record on page 2 was deleted
    state.set_records(make_records(10))

    assert state.current_page == 1
    assert len(state.view.page_items) == 10


def test_refetch_keeps_page_in_range():
    state = ListState(ACCESSOR, items_per_page=5)
    state.set_records(make_records(20))
    state.change_page(3)
    state.set_records(make_records(19))
    assert state.current_page == 3


def test_sort_order_toggle():
    state = ListState(ACCESSOR, sort_order=SortOrder.ASC)
    state.set_records(make_records(3))
    assert [r.id for r in state.view.page_items] == [1, 2, 3]
    state.set_sort_order(SortOrder.DESC)
    assert [r.id for r in state.view.page_items] == [3, 2, 1]
