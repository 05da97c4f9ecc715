"""
Tests for page slicing and filter predicates
"""

import pytest
from pydantic import ValidationError

from orgaccess.core.pagination import (
    ListParams,
    Page,
    all_of,
    always,
    equals_predicate,
    paginate,
    search_predicate,
)

from tests.factories import make_department


@pytest.fixture
def departments():
    return [
        make_department("d1", "Finance", site_id="site-1"),
        make_department("d2", "Facilities", site_id="site-2"),
        make_department("d3", "Engineering", site_id="site-1"),
        make_department("d4", "Field Ops", site_id="site-2"),
        make_department("d5", "Legal", site_id="site-1"),
    ]


class TestListParams:
    def test_defaults(self):
        params = ListParams()

        assert params.page == 1
        assert params.limit == 20

    def test_rejects_page_zero(self):
        with pytest.raises(ValidationError):
            ListParams(page=0)

    def test_rejects_non_positive_limit(self):
        with pytest.raises(ValidationError):
            ListParams(limit=0)


class TestPaginate:
    def test_first_page(self, departments):
        page = paginate(departments, ListParams(page=1, limit=2))

        assert [d.id for d in page.items] == ["d1", "d2"]
        assert page.total == 5
        assert page.has_next
        assert not page.has_prev

    def test_last_partial_page(self, departments):
        page = paginate(departments, ListParams(page=3, limit=2))

        assert [d.id for d in page.items] == ["d5"]
        assert page.total == 5
        assert not page.has_next
        assert page.has_prev

    def test_page_past_the_end_keeps_total(self, departments):
        page = paginate(departments, ListParams(page=9, limit=2))

        assert page.items == []
        assert page.total == 5

    def test_total_counts_filtered_items_before_slicing(self, departments):
        page = paginate(
            departments,
            ListParams(page=1, limit=1),
            search_predicate("f", "label"),
        )

        assert [d.id for d in page.items] == ["d1"]
        assert page.total == 3

    def test_items_never_exceed_limit(self, departments):
        for limit in (1, 2, 3, 10):
            page = paginate(departments, ListParams(page=1, limit=limit))
            assert len(page.items) == min(limit, page.total)

    def test_echoes_request(self, departments):
        page = paginate(departments, ListParams(page=2, limit=3))

        assert page.page == 2
        assert page.limit == 3

    def test_empty_page(self):
        page = Page.empty(ListParams(page=4, limit=5))

        assert page.items == []
        assert page.total == 0
        assert page.page == 4


class TestPredicates:
    def test_search_is_case_insensitive_substring(self, departments):
        match = search_predicate("ENGIN", "label")

        assert [d.id for d in departments if match(d)] == ["d3"]

    def test_search_checks_every_field(self):
        match = search_predicate("ops", "name", "description")

        assert match({"name": "Ops", "description": None})
        assert match({"name": "Team", "description": "devops on call"})
        assert not match({"name": "Team", "description": None})

    def test_empty_search_is_no_filter(self):
        assert search_predicate("", "label") is None
        assert search_predicate(None, "label") is None

    def test_equals_predicate(self, departments):
        match = equals_predicate("site_id", "site-2")

        assert [d.id for d in departments if match(d)] == ["d2", "d4"]
        assert equals_predicate("site_id", None) is None

    def test_all_of_combines_and_skips_none(self, departments):
        match = all_of(search_predicate("f", "label"), equals_predicate("site_id", "site-2"), None)

        assert [d.id for d in departments if match(d)] == ["d2", "d4"]

    def test_all_of_without_predicates_matches_everything(self):
        assert all_of(None, None) is always
