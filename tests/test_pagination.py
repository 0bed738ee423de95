"""
Unit tests for pagination and sort resolution.
"""

import pytest

from vanguard_admin.config import MAX_PAGE_NUMBER
from vanguard_admin.pagination import pagination_meta, resolve, resolve_sort


# ── Tests: resolve ───────────────────────────────────────────────────

def test_resolve_defaults():
    p = resolve(None, None)
    assert (p.page, p.limit, p.skip) == (1, 10, 0)


def test_resolve_page_two():
    p = resolve("2", "10")
    assert (p.page, p.limit, p.skip) == (2, 10, 10)


@pytest.mark.parametrize("raw", ["0", "-3", "abc", "", "1.5"])
def test_resolve_bad_page_falls_back_to_first(raw):
    assert resolve(raw, "10").page == 1


def test_resolve_limit_is_clamped_to_max():
    assert resolve("1", "1000").limit == 100


def test_resolve_bad_limit_uses_resource_default():
    assert resolve("1", "zero", default_limit=20).limit == 20
    assert resolve("1", "0", default_limit=50).limit == 50


def test_resolve_respects_resource_max():
    assert resolve("1", "80", max_limit=50).limit == 50


def test_resolve_page_is_capped():
    p = resolve(str(MAX_PAGE_NUMBER * 10), "10")
    assert p.page == MAX_PAGE_NUMBER
    assert p.skip == (MAX_PAGE_NUMBER - 1) * 10


# ── Tests: pagination_meta ───────────────────────────────────────────

def test_meta_empty_collection():
    meta = pagination_meta(1, 10, 0)
    assert meta == {
        "page": 1, "limit": 10, "total": 0, "totalPages": 0,
        "hasNextPage": False, "hasPrevPage": False,
    }


def test_meta_middle_page():
    meta = pagination_meta(2, 10, 25)
    assert meta["totalPages"] == 3
    assert meta["hasNextPage"] is True
    assert meta["hasPrevPage"] is True


def test_meta_last_page():
    meta = pagination_meta(3, 10, 25)
    assert meta["hasNextPage"] is False


def test_meta_page_beyond_end():
    meta = pagination_meta(9, 10, 25)
    assert meta["totalPages"] == 3
    assert meta["hasNextPage"] is False
    assert meta["hasPrevPage"] is True


# ── Tests: resolve_sort ──────────────────────────────────────────────

SORTABLE = {"createdAt": "created_at", "amount": "amount"}


def test_sort_defaults_to_created_desc():
    s = resolve_sort(None, None, SORTABLE, "createdAt")
    assert (s.column, s.direction) == ("created_at", "desc")


def test_sort_asc_only_when_requested():
    assert resolve_sort("amount", "asc", SORTABLE, "createdAt").direction == "asc"
    assert resolve_sort("amount", "ASC", SORTABLE, "createdAt").direction == "asc"
    assert resolve_sort("amount", "sideways", SORTABLE, "createdAt").direction == "desc"


def test_sort_unknown_field_uses_default():
    s = resolve_sort("password", "asc", SORTABLE, "createdAt")
    assert s.column == "created_at"
