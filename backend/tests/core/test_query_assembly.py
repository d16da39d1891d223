"""Query Assembly — tests for view/sort parsing and listing plans.

Tests cover:
    - Strict view parsing, lenient sort fallback
    - Plan flags per view
    - trash always ordered by deleted_at DESC
"""

import pytest

from canvasdesk.core.domain_types import ListView, SortKey
from canvasdesk.core.errors import InvalidViewError
from canvasdesk.core.query_assembly import (
    SORT_ORDER, TRASH_ORDER, parse_sort, parse_view, plan_listing,
)


# ─── Parsing ────────────────────────────────────────────────────

@pytest.mark.parametrize("raw", [None, ""])
def test_missing_view_defaults_to_all(raw):
    assert parse_view(raw) == ListView.ALL


def test_unknown_view_raises():
    with pytest.raises(InvalidViewError) as exc:
        parse_view("archived")
    assert exc.value.http_status == 400
    assert exc.value.fields == ["view"]


@pytest.mark.parametrize("raw", [None, "", "bogus", "NAME-ASC"])
def test_unknown_sort_falls_back_to_last_modified(raw):
    assert parse_sort(raw) == SortKey.LAST_MODIFIED


def test_known_sorts_map_to_columns():
    assert SORT_ORDER[SortKey.NAME_ASC] == ("name", False)
    assert SORT_ORDER[SortKey.NAME_DESC] == ("name", True)
    assert SORT_ORDER[SortKey.NEWEST] == ("created_at", True)
    assert SORT_ORDER[SortKey.LAST_MODIFIED] == ("updated_at", True)


# ─── Plans ──────────────────────────────────────────────────────

def test_plan_all():
    plan = plan_listing("all", "name-asc")
    assert plan.include_owned and plan.include_shared
    assert not plan.trashed
    assert plan.order_by == ("name", False)


def test_plan_my_files():
    plan = plan_listing("my-files", None)
    assert plan.include_owned and not plan.include_shared


def test_plan_shared_excludes_owned():
    plan = plan_listing("shared", None)
    assert plan.include_shared and not plan.include_owned
    assert plan.exclude_owned_from_shared


@pytest.mark.parametrize("sort", ["name-asc", "newest", "bogus", None])
def test_trash_ignores_sort(sort):
    plan = plan_listing("trash", sort)
    assert plan.trashed
    assert plan.order_by == TRASH_ORDER

