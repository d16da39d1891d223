"""Query Assembly — turns a requested view and sort into a listing plan.

Invariants:
    - View is strict: unknown values raise InvalidViewError
    - Sort is lenient: unknown or missing values fall back to last-modified
    - trash is always ordered by deleted_at DESC, whatever sort was requested
    - shared never includes files the user owns, even if also a collaborator
    - all is deduplicated (a file appears once even with several membership rows)
    - Every ordering ends with an id tie-break so results are deterministic

Design Decisions:
    - ListingPlan is declarative (column names + direction), the shell maps it to
      SQLAlchemy expressions — keeps the rule testable without a database
"""

from dataclasses import dataclass

from canvasdesk.core.domain_types import ListView, SortKey
from canvasdesk.core.errors import InvalidViewError


DEFAULT_VIEW = ListView.ALL
DEFAULT_SORT = SortKey.LAST_MODIFIED

# (column, descending)
SORT_ORDER: dict[SortKey, tuple[str, bool]] = {
    SortKey.LAST_MODIFIED: ("updated_at", True),
    SortKey.NAME_ASC: ("name", False),
    SortKey.NAME_DESC: ("name", True),
    SortKey.NEWEST: ("created_at", True),
}

TRASH_ORDER: tuple[str, bool] = ("deleted_at", True)


@dataclass(frozen=True)
class ListingPlan:
    view: ListView
    include_owned: bool
    include_shared: bool
    exclude_owned_from_shared: bool
    trashed: bool
    order_by: tuple[str, bool]


def parse_view(view: str | None) -> ListView:
    if view is None or view == "":
        return DEFAULT_VIEW
    try:
        return ListView(view)
    except ValueError:
        raise InvalidViewError(view)


def parse_sort(sort: str | None) -> SortKey:
    try:
        return SortKey(sort)
    except ValueError:
        return DEFAULT_SORT


def plan_listing(view: str | None, sort: str | None) -> ListingPlan:
    """Resolve raw query parameters into a ListingPlan."""
    parsed_view = parse_view(view)
    order_by = SORT_ORDER[parse_sort(sort)]

    if parsed_view == ListView.ALL:
        return ListingPlan(parsed_view, True, True, False, False, order_by)
    if parsed_view == ListView.MY_FILES:
        return ListingPlan(parsed_view, True, False, False, False, order_by)
    if parsed_view == ListView.SHARED:
        return ListingPlan(parsed_view, False, True, True, False, order_by)
    return ListingPlan(parsed_view, True, False, False, True, TRASH_ORDER)

