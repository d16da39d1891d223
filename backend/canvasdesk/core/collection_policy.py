"""Collection Policy — capacity ceilings, element ordering, sparse-update rules.

Invariants:
    - A file holds at most MAX_ASSETS_PER_FILE assets; creating one when the
      count is at or above the ceiling is a validation failure
    - Elements render back-to-front by (sort_index ASC, created_at ASC);
      sort_index is caller-supplied, never renumbered, gaps and ties are legal
    - Sparse updates write only explicitly present fields; zero recognized
      fields is a validation failure, never a silent no-op
    - Explicit null is accepted only for nullable fields

Design Decisions:
    - check_capacity takes the count, not a session: shell counts inside the
      same transaction that inserts (ADR: hardened ceiling, see DESIGN.md)
    - collect_updates works on `model_dump(exclude_unset=True)` output so
      "absent" and "present but null" stay distinguishable
"""

from typing import Iterable

from canvasdesk.core.errors import (
    CapacityExceededError, NoFieldsToUpdateError, ValidationFailedError,
)


MAX_ASSETS_PER_FILE: int = 50

# canvas_elements.sort_index is a 32-bit INTEGER column
MAX_SORT_INDEX: int = 2_147_483_647

ASSET_UPDATABLE_FIELDS: tuple[str, ...] = ("name", "thumbnail_url", "metadata")
ASSET_NULLABLE_FIELDS: frozenset[str] = frozenset({"thumbnail_url"})

ELEMENT_UPDATABLE_FIELDS: tuple[str, ...] = ("sort_index", "props")

# Back-to-front; id only breaks exact timestamp ties
ELEMENT_ORDER: tuple[str, ...] = ("sort_index", "created_at", "id")

FILE_UPDATABLE_FIELDS: tuple[str, ...] = ("name", "canvas_data")
FILE_NULLABLE_FIELDS: frozenset[str] = frozenset({"canvas_data"})


def has_capacity(current_count: int, limit: int = MAX_ASSETS_PER_FILE) -> bool:
    return current_count < limit


def check_capacity(
    current_count: int,
    limit: int = MAX_ASSETS_PER_FILE,
    resource_type: str = "asset",
) -> None:
    """Raise CapacityExceededError if another child would not fit."""
    if not has_capacity(current_count, limit):
        raise CapacityExceededError(resource_type, limit)


def validate_sort_index(sort_index: int) -> int:
    if not 0 <= sort_index <= MAX_SORT_INDEX:
        raise ValidationFailedError(
            f"sort_index must be between 0 and {MAX_SORT_INDEX}",
            fields=["sort_index"],
        )
    return sort_index


def collect_updates(
    provided: dict,
    allowed: Iterable[str],
    nullable: frozenset[str] = frozenset(),
) -> dict:
    """Keep only recognized fields that the caller explicitly sent.

    Raises NoFieldsToUpdateError when nothing recognized remains, and
    ValidationFailedError when a non-nullable field is explicitly null.
    """
    allowed = tuple(allowed)
    updates = {k: v for k, v in provided.items() if k in allowed}
    if not updates:
        raise NoFieldsToUpdateError(list(allowed))

    nulled = [k for k, v in updates.items() if v is None and k not in nullable]
    if nulled:
        raise ValidationFailedError(
            f"Field(s) cannot be null: {', '.join(nulled)}", fields=nulled,
        )
    return updates
