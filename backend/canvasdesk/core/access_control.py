"""Access Control — decides file visibility and mutation rights.

Invariants:
    - can_read ⇔ file exists ∧ Active ∧ (owner ∨ collaborator)
    - can_write ⇔ file exists ∧ Active ∧ owner — collaborators never write
    - can_write ⇒ can_read for every (user, file)
    - Callers surface every denial as ResourceNotFoundError, never a "forbidden" —
      absent, trashed and invisible files are indistinguishable to the caller

Design Decisions:
    - denial_reason is PURE and returns the internal reason for observability;
      the shell logs it but never sends it to the client (ADR: confidentiality)
    - Collaborator membership is passed in as a bool: the shell owns the query,
      the core owns the rule
"""

from uuid import UUID

from canvasdesk.core.domain_types import AccessRight
from canvasdesk.core.repository_protocols import FileLike


# Internal denial reasons (logged only)
REASON_MISSING = "missing"
REASON_TRASHED = "trashed"
REASON_NOT_OWNER = "not_owner"
REASON_NO_MEMBERSHIP = "no_membership"


def is_active(file: FileLike) -> bool:
    return file.deleted_at is None


def is_owner(user_id: UUID, file: FileLike) -> bool:
    return file.owner_id == user_id


def can_read(
    user_id: UUID, file: FileLike | None, is_collaborator: bool = False,
) -> bool:
    """True iff the file is Active and the user owns or collaborates on it."""
    return denial_reason(user_id, file, AccessRight.READ, is_collaborator) is None


def can_write(user_id: UUID, file: FileLike | None) -> bool:
    """True iff the file is Active and the user owns it."""
    return denial_reason(user_id, file, AccessRight.WRITE) is None


def denial_reason(
    user_id: UUID,
    file: FileLike | None,
    right: AccessRight,
    is_collaborator: bool = False,
) -> str | None:
    """Return why access is denied, or None when granted."""
    if file is None:
        return REASON_MISSING
    if not is_active(file):
        return REASON_TRASHED
    if is_owner(user_id, file):
        return None
    if right == AccessRight.WRITE:
        return REASON_NOT_OWNER
    if is_collaborator:
        return None
    return REASON_NO_MEMBERSHIP
