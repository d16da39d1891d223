"""Resource Lifecycle — Active → Trashed → Active | Purged state machine for files.

Invariants:
    - deleted_at is None ⇔ Active; deleted_at set ⇔ Trashed; row gone ⇔ Purged
    - trash: Active → Trashed; restore: Trashed → Active; purge: Active|Trashed → Purged
    - Purged is terminal — no transition leaves it
    - Every transition is owner-only; an illegal transition is reported as not-found
    - plan_transition is PURE: it computes the field changes, the shell applies
      them through a guarded UPDATE/DELETE so concurrent callers cannot both succeed

Design Decisions:
    - TRANSITIONS table over if/else chains: one source of truth, trivially testable
    - Guard predicate per action (required_states) lets the shell express the
      precondition in SQL and read success from the affected row count
"""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from canvasdesk.core.domain_types import FileState, LifecycleAction
from canvasdesk.core.errors import ResourceNotFoundError
from canvasdesk.core.repository_protocols import FileLike


TRANSITIONS: dict[tuple[FileState, LifecycleAction], FileState] = {
    (FileState.ACTIVE, LifecycleAction.TRASH): FileState.TRASHED,
    (FileState.TRASHED, LifecycleAction.RESTORE): FileState.ACTIVE,
    (FileState.ACTIVE, LifecycleAction.PURGE): FileState.PURGED,
    (FileState.TRASHED, LifecycleAction.PURGE): FileState.PURGED,
}


@dataclass(frozen=True)
class TransitionPlan:
    """Field changes for one transition. purge=True means delete the row."""
    action: LifecycleAction
    source: FileState
    target: FileState
    changes: dict = field(default_factory=dict)

    @property
    def purge(self) -> bool:
        return self.target == FileState.PURGED


def state_of(file: FileLike | None) -> FileState:
    if file is None:
        return FileState.PURGED
    return FileState.ACTIVE if file.deleted_at is None else FileState.TRASHED


def required_states(action: LifecycleAction) -> frozenset[FileState]:
    """States from which `action` is legal (the guard for conditional writes)."""
    return frozenset(
        source for (source, act) in TRANSITIONS if act == action
    )


def target_state(source: FileState, action: LifecycleAction) -> FileState | None:
    return TRANSITIONS.get((source, action))


def plan_transition(
    user_id: UUID,
    file: FileLike | None,
    action: LifecycleAction,
    now: datetime,
    file_id: UUID | str,
) -> TransitionPlan:
    """Validate ownership and state, return the changes to apply.

    Raises ResourceNotFoundError when the file is missing, not owned by
    user_id, or not in a state that permits `action`.
    """
    source = state_of(file)
    target = target_state(source, action)
    if target is None or file.owner_id != user_id:
        raise ResourceNotFoundError("File", str(file_id))

    if action == LifecycleAction.TRASH:
        changes = {"deleted_at": now}
    elif action == LifecycleAction.RESTORE:
        changes = {"deleted_at": None, "updated_at": now}
    else:
        changes = {}
    return TransitionPlan(action, source, target, changes)


def plan_content_edit(
    user_id: UUID,
    file: FileLike | None,
    fields: dict,
    now: datetime,
    file_id: UUID | str,
) -> dict:
    """Content edits (name, canvas payload) only while Active and owner-only.

    Always advances updated_at and stamps last_edited_by with the actor.
    """
    if state_of(file) != FileState.ACTIVE or file.owner_id != user_id:
        raise ResourceNotFoundError("File", str(file_id))
    return {**fields, "updated_at": now, "last_edited_by": user_id}
