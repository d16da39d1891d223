"""File Lifecycle — create, read, edit, trash, restore and purge files.

Invariants:
    - Transitions follow core.lifecycle.TRANSITIONS; illegal ones are not-found
    - Every transition is written as ONE guarded statement
      (WHERE id AND owner_id AND <state predicate>) and success is read from the
      affected row count — of two concurrent trash calls exactly one wins
    - Content edits are Active-only, owner-only, and stamp updated_at + last_edited_by
    - Purge removes elements, assets and collaborator rows with the file

Design Decisions:
    - Plan in core, guard in SQL: the snapshot read decides what to attempt, the
      conditional write decides whether it happened (ADR: no cross-request locks)
    - Purge deletes children explicitly instead of relying on ON DELETE CASCADE,
      so SQLite without PRAGMA foreign_keys behaves like PostgreSQL
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import delete, true, update
from sqlalchemy.ext.asyncio import AsyncSession

from canvasdesk.core import lifecycle
from canvasdesk.core.collection_policy import (
    FILE_NULLABLE_FIELDS, FILE_UPDATABLE_FIELDS, collect_updates,
)
from canvasdesk.core.domain_types import AccessRight, FileState, LifecycleAction
from canvasdesk.core.errors import ResourceNotFoundError
from canvasdesk.infrastructure.observability import emit_event
from canvasdesk.models.asset import Asset
from canvasdesk.models.element import CanvasElement
from canvasdesk.models.file import File
from canvasdesk.models.file_collaborator import FileCollaborator
from canvasdesk.services.access_gate import AccessGate

logger = logging.getLogger(__name__)


def _state_predicate(action: LifecycleAction):
    """SQL guard equivalent to core.lifecycle.required_states(action)."""
    states = lifecycle.required_states(action)
    if states == {FileState.ACTIVE}:
        return File.deleted_at.is_(None)
    if states == {FileState.TRASHED}:
        return File.deleted_at.is_not(None)
    return true()


class FileLifecycle:
    """File CRUD and soft-delete state machine."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.gate = AccessGate(db)

    async def create(self, user_id: UUID, name: str, file_type: str) -> File:
        file = File(
            owner_id=user_id, name=name, file_type=file_type,
            last_edited_by=user_id,
        )
        self.db.add(file)
        await self.db.commit()
        await self.db.refresh(file)
        logger.info(f"File {file.id} created by {user_id}")
        return file

    async def get(self, user_id: UUID, file_id: UUID) -> File:
        return await self.gate.require(user_id, file_id, AccessRight.READ)

    async def update(self, user_id: UUID, file_id: UUID, provided: dict) -> File:
        """Sparse content edit. Raises NoFieldsToUpdateError before any lookup."""
        fields = collect_updates(
            provided, FILE_UPDATABLE_FIELDS, nullable=FILE_NULLABLE_FIELDS,
        )
        file = await self.gate.require(user_id, file_id, AccessRight.WRITE)
        changes = lifecycle.plan_content_edit(
            user_id, file, fields, datetime.now(timezone.utc), file_id,
        )
        result = await self.db.execute(
            update(File)
            .where(
                File.id == file_id,
                File.owner_id == user_id,
                File.deleted_at.is_(None),
            )
            .values(**changes)
            .execution_options(synchronize_session=False),
        )
        if result.rowcount != 1:
            raise ResourceNotFoundError("File", str(file_id))
        await self.db.commit()
        await self.db.refresh(file)
        return file

    async def trash(self, user_id: UUID, file_id: UUID) -> File:
        return await self._transition(user_id, file_id, LifecycleAction.TRASH)

    async def restore(self, user_id: UUID, file_id: UUID) -> File:
        return await self._transition(user_id, file_id, LifecycleAction.RESTORE)

    async def purge(self, user_id: UUID, file_id: UUID) -> None:
        await self._transition(user_id, file_id, LifecycleAction.PURGE)

    async def _transition(
        self, user_id: UUID, file_id: UUID, action: LifecycleAction,
    ) -> File | None:
        file = await self.gate.load_file(file_id)
        try:
            plan = lifecycle.plan_transition(
                user_id, file, action, datetime.now(timezone.utc), file_id,
            )
        except ResourceNotFoundError:
            emit_event(
                "access_denied", user_id=user_id, file_id=file_id,
                action=action.value,
                reason=f"state:{lifecycle.state_of(file).value}",
            )
            raise

        guard = (
            File.id == file_id,
            File.owner_id == user_id,
            _state_predicate(action),
        )
        if plan.purge:
            await self._delete_children(file_id)
            result = await self.db.execute(delete(File).where(*guard))
        else:
            result = await self.db.execute(
                update(File).where(*guard).values(**plan.changes)
                .execution_options(synchronize_session=False),
            )

        if result.rowcount != 1:
            # Lost a race: another request moved the file first
            await self.db.rollback()
            emit_event(
                "access_denied", user_id=user_id, file_id=file_id,
                action=action.value, reason="concurrent_transition",
            )
            raise ResourceNotFoundError("File", str(file_id))

        await self.db.commit()
        emit_event(
            "lifecycle_transition", user_id=user_id, file_id=file_id,
            action=action.value, source_state=plan.source.value,
            target_state=plan.target.value,
        )
        if plan.purge:
            return None
        await self.db.refresh(file)
        return file

    async def _delete_children(self, file_id: UUID) -> None:
        await self.db.execute(
            delete(CanvasElement).where(CanvasElement.file_id == file_id),
        )
        await self.db.execute(delete(Asset).where(Asset.file_id == file_id))
        await self.db.execute(
            delete(FileCollaborator).where(FileCollaborator.file_id == file_id),
        )
