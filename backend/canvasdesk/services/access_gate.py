"""Access Gate — loads a file and applies core access policy to it.

Invariants:
    - Every file-scoped operation passes through require() before touching data
    - A denial raises ResourceNotFoundError naming the resource the caller asked
      for (file, asset or element) — never the internal reason
    - Collaborator membership is only queried when it can change the outcome
      (file Active, caller not owner, READ requested)
    - Each denial emits one `access_denied` event with the internal reason

Design Decisions:
    - lock=True issues SELECT ... FOR UPDATE on the file row so capacity checks
      serialize per file on PostgreSQL (SQLite ignores the clause)
"""

from uuid import UUID

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from canvasdesk.core import access_control
from canvasdesk.core.domain_types import AccessRight
from canvasdesk.core.errors import ResourceNotFoundError
from canvasdesk.infrastructure.observability import emit_event
from canvasdesk.models.file import File
from canvasdesk.models.file_collaborator import FileCollaborator


class AccessGate:
    """Read/write checks for files, resolved against the database."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def load_file(self, file_id: UUID, lock: bool = False) -> File | None:
        query = select(File).where(File.id == file_id)
        if lock:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def is_collaborator(self, user_id: UUID, file_id: UUID) -> bool:
        result = await self.db.execute(
            select(
                exists().where(
                    FileCollaborator.file_id == file_id,
                    FileCollaborator.user_id == user_id,
                ),
            ),
        )
        return bool(result.scalar())

    async def _membership_matters(
        self, user_id: UUID, file: File | None, right: AccessRight,
    ) -> bool:
        if file is None or right != AccessRight.READ:
            return False
        if not access_control.is_active(file) or access_control.is_owner(user_id, file):
            return False
        return await self.is_collaborator(user_id, file.id)

    async def can_read(self, user_id: UUID, file_id: UUID) -> bool:
        file = await self.load_file(file_id)
        member = await self._membership_matters(user_id, file, AccessRight.READ)
        return access_control.can_read(user_id, file, member)

    async def can_write(self, user_id: UUID, file_id: UUID) -> bool:
        file = await self.load_file(file_id)
        return access_control.can_write(user_id, file)

    async def require(
        self,
        user_id: UUID,
        file_id: UUID,
        right: AccessRight,
        *,
        resource_type: str = "File",
        resource_id: UUID | None = None,
        lock: bool = False,
    ) -> File:
        """Return the file if `right` is granted, else raise not-found."""
        file = await self.load_file(file_id, lock=lock)
        member = await self._membership_matters(user_id, file, right)
        reason = access_control.denial_reason(user_id, file, right, member)
        if reason is not None:
            emit_event(
                "access_denied", user_id=user_id, file_id=file_id,
                action=right.value, reason=reason,
            )
            raise ResourceNotFoundError(
                resource_type, str(resource_id or file_id),
            )
        return file
