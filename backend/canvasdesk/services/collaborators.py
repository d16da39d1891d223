"""Collaborators — owner-managed, read-only membership on a file.

Invariants:
    - Listing requires READ; adding/removing requires WRITE (owner, Active file)
    - The owner can never be listed as a collaborator of their own file
    - Adding an existing collaborator is a no-op success
    - Unknown email or non-member removal → not-found
"""

import logging
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from canvasdesk.core.domain_types import AccessRight
from canvasdesk.core.errors import ResourceNotFoundError, ValidationFailedError
from canvasdesk.models.file_collaborator import FileCollaborator
from canvasdesk.models.user import User
from canvasdesk.services.access_gate import AccessGate

logger = logging.getLogger(__name__)


class CollaboratorService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.gate = AccessGate(db)

    async def list_members(self, user_id: UUID, file_id: UUID) -> list[dict]:
        await self.gate.require(user_id, file_id, AccessRight.READ)
        result = await self.db.execute(
            select(User, FileCollaborator.created_at)
            .join(FileCollaborator, FileCollaborator.user_id == User.id)
            .where(FileCollaborator.file_id == file_id)
            .order_by(FileCollaborator.created_at.asc(), User.id.asc()),
        )
        return [
            {
                "user_id": user.id,
                "email": user.email,
                "display_name": user.display_name,
                "added_at": added_at,
            }
            for user, added_at in result.all()
        ]

    async def add_member(self, user_id: UUID, file_id: UUID, email: str) -> dict:
        file = await self.gate.require(user_id, file_id, AccessRight.WRITE)

        result = await self.db.execute(
            select(User).where(func.lower(User.email) == email.lower()),
        )
        member = result.scalars().first()
        if member is None:
            raise ResourceNotFoundError("User", email)
        if member.id == file.owner_id:
            raise ValidationFailedError(
                "The owner cannot be added as a collaborator", fields=["email"],
            )

        existing = await self.db.get(FileCollaborator, (file_id, member.id))
        if existing is None:
            existing = FileCollaborator(file_id=file_id, user_id=member.id)
            self.db.add(existing)
            await self.db.commit()
            await self.db.refresh(existing)
            logger.info(f"User {member.id} added as collaborator on {file_id}")

        return {
            "user_id": member.id,
            "email": member.email,
            "display_name": member.display_name,
            "added_at": existing.created_at,
        }

    async def remove_member(
        self, user_id: UUID, file_id: UUID, member_id: UUID,
    ) -> None:
        await self.gate.require(user_id, file_id, AccessRight.WRITE)
        result = await self.db.execute(
            delete(FileCollaborator).where(
                FileCollaborator.file_id == file_id,
                FileCollaborator.user_id == member_id,
            ),
        )
        if result.rowcount != 1:
            raise ResourceNotFoundError("Collaborator", str(member_id))
        await self.db.commit()
