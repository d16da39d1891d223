"""File Queries — SQL rendition of core.query_assembly listing plans.

Invariants:
    - Membership tested with EXISTS, so `all` never duplicates a file that has
      several collaborator rows
    - Ordering = plan column + id ASC tie-break
"""

from uuid import UUID

from sqlalchemy import and_, exists, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from canvasdesk.core.query_assembly import ListingPlan, plan_listing
from canvasdesk.models.file import File
from canvasdesk.models.file_collaborator import FileCollaborator


class FileQueries:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_files(
        self, user_id: UUID, view: str | None, sort: str | None,
    ) -> list[File]:
        """Raises InvalidViewError for unknown views; unknown sorts fall back."""
        plan = plan_listing(view, sort)
        result = await self.db.execute(self._build_query(plan, user_id))
        return list(result.scalars().all())

    @staticmethod
    def _build_query(plan: ListingPlan, user_id: UUID):
        owned = File.owner_id == user_id
        member = exists().where(
            FileCollaborator.file_id == File.id,
            FileCollaborator.user_id == user_id,
        )

        if plan.include_owned and plan.include_shared:
            visibility = or_(owned, member)
        elif plan.include_owned:
            visibility = owned
        elif plan.exclude_owned_from_shared:
            visibility = and_(member, File.owner_id != user_id)
        else:
            visibility = member

        state = (
            File.deleted_at.is_not(None) if plan.trashed
            else File.deleted_at.is_(None)
        )

        column_name, descending = plan.order_by
        column = getattr(File, column_name)
        return (
            select(File)
            .where(visibility, state)
            .order_by(column.desc() if descending else column.asc(), File.id.asc())
        )
