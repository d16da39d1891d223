"""File Routes — listing, CRUD, trash lifecycle and collaborator membership.

Invariants:
    - GET / rejects unknown `view` with 400; unknown `sort` silently falls back
    - DELETE /{id} trashes; DELETE /{id}/permanent purges (irreversible)
    - Every failure to see or mutate a file is 404, never 403
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from canvasdesk.api.dependencies import get_current_user
from canvasdesk.infrastructure.database import get_db
from canvasdesk.models.user import User
from canvasdesk.schemas.file import (
    CollaboratorAdd, CollaboratorResponse, DeletedResponse,
    FileCreate, FileResponse, FileUpdate,
)
from canvasdesk.services.collaborators import CollaboratorService
from canvasdesk.services.file_lifecycle import FileLifecycle
from canvasdesk.services.file_queries import FileQueries

router = APIRouter(prefix="/api/v1/files", tags=["files"])


@router.get("", response_model=list[FileResponse])
async def list_files(
    view: str = Query("all"),
    sort: str = Query("last-modified"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List files for the caller: all | my-files | shared | trash."""
    return await FileQueries(db).list_files(user.id, view, sort)


@router.post("", response_model=FileResponse, status_code=status.HTTP_201_CREATED)
async def create_file(
    body: FileCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await FileLifecycle(db).create(user.id, body.name, body.file_type)


@router.get("/{file_id}", response_model=FileResponse)
async def get_file(
    file_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await FileLifecycle(db).get(user.id, file_id)


@router.patch("/{file_id}", response_model=FileResponse)
async def update_file(
    file_id: UUID,
    body: FileUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Rename and/or replace the canvas payload (owner only, Active only)."""
    return await FileLifecycle(db).update(user.id, file_id, body.sent_fields())


@router.delete("/{file_id}", response_model=FileResponse)
async def trash_file(
    file_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Move a file to the trash."""
    return await FileLifecycle(db).trash(user.id, file_id)


@router.post("/{file_id}/restore", response_model=FileResponse)
async def restore_file(
    file_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await FileLifecycle(db).restore(user.id, file_id)


@router.delete("/{file_id}/permanent", response_model=DeletedResponse)
async def purge_file(
    file_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Permanently delete a file and everything in it."""
    await FileLifecycle(db).purge(user.id, file_id)
    return DeletedResponse(id=file_id)


# ─── Collaborators ──────────────────────────────────────────────

@router.get(
    "/{file_id}/collaborators", response_model=list[CollaboratorResponse],
)
async def list_collaborators(
    file_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await CollaboratorService(db).list_members(user.id, file_id)


@router.post(
    "/{file_id}/collaborators",
    response_model=CollaboratorResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_collaborator(
    file_id: UUID,
    body: CollaboratorAdd,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await CollaboratorService(db).add_member(user.id, file_id, body.email)


@router.delete(
    "/{file_id}/collaborators/{member_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def remove_collaborator(
    file_id: UUID,
    member_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await CollaboratorService(db).remove_member(user.id, file_id, member_id)
