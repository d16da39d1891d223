"""Element Routes — canvas elements in back-to-front order."""

from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from canvasdesk.api.dependencies import get_current_user
from canvasdesk.infrastructure.database import get_db
from canvasdesk.models.user import User
from canvasdesk.schemas.element import ElementCreate, ElementResponse, ElementUpdate
from canvasdesk.schemas.file import DeletedResponse
from canvasdesk.services.elements import ElementService

router = APIRouter(prefix="/api/v1/elements", tags=["elements"])


@router.get("", response_model=list[ElementResponse])
async def list_elements(
    file_id: UUID = Query(alias="fileId"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Elements of a file ordered by (sort_index, created_at)."""
    return await ElementService(db).list_for_file(user.id, file_id)


@router.post("", response_model=ElementResponse, status_code=status.HTTP_201_CREATED)
async def create_element(
    body: ElementCreate = Body(...),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ElementService(db).create(user.id, body)


@router.get("/{element_id}", response_model=ElementResponse)
async def get_element(
    element_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ElementService(db).get(user.id, element_id)


@router.patch("/{element_id}", response_model=ElementResponse)
async def update_element(
    element_id: UUID,
    body: ElementUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ElementService(db).update(user.id, element_id, body.sent_fields())


@router.delete("/{element_id}", response_model=DeletedResponse)
async def delete_element(
    element_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    deleted = await ElementService(db).delete(user.id, element_id)
    return DeletedResponse(id=deleted)
