"""Asset Routes — file-scoped media library metadata."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from canvasdesk.api.dependencies import get_current_user
from canvasdesk.config import get_settings
from canvasdesk.infrastructure.database import get_db
from canvasdesk.models.user import User
from canvasdesk.schemas.asset import AssetCreate, AssetResponse, AssetUpdate
from canvasdesk.schemas.file import DeletedResponse
from canvasdesk.services.assets import AssetService

router = APIRouter(prefix="/api/v1/assets", tags=["assets"])


def _service(db: AsyncSession) -> AssetService:
    return AssetService(db, max_assets=get_settings().max_assets_per_file)


@router.get("", response_model=list[AssetResponse])
async def list_assets(
    file_id: UUID = Query(alias="fileId"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Assets of a file, newest first."""
    return await _service(db).list_for_file(user.id, file_id)


@router.post("", response_model=AssetResponse, status_code=status.HTTP_201_CREATED)
async def create_asset(
    body: AssetCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _service(db).create(user.id, body)


@router.get("/{asset_id}", response_model=AssetResponse)
async def get_asset(
    asset_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _service(db).get(user.id, asset_id)


@router.patch("/{asset_id}", response_model=AssetResponse)
async def update_asset(
    asset_id: UUID,
    body: AssetUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _service(db).update(user.id, asset_id, body.sent_fields())


@router.delete("/{asset_id}", response_model=DeletedResponse)
async def delete_asset(
    asset_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    deleted = await _service(db).delete(user.id, asset_id)
    return DeletedResponse(id=deleted)
