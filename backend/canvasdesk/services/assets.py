"""Asset Service — library metadata CRUD with a hard per-file ceiling.

Invariants:
    - List/get require READ on the parent file; create/update/delete require WRITE
    - A file never commits more than max_assets assets: count → insert → flush →
      re-count inside one transaction, rolled back if the ceiling was crossed
    - Deleting an asset also deletes the asset elements that place it
    - Listing is newest first (created_at DESC, id ASC)

Design Decisions:
    - Parent row locked (FOR UPDATE) before counting: concurrent creators on
      PostgreSQL serialize per file; the post-insert re-count covers backends
      that ignore the lock (ADR: hardened ceiling, see DESIGN.md)
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from canvasdesk.core.collection_policy import (
    ASSET_NULLABLE_FIELDS, ASSET_UPDATABLE_FIELDS, MAX_ASSETS_PER_FILE,
    check_capacity, collect_updates,
)
from canvasdesk.core.domain_types import AccessRight
from canvasdesk.core.errors import CapacityExceededError, ResourceNotFoundError
from canvasdesk.infrastructure.observability import emit_event
from canvasdesk.models.asset import Asset
from canvasdesk.models.element import CanvasElement
from canvasdesk.schemas.asset import AssetCreate
from canvasdesk.services.access_gate import AccessGate

logger = logging.getLogger(__name__)

# API field name → ORM attribute
_ATTRIBUTE_FOR = {"metadata": "asset_metadata"}


class AssetService:
    def __init__(self, db: AsyncSession, max_assets: int = MAX_ASSETS_PER_FILE):
        self.db = db
        self.gate = AccessGate(db)
        self.max_assets = max_assets

    async def count_for_file(self, file_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Asset).where(Asset.file_id == file_id),
        )
        return result.scalar_one()

    async def list_for_file(self, user_id: UUID, file_id: UUID) -> list[Asset]:
        await self.gate.require(user_id, file_id, AccessRight.READ)
        result = await self.db.execute(
            select(Asset)
            .where(Asset.file_id == file_id)
            .order_by(Asset.created_at.desc(), Asset.id.asc()),
        )
        return list(result.scalars().all())

    async def create(self, user_id: UUID, data: AssetCreate) -> Asset:
        await self.gate.require(user_id, data.file_id, AccessRight.WRITE, lock=True)

        count = await self.count_for_file(data.file_id)
        self._check_capacity(user_id, data.file_id, count)

        asset = Asset(
            file_id=data.file_id,
            name=data.name,
            file_type=data.file_type,
            storage_url=str(data.storage_url),
            thumbnail_url=str(data.thumbnail_url) if data.thumbnail_url else None,
            asset_metadata=data.metadata or {},
        )
        self.db.add(asset)
        await self.db.flush()

        count = await self.count_for_file(data.file_id)
        if count > self.max_assets:
            await self.db.rollback()
            self._check_capacity(user_id, data.file_id, count)

        await self.db.commit()
        await self.db.refresh(asset)
        logger.info(f"Asset {asset.id} created in file {data.file_id}")
        return asset

    async def get(self, user_id: UUID, asset_id: UUID) -> Asset:
        asset = await self._load(asset_id)
        await self.gate.require(
            user_id, asset.file_id, AccessRight.READ,
            resource_type="Asset", resource_id=asset_id,
        )
        return asset

    async def update(self, user_id: UUID, asset_id: UUID, provided: dict) -> Asset:
        fields = collect_updates(
            provided, ASSET_UPDATABLE_FIELDS, nullable=ASSET_NULLABLE_FIELDS,
        )
        asset = await self._load(asset_id)
        await self.gate.require(
            user_id, asset.file_id, AccessRight.WRITE,
            resource_type="Asset", resource_id=asset_id,
        )
        for name, value in fields.items():
            setattr(asset, _ATTRIBUTE_FOR.get(name, name), value)
        asset.updated_at = datetime.now(timezone.utc)
        await self.db.commit()
        await self.db.refresh(asset)
        return asset

    async def delete(self, user_id: UUID, asset_id: UUID) -> UUID:
        asset = await self._load(asset_id)
        await self.gate.require(
            user_id, asset.file_id, AccessRight.WRITE,
            resource_type="Asset", resource_id=asset_id,
        )
        await self.db.execute(
            delete(CanvasElement).where(CanvasElement.asset_id == asset_id),
        )
        await self.db.delete(asset)
        await self.db.commit()
        return asset_id

    async def _load(self, asset_id: UUID) -> Asset:
        asset = await self.db.get(Asset, asset_id)
        if asset is None:
            raise ResourceNotFoundError("Asset", str(asset_id))
        return asset

    def _check_capacity(self, user_id: UUID, file_id: UUID, count: int) -> None:
        try:
            check_capacity(count, self.max_assets)
        except CapacityExceededError:
            emit_event(
                "capacity_rejected", user_id=user_id, file_id=file_id,
                count=count, limit=self.max_assets,
            )
            raise
