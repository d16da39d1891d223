"""Element Service — canvas element CRUD in stacking order.

Invariants:
    - List/get require READ on the parent file; create/update/delete require WRITE
    - Listing order is (sort_index ASC, created_at ASC, id ASC) — no renumbering
    - An asset element must reference an asset of the SAME file; its id is
      mirrored into canvas_elements.asset_id on create and on props update
    - props updates are re-validated against the element's fixed type
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from canvasdesk.core.collection_policy import (
    ELEMENT_ORDER, ELEMENT_UPDATABLE_FIELDS, collect_updates, validate_sort_index,
)
from canvasdesk.core.domain_types import AccessRight, ElementType
from canvasdesk.core.errors import ResourceNotFoundError, ValidationFailedError
from canvasdesk.models.asset import Asset
from canvasdesk.models.element import CanvasElement
from canvasdesk.schemas.element import dump_props, validate_props
from canvasdesk.services.access_gate import AccessGate

logger = logging.getLogger(__name__)


class ElementService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.gate = AccessGate(db)

    async def list_for_file(self, user_id: UUID, file_id: UUID) -> list[CanvasElement]:
        await self.gate.require(user_id, file_id, AccessRight.READ)
        result = await self.db.execute(
            select(CanvasElement)
            .where(CanvasElement.file_id == file_id)
            .order_by(
                *(getattr(CanvasElement, column).asc() for column in ELEMENT_ORDER),
            ),
        )
        return list(result.scalars().all())

    async def create(self, user_id: UUID, data) -> CanvasElement:
        """data is one of the ElementCreate variants (already validated)."""
        await self.gate.require(user_id, data.file_id, AccessRight.WRITE)
        if data.asset_id is not None:
            await self._require_asset_in_file(data.asset_id, data.file_id)

        element = CanvasElement(
            file_id=data.file_id,
            type=data.type,
            sort_index=data.sort_index,
            props=dump_props(data.props),
            asset_id=data.asset_id,
        )
        self.db.add(element)
        await self.db.commit()
        await self.db.refresh(element)
        logger.info(f"Element {element.id} ({element.type}) created in file {data.file_id}")
        return element

    async def get(self, user_id: UUID, element_id: UUID) -> CanvasElement:
        element = await self._load(element_id)
        await self.gate.require(
            user_id, element.file_id, AccessRight.READ,
            resource_type="Element", resource_id=element_id,
        )
        return element

    async def update(
        self, user_id: UUID, element_id: UUID, provided: dict,
    ) -> CanvasElement:
        fields = collect_updates(provided, ELEMENT_UPDATABLE_FIELDS)
        element = await self._load(element_id)
        await self.gate.require(
            user_id, element.file_id, AccessRight.WRITE,
            resource_type="Element", resource_id=element_id,
        )

        if "sort_index" in fields:
            element.sort_index = validate_sort_index(fields["sort_index"])
        if "props" in fields:
            props = validate_props(element.type, fields["props"])
            if element.type == ElementType.ASSET.value:
                await self._require_asset_in_file(props.asset_id, element.file_id)
                element.asset_id = props.asset_id
            element.props = dump_props(props)
        element.updated_at = datetime.now(timezone.utc)

        await self.db.commit()
        await self.db.refresh(element)
        return element

    async def delete(self, user_id: UUID, element_id: UUID) -> UUID:
        element = await self._load(element_id)
        await self.gate.require(
            user_id, element.file_id, AccessRight.WRITE,
            resource_type="Element", resource_id=element_id,
        )
        await self.db.delete(element)
        await self.db.commit()
        return element_id

    async def _load(self, element_id: UUID) -> CanvasElement:
        element = await self.db.get(CanvasElement, element_id)
        if element is None:
            raise ResourceNotFoundError("Element", str(element_id))
        return element

    async def _require_asset_in_file(self, asset_id: UUID, file_id: UUID) -> None:
        result = await self.db.execute(
            select(Asset.id).where(Asset.id == asset_id, Asset.file_id == file_id),
        )
        if result.scalar_one_or_none() is None:
            raise ValidationFailedError(
                "props.asset_id must reference an asset of the same file",
                fields=["props.asset_id"],
            )
