"""CanvasElement ORM — a positioned item on a file's canvas.

Invariants:
    - Always belongs to a File (file_id FK, cascade on purge)
    - type is one of ElementType; props shape validated per type at the boundary
    - asset_id is set iff type == "asset" and mirrors props["asset_id"]
    - Render order is (sort_index ASC, created_at ASC); no renumbering

Design Decisions:
    - asset_id denormalized from props: lookup of placements by asset without
      JSON path queries (ADR: query performance)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, JSON, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from canvasdesk.db.base import Base


class CanvasElement(Base):
    __tablename__ = "canvas_elements"
    __table_args__ = (
        Index("ix_canvas_elements_file_order", "file_id", "sort_index", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    file_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("files.id", ondelete="CASCADE"),
        nullable=False,
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    sort_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    props: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    asset_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("assets.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
