"""File ORM — the canvas container and lifecycle aggregate root.

Invariants:
    - deleted_at IS NULL ⇔ Active; NOT NULL ⇔ Trashed; row absent ⇔ Purged
    - owner_id is the single owner; collaborators live in file_collaborators
    - Assets, elements and collaborator rows are removed with the file
      (ON DELETE CASCADE, and explicitly by the purge service)

Design Decisions:
    - canvas_data as JSON: the canvas payload is validated by Pydantic at the
      boundary and stored as-is
    - No ORM relationships: every read goes through explicit access-gated
      queries, never lazy loads (ADR: async session, no implicit IO)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, JSON, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from canvasdesk.db.base import Base


class File(Base):
    """Canvas file — owns assets and elements."""
    __tablename__ = "files"
    __table_args__ = (
        Index("ix_files_owner_deleted", "owner_id", "deleted_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    file_type: Mapped[str] = mapped_column(
        String(50), nullable=False, default="canvas",
    )
    canvas_data: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    last_edited_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
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
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
