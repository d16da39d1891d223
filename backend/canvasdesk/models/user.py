"""User ORM — internal user record mapped from an external identity subject.

Invariants:
    - id is UUID primary key; subject_id (identity provider uid) is unique
    - Upserted on every sync keyed by subject_id; never hard-deleted by the API

Design Decisions:
    - Internal id is the join key everywhere (files.owner_id, file_collaborators.user_id);
      subject_id only appears at the identity boundary
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from canvasdesk.db.base import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    subject_id: Mapped[str] = mapped_column(
        String(128), nullable=False, unique=True, index=True,
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False, default="")
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
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
