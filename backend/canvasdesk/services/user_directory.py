"""User Directory — maps identity subjects to internal users, upserting on sync.

Invariants:
    - Same subject_id always maps to the same internal user id
    - Repeated syncs update mutable fields (email, and profile fields when sent)
      without creating duplicates
    - resolve() re-queries on every request; first contact provisions the user

Design Decisions:
    - Select-then-insert with rollback-and-reselect on IntegrityError: a concurrent
      first sync that wins the unique(subject_id) race turns our insert into an
      update, not a 500 (ADR: portable across SQLite and PostgreSQL, no
      dialect-specific upsert)
    - display_name/avatar_url only overwritten when sent: resolve() provisions
      with email alone and must not erase a profile set by an earlier sync
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from canvasdesk.core.repository_protocols import Identity
from canvasdesk.infrastructure.observability import emit_event
from canvasdesk.models.user import User

logger = logging.getLogger(__name__)


class UserDirectory:
    """Subject ↔ user mapping backed by the users table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_subject(self, subject_id: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.subject_id == subject_id),
        )
        return result.scalar_one_or_none()

    async def upsert(
        self,
        identity: Identity,
        display_name: str | None = None,
        avatar_url: str | None = None,
    ) -> User:
        """Create or update the user for identity.subject_id, then commit."""
        user = await self.get_by_subject(identity.subject_id)
        if user is None:
            user = await self._insert(identity, display_name, avatar_url)
        else:
            self._apply_profile(user, identity, display_name, avatar_url)
        await self.db.commit()
        await self.db.refresh(user)
        emit_event("user_synced", user_id=user.id)
        return user

    async def resolve(self, identity: Identity) -> User:
        """Return the user for this identity, provisioning on first contact."""
        user = await self.get_by_subject(identity.subject_id)
        if user is not None:
            return user
        return await self.upsert(identity)

    async def _insert(
        self,
        identity: Identity,
        display_name: str | None,
        avatar_url: str | None,
    ) -> User:
        user = User(
            subject_id=identity.subject_id,
            email=identity.email,
            display_name=display_name,
            avatar_url=avatar_url,
        )
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError:
            # Identity sync runs first in the request: nothing else is pending
            await self.db.rollback()
            logger.info(f"Concurrent sync for subject {identity.subject_id}, re-reading")
            user = await self.get_by_subject(identity.subject_id)
            if user is None:
                raise
            self._apply_profile(user, identity, display_name, avatar_url)
        return user

    @staticmethod
    def _apply_profile(
        user: User,
        identity: Identity,
        display_name: str | None,
        avatar_url: str | None,
    ) -> None:
        user.email = identity.email
        if display_name is not None:
            user.display_name = display_name
        if avatar_url is not None:
            user.avatar_url = avatar_url
        user.updated_at = datetime.now(timezone.utc)
