"""Auth Routes — identity sync and current-user lookup.

Invariants:
    - /sync trusts only the verified token for subject and email; the body may
      only carry profile fields
    - Repeated syncs are idempotent (same internal id every time)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from canvasdesk.api.dependencies import get_current_user, get_identity
from canvasdesk.core.repository_protocols import Identity
from canvasdesk.infrastructure.database import get_db
from canvasdesk.models.user import User
from canvasdesk.schemas.user import UserResponse, UserSyncRequest, UserSyncResponse
from canvasdesk.services.user_directory import UserDirectory

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/sync", response_model=UserSyncResponse)
async def sync_user(
    body: UserSyncRequest | None = None,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    """Create or update the caller's user record from the verified token."""
    body = body or UserSyncRequest()
    user = await UserDirectory(db).upsert(
        identity, display_name=body.display_name, avatar_url=body.avatar_url,
    )
    return UserSyncResponse(user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user)):
    return user
