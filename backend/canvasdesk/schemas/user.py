"""User Schemas — sync payload and public user shape."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class UserSyncRequest(BaseModel):
    """Optional profile fields sent by the client on sign-in."""
    model_config = ConfigDict(populate_by_name=True)

    display_name: str | None = Field(None, alias="displayName", max_length=255)
    avatar_url: str | None = Field(None, alias="photoURL", max_length=2048)


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    subject_id: str
    email: str
    display_name: str | None = None
    avatar_url: str | None = None
    created_at: datetime
    updated_at: datetime


class UserSyncResponse(BaseModel):
    success: bool = True
    user: UserResponse
