"""File Schemas — file create/update, canvas payload, collaborator membership.

Invariants:
    - name: 1-100 chars after stripping, never whitespace-only
    - canvas_data objects: width/height > 0, zIndex integer, viewport scale > 0
    - FileUpdate fields are all optional; which ones were SENT is read with
      model_dump(exclude_unset=True) by the service

Design Decisions:
    - Literal type for CanvasObject.type over str enum: Pydantic handles validation natively
    - field_validator for side-effect-free transforms (strip) — keeps models pure
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("cannot be empty or whitespace")
    return v


# --- Canvas payload -----------------------------------------------------------

class CanvasObject(BaseModel):
    id: str
    type: Literal["asset", "group"]
    assetId: UUID | None = None
    x: float
    y: float
    width: float = Field(gt=0)
    height: float = Field(gt=0)
    rotation: float | None = None
    groupId: str | None = None
    zIndex: int
    label: str | None = None


class Viewport(BaseModel):
    x: float = 0
    y: float = 0
    scale: float = Field(1, gt=0)


class CanvasData(BaseModel):
    version: int = 1
    objects: list[CanvasObject] = Field(default_factory=list)
    viewport: Viewport = Field(default_factory=Viewport)


# --- Files --------------------------------------------------------------------

class FileCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    file_type: str = Field("canvas", min_length=1, max_length=50)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_required(v)


class FileUpdate(BaseModel):
    """Sparse update — at least one field must be sent (checked by the service).

    canvas_data may be sent as null to clear the payload; name may not.
    """
    name: str | None = Field(None, min_length=1, max_length=100)
    canvas_data: CanvasData | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return None if v is None else _strip_required(v)

    def sent_fields(self) -> dict:
        """Explicitly sent fields, JSON-ready (nested defaults kept)."""
        return self.model_dump(mode="json", include=self.model_fields_set)


class FileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_id: UUID
    name: str
    file_type: str
    canvas_data: dict | None = None
    last_edited_by: UUID | None = None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None


class DeletedResponse(BaseModel):
    success: bool = True
    id: UUID


# --- Collaborators ------------------------------------------------------------

class CollaboratorAdd(BaseModel):
    email: EmailStr


class CollaboratorResponse(BaseModel):
    user_id: UUID
    email: str
    display_name: str | None = None
    added_at: datetime
