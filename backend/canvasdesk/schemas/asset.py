"""Asset Schemas — library metadata only; placement lives in canvas elements.

Invariants:
    - name: 1-255 chars after stripping
    - storage_url / thumbnail_url must be absolute http(s) URLs
    - metadata is a free-form string-keyed map
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import (
    AliasChoices, BaseModel, ConfigDict, Field, HttpUrl, field_validator,
)


class AssetCreate(BaseModel):
    file_id: UUID
    name: str = Field(min_length=1, max_length=255)
    file_type: str = Field(min_length=1, max_length=255)
    storage_url: HttpUrl = Field(
        validation_alias=AliasChoices("storage_url", "r2_url"),
    )
    thumbnail_url: HttpUrl | None = None
    metadata: dict[str, Any] | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class AssetUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    thumbnail_url: HttpUrl | None = None
    metadata: dict[str, Any] | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v

    def sent_fields(self) -> dict:
        return self.model_dump(mode="json", include=self.model_fields_set)


class AssetResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: UUID
    file_id: UUID
    name: str
    file_type: str
    storage_url: str
    thumbnail_url: str | None = None
    metadata: dict[str, Any] = Field(
        default_factory=dict, validation_alias=AliasChoices("asset_metadata", "metadata"),
    )
    created_at: datetime
    updated_at: datetime
