"""Element Schemas — tagged union of canvas element variants, one strict props schema per type.

Invariants:
    - ElementCreate is discriminated on `type` (rectangle | line | text | asset)
    - Each props schema forbids unknown keys
    - asset props carry asset_id plus numeric x, y, width, height
    - 0 <= sort_index <= MAX_SORT_INDEX on create and update
    - validate_props is the single entry point for props validation after
      creation (the element's type is fixed, updates re-validate against it)

Design Decisions:
    - Discriminated union over a free-form dict + refine: the variant is known
      before the service runs, invalid shapes never reach the core
    - exclude_none on dump: optional style keys are absent, not null, in storage
"""

from datetime import datetime
from typing import Annotated, Any, Literal, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from canvasdesk.core.collection_policy import MAX_SORT_INDEX
from canvasdesk.core.domain_types import ElementType
from canvasdesk.core.errors import ValidationFailedError


# --- Props variants -----------------------------------------------------------

class _Props(BaseModel):
    model_config = ConfigDict(extra="forbid")


class RectangleProps(_Props):
    x: float
    y: float
    width: float = Field(ge=0)
    height: float = Field(ge=0)
    rotation: float = 0
    fill: str | None = None
    stroke: str | None = None
    stroke_width: float | None = Field(None, ge=0)
    corner_radius: float | None = Field(None, ge=0)
    opacity: float | None = Field(None, ge=0, le=1)


class LineProps(_Props):
    points: list[float] = Field(min_length=4)
    stroke: str | None = None
    stroke_width: float | None = Field(None, ge=0)
    opacity: float | None = Field(None, ge=0, le=1)

    @field_validator("points")
    @classmethod
    def points_are_pairs(cls, v: list[float]) -> list[float]:
        if len(v) % 2:
            raise ValueError("points must be a flat list of x, y pairs")
        return v


class TextProps(_Props):
    x: float
    y: float
    text: str = Field(max_length=10_000)
    font_size: float = Field(16, gt=0)
    font_family: str | None = None
    fill: str | None = None
    align: Literal["left", "center", "right"] | None = None
    width: float | None = Field(None, gt=0)
    rotation: float = 0
    opacity: float | None = Field(None, ge=0, le=1)


class AssetPlacementProps(_Props):
    asset_id: UUID
    x: float
    y: float
    width: float
    height: float
    rotation: float = 0
    opacity: float | None = Field(None, ge=0, le=1)


PROPS_SCHEMAS: dict[ElementType, type[_Props]] = {
    ElementType.RECTANGLE: RectangleProps,
    ElementType.LINE: LineProps,
    ElementType.TEXT: TextProps,
    ElementType.ASSET: AssetPlacementProps,
}


def validate_props(element_type: ElementType | str, props: dict) -> _Props:
    """Validate a props map against the schema for `element_type`."""
    schema = PROPS_SCHEMAS[ElementType(element_type)]
    try:
        return schema.model_validate(props)
    except ValidationError as e:
        fields = [
            "props." + ".".join(str(loc) for loc in err["loc"])
            for err in e.errors()
        ]
        raise ValidationFailedError(
            f"Invalid props for {ElementType(element_type).value} element",
            fields=fields or ["props"],
        )


def dump_props(props: _Props) -> dict:
    return props.model_dump(mode="json", exclude_none=True)


# --- Create (tagged union) ----------------------------------------------------

class _ElementCreateBase(BaseModel):
    file_id: UUID
    sort_index: int = Field(ge=0, le=MAX_SORT_INDEX)

    @property
    def asset_id(self) -> UUID | None:
        return None


class RectangleElementCreate(_ElementCreateBase):
    type: Literal["rectangle"]
    props: RectangleProps


class LineElementCreate(_ElementCreateBase):
    type: Literal["line"]
    props: LineProps


class TextElementCreate(_ElementCreateBase):
    type: Literal["text"]
    props: TextProps


class AssetElementCreate(_ElementCreateBase):
    type: Literal["asset"]
    props: AssetPlacementProps

    @property
    def asset_id(self) -> UUID | None:
        return self.props.asset_id


ElementCreate = Annotated[
    Union[
        RectangleElementCreate,
        LineElementCreate,
        TextElementCreate,
        AssetElementCreate,
    ],
    Field(discriminator="type"),
]


# --- Update / response --------------------------------------------------------

class ElementUpdate(BaseModel):
    """Sparse update. props is re-validated against the element's existing type."""
    sort_index: int | None = Field(None, ge=0, le=MAX_SORT_INDEX)
    props: dict[str, Any] | None = None

    def sent_fields(self) -> dict:
        return self.model_dump(mode="json", include=self.model_fields_set)


class ElementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    file_id: UUID
    type: ElementType
    sort_index: int
    props: dict[str, Any]
    asset_id: UUID | None = None
    created_at: datetime
    updated_at: datetime
