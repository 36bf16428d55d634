"""Board, column and card schemas.

Wire format is camelCase; Python attributes stay snake_case.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictInt, model_validator
from pydantic.alias_generators import to_camel

from src.services.board_service import CardPatch


class CamelModel(BaseModel):
    """Base schema serializing to and accepting camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ColumnResponse(CamelModel):
    id: int
    title: str
    order_index: int


class CardResponse(CamelModel):
    """Card response."""

    id: int
    column_id: int
    title: str
    description: str | None
    order_index: int
    owner_id: int | None
    created_at: datetime
    updated_at: datetime


class BoardResponse(CamelModel):
    """Full board snapshot: every column and every card."""

    columns: list[ColumnResponse]
    cards: list[CardResponse]


class CardCreate(CamelModel):
    """Create a new card."""

    column_id: StrictInt
    title: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=1000)


class CardUpdate(CamelModel):
    """Partial card update.

    Only keys present in the request body are applied. ``description`` may be
    sent as null to clear it; the other fields may be omitted but not nulled.
    """

    column_id: StrictInt | None = None
    title: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=1000)
    order_index: StrictInt | None = None

    @model_validator(mode="after")
    def validate_present_fields(self) -> "CardUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided")
        for name in ("column_id", "title", "order_index"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self

    def to_patch(self) -> CardPatch:
        """Build a patch holding only the fields the client sent."""
        return CardPatch(**{name: getattr(self, name) for name in self.model_fields_set})


class DeleteResponse(BaseModel):
    success: bool = True
