"""
Request and response models shared by the API routers.

Request models reject unknown fields.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from binderkeep.models.catalog import CatalogCard


class AccountResponse(BaseModel):
    """An authenticated user's account."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    subject_id: str
    created_at: datetime
    updated_at: datetime


class SetResponse(BaseModel):
    """A tracked set with its collection progress."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    set_api_id: str
    set_name: str
    set_series: str | None = None
    total_cards: int
    collected_cards: int
    completion_percent: float = Field(
        ...,
        description="collected_cards / total_cards as a percentage, one decimal",
    )
    created_at: datetime
    updated_at: datetime


class CardResponse(BaseModel):
    """One card slot in a tracked set."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    set_api_id: str
    card_api_id: str
    card_name: str
    card_number: str
    collected: bool
    updated_at: datetime


class CardInput(BaseModel):
    """A catalog card supplied by the caller."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1, description="Catalog card id", examples=["sv1-3"])
    name: str = Field(..., min_length=1, examples=["Pikachu"])
    number: str = Field(..., min_length=1, examples=["3"])

    def to_catalog_card(self) -> CatalogCard:
        return CatalogCard(external_id=self.id, name=self.name, number=self.number)


class AuthRequest(BaseModel):
    """Request model for exchanging an access token for an account."""

    model_config = ConfigDict(extra="forbid")

    access_token: str = Field(..., min_length=1)


class AddSetRequest(BaseModel):
    """Request model for tracking a new set."""

    model_config = ConfigDict(extra="forbid")

    set_api_id: str = Field(..., min_length=1, description="Catalog set id", examples=["sv1"])
    set_name: str = Field(..., min_length=1, examples=["Scarlet & Violet"])
    set_series: str | None = Field(default=None, examples=["Scarlet & Violet"])
    total_cards: int = Field(..., gt=0, examples=[258])


class BulkInitCardsRequest(BaseModel):
    """Request model for inserting caller-supplied cards into a tracked set."""

    model_config = ConfigDict(extra="forbid")

    set_api_id: str = Field(..., min_length=1)
    cards: list[CardInput]


class ToggleCardRequest(BaseModel):
    """Request model for marking a card collected or not."""

    model_config = ConfigDict(extra="forbid")

    collected: StrictBool
