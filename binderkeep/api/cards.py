"""
Card endpoints.

List a tracked set's cards, add caller-supplied cards, and toggle the
collected flag.
"""

from typing import Annotated

from fastapi import APIRouter, Query, status
from pydantic import BaseModel, Field

from binderkeep.api.dependencies import CurrentAccount, Service
from binderkeep.api.schemas import (
    BulkInitCardsRequest,
    CardResponse,
    SetResponse,
    ToggleCardRequest,
)

router = APIRouter(prefix="/cards", tags=["cards"])


class CardListResponse(BaseModel):
    """Response model for a set's cards."""

    set_api_id: str
    cards: list[CardResponse] = Field(default_factory=list)


class ToggleResponse(BaseModel):
    """Response model for a toggled card and its set's recomputed progress."""

    card: CardResponse
    tracked_set: SetResponse


@router.get("", response_model=CardListResponse)
async def list_cards(
    set_api_id: Annotated[str, Query(min_length=1)],
    account: CurrentAccount,
    service: Service,
) -> CardListResponse:
    """List the caller's cards for a tracked set. 404 if the set is not tracked."""
    cards = await service.list_cards(account.id, set_api_id)
    return CardListResponse(
        set_api_id=set_api_id,
        cards=[CardResponse.model_validate(c) for c in cards],
    )


@router.post("", response_model=CardListResponse, status_code=status.HTTP_201_CREATED)
async def bulk_init_cards(
    request: BulkInitCardsRequest,
    account: CurrentAccount,
    service: Service,
) -> CardListResponse:
    """
    Add caller-supplied cards to a tracked set.

    Cards already in the set are skipped; only newly inserted cards are
    returned.
    """
    inserted = await service.bulk_init_cards(
        account.id,
        request.set_api_id,
        [card.to_catalog_card() for card in request.cards],
    )
    return CardListResponse(
        set_api_id=request.set_api_id,
        cards=[CardResponse.model_validate(c) for c in inserted],
    )


@router.patch("/{card_id}", response_model=ToggleResponse)
async def toggle_card(
    card_id: int,
    request: ToggleCardRequest,
    account: CurrentAccount,
    service: Service,
) -> ToggleResponse:
    """Mark a card collected or not and return the set's recomputed progress."""
    card, tracked_set = await service.toggle_card(account.id, card_id, request.collected)
    return ToggleResponse(
        card=CardResponse.model_validate(card),
        tracked_set=SetResponse.model_validate(tracked_set),
    )
