"""
Tracked set endpoints.

List, add and remove the sets the caller is collecting.
"""

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from binderkeep.api.dependencies import CurrentAccount, Service
from binderkeep.api.schemas import AddSetRequest, CardResponse, SetResponse

router = APIRouter(prefix="/sets", tags=["sets"])


class SetListResponse(BaseModel):
    """Response model for the caller's tracked sets."""

    sets: list[SetResponse] = Field(default_factory=list)


class AddSetResponse(BaseModel):
    """Response model for a newly tracked set and its seeded cards."""

    tracked_set: SetResponse
    cards: list[CardResponse]


class DeleteResponse(BaseModel):
    """Response model for removing a tracked set."""

    set_id: int
    deleted: bool
    cards_removed: int = 0


@router.get("", response_model=SetListResponse)
async def list_sets(account: CurrentAccount, service: Service) -> SetListResponse:
    """List the caller's tracked sets in the order they were added."""
    sets = await service.list_sets(account.id)
    return SetListResponse(sets=[SetResponse.model_validate(s) for s in sets])


@router.post("", response_model=AddSetResponse, status_code=status.HTTP_201_CREATED)
async def add_set(
    request: AddSetRequest,
    account: CurrentAccount,
    service: Service,
) -> AddSetResponse:
    """
    Start tracking a catalog set.

    Seeds one uncollected card per catalog card. Fails with 409 if the set
    is already tracked and 503 if the catalog is unavailable; in both cases
    nothing is stored.
    """
    tracked_set, cards = await service.add_set(
        account.id,
        request.set_api_id,
        request.set_name,
        request.set_series,
        request.total_cards,
    )
    return AddSetResponse(
        tracked_set=SetResponse.model_validate(tracked_set),
        cards=[CardResponse.model_validate(c) for c in cards],
    )


@router.delete("/{set_id}", response_model=DeleteResponse)
async def remove_set(set_id: int, account: CurrentAccount, service: Service) -> DeleteResponse:
    """Stop tracking a set and delete all of its cards."""
    cards_removed = await service.remove_set(account.id, set_id)
    return DeleteResponse(set_id=set_id, deleted=True, cards_removed=cards_removed)
