"""
Catalog browsing endpoints.

Read-only passthrough to the card catalog so the client can pick a set
to track.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from binderkeep.api.dependencies import get_catalog_client
from binderkeep.models.failure import ServiceUnavailableError
from binderkeep.services.catalog import CatalogClient, CatalogError

router = APIRouter(prefix="/catalog", tags=["catalog"])


class CatalogSetResponse(BaseModel):
    """A set available in the catalog."""

    id: str
    name: str
    series: str | None = None
    total: int
    release_date: str | None = None


class CatalogSetListResponse(BaseModel):
    sets: list[CatalogSetResponse] = Field(default_factory=list)


class CatalogCardResponse(BaseModel):
    """A card in a catalog set."""

    id: str
    name: str
    number: str


class CatalogCardListResponse(BaseModel):
    set_api_id: str
    cards: list[CatalogCardResponse] = Field(default_factory=list)


@router.get("/sets", response_model=CatalogSetListResponse)
async def list_catalog_sets(
    catalog: Annotated[CatalogClient, Depends(get_catalog_client)],
    q: Annotated[str | None, Query(description="Case-insensitive set name filter")] = None,
) -> CatalogSetListResponse:
    """List catalog sets by release date, optionally filtered by name."""
    try:
        sets = await catalog.list_sets(q)
    except CatalogError as e:
        raise ServiceUnavailableError("The card catalog is unavailable.", detail=str(e)) from e

    return CatalogSetListResponse(
        sets=[
            CatalogSetResponse(
                id=s.external_id,
                name=s.name,
                series=s.series,
                total=s.total,
                release_date=s.release_date,
            )
            for s in sets
        ]
    )


@router.get("/sets/{set_api_id}/cards", response_model=CatalogCardListResponse)
async def list_catalog_cards(
    set_api_id: str,
    catalog: Annotated[CatalogClient, Depends(get_catalog_client)],
) -> CatalogCardListResponse:
    """List every card in a catalog set."""
    try:
        cards = await catalog.list_cards(set_api_id)
    except CatalogError as e:
        raise ServiceUnavailableError("The card catalog is unavailable.", detail=str(e)) from e

    return CatalogCardListResponse(
        set_api_id=set_api_id,
        cards=[CatalogCardResponse(id=c.external_id, name=c.name, number=c.number) for c in cards],
    )
