"""
Collection service.

Application rules for tracked sets and card slots:
- every operation is scoped to one account
- a set and its seeded cards are created together or not at all
- a set and its cards are deleted together or not at all
- collected_cards is recomputed from card rows after every change
"""

import logging
from collections.abc import Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from binderkeep.db.operations import (
    add_cards,
    create_tracked_set,
    delete_tracked_set,
    get_card,
    get_card_api_ids,
    get_tracked_set,
    get_tracked_set_by_api_id,
    list_cards,
    list_tracked_sets,
    recount_collected_cards,
    set_card_collected,
)
from binderkeep.models.catalog import CatalogCard
from binderkeep.models.db import TrackedSetDB, UserCardDB
from binderkeep.models.failure import (
    ConflictError,
    InputValidationError,
    NotFoundError,
    PartialFailureError,
    ServiceUnavailableError,
)
from binderkeep.services.catalog import CatalogClient, CatalogError

logger = logging.getLogger(__name__)


def _dedupe_cards(cards: Sequence[CatalogCard]) -> list[CatalogCard]:
    """Drop repeated catalog card ids, keeping the first occurrence."""
    seen: set[str] = set()
    unique: list[CatalogCard] = []
    for card in cards:
        if card.external_id in seen:
            continue
        seen.add(card.external_id)
        unique.append(card)
    return unique


def _require(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise InputValidationError(f"{field} is required")
    return value.strip()


class CollectionService:
    """
    Tracked set and card operations for a single request.

    Args:
        session: The request's database session
        catalog: Catalog client used to seed newly tracked sets
    """

    def __init__(self, session: AsyncSession, catalog: CatalogClient | None = None) -> None:
        self.session = session
        self.catalog = catalog or CatalogClient()

    async def list_sets(self, account_id: int) -> list[TrackedSetDB]:
        return await list_tracked_sets(self.session, account_id)

    async def list_cards(self, account_id: int, set_api_id: str) -> list[UserCardDB]:
        """
        List the account's cards for a set it tracks.

        Raises:
            NotFoundError: If the account does not track the set
        """
        set_api_id = _require(set_api_id, "set_api_id")
        if await get_tracked_set_by_api_id(self.session, account_id, set_api_id) is None:
            raise NotFoundError(f"Set '{set_api_id}' is not tracked")
        return await list_cards(self.session, account_id, set_api_id)

    async def add_set(
        self,
        account_id: int,
        set_api_id: str,
        set_name: str,
        set_series: str | None,
        total_cards: int,
    ) -> tuple[TrackedSetDB, list[UserCardDB]]:
        """
        Start tracking a catalog set and seed one uncollected card per catalog card.

        The catalog is read before anything is written, so a catalog outage
        leaves no trace.

        Raises:
            InputValidationError: If a required field is missing or invalid
            ConflictError: If the account already tracks the set
            NotFoundError: If the catalog has no cards for the set
            ServiceUnavailableError: If the catalog cannot be reached
            PartialFailureError: If storing the set or its cards fails
        """
        set_api_id = _require(set_api_id, "set_api_id")
        set_name = _require(set_name, "set_name")
        if total_cards <= 0:
            raise InputValidationError("total_cards must be positive")

        if await get_tracked_set_by_api_id(self.session, account_id, set_api_id) is not None:
            raise ConflictError(f"Set '{set_api_id}' is already tracked")

        try:
            catalog_cards = await self.catalog.list_cards(set_api_id)
        except CatalogError as e:
            raise ServiceUnavailableError(
                "The card catalog is unavailable.",
                detail=str(e),
            ) from e

        if not catalog_cards:
            raise NotFoundError(f"Set '{set_api_id}' has no cards in the catalog")

        catalog_cards = _dedupe_cards(catalog_cards)
        if len(catalog_cards) != total_cards:
            logger.info(
                "Catalog lists %d cards for %s, caller reported %d",
                len(catalog_cards),
                set_api_id,
                total_cards,
            )

        try:
            tracked_set, cards = await create_tracked_set(
                self.session,
                account_id,
                set_api_id,
                set_name,
                set_series,
                total_cards,
                catalog_cards,
            )
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError(f"Set '{set_api_id}' is already tracked") from e
        except SQLAlchemyError as e:
            logger.exception("Failed to store set %s for account %d", set_api_id, account_id)
            await self.session.rollback()
            raise PartialFailureError(
                "The set could not be added.",
                detail=type(e).__name__,
            ) from e

        logger.info(
            "Account %d now tracks %s with %d cards", account_id, set_api_id, len(cards)
        )
        return tracked_set, cards

    async def bulk_init_cards(
        self,
        account_id: int,
        set_api_id: str,
        cards: Sequence[CatalogCard],
    ) -> list[UserCardDB]:
        """
        Insert caller-supplied cards for a tracked set.

        Cards already present for the set are skipped and keep their
        collected flag, so repeated calls never duplicate slots.

        Returns:
            The newly inserted cards only

        Raises:
            InputValidationError: If the request repeats a card id
            NotFoundError: If the account does not track the set
        """
        set_api_id = _require(set_api_id, "set_api_id")

        ids = [card.external_id for card in cards]
        if len(ids) != len(set(ids)):
            raise InputValidationError("Card ids must be unique within a request")

        if await get_tracked_set_by_api_id(self.session, account_id, set_api_id) is None:
            raise NotFoundError(f"Set '{set_api_id}' is not tracked")

        existing = await get_card_api_ids(self.session, account_id, set_api_id)
        new_cards = [card for card in cards if card.external_id not in existing]
        if len(new_cards) < len(cards):
            logger.debug(
                "Skipping %d existing cards for %s", len(cards) - len(new_cards), set_api_id
            )

        inserted = await add_cards(self.session, account_id, set_api_id, new_cards)
        await recount_collected_cards(self.session, account_id, set_api_id)
        return inserted

    async def toggle_card(
        self, account_id: int, card_id: int, collected: bool
    ) -> tuple[UserCardDB, TrackedSetDB]:
        """
        Set a card's collected flag and recompute its set's progress.

        Setting the same value twice is a no-op for the count.

        Raises:
            NotFoundError: If the card does not belong to the account
        """
        card = await get_card(self.session, account_id, card_id)
        if card is None:
            raise NotFoundError(f"Card {card_id} not found")

        await set_card_collected(self.session, card, collected)
        count = await recount_collected_cards(self.session, account_id, card.set_api_id)

        tracked_set = await get_tracked_set_by_api_id(self.session, account_id, card.set_api_id)
        if tracked_set is None:
            raise NotFoundError(f"Set '{card.set_api_id}' is not tracked")

        logger.debug(
            "Card %d collected=%s, %s now at %s", card_id, collected, card.set_api_id, count
        )
        return card, tracked_set

    async def remove_set(self, account_id: int, tracked_set_id: int) -> int:
        """
        Stop tracking a set and delete all of its cards.

        Returns:
            Number of card rows deleted

        Raises:
            NotFoundError: If the set does not belong to the account
            PartialFailureError: If the deletion fails; nothing is removed
        """
        tracked_set = await get_tracked_set(self.session, account_id, tracked_set_id)
        if tracked_set is None:
            raise NotFoundError(f"Tracked set {tracked_set_id} not found")

        set_api_id = tracked_set.set_api_id
        try:
            deleted_cards = await delete_tracked_set(self.session, tracked_set)
        except SQLAlchemyError as e:
            logger.exception("Failed to remove set %s for account %d", set_api_id, account_id)
            await self.session.rollback()
            raise PartialFailureError(
                "The set could not be removed.",
                detail=type(e).__name__,
            ) from e

        logger.info(
            "Account %d stopped tracking %s (%d cards removed)",
            account_id,
            set_api_id,
            deleted_cards,
        )
        return deleted_cards

    async def recount(self, account_id: int, set_api_id: str) -> int:
        """
        Recompute a set's collected_cards from its card rows.

        Raises:
            NotFoundError: If the account does not track the set
        """
        count = await recount_collected_cards(self.session, account_id, set_api_id)
        if count is None:
            raise NotFoundError(f"Set '{set_api_id}' is not tracked")
        return count
