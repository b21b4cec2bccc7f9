"""
Database CRUD operations.

Provides async functions for accounts, tracked sets and card slots. Every
set and card query is filtered by the owning account.
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from binderkeep.models.catalog import CatalogCard
from binderkeep.models.db import AccountDB, TrackedSetDB, UserCardDB, utcnow

_UPSERT_INSERTS: dict[str, Any] = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


def _upsert_insert(session: AsyncSession) -> Any:
    """Return the dialect's INSERT construct supporting ON CONFLICT."""
    dialect = session.get_bind().dialect.name
    try:
        return _UPSERT_INSERTS[dialect]
    except KeyError:
        msg = f"Account upsert is not supported on dialect '{dialect}'"
        raise RuntimeError(msg) from None


# --- Account Operations ---


async def get_account(session: AsyncSession, subject_id: str) -> AccountDB | None:
    """
    Get an account by the identity provider's subject id.

    Returns None if no account exists for this subject.
    """
    result = await session.execute(select(AccountDB).where(AccountDB.subject_id == subject_id))
    return result.scalar_one_or_none()


async def get_or_create_account(session: AsyncSession, subject_id: str) -> tuple[AccountDB, bool]:
    """
    Get the account for a subject, creating it on first sight.

    The insert is a single INSERT ... ON CONFLICT DO NOTHING against the
    unique subject_id, so concurrent first logins for the same subject end
    up sharing one row.

    Returns:
        Tuple of (account, created) where created is True if new.
    """
    account = await get_account(session, subject_id)
    if account:
        return account, False

    insert = _upsert_insert(session)
    now = utcnow()
    result = await session.execute(
        insert(AccountDB)
        .values(subject_id=subject_id, created_at=now, updated_at=now)
        .on_conflict_do_nothing(index_elements=[AccountDB.subject_id])
        .returning(AccountDB.id)
    )
    created = result.scalar_one_or_none() is not None

    account = await get_account(session, subject_id)
    if account is None:
        msg = f"Account for subject {subject_id} not found after upsert"
        raise RuntimeError(msg)
    return account, created


# --- Tracked Set Operations ---


async def list_tracked_sets(session: AsyncSession, account_id: int) -> list[TrackedSetDB]:
    """Get all sets tracked by an account, in the order they were added."""
    result = await session.execute(
        select(TrackedSetDB).where(TrackedSetDB.account_id == account_id).order_by(TrackedSetDB.id)
    )
    return list(result.scalars().all())


async def list_all_tracked_sets(session: AsyncSession) -> list[TrackedSetDB]:
    """Get every tracked set across all accounts. For maintenance jobs only."""
    result = await session.execute(
        select(TrackedSetDB).order_by(TrackedSetDB.id).execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def get_tracked_set(
    session: AsyncSession, account_id: int, tracked_set_id: int
) -> TrackedSetDB | None:
    """Get one of an account's tracked sets by its internal id."""
    result = await session.execute(
        select(TrackedSetDB)
        .where(TrackedSetDB.id == tracked_set_id, TrackedSetDB.account_id == account_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_tracked_set_by_api_id(
    session: AsyncSession, account_id: int, set_api_id: str
) -> TrackedSetDB | None:
    """Get one of an account's tracked sets by its catalog set id."""
    result = await session.execute(
        select(TrackedSetDB)
        .where(TrackedSetDB.account_id == account_id, TrackedSetDB.set_api_id == set_api_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def create_tracked_set(
    session: AsyncSession,
    account_id: int,
    set_api_id: str,
    set_name: str,
    set_series: str | None,
    total_cards: int,
    cards: Sequence[CatalogCard],
) -> tuple[TrackedSetDB, list[UserCardDB]]:
    """
    Create a tracked set together with one uncollected card slot per card.

    Both are written in a single flush. Raises IntegrityError if the account
    already tracks this set.
    """
    tracked_set = TrackedSetDB(
        account_id=account_id,
        set_api_id=set_api_id,
        set_name=set_name,
        set_series=set_series,
        total_cards=total_cards,
        collected_cards=0,
    )
    session.add(tracked_set)

    card_rows = [_card_row(account_id, set_api_id, card) for card in cards]
    session.add_all(card_rows)

    await session.flush()
    return tracked_set, card_rows


async def delete_tracked_set(session: AsyncSession, tracked_set: TrackedSetDB) -> int:
    """
    Delete a tracked set and all of the owner's cards for it.

    Cards are matched on the set's catalog id, not its internal id.

    Returns the number of deleted card rows.
    """
    result = await session.execute(
        delete(UserCardDB).where(
            UserCardDB.account_id == tracked_set.account_id,
            UserCardDB.set_api_id == tracked_set.set_api_id,
        )
    )
    await session.execute(
        delete(TrackedSetDB).where(
            TrackedSetDB.id == tracked_set.id,
            TrackedSetDB.account_id == tracked_set.account_id,
        )
    )
    # rowcount is available on DELETE results; type stubs incomplete for async
    return int(result.rowcount)  # type: ignore[attr-defined]


async def recount_collected_cards(
    session: AsyncSession, account_id: int, set_api_id: str
) -> int | None:
    """
    Recompute and persist a set's collected_cards from live card rows.

    Runs as one UPDATE with a COUNT subquery so the stored value always
    reflects the card rows at statement time.

    Returns the new count, or None if the account does not track the set.
    """
    collected = (
        select(func.count(UserCardDB.id))
        .where(
            UserCardDB.account_id == account_id,
            UserCardDB.set_api_id == set_api_id,
            UserCardDB.collected.is_(True),
        )
        .scalar_subquery()
    )
    result = await session.execute(
        update(TrackedSetDB)
        .where(TrackedSetDB.account_id == account_id, TrackedSetDB.set_api_id == set_api_id)
        .values(collected_cards=collected, updated_at=utcnow())
        .returning(TrackedSetDB.collected_cards)
        .execution_options(synchronize_session=False)
    )
    return result.scalar_one_or_none()


# --- Card Operations ---


def _card_row(account_id: int, set_api_id: str, card: CatalogCard) -> UserCardDB:
    return UserCardDB(
        account_id=account_id,
        set_api_id=set_api_id,
        card_api_id=card.external_id,
        card_name=card.name,
        card_number=card.number,
        collected=False,
    )


async def list_cards(session: AsyncSession, account_id: int, set_api_id: str) -> list[UserCardDB]:
    """Get an account's card slots for one set."""
    result = await session.execute(
        select(UserCardDB)
        .where(UserCardDB.account_id == account_id, UserCardDB.set_api_id == set_api_id)
        .order_by(UserCardDB.id)
    )
    return list(result.scalars().all())


async def get_card(session: AsyncSession, account_id: int, card_id: int) -> UserCardDB | None:
    """Get one of an account's card slots by id."""
    result = await session.execute(
        select(UserCardDB).where(UserCardDB.id == card_id, UserCardDB.account_id == account_id)
    )
    return result.scalar_one_or_none()


async def get_card_api_ids(session: AsyncSession, account_id: int, set_api_id: str) -> set[str]:
    """Get the catalog card ids already present for an account's set."""
    result = await session.execute(
        select(UserCardDB.card_api_id).where(
            UserCardDB.account_id == account_id,
            UserCardDB.set_api_id == set_api_id,
        )
    )
    return set(result.scalars().all())


async def add_cards(
    session: AsyncSession,
    account_id: int,
    set_api_id: str,
    cards: Sequence[CatalogCard],
) -> list[UserCardDB]:
    """
    Insert uncollected card slots for a set.

    Raises IntegrityError if any (account, set, card) slot already exists.
    """
    card_rows = [_card_row(account_id, set_api_id, card) for card in cards]
    session.add_all(card_rows)
    await session.flush()
    return card_rows


async def set_card_collected(
    session: AsyncSession, card: UserCardDB, collected: bool
) -> UserCardDB:
    """Set a card slot's collected flag; updated_at is refreshed on flush."""
    card.collected = collected
    card.updated_at = utcnow()
    await session.flush()
    return card
