"""Tests for scheduled jobs."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from binderkeep.db.operations import (
    create_tracked_set,
    get_or_create_account,
    get_tracked_set_by_api_id,
    set_card_collected,
)
from binderkeep.jobs.recount_progress import recount_all, run_recount
from binderkeep.models.db import TrackedSetDB


class TestRecountAll:
    async def test_repairs_drifted_counters(self, session: AsyncSession, card_factory) -> None:
        """Counters that disagree with card rows are corrected."""
        account, _ = await get_or_create_account(session, "did:privy:alice")
        _, cards = await create_tracked_set(
            session, account.id, "sv1", "A", None, 10, card_factory("sv1", 10)
        )
        await create_tracked_set(
            session, account.id, "swsh12pt5", "B", None, 3, card_factory("swsh12pt5", 3)
        )
        await set_card_collected(session, cards[0], True)
        await session.execute(
            update(TrackedSetDB)
            .where(TrackedSetDB.set_api_id == "sv1")
            .values(collected_cards=7)
            .execution_options(synchronize_session=False)
        )
        await session.commit()

        changed = await recount_all(session)

        assert changed == 1
        tracked = await get_tracked_set_by_api_id(session, account.id, "sv1")
        assert tracked.collected_cards == 1

    async def test_nothing_to_fix(self, session: AsyncSession, card_factory) -> None:
        """Correct counters are reported as unchanged."""
        account, _ = await get_or_create_account(session, "did:privy:alice")
        await create_tracked_set(session, account.id, "sv1", "A", None, 2, card_factory("sv1", 2))

        assert await recount_all(session) == 0


class TestRunRecount:
    @pytest.mark.asyncio
    async def test_commits(self) -> None:
        """The job commits after recounting."""
        mock_session = AsyncMock()
        mock_session.__aenter__ = AsyncMock(return_value=mock_session)
        mock_session.__aexit__ = AsyncMock(return_value=None)

        with (
            patch(
                "binderkeep.jobs.recount_progress.async_session_factory",
                return_value=mock_session,
            ),
            patch(
                "binderkeep.jobs.recount_progress.recount_all",
                new_callable=AsyncMock,
                return_value=2,
            ),
        ):
            result = await run_recount()

        assert result == 2
        mock_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_rolls_back_on_error(self) -> None:
        """A failure rolls back and propagates."""
        mock_session = AsyncMock()
        mock_session.__aenter__ = AsyncMock(return_value=mock_session)
        mock_session.__aexit__ = AsyncMock(return_value=None)

        with (
            patch(
                "binderkeep.jobs.recount_progress.async_session_factory",
                MagicMock(return_value=mock_session),
            ),
            patch(
                "binderkeep.jobs.recount_progress.recount_all",
                new_callable=AsyncMock,
                side_effect=RuntimeError("db gone"),
            ),
            pytest.raises(RuntimeError),
        ):
            await run_recount()

        mock_session.rollback.assert_awaited_once()
        mock_session.commit.assert_not_awaited()
