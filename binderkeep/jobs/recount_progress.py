"""
Recompute every tracked set's collected_cards from its card rows.

Repairs counters written by older releases or edited by hand. Safe to run
at any time; sets whose counter is already correct are left as they are.
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from binderkeep.db.database import async_session_factory
from binderkeep.db.operations import list_all_tracked_sets, recount_collected_cards

logger = logging.getLogger(__name__)


async def recount_all(session: AsyncSession) -> int:
    """
    Recount every tracked set in one session.

    Returns:
        Number of sets whose stored counter changed
    """
    changed = 0
    for tracked_set in await list_all_tracked_sets(session):
        before = tracked_set.collected_cards
        after = await recount_collected_cards(
            session, tracked_set.account_id, tracked_set.set_api_id
        )
        if after is not None and after != before:
            logger.info(
                "Set %d (%s) counter %d -> %d",
                tracked_set.id,
                tracked_set.set_api_id,
                before,
                after,
            )
            changed += 1
    return changed


async def run_recount() -> int:
    """Recount all sets and commit."""
    logger.info("Recounting collected cards for all tracked sets...")

    async with async_session_factory() as session:
        try:
            changed = await recount_all(session)
            await session.commit()
        except Exception as e:
            logger.error("Recount failed: %s", e)
            await session.rollback()
            raise

    logger.info("Recount complete. %d counter(s) corrected", changed)
    return changed


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_recount())


if __name__ == "__main__":
    main()
