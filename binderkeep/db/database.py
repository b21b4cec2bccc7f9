"""
Database engine and session management.

Each request gets one AsyncSession and runs as one transaction: committed
when the endpoint returns, rolled back when anything raises.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from binderkeep.config import settings
from binderkeep.models.db import Base

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides the request's database session.

    Usage in FastAPI:
        @router.get("/sets")
        async def list_sets(session: AsyncSession = Depends(get_session)):
            ...

    Exceptions other than storage errors (e.g. NotFoundError) skip the
    commit; closing the session then discards any pending writes.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError:
            await session.rollback()
            raise


async def init_db() -> None:
    """
    Create the accounts, tracked_sets and user_cards tables.

    Should be called once at application startup.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

