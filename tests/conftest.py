import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from binderkeep.api.dependencies import get_catalog_client, get_verifier
from binderkeep.db.database import get_session
from binderkeep.main import app
from binderkeep.models.catalog import CatalogCard, CatalogSet
from binderkeep.models.db import Base
from binderkeep.services.identity import StaticIdentityVerifier


class FakeCatalog:
    """In-memory stand-in for CatalogClient."""

    def __init__(self) -> None:
        self.cards_by_set: dict[str, list[CatalogCard]] = {}
        self.sets: list[CatalogSet] = []
        self.error: Exception | None = None
        self.card_requests: list[str] = []

    async def list_cards(self, set_api_id: str) -> list[CatalogCard]:
        self.card_requests.append(set_api_id)
        if self.error is not None:
            raise self.error
        return list(self.cards_by_set.get(set_api_id, []))

    async def list_sets(self, name_filter: str | None = None) -> list[CatalogSet]:
        if self.error is not None:
            raise self.error
        if name_filter:
            return [s for s in self.sets if name_filter.lower() in s.name.lower()]
        return list(self.sets)


def make_cards(set_api_id: str, count: int) -> list[CatalogCard]:
    return [
        CatalogCard(external_id=f"{set_api_id}-{n}", name=f"Card {n}", number=str(n))
        for n in range(1, count + 1)
    ]


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def session(async_engine) -> AsyncSession:
    """Provide a database session for tests."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture
def fake_catalog() -> FakeCatalog:
    """Catalog with a 10-card "sv1" set and a 3-card "swsh12pt5" set."""
    catalog = FakeCatalog()
    catalog.cards_by_set["sv1"] = make_cards("sv1", 10)
    catalog.cards_by_set["swsh12pt5"] = make_cards("swsh12pt5", 3)
    catalog.sets = [
        CatalogSet("swsh12pt5", "Crown Zenith", "Sword & Shield", 3, "2023/01/20"),
        CatalogSet("sv1", "Scarlet & Violet", "Scarlet & Violet", 10, "2023/03/31"),
    ]
    return catalog


@pytest.fixture
def card_factory():
    """Build `count` catalog cards for a set: "<set>-1" .. "<set>-<count>"."""
    return make_cards


@pytest.fixture
async def client(async_engine, fake_catalog):
    """
    Async test client backed by the in-memory database and fake catalog.

    Tokens are accepted as-is: "Bearer did:privy:alice" signs in as that subject.
    """
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_session():
        async with async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_verifier] = lambda: StaticIdentityVerifier()
    app.dependency_overrides[get_catalog_client] = lambda: fake_catalog

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
