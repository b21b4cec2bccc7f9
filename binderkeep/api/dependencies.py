"""FastAPI dependencies for injection."""

from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from binderkeep.db.database import get_session
from binderkeep.models.db import AccountDB
from binderkeep.models.failure import UnauthorizedError
from binderkeep.services.catalog import CatalogClient
from binderkeep.services.collection_service import CollectionService
from binderkeep.services.identity import IdentityVerifier, get_identity_verifier
from binderkeep.services.user_directory import resolve_account


def get_catalog_client() -> CatalogClient:
    """Catalog client configured from settings."""
    return CatalogClient()


def get_verifier() -> IdentityVerifier:
    """Identity verifier for the current settings."""
    return get_identity_verifier()


def bearer_token(authorization: str | None) -> str:
    """Extract the token from an `Authorization: Bearer <token>` header."""
    if not authorization:
        raise UnauthorizedError("Authorization header required")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError("Authorization header must be 'Bearer <token>'")
    return token.strip()


async def get_current_account(
    session: Annotated[AsyncSession, Depends(get_session)],
    verifier: Annotated[IdentityVerifier, Depends(get_verifier)],
    authorization: Annotated[str | None, Header()] = None,
) -> AccountDB:
    """
    Resolve the caller's account from the bearer token.

    Runs before any collection operation touches storage.
    """
    return await resolve_account(session, verifier, bearer_token(authorization))


def get_collection_service(
    session: Annotated[AsyncSession, Depends(get_session)],
    catalog: Annotated[CatalogClient, Depends(get_catalog_client)],
) -> CollectionService:
    """Collection service bound to the request's session."""
    return CollectionService(session, catalog)


CurrentAccount = Annotated[AccountDB, Depends(get_current_account)]
Service = Annotated[CollectionService, Depends(get_collection_service)]
