"""
Authentication endpoints.

Exchange an identity provider access token for the caller's account,
creating the account on first login.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from binderkeep.api.dependencies import CurrentAccount, get_verifier
from binderkeep.api.schemas import AccountResponse, AuthRequest
from binderkeep.db.database import get_session
from binderkeep.services.identity import IdentityVerifier
from binderkeep.services.user_directory import resolve_account

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("", response_model=AccountResponse)
async def login(
    request: AuthRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
    verifier: Annotated[IdentityVerifier, Depends(get_verifier)],
) -> AccountResponse:
    """
    Verify an access token and return the caller's account.

    The account is created the first time a subject signs in.
    """
    account = await resolve_account(session, verifier, request.access_token)
    return AccountResponse.model_validate(account)


@router.get("/me", response_model=AccountResponse)
async def me(account: CurrentAccount) -> AccountResponse:
    """Return the account for the bearer token."""
    return AccountResponse.model_validate(account)
