"""
User directory: resolve a caller's access token to their account.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from binderkeep.db.operations import get_or_create_account
from binderkeep.models.db import AccountDB
from binderkeep.services.identity import IdentityVerifier

logger = logging.getLogger(__name__)


async def resolve_account(
    session: AsyncSession, verifier: IdentityVerifier, token: str
) -> AccountDB:
    """
    Verify a token and return the matching account, creating it on first login.

    Raises:
        UnauthorizedError: If the token is missing or rejected
        ServiceUnavailableError: If the identity provider cannot be reached
    """
    subject_id = await verifier.verify(token)
    account, created = await get_or_create_account(session, subject_id)
    if created:
        logger.info("Created account %d for new subject", account.id)
    return account
