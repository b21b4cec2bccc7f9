"""
Identity provider token verification.

Turns an opaque access token into the provider's stable subject id.
"""

import logging
from typing import Protocol

import httpx

from binderkeep.config import settings
from binderkeep.models.failure import ServiceUnavailableError, UnauthorizedError

logger = logging.getLogger(__name__)

# Response keys that may carry the subject, in order of preference
_SUBJECT_KEYS = ("sub", "userId", "user_id", "id")


class IdentityVerifier(Protocol):
    async def verify(self, token: str) -> str:
        """Return the subject id for a token or raise UnauthorizedError."""
        ...


class HttpIdentityVerifier:
    """
    Verifies tokens by asking the identity provider who the bearer is.

    401/403 from the provider means the token is bad; anything else that is
    not a success means the provider could not answer.
    """

    def __init__(
        self,
        verify_url: str | None = None,
        app_id: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.verify_url = verify_url or settings.identity_verify_url
        self.app_id = settings.identity_app_id if app_id is None else app_id
        self.timeout = settings.identity_timeout if timeout is None else timeout

    async def verify(self, token: str) -> str:
        if not token:
            raise UnauthorizedError("Access token required")

        headers = {"Authorization": f"Bearer {token}"}
        if self.app_id:
            headers["privy-app-id"] = self.app_id

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.verify_url, headers=headers)
        except httpx.RequestError as e:
            logger.warning("Identity provider unreachable: %s", e)
            raise ServiceUnavailableError(
                "Could not verify your sign-in right now.",
                detail=type(e).__name__,
            ) from e

        if response.status_code in (401, 403):
            raise UnauthorizedError("Invalid or expired access token")
        if response.is_error:
            logger.warning("Identity provider returned HTTP %d", response.status_code)
            raise ServiceUnavailableError(
                "Could not verify your sign-in right now.",
                detail=f"HTTP {response.status_code}",
            )

        try:
            claims = response.json()
        except ValueError as e:
            raise ServiceUnavailableError(
                "Could not verify your sign-in right now.",
                detail="Malformed identity response",
            ) from e

        for key in _SUBJECT_KEYS:
            subject = claims.get(key) if isinstance(claims, dict) else None
            if isinstance(subject, str) and subject:
                return subject

        raise UnauthorizedError("Invalid token")


class StaticIdentityVerifier:
    """Development verifier: the token itself is the subject id."""

    async def verify(self, token: str) -> str:
        token = token.strip()
        if not token:
            raise UnauthorizedError("Access token required")
        return token


def get_identity_verifier() -> IdentityVerifier:
    """Pick the verifier for the current settings."""
    if settings.dev_mode:
        return StaticIdentityVerifier()
    return HttpIdentityVerifier()
