"""Tests for authentication endpoints."""

from httpx import AsyncClient

ALICE = {"Authorization": "Bearer did:privy:alice"}


class TestLogin:
    async def test_first_login_creates_account(self, client: AsyncClient) -> None:
        """A new subject gets an account on first login."""
        response = await client.post("/auth", json={"access_token": "did:privy:alice"})

        assert response.status_code == 200
        data = response.json()
        assert data["subject_id"] == "did:privy:alice"
        assert isinstance(data["id"], int)

    async def test_repeat_login_same_account(self, client: AsyncClient) -> None:
        """Logging in twice returns the same account."""
        first = await client.post("/auth", json={"access_token": "did:privy:alice"})
        second = await client.post("/auth", json={"access_token": "did:privy:alice"})

        assert first.json()["id"] == second.json()["id"]

    async def test_blank_token_unauthorized(self, client: AsyncClient) -> None:
        """A whitespace token is rejected by the verifier."""
        response = await client.post("/auth", json={"access_token": "   "})

        assert response.status_code == 401
        assert response.json()["failure"]["kind"] == "unauthorized"

    async def test_missing_token_is_validation_error(self, client: AsyncClient) -> None:
        """The request body must carry access_token."""
        response = await client.post("/auth", json={})

        assert response.status_code == 422
        assert response.json()["failure"]["kind"] == "validation_failed"

    async def test_unknown_field_rejected(self, client: AsyncClient) -> None:
        """Unknown request fields are a validation error."""
        response = await client.post(
            "/auth", json={"access_token": "did:privy:alice", "role": "admin"}
        )

        assert response.status_code == 422
        assert "role" in response.json()["failure"]["detail"]


class TestMe:
    async def test_me_returns_account(self, client: AsyncClient) -> None:
        """The bearer token resolves to the caller's account."""
        login = await client.post("/auth", json={"access_token": "did:privy:alice"})

        response = await client.get("/auth/me", headers=ALICE)

        assert response.status_code == 200
        assert response.json()["id"] == login.json()["id"]

    async def test_me_without_header(self, client: AsyncClient) -> None:
        """No Authorization header is 401 with a Bearer challenge."""
        response = await client.get("/auth/me")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        data = response.json()
        assert data["outcome"] == "known_failure"
        assert data["failure"]["kind"] == "unauthorized"

    async def test_me_wrong_scheme(self, client: AsyncClient) -> None:
        """Only Bearer credentials are accepted."""
        response = await client.get("/auth/me", headers={"Authorization": "Basic abc"})

        assert response.status_code == 401
