"""Tests for tracked set endpoints."""

from httpx import AsyncClient

from binderkeep.services.catalog import CatalogError

ALICE = {"Authorization": "Bearer did:privy:alice"}
BOB = {"Authorization": "Bearer did:privy:bob"}

SV1 = {
    "set_api_id": "sv1",
    "set_name": "Scarlet & Violet",
    "set_series": "Scarlet & Violet",
    "total_cards": 10,
}


class TestListSets:
    async def test_empty_for_new_account(self, client: AsyncClient) -> None:
        """A new account tracks nothing."""
        response = await client.get("/sets", headers=ALICE)

        assert response.status_code == 200
        assert response.json() == {"sets": []}

    async def test_requires_auth(self, client: AsyncClient) -> None:
        """Listing sets needs a bearer token."""
        response = await client.get("/sets")

        assert response.status_code == 401

    async def test_only_own_sets(self, client: AsyncClient) -> None:
        """Each account sees only its own sets."""
        await client.post("/sets", json=SV1, headers=ALICE)

        alice = await client.get("/sets", headers=ALICE)
        bob = await client.get("/sets", headers=BOB)

        assert [s["set_api_id"] for s in alice.json()["sets"]] == ["sv1"]
        assert bob.json()["sets"] == []


class TestAddSet:
    async def test_add_set_seeds_cards(self, client: AsyncClient) -> None:
        """Adding a set returns it with uncollected seeded cards."""
        response = await client.post("/sets", json=SV1, headers=ALICE)

        assert response.status_code == 201
        data = response.json()
        assert data["tracked_set"]["set_api_id"] == "sv1"
        assert data["tracked_set"]["collected_cards"] == 0
        assert data["tracked_set"]["completion_percent"] == 0.0
        assert len(data["cards"]) == 10
        assert all(card["collected"] is False for card in data["cards"])

    async def test_add_twice_conflict(self, client: AsyncClient) -> None:
        """The second add of the same set is 409 and nothing is duplicated."""
        await client.post("/sets", json=SV1, headers=ALICE)

        response = await client.post("/sets", json=SV1, headers=ALICE)

        assert response.status_code == 409
        assert response.json()["failure"]["kind"] == "conflict"
        sets = await client.get("/sets", headers=ALICE)
        assert len(sets.json()["sets"]) == 1
        cards = await client.get("/cards", params={"set_api_id": "sv1"}, headers=ALICE)
        assert len(cards.json()["cards"]) == 10

    async def test_catalog_outage(self, client: AsyncClient, fake_catalog) -> None:
        """A catalog outage is 503 and no set is stored."""
        fake_catalog.error = CatalogError("timed out")

        response = await client.post("/sets", json=SV1, headers=ALICE)

        assert response.status_code == 503
        assert response.json()["failure"]["kind"] == "service_unavailable"
        fake_catalog.error = None
        sets = await client.get("/sets", headers=ALICE)
        assert sets.json()["sets"] == []

    async def test_unknown_catalog_set(self, client: AsyncClient) -> None:
        """A set the catalog does not know is 404."""
        response = await client.post(
            "/sets", json={**SV1, "set_api_id": "nope"}, headers=ALICE
        )

        assert response.status_code == 404

    async def test_missing_field(self, client: AsyncClient) -> None:
        """Required fields must be present."""
        body = {k: v for k, v in SV1.items() if k != "set_name"}

        response = await client.post("/sets", json=body, headers=ALICE)

        assert response.status_code == 422
        assert "set_name" in response.json()["failure"]["detail"]

    async def test_non_positive_total(self, client: AsyncClient) -> None:
        """total_cards must be positive."""
        response = await client.post("/sets", json={**SV1, "total_cards": 0}, headers=ALICE)

        assert response.status_code == 422

    async def test_unknown_field(self, client: AsyncClient) -> None:
        """Unknown fields are rejected rather than ignored."""
        response = await client.post(
            "/sets", json={**SV1, "collected_cards": 5}, headers=ALICE
        )

        assert response.status_code == 422
        assert response.json()["failure"]["kind"] == "validation_failed"


class TestRemoveSet:
    async def test_remove_set(self, client: AsyncClient) -> None:
        """Removing a set deletes it and its cards."""
        created = await client.post("/sets", json=SV1, headers=ALICE)
        set_id = created.json()["tracked_set"]["id"]

        response = await client.delete(f"/sets/{set_id}", headers=ALICE)

        assert response.status_code == 200
        assert response.json() == {"set_id": set_id, "deleted": True, "cards_removed": 10}
        cards = await client.get("/cards", params={"set_api_id": "sv1"}, headers=ALICE)
        assert cards.status_code == 404

    async def test_remove_unknown_set(self, client: AsyncClient) -> None:
        """Removing a set that does not exist is 404."""
        response = await client.delete("/sets/999", headers=ALICE)

        assert response.status_code == 404
        assert response.json()["failure"]["kind"] == "not_found"

    async def test_remove_other_accounts_set(self, client: AsyncClient) -> None:
        """Another account's set cannot be removed."""
        created = await client.post("/sets", json=SV1, headers=ALICE)
        set_id = created.json()["tracked_set"]["id"]

        response = await client.delete(f"/sets/{set_id}", headers=BOB)

        assert response.status_code == 404
        sets = await client.get("/sets", headers=ALICE)
        assert len(sets.json()["sets"]) == 1
