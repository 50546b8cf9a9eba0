"""Integration tests for Likes and Matches API."""

import pytest
from httpx import AsyncClient

from domain.entities.match import pair_key
from infrastructure.auth.provider import TokenUser
from tests.conftest import OTHER_USER_ID, TEST_USER_ID, ActingUser


async def _like(client: AsyncClient, target_id) -> dict:
    response = await client.post("/api/v1/likes", json={"target_id": str(target_id)})
    assert response.status_code == 201
    return response.json()["data"]


class TestLikesAPI:
    """Integration tests for swiping right."""

    @pytest.mark.asyncio
    async def test_one_sided_like(self, authenticated_client: AsyncClient) -> None:
        """Test POST /api/v1/likes without a reciprocal like."""
        data = await _like(authenticated_client, OTHER_USER_ID)

        assert data["matched"] is False
        assert data["created"] is False
        assert data["match_id"] is None

        chats = await authenticated_client.get("/api/v1/chats")
        assert chats.json()["data"] == []

    @pytest.mark.asyncio
    async def test_mutual_like_forms_match(
        self,
        authenticated_client: AsyncClient,
        acting: ActingUser,
        other_user: TokenUser,
    ) -> None:
        """The second like of a pair forms the match."""
        await _like(authenticated_client, OTHER_USER_ID)

        acting.user = other_user
        data = await _like(authenticated_client, TEST_USER_ID)

        assert data["matched"] is True
        assert data["created"] is True
        assert data["match_id"] == pair_key(TEST_USER_ID, OTHER_USER_ID)
        assert data["matched_profile"]["name"] == "Test User"

    @pytest.mark.asyncio
    async def test_repeat_like_after_match_is_idempotent(
        self,
        authenticated_client: AsyncClient,
        acting: ActingUser,
        test_user: TokenUser,
        other_user: TokenUser,
    ) -> None:
        await _like(authenticated_client, OTHER_USER_ID)
        acting.user = other_user
        await _like(authenticated_client, TEST_USER_ID)

        acting.user = test_user
        data = await _like(authenticated_client, OTHER_USER_ID)

        assert data["matched"] is True
        assert data["created"] is False

    @pytest.mark.asyncio
    async def test_self_like_returns_400(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.post(
            "/api/v1/likes", json={"target_id": str(TEST_USER_ID)}
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_like_unknown_profile_returns_404(
        self, authenticated_client: AsyncClient
    ) -> None:
        response = await authenticated_client.post(
            "/api/v1/likes",
            json={"target_id": "33333333-3333-4333-8333-333333333333"},
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "PROFILE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_like_requires_valid_target(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.post(
            "/api/v1/likes", json={"target_id": "not-a-uuid"}
        )

        assert response.status_code == 422


class TestMatchesAPI:
    """Integration tests for listing and dissolving matches."""

    @pytest.fixture
    async def matched(
        self,
        authenticated_client: AsyncClient,
        acting: ActingUser,
        test_user: TokenUser,
        other_user: TokenUser,
    ) -> str:
        """Form the match between the two seeded users, acting as the test user after."""
        await _like(authenticated_client, OTHER_USER_ID)
        acting.user = other_user
        data = await _like(authenticated_client, TEST_USER_ID)
        acting.user = test_user
        return data["match_id"]

    @pytest.mark.asyncio
    async def test_list_matches(self, authenticated_client: AsyncClient, matched: str) -> None:
        """Test GET /api/v1/matches."""
        response = await authenticated_client.get("/api/v1/matches")

        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data) == 1
        assert data[0]["match_id"] == matched
        assert data[0]["profile"]["name"] == "Other User"

    @pytest.mark.asyncio
    async def test_list_matches_empty(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.get("/api/v1/matches")

        assert response.status_code == 200
        assert response.json()["data"] == []

    @pytest.mark.asyncio
    async def test_unmatch_removes_match_and_chat(
        self, authenticated_client: AsyncClient, matched: str
    ) -> None:
        """Test DELETE /api/v1/matches/{other_user_id}."""
        await authenticated_client.post(
            f"/api/v1/chats/{matched}/messages", json={"text": "hi!"}
        )

        response = await authenticated_client.delete(f"/api/v1/matches/{OTHER_USER_ID}")

        assert response.status_code == 204
        assert (await authenticated_client.get("/api/v1/matches")).json()["data"] == []
        assert (await authenticated_client.get("/api/v1/chats")).json()["data"] == []
        thread = await authenticated_client.get(f"/api/v1/chats/{matched}/messages")
        assert thread.status_code == 404

    @pytest.mark.asyncio
    async def test_unmatch_is_idempotent(
        self, authenticated_client: AsyncClient, matched: str
    ) -> None:
        first = await authenticated_client.delete(f"/api/v1/matches/{OTHER_USER_ID}")
        second = await authenticated_client.delete(f"/api/v1/matches/{OTHER_USER_ID}")

        assert first.status_code == 204
        assert second.status_code == 204

    @pytest.mark.asyncio
    async def test_unmatched_user_stays_out_of_deck(
        self, authenticated_client: AsyncClient, matched: str
    ) -> None:
        """Likes survive an unmatch, so the partner does not reappear."""
        await authenticated_client.delete(f"/api/v1/matches/{OTHER_USER_ID}")

        response = await authenticated_client.get("/api/v1/deck")

        assert response.json()["data"] == []
