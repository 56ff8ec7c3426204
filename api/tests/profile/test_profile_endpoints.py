"""
Tests for profile endpoints:
- GET /api/profile/me
- POST /api/profile (create/update)
- GET /api/profile (list)
- GET /api/profile/user/{user_id}
- DELETE /api/profile
"""

import uuid

from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.profile import Profile
from app.models.user import User
from factories import profile_payload


class TestAuthentication:
    """Token handling on private endpoints."""

    async def test_missing_token_returns_401(self, async_client: AsyncClient):
        response = await async_client.get("/api/profile/me")
        assert response.status_code == 401

    async def test_invalid_token_returns_401(self, async_client: AsyncClient):
        response = await async_client.get(
            "/api/profile/me", headers={"x-auth-token": "not-a-jwt"}
        )
        assert response.status_code == 401

    async def test_bearer_token_is_accepted(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        """Authorization: Bearer works as well as x-auth-token."""
        token = auth_headers(test_user["user_id"])["x-auth-token"]
        response = await async_client.post(
            "/api/profile",
            json=profile_payload(),
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 200


class TestGetMyProfile:
    """GET /api/profile/me tests."""

    async def test_no_profile_returns_400(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        """A user without a profile gets a not-found error."""
        response = await async_client.get(
            "/api/profile/me", headers=auth_headers(test_user["user_id"])
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "NOT_FOUND"

    async def test_returns_profile_with_owner_fields(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        headers = auth_headers(test_user["user_id"])
        await async_client.post("/api/profile", json=profile_payload(), headers=headers)

        response = await async_client.get("/api/profile/me", headers=headers)
        assert response.status_code == 200
        data = response.json()
        assert data["owner"] == test_user["user_id"]
        assert data["user"]["name"] == test_user["name"]
        assert data["user"]["avatar"] == test_user["avatar"]


class TestUpsertProfile:
    """POST /api/profile tests."""

    async def test_create_profile_returns_200(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        response = await async_client.post(
            "/api/profile",
            json=profile_payload(status="dev", skills="js,go"),
            headers=auth_headers(test_user["user_id"]),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["owner"] == test_user["user_id"]
        assert data["status"] == "dev"
        assert data["skills"] == ["js", "go"]
        assert data["experience"] == []
        assert data["education"] == []

    async def test_write_response_is_not_joined_with_owner(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        response = await async_client.post(
            "/api/profile",
            json=profile_payload(),
            headers=auth_headers(test_user["user_id"]),
        )
        assert response.json()["user"] is None

    async def test_skills_are_split_and_trimmed(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        response = await async_client.post(
            "/api/profile",
            json=profile_payload(skills="node, express , mongo"),
            headers=auth_headers(test_user["user_id"]),
        )
        assert response.json()["skills"] == ["node", "express", "mongo"]

    async def test_social_links_are_nested(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        response = await async_client.post(
            "/api/profile",
            json=profile_payload(twitter="https://twitter.com/dev", githubusername="octocat"),
            headers=auth_headers(test_user["user_id"]),
        )
        data = response.json()
        assert data["social"]["twitter"] == "https://twitter.com/dev"
        assert data["social"]["youtube"] is None
        assert data["github_username"] == "octocat"

    async def test_second_post_updates_existing_profile(
        self,
        async_client: AsyncClient,
        db_session: AsyncSession,
        test_user: dict,
        auth_headers,
    ):
        """Posting twice updates in place rather than creating a second profile."""
        headers = auth_headers(test_user["user_id"])
        first = await async_client.post(
            "/api/profile", json=profile_payload(company="A"), headers=headers
        )
        second = await async_client.post(
            "/api/profile", json=profile_payload(status="Senior Developer"), headers=headers
        )

        assert second.status_code == 200
        assert second.json()["id"] == first.json()["id"]
        assert second.json()["status"] == "Senior Developer"
        # Omitted fields keep their stored value
        assert second.json()["company"] == "A"

        result = await db_session.execute(
            select(Profile).where(Profile.user_id == uuid.UUID(test_user["user_id"]))
        )
        assert len(result.scalars().all()) == 1

    async def test_missing_required_fields_returns_400(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        """Every failing required field is listed."""
        response = await async_client.post(
            "/api/profile",
            json={"company": "Acme"},
            headers=auth_headers(test_user["user_id"]),
        )
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        fields = {detail["field"] for detail in error["details"]}
        assert fields == {"status", "skills"}

    async def test_empty_status_returns_400(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        response = await async_client.post(
            "/api/profile",
            json=profile_payload(status=""),
            headers=auth_headers(test_user["user_id"]),
        )
        assert response.status_code == 400

    async def test_requires_auth(self, async_client: AsyncClient):
        response = await async_client.post("/api/profile", json=profile_payload())
        assert response.status_code == 401


class TestListProfiles:
    """GET /api/profile tests."""

    async def test_empty_list(self, async_client: AsyncClient):
        response = await async_client.get("/api/profile")
        assert response.status_code == 200
        assert response.json() == []

    async def test_lists_all_profiles_with_owner_fields(
        self,
        async_client: AsyncClient,
        test_user: dict,
        second_user: dict,
        auth_headers,
    ):
        for user in (test_user, second_user):
            await async_client.post(
                "/api/profile", json=profile_payload(), headers=auth_headers(user["user_id"])
            )

        response = await async_client.get("/api/profile")
        assert response.status_code == 200
        data = response.json()
        assert len(data) == 2
        names = {item["user"]["name"] for item in data}
        assert names == {test_user["name"], second_user["name"]}

    async def test_does_not_require_auth(self, async_client: AsyncClient):
        response = await async_client.get("/api/profile")
        assert response.status_code == 200


class TestGetProfileByUser:
    """GET /api/profile/user/{user_id} tests."""

    async def test_returns_profile(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        await async_client.post(
            "/api/profile",
            json=profile_payload(status="dev", skills="js,go"),
            headers=auth_headers(test_user["user_id"]),
        )

        response = await async_client.get(f"/api/profile/user/{test_user['user_id']}")
        assert response.status_code == 200
        data = response.json()
        assert data["owner"] == test_user["user_id"]
        assert data["skills"] == ["js", "go"]
        assert data["experience"] == []
        assert data["education"] == []
        assert data["user"]["name"] == test_user["name"]

    async def test_unknown_user_returns_400(self, async_client: AsyncClient):
        response = await async_client.get(f"/api/profile/user/{uuid.uuid4()}")
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Profile not found"

    async def test_malformed_id_returns_400(self, async_client: AsyncClient):
        """A malformed id is reported as not found, not as a server error."""
        response = await async_client.get("/api/profile/user/12345")
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "NOT_FOUND"
        assert error["message"] == "Profile not found"


class TestDeleteProfile:
    """DELETE /api/profile tests."""

    async def test_deletes_profile_and_user(
        self,
        async_client: AsyncClient,
        db_session: AsyncSession,
        test_user: dict,
        auth_headers,
    ):
        headers = auth_headers(test_user["user_id"])
        await async_client.post("/api/profile", json=profile_payload(), headers=headers)

        response = await async_client.delete("/api/profile", headers=headers)
        assert response.status_code == 200
        assert response.json() == {"msg": "User deleted", "user_id": test_user["user_id"]}

        lookup = await async_client.get(f"/api/profile/user/{test_user['user_id']}")
        assert lookup.status_code == 400

        result = await db_session.execute(
            select(User).where(User.id == uuid.UUID(test_user["user_id"]))
        )
        assert result.scalar_one_or_none() is None

    async def test_delete_without_profile_succeeds(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        headers = auth_headers(test_user["user_id"])
        first = await async_client.delete("/api/profile", headers=headers)
        second = await async_client.delete("/api/profile", headers=headers)
        assert first.status_code == 200
        assert second.status_code == 200

    async def test_requires_auth(self, async_client: AsyncClient):
        response = await async_client.delete("/api/profile")
        assert response.status_code == 401
