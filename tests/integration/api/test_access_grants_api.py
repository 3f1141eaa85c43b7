"""Integration tests for trip access API endpoints."""

from typing import Any
from uuid import uuid4

import pytest
from httpx import AsyncClient

from infrastructure.auth.provider import Identity


async def _grant(
    client: AsyncClient,
    headers: dict[str, str],
    user: Identity,
    trip_id: str,
    role: str = "viewer",
) -> dict[str, Any]:
    response = await client.post(
        "/api/v1/trip-access",
        json={"user_id": str(user.id), "trip_id": trip_id, "role": role},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


# --- GET /trips/{id}/role (the resource-scoped check) ---


class TestTripRoleCheck:
    @pytest.mark.asyncio
    async def test_no_grant_is_forbidden(
        self, client: AsyncClient, user_headers: dict[str, str]
    ) -> None:
        response = await client.get(f"/api/v1/trips/{uuid4()}/role", headers=user_headers)

        assert response.status_code == 403
        assert response.json()["error"] == "FORBIDDEN"

    @pytest.mark.asyncio
    async def test_nonexistent_trip_matches_no_grant(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        user_headers: dict[str, str],
        other_identity: Identity,
    ) -> None:
        # A trip someone else can see, and a trip nobody has ever heard of
        shared = str(uuid4())
        await _grant(client, admin_headers, other_identity, shared)

        known = await client.get(f"/api/v1/trips/{shared}/role", headers=user_headers)
        unknown = await client.get(f"/api/v1/trips/{uuid4()}/role", headers=user_headers)

        assert known.status_code == unknown.status_code == 403
        assert known.json() == unknown.json()

    @pytest.mark.asyncio
    async def test_admin_needs_no_grant(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        trip = str(uuid4())

        response = await client.get(f"/api/v1/trips/{trip}/role", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"trip_id": trip, "role": "admin"}

    @pytest.mark.asyncio
    async def test_viewer_grant_reports_viewer(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        user_headers: dict[str, str],
        user_identity: Identity,
    ) -> None:
        trip = str(uuid4())
        await _grant(client, admin_headers, user_identity, trip, role="viewer")

        response = await client.get(f"/api/v1/trips/{trip}/role", headers=user_headers)

        assert response.status_code == 200
        assert response.json()["role"] == "viewer"

    @pytest.mark.asyncio
    async def test_malformed_trip_id(
        self, client: AsyncClient, user_headers: dict[str, str]
    ) -> None:
        response = await client.get("/api/v1/trips/not-a-uuid/role", headers=user_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_requires_token(self, client: AsyncClient) -> None:
        response = await client.get(f"/api/v1/trips/{uuid4()}/role")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_case_insensitive_bearer_scheme(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
    ) -> None:
        token = admin_headers["Authorization"].split(" ", 1)[1]

        response = await client.get(
            f"/api/v1/trips/{uuid4()}/role", headers={"Authorization": f"bearer {token}"}
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_revoked_grant_is_forbidden_again(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        user_headers: dict[str, str],
        user_identity: Identity,
    ) -> None:
        trip = str(uuid4())
        grant = await _grant(client, admin_headers, user_identity, trip, role="editor")
        assert (await client.get(f"/api/v1/trips/{trip}/role", headers=user_headers)).status_code == 200

        revoke = await client.delete(f"/api/v1/trip-access/{grant['id']}", headers=admin_headers)
        after = await client.get(f"/api/v1/trips/{trip}/role", headers=user_headers)

        assert revoke.status_code == 204
        assert after.status_code == 403


# --- POST /trip-access ---


class TestGrantAccess:
    @pytest.mark.asyncio
    async def test_admin_grants_access(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        user_identity: Identity,
        admin_identity: Identity,
    ) -> None:
        trip = str(uuid4())

        data = await _grant(client, admin_headers, user_identity, trip, role="editor")

        assert data["user_id"] == str(user_identity.id)
        assert data["trip_id"] == trip
        assert data["role"] == "editor"
        assert data["granted_by_user_id"] == str(admin_identity.id)

    @pytest.mark.asyncio
    async def test_duplicate_grant_conflicts(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        user_identity: Identity,
    ) -> None:
        trip = str(uuid4())
        await _grant(client, admin_headers, user_identity, trip)

        response = await client.post(
            "/api/v1/trip-access",
            json={"user_id": str(user_identity.id), "trip_id": trip, "role": "editor"},
            headers=admin_headers,
        )

        assert response.status_code == 409
        assert response.json()["error"] == "CONFLICT"

    @pytest.mark.asyncio
    async def test_unknown_user(self, client: AsyncClient, admin_headers: dict[str, str]) -> None:
        response = await client.post(
            "/api/v1/trip-access",
            json={"user_id": str(uuid4()), "trip_id": str(uuid4())},
            headers=admin_headers,
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_cannot_grant_to_admin(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        admin_identity: Identity,
    ) -> None:
        response = await client.post(
            "/api/v1/trip-access",
            json={"user_id": str(admin_identity.id), "trip_id": str(uuid4())},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_requires_admin(
        self,
        client: AsyncClient,
        user_headers: dict[str, str],
        other_identity: Identity,
    ) -> None:
        response = await client.post(
            "/api/v1/trip-access",
            json={"user_id": str(other_identity.id), "trip_id": str(uuid4())},
            headers=user_headers,
        )

        assert response.status_code == 403


# --- PATCH / DELETE /trip-access/{grant_id} ---


class TestManageGrant:
    @pytest.mark.asyncio
    async def test_update_role(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        user_headers: dict[str, str],
        user_identity: Identity,
    ) -> None:
        trip = str(uuid4())
        grant = await _grant(client, admin_headers, user_identity, trip, role="viewer")

        response = await client.patch(
            f"/api/v1/trip-access/{grant['id']}",
            json={"role": "editor"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["role"] == "editor"
        role = await client.get(f"/api/v1/trips/{trip}/role", headers=user_headers)
        assert role.json()["role"] == "editor"

    @pytest.mark.asyncio
    async def test_update_missing_grant(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        response = await client.patch(
            f"/api/v1/trip-access/{uuid4()}", json={"role": "editor"}, headers=admin_headers
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_missing_grant(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        response = await client.delete(f"/api/v1/trip-access/{uuid4()}", headers=admin_headers)

        assert response.status_code == 404


# --- Listing ---


class TestListAccess:
    @pytest.mark.asyncio
    async def test_list_users_on_trip(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        user_identity: Identity,
        other_identity: Identity,
    ) -> None:
        trip = str(uuid4())
        await _grant(client, admin_headers, user_identity, trip, role="editor")
        await _grant(client, admin_headers, other_identity, trip, role="viewer")

        response = await client.get(f"/api/v1/trips/{trip}/access", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        # Newest grant first
        assert [row["email"] for row in data] == [other_identity.email, user_identity.email]
        assert data[1]["display_name"] == "Traveler"
        assert data[1]["role"] == "editor"

    @pytest.mark.asyncio
    async def test_list_users_requires_admin(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        user_headers: dict[str, str],
        user_identity: Identity,
    ) -> None:
        trip = str(uuid4())
        await _grant(client, admin_headers, user_identity, trip, role="editor")

        response = await client.get(f"/api/v1/trips/{trip}/access", headers=user_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_my_access(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        user_headers: dict[str, str],
        user_identity: Identity,
    ) -> None:
        trips = [str(uuid4()), str(uuid4())]
        for trip in trips:
            await _grant(client, admin_headers, user_identity, trip)

        response = await client.get("/api/v1/me/access", headers=user_headers)

        assert response.status_code == 200
        assert sorted(row["trip_id"] for row in response.json()["data"]) == sorted(trips)


# --- GET /users ---


class TestListUsers:
    @pytest.mark.asyncio
    async def test_admin_lists_users_by_email(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        admin_identity: Identity,
        user_identity: Identity,
        other_identity: Identity,
    ) -> None:
        response = await client.get("/api/v1/users", headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert [row["email"] for row in body["data"]] == [
            "admin@example.com",
            "friend@example.com",
            "traveler@example.com",
        ]
        assert body["meta"]["total"] == 3
        by_id = {row["id"]: row for row in body["data"]}
        assert by_id[str(admin_identity.id)]["is_admin"] is True
        assert by_id[str(user_identity.id)]["display_name"] == "Traveler"
        assert by_id[str(other_identity.id)]["display_name"] is None

    @pytest.mark.asyncio
    async def test_non_admin_is_forbidden(
        self, client: AsyncClient, user_headers: dict[str, str]
    ) -> None:
        response = await client.get("/api/v1/users", headers=user_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_requires_token(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/users")

        assert response.status_code == 401
