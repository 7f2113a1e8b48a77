"""Tests for profile updates."""

from httpx import AsyncClient


class TestProfileUpdate:
    async def test_update_avatar_and_theme(self, authed_client: AsyncClient):
        response = await authed_client.patch("/api/users/profile", json={
            "avatar": "https://cdn.example.com/a.png",
            "theme": "dark",
        })
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Profile updated successfully"
        assert data["user"]["avatar"] == "https://cdn.example.com/a.png"
        assert data["user"]["theme"] == "dark"

    async def test_partial_update_keeps_other_field(self, authed_client: AsyncClient):
        await authed_client.patch("/api/users/profile", json={"avatar": "a.png", "theme": "dark"})
        response = await authed_client.patch("/api/users/profile", json={"theme": "light"})
        user = response.json()["user"]
        assert user["avatar"] == "a.png"
        assert user["theme"] == "light"

    async def test_empty_update_returns_current_account(self, authed_client: AsyncClient, registered_user: dict):
        response = await authed_client.patch("/api/users/profile", json={})
        assert response.status_code == 200
        assert response.json()["user"]["id"] == registered_user["user_id"]

    async def test_update_is_persisted(self, authed_client: AsyncClient):
        await authed_client.patch("/api/users/profile", json={"theme": "ocean"})
        me = await authed_client.get("/api/auth/me")
        assert me.json()["user"]["theme"] == "ocean"

    async def test_update_only_touches_caller(self, client: AsyncClient, registered_user: dict, other_user: dict):
        await client.patch("/api/users/profile", json={"theme": "dark"}, headers=registered_user["headers"])
        theirs = await client.get("/api/auth/me", headers=other_user["headers"])
        assert theirs.json()["user"]["theme"] is None

    async def test_empty_theme_rejected(self, authed_client: AsyncClient):
        response = await authed_client.patch("/api/users/profile", json={"theme": ""})
        assert response.status_code == 400
        assert response.json()["code"] == "ValidationError"

    async def test_oversized_avatar_rejected(self, authed_client: AsyncClient):
        response = await authed_client.patch("/api/users/profile", json={"avatar": "x" * 513})
        assert response.status_code == 400
