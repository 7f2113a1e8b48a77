"""Tests for account registration."""

from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nativespeak.auth import service as auth_service
from nativespeak.db.models import User

PAYLOAD = {
    "email": "novo@example.com",
    "password": "senha123",
    "firstName": "Ana",
    "lastName": "Lima",
}


class TestRegistration:
    async def test_register_success(self, client: AsyncClient):
        response = await client.post("/api/auth/register", json=PAYLOAD)
        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["token"]
        user = data["user"]
        assert user["email"] == "novo@example.com"
        assert user["firstName"] == "Ana"
        assert user["lastName"] == "Lima"
        assert user["credits"] == 0
        assert user["totalConversationTime"] == 0
        assert user["completedLessons"] == 0
        assert user["termsAccepted"] is True
        assert user["studyStartDate"] is not None

    async def test_response_never_exposes_password(self, client: AsyncClient):
        response = await client.post("/api/auth/register", json=PAYLOAD)
        user = response.json()["user"]
        assert "password" not in user
        assert "passwordHash" not in user
        assert "senha123" not in response.text

    async def test_token_round_trips_to_new_account(self, client: AsyncClient, token_codec):
        response = await client.post("/api/auth/register", json=PAYLOAD)
        data = response.json()
        claims = token_codec.verify(data["token"])
        assert claims.user_id == data["user"]["id"]
        assert claims.email == "novo@example.com"

    async def test_distinct_emails_get_distinct_ids(self, client: AsyncClient, make_user):
        first = await make_user(email="um@example.com")
        second = await make_user(email="dois@example.com")
        assert first["user_id"] != second["user_id"]

    async def test_password_stored_hashed(self, client: AsyncClient, db_session: AsyncSession):
        await client.post("/api/auth/register", json=PAYLOAD)
        result = await db_session.execute(select(User).where(User.email == "novo@example.com"))
        user = result.scalar_one()
        assert user.password_hash != "senha123"
        assert user.password_hash.startswith("$argon2id$")

    async def test_email_normalized_to_lowercase(self, client: AsyncClient):
        response = await client.post("/api/auth/register", json={**PAYLOAD, "email": "Novo@Example.COM"})
        assert response.status_code == 201
        assert response.json()["user"]["email"] == "novo@example.com"


class TestDuplicateIdentity:
    async def test_duplicate_email_rejected(self, client: AsyncClient):
        first = await client.post("/api/auth/register", json=PAYLOAD)
        second = await client.post("/api/auth/register", json=PAYLOAD)
        assert first.status_code == 201
        assert second.status_code == 400
        body = second.json()
        assert body["success"] is False
        assert body["code"] == "DuplicateIdentity"

    async def test_duplicate_email_case_insensitive(self, client: AsyncClient):
        await client.post("/api/auth/register", json=PAYLOAD)
        response = await client.post("/api/auth/register", json={**PAYLOAD, "email": "NOVO@example.com"})
        assert response.status_code == 400

    async def test_write_time_conflict_matches_precheck(self, client: AsyncClient, monkeypatch):
        await client.post("/api/auth/register", json=PAYLOAD)
        precheck = await client.post("/api/auth/register", json=PAYLOAD)

        async def _no_user(*_args, **_kwargs):
            return None

        # Skip the pre-check so the unique constraint fires at flush time
        monkeypatch.setattr(auth_service, "get_user_by_email", _no_user)
        write_time = await client.post("/api/auth/register", json=PAYLOAD)

        assert write_time.status_code == precheck.status_code == 400
        assert write_time.json() == precheck.json()


class TestValidation:
    async def test_short_password_rejected(self, client: AsyncClient):
        response = await client.post("/api/auth/register", json={**PAYLOAD, "password": "12345"})
        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "ValidationError"
        assert "password" in body["message"].lower()

    async def test_invalid_email_rejected(self, client: AsyncClient):
        response = await client.post("/api/auth/register", json={**PAYLOAD, "email": "not-an-email"})
        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "ValidationError"
        assert body["details"]

    async def test_missing_names_rejected(self, client: AsyncClient):
        response = await client.post("/api/auth/register", json={"email": "x@example.com", "password": "senha123"})
        assert response.status_code == 400

    async def test_empty_first_name_rejected(self, client: AsyncClient):
        response = await client.post("/api/auth/register", json={**PAYLOAD, "firstName": ""})
        assert response.status_code == 400
