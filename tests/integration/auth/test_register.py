"""
Integration tests for account lifecycle endpoints.

Tests:
- POST /api/auth/register
- DELETE /api/auth/register
- POST /api/auth/recover
"""

from datetime import datetime, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from teamtasks.db.queries import find_all, find_all_unarchived, find_one
from teamtasks.models.authentication import Authentication
from teamtasks.models.backup_code import BackupCode
from teamtasks.models.user import User
from tests.factories import DEFAULT_PASSWORD, BackupCodeFactory, UserFactory

pytestmark = pytest.mark.integration


def registration(username: str = "newuser", password: str = "SecurePass123!") -> dict:
    return {
        "first_name": "New",
        "last_name": "User",
        "username": username,
        "password": password,
    }


@pytest.mark.asyncio
class TestRegisterEndpoint:
    """Test POST /api/auth/register endpoint."""

    async def test_register_success(self, client: AsyncClient, db_session: AsyncSession):
        response = await client.post("/api/auth/register", json=registration())

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["user"]["username"] == "newuser"
        assert "password_hash" not in data["user"]
        assert len(data["backup_codes"]) == 10
        assert len(set(data["backup_codes"])) == 10

        user = await find_one(db_session, User, [("username", "newuser")])
        stored = await find_all_unarchived(db_session, BackupCode, [("user_id", user.id)])
        assert sorted(code.code for code in stored) == sorted(data["backup_codes"])

    async def test_register_stores_hash_only(self, client: AsyncClient, db_session: AsyncSession):
        await client.post("/api/auth/register", json=registration())

        user = await find_one(db_session, User, [("username", "newuser")])
        assert user.password_hash != "SecurePass123!"
        assert user.password_hash.startswith("$2b$")

    async def test_register_taken_username(self, client: AsyncClient, user):
        response = await client.post("/api/auth/register", json=registration(username=user.username))

        assert response.status_code == 400
        assert response.json()["error"] == {"UserError": "UserAlreadyExists"}

    async def test_register_weak_password(self, client: AsyncClient):
        response = await client.post("/api/auth/register", json=registration(password="short"))

        assert response.status_code == 422

    async def test_register_password_over_bcrypt_limit(self, client: AsyncClient, db_session: AsyncSession):
        response = await client.post("/api/auth/register", json=registration(password="x" * 100))

        assert response.status_code == 422
        assert await find_all(db_session, User, [("username", "newuser")]) == []

    async def test_register_restores_archived_account(self, client: AsyncClient, db_session: AsyncSession):
        archived = await UserFactory.create_async(db_session, archived_at=datetime.now(timezone.utc))

        response = await client.post(
            "/api/auth/register",
            json=registration(username=archived.username, password=DEFAULT_PASSWORD),
        )

        assert response.status_code == 200
        assert response.json()["data"]["user"]["id"] == archived.id
        restored = await find_one(db_session, User, [("id", archived.id)])
        assert restored.archived_at is None

    async def test_archived_account_needs_its_password(self, client: AsyncClient, db_session: AsyncSession):
        archived = await UserFactory.create_async(db_session, archived_at=datetime.now(timezone.utc))

        response = await client.post(
            "/api/auth/register",
            json=registration(username=archived.username, password="AnotherPass123!"),
        )

        assert response.status_code == 400
        assert response.json()["error"] == {"UserError": "UserAlreadyExists"}


@pytest.mark.asyncio
class TestUnregisterEndpoint:
    """Test DELETE /api/auth/register endpoint."""

    async def test_unregister_archives_everything(
        self, client: AsyncClient, db_session: AsyncSession, user, auth_headers
    ):
        await BackupCodeFactory.create_async(db_session, user_id=user.id)

        response = await client.delete("/api/auth/register", headers=auth_headers)

        assert response.status_code == 200
        assert (await find_one(db_session, User, [("id", user.id)])).archived_at is not None
        assert await find_all(db_session, Authentication, [("user_id", user.id)]) == []
        assert await find_all_unarchived(db_session, BackupCode, [("user_id", user.id)]) == []

        after = await client.get("/api/my/user", headers=auth_headers)
        assert after.status_code == 401

    async def test_unregister_requires_token(self, client: AsyncClient):
        response = await client.delete("/api/auth/register")

        assert response.status_code == 401


@pytest.mark.asyncio
class TestRecoverEndpoint:
    """Test POST /api/auth/recover endpoint."""

    async def test_recover_with_backup_code(self, client: AsyncClient, db_session: AsyncSession, user):
        backup_code = await BackupCodeFactory.create_async(db_session, user_id=user.id)

        response = await client.post(
            "/api/auth/recover",
            json={"username": user.username, "code": backup_code.code}
        )

        assert response.status_code == 200
        assert response.json()["data"]["user_id"] == user.id

        me = await client.get(
            "/api/my/user",
            headers={"Authorization": f"Bearer {response.json()['data']['token']}"}
        )
        assert me.status_code == 200

    async def test_backup_code_is_single_use(self, client: AsyncClient, db_session: AsyncSession, user):
        backup_code = await BackupCodeFactory.create_async(db_session, user_id=user.id)
        payload = {"username": user.username, "code": backup_code.code}

        await client.post("/api/auth/recover", json=payload)
        second = await client.post("/api/auth/recover", json=payload)

        assert second.status_code == 404
        assert second.json()["error"] == {"BackupCodeError": "CodeNotFound"}

    async def test_code_of_another_user(self, client: AsyncClient, db_session: AsyncSession, user, other_user):
        backup_code = await BackupCodeFactory.create_async(db_session, user_id=other_user.id)

        response = await client.post(
            "/api/auth/recover",
            json={"username": user.username, "code": backup_code.code}
        )

        assert response.status_code == 404

    async def test_recover_unknown_user(self, client: AsyncClient):
        response = await client.post("/api/auth/recover", json={"username": "nobody", "code": "abc"})

        assert response.status_code == 404
        assert response.json()["error"] == {"AuthenticationError": "UserNotFound"}
