"""Tests for /login and /register."""

from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from slp.auth.jwt import verify_token
from slp.auth.password import verify_password
from slp.db.models import User
from tests.conftest import TEST_PASSWORD, make_user


class TestLogin:
    async def test_login_success(self, client: AsyncClient, db_session: AsyncSession):
        user = await make_user(db_session, username="alice", is_admin=True)

        response = await client.post("/login", json={"username": "alice", "password": TEST_PASSWORD})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["token_type"] == "bearer"
        assert data["expires_in"] == 3600
        assert data["user"] == {"id": user.id, "username": "alice", "isAdmin": True}
        payload = verify_token(data["token"])
        assert payload["id"] == user.id
        assert payload["isAdmin"] is True

    async def test_unknown_user_and_wrong_password_look_identical(
        self, client: AsyncClient, db_session: AsyncSession
    ):
        await make_user(db_session, username="alice")

        unknown = await client.post("/login", json={"username": "nobody", "password": TEST_PASSWORD})
        wrong = await client.post("/login", json={"username": "alice", "password": "WrongHorse9"})

        assert unknown.status_code == wrong.status_code == 401
        assert unknown.json() == wrong.json() == {"detail": "Invalid credentials"}

    async def test_missing_fields_is_422(self, client: AsyncClient):
        response = await client.post("/login", json={"username": "alice"})
        assert response.status_code == 422

    async def test_validation_error_does_not_echo_password(self, client: AsyncClient):
        response = await client.post("/login", json={"password": "s3cret-value"})
        assert response.status_code == 422
        assert "s3cret-value" not in response.text


class TestRegister:
    async def test_register_success(self, client: AsyncClient, db_session: AsyncSession):
        response = await client.post(
            "/register",
            json={
                "username": "newbie",
                "password": "LongEnough1",
                "securityQuestion": "First pet?",
                "securityAnswer": "  Rex ",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True

        user = (await db_session.execute(select(User).where(User.username == "newbie"))).scalar_one()
        assert data["userId"] == user.id
        assert user.password_hash != "LongEnough1"
        assert verify_password("LongEnough1", user.password_hash)
        assert user.security_question == "First pet?"
        assert verify_password("rex", user.security_answer_hash)

    async def test_registered_user_can_login(self, client: AsyncClient):
        await client.post("/register", json={"username": "newbie", "password": "LongEnough1"})
        response = await client.post("/login", json={"username": "newbie", "password": "LongEnough1"})
        assert response.status_code == 200
        assert response.json()["user"]["isAdmin"] is False

    async def test_duplicate_username_is_409(self, client: AsyncClient, db_session: AsyncSession):
        await make_user(db_session, username="taken")
        response = await client.post("/register", json={"username": "taken", "password": "LongEnough1"})
        assert response.status_code == 409
        assert response.json() == {"detail": "Username already taken"}

    async def test_short_password_is_400(self, client: AsyncClient, db_session: AsyncSession):
        response = await client.post("/register", json={"username": "newbie", "password": "short"})
        assert response.status_code == 400

        result = await db_session.execute(select(User).where(User.username == "newbie"))
        assert result.scalar_one_or_none() is None

    async def test_short_username_is_422(self, client: AsyncClient):
        response = await client.post("/register", json={"username": "ab", "password": "LongEnough1"})
        assert response.status_code == 422
