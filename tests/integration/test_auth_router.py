"""Integration tests for auth endpoints."""

from httpx import AsyncClient

from app.services.token_service import TokenService

CREDENTIALS = {"email": "new@example.com", "password": "secret123"}


class TestSignupEndpoint:
    """Tests for POST /auth/signup."""

    async def test_signup_success(self, async_client: AsyncClient) -> None:
        resp = await async_client.post("/auth/signup", json=CREDENTIALS)
        assert resp.status_code == 201
        body = resp.json()
        assert body["status"] == 201
        assert body["data"]["user"]["email"] == "new@example.com"
        assert body["data"]["token"]
        assert "hashed_password" not in body["data"]["user"]

    async def test_signup_duplicate(self, async_client: AsyncClient) -> None:
        await async_client.post("/auth/signup", json=CREDENTIALS)
        resp = await async_client.post("/auth/signup", json=CREDENTIALS)
        assert resp.status_code == 409
        assert resp.json()["code"] == "USER_ALREADY_EXISTS"

    async def test_signup_invalid_email(self, async_client: AsyncClient) -> None:
        resp = await async_client.post(
            "/auth/signup", json={"email": "not-valid", "password": "secret123"}
        )
        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["details"][0]["field"] == "email"

    async def test_signup_short_password(self, async_client: AsyncClient) -> None:
        resp = await async_client.post(
            "/auth/signup", json={"email": "a@example.com", "password": "123"}
        )
        assert resp.status_code == 400


class TestLoginEndpoint:
    """Tests for POST /auth/login."""

    async def test_login_returns_verifiable_token(
        self, async_client: AsyncClient, token_service: TokenService
    ) -> None:
        await async_client.post("/auth/signup", json=CREDENTIALS)
        resp = await async_client.post("/auth/login", json=CREDENTIALS)
        assert resp.status_code == 200
        data = resp.json()["data"]
        payload = token_service.decode_token(data["token"])
        assert payload.user_id == data["user"]["id"]
        assert data["token_type"] == "bearer"

    async def test_login_wrong_password(self, async_client: AsyncClient) -> None:
        await async_client.post("/auth/signup", json=CREDENTIALS)
        resp = await async_client.post(
            "/auth/login", json={**CREDENTIALS, "password": "wrong-one"}
        )
        assert resp.status_code == 401
        assert resp.json()["code"] == "INVALID_CREDENTIALS"

    async def test_login_unknown_email(self, async_client: AsyncClient) -> None:
        resp = await async_client.post(
            "/auth/login", json={"email": "ghost@example.com", "password": "x"}
        )
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid email or password"

    async def test_login_locked_after_failures(self, async_client: AsyncClient) -> None:
        await async_client.post("/auth/signup", json=CREDENTIALS)
        for _ in range(5):
            await async_client.post(
                "/auth/login", json={**CREDENTIALS, "password": "wrong-one"}
            )
        resp = await async_client.post("/auth/login", json=CREDENTIALS)
        assert resp.status_code == 429
        assert resp.json()["code"] == "ACCOUNT_LOCKED"


class TestMeEndpoint:
    """Tests for GET /auth/me."""

    async def test_me(self, async_client: AsyncClient) -> None:
        signup = await async_client.post("/auth/signup", json=CREDENTIALS)
        token = signup.json()["data"]["token"]
        resp = await async_client.get(
            "/auth/me", headers={"Authorization": f"Bearer {token}"}
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["email"] == "new@example.com"
