"""Integration tests for bearer-token authentication."""

import time
from collections.abc import Callable

import jwt as pyjwt
import pytest
from httpx import AsyncClient

from app.core.config import settings
from app.models.user import User


def _token(**claims: object) -> str:
    payload: dict[str, object] = {
        "sub": "1",
        "type": "access",
        "iss": settings.auth.issuer,
        "exp": int(time.time()) + 60,
    }
    payload.update(claims)
    return pyjwt.encode(
        payload,
        settings.auth.secret_key.get_secret_value(),
        algorithm=settings.auth.algorithm,
    )


class TestPublicPaths:
    @pytest.mark.parametrize("path", ["/health", "/api/info", "/openapi.json"])
    async def test_no_token_needed(self, async_client: AsyncClient, path: str) -> None:
        resp = await async_client.get(path)
        assert resp.status_code == 200

    async def test_health_payload(self, async_client: AsyncClient) -> None:
        data = (await async_client.get("/health")).json()["data"]
        assert data["status"] == "OK"
        assert data["environment"] == settings.app.env


class TestProtectedPaths:
    async def test_missing_token(self, async_client: AsyncClient) -> None:
        resp = await async_client.get("/chat/history")
        assert resp.status_code == 401
        assert resp.json() == {
            "status": 401,
            "message": "Access token required",
            "code": "MISSING_TOKEN",
        }

    async def test_non_bearer_scheme(self, async_client: AsyncClient) -> None:
        resp = await async_client.get(
            "/chat/history", headers={"Authorization": "Basic abc"}
        )
        assert resp.status_code == 401

    async def test_malformed_token(self, async_client: AsyncClient) -> None:
        resp = await async_client.get(
            "/chat/history", headers={"Authorization": "Bearer garbage"}
        )
        assert resp.status_code == 403
        assert resp.json()["code"] == "INVALID_TOKEN"

    async def test_expired_token(self, async_client: AsyncClient, user: User) -> None:
        token = _token(sub=str(user.id), exp=int(time.time()) - 10)
        resp = await async_client.get(
            "/chat/history", headers={"Authorization": f"Bearer {token}"}
        )
        assert resp.status_code == 403
        assert resp.json()["code"] == "TOKEN_EXPIRED"

    async def test_foreign_issuer(self, async_client: AsyncClient, user: User) -> None:
        token = _token(sub=str(user.id), iss="elsewhere")
        resp = await async_client.get(
            "/chat/history", headers={"Authorization": f"Bearer {token}"}
        )
        assert resp.status_code == 403

    async def test_unknown_user(self, async_client: AsyncClient) -> None:
        resp = await async_client.get(
            "/chat/history", headers={"Authorization": f"Bearer {_token(sub='999')}"}
        )
        assert resp.status_code == 401
        assert resp.json()["message"] == "User not found"

    async def test_valid_token(self, authed_client: AsyncClient) -> None:
        resp = await authed_client.get("/chat/history")
        assert resp.status_code == 200


class TestOwnership:
    async def test_own_user_id_allowed(
        self, authed_client: AsyncClient, user: User
    ) -> None:
        resp = await authed_client.get(f"/chat/history?user_id={user.id}")
        assert resp.status_code == 200

    async def test_other_user_id_forbidden(
        self,
        async_client: AsyncClient,
        user: User,
        create_user,  # type: ignore[no-untyped-def]
        auth_headers: Callable[[User], dict[str, str]],
    ) -> None:
        other = await create_user("other@test.com")
        resp = await async_client.get(
            f"/chat/history?user_id={other.id}", headers=auth_headers(user)
        )
        assert resp.status_code == 403
        assert resp.json()["code"] == "FORBIDDEN"
