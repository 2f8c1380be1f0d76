"""Tests for password hashing and ownership checks."""

import pytest

from app.core.exceptions import AuthorizationError
from app.core.security import DUMMY_HASH, ensure_owner, hash_password, verify_password


class TestPasswordHashing:
    """Tests for bcrypt password operations."""

    async def test_hash_and_verify(self) -> None:
        hashed = await hash_password("support-pass")
        assert await verify_password("support-pass", hashed) is True

    async def test_wrong_password_fails(self) -> None:
        hashed = await hash_password("correct")
        assert await verify_password("wrong", hashed) is False

    async def test_hash_is_not_plaintext(self) -> None:
        hashed = await hash_password("secret123")
        assert "secret123" not in hashed
        assert hashed.startswith("$2")

    async def test_dummy_hash_does_not_match_real(self) -> None:
        assert await verify_password("realpassword", DUMMY_HASH) is False


class TestEnsureOwner:
    """Tests for the owner/caller comparison."""

    def test_same_id_passes(self) -> None:
        ensure_owner(7, 7)

    def test_string_owner_id_is_compared_by_value(self) -> None:
        ensure_owner(7, "7")

    def test_mismatch_is_forbidden(self) -> None:
        with pytest.raises(AuthorizationError) as exc_info:
            ensure_owner(7, "8")
        assert exc_info.value.status_code == 403
        assert exc_info.value.code == "FORBIDDEN"
