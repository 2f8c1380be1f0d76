"""Password hashing and ownership checks."""

import asyncio
from concurrent.futures import ThreadPoolExecutor

import bcrypt

from app.core.exceptions import AuthorizationError

BCRYPT_ROUNDS = 12

_executor = ThreadPoolExecutor(max_workers=4)

# Checked against for unknown emails so failed logins take the same time.
DUMMY_HASH = bcrypt.hashpw(b"dummy", bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode()


def _hash(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode(), salt).decode()


async def hash_password(password: str) -> str:
    """Hash a password using bcrypt off the event loop."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_executor, _hash, password)


async def verify_password(plain: str, hashed: str) -> bool:
    """Verify a password against a bcrypt hash."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        _executor,
        lambda: bcrypt.checkpw(plain.encode(), hashed.encode()),
    )


def ensure_owner(caller_id: int, owner_id: int | str) -> None:
    """Reject with 403 when the caller is not the declared resource owner."""
    if str(owner_id) != str(caller_id):
        raise AuthorizationError
