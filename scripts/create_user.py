"""Create a user account directly in the database.

Usage:
    python -m scripts.create_user --email support@example.com --password secret123
"""

import argparse
import asyncio

from app.core.database import Base, async_session_factory, engine
from app.core.security import hash_password
from app.models import conversation  # noqa: F401
from app.repositories.user_repo import UserRepository


async def create_user(email: str, password: str) -> None:
    """Create the user unless the email is already registered."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    email = email.lower().strip()
    async with async_session_factory() as session:
        repo = UserRepository(session)
        existing = await repo.find_by_email(email)
        if existing:
            print(f"User with email '{email}' already exists (id={existing.id}).")
        else:
            user = await repo.create(email=email, hashed_password=await hash_password(password))
            await session.commit()
            print(f"User created: {email} (id={user.id})")

    await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a support-chat user")
    parser.add_argument("--email", required=True, help="User email")
    parser.add_argument("--password", required=True, help="User password")
    args = parser.parse_args()

    asyncio.run(create_user(args.email, args.password))


if __name__ == "__main__":
    main()
