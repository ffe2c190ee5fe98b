#!/usr/bin/env python3
"""
Add a new user to the database.

Usage:
    python -m promptstudio.scripts.add_user <name> <email> <password> [premium_days]

Example:
    python -m promptstudio.scripts.add_user "Ada Lovelace" ada@example.com Secret123 90
"""
import asyncio
import sys

from promptstudio.database import AsyncSessionLocal, init_db
from promptstudio.services.auth import create_user, find_user_by_email
from promptstudio.services.subscription import grant_premium
from promptstudio.utils.validation import validate_email, validate_name, validate_password


async def add_user(name: str, email: str, password: str, premium_days: int = 0) -> bool:
    """Add a new user, optionally with a premium subscription."""
    await init_db()
    async with AsyncSessionLocal() as db:
        existing = await find_user_by_email(db, email)
        if existing:
            print(f"Error: User '{email}' already exists")
            return False

        user = await create_user(db, name, email, password)
        if premium_days:
            await grant_premium(db, user.id, premium_days)

        print("User created successfully:")
        print(f"  Name: {user.name}")
        print(f"  Email: {user.email}")
        print(f"  Tier: {user.subscription_tier}")
        if user.subscription_expires_at:
            print(f"  Premium until: {user.subscription_expires_at:%Y-%m-%d}")
        return True


def main():
    if len(sys.argv) < 4:
        print("Usage: python -m promptstudio.scripts.add_user <name> <email> <password> [premium_days]")
        sys.exit(1)

    name, email, password = sys.argv[1], sys.argv[2], sys.argv[3]
    premium_days = int(sys.argv[4]) if len(sys.argv) > 4 else 0

    for is_valid, error in (validate_name(name), validate_email(email), validate_password(password)):
        if not is_valid:
            print(f"Error: {error}")
            sys.exit(1)

    success = asyncio.run(add_user(name, email, password, premium_days))
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
