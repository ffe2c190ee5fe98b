#!/usr/bin/env python3
"""
Grant (or with --revoke, remove) admin rights.

Usage:
    python -m promptstudio.scripts.make_admin <email> [--revoke]
"""
import asyncio
import sys

from promptstudio.database import AsyncSessionLocal
from promptstudio.services.auth import find_user_by_email


async def set_admin(email: str, is_admin: bool = True) -> bool:
    async with AsyncSessionLocal() as db:
        user = await find_user_by_email(db, email)
        if not user:
            print(f"Error: No user with email '{email}'")
            return False

        user.is_admin = is_admin
        await db.commit()
        state = "now an admin" if is_admin else "no longer an admin"
        print(f"{user.email} is {state}")
        return True


def main():
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    if len(args) != 1:
        print("Usage: python -m promptstudio.scripts.make_admin <email> [--revoke]")
        sys.exit(1)

    success = asyncio.run(set_admin(args[0], is_admin="--revoke" not in sys.argv))
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
