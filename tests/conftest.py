"""Shared fixtures for Prompt Framework Studio tests."""

import asyncio
import os
import tempfile
from datetime import timedelta

import pytest

# ---------------------------------------------------------------------------
# Point the app at a throwaway SQLite file before anything imports settings
# ---------------------------------------------------------------------------
_DB_DIR = tempfile.mkdtemp(prefix="promptstudio-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["SMTP_HOST"] = ""
os.environ["DEBUG"] = "false"

from promptstudio.database import AsyncSessionLocal, drop_db, init_db  # noqa: E402
from promptstudio.models import User  # noqa: E402
from promptstudio.services import auth as auth_service  # noqa: E402
from promptstudio.utils.clock import utcnow  # noqa: E402
from promptstudio.wizard.scoring import WizardAnswer  # noqa: E402

TEST_PASSWORD = "Password123"


async def reset_database():
    await drop_db()
    await init_db()


@pytest.fixture
async def db():
    """Fresh schema and an open session."""
    await reset_database()
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
async def user(db) -> User:
    return await auth_service.create_user(db, "Test User", "user@example.com", TEST_PASSWORD)


@pytest.fixture
async def premium_user(db) -> User:
    user = await auth_service.create_user(db, "Premium User", "premium@example.com", TEST_PASSWORD)
    user.subscription_tier = "premium"
    user.subscription_expires_at = utcnow() + timedelta(days=30)
    await db.commit()
    return user


def answers(**selected) -> list[WizardAnswer]:
    """answers(q1="explore-ideas", q3="creativity") -> WizardAnswer list."""
    result = []
    for question_id, option_ids in selected.items():
        if isinstance(option_ids, str):
            option_ids = (option_ids,)
        result.append(WizardAnswer(question_id=question_id, selected_option_ids=tuple(option_ids)))
    return result


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------

def run(coro):
    """Run a coroutine from a synchronous (TestClient) test."""
    return asyncio.run(coro)


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from promptstudio.main import app

    run(reset_database())
    with TestClient(app) as test_client:
        yield test_client


def register(client, name="Test User", email="user@example.com", password=TEST_PASSWORD):
    """Register through the form; the client ends up logged in."""
    return client.post(
        "/auth/register",
        data={"name": name, "email": email, "password": password, "confirm_password": password},
    )


async def _update_user(email: str, **values):
    async with AsyncSessionLocal() as session:
        user = await auth_service.find_user_by_email(session, email)
        for key, value in values.items():
            setattr(user, key, value)
        await session.commit()


def make_premium(email: str = "user@example.com", days: int = 30):
    run(_update_user(email, subscription_tier="premium",
                     subscription_expires_at=utcnow() + timedelta(days=days)))


def make_admin(email: str = "user@example.com"):
    run(_update_user(email, is_admin=True))


@pytest.fixture
def logged_in(client):
    register(client)
    return client
