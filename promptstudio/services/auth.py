"""
Authentication service - password hashing, JWT tokens and login sessions.

One active session per user: logging in deactivates every other session
row for that user. The session row also carries wizard progress.
"""
import logging
import uuid
from datetime import timedelta
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from promptstudio.config import get_settings
from promptstudio.models import User, UserSession
from promptstudio.utils.clock import utcnow
from promptstudio.utils.constants import ERROR_MESSAGES, SUBSCRIPTION_FREE
from promptstudio.utils.validation import normalize_email, validate_password

logger = logging.getLogger(__name__)

settings = get_settings()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class EmailAlreadyRegistered(Exception):
    pass


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Payload data (should include 'sub' for the user id)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    to_encode.update({"exp": utcnow() + expires_delta})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[dict]:
    """Decoded payload, or None if the token is invalid or expired."""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None


# ============================================
# Users
# ============================================

async def find_user_by_id(db: AsyncSession, user_id: int) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def find_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def authenticate_user(db: AsyncSession, email: str, password: str) -> Optional[User]:
    """User for these credentials, or None."""
    user = await find_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


async def create_user(
    db: AsyncSession,
    name: str,
    email: str,
    password: str,
    is_admin: bool = False,
) -> User:
    """
    Create a new free-tier user.

    Raises:
        EmailAlreadyRegistered: the normalised email is taken
    """
    user = User(
        name=name.strip(),
        email=normalize_email(email),
        password_hash=hash_password(password),
        is_admin=is_admin,
        subscription_tier=SUBSCRIPTION_FREE,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise EmailAlreadyRegistered(email)
    await db.refresh(user)
    logger.info("Created user %s", user.id)
    return user


async def change_password(
    db: AsyncSession,
    user: User,
    current_password: str,
    new_password: str,
    confirm_password: str,
) -> tuple[bool, str]:
    """
    Change a user's password after re-checking the current one.

    Returns:
        (changed, message) - message is the error or the success text
    """
    messages = ERROR_MESSAGES["account"]
    if not current_password or not new_password or not confirm_password:
        return False, ERROR_MESSAGES["auth"]["all_fields_required"]
    if not verify_password(current_password, user.password_hash):
        return False, messages["current_password_incorrect"]
    if new_password != confirm_password:
        return False, ERROR_MESSAGES["auth"]["password_mismatch"]
    if verify_password(new_password, user.password_hash):
        return False, messages["new_password_same"]

    is_valid, error = validate_password(new_password)
    if not is_valid:
        return False, error

    user.password_hash = hash_password(new_password)
    user.last_password_change = utcnow()
    await db.commit()
    logger.info("Password changed for user %s", user.id)
    return True, messages["password_changed"]


# ============================================
# Session Management
# ============================================

async def create_session(
    db: AsyncSession,
    user_id: int,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
    expires_in_days: Optional[int] = None,
) -> str:
    """
    Create a new session for a user, invalidating any previous sessions.

    Returns:
        New session ID (UUID string)
    """
    await db.execute(
        update(UserSession)
        .where(UserSession.user_id == user_id)
        .values(is_active=False)
    )

    if expires_in_days is None:
        expires_in_days = settings.session_expire_days

    session_id = str(uuid.uuid4())
    db.add(UserSession(
        user_id=user_id,
        session_id=session_id,
        ip_address=ip_address,
        user_agent=(user_agent or "")[:500] or None,
        expires_at=utcnow() + timedelta(days=expires_in_days),
        is_active=True,
    ))
    await db.commit()
    return session_id


async def get_active_session(
    db: AsyncSession,
    user_id: int,
    session_id: str,
) -> Optional[UserSession]:
    """
    The session row if it is still active and unexpired, else None.
    Touches last_activity on success; deactivates expired rows.
    """
    result = await db.execute(
        select(UserSession).where(
            UserSession.user_id == user_id,
            UserSession.session_id == session_id,
            UserSession.is_active == True,  # noqa: E712
        )
    )
    session = result.scalar_one_or_none()
    if not session:
        return None

    now = utcnow()
    if session.expires_at and session.expires_at < now:
        session.is_active = False
        await db.commit()
        return None

    session.last_activity = now
    await db.commit()
    return session


async def validate_session(db: AsyncSession, user_id: int, session_id: str) -> bool:
    """Check if a session is still valid (not replaced by another login)."""
    return await get_active_session(db, user_id, session_id) is not None


async def invalidate_session(db: AsyncSession, session_id: str) -> bool:
    """Invalidate a specific session (logout). Also drops wizard progress."""
    result = await db.execute(
        update(UserSession)
        .where(UserSession.session_id == session_id)
        .values({UserSession.is_active: False, UserSession._wizard_answers: None})
    )
    await db.commit()
    return result.rowcount > 0


async def invalidate_all_user_sessions(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(
        update(UserSession)
        .where(UserSession.user_id == user_id)
        .values(is_active=False)
    )
    await db.commit()
    return result.rowcount


async def cleanup_expired_sessions(db: AsyncSession) -> int:
    """Delete expired session rows. Returns the number removed."""
    result = await db.execute(
        delete(UserSession).where(UserSession.expires_at < utcnow())
    )
    await db.commit()
    return result.rowcount
