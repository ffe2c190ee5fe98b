"""
Subscription service - free vs premium tiers.

Premium is time-boxed: a user is premium only while subscription_tier is
"premium" AND subscription_expires_at lies in the future. An expired or
undated premium row is read as free; nothing rewrites it.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from promptstudio.config import get_settings
from promptstudio.models import User
from promptstudio.services.prompts import count_prompts_for_user
from promptstudio.utils.clock import utcnow
from promptstudio.utils.constants import (
    PREMIUM_SUBSCRIPTION_YEARS,
    SUBSCRIPTION_FREE,
    SUBSCRIPTION_PREMIUM,
)

logger = logging.getLogger(__name__)

settings = get_settings()

# Features that need an active premium subscription
PREMIUM_FEATURES = ("export", "custom_criteria", "unlimited_prompts")


@dataclass(frozen=True)
class SubscriptionInfo:
    tier: str
    is_premium: bool
    expires_at: Optional[datetime] = None


def get_subscription_info(user: User, now: Optional[datetime] = None) -> SubscriptionInfo:
    """Effective subscription for a user at `now` (defaults to the current time)."""
    now = now or utcnow()
    expires_at = user.subscription_expires_at
    if user.subscription_tier == SUBSCRIPTION_PREMIUM and expires_at is not None and expires_at > now:
        return SubscriptionInfo(tier=SUBSCRIPTION_PREMIUM, is_premium=True, expires_at=expires_at)
    return SubscriptionInfo(tier=SUBSCRIPTION_FREE, is_premium=False)


def is_premium(user: User, now: Optional[datetime] = None) -> bool:
    return get_subscription_info(user, now).is_premium


def is_expired(expires_at: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """True once expires_at has passed. No expiry date means not expired."""
    if expires_at is None:
        return False
    return (now or utcnow()) > expires_at


def has_feature_access(user: User, feature: str) -> bool:
    if feature not in PREMIUM_FEATURES:
        return True
    return is_premium(user)


def get_tier_display_name(tier: str) -> str:
    names = {
        SUBSCRIPTION_FREE: "Free",
        SUBSCRIPTION_PREMIUM: "Premium",
    }
    return names.get(tier, tier.title())


async def _get_user(db: AsyncSession, user_id: int) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def grant_premium(db: AsyncSession, user_id: int, days: Optional[int] = None) -> Optional[User]:
    """
    Make a user premium for `days` days from now.

    Returns:
        The updated user, or None if no such user
    """
    user = await _get_user(db, user_id)
    if not user:
        return None
    days = days or settings.premium_subscription_days
    user.subscription_tier = SUBSCRIPTION_PREMIUM
    user.subscription_expires_at = utcnow() + timedelta(days=days)
    await db.commit()
    logger.info("Granted premium to user %s for %s days", user_id, days)
    return user


async def revoke_premium(db: AsyncSession, user_id: int) -> Optional[User]:
    user = await _get_user(db, user_id)
    if not user:
        return None
    user.subscription_tier = SUBSCRIPTION_FREE
    user.subscription_expires_at = None
    await db.commit()
    logger.info("Revoked premium from user %s", user_id)
    return user


async def toggle_premium(
    db: AsyncSession,
    user_id: int,
    years: int = PREMIUM_SUBSCRIPTION_YEARS,
) -> Optional[str]:
    """
    Flip a user between free and premium (admin action).

    Switches on the stored tier, not the effective one, so an expired
    premium row is switched back to free.

    Returns:
        The new tier, or None if no such user
    """
    user = await _get_user(db, user_id)
    if not user:
        return None

    if user.subscription_tier == SUBSCRIPTION_PREMIUM:
        user.subscription_tier = SUBSCRIPTION_FREE
        user.subscription_expires_at = None
    else:
        user.subscription_tier = SUBSCRIPTION_PREMIUM
        user.subscription_expires_at = utcnow() + timedelta(days=365 * years)
    await db.commit()
    logger.info("Toggled user %s to %s", user_id, user.subscription_tier)
    return user.subscription_tier


async def has_reached_limit(db: AsyncSession, user: User, limit: Optional[int] = None) -> bool:
    """Free users may save at most `limit` prompts; premium users are never limited."""
    if is_premium(user):
        return False
    if limit is None:
        limit = settings.free_prompt_limit
    return await count_prompts_for_user(db, user.id) >= limit
