"""
Custom evaluation criteria - premium users can add their own entries to
the ToT criteria multi-select.
"""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from promptstudio.models import CustomCriteria
from promptstudio.utils.constants import ERROR_MESSAGES, MAX_CUSTOM_CRITERIA_LENGTH

logger = logging.getLogger(__name__)


class CriteriaError(Exception):
    """Rejected criteria input. status_code is the HTTP status routers should use."""

    def __init__(self, message: str, status_code: int = 400):
        self.status_code = status_code
        super().__init__(message)


def clean_criteria_name(name: Optional[str]) -> str:
    """
    Trimmed name, or CriteriaError if blank or too long.
    """
    messages = ERROR_MESSAGES["criteria"]
    cleaned = (name or "").strip()
    if not cleaned:
        raise CriteriaError(messages["name_required"])
    if len(cleaned) > MAX_CUSTOM_CRITERIA_LENGTH:
        raise CriteriaError(messages["too_long"])
    return cleaned


async def list_criteria(db: AsyncSession, user_id: int) -> list[CustomCriteria]:
    result = await db.execute(
        select(CustomCriteria)
        .where(CustomCriteria.user_id == user_id)
        .order_by(CustomCriteria.created_at, CustomCriteria.id)
    )
    return list(result.scalars().all())


async def add_criteria(db: AsyncSession, user_id: int, name: Optional[str]) -> CustomCriteria:
    """
    Raises:
        CriteriaError: blank/too long (400) or already present (409)
    """
    cleaned = clean_criteria_name(name)
    criteria = CustomCriteria(user_id=user_id, criteria_name=cleaned)
    db.add(criteria)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise CriteriaError(ERROR_MESSAGES["criteria"]["duplicate"], status_code=409)
    await db.refresh(criteria)
    return criteria


async def delete_criteria(db: AsyncSession, user_id: int, criteria_id: int) -> bool:
    result = await db.execute(
        select(CustomCriteria).where(
            CustomCriteria.id == criteria_id,
            CustomCriteria.user_id == user_id,
        )
    )
    criteria = result.scalar_one_or_none()
    if not criteria:
        return False
    await db.delete(criteria)
    await db.commit()
    return True
