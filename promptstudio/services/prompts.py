"""
Saved prompt service - persistence, display shaping and export.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from promptstudio.models import Prompt
from promptstudio.utils.constants import MAX_TITLE_LENGTH, PROMPT_TRUNCATE_LENGTH
from promptstudio.utils.filename import create_filename

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PromptDisplay:
    """A saved prompt shaped for list views."""
    id: int
    title: str
    framework_type: str
    final_prompt_text: str
    truncated_text: str
    can_export: bool
    created_at: datetime


def truncate_text(text: Optional[str], length: int = PROMPT_TRUNCATE_LENGTH) -> str:
    if not text:
        return ""
    if len(text) > length:
        return text[:length] + "..."
    return text


def process_for_display(prompts: Sequence[Prompt], is_premium: bool) -> list[PromptDisplay]:
    return [
        PromptDisplay(
            id=p.id,
            title=p.title,
            framework_type=p.framework_type,
            final_prompt_text=p.final_prompt_text,
            truncated_text=truncate_text(p.final_prompt_text),
            can_export=is_premium,
            created_at=p.created_at,
        )
        for p in prompts
    ]


def generate_export_content(prompt: Prompt) -> str:
    """Plain-text export: a markdown-ish header followed by the prompt."""
    return (
        f"# {prompt.title}\n"
        f"\n"
        f"Framework: {prompt.framework_type}\n"
        f"Created: {prompt.created_at.isoformat()}\n"
        f"\n"
        f"---\n"
        f"\n"
        f"{prompt.final_prompt_text}"
    )


def export_filename(prompt: Prompt) -> str:
    return create_filename(prompt.title, "txt")


async def create_prompt(
    db: AsyncSession,
    user_id: int,
    framework_type: str,
    title: str,
    final_prompt_text: str,
) -> Prompt:
    prompt = Prompt(
        user_id=user_id,
        framework_type=framework_type,
        title=title.strip()[:MAX_TITLE_LENGTH],
        final_prompt_text=final_prompt_text,
    )
    db.add(prompt)
    await db.commit()
    await db.refresh(prompt)
    logger.info("User %s saved prompt %s (%s)", user_id, prompt.id, framework_type)
    return prompt


async def count_prompts_for_user(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(select(func.count(Prompt.id)).where(Prompt.user_id == user_id))
    return result.scalar() or 0


async def list_prompts_for_user(db: AsyncSession, user_id: int) -> list[Prompt]:
    """Newest first."""
    result = await db.execute(
        select(Prompt)
        .where(Prompt.user_id == user_id)
        .order_by(Prompt.created_at.desc(), Prompt.id.desc())
    )
    return list(result.scalars().all())


async def get_user_prompt(db: AsyncSession, prompt_id: int, user_id: int) -> Optional[Prompt]:
    """The prompt if it exists and belongs to user_id."""
    result = await db.execute(
        select(Prompt).where(Prompt.id == prompt_id, Prompt.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def delete_prompt(db: AsyncSession, prompt_id: int, user_id: int) -> bool:
    """Delete an owned prompt. False if it does not exist or is not the user's."""
    prompt = await get_user_prompt(db, prompt_id, user_id)
    if not prompt:
        return False
    await db.delete(prompt)
    await db.commit()
    logger.info("User %s deleted prompt %s", user_id, prompt_id)
    return True
