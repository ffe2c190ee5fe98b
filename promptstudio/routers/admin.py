"""
Admin router - user management and usage analytics.
"""
import math

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from promptstudio.database import get_db
from promptstudio.models import Event, Prompt, User
from promptstudio.routers.auth import require_admin
from promptstudio.services import analytics
from promptstudio.services.subscription import get_subscription_info, toggle_premium
from promptstudio.templating import templates
from promptstudio.utils.clock import utcnow
from promptstudio.utils.constants import (
    ADMIN_USERS_PAGE_SIZE,
    ANALYTICS_DEFAULT_DAYS,
    SUBSCRIPTION_PREMIUM,
)

router = APIRouter(prefix="/admin", tags=["admin"])


async def _count(db: AsyncSession, stmt) -> int:
    result = await db.execute(stmt)
    return result.scalar() or 0


@router.get("", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    now = utcnow()
    stats = {
        "total_users": await _count(db, select(func.count(User.id))),
        "premium_users": await _count(
            db,
            select(func.count(User.id)).where(
                User.subscription_tier == SUBSCRIPTION_PREMIUM,
                User.subscription_expires_at > now,
            ),
        ),
        "total_prompts": await _count(db, select(func.count(Prompt.id))),
        "total_events": await _count(db, select(func.count(Event.id))),
    }
    return templates.TemplateResponse(
        request,
        "admin/dashboard.html",
        {"user": admin, "stats": stats},
    )


@router.get("/users", response_class=HTMLResponse)
async def users_page(
    request: Request,
    page: int = Query(1, ge=1),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    total = await _count(db, select(func.count(User.id)))
    pages = max(1, math.ceil(total / ADMIN_USERS_PAGE_SIZE))
    page = min(page, pages)

    result = await db.execute(
        select(User, func.count(Prompt.id))
        .outerjoin(Prompt, Prompt.user_id == User.id)
        .group_by(User.id)
        .order_by(User.created_at.desc(), User.id.desc())
        .offset((page - 1) * ADMIN_USERS_PAGE_SIZE)
        .limit(ADMIN_USERS_PAGE_SIZE)
    )
    rows = [
        {"user": u, "prompt_count": count, "subscription": get_subscription_info(u)}
        for u, count in result.all()
    ]
    return templates.TemplateResponse(
        request,
        "admin/users.html",
        {"user": admin, "rows": rows, "page": page, "pages": pages, "total": total},
    )


@router.post("/users/{user_id}/toggle-premium")
async def toggle_user_premium(
    user_id: int,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    new_tier = await toggle_premium(db, user_id)
    if new_tier is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return RedirectResponse(url="/admin/users", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/analytics", response_class=HTMLResponse)
async def analytics_page(
    request: Request,
    days: int = Query(ANALYTICS_DEFAULT_DAYS, ge=1, le=365),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    summary = await analytics.get_analytics(db, days)
    return templates.TemplateResponse(
        request,
        "admin/analytics.html",
        {"user": admin, "summary": summary},
    )
