"""
Account router - settings page and password change.
"""
from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from promptstudio.config import get_settings
from promptstudio.database import get_db
from promptstudio.models import User
from promptstudio.routers.auth import request_metadata, require_auth
from promptstudio.services import analytics
from promptstudio.services import auth as auth_service
from promptstudio.services.email import send_password_changed_notification
from promptstudio.services.prompts import count_prompts_for_user
from promptstudio.services.subscription import get_subscription_info, get_tier_display_name
from promptstudio.templating import templates
from promptstudio.utils.constants import EVENT_PASSWORD_CHANGED

router = APIRouter(prefix="/account", tags=["account"])

settings = get_settings()


async def _render_settings(request: Request, db: AsyncSession, user: User, status_code: int = 200, **messages):
    subscription = get_subscription_info(user)
    context = {
        "user": user,
        "subscription": subscription,
        "tier_display": get_tier_display_name(subscription.tier),
        "prompt_count": await count_prompts_for_user(db, user.id),
        "prompt_limit": settings.free_prompt_limit,
        "password_success": None,
        "password_error": None,
    }
    context.update(messages)
    return templates.TemplateResponse(request, "account/settings.html", context, status_code=status_code)


@router.get("", response_class=HTMLResponse)
async def settings_page(
    request: Request,
    user: User = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await _render_settings(request, db, user)


@router.post("/change-password", response_class=HTMLResponse)
async def change_password(
    request: Request,
    current_password: str = Form(""),
    new_password: str = Form(""),
    confirm_password: str = Form(""),
    user: User = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    changed, message = await auth_service.change_password(
        db, user, current_password, new_password, confirm_password
    )
    if not changed:
        return await _render_settings(
            request, db, user, status_code=status.HTTP_400_BAD_REQUEST, password_error=message
        )

    await analytics.log_event(db, EVENT_PASSWORD_CHANGED, user_id=user.id, **request_metadata(request))
    await send_password_changed_notification(user.email, user.name)
    return await _render_settings(request, db, user, password_success=message)
