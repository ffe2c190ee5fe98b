"""
Saved prompts router - list, view, save, delete and export.
"""
from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from promptstudio.config import get_settings
from promptstudio.database import get_db
from promptstudio.frameworks import get_framework_by_id
from promptstudio.models import Prompt, User
from promptstudio.routers.auth import request_metadata, require_auth
from promptstudio.services import analytics
from promptstudio.services import prompts as prompt_service
from promptstudio.services.subscription import get_subscription_info, has_reached_limit
from promptstudio.templating import templates
from promptstudio.utils.constants import ERROR_MESSAGES, EVENT_PROMPT_SAVE

router = APIRouter(prefix="/prompts", tags=["prompts"])

settings = get_settings()


def is_htmx(request: Request) -> bool:
    return request.headers.get("HX-Request") == "true"


async def get_prompt_or_404(db: AsyncSession, prompt_id: int, user: User) -> Prompt:
    prompt = await prompt_service.get_user_prompt(db, prompt_id, user.id)
    if prompt is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=ERROR_MESSAGES["prompts"]["not_found"]
        )
    return prompt


@router.get("", response_class=HTMLResponse)
async def prompts_page(
    request: Request,
    user: User = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    subscription = get_subscription_info(user)
    prompts = await prompt_service.list_prompts_for_user(db, user.id)
    return templates.TemplateResponse(
        request,
        "prompts/list.html",
        {
            "user": user,
            "subscription": subscription,
            "prompts": prompt_service.process_for_display(prompts, subscription.is_premium),
            "prompt_count": len(prompts),
            "prompt_limit": settings.free_prompt_limit,
        },
    )


@router.post("", response_class=HTMLResponse)
async def save_prompt(
    request: Request,
    framework_type: str = Form(""),
    title: str = Form(""),
    final_prompt_text: str = Form(""),
    user: User = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    """
    HTMX partial: save a generated prompt.
    Free users past the limit get the upgrade notice with a 403.
    """
    if get_framework_by_id(framework_type) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ERROR_MESSAGES["frameworks"]["not_found"]
        )
    if not title.strip() or not final_prompt_text.strip():
        return templates.TemplateResponse(
            request,
            "partials/prompt_error.html",
            {"error": ERROR_MESSAGES["prompts"]["title_required"]},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    if await has_reached_limit(db, user, settings.free_prompt_limit):
        return templates.TemplateResponse(
            request,
            "partials/limit_reached.html",
            {"message": ERROR_MESSAGES["prompts"]["limit_reached"].format(limit=settings.free_prompt_limit)},
            status_code=status.HTTP_403_FORBIDDEN,
        )

    prompt = await prompt_service.create_prompt(db, user.id, framework_type, title, final_prompt_text)

    await analytics.log_event(
        db,
        EVENT_PROMPT_SAVE,
        user_id=user.id,
        metadata={"promptId": prompt.id, "frameworkType": framework_type},
        **request_metadata(request),
    )

    return templates.TemplateResponse(
        request,
        "partials/prompt_saved.html",
        {"prompt": prompt},
        status_code=status.HTTP_201_CREATED,
    )


@router.get("/{prompt_id}", response_class=HTMLResponse)
async def prompt_detail(
    request: Request,
    prompt_id: int,
    user: User = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    prompt = await get_prompt_or_404(db, prompt_id, user)
    return templates.TemplateResponse(
        request,
        "prompts/detail.html",
        {
            "user": user,
            "prompt": prompt,
            "can_export": get_subscription_info(user).is_premium,
        },
    )


@router.delete("/{prompt_id}")
@router.post("/{prompt_id}/delete")
async def delete_prompt(
    request: Request,
    prompt_id: int,
    user: User = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    """HTMX gets an empty 200 (row swapped out); plain forms go back to the list."""
    deleted = await prompt_service.delete_prompt(db, prompt_id, user.id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=ERROR_MESSAGES["prompts"]["not_found"]
        )
    if is_htmx(request) or request.method == "DELETE":
        return Response(status_code=status.HTTP_200_OK)
    return RedirectResponse(url="/prompts", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/{prompt_id}/export")
async def export_prompt(
    prompt_id: int,
    user: User = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    """Download a prompt as a .txt file (premium only)."""
    if not get_subscription_info(user).is_premium:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=ERROR_MESSAGES["prompts"]["export_premium_only"]
        )
    prompt = await get_prompt_or_404(db, prompt_id, user)
    filename = prompt_service.export_filename(prompt)
    return PlainTextResponse(
        prompt_service.generate_export_content(prompt),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
