"""
Frameworks router - catalog list, framework form and prompt generation.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from promptstudio.database import get_db
from promptstudio.exceptions import PromptStudioError, WizardValidationError
from promptstudio.frameworks import (
    Framework,
    FieldValue,
    get_framework_by_id,
    get_template,
    list_frameworks,
)
from promptstudio.models import User
from promptstudio.prompt_generator import check_iteration_limits, generate_prompt
from promptstudio.routers.auth import request_metadata, require_auth
from promptstudio.services import analytics
from promptstudio.services import custom_criteria as criteria_service
from promptstudio.services.subscription import get_subscription_info
from promptstudio.services.wizard_session import get_answers
from promptstudio.templating import templates
from promptstudio.utils.constants import (
    ERROR_MESSAGES,
    EVENT_FRAMEWORK_VIEW,
    EVENT_PROMPT_GENERATE,
)
from promptstudio.wizard.scoring import calculate_recommendation, ensure_valid_answers

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/frameworks", tags=["frameworks"])


def get_framework_or_404(framework_id: str) -> Framework:
    framework = get_framework_by_id(framework_id)
    if framework is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=ERROR_MESSAGES["frameworks"]["not_found"]
        )
    return framework


def wizard_prefill(request: Request, framework_id: str) -> dict[str, FieldValue]:
    """Prepopulate data from a finished wizard, if it recommended this framework."""
    session = getattr(request.state, "user_session", None)
    if session is None:
        return {}
    try:
        answers = ensure_valid_answers(get_answers(session))
    except WizardValidationError:
        return {}
    recommendation = calculate_recommendation(answers)
    if recommendation.framework_id != framework_id:
        return {}
    return dict(recommendation.prepopulate_data or {})


async def criteria_options(db: AsyncSession, user: User, framework: Framework) -> dict[str, list[str]]:
    """Choices per multi-select field; premium users also get their own criteria."""
    options: dict[str, list[str]] = {}
    custom: list[str] = []
    if get_subscription_info(user).is_premium:
        custom = [c.criteria_name for c in await criteria_service.list_criteria(db, user.id)]
    for field in framework.fields:
        if field.type == "multi-select-criteria":
            options[field.name] = list(field.options) + [c for c in custom if c not in field.options]
    return options


async def read_fields(request: Request, framework: Framework) -> dict[str, FieldValue]:
    """Pull the framework's fields out of a submitted form."""
    form = await request.form()
    fields: dict[str, FieldValue] = {}
    for field in framework.fields:
        if field.type == "multi-select-criteria":
            fields[field.name] = [str(v) for v in form.getlist(field.name) if str(v).strip()]
        elif field.name in form:
            fields[field.name] = str(form[field.name])
    return fields


@router.get("", response_class=HTMLResponse)
async def frameworks_page(
    request: Request,
    user: User = Depends(require_auth),
):
    return templates.TemplateResponse(
        request,
        "frameworks/list.html",
        {"user": user, "frameworks": list_frameworks()},
    )


@router.get("/{framework_id}", response_class=HTMLResponse)
async def framework_form(
    request: Request,
    framework_id: str,
    template: Optional[str] = None,
    from_wizard: bool = False,
    user: User = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    """
    Framework form. Values come from field defaults, then a chosen
    template, then the wizard recommendation (?from_wizard=1).
    """
    framework = get_framework_or_404(framework_id)

    values: dict[str, FieldValue] = {
        f.name: f.default_value for f in framework.fields if f.default_value is not None
    }
    if template:
        chosen = get_template(framework_id, template)
        if chosen is not None:
            values.update(chosen.fields)
    if from_wizard:
        values.update(wizard_prefill(request, framework_id))

    await analytics.log_event(
        db,
        EVENT_FRAMEWORK_VIEW,
        user_id=user.id,
        metadata={"frameworkId": framework.id, "frameworkName": framework.name},
        **request_metadata(request),
    )

    return templates.TemplateResponse(
        request,
        "frameworks/form.html",
        {
            "user": user,
            "framework": framework,
            "values": values,
            "options": await criteria_options(db, user, framework),
        },
    )


@router.post("/{framework_id}/generate", response_class=HTMLResponse)
async def generate(
    request: Request,
    framework_id: str,
    user: User = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    """HTMX partial: rendered prompt preview, or the input error with a 400."""
    framework = get_framework_or_404(framework_id)
    fields = await read_fields(request, framework)

    try:
        check_iteration_limits(fields)
        prompt_text = generate_prompt(framework.id, fields)
    except PromptStudioError as e:
        return templates.TemplateResponse(
            request,
            "partials/prompt_error.html",
            {"error": str(e)},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    await analytics.log_event(
        db,
        EVENT_PROMPT_GENERATE,
        user_id=user.id,
        metadata={"frameworkId": framework.id, "frameworkName": framework.name},
        **request_metadata(request),
    )

    return templates.TemplateResponse(
        request,
        "partials/prompt_preview.html",
        {"framework": framework, "prompt_text": prompt_text},
    )
