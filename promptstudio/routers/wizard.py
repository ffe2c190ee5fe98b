"""
Wizard router - four-step questionnaire that recommends a framework.

Progress is stored on the login session, so a reload or a back button
keeps earlier answers. The JSON endpoints under /wizard/api score a full
answer set in one call.
"""
import logging

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from promptstudio.database import get_db
from promptstudio.exceptions import MissingAnswers, NoAnswersProvided, WizardValidationError
from promptstudio.models import User, UserSession
from promptstudio.routers.auth import require_auth, require_session
from promptstudio.services import wizard_session
from promptstudio.templating import templates
from promptstudio.wizard.questions import get_question, list_questions, question_index
from promptstudio.wizard.scoring import (
    WizardAnswer,
    answer_violation,
    calculate_recommendation,
    ensure_valid_answers,
    malformed_answers_message,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/wizard", tags=["wizard"])


def _question_url(question_id: str) -> str:
    return f"/wizard/question/{question_id}"


@router.get("", response_class=HTMLResponse)
async def wizard_start(
    request: Request,
    user: User = Depends(require_auth),
    session: UserSession = Depends(require_session),
):
    answers = wizard_session.get_answers(session)
    return templates.TemplateResponse(
        request,
        "wizard/start.html",
        {
            "user": user,
            "questions": list_questions(),
            "in_progress": bool(answers),
            "next_question_id": wizard_session.next_question_id(answers),
        },
    )


def _render_question(request: Request, user: User, question, selected, error=None, status_code=200):
    questions = list_questions()
    index = question_index(question.id)
    previous_id = questions[index - 1].id if index > 0 else None
    return templates.TemplateResponse(
        request,
        "wizard/question.html",
        {
            "user": user,
            "question": question,
            "step": index + 1,
            "total_steps": len(questions),
            "selected": selected,
            "previous_id": previous_id,
            "error": error,
        },
        status_code=status_code,
    )


@router.get("/question/{question_id}", response_class=HTMLResponse)
async def wizard_question(
    request: Request,
    question_id: str,
    user: User = Depends(require_auth),
    session: UserSession = Depends(require_session),
):
    question = get_question(question_id)
    if question is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found")
    answers = wizard_session.get_answers(session)
    return _render_question(request, user, question, wizard_session.selected_for(answers, question_id))


@router.post("/question/{question_id}")
async def answer_question(
    request: Request,
    question_id: str,
    user: User = Depends(require_auth),
    session: UserSession = Depends(require_session),
    db: AsyncSession = Depends(get_db),
):
    """Store one answer, then go to the next unanswered question or the result."""
    question = get_question(question_id)
    if question is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found")

    form = await request.form()
    option_ids = [str(v) for v in form.getlist("option_ids")]
    answer = WizardAnswer(question_id=question_id, selected_option_ids=tuple(option_ids))

    error = answer_violation(answer)
    if error is not None:
        return _render_question(
            request, user, question, tuple(option_ids),
            error=str(error), status_code=status.HTTP_400_BAD_REQUEST,
        )

    answers = await wizard_session.save_answer(db, session, question_id, option_ids)
    next_id = wizard_session.next_question_id(answers)
    url = _question_url(next_id) if next_id else "/wizard/recommendation"
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/recommendation", response_class=HTMLResponse)
async def wizard_recommendation(
    request: Request,
    user: User = Depends(require_auth),
    session: UserSession = Depends(require_session),
):
    """Result page. Unfinished wizards are sent back to the first open question."""
    try:
        answers = ensure_valid_answers(wizard_session.get_answers(session))
    except NoAnswersProvided:
        return RedirectResponse(url=_question_url(list_questions()[0].id), status_code=status.HTTP_303_SEE_OTHER)
    except MissingAnswers as e:
        return RedirectResponse(url=_question_url(e.question_ids[0]), status_code=status.HTTP_303_SEE_OTHER)
    except WizardValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    recommendation = calculate_recommendation(answers)
    logger.info(
        "Wizard recommended %s (%s%%) for user %s",
        recommendation.framework_id, recommendation.confidence, user.id,
    )
    return templates.TemplateResponse(
        request,
        "wizard/recommendation.html",
        {"user": user, "recommendation": recommendation},
    )


@router.post("/reset")
async def wizard_reset(
    session: UserSession = Depends(require_session),
    db: AsyncSession = Depends(get_db),
):
    await wizard_session.reset_answers(db, session)
    return RedirectResponse(url="/wizard", status_code=status.HTTP_303_SEE_OTHER)


# ============================================
# JSON API
# ============================================

@router.get("/api/questions")
async def questions_json(user: User = Depends(require_auth)):
    return {
        "questions": [
            q.model_dump(exclude={"options": {"__all__": {"weights"}}})
            for q in list_questions()
        ]
    }


@router.post("/api/recommend")
async def recommend_json(
    answers: list[dict] = Body(..., embed=True),
    user: User = Depends(require_auth),
):
    """Validate and score a complete answer set: {"answers": [{"questionId", "selectedOptionIds"}]}."""
    try:
        parsed = ensure_valid_answers(answers)
    except WizardValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=malformed_answers_message(e))
    return calculate_recommendation(parsed).to_dict()
