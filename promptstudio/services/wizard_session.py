"""
Wizard progress stored on the login session row.

Answers are kept as camelCase dicts ({"questionId", "selectedOptionIds"})
in UserSession.wizard_answers, one entry per question, in step order.
"""
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from promptstudio.models import UserSession
from promptstudio.wizard.questions import list_questions, question_index
from promptstudio.wizard.scoring import WizardAnswer, parse_answers


def get_answers(session: UserSession) -> list[WizardAnswer]:
    return parse_answers(session.wizard_answers)


async def save_answer(
    db: AsyncSession,
    session: UserSession,
    question_id: str,
    option_ids: list[str],
) -> list[WizardAnswer]:
    """
    Record the answer for one question, replacing any earlier answer
    to it. Answers stay sorted by question order.
    """
    answers = [a for a in get_answers(session) if a.question_id != question_id]
    answers.append(WizardAnswer(question_id=question_id, selected_option_ids=tuple(option_ids)))
    answers.sort(key=lambda a: question_index(a.question_id))

    session.wizard_answers = [a.model_dump(by_alias=True, mode="json") for a in answers]
    await db.commit()
    return answers


async def reset_answers(db: AsyncSession, session: UserSession) -> None:
    session.wizard_answers = []
    await db.commit()


def next_question_id(answers: list[WizardAnswer]) -> Optional[str]:
    """First unanswered question, or None when the wizard is complete."""
    answered = {a.question_id for a in answers}
    for question in list_questions():
        if question.id not in answered:
            return question.id
    return None


def selected_for(answers: list[WizardAnswer], question_id: str) -> tuple[str, ...]:
    for answer in answers:
        if answer.question_id == question_id:
            return answer.selected_option_ids
    return ()
