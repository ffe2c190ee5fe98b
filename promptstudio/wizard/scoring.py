"""
Wizard scoring engine.

Turns a set of wizard answers into a framework recommendation:

    1. sum option weights into a ScoreVector (every framework, zero-initialised)
    2. stable sort descending and drop zero scores
    3. nothing left -> default recommendation (Chain-of-Thought, 50%)
    4. confidence = top score / total score, rounded half-up
    5. low confidence -> up to two runner-up alternatives
    6. attach explanation, reasons and prepopulate data

Scoring itself tolerates unknown question or option ids (they score
nothing). Use validate_answers / ensure_valid_answers first when the input
comes from a user.
"""
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from promptstudio.exceptions import (
    InvalidOptionIds,
    InvalidQuestionId,
    MissingAnswers,
    NoAnswersProvided,
    NoOptionSelected,
    TooManySelections,
    WizardValidationError,
)
from promptstudio.frameworks import FRAMEWORK_IDS, FieldValue, get_framework_name
from promptstudio.wizard.data_mapping import (
    DEFAULT_EXPLANATION,
    DEFAULT_REASONS,
    build_answer_profile,
    get_framework_explanation,
    get_prepopulate_data,
    get_why_chosen,
)
from promptstudio.wizard.questions import SINGLE_CHOICE, get_question, list_questions

ALTERNATIVE_CUTOFF = 50
MAX_ALTERNATIVES = 2
DEFAULT_FRAMEWORK_ID = "cot"
DEFAULT_CONFIDENCE = 50

ScoreVector = dict[str, int]


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

class WizardAnswer(BaseModel):
    """The option(s) chosen for one question. Accepts camelCase input."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    question_id: str = Field(alias="questionId")
    selected_option_ids: tuple[str, ...] = Field(default=(), alias="selectedOptionIds")

    @field_validator("selected_option_ids", mode="before")
    @classmethod
    def _none_is_no_selection(cls, value):
        return () if value is None else value


class ValidationResult(BaseModel):
    valid: bool
    error: Optional[str] = None


class AlternativeRecommendation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    framework_id: str = Field(alias="frameworkId")
    framework_name: str = Field(alias="frameworkName")
    confidence: int
    explanation: str


class Recommendation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    framework_id: str = Field(alias="frameworkId")
    framework_name: str = Field(alias="frameworkName")
    confidence: int
    explanation: str
    why_chosen: list[str] = Field(alias="whyChosen")
    alternative_recommendations: Optional[list[AlternativeRecommendation]] = Field(
        default=None, alias="alternativeRecommendations"
    )
    prepopulate_data: Optional[dict[str, FieldValue]] = Field(default=None, alias="prepopulateData")

    def to_dict(self) -> dict[str, Any]:
        """camelCase dict for JSON responses; unset optional parts are left out."""
        return self.model_dump(by_alias=True, exclude_none=True)


AnswerInput = Union[WizardAnswer, Mapping[str, Any]]


def parse_answers(raw: Iterable[AnswerInput]) -> list[WizardAnswer]:
    """Coerce dicts (snake_case or camelCase) into WizardAnswer objects."""
    answers = []
    for item in raw:
        if isinstance(item, WizardAnswer):
            answers.append(item)
        else:
            answers.append(WizardAnswer.model_validate(item))
    return answers


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def malformed_answers_message(error: ValidationError) -> str:
    """First pydantic complaint about an answer payload, as one line."""
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"Malformed answers: {location}: {first['msg']}"


def answer_violation(answer: WizardAnswer) -> Optional[WizardValidationError]:
    """Problem with a single answer, ignoring whether the other questions are answered."""
    question = get_question(answer.question_id)
    if question is None:
        return InvalidQuestionId(answer.question_id)

    if not answer.selected_option_ids:
        return NoOptionSelected(answer.question_id)

    invalid = [o for o in answer.selected_option_ids if o not in question.option_ids]
    if invalid:
        return InvalidOptionIds(answer.question_id, invalid)

    if question.type == SINGLE_CHOICE and len(answer.selected_option_ids) > 1:
        return TooManySelections(answer.question_id)

    return None


def _first_violation(answers: Sequence[WizardAnswer]) -> Optional[WizardValidationError]:
    if not answers:
        return NoAnswersProvided()

    answered = {a.question_id for a in answers}
    missing = [q.id for q in list_questions() if q.id not in answered]
    if missing:
        return MissingAnswers(missing)

    for answer in answers:
        error = answer_violation(answer)
        if error is not None:
            return error

    return None


def validate_answers(answers: Iterable[AnswerInput]) -> ValidationResult:
    """Report the first problem with a set of answers, or valid=True. Never raises."""
    try:
        parsed = parse_answers(answers)
    except ValidationError as e:
        return ValidationResult(valid=False, error=malformed_answers_message(e))

    error = _first_violation(parsed)
    if error is None:
        return ValidationResult(valid=True)
    return ValidationResult(valid=False, error=str(error))


def ensure_valid_answers(answers: Iterable[AnswerInput]) -> list[WizardAnswer]:
    """
    Same checks as validate_answers, raising the matching
    WizardValidationError subclass. Returns the parsed answers.
    """
    parsed = parse_answers(answers)
    error = _first_violation(parsed)
    if error is not None:
        raise error
    return parsed


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

def empty_score_vector() -> ScoreVector:
    return {framework_id: 0 for framework_id in FRAMEWORK_IDS}


def calculate_scores(answers: Iterable[AnswerInput]) -> ScoreVector:
    scores = empty_score_vector()
    for answer in parse_answers(answers):
        question = get_question(answer.question_id)
        if question is None:
            continue
        for option_id in answer.selected_option_ids:
            option = question.get_option(option_id)
            if option is None:
                continue
            for framework_id, weight in option.weights.items():
                scores[framework_id] = scores.get(framework_id, 0) + weight
    return scores


def rank_frameworks(scores: Mapping[str, int]) -> list[tuple[str, int]]:
    """Non-zero scores, highest first. Ties go to the earlier id in FRAMEWORK_IDS."""
    order = {framework_id: i for i, framework_id in enumerate(FRAMEWORK_IDS)}
    ranked = sorted(scores.items(), key=lambda item: (-item[1], order.get(item[0], len(order))))
    return [(framework_id, score) for framework_id, score in ranked if score > 0]


def percentage(part: int, total: int) -> int:
    """part/total as a whole percentage, halves rounded up."""
    if total <= 0:
        return 0
    return (part * 200 + total) // (total * 2)


def default_recommendation() -> Recommendation:
    return Recommendation(
        framework_id=DEFAULT_FRAMEWORK_ID,
        framework_name=get_framework_name(DEFAULT_FRAMEWORK_ID),
        confidence=DEFAULT_CONFIDENCE,
        explanation=DEFAULT_EXPLANATION,
        why_chosen=list(DEFAULT_REASONS),
    )


def recommendation_from_scores(
    scores: Mapping[str, int],
    answers: Sequence[WizardAnswer] = (),
) -> Recommendation:
    ranked = rank_frameworks(scores)
    if not ranked:
        return default_recommendation()

    total = sum(scores.values())
    top_id, top_score = ranked[0]
    confidence = percentage(top_score, total)

    alternatives = None
    if confidence <= ALTERNATIVE_CUTOFF and len(ranked) > 1:
        alternatives = [
            AlternativeRecommendation(
                framework_id=framework_id,
                framework_name=get_framework_name(framework_id),
                confidence=percentage(score, total),
                explanation=get_framework_explanation(framework_id),
            )
            for framework_id, score in ranked[1:1 + MAX_ALTERNATIVES]
        ]

    profile = build_answer_profile(answers)

    return Recommendation(
        framework_id=top_id,
        framework_name=get_framework_name(top_id),
        confidence=confidence,
        explanation=get_framework_explanation(top_id),
        why_chosen=get_why_chosen(top_id, profile),
        alternative_recommendations=alternatives,
        prepopulate_data=get_prepopulate_data(top_id, answers, profile),
    )


def calculate_recommendation(answers: Iterable[AnswerInput]) -> Recommendation:
    """Score the answers and build a recommendation. Deterministic."""
    parsed = parse_answers(answers)
    return recommendation_from_scores(calculate_scores(parsed), parsed)
