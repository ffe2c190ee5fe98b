"""Framework recommendation wizard."""
from promptstudio.wizard.questions import WIZARD_QUESTIONS, get_question, list_questions
from promptstudio.wizard.scoring import (
    Recommendation,
    ValidationResult,
    WizardAnswer,
    calculate_recommendation,
    calculate_scores,
    ensure_valid_answers,
    validate_answers,
)

__all__ = [
    "WIZARD_QUESTIONS",
    "Recommendation",
    "ValidationResult",
    "WizardAnswer",
    "calculate_recommendation",
    "calculate_scores",
    "ensure_valid_answers",
    "get_question",
    "list_questions",
    "validate_answers",
]
