"""
Error taxonomy for prompt generation and wizard validation.

Every error here is a caller-input error: deterministic, never retried.
Routers translate them into 400 responses.
"""
from typing import Iterable


class PromptStudioError(Exception):
    """Base class for all input errors raised by the core."""


# ---------------------------------------------------------------------------
# Prompt generation
# ---------------------------------------------------------------------------

class PromptGenerationError(PromptStudioError):
    pass


class InvalidFrameworkType(PromptGenerationError):
    def __init__(self, framework_id: str):
        self.framework_id = framework_id
        super().__init__(f"Invalid framework type: {framework_id}")


class MissingRequiredFields(PromptGenerationError):
    def __init__(self, framework_name: str, missing: Iterable[str]):
        self.framework_name = framework_name
        self.missing = list(missing)
        super().__init__(
            f"Missing required fields for {framework_name} framework: {', '.join(self.missing)}"
        )


class IterationLimitExceeded(PromptGenerationError):
    def __init__(self, field: str, limit: int):
        self.field = field
        self.limit = limit
        super().__init__(f"Number of {field} cannot exceed {limit}")


# ---------------------------------------------------------------------------
# Wizard answers
# ---------------------------------------------------------------------------

class WizardValidationError(PromptStudioError):
    pass


class NoAnswersProvided(WizardValidationError):
    def __init__(self):
        super().__init__("No answers provided")


class MissingAnswers(WizardValidationError):
    def __init__(self, question_ids: Iterable[str]):
        self.question_ids = list(question_ids)
        super().__init__(f"Missing answers for questions: {', '.join(self.question_ids)}")


class InvalidQuestionId(WizardValidationError):
    def __init__(self, question_id: str):
        self.question_id = question_id
        super().__init__(f"Invalid question ID: {question_id}")


class NoOptionSelected(WizardValidationError):
    def __init__(self, question_id: str):
        self.question_id = question_id
        super().__init__(f"No option selected for question: {question_id}")


class InvalidOptionIds(WizardValidationError):
    def __init__(self, question_id: str, option_ids: Iterable[str]):
        self.question_id = question_id
        self.option_ids = list(option_ids)
        super().__init__(
            f"Invalid option IDs for question {question_id}: {', '.join(self.option_ids)}"
        )


class TooManySelections(WizardValidationError):
    def __init__(self, question_id: str):
        self.question_id = question_id
        super().__init__(f"Question {question_id} allows only one selection")
