"""
Wizard question bank.

Four questions that guide non-technical users to a framework. Each option
carries integer weights per framework id. The weights are tuned by
measurement: changing any of them changes recommendations, so bump
WEIGHTS_VERSION and re-run `python -m promptstudio.scripts.wizard_confidence`
together with tests/test_wizard_scoring.py.
"""
from types import MappingProxyType
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

WEIGHTS_VERSION = 2

SINGLE_CHOICE = "single-choice"
MULTIPLE_CHOICE = "multiple-choice"


class WizardOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    description: str = ""
    icon: str = ""
    weights: Mapping[str, int] = Field(default_factory=dict, validate_default=True)

    @field_validator("weights", mode="after")
    @classmethod
    def _read_only_weights(cls, value):
        return MappingProxyType(dict(value))

    @field_serializer("weights")
    def _weights_as_dict(self, value):
        return dict(value)


class WizardQuestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    description: str = ""
    type: str = SINGLE_CHOICE
    options: tuple[WizardOption, ...]

    @property
    def option_ids(self) -> tuple[str, ...]:
        return tuple(o.id for o in self.options)

    def get_option(self, option_id: str) -> Optional[WizardOption]:
        for option in self.options:
            if option.id == option_id:
                return option
        return None


WIZARD_QUESTIONS: tuple[WizardQuestion, ...] = (
    WizardQuestion(
        id="q1",
        text="What do you want to accomplish?",
        description="Choose the option that best describes your goal",
        options=(
            WizardOption(
                id="explore-ideas",
                text="Explore different ideas before deciding",
                description="I want to brainstorm multiple approaches and choose the best one",
                icon="bx-network-chart",
                weights={"tot": 5, "cot": 1, "self-consistency": 1},
            ),
            WizardOption(
                id="break-down-problem",
                text="Break down a complex problem step-by-step",
                description="I need logical reasoning and clear structure",
                icon="bx-link",
                weights={"cot": 5, "tot": 1},
            ),
            WizardOption(
                id="improve-draft",
                text="Improve something I already have",
                description="I have a draft and want to make it better",
                icon="bx-edit",
                weights={"reflection": 5},
            ),
            WizardOption(
                id="match-style",
                text="Create something that matches a specific style",
                description="I have examples and want consistent output",
                icon="bx-copy",
                weights={"role": 5},
            ),
            WizardOption(
                id="best-version",
                text="Get the best possible answer",
                description="I want multiple attempts combined into one great result",
                icon="bx-check-circle",
                weights={"self-consistency": 5, "tot": 1},
            ),
        ),
    ),
    WizardQuestion(
        id="q2",
        text="How do you prefer to work?",
        description="This helps us match you with the right thinking style",
        options=(
            WizardOption(
                id="multiple-approaches",
                text="See multiple approaches, then choose the best",
                description="I like comparing different options before deciding",
                icon="bx-scatter-chart",
                weights={"tot": 5, "self-consistency": 1},
            ),
            WizardOption(
                id="logical-steps",
                text="Follow a logical, step-by-step process",
                description="I prefer structured reasoning from start to finish",
                icon="bx-list-ol",
                weights={"cot": 5},
            ),
            WizardOption(
                id="iterative-refinement",
                text="Start rough, then refine iteratively",
                description="I like to draft first, then improve through feedback",
                icon="bx-paint",
                weights={"reflection": 5, "self-consistency": 1},
            ),
            WizardOption(
                id="follow-examples",
                text="Follow patterns and examples",
                description="I work best when I can replicate a proven approach",
                icon="bx-copy",
                weights={"role": 5},
            ),
            WizardOption(
                id="generate-synthesize",
                text="Generate several ideas, then synthesize the best parts",
                description="I like creating multiple versions and combining strengths",
                icon="bx-target-lock",
                weights={"self-consistency": 5, "tot": 1},
            ),
        ),
    ),
    WizardQuestion(
        id="q3",
        text="What matters most to you?",
        description="Select what's most important for your result",
        options=(
            WizardOption(
                id="accuracy",
                text="Accuracy and thoroughness",
                description="Getting the right answer is critical",
                icon="bx-bullseye",
                weights={"cot": 4, "tot": 2, "self-consistency": 1},
            ),
            WizardOption(
                id="creativity",
                text="Exploring creative alternatives",
                description="Want to see different possibilities",
                icon="bx-bulb",
                weights={"tot": 5, "self-consistency": 1},
            ),
            WizardOption(
                id="tone-style",
                text="Tone and style consistency",
                description="How it sounds matters as much as what it says",
                icon="bx-palette",
                weights={"role": 5, "self-consistency": 1},
            ),
            WizardOption(
                id="clarity",
                text="Clarity and easy-to-follow reasoning",
                description="I need to understand the thinking process",
                icon="bx-book-open",
                weights={"cot": 5, "reflection": 1},
            ),
            WizardOption(
                id="polish",
                text="A polished, refined final result",
                description="Quality and completeness above all",
                icon="bx-medal",
                weights={"reflection": 4, "self-consistency": 3},
            ),
        ),
    ),
    WizardQuestion(
        id="q4",
        text="What starting point do you have?",
        description="This helps us tailor the framework to your situation",
        options=(
            WizardOption(
                id="have-examples",
                text="Specific examples of desired output",
                description="I have samples that show what I want",
                icon="bx-collection",
                weights={"role": 5},
            ),
            WizardOption(
                id="have-draft",
                text="A draft that needs improvement",
                description="I've already created something that needs refinement",
                icon="bx-file",
                weights={"reflection": 4, "self-consistency": 1},
            ),
            WizardOption(
                id="clear-problem",
                text="A clear problem definition",
                description="I know exactly what needs to be solved",
                icon="bx-bullseye",
                weights={"cot": 4, "tot": 1},
            ),
            WizardOption(
                id="open-exploration",
                text="Open-ended exploration needed",
                description="I'm still figuring out the best approach",
                icon="bx-compass",
                weights={"tot": 4, "self-consistency": 1},
            ),
            WizardOption(
                id="need-synthesis",
                text="Need highest quality synthesis",
                description="I want the best possible result from multiple attempts",
                icon="bx-diamond",
                weights={"self-consistency": 4, "reflection": 1},
            ),
        ),
    ),
)

_QUESTIONS_BY_ID = {q.id: q for q in WIZARD_QUESTIONS}


def list_questions() -> tuple[WizardQuestion, ...]:
    """The question bank, in step order. Same tuple on every call."""
    return WIZARD_QUESTIONS


def get_question(question_id: str) -> Optional[WizardQuestion]:
    return _QUESTIONS_BY_ID.get(question_id)


def question_index(question_id: str) -> int:
    """Step number of a question, or -1 if unknown."""
    for index, question in enumerate(WIZARD_QUESTIONS):
        if question.id == question_id:
            return index
    return -1
