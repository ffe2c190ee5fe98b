"""
Framework catalog - the five prompt-construction strategies.

The catalog is built once at import and never mutated. Lookups return None
for unknown ids; callers treat that as a 404.
"""
from types import MappingProxyType
from typing import Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

from promptstudio.framework_templates import FRAMEWORK_TEMPLATES


FieldValue = Union[str, list[str]]

# Canonical framework order. Ties in wizard scoring resolve to the earlier id.
FRAMEWORK_IDS = ("tot", "cot", "self-consistency", "role", "reflection")

DEFAULT_EVALUATION_CRITERIA = (
    "Accuracy/Correctness",
    "Clarity/Coherence",
    "Feasibility/Practicality",
    "Efficiency/Performance",
    "Completeness/Thoroughness",
    "Innovation/Creativity",
    "Risk/Safety",
    "Cost/Resource Impact",
)

FIELD_TYPES = ("text", "textarea", "number", "multi-select-criteria")


class FrameworkField(BaseModel):
    """One input on a framework form."""
    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    type: str = "text"
    placeholder: str = ""
    required: bool = False
    default_value: Optional[FieldValue] = None
    options: tuple[str, ...] = ()


class FrameworkTemplate(BaseModel):
    """Ready-made field values for a common use case."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    category: str
    # Read-only view; list values are stored as tuples.
    fields: Mapping[str, Union[str, tuple[str, ...]]]

    @field_validator("fields", mode="after")
    @classmethod
    def _read_only_fields(cls, value):
        return MappingProxyType(dict(value))

    @field_serializer("fields")
    def _fields_as_dict(self, value):
        return {k: list(v) if isinstance(v, tuple) else v for k, v in value.items()}


class Framework(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    icon: str
    fields: tuple[FrameworkField, ...]
    templates: tuple[FrameworkTemplate, ...] = ()

    @property
    def required_fields(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields if f.required)

    def get_field(self, name: str) -> Optional[FrameworkField]:
        for field in self.fields:
            if field.name == name:
                return field
        return None


def _templates(framework_id: str) -> tuple[FrameworkTemplate, ...]:
    return tuple(FrameworkTemplate(**t) for t in FRAMEWORK_TEMPLATES.get(framework_id, []))


FRAMEWORKS: tuple[Framework, ...] = (
    Framework(
        id="tot",
        name="Tree-of-Thought (ToT)",
        description="Explore multiple reasoning paths and evaluate approaches to find the best solution.",
        icon="bx-network-chart",
        fields=(
            FrameworkField(name="role", label="Role", type="text",
                           placeholder="e.g., expert problem solver", required=True),
            FrameworkField(name="objective", label="Objective", type="textarea",
                           placeholder="What problem needs to be solved?", required=True),
            FrameworkField(name="approaches", label="Number of Approaches", type="number",
                           placeholder="3", required=True, default_value="3"),
            FrameworkField(name="criteria", label="Evaluation Criteria", type="multi-select-criteria",
                           placeholder="How should approaches be evaluated?", required=True,
                           options=DEFAULT_EVALUATION_CRITERIA),
        ),
        templates=_templates("tot"),
    ),
    Framework(
        id="self-consistency",
        name="Self-Consistency",
        description="Generate multiple reasoning paths and select the most consistent answer.",
        icon="bx-check-double",
        fields=(
            FrameworkField(name="role", label="Role", type="text",
                           placeholder="e.g., analytical reasoner", required=True),
            FrameworkField(name="goal", label="Goal", type="textarea",
                           placeholder="What question needs to be answered?", required=True),
            FrameworkField(name="versions", label="Number of Versions", type="number",
                           placeholder="3", required=True, default_value="3"),
        ),
        templates=_templates("self-consistency"),
    ),
    Framework(
        id="cot",
        name="Chain-of-Thought (CoT)",
        description="Break down complex problems into step-by-step reasoning.",
        icon="bx-link",
        fields=(
            FrameworkField(name="role", label="Role", type="text",
                           placeholder="e.g., logical thinker", required=True),
            FrameworkField(name="problem", label="Problem", type="textarea",
                           placeholder="Describe the problem to solve", required=True),
            FrameworkField(name="context", label="Context", type="textarea",
                           placeholder="Any relevant background information"),
        ),
        templates=_templates("cot"),
    ),
    Framework(
        id="role",
        name="Few-Shot / Role Prompting",
        description="Provide examples and define a specific role for the AI to embody.",
        icon="bx-code-block",
        fields=(
            FrameworkField(name="role", label="Role", type="text",
                           placeholder="e.g., professional copywriter", required=True),
            FrameworkField(name="tone", label="Tone Sample", type="textarea",
                           placeholder="Example of desired tone/style", required=True),
            FrameworkField(name="task", label="Task", type="textarea",
                           placeholder="What should be produced?", required=True),
            FrameworkField(name="examples", label="Examples", type="textarea",
                           placeholder="Provide 2-3 examples"),
        ),
        templates=_templates("role"),
    ),
    Framework(
        id="reflection",
        name="Reflection / Revision",
        description="Generate an initial response, then critically evaluate and improve it.",
        icon="bx-edit",
        fields=(
            FrameworkField(name="role", label="Role", type="text",
                           placeholder="e.g., critical editor", required=True),
            FrameworkField(name="task", label="Task", type="textarea",
                           placeholder="What needs to be created?", required=True),
            FrameworkField(name="criteria", label="Revision Criteria", type="textarea",
                           placeholder="What should be improved?", required=True),
        ),
        templates=_templates("reflection"),
    ),
)

_FRAMEWORKS_BY_ID = {f.id: f for f in FRAMEWORKS}


def list_frameworks() -> tuple[Framework, ...]:
    """All frameworks in catalog order."""
    return FRAMEWORKS


def get_framework_by_id(framework_id: str) -> Optional[Framework]:
    """Look up a framework; None if the id is unknown."""
    return _FRAMEWORKS_BY_ID.get(framework_id)


def get_framework_name(framework_id: str) -> str:
    framework = get_framework_by_id(framework_id)
    return framework.name if framework else framework_id


def get_templates(framework_id: str) -> tuple[FrameworkTemplate, ...]:
    framework = get_framework_by_id(framework_id)
    return framework.templates if framework else ()


def get_template(framework_id: str, template_id: str) -> Optional[FrameworkTemplate]:
    for template in get_templates(framework_id):
        if template.id == template_id:
            return template
    return None
