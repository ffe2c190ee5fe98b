"""
Prompt generator - validates a field-value map against a framework and
renders the final prompt text.

Field values arrive either as a single string or as a list of strings
(multi-select criteria, older saved forms used plain strings). They are
normalised into Scalar / Items at the boundary and rendered by type.
"""
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Union

from promptstudio.exceptions import (
    InvalidFrameworkType,
    IterationLimitExceeded,
    MissingRequiredFields,
)
from promptstudio.frameworks import FieldValue, get_framework_by_id

MAX_ITERATIONS = 5
ITERATION_FIELDS = ("approaches", "versions")


@dataclass(frozen=True)
class Scalar:
    text: str

    def is_empty(self) -> bool:
        return not self.text.strip()

    def render(self) -> str:
        return self.text


@dataclass(frozen=True)
class Items:
    values: tuple[str, ...]

    def is_empty(self) -> bool:
        return not any(v.strip() for v in self.values)

    def render(self) -> str:
        """Numbered inline list: (1) a, (2) b"""
        return ", ".join(f"({i}) {value}" for i, value in enumerate(self.values, start=1))


Value = Union[Scalar, Items]


def to_value(raw: Optional[FieldValue]) -> Optional[Value]:
    """Normalise a raw form value. None stays None."""
    if raw is None:
        return None
    if isinstance(raw, (list, tuple)):
        return Items(tuple(str(v) for v in raw if str(v).strip()))
    return Scalar(str(raw))


def _present(value: Optional[Value]) -> bool:
    return value is not None and not value.is_empty()


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------

def _render_tot(v: dict[str, Value]) -> str:
    return f"""You are a {v['role'].render()}.

Your objective: {v['objective'].render()}

Please generate {v['approaches'].render()} different approaches to solve this problem. For each approach:
1. Describe the reasoning path
2. Evaluate it based on these criteria: {v['criteria'].render()}
3. Identify strengths and weaknesses

After presenting all approaches, recommend the best one and explain why."""


def _render_self_consistency(v: dict[str, Value]) -> str:
    return f"""You are a {v['role'].render()}.

Goal: {v['goal'].render()}

Please provide {v['versions'].render()} independent reasoning paths to answer this question. For each version:
1. Show your complete reasoning process
2. State your conclusion

After all versions, identify the most consistent answer and explain why it's the most reliable."""


def _render_cot(v: dict[str, Value]) -> str:
    context = f"\nContext: {v['context'].render()}" if _present(v.get("context")) else ""
    return f"""You are a {v['role'].render()}.

Problem: {v['problem'].render()}
{context}

Please solve this problem step by step:
1. Break down the problem into smaller parts
2. Solve each part systematically
3. Show your reasoning at each step
4. Arrive at a final answer
5. Verify your solution"""


def _render_role(v: dict[str, Value]) -> str:
    examples = f"\nExamples:\n{v['examples'].render()}" if _present(v.get("examples")) else ""
    return f"""You are a {v['role'].render()}.

Tone/Style: {v['tone'].render()}

Task: {v['task'].render()}
{examples}

Please complete this task following the tone and style demonstrated above."""


def _render_reflection(v: dict[str, Value]) -> str:
    return f"""You are a {v['role'].render()}.

Task: {v['task'].render()}

Step 1: Create an initial version
First, produce your initial response to the task above.

Step 2: Critical reflection
Review your initial response and identify areas for improvement based on these criteria:
{v['criteria'].render()}

Step 3: Revised version
Produce an improved version that addresses the issues identified in your reflection."""


RENDERERS: dict[str, Callable[[dict[str, Value]], str]] = {
    "tot": _render_tot,
    "self-consistency": _render_self_consistency,
    "cot": _render_cot,
    "role": _render_role,
    "reflection": _render_reflection,
}

# Display names used in validation messages
VALIDATION_NAMES = {
    "tot": "Tree-of-Thought",
    "self-consistency": "Self-Consistency",
    "cot": "Chain-of-Thought",
    "role": "Role Prompting",
    "reflection": "Reflection",
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def validate_fields(framework_id: str, fields: Mapping[str, FieldValue]) -> dict[str, Value]:
    """
    Normalise and validate fields for a framework.

    Raises:
        InvalidFrameworkType: unknown framework id
        MissingRequiredFields: a required field is absent, blank or an empty list
    """
    framework = get_framework_by_id(framework_id)
    if framework is None or framework_id not in RENDERERS:
        raise InvalidFrameworkType(framework_id)

    values: dict[str, Value] = {}
    for field in framework.fields:
        value = to_value(fields.get(field.name))
        if _present(value):
            values[field.name] = value

    missing = [name for name in framework.required_fields if name not in values]
    if missing:
        raise MissingRequiredFields(VALIDATION_NAMES[framework_id], missing)

    return values


def generate_prompt(framework_id: str, fields: Mapping[str, FieldValue]) -> str:
    """
    Render the prompt text for a framework.

    Deterministic: the same framework id and fields always give the same text.
    """
    values = validate_fields(framework_id, fields)
    return RENDERERS[framework_id](values)


validate_and_generate = generate_prompt


def check_iteration_limits(fields: Mapping[str, FieldValue], limit: int = MAX_ITERATIONS) -> None:
    """Reject approach/version counts above the limit. Non-numeric values are left to the template."""
    for name in ITERATION_FIELDS:
        raw = fields.get(name)
        if not isinstance(raw, str):
            continue
        try:
            count = int(raw.strip())
        except ValueError:
            continue
        if count > limit:
            raise IterationLimitExceeded(name, limit)
