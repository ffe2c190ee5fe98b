"""
Lookup data behind a wizard recommendation: explanations, reasons and
form prepopulation.

The wizard's option ids are first reduced to an answer profile with the
traits problem_type, output_type, experience, creativity and clarity.
Reason rules and prepopulate tables key off those traits.
"""
from typing import Mapping, Optional, Sequence

from promptstudio.frameworks import FieldValue

# ---------------------------------------------------------------------------
# Answer profile
# ---------------------------------------------------------------------------

# question id -> option id -> traits
PROFILE_TRAITS: dict[str, dict[str, dict[str, str]]] = {
    "q1": {
        "explore-ideas": {"problem_type": "decision", "output_type": "decision"},
        "break-down-problem": {"problem_type": "analytical", "output_type": "analysis"},
        "improve-draft": {"problem_type": "content", "output_type": "content"},
        "match-style": {"problem_type": "creative", "output_type": "creative"},
        "best-version": {"problem_type": "other", "output_type": "other"},
    },
    "q2": {
        "multiple-approaches": {"experience": "experienced"},
        "logical-steps": {"experience": "beginner"},
        "iterative-refinement": {"experience": "experienced"},
        "follow-examples": {"experience": "beginner"},
        "generate-synthesize": {"experience": "expert"},
    },
    "q3": {
        "accuracy": {"creativity": "not-creative"},
        "creativity": {"creativity": "highly-creative"},
        "tone-style": {"creativity": "creative"},
        "clarity": {"creativity": "not-creative"},
        "polish": {"creativity": "somewhat-creative"},
    },
    "q4": {
        "have-examples": {"clarity": "clear"},
        "have-draft": {"clarity": "clear"},
        "clear-problem": {"clarity": "very-clear"},
        "open-exploration": {"clarity": "unclear"},
        "need-synthesis": {"clarity": "somewhat-clear"},
    },
}


def build_answer_profile(answers: Sequence) -> dict[str, str]:
    """
    Reduce wizard answers to profile traits. Unknown questions or options
    contribute nothing; the first selected option of a question wins.
    """
    profile: dict[str, str] = {}
    for answer in answers:
        options = PROFILE_TRAITS.get(answer.question_id, {})
        for option_id in answer.selected_option_ids:
            traits = options.get(option_id)
            if traits:
                for key, value in traits.items():
                    profile.setdefault(key, value)
    return profile


def first_selection(answers: Sequence, question_id: str) -> Optional[str]:
    for answer in answers:
        if answer.question_id == question_id and answer.selected_option_ids:
            return answer.selected_option_ids[0]
    return None


# ---------------------------------------------------------------------------
# Explanations
# ---------------------------------------------------------------------------

FRAMEWORK_EXPLANATIONS = {
    "tot": (
        "Tree-of-Thought is perfect when you want to explore multiple approaches before deciding. "
        "Think of it like brainstorming with yourself. You generate different ideas, evaluate each one, "
        "and then choose the best path forward. It's especially powerful for complex decisions with "
        "many possible outcomes."
    ),
    "cot": (
        "Chain-of-Thought breaks down complex problems into clear, logical steps. Like solving a math "
        "problem by showing your work, this framework helps you (and the AI) think through each part of "
        "the problem systematically. You get structured reasoning that's easy to follow and verify."
    ),
    "self-consistency": (
        "Self-Consistency creates multiple versions of your answer and combines the best parts. Imagine "
        "having several drafts and picking the strongest elements from each. That's what this framework "
        "does. It's ideal when quality, tone, and polish matter most."
    ),
    "role": (
        "Few-Shot Prompting teaches by example. You show the AI what \"good\" looks like with 2-3 samples, "
        "and it follows that pattern. This is perfect when you need consistency across multiple outputs "
        "or want to match a specific style, tone, or format."
    ),
    "reflection": (
        "Reflection helps you improve what you already have. The AI creates a first draft, critically "
        "reviews it for weaknesses, then produces an improved version. It's like having an editor who "
        "makes your work clearer, more complete, and more polished."
    ),
}

DEFAULT_EXPLANATION = (
    "Chain-of-Thought helps you break down any problem into clear, logical steps. "
    "It's a great all-purpose approach for structured thinking."
)

DEFAULT_REASONS = (
    "Versatile framework that works well for many types of tasks",
    "Provides clear reasoning you can follow",
)


def get_framework_explanation(framework_id: str) -> str:
    return FRAMEWORK_EXPLANATIONS.get(
        framework_id, "A specialized prompting framework for your specific needs."
    )


# ---------------------------------------------------------------------------
# Why chosen
# ---------------------------------------------------------------------------

# Used when no rule below matches the profile
STATIC_REASONS = {
    "tot": (
        "You want to explore multiple approaches before deciding",
        "Your task is complex with many possible outcomes",
        "You value thoroughness and considering alternatives",
    ),
    "cot": (
        "You need step-by-step reasoning and clarity",
        "Your task requires careful analysis and planning",
        "Understanding the thinking process is important to you",
    ),
    "self-consistency": (
        "You want the highest quality final result",
        "Tone, wording, and polish are important",
        "Multiple perspectives help create better outcomes",
    ),
    "role": (
        "You have examples that show what you want",
        "Consistency and matching a specific style matters",
        "You want predictable, pattern-based results",
    ),
    "reflection": (
        "You already have content to improve",
        "Refinement and polish are your priorities",
        "You want critical feedback built into the process",
    ),
}

SELECTION_REASONS = {
    "tot": {
        "high_complexity": (
            "Your problem appears complex and could benefit from exploring multiple solution approaches",
            "Tree-of-Thought excels at evaluating different strategies side-by-side",
        ),
        "decision_type": (
            "For decision-making problems, comparing multiple reasoning paths helps identify the best choice",
            "This framework helps weigh pros and cons systematically",
        ),
        "experienced_user": (
            "Given your experience level, you can leverage the sophisticated analysis ToT provides",
            "This framework offers the depth of analysis that matches your expertise",
        ),
    },
    "cot": {
        "analytical_problem": (
            "Analytical problems benefit greatly from step-by-step reasoning",
            "Chain-of-Thought provides the logical structure your problem needs",
        ),
        "beginner_friendly": (
            "This framework is excellent for those new to prompt engineering",
            "It provides clear structure that's easy to follow and understand",
        ),
        "general_purpose": (
            "Chain-of-Thought is versatile and works well for most problem types",
            "It's a reliable choice that delivers consistent results",
        ),
    },
    "self-consistency": {
        "unclear_problem": (
            "When problem requirements are unclear, multiple reasoning paths help find the right approach",
            "This framework excels in ambiguous situations where you need confidence",
        ),
        "high_stakes": (
            "For important decisions, generating multiple solutions increases confidence",
            "The consensus approach reduces the risk of incorrect reasoning",
        ),
        "complex_decision": (
            "Complex decisions benefit from multiple independent analyses",
            "This helps identify the most reliable and consistent solution",
        ),
    },
    "role": {
        "creative_task": (
            "Creative tasks benefit from specific role definition and style examples",
            "This framework excels at generating content with particular voices or styles",
        ),
        "content_creation": (
            "Role prompting is ideal for content generation and writing tasks",
            "It helps establish the right tone and approach for your specific needs",
        ),
        "style_specific": (
            "When you need specific formatting or style, role prompting provides clear guidance",
            "Examples and role definition ensure consistent output quality",
        ),
    },
    "reflection": {
        "quality_focus": (
            "When output quality is paramount, the revision process ensures excellence",
            "Multiple iterations typically produce significantly better results",
        ),
        "creative_content": (
            "Creative work benefits greatly from initial creation followed by critical review",
            "This framework is perfect for content that needs refinement and polish",
        ),
        "experienced_user": (
            "Your experience level means you can provide effective revision criteria",
            "This sophisticated approach matches your ability to guide the process",
        ),
    },
}

MAX_REASONS = 3

EXPERIENCED = ("expert", "experienced")
CREATIVE = ("highly-creative", "creative")


def _matched_reason_keys(framework_id: str, profile: Mapping[str, str]) -> list[str]:
    problem_type = profile.get("problem_type")
    experience = profile.get("experience")
    creativity = profile.get("creativity")
    clarity = profile.get("clarity")
    output_type = profile.get("output_type")

    keys: list[str] = []
    if framework_id == "tot":
        if problem_type in ("analytical", "decision"):
            keys.append("high_complexity")
        if problem_type == "decision":
            keys.append("decision_type")
        if experience in EXPERIENCED:
            keys.append("experienced_user")
    elif framework_id == "cot":
        if problem_type == "analytical":
            keys.append("analytical_problem")
        if experience == "beginner":
            keys.append("beginner_friendly")
        if not keys:
            keys.append("general_purpose")
    elif framework_id == "self-consistency":
        if clarity in ("unclear", "somewhat-clear"):
            keys.append("unclear_problem")
        if problem_type == "decision":
            keys.append("high_stakes")
        if problem_type == "analytical":
            keys.append("complex_decision")
    elif framework_id == "role":
        if creativity in CREATIVE:
            keys.append("creative_task")
        if output_type in ("creative", "content"):
            keys.append("content_creation")
        if not keys:
            keys.append("style_specific")
    elif framework_id == "reflection":
        if creativity in CREATIVE:
            keys.append("creative_content")
        if experience in EXPERIENCED:
            keys.append("experienced_user")
        if not keys:
            keys.append("quality_focus")
    return keys


def get_why_chosen(framework_id: str, profile: Mapping[str, str]) -> list[str]:
    """
    1-3 reasons for recommending a framework, picked by rules over the
    answer profile. Falls back to the framework's static reasons.
    """
    table = SELECTION_REASONS.get(framework_id, {})
    reasons: list[str] = []
    for key in _matched_reason_keys(framework_id, profile):
        reasons.extend(table.get(key, ()))

    if not reasons:
        reasons = list(STATIC_REASONS.get(framework_id, ("This framework matches your needs best",)))

    return reasons[:MAX_REASONS]


# ---------------------------------------------------------------------------
# Prepopulate data
# ---------------------------------------------------------------------------

ITERATIONS_BY_CLARITY = {
    "very-clear": "3",
    "clear": "3",
    "somewhat-clear": "4",
    "unclear": "5",
}

ROLE_BY_PROBLEM_TYPE = {
    "tot": {
        "analytical": "expert analyst specializing in systematic problem-solving",
        "decision": "strategic decision-maker with expertise in complex scenarios",
        "creative": "innovative problem solver with creative thinking expertise",
        "content": "strategic content planner with analytical skills",
        "other": "expert problem solver",
    },
    "cot": {
        "analytical": "systematic analyst focused on logical problem-solving",
        "decision": "decision analyst with expertise in structured thinking",
        "creative": "logical thinker who approaches creative problems systematically",
        "content": "structured content strategist",
        "other": "logical thinker",
    },
    "self-consistency": {
        "analytical": "analytical expert generating multiple solution paths",
        "decision": "decision analyst creating independent reasoning approaches",
        "creative": "creative problem solver exploring diverse perspectives",
        "content": "content strategist examining multiple approaches",
        "other": "analytical reasoner",
    },
    "role": {
        "analytical": "professional analyst with expertise in clear communication",
        "decision": "strategic consultant specializing in decision frameworks",
        "creative": "creative professional with expertise in innovative thinking",
        "content": "professional content creator and strategist",
        "other": "expert professional",
    },
    "reflection": {
        "analytical": "critical analyst specializing in rigorous evaluation and improvement",
        "decision": "strategic reviewer with expertise in decision quality assessment",
        "creative": "creative director focused on iterative improvement and excellence",
        "content": "editorial expert specializing in content refinement and quality",
        "other": "critical reviewer",
    },
}

TOT_CRITERIA = {
    "analytical": ["Accuracy/Correctness", "Logic/Reasoning", "Completeness/Thoroughness"],
    "decision": ["Feasibility/Practicality", "Cost/Resource Impact", "Risk/Safety"],
    "creative": ["Innovation/Creativity", "Originality/Uniqueness", "Feasibility/Practicality"],
    "content": ["Clarity/Coherence", "Engagement/Interest", "Quality/Excellence"],
    "other": ["Accuracy/Correctness", "Feasibility/Practicality", "Completeness/Thoroughness"],
}

ROLE_TONES = {
    "highly-creative": "Innovative and engaging, uses vivid language, thinks outside conventional boundaries",
    "creative": "Professional yet creative, balances analytical rigor with innovative thinking",
    "somewhat-creative": "Clear and professional, incorporates creative elements when appropriate",
    "not-creative": "Clear, direct, and professional with focus on accuracy and practicality",
}

REFLECTION_CRITERIA = {
    "analytical": "Accuracy of analysis, clarity of reasoning, completeness of coverage, logical consistency",
    "decision": ("Thoroughness of options considered, quality of evaluation criteria, "
                 "clarity of reasoning, practical feasibility"),
    "creative": "Originality and creativity, clarity and coherence, audience engagement, practical feasibility",
    "content": "Clarity and flow, engagement and interest, accuracy and relevance, professional quality",
    "other": "Clarity and coherence, accuracy and completeness, logical consistency, practical value",
}

# framework id -> (field name, profile trait, table)
PREPOPULATE_LOOKUPS = {
    "tot": (
        ("role", "problem_type", ROLE_BY_PROBLEM_TYPE["tot"]),
        ("approaches", "clarity", ITERATIONS_BY_CLARITY),
        ("criteria", "problem_type", TOT_CRITERIA),
    ),
    "cot": (
        ("role", "problem_type", ROLE_BY_PROBLEM_TYPE["cot"]),
    ),
    "self-consistency": (
        ("role", "problem_type", ROLE_BY_PROBLEM_TYPE["self-consistency"]),
        ("versions", "clarity", ITERATIONS_BY_CLARITY),
    ),
    "role": (
        ("role", "problem_type", ROLE_BY_PROBLEM_TYPE["role"]),
        ("tone", "creativity", ROLE_TONES),
    ),
    "reflection": (
        ("role", "problem_type", ROLE_BY_PROBLEM_TYPE["reflection"]),
        ("criteria", "problem_type", REFLECTION_CRITERIA),
    ),
}

DEFAULT_ROLES = {
    "tot": "expert problem solver",
    "cot": "logical thinker",
    "self-consistency": "analytical reasoner",
    "role": "professional expert",
    "reflection": "critical editor",
}

# (q1 option, framework id) -> goal placeholders
GOAL_PLACEHOLDERS = {
    ("explore-ideas", "tot"): {
        "objective": ("Describe the decision or problem you need to solve. "
                      "Include any relevant constraints, goals, or context."),
    },
    ("break-down-problem", "cot"): {
        "problem": "Describe the problem you need to solve step-by-step. Include any relevant data or context.",
    },
    ("improve-draft", "reflection"): {
        "task": "Describe what you want to create or improve.",
        "criteria": "What should be improved? (e.g., clarity, tone, completeness, accuracy)",
    },
}


def lookup_prepopulate_data(framework_id: str, profile: Mapping[str, str]) -> dict[str, FieldValue]:
    """Field seeds from the per-framework lookup tables."""
    data: dict[str, FieldValue] = {}
    for field, trait, table in PREPOPULATE_LOOKUPS.get(framework_id, ()):
        value = table.get(profile.get(trait, ""))
        if value is not None:
            data[field] = list(value) if isinstance(value, list) else value
    return data


def default_prepopulate_data(framework_id: str, answers: Sequence) -> dict[str, FieldValue]:
    """Fallback seeds: the framework's default role plus a goal placeholder."""
    data: dict[str, FieldValue] = {}
    if framework_id in DEFAULT_ROLES:
        data["role"] = DEFAULT_ROLES[framework_id]
    goal = first_selection(answers, "q1")
    data.update(GOAL_PLACEHOLDERS.get((goal, framework_id), {}))
    return data


def get_prepopulate_data(
    framework_id: str,
    answers: Sequence,
    profile: Optional[Mapping[str, str]] = None,
) -> Optional[dict[str, FieldValue]]:
    """Best-effort form seed for the recommended framework; None when nothing applies."""
    if profile is None:
        profile = build_answer_profile(answers)
    data = lookup_prepopulate_data(framework_id, profile)
    if not data:
        data = default_prepopulate_data(framework_id, answers)
    return data or None
