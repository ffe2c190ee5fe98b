"""Tests for wizard scoring, recommendation and answer validation."""

from itertools import product

import pytest

from conftest import answers
from promptstudio.exceptions import (
    InvalidOptionIds,
    InvalidQuestionId,
    MissingAnswers,
    NoAnswersProvided,
    NoOptionSelected,
    TooManySelections,
)
from promptstudio.wizard.data_mapping import DEFAULT_EXPLANATION, DEFAULT_REASONS
from promptstudio.wizard.questions import list_questions
from promptstudio.wizard.scoring import (
    ALTERNATIVE_CUTOFF,
    ValidationResult,
    WizardAnswer,
    calculate_recommendation,
    calculate_scores,
    ensure_valid_answers,
    percentage,
    rank_frameworks,
    recommendation_from_scores,
    validate_answers,
)

COMPLETE = dict(q1="explore-ideas", q2="multiple-approaches", q3="creativity", q4="open-exploration")


# ---------------------------------------------------------------------------
# Scores
# ---------------------------------------------------------------------------

class TestCalculateScores:
    def test_zero_initialised_in_canonical_order(self):
        scores = calculate_scores([])
        assert list(scores) == ["tot", "cot", "self-consistency", "role", "reflection"]
        assert set(scores.values()) == {0}

    def test_accumulates_weights(self):
        scores = calculate_scores(answers(q1="explore-ideas", q3="creativity"))
        assert scores == {"tot": 10, "cot": 1, "self-consistency": 2, "role": 0, "reflection": 0}

    def test_unknown_ids_score_nothing(self):
        scores = calculate_scores(answers(q1="nope", q9="explore-ideas"))
        assert set(scores.values()) == {0}

    def test_multiple_selections_add_up(self):
        scores = calculate_scores(answers(q1=("improve-draft", "match-style")))
        assert scores["reflection"] == 5
        assert scores["role"] == 5

    def test_accepts_camel_case_dicts(self):
        raw = [{"questionId": "q1", "selectedOptionIds": ["improve-draft"]}]
        assert calculate_scores(raw)["reflection"] == 5


class TestPercentage:
    @pytest.mark.parametrize("part,total,expected", [
        (1, 8, 13),   # 12.5 rounds up
        (5, 8, 63),   # 62.5 rounds up
        (1, 2, 50),
        (10, 13, 77),
        (1, 3, 33),
        (0, 5, 0),
        (3, 0, 0),
    ])
    def test_round_half_up(self, part, total, expected):
        assert percentage(part, total) == expected


# ---------------------------------------------------------------------------
# Recommendation
# ---------------------------------------------------------------------------

class TestScenarios:
    def test_explore_ideas_recommends_tot(self):
        result = calculate_recommendation(
            answers(q1="explore-ideas", q2="very-complex", q3="creativity", q4="starting-fresh")
        )
        assert result.framework_id == "tot"
        assert result.confidence == 77
        assert result.framework_name == "Tree-of-Thought (ToT)"
        assert result.alternative_recommendations is None

    def test_improve_draft_recommends_reflection(self):
        result = calculate_recommendation(
            answers(q1="improve-draft", q2="refinement", q3="polish", q4="have-draft")
        )
        assert result.framework_id == "reflection"
        assert result.confidence == 76

    def test_empty_answers_default_to_cot(self):
        result = calculate_recommendation([])
        assert result.framework_id == "cot"
        assert result.confidence == 50
        assert result.explanation == DEFAULT_EXPLANATION
        assert result.why_chosen == list(DEFAULT_REASONS)
        assert result.alternative_recommendations is None
        assert result.prepopulate_data is None

    def test_all_zero_vector_defaults(self):
        result = recommendation_from_scores({"tot": 0, "cot": 0, "self-consistency": 0, "role": 0, "reflection": 0})
        assert (result.framework_id, result.confidence) == ("cot", 50)

    def test_only_unknown_answers_default(self):
        assert calculate_recommendation(answers(q7="x")).framework_id == "cot"


class TestTieBreak:
    def test_tie_goes_to_canonical_order(self):
        result = recommendation_from_scores({"tot": 5, "cot": 5, "self-consistency": 0, "role": 0, "reflection": 0})
        assert result.framework_id == "tot"

    def test_tie_independent_of_dict_order(self):
        result = recommendation_from_scores({"reflection": 3, "role": 3, "cot": 0})
        assert result.framework_id == "role"

    def test_rank_drops_zero_scores(self):
        assert rank_frameworks({"tot": 0, "cot": 2, "role": 2}) == [("cot", 2), ("role", 2)]


class TestAlternatives:
    def test_low_confidence_gets_two_alternatives(self):
        result = calculate_recommendation(
            answers(q1="improve-draft", q2="follow-examples", q3="clarity", q4="clear-problem")
        )
        # cot 9, reflection 6, role 5, tot 1 of 21
        assert result.framework_id == "cot"
        assert result.confidence == 43
        alts = result.alternative_recommendations
        assert [(a.framework_id, a.confidence) for a in alts] == [("reflection", 29), ("role", 24)]
        assert all(a.explanation for a in alts)

    def test_exactly_cutoff_gets_alternatives(self):
        result = recommendation_from_scores({"tot": 1, "cot": 1, "self-consistency": 0, "role": 0, "reflection": 0})
        assert result.confidence == ALTERNATIVE_CUTOFF
        assert [a.framework_id for a in result.alternative_recommendations] == ["cot"]

    def test_zero_scores_never_alternatives(self):
        result = recommendation_from_scores({"tot": 1, "cot": 1, "self-consistency": 0, "role": 0, "reflection": 0})
        assert len(result.alternative_recommendations) == 1

    def test_single_nonzero_has_no_alternatives(self):
        result = calculate_recommendation(answers(q1="improve-draft"))
        assert result.confidence == 100
        assert result.alternative_recommendations is None


class TestRecommendationShape:
    def test_why_chosen_between_one_and_three(self):
        questions = list_questions()
        for combo in product(*(q.options for q in questions)):
            picked = [WizardAnswer(question_id=q.id, selected_option_ids=(o.id,)) for q, o in zip(questions, combo)]
            result = calculate_recommendation(picked)
            assert 0 <= result.confidence <= 100
            assert 1 <= len(result.why_chosen) <= 3
            assert len(result.alternative_recommendations or []) <= 2

    def test_deterministic(self):
        first = calculate_recommendation(answers(**COMPLETE))
        second = calculate_recommendation(answers(**COMPLETE))
        assert first == second

    def test_to_dict_uses_camel_case(self):
        data = calculate_recommendation(answers(q1="explore-ideas", q3="creativity")).to_dict()
        assert data["frameworkId"] == "tot"
        assert "whyChosen" in data
        assert "prepopulateData" in data
        assert "alternativeRecommendations" not in data

    def test_prepopulate_for_tot(self):
        result = calculate_recommendation(answers(q1="explore-ideas", q3="creativity"))
        assert result.prepopulate_data["role"] == "strategic decision-maker with expertise in complex scenarios"
        assert result.prepopulate_data["criteria"] == [
            "Feasibility/Practicality", "Cost/Resource Impact", "Risk/Safety",
        ]


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class TestValidateAnswers:
    def test_complete_answers_valid(self):
        result = validate_answers(answers(**COMPLETE))
        assert result.valid is True
        assert result.error is None

    def test_empty(self):
        result = validate_answers([])
        assert result.valid is False
        assert result.error == "No answers provided"

    def test_missing_questions(self):
        result = validate_answers(answers(q1="explore-ideas", q3="creativity"))
        assert result.error == "Missing answers for questions: q2, q4"

    def test_invalid_question(self):
        result = validate_answers(answers(**COMPLETE, q9="x"))
        assert result.error == "Invalid question ID: q9"

    def test_no_option_selected(self):
        result = validate_answers(answers(**dict(COMPLETE, q2=())))
        assert result.error == "No option selected for question: q2"

    def test_invalid_option(self):
        result = validate_answers(answers(**dict(COMPLETE, q3="very-complex")))
        assert result.error == "Invalid option IDs for question q3: very-complex"

    def test_too_many_selections(self):
        result = validate_answers(answers(**dict(COMPLETE, q1=("explore-ideas", "improve-draft"))))
        assert result.error == "Question q1 allows only one selection"

    def test_missing_checked_before_invalid(self):
        result = validate_answers(answers(q1="bogus"))
        assert result.error.startswith("Missing answers")

    @pytest.mark.parametrize("bad,error", [
        ([], NoAnswersProvided),
        (answers(q1="explore-ideas"), MissingAnswers),
        (answers(**COMPLETE, q5="x"), InvalidQuestionId),
        (answers(**dict(COMPLETE, q4=())), NoOptionSelected),
        (answers(**dict(COMPLETE, q4="starting-fresh")), InvalidOptionIds),
        (answers(**dict(COMPLETE, q4=("have-draft", "have-examples"))), TooManySelections),
    ])
    def test_ensure_raises_named_error(self, bad, error):
        with pytest.raises(error):
            ensure_valid_answers(bad)

    def test_ensure_returns_parsed(self):
        raw = [{"question_id": q, "selected_option_ids": [o]} for q, o in COMPLETE.items()]
        parsed = ensure_valid_answers(raw)
        assert all(isinstance(a, WizardAnswer) for a in parsed)

    def test_null_selection_counts_as_no_option(self):
        raw = [{"questionId": q, "selectedOptionIds": [o]} for q, o in COMPLETE.items() if q != "q4"]
        raw.append({"questionId": "q4", "selectedOptionIds": None})
        assert validate_answers(raw) == ValidationResult(
            valid=False, error="No option selected for question: q4"
        )
        with pytest.raises(NoOptionSelected):
            ensure_valid_answers(raw)

    def test_malformed_answer_reported_not_raised(self):
        result = validate_answers([{"selectedOptionIds": ["explore-ideas"]}])
        assert result.valid is False
        assert result.error.startswith("Malformed answers: questionId")

    def test_null_selection_scores_nothing(self):
        scores = calculate_scores([{"questionId": "q1", "selectedOptionIds": None}])
        assert set(scores.values()) == {0}
