#!/usr/bin/env python3
"""
Re-check wizard calibration after a weight change.

Scores every single-choice answer combination and prints how often each
framework wins, the confidence spread, and how many results come with
alternatives. Pass --all to also list every combination.

Usage:
    python -m promptstudio.scripts.wizard_confidence [--all]
"""
import sys
from collections import Counter, defaultdict
from itertools import product

from promptstudio.frameworks import FRAMEWORK_IDS
from promptstudio.wizard.questions import WEIGHTS_VERSION, list_questions
from promptstudio.wizard.scoring import WizardAnswer, calculate_recommendation


def all_answer_sets():
    questions = list_questions()
    for combo in product(*(q.options for q in questions)):
        yield [
            WizardAnswer(question_id=q.id, selected_option_ids=(option.id,))
            for q, option in zip(questions, combo)
        ]


def main():
    show_all = "--all" in sys.argv

    wins: Counter = Counter()
    confidences: dict[str, list[int]] = defaultdict(list)
    with_alternatives = 0
    total = 0

    for answers in all_answer_sets():
        recommendation = calculate_recommendation(answers)
        total += 1
        wins[recommendation.framework_id] += 1
        confidences[recommendation.framework_id].append(recommendation.confidence)
        if recommendation.alternative_recommendations:
            with_alternatives += 1
        if show_all:
            picks = " ".join(a.selected_option_ids[0] for a in answers)
            print(f"{picks:<80} -> {recommendation.framework_id:<17} {recommendation.confidence:>3}%")

    print(f"Weights version {WEIGHTS_VERSION}: {total} answer combinations")
    print(f"{'framework':<18}{'wins':>6}{'share':>8}{'min':>6}{'avg':>6}{'max':>6}")
    for framework_id in FRAMEWORK_IDS:
        values = confidences.get(framework_id, [])
        if values:
            avg = sum(values) / len(values)
            print(f"{framework_id:<18}{wins[framework_id]:>6}{wins[framework_id] / total:>8.1%}"
                  f"{min(values):>6}{avg:>6.0f}{max(values):>6}")
        else:
            print(f"{framework_id:<18}{0:>6}{0:>8.1%}{'-':>6}{'-':>6}{'-':>6}")
    print(f"With alternatives: {with_alternatives} ({with_alternatives / total:.1%})")


if __name__ == "__main__":
    main()
