"""Weighted personality scoring. Pure code, integer arithmetic only."""

from typing import Iterable

from quiz.catalog import QuestionCatalog
from quiz.models import Answer, ScoreBreakdown


def calculate_scores(answers: Iterable[Answer], catalog: QuestionCatalog) -> ScoreBreakdown:
    """
    For each answer, every category in the chosen option's scoring map
    receives question.weight * points.

    Only categories that end up with at least one point appear in the
    breakdown. Answer order does not affect the totals.
    """
    scores: ScoreBreakdown = {}

    for answer in answers:
        question, option = catalog.resolve(answer)
        for personality_id, points in option.scores.items():
            contribution = question.weight * points
            if contribution == 0:
                continue
            scores[personality_id] = scores.get(personality_id, 0) + contribution

    return scores
