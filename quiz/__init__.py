# Personality quiz core: answer validation, weighted scoring, tie-break resolution

from quiz.catalog import CatalogCache, QuestionCatalog
from quiz.engine import QuizEngine
from quiz.models import (
    Answer, AnswerOption, Personality, Question, Result,
    ResultView, ScoreBreakdown, SubmissionOutcome
)
from quiz.scoring import calculate_scores
from quiz.tiebreak import max_contributions, resolve_top_personality
from quiz.validation import validate_answers

__all__ = [
    "Answer",
    "AnswerOption",
    "CatalogCache",
    "Personality",
    "Question",
    "QuestionCatalog",
    "QuizEngine",
    "Result",
    "ResultView",
    "ScoreBreakdown",
    "SubmissionOutcome",
    "calculate_scores",
    "max_contributions",
    "resolve_top_personality",
    "validate_answers",
]
