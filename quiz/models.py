from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

MIN_WEIGHT = 1
MAX_WEIGHT = 5

# categoryId -> accumulated integer score
ScoreBreakdown = Dict[str, int]


class Personality(BaseModel):
    """Category metadata shown alongside a result. Not used for scoring."""
    id: str
    name: str
    description: str
    traits: List[str] = []


class AnswerOption(BaseModel):
    """
    A single answer choice. `scores` is sparse: categories it does not
    mention receive nothing from this option.
    """
    id: str
    text: str
    scores: Dict[str, int]

    @field_validator("scores")
    @classmethod
    def _check_points(cls, scores: Dict[str, int]) -> Dict[str, int]:
        for category, points in scores.items():
            if points < 0:
                raise ValueError(f"points for {category!r} must be non-negative, got {points}")
        if not any(points > 0 for points in scores.values()):
            raise ValueError("an option must award at least one point to some category")
        return scores


class Question(BaseModel):
    id: str
    text: str
    weight: int = Field(ge=MIN_WEIGHT, le=MAX_WEIGHT)
    order: int
    options: List[AnswerOption] = Field(min_length=1)

    @model_validator(mode="after")
    def _unique_option_ids(self) -> "Question":
        seen = set()
        for option in self.options:
            if option.id in seen:
                raise ValueError(f"duplicate option id {option.id!r} in question {self.id!r}")
            seen.add(option.id)
        return self

    def find_option(self, option_id: str) -> Optional[AnswerOption]:
        for option in self.options:
            if option.id == option_id:
                return option
        return None


class Answer(BaseModel):
    """A user's response to a single question."""
    question_id: str = Field(alias="questionId")
    option_id: str = Field(alias="optionId")

    class Config:
        frozen = True
        populate_by_name = True

    @classmethod
    def parse(cls, raw: Any) -> "Answer":
        """Accepts an Answer, a (question_id, option_id) pair or a mapping."""
        if isinstance(raw, Answer):
            return raw
        if isinstance(raw, (tuple, list)) and len(raw) == 2:
            return cls(question_id=raw[0], option_id=raw[1])
        return cls.model_validate(raw)


class Result(BaseModel):
    """Stored outcome of a user's single quiz attempt. Never mutated."""
    token: str
    owner_id: str
    winning_category: str
    scores: ScoreBreakdown
    answers: Tuple[Answer, ...]
    created_at: datetime

    class Config:
        frozen = True


class SubmissionOutcome(BaseModel):
    token: str
    top_personality: str
    scores: ScoreBreakdown


class ResultView(BaseModel):
    """A result joined with the winning personality's metadata."""
    id: str
    top_personality: Personality
    scores: ScoreBreakdown
    created_at: datetime
