from typing import Any, Iterable, List, Set, Tuple

from pydantic import ValidationError

from quiz.catalog import QuestionCatalog
from quiz.models import Answer
from utils.errors import (
    DuplicateAnswerError, EmptySubmissionError, MalformedAnswerError,
    UnknownOptionError, UnknownQuestionError
)


def validate_answers(answers: Iterable[Any], catalog: QuestionCatalog) -> Tuple[Answer, ...]:
    """
    Validate user answers against the question catalog.

    Checks, per answer and in submission order:
    - the entry is a well-formed (question id, option id) pair
    - the question was not already answered earlier in the submission
    - the question exists in the catalog
    - the selected option belongs to that question

    Partial submissions are fine; not every question needs an answer.
    The first offending answer is reported. No side effects.

    Raises a SubmissionRejectedError subclass if validation fails.
    """
    entries = list(answers)
    if not entries:
        raise EmptySubmissionError()

    parsed: List[Answer] = []
    answered: Set[str] = set()
    for position, raw in enumerate(entries):
        try:
            answer = Answer.parse(raw)
        except ValidationError as e:
            raise MalformedAnswerError(position) from e

        if answer.question_id in answered:
            raise DuplicateAnswerError(answer.question_id)
        answered.add(answer.question_id)

        question = catalog.get(answer.question_id)
        if question is None:
            raise UnknownQuestionError(answer.question_id)

        if question.find_option(answer.option_id) is None:
            raise UnknownOptionError(answer.question_id, answer.option_id)

        parsed.append(answer)

    return tuple(parsed)
