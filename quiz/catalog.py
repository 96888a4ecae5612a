import threading
from typing import Dict, Iterable, List, Optional, Tuple

from quiz.interfaces import CatalogProvider
from quiz.models import Answer, AnswerOption, Personality, Question
from utils.errors import (
    CatalogUnavailableError, PersonalityNotFoundError,
    UnknownOptionError, UnknownQuestionError
)
from utils.telemetry import get_logger

logger = get_logger(__name__)


class QuestionCatalog:
    """Read-only index over the ordered question list."""

    def __init__(self, questions: Iterable[Question]):
        self.questions: Tuple[Question, ...] = tuple(sorted(questions, key=lambda q: q.order))
        if not self.questions:
            raise CatalogUnavailableError("No questions found in database")

        self._by_id: Dict[str, Question] = {}
        for question in self.questions:
            if question.id in self._by_id:
                raise CatalogUnavailableError(f"Catalog contains question {question.id} twice")
            self._by_id[question.id] = question

    def __len__(self) -> int:
        return len(self.questions)

    def get(self, question_id: str) -> Optional[Question]:
        return self._by_id.get(question_id)

    def resolve(self, answer: Answer) -> Tuple[Question, AnswerOption]:
        """Returns the question and chosen option for an answer."""
        question = self._by_id.get(answer.question_id)
        if question is None:
            raise UnknownQuestionError(answer.question_id)
        option = question.find_option(answer.option_id)
        if option is None:
            raise UnknownOptionError(answer.question_id, answer.option_id)
        return question, option


class CatalogCache:
    """
    Process-wide cache in front of a CatalogProvider.
    The catalog is read-only, so entries live until invalidate() is called.
    Failed loads are never cached.
    """

    def __init__(self, provider: CatalogProvider):
        self.provider = provider
        self._lock = threading.Lock()
        self._catalog: Optional[QuestionCatalog] = None
        self._personalities: Optional[Dict[str, Personality]] = None

    def get_catalog(self) -> QuestionCatalog:
        with self._lock:
            if self._catalog is None:
                self._catalog = QuestionCatalog(self.provider.get_questions())
                logger.info(f"Loaded question catalog with {len(self._catalog)} questions")
            return self._catalog

    def get_personalities(self) -> List[Personality]:
        return list(self._personality_index().values())

    def get_personality(self, personality_id: str) -> Personality:
        personality = self._personality_index().get(personality_id)
        if personality is None:
            raise PersonalityNotFoundError(personality_id)
        return personality

    def invalidate(self):
        with self._lock:
            self._catalog = None
            self._personalities = None

    def _personality_index(self) -> Dict[str, Personality]:
        with self._lock:
            if self._personalities is None:
                personalities = self.provider.get_personalities()
                if not personalities:
                    raise CatalogUnavailableError("No personalities found in database")
                ordered = sorted(personalities, key=lambda p: p.id)
                self._personalities = {p.id: p for p in ordered}
            return self._personalities
