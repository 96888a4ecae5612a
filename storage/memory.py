import threading
from typing import Dict, Iterable, List, Optional

from quiz.models import Personality, Question, Result
from utils.errors import AlreadyCompletedError, CatalogUnavailableError, StoreUnavailableError


class InMemoryCatalog:
    def __init__(self, questions: Iterable[Question] = (), personalities: Iterable[Personality] = ()):
        self.questions: List[Question] = list(questions)
        self.personalities: List[Personality] = list(personalities)

    def get_questions(self) -> List[Question]:
        if not self.questions:
            raise CatalogUnavailableError("No questions found in database")
        return sorted(self.questions, key=lambda q: q.order)

    def get_personalities(self) -> List[Personality]:
        return sorted(self.personalities, key=lambda p: p.id)


class InMemoryAttemptGate:
    """Lock-protected check-and-set, so claims are atomic across worker threads."""

    def __init__(self):
        self._lock = threading.Lock()
        # user_id -> result token (None while the claim has no result yet)
        self._attempts: Dict[str, Optional[str]] = {}

    def has_attempted(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._attempts

    def claim_first_attempt(self, user_id: str) -> bool:
        with self._lock:
            if user_id in self._attempts:
                return False
            self._attempts[user_id] = None
            return True

    def record_result(self, user_id: str, token: str) -> None:
        with self._lock:
            self._attempts[user_id] = token

    def release_claim(self, user_id: str) -> None:
        with self._lock:
            if user_id in self._attempts and self._attempts[user_id] is None:
                del self._attempts[user_id]

    def get_result_token(self, user_id: str) -> Optional[str]:
        with self._lock:
            return self._attempts.get(user_id)


class InMemoryResultStore:
    """Append-only: results can be added and read, never replaced."""

    def __init__(self):
        self._lock = threading.Lock()
        self._by_token: Dict[str, Result] = {}
        self._token_by_owner: Dict[str, str] = {}

    def store_result(self, result: Result) -> None:
        with self._lock:
            if result.owner_id in self._token_by_owner:
                raise AlreadyCompletedError(result.owner_id)
            if result.token in self._by_token:
                raise StoreUnavailableError(f"Result token {result.token} already issued")
            self._by_token[result.token] = result
            self._token_by_owner[result.owner_id] = result.token

    def get_result_by_token(self, token: str) -> Optional[Result]:
        with self._lock:
            return self._by_token.get(token)

    def get_result_by_owner(self, user_id: str) -> Optional[Result]:
        with self._lock:
            token = self._token_by_owner.get(user_id)
            return self._by_token.get(token) if token else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_token)
