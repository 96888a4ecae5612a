"""
Narrow interfaces the quiz engine needs from its collaborators.

Implementations live in storage/ (SQL and in-memory). The engine only
ever talks to these protocols, so scoring can be exercised with
in-memory fixtures.
"""

from typing import List, Optional, Protocol

from quiz.models import Personality, Question, Result


class CatalogProvider(Protocol):
    def get_questions(self) -> List[Question]:
        """Questions ordered by `order`. Raises CatalogUnavailableError if empty or unreachable."""
        ...

    def get_personalities(self) -> List[Personality]:
        ...


class AttemptGate(Protocol):
    """Per-user single-attempt flag."""

    def has_attempted(self, user_id: str) -> bool:
        ...

    def claim_first_attempt(self, user_id: str) -> bool:
        """
        Atomic check-and-set. Returns True only for the one call that
        flips the user's flag; every other call returns False.
        """
        ...

    def record_result(self, user_id: str, token: str) -> None:
        ...

    def release_claim(self, user_id: str) -> None:
        """Undo a claim that has no result recorded against it."""
        ...

    def get_result_token(self, user_id: str) -> Optional[str]:
        ...


class ResultStore(Protocol):
    """Append-only store of results keyed by token."""

    def store_result(self, result: Result) -> None:
        ...

    def get_result_by_token(self, token: str) -> Optional[Result]:
        ...

    def get_result_by_owner(self, user_id: str) -> Optional[Result]:
        ...


def result_owner(result: Result) -> str:
    return result.owner_id
