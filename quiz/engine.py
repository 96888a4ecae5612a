import time
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Optional

from quiz.catalog import CatalogCache
from quiz.interfaces import AttemptGate, CatalogProvider, ResultStore, result_owner
from quiz.models import Personality, Question, Result, ResultView, SubmissionOutcome
from quiz.scoring import calculate_scores
from quiz.tiebreak import resolve_top_personality
from quiz.validation import validate_answers
from utils.errors import (
    AlreadyCompletedError, NotOwnerError, ResultNotFoundError,
    StoreUnavailableError, SubmissionRejectedError
)
from utils.telemetry import TelemetryLogger, get_logger

logger = get_logger(__name__)


def generate_token() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class QuizEngine:
    """
    Core business logic for the personality quiz.

    Validation, scoring and tie-breaking are pure; all state lives behind
    the catalog provider, attempt gate and result store passed in here.
    """

    def __init__(
        self,
        catalog: CatalogProvider,
        gate: AttemptGate,
        results: ResultStore,
        token_factory: Callable[[], str] = generate_token,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.catalog = CatalogCache(catalog)
        self.gate = gate
        self.results = results
        self.token_factory = token_factory
        self.clock = clock
        self.telemetry = TelemetryLogger("quiz.telemetry")

    def get_questions(self) -> List[Question]:
        return list(self.catalog.get_catalog().questions)

    def get_personalities(self) -> List[Personality]:
        return self.catalog.get_personalities()

    def submit(self, user_id: str, answers: Iterable[Any]) -> SubmissionOutcome:
        """
        Submit quiz answers and calculate the personality result.

        1. Reject if the user already completed the quiz
        2. Validate answers against the catalog
        3. Calculate weighted scores and resolve the winner
        4. Atomically claim the user's single attempt
        5. Store the result (releasing the claim if that fails)
        6. Record the result token against the user's attempt

        Raises AlreadyCompletedError, a SubmissionRejectedError subclass,
        CatalogUnavailableError or StoreUnavailableError.
        """
        started = time.perf_counter()

        if self.gate.has_attempted(user_id):
            logger.warning(f"Quiz resubmission refused for user {user_id}")
            raise AlreadyCompletedError(user_id)

        catalog = self.catalog.get_catalog()
        try:
            validated = validate_answers(answers, catalog)
        except SubmissionRejectedError as e:
            logger.warning(f"Quiz submission rejected for user {user_id}: {e}")
            raise

        scores = calculate_scores(validated, catalog)
        top_personality = resolve_top_personality(scores, validated, catalog)

        # Two concurrent submissions can both pass the pre-check above;
        # only one of them wins the claim.
        if not self.gate.claim_first_attempt(user_id):
            logger.warning(f"Lost attempt claim for user {user_id}")
            raise AlreadyCompletedError(user_id)

        result = Result(
            token=self.token_factory(),
            owner_id=user_id,
            winning_category=top_personality,
            scores=dict(scores),
            answers=validated,
            created_at=self.clock(),
        )

        try:
            self.results.store_result(result)
        except AlreadyCompletedError:
            raise
        except Exception as e:
            logger.error(f"Failed to store result for user {user_id}: {e}")
            self._release_claim(user_id)
            raise

        try:
            self.gate.record_result(user_id, result.token)
        except StoreUnavailableError as e:
            # The result is durable and the claim is held, so the attempt
            # is complete; fetch_mine falls back to an owner lookup.
            logger.error(f"Result {result.token} stored but token not recorded for user {user_id}: {e}")

        self.telemetry.log_event("quiz_submitted", {
            "user_id": user_id,
            "token": result.token,
            "top_personality": top_personality,
            "answer_count": len(validated),
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        })
        logger.info(f"Quiz submitted successfully by user {user_id}: {result.token}")

        return SubmissionOutcome(
            token=result.token,
            top_personality=top_personality,
            scores=dict(scores),
        )

    def fetch(self, token: str, requesting_user_id: str) -> ResultView:
        """Retrieve a result by token, enriched with the winning personality."""
        result = self.results.get_result_by_token(token)
        if result is None:
            raise ResultNotFoundError(f"Result with token {token} not found")

        if result_owner(result) != requesting_user_id:
            logger.warning(f"User {requesting_user_id} requested result {token} owned by someone else")
            raise NotOwnerError()

        return self._enrich(result)

    def fetch_mine(self, user_id: str) -> ResultView:
        """Retrieve the caller's own result without knowing the token."""
        token: Optional[str] = self.gate.get_result_token(user_id)
        if token is not None:
            return self.fetch(token, user_id)

        result = None
        if self.gate.has_attempted(user_id):
            result = self.results.get_result_by_owner(user_id)
        if result is None:
            raise ResultNotFoundError("You have not completed the quiz yet")
        return self._enrich(result)

    def _enrich(self, result: Result) -> ResultView:
        personality = self.catalog.get_personality(result.winning_category)
        return ResultView(
            id=result.token,
            top_personality=personality,
            scores=dict(result.scores),
            created_at=result.created_at,
        )

    def _release_claim(self, user_id: str):
        try:
            self.gate.release_claim(user_id)
        except StoreUnavailableError as e:
            # User is now locked out without a result.
            logger.critical(f"Could not release attempt claim for user {user_id}, operator attention needed: {e}")
            self.telemetry.log_error("claim_release_failed", f"user={user_id}")
