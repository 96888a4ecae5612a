"""
Unit tests for the submission flow: single-attempt gate, validation before
persistence, result retrieval and ownership.
"""

from datetime import datetime, timezone

import pytest

from quiz.engine import QuizEngine
from storage.memory import InMemoryAttemptGate, InMemoryCatalog, InMemoryResultStore
from utils.errors import (
    AlreadyCompletedError, CatalogUnavailableError, DuplicateAnswerError,
    EmptySubmissionError, MalformedAnswerError, NotOwnerError, PersonalityNotFoundError,
    ResultNotFoundError, StoreUnavailableError, UnknownOptionError
)

WORKED_EXAMPLE = [("Q1", "optionA"), ("Q2", "optionA"), ("Q3", "optionA")]


class FailingResultStore(InMemoryResultStore):
    def store_result(self, result):
        raise StoreUnavailableError("database offline")


class BrokenSerializerStore(InMemoryResultStore):
    def store_result(self, result):
        raise TypeError("Object of type Answer is not JSON serializable")


class FailingRecordGate(InMemoryAttemptGate):
    def record_result(self, user_id, token):
        raise StoreUnavailableError("update timed out")


class StaleReadGate(InMemoryAttemptGate):
    """Pre-check always says 'not attempted', as a racing request would see it."""
    def has_attempted(self, user_id):
        return False


# =============================================================================
# TEST: Submission
# =============================================================================

class TestSubmit:

    def test_happy_path(self, engine, gate, result_store):
        outcome = engine.submit("user-1", WORKED_EXAMPLE)

        assert outcome.token == "token-0"
        assert outcome.top_personality == "leader"
        assert outcome.scores == {"architect": 18, "leader": 19}

        stored = result_store.get_result_by_token("token-0")
        assert stored.owner_id == "user-1"
        assert stored.winning_category == "leader"
        assert [(a.question_id, a.option_id) for a in stored.answers] == WORKED_EXAMPLE
        assert gate.get_result_token("user-1") == "token-0"

    def test_uses_injected_clock(self, memory_catalog):
        moment = datetime(2026, 1, 10, 12, 0, tzinfo=timezone.utc)
        store = InMemoryResultStore()
        engine = QuizEngine(memory_catalog, InMemoryAttemptGate(), store, clock=lambda: moment)

        outcome = engine.submit("user-1", WORKED_EXAMPLE)

        assert store.get_result_by_token(outcome.token).created_at == moment

    def test_default_tokens_are_unique(self, memory_catalog):
        engine = QuizEngine(memory_catalog, InMemoryAttemptGate(), InMemoryResultStore())
        tokens = {engine.submit(f"user-{i}", WORKED_EXAMPLE).token for i in range(20)}
        assert len(tokens) == 20

    def test_same_answers_same_verdict_for_different_users(self, engine):
        first = engine.submit("user-1", WORKED_EXAMPLE)
        second = engine.submit("user-2", list(reversed(WORKED_EXAMPLE)))

        assert first.scores == second.scores
        assert first.top_personality == second.top_personality
        assert first.token != second.token

    def test_second_submission_is_refused(self, engine, result_store):
        engine.submit("user-1", WORKED_EXAMPLE)

        with pytest.raises(AlreadyCompletedError):
            engine.submit("user-1", WORKED_EXAMPLE)
        with pytest.raises(AlreadyCompletedError):
            engine.submit("user-1", [("Q1", "optionB")])

        assert len(result_store) == 1

    def test_already_completed_checked_before_validation(self, engine):
        engine.submit("user-1", WORKED_EXAMPLE)

        # Invalid answers still report the policy violation first
        with pytest.raises(AlreadyCompletedError):
            engine.submit("user-1", [])

    @pytest.mark.parametrize("answers, error", [
        ([], EmptySubmissionError),
        ([("Q1", "optionA"), ("Q1", "optionB")], DuplicateAnswerError),
        ([("Q1", "optionZ")], UnknownOptionError),
        ([("Q1",)], MalformedAnswerError),
        ([{"questionId": "Q1"}], MalformedAnswerError),
    ])
    def test_rejection_precedes_persistence(self, engine, gate, result_store, answers, error):
        with pytest.raises(error):
            engine.submit("user-1", answers)

        assert len(result_store) == 0
        assert gate.has_attempted("user-1") is False

        # The user can still take the quiz afterwards
        assert engine.submit("user-1", WORKED_EXAMPLE).top_personality == "leader"

    def test_lost_claim_is_already_completed(self, memory_catalog):
        gate = StaleReadGate()
        store = InMemoryResultStore()
        engine = QuizEngine(memory_catalog, gate, store)
        gate.claim_first_attempt("user-1")

        with pytest.raises(AlreadyCompletedError):
            engine.submit("user-1", WORKED_EXAMPLE)
        assert len(store) == 0

    def test_store_failure_releases_claim(self, memory_catalog, gate):
        engine = QuizEngine(memory_catalog, gate, FailingResultStore())

        with pytest.raises(StoreUnavailableError):
            engine.submit("user-1", WORKED_EXAMPLE)

        assert gate.has_attempted("user-1") is False

    def test_unexpected_store_error_releases_claim(self, memory_catalog, gate):
        engine = QuizEngine(memory_catalog, gate, BrokenSerializerStore())

        with pytest.raises(TypeError):
            engine.submit("user-1", WORKED_EXAMPLE)

        assert gate.has_attempted("user-1") is False

    def test_record_failure_still_completes_attempt(self, memory_catalog):
        gate = FailingRecordGate()
        store = InMemoryResultStore()
        engine = QuizEngine(memory_catalog, gate, store)

        outcome = engine.submit("user-1", WORKED_EXAMPLE)

        assert gate.has_attempted("user-1") is True
        assert gate.get_result_token("user-1") is None
        assert engine.fetch_mine("user-1").id == outcome.token
        with pytest.raises(AlreadyCompletedError):
            engine.submit("user-1", WORKED_EXAMPLE)

    def test_empty_catalog_is_unavailable(self, sample_personalities, gate, result_store):
        engine = QuizEngine(InMemoryCatalog([], sample_personalities), gate, result_store)

        with pytest.raises(CatalogUnavailableError):
            engine.submit("user-1", WORKED_EXAMPLE)
        assert gate.has_attempted("user-1") is False


# =============================================================================
# TEST: Retrieval
# =============================================================================

class TestFetch:

    def test_fetch_enriches_with_personality(self, engine):
        outcome = engine.submit("user-1", WORKED_EXAMPLE)

        view = engine.fetch(outcome.token, "user-1")

        assert view.id == outcome.token
        assert view.top_personality.id == "leader"
        assert view.top_personality.name == "Leader"
        assert view.scores == {"architect": 18, "leader": 19}

    def test_fetch_unknown_token(self, engine):
        with pytest.raises(ResultNotFoundError):
            engine.fetch("missing", "user-1")

    def test_fetch_someone_elses_result(self, engine):
        outcome = engine.submit("user-1", WORKED_EXAMPLE)

        with pytest.raises(NotOwnerError):
            engine.fetch(outcome.token, "user-2")

    def test_fetch_mine(self, engine):
        outcome = engine.submit("user-1", WORKED_EXAMPLE)
        assert engine.fetch_mine("user-1").id == outcome.token

    def test_fetch_mine_before_completing(self, engine):
        with pytest.raises(ResultNotFoundError):
            engine.fetch_mine("user-1")

    def test_scoring_does_not_need_personality_metadata(self, sample_questions, gate, result_store):
        engine = QuizEngine(InMemoryCatalog(sample_questions, []), gate, result_store)

        outcome = engine.submit("user-1", WORKED_EXAMPLE)

        assert outcome.top_personality == "leader"
        with pytest.raises(CatalogUnavailableError):
            engine.fetch(outcome.token, "user-1")

    def test_winner_without_metadata(self, sample_questions, sample_personalities, gate, result_store):
        others = [p for p in sample_personalities if p.id != "leader"]
        engine = QuizEngine(InMemoryCatalog(sample_questions, others), gate, result_store)
        outcome = engine.submit("user-1", WORKED_EXAMPLE)

        with pytest.raises(PersonalityNotFoundError):
            engine.fetch(outcome.token, "user-1")

    def test_lists_questions_and_personalities(self, engine):
        assert [q.id for q in engine.get_questions()] == ["Q1", "Q2", "Q3"]
        assert len(engine.get_personalities()) == 4
