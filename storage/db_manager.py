from datetime import timezone
from typing import Dict, Iterable, List, Optional

from pydantic import ValidationError
from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from api.models import PersonalityRow, QuestionRow, QuizAttempt, QuizResultRow
from quiz.models import Answer, Personality, Question, Result
from utils.errors import AlreadyCompletedError, CatalogUnavailableError, StoreUnavailableError
from utils.telemetry import get_logger

logger = get_logger(__name__)


class SqlCatalogProvider:
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def get_questions(self) -> List[Question]:
        """Questions sorted by their order field."""
        db: Session = self.session_factory()
        try:
            rows = db.query(QuestionRow).order_by(QuestionRow.order).all()
            questions = [self._to_question(r) for r in rows]
        except SQLAlchemyError as e:
            raise CatalogUnavailableError(f"Could not read questions: {e}") from e
        except ValidationError as e:
            raise CatalogUnavailableError(f"Question catalog contains an invalid row: {e}") from e
        finally:
            db.close()

        if not questions:
            raise CatalogUnavailableError("No questions found in database")
        return questions

    def get_personalities(self) -> List[Personality]:
        db: Session = self.session_factory()
        try:
            rows = db.query(PersonalityRow).order_by(PersonalityRow.id).all()
            return [
                Personality(id=r.id, name=r.name, description=r.description, traits=r.traits or [])
                for r in rows
            ]
        except SQLAlchemyError as e:
            raise CatalogUnavailableError(f"Could not read personalities: {e}") from e
        except ValidationError as e:
            raise CatalogUnavailableError(f"Personality catalog contains an invalid row: {e}") from e
        finally:
            db.close()

    def seed(self, questions: Iterable[Question], personalities: Iterable[Personality]) -> Dict[str, int]:
        """Upserts catalog rows. Returns counts for reporting."""
        counts = {"personalities": 0, "questions": 0}
        db: Session = self.session_factory()
        try:
            for p in personalities:
                db.merge(PersonalityRow(id=p.id, name=p.name, description=p.description, traits=list(p.traits)))
                counts["personalities"] += 1
            for q in questions:
                db.merge(QuestionRow(
                    id=q.id,
                    text=q.text,
                    weight=q.weight,
                    order=q.order,
                    options=[o.model_dump() for o in q.options],
                ))
                counts["questions"] += 1
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise CatalogUnavailableError(f"Could not seed catalog: {e}") from e
        finally:
            db.close()
        return counts

    @staticmethod
    def _to_question(row: QuestionRow) -> Question:
        return Question(
            id=row.id,
            text=row.text,
            weight=row.weight,
            order=row.order,
            options=row.options,
        )


class SqlAttemptGate:
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def has_attempted(self, user_id: str) -> bool:
        db: Session = self.session_factory()
        try:
            return db.get(QuizAttempt, user_id) is not None
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Could not read attempt for {user_id}: {e}") from e
        finally:
            db.close()

    def claim_first_attempt(self, user_id: str) -> bool:
        db: Session = self.session_factory()
        try:
            db.add(QuizAttempt(user_id=user_id))
            db.commit()
            return True
        except IntegrityError:
            db.rollback()
            return False
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreUnavailableError(f"Could not claim attempt for {user_id}: {e}") from e
        finally:
            db.close()

    def record_result(self, user_id: str, token: str) -> None:
        self._execute(
            update(QuizAttempt).where(QuizAttempt.user_id == user_id).values(result_token=token),
            f"record result for {user_id}",
        )

    def release_claim(self, user_id: str) -> None:
        # Only claims without a recorded result can be undone.
        self._execute(
            delete(QuizAttempt).where(
                QuizAttempt.user_id == user_id,
                QuizAttempt.result_token.is_(None),
            ),
            f"release claim for {user_id}",
        )

    def get_result_token(self, user_id: str) -> Optional[str]:
        db: Session = self.session_factory()
        try:
            attempt = db.get(QuizAttempt, user_id)
            return attempt.result_token if attempt else None
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Could not read attempt for {user_id}: {e}") from e
        finally:
            db.close()

    def _execute(self, statement, action: str):
        db: Session = self.session_factory()
        try:
            db.execute(statement)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreUnavailableError(f"Could not {action}: {e}") from e
        finally:
            db.close()


class SqlResultStore:
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def store_result(self, result: Result) -> None:
        db: Session = self.session_factory()
        try:
            db.add(QuizResultRow(
                token=result.token,
                user_id=result.owner_id,
                top_personality=result.winning_category,
                scores=dict(result.scores),
                answers=[a.model_dump(by_alias=True) for a in result.answers],
                created_at=result.created_at,
            ))
            db.commit()
        except IntegrityError as e:
            db.rollback()
            if self._owner_has_result(result.owner_id):
                raise AlreadyCompletedError(result.owner_id) from e
            raise StoreUnavailableError(f"Result token {result.token} already issued") from e
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreUnavailableError(f"Could not store result {result.token}: {e}") from e
        finally:
            db.close()
        logger.debug(f"Stored result {result.token}")

    def get_result_by_token(self, token: str) -> Optional[Result]:
        return self._find(QuizResultRow.token == token)

    def get_result_by_owner(self, user_id: str) -> Optional[Result]:
        return self._find(QuizResultRow.user_id == user_id)

    def _owner_has_result(self, user_id: str) -> bool:
        return self.get_result_by_owner(user_id) is not None

    def _find(self, criterion) -> Optional[Result]:
        db: Session = self.session_factory()
        try:
            row = db.query(QuizResultRow).filter(criterion).first()
            if row:
                return self._to_result(row)
            return None
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Could not read results: {e}") from e
        except ValidationError as e:
            raise StoreUnavailableError(f"Stored result is corrupt: {e}") from e
        finally:
            db.close()

    @staticmethod
    def _to_result(row: QuizResultRow) -> Result:
        created_at = row.created_at
        # SQLite drops the offset; timestamps are always written in UTC.
        if created_at is not None and created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return Result(
            token=row.token,
            owner_id=row.user_id,
            winning_category=row.top_personality,
            scores=row.scores,
            answers=tuple(Answer.model_validate(a) for a in row.answers),
            created_at=created_at,
        )
