from sqlalchemy import Column, Integer, String, Text, DateTime, JSON
from sqlalchemy.sql import func
from api.database import Base

# =============================================================================
# CATALOG: personalities and weighted questions (read-only at runtime)
# =============================================================================

class PersonalityRow(Base):
    __tablename__ = "personalities"

    id = Column(String, primary_key=True)  # e.g. 'architect'
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    traits = Column(JSON, default=list)


class QuestionRow(Base):
    __tablename__ = "questions"

    id = Column(String, primary_key=True)
    text = Column(Text, nullable=False)
    weight = Column(Integer, nullable=False)
    order = Column(Integer, nullable=False, index=True)
    # [{"id": "a", "text": "...", "scores": {"architect": 3}}, ...]
    options = Column(JSON, nullable=False)

# =============================================================================
# RESULTS + SINGLE-ATTEMPT GATE
# =============================================================================

class QuizResultRow(Base):
    """Append-only. One row per user, never updated."""
    __tablename__ = "quiz_results"

    token = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, unique=True, index=True)
    top_personality = Column(String, nullable=False)
    scores = Column(JSON, nullable=False)
    answers = Column(JSON, nullable=False)  # [{"questionId": ..., "optionId": ...}]
    created_at = Column(DateTime(timezone=True), nullable=False)


class QuizAttempt(Base):
    """
    The primary key makes the first INSERT per user the atomic claim;
    every later INSERT fails with an integrity error.
    """
    __tablename__ = "quiz_attempts"

    user_id = Column(String, primary_key=True)
    result_token = Column(String, nullable=True)
    claimed_at = Column(DateTime(timezone=True), server_default=func.now())
