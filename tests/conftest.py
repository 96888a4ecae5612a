import pytest
import os
import sys
from pathlib import Path

# Add project root to sys.path
sys.path.append(str(Path(__file__).parent.parent))

import shutil
import tempfile
from api.database import make_session_factory
from quiz.catalog import QuestionCatalog
from quiz.engine import QuizEngine
from quiz.models import AnswerOption, Personality, Question
from settings.config_model import AppConfig, ApiConfig, StorageConfig
from storage.memory import InMemoryAttemptGate, InMemoryCatalog, InMemoryResultStore


def make_question(qid, weight, options, order=None):
    """options: {option_id: {category: points}}"""
    return Question(
        id=qid,
        text=f"Question {qid}",
        weight=weight,
        order=order if order is not None else int(qid.lstrip("Qq") or 0),
        options=[AnswerOption(id=oid, text=f"Option {oid}", scores=scores) for oid, scores in options.items()],
    )


def make_personality(pid):
    return Personality(id=pid, name=pid.title(), description=f"The {pid}", traits=[pid])


@pytest.fixture(scope="function")
def test_dir():
    """Creates a temporary directory for test data."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir)


@pytest.fixture
def sample_questions():
    """Three-question catalog from the architect/leader worked example."""
    return [
        make_question("Q1", 4, {"optionA": {"architect": 3, "leader": 1}, "optionB": {"explorer": 2}}),
        make_question("Q2", 2, {"optionA": {"architect": 3}, "optionB": {"supporter": 1}}),
        make_question("Q3", 5, {"optionA": {"leader": 3}, "optionB": {"explorer": 1, "supporter": 1}}),
    ]


@pytest.fixture
def sample_personalities():
    return [make_personality(p) for p in ("architect", "explorer", "leader", "supporter")]


@pytest.fixture
def sample_catalog(sample_questions):
    return QuestionCatalog(sample_questions)


@pytest.fixture
def memory_catalog(sample_questions, sample_personalities):
    return InMemoryCatalog(sample_questions, sample_personalities)


@pytest.fixture
def gate():
    return InMemoryAttemptGate()


@pytest.fixture
def result_store():
    return InMemoryResultStore()


@pytest.fixture
def engine(memory_catalog, gate, result_store):
    tokens = iter(f"token-{i}" for i in range(1000))
    return QuizEngine(memory_catalog, gate, result_store, token_factory=lambda: next(tokens))


@pytest.fixture
def session_factory(test_dir):
    """SQLAlchemy session factory bound to a throwaway SQLite file."""
    return make_session_factory(f"sqlite:///{os.path.join(test_dir, 'quiz.db')}")


@pytest.fixture
def memory_config(test_dir):
    return AppConfig(
        data_dir=test_dir,
        storage=StorageConfig(backend="memory"),
        api=ApiConfig(cors_origins=["http://localhost:3000"]),
    )


@pytest.fixture
def api_client(memory_config):
    from fastapi.testclient import TestClient
    from api.server import create_app
    return TestClient(create_app(memory_config))
