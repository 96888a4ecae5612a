import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from api.database import make_session_factory
from quiz.engine import QuizEngine
from quiz.models import ResultView
from quiz.seed_data import PERSONALITIES, QUESTIONS
from settings.config_model import AppConfig
from settings.manager import SettingsManager
from storage.db_manager import SqlAttemptGate, SqlCatalogProvider, SqlResultStore
from storage.memory import InMemoryAttemptGate, InMemoryCatalog, InMemoryResultStore
from utils.errors import (
    AlreadyCompletedError, AppError, InfrastructureError,
    NotFoundError, NotOwnerError, SubmissionRejectedError
)
from utils.telemetry import configure_logging, get_logger

logger = get_logger(__name__)

# Checked in order, first match wins
STATUS_BY_ERROR = [
    (SubmissionRejectedError, 400),
    (AlreadyCompletedError, 403),
    (NotOwnerError, 403),
    (NotFoundError, 404),
    (InfrastructureError, 503),
]

# --- Models ---
class AnswerIn(BaseModel):
    questionId: str = Field(min_length=1)
    optionId: str = Field(min_length=1)

class SubmitQuizRequest(BaseModel):
    # An empty list is allowed through so the engine reports it as an empty submission
    answers: List[AnswerIn]

class SubmitQuizResponse(BaseModel):
    token: str
    topPersonality: str
    scores: Dict[str, int]

class QuizResultResponse(BaseModel):
    id: str
    topPersonality: Dict[str, Any]
    scores: Dict[str, int]
    createdAt: datetime


def build_engine(config: AppConfig) -> QuizEngine:
    """Wires the engine to the storage backend named in the config."""
    if config.storage.backend == "memory":
        logger.info("Using in-memory storage with the built-in catalog")
        return QuizEngine(
            InMemoryCatalog(QUESTIONS, PERSONALITIES),
            InMemoryAttemptGate(),
            InMemoryResultStore(),
        )

    session_factory = make_session_factory(config.database_url(), echo=config.database.echo)
    return QuizEngine(
        SqlCatalogProvider(session_factory),
        SqlAttemptGate(session_factory),
        SqlResultStore(session_factory),
    )


def current_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """The authenticated caller. Authentication happens upstream of this service."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id.strip()


def _result_response(view: ResultView) -> QuizResultResponse:
    return QuizResultResponse(
        id=view.id,
        topPersonality=view.top_personality.model_dump(),
        scores=view.scores,
        createdAt=view.created_at,
    )


def create_app(config: Optional[AppConfig] = None, engine: Optional[QuizEngine] = None) -> FastAPI:
    if config is None:
        config = SettingsManager().load_or_default()
    configure_logging(config.logging.level, config.logging.log_dir)
    if engine is None:
        engine = build_engine(config)

    started_at = time.monotonic()
    prefix = config.api.api_prefix.rstrip("/")

    app = FastAPI(title="Personality Quiz API")
    app.state.engine = engine
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["Content-Type", "Authorization", "X-User-Id"],
    )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        status = next((code for cls, code in STATUS_BY_ERROR if isinstance(exc, cls)), 500)
        if status >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=status, content={"detail": str(exc)})

    # --- Endpoints ---

    @app.get(f"{prefix}/health")
    def health_check():
        return {
            "status": "ok",
            "message": "Personality Quiz API is healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": round(time.monotonic() - started_at, 3),
        }

    router = APIRouter(prefix=f"{prefix}/quiz")

    @router.get("/personalities")
    def get_personalities():
        return {"personalities": [p.model_dump() for p in engine.get_personalities()]}

    @router.get("/questions")
    def get_questions():
        """Questions with answer options, sorted by their order field."""
        return {"questions": [q.model_dump() for q in engine.get_questions()]}

    @router.post("/submit", response_model=SubmitQuizResponse)
    def submit_quiz(body: SubmitQuizRequest, user_id: str = Depends(current_user_id)):
        """
        Scores the caller's answers and stores the result.
        Each user can submit exactly once.
        """
        outcome = engine.submit(
            user_id,
            [(a.questionId, a.optionId) for a in body.answers],
        )
        return SubmitQuizResponse(
            token=outcome.token,
            topPersonality=outcome.top_personality,
            scores=outcome.scores,
        )

    @router.get("/result/{token}", response_model=QuizResultResponse)
    def get_result(token: str, user_id: str = Depends(current_user_id)):
        return _result_response(engine.fetch(token, user_id))

    @router.get("/my-result", response_model=QuizResultResponse)
    def get_my_result(user_id: str = Depends(current_user_id)):
        return _result_response(engine.fetch_mine(user_id))

    app.include_router(router)
    return app


if __name__ == "__main__":
    import uvicorn
    settings = SettingsManager().load_or_default()
    uvicorn.run("api.server:create_app", factory=True, host=settings.api.host, port=settings.api.port)
