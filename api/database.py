import os

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


def make_engine(database_url: str, echo: bool = False) -> Engine:
    connect_args = {}
    if database_url.startswith("sqlite"):
        # check_same_thread=False is needed for SQLite with FastAPI multi-threading
        connect_args = {"check_same_thread": False}
        if database_url.startswith("sqlite:///") and not database_url.endswith(":memory:"):
            path = database_url[len("sqlite:///"):]
            os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    return create_engine(database_url, echo=echo, connect_args=connect_args)


def make_session_factory(database_url: str, echo: bool = False) -> sessionmaker:
    engine = make_engine(database_url, echo=echo)
    init_db(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine):
    """Creates tables if they don't exist."""
    from api import models  # noqa: F401 registers tables on Base
    Base.metadata.create_all(bind=engine)
