"""
SQLAlchemy engine and sessions for the goals read models and event log

URL берётся из Settings.get_sqlalchemy_url(), поэтому PostgreSQL
(postgresql:// или postgresql+psycopg://) и SQLite обслуживаются одинаково.
"""
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from savings.config import get_settings


class Base(DeclarativeBase):
    """Declarative base: EventLog, ProjectorCheckpoint и read models"""


_engine: Engine | None = None
_session_factory: sessionmaker | None = None


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # Сессии FastAPI живут в пуле потоков
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


def get_engine() -> Engine:
    """Engine, созданный один раз на процесс"""
    global _engine
    if _engine is None:
        url = get_settings().get_sqlalchemy_url()
        _engine = create_engine(url, **_engine_options(url))
    return _engine


def get_session_factory() -> sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(bind=get_engine(), autoflush=False, autocommit=False)
    return _session_factory


def get_db():
    """FastAPI dependency: сессия на запрос, закрывается после ответа"""
    db: Session = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def check_db_connection() -> None:
    """
    Readiness check: SELECT 1 через тот же engine, что и сессии

    Raises:
        sqlalchemy.exc.OperationalError: если БД недоступна
    """
    with get_engine().connect() as conn:
        conn.execute(text("SELECT 1"))
