from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from budget_app.core.settings import settings


class Base(DeclarativeBase):
    pass


def _connect_args(database_url: str, timeout_seconds: float) -> dict:
    """Driver options that bound a single DB call by the request budget."""
    if database_url.startswith("sqlite"):
        # connections are shared across the request threadpool
        return {"check_same_thread": False, "timeout": timeout_seconds}
    if database_url.startswith(("postgresql", "postgres")):
        return {"options": f"-c statement_timeout={int(timeout_seconds * 1000)}"}
    return {}


engine = create_engine(
    settings.database_url,
    connect_args=_connect_args(settings.database_url, settings.request_timeout_seconds),
    pool_pre_ping=not settings.database_url.startswith("sqlite"),
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def init_db() -> None:
    """Create the user table and its unique email index if missing."""
    import budget_app.models.user  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
