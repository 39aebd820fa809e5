"""SQLAlchemy engine, session factory and the request-scoped session dependency."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from mareye.config import get_settings


def _engine_options(url: str) -> dict[str, Any]:
    # SQLite is only used for local runs and tests; it has no connection pool to size
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True, "pool_size": 5, "max_overflow": 10}


database_url = get_settings().database_url
engine = create_engine(database_url, **_engine_options(database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base: Any = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Yield a session for one request and close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
