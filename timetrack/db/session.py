"""SQLAlchemy engine and session helpers shared by every request."""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from ..core.config import settings


def connect_args_for(url: str) -> dict[str, object]:
    # SQLite connections are handed between FastAPI worker threads.
    return {"check_same_thread": False} if url.startswith("sqlite") else {}


# One engine per process; it owns the connection pool and is safe to share
# across concurrent requests.
engine = create_engine(settings.DB_URL, connect_args=connect_args_for(settings.DB_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """FastAPI dependency that yields a session and guarantees cleanup."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
