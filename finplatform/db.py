# finplatform/db.py
import logging
from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker, Session

logger = logging.getLogger(__name__)

Base = declarative_base()

# -----------------------------------------------------------------------------
# Normalize DATABASE_URL
#   - Accepts postgres:// or postgresql://; converts to postgresql+psycopg://
#   - Appends ?sslmode=require for non-local connections if not present
# -----------------------------------------------------------------------------

def normalize_db_url(raw: str) -> str:
    db_url = (raw or "").strip()

    # Normalize scheme: postgres://  -> postgresql://
    if db_url.startswith("postgres://"):
        db_url = db_url.replace("postgres://", "postgresql://", 1)

    if not db_url.startswith("postgresql"):
        return db_url

    # Ensure psycopg (v3) driver is used unless user already specified a driver
    if db_url.startswith("postgresql://"):
        db_url = db_url.replace("postgresql://", "postgresql+psycopg://", 1)

    # Hosted providers (Supabase/Render/Neon/etc.) require SSL. Add if missing.
    if "localhost" not in db_url and "127.0.0.1" not in db_url and "sslmode=" not in db_url:
        db_url += ("&" if "?" in db_url else "?") + "sslmode=require"

    return db_url


class Database:
    """Engine + session factory, created once per process by the app factory."""

    def __init__(self, url: str):
        self.url = normalize_db_url(url)
        connect_args = {}
        if self.url.startswith("sqlite"):
            connect_args["check_same_thread"] = False  # needed for SQLite + threads
        self.engine = create_engine(
            self.url,
            pool_pre_ping=True,   # drop dead connections before issuing queries
            connect_args=connect_args,
        )
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, autocommit=False)

    def session(self) -> Session:
        return self.SessionLocal()

    def init_db(self) -> None:
        """Create tables if they don't exist yet."""
        from . import models  # noqa: F401  ensure models are registered
        Base.metadata.create_all(bind=self.engine)

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning("Database ping failed: %s", e)
            return False

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Generator[Session, None, None]:
    """FastAPI dependency that yields a DB session and ensures close."""
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()
