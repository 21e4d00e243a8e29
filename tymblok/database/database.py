"""Database connection and session management for Tymblok.

This module supports both:
- Local SQLite (default for dev)
- PostgreSQL via `DATABASE_URL`
"""

import os
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session, declarative_base
from dotenv import load_dotenv

load_dotenv()

# Database URL - SQLite by default (local dev)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./tymblok.db")

def _is_sqlite_url(database_url: str) -> bool:
    return "sqlite" in (database_url or "")


def get_engine_kwargs(database_url: str) -> dict:
    """Return deterministic create_engine kwargs for a DB URL.

    This is separated to allow deterministic unit testing without connecting.
    """
    engine_kwargs: dict = {
        "echo": os.getenv("DEBUG", "False").lower() == "true",
        "pool_pre_ping": True,
    }

    if _is_sqlite_url(database_url):
        # SQLite-specific setting required for FastAPI concurrency in a single process.
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        return engine_kwargs

    engine_kwargs["pool_size"] = int(os.getenv("DB_POOL_SIZE", "5"))
    engine_kwargs["max_overflow"] = int(os.getenv("DB_MAX_OVERFLOW", "5"))
    engine_kwargs["pool_timeout"] = int(os.getenv("DB_POOL_TIMEOUT_SEC", "30"))
    return engine_kwargs


def build_engine(database_url: str) -> Engine:
    return create_engine(database_url, **get_engine_kwargs(database_url))


# Create engine (module-level singleton)
engine = build_engine(DATABASE_URL)


@event.listens_for(Engine, "connect")
def set_sqlite_pragmas(dbapi_conn, connection_record):
    """Enable foreign keys on SQLite connections."""
    if _is_sqlite_url(DATABASE_URL):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for declarative models
Base = declarative_base()


def get_db() -> Session:
    """Get database session (dependency for FastAPI)."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Initialize database schema.

    - SQLite (default dev): use `create_all()`.
    - PostgreSQL: prefer Alembic migrations. Enable by setting
      `RUN_MIGRATIONS=true` in the environment.
    """
    # Register models on Base.metadata.
    from tymblok.database import models  # noqa: F401

    run_migrations = os.getenv("RUN_MIGRATIONS", "False").lower() == "true"
    if run_migrations and not _is_sqlite_url(DATABASE_URL):
        from alembic import command
        from alembic.config import Config

        alembic_cfg = Config(os.getenv("ALEMBIC_INI", "alembic.ini"))
        # Ensure Alembic uses the same runtime DB URL.
        alembic_cfg.set_main_option("sqlalchemy.url", DATABASE_URL)
        command.upgrade(alembic_cfg, "head")
        return

    Base.metadata.create_all(bind=engine)
