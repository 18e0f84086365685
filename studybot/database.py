"""
StudyBot — Database Engine
SQLAlchemy setup. Works with SQLite (dev, tests) and PostgreSQL (prod).
"""

import logging
import os

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import StaticPool

from studybot.config import DATABASE_URL

logger = logging.getLogger(__name__)

# Set RESET_DATABASE=true to drop all tables and recreate
RESET_DATABASE = os.getenv("RESET_DATABASE", "false").lower() == "true"


# ─── Engine Setup ────────────────────────────────────────────────────────────

_is_sqlite = DATABASE_URL.startswith("sqlite")

if _is_sqlite:
    # One shared connection so in-memory databases survive across threads
    engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, _connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
else:
    engine = create_engine(
        DATABASE_URL,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,  # Test connections before use
        echo=False,
    )


# ─── Session Factory ─────────────────────────────────────────────────────────

SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


# ─── Base Class ──────────────────────────────────────────────────────────────

class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


def init_db():
    """Create all tables. Called once at startup."""
    # Tables must be registered on Base.metadata before create_all
    from studybot import models  # noqa: F401

    if RESET_DATABASE:
        logger.warning("RESET_DATABASE=true — dropping all tables!")
        if _is_sqlite:
            Base.metadata.drop_all(bind=engine)
        else:
            with engine.begin() as conn:
                conn.execute(text("DROP SCHEMA public CASCADE"))
                conn.execute(text("CREATE SCHEMA public"))
                conn.execute(text("GRANT ALL ON SCHEMA public TO PUBLIC"))
        logger.info("All tables dropped. Creating fresh schema...")

    Base.metadata.create_all(bind=engine)
