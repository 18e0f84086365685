"""
StudyBot — Session Store

get / patch / ensure_session over the users table. Each patch is a single
UPDATE statement, so one inbound message never produces split writes.
Concurrent messages from the same user are last-write-wins.
"""

import logging
from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from studybot.models import User
from studybot.state.session import MenuTag, SessionPatch, UserSession

logger = logging.getLogger(__name__)


class SessionNotFound(LookupError):
    pass


class SessionStore(Protocol):
    def ensure_session(self, subscriber_id: str) -> UserSession: ...
    def get(self, user_id: str) -> UserSession: ...
    def patch(self, user_id: str, patch: SessionPatch) -> None: ...


class SqlSessionStore:
    """SQLAlchemy-backed store. Safe to call from a worker thread."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def ensure_session(self, subscriber_id: str) -> UserSession:
        """
        Find or create the session for a chat subscriber.

        Idempotent under two simultaneous first-contact requests: the loser of
        the unique-constraint race re-reads the winner's row.
        """
        with self._session_factory() as db:
            row = db.scalar(select(User).where(User.subscriber_id == subscriber_id))
            if row is not None:
                return UserSession.from_row(row)

            row = User(
                subscriber_id=subscriber_id,
                current_menu=MenuTag.NONE.value,
            )
            db.add(row)
            try:
                db.commit()
                logger.info(f"Created session {row.id} for subscriber {subscriber_id}")
            except IntegrityError:
                db.rollback()
                logger.info(f"Concurrent first contact for {subscriber_id}, re-reading")
                row = db.scalar(select(User).where(User.subscriber_id == subscriber_id))
                if row is None:
                    raise
            return UserSession.from_row(row)

    def get(self, user_id: str) -> UserSession:
        with self._session_factory() as db:
            row = db.get(User, user_id)
            if row is None:
                raise SessionNotFound(user_id)
            return UserSession.from_row(row)

    def patch(self, user_id: str, patch: SessionPatch) -> None:
        columns = patch.to_columns()
        columns["last_active_at"] = datetime.now(timezone.utc)
        with self._session_factory() as db:
            result = db.execute(
                update(User).where(User.id == user_id).values(**columns)
            )
            if result.rowcount == 0:
                db.rollback()
                raise SessionNotFound(user_id)
            db.commit()
