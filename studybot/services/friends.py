"""
StudyBot — Friends

Friendships are unordered pairs stored once as (low id, high id).
"""

import logging
from typing import List, Tuple

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from studybot.models import Friendship, User

logger = logging.getLogger(__name__)


def _pair(a: str, b: str) -> Tuple[str, str]:
    return (a, b) if a < b else (b, a)


class FriendsDirectory:

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def are_friends(self, user_id: str, other_id: str) -> bool:
        low, high = _pair(user_id, other_id)
        with self._session_factory() as db:
            found = db.scalar(
                select(Friendship.id).where(
                    Friendship.user_low_id == low,
                    Friendship.user_high_id == high,
                )
            )
            return found is not None

    def add(self, user_id: str, other_id: str) -> bool:
        """Create the friendship. Returns False if it already existed."""
        if user_id == other_id:
            raise ValueError("cannot befriend yourself")
        low, high = _pair(user_id, other_id)
        with self._session_factory() as db:
            db.add(Friendship(user_low_id=low, user_high_id=high, initiated_by=user_id))
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                return False
        logger.info(f"Friendship {low} <-> {high} created by {user_id}")
        return True

    def list_usernames(self, user_id: str) -> List[str]:
        with self._session_factory() as db:
            rows = db.scalars(
                select(Friendship).where(
                    or_(Friendship.user_low_id == user_id, Friendship.user_high_id == user_id)
                )
            ).all()
            friend_ids = [
                row.user_high_id if row.user_low_id == user_id else row.user_low_id
                for row in rows
            ]
            if not friend_ids:
                return []
            names = db.scalars(
                select(User.username).where(User.id.in_(friend_ids)).order_by(User.username)
            ).all()
            return [name for name in names if name]
