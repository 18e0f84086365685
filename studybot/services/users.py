"""
StudyBot — User Directory

Username lookups used by registration and friends. Session fields are never
written here; those go through the session store.
"""

import re
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from studybot.config import USERNAME_MAX, USERNAME_MIN
from studybot.models import User

USERNAME_CHARS = re.compile(r"[^a-z0-9_]")


@dataclass(frozen=True)
class UserCard:
    id: str
    username: str
    display_name: Optional[str]


def clean_username(raw: str) -> str:
    """Lower-case, drop a leading @, keep [a-z0-9_]."""
    return USERNAME_CHARS.sub("", raw.strip().lstrip("@").lower())


def is_valid_username(username: str) -> bool:
    return USERNAME_MIN <= len(username) <= USERNAME_MAX


class UserDirectory:

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def find_by_username(self, username: str) -> Optional[UserCard]:
        with self._session_factory() as db:
            row = db.scalar(select(User).where(User.username == clean_username(username)))
            if row is None:
                return None
            return UserCard(id=row.id, username=row.username, display_name=row.display_name)

    def is_taken(self, username: str, exclude_user_id: Optional[str] = None) -> bool:
        card = self.find_by_username(username)
        return card is not None and card.id != exclude_user_id

    def suggest(self, username: str) -> str:
        """First free `<username><n>` that fits the length limit."""
        base = username[: USERNAME_MAX - 3]
        for n in range(1, 1000):
            candidate = f"{base}{n}"
            if not self.is_taken(candidate):
                return candidate
        return base
