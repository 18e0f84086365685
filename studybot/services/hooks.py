"""
StudyBot — Engagement Hooks

Personalised nudge templates plus a delivery log for the `hook stats` view.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict

from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker

from studybot.config import HOOK_STATS_DAYS, HOOK_TYPES
from studybot.messages import HOOK_TEMPLATES
from studybot.models import HookDelivery
from studybot.state.session import UserSession

logger = logging.getLogger(__name__)


def personalize(hook_type: str, session: UserSession) -> str:
    template = HOOK_TEMPLATES[hook_type]
    return template.format(
        display_name=session.display_name or "champion",
        username=session.username or "sharp student",
        streak_count=session.streak_count,
    )


class HookLibrary:

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def deliver(self, hook_type: str, session: UserSession) -> str:
        """Render a hook for this user and log the delivery."""
        if hook_type not in HOOK_TYPES:
            raise KeyError(hook_type)
        message = personalize(hook_type, session)
        with self._session_factory() as db:
            db.add(HookDelivery(user_id=session.id, hook_type=hook_type))
            db.commit()
        logger.info(f"Hook '{hook_type}' sent to {session.id}")
        return message

    def stats(self, days: int = HOOK_STATS_DAYS) -> Dict[str, int]:
        """Deliveries per hook type over the last `days` days."""
        since = datetime.now(timezone.utc) - timedelta(days=days)
        with self._session_factory() as db:
            rows = db.execute(
                select(HookDelivery.hook_type, func.count())
                .where(HookDelivery.sent_at >= since)
                .group_by(HookDelivery.hook_type)
            ).all()
        return {hook_type: count for hook_type, count in rows}
