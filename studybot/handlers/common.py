"""
StudyBot — Handler Helpers
"""

import logging
from typing import Any, Dict, Optional

from studybot.dispatch.dispatcher import HandlerResult
from studybot.dispatch.menus import render_menu
from studybot.state.session import MenuTag

logger = logging.getLogger(__name__)


def show_menu(
    tag: MenuTag,
    intro: Optional[str] = None,
    updates: Optional[Dict[str, Any]] = None,
) -> HandlerResult:
    """Move to a numbered menu and display it."""
    return HandlerResult(
        message=render_menu(tag, intro),
        next_state=tag,
        updates=dict(updates or {}),
    )


async def llm_text(services, messages: list[dict], fallback: str, purpose: str) -> str:
    """LLM completion, or the fixed fallback when the call fails."""
    try:
        result = await services.llm.generate(messages)
        return result.text
    except Exception as e:
        logger.warning(f"LLM {purpose} failed, using fallback: {e}")
        return fallback
