"""
StudyBot — Navigation Handlers

Menus, help, and the two miss handlers (invalid option, unrecognized).
handle_unrecognized doubles as the dispatcher's routing-gap fallback.
"""

import logging
from typing import Optional, Union

from studybot.dispatch.commands import Command
from studybot.dispatch.dispatcher import HandlerResult
from studybot.dispatch.menus import MENU_TABLE
from studybot.handlers.common import show_menu
from studybot.messages import MESSAGES
from studybot.state.session import MenuTag, UserSession

logger = logging.getLogger(__name__)


def _home(session: UserSession, intro: Optional[str] = None) -> HandlerResult:
    return show_menu(MenuTag.WELCOME, intro, updates={"flow_context": None})


async def handle_welcome_menu(session: UserSession, command: Command, services) -> HandlerResult:
    name = session.display_name or "there"
    return _home(session, f"Hi {name}! 👋")


async def handle_main_menu(session: UserSession, command: Command, services) -> HandlerResult:
    return show_menu(MenuTag.MAIN, updates={"flow_context": None})


async def handle_subject_menu(session: UserSession, command: Command, services) -> HandlerResult:
    return show_menu(MenuTag.SUBJECT)


async def handle_friends_menu(session: UserSession, command: Command, services) -> HandlerResult:
    return show_menu(MenuTag.FRIENDS)


async def handle_settings_menu(session: UserSession, command: Command, services) -> HandlerResult:
    return show_menu(MenuTag.SETTINGS)


async def handle_help(session: UserSession, command: Command, services) -> str:
    return MESSAGES["help"]


async def handle_invalid_option(session: UserSession, command: Command, services) -> HandlerResult:
    message = MESSAGES["errors"]["invalid_option"].format(
        input=command.original_input.strip(),
        valid_range=command.get("valid_range"),
    )
    logger.warning(
        f"Invalid option '{command.original_input}' in menu {command.get('menu')} "
        f"(valid {command.get('valid_range')})"
    )
    if session.current_menu in MENU_TABLE:
        return show_menu(session.current_menu, message)
    # Unknown stored tag: repair it by moving home
    return _home(session, message)


async def handle_unrecognized(session: UserSession, command: Command, services) -> Union[str, HandlerResult]:
    """Re-show the current menu, or the welcome menu when there is none."""
    if session.current_menu in MENU_TABLE:
        return show_menu(session.current_menu, "I didn't catch that. 🤔")
    return _home(session, "I didn't catch that. Here's where we can go: 🤔")
