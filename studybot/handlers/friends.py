"""
StudyBot — Friends & Challenge Handlers
"""

import logging
from typing import Union

from fastapi.concurrency import run_in_threadpool

from studybot.dispatch.commands import Command
from studybot.dispatch.dispatcher import HandlerResult
from studybot.handlers.common import show_menu
from studybot.messages import MESSAGES
from studybot.services.users import clean_username
from studybot.state.session import ExpectingInput, MenuTag, UserSession

logger = logging.getLogger(__name__)

COPY = MESSAGES["friends"]


async def handle_friends(session: UserSession, command: Command, services) -> Union[str, HandlerResult]:
    action = command.action

    if action == "list":
        names = await run_in_threadpool(services.friends.list_usernames, session.id)
        if not names:
            return show_menu(MenuTag.FRIENDS, COPY["none"])
        listing = "\n".join(f"• @{name}" for name in names)
        return show_menu(MenuTag.FRIENDS, f"{COPY['list_header']}\n{listing}")

    if action == "add_prompt":
        return HandlerResult(
            message=COPY["ask_username"],
            next_state=MenuTag.FRIENDS_ADD,
            updates={"expecting_input": ExpectingInput.USERNAME_FOR_FRIEND},
        )

    if action == "add_user":
        username = clean_username(command.get("target", ""))
        friend = await run_in_threadpool(services.users.find_by_username, username)
        if friend is None:
            # Stay in capture mode so a corrected username works
            return COPY["not_found"].format(username=username or command.get("target", ""))
        if friend.id == session.id:
            return show_menu(MenuTag.FRIENDS, COPY["self"])
        created = await run_in_threadpool(services.friends.add, session.id, friend.id)
        key = "added" if created else "already"
        return show_menu(MenuTag.FRIENDS, COPY[key].format(username=friend.username))

    raise ValueError(f"Unknown friends action: {action}")


async def handle_challenge(session: UserSession, command: Command, services) -> Union[str, HandlerResult]:
    action = command.action

    if action == "prompt":
        return HandlerResult(
            message=COPY["ask_challenge"],
            next_state=MenuTag.FRIENDS_CHALLENGE,
            updates={"expecting_input": ExpectingInput.USERNAME_FOR_CHALLENGE},
        )

    if action == "send":
        username = clean_username(command.get("target", ""))
        friend = await run_in_threadpool(services.users.find_by_username, username)
        if friend is None:
            return COPY["not_found"].format(username=username or command.get("target", ""))
        is_friend = await run_in_threadpool(services.friends.are_friends, session.id, friend.id)
        if not is_friend:
            return show_menu(MenuTag.FRIENDS, COPY["challenge_not_friend"].format(username=friend.username))
        logger.info(f"User {session.id} challenged {friend.id}")
        return show_menu(MenuTag.FRIENDS, COPY["challenge_sent"].format(username=friend.username))

    raise ValueError(f"Unknown challenge action: {action}")
