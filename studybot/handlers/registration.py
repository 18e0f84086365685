"""
StudyBot — Registration Handlers

Four free-text steps, each its own state:
    registration_needs_name → _username → _grade → _subjects → welcome

"prompt" (what the dispatcher sends when an unregistered user tries anything
else) re-asks the first missing field.
"""

import logging
import re
from typing import List, Union

from fastapi.concurrency import run_in_threadpool

from studybot.config import DISPLAY_NAME_MAX, DISPLAY_NAME_MIN, SUBJECTS, VALID_GRADES
from studybot.dispatch.commands import Command
from studybot.dispatch.dispatcher import HandlerResult
from studybot.handlers.common import show_menu
from studybot.messages import MESSAGES
from studybot.services.users import clean_username, is_valid_username
from studybot.state.session import MenuTag, UserSession

logger = logging.getLogger(__name__)

COPY = MESSAGES["registration"]

SUBJECT_NUMBERS = {"1": "math", "2": "physics", "3": "life_sciences", "4": "chemistry"}

SUBJECT_ALIASES = {
    "math": "math", "maths": "math", "mathematics": "math",
    "physics": "physics", "physical sciences": "physics", "physical science": "physics",
    "life sciences": "life_sciences", "life science": "life_sciences", "biology": "life_sciences",
    "chemistry": "chemistry",
}


def next_step(session: UserSession) -> MenuTag:
    """First registration state whose field is still empty."""
    if not session.display_name:
        return MenuTag.REGISTRATION_NEEDS_NAME
    if not session.username:
        return MenuTag.REGISTRATION_NEEDS_USERNAME
    if not session.grade:
        return MenuTag.REGISTRATION_NEEDS_GRADE
    return MenuTag.REGISTRATION_NEEDS_SUBJECTS


def prompt_for(step: MenuTag, session: UserSession) -> str:
    if step == MenuTag.REGISTRATION_NEEDS_NAME:
        return COPY["ask_name"]
    if step == MenuTag.REGISTRATION_NEEDS_USERNAME:
        return COPY["ask_username"].format(name=session.display_name)
    if step == MenuTag.REGISTRATION_NEEDS_GRADE:
        return COPY["ask_grade"]
    return COPY["ask_subjects"]


def parse_subjects(text: str) -> List[str]:
    """'1, 3' / 'maths and physics' / '2 4' → ordered unique subject keys."""
    chosen = []
    for part in re.split(r"\s*(?:,|;|/|&|\band\b)\s*|\s+(?=\d)", text.lower()):
        part = part.strip()
        if not part:
            continue
        if part.isdigit():
            key = SUBJECT_NUMBERS.get(part)
            if key is None and all(ch in SUBJECT_NUMBERS for ch in part):
                # "13" typed without a separator
                for ch in part:
                    if SUBJECT_NUMBERS[ch] not in chosen:
                        chosen.append(SUBJECT_NUMBERS[ch])
                continue
        else:
            key = SUBJECT_ALIASES.get(part)
            if key is None:
                # "maths physics"
                for word in part.split():
                    word_key = SUBJECT_ALIASES.get(word)
                    if word_key and word_key not in chosen:
                        chosen.append(word_key)
                continue
        if key and key not in chosen:
            chosen.append(key)
    return chosen


async def handle_registration(session: UserSession, command: Command, services) -> Union[str, HandlerResult]:
    step = next_step(session)

    if command.action == "prompt":
        message = prompt_for(step, session)
        if session.current_menu == step and step != MenuTag.REGISTRATION_NEEDS_NAME:
            message = f"{COPY['locked']}\n\n{message}"
        return HandlerResult(message=message, next_state=step)

    if session.current_menu != step:
        return HandlerResult(message=prompt_for(step, session), next_state=step)

    text = command.get("text", "").strip()

    if step == MenuTag.REGISTRATION_NEEDS_NAME:
        if not DISPLAY_NAME_MIN <= len(text) <= DISPLAY_NAME_MAX:
            return COPY["name_invalid"]
        return HandlerResult(
            message=COPY["ask_username"].format(name=text),
            next_state=MenuTag.REGISTRATION_NEEDS_USERNAME,
            updates={"display_name": text},
        )

    if step == MenuTag.REGISTRATION_NEEDS_USERNAME:
        username = clean_username(text)
        if not is_valid_username(username):
            return COPY["username_invalid"]
        taken = await run_in_threadpool(services.users.is_taken, username, session.id)
        if taken:
            suggestion = await run_in_threadpool(services.users.suggest, username)
            return COPY["username_taken"].format(username=username, suggestion=suggestion)
        return HandlerResult(
            message=COPY["ask_grade"],
            next_state=MenuTag.REGISTRATION_NEEDS_GRADE,
            updates={"username": username},
        )

    if step == MenuTag.REGISTRATION_NEEDS_GRADE:
        grade = text.lower().replace("grade", "").strip()
        if grade not in VALID_GRADES:
            return COPY["grade_invalid"]
        return HandlerResult(
            message=COPY["ask_subjects"],
            next_state=MenuTag.REGISTRATION_NEEDS_SUBJECTS,
            updates={"grade": grade},
        )

    subjects = parse_subjects(text)
    if not subjects:
        return COPY["subjects_invalid"]

    logger.info(f"User {session.id} registered as @{session.username} ({', '.join(subjects)})")
    names = ", ".join(SUBJECTS[key] for key in subjects)
    return show_menu(
        MenuTag.WELCOME,
        f"{COPY['complete'].format(name=session.display_name)}\nSubjects: {names}",
        {"preferred_subjects": subjects, "current_subject": subjects[0]},
    )
