"""
StudyBot — Command Parser

parse(text, context) -> Command. Pure, total, deterministic. No I/O.

Priority (fixed, never reorder):
    1. Answer detection      pending question owns the input
    2. Global keywords       exact phrase, plus three prefix commands
    3. Menu numeric input    via the Menu Transition Table
    4. Free-text capture     registration, usernames, flow fields
    5. Unrecognized

A pending question beats navigation: "menu" while a question is open is an
invalid answer, not the main menu.
"""

import re
from typing import Dict, Optional

from studybot.dispatch.answers import validate_answer
from studybot.dispatch.commands import Command, CommandType
from studybot.dispatch.menus import (
    FREE_TEXT_CAPTURE, MENU_TABLE, REGISTRATION_CAPTURE, lookup, valid_range,
)
from studybot.state.session import MenuTag, ParseContext, USERNAME_INPUTS


# ─── Global Keywords ─────────────────────────────────────────────────────────

def _keywords(command: Command, *phrases: str) -> Dict[str, Command]:
    return {phrase: command for phrase in phrases}


GLOBAL_KEYWORDS: Dict[str, Command] = {
    **_keywords(Command(CommandType.MAIN_MENU), "menu", "main menu", "home"),
    **_keywords(Command(CommandType.WELCOME_MENU), "hi", "hello", "start"),
    **_keywords(Command(CommandType.HELP), "help", "?", "commands"),
    **_keywords(Command(CommandType.QUESTION, "next"), "next", "question", "q"),
    **_keywords(Command(CommandType.PRACTICE, "start"), "practice", "practise"),
    **_keywords(Command(CommandType.REPORT), "report", "stats", "progress"),
    **_keywords(Command(CommandType.CONFIDENCE_BOOST, "start"), "stressed", "stress", "confidence", "anxious"),
    **_keywords(Command(CommandType.PANIC, "start"), "panic", "sos"),
    **_keywords(Command(CommandType.EXAM_PREP, "start"), "exam", "exam prep", "test prep"),
    **_keywords(Command(CommandType.HOMEWORK, "start"), "homework"),
    **_keywords(Command(CommandType.FRIENDS_MENU), "friends"),
    **_keywords(Command(CommandType.SETTINGS_MENU), "settings"),
    **_keywords(Command(CommandType.SUBJECT_MENU), "subjects", "subject"),
    **_keywords(Command(CommandType.HOOK_STATS), "hook stats", "hookstats"),
    **_keywords(Command(CommandType.MANUAL_HOOK), "hook"),
}

# Prefix commands: keyword, whitespace, argument (argument keeps its case)
PREFIX_PATTERN = re.compile(r"^(hook|help\s+with|change\s+time)\s+(.+)$", re.IGNORECASE)

PREFIX_COMMANDS = {
    "hook": (Command(CommandType.MANUAL_HOOK), "hook_type"),
    "help with": (Command(CommandType.AI_TUTOR), "topic"),
    "change time": (Command(CommandType.SETTINGS, "change_time"), "value"),
}


# ─── Numeric Input ───────────────────────────────────────────────────────────

MENU_NUMBER = re.compile(r"^\d+$")

# Number-shaped text that is not a plain positive integer: "0", "-2", "1.5", "3a", "#4"
NUMBER_LIKE = re.compile(r"^[#(]?\s*[-+]?\d+(?:[.,]\d*)?\s*[a-z)]?$", re.IGNORECASE)


def _normalize(raw_text: Optional[str]) -> str:
    return " ".join((raw_text or "").split())


def _match_keyword(text: str, original: str) -> Optional[Command]:
    command = GLOBAL_KEYWORDS.get(text.lower())
    if command is not None:
        return command.with_input(original)

    match = PREFIX_PATTERN.match(text)
    if match:
        keyword = " ".join(match.group(1).lower().split())
        template, payload_key = PREFIX_COMMANDS[keyword]
        return template.with_input(original, **{payload_key: match.group(2).strip()})
    return None


def _match_menu(text: str, original: str, context: ParseContext) -> Optional[Command]:
    menu = context.current_menu
    if menu is None:
        return None

    tag = MenuTag.coerce(menu)
    known_menu = tag in MENU_TABLE
    unknown_tag = tag is None and bool(str(menu).strip())
    if not (known_menu or unknown_tag):
        # Free-text and answer states never read numbers as menu choices
        return None

    if MENU_NUMBER.match(text):
        number = int(text)
        template = lookup(tag, number) if known_menu else None
        if template is not None:
            return template.with_input(original, menu_choice=number)
        return _invalid_option(original, menu, tag)

    if NUMBER_LIKE.match(text):
        return _invalid_option(original, menu, tag)

    return None


def _invalid_option(original: str, menu, tag: Optional[MenuTag]) -> Command:
    menu_name = tag.value if tag is not None else str(menu)
    return Command(
        type=CommandType.INVALID_OPTION,
        payload={"valid_range": valid_range(tag), "menu": menu_name},
        original_input=original,
    )


def _match_free_text(text: str, original: str, context: ParseContext) -> Optional[Command]:
    if context.expecting_registration_input:
        return REGISTRATION_CAPTURE.with_input(original, text=text)

    expecting = context.expecting_username_kind or context.expecting_input
    if expecting is None:
        return None

    template = FREE_TEXT_CAPTURE.get(expecting)
    if template is None:
        return None
    if expecting in USERNAME_INPUTS:
        return template.with_input(original, target=text.lstrip("@").strip())
    return template.with_input(original, text=text)


# ─── Entry Point ─────────────────────────────────────────────────────────────

def parse(raw_text: Optional[str], context: ParseContext) -> Command:
    """
    Classify one inbound message.

    Never raises. Empty input is a miss at every stage and falls through to
    `unrecognized`.
    """
    original = raw_text if raw_text is not None else ""
    text = _normalize(raw_text)

    # 1. Pending question owns the input
    if context.expecting_answer or context.has_active_question:
        result = validate_answer(text)
        if result.valid:
            return Command(CommandType.ANSWER, payload={"answer": result.letter}, original_input=original)
        return Command(CommandType.INVALID_ANSWER, payload={"message": result.message}, original_input=original)

    if not text:
        return Command(CommandType.UNRECOGNIZED, original_input=original)

    # 2. Global keywords
    command = _match_keyword(text, original)
    if command is not None:
        return command

    # 3. Menu-relative numbers
    command = _match_menu(text, original, context)
    if command is not None:
        return command

    # 4. Free text for the field being collected
    command = _match_free_text(text, original, context)
    if command is not None:
        return command

    # 5. Nothing matched
    return Command(CommandType.UNRECOGNIZED, original_input=original)
