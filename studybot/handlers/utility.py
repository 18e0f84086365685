"""
StudyBot — Utility Handlers

Hooks (manual send + stats), settings and reminder time, "help with <topic>",
and the progress summary.
"""

import logging
from typing import Union

from fastapi.concurrency import run_in_threadpool

from studybot.config import HOOK_STATS_DAYS, HOOK_TYPES, SUBJECTS
from studybot.dispatch.commands import Command
from studybot.dispatch.dispatcher import HandlerResult
from studybot.handlers.common import llm_text, show_menu
from studybot.handlers.questions import build_report
from studybot.messages import MESSAGES
from studybot.state.session import MenuTag, UserSession
from studybot.tutor.prompts import explain_prompt
from studybot.utils.dates import format_time, parse_time_of_day

logger = logging.getLogger(__name__)


# ─── Hooks ───────────────────────────────────────────────────────────────────

async def handle_manual_hook(session: UserSession, command: Command, services) -> str:
    hook_type = (command.get("hook_type") or "").strip().lower()
    if hook_type not in HOOK_TYPES:
        return MESSAGES["hooks"]["unknown_type"].format(types=", ".join(HOOK_TYPES))
    return await run_in_threadpool(services.hooks.deliver, hook_type, session)


async def handle_hook_stats(session: UserSession, command: Command, services) -> str:
    stats = await run_in_threadpool(services.hooks.stats, HOOK_STATS_DAYS)
    if not stats:
        return MESSAGES["hooks"]["none_sent"].format(days=HOOK_STATS_DAYS)
    lines = [MESSAGES["hooks"]["stats_header"].format(days=HOOK_STATS_DAYS)]
    for hook_type in HOOK_TYPES:
        if hook_type in stats:
            lines.append(f"• {hook_type}: {stats[hook_type]}")
    return "\n".join(lines)


# ─── Settings ────────────────────────────────────────────────────────────────

async def handle_settings(session: UserSession, command: Command, services) -> Union[str, HandlerResult]:
    copy = MESSAGES["settings"]
    action = command.action

    if action == "profile":
        profile = copy["profile"].format(
            name=session.display_name,
            username=session.username,
            grade=session.grade,
            subjects=", ".join(SUBJECTS.get(s, s) for s in session.preferred_subjects) or "-",
            reminder=session.reminder_time or "off",
        )
        return show_menu(MenuTag.SETTINGS, profile)

    if action == "reminder_help":
        return show_menu(MenuTag.SETTINGS, copy["reminder_help"])

    if action == "change_time":
        value = command.get("value", "")
        clock = parse_time_of_day(value)
        if clock is None:
            return copy["reminder_invalid"].format(value=value)
        reminder = format_time(clock)
        logger.info(f"User {session.id} reminder set to {reminder}")
        return HandlerResult(
            message=copy["reminder_set"].format(time=reminder),
            updates={"reminder_time": reminder},
        )

    raise ValueError(f"Unknown settings action: {action}")


# ─── AI Tutor ────────────────────────────────────────────────────────────────

async def handle_ai_tutor(session: UserSession, command: Command, services) -> str:
    topic = (command.get("topic") or "").strip()
    if not topic:
        return MESSAGES["ai_tutor"]["missing_topic"]
    return await llm_text(
        services,
        explain_prompt(topic, session.grade),
        MESSAGES["ai_tutor"]["fallback"].format(topic=topic),
        "topic explanation",
    )


# ─── Progress ────────────────────────────────────────────────────────────────

async def handle_progress(session: UserSession, command: Command, services) -> HandlerResult:
    copy = MESSAGES["progress"]
    weak = await run_in_threadpool(services.questions.weak_spots, session.id)
    weak_line = (
        copy["weak_spots"].format(tags=", ".join(tag.replace("_", " ") for tag in weak))
        if weak else copy["no_weak_spots"]
    )
    summary = f"{copy['header']}\n\n{build_report(session)}\n\n{weak_line}"
    return show_menu(MenuTag.PROGRESS_SUMMARY, summary)
