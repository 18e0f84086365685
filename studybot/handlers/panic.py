"""
StudyBot — Panic Button Handlers

Flow (maths only): level → topic → plan → micro-module → 3-question burst → momentum

Burst questions are answered in panic_burst. The answer handler grades them,
bumps the counters in PanicContext and chains back here with "burst_next".
"""

import logging
from typing import Optional

from studybot.dispatch.commands import Command
from studybot.dispatch.dispatcher import HandlerResult
from studybot.handlers.common import show_menu
from studybot.handlers.questions import serve_question
from studybot.messages import MESSAGES
from studybot.state.flow_context import PanicContext, load_context, to_blob
from studybot.state.session import MenuTag, UserSession

logger = logging.getLogger(__name__)

COPY = MESSAGES["panic"]
BURST_SIZE = 3
DEFAULT_REMINDER = "19:00"
TOPIC_NAMES = {"calculus": "Calculus", "trigonometry": "Trigonometry"}


def toggle_topic(topic: str) -> str:
    return "calculus" if topic == "trigonometry" else "trigonometry"


def _plan(context: PanicContext, intro: Optional[str] = None) -> HandlerResult:
    text = COPY["plan"].format(topic=TOPIC_NAMES[context.topic])
    return show_menu(
        MenuTag.PANIC_PLAN,
        f"{intro}\n\n{text}" if intro else text,
        {"flow_context": to_blob(context)},
    )


async def _serve_burst(session: UserSession, context: PanicContext, services) -> HandlerResult:
    return await serve_question(
        session, services,
        intro=COPY["burst_question"].format(number=context.burst_index + 1),
        topic=context.topic,
        difficulty="easy",
        menu=MenuTag.PANIC_BURST,
        updates={"flow_context": to_blob(context)},
    )


def _end(session: UserSession, context: PanicContext, message: str, **updates) -> HandlerResult:
    logger.info(
        f"Panic session for {session.id} ended: level {context.level}, {context.topic}, "
        f"{context.bursts_done} burst(s)"
    )
    return show_menu(MenuTag.WELCOME, message, {"flow_context": None, **updates})


async def handle_panic(session: UserSession, command: Command, services) -> HandlerResult:
    action = command.action or "start"

    if action == "start":
        return show_menu(MenuTag.PANIC_LEVEL, COPY["intro"], {"flow_context": to_blob(PanicContext())})

    context = load_context(session.flow_context, PanicContext)
    value = command.get("value")

    if action == "level":
        context.level = value
        return show_menu(
            MenuTag.PANIC_TOPIC,
            COPY["level_set"].format(level=value),
            {"flow_context": to_blob(context)},
        )

    if action == "topic":
        if value in TOPIC_NAMES:
            context.topic = value
            return _plan(context)
        context.topic = "calculus"
        return _plan(context, COPY["not_sure"])

    if action == "plan_switch":
        context.topic = toggle_topic(context.topic)
        return _plan(context)

    if action == "module":
        return show_menu(
            MenuTag.PANIC_MODULE,
            COPY["modules"][context.topic],
            {"flow_context": to_blob(context)},
        )

    if action == "extra_example":
        return show_menu(MenuTag.PANIC_MODULE, COPY["extras"][context.topic])

    if action in ("burst", "continue", "switch_topic"):
        if action == "switch_topic":
            context.topic = toggle_topic(context.topic)
        context.burst_index = 0
        context.burst_correct = 0
        return await _serve_burst(session, context, services)

    if action == "burst_next":
        if context.burst_index >= BURST_SIZE:
            context.bursts_done += 1
            logger.info(f"Panic burst for {session.id}: {context.burst_correct}/{BURST_SIZE} on {context.topic}")
            return show_menu(
                MenuTag.PANIC_MOMENTUM,
                COPY["burst_done"].format(correct=context.burst_correct),
                {"flow_context": to_blob(context)},
            )
        return await _serve_burst(session, context, services)

    if action == "cancel":
        return _end(session, context, COPY["cancel"])

    if action == "break":
        return _end(session, context, COPY["break"])

    if action == "remind_tonight":
        reminder = session.reminder_time or DEFAULT_REMINDER
        return _end(
            session, context,
            COPY["remind_tonight"].format(time=reminder),
            reminder_time=reminder,
        )

    raise ValueError(f"Unknown panic action: {action}")
