"""
StudyBot — Confidence Boost Handlers

Flow: reason → pre-confidence → micro-support (LLM) → ladder → post-confidence

Ladder steps "easy" and "medium" serve one question; the answer handler
brings the student back to confidence_post afterwards.
"""

import logging

from studybot.dispatch.commands import Command
from studybot.dispatch.dispatcher import HandlerResult
from studybot.handlers.common import llm_text, show_menu
from studybot.handlers.questions import serve_question
from studybot.messages import MESSAGES
from studybot.state.flow_context import ConfidenceContext, load_context, to_blob
from studybot.state.session import MenuTag, UserSession
from studybot.tutor.prompts import support_prompt

logger = logging.getLogger(__name__)

COPY = MESSAGES["confidence"]


async def handle_confidence_boost(session: UserSession, command: Command, services) -> HandlerResult:
    action = command.action or "start"

    if action == "start":
        context = ConfidenceContext()
        return show_menu(MenuTag.CONFIDENCE_REASON, COPY["reason_intro"], {"flow_context": to_blob(context)})

    context = load_context(session.flow_context, ConfidenceContext)
    value = command.get("value")

    if action == "reason":
        context.reason = value
        return show_menu(MenuTag.CONFIDENCE_PRE, updates={"flow_context": to_blob(context)})

    if action == "pre":
        context.pre_confidence = value
        support = await llm_text(
            services,
            support_prompt(session.display_name, context.reason, value),
            COPY["support_fallback"],
            "micro-support",
        )
        context.support_message = support
        return show_menu(
            MenuTag.CONFIDENCE_LADDER,
            COPY["support_header"].format(support=support),
            {"flow_context": to_blob(context)},
        )

    if action == "ladder":
        context.ladder_choice = value
        updates = {"flow_context": to_blob(context)}
        if value in ("easy", "medium"):
            return await serve_question(session, services, difficulty=value, updates=updates)
        intro = COPY["reflect"] if value == "reflect" else COPY["skip"]
        return show_menu(MenuTag.CONFIDENCE_POST, intro, updates)

    if action == "post":
        context.post_confidence = value
        before = context.pre_confidence or value
        if value > before:
            verdict = COPY["verdict_up"]
        elif value == before:
            verdict = COPY["verdict_same"]
        else:
            verdict = COPY["verdict_down"]
        logger.info(f"Confidence session for {session.id}: {before} -> {value} ({context.reason})")
        return show_menu(
            MenuTag.WELCOME,
            COPY["complete"].format(before=before, after=value, verdict=verdict),
            {"flow_context": None},
        )

    raise ValueError(f"Unknown confidence action: {action}")
