"""
StudyBot — Exam Prep & Lesson Handlers

Flow:
    exam_prep_subject (menu)
    → exam_prep_problems (free text: what worries you)
    → exam_prep_exam_date (free text date, or "skip")
    → exam_prep_plan_decision (menu, only when the exam is far enough away)
    → exam_prep_time (free text daily time)
    → exam_prep_plan (menu) → lesson (menu) → practice
"""

import logging
import math
import re
from datetime import datetime

from studybot.config import LONG_PLAN_MIN_HOURS, SUBJECTS
from studybot.dispatch.commands import Command, CommandType
from studybot.dispatch.dispatcher import HandlerResult
from studybot.handlers.common import llm_text, show_menu
from studybot.messages import MESSAGES
from studybot.state.flow_context import ExamPrepContext, load_context, to_blob
from studybot.state.session import ExpectingInput, MenuTag, UserSession
from studybot.tutor.prompts import lesson_prompt
from studybot.utils.dates import (
    describe_when, format_time, hours_until, is_skip, parse_exam_date, parse_time_of_day,
)

logger = logging.getLogger(__name__)

COPY = MESSAGES["exam_prep"]

TOPIC_CYCLE = ("calculus", "algebra", "functions", "trigonometry", "geometry", "statistics")

TOPIC_HINTS = {
    "algebra": ("algebra", "equation", "factor", "expon", "inequal"),
    "calculus": ("calculus", "derivative", "differentiat", "limit", "integral"),
    "functions": ("function", "graph", "parabola", "hyperbola"),
    "trigonometry": ("trig", "sine", "cosine", "tangent", "angle"),
    "geometry": ("geometry", "circle", "triangle", "euclid", "analytical"),
    "statistics": ("statistic", "probabilit", "average", "median", "data"),
}


def guess_topic(text: str):
    lowered = text.lower()
    for topic, hints in TOPIC_HINTS.items():
        if any(re.search(rf"\b{hint}", lowered) for hint in hints):
            return topic
    return None


def _ctx(context: ExamPrepContext) -> dict:
    return {"flow_context": to_blob(context)}


async def _lesson(session: UserSession, context: ExamPrepContext, services) -> HandlerResult:
    context.lesson_examples += 1
    subject = SUBJECTS.get(context.chosen_subject or "math", "Mathematics")
    body = await llm_text(
        services,
        lesson_prompt(subject, context.current_topic, context.problem_details, context.lesson_examples),
        MESSAGES["lesson"]["fallback"],
        "lesson",
    )
    header = MESSAGES["lesson"]["header"].format(topic=context.current_topic.replace("_", " ").title())
    return show_menu(MenuTag.LESSON, f"{header}\n\n{body}", _ctx(context))


def _plan_menu(context: ExamPrepContext, intro: str) -> HandlerResult:
    return show_menu(MenuTag.EXAM_PREP_PLAN, intro, _ctx(context))


async def handle_exam_prep(session: UserSession, command: Command, services) -> HandlerResult:
    action = command.action or "start"

    if action == "start":
        return show_menu(MenuTag.EXAM_PREP_SUBJECT, COPY["intro"], _ctx(ExamPrepContext()))

    context = load_context(session.flow_context, ExamPrepContext)

    if action == "subject":
        context.chosen_subject = command.get("value")
        return HandlerResult(
            message=COPY["ask_problems"],
            next_state=MenuTag.EXAM_PREP_PROBLEMS,
            updates={**_ctx(context), "expecting_input": ExpectingInput.EXAM_PROBLEM_DETAILS},
        )

    if action == "problem_details":
        text = command.get("text", "")
        context.problem_details = text
        context.current_topic = guess_topic(text) or context.current_topic
        return HandlerResult(
            message=COPY["ask_date"],
            next_state=MenuTag.EXAM_PREP_EXAM_DATE,
            updates={**_ctx(context), "expecting_input": ExpectingInput.EXAM_DATE},
        )

    if action == "exam_date":
        text = command.get("text", "")
        if is_skip(text):
            return _plan_menu(context, COPY["no_plan"])

        now = datetime.now()
        exam = parse_exam_date(text, now)
        if exam is None:
            # Stay in the date state; expecting_input is untouched
            return HandlerResult(message=COPY["date_invalid"])

        context.exam_date = exam.isoformat()
        context.exam_hours_away = hours_until(exam, now)
        when = describe_when(exam, now)
        if context.exam_hours_away > LONG_PLAN_MIN_HOURS:
            return show_menu(MenuTag.EXAM_PREP_PLAN_DECISION, f"Exam {when}. 📅", _ctx(context))
        return _plan_menu(context, COPY["date_soon"].format(when=when))

    if action == "plan_yes":
        context.plan_opt_in = True
        return HandlerResult(
            message=COPY["ask_time"],
            next_state=MenuTag.EXAM_PREP_TIME,
            updates={**_ctx(context), "expecting_input": ExpectingInput.PREFERRED_TIME},
        )

    if action == "plan_no":
        context.plan_opt_in = False
        return _plan_menu(context, COPY["no_plan"])

    if action == "preferred_time":
        clock = parse_time_of_day(command.get("text", ""))
        if clock is None:
            return HandlerResult(message=COPY["time_invalid"])
        context.preferred_time = format_time(clock)
        days = max(1, math.ceil((context.exam_hours_away or 24) / 24))
        plan = COPY["plan_ready"].format(
            days=days,
            subject=SUBJECTS.get(context.chosen_subject or "math", "Mathematics"),
            topic=context.current_topic.replace("_", " "),
            time=context.preferred_time,
        )
        return show_menu(
            MenuTag.EXAM_PREP_PLAN, plan,
            {**_ctx(context), "reminder_time": context.preferred_time},
        )

    if action == "begin_review":
        context.lesson_examples = 0
        return await _lesson(session, context, services)

    if action == "switch_topic":
        index = TOPIC_CYCLE.index(context.current_topic) if context.current_topic in TOPIC_CYCLE else -1
        context.current_topic = TOPIC_CYCLE[(index + 1) % len(TOPIC_CYCLE)]
        context.lesson_examples = 0
        return _plan_menu(context, COPY["switched_topic"].format(topic=context.current_topic.replace("_", " ")))

    raise ValueError(f"Unknown exam prep action: {action}")


async def handle_lesson(session: UserSession, command: Command, services) -> HandlerResult:
    context = load_context(session.flow_context, ExamPrepContext)
    action = command.action

    if action == "start_practice":
        return HandlerResult(
            updates={"current_subject": "math", "current_topic": context.current_topic},
            follow_up=Command(CommandType.PRACTICE, "start", original_input=command.original_input),
        )

    if action == "another_example":
        return await _lesson(session, context, services)

    if action == "back":
        return _plan_menu(context, None)

    raise ValueError(f"Unknown lesson action: {action}")
