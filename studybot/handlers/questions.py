"""
StudyBot — Question & Answer Handlers

Serving questions (adaptive difficulty), grading answers, subject/topic
switching and the stats report.

After grading, the answer handler routes by where the question came from:
    - practice       → practice_continue
    - confidence     → confidence_post (ladder question)
    - panic burst    → next burst question, or panic_momentum after three
    - anything else  → post_answer
"""

import logging
from typing import Any, Dict, Optional, Union

from fastapi.concurrency import run_in_threadpool

from studybot.config import SUBJECTS
from studybot.dispatch.commands import Command, CommandType
from studybot.dispatch.dispatcher import HandlerResult
from studybot.handlers.common import show_menu
from studybot.messages import MESSAGES
from studybot.services.difficulty import difficulty_for, update_rate
from studybot.services.questions import format_question
from studybot.state.flow_context import (
    ConfidenceContext, PanicContext, PracticeContext, load_context, to_blob,
)
from studybot.state.session import MenuTag, UserSession

logger = logging.getLogger(__name__)

LEVELS = (
    (100, "Legend 👑"),
    (50, "Master 🏆"),
    (25, "Expert 🎯"),
    (10, "Rising Star ⭐"),
    (0, "Rookie 🌱"),
)


def level_for(answered: int) -> str:
    for threshold, name in LEVELS:
        if answered >= threshold:
            return name
    return LEVELS[-1][1]


def accuracy(session: UserSession) -> int:
    if not session.total_questions_answered:
        return 0
    return round(100 * session.total_correct_answers / session.total_questions_answered)


# ─── Serving ─────────────────────────────────────────────────────────────────

async def serve_question(
    session: UserSession,
    services,
    intro: Optional[str] = None,
    topic: Optional[str] = None,
    difficulty: Optional[str] = None,
    menu: MenuTag = MenuTag.QUESTION_ACTIVE,
    updates: Optional[Dict[str, Any]] = None,
) -> HandlerResult:
    """Pick the next question and move into an answer state."""
    subject = session.current_subject or "math"
    topic = topic or session.current_topic
    difficulty = difficulty or difficulty_for(
        session.correct_answer_rate,
        session.total_questions_answered,
        session.last_difficulty,
    )

    question = await run_in_threadpool(
        services.questions.next_question, topic, difficulty, subject, session.current_question_id,
    )
    if question is None and subject != "math":
        intro = MESSAGES["questions"]["subject_soon"].format(subject=SUBJECTS.get(subject, subject))
        question = await run_in_threadpool(
            services.questions.next_question, topic, difficulty, "math", None,
        )
    if question is None:
        return show_menu(MenuTag.MAIN, MESSAGES["errors"]["no_questions"])

    text = format_question(question)
    return HandlerResult(
        message=f"{intro}\n\n{text}" if intro else text,
        next_state=menu,
        updates={
            **(updates or {}),
            "current_question_id": question.id,
            "last_difficulty": question.difficulty,
        },
    )


async def handle_question(session: UserSession, command: Command, services) -> HandlerResult:
    # A plain "next question" leaves whatever flow was running
    return await serve_question(session, services, updates={"flow_context": None})


async def handle_subject_switch(session: UserSession, command: Command, services) -> HandlerResult:
    subject = command.get("subject", "math")
    if subject == "math":
        return show_menu(MenuTag.MATH_TOPICS, updates={"current_subject": "math"})
    return HandlerResult(
        updates={"current_subject": subject, "current_topic": None},
        follow_up=Command(CommandType.QUESTION, "next", original_input=command.original_input),
    )


async def handle_topic_select(session: UserSession, command: Command, services) -> HandlerResult:
    topic = command.get("topic", "random")
    return HandlerResult(
        updates={"current_subject": "math", "current_topic": topic},
        follow_up=Command(CommandType.QUESTION, "next", original_input=command.original_input),
    )


# ─── Grading ─────────────────────────────────────────────────────────────────

def _no_question(session: UserSession) -> HandlerResult:
    """Answer state without a question: clear it and go home."""
    logger.warning(f"User {session.id} in {session.current_menu.value} with no active question")
    result = show_menu(MenuTag.WELCOME, MESSAGES["errors"]["no_question_active"])
    result.updates["current_question_id"] = None
    return result


async def handle_answer(session: UserSession, command: Command, services) -> HandlerResult:
    if not session.has_active_question:
        return _no_question(session)

    question = await run_in_threadpool(services.questions.get, session.current_question_id)
    if question is None:
        logger.warning(f"Question {session.current_question_id} missing for user {session.id}")
        return HandlerResult(
            message=MESSAGES["errors"]["question_missing"],
            updates={"current_question_id": None},
            follow_up=Command(CommandType.QUESTION, "next", original_input=command.original_input),
        )

    letter = command.get("answer")
    outcome = await run_in_threadpool(services.questions.record_answer, session.id, question, letter)

    streak = session.streak_count + 1 if outcome.is_correct else 0
    updates = {
        "current_question_id": None,
        "correct_answer_rate": update_rate(session.correct_answer_rate, outcome.is_correct),
        "streak_count": streak,
        "total_questions_answered": session.total_questions_answered + 1,
        "total_correct_answers": session.total_correct_answers + (1 if outcome.is_correct else 0),
    }

    if outcome.is_correct:
        feedback = MESSAGES["questions"]["correct"].format(explanation=outcome.explanation)
    else:
        feedback = MESSAGES["questions"]["incorrect"].format(
            correct=outcome.correct_choice, explanation=outcome.explanation,
        )
    feedback = feedback.strip()
    if streak >= 2:
        feedback += "\n" + MESSAGES["questions"]["streak"].format(streak=streak)

    logger.info(
        f"User {session.id} answered {letter} on {question.id}: "
        f"{'correct' if outcome.is_correct else 'wrong'}"
    )

    if session.current_menu == MenuTag.PRACTICE_ACTIVE:
        practice = load_context(session.flow_context, PracticeContext)
        practice.questions_served += 1
        practice.correct += 1 if outcome.is_correct else 0
        updates["flow_context"] = to_blob(practice)
        progress = MESSAGES["practice"]["progress"].format(
            correct=practice.correct, served=practice.questions_served,
        )
        return show_menu(MenuTag.PRACTICE_CONTINUE, f"{feedback}\n\n{progress}", updates)

    if session.current_menu == MenuTag.PANIC_BURST:
        panic = load_context(session.flow_context, PanicContext)
        panic.burst_index += 1
        panic.burst_correct += 1 if outcome.is_correct else 0
        updates["flow_context"] = to_blob(panic)
        return HandlerResult(
            message=feedback,
            updates=updates,
            follow_up=Command(CommandType.PANIC, "burst_next", original_input=command.original_input),
        )

    confidence = load_context(session.flow_context, ConfidenceContext)
    if confidence.ladder_choice in ("easy", "medium") and confidence.post_confidence is None:
        return show_menu(MenuTag.CONFIDENCE_POST, feedback, updates)

    return show_menu(MenuTag.POST_ANSWER, feedback, updates)


async def handle_invalid_answer(session: UserSession, command: Command, services) -> Union[str, HandlerResult]:
    if not session.has_active_question:
        return _no_question(session)
    return command.get("message") or MESSAGES["errors"]["invalid_answer"]


# ─── Report ──────────────────────────────────────────────────────────────────

def build_report(session: UserSession) -> str:
    return MESSAGES["report"].format(
        name=session.display_name or "Your",
        level=level_for(session.total_questions_answered),
        answered=session.total_questions_answered,
        correct=session.total_correct_answers,
        accuracy=accuracy(session),
        streak=session.streak_count,
        difficulty=difficulty_for(
            session.correct_answer_rate,
            session.total_questions_answered,
            session.last_difficulty,
        ),
    )


async def handle_report(session: UserSession, command: Command, services) -> HandlerResult:
    return show_menu(MenuTag.MAIN, build_report(session))
