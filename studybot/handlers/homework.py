"""
StudyBot — Homework Help Handlers

Teaches a method for the student's kind of problem, never the answer.
Flow: subject → problem type → free-text confusion → method → practice/example/done
"""

from studybot.config import SUBJECTS
from studybot.dispatch.commands import Command, CommandType
from studybot.dispatch.dispatcher import HandlerResult
from studybot.handlers.common import llm_text, show_menu
from studybot.messages import MESSAGES
from studybot.state.flow_context import HomeworkContext, load_context, to_blob
from studybot.state.session import ExpectingInput, MenuTag, UserSession
from studybot.tutor.prompts import method_prompt

COPY = MESSAGES["homework"]

# Question-bank topic to practise after each problem type
PRACTICE_TOPICS = {
    "equations": "algebra",
    "functions": "functions",
    "geometry": "geometry",
    "trigonometry": "trigonometry",
    "word_problems": "algebra",
    "other": "random",
}


async def _method(context: HomeworkContext, services) -> HandlerResult:
    context.examples_shown += 1
    method = await llm_text(
        services,
        method_prompt(
            SUBJECTS.get(context.chosen_subject or "math", "Mathematics"),
            context.problem_type or "other",
            context.confusion or "",
            context.examples_shown,
        ),
        COPY["method_fallback"],
        "homework method",
    )
    return show_menu(
        MenuTag.HOMEWORK_METHOD,
        COPY["method_header"].format(method=method),
        {"flow_context": to_blob(context)},
    )


async def handle_homework(session: UserSession, command: Command, services) -> HandlerResult:
    action = command.action or "start"

    if action == "start":
        return show_menu(MenuTag.HOMEWORK_SUBJECT, COPY["intro"], {"flow_context": to_blob(HomeworkContext())})

    context = load_context(session.flow_context, HomeworkContext)

    if action == "subject":
        context.chosen_subject = command.get("value")
        return show_menu(MenuTag.HOMEWORK_PROBLEM_TYPE, updates={"flow_context": to_blob(context)})

    if action == "problem_type":
        context.problem_type = command.get("value")
        return HandlerResult(
            message=COPY["ask_confusion"],
            next_state=MenuTag.HOMEWORK_CONFUSION,
            updates={
                "flow_context": to_blob(context),
                "expecting_input": ExpectingInput.HOMEWORK_CONFUSION,
            },
        )

    if action == "confusion":
        context.confusion = command.get("text", "")
        context.examples_shown = 0
        return await _method(context, services)

    if action == "another_example":
        return await _method(context, services)

    if action == "practice":
        topic = PRACTICE_TOPICS.get(context.problem_type or "other", "random")
        return HandlerResult(
            updates={"current_subject": "math", "current_topic": topic},
            follow_up=Command(CommandType.QUESTION, "next", original_input=command.original_input),
        )

    if action == "done":
        return show_menu(MenuTag.HOMEWORK_COMPLETE, COPY["done"], {"flow_context": None})

    raise ValueError(f"Unknown homework action: {action}")
