"""
StudyBot — Practice Handlers

A practice session serves questions in practice_active; after each answer
the student lands on practice_continue. Progress lives in PracticeContext.
Switching topic goes through practice_topics and keeps the counters.
"""

from studybot.dispatch.commands import Command
from studybot.dispatch.dispatcher import HandlerResult
from studybot.handlers.common import show_menu
from studybot.handlers.questions import serve_question
from studybot.messages import MESSAGES
from studybot.state.flow_context import PracticeContext, load_context, to_blob
from studybot.state.session import MenuTag, UserSession

DEFAULT_REMINDER = "19:00"


def topic_label(topic: str) -> str:
    return "Mixed" if topic == "random" else topic.replace("_", " ").title()


async def handle_practice(session: UserSession, command: Command, services) -> HandlerResult:
    action = command.action or "start"

    if action == "start":
        topic = session.current_topic or "random"
        context = PracticeContext(topic=topic)
        return await serve_question(
            session, services,
            intro=MESSAGES["practice"]["intro"].format(topic=topic_label(topic)),
            topic=topic,
            menu=MenuTag.PRACTICE_ACTIVE,
            updates={"flow_context": to_blob(context)},
        )

    if action == "continue":
        context = load_context(session.flow_context, PracticeContext)
        return await serve_question(
            session, services,
            topic=context.topic,
            menu=MenuTag.PRACTICE_ACTIVE,
            updates={"flow_context": to_blob(context)},
        )

    if action == "switch_topic":
        return show_menu(MenuTag.PRACTICE_TOPICS)

    if action == "topic":
        # Same session, same counters, new topic
        context = load_context(session.flow_context, PracticeContext)
        context.topic = command.get("topic", "random")
        return await serve_question(
            session, services,
            intro=MESSAGES["practice"]["switched"].format(topic=topic_label(context.topic)),
            topic=context.topic,
            menu=MenuTag.PRACTICE_ACTIVE,
            updates={"flow_context": to_blob(context)},
        )

    if action == "break":
        return show_menu(MenuTag.WELCOME, MESSAGES["practice"]["break"], updates={"flow_context": None})

    if action == "remind_tonight":
        reminder = session.reminder_time or DEFAULT_REMINDER
        return show_menu(
            MenuTag.WELCOME,
            MESSAGES["practice"]["remind_tonight"].format(time=reminder),
            updates={"flow_context": None, "reminder_time": reminder},
        )

    raise ValueError(f"Unknown practice action: {action}")
