"""
StudyBot — Handler Registry

One async handler per CommandType. The dispatcher falls back to
handle_unrecognized for any type missing here.
"""
from studybot.dispatch.commands import CommandType
from studybot.dispatch.dispatcher import Dispatcher
from studybot.handlers.confidence import handle_confidence_boost
from studybot.handlers.exam_prep import handle_exam_prep, handle_lesson
from studybot.handlers.friends import handle_challenge, handle_friends
from studybot.handlers.homework import handle_homework
from studybot.handlers.navigation import (
    handle_friends_menu, handle_help, handle_invalid_option, handle_main_menu,
    handle_settings_menu, handle_subject_menu, handle_unrecognized, handle_welcome_menu,
)
from studybot.handlers.panic import handle_panic
from studybot.handlers.practice import handle_practice
from studybot.handlers.questions import (
    handle_answer, handle_invalid_answer, handle_question, handle_report,
    handle_subject_switch, handle_topic_select,
)
from studybot.handlers.registration import handle_registration
from studybot.handlers.utility import (
    handle_ai_tutor, handle_hook_stats, handle_manual_hook, handle_progress, handle_settings,
)

HANDLERS = {
    CommandType.ANSWER: handle_answer,
    CommandType.INVALID_ANSWER: handle_invalid_answer,
    CommandType.WELCOME_MENU: handle_welcome_menu,
    CommandType.MAIN_MENU: handle_main_menu,
    CommandType.SUBJECT_MENU: handle_subject_menu,
    CommandType.FRIENDS_MENU: handle_friends_menu,
    CommandType.SETTINGS_MENU: handle_settings_menu,
    CommandType.HELP: handle_help,
    CommandType.QUESTION: handle_question,
    CommandType.SUBJECT_SWITCH: handle_subject_switch,
    CommandType.TOPIC_SELECT: handle_topic_select,
    CommandType.REPORT: handle_report,
    CommandType.REGISTRATION: handle_registration,
    CommandType.PRACTICE: handle_practice,
    CommandType.CONFIDENCE_BOOST: handle_confidence_boost,
    CommandType.PANIC: handle_panic,
    CommandType.EXAM_PREP: handle_exam_prep,
    CommandType.LESSON: handle_lesson,
    CommandType.HOMEWORK: handle_homework,
    CommandType.FRIENDS: handle_friends,
    CommandType.CHALLENGE: handle_challenge,
    CommandType.SETTINGS: handle_settings,
    CommandType.PROGRESS: handle_progress,
    CommandType.MANUAL_HOOK: handle_manual_hook,
    CommandType.HOOK_STATS: handle_hook_stats,
    CommandType.AI_TUTOR: handle_ai_tutor,
    CommandType.INVALID_OPTION: handle_invalid_option,
    CommandType.UNRECOGNIZED: handle_unrecognized,
}

FALLBACK = handle_unrecognized


def build_dispatcher(store, services) -> Dispatcher:
    return Dispatcher(store=store, services=services, handlers=dict(HANDLERS), fallback=FALLBACK)


__all__ = ["HANDLERS", "FALLBACK", "build_dispatcher"]
