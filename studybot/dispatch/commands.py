"""
StudyBot — Command Types

A Command is the typed reading of one inbound message. It lives for one
request and is never persisted.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class CommandType(str, Enum):
    # Answers
    ANSWER = "answer"
    INVALID_ANSWER = "invalid_answer"

    # Navigation
    WELCOME_MENU = "welcome_menu"
    MAIN_MENU = "main_menu"
    SUBJECT_MENU = "subject_menu"
    FRIENDS_MENU = "friends_menu"
    SETTINGS_MENU = "settings_menu"
    HELP = "help"

    # Questions
    QUESTION = "question"
    SUBJECT_SWITCH = "subject_switch"
    TOPIC_SELECT = "topic_select"
    REPORT = "report"

    # Flows
    REGISTRATION = "registration"
    PRACTICE = "practice"
    CONFIDENCE_BOOST = "confidence_boost"
    PANIC = "panic"
    EXAM_PREP = "exam_prep"
    LESSON = "lesson"
    HOMEWORK = "homework"
    FRIENDS = "friends"
    CHALLENGE = "challenge"
    SETTINGS = "settings"
    PROGRESS = "progress"

    # Utilities
    MANUAL_HOOK = "manual_hook"
    HOOK_STATS = "hook_stats"
    AI_TUTOR = "ai_tutor"

    # Misses
    INVALID_OPTION = "invalid_option"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class Command:
    """
    type: which handler runs
    action: sub-action inside that handler ("start", "add_user", ...)
    payload: type-specific fields (answer letter, menu_choice, target, ...)
    original_input: untouched user text, for error messages and logs
    """
    type: CommandType
    action: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict)
    original_input: str = ""

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)

    def with_input(self, original_input: str, **extra: Any) -> "Command":
        """Copy of this template bound to one message."""
        return Command(
            type=self.type,
            action=self.action,
            payload={**self.payload, **extra},
            original_input=original_input,
        )

    def describe(self) -> str:
        return f"{self.type.value}:{self.action}" if self.action else self.type.value
