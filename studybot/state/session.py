"""
StudyBot — Session State Schema

Every user has ONE session record. The dispatcher reads it once per inbound
message, hands a read-only projection to the parser, and writes back exactly
one merged patch after the handler returns.

Persistence Rules:
- current_menu: always one MenuTag. Unknown stored strings are coerced on load.
- expecting_input: cleared on every menu transition unless the handler sets it.
- current_question_id: while set, every message is validated as an answer first.
- flow_context: opaque to the core. Owned by the flow that wrote it.
"""

import logging
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)


class MenuTag(str, Enum):
    """Every conversational state a user can be in."""
    NONE = "none"

    # Registration (free text)
    REGISTRATION_NEEDS_NAME = "registration_needs_name"
    REGISTRATION_NEEDS_USERNAME = "registration_needs_username"
    REGISTRATION_NEEDS_GRADE = "registration_needs_grade"
    REGISTRATION_NEEDS_SUBJECTS = "registration_needs_subjects"

    # Navigation menus
    WELCOME = "welcome"
    MAIN = "main"
    SUBJECT = "subject"
    MATH_TOPICS = "math_topics"
    FRIENDS = "friends"
    SETTINGS = "settings"
    PROGRESS_SUMMARY = "progress_summary"

    # Questions
    QUESTION_ACTIVE = "question_active"
    POST_ANSWER = "post_answer"
    PRACTICE_ACTIVE = "practice_active"
    PRACTICE_CONTINUE = "practice_continue"
    PRACTICE_TOPICS = "practice_topics"

    # Confidence boost
    CONFIDENCE_REASON = "confidence_reason"
    CONFIDENCE_PRE = "confidence_pre"
    CONFIDENCE_LADDER = "confidence_ladder"
    CONFIDENCE_POST = "confidence_post"

    # Exam prep
    EXAM_PREP_SUBJECT = "exam_prep_subject"
    EXAM_PREP_PROBLEMS = "exam_prep_problems"
    EXAM_PREP_EXAM_DATE = "exam_prep_exam_date"
    EXAM_PREP_PLAN_DECISION = "exam_prep_plan_decision"
    EXAM_PREP_TIME = "exam_prep_time"
    EXAM_PREP_PLAN = "exam_prep_plan"
    LESSON = "lesson"

    # Panic button
    PANIC_LEVEL = "panic_level"
    PANIC_TOPIC = "panic_topic"
    PANIC_PLAN = "panic_plan"
    PANIC_MODULE = "panic_module"
    PANIC_BURST = "panic_burst"
    PANIC_MOMENTUM = "panic_momentum"

    # Homework
    HOMEWORK_SUBJECT = "homework_subject"
    HOMEWORK_PROBLEM_TYPE = "homework_problem_type"
    HOMEWORK_CONFUSION = "homework_confusion"
    HOMEWORK_METHOD = "homework_method"
    HOMEWORK_COMPLETE = "homework_complete"

    # Friends (free text)
    FRIENDS_ADD = "friends_add"
    FRIENDS_CHALLENGE = "friends_challenge"

    @classmethod
    def coerce(cls, value: Union["MenuTag", str, None]) -> Optional["MenuTag"]:
        """Map a stored string to a MenuTag. Returns None for unknown tags."""
        if value is None or isinstance(value, MenuTag):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


REGISTRATION_STATES = frozenset({
    MenuTag.REGISTRATION_NEEDS_NAME,
    MenuTag.REGISTRATION_NEEDS_USERNAME,
    MenuTag.REGISTRATION_NEEDS_GRADE,
    MenuTag.REGISTRATION_NEEDS_SUBJECTS,
})

# States where the pending multiple-choice question owns the input
ANSWER_STATES = frozenset({
    MenuTag.QUESTION_ACTIVE,
    MenuTag.PRACTICE_ACTIVE,
    MenuTag.PANIC_BURST,
})


class ExpectingInput(str, Enum):
    """Free-text fields a flow can ask for."""
    USERNAME_FOR_FRIEND = "username_for_friend"
    USERNAME_FOR_CHALLENGE = "username_for_challenge"
    EXAM_PROBLEM_DETAILS = "exam_problem_details"
    EXAM_DATE = "exam_date"
    PREFERRED_TIME = "preferred_time"
    HOMEWORK_CONFUSION = "homework_confusion"

    @classmethod
    def coerce(cls, value: Union["ExpectingInput", str, None]) -> Optional["ExpectingInput"]:
        if value is None or isinstance(value, ExpectingInput):
            return value
        try:
            return cls(value)
        except ValueError:
            logger.warning(f"Unknown expecting_input tag '{value}' ignored")
            return None


USERNAME_INPUTS = frozenset({
    ExpectingInput.USERNAME_FOR_FRIEND,
    ExpectingInput.USERNAME_FOR_CHALLENGE,
})


# ─── User Session ────────────────────────────────────────────────────────────

@dataclass
class UserSession:
    """
    Snapshot of one user's persisted record, detached from the ORM.

    Handlers read from it and return patches; they never mutate it.
    """
    id: str
    subscriber_id: str

    # ─── Conversation state ──────────────────────────────────────────────────
    current_menu: MenuTag = MenuTag.NONE
    raw_menu: Optional[str] = None          # stored string when it was not a known tag
    expecting_input: Optional[ExpectingInput] = None
    current_question_id: Optional[str] = None
    flow_context: Optional[dict] = None

    # ─── Profile ─────────────────────────────────────────────────────────────
    display_name: Optional[str] = None
    username: Optional[str] = None
    grade: Optional[str] = None
    preferred_subjects: list = field(default_factory=list)
    current_subject: Optional[str] = None
    current_topic: Optional[str] = None
    reminder_time: Optional[str] = None

    # ─── Stats ───────────────────────────────────────────────────────────────
    correct_answer_rate: float = 0.5
    streak_count: int = 0
    total_questions_answered: int = 0
    total_correct_answers: int = 0
    last_difficulty: Optional[str] = None

    @property
    def is_registered(self) -> bool:
        return bool(
            self.display_name
            and self.username
            and self.grade
            and self.preferred_subjects
        )

    @property
    def has_active_question(self) -> bool:
        return self.current_question_id is not None

    @classmethod
    def from_row(cls, row: Any) -> "UserSession":
        """Build a snapshot from a users row."""
        menu = MenuTag.coerce(row.current_menu)
        raw_menu = None
        if menu is None:
            logger.warning(f"User {row.id} has unknown menu tag '{row.current_menu}'")
            raw_menu = row.current_menu
            menu = MenuTag.NONE
        return cls(
            id=row.id,
            subscriber_id=row.subscriber_id,
            current_menu=menu,
            raw_menu=raw_menu,
            expecting_input=ExpectingInput.coerce(row.expecting_input),
            current_question_id=row.current_question_id,
            flow_context=row.flow_context,
            display_name=row.display_name,
            username=row.username,
            grade=row.grade,
            preferred_subjects=list(row.preferred_subjects or []),
            current_subject=row.current_subject,
            current_topic=row.current_topic,
            reminder_time=row.reminder_time,
            correct_answer_rate=row.correct_answer_rate if row.correct_answer_rate is not None else 0.5,
            streak_count=row.streak_count or 0,
            total_questions_answered=row.total_questions_answered or 0,
            total_correct_answers=row.total_correct_answers or 0,
            last_difficulty=row.last_difficulty,
        )


# ─── Session Patch ───────────────────────────────────────────────────────────

PATCHABLE_FIELDS = frozenset(
    f.name for f in fields(UserSession)
    if f.name not in ("id", "subscriber_id", "raw_menu")
)


class SessionPatch:
    """
    Partial update to a UserSession. Only fields explicitly set are written;
    setting a field to None clears it.
    """

    __slots__ = ("_values",)

    def __init__(self, **values: Any):
        unknown = set(values) - PATCHABLE_FIELDS
        if unknown:
            raise ValueError(f"Not patchable: {sorted(unknown)}")
        self._values: Dict[str, Any] = dict(values)

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def __bool__(self) -> bool:
        return bool(self._values)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SessionPatch) and self._values == other._values

    def __repr__(self) -> str:
        return f"SessionPatch({self._values!r})"

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    @property
    def current_menu(self) -> Optional[MenuTag]:
        return self._values.get("current_menu")

    def merge(self, later: "SessionPatch") -> "SessionPatch":
        """Combine two patches; fields in `later` win."""
        merged = SessionPatch()
        merged._values = {**self._values, **later._values}
        return merged

    def apply_to(self, session: UserSession) -> UserSession:
        """Return a new snapshot with this patch applied."""
        return replace(session, **self._values)

    def to_columns(self) -> Dict[str, Any]:
        """Serialize to column values for the single UPDATE statement."""
        columns = {}
        for name, value in self._values.items():
            if isinstance(value, Enum):
                value = value.value
            columns[name] = value
        return columns


# ─── Parse Context ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ParseContext:
    """Read-only projection of the session that the parser is allowed to see."""
    current_menu: Union[MenuTag, str, None] = None
    expecting_answer: bool = False
    has_active_question: bool = False
    expecting_username_kind: Optional[ExpectingInput] = None
    expecting_registration_input: bool = False
    expecting_input: Optional[ExpectingInput] = None

    @classmethod
    def from_session(cls, session: UserSession) -> "ParseContext":
        menu: Union[MenuTag, str] = session.raw_menu or session.current_menu
        expecting = session.expecting_input
        return cls(
            current_menu=menu,
            expecting_answer=session.current_menu in ANSWER_STATES,
            has_active_question=session.has_active_question,
            expecting_username_kind=expecting if expecting in USERNAME_INPUTS else None,
            expecting_registration_input=session.current_menu in REGISTRATION_STATES,
            expecting_input=expecting,
        )
