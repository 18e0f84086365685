"""
StudyBot — Complete Menu Transition Table

Every MenuTag is either a numbered menu (declared here with its options) or
an exempt free-text / answer state. Nothing in between.

A menu option is (label, Command template). The label is the copy the user
sees next to the number, so the table is also the menu renderer.

Adding a flow means adding a row here, never a branch in the parser.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from studybot.config import SUBJECTS
from studybot.dispatch.commands import Command, CommandType
from studybot.state.session import ExpectingInput, MenuTag

NUMBER_EMOJI = ("1️⃣", "2️⃣", "3️⃣", "4️⃣", "5️⃣", "6️⃣", "7️⃣", "8️⃣", "9️⃣")


def _cmd(command_type: CommandType, action: Optional[str] = None, **payload) -> Command:
    return Command(type=command_type, action=action, payload=payload)


@dataclass(frozen=True)
class MenuOption:
    label: str
    command: Command


@dataclass(frozen=True)
class MenuSpec:
    """
    prompt: line shown above the numbered options
    options: option N is options[N - 1]; numbering is always contiguous from 1
    """
    prompt: str
    options: Tuple[MenuOption, ...]

    @property
    def valid_range(self) -> str:
        return f"1-{len(self.options)}"

    def lookup(self, number: int) -> Optional[Command]:
        if 1 <= number <= len(self.options):
            return self.options[number - 1].command
        return None

    def render(self) -> str:
        lines = [self.prompt, ""]
        for index, option in enumerate(self.options):
            lines.append(f"{NUMBER_EMOJI[index]} {option.label}")
        return "\n".join(lines)


def _menu(prompt: str, *options: Tuple[str, Command]) -> MenuSpec:
    return MenuSpec(prompt=prompt, options=tuple(MenuOption(label, cmd) for label, cmd in options))


_SUBJECT_ORDER = ("math", "physics", "life_sciences", "chemistry")


def _subject_options(command_type: CommandType, action: Optional[str]):
    return [
        (SUBJECTS[key], _cmd(command_type, action, value=key) if action else _cmd(command_type, subject=key))
        for key in _SUBJECT_ORDER
    ]


_TOPICS = (
    ("Algebra", "algebra"),
    ("Geometry", "geometry"),
    ("Trigonometry", "trigonometry"),
    ("Calculus", "calculus"),
    ("Statistics", "statistics"),
    ("Functions", "functions"),
    ("Number patterns", "number_patterns"),
    ("Random mix", "random"),
)


def _topic_options(command_type: CommandType, action: Optional[str]):
    return [(label, _cmd(command_type, action, topic=key)) for label, key in _TOPICS]


# ─── The Complete Table ──────────────────────────────────────────────────────

MENU_TABLE: Dict[MenuTag, MenuSpec] = {
    # ═══════════════════════════════════════════════════════════════════════
    # Navigation
    # ═══════════════════════════════════════════════════════════════════════
    MenuTag.WELCOME: _menu(
        "What do you need right now?",
        ("📅 Exam or test coming up", _cmd(CommandType.EXAM_PREP, "start")),
        ("😰 Feeling stressed about maths", _cmd(CommandType.CONFIDENCE_BOOST, "start")),
        ("📚 Homework help", _cmd(CommandType.HOMEWORK, "start")),
        ("🧮 More practice", _cmd(CommandType.PRACTICE, "start")),
        ("📊 My progress", _cmd(CommandType.PROGRESS, "show")),
    ),
    MenuTag.MAIN: _menu(
        "Main menu",
        ("Next question", _cmd(CommandType.QUESTION, "next")),
        ("Change subject", _cmd(CommandType.SUBJECT_MENU)),
        ("My report", _cmd(CommandType.REPORT)),
        ("Friends", _cmd(CommandType.FRIENDS_MENU)),
        ("Settings", _cmd(CommandType.SETTINGS_MENU)),
    ),
    MenuTag.SUBJECT: _menu(
        "Pick a subject:",
        *_subject_options(CommandType.SUBJECT_SWITCH, None),
        ("Main menu", _cmd(CommandType.MAIN_MENU)),
    ),
    MenuTag.MATH_TOPICS: _menu(
        "Pick a maths topic:",
        *_topic_options(CommandType.TOPIC_SELECT, None),
        ("Back to subjects", _cmd(CommandType.SUBJECT_MENU)),
    ),
    MenuTag.FRIENDS: _menu(
        "👥 Friends",
        ("My friends", _cmd(CommandType.FRIENDS, "list")),
        ("Add a friend", _cmd(CommandType.FRIENDS, "add_prompt")),
        ("Challenge a friend", _cmd(CommandType.CHALLENGE, "prompt")),
        ("Main menu", _cmd(CommandType.MAIN_MENU)),
    ),
    MenuTag.SETTINGS: _menu(
        "⚙️ Settings",
        ("My profile", _cmd(CommandType.SETTINGS, "profile")),
        ("Reminder time", _cmd(CommandType.SETTINGS, "reminder_help")),
        ("Main menu", _cmd(CommandType.MAIN_MENU)),
    ),
    MenuTag.PROGRESS_SUMMARY: _menu(
        "What next?",
        ("Practice now", _cmd(CommandType.PRACTICE, "start")),
        ("Refresh", _cmd(CommandType.PROGRESS, "show")),
        ("Main menu", _cmd(CommandType.MAIN_MENU)),
    ),

    # ═══════════════════════════════════════════════════════════════════════
    # Questions & practice
    # ═══════════════════════════════════════════════════════════════════════
    MenuTag.POST_ANSWER: _menu(
        "What next?",
        ("Next question", _cmd(CommandType.QUESTION, "next")),
        ("Change subject", _cmd(CommandType.SUBJECT_MENU)),
        ("My report", _cmd(CommandType.REPORT)),
        ("Friends", _cmd(CommandType.FRIENDS_MENU)),
        ("Main menu", _cmd(CommandType.MAIN_MENU)),
    ),
    MenuTag.PRACTICE_CONTINUE: _menu(
        "Keep going?",
        ("Continue", _cmd(CommandType.PRACTICE, "continue")),
        ("Switch topic", _cmd(CommandType.PRACTICE, "switch_topic")),
        ("Short break", _cmd(CommandType.PRACTICE, "break")),
        ("Remind me tonight", _cmd(CommandType.PRACTICE, "remind_tonight")),
    ),
    MenuTag.PRACTICE_TOPICS: _menu(
        "Switch to which topic?",
        *_topic_options(CommandType.PRACTICE, "topic"),
        ("Keep current topic", _cmd(CommandType.PRACTICE, "continue")),
    ),

    # ═══════════════════════════════════════════════════════════════════════
    # Confidence boost
    # ═══════════════════════════════════════════════════════════════════════
    MenuTag.CONFIDENCE_REASON: _menu(
        "What's weighing on you?",
        ("I failed a test", _cmd(CommandType.CONFIDENCE_BOOST, "reason", value="failed")),
        ("I'm confused in class", _cmd(CommandType.CONFIDENCE_BOOST, "reason", value="confused")),
        ("Others seem ahead of me", _cmd(CommandType.CONFIDENCE_BOOST, "reason", value="comparison")),
        ("Someone said something", _cmd(CommandType.CONFIDENCE_BOOST, "reason", value="comment")),
        ("Something else", _cmd(CommandType.CONFIDENCE_BOOST, "reason", value="other")),
    ),
    MenuTag.CONFIDENCE_PRE: _menu(
        "How confident do you feel about maths right now?",
        ("Not at all", _cmd(CommandType.CONFIDENCE_BOOST, "pre", value=1)),
        ("A little", _cmd(CommandType.CONFIDENCE_BOOST, "pre", value=2)),
        ("Okay", _cmd(CommandType.CONFIDENCE_BOOST, "pre", value=3)),
        ("Fairly confident", _cmd(CommandType.CONFIDENCE_BOOST, "pre", value=4)),
        ("Very confident", _cmd(CommandType.CONFIDENCE_BOOST, "pre", value=5)),
    ),
    MenuTag.CONFIDENCE_LADDER: _menu(
        "Pick a small step:",
        ("One easy question", _cmd(CommandType.CONFIDENCE_BOOST, "ladder", value="easy")),
        ("A quick reflection", _cmd(CommandType.CONFIDENCE_BOOST, "ladder", value="reflect")),
        ("One medium question", _cmd(CommandType.CONFIDENCE_BOOST, "ladder", value="medium")),
        ("Skip for now", _cmd(CommandType.CONFIDENCE_BOOST, "ladder", value="skip")),
    ),
    MenuTag.CONFIDENCE_POST: _menu(
        "How confident do you feel now?",
        ("Not at all", _cmd(CommandType.CONFIDENCE_BOOST, "post", value=1)),
        ("A little", _cmd(CommandType.CONFIDENCE_BOOST, "post", value=2)),
        ("Okay", _cmd(CommandType.CONFIDENCE_BOOST, "post", value=3)),
        ("Fairly confident", _cmd(CommandType.CONFIDENCE_BOOST, "post", value=4)),
        ("Very confident", _cmd(CommandType.CONFIDENCE_BOOST, "post", value=5)),
    ),

    # ═══════════════════════════════════════════════════════════════════════
    # Panic button
    # ═══════════════════════════════════════════════════════════════════════
    MenuTag.PANIC_LEVEL: _menu(
        "How high is your panic right now?",
        ("Mild", _cmd(CommandType.PANIC, "level", value=1)),
        ("Manageable", _cmd(CommandType.PANIC, "level", value=2)),
        ("Elevated", _cmd(CommandType.PANIC, "level", value=3)),
        ("High", _cmd(CommandType.PANIC, "level", value=4)),
        ("Severe", _cmd(CommandType.PANIC, "level", value=5)),
    ),
    MenuTag.PANIC_TOPIC: _menu(
        "Choose a maths topic to steady yourself on:",
        ("Calculus (first principles)", _cmd(CommandType.PANIC, "topic", value="calculus")),
        ("Trigonometry (identities)", _cmd(CommandType.PANIC, "topic", value="trigonometry")),
        ("Not sure", _cmd(CommandType.PANIC, "topic", value="unknown")),
    ),
    MenuTag.PANIC_PLAN: _menu(
        "Start now?",
        ("Yes, start", _cmd(CommandType.PANIC, "module")),
        ("Switch topic", _cmd(CommandType.PANIC, "plan_switch")),
        ("Cancel", _cmd(CommandType.PANIC, "cancel")),
    ),
    MenuTag.PANIC_MODULE: _menu(
        "Ready?",
        ("Start the 3-question burst", _cmd(CommandType.PANIC, "burst")),
        ("Extra example", _cmd(CommandType.PANIC, "extra_example")),
        ("Cancel", _cmd(CommandType.PANIC, "cancel")),
    ),
    MenuTag.PANIC_MOMENTUM: _menu(
        "What next?",
        ("Continue same topic", _cmd(CommandType.PANIC, "continue")),
        ("Switch topic", _cmd(CommandType.PANIC, "switch_topic")),
        ("Take a break", _cmd(CommandType.PANIC, "break")),
        ("Remind me tonight", _cmd(CommandType.PANIC, "remind_tonight")),
    ),

    # ═══════════════════════════════════════════════════════════════════════
    # Exam prep
    # ═══════════════════════════════════════════════════════════════════════
    MenuTag.EXAM_PREP_SUBJECT: _menu(
        "Which subject is the exam for?",
        *_subject_options(CommandType.EXAM_PREP, "subject"),
    ),
    MenuTag.EXAM_PREP_PLAN_DECISION: _menu(
        "You have some time. Want a short daily plan?",
        ("Yes, make me a plan", _cmd(CommandType.EXAM_PREP, "plan_yes")),
        ("No, just review now", _cmd(CommandType.EXAM_PREP, "plan_no")),
    ),
    MenuTag.EXAM_PREP_PLAN: _menu(
        "Ready?",
        ("Begin review", _cmd(CommandType.EXAM_PREP, "begin_review")),
        ("Switch topic", _cmd(CommandType.EXAM_PREP, "switch_topic")),
        ("Main menu", _cmd(CommandType.MAIN_MENU)),
    ),
    MenuTag.LESSON: _menu(
        "What next?",
        ("Try practice questions", _cmd(CommandType.LESSON, "start_practice")),
        ("See another example", _cmd(CommandType.LESSON, "another_example")),
        ("Back", _cmd(CommandType.LESSON, "back")),
    ),

    # ═══════════════════════════════════════════════════════════════════════
    # Homework
    # ═══════════════════════════════════════════════════════════════════════
    MenuTag.HOMEWORK_SUBJECT: _menu(
        "Which subject is the homework for?",
        *_subject_options(CommandType.HOMEWORK, "subject"),
    ),
    MenuTag.HOMEWORK_PROBLEM_TYPE: _menu(
        "What kind of problem is it?",
        ("Equations", _cmd(CommandType.HOMEWORK, "problem_type", value="equations")),
        ("Functions & graphs", _cmd(CommandType.HOMEWORK, "problem_type", value="functions")),
        ("Geometry", _cmd(CommandType.HOMEWORK, "problem_type", value="geometry")),
        ("Trigonometry", _cmd(CommandType.HOMEWORK, "problem_type", value="trigonometry")),
        ("Word problems", _cmd(CommandType.HOMEWORK, "problem_type", value="word_problems")),
        ("Something else", _cmd(CommandType.HOMEWORK, "problem_type", value="other")),
    ),
    MenuTag.HOMEWORK_METHOD: _menu(
        "Does that help?",
        ("Practise a similar question", _cmd(CommandType.HOMEWORK, "practice")),
        ("Show another example", _cmd(CommandType.HOMEWORK, "another_example")),
        ("I'm done", _cmd(CommandType.HOMEWORK, "done")),
    ),
    MenuTag.HOMEWORK_COMPLETE: _menu(
        "Anything else?",
        ("More homework help", _cmd(CommandType.HOMEWORK, "start")),
        ("Main menu", _cmd(CommandType.MAIN_MENU)),
    ),
}


# States that take free text or an answer instead of a number
EXEMPT_MENUS = frozenset({
    MenuTag.NONE,
    MenuTag.REGISTRATION_NEEDS_NAME,
    MenuTag.REGISTRATION_NEEDS_USERNAME,
    MenuTag.REGISTRATION_NEEDS_GRADE,
    MenuTag.REGISTRATION_NEEDS_SUBJECTS,
    MenuTag.QUESTION_ACTIVE,
    MenuTag.PRACTICE_ACTIVE,
    MenuTag.PANIC_BURST,
    MenuTag.EXAM_PREP_PROBLEMS,
    MenuTag.EXAM_PREP_EXAM_DATE,
    MenuTag.EXAM_PREP_TIME,
    MenuTag.HOMEWORK_CONFUSION,
    MenuTag.FRIENDS_ADD,
    MenuTag.FRIENDS_CHALLENGE,
})


# ─── Free-Text Capture ───────────────────────────────────────────────────────

FREE_TEXT_CAPTURE: Dict[ExpectingInput, Command] = {
    ExpectingInput.USERNAME_FOR_FRIEND: _cmd(CommandType.FRIENDS, "add_user"),
    ExpectingInput.USERNAME_FOR_CHALLENGE: _cmd(CommandType.CHALLENGE, "send"),
    ExpectingInput.EXAM_PROBLEM_DETAILS: _cmd(CommandType.EXAM_PREP, "problem_details"),
    ExpectingInput.EXAM_DATE: _cmd(CommandType.EXAM_PREP, "exam_date"),
    ExpectingInput.PREFERRED_TIME: _cmd(CommandType.EXAM_PREP, "preferred_time"),
    ExpectingInput.HOMEWORK_CONFUSION: _cmd(CommandType.HOMEWORK, "confusion"),
}

REGISTRATION_CAPTURE = _cmd(CommandType.REGISTRATION, "input")

# Used when the stored menu tag is unknown
WIDEST_RANGE = f"1-{max(len(spec.options) for spec in MENU_TABLE.values())}"


# ─── Lookups ─────────────────────────────────────────────────────────────────

def get_menu(menu: Union[MenuTag, str, None]) -> Optional[MenuSpec]:
    tag = MenuTag.coerce(menu)
    return MENU_TABLE.get(tag) if tag is not None else None


def lookup(menu: Union[MenuTag, str, None], number: int) -> Optional[Command]:
    """Command template for (menu, number), or None when out of range."""
    spec = get_menu(menu)
    return spec.lookup(number) if spec else None


def valid_range(menu: Union[MenuTag, str, None]) -> str:
    spec = get_menu(menu)
    return spec.valid_range if spec else WIDEST_RANGE


def render_menu(menu: Union[MenuTag, str, None], intro: Optional[str] = None) -> str:
    """Menu text for a state, optionally preceded by an intro paragraph."""
    spec = get_menu(menu)
    if spec is None:
        raise KeyError(f"No numbered menu for {menu!r}")
    body = spec.render()
    return f"{intro}\n\n{body}" if intro else body


def validate_table_completeness() -> bool:
    """
    Verify every MenuTag is either a numbered menu or exempt, and every
    expected free-text field has a capture command.

    Returns True if complete, raises AssertionError if not.
    """
    tags = set(MenuTag)
    declared = set(MENU_TABLE)

    overlap = declared & EXEMPT_MENUS
    if overlap:
        raise AssertionError(f"Menus both numbered and exempt: {sorted(t.value for t in overlap)}")

    missing = tags - declared - EXEMPT_MENUS
    if missing:
        raise AssertionError(f"Missing menu entries: {sorted(t.value for t in missing)}")

    for tag, spec in MENU_TABLE.items():
        if not spec.options:
            raise AssertionError(f"Menu {tag.value} has no options")
        if len(spec.options) > len(NUMBER_EMOJI):
            raise AssertionError(f"Menu {tag.value} has more than {len(NUMBER_EMOJI)} options")

    uncaptured = set(ExpectingInput) - set(FREE_TEXT_CAPTURE)
    if uncaptured:
        raise AssertionError(f"No capture for: {sorted(e.value for e in uncaptured)}")

    return True
