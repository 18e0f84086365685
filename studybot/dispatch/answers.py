"""
StudyBot — Answer Validator

Recognizes multiple-choice answers independent of menu state.
The input alphabet is exactly A/B/C/D (any case) plus a few decorated forms:
    "a", "A)", "(b)", "C.", "answer d", "option: a"
No partial matches, no guessing.
"""

import re
from dataclasses import dataclass
from typing import Optional

from studybot.messages import MESSAGES

ANSWER_LETTERS = frozenset({"A", "B", "C", "D"})

DECORATED_PATTERNS = (
    re.compile(r"^([ABCD])\s*[).:]$"),
    re.compile(r"^\(\s*([ABCD])\s*\)$"),
    re.compile(r"^(?:ANSWER|OPTION|CHOICE)\s*[:\-]?\s*\(?([ABCD])\)?[.!]?$"),
)


@dataclass(frozen=True)
class AnswerResult:
    valid: bool
    letter: Optional[str] = None
    message: Optional[str] = None


def validate_answer(text: str) -> AnswerResult:
    """Return valid(letter) or invalid(correction message)."""
    normalized = " ".join((text or "").split()).upper()

    if normalized in ANSWER_LETTERS:
        return AnswerResult(valid=True, letter=normalized)

    for pattern in DECORATED_PATTERNS:
        match = pattern.match(normalized)
        if match:
            return AnswerResult(valid=True, letter=match.group(1))

    return AnswerResult(valid=False, message=MESSAGES["errors"]["invalid_answer"])
