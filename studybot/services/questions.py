"""
StudyBot — Question Bank

Multiple-choice questions served least-recently-used first, with graceful
widening when a topic/difficulty cell is empty:
    (topic, difficulty) → (topic, any) → (any, difficulty) → (any, any)

All methods are synchronous; handlers call them through run_in_threadpool.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker

from studybot.messages import MESSAGES
from studybot.models import Question, UserAnswer

logger = logging.getLogger(__name__)

RANDOM_TOPIC = "random"


@dataclass(frozen=True)
class QuestionView:
    """Detached copy of a question row."""
    id: str
    subject: str
    topic: str
    difficulty: str
    text: str
    choices: dict
    correct_choice: str
    explanation: Optional[str] = None

    @classmethod
    def from_row(cls, row: Question) -> "QuestionView":
        return cls(
            id=row.id,
            subject=row.subject,
            topic=row.topic,
            difficulty=row.difficulty,
            text=row.question_text,
            choices=dict(row.choices or {}),
            correct_choice=row.correct_choice,
            explanation=row.explanation,
        )

    def weakness_tag(self, letter: str) -> Optional[str]:
        choice = self.choices.get(letter) or {}
        return choice.get("weakness_tag")


@dataclass(frozen=True)
class AnswerOutcome:
    is_correct: bool
    correct_choice: str
    weakness_tag: Optional[str]
    explanation: str


def format_question(question: QuestionView, number: Optional[int] = None) -> str:
    """Question text, lettered choices, and the reply hint."""
    title = f"Question {number}" if number else question.topic.replace("_", " ").title()
    lines = [f"🧮 {title} ({question.difficulty})", "", question.text, ""]
    for letter in sorted(question.choices):
        lines.append(f"{letter}) {question.choices[letter]['text']}")
    lines += ["", MESSAGES["questions"]["footer"]]
    return "\n".join(lines)


class QuestionBank:

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def next_question(
        self,
        topic: Optional[str],
        difficulty: Optional[str],
        subject: str = "math",
        exclude_id: Optional[str] = None,
    ) -> Optional[QuestionView]:
        """Pick and mark-as-served the best question for this topic/difficulty."""
        if topic == RANDOM_TOPIC:
            topic = None

        attempts = [(topic, difficulty), (topic, None), (None, difficulty), (None, None)]
        with self._session_factory() as db:
            for attempt_topic, attempt_difficulty in dict.fromkeys(attempts):
                stmt = select(Question).where(Question.active.is_(True), Question.subject == subject)
                if attempt_topic:
                    stmt = stmt.where(Question.topic == attempt_topic)
                if attempt_difficulty:
                    stmt = stmt.where(Question.difficulty == attempt_difficulty)
                if exclude_id:
                    stmt = stmt.where(Question.id != exclude_id)
                stmt = stmt.order_by(
                    Question.last_served_at.is_(None).desc(),
                    Question.last_served_at.asc(),
                    Question.id,
                ).limit(1)

                row = db.scalar(stmt)
                if row is not None:
                    if (attempt_topic, attempt_difficulty) != (topic, difficulty):
                        logger.info(
                            f"No {difficulty} {topic} question, widened to "
                            f"{attempt_difficulty or 'any'} {attempt_topic or 'any'}"
                        )
                    row.last_served_at = datetime.now(timezone.utc)
                    db.commit()
                    return QuestionView.from_row(row)

        logger.warning(f"Question bank empty for subject {subject}")
        return None

    def get(self, question_id: str) -> Optional[QuestionView]:
        with self._session_factory() as db:
            row = db.get(Question, question_id)
            return QuestionView.from_row(row) if row else None

    def record_answer(self, user_id: str, question: QuestionView, letter: str) -> AnswerOutcome:
        is_correct = letter == question.correct_choice
        tag = None if is_correct else question.weakness_tag(letter)
        with self._session_factory() as db:
            db.add(UserAnswer(
                user_id=user_id,
                question_id=question.id,
                chosen_choice=letter,
                is_correct=is_correct,
                weakness_tag=tag,
                topic=question.topic,
            ))
            db.commit()
        return AnswerOutcome(
            is_correct=is_correct,
            correct_choice=question.correct_choice,
            weakness_tag=tag,
            explanation=question.explanation or "",
        )

    def weak_spots(self, user_id: str, limit: int = 3) -> List[str]:
        """Most frequent weakness tags from wrong answers."""
        with self._session_factory() as db:
            tags = db.scalars(
                select(UserAnswer.weakness_tag).where(
                    UserAnswer.user_id == user_id,
                    UserAnswer.is_correct.is_(False),
                    UserAnswer.weakness_tag.is_not(None),
                )
            ).all()
        return [tag for tag, _ in Counter(tags).most_common(limit)]

    def count(self) -> int:
        with self._session_factory() as db:
            return db.scalar(select(func.count()).select_from(Question)) or 0

    def seed(self, questions: Iterable[dict]) -> int:
        added = 0
        with self._session_factory() as db:
            for data in questions:
                db.add(Question(
                    id=data["id"],
                    subject=data.get("subject", "math"),
                    topic=data["topic"],
                    difficulty=data["difficulty"],
                    question_text=data["question_text"],
                    choices=data["choices"],
                    correct_choice=data["correct_choice"],
                    explanation=data.get("explanation"),
                    active=True,
                ))
                added += 1
            db.commit()
        return added
