"""
StudyBot — ORM Models
One row per chat user (profile + conversation state), the multiple-choice
question bank, and the small social/engagement tables around them.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    String, Integer, Float, Boolean, Text, DateTime, JSON,
    ForeignKey, Index, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studybot.database import Base


# ─── Helpers ─────────────────────────────────────────────────────────────────

def _uuid() -> str:
    return str(uuid.uuid4())

def _now() -> datetime:
    return datetime.now(timezone.utc)


# ─── Users ───────────────────────────────────────────────────────────────────

class User(Base):
    """
    The persisted conversation session. Read once before parsing,
    patched once after the handler returns.
    """
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    subscriber_id: Mapped[str] = mapped_column(String(64), unique=True, index=True)

    # Profile (collected by registration)
    display_name: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    username: Mapped[Optional[str]] = mapped_column(String(20), unique=True, nullable=True)
    grade: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    preferred_subjects: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)

    # Conversation state
    current_menu: Mapped[str] = mapped_column(String(40), default="none")
    expecting_input: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    current_question_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    flow_context: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    current_subject: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    current_topic: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    reminder_time: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)  # "HH:MM"

    # Running stats
    correct_answer_rate: Mapped[float] = mapped_column(Float, default=0.5)
    streak_count: Mapped[int] = mapped_column(Integer, default=0)
    total_questions_answered: Mapped[int] = mapped_column(Integer, default=0)
    total_correct_answers: Mapped[int] = mapped_column(Integer, default=0)
    last_difficulty: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)
    last_active_at: Mapped[datetime] = mapped_column(DateTime, default=_now, onupdate=_now)

    answers: Mapped[list["UserAnswer"]] = relationship(back_populates="user")


# ─── Question Bank ───────────────────────────────────────────────────────────

class Question(Base):
    __tablename__ = "questions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    subject: Mapped[str] = mapped_column(String(20), default="math", index=True)
    topic: Mapped[str] = mapped_column(String(30), index=True)
    difficulty: Mapped[str] = mapped_column(String(10), index=True)  # easy | medium | hard
    question_text: Mapped[str] = mapped_column(Text)
    # {"A": {"text": "...", "weakness_tag": "..."}, ...}
    choices: Mapped[dict] = mapped_column(JSON)
    correct_choice: Mapped[str] = mapped_column(String(1))
    explanation: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    last_served_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)


# ─── Answers ─────────────────────────────────────────────────────────────────

class UserAnswer(Base):
    __tablename__ = "user_answers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), index=True)
    question_id: Mapped[str] = mapped_column(String(36), ForeignKey("questions.id"))
    chosen_choice: Mapped[str] = mapped_column(String(1))
    is_correct: Mapped[bool] = mapped_column(Boolean)
    weakness_tag: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    topic: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    answered_at: Mapped[datetime] = mapped_column(DateTime, default=_now)

    user: Mapped["User"] = relationship(back_populates="answers")

    __table_args__ = (
        Index("ix_answers_user_answered", "user_id", "answered_at"),
    )


# ─── Friendships ─────────────────────────────────────────────────────────────

class Friendship(Base):
    """Unordered pair: user_low_id < user_high_id."""
    __tablename__ = "friendships"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_low_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), index=True)
    user_high_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), index=True)
    initiated_by: Mapped[str] = mapped_column(String(36))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)

    __table_args__ = (
        UniqueConstraint("user_low_id", "user_high_id", name="uq_friendship_pair"),
    )


# ─── Hook Deliveries ─────────────────────────────────────────────────────────

class HookDelivery(Base):
    __tablename__ = "hook_deliveries"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), index=True)
    hook_type: Mapped[str] = mapped_column(String(20))
    sent_at: Mapped[datetime] = mapped_column(DateTime, default=_now)
