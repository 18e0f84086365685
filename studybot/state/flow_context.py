"""
StudyBot — Per-Flow Context

Each long-running flow keeps its private state in users.flow_context as a
JSON blob tagged with `kind`. Only one flow is active at a time. The
dispatcher passes the blob through untouched; each flow reads its own
variant with `load_context` and writes it back with `to_blob`.
"""

from dataclasses import dataclass, asdict, fields
from typing import Optional, Type, TypeVar, Union


@dataclass
class PracticeContext:
    kind: str = "practice"
    topic: Optional[str] = None
    questions_served: int = 0
    correct: int = 0


@dataclass
class ExamPrepContext:
    kind: str = "exam_prep"
    chosen_subject: Optional[str] = None
    problem_details: Optional[str] = None
    exam_date: Optional[str] = None          # ISO timestamp
    exam_hours_away: Optional[float] = None
    plan_opt_in: bool = False
    preferred_time: Optional[str] = None     # "HH:MM"
    current_topic: str = "calculus"
    lesson_examples: int = 0


@dataclass
class HomeworkContext:
    kind: str = "homework"
    chosen_subject: Optional[str] = None
    problem_type: Optional[str] = None
    confusion: Optional[str] = None
    examples_shown: int = 0


@dataclass
class ConfidenceContext:
    kind: str = "confidence"
    reason: Optional[str] = None
    pre_confidence: Optional[int] = None
    post_confidence: Optional[int] = None
    support_message: Optional[str] = None
    ladder_choice: Optional[str] = None


@dataclass
class PanicContext:
    kind: str = "panic"
    level: Optional[int] = None
    topic: str = "calculus"
    burst_index: int = 0
    burst_correct: int = 0
    bursts_done: int = 0


FlowContext = Union[PracticeContext, ExamPrepContext, HomeworkContext, ConfidenceContext, PanicContext]

C = TypeVar("C", PracticeContext, ExamPrepContext, HomeworkContext, ConfidenceContext, PanicContext)


def load_context(blob: Optional[dict], cls: Type[C]) -> C:
    """
    Read a flow's context from the stored blob.

    A missing blob, or one written by a different flow, yields a fresh context.
    Unknown keys are dropped.
    """
    default = cls()
    if not blob or blob.get("kind") != default.kind:
        return default
    known = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in blob.items() if k in known})


def to_blob(context: FlowContext) -> dict:
    return asdict(context)
