"""
StudyBot — Adaptive Difficulty

Exponential moving average of correctness, mapped to easy/medium/hard bands.
Hysteresis keeps a student near a band edge from flip-flopping every answer.
"""

from typing import Optional

from studybot.config import (
    DIFF_EASY_MAX, DIFF_HYSTERESIS, DIFF_MED_MAX, EMA_ALPHA, MIN_ANSWERS_FOR_ADAPTIVE,
)

DIFFICULTIES = ("easy", "medium", "hard")


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return min(high, max(low, value))


def update_rate(old_rate: float, is_correct: bool, alpha: float = EMA_ALPHA) -> float:
    """new = α·x + (1-α)·old, rounded to 3 places."""
    new_rate = alpha * (1.0 if is_correct else 0.0) + (1 - alpha) * old_rate
    return round(clamp(new_rate), 3)


def select_difficulty(rate: float, previous: Optional[str] = None) -> str:
    if rate < DIFF_EASY_MAX:
        target = "easy"
    elif rate <= DIFF_MED_MAX:
        target = "medium"
    else:
        target = "hard"

    if previous and previous != target:
        if previous == "easy" and rate < DIFF_EASY_MAX + DIFF_HYSTERESIS:
            target = "easy"
        elif previous == "hard" and rate > DIFF_MED_MAX - DIFF_HYSTERESIS:
            target = "hard"
        elif previous == "medium" and (
            DIFF_EASY_MAX - DIFF_HYSTERESIS <= rate <= DIFF_MED_MAX + DIFF_HYSTERESIS
        ):
            target = "medium"
    return target


def difficulty_for(rate: float, answered: int, previous: Optional[str] = None) -> str:
    """Medium until the student has answered enough to judge."""
    if answered < MIN_ANSWERS_FOR_ADAPTIVE:
        return "medium"
    return select_difficulty(rate, previous)
