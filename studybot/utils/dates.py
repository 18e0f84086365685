"""
StudyBot — Date & Time Parsing

Loose natural-language parsing for exam dates and reminder times:
    "tomorrow 2pm", "friday", "next mon 9:30", "in 5 days",
    "22 aug", "aug 22 2026", "2026-11-03", "3/11"

No time given → 19:00. Dates in the past are rejected.
"""

import re
from datetime import datetime, timedelta
from typing import Optional, Tuple

SKIP_WORDS = frozenset({"skip", "not sure", "later", "dont know", "don't know"})

DEFAULT_HOUR = 19

WEEKDAYS = {
    "monday": 0, "mon": 0,
    "tuesday": 1, "tue": 1, "tues": 1,
    "wednesday": 2, "wed": 2,
    "thursday": 3, "thu": 3, "thur": 3, "thurs": 3,
    "friday": 4, "fri": 4,
    "saturday": 5, "sat": 5,
    "sunday": 6, "sun": 6,
}

MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "sept": 9, "oct": 10, "nov": 11, "dec": 12,
}

_MONTH_RE = r"(jan|feb|mar|apr|may|jun|jul|aug|sept?|oct|nov|dec)[a-z]*"

TIME_RE = re.compile(r"\b(\d{1,2})(?:[:h](\d{2}))?\s*(am|pm)\b|\b(\d{1,2})[:h](\d{2})\b")
BARE_HOUR_RE = re.compile(r"^(\d{1,2})$")
IN_N_RE = re.compile(r"\bin\s+(\d{1,3})\s+(day|days|week|weeks)\b")
ISO_RE = re.compile(r"\b(\d{4})-(\d{1,2})-(\d{1,2})\b")
NUMERIC_RE = re.compile(r"\b(\d{1,2})[/.](\d{1,2})(?:[/.](\d{2,4}))?\b")
DAY_MONTH_RE = re.compile(rf"\b(\d{{1,2}})(?:st|nd|rd|th)?\s+{_MONTH_RE}(?:\s+(\d{{4}}))?\b")
MONTH_DAY_RE = re.compile(rf"\b{_MONTH_RE}\s+(\d{{1,2}})(?:st|nd|rd|th)?(?:,?\s+(\d{{4}}))?\b")
WEEKDAY_RE = re.compile(r"\b(?:(next|this)\s+)?(" + "|".join(sorted(WEEKDAYS, key=len, reverse=True)) + r")\b")


def is_skip(text: str) -> bool:
    return " ".join(text.lower().split()) in SKIP_WORDS


def _to_24h(hour: int, minute: int, period: Optional[str]) -> Optional[Tuple[int, int]]:
    if period:
        if not 1 <= hour <= 12:
            return None
        if period == "pm" and hour < 12:
            hour += 12
        if period == "am" and hour == 12:
            hour = 0
    if 0 <= hour <= 23 and 0 <= minute <= 59:
        return hour, minute
    return None


def parse_time_of_day(text: str) -> Optional[Tuple[int, int]]:
    """
    "7pm", "7:30 pm", "19:00", "19h00" → (hour, minute).
    A bare "7" means evening (19:00); a bare "13"-"23" is taken as-is.
    """
    cleaned = text.strip().lower()
    bare = BARE_HOUR_RE.match(cleaned)
    if bare:
        hour = int(bare.group(1))
        if 1 <= hour <= 11:
            hour += 12
        return (hour, 0) if hour <= 23 else None

    match = TIME_RE.search(cleaned)
    if not match:
        return None
    if match.group(3):
        return _to_24h(int(match.group(1)), int(match.group(2) or 0), match.group(3))
    return _to_24h(int(match.group(4)), int(match.group(5)), None)


def format_time(hour_minute: Tuple[int, int]) -> str:
    return f"{hour_minute[0]:02d}:{hour_minute[1]:02d}"


def _safe_date(year: int, month: int, day: int) -> Optional[datetime]:
    try:
        return datetime(year, month, day)
    except ValueError:
        return None


def _roll_forward(candidate: Optional[datetime], now: datetime, explicit_year: bool) -> Optional[datetime]:
    """A day/month without a year that already passed means next year."""
    if candidate is None or explicit_year or candidate.date() >= now.date():
        return candidate
    return _safe_date(candidate.year + 1, candidate.month, candidate.day)


def _parse_day(cleaned: str, now: datetime) -> Optional[datetime]:
    today = datetime(now.year, now.month, now.day)

    if re.search(r"\b(today|tonight)\b", cleaned):
        return today
    if re.search(r"\b(tomorrow|tmrw|tom)\b", cleaned):
        return today + timedelta(days=1)

    match = IN_N_RE.search(cleaned)
    if match:
        amount = int(match.group(1))
        days = amount * 7 if match.group(2).startswith("week") else amount
        return today + timedelta(days=days)

    match = ISO_RE.search(cleaned)
    if match:
        return _safe_date(int(match.group(1)), int(match.group(2)), int(match.group(3)))

    match = DAY_MONTH_RE.search(cleaned)
    if match:
        year = match.group(3)
        candidate = _safe_date(int(year) if year else now.year, MONTHS[match.group(2)[:3]], int(match.group(1)))
        return _roll_forward(candidate, now, bool(year))

    match = MONTH_DAY_RE.search(cleaned)
    if match:
        year = match.group(3)
        candidate = _safe_date(int(year) if year else now.year, MONTHS[match.group(1)[:3]], int(match.group(2)))
        return _roll_forward(candidate, now, bool(year))

    match = NUMERIC_RE.search(cleaned)
    if match:
        # Day first
        year = match.group(3)
        full_year = None
        if year:
            full_year = int(year) + 2000 if len(year) == 2 else int(year)
        candidate = _safe_date(full_year or now.year, int(match.group(2)), int(match.group(1)))
        return _roll_forward(candidate, now, bool(year))

    match = WEEKDAY_RE.search(cleaned)
    if match:
        target = WEEKDAYS[match.group(2)]
        ahead = (target - today.weekday()) % 7
        if ahead == 0 or match.group(1) == "next":
            ahead = ahead or 7
        return today + timedelta(days=ahead)

    return None


def parse_exam_date(text: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """Exam datetime (naive, local) or None when unreadable or in the past."""
    now = now or datetime.now()
    cleaned = " ".join(text.lower().split())

    day = _parse_day(cleaned, now)
    if day is None:
        return None

    # Strip the date part so "22 aug" is not read as 22:00
    time_source = ISO_RE.sub(" ", cleaned)
    time_source = NUMERIC_RE.sub(" ", time_source)
    match = TIME_RE.search(time_source)
    clock = None
    if match:
        if match.group(3):
            clock = _to_24h(int(match.group(1)), int(match.group(2) or 0), match.group(3))
        else:
            clock = _to_24h(int(match.group(4)), int(match.group(5)), None)
    hour, minute = clock or (DEFAULT_HOUR, 0)

    exam = day.replace(hour=hour, minute=minute)
    if exam < now:
        return None
    return exam


def hours_until(moment: datetime, now: Optional[datetime] = None) -> float:
    now = now or datetime.now()
    return round((moment - now).total_seconds() / 3600, 1)


def describe_when(moment: datetime, now: Optional[datetime] = None) -> str:
    """'today at 19:00', 'tomorrow at 14:00', 'on Fri 22 Aug at 19:00'."""
    now = now or datetime.now()
    delta_days = (moment.date() - now.date()).days
    clock = moment.strftime("%H:%M")
    if delta_days == 0:
        return f"today at {clock}"
    if delta_days == 1:
        return f"tomorrow at {clock}"
    return f"on {moment.strftime('%a %d %b')} at {clock}"
