"""Exam date and reminder time parsing against a fixed clock."""

from datetime import datetime

import pytest

from studybot.utils.dates import (
    describe_when, format_time, hours_until, is_skip, parse_exam_date, parse_time_of_day,
)

# Wednesday
NOW = datetime(2026, 10, 14, 10, 0)


class TestParseExamDate:

    @pytest.mark.parametrize("text,expected", [
        ("tomorrow 2pm", datetime(2026, 10, 15, 14, 0)),
        ("Friday", datetime(2026, 10, 16, 19, 0)),
        ("next wed", datetime(2026, 10, 21, 19, 0)),
        ("in 5 days", datetime(2026, 10, 19, 19, 0)),
        ("in 2 weeks", datetime(2026, 10, 28, 19, 0)),
        ("2026-11-03", datetime(2026, 11, 3, 19, 0)),
        ("3/11", datetime(2026, 11, 3, 19, 0)),
        ("nov 3rd 8:30", datetime(2026, 11, 3, 8, 30)),
        ("22 aug", datetime(2027, 8, 22, 19, 0)),
        ("today", datetime(2026, 10, 14, 19, 0)),
    ])
    def test_readable_dates(self, text, expected):
        assert parse_exam_date(text, NOW) == expected

    @pytest.mark.parametrize("text", ["whenever", "", "2025-01-01", "today 9am", "31/02/2027"])
    def test_unreadable_or_past(self, text):
        assert parse_exam_date(text, NOW) is None


class TestTimeOfDay:

    @pytest.mark.parametrize("text,expected", [
        ("7", (19, 0)),
        ("7pm", (19, 0)),
        ("7:30 am", (7, 30)),
        ("12am", (0, 0)),
        ("19h00", (19, 0)),
        ("13", (13, 0)),
        ("at 18:45", (18, 45)),
    ])
    def test_readable(self, text, expected):
        assert parse_time_of_day(text) == expected

    @pytest.mark.parametrize("text", ["25", "13pm", "banana", "7:75"])
    def test_unreadable(self, text):
        assert parse_time_of_day(text) is None

    def test_format(self):
        assert format_time((7, 5)) == "07:05"


class TestHelpers:

    @pytest.mark.parametrize("text", ["skip", "Not  sure", "later"])
    def test_skip_words(self, text):
        assert is_skip(text)

    def test_hours_until(self):
        assert hours_until(datetime(2026, 10, 15, 14, 0), NOW) == 28.0

    def test_describe_when(self):
        assert describe_when(datetime(2026, 10, 14, 19, 0), NOW) == "today at 19:00"
        assert describe_when(datetime(2026, 10, 15, 14, 0), NOW) == "tomorrow at 14:00"
        assert describe_when(datetime(2026, 10, 16, 19, 0), NOW) == "on Fri 16 Oct at 19:00"
