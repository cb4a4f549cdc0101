"""
Unit tests for the hours text parser.
"""

import re

import pytest

from clubhours.core.models import Interval
from clubhours.logic.parser import HoursParser, parse_hours_lines


@pytest.fixture
def hours_parser():
    return HoursParser()


class TestClockTime:
    """Tests for parse_clock_time."""

    @pytest.mark.parametrize("text,expected", [
        ("9", "09:00"),
        ("9:30am", "09:30"),
        ("11 pm", "23:00"),
        ("12am", "00:00"),
        ("12pm", "12:00"),
        ("12:30 AM", "00:30"),
        ("1:05PM", "13:05"),
        ("9 a.m.", "09:00"),
        ("0", "00:00"),
        ("17:45", "17:45"),
        ("24", "24:00"),
        ("24:00", "24:00"),
    ])
    def test_valid_times(self, hours_parser, text, expected):
        """Should convert valid tokens to 24-hour HH:MM."""
        assert hours_parser.parse_clock_time(text) == expected

    @pytest.mark.parametrize("text", [
        "", "noon", "9:60", "13pm", "0am", "25", "24:30", "9:5", "123", "9:30xm",
    ])
    def test_invalid_times(self, hours_parser, text):
        """Should return None instead of raising."""
        assert hours_parser.parse_clock_time(text) is None

    def test_output_format(self, hours_parser):
        """Every accepted token is HH:MM between 00:00 and 24:00."""
        tokens = [f"{h}{suffix}" for h in range(0, 26) for suffix in ("", "am", "pm", ":15", ":00pm")]
        for token in tokens:
            result = hours_parser.parse_clock_time(token)
            if result is None:
                continue
            assert re.match(r"^\d{2}:\d{2}$", result)
            hours, minutes = map(int, result.split(":"))
            assert minutes < 60
            assert "00:00" <= result <= "24:00"


class TestDaySpec:
    """Tests for parse_day_spec."""

    def test_weekday_range(self, hours_parser):
        assert hours_parser.parse_day_spec("Mon-Fri") == [1, 2, 3, 4, 5]

    def test_range_wraps_around_week(self, hours_parser):
        """Fri-Mon walks forward through the weekend."""
        assert hours_parser.parse_day_spec("Fri-Mon") == [5, 6, 0, 1]

    def test_range_with_to_and_full_names(self, hours_parser):
        assert hours_parser.parse_day_spec("Saturday to Sunday") == [6, 0]

    def test_range_with_en_dash(self, hours_parser):
        assert hours_parser.parse_day_spec("Tues – Thurs") == [2, 3, 4]

    @pytest.mark.parametrize("text", ["Daily", "Every day", "EVERYDAY"])
    def test_every_day(self, hours_parser, text):
        assert hours_parser.parse_day_spec(text) == [0, 1, 2, 3, 4, 5, 6]

    def test_day_list_keeps_first_match_order(self, hours_parser):
        assert hours_parser.parse_day_spec("Sat, Sun") == [6, 0]

    def test_day_list_deduplicated(self, hours_parser):
        assert hours_parser.parse_day_spec("Mon, Wed & Monday") == [1, 3]

    def test_abbreviations(self, hours_parser):
        assert hours_parser.parse_day_spec("Weds Thur") == [3, 4]

    def test_no_days(self, hours_parser):
        assert hours_parser.parse_day_spec("Holiday hours") == []
        assert hours_parser.parse_day_spec("   ") == []


class TestParseLines:
    """Tests for parse_lines."""

    def test_weekday_and_weekend_lines(self, hours_parser):
        intervals = hours_parser.parse_lines(["Mon-Fri 6:00am - 10:00pm", "Sat-Sun 8:00am - 8:00pm"])

        assert len(intervals) == 7
        assert intervals[0] == Interval(day=1, open="06:00", close="22:00")
        assert intervals[4] == Interval(day=5, open="06:00", close="22:00")
        assert intervals[5] == Interval(day=6, open="08:00", close="20:00")
        assert intervals[6] == Interval(day=0, open="08:00", close="20:00")

    def test_overnight_split(self, hours_parser):
        """22:00-02:00 on Tuesday becomes Tue 22:00-24:00 and Wed 00:00-02:00."""
        intervals = hours_parser.parse_lines(["Tue 22:00 - 02:00"])

        assert intervals == [
            Interval(day=2, open="22:00", close="24:00"),
            Interval(day=3, open="00:00", close="02:00"),
        ]
        covered = sum(i.close_minutes - i.open_minutes for i in intervals)
        assert covered == 4 * 60

    def test_overnight_split_wraps_saturday(self, hours_parser):
        intervals = hours_parser.parse_lines(["Sat 10pm - 2am"])
        assert intervals[1] == Interval(day=0, open="00:00", close="02:00")

    def test_close_at_midnight_has_no_empty_half(self, hours_parser):
        intervals = hours_parser.parse_lines(["Fri 6pm - 12am"])
        assert intervals == [Interval(day=5, open="18:00", close="24:00")]

    def test_zero_length_dropped(self, hours_parser):
        assert hours_parser.parse_lines(["Mon 9:00 - 9:00"]) == []

    def test_closed_line_discarded(self, hours_parser):
        """A "closed" marker wins even when a time range is present."""
        assert hours_parser.parse_lines(["Sunday Closed"]) == []
        assert hours_parser.parse_lines(["Mon 9am - 5pm (pool closed)"]) == []

    def test_all_day_marker(self, hours_parser):
        intervals = hours_parser.parse_lines(["Daily 24 hours"])

        assert len(intervals) == 7
        assert all(i.all_day for i in intervals)

    def test_open_24_marker(self, hours_parser):
        intervals = hours_parser.parse_lines(["Mon-Fri: Open 24/7"])
        assert [i.day for i in intervals] == [1, 2, 3, 4, 5]
        assert intervals[0].close == "24:00"

    def test_em_dash_range(self, hours_parser):
        intervals = hours_parser.parse_lines(["Mon—Wed 5:30am—11pm"])
        assert [i.day for i in intervals] == [1, 2, 3]
        assert intervals[0].open == "05:30"
        assert intervals[0].close == "23:00"

    def test_times_before_days(self, hours_parser):
        """Lines starting with a time use the whole line as day text."""
        intervals = hours_parser.parse_lines(["9am - 5pm Saturday"])
        assert intervals == [Interval(day=6, open="09:00", close="17:00")]

    def test_unparseable_lines_skipped(self, hours_parser):
        lines = [
            "",
            "   ",
            "Hours subject to change",
            "Mon-Fri 9:75 - 17:00",
            "Call 555-1234",
            "Sat 9am - 1pm",
        ]
        assert hours_parser.parse_lines(lines) == [Interval(day=6, open="09:00", close="13:00")]

    def test_reparse_is_idempotent(self, hours_parser):
        """Rendering an interval and parsing it again yields the same interval."""
        original = Interval(day=1, open="09:00", close="17:00")

        assert str(original) == "Mon 09:00 - 17:00"
        assert hours_parser.parse_lines([str(original)]) == [original]

    def test_reparse_all_day_interval(self, hours_parser):
        original = Interval(day=4, open="00:00", close="24:00")
        assert hours_parser.parse_lines([str(original)]) == [original]

    def test_build_interval_set_keeps_raw(self, hours_parser):
        lines = ["Mon 9am - 5pm", "Sun Closed"]
        hours = hours_parser.build_interval_set(lines)

        assert hours.raw == lines
        assert hours.intervals == [Interval(day=1, open="09:00", close="17:00")]

    def test_module_helper(self):
        assert parse_hours_lines(["Wed 7 - 19"]) == [Interval(day=3, open="07:00", close="19:00")]
