"""Tests for DateRange"""

from datetime import date

import pytest
from pydantic import ValidationError

from oura_mcp.models import DateRange


class TestTrailingWindow:

    def test_seven_days_ending_today(self):
        window = DateRange.trailing_window(date(2024, 6, 10))
        assert window.start_date == "2024-06-04"
        assert window.end_date == "2024-06-10"

    @pytest.mark.parametrize(
        "today", [date(2024, 3, 2), date(2024, 1, 3), date(2023, 12, 31)]
    )
    def test_window_spans_exactly_seven_calendar_days(self, today):
        window = DateRange.trailing_window(today)
        start = date.fromisoformat(window.start_date)
        end = date.fromisoformat(window.end_date)
        assert end == today
        assert (end - start).days == 6

    def test_crosses_leap_day(self):
        window = DateRange.trailing_window(date(2024, 3, 2))
        assert window.start_date == "2024-02-25"

    def test_custom_length(self):
        window = DateRange.trailing_window(date(2024, 6, 10), days=1)
        assert window.start_date == window.end_date == "2024-06-10"


class TestValidation:

    def test_query_params(self):
        date_range = DateRange(start_date="2024-05-01", end_date="2024-05-31")
        assert date_range.as_query_params() == {
            "start_date": "2024-05-01",
            "end_date": "2024-05-31",
        }

    def test_same_day_allowed(self):
        DateRange(start_date="2024-05-01", end_date="2024-05-01")

    def test_start_after_end_rejected(self):
        with pytest.raises(ValidationError):
            DateRange(start_date="2024-05-02", end_date="2024-05-01")

    @pytest.mark.parametrize(
        "value", ["2024/05/01", "20240501", "May 1 2024", "2024-5-1", "2024-02-30"]
    )
    def test_malformed_dates_rejected(self, value):
        with pytest.raises(ValidationError):
            DateRange(start_date=value, end_date="2024-12-31")
