"""Unit tests for HAM contract period rules."""

import datetime

import pytest
from whenever import Date

from price_escalation.formulas.periods import (
    Period,
    base_month,
    current_month,
    format_month_display,
    format_month_label,
    most_recent_available,
    parse_period,
    trailing_periods,
)


class TestContractMonths:
    def test_base_month_is_month_before_bid_due_date(self):
        assert base_month(Date(2022, 4, 15)) == Period(2022, 3)

    def test_base_month_wraps_year(self):
        assert base_month(Date(2023, 1, 10)) == Period(2022, 12)

    def test_current_month_is_month_before_report(self):
        assert current_month(Date(2024, 11, 5)) == Period(2024, 10)

    def test_current_month_wraps_year(self):
        assert current_month(Date(2025, 1, 31)) == Period(2024, 12)

    def test_accepts_stdlib_dates(self):
        assert base_month(datetime.date(2022, 4, 1)) == Period(2022, 3)


class TestParsing:
    def test_parse_period(self):
        assert parse_period("2024-10") == Period(2024, 10)
        assert parse_period("2024-1") == Period(2024, 1)

    @pytest.mark.parametrize("value", ["2024", "2024-13", "2024-00", "abcd-ef"])
    def test_parse_period_rejects_bad_input(self, value):
        with pytest.raises(ValueError):
            parse_period(value)

    def test_format_key_pads_month(self):
        assert Period(2024, 3).format_key() == "2024-03"


class TestLabels:
    def test_short_label(self):
        assert format_month_label(2024, 10) == "Oct 2024"
        assert format_month_label(2025, 1) == "Jan 2025"

    def test_long_label(self):
        assert format_month_display(2022, 3) == "March 2022"
        assert format_month_display(2024, 12) == "December 2024"


class TestMostRecentAvailable:
    def test_picks_latest_preceding(self):
        available = [Period(2022, 1), Period(2024, 12), Period(2023, 6)]
        assert most_recent_available(Period(2024, 1), available) == Period(2023, 6)

    def test_none_when_nothing_precedes(self):
        assert most_recent_available(Period(2021, 5), [Period(2022, 1)]) is None

    def test_target_itself_excluded(self):
        assert most_recent_available(Period(2024, 1), [Period(2024, 1)]) is None


class TestTrailingPeriods:
    def test_one_year_back(self):
        window = trailing_periods(Date(2025, 3, 18), years_back=1)
        assert window[0] == Period(2024, 1)
        assert window[-1] == Period(2025, 3)
        assert len(window) == 15

    def test_current_year_only(self):
        assert trailing_periods(Date(2025, 2, 1), years_back=0) == [
            Period(2025, 1),
            Period(2025, 2),
        ]
