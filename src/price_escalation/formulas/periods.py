"""Contract period rules for HAM contracts.

Rules per MCA Clause 23.2.3 + Article 42:
- Base Month = month preceding the Bid Due Date
- Current Month = month preceding the IE Report / Invoice Date

Dates may be `whenever.Date` or `datetime.date`; only `.year` and `.month`
are read.
"""

from typing import NamedTuple, Protocol

from price_escalation.models.indices import MONTH_ABBREVIATIONS

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)  # fmt: skip


class _HasYearMonth(Protocol):
    @property
    def year(self) -> int: ...

    @property
    def month(self) -> int: ...


class Period(NamedTuple):
    """A (year, month) pair. Tuple ordering is chronological."""

    year: int
    month: int

    def previous(self) -> "Period":
        if self.month == 1:
            return Period(self.year - 1, 12)
        return Period(self.year, self.month - 1)

    def format_key(self) -> str:
        """YYYY-MM"""
        return f"{self.year}-{self.month:02d}"


def base_month(bid_due_date: _HasYearMonth) -> Period:
    """Base month for HAM contracts: the month before the bid due date."""
    return Period(bid_due_date.year, bid_due_date.month).previous()


def current_month(report_date: _HasYearMonth) -> Period:
    """Current month for HAM contracts: the month before the IE report date."""
    return Period(report_date.year, report_date.month).previous()


def parse_period(value: str) -> Period:
    """Parse a 'YYYY-MM' string."""
    year_str, sep, month_str = value.partition("-")
    if not sep:
        msg = f"Expected YYYY-MM, got {value!r}"
        raise ValueError(msg)
    period = Period(int(year_str), int(month_str))
    if not 1 <= period.month <= 12:
        msg = f"Month out of range in {value!r}"
        raise ValueError(msg)
    return period


def format_month_label(year: int, month: int) -> str:
    """Short label used for estimates, e.g. 'Oct 2024'."""
    return f"{MONTH_ABBREVIATIONS[month - 1]} {year}"


def format_month_display(year: int, month: int) -> str:
    """Long label, e.g. 'March 2022'."""
    return f"{MONTH_NAMES[month - 1]} {year}"


def most_recent_available(target: Period, available: list[Period]) -> Period | None:
    """Latest available period strictly before target, or None."""
    earlier = sorted((p for p in available if p < target), reverse=True)
    return earlier[0] if earlier else None


def trailing_periods(today: _HasYearMonth, years_back: int = 1) -> list[Period]:
    """Every month of the previous `years_back` years plus this year to date."""
    periods = [
        Period(year, month)
        for year in range(today.year - years_back, today.year)
        for month in range(1, 13)
    ]
    periods.extend(Period(today.year, month) for month in range(1, today.month + 1))
    return periods
