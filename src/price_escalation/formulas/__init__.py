"""Deterministic formulas: HAM escalation and contract period rules."""

from .escalation import PRIMARY_WEIGHT, SECONDARY_WEIGHT, escalate, format_pim
from .periods import (
    Period,
    base_month,
    current_month,
    format_month_display,
    format_month_label,
    most_recent_available,
    parse_period,
    trailing_periods,
)

__all__ = [
    "PRIMARY_WEIGHT",
    "SECONDARY_WEIGHT",
    "escalate",
    "format_pim",
    "Period",
    "base_month",
    "current_month",
    "parse_period",
    "format_month_label",
    "format_month_display",
    "most_recent_available",
    "trailing_periods",
]
