"""HAM (Hybrid Annuity Model) price escalation calculator.

Formula (MCA Clause 23.4, Model Concession Agreement Article 23):

    P0  = 0.70 x WPI_base    + 0.30 x CPI-IW_base
    Pc  = 0.70 x WPI_current + 0.30 x CPI-IW_current
    PIM = Pc / P0
    Escalation = Work Done x (PIM - 1)

Rounding applies to output fields only: money and composite indices to
2 decimals, PIM to 4 decimals, half away from zero. Intermediate values
(including the PIM used for the escalation amount) stay unrounded.

This module is pure: no I/O, no logging, no clock.
"""

import math
from decimal import ROUND_HALF_UP, Decimal

from price_escalation.errors import InvalidInput
from price_escalation.models import EscalationBreakdown, EscalationResult, IndexPair

PRIMARY_WEIGHT = 0.70
SECONDARY_WEIGHT = 0.30


def _round(value: float, places: int) -> float:
    """Round half away from zero on the shortest decimal repr of value."""
    # Floats this large are already whole numbers
    if not math.isfinite(value) or abs(value) >= 2**52:
        return value + 0.0
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    # + 0.0 folds -0.0 into 0.0
    return float(rounded) + 0.0


def escalate(work_value: float, base: IndexPair, current: IndexPair) -> EscalationResult:
    """Calculate HAM escalation for a work-done amount.

    Args:
        work_value: Work done value in rupees, must be >= 0
        base: WPI and CPI-IW for the base month
        current: WPI and CPI-IW for the current month

    Returns:
        EscalationResult with composite indices, PIM and amounts

    Raises:
        InvalidInput: negative work value or a non-positive index value
    """
    base = IndexPair(*base)
    current = IndexPair(*current)

    if work_value < 0:
        msg = "negative work value"
        raise InvalidInput(msg)
    if min(*base, *current) <= 0:
        msg = "non-positive index value"
        raise InvalidInput(msg)

    primary_base_weighted = PRIMARY_WEIGHT * base.primary
    secondary_base_weighted = SECONDARY_WEIGHT * base.secondary
    primary_current_weighted = PRIMARY_WEIGHT * current.primary
    secondary_current_weighted = SECONDARY_WEIGHT * current.secondary

    p0 = primary_base_weighted + secondary_base_weighted
    pc = primary_current_weighted + secondary_current_weighted
    pim = pc / p0

    escalation_amount = work_value * (pim - 1)
    total_amount = work_value + escalation_amount

    return EscalationResult(
        p0=_round(p0, 2),
        pc=_round(pc, 2),
        pim=_round(pim, 4),
        work_done=work_value,
        escalation_amount=_round(escalation_amount, 2),
        total_amount=_round(total_amount, 2),
        is_de_escalation=pim < 1,
        breakdown=EscalationBreakdown(
            primary_base_weighted=_round(primary_base_weighted, 2),
            secondary_base_weighted=_round(secondary_base_weighted, 2),
            primary_current_weighted=_round(primary_current_weighted, 2),
            secondary_current_weighted=_round(secondary_current_weighted, 2),
        ),
    )


def format_pim(pim: float) -> str:
    """Format PIM for display (2 decimal places)."""
    return f"{_round(pim, 2):.2f}"
