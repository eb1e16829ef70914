"""Escalation calculator inputs and results."""

from typing import NamedTuple

from pydantic import BaseModel, Field


class IndexPair(NamedTuple):
    """Primary (WPI) and secondary (CPI-IW) values for one period."""

    primary: float
    secondary: float


class EscalationInputs(BaseModel):
    """Calculator arguments as one value. Preconditions are checked by escalate()."""

    work_value: float
    base: IndexPair
    current: IndexPair


class EscalationBreakdown(BaseModel):
    """The four weighted components, rounded to 2 decimals."""

    primary_base_weighted: float
    secondary_base_weighted: float
    primary_current_weighted: float
    secondary_current_weighted: float


class EscalationResult(BaseModel):
    p0: float = Field(description="Base period composite index (2 dp)")
    pc: float = Field(description="Current period composite index (2 dp)")
    pim: float = Field(description="Price Index Multiple Pc/P0 (4 dp)")
    work_done: float
    escalation_amount: float
    total_amount: float
    is_de_escalation: bool
    breakdown: EscalationBreakdown
