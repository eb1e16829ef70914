"""Property tests for the escalation calculator."""

import math

from hypothesis import given
from hypothesis import strategies as st

from price_escalation.formulas.escalation import escalate

from .strategies import index_pairs, work_values


@given(work_value=work_values, base=index_pairs(), current=index_pairs())
def test_outputs_always_finite(work_value, base, current):
    result = escalate(work_value, base, current)
    for field in (result.p0, result.pc, result.pim, result.escalation_amount, result.total_amount):
        assert math.isfinite(field)


@given(work_value=work_values, base=index_pairs(), current=index_pairs())
def test_composites_match_weighted_sums(work_value, base, current):
    result = escalate(work_value, base, current)
    p0 = 0.7 * base.primary + 0.3 * base.secondary
    pc = 0.7 * current.primary + 0.3 * current.secondary

    assert abs(result.p0 - p0) <= 0.005 + 1e-9 * p0
    assert abs(result.pc - pc) <= 0.005 + 1e-9 * pc


@given(work_value=work_values, base=index_pairs(), current=index_pairs())
def test_escalation_tracks_pim(work_value, base, current):
    result = escalate(work_value, base, current)
    p0 = 0.7 * base.primary + 0.3 * base.secondary
    pc = 0.7 * current.primary + 0.3 * current.secondary
    expected = work_value * (pc / p0 - 1)

    assert abs(result.escalation_amount - expected) <= 0.005 + 1e-9 * abs(expected)
    assert abs(result.total_amount - (work_value + expected)) <= 0.005 + 1e-9 * abs(
        work_value + expected
    )


@given(work_value=work_values, base=index_pairs(), current=index_pairs())
def test_de_escalation_sign(work_value, base, current):
    result = escalate(work_value, base, current)
    if result.pim < 1:
        assert result.is_de_escalation
    if result.pim > 1:
        assert not result.is_de_escalation
    if result.is_de_escalation:
        assert result.escalation_amount <= 0


@given(work_value=work_values, base=index_pairs())
def test_identical_periods_are_identity(work_value, base):
    result = escalate(work_value, base, base)

    assert result.pim == 1.0
    assert result.escalation_amount == 0
    assert result.total_amount == work_value
    assert not result.is_de_escalation


@given(work_value=work_values, base=index_pairs(), factor=st.floats(min_value=0.5, max_value=2.0))
def test_uniform_scaling_sets_pim(work_value, base, factor):
    current = (base.primary * factor, base.secondary * factor)
    result = escalate(work_value, base, current)
    assert abs(result.pim - factor) <= 0.00005 + 1e-9


@given(base=index_pairs(), current=index_pairs())
def test_zero_work_value_never_escalates(base, current):
    result = escalate(0, base, current)
    assert result.escalation_amount == 0
    assert result.total_amount == 0
