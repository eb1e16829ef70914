"""Unit tests for the HAM escalation calculator."""

import math

import pytest

from price_escalation.errors import EscalationError, InvalidInput
from price_escalation.formulas.escalation import (
    PRIMARY_WEIGHT,
    SECONDARY_WEIGHT,
    _round,
    escalate,
    format_pim,
)
from price_escalation.models import IndexPair


class TestWeights:
    def test_weights_sum_to_one(self):
        assert PRIMARY_WEIGHT + SECONDARY_WEIGHT == pytest.approx(1.0)

    def test_primary_weight_dominates(self):
        assert PRIMARY_WEIGHT == 0.70
        assert SECONDARY_WEIGHT == 0.30


class TestScenarios:
    def test_real_contract_values(self):
        """Base Mar 2022, current Oct 2024."""
        result = escalate(8_745_000, IndexPair(148.8, 126.0), IndexPair(156.7, 144.5))

        assert result.p0 == 141.96
        assert result.pc == 153.04
        assert result.pim == pytest.approx(1.0780, abs=5e-4)
        assert result.escalation_amount == pytest.approx(682_549, abs=10)
        assert result.total_amount == pytest.approx(9_427_549, abs=10)
        assert result.escalation_amount == 682_548.61
        assert result.total_amount == 9_427_548.61
        assert result.work_done == 8_745_000
        assert not result.is_de_escalation

    @pytest.mark.parametrize("work_value", [0, 1, 1_000_000, 8_745_000])
    def test_unchanged_indices_give_no_escalation(self, work_value):
        pair = IndexPair(150.0, 130.0)
        result = escalate(work_value, pair, pair)

        assert result.pim == 1.0
        assert result.escalation_amount == 0
        assert result.total_amount == work_value
        assert not result.is_de_escalation

    def test_uniform_fifty_percent_rise(self):
        result = escalate(10_000_000, IndexPair(100, 100), IndexPair(150, 150))

        assert result.pim == 1.5
        assert result.escalation_amount == pytest.approx(5_000_000, abs=0.01)
        assert result.total_amount == pytest.approx(15_000_000, abs=0.01)

    def test_uniform_thirty_percent_fall(self):
        result = escalate(10_000_000, IndexPair(100, 100), IndexPair(70, 70))

        assert result.pim == 0.7
        assert result.is_de_escalation
        assert result.escalation_amount == pytest.approx(-3_000_000, abs=0.01)
        assert result.total_amount == pytest.approx(7_000_000, abs=0.01)

    def test_plain_tuples_accepted(self):
        result = escalate(1_000_000, (100.0, 100.0), (110.0, 105.0))
        assert result.pc == 108.5


class TestBreakdown:
    def test_weighted_components(self):
        result = escalate(1_000_000, IndexPair(100, 100), IndexPair(110, 105))
        b = result.breakdown

        assert b.primary_base_weighted == 70.0
        assert b.secondary_base_weighted == 30.0
        assert b.primary_current_weighted == 77.0
        assert b.secondary_current_weighted == 31.5

    def test_components_add_up_to_composites(self):
        result = escalate(1_000_000, IndexPair(148.8, 126.0), IndexPair(156.7, 144.5))
        b = result.breakdown

        assert b.primary_base_weighted + b.secondary_base_weighted == pytest.approx(result.p0)
        assert b.primary_current_weighted + b.secondary_current_weighted == pytest.approx(
            result.pc
        )


class TestValidation:
    def test_negative_work_value_rejected(self):
        with pytest.raises(InvalidInput, match="negative work value"):
            escalate(-1, IndexPair(100, 100), IndexPair(110, 110))

    @pytest.mark.parametrize(
        ("base", "current"),
        [
            (IndexPair(0, 100), IndexPair(110, 110)),
            (IndexPair(100, 0), IndexPair(110, 110)),
            (IndexPair(100, 100), IndexPair(-5, 110)),
            (IndexPair(100, 100), IndexPair(110, 0)),
        ],
    )
    def test_non_positive_index_rejected(self, base, current):
        with pytest.raises(InvalidInput, match="non-positive index value"):
            escalate(1_000_000, base, current)

    def test_invalid_input_is_a_value_error(self):
        with pytest.raises(ValueError):
            escalate(-100, IndexPair(100, 100), IndexPair(100, 100))
        assert issubclass(InvalidInput, EscalationError)

    def test_zero_work_value_allowed(self):
        result = escalate(0, IndexPair(100, 100), IndexPair(120, 120))
        assert result.escalation_amount == 0
        assert result.total_amount == 0


class TestExtremes:
    def test_very_large_work_value(self):
        result = escalate(1e12, IndexPair(100, 100), IndexPair(110, 110))
        assert math.isfinite(result.escalation_amount)
        assert result.escalation_amount == pytest.approx(1e11, rel=1e-9)

    def test_huge_ratio_stays_finite(self):
        result = escalate(1e12, IndexPair(0.001, 0.001), IndexPair(1e6, 1e6))
        assert math.isfinite(result.escalation_amount)
        assert result.pim == pytest.approx(1e9)
        assert result.escalation_amount == pytest.approx(1e21)

    def test_one_rupee(self):
        result = escalate(1, IndexPair(148.8, 126.0), IndexPair(156.7, 144.5))
        assert result.escalation_amount == pytest.approx(0.078, abs=0.005)

    def test_tiny_index_movement(self):
        result = escalate(100_000_000, IndexPair(100, 100), IndexPair(100.01, 100.01))
        assert result.escalation_amount == pytest.approx(10_000, abs=0.5)

    def test_de_escalation_follows_unrounded_pim(self):
        # PIM is 0.99998..., which rounds to 1.0 but is still a decrease
        result = escalate(10_000_000, IndexPair(100_000, 100_000), IndexPair(99_998, 99_998))
        assert result.pim == 1.0
        assert result.is_de_escalation
        assert result.escalation_amount == pytest.approx(-200, abs=0.01)


class TestRounding:
    @pytest.mark.parametrize(
        ("value", "places", "expected"),
        [
            (2.675, 2, 2.68),
            (1.005, 2, 1.01),
            (-2.675, 2, -2.68),
            (0.5, 0, 1.0),
            (-0.5, 0, -1.0),
            (1.00005, 4, 1.0001),
            (-0.001, 2, 0.0),
        ],
    )
    def test_half_away_from_zero(self, value, places, expected):
        assert _round(value, places) == expected

    def test_negative_zero_folded(self):
        assert math.copysign(1, _round(-0.001, 2)) == 1

    def test_format_pim(self):
        assert format_pim(1.0780) == "1.08"
        assert format_pim(1.5) == "1.50"
        assert format_pim(0.7) == "0.70"
