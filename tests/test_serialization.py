"""Serialization round-trip tests for the Pydantic models.

Validates that every model crossing a Temporal boundary survives the data
converter round-trip:
    model -> pydantic_core.to_json() -> TypeAdapter.validate_json() -> model

This is what PydanticPayloadConverter does under the hood.

All timestamp fields are ISO 8601 strings (no whenever.Instant in models).
"""

from pydantic import TypeAdapter
from pydantic_core import to_json
from whenever import Instant

from price_escalation.formulas.escalation import escalate
from price_escalation.metrics import MetricsRecorder
from price_escalation.models import (
    REMOTE_SOURCE,
    IndexOrigin,
    IndexPair,
    IndexRecord,
    IndexType,
    MonthIndices,
    PeriodRefresh,
    RefreshIndicesInput,
    RefreshSummary,
    RefreshWorkflowInput,
    ResolvedIndex,
)


def _temporal_round_trip(model_instance, model_type=None):
    """Simulate the Temporal PydanticPayloadConverter round-trip."""
    if model_type is None:
        model_type = type(model_instance)

    json_bytes = to_json(model_instance)
    restored = TypeAdapter(model_type).validate_json(json_bytes)

    return restored, json_bytes


class TestTimestampSerialization:
    def test_observed_at_default_factory(self):
        record = IndexRecord(
            index_type=IndexType.WPI, year=2024, month=10, value=156.7, source=REMOTE_SOURCE
        )
        assert isinstance(record.observed_at, str)
        Instant.parse_iso(record.observed_at)

        restored, _ = _temporal_round_trip(record)
        assert restored.observed_at == record.observed_at

    def test_metrics_snapshot_round_trip(self):
        recorder = MetricsRecorder()
        recorder.record_cache_hit()
        recorder.record_remote_call(True, 42.0)
        snapshot = recorder.snapshot()

        restored, _ = _temporal_round_trip(snapshot)
        assert restored == snapshot


class TestWorkflowInputs:
    def test_refresh_indices_input(self):
        original = RefreshIndicesInput(periods=[(2024, 11), (2024, 12), (2025, 1)], delay_sec=0)
        restored, json_bytes = _temporal_round_trip(original)

        assert restored.periods == [(2024, 11), (2024, 12), (2025, 1)]
        assert b"[2024,11]" in json_bytes

    def test_refresh_workflow_input_defaults(self):
        restored, _ = _temporal_round_trip(RefreshWorkflowInput())
        assert restored.years_back == 1
        assert restored.interval_hours == 24.0

    def test_refresh_summary(self):
        original = RefreshSummary(
            total=2,
            updated=1,
            errors=1,
            details=[
                PeriodRefresh(month="2025-01", status="updated"),
                PeriodRefresh(month="2025-02", status="error", error="TimeoutError"),
            ],
        )
        restored, _ = _temporal_round_trip(original)
        assert restored == original


class TestResolutionModels:
    def test_estimate_round_trip(self):
        original = MonthIndices(
            year=2025,
            month=6,
            wpi=ResolvedIndex(
                value=157.8,
                origin=IndexOrigin.ESTIMATE_FROM_STORE,
                is_estimate=True,
                estimate_label="Dec 2024",
            ),
            cpi=None,
        )
        restored, json_bytes = _temporal_round_trip(original)

        assert restored == original
        assert b'"origin":"estimate_from_store"' in json_bytes

    def test_escalation_result_round_trip(self):
        original = escalate(8_745_000, IndexPair(148.8, 126.0), IndexPair(156.7, 144.5))
        restored, _ = _temporal_round_trip(original)
        assert restored == original
