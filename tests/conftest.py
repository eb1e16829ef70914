"""Pytest configuration and fixtures for the price escalation tests."""

import pytest

from price_escalation.db.seed_data import seed_records
from price_escalation.metrics import MetricsRecorder
from price_escalation.models import REMOTE_SOURCE, WPI_SEED_SOURCE, IndexRecord, IndexType
from price_escalation.store import MemoryIndexStore


@pytest.fixture
def anyio_backend() -> str:
    """The resolver relies on asyncio.timeout and asyncio.shield."""
    return "asyncio"


@pytest.fixture
def recorder() -> MetricsRecorder:
    """A fresh recorder so counter assertions don't leak between tests."""
    return MetricsRecorder()


@pytest.fixture
def seeded_store() -> MemoryIndexStore:
    """In-memory store preloaded with the WPI and CPI-IW seed series."""
    return MemoryIndexStore(seed_records())


@pytest.fixture
def sparse_store() -> MemoryIndexStore:
    """Two WPI readings far apart and one CPI-IW reading."""
    return MemoryIndexStore(
        [
            IndexRecord(
                index_type=IndexType.WPI, year=2022, month=1, value=144.7, source=WPI_SEED_SOURCE
            ),
            IndexRecord(
                index_type=IndexType.WPI, year=2024, month=12, value=157.8, source=REMOTE_SOURCE
            ),
            IndexRecord(
                index_type=IndexType.CPI_IW, year=2025, month=3, value=143.0, source="Labour Bureau"
            ),
        ]
    )
