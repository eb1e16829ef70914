"""Dict-backed index store."""

from price_escalation.formulas.periods import Period, most_recent_available
from price_escalation.models import IndexRecord, IndexType


class MemoryIndexStore:
    """Process-local IndexStore. One record per (index_type, year, month)."""

    def __init__(self, records: list[IndexRecord] | None = None) -> None:
        self._records: dict[tuple[IndexType, int, int], IndexRecord] = {}
        self.upsert_count = 0
        for record in records or []:
            self._records[record.key] = record

    async def get_exact(self, index_type: IndexType, year: int, month: int) -> IndexRecord | None:
        return self._records.get((index_type, year, month))

    async def get_most_recent(
        self,
        index_type: IndexType,
        before: tuple[int, int] | None = None,
    ) -> IndexRecord | None:
        by_period = {
            Period(r.year, r.month): r for r in self._records.values() if r.index_type == index_type
        }
        if not by_period:
            return None
        if before is not None:
            preceding = most_recent_available(Period(*before), list(by_period))
            if preceding is not None:
                return by_period[preceding]
        return by_period[max(by_period)]

    async def upsert(self, record: IndexRecord) -> None:
        self._records[record.key] = record
        self.upsert_count += 1

    def __len__(self) -> int:
        return len(self._records)
