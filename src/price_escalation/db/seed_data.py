"""Seed series for the index store.

WPI: All Commodities (major group 1000000000), base 2011-12=100.
Source: Office of Economic Adviser (eaindustry.nic.in). Fallback data for
when the MCP server is unavailable.

CPI-IW: General Index, base 2016=100.
Source: Labour Bureau press releases. No remote source exists, so this is
the only way CPI-IW enters the store.
"""

from price_escalation.models import (
    CPI_SEED_SOURCE,
    WPI_SEED_SOURCE,
    IndexRecord,
    IndexType,
)

# year -> twelve monthly values, January first
WPI_SERIES: dict[int, tuple[float, ...]] = {
    2022: (144.7, 146.4, 148.8, 150.0, 151.5, 152.2, 151.7, 151.0, 150.6, 150.8, 150.1, 150.4),
    2023: (149.4, 149.2, 148.7, 147.9, 146.4, 145.8, 147.5, 149.1, 149.3, 149.2, 149.0, 149.7),
    2024: (150.2, 150.7, 151.4, 152.3, 153.0, 153.6, 154.2, 154.8, 155.5, 156.7, 157.2, 157.8),
}

CPI_IW_SERIES: dict[int, tuple[float, ...]] = {
    2022: (125.1, 125.0, 126.0, 127.7, 129.0, 129.2, 129.9, 130.2, 131.3, 132.5, 132.5, 132.3),
    2023: (132.8, 132.7, 133.3, 134.2, 134.7, 136.4, 139.7, 139.2, 137.5, 138.4, 139.1, 138.8),
    2024: (138.9, 139.2, 138.9, 139.4, 139.9, 141.4, 142.7, 142.6, 143.3, 144.5, 144.5, 143.7),
    2025: (143.2, 142.8, 143.0, 143.5, 144.0, 145.0, 146.5, 147.1, 147.3, 147.7, 148.2, 148.2),
}


def _records(
    index_type: IndexType, series: dict[int, tuple[float, ...]], source: str
) -> list[IndexRecord]:
    return [
        IndexRecord(index_type=index_type, year=year, month=month, value=value, source=source)
        for year, values in sorted(series.items())
        for month, value in enumerate(values, start=1)
    ]


def seed_records() -> list[IndexRecord]:
    """All seed records, WPI first."""
    return _records(IndexType.WPI, WPI_SERIES, WPI_SEED_SOURCE) + _records(
        IndexType.CPI_IW, CPI_IW_SERIES, CPI_SEED_SOURCE
    )
