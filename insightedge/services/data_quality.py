"""
Data-Quality Summarizer.

Compares the raw dataset with the cleaned rows:
- missingData: rows dropped by the row cleaner
- duplicateRecords: raw rows whose serialized form was already seen
- dataQuality: tier from the cleaned / raw ratio (>= 95% excellent,
  >= 85% good, >= 70% fair, else poor)
- dateRange: earliest and latest date of the first date-role column
"""

import json
from datetime import datetime
from typing import Any, List, Mapping, Optional, Sequence

from insightedge.models import DataQuality, DataSummary
from insightedge.services.columns import find_date_column
from insightedge.services.normalization import DateLookup, parse_date_column

UNKNOWN_DATE_RANGE = 'Unknown'

# (minimum cleaned/raw ratio, tier), best tier first
QUALITY_TIERS = [
    (0.95, DataQuality.EXCELLENT),
    (0.85, DataQuality.GOOD),
    (0.70, DataQuality.FAIR),
]


def count_duplicates(rows: Sequence[Mapping[str, Any]]) -> int:
    """
    Count rows identical to an earlier row.

    Rows are compared by their JSON serialization, so key order matters:
    {"a": 1, "b": 2} and {"b": 2, "a": 1} are distinct records.
    """
    seen = set()
    duplicates = 0
    for row in rows:
        key = json.dumps(row, default=str)
        if key in seen:
            duplicates += 1
        else:
            seen.add(key)
    return duplicates


def quality_tier(raw_count: int, cleaned_count: int) -> DataQuality:
    """Quality label for the share of rows that survived cleaning."""
    if raw_count <= 0:
        return DataQuality.POOR
    ratio = cleaned_count / raw_count
    for minimum, tier in QUALITY_TIERS:
        if ratio >= minimum:
            return tier
    return DataQuality.POOR


def format_date(value: datetime) -> str:
    """M/D/YYYY without zero padding."""
    return f"{value.month}/{value.day}/{value.year}"


def date_range(
    rows: Sequence[Mapping[str, Any]],
    headers: Optional[Sequence[str]] = None,
    date_lookup: Optional[DateLookup] = None,
) -> str:
    """
    Render the span of the first date-role column.

    Args:
        rows: Raw rows
        headers: Declared dataset headers; when given, the date column is
            found among them rather than in the first row's keys
        date_lookup: Date texts already parsed by the caller

    Returns:
        "M/D/YYYY - M/D/YYYY", or "Unknown" when no date column exists or
        none of its cells parse
    """
    column = find_date_column(rows, headers)
    if column is None:
        return UNKNOWN_DATE_RANGE

    dates = parse_date_column([row.get(column) for row in rows], date_lookup)
    dates = [d for d in dates if d is not None]
    if not dates:
        return UNKNOWN_DATE_RANGE

    return f"{format_date(min(dates))} - {format_date(max(dates))}"


def summarize_data(
    raw_rows: Sequence[Mapping[str, Any]],
    cleaned_rows: Sequence[Mapping[str, Any]],
    headers: Optional[Sequence[str]] = None,
    date_lookup: Optional[DateLookup] = None,
) -> DataSummary:
    """
    Build the DataSummary for one analysis.

    Args:
        raw_rows: Rows as ingested, before cleaning
        cleaned_rows: Output of clean_rows for the same dataset
        headers: Declared headers, when the pipeline aligns rows to them
        date_lookup: Date texts already parsed by the caller

    Returns:
        DataSummary with missingData = len(raw_rows) - len(cleaned_rows)
    """
    raw: List[Mapping[str, Any]] = [row for row in raw_rows if isinstance(row, Mapping)]
    return DataSummary(
        totalRecords=len(raw_rows),
        dateRange=date_range(raw, headers, date_lookup),
        dataQuality=quality_tier(len(raw_rows), len(cleaned_rows)),
        missingData=max(0, len(raw_rows) - len(cleaned_rows)),
        duplicateRecords=count_duplicates(raw),
    )
