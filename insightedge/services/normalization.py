"""
Value Normalizer and Row Cleaner.

First stage of the analysis pipeline. Raw datasets arrive with currency
strings ("$1,250.00"), thousands separators, stray whitespace and blank
cells; this module turns them into cleaned rows the rest of the engine can
aggregate.

Key Features:
- Currency-aware numeric normalization ($, €, £, ¥, commas, whitespace)
- Plain numeric coercion used by the statistical engine
- Sparse-row filtering (rows with >= 50% empty cells are dropped)
- Explicit numeric column parsing that reports how many cells were skipped
- Column-wise date parsing for date-role columns (format inferred once)

All functions are pure: inputs are never mutated and malformed rows are
dropped rather than raised.
"""

from datetime import date, datetime
import logging
import math
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from insightedge.core.config import get_settings
from insightedge.models import NumericColumn, Row

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

# Characters stripped before a text cell is parsed as a number
CURRENCY_STRIP_PATTERN = re.compile(r"[$,€£¥\s]")

# A complete decimal literal: optional sign, digits with optional fraction
# (or a bare fraction), optional exponent
DECIMAL_LITERAL_PATTERN = re.compile(
    r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$"
)


# =============================================================================
# VALUE-LEVEL HELPERS
# =============================================================================

def is_empty(value: Any) -> bool:
    """Return True for cells that count as empty: None, '' or NaN."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ''
    if isinstance(value, float):
        return math.isnan(value)
    return False


def is_number(value: Any) -> bool:
    """Return True for finite int/float cells (bools are not numbers)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return math.isfinite(value)
    return False


def _parse_decimal(text: str) -> Optional[float]:
    if not DECIMAL_LITERAL_PATTERN.match(text):
        return None
    parsed = float(text)
    return parsed if math.isfinite(parsed) else None


def normalize_value(raw: str) -> Optional[float]:
    """
    Coerce a raw text cell into a number where plausible.

    Strips currency symbols ($ € £ ¥), commas and whitespace, then requires
    the remainder to be a complete decimal literal.

    Args:
        raw: Text cell value

    Returns:
        The parsed number, or None for an empty remainder, leftover letters
        or symbols, or a non-finite result

    Example:
        >>> normalize_value("$1,250.50")
        1250.5
        >>> normalize_value("N/A") is None
        True
    """
    if not isinstance(raw, str):
        return None
    return _parse_decimal(CURRENCY_STRIP_PATTERN.sub('', raw))


def coerce_number(value: Any) -> Optional[float]:
    """
    Plain numeric coercion used by the statistical engine.

    Numbers pass through; text must be a bare decimal literal once
    surrounding whitespace is trimmed (no currency stripping). Empty cells,
    bools and anything else are not numbers.
    """
    if is_number(value):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        return _parse_decimal(text)
    return None


DateLookup = Dict[str, Optional[datetime]]


def _naive(stamp: Any) -> Optional[datetime]:
    if stamp is None or pd.isna(stamp):
        return None
    if isinstance(stamp, pd.Timestamp):
        stamp = stamp.to_pydatetime()
    return stamp.replace(tzinfo=None)


def _to_datetimes(texts: pd.Series, **kwargs: Any) -> List[Any]:
    try:
        return list(pd.to_datetime(texts, errors='coerce', **kwargs))
    except (ValueError, TypeError, OverflowError):
        return [None] * len(texts)


def parse_dates(values: Iterable[Any]) -> DateLookup:
    """
    Parse the distinct text cells of a date column in one pass.

    The column is handed to pandas as a whole so the date format is
    inferred once. Cells that do not fit the inferred format are retried
    element by element (format='mixed').

    Returns:
        Mapping from each distinct stripped text to its naive datetime, or
        None when it does not parse
    """
    texts = pd.Series(
        list(dict.fromkeys(
            value.strip() for value in values
            if isinstance(value, str) and value.strip()
        )),
        dtype=object,
    )
    if texts.empty:
        return {}

    stamps = _to_datetimes(texts)
    missed = [i for i, stamp in enumerate(stamps) if _naive(stamp) is None]
    if missed:
        retried = _to_datetimes(texts.iloc[missed], format='mixed')
        for i, stamp in zip(missed, retried):
            stamps[i] = stamp

    return {text: _naive(stamp) for text, stamp in zip(texts, stamps)}


def parse_date_column(
    values: Sequence[Any],
    lookup: Optional[DateLookup] = None,
) -> List[Optional[datetime]]:
    """
    Parse every cell of a date-role column.

    Accepts datetime/date objects and non-empty text in any format pandas
    recognises. Numeric cells are not treated as dates. Timezone-aware
    values are converted to naive wall-clock time.

    Args:
        values: Column cells in row order
        lookup: Already parsed texts (from parse_dates); texts it lacks are
            parsed here

    Returns:
        One datetime or None per cell, in input order
    """
    if lookup is None:
        lookup = parse_dates(values)
    else:
        unseen = [
            value for value in values
            if isinstance(value, str) and value.strip() and value.strip() not in lookup
        ]
        if unseen:
            lookup = {**lookup, **parse_dates(unseen)}

    parsed: List[Optional[datetime]] = []
    for value in values:
        if isinstance(value, datetime):
            parsed.append(_naive(value))
        elif isinstance(value, date):
            parsed.append(datetime(value.year, value.month, value.day))
        elif isinstance(value, str):
            parsed.append(lookup.get(value.strip()))
        else:
            parsed.append(None)
    return parsed


def parse_date(value: Any) -> Optional[datetime]:
    """Parse a single date-role cell; see parse_date_column."""
    return parse_date_column([value])[0]


# =============================================================================
# ROW CLEANER
# =============================================================================

def align_row(row: Mapping[str, Any], headers: Sequence[str]) -> Row:
    """Return a copy of row keyed by headers, in header order (missing keys -> None)."""
    return {header: row.get(header) for header in headers}


def _is_sparse(row: Mapping[str, Any], threshold: float) -> bool:
    if not row:
        return True
    empty_count = sum(1 for value in row.values() if is_empty(value))
    return empty_count / len(row) >= threshold


def _normalize_row(row: Mapping[str, Any]) -> Row:
    cleaned: Row = {}
    for key, value in row.items():
        if isinstance(value, str):
            numeric = normalize_value(value)
            cleaned[key] = numeric if numeric is not None else value
        else:
            cleaned[key] = value
    return cleaned


def clean_rows(
    rows: Iterable[Any],
    headers: Optional[Sequence[str]] = None,
    threshold: Optional[float] = None,
) -> List[Row]:
    """
    Drop sparse rows and convert numeric-looking text cells to numbers.

    Steps:
    1. Align each row to headers when given (missing keys become empty)
    2. Drop rows where empty_cells / total_cells >= threshold
    3. Replace text cells that normalize to a number with that number

    Args:
        rows: Raw records (non-mapping entries are dropped)
        headers: Declared dataset headers, or None to keep each row's own keys
        threshold: Empty-cell share at which a row is dropped
            (default: empty_value_threshold from settings)

    Returns:
        Cleaned rows, in input order; never longer than the input
    """
    if threshold is None:
        threshold = get_settings().empty_value_threshold

    cleaned: List[Row] = []
    dropped = 0
    for row in rows:
        if not isinstance(row, Mapping):
            dropped += 1
            continue
        candidate = align_row(row, headers) if headers else row
        if _is_sparse(candidate, threshold):
            dropped += 1
            continue
        cleaned.append(_normalize_row(candidate))

    if dropped:
        logger.debug(f"Row cleaner dropped {dropped} sparse or malformed rows")
    return cleaned


# =============================================================================
# NUMERIC COLUMN PARSING
# =============================================================================

def parse_numeric_column(rows: Sequence[Mapping[str, Any]], field: str) -> NumericColumn:
    """
    Parse one column as numbers.

    Args:
        rows: Records to read
        field: Column name

    Returns:
        NumericColumn with the coerced values in row order and the number
        of cells that were empty or non-numeric
    """
    values: List[float] = []
    skipped = 0
    for row in rows:
        number = coerce_number(row.get(field))
        if number is None:
            skipped += 1
        else:
            values.append(number)
    return NumericColumn(field=field, values=values, skipped=skipped)


def numeric_values(rows: Sequence[Mapping[str, Any]], field: str) -> List[float]:
    """Shorthand for parse_numeric_column(rows, field).values."""
    return parse_numeric_column(rows, field).values


def sum_columns(rows: Sequence[Mapping[str, Any]], columns: Sequence[str]) -> float:
    """
    Sum numeric cells across columns and rows.

    Only cells already holding a number contribute; text and empty cells
    count as 0.
    """
    total = 0.0
    for row in rows:
        for column in columns:
            value = row.get(column)
            if is_number(value):
                total += value
    return total

