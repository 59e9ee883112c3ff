"""
Time-Series Synthesizer - monthly chart points.

Always returns exactly 12 points, Jan..Dec. A month is "observed" when at
least one row's date (first date-role column) falls in that calendar month
of any year; its sales and expenses are the sums of the revenue and cost
columns over those rows.

Months without dated rows are either filled with synthetic values
(provenance="synthetic") or left at zero (provenance="empty"), depending on
Settings.synthetic_fill_enabled. Synthetic values are never mixed into an
observed month.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np

from insightedge.core.config import get_settings
from insightedge.models import ChartDataPoint, DataProvenance
from insightedge.services.columns import (
    COST_KEYWORDS,
    REVENUE_KEYWORDS,
    find_columns,
    find_date_column,
)
from insightedge.services.normalization import DateLookup, parse_date_column, sum_columns

logger = logging.getLogger(__name__)

MONTHS: List[str] = [
    'Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
    'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec',
]

# Synthetic fill: sales ~ U[low, high), expenses = sales * ratio
SYNTHETIC_SALES_LOW = 30000.0
SYNTHETIC_SALES_HIGH = 80000.0
SYNTHETIC_EXPENSE_RATIO = 0.7


def group_rows_by_month(
    rows: Sequence[Mapping[str, Any]],
    date_column: Optional[str],
    date_lookup: Optional[DateLookup] = None,
) -> Dict[int, List[Mapping[str, Any]]]:
    """
    Bucket rows by calendar month (1-12) of their date cell.

    The date column is parsed in one pass; date_lookup holds texts already
    parsed by the caller. Rows with an empty or unparseable date are left
    out.
    """
    buckets: Dict[int, List[Mapping[str, Any]]] = {}
    if date_column is None:
        return buckets
    dates = parse_date_column([row.get(date_column) for row in rows], date_lookup)
    for row, parsed in zip(rows, dates):
        if parsed is not None:
            buckets.setdefault(parsed.month, []).append(row)
    return buckets


def _point(month: str, sales: float, expenses: float, provenance: DataProvenance) -> ChartDataPoint:
    return ChartDataPoint(
        month=month,
        sales=sales,
        profit=sales - expenses,
        revenue=sales,
        expenses=expenses,
        provenance=provenance,
    )


def generate_chart_data(
    rows: Sequence[Mapping[str, Any]],
    rng: Optional[np.random.Generator] = None,
    synthetic_fill: Optional[bool] = None,
    date_lookup: Optional[DateLookup] = None,
) -> List[ChartDataPoint]:
    """
    Build the 12 monthly chart points.

    Args:
        rows: Cleaned rows
        rng: Random source for synthetic months (default: numpy generator
            seeded from Settings.synthetic_fill_seed)
        synthetic_fill: Override for Settings.synthetic_fill_enabled
        date_lookup: Pre-parsed date texts shared with the data summary

    Returns:
        Exactly 12 ChartDataPoint objects in calendar order
    """
    settings = get_settings()
    if synthetic_fill is None:
        synthetic_fill = settings.synthetic_fill_enabled
    if rng is None:
        rng = np.random.default_rng(settings.synthetic_fill_seed)

    revenue_columns = find_columns(rows, REVENUE_KEYWORDS)
    cost_columns = find_columns(rows, COST_KEYWORDS)
    by_month = group_rows_by_month(rows, find_date_column(rows), date_lookup)

    points: List[ChartDataPoint] = []
    for index, month in enumerate(MONTHS, start=1):
        month_rows = by_month.get(index)
        if month_rows:
            sales = sum_columns(month_rows, revenue_columns)
            expenses = sum_columns(month_rows, cost_columns)
            points.append(_point(month, sales, expenses, DataProvenance.OBSERVED))
        elif synthetic_fill:
            sales = float(rng.uniform(SYNTHETIC_SALES_LOW, SYNTHETIC_SALES_HIGH))
            points.append(
                _point(month, sales, sales * SYNTHETIC_EXPENSE_RATIO, DataProvenance.SYNTHETIC)
            )
        else:
            points.append(_point(month, 0.0, 0.0, DataProvenance.EMPTY))

    logger.debug(f"Chart data: {len(by_month)} observed months of 12")
    return points
