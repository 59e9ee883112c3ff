"""
Metric Aggregator - headline KPIs.

Sums role columns over the cleaned rows and produces the four dashboard
KPIs, each with a period-over-period change against a synthetic baseline.

KPI order (each emitted only when its columns exist):
1. Total Revenue     - revenue columns
2. Total Expenses    - cost columns
3. Net Profit        - revenue and cost columns
4. Avg. Order Value  - revenue and customer columns

No real historical baseline exists in a single uploaded file, so the
previous value is the current value times a fixed shrink factor per KPI.
"""

from decimal import Decimal, ROUND_HALF_UP
import logging
from typing import Any, List, Mapping, Optional, Sequence

from insightedge.models import KPI, TrendDirection
from insightedge.services.columns import (
    COST_KEYWORDS,
    CUSTOMER_KEYWORDS,
    REVENUE_KEYWORDS,
    find_columns,
)
from insightedge.services.normalization import sum_columns

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

TOTAL_REVENUE = 'Total Revenue'
TOTAL_EXPENSES = 'Total Expenses'
NET_PROFIT = 'Net Profit'
AVG_ORDER_VALUE = 'Avg. Order Value'

# Synthetic previous-period baseline = current * factor
PREVIOUS_PERIOD_FACTORS = {
    TOTAL_REVENUE: 0.95,
    TOTAL_EXPENSES: 0.98,
    NET_PROFIT: 0.92,
    AVG_ORDER_VALUE: 0.97,
}

CHANGE_SUFFIX = '% vs previous period'


# =============================================================================
# FORMATTING
# =============================================================================

def format_currency(value: float) -> str:
    """
    Format a number as whole US dollars.

    Rounds half away from zero and groups thousands with commas.

    Example:
        >>> format_currency(3000)
        '$3,000'
        >>> format_currency(-1234.5)
        '-$1,235'
    """
    rounded = Decimal(repr(float(value))).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    if rounded == 0:
        return '$0'
    sign = '-' if rounded < 0 else ''
    return f"{sign}${abs(rounded):,.0f}"


def format_change(current: float, previous: float) -> str:
    """Percentage change to one decimal; '0.0' when the baseline is zero."""
    if previous == 0:
        return '0.0'
    return f"{(current - previous) / previous * 100:.1f}"


def trend_from_change(change: str) -> TrendDirection:
    """Direction from the numeric value of a formatted percentage string."""
    pct = float(change)
    if pct > 0:
        return TrendDirection.UP
    if pct < 0:
        return TrendDirection.DOWN
    return TrendDirection.STABLE


def build_kpi(title: str, current: float) -> KPI:
    """Build a KPI against its synthetic previous-period baseline."""
    previous = current * PREVIOUS_PERIOD_FACTORS[title]
    change = format_change(current, previous)
    return KPI(
        title=title,
        value=format_currency(current),
        change=f"{change}{CHANGE_SUFFIX}",
        trend=trend_from_change(change),
        previousValue=previous,
    )


# =============================================================================
# KPI GENERATION
# =============================================================================

def generate_kpis(rows: Sequence[Mapping[str, Any]]) -> List[KPI]:
    """
    Generate the headline KPIs from cleaned rows.

    Args:
        rows: Cleaned rows (numeric cells already converted)

    Returns:
        Up to four KPIs in fixed order; empty when no role columns exist
    """
    revenue_columns = find_columns(rows, REVENUE_KEYWORDS)
    cost_columns = find_columns(rows, COST_KEYWORDS)
    customer_columns = find_columns(rows, CUSTOMER_KEYWORDS)

    kpis: List[KPI] = []
    total_revenue = sum_columns(rows, revenue_columns)
    total_expenses = sum_columns(rows, cost_columns)

    if revenue_columns:
        kpis.append(build_kpi(TOTAL_REVENUE, total_revenue))

    if cost_columns:
        kpis.append(build_kpi(TOTAL_EXPENSES, total_expenses))

    if revenue_columns and cost_columns:
        kpis.append(build_kpi(NET_PROFIT, total_revenue - total_expenses))

    if revenue_columns and customer_columns:
        total_orders = sum_columns(rows, customer_columns)
        avg_order_value = total_revenue / total_orders if total_orders > 0 else 0.0
        kpis.append(build_kpi(AVG_ORDER_VALUE, avg_order_value))

    logger.debug(
        f"Generated {len(kpis)} KPIs from {len(revenue_columns)} revenue, "
        f"{len(cost_columns)} cost and {len(customer_columns)} customer columns"
    )
    return kpis


def find_kpi(kpis: Sequence[KPI], title: str) -> Optional[KPI]:
    """Return the KPI with the given title, or None."""
    return next((kpi for kpi in kpis if kpi.title == title), None)
