"""
Column Classifier.

Identifies numeric and categorical columns and tags columns with business
roles (revenue, cost, profit, customer, date) by case-insensitive substring
matching of fixed keyword lists against column names.

Column names are read from the first row's keys. The analysis orchestrator
aligns rows to the declared dataset headers before cleaning (see
Settings.align_to_declared_headers), so for a full analysis the first row
carries every declared header in order.

Keyword matching is intentionally literal and deterministic: "net_sales"
is both a revenue and a profit column, and "leads" matches the marketing
keyword "ad".
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from insightedge.models import ColumnClassification, ColumnRole, InsightCategory
from insightedge.services.normalization import coerce_number, is_number

# =============================================================================
# CONSTANTS - Role keyword lists
# =============================================================================

REVENUE_KEYWORDS: List[str] = ['revenue', 'sales', 'income', 'amount']
COST_KEYWORDS: List[str] = ['expense', 'cost', 'spending', 'outlay']
PROFIT_KEYWORDS: List[str] = ['profit', 'net', 'margin']
CUSTOMER_KEYWORDS: List[str] = ['customers', 'clients', 'orders', 'transactions']
DATE_KEYWORDS: List[str] = ['date', 'created', 'timestamp']

ROLE_KEYWORDS: Dict[ColumnRole, List[str]] = {
    ColumnRole.REVENUE: REVENUE_KEYWORDS,
    ColumnRole.COST: COST_KEYWORDS,
    ColumnRole.PROFIT: PROFIT_KEYWORDS,
    ColumnRole.CUSTOMER: CUSTOMER_KEYWORDS,
    ColumnRole.DATE: DATE_KEYWORDS,
}

# Narrower lists used by the insight engine on numeric fields
REVENUE_FIELD_KEYWORDS: List[str] = ['revenue', 'sales', 'income']
COST_FIELD_KEYWORDS: List[str] = ['cost', 'expense', 'spending']
CUSTOMER_FIELD_KEYWORDS: List[str] = ['customer', 'user', 'client']
MARKETING_FIELD_KEYWORDS: List[str] = ['marketing', 'campaign', 'ad']

# Customer report keywords (no "transactions")
CUSTOMER_REPORT_KEYWORDS: List[str] = ['customers', 'clients', 'orders']


# =============================================================================
# HELPERS
# =============================================================================

def _matches(name: str, keywords: Sequence[str]) -> bool:
    lowered = name.lower()
    return any(keyword.lower() in lowered for keyword in keywords)


def column_names(rows: Sequence[Mapping[str, Any]]) -> List[str]:
    """Column names in first-row key order, or [] for no rows."""
    if not rows:
        return []
    return list(rows[0].keys())


# =============================================================================
# CLASSIFICATION
# =============================================================================

def find_columns(rows: Sequence[Mapping[str, Any]], keywords: Sequence[str]) -> List[str]:
    """
    Find columns whose name contains any keyword (case-insensitive).

    Args:
        rows: Records; names come from the first row's keys
        keywords: Substrings to look for

    Returns:
        Every matching column name, in first-row key order
    """
    return [name for name in column_names(rows) if _matches(name, keywords)]


def is_numeric_sample(value: Any) -> bool:
    """A sample marks its column numeric if it is a number or coerces to one."""
    return is_number(value) or coerce_number(value) is not None


def get_numeric_fields(rows: Sequence[Mapping[str, Any]]) -> List[str]:
    """Columns whose first-row sample value is numeric."""
    if not rows:
        return []
    sample = rows[0]
    return [name for name in sample if is_numeric_sample(sample[name])]


def get_categorical_fields(rows: Sequence[Mapping[str, Any]]) -> List[str]:
    """Columns whose first-row sample is text and that are not numeric."""
    if not rows:
        return []
    sample = rows[0]
    return [
        name for name in sample
        if isinstance(sample[name], str) and not is_numeric_sample(sample[name])
    ]


def classify_columns(rows: Sequence[Mapping[str, Any]]) -> ColumnClassification:
    """
    Classify every column as numeric or categorical and collect role matches.

    Columns matching no role keyword are listed under ColumnRole.UNCLASSIFIED.
    """
    roles: Dict[ColumnRole, List[str]] = {
        role: find_columns(rows, keywords) for role, keywords in ROLE_KEYWORDS.items()
    }
    tagged = {name for names in roles.values() for name in names}
    roles[ColumnRole.UNCLASSIFIED] = [
        name for name in column_names(rows) if name not in tagged
    ]
    return ColumnClassification(
        numeric=get_numeric_fields(rows),
        categorical=get_categorical_fields(rows),
        roles=roles,
    )


# =============================================================================
# FIELD HELPERS FOR THE INSIGHT ENGINE
# =============================================================================

def get_revenue_fields(rows: Sequence[Mapping[str, Any]]) -> List[str]:
    return [f for f in get_numeric_fields(rows) if _matches(f, REVENUE_FIELD_KEYWORDS)]


def get_cost_fields(rows: Sequence[Mapping[str, Any]]) -> List[str]:
    return [f for f in get_numeric_fields(rows) if _matches(f, COST_FIELD_KEYWORDS)]


def get_customer_fields(rows: Sequence[Mapping[str, Any]]) -> List[str]:
    return [f for f in get_numeric_fields(rows) if _matches(f, CUSTOMER_FIELD_KEYWORDS)]


def find_date_column(
    rows: Sequence[Mapping[str, Any]],
    headers: Optional[Sequence[str]] = None,
) -> Optional[str]:
    """
    First date-role column.

    Declared headers take precedence over the first row's keys, so a
    first row that lacks the date cell does not hide the column.
    """
    names = list(headers) if headers else column_names(rows)
    return next((name for name in names if _matches(name, DATE_KEYWORDS)), None)


def categorize_field(field: str) -> InsightCategory:
    """
    Map a field name to the business category used on insights.

    Checked in order: revenue, costs, customers, marketing; anything else
    is operations.
    """
    if _matches(field, REVENUE_FIELD_KEYWORDS):
        return InsightCategory.REVENUE
    if _matches(field, COST_FIELD_KEYWORDS):
        return InsightCategory.COSTS
    if _matches(field, CUSTOMER_FIELD_KEYWORDS):
        return InsightCategory.CUSTOMERS
    if _matches(field, MARKETING_FIELD_KEYWORDS):
        return InsightCategory.MARKETING
    return InsightCategory.OPERATIONS
