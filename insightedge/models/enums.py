"""
Enumeration definitions for the InsightEdge analysis engine.

All enums inherit from both `str` and `Enum` to ensure JSON serialization
compatibility with Pydantic models, so the dashboard receives the plain
string values (e.g. "up", "high", "revenue").
"""

from enum import Enum


class TrendDirection(str, Enum):
    """
    Direction of a KPI versus its previous-period baseline.

    Derived from the sign of the formatted percentage change.
    """
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class SeriesTrend(str, Enum):
    """
    Direction of a numeric column over row order.

    Used by forecasts (sign of the regression slope) and by trend analysis
    (first-half vs second-half mean comparison).
    """
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class ColumnRole(str, Enum):
    """
    Semantic role of a column, derived from keyword matches on its name.

    A column may carry several roles at once (e.g. "net_sales" is both
    revenue and profit).
    """
    REVENUE = "revenue"
    COST = "cost"
    PROFIT = "profit"
    CUSTOMER = "customer"
    DATE = "date"
    UNCLASSIFIED = "unclassified"


class DataProvenance(str, Enum):
    """
    Where a chart data point's values came from.

    - observed: aggregated from rows dated in that month
    - synthetic: fabricated fill for a month with no dated rows
    - empty: no dated rows and synthetic fill disabled (all zeros)
    """
    OBSERVED = "observed"
    SYNTHETIC = "synthetic"
    EMPTY = "empty"


class Severity(str, Enum):
    """Anomaly severity by distance from the mean (2σ / 2.5σ / 3σ)."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Impact(str, Enum):
    """Business impact attached to insights and notification priority."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class InsightType(str, Enum):
    """Kind of AI insight produced by the statistical and query engines."""
    TREND = "trend"
    ANOMALY = "anomaly"
    RECOMMENDATION = "recommendation"
    CORRELATION = "correlation"
    FORECAST = "forecast"


class InsightCategory(str, Enum):
    """Business area an insight belongs to."""
    REVENUE = "revenue"
    COSTS = "costs"
    OPERATIONS = "operations"
    CUSTOMERS = "customers"
    MARKETING = "marketing"


class Visualization(str, Enum):
    """Preferred rendering hint for an insight."""
    CHART = "chart"
    TABLE = "table"
    METRIC = "metric"


class NotificationType(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    INFO = "info"


class ReportStatus(str, Enum):
    FINAL = "Final"
    DRAFT = "Draft"


class AlertType(str, Enum):
    """Tone of the single dashboard growth alert."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class DataQuality(str, Enum):
    """
    Data quality tier from the cleaned/raw row ratio.

    - excellent: >= 95%
    - good: >= 85%
    - fair: >= 70%
    - poor: below 70% (or no rows)
    """
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class QueryIntent(str, Enum):
    """Intent of a natural-language question, by keyword match."""
    REVENUE = "revenue"
    COSTS = "costs"
    CUSTOMERS = "customers"
    TREND = "trend"
    PERFORMANCE = "performance"
    GENERAL = "general"


class ChartType(str, Enum):
    """Chart types offered by the interactive chart builder."""
    LINE = "line"
    BAR = "bar"
    PIE = "pie"
    AREA = "area"


class SectionType(str, Enum):
    """Content type of a report outline section."""
    TEXT = "text"
    TABLE = "table"
    CHART = "chart"
    INSIGHT = "insight"
    METRIC = "metric"
