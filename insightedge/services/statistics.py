"""
Statistical Insight Engine.

Pure functions over the numeric columns of cleaned rows:
1. ANOMALY DETECTION - values beyond 2 population standard deviations
   - Severity: > 3σ high, > 2.5σ medium, else low
2. FORECASTING - OLS regression of value against row index, one step ahead
   - Requires >= 10 rows and >= 10 parsed values per field
3. CORRELATION - Pearson r for every unordered pair of numeric fields
   - Emitted when |r| > 0.7, high impact when |r| > 0.8
4. TREND - first-half mean vs second-half mean with a 5% band
5. RECOMMENDATIONS - revenue decline, cost growth, high-severity anomalies

Every function reads a column through parse_numeric_column, so empty and
non-numeric cells are skipped rather than counted as zero. Insufficient data
yields an empty result. Unusable input (rows that are not mappings) is
logged and re-raised as AnalysisError by the entry points.
"""

import functools
import logging
import math
from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional, Sequence, TypeVar

import numpy as np

from insightedge.core.config import get_settings
from insightedge.core.exceptions import AnalysisError
from insightedge.models import (
    AIInsight,
    AnomalyDetection,
    ForecastData,
    Impact,
    InsightCategory,
    InsightType,
    KPI,
    SeriesTrend,
    Severity,
    Visualization,
)
from insightedge.services.columns import (
    categorize_field,
    get_cost_fields,
    get_numeric_fields,
    get_revenue_fields,
)
from insightedge.services.normalization import numeric_values

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def analysis_entry_point(func: F) -> F:
    """Log unexpected failures and re-raise them as AnalysisError."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except AnalysisError:
            raise
        except Exception as e:
            logger.error(f"Error in {func.__name__}: {e}", exc_info=True)
            raise AnalysisError() from e
    return wrapper  # type: ignore[return-value]


# =============================================================================
# CONSTANTS
# =============================================================================

HIGH_SEVERITY_SIGMA = 3.0
MEDIUM_SEVERITY_SIGMA = 2.5
HIGH_IMPACT_CORRELATION = 0.8

BASE_TREND_FACTORS: List[str] = [
    'Market conditions',
    'Seasonal patterns',
    'Business strategy changes',
]
REVENUE_TREND_FACTORS: List[str] = [
    'Pricing changes',
    'Customer acquisition',
    'Product performance',
]
COST_TREND_FACTORS: List[str] = [
    'Supplier changes',
    'Operational efficiency',
    'Inflation',
]


def recent_rows(rows: Sequence[Mapping[str, Any]], count: int) -> List[Dict[str, Any]]:
    """Plain-dict copies of the last `count` rows."""
    return [dict(row) for row in rows[-count:]] if count > 0 else []


# =============================================================================
# Statistical Helper Functions
# =============================================================================


def mean(values: Sequence[float]) -> float:
    """
    Arithmetic mean.

    Returns:
        Mean of values, or 0 if empty
    """
    if not values:
        return 0.0
    return sum(values) / len(values)


def variance(values: Sequence[float]) -> float:
    """Population variance (divides by N), or 0 if empty."""
    if not values:
        return 0.0
    avg = mean(values)
    return sum((v - avg) ** 2 for v in values) / len(values)


def std_dev(values: Sequence[float]) -> float:
    """
    Population standard deviation (divides by N, not N-1).

    Returns:
        Standard deviation, or 0 if fewer than 2 values
    """
    if len(values) < 2:
        return 0.0
    return math.sqrt(variance(values))


class RegressionResult(NamedTuple):
    slope: float
    intercept: float
    prediction: float
    confidence: float


def linear_regression(values: Sequence[float]) -> Optional[RegressionResult]:
    """
    Ordinary least squares of value against index 0..n-1.

    The prediction is the fitted value at index n (one step beyond the last
    observation). Confidence is the heuristic 100 - |slope| * 10 clamped to
    [0, 100]; it is not a statistical confidence interval.

    Args:
        values: Observations in row order

    Returns:
        RegressionResult, or None for fewer than 2 values
    """
    n = len(values)
    if n < 2:
        return None

    y = np.asarray(values, dtype=np.float64)
    x = np.arange(n, dtype=np.float64)

    sum_x = float(np.sum(x))
    sum_y = float(np.sum(y))
    sum_xy = float(np.sum(x * y))
    sum_x2 = float(np.sum(x * x))

    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)
    intercept = (sum_y - slope * sum_x) / n
    prediction = slope * n + intercept
    confidence = max(0.0, min(100.0, 100.0 - abs(slope) * 10))

    return RegressionResult(slope, intercept, prediction, confidence)


def pearson_correlation(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Pearson correlation coefficient from population sums.

    Returns:
        r in [-1, 1]; 0 when the sequences differ in length, hold fewer than
        2 values, or either is constant
    """
    if len(a) != len(b) or len(a) < 2:
        return 0.0

    x = np.asarray(a, dtype=np.float64)
    y = np.asarray(b, dtype=np.float64)
    n = len(x)

    sum_x = float(np.sum(x))
    sum_y = float(np.sum(y))
    numerator = n * float(np.sum(x * y)) - sum_x * sum_y
    spread = (n * float(np.sum(x * x)) - sum_x ** 2) * (n * float(np.sum(y * y)) - sum_y ** 2)

    if spread <= 0:
        return 0.0
    return numerator / math.sqrt(spread)


# =============================================================================
# Anomaly Detection
# =============================================================================


def classify_severity(deviation: float, std: float) -> Severity:
    if deviation > HIGH_SEVERITY_SIGMA * std:
        return Severity.HIGH
    if deviation > MEDIUM_SEVERITY_SIGMA * std:
        return Severity.MEDIUM
    return Severity.LOW


_SEVERITY_WORDS = {
    Severity.HIGH: 'extremely',
    Severity.MEDIUM: 'highly',
    Severity.LOW: 'moderately',
}


def describe_anomaly(field: str, value: float, avg: float, std: float, sigma: float = 2.0) -> str:
    deviation = abs(value - avg)
    word = _SEVERITY_WORDS[classify_severity(deviation, std)]
    low, high = avg - sigma * std, avg + sigma * std
    return (
        f"The {field} value of {value:.2f} is {word} unusual, deviating "
        f"{deviation:.2f} from the expected range of {low:.2f} to {high:.2f}."
    )


@analysis_entry_point
def detect_anomalies(rows: Sequence[Mapping[str, Any]]) -> List[AnomalyDetection]:
    """
    Flag values more than 2 standard deviations from their column mean.

    Each numeric field with at least 3 parsed values is scanned. Mean and
    standard deviation are computed over the full value set of the field,
    and every value with |v - mean| > 2σ is reported in row order.
    """
    settings = get_settings()
    sigma = settings.anomaly_std_threshold
    anomalies: List[AnomalyDetection] = []

    for field in get_numeric_fields(rows):
        values = numeric_values(rows, field)
        if len(values) < settings.min_anomaly_values:
            continue

        avg = mean(values)
        std = std_dev(values)
        expected = (avg - sigma * std, avg + sigma * std)

        for value in values:
            deviation = abs(value - avg)
            if deviation <= sigma * std:
                continue
            anomalies.append(AnomalyDetection(
                field=field,
                value=value,
                expectedRange=expected,
                severity=classify_severity(deviation, std),
                description=describe_anomaly(field, value, avg, std, sigma),
            ))

    logger.debug(f"Detected {len(anomalies)} anomalies")
    return anomalies


# =============================================================================
# Forecasting
# =============================================================================


def identify_trend_factors(field: str) -> List[str]:
    """Generic business drivers plus revenue- or cost-specific extras."""
    factors = list(BASE_TREND_FACTORS)
    lowered = field.lower()
    if 'revenue' in lowered:
        factors.extend(REVENUE_TREND_FACTORS)
    elif 'cost' in lowered:
        factors.extend(COST_TREND_FACTORS)
    return factors


def slope_trend(slope: float) -> SeriesTrend:
    if slope > 0:
        return SeriesTrend.INCREASING
    if slope < 0:
        return SeriesTrend.DECREASING
    return SeriesTrend.STABLE


@analysis_entry_point
def generate_forecasts(rows: Sequence[Mapping[str, Any]]) -> List[ForecastData]:
    """
    One-step-ahead linear forecast for every numeric field.

    Requires at least min_forecast_values rows in total and as many parsed
    values in the field itself.
    """
    minimum = get_settings().min_forecast_values
    forecasts: List[ForecastData] = []
    if len(rows) < minimum:
        return forecasts

    for field in get_numeric_fields(rows):
        values = numeric_values(rows, field)
        if len(values) < minimum:
            continue

        regression = linear_regression(values)
        if regression is None:
            continue

        forecasts.append(ForecastData(
            field=field,
            currentValue=values[-1],
            predictedValue=regression.prediction,
            confidence=regression.confidence,
            trend=slope_trend(regression.slope),
            factors=identify_trend_factors(field),
        ))

    return forecasts


# =============================================================================
# Correlation Analysis
# =============================================================================


def correlate_fields(rows: Sequence[Mapping[str, Any]], field1: str, field2: str) -> float:
    return pearson_correlation(numeric_values(rows, field1), numeric_values(rows, field2))


@analysis_entry_point
def analyze_correlations(rows: Sequence[Mapping[str, Any]]) -> List[AIInsight]:
    """
    Correlation insights for strongly related numeric field pairs.

    Every unordered pair (i < j, in column order) is tested; pairs whose
    parsed value counts differ score 0 and are never reported.
    """
    settings = get_settings()
    insights: List[AIInsight] = []
    if len(rows) < settings.min_correlation_rows:
        return insights

    fields = get_numeric_fields(rows)
    for i, field1 in enumerate(fields):
        for field2 in fields[i + 1:]:
            r = correlate_fields(rows, field1, field2)
            if abs(r) <= settings.correlation_threshold:
                continue

            positive = r > 0
            insights.append(AIInsight(
                type=InsightType.CORRELATION,
                title=f"Strong {'Positive' if positive else 'Negative'} Correlation",
                description=(
                    f"{field1} and {field2} show a "
                    f"{'strong positive' if positive else 'strong negative'} "
                    f"correlation ({r:.2f}). This suggests that changes in one "
                    f"metric may influence the other."
                ),
                confidence=min(100.0, abs(r) * 100),
                impact=Impact.HIGH if abs(r) > HIGH_IMPACT_CORRELATION else Impact.MEDIUM,
                category=categorize_field(field1),
                data=recent_rows(rows, 20),
                visualization=Visualization.CHART,
                actionable=True,
                actionItems=[
                    f"Investigate the relationship between {field1} and {field2}",
                    "Consider how optimizing one metric might affect the other",
                    "Monitor both metrics together for better insights",
                ],
            ))

    return insights


# =============================================================================
# Trend Analysis
# =============================================================================


def trend_of_values(values: Sequence[float], threshold_ratio: float = 0.05) -> SeriesTrend:
    """
    Compare the mean of the first half (n // 2 values) with the rest.

    The change must exceed threshold_ratio of the first-half mean to count.
    """
    if len(values) < 3:
        return SeriesTrend.STABLE

    split = len(values) // 2
    first_avg = mean(values[:split])
    second_avg = mean(values[split:])
    change = second_avg - first_avg
    threshold = first_avg * threshold_ratio

    if change > threshold:
        return SeriesTrend.INCREASING
    if change < -threshold:
        return SeriesTrend.DECREASING
    return SeriesTrend.STABLE


def analyze_trend(rows: Sequence[Mapping[str, Any]], field: str) -> SeriesTrend:
    """Half-over-half trend of one column; stable with fewer than 3 values."""
    return trend_of_values(
        numeric_values(rows, field),
        get_settings().trend_change_threshold,
    )


# =============================================================================
# Recommendations
# =============================================================================


@analysis_entry_point
def generate_recommendations(
    rows: Sequence[Mapping[str, Any]],
    kpis: Sequence[KPI],
    anomalies: Sequence[AnomalyDetection],
) -> List[AIInsight]:
    """
    Actionable recommendations, in this order:

    1. Revenue Decline Alert when the first numeric revenue field is decreasing
    2. Cost Optimization Opportunity when the first cost field is increasing
    3. One "Investigate {field} Anomaly" per high-severity anomaly

    kpis is accepted for callers that pass the full analysis context; the
    current rules read only rows and anomalies.
    """
    recommendations: List[AIInsight] = []

    revenue_fields = get_revenue_fields(rows)
    if revenue_fields and analyze_trend(rows, revenue_fields[0]) == SeriesTrend.DECREASING:
        recommendations.append(AIInsight(
            type=InsightType.RECOMMENDATION,
            title='Revenue Decline Alert',
            description=(
                'Revenue is showing a declining trend. Consider reviewing pricing '
                'strategies, customer retention, and market conditions.'
            ),
            confidence=85,
            impact=Impact.HIGH,
            category=InsightCategory.REVENUE,
            data=recent_rows(rows, 30),
            visualization=Visualization.CHART,
            actionItems=[
                'Review pricing strategy and competitive positioning',
                'Analyze customer churn and retention metrics',
                'Investigate market trends and customer feedback',
                'Consider new revenue streams or product offerings',
            ],
        ))

    cost_fields = get_cost_fields(rows)
    if cost_fields and analyze_trend(rows, cost_fields[0]) == SeriesTrend.INCREASING:
        recommendations.append(AIInsight(
            type=InsightType.RECOMMENDATION,
            title='Cost Optimization Opportunity',
            description=(
                'Costs are trending upward. Identify areas for cost reduction '
                'and efficiency improvements.'
            ),
            confidence=80,
            impact=Impact.MEDIUM,
            category=InsightCategory.COSTS,
            data=recent_rows(rows, 30),
            visualization=Visualization.CHART,
            actionItems=[
                'Conduct cost structure analysis',
                'Identify inefficiencies in operations',
                'Negotiate better terms with suppliers',
                'Implement cost control measures',
            ],
        ))

    for anomaly in anomalies:
        if anomaly.severity != Severity.HIGH:
            continue
        recommendations.append(AIInsight(
            type=InsightType.RECOMMENDATION,
            title=f"Investigate {anomaly.field} Anomaly",
            description=(
                f"Unusual activity detected in {anomaly.field}. This requires "
                f"immediate attention to understand the cause."
            ),
            confidence=90,
            impact=Impact.HIGH,
            category=categorize_field(anomaly.field),
            data=recent_rows(rows, 10),
            visualization=Visualization.METRIC,
            actionItems=[
                f"Investigate the cause of the {anomaly.field} anomaly",
                'Review recent changes or events that might explain this',
                'Implement monitoring to prevent similar issues',
                'Document findings for future reference',
            ],
        ))

    return recommendations
