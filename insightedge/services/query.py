"""
Natural-language query handling.

Questions are classified by keyword (first matching list wins) and routed
to a dedicated insight generator:

    revenue      revenue, sales, income
    costs        cost, expense, spending
    customers    customer, client, user
    trend        trend, pattern, change
    performance  performance, kpi, metric
    general      anything else

Classification is plain substring matching on the lowercased question, so
"What is the revenue trend?" is a revenue question. Only the revenue, costs
and customers intents carry suggested follow-up questions.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple

from insightedge.core.exceptions import QueryError
from insightedge.models import (
    AIInsight,
    Impact,
    InsightCategory,
    InsightType,
    NaturalLanguageQueryResult,
    QueryIntent,
    SeriesTrend,
    Visualization,
)
from insightedge.services.columns import (
    categorize_field,
    column_names,
    get_cost_fields,
    get_customer_fields,
    get_numeric_fields,
    get_revenue_fields,
)
from insightedge.services.normalization import numeric_values
from insightedge.services.statistics import analyze_trend, mean, recent_rows, variance

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

INTENT_KEYWORDS: List[Tuple[QueryIntent, List[str]]] = [
    (QueryIntent.REVENUE, ['revenue', 'sales', 'income']),
    (QueryIntent.COSTS, ['cost', 'expense', 'spending']),
    (QueryIntent.CUSTOMERS, ['customer', 'client', 'user']),
    (QueryIntent.TREND, ['trend', 'pattern', 'change']),
    (QueryIntent.PERFORMANCE, ['performance', 'kpi', 'metric']),
]

SUGGESTED_QUERIES: Dict[QueryIntent, List[str]] = {
    QueryIntent.REVENUE: [
        'What caused the revenue change?',
        'How does revenue compare to last month?',
        'Which products contribute most to revenue?',
    ],
    QueryIntent.COSTS: [
        'Where are costs increasing the most?',
        'How can we optimize our cost structure?',
        'What is the cost per customer?',
    ],
    QueryIntent.CUSTOMERS: [
        'Who are our most valuable customers?',
        'What is the customer retention rate?',
        'How do customers behave differently?',
    ],
}

# Stable when population variance < mean * ratio
STABILITY_RATIO = 0.1

Rows = Sequence[Mapping[str, Any]]


def parse_query_intent(query: str) -> QueryIntent:
    """Classify a question by the first keyword list it matches."""
    lowered = query.lower()
    for intent, keywords in INTENT_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return intent
    return QueryIntent.GENERAL


def suggested_queries(intent: QueryIntent) -> List[str]:
    return list(SUGGESTED_QUERIES.get(intent, []))


# =============================================================================
# Insight generators
# =============================================================================


def revenue_insights(rows: Rows) -> List[AIInsight]:
    fields = get_revenue_fields(rows)
    if not fields:
        return []

    field = fields[0]
    values = numeric_values(rows, field)
    if len(values) <= 5:
        return []

    trend = analyze_trend(rows, field)
    impact = {
        SeriesTrend.DECREASING: Impact.HIGH,
        SeriesTrend.INCREASING: Impact.MEDIUM,
    }.get(trend, Impact.LOW)

    return [AIInsight(
        type=InsightType.TREND,
        title='Revenue Trend Analysis',
        description=(
            f"{field} is currently {trend.value}. Current value: {values[-1]:.2f}, "
            f"Average: {mean(values):.2f}"
        ),
        confidence=85,
        impact=impact,
        category=InsightCategory.REVENUE,
        data=recent_rows(rows, 10),
        visualization=Visualization.CHART,
        actionItems=[
            'Monitor revenue trends closely',
            'Analyze factors affecting revenue performance',
            'Consider revenue optimization strategies',
        ],
    )]


def cost_insights(rows: Rows) -> List[AIInsight]:
    fields = get_cost_fields(rows)
    if not fields:
        return []

    field = fields[0]
    values = numeric_values(rows, field)
    if len(values) <= 5:
        return []

    trend = analyze_trend(rows, field)
    return [AIInsight(
        type=InsightType.TREND,
        title='Cost Analysis',
        description=(
            f"{field} is currently {trend.value}. Current value: {values[-1]:.2f}, "
            f"Average: {mean(values):.2f}"
        ),
        confidence=82,
        impact=Impact.HIGH if trend == SeriesTrend.INCREASING else Impact.MEDIUM,
        category=InsightCategory.COSTS,
        data=recent_rows(rows, 10),
        visualization=Visualization.CHART,
        actionItems=[
            'Review cost structure and identify optimization opportunities',
            'Implement cost control measures where necessary',
            'Monitor cost trends and their impact on profitability',
        ],
    )]


def customer_insights(rows: Rows) -> List[AIInsight]:
    fields = get_customer_fields(rows)
    if not fields:
        return []

    field = fields[0]
    values = numeric_values(rows, field)
    if len(values) <= 3:
        return []

    total = sum(values)
    return [AIInsight(
        type=InsightType.TREND,
        title='Customer Analysis',
        description=(
            f"Analyzing {field}: Total customers: {total:.0f}, "
            f"Average: {total / len(values):.1f}"
        ),
        confidence=78,
        impact=Impact.MEDIUM,
        category=InsightCategory.CUSTOMERS,
        data=recent_rows(rows, 10),
        visualization=Visualization.CHART,
        actionItems=[
            'Analyze customer acquisition and retention patterns',
            'Identify high-value customer segments',
            'Develop customer-focused strategies',
        ],
    )]


def recent_change(values: Sequence[float]) -> float:
    """Percent change between the last two values; 0 when undefined."""
    if len(values) < 2 or values[-2] == 0:
        return 0.0
    return (values[-1] - values[-2]) / values[-2] * 100


def trend_insights(rows: Rows) -> List[AIInsight]:
    """One trend insight for each of the first three numeric fields."""
    insights: List[AIInsight] = []
    for field in get_numeric_fields(rows)[:3]:
        values = numeric_values(rows, field)
        if len(values) <= 3:
            continue

        trend = analyze_trend(rows, field)
        change = recent_change(values)
        magnitude = abs(change)
        if magnitude > 10:
            impact = Impact.HIGH
        elif magnitude > 5:
            impact = Impact.MEDIUM
        else:
            impact = Impact.LOW

        insights.append(AIInsight(
            type=InsightType.TREND,
            title=f"{field} Trend",
            description=f"{field} is showing a {trend.value} trend with {change:.1f}% recent change",
            confidence=75,
            impact=impact,
            category=categorize_field(field),
            data=recent_rows(rows, 10),
            visualization=Visualization.CHART,
            actionItems=[
                f"Monitor {field} trends closely",
                'Investigate factors driving the trend',
                'Plan appropriate response strategies',
            ],
        ))
    return insights


def performance_insights(rows: Rows) -> List[AIInsight]:
    """Counts stable vs volatile numeric fields; fields with no values are skipped."""
    fields = get_numeric_fields(rows)
    if not fields:
        return []

    stable = 0
    volatile = 0
    for field in fields:
        values = numeric_values(rows, field)
        if not values:
            continue
        if variance(values) < mean(values) * STABILITY_RATIO:
            stable += 1
        else:
            volatile += 1

    return [AIInsight(
        type=InsightType.RECOMMENDATION,
        title='Performance Overview',
        description=f"Found {stable} stable metrics and {volatile} volatile metrics in your data",
        confidence=85,
        impact=Impact.HIGH if volatile > stable else Impact.MEDIUM,
        category=InsightCategory.OPERATIONS,
        data=recent_rows(rows, 10),
        visualization=Visualization.METRIC,
        actionItems=[
            'Focus on stabilizing volatile metrics',
            'Leverage stable metrics for consistent growth',
            'Implement performance monitoring systems',
        ],
    )]


def general_insights(rows: Rows) -> List[AIInsight]:
    total_fields = len(column_names(rows))
    numeric_share = len(get_numeric_fields(rows)) / total_fields if total_fields else 0.0

    return [AIInsight(
        type=InsightType.RECOMMENDATION,
        title='Data Quality Assessment',
        description=(
            f"Your dataset contains {len(rows)} records with {total_fields} fields. "
            f"{numeric_share * 100:.0f}% of fields contain numeric data suitable for analysis."
        ),
        confidence=95,
        impact=Impact.LOW if numeric_share > 0.5 else Impact.MEDIUM,
        category=InsightCategory.OPERATIONS,
        data=[dict(row) for row in rows[:5]],
        visualization=Visualization.TABLE,
        actionItems=[
            'Ensure data consistency across all records',
            'Consider adding more quantitative metrics for deeper analysis',
            'Regular data quality audits recommended',
        ],
    )]


INTENT_GENERATORS: Dict[QueryIntent, Callable[[Rows], List[AIInsight]]] = {
    QueryIntent.REVENUE: revenue_insights,
    QueryIntent.COSTS: cost_insights,
    QueryIntent.CUSTOMERS: customer_insights,
    QueryIntent.TREND: trend_insights,
    QueryIntent.PERFORMANCE: performance_insights,
    QueryIntent.GENERAL: general_insights,
}


# =============================================================================
# Entry point
# =============================================================================


async def process_natural_language_query(query: str, rows: Rows) -> NaturalLanguageQueryResult:
    """
    Answer a business question about the given rows.

    Args:
        query: Free-text question
        rows: Cleaned rows to inspect

    Returns:
        NaturalLanguageQueryResult with the detected intent, 0-3 insights and
        the intent's canned follow-up questions

    Raises:
        QueryError: On any internal failure (details are logged, not exposed)
    """
    try:
        intent = parse_query_intent(query)
        insights = INTENT_GENERATORS[intent](list(rows))
        logger.info(f"Query classified as '{intent.value}' with {len(insights)} insights")
        return NaturalLanguageQueryResult(
            query=query,
            intent=intent,
            response=insights,
            suggestedQueries=suggested_queries(intent),
        )
    except Exception as e:
        logger.error(f"Error processing natural language query: {e}", exc_info=True)
        raise QueryError() from e
