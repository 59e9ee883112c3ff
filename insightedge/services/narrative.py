"""
Narrative Generator.

Rule-based text artifacts derived from KPIs and cleaned rows:
- Notifications (revenue up, expenses up, large dataset), at most one each
- Canned report list (revenue and customer reports are conditional)
- A single growth alert chosen by cascade
- Business-level insights
- Executive summary text and the ordered export report outline

Every function is pure apart from reading today's date for report stamps.
"""

from datetime import date
from typing import Any, List, Mapping, Optional, Sequence

from insightedge.core.config import get_settings
from insightedge.models import (
    KPI,
    AlertType,
    AnalyzedMetrics,
    DataSummary,
    GrowthAlert,
    Impact,
    Insight,
    InsightCategory,
    Notification,
    NotificationType,
    Report,
    ReportSection,
    ReportStatus,
    SectionType,
    TrendDirection,
)
from insightedge.services.columns import (
    CUSTOMER_REPORT_KEYWORDS,
    REVENUE_KEYWORDS,
    find_columns,
)
from insightedge.services.metrics import NET_PROFIT, TOTAL_EXPENSES, TOTAL_REVENUE, find_kpi

DETAILED_DATA_ROW_LIMIT = 100


def _trending_up(kpi: Optional[KPI]) -> bool:
    return kpi is not None and kpi.trend == TrendDirection.UP


def _is_large(rows: Sequence[Any]) -> bool:
    return len(rows) > get_settings().large_dataset_rows


# =============================================================================
# Notifications
# =============================================================================


def generate_notifications(
    rows: Sequence[Mapping[str, Any]],
    kpis: Sequence[KPI],
) -> List[Notification]:
    """Revenue growth, expense increase and large-dataset notices, in that order."""
    notifications: List[Notification] = []

    revenue = find_kpi(kpis, TOTAL_REVENUE)
    if _trending_up(revenue):
        notifications.append(Notification(
            title='Revenue Growth Detected',
            description=f"Your revenue has increased by {revenue.change}. Keep up the great work!",
            time='Just now',
            type=NotificationType.SUCCESS,
            priority=Impact.HIGH,
        ))

    if _trending_up(find_kpi(kpis, TOTAL_EXPENSES)):
        notifications.append(Notification(
            title='Expense Increase Alert',
            description='Expenses are trending upward. Consider reviewing cost management strategies.',
            time='2 hours ago',
            type=NotificationType.WARNING,
            priority=Impact.MEDIUM,
        ))

    if _is_large(rows):
        notifications.append(Notification(
            title='Large Dataset Processed',
            description=f"Successfully analyzed {len(rows):,} records.",
            time='5 minutes ago',
            type=NotificationType.INFO,
            priority=Impact.LOW,
        ))

    return notifications


# =============================================================================
# Reports
# =============================================================================


def generate_reports(
    rows: Sequence[Mapping[str, Any]],
    today: Optional[date] = None,
) -> List[Report]:
    """
    Canned report list stamped with today's ISO date.

    Revenue Analysis and Customer Behavior reports appear only when their
    columns exist; the last three are always present.
    """
    stamp = (today or date.today()).isoformat()
    count = len(rows)
    reports: List[Report] = []

    if find_columns(rows, REVENUE_KEYWORDS):
        reports.append(Report(
            name='Revenue Analysis Report',
            date=stamp,
            type='Financial',
            status=ReportStatus.FINAL,
            summary=f"Comprehensive analysis of {count} revenue records",
        ))

    if find_columns(rows, CUSTOMER_REPORT_KEYWORDS):
        reports.append(Report(
            name='Customer Behavior Report',
            date=stamp,
            type='Customer',
            status=ReportStatus.FINAL,
            summary=f"Insights from {count} customer interactions",
        ))

    reports.extend([
        Report(
            name='Data Quality Assessment',
            date=stamp,
            type='Operations',
            status=ReportStatus.FINAL,
            summary='Analysis of data completeness and accuracy',
        ),
        Report(
            name='Performance Metrics Summary',
            date=stamp,
            type='Analytics',
            status=ReportStatus.FINAL,
            summary='Key performance indicators and trends',
        ),
        Report(
            name='Strategic Recommendations',
            date=stamp,
            type='Strategy',
            status=ReportStatus.DRAFT,
            summary='Actionable insights for business improvement',
        ),
    ])
    return reports


# =============================================================================
# Growth Alert
# =============================================================================


def generate_growth_alert(kpis: Sequence[KPI]) -> GrowthAlert:
    """Exactly one alert: strong growth, revenue growth, or review needed."""
    revenue_up = _trending_up(find_kpi(kpis, TOTAL_REVENUE))

    if revenue_up and _trending_up(find_kpi(kpis, NET_PROFIT)):
        return GrowthAlert(
            title='Strong Growth Momentum',
            description=(
                'Both revenue and profit are showing positive trends. '
                'Your business is performing excellently!'
            ),
            type=AlertType.POSITIVE,
        )
    if revenue_up:
        return GrowthAlert(
            title='Revenue Growth',
            description='Revenue is trending upward. Focus on maintaining this momentum.',
            type=AlertType.POSITIVE,
        )
    return GrowthAlert(
        title='Performance Review Needed',
        description='Some metrics need attention. Consider reviewing your business strategies.',
        type=AlertType.NEUTRAL,
    )


# =============================================================================
# Business Insights
# =============================================================================


def generate_insights(
    rows: Sequence[Mapping[str, Any]],
    kpis: Sequence[KPI],
) -> List[Insight]:
    insights: List[Insight] = []

    if _trending_up(find_kpi(kpis, TOTAL_REVENUE)):
        insights.append(Insight(
            title='Revenue Growth Opportunity',
            description='Revenue is increasing. Consider scaling successful strategies.',
            impact=Impact.HIGH,
            category=InsightCategory.REVENUE,
        ))

    if _trending_up(find_kpi(kpis, TOTAL_EXPENSES)):
        insights.append(Insight(
            title='Cost Management Focus',
            description='Expenses are rising. Review cost structure and identify optimization opportunities.',
            impact=Impact.MEDIUM,
            category=InsightCategory.COSTS,
        ))

    if _is_large(rows):
        insights.append(Insight(
            title='Data-Driven Decision Making',
            description='Large dataset available. Leverage analytics for strategic decisions.',
            impact=Impact.HIGH,
            category=InsightCategory.OPERATIONS,
        ))

    return insights


# =============================================================================
# Executive Summary
# =============================================================================


def generate_executive_summary(
    kpis: Optional[Sequence[KPI]] = None,
    data_summary: Optional[DataSummary] = None,
    growth_alert: Optional[GrowthAlert] = None,
) -> str:
    """
    Plain-text executive summary.

    Blocks, each present only when its input is given:
    1. "Business Performance Overview" with revenue and profit lines
       (first KPI whose title contains "Revenue" / "Profit")
    2. "Data Analysis Summary:" bullet list
    3. "Key Insight:" with the growth alert description
    """
    parts: List[str] = []

    if kpis is not None:
        parts.append('Business Performance Overview\n\n')
        revenue = next((k for k in kpis if 'Revenue' in k.title), None)
        profit = next((k for k in kpis if 'Profit' in k.title), None)
        if revenue is not None:
            parts.append(f"Revenue: {revenue.value} ({revenue.change})\n")
        if profit is not None:
            parts.append(f"Profit: {profit.value} ({profit.change})\n")
        parts.append('\n')

    if data_summary is not None:
        parts.append('Data Analysis Summary:\n')
        parts.append(f"• Total Records: {data_summary.totalRecords:,}\n")
        parts.append(f"• Data Quality: {data_summary.dataQuality.value}\n")
        parts.append(f"• Date Range: {data_summary.dateRange}\n")
        parts.append(f"• Missing Data: {data_summary.missingData} records\n")

    if growth_alert is not None:
        parts.append(f"\nKey Insight: {growth_alert.description}\n")

    return ''.join(parts)


# =============================================================================
# Export Report Outline
# =============================================================================


def build_report_sections(
    metrics: AnalyzedMetrics,
    rows: Optional[Sequence[Mapping[str, Any]]] = None,
    include_charts: bool = True,
    include_tables: bool = True,
    include_insights: bool = True,
) -> List[ReportSection]:
    """
    Ordered section outline consumed by the export renderers.

    Executive Summary, KPIs and Data Quality are always present; charts,
    the detailed data table (first 100 rows) and insights follow the
    include flags. Orders are consecutive from 1.
    """
    candidates = [
        ('Executive Summary', SectionType.TEXT,
         metrics.executiveSummary or generate_executive_summary(
             metrics.kpis, metrics.dataSummary, metrics.growthAlert)),
        ('Key Performance Indicators', SectionType.TABLE,
         [kpi.model_dump(mode='json') for kpi in metrics.kpis]),
    ]
    if include_charts:
        candidates.append(('Performance Trends', SectionType.CHART,
                           [point.model_dump(mode='json') for point in metrics.chartData]))
    if include_tables and rows is not None:
        candidates.append(('Detailed Data Analysis', SectionType.TABLE,
                           [dict(row) for row in rows[:DETAILED_DATA_ROW_LIMIT]]))
    if include_insights:
        candidates.append(('Business Insights & Recommendations', SectionType.INSIGHT,
                           [insight.model_dump(mode='json') for insight in metrics.insights]))
    candidates.append(('Data Quality Assessment', SectionType.METRIC,
                       metrics.dataSummary.model_dump(mode='json')))

    return [
        ReportSection(title=title, type=section_type, content=content, order=order)
        for order, (title, section_type, content) in enumerate(candidates, start=1)
    ]
