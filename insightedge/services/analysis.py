"""
Business Data Analysis Orchestrator

Runs the full pipeline over one TabularDataset:

    validate -> clean -> KPIs -> chart data -> notifications -> reports
    -> growth alert -> data summary -> business insights
    -> (advanced) columns, anomalies, forecasts, correlations,
       recommendations -> executive summary

Each step finishes before the next begins. The coroutine form exists for
API ergonomics; callers with very large datasets should offload it to a
worker. Any failure aborts the analysis with AnalysisError; no partial
result is returned.
"""

import logging
from typing import Any, Mapping, Optional, Union

import numpy as np

from insightedge.core.config import get_settings
from insightedge.core.exceptions import AnalysisError
from insightedge.models import AnalyzedMetrics, TabularDataset
from insightedge.services.columns import classify_columns, find_date_column
from insightedge.services.data_quality import summarize_data
from insightedge.services.metrics import generate_kpis
from insightedge.services.narrative import (
    generate_executive_summary,
    generate_growth_alert,
    generate_insights,
    generate_notifications,
    generate_reports,
)
from insightedge.services.normalization import clean_rows, parse_dates
from insightedge.services.statistics import (
    analyze_correlations,
    detect_anomalies,
    generate_forecasts,
    generate_recommendations,
)
from insightedge.services.time_series import generate_chart_data

logger = logging.getLogger(__name__)

DatasetInput = Union[TabularDataset, Mapping[str, Any]]


def run_analysis(
    dataset: DatasetInput,
    rng: Optional[np.random.Generator] = None,
) -> AnalyzedMetrics:
    """
    Synchronous pipeline body.

    Args:
        dataset: TabularDataset, or a mapping validated into one
        rng: Random source for synthetic chart months

    Returns:
        AnalyzedMetrics bundle
    """
    settings = get_settings()
    if not isinstance(dataset, TabularDataset):
        dataset = TabularDataset.model_validate(dataset)

    headers = dataset.headers if settings.align_to_declared_headers else None
    cleaned = clean_rows(dataset.rows, headers=headers)
    logger.info(f"Cleaned {len(cleaned)} of {len(dataset.rows)} rows")

    # One parse of the date column serves the chart and the data summary
    date_column = find_date_column(dataset.rows, headers)
    date_lookup = (
        parse_dates(row.get(date_column) for row in dataset.rows) if date_column else {}
    )

    kpis = generate_kpis(cleaned)
    chart_data = generate_chart_data(cleaned, rng=rng, date_lookup=date_lookup)
    notifications = generate_notifications(cleaned, kpis)
    reports = generate_reports(cleaned)
    growth_alert = generate_growth_alert(kpis)
    data_summary = summarize_data(dataset.rows, cleaned, headers, date_lookup)
    insights = generate_insights(cleaned, kpis)

    advanced = {}
    if settings.include_advanced_insights:
        anomalies = detect_anomalies(cleaned)
        advanced = {
            'columns': classify_columns(cleaned),
            'anomalies': anomalies,
            'forecasts': generate_forecasts(cleaned),
            'correlations': analyze_correlations(cleaned),
            'recommendations': generate_recommendations(cleaned, kpis, anomalies),
        }

    return AnalyzedMetrics(
        kpis=kpis,
        chartData=chart_data,
        notifications=notifications,
        reports=reports,
        growthAlert=growth_alert,
        dataSummary=data_summary,
        insights=insights,
        executiveSummary=generate_executive_summary(kpis, data_summary, growth_alert),
        **advanced,
    )


async def analyze_business_data(
    dataset: DatasetInput,
    rng: Optional[np.random.Generator] = None,
) -> AnalyzedMetrics:
    """
    Analyze a dataset end to end.

    Args:
        dataset: Parsed tabular data
        rng: Optional random source for synthetic chart months (tests pass
            a seeded generator)

    Returns:
        AnalyzedMetrics bundle

    Raises:
        AnalysisError: On any failure, including an unusable dataset
    """
    try:
        return run_analysis(dataset, rng=rng)
    except Exception as e:
        logger.error(f"Error analyzing business data: {e}", exc_info=True)
        raise AnalysisError() from e
