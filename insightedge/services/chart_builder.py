"""
Interactive chart builder support.

Builds the preview series for an ad-hoc chart definition and runs the
statistical engine over it so the dashboard can annotate the chart.
"""

import logging
from typing import Any, Dict, List, Sequence

from insightedge.models import ChartAnalysis, ChartConfig, ChartType, Row, TabularDataset
from insightedge.services.normalization import is_number, normalize_value
from insightedge.services.statistics import (
    analyze_correlations,
    detect_anomalies,
    generate_forecasts,
)

logger = logging.getLogger(__name__)

# Chart types that plot against an explicit x value (pie charts do not)
X_AXIS_CHART_TYPES = (ChartType.LINE, ChartType.BAR, ChartType.AREA)

MAX_PREVIEW_CORRELATIONS = 5
MAX_PREVIEW_ANOMALIES = 3


def _plot_value(value: Any) -> float:
    if is_number(value):
        return float(value)
    if isinstance(value, str):
        parsed = normalize_value(value)
        if parsed is not None:
            return parsed
    return 0.0


def build_chart_preview(
    dataset: TabularDataset,
    config: ChartConfig,
    limit: int = 20,
) -> List[Row]:
    """
    Preview rows for a chart definition.

    Each of the first `limit` rows becomes {"x": <x cell>, <y>: number, ...};
    "x" is omitted for pie charts and y cells that are not numeric plot as 0.

    Raises:
        ValueError: If an axis names a column the dataset does not have
    """
    known = set(dataset.headers)
    missing = [column for column in [config.xAxis, *config.yAxis] if column not in known]
    if missing:
        raise ValueError(f"Unknown chart column(s): {', '.join(missing)}")

    preview: List[Row] = []
    for row in dataset.rows[:limit]:
        point: Dict[str, Any] = {}
        if config.type in X_AXIS_CHART_TYPES:
            point['x'] = row.get(config.xAxis)
        for column in config.yAxis:
            point[column] = _plot_value(row.get(column))
        preview.append(point)

    logger.debug(f"Built {len(preview)} preview points for '{config.title}'")
    return preview


def analyze_chart_preview(preview: Sequence[Row]) -> ChartAnalysis:
    """
    Statistical annotations for a preview: the first 3 anomalies, the first
    5 correlations, and every forecast the preview supports.
    """
    return ChartAnalysis(
        anomalies=detect_anomalies(preview)[:MAX_PREVIEW_ANOMALIES],
        correlations=analyze_correlations(preview)[:MAX_PREVIEW_CORRELATIONS],
        forecasts=generate_forecasts(preview),
    )
