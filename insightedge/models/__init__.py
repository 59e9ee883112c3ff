"""
Package initialization file for InsightEdge models.

Exports all Pydantic schemas and enumerations from schemas.py and enums.py,
so other modules import data models from insightedge.models directly.

Usage:
    from insightedge.models import (
        TabularDataset,
        KPI,
        AnalyzedMetrics,
        TrendDirection,
    )
"""

# =============================================================================
# Enums
# =============================================================================

from insightedge.models.enums import (
    AlertType,
    ChartType,
    ColumnRole,
    DataProvenance,
    DataQuality,
    Impact,
    InsightCategory,
    InsightType,
    NotificationType,
    QueryIntent,
    ReportStatus,
    SectionType,
    SeriesTrend,
    Severity,
    TrendDirection,
    Visualization,
)

# =============================================================================
# Schemas
# =============================================================================

from insightedge.models.schemas import (
    # Input
    CellValue,
    Row,
    TabularDataset,
    NumericColumn,
    ColumnClassification,
    # Metrics and chart data
    KPI,
    ChartDataPoint,
    # Statistical insights
    AnomalyDetection,
    ForecastData,
    AIInsight,
    NaturalLanguageQueryResult,
    # Narrative
    Notification,
    Report,
    GrowthAlert,
    Insight,
    DataSummary,
    ReportSection,
    # Bundle
    AnalyzedMetrics,
    # Chart builder
    ChartConfig,
    ChartAnalysis,
    # API requests
    RowsRequest,
    RecommendationRequest,
    QueryRequest,
    ChartPreviewRequest,
)

__all__ = [
    # Enums
    'AlertType',
    'ChartType',
    'ColumnRole',
    'DataProvenance',
    'DataQuality',
    'Impact',
    'InsightCategory',
    'InsightType',
    'NotificationType',
    'QueryIntent',
    'ReportStatus',
    'SectionType',
    'SeriesTrend',
    'Severity',
    'TrendDirection',
    'Visualization',
    # Schemas
    'CellValue',
    'Row',
    'TabularDataset',
    'NumericColumn',
    'ColumnClassification',
    'KPI',
    'ChartDataPoint',
    'AnomalyDetection',
    'ForecastData',
    'AIInsight',
    'NaturalLanguageQueryResult',
    'Notification',
    'Report',
    'GrowthAlert',
    'Insight',
    'DataSummary',
    'ReportSection',
    'AnalyzedMetrics',
    'ChartConfig',
    'ChartAnalysis',
    'RowsRequest',
    'RecommendationRequest',
    'QueryRequest',
    'ChartPreviewRequest',
]
