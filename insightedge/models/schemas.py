"""
Pydantic models for the InsightEdge analysis engine.

This module provides type-safe data validation and serialization for the
engine's input dataset, every value object it derives (KPIs, chart points,
anomalies, forecasts, insights, summaries) and the API request bodies.

Field names are camelCase because they are the dashboard's JSON contract;
the export and persistence collaborators consume these shapes verbatim.
Output models are frozen: they are created fresh per analysis and never
mutated afterwards.

All models use Pydantic v2 syntax with proper field validation and examples.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, ConfigDict, model_validator

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


# A single cell: Number, Text, or Empty (None). Ingestion produces only these.
CellValue = Optional[Union[int, float, str]]

# A record maps header names to cell values; absent keys mean Empty.
Row = Dict[str, Any]


# =============================================================================
# Input Dataset
# =============================================================================


class TabularDataset(BaseModel):
    """
    Already-parsed tabular data handed to the engine by ingestion.

    Invariants:
    - headers are unique
    - every row's keys are a subset of headers (missing keys mean Empty)

    When headers are omitted they are taken from the rows' keys in order
    of first appearance.
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "headers": ["date", "revenue", "expenses"],
                "rows": [
                    {"date": "2024-01-15", "revenue": "$1,000", "expenses": "750"},
                    {"date": "2024-02-15", "revenue": "$2,000", "expenses": "1,200"},
                ],
            }
        },
    )

    headers: List[str] = Field(
        default_factory=list,
        description="Ordered, unique column names"
    )
    rows: List[Dict[str, CellValue]] = Field(
        default_factory=list,
        description="Ordered records mapping header name to raw cell value"
    )

    @model_validator(mode='before')
    @classmethod
    def _derive_headers(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get('headers'):
            return data
        rows = data.get('rows') or []
        derived: List[str] = []
        if isinstance(rows, list):
            for row in rows:
                if isinstance(row, dict):
                    derived.extend(key for key in row if key not in derived)
        return {**data, 'headers': derived}

    @model_validator(mode='after')
    def _check_headers(self) -> 'TabularDataset':
        if len(set(self.headers)) != len(self.headers):
            raise ValueError("Dataset headers must be unique")

        known = set(self.headers)
        for index, row in enumerate(self.rows):
            unknown = [key for key in row if key not in known]
            if unknown:
                raise ValueError(
                    f"Row {index + 1} has columns not in headers: {unknown}"
                )
        return self


class NumericColumn(BaseModel):
    """
    Result of parsing one column as numbers.

    values holds the successfully coerced cells in row order; skipped counts
    the cells that were empty or not numeric.
    """
    model_config = ConfigDict(frozen=True)

    field: str
    values: List[float] = Field(default_factory=list)
    skipped: int = Field(default=0, ge=0)


class ColumnClassification(BaseModel):
    """Numeric/categorical split plus keyword roles for a dataset's columns."""
    model_config = ConfigDict(frozen=True)

    numeric: List[str] = Field(default_factory=list)
    categorical: List[str] = Field(default_factory=list)
    roles: Dict[ColumnRole, List[str]] = Field(
        default_factory=dict,
        description="All matching column names per role; a column may appear under several roles"
    )


# =============================================================================
# Metric Aggregator Models
# =============================================================================


class KPI(BaseModel):
    """
    Headline business metric with a period-over-period change.

    previousValue is a synthetic baseline (current value times a fixed
    shrink factor), not a real historical figure.
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "title": "Total Revenue",
                "value": "$3,000",
                "change": "5.3% vs previous period",
                "trend": "up",
                "previousValue": 2850.0
            }
        }
    )

    title: str = Field(..., description="KPI name, e.g. 'Total Revenue'")
    value: str = Field(..., description="Current value formatted as whole US dollars")
    change: str = Field(..., description="Percentage change with ' vs previous period' suffix")
    trend: TrendDirection = Field(..., description="Sign of the percentage change")
    previousValue: float = Field(..., description="Synthetic previous-period baseline")


class ChartDataPoint(BaseModel):
    """
    One calendar month of chart data.

    provenance tells the renderer whether the values were aggregated from
    dated rows or fabricated to keep the 12-month shape.
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "month": "Jan",
                "sales": 42000.0,
                "profit": 12600.0,
                "revenue": 42000.0,
                "expenses": 29400.0,
                "provenance": "observed"
            }
        }
    )

    month: str = Field(..., description="Three-letter month abbreviation")
    sales: float
    profit: float
    revenue: float
    expenses: float
    provenance: DataProvenance = Field(
        default=DataProvenance.OBSERVED,
        description="observed, synthetic, or empty"
    )


# =============================================================================
# Statistical Insight Models
# =============================================================================


class AnomalyDetection(BaseModel):
    """A value more than 2 standard deviations from its column mean."""
    model_config = ConfigDict(frozen=True)

    field: str
    value: float
    expectedRange: Tuple[float, float] = Field(
        ...,
        description="mean ± 2σ of the column"
    )
    severity: Severity
    description: str
    timestamp: datetime = Field(default_factory=datetime.now)


class ForecastData(BaseModel):
    """One-step-ahead linear extrapolation of a numeric column."""
    model_config = ConfigDict(frozen=True)

    field: str
    currentValue: float
    predictedValue: float
    confidence: float = Field(
        ...,
        ge=0.0,
        le=100.0,
        description="Heuristic 100 - |slope| * 10, clamped to [0, 100]"
    )
    trend: SeriesTrend
    factors: List[str] = Field(default_factory=list)


class AIInsight(BaseModel):
    """Insight produced by the statistical engine or the query handler."""
    model_config = ConfigDict(frozen=True)

    type: InsightType
    title: str
    description: str
    confidence: float = Field(..., ge=0.0, le=100.0)
    impact: Impact
    category: InsightCategory
    data: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Rows supporting the insight (a recent slice of the data)"
    )
    visualization: Optional[Visualization] = None
    actionable: bool = True
    actionItems: List[str] = Field(default_factory=list)


class NaturalLanguageQueryResult(BaseModel):
    """Answer to a keyword-classified natural-language question."""
    model_config = ConfigDict(frozen=True)

    query: str
    intent: QueryIntent = QueryIntent.GENERAL
    response: List[AIInsight] = Field(default_factory=list)
    suggestedQueries: List[str] = Field(default_factory=list)


# =============================================================================
# Narrative Models
# =============================================================================


class Notification(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    time: str = Field(..., description="Relative time label, e.g. 'Just now'")
    type: NotificationType
    priority: Impact


class Report(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    date: str = Field(..., description="Generation date in YYYY-MM-DD format")
    type: str
    status: ReportStatus
    summary: str


class GrowthAlert(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    type: AlertType


class Insight(BaseModel):
    """Business-level insight derived from KPI trends and dataset size."""
    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    impact: Impact
    category: InsightCategory


class DataSummary(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "totalRecords": 120,
                "dateRange": "1/1/2024 - 12/31/2024",
                "dataQuality": "excellent",
                "missingData": 2,
                "duplicateRecords": 0
            }
        }
    )

    totalRecords: int = Field(..., ge=0)
    dateRange: str = Field(..., description="'M/D/YYYY - M/D/YYYY' or 'Unknown'")
    dataQuality: DataQuality
    missingData: int = Field(..., ge=0, description="Rows dropped by cleaning")
    duplicateRecords: int = Field(..., ge=0)


class ReportSection(BaseModel):
    """One ordered section of an export report outline."""
    model_config = ConfigDict(frozen=True)

    title: str
    type: SectionType
    content: Any = None
    order: int = Field(..., ge=1)


# =============================================================================
# Analysis Bundle
# =============================================================================


class AnalyzedMetrics(BaseModel):
    """
    Full analysis bundle consumed by the dashboard and export pipeline.

    The first seven fields form the dashboard contract; the remaining fields
    carry the statistical engine's output and the executive summary text.
    """
    model_config = ConfigDict(frozen=True)

    kpis: List[KPI] = Field(default_factory=list)
    chartData: List[ChartDataPoint] = Field(default_factory=list)
    notifications: List[Notification] = Field(default_factory=list)
    reports: List[Report] = Field(default_factory=list)
    growthAlert: GrowthAlert
    dataSummary: DataSummary
    insights: List[Insight] = Field(default_factory=list)

    columns: Optional[ColumnClassification] = None
    anomalies: List[AnomalyDetection] = Field(default_factory=list)
    forecasts: List[ForecastData] = Field(default_factory=list)
    correlations: List[AIInsight] = Field(default_factory=list)
    recommendations: List[AIInsight] = Field(default_factory=list)
    executiveSummary: str = ""


# =============================================================================
# Chart Builder Models
# =============================================================================


class ChartConfig(BaseModel):
    """Ad-hoc chart definition from the interactive chart builder."""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "type": "line",
                "xAxis": "month",
                "yAxis": ["revenue", "expenses"],
                "title": "Revenue vs Expenses"
            }
        }
    )

    type: ChartType = ChartType.LINE
    xAxis: str = Field(..., min_length=1)
    yAxis: List[str] = Field(..., min_length=1)
    title: str = "Custom Chart"


class ChartAnalysis(BaseModel):
    """Statistical signals computed over a chart preview."""
    model_config = ConfigDict(frozen=True)

    anomalies: List[AnomalyDetection] = Field(default_factory=list)
    correlations: List[AIInsight] = Field(default_factory=list)
    forecasts: List[ForecastData] = Field(default_factory=list)


# =============================================================================
# API Request Models
# =============================================================================


class RowsRequest(BaseModel):
    """Request body carrying bare rows for a single statistical operation."""
    rows: List[Dict[str, CellValue]] = Field(default_factory=list)


class RecommendationRequest(BaseModel):
    rows: List[Dict[str, CellValue]] = Field(default_factory=list)
    kpis: List[KPI] = Field(default_factory=list)
    anomalies: List[AnomalyDetection] = Field(default_factory=list)


class QueryRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "query": "What is the revenue trend?",
                "rows": [{"Sales": 1200}, {"Sales": 1350}]
            }
        }
    )

    query: str = Field(..., min_length=1)
    rows: List[Dict[str, CellValue]] = Field(default_factory=list)


class ChartPreviewRequest(BaseModel):
    dataset: TabularDataset
    config: ChartConfig
    limit: int = Field(default=20, ge=1, le=1000)
