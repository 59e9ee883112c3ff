"""
InsightEdge Services Module

All analysis logic lives here as stateless module-level functions; the
dataset is passed explicitly through each call.

Services:
- normalization: value normalizer, row cleaner, numeric column parsing
- columns: keyword-based column classification
- metrics: headline KPIs and currency formatting
- time_series: 12-month chart data with provenance labels
- statistics: anomalies, forecasts, correlations, trends, recommendations
- data_quality: data-quality summary
- narrative: notifications, reports, growth alert, insights, summary text
- query: natural-language query handling
- analysis: end-to-end orchestration
- ingestion: CSV/Excel upload parsing
- chart_builder: interactive chart previews

All services are consumed by the API layer (insightedge/api/).
"""

# =============================================================================
# Normalization and column classification
# =============================================================================

from insightedge.services.normalization import (
    normalize_value,
    coerce_number,
    clean_rows,
    parse_numeric_column,
    parse_date,
    parse_dates,
    parse_date_column,
)
from insightedge.services.columns import (
    find_columns,
    get_numeric_fields,
    get_categorical_fields,
    classify_columns,
    categorize_field,
    find_date_column,
    REVENUE_KEYWORDS,
    COST_KEYWORDS,
    PROFIT_KEYWORDS,
    CUSTOMER_KEYWORDS,
    DATE_KEYWORDS,
)

# =============================================================================
# Metrics, chart data and data quality
# =============================================================================

from insightedge.services.metrics import (
    generate_kpis,
    format_currency,
)
from insightedge.services.time_series import (
    generate_chart_data,
    MONTHS,
)
from insightedge.services.data_quality import (
    summarize_data,
    count_duplicates,
    date_range,
)

# =============================================================================
# Statistical insight engine
# =============================================================================

from insightedge.services.statistics import (
    mean,
    std_dev,
    linear_regression,
    pearson_correlation,
    detect_anomalies,
    generate_forecasts,
    analyze_correlations,
    analyze_trend,
    generate_recommendations,
)

# =============================================================================
# Narrative and queries
# =============================================================================

from insightedge.services.narrative import (
    generate_notifications,
    generate_reports,
    generate_growth_alert,
    generate_insights,
    generate_executive_summary,
    build_report_sections,
)
from insightedge.services.query import (
    parse_query_intent,
    process_natural_language_query,
)

# =============================================================================
# Orchestration, ingestion and chart builder
# =============================================================================

from insightedge.services.analysis import analyze_business_data
from insightedge.services.ingestion import (
    ingest_csv,
    ingest_excel,
    ingest_file,
)
from insightedge.services.chart_builder import (
    build_chart_preview,
    analyze_chart_preview,
)

__all__ = [
    # Normalization
    'normalize_value',
    'coerce_number',
    'clean_rows',
    'parse_numeric_column',
    'parse_date',
    'parse_dates',
    'parse_date_column',
    # Columns
    'find_columns',
    'get_numeric_fields',
    'get_categorical_fields',
    'classify_columns',
    'categorize_field',
    'find_date_column',
    'REVENUE_KEYWORDS',
    'COST_KEYWORDS',
    'PROFIT_KEYWORDS',
    'CUSTOMER_KEYWORDS',
    'DATE_KEYWORDS',
    # Metrics
    'generate_kpis',
    'format_currency',
    # Time series
    'generate_chart_data',
    'MONTHS',
    # Data quality
    'summarize_data',
    'count_duplicates',
    'date_range',
    # Statistics
    'mean',
    'std_dev',
    'linear_regression',
    'pearson_correlation',
    'detect_anomalies',
    'generate_forecasts',
    'analyze_correlations',
    'analyze_trend',
    'generate_recommendations',
    # Narrative
    'generate_notifications',
    'generate_reports',
    'generate_growth_alert',
    'generate_insights',
    'generate_executive_summary',
    'build_report_sections',
    # Queries
    'parse_query_intent',
    'process_natural_language_query',
    # Orchestration
    'analyze_business_data',
    # Ingestion
    'ingest_csv',
    'ingest_excel',
    'ingest_file',
    # Chart builder
    'build_chart_preview',
    'analyze_chart_preview',
]
