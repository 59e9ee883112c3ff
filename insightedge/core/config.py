"""
Settings and environment management for the InsightEdge analysis engine.

This module provides centralized configuration management using pydantic-settings,
which automatically loads settings from environment variables and .env files.

Key Features:
- Environment variable validation and type coercion
- Sensible defaults matching the dashboard's analysis heuristics
- Singleton pattern via @lru_cache for efficient access

Analysis Defaults:
- empty_value_threshold: 0.5 (rows with >= 50% empty cells are dropped)
- anomaly_std_threshold: 2.0 (values beyond 2 standard deviations are outliers)
- min_forecast_values: 10 (minimum observations for a linear forecast)
- correlation_threshold: 0.7 (minimum |r| for a correlation insight)
- large_dataset_rows: 1000 (row count that triggers "large dataset" narratives)

Usage:
    from insightedge.core.config import get_settings

    settings = get_settings()
    threshold = settings.empty_value_threshold
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        empty_value_threshold: Share of empty cells at which a row is dropped.
        anomaly_std_threshold: Standard deviations from the mean that flag an outlier.
        min_anomaly_values: Minimum parsed values before a column is scanned for outliers.
        min_forecast_values: Minimum rows and parsed values needed for a forecast.
        min_correlation_rows: Minimum rows needed for correlation analysis.
        correlation_threshold: Minimum |r| for a correlation insight.
        trend_change_threshold: Relative half-over-half change that counts as a trend.
        large_dataset_rows: Cleaned row count above which large-dataset narratives fire.
        synthetic_fill_enabled: Fill months without dated rows with synthetic values.
        synthetic_fill_seed: Seed for the synthetic fill random source (None = unseeded).
        align_to_declared_headers: Align rows to the dataset headers before cleaning.
        include_advanced_insights: Attach anomalies, forecasts and correlations to analyses.
        max_upload_rows: Largest dataset accepted by ingestion.
        cors_origins: Origins allowed to call the API from a browser.
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=False,
    )

    # =========================================================================
    # Row cleaning
    # =========================================================================

    # A row is dropped when empty_cells / total_cells >= this share
    empty_value_threshold: float = Field(default=0.5, gt=0.0, le=1.0)

    # Align every row to the declared dataset headers before cleaning, so a
    # column missing from the first row is still visible to classification.
    # When False, column names come from the first row's keys.
    align_to_declared_headers: bool = True

    # =========================================================================
    # Statistical engine
    # =========================================================================

    anomaly_std_threshold: float = 2.0
    min_anomaly_values: int = 3
    min_forecast_values: int = 10
    min_correlation_rows: int = 10
    correlation_threshold: float = 0.7
    trend_change_threshold: float = 0.05

    # =========================================================================
    # Narrative generation
    # =========================================================================

    large_dataset_rows: int = 1000
    include_advanced_insights: bool = True

    # =========================================================================
    # Chart synthesis
    # =========================================================================

    # Months without dated rows are filled with synthetic values and labelled
    # provenance="synthetic"; when disabled they are zero with provenance="empty"
    synthetic_fill_enabled: bool = True
    synthetic_fill_seed: Optional[int] = None

    # =========================================================================
    # Ingestion and API
    # =========================================================================

    max_upload_rows: int = 500_000
    cors_origins: List[str] = [
        'http://localhost:3000',
        'http://127.0.0.1:3000',
    ]


@lru_cache()
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns:
        Settings: The application settings instance with all configuration values.

    Raises:
        pydantic.ValidationError: If environment variables have invalid values.

    Note:
        To refresh settings in tests, clear the cache:
        >>> get_settings.cache_clear()
    """
    return Settings()
