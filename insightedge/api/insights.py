"""
FastAPI router module for statistical insight endpoints.

This module exposes the statistical engine and the natural-language query
handler over bare rows:
- Anomaly detection (values beyond 2σ of their column mean)
- Linear forecasts (>= 10 rows and values per field)
- Correlation insights (|r| > 0.7)
- Actionable recommendations
- Natural-language questions

Rows are run through the row cleaner before analysis, so currency strings
and blank cells are handled exactly as in a full analysis.
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException

from insightedge.core.exceptions import AnalysisError, QueryError
from insightedge.models import (
    AIInsight,
    AnomalyDetection,
    ForecastData,
    NaturalLanguageQueryResult,
    QueryRequest,
    RecommendationRequest,
    RowsRequest,
)
from insightedge.services.normalization import clean_rows
from insightedge.services.query import process_natural_language_query
from insightedge.services.statistics import (
    analyze_correlations,
    detect_anomalies,
    generate_forecasts,
    generate_recommendations,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/insights", tags=["insights"])


def _require_rows(request: RowsRequest) -> None:
    if not request.rows:
        raise HTTPException(status_code=400, detail="No rows provided")


@router.post("/anomalies", response_model=List[AnomalyDetection])
async def detect_anomalies_endpoint(request: RowsRequest) -> List[AnomalyDetection]:
    """
    Detect outliers in every numeric column.

    Raises:
        HTTPException 400: If no rows are provided
        HTTPException 500: If detection fails
    """
    _require_rows(request)
    try:
        return detect_anomalies(clean_rows(request.rows))
    except Exception as e:
        logger.error(f"Error detecting anomalies: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=AnalysisError.default_message)


@router.post("/forecasts", response_model=List[ForecastData])
async def generate_forecasts_endpoint(request: RowsRequest) -> List[ForecastData]:
    """
    One-step-ahead linear forecasts for numeric columns.

    Raises:
        HTTPException 400: If no rows are provided
        HTTPException 500: If forecasting fails
    """
    _require_rows(request)
    try:
        return generate_forecasts(clean_rows(request.rows))
    except Exception as e:
        logger.error(f"Error generating forecasts: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=AnalysisError.default_message)


@router.post("/correlations", response_model=List[AIInsight])
async def analyze_correlations_endpoint(request: RowsRequest) -> List[AIInsight]:
    """
    Correlation insights for strongly related numeric column pairs.

    Raises:
        HTTPException 400: If no rows are provided
        HTTPException 500: If analysis fails
    """
    _require_rows(request)
    try:
        return analyze_correlations(clean_rows(request.rows))
    except Exception as e:
        logger.error(f"Error analyzing correlations: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=AnalysisError.default_message)


@router.post("/recommendations", response_model=List[AIInsight])
async def generate_recommendations_endpoint(request: RecommendationRequest) -> List[AIInsight]:
    """
    Recommendations from revenue/cost trends and high-severity anomalies.

    Raises:
        HTTPException 400: If no rows are provided
        HTTPException 500: If generation fails
    """
    if not request.rows:
        raise HTTPException(status_code=400, detail="No rows provided")
    try:
        return generate_recommendations(
            clean_rows(request.rows), request.kpis, request.anomalies
        )
    except Exception as e:
        logger.error(f"Error generating recommendations: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=AnalysisError.default_message)


@router.post("/query", response_model=NaturalLanguageQueryResult)
async def process_query_endpoint(request: QueryRequest) -> NaturalLanguageQueryResult:
    """
    Answer a natural-language question about the given rows.

    Raises:
        HTTPException 500: If the query cannot be processed
    """
    try:
        return await process_natural_language_query(request.query, clean_rows(request.rows))
    except QueryError as e:
        raise HTTPException(status_code=500, detail=e.message)
