"""
FastAPI router module for full dataset analysis.

Endpoints:
- POST /analysis: analyze a TabularDataset sent as JSON
- POST /analysis/upload: analyze an uploaded CSV or Excel file

Both return the AnalyzedMetrics bundle consumed by the dashboard and the
export pipeline. Failures surface only the generic, user-presentable
message; details go to the log.
"""

import logging

from fastapi import APIRouter, File, HTTPException, UploadFile

from insightedge.core.exceptions import AnalysisError, IngestionError
from insightedge.models import AnalyzedMetrics, TabularDataset
from insightedge.services.analysis import analyze_business_data
from insightedge.services.ingestion import ingest_file

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analysis", tags=["analysis"])


@router.post("", response_model=AnalyzedMetrics)
async def analyze_dataset(dataset: TabularDataset) -> AnalyzedMetrics:
    """
    Run the full analysis pipeline over a parsed dataset.

    Args:
        dataset: Headers plus raw rows (currency strings, blanks allowed)

    Returns:
        AnalyzedMetrics with KPIs, chart data, narratives, data summary and
        statistical insights

    Raises:
        HTTPException 500: If the analysis fails
    """
    try:
        return await analyze_business_data(dataset)
    except AnalysisError as e:
        raise HTTPException(status_code=500, detail=e.message)


@router.post("/upload", response_model=AnalyzedMetrics)
async def analyze_upload(file: UploadFile = File(...)) -> AnalyzedMetrics:
    """
    Parse an uploaded CSV/Excel file and analyze it.

    Raises:
        HTTPException 400: If the file is unsupported, empty, too large or
            unreadable
        HTTPException 500: If the analysis fails
    """
    content = await file.read()
    try:
        dataset = ingest_file(file.filename or '', content)
    except IngestionError as e:
        logger.warning(f"Rejected upload '{file.filename}': {e.message}")
        raise HTTPException(status_code=400, detail=e.message)

    logger.info(f"Analyzing upload '{file.filename}' with {len(dataset.rows)} rows")
    try:
        return await analyze_business_data(dataset)
    except AnalysisError as e:
        raise HTTPException(status_code=500, detail=e.message)
