"""
FastAPI router module for the interactive chart builder.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, HTTPException

from insightedge.core.exceptions import AnalysisError
from insightedge.models import ChartPreviewRequest
from insightedge.services.chart_builder import analyze_chart_preview, build_chart_preview

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/charts", tags=["charts"])


@router.post("/preview")
async def preview_chart(request: ChartPreviewRequest) -> Dict[str, Any]:
    """
    Build preview points for a chart definition and annotate them.

    Returns:
        Dict with the chart config, preview points and a ChartAnalysis

    Raises:
        HTTPException 400: If an axis names an unknown column
        HTTPException 500: If the preview cannot be built
    """
    try:
        preview = build_chart_preview(request.dataset, request.config, request.limit)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        analysis = analyze_chart_preview(preview)
    except Exception as e:
        logger.error(f"Error analyzing chart preview: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=AnalysisError.default_message)

    return {
        "config": request.config,
        "data": preview,
        "analysis": analysis,
    }
