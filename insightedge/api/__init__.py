"""
InsightEdge API package initialization.

This package contains FastAPI router modules:
- analysis: full dataset analysis (JSON body or file upload)
- insights: statistical insights and natural-language queries
- charts: interactive chart builder previews
"""

from fastapi import APIRouter

from insightedge.api.analysis import router as analysis_router
from insightedge.api.insights import router as insights_router
from insightedge.api.charts import router as charts_router

# Create main API router
api_router = APIRouter()

# Each router carries its own prefix
api_router.include_router(analysis_router)
api_router.include_router(insights_router)
api_router.include_router(charts_router)

__all__ = [
    "api_router",
    "analysis_router",
    "insights_router",
    "charts_router",
]
