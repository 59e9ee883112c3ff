"""
Core infrastructure package for the InsightEdge analysis engine.

Provides:
- Configuration management via pydantic-settings
- The error hierarchy raised at the engine boundary

Usage Examples:
    from insightedge.core import get_settings, AnalysisError

    settings = get_settings()
    print(settings.empty_value_threshold)
"""

from insightedge.core.config import Settings, get_settings
from insightedge.core.exceptions import (
    InsightEdgeError,
    AnalysisError,
    QueryError,
    IngestionError,
)

__all__ = [
    # Configuration management (from config.py)
    'Settings',
    'get_settings',
    # Error hierarchy (from exceptions.py)
    'InsightEdgeError',
    'AnalysisError',
    'QueryError',
    'IngestionError',
]
